"""File operations used by the build tasks."""

import logging
import shutil
from pathlib import Path

from .source_scanner import StaleFileScanner


def prune(directory: Path) -> None:
    """
    Delete a directory tree.

    A symbolic link or a plain file at the path is unlinked, without touching
    a link target. A path that does not exist is left alone.
    """
    directory = Path(directory)
    if directory.is_symlink() or directory.is_file():
        directory.unlink()
    elif directory.exists():
        shutil.rmtree(directory)


def copy_resources(resource_dir: Path, build_dir: Path) -> int:
    """
    Copy a resource tree into a build directory, preserving relative paths.

    Files whose copy is already up to date are left alone. A missing
    resource directory is skipped.

    Returns:
        Number of files copied
    """
    resource_dir = Path(resource_dir)
    build_dir = Path(build_dir)
    if not resource_dir.is_dir():
        logging.debug(f"No resources to copy from [{resource_dir}]")
        return 0

    count = 0
    for file in sorted(resource_dir.rglob("*")):
        if not file.is_file():
            continue

        target = build_dir / file.relative_to(resource_dir)
        if not StaleFileScanner.is_stale(file, target):
            continue

        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(file, target)
        count += 1

    return count
