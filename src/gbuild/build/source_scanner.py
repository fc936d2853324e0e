"""
Stale source discovery.

A source file is stale when the output file it compiles to is missing or
was last modified strictly before the source. For Groovy that means:

    src/main/groovy/org/example/MyClass.groovy
        -> build/classes/main/org/example/MyClass.class

Only the stale files are handed to the compiler, so compile time stays
proportional to the size of the change.
"""

import logging
from pathlib import Path
from typing import List, Union


PathLike = Union[str, Path]


class StaleFileScanner:
    """
    Finds source files whose compiled output is missing or out of date.

    Paths given to the scanner may be relative to the project directory.
    Results are relative to the project directory when they live inside it,
    otherwise absolute.
    """

    def __init__(self, project_dir: PathLike):
        """
        Initialize stale file scanner.

        Args:
            project_dir: Root project directory
        """
        self.project_dir = Path(project_dir)

    def scan(
        self,
        source_dir: PathLike,
        output_dir: PathLike,
        source_extension: str,
        output_extension: str,
    ) -> List[Path]:
        """
        Compute the stale source files under a source directory.

        Args:
            source_dir: Source root to walk recursively
            output_dir: Output root mirroring the source layout
            source_extension: Extension of source files (e.g. ``.groovy``)
            output_extension: Extension of output files (e.g. ``.class``)

        Returns:
            Every stale source file exactly once; empty if the source
            directory does not exist
        """
        source_root = self.project_dir / source_dir
        output_root = self.project_dir / output_dir

        if not source_root.is_dir():
            logging.warning(f"Source directory [{source_root}] does not exist. Nothing to compile")
            return []

        stale = []
        for source in sorted(source_root.rglob(f"*{source_extension}")):
            if not source.is_file():
                continue

            relative = source.relative_to(source_root).as_posix()
            output = output_root / (relative[: -len(source_extension)] + output_extension)
            if self.is_stale(source, output):
                stale.append(self._project_relative(source))

        logging.debug(f"Found [{len(stale)}] stale {source_extension} files in [{source_root}]")
        return stale

    @staticmethod
    def is_stale(source: Path, output: Path) -> bool:
        """
        Check if a source file needs to be rebuilt.

        Args:
            source: Source file path
            output: Expected output file path

        Returns:
            True if the output is missing or strictly older than the source
        """
        if not output.exists():
            return True

        return output.stat().st_mtime_ns < source.stat().st_mtime_ns

    def _project_relative(self, path: Path) -> Path:
        try:
            return path.relative_to(self.project_dir)
        except ValueError:
            return path


def compute_stale_files(
    source_dir: PathLike,
    output_dir: PathLike,
    source_extension: str,
    output_extension: str,
    project_dir: PathLike = ".",
) -> List[Path]:
    """Convenience wrapper around StaleFileScanner.scan()."""
    return StaleFileScanner(project_dir).scan(source_dir, output_dir, source_extension, output_extension)
