"""Archive Creator.

This module creates jar archives from one or more directories.

Design:
    - JarBuilder writes the jar in-process with zipfile
    - ToolchainArchiver runs the JDK ``jar`` tool instead
    - Directories that do not exist are skipped, never an error
    - Both return the number of files staged for logging
"""

import logging
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from .compilation_executor import ErrorKind, ProcessRunner


MANIFEST_NAME = "META-INF/MANIFEST.MF"
MANIFEST = "Manifest-Version: 1.0\r\nCreated-By: gbuild\r\n\r\n"


class ArchiveError(Exception):
    """Raised when archive creation operations fail."""

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.TOOL_FAILURE, exit_code: Optional[int] = None):
        super().__init__(message)
        self.kind = kind
        self.exit_code = exit_code


@dataclass(frozen=True)
class ArchiveSpec:
    """Target archive and the directories staged into it, in order."""

    archive_path: Path
    directories: Tuple[Path, ...] = field(default_factory=tuple)


def _existing_directories(base_dir: Path, directories) -> List[Path]:
    existing = []
    for directory in directories:
        path = base_dir / directory
        if path.is_dir():
            existing.append(path)
        else:
            logging.debug(f"Skipping missing directory [{path}]")
    return existing


class JarBuilder:
    """Builds a jar file in-process.

    Entry names are paths relative to each staged directory. When two
    directories contain the same entry the first one wins.
    """

    def __init__(self, base_dir: Path = Path(".")):
        """Initialize jar builder.

        Args:
            base_dir: Directory relative paths are resolved against
        """
        self.base_dir = Path(base_dir)

    def build(self, spec: ArchiveSpec) -> int:
        """Create the archive described by ``spec``.

        Returns:
            Number of files staged (the manifest is not counted)
        """
        archive_path = self.base_dir / spec.archive_path
        archive_path.parent.mkdir(parents=True, exist_ok=True)

        count = 0
        names = {MANIFEST_NAME}
        with zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED) as jar:
            jar.writestr(MANIFEST_NAME, MANIFEST)

            for directory in _existing_directories(self.base_dir, spec.directories):
                for file in sorted(directory.rglob("*")):
                    if not file.is_file():
                        continue

                    name = file.relative_to(directory).as_posix()
                    if name in names:
                        logging.debug(f"Skipping duplicate jar entry [{name}] from [{directory}]")
                        continue

                    names.add(name)
                    jar.write(file, name)
                    count += 1

        return count


class ToolchainArchiver:
    """Builds a jar by running the JDK ``jar`` tool.

    Each existing directory becomes a ``-C <dir> .`` pair, so entries keep
    their paths relative to the directory.
    """

    def __init__(self, jar_path: Path, base_dir: Path = Path("."), runner: Optional[ProcessRunner] = None, environment=None):
        """Initialize archiver.

        Args:
            jar_path: Path to the jar executable
            base_dir: Working directory for the jar process
            runner: Process runner (created if not given)
            environment: Environment overrides (e.g. JAVA_HOME)
        """
        self.jar_path = Path(jar_path)
        self.base_dir = Path(base_dir)
        self.runner = runner or ProcessRunner()
        self.environment = dict(environment or {})

    def build_command(self, archive_path: Path, directories: List[Path]) -> List[str]:
        cmd = [str(self.jar_path), "cf", str(archive_path)]
        for directory in directories:
            cmd.extend(["-C", str(directory), "."])
        return cmd

    def build(self, spec: ArchiveSpec) -> int:
        """Create the archive described by ``spec``.

        Returns:
            Number of files staged

        Raises:
            ArchiveError: If the jar tool exits with a non-zero status
        """
        archive_path = self.base_dir / spec.archive_path
        archive_path.parent.mkdir(parents=True, exist_ok=True)

        directories = _existing_directories(self.base_dir, spec.directories)
        if not directories:
            # jar refuses to create an archive without inputs
            return JarBuilder(self.base_dir).build(ArchiveSpec(spec.archive_path))

        count = sum(1 for directory in directories for file in directory.rglob("*") if file.is_file())

        result = self.runner.run(
            self.build_command(archive_path.absolute(), [d.absolute() for d in directories]),
            cwd=self.base_dir,
            env_overrides=self.environment,
        )
        if result.exit_code != 0:
            raise ArchiveError(
                f"Archive creation failed for {archive_path.name} with exit code [{result.exit_code}]",
                ErrorKind.TOOL_FAILURE,
                result.exit_code,
            )

        return count
