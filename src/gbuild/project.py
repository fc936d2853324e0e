"""
Project model for gbuild.

A Project describes what is being built: its coordinates (group, name,
version), the dependency groups it declares, and the workflow used to fetch
those dependencies. Artifact file names used by the jar task are derived from
the project's own Artifact.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional


_VERSION_PATTERN = re.compile(
    r"^(?P<major>\d+)(?:\.(?P<minor>\d+))?(?:\.(?P<patch>\d+))?(?:-(?P<pre>[0-9A-Za-z.\-]+))?$"
)


class Version:
    """
    Semantic version with optional minor/patch components.

    Missing components default to zero, so ``Version("1.0")`` renders as
    ``1.0.0``. A pre-release sorts before the matching release.
    """

    def __init__(self, text: str):
        match = _VERSION_PATTERN.match(text.strip())
        if not match:
            raise ValueError(f"Invalid version: {text!r}")

        self.major = int(match.group("major"))
        self.minor = int(match.group("minor") or 0)
        self.patch = int(match.group("patch") or 0)
        self.pre_release: Optional[str] = match.group("pre")

    def _key(self):
        # Releases sort after any pre-release of the same numbers
        return (self.major, self.minor, self.patch, self.pre_release is None, self.pre_release or "")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: "Version") -> bool:
        return self._key() < other._key()

    def __le__(self, other: "Version") -> bool:
        return self._key() <= other._key()

    def __gt__(self, other: "Version") -> bool:
        return self._key() > other._key()

    def __ge__(self, other: "Version") -> bool:
        return self._key() >= other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.pre_release:
            text += f"-{self.pre_release}"
        return text

    def __repr__(self) -> str:
        return f"Version('{self}')"


@dataclass(frozen=True)
class Artifact:
    """An artifact identified by group/project/name/version/type.

    Accepted specifications:
        group:project:version
        group:project:version:type
        group:project:name:version:type
    """

    group: str
    project: str
    name: str
    version: Version
    type: str = "jar"

    @classmethod
    def parse(cls, spec: str) -> "Artifact":
        """
        Parse an artifact specification string.

        Args:
            spec: Specification such as ``org.testng:testng:6.8.7:jar``

        Returns:
            Parsed Artifact

        Raises:
            ValueError: If the specification has the wrong shape
        """
        parts = [part.strip() for part in spec.strip().split(":")]
        if any(not part for part in parts):
            raise ValueError(f"Invalid artifact specification: {spec!r}")

        if len(parts) == 3:
            group, project, version = parts
            return cls(group, project, project, Version(version))
        if len(parts) == 4:
            group, project, version, type_ = parts
            return cls(group, project, project, Version(version), type_)
        if len(parts) == 5:
            group, project, name, version, type_ = parts
            return cls(group, project, name, Version(version), type_)

        raise ValueError(
            f"Invalid artifact specification: {spec!r}. "
            + "Expected group:project:version[:type] or group:project:name:version:type"
        )

    @property
    def id(self) -> str:
        return f"{self.group}:{self.project}"

    @property
    def artifact_file(self) -> str:
        return f"{self.name}-{self.version}.{self.type}"

    @property
    def artifact_source_file(self) -> str:
        return f"{self.name}-{self.version}-src.{self.type}"

    @property
    def artifact_test_file(self) -> str:
        return f"{self.name}-test-{self.version}.{self.type}"

    @property
    def artifact_test_source_file(self) -> str:
        return f"{self.name}-test-{self.version}-src.{self.type}"

    def __str__(self) -> str:
        return f"{self.group}:{self.project}:{self.name}:{self.version}:{self.type}"


@dataclass
class DependencyGroup:
    """Named group of dependencies (e.g. ``compile``, ``test-compile``)."""

    name: str
    export: bool = False
    artifacts: List[Artifact] = field(default_factory=list)


class Dependencies:
    """Ordered collection of dependency groups keyed by name."""

    def __init__(self, *groups: DependencyGroup):
        self.groups: Dict[str, DependencyGroup] = {}
        for group in groups:
            self.add(group)

    def add(self, group: DependencyGroup) -> None:
        """Add a group, merging artifacts into an existing group of the same name."""
        existing = self.groups.get(group.name)
        if existing is None:
            self.groups[group.name] = group
        else:
            existing.artifacts.extend(group.artifacts)

    def __iter__(self) -> Iterator[DependencyGroup]:
        return iter(self.groups.values())

    def __len__(self) -> int:
        return sum(len(group.artifacts) for group in self.groups.values())

    def __bool__(self) -> bool:
        return len(self) > 0


@dataclass
class Project:
    """
    A buildable project.

    Attributes:
        directory: Project root; all layout paths are relative to it
        group: Artifact group (e.g. ``org.example``)
        name: Project name, also used for jar file names
        version: Project version
        dependencies: Declared dependency groups (None when nothing is declared)
        workflow: Fetch workflow handed to the dependency resolver
        artifact_graph: Reduced dependency graph, built at most once per run
    """

    directory: Path
    group: str
    name: str
    version: Version
    dependencies: Optional[Dependencies] = None
    workflow: Any = None
    artifact_graph: Any = None

    def __post_init__(self):
        self.directory = Path(self.directory)
        if isinstance(self.version, str):
            self.version = Version(self.version)

    def to_artifact(self) -> Artifact:
        """Return the Artifact this project produces."""
        return Artifact(self.group, self.name, self.name, self.version)
