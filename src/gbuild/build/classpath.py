"""Classpath construction.

The classpath for a compile is the project's resolved dependencies, in the
order the resolver returns them, followed by any additional paths (for
example the main classes directory when compiling tests).
"""

import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from ..config.settings import DependencyRule
from ..packages.resolver import DependencyResolver, LocalDependencyResolver
from ..project import Project


class Classpath:
    """Ordered list of classpath entries."""

    FLAG = "-classpath"

    def __init__(self, paths: Optional[Iterable[Union[str, Path]]] = None):
        self.paths: List[Path] = [Path(path) for path in (paths or [])]

    def add(self, *paths: Union[str, Path]) -> "Classpath":
        self.paths.extend(Path(path) for path in paths)
        return self

    def to_string(self) -> str:
        """Entries joined by the platform path separator."""
        return os.pathsep.join(str(path) for path in self.paths)

    def to_arguments(self, flag: str = FLAG) -> List[str]:
        """
        Command line arguments for this classpath.

        An empty classpath yields no arguments at all rather than a flag
        with an empty value.
        """
        if not self.paths:
            return []
        return [flag, self.to_string()]

    def __bool__(self) -> bool:
        return bool(self.paths)

    def __len__(self) -> int:
        return len(self.paths)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Classpath({self.to_string()!r})"


class ClasspathAssembler:
    """Resolves a project's dependencies into a Classpath."""

    def __init__(self, project: Project, resolver: Optional[DependencyResolver] = None):
        """
        Initialize classpath assembler.

        Args:
            project: Project whose dependencies are resolved
            resolver: Dependency service (defaults to LocalDependencyResolver)
        """
        self.project = project
        self.resolver = resolver or LocalDependencyResolver()

    def build(self, rules: Sequence[DependencyRule], *additional_paths: Union[str, Path]) -> Classpath:
        """
        Build the classpath for a set of dependency rules.

        Args:
            rules: Which dependency groups to resolve and how
            *additional_paths: Entries appended after the dependencies, in order

        Returns:
            Classpath of resolved artifacts followed by the additional paths
        """
        classpath = Classpath(self._resolve(rules))
        classpath.add(*additional_paths)
        return classpath

    def _resolve(self, rules: Sequence[DependencyRule]) -> List[Path]:
        project = self.project
        if not project.dependencies:
            return []

        # The reduced graph is shared by every compile of this project run
        if project.artifact_graph is None:
            dependency_graph = self.resolver.build_graph(project.to_artifact(), project.dependencies, project.workflow)
            project.artifact_graph = self.resolver.reduce(dependency_graph)

        resolved = self.resolver.resolve(project.artifact_graph, project.workflow, rules)
        if resolved.size() == 0:
            return []

        logging.debug(f"Resolved [{resolved.size()}] dependencies for groups {[rule.group for rule in rules]}")
        return list(resolved.to_classpath_paths())
