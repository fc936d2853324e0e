"""Dependency resolution.

The build only needs three things from a dependency service: build a graph
from the declared dependencies, reduce it to one version per artifact, and
resolve the reduced graph to files for a set of DependencyRules. The
interface is DependencyResolver; LocalDependencyResolver is the
implementation used by the command line tool.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence

from ..config.settings import DependencyRule
from ..project import Artifact, Dependencies
from .workflow import Workflow


class DependencyResolutionError(Exception):
    """Raised when a declared dependency cannot be resolved to a file."""

    pass


@dataclass(frozen=True)
class DependencyEdge:
    """Edge from the project to a declared artifact within a group."""

    origin: Artifact
    artifact: Artifact
    group: str


@dataclass
class DependencyGraph:
    """Every declared dependency, duplicates included."""

    root: Artifact
    edges: List[DependencyEdge] = field(default_factory=list)


@dataclass
class ArtifactNode:
    """One artifact of a reduced graph and the groups that reference it."""

    artifact: Artifact
    groups: List[str] = field(default_factory=list)


@dataclass
class ArtifactGraph:
    """Reduced graph holding exactly one version of each artifact id."""

    root: Artifact
    nodes: List[ArtifactNode] = field(default_factory=list)


@dataclass(frozen=True)
class ResolvedArtifact:
    artifact: Artifact
    file: Path
    source_file: Optional[Path] = None


class ResolvedArtifactGraph:
    """Artifacts resolved to local files, in classpath order."""

    def __init__(self, root: Artifact, artifacts: Optional[List[ResolvedArtifact]] = None):
        self.root = root
        self.artifacts: List[ResolvedArtifact] = list(artifacts or [])

    def size(self) -> int:
        return len(self.artifacts)

    def to_classpath_paths(self) -> List[Path]:
        return [resolved.file for resolved in self.artifacts]

    def __iter__(self) -> Iterator[ResolvedArtifact]:
        return iter(self.artifacts)

    def __len__(self) -> int:
        return len(self.artifacts)


class DependencyResolver(ABC):
    """Interface for dependency services."""

    @abstractmethod
    def build_graph(self, root: Artifact, dependencies: Dependencies, workflow: Workflow) -> DependencyGraph:
        """Build the full dependency graph of a project."""
        pass

    @abstractmethod
    def reduce(self, graph: DependencyGraph) -> ArtifactGraph:
        """Reduce a dependency graph to a single version per artifact."""
        pass

    @abstractmethod
    def resolve(
        self,
        artifact_graph: ArtifactGraph,
        workflow: Workflow,
        rules: Sequence[DependencyRule],
    ) -> ResolvedArtifactGraph:
        """Resolve the artifacts selected by ``rules`` to local files."""
        pass


class LocalDependencyResolver(DependencyResolver):
    """
    Resolves declared dependencies through a Workflow.

    Only direct dependencies are resolved. Transitive dependencies need POM
    metadata, which this resolver does not read; rules that ask for them
    fall back to the direct dependencies of the group.
    """

    def build_graph(self, root: Artifact, dependencies: Dependencies, workflow: Workflow) -> DependencyGraph:
        graph = DependencyGraph(root)
        for group in dependencies:
            for artifact in group.artifacts:
                graph.edges.append(DependencyEdge(root, artifact, group.name))

        logging.debug(f"Built dependency graph for {root} with {len(graph.edges)} edges")
        return graph

    def reduce(self, graph: DependencyGraph) -> ArtifactGraph:
        nodes: Dict[str, ArtifactNode] = {}
        for edge in graph.edges:
            node = nodes.get(edge.artifact.id)
            if node is None:
                nodes[edge.artifact.id] = ArtifactNode(edge.artifact, [edge.group])
                continue

            if edge.artifact.version > node.artifact.version:
                logging.debug(f"Upgrading {node.artifact} to {edge.artifact}")
                node.artifact = edge.artifact
            if edge.group not in node.groups:
                node.groups.append(edge.group)

        return ArtifactGraph(graph.root, list(nodes.values()))

    def resolve(
        self,
        artifact_graph: ArtifactGraph,
        workflow: Workflow,
        rules: Sequence[DependencyRule],
    ) -> ResolvedArtifactGraph:
        resolved = ResolvedArtifactGraph(artifact_graph.root)
        seen = set()

        for rule in rules:
            if rule.transitive:
                logging.warning(f"Transitive resolution is not supported; resolving direct [{rule.group}] dependencies only")

            for node in artifact_graph.nodes:
                if rule.group not in node.groups or node.artifact.id in seen:
                    continue

                seen.add(node.artifact.id)
                resolved.artifacts.append(self._resolve_artifact(node.artifact, workflow, rule))

        return resolved

    def _resolve_artifact(self, artifact: Artifact, workflow: Workflow, rule: DependencyRule) -> ResolvedArtifact:
        if workflow is None:
            raise DependencyResolutionError(
                f"Cannot resolve [{artifact}]: the project has no workflow configured"
            )

        file = workflow.fetch_artifact(artifact)
        if file is None:
            raise DependencyResolutionError(
                f"Unable to locate dependency [{artifact}] in group [{rule.group}]"
            )

        source_file = None
        if rule.fetch_source:
            source_file = workflow.fetch_artifact(artifact, source=True)
            if source_file is None:
                logging.warning(f"No source jar available for [{artifact}]")

        return ResolvedArtifact(artifact, file, source_file)
