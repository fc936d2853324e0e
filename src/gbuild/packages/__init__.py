"""Toolchain and dependency management for gbuild.

This module locates the GDK/JDK toolchain and resolves declared
dependencies to local files, downloading them when needed.
"""

from .downloader import ArtifactDownloader, ArtifactNotFoundError, ChecksumError, DownloadError
from .resolver import (
    ArtifactGraph,
    DependencyGraph,
    DependencyResolutionError,
    DependencyResolver,
    LocalDependencyResolver,
    ResolvedArtifact,
    ResolvedArtifactGraph,
)
from .toolchain import GroovyToolchain
from .workflow import CacheProcess, URLProcess, Workflow, artifact_path

__all__ = [
    "ArtifactDownloader",
    "ArtifactNotFoundError",
    "ChecksumError",
    "DownloadError",
    "ArtifactGraph",
    "DependencyGraph",
    "DependencyResolutionError",
    "DependencyResolver",
    "LocalDependencyResolver",
    "ResolvedArtifact",
    "ResolvedArtifactGraph",
    "GroovyToolchain",
    "CacheProcess",
    "URLProcess",
    "Workflow",
    "artifact_path",
]
