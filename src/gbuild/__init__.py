"""
gbuild - incremental Groovy build tool.

Compiles only the Groovy sources whose class files are missing or out of
date, builds the classpath from declared dependencies, and packages classes
and sources into jars.
"""

__version__ = "0.1.0"

from .build.orchestrator import BuildOrchestrator
from .config.properties import ConfigurationError
from .project import Artifact, Dependencies, DependencyGroup, Project, Version

__all__ = [
    "__version__",
    "BuildOrchestrator",
    "ConfigurationError",
    "Artifact",
    "Dependencies",
    "DependencyGroup",
    "Project",
    "Version",
]
