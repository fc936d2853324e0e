"""
Build system components for gbuild.

This module provides the build system implementation including:
- Stale source discovery
- Classpath construction
- Compilation (groovyc)
- Jar creation
- Build orchestration
"""

from .archive_creator import ArchiveError, ArchiveSpec, JarBuilder, ToolchainArchiver
from .classpath import Classpath, ClasspathAssembler
from .compilation_executor import ErrorKind, ProcessLaunchError, ProcessResult, ProcessRunner
from .compiler import CompileError, CompileRequest, CompileState, GroovyCompiler
from .orchestrator import BuildOrchestrator
from .source_scanner import StaleFileScanner, compute_stale_files

__all__ = [
    "ArchiveError",
    "ArchiveSpec",
    "JarBuilder",
    "ToolchainArchiver",
    "Classpath",
    "ClasspathAssembler",
    "ErrorKind",
    "ProcessLaunchError",
    "ProcessResult",
    "ProcessRunner",
    "CompileError",
    "CompileRequest",
    "CompileState",
    "GroovyCompiler",
    "BuildOrchestrator",
    "StaleFileScanner",
    "compute_stale_files",
]
