"""Groovy compilation.

GroovyCompiler turns a CompileRequest into exactly one groovyc invocation:

    groovyc [compiler arguments] [--indy] [-classpath <cp>]
            --sourcepath <source root> -d <output root> <file> <file> ...

Only the files in the request are passed, never the whole source directory.
A request with no files is skipped without starting a process.
"""

import logging
import shlex
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Mapping, Optional, Tuple

from .classpath import Classpath
from .compilation_executor import ErrorKind, ProcessRunner


class CompileState(Enum):
    """Lifecycle of a single compile."""

    NOT_STARTED = "not_started"
    FILES_ENUMERATED = "files_enumerated"
    SKIPPED = "skipped"
    INVOKED = "invoked"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class CompileError(Exception):
    """Raised when the compiler exits with a non-zero status."""

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.TOOL_FAILURE, exit_code: Optional[int] = None):
        super().__init__(message)
        self.kind = kind
        self.exit_code = exit_code


@dataclass(frozen=True)
class CompileRequest:
    """Everything needed for one compiler invocation.

    Paths in ``files`` are relative to ``working_dir`` (or absolute).
    """

    source_root: Path
    output_root: Path
    files: Tuple[Path, ...]
    executable: Path
    classpath: Classpath = field(default_factory=Classpath)
    extra_arguments: Tuple[str, ...] = ()
    environment: Mapping[str, str] = field(default_factory=dict)
    working_dir: Path = Path(".")
    indy: bool = False


class GroovyCompiler:
    """Runs groovyc for a CompileRequest and tracks the compile state."""

    def __init__(self, runner: Optional[ProcessRunner] = None):
        self.runner = runner or ProcessRunner()
        self.state = CompileState.NOT_STARTED

    @staticmethod
    def split_arguments(arguments: str) -> Tuple[str, ...]:
        """Split a user supplied argument string using shell rules."""
        return tuple(shlex.split(arguments)) if arguments else ()

    def build_command(self, request: CompileRequest) -> List[str]:
        """Build the groovyc command line for a request."""
        cmd = [str(request.executable)]
        cmd.extend(request.extra_arguments)
        if request.indy:
            cmd.append("--indy")
        cmd.extend(request.classpath.to_arguments())
        cmd.extend(["--sourcepath", str(request.source_root)])
        cmd.extend(["-d", str(request.output_root)])
        cmd.extend(str(file) for file in request.files)
        return cmd

    def compile(self, request: CompileRequest) -> CompileState:
        """
        Compile the files of a request.

        Returns:
            CompileState.SKIPPED when there is nothing to compile, otherwise
            CompileState.SUCCEEDED

        Raises:
            CompileError: If groovyc exits with a non-zero status
        """
        self.state = CompileState.FILES_ENUMERATED
        if not request.files:
            logging.info("Skipping compile. No files need compiling")
            self.state = CompileState.SKIPPED
            return self.state

        logging.info(
            f"Compiling [{len(request.files)}] Groovy classes from [{request.source_root}] to [{request.output_root}]"
        )

        output_dir = request.working_dir / request.output_root
        output_dir.mkdir(parents=True, exist_ok=True)

        self.state = CompileState.INVOKED
        result = self.runner.run(self.build_command(request), cwd=request.working_dir, env_overrides=request.environment)

        if result.exit_code != 0:
            self.state = CompileState.FAILED
            raise CompileError(
                f"Compilation failed with exit code [{result.exit_code}]",
                ErrorKind.TOOL_FAILURE,
                result.exit_code,
            )

        self.state = CompileState.SUCCEEDED
        return self.state
