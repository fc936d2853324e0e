"""Toolchain process execution.

Runs groovyc, groovydoc and jar as child processes. The child's stdout and
stderr are each drained by a thread that forwards every line to the caller's
streams while the main thread blocks waiting for the exit code. Draining
while waiting keeps the child from blocking on a full pipe.

No timeout is applied. Interrupting the build (Ctrl-C) terminates the whole
child process tree.
"""

import logging
import os
import subprocess
import sys
import threading
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import IO, List, Mapping, Optional, Sequence, Union

import psutil


class ErrorKind(Enum):
    """Kinds of build step failures."""

    TOOL_FAILURE = "tool_failure"


class ProcessLaunchError(Exception):
    """Raised when a toolchain process cannot be started."""

    pass


@dataclass
class ProcessResult:
    """Result of one toolchain process invocation."""

    exit_code: int
    stdout: str
    stderr: str

    @property
    def success(self) -> bool:
        return self.exit_code == 0


class ProcessRunner:
    """Runs a command, streaming its output while waiting for it to exit."""

    def __init__(self, stdout: Optional[IO[str]] = None, stderr: Optional[IO[str]] = None):
        """Initialize process runner.

        Args:
            stdout: Sink for the child's stdout (default: sys.stdout at run time)
            stderr: Sink for the child's stderr (default: sys.stderr at run time)
        """
        self.stdout = stdout
        self.stderr = stderr

    def run(
        self,
        command: Sequence[Union[str, Path]],
        cwd: Optional[Path] = None,
        env_overrides: Optional[Mapping[str, str]] = None,
    ) -> ProcessResult:
        """Run a command to completion.

        Args:
            command: Executable followed by its arguments
            cwd: Working directory for the child
            env_overrides: Variables set on top of the current environment

        Returns:
            ProcessResult with the exit code and captured output

        Raises:
            ProcessLaunchError: If the process cannot be started
        """
        cmd = [str(part) for part in command]
        env = dict(os.environ)
        if env_overrides:
            env.update(env_overrides)

        logging.debug(f"Executing: {' '.join(cmd)}")

        try:
            process = subprocess.Popen(
                cmd,
                cwd=str(cwd) if cwd else None,
                env=env,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
                bufsize=1,
            )
        except OSError as e:
            raise ProcessLaunchError(f"Failed to start {cmd[0]}: {e}") from e

        stdout_lines: List[str] = []
        stderr_lines: List[str] = []
        drains = [
            threading.Thread(
                target=_drain,
                args=(process.stdout, self.stdout or sys.stdout, stdout_lines),
                daemon=True,
            ),
            threading.Thread(
                target=_drain,
                args=(process.stderr, self.stderr or sys.stderr, stderr_lines),
                daemon=True,
            ),
        ]
        for drain in drains:
            drain.start()

        try:
            exit_code = process.wait()
        except KeyboardInterrupt:
            terminate_process_tree(process.pid)
            raise
        finally:
            for drain in drains:
                drain.join()

        return ProcessResult(exit_code, "".join(stdout_lines), "".join(stderr_lines))


def _drain(pipe: Optional[IO[str]], sink: IO[str], lines: List[str]) -> None:
    if pipe is None:
        return
    with pipe:
        for line in pipe:
            lines.append(line)
            sink.write(line)
            sink.flush()


def terminate_process_tree(pid: int) -> int:
    """Terminate a process and all of its children.

    Children are terminated first, stragglers are killed after 3 seconds.

    Returns:
        Number of processes signalled
    """
    try:
        root = psutil.Process(pid)
        processes = root.children(recursive=True) + [root]
    except psutil.NoSuchProcess:
        return 0

    signalled = []
    for proc in processes:
        try:
            proc.terminate()
            signalled.append(proc)
        except psutil.NoSuchProcess:
            pass  # Already gone

    _gone, alive = psutil.wait_procs(signalled, timeout=3)
    for proc in alive:
        try:
            proc.kill()
            logging.warning(f"Force killed stubborn process {proc.pid}")
        except psutil.NoSuchProcess:
            pass

    return len(signalled)
