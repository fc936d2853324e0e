"""
Unit tests for GroovyCompiler.

Tests command construction, the skip path and exit status handling.
"""

import os
from pathlib import Path
from unittest.mock import Mock

import pytest

from gbuild.build.classpath import Classpath
from gbuild.build.compilation_executor import ErrorKind, ProcessResult, ProcessRunner
from gbuild.build.compiler import CompileError, CompileRequest, CompileState, GroovyCompiler


@pytest.fixture
def mock_runner():
    runner = Mock(spec=ProcessRunner)
    runner.run.return_value = ProcessResult(0, "", "")
    return runner


@pytest.fixture
def request_factory(tmp_path):
    def factory(**overrides):
        values = dict(
            source_root=Path("src/main/groovy"),
            output_root=Path("build/classes/main"),
            files=(Path("src/main/groovy/A.groovy"), Path("src/main/groovy/pkg/B.groovy")),
            executable=Path("/opt/groovy/bin/groovyc"),
            classpath=Classpath(["/cache/lib.jar", "build/classes/main"]),
            extra_arguments=("-j", "-Jtarget=1.8"),
            environment={"JAVA_HOME": "/opt/jdk"},
            working_dir=tmp_path,
        )
        values.update(overrides)
        return CompileRequest(**values)

    return factory


class TestGroovyCompiler:
    """Test suite for GroovyCompiler."""

    def test_build_command(self, request_factory):
        """Test the command line layout."""
        cmd = GroovyCompiler().build_command(request_factory())

        assert cmd == [
            "/opt/groovy/bin/groovyc",
            "-j",
            "-Jtarget=1.8",
            "-classpath",
            f"/cache/lib.jar{os.pathsep}build/classes/main",
            "--sourcepath",
            "src/main/groovy",
            "-d",
            "build/classes/main",
            str(Path("src/main/groovy/A.groovy")),
            str(Path("src/main/groovy/pkg/B.groovy")),
        ]

    def test_build_command_without_classpath(self, request_factory):
        """Test an empty classpath omits the flag entirely."""
        cmd = GroovyCompiler().build_command(request_factory(classpath=Classpath(), extra_arguments=()))

        assert "-classpath" not in cmd
        assert cmd[1] == "--sourcepath"

    def test_build_command_indy(self, request_factory):
        """Test --indy is added when requested."""
        cmd = GroovyCompiler().build_command(request_factory(indy=True))

        assert cmd.index("--indy") < cmd.index("-classpath")

    def test_classpath_before_sourcepath_before_output(self, request_factory):
        cmd = GroovyCompiler().build_command(request_factory())

        assert cmd.index("-classpath") < cmd.index("--sourcepath") < cmd.index("-d")

    def test_each_file_exactly_once(self, request_factory):
        """Test exactly the requested files are passed, once each."""
        files = tuple(Path(f"src/main/groovy/C{i}.groovy") for i in range(5))

        cmd = GroovyCompiler().build_command(request_factory(files=files))

        passed = [arg for arg in cmd if arg.endswith(".groovy")]
        assert passed == [str(file) for file in files]

    def test_empty_request_skips(self, mock_runner, request_factory, tmp_path):
        """Test nothing is launched and no directory created for zero files."""
        compiler = GroovyCompiler(mock_runner)

        state = compiler.compile(request_factory(files=()))

        assert state == CompileState.SKIPPED
        assert compiler.state == CompileState.SKIPPED
        mock_runner.run.assert_not_called()
        assert not (tmp_path / "build").exists()

    def test_compile_success(self, mock_runner, request_factory, tmp_path):
        """Test a successful compile creates the output directory and runs groovyc."""
        compiler = GroovyCompiler(mock_runner)

        state = compiler.compile(request_factory())

        assert state == CompileState.SUCCEEDED
        assert (tmp_path / "build" / "classes" / "main").is_dir()
        mock_runner.run.assert_called_once()
        kwargs = mock_runner.run.call_args.kwargs
        assert kwargs["cwd"] == tmp_path
        assert kwargs["env_overrides"] == {"JAVA_HOME": "/opt/jdk"}

    def test_compile_failure(self, mock_runner, request_factory):
        """Test a non-zero exit raises CompileError with the exit code."""
        mock_runner.run.return_value = ProcessResult(2, "", "error")
        compiler = GroovyCompiler(mock_runner)

        with pytest.raises(CompileError, match=r"exit code \[2\]") as exc_info:
            compiler.compile(request_factory())

        assert exc_info.value.exit_code == 2
        assert exc_info.value.kind == ErrorKind.TOOL_FAILURE
        assert compiler.state == CompileState.FAILED

    def test_existing_output_directory(self, mock_runner, request_factory, tmp_path):
        """Test output directory creation is idempotent."""
        (tmp_path / "build" / "classes" / "main").mkdir(parents=True)

        assert GroovyCompiler(mock_runner).compile(request_factory()) == CompileState.SUCCEEDED

    def test_split_arguments(self):
        assert GroovyCompiler.split_arguments("") == ()
        assert GroovyCompiler.split_arguments("-j '-Jsource=1.8'") == ("-j", "-Jsource=1.8")

    def test_initial_state(self):
        assert GroovyCompiler().state == CompileState.NOT_STARTED
