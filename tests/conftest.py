"""Shared fixtures: a fake GDK/JDK made of small executable Python scripts."""

import json
import stat
import sys
from pathlib import Path

import pytest


FAKE_GROOVYC = '''
import json, os, sys
from pathlib import Path

args = sys.argv[1:]
log = os.environ.get("FAKE_TOOL_LOG")
if log:
    with open(log, "a") as f:
        f.write(json.dumps({"tool": "groovyc", "args": args, "java_home": os.environ.get("JAVA_HOME")}) + "\\n")

exit_code = int(os.environ.get("FAKE_GROOVYC_EXIT", "0"))
if exit_code:
    sys.stderr.write("error: fake compilation failure\\n")
    sys.exit(exit_code)

output_dir = Path(args[args.index("-d") + 1])
source_root = Path(args[args.index("--sourcepath") + 1])
sources = [arg for arg in args if arg.endswith((".groovy", ".java"))]
for source in sources:
    relative = Path(source).relative_to(source_root)
    target = output_dir / relative.with_suffix(".class")
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(b"\\xca\\xfe\\xba\\xbe")
print(f"compiled {len(sources)} files")
'''

FAKE_GROOVYDOC = '''
import json, os, sys
from pathlib import Path

args = sys.argv[1:]
log = os.environ.get("FAKE_TOOL_LOG")
if log:
    with open(log, "a") as f:
        f.write(json.dumps({"tool": "groovydoc", "args": args}) + "\\n")

doc_dir = Path(args[args.index("-d") + 1])
doc_dir.mkdir(parents=True, exist_ok=True)
(doc_dir / "index.html").write_text("<html></html>")
'''

FAKE_JAR = '''
import json, os, sys, zipfile
from pathlib import Path

args = sys.argv[1:]
log = os.environ.get("FAKE_TOOL_LOG")
if log:
    with open(log, "a") as f:
        f.write(json.dumps({"tool": "jar", "args": args}) + "\\n")

exit_code = int(os.environ.get("FAKE_JAR_EXIT", "0"))
if exit_code:
    sys.exit(exit_code)

archive = Path(args[1])
with zipfile.ZipFile(archive, "w") as jar:
    rest = args[2:]
    while rest:
        directory = Path(rest[1])
        for file in sorted(directory.rglob("*")):
            if file.is_file():
                jar.write(file, file.relative_to(directory).as_posix())
        rest = rest[3:]
'''

FAKE_JAVAC = '''
import sys
sys.exit(0)
'''


def write_tool(path: Path, body: str) -> Path:
    """Write an executable Python script."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"#!{sys.executable}\n{body}")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


def read_tool_log(log_path: Path, tool: str = None):
    """Read the invocations recorded by the fake tools."""
    if not log_path.exists():
        return []
    entries = [json.loads(line) for line in log_path.read_text().splitlines() if line.strip()]
    if tool:
        entries = [entry for entry in entries if entry["tool"] == tool]
    return entries


@pytest.fixture
def groovy_home(tmp_path):
    """Fake GDK with groovyc and groovydoc."""
    home = tmp_path / "toolchains" / "groovy-2.4"
    write_tool(home / "bin" / "groovyc", FAKE_GROOVYC)
    write_tool(home / "bin" / "groovydoc", FAKE_GROOVYDOC)
    return home


@pytest.fixture
def java_home(tmp_path):
    """Fake JDK with javac and jar."""
    home = tmp_path / "toolchains" / "jdk-1.8"
    write_tool(home / "bin" / "javac", FAKE_JAVAC)
    write_tool(home / "bin" / "jar", FAKE_JAR)
    return home


@pytest.fixture
def groovy_properties(groovy_home):
    return {"2.4": str(groovy_home)}


@pytest.fixture
def java_properties(java_home):
    return {"1.8": str(java_home)}


@pytest.fixture
def tool_log(tmp_path, monkeypatch):
    """Path the fake tools append their invocations to."""
    log = tmp_path / "tool-log.jsonl"
    monkeypatch.setenv("FAKE_TOOL_LOG", str(log))
    return log


@pytest.fixture
def tool_invocations(tool_log):
    """Callable returning the recorded invocations, optionally for one tool."""

    def invocations(tool: str = None):
        return read_tool_log(tool_log, tool)

    return invocations
