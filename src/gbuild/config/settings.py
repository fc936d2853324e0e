"""Layout and settings for the Groovy build."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class DependencyRule:
    """Which dependency group to put on a classpath, and how to resolve it."""

    group: str
    transitive: bool = False
    fetch_source: bool = False

    @classmethod
    def parse(cls, text: str) -> "DependencyRule":
        """
        Parse a rule such as ``compile``, ``compile+transitive`` or
        ``test-compile+transitive+source``.

        Raises:
            ValueError: If the group is empty or a flag is unknown
        """
        group, *flags = [part.strip() for part in text.strip().split("+")]
        if not group:
            raise ValueError(f"Invalid dependency rule: {text!r}")

        transitive = False
        fetch_source = False
        for flag in flags:
            if flag == "transitive":
                transitive = True
            elif flag == "source":
                fetch_source = True
            else:
                raise ValueError(f"Unknown flag '{flag}' in dependency rule {text!r}")

        return cls(group, transitive, fetch_source)


@dataclass
class GroovyLayout:
    """Directories used by the build, relative to the project directory."""

    build_directory: Path = Path("build")
    main_source_directory: Path = Path("src/main/groovy")
    main_resource_directory: Path = Path("src/main/resources")
    main_build_directory: Path = Path("build/classes/main")
    test_source_directory: Path = Path("src/test/groovy")
    test_resource_directory: Path = Path("src/test/resources")
    test_build_directory: Path = Path("build/classes/test")
    doc_directory: Path = Path("build/doc")
    jar_directory: Path = Path("build/jars")


def _default_main_dependencies() -> List[DependencyRule]:
    return [
        DependencyRule("compile"),
        DependencyRule("provided"),
    ]


def _default_test_dependencies() -> List[DependencyRule]:
    return [
        DependencyRule("compile"),
        DependencyRule("test-compile"),
        DependencyRule("provided"),
    ]


@dataclass
class GroovySettings:
    """
    Settings for compiling, documenting and packaging.

    Attributes:
        groovy_version: GDK version, looked up in groovy.properties
        java_version: JDK version, looked up in java.properties
        compiler_arguments: Extra groovyc arguments (shell syntax)
        indy: Pass ``--indy`` so groovyc emits invokedynamic call sites
        doc_arguments: Extra groovydoc arguments (shell syntax)
        source_extensions: Extensions of files handed to groovyc
        use_jar_tool: Build jars with the JDK ``jar`` tool instead of in-process
        main_dependencies: Classpath rules for the main sources
        test_dependencies: Classpath rules for the test sources
    """

    groovy_version: Optional[str] = None
    java_version: Optional[str] = None
    compiler_arguments: str = ""
    indy: bool = False
    doc_arguments: str = ""
    source_extensions: Tuple[str, ...] = (".groovy",)
    use_jar_tool: bool = False
    main_dependencies: List[DependencyRule] = field(default_factory=_default_main_dependencies)
    test_dependencies: List[DependencyRule] = field(default_factory=_default_test_dependencies)
