"""
gbuild.ini configuration parser.

Example gbuild.ini:
    [project]
    group = org.example
    name = test-project
    version = 1.0

    [groovy]
    groovy_version = 2.4
    java_version = 1.8
    compiler_arguments = -j
    indy = false
    test_dependencies = compile, test-compile+transitive, provided

    [dependencies.test-compile]
    artifacts =
        org.testng:testng:6.8.7:jar

    [workflow]
    cache_dir = ~/.gbuild/cache
    repositories =
        https://repo1.maven.org/maven2

Usage:
    config = ProjectConfig(Path("gbuild.ini"))
    project = config.get_project()
    settings = config.get_settings()
"""

import configparser
import re
from pathlib import Path
from typing import List, Optional

from ..packages.workflow import CacheProcess, URLProcess, Workflow
from ..project import Artifact, Dependencies, DependencyGroup, Project
from .properties import ConfigurationError
from .settings import DependencyRule, GroovySettings


CONFIG_FILE = "gbuild.ini"
DEPENDENCIES_PREFIX = "dependencies."


def _split_list(value: str) -> List[str]:
    """Split a comma and/or newline separated value, dropping blanks."""
    return [item.strip() for item in re.split(r"[,\n]", value) if item.strip()]


class ProjectConfig:
    """Parser for gbuild.ini project files."""

    REQUIRED_FIELDS = {"group", "name", "version"}

    def __init__(self, ini_path: Path):
        """
        Initialize the parser with a gbuild.ini file.

        Args:
            ini_path: Path to the gbuild.ini file

        Raises:
            ConfigurationError: If the file doesn't exist or cannot be parsed
        """
        self.ini_path = Path(ini_path)

        if not self.ini_path.exists():
            raise ConfigurationError(f"Configuration file not found: {self.ini_path}")

        self.config = configparser.ConfigParser(delimiters=("=",), interpolation=None)

        try:
            self.config.read(self.ini_path, encoding="utf-8")
        except configparser.Error as e:
            raise ConfigurationError(f"Failed to parse {self.ini_path}: {e}") from e

    @classmethod
    def from_project_dir(cls, project_dir: Path) -> "ProjectConfig":
        return cls(Path(project_dir) / CONFIG_FILE)

    @property
    def project_dir(self) -> Path:
        return self.ini_path.resolve().parent

    def get_project(self) -> Project:
        """
        Build the Project described by the file.

        Raises:
            ConfigurationError: If the [project] section is missing or incomplete
        """
        if "project" not in self.config:
            raise ConfigurationError(f"Missing [project] section in {self.ini_path}")

        section = self.config["project"]
        missing = sorted(self.REQUIRED_FIELDS - set(section.keys()))
        if missing:
            raise ConfigurationError(
                f"Missing required fields in [project] of {self.ini_path}: {', '.join(missing)}"
            )

        try:
            return Project(
                directory=self.project_dir,
                group=section["group"].strip(),
                name=section["name"].strip(),
                version=section["version"].strip(),
                dependencies=self.get_dependencies(),
                workflow=self.get_workflow(),
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid [project] in {self.ini_path}: {e}") from e

    def get_dependencies(self) -> Optional[Dependencies]:
        """Parse every [dependencies.<group>] section.

        Returns:
            Dependencies, or None when no artifact is declared
        """
        dependencies = Dependencies()
        for section_name in self.config.sections():
            if not section_name.startswith(DEPENDENCIES_PREFIX):
                continue

            section = self.config[section_name]
            group_name = section_name[len(DEPENDENCIES_PREFIX):]
            try:
                artifacts = [Artifact.parse(spec) for spec in _split_list(section.get("artifacts", ""))]
                export = section.getboolean("export", fallback=False)
            except ValueError as e:
                raise ConfigurationError(f"Invalid [{section_name}] in {self.ini_path}: {e}") from e

            dependencies.add(DependencyGroup(group_name, export, artifacts))

        return dependencies if dependencies else None

    def get_workflow(self) -> Workflow:
        """Parse the [workflow] section (cache directory and repositories)."""
        section = self.config["workflow"] if "workflow" in self.config else {}
        cache_dir = Path(section.get("cache_dir", "~/.gbuild/cache")).expanduser()
        repositories = _split_list(section.get("repositories", ""))
        return Workflow(CacheProcess(cache_dir), [URLProcess(url) for url in repositories])

    def get_settings(self) -> GroovySettings:
        """
        Parse the [groovy] section into GroovySettings.

        Raises:
            ConfigurationError: On invalid boolean values or dependency rules
        """
        settings = GroovySettings()
        if "groovy" not in self.config:
            return settings

        section = self.config["groovy"]
        try:
            settings.groovy_version = section.get("groovy_version", settings.groovy_version)
            settings.java_version = section.get("java_version", settings.java_version)
            settings.compiler_arguments = section.get("compiler_arguments", settings.compiler_arguments)
            settings.doc_arguments = section.get("doc_arguments", settings.doc_arguments)
            settings.indy = section.getboolean("indy", fallback=settings.indy)
            settings.use_jar_tool = section.getboolean("use_jar_tool", fallback=settings.use_jar_tool)

            if "source_extensions" in section:
                # The scanner swaps whole suffixes, leading dot included
                settings.source_extensions = tuple(
                    ext if ext.startswith(".") else f".{ext}" for ext in _split_list(section["source_extensions"])
                )
            if "main_dependencies" in section:
                settings.main_dependencies = [DependencyRule.parse(rule) for rule in _split_list(section["main_dependencies"])]
            if "test_dependencies" in section:
                settings.test_dependencies = [DependencyRule.parse(rule) for rule in _split_list(section["test_dependencies"])]
        except ValueError as e:
            raise ConfigurationError(f"Invalid [groovy] in {self.ini_path}: {e}") from e

        return settings
