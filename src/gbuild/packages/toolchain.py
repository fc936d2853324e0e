"""Toolchain location for the Groovy build.

The GDK and JDK are not downloaded; they are located through the
version-to-home mappings loaded from the properties files (see
gbuild.config.properties). Every failure raises ConfigurationError with the
exact remediation the user needs.
"""

import os
import sys
from pathlib import Path
from typing import Dict, Mapping, Optional

from ..config.properties import GROOVY_ERROR_MESSAGE, JAVA_ERROR_MESSAGE, ConfigurationError
from ..config.settings import GroovySettings


class GroovyToolchain:
    """Resolves and validates groovyc, groovydoc, javac and jar."""

    def __init__(
        self,
        groovy_properties: Mapping[str, str],
        java_properties: Mapping[str, str],
        settings: GroovySettings,
        groovy_properties_path: Optional[Path] = None,
        java_properties_path: Optional[Path] = None,
    ):
        """Initialize toolchain locator.

        Args:
            groovy_properties: GDK version -> home mapping
            java_properties: JDK version -> home mapping
            settings: Settings naming the versions to use
            groovy_properties_path: Where the GDK mapping came from (for messages)
            java_properties_path: Where the JDK mapping came from (for messages)
        """
        self.groovy_properties = groovy_properties
        self.java_properties = java_properties
        self.settings = settings
        self.groovy_properties_path = groovy_properties_path or Path("~/.gbuild/plugins/groovy.properties")
        self.java_properties_path = java_properties_path or Path("~/.gbuild/plugins/java.properties")

        self.groovy_home: Optional[Path] = None
        self.java_home: Optional[Path] = None
        self.groovyc: Optional[Path] = None
        self.javac: Optional[Path] = None
        self.jar: Optional[Path] = None

    @staticmethod
    def _groovy_tool_name(tool: str) -> str:
        return f"{tool}.bat" if sys.platform == "win32" else tool

    @staticmethod
    def _java_tool_name(tool: str) -> str:
        return f"{tool}.exe" if sys.platform == "win32" else tool

    def ensure_toolchain(self) -> None:
        """Validate configuration and locate every tool the build needs.

        Raises:
            ConfigurationError: On the first missing version, home, or tool
        """
        if not self.settings.groovy_version:
            raise ConfigurationError(
                "You must configure the Groovy version to use with the settings object. "
                "It will look something like this:\n\n"
                "  [groovy]\n"
                "  groovy_version = 2.4"
            )

        groovy_home = self.groovy_properties.get(self.settings.groovy_version)
        if not groovy_home:
            raise ConfigurationError(
                f"No GDK is configured for version [{self.settings.groovy_version}].\n\n"
                + GROOVY_ERROR_MESSAGE.format(path=self.groovy_properties_path)
            )

        self.groovy_home = Path(groovy_home)
        self.groovyc = self._verify_tool(
            self.groovy_home / "bin" / self._groovy_tool_name("groovyc"), "groovyc compiler"
        )

        if not self.settings.java_version:
            raise ConfigurationError(
                "You must configure the Java version to use with the settings object. "
                "It will look something like this:\n\n"
                "  [groovy]\n"
                "  java_version = 1.8"
            )

        java_home = self.java_properties.get(self.settings.java_version)
        if not java_home:
            raise ConfigurationError(
                f"No JDK is configured for version [{self.settings.java_version}].\n\n"
                + JAVA_ERROR_MESSAGE.format(path=self.java_properties_path)
            )

        self.java_home = Path(java_home)
        self.javac = self._verify_tool(self.java_home / "bin" / self._java_tool_name("javac"), "javac compiler")
        self.jar = self._verify_tool(self.java_home / "bin" / self._java_tool_name("jar"), "jar utility")

    def get_groovydoc(self) -> Path:
        """Locate groovydoc, which is only needed when documenting.

        Raises:
            ConfigurationError: If the toolchain is not initialized or groovydoc is missing
        """
        if self.groovy_home is None:
            raise ConfigurationError("Toolchain not initialized. Call ensure_toolchain() first.")

        return self._verify_tool(self.groovy_home / "bin" / self._groovy_tool_name("groovydoc"), "groovydoc tool")

    def environment(self) -> Dict[str, str]:
        """Environment variables the toolchain processes need."""
        if self.java_home is None or self.groovy_home is None:
            raise ConfigurationError("Toolchain not initialized. Call ensure_toolchain() first.")

        return {
            "JAVA_HOME": str(self.java_home),
            "GROOVY_HOME": str(self.groovy_home),
        }

    @staticmethod
    def _verify_tool(tool_path: Path, description: str) -> Path:
        if not tool_path.is_file():
            raise ConfigurationError(f"The {description} [{tool_path.absolute()}] does not exist.")
        if not os.access(tool_path, os.X_OK):
            raise ConfigurationError(f"The {description} [{tool_path.absolute()}] is not executable.")
        return tool_path
