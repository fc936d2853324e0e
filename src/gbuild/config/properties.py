"""
Toolchain properties loading.

The Groovy and Java toolchains are located through per-user properties files
that map a logical version to an installation home:

    ~/.gbuild/plugins/groovy.properties
        2.4=/opt/groovy/2.4
        3.0=/opt/groovy/3.0

The configuration root can be moved with the GBUILD_HOME environment
variable. Loaded mappings are handed to the build components explicitly.
"""

import configparser
import os
from pathlib import Path
from typing import Dict, Optional


GROOVY_ERROR_MESSAGE = (
    "You must create the file [{path}] that contains the system configuration for the Groovy plugin. "
    "This file should include the location of the GDK (groovy and groovyc) by version. "
    "These properties look like this:\n\n"
    "  2.4=/opt/groovy/2.4\n"
    "  3.0=/opt/groovy/3.0\n"
)

JAVA_ERROR_MESSAGE = (
    "You must create the file [{path}] that contains the system configuration for the Java system. "
    "This file should include the location of the JDK (java and javac) by version. "
    "These properties look like this:\n\n"
    "  1.8=/usr/lib/jvm/java-8-openjdk\n"
    "  11=/usr/lib/jvm/java-11-openjdk\n"
    "  17=/usr/lib/jvm/java-17-openjdk\n"
)


class ConfigurationError(Exception):
    """Raised when the build is misconfigured (missing files, versions or tools)."""

    pass


class PropertiesLoader:
    """Loads ``<config_dir>/plugins/<plugin>.properties`` files."""

    SECTION = "properties"

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize the loader.

        Args:
            config_dir: Configuration root. Defaults to $GBUILD_HOME or ~/.gbuild
        """
        if config_dir is None:
            config_env = os.environ.get("GBUILD_HOME")
            if config_env:
                config_dir = Path(config_env)
            else:
                config_dir = Path.home() / ".gbuild"

        self.config_dir = Path(config_dir).expanduser()

    def get_properties_path(self, plugin: str) -> Path:
        return self.config_dir / "plugins" / f"{plugin}.properties"

    def load(self, plugin: str, error_message: str) -> Dict[str, str]:
        """
        Load the version-to-home mapping for a plugin.

        Args:
            plugin: Plugin name (``groovy`` or ``java``)
            error_message: Remediation text, formatted with ``path``

        Returns:
            Mapping of version string to installation home

        Raises:
            ConfigurationError: If the file is missing or cannot be parsed
        """
        path = self.get_properties_path(plugin)
        if not path.is_file():
            raise ConfigurationError(error_message.format(path=path))

        return parse_properties(path.read_text(encoding="utf-8"), source=str(path))


def parse_properties(text: str, source: str = "<string>") -> Dict[str, str]:
    """
    Parse Java-properties style ``key=value`` or ``key:value`` lines.

    Lines starting with ``#`` or ``!`` are comments. The first ``=`` or ``:``
    separates key from value, so Windows drive letters in values survive. A
    key given twice keeps its last value. Backslashes are kept literally;
    escape sequences and line continuations are not interpreted.

    Raises:
        ConfigurationError: If the content cannot be parsed
    """
    parser = configparser.ConfigParser(
        delimiters=("=", ":"),
        comment_prefixes=("#", "!"),
        strict=False,
        interpolation=None,
    )
    parser.optionxform = str  # type: ignore[assignment,method-assign]

    try:
        parser.read_string(f"[{PropertiesLoader.SECTION}]\n{text}", source=source)
    except configparser.Error as e:
        raise ConfigurationError(f"Failed to parse {source}: {e}") from e

    return {key: value.strip() for key, value in parser[PropertiesLoader.SECTION].items()}
