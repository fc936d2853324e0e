"""
Configuration for gbuild.

This module provides:
- Toolchain properties files (version -> installation home)
- Build layout and settings
- gbuild.ini project file parsing
"""

from .project_config import ProjectConfig
from .properties import (
    GROOVY_ERROR_MESSAGE,
    JAVA_ERROR_MESSAGE,
    ConfigurationError,
    PropertiesLoader,
    parse_properties,
)
from .settings import DependencyRule, GroovyLayout, GroovySettings

__all__ = [
    "ProjectConfig",
    "ConfigurationError",
    "PropertiesLoader",
    "parse_properties",
    "GROOVY_ERROR_MESSAGE",
    "JAVA_ERROR_MESSAGE",
    "DependencyRule",
    "GroovyLayout",
    "GroovySettings",
]
