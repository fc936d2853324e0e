"""
Pytest configuration for gbuild test suite.

This configuration enables the --real-toolchain flag to run tests that need
an installed GDK/JDK.
"""

import pytest


def pytest_addoption(parser):
    """Add custom command-line options."""
    parser.addoption(
        "--real-toolchain",
        action="store_true",
        default=False,
        help="Run tests that invoke a real groovyc/jar (needs GBUILD_HOME properties)",
    )


def pytest_collection_modifyitems(config, items):
    """Skip real toolchain tests unless --real-toolchain is given."""
    if config.getoption("--real-toolchain"):
        return

    skip_toolchain = pytest.mark.skip(reason="needs --real-toolchain")
    for item in items:
        if item.get_closest_marker("toolchain"):
            item.add_marker(skip_toolchain)
