"""
Command-line interface for gbuild.

This module provides the `gbuild` CLI tool for compiling and packaging
Groovy projects described by a gbuild.ini file.
"""

import argparse
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from gbuild import __version__
from gbuild.build import ArchiveError, BuildOrchestrator, CompileError, ProcessLaunchError
from gbuild.cli_utils import ErrorFormatter, PathValidator, setup_logging
from gbuild.config import (
    GROOVY_ERROR_MESSAGE,
    JAVA_ERROR_MESSAGE,
    ConfigurationError,
    ProjectConfig,
    PropertiesLoader,
)
from gbuild.packages import DependencyResolutionError, DownloadError, LocalDependencyResolver


# Tasks each command runs, in order
COMMAND_TASKS: Dict[str, List[str]] = {
    "clean": ["clean"],
    "compile-main": ["compile_main"],
    "compile-test": ["compile_test"],
    "jar": ["jar"],
    "doc": ["document"],
    "build": ["compile_main", "compile_test", "jar"],
}


@dataclass
class TaskArgs:
    """Arguments shared by every command."""

    command: str
    project_dir: Path
    config_dir: Optional[Path] = None
    verbose: bool = False


def create_orchestrator(args: TaskArgs) -> BuildOrchestrator:
    """Create an orchestrator from gbuild.ini and the toolchain properties.

    Raises:
        ConfigurationError: If the project or toolchain configuration is invalid
    """
    config = ProjectConfig.from_project_dir(args.project_dir)
    project = config.get_project()
    settings = config.get_settings()

    # clean needs no toolchain
    groovy_properties: Dict[str, str] = {}
    java_properties: Dict[str, str] = {}
    if args.command != "clean":
        loader = PropertiesLoader(args.config_dir)
        groovy_properties = loader.load("groovy", GROOVY_ERROR_MESSAGE)
        java_properties = loader.load("java", JAVA_ERROR_MESSAGE)

    return BuildOrchestrator(
        project,
        groovy_properties,
        java_properties,
        resolver=LocalDependencyResolver(),
        settings=settings,
    )


def task_command(args: TaskArgs) -> None:
    """Run the tasks of a command.

    Examples:
        gbuild build                   # Compile main and test, then jar
        gbuild compile-main path/to/project
        gbuild clean
        gbuild doc --verbose
    """
    setup_logging(args.verbose)
    print(f"gbuild v{__version__}")

    try:
        start_time = time.time()
        orchestrator = create_orchestrator(args)
        for task in COMMAND_TASKS[args.command]:
            getattr(orchestrator, task)()
        build_time = time.time() - start_time

        ErrorFormatter.print_success(f"{args.command} successful!")
        print(f"Time: {build_time:.2f}s")
        sys.exit(0)

    except ConfigurationError as e:
        ErrorFormatter.handle_build_error("Configuration error", e)
    except (CompileError, ArchiveError) as e:
        ErrorFormatter.handle_build_error(f"{args.command} failed!", e)
    except (DependencyResolutionError, DownloadError) as e:
        ErrorFormatter.handle_build_error("Dependency resolution failed", e)
    except ProcessLaunchError as e:
        ErrorFormatter.handle_build_error("Unable to run toolchain", e)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)


def main() -> None:
    """gbuild - incremental Groovy build tool."""
    parser = argparse.ArgumentParser(
        prog="gbuild",
        description="gbuild - incremental Groovy build tool",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"gbuild {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    command_help = {
        "clean": "Delete the build directory",
        "compile-main": "Compile the main sources and copy main resources",
        "compile-test": "Compile the test sources and copy test resources",
        "jar": "Package classes and sources into jars",
        "doc": "Generate groovydoc for the main sources",
        "build": "Compile main and test sources, then package jars",
    }
    for command, help_text in command_help.items():
        command_parser = subparsers.add_parser(command, help=help_text)
        command_parser.add_argument(
            "project_dir",
            nargs="?",
            type=Path,
            default=Path.cwd(),
            help="Project directory containing gbuild.ini (default: current directory)",
        )
        command_parser.add_argument(
            "--config-dir",
            type=Path,
            default=None,
            help="Directory holding plugins/*.properties (default: $GBUILD_HOME or ~/.gbuild)",
        )
        command_parser.add_argument(
            "-v",
            "--verbose",
            action="store_true",
            help="Show verbose output",
        )

    parsed_args = parser.parse_args()

    if not parsed_args.command:
        parser.print_help()
        sys.exit(0)

    PathValidator.validate_project_dir(parsed_args.project_dir)

    task_command(
        TaskArgs(
            command=parsed_args.command,
            project_dir=parsed_args.project_dir,
            config_dir=parsed_args.config_dir,
            verbose=parsed_args.verbose,
        )
    )


if __name__ == "__main__":
    main()
