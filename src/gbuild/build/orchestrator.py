"""
Build orchestration for Groovy projects.

This module ties the build components together into the tasks a project
runs:
- clean: delete the build directory
- compile_main / compile_test: compile stale sources, copy resources
- jar: package classes and sources
- document: generate groovydoc

Example usage:
    orchestrator = BuildOrchestrator(project, groovy_properties, java_properties)
    orchestrator.settings.groovy_version = "2.4"
    orchestrator.settings.java_version = "1.8"
    orchestrator.clean()
    orchestrator.compile_main()
    orchestrator.compile_test()
    orchestrator.jar()
"""

import logging
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

from ..config.settings import DependencyRule, GroovyLayout, GroovySettings
from ..packages.resolver import DependencyResolver
from ..packages.toolchain import GroovyToolchain
from ..project import Project
from .archive_creator import ArchiveSpec, JarBuilder, ToolchainArchiver
from .classpath import ClasspathAssembler
from .compilation_executor import ErrorKind, ProcessRunner
from .compiler import CompileError, CompileRequest, CompileState, GroovyCompiler
from .file_utils import copy_resources, prune
from .source_scanner import StaleFileScanner


class BuildOrchestrator:
    """
    Runs the build tasks of one project.

    The toolchain mappings (version -> installation home) are passed in
    already loaded; see gbuild.config.properties.PropertiesLoader.
    """

    def __init__(
        self,
        project: Project,
        groovy_properties: Mapping[str, str],
        java_properties: Mapping[str, str],
        resolver: Optional[DependencyResolver] = None,
        layout: Optional[GroovyLayout] = None,
        settings: Optional[GroovySettings] = None,
        runner: Optional[ProcessRunner] = None,
    ):
        """
        Initialize build orchestrator.

        Args:
            project: Project to build
            groovy_properties: GDK version -> home mapping
            java_properties: JDK version -> home mapping
            resolver: Dependency service for classpaths
            layout: Directory layout (defaults to the standard layout)
            settings: Build settings (versions must be set before compiling)
            runner: Process runner shared by every toolchain invocation
        """
        self.project = project
        self.groovy_properties = groovy_properties
        self.java_properties = java_properties
        self.layout = layout or GroovyLayout()
        self.settings = settings or GroovySettings()
        self.runner = runner or ProcessRunner()
        self.classpath_assembler = ClasspathAssembler(project, resolver)
        self.scanner = StaleFileScanner(project.directory)
        self.toolchain: Optional[GroovyToolchain] = None

    def initialize(self) -> GroovyToolchain:
        """Locate and validate the toolchain for the current settings.

        Raises:
            ConfigurationError: If versions or tools are not configured correctly
        """
        toolchain = GroovyToolchain(self.groovy_properties, self.java_properties, self.settings)
        toolchain.ensure_toolchain()
        self.toolchain = toolchain
        return toolchain

    def clean(self) -> None:
        """Clean the build directory by completely deleting it."""
        build_dir = self.project.directory / self.layout.build_directory
        logging.info(f"Cleaning [{build_dir}]")
        prune(build_dir)

    def compile_main(self) -> CompileState:
        """Compile the main sources (src/main/groovy by default) and copy their resources."""
        self.initialize()
        state = self.compile(
            self.layout.main_source_directory,
            self.layout.main_build_directory,
            self.settings.main_dependencies,
        )
        self.copy_resources(self.layout.main_resource_directory, self.layout.main_build_directory)
        return state

    def compile_test(self) -> CompileState:
        """Compile the test sources against the main classes and copy their resources."""
        self.initialize()
        state = self.compile(
            self.layout.test_source_directory,
            self.layout.test_build_directory,
            self.settings.test_dependencies,
            self.layout.main_build_directory,
        )
        self.copy_resources(self.layout.test_resource_directory, self.layout.test_build_directory)
        return state

    def compile(
        self,
        source_dir: Path,
        build_dir: Path,
        rules: Sequence[DependencyRule],
        *additional_classpath: Path,
    ) -> CompileState:
        """
        Compile the stale sources of a source directory.

        Args:
            source_dir: Source directory, relative to the project
            build_dir: Output directory, relative to the project
            rules: Dependency rules for the classpath
            *additional_classpath: Entries appended after the dependencies

        Returns:
            CompileState.SKIPPED or CompileState.SUCCEEDED

        Raises:
            CompileError: If groovyc fails
        """
        toolchain = self.toolchain or self.initialize()

        files: List[Path] = []
        for extension in self.settings.source_extensions:
            files.extend(self.scanner.scan(source_dir, build_dir, extension, ".class"))

        compiler = GroovyCompiler(self.runner)
        if not files:
            # Nothing stale: neither the resolver nor groovyc is consulted
            return compiler.compile(
                CompileRequest(Path(source_dir), Path(build_dir), (), toolchain.groovyc)
            )

        request = CompileRequest(
            source_root=Path(source_dir),
            output_root=Path(build_dir),
            files=tuple(files),
            executable=toolchain.groovyc,
            classpath=self.classpath_assembler.build(rules, *additional_classpath),
            extra_arguments=GroovyCompiler.split_arguments(self.settings.compiler_arguments),
            environment=toolchain.environment(),
            working_dir=self.project.directory,
            indy=self.settings.indy,
        )
        return compiler.compile(request)

    def copy_resources(self, resource_dir: Path, build_dir: Path) -> int:
        """Copy resources recursively into a build directory.

        Returns:
            Number of files copied
        """
        count = copy_resources(self.project.directory / resource_dir, self.project.directory / build_dir)
        if count:
            logging.info(f"Copied [{count}] resources from [{resource_dir}] to [{build_dir}]")
        return count

    def jar(self) -> List[Path]:
        """
        Build the main, main source, test and test source jars.

        Returns:
            Paths of the jars, relative to the project directory
        """
        self.initialize()

        artifact = self.project.to_artifact()
        jar_dir = self.layout.jar_directory
        layout = self.layout

        specs = [
            ArchiveSpec(jar_dir / artifact.artifact_file, (layout.main_build_directory,)),
            ArchiveSpec(
                jar_dir / artifact.artifact_source_file,
                (layout.main_source_directory, layout.main_resource_directory),
            ),
            ArchiveSpec(jar_dir / artifact.artifact_test_file, (layout.test_build_directory,)),
            ArchiveSpec(
                jar_dir / artifact.artifact_test_source_file,
                (layout.test_source_directory, layout.test_resource_directory),
            ),
        ]

        for spec in specs:
            self.build_archive(spec)

        return [spec.archive_path for spec in specs]

    def build_archive(self, spec: ArchiveSpec) -> int:
        """Create one archive with the configured archiver.

        Returns:
            Number of files staged

        Raises:
            ArchiveError: If the jar tool fails
        """
        directories = ", ".join(str(directory) for directory in spec.directories)
        logging.info(f"Creating JAR [{spec.archive_path}] from [{directories}]")

        if self.settings.use_jar_tool:
            toolchain = self.toolchain or self.initialize()
            archiver = ToolchainArchiver(toolchain.jar, self.project.directory, self.runner, toolchain.environment())
            count = archiver.build(spec)
        else:
            count = JarBuilder(self.project.directory).build(spec)

        logging.info(f"Jarred [{count}] files to [{spec.archive_path}]")
        return count

    def document(self) -> CompileState:
        """
        Generate groovydoc for the main sources into the doc directory.

        Returns:
            CompileState.SKIPPED when there are no sources, otherwise
            CompileState.SUCCEEDED

        Raises:
            CompileError: If groovydoc fails
        """
        toolchain = self.initialize()
        groovydoc = toolchain.get_groovydoc()

        source_dir = self.layout.main_source_directory
        source_root = self.project.directory / source_dir
        files: List[Path] = []
        if source_root.is_dir():
            for extension in self.settings.source_extensions:
                files.extend(
                    file.relative_to(self.project.directory)
                    for file in sorted(source_root.rglob(f"*{extension}"))
                    if file.is_file()
                )

        if not files:
            logging.info(f"Skipping groovydoc. No sources in [{source_dir}]")
            return CompileState.SKIPPED

        doc_dir = self.layout.doc_directory
        (self.project.directory / doc_dir).mkdir(parents=True, exist_ok=True)
        logging.info(f"Generating groovydoc for [{len(files)}] files into [{doc_dir}]")

        classpath = self.classpath_assembler.build(self.settings.main_dependencies)
        cmd = [str(groovydoc)]
        cmd.extend(GroovyCompiler.split_arguments(self.settings.doc_arguments))
        cmd.extend(classpath.to_arguments())
        cmd.extend(["-sourcepath", str(source_dir), "-d", str(doc_dir)])
        cmd.extend(str(file) for file in files)

        result = self.runner.run(cmd, cwd=self.project.directory, env_overrides=toolchain.environment())
        if result.exit_code != 0:
            raise CompileError(
                f"groovydoc failed with exit code [{result.exit_code}]",
                ErrorKind.TOOL_FAILURE,
                result.exit_code,
            )

        return CompileState.SUCCEEDED
