"""Tests for classpath construction."""

import os
from pathlib import Path
from unittest.mock import Mock

import pytest

from gbuild.build.classpath import Classpath, ClasspathAssembler
from gbuild.config.settings import DependencyRule
from gbuild.packages.resolver import ArtifactGraph, DependencyResolver, ResolvedArtifact, ResolvedArtifactGraph
from gbuild.project import Artifact, Dependencies, DependencyGroup, Project


class TestClasspath:
    """Test the Classpath value."""

    def test_empty(self):
        classpath = Classpath()

        assert not classpath
        assert classpath.to_string() == ""
        assert classpath.to_arguments() == []

    def test_joined_with_path_separator(self):
        classpath = Classpath(["a.jar", "b.jar"])

        assert classpath.to_string() == f"a.jar{os.pathsep}b.jar"
        assert classpath.to_arguments() == ["-classpath", f"a.jar{os.pathsep}b.jar"]

    def test_add_keeps_order(self):
        classpath = Classpath(["a.jar"]).add("b.jar", Path("classes"))

        assert [str(path) for path in classpath.paths] == ["a.jar", "b.jar", "classes"]
        assert len(classpath) == 3

    def test_custom_flag(self):
        assert Classpath(["a.jar"]).to_arguments("-cp") == ["-cp", "a.jar"]


@pytest.fixture
def project(tmp_path):
    return Project(
        directory=tmp_path,
        group="org.example",
        name="test-project",
        version="1.0",
        dependencies=Dependencies(
            DependencyGroup("compile", artifacts=[Artifact.parse("org.example:lib:1.0")]),
        ),
        workflow=Mock(),
    )


@pytest.fixture
def mock_resolver(project):
    """Resolver returning two artifacts in a fixed order."""
    resolver = Mock(spec=DependencyResolver)
    resolver.build_graph.return_value = Mock()
    resolver.reduce.return_value = ArtifactGraph(project.to_artifact())
    resolver.resolve.return_value = ResolvedArtifactGraph(
        project.to_artifact(),
        [
            ResolvedArtifact(Artifact.parse("org.example:lib:1.0"), Path("/cache/lib-1.0.0.jar")),
            ResolvedArtifact(Artifact.parse("org.example:other:2.0"), Path("/cache/other-2.0.0.jar")),
        ],
    )
    return resolver


class TestClasspathAssembler:
    """Test resolving dependencies into a classpath."""

    def test_no_dependencies_no_extras(self, tmp_path):
        """Test a project without dependencies gets an empty classpath."""
        project = Project(tmp_path, "org.example", "test-project", "1.0")
        resolver = Mock(spec=DependencyResolver)

        classpath = ClasspathAssembler(project, resolver).build([DependencyRule("compile")])

        assert classpath.to_string() == ""
        assert classpath.to_arguments() == []
        resolver.build_graph.assert_not_called()

    def test_no_dependencies_with_extras(self, tmp_path):
        """Test extra paths alone make up the classpath, in input order."""
        project = Project(tmp_path, "org.example", "test-project", "1.0")
        extras = [Path("build/classes/main"), Path("lib/a.jar"), Path("lib/b.jar")]

        classpath = ClasspathAssembler(project, Mock(spec=DependencyResolver)).build([], *extras)

        assert classpath.to_string() == os.pathsep.join(str(path) for path in extras)

    def test_empty_resolution_with_extras(self, project, mock_resolver):
        """Test an empty resolved set followed by extras."""
        mock_resolver.resolve.return_value = ResolvedArtifactGraph(project.to_artifact())

        classpath = ClasspathAssembler(project, mock_resolver).build([DependencyRule("compile")], "classes")

        assert classpath.to_string() == "classes"

    def test_empty_resolution(self, project, mock_resolver):
        """Test an empty resolved set yields no classpath flag."""
        mock_resolver.resolve.return_value = ResolvedArtifactGraph(project.to_artifact())

        classpath = ClasspathAssembler(project, mock_resolver).build([DependencyRule("compile")])

        assert classpath.to_arguments() == []

    def test_dependencies_then_extras(self, project, mock_resolver):
        """Test resolved artifacts come first, in resolver order, then extras."""
        classpath = ClasspathAssembler(project, mock_resolver).build(
            [DependencyRule("compile")], Path("build/classes/main")
        )

        assert classpath.paths == [
            Path("/cache/lib-1.0.0.jar"),
            Path("/cache/other-2.0.0.jar"),
            Path("build/classes/main"),
        ]

    def test_rules_passed_through(self, project, mock_resolver):
        """Test the rules reach the resolver unchanged."""
        rules = [DependencyRule("compile", transitive=True), DependencyRule("provided", fetch_source=True)]

        ClasspathAssembler(project, mock_resolver).build(rules)

        args = mock_resolver.resolve.call_args.args
        assert args[0] is project.artifact_graph
        assert args[1] is project.workflow
        assert list(args[2]) == rules

    def test_artifact_graph_memoized(self, project, mock_resolver):
        """Test the graph is built and reduced once per project."""
        assembler = ClasspathAssembler(project, mock_resolver)

        assembler.build([DependencyRule("compile")])
        assembler.build([DependencyRule("test-compile")])

        mock_resolver.build_graph.assert_called_once()
        mock_resolver.reduce.assert_called_once()
        assert mock_resolver.resolve.call_count == 2

    def test_existing_artifact_graph_reused(self, project, mock_resolver):
        """Test a graph already on the project is not rebuilt."""
        project.artifact_graph = ArtifactGraph(project.to_artifact())

        ClasspathAssembler(project, mock_resolver).build([DependencyRule("compile")])

        mock_resolver.build_graph.assert_not_called()
