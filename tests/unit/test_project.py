"""Tests for the project model."""

from pathlib import Path

import pytest

from gbuild.project import Artifact, Dependencies, DependencyGroup, Project, Version


class TestVersion:
    @pytest.mark.parametrize(
        "text,expected",
        [("1", "1.0.0"), ("1.0", "1.0.0"), ("2.4.15", "2.4.15"), ("3.0.0-rc-1", "3.0.0-rc-1")],
    )
    def test_normalized(self, text, expected):
        assert str(Version(text)) == expected

    def test_ordering(self):
        assert Version("1.9") < Version("1.10")
        assert Version("2.0.0-beta") < Version("2.0.0")
        assert Version("1.0") == Version("1.0.0")
        assert len({Version("1"), Version("1.0.0")}) == 1

    @pytest.mark.parametrize("text", ["", "latest", "1.x", "1.0.0.0"])
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            Version(text)


class TestArtifact:
    def test_parse_three_parts(self):
        artifact = Artifact.parse("org.testng:testng:6.8.7")

        assert artifact == Artifact("org.testng", "testng", "testng", Version("6.8.7"), "jar")
        assert artifact.id == "org.testng:testng"

    def test_parse_four_parts(self):
        assert Artifact.parse("org.example:lib:1.0:zip").type == "zip"

    def test_parse_five_parts(self):
        artifact = Artifact.parse("org.example:lib:lib-core:1.0:jar")

        assert artifact.name == "lib-core"
        assert artifact.project == "lib"

    @pytest.mark.parametrize("spec", ["org.example", "a:b", "a::1.0", "a:b:c:d:e:f"])
    def test_parse_invalid(self, spec):
        with pytest.raises(ValueError):
            Artifact.parse(spec)

    def test_file_names(self):
        artifact = Artifact.parse("org.example:demo:1.0")

        assert artifact.artifact_file == "demo-1.0.0.jar"
        assert artifact.artifact_source_file == "demo-1.0.0-src.jar"
        assert artifact.artifact_test_file == "demo-test-1.0.0.jar"
        assert artifact.artifact_test_source_file == "demo-test-1.0.0-src.jar"


class TestDependencies:
    def test_merge_groups(self):
        dependencies = Dependencies(
            DependencyGroup("compile", artifacts=[Artifact.parse("a:b:1")]),
            DependencyGroup("compile", artifacts=[Artifact.parse("c:d:1")]),
        )

        assert [group.name for group in dependencies] == ["compile"]
        assert len(dependencies) == 2

    def test_empty_is_falsy(self):
        assert not Dependencies()
        assert not Dependencies(DependencyGroup("compile"))


class TestProject:
    def test_coerces_fields(self):
        project = Project("some/dir", "org.example", "demo", "1.0")

        assert project.directory == Path("some/dir")
        assert project.version == Version("1.0.0")
        assert project.to_artifact() == Artifact("org.example", "demo", "demo", Version("1.0"))
