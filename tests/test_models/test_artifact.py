"""Unit tests for mvnkeeper.models.artifact module.

Covers coordinate parsing from command-line strings, the string forms used
in reports and errors, and the sort keys that order batch results.
"""

from __future__ import annotations

import pytest

from mvnkeeper.models.artifact import (
    Artifact,
    Coordinate,
    Dependency,
    Plugin,
    dependency_sort_key,
    plugin_sort_key,
)


@pytest.mark.unit
class TestCoordinate:
    """Tests for Coordinate parsing and keys."""

    def test_key(self) -> None:
        assert Coordinate("junit", "junit").key == "junit:junit"

    def test_parse(self) -> None:
        assert Coordinate.parse("org.slf4j:slf4j-api") == Coordinate("org.slf4j", "slf4j-api")

    def test_parse_ignores_version(self) -> None:
        assert Coordinate.parse("junit:junit:4.12") == Coordinate("junit", "junit")

    def test_parse_strips_whitespace(self) -> None:
        assert Coordinate.parse("  junit:junit  ") == Coordinate("junit", "junit")

    @pytest.mark.parametrize("value", ["junit", ":junit", "junit:", "", ":"])
    def test_parse_rejects_incomplete(self, value: str) -> None:
        with pytest.raises(ValueError, match="Expected groupId:artifactId"):
            Coordinate.parse(value)

    def test_str(self) -> None:
        assert str(Coordinate("g", "a")) == "g:a"


@pytest.mark.unit
class TestArtifact:
    """Tests for Artifact."""

    def test_defaults(self) -> None:
        artifact = Artifact("g", "a", "1.0")

        assert artifact.type == "jar"
        assert artifact.classifier is None
        assert artifact.optional is False

    def test_coordinate(self) -> None:
        assert Artifact("g", "a", "1.0").coordinate == Coordinate("g", "a")

    def test_str(self) -> None:
        assert str(Artifact("g", "p", "[0,]", type="maven-plugin")) == "g:p:maven-plugin:[0,]"


@pytest.mark.unit
class TestDependency:
    """Tests for Dependency parsing and properties."""

    def test_parse_with_version(self) -> None:
        assert Dependency.parse("junit:junit:4.12") == Dependency("junit", "junit", "4.12")

    def test_parse_without_version(self) -> None:
        assert Dependency.parse("junit:junit").version is None

    def test_parse_empty_version(self) -> None:
        assert Dependency.parse("junit:junit:").version is None

    def test_parse_invalid(self) -> None:
        with pytest.raises(ValueError):
            Dependency.parse("junit")

    def test_is_snapshot(self) -> None:
        assert Dependency("g", "a", "1.0-SNAPSHOT").is_snapshot
        assert not Dependency("g", "a", "1.0").is_snapshot
        assert not Dependency("g", "a").is_snapshot

    def test_str(self) -> None:
        assert str(Dependency("g", "a", "1.0")) == "g:a:1.0"
        assert str(Dependency("g", "a")) == "g:a:?"

    def test_hashable(self) -> None:
        assert len({Dependency("g", "a", "1"), Dependency("g", "a", "1")}) == 1


@pytest.mark.unit
class TestPlugin:
    """Tests for Plugin."""

    def test_parse(self) -> None:
        plugin = Plugin.parse("org.apache.maven.plugins:maven-jar-plugin:3.3.0")

        assert plugin == Plugin("org.apache.maven.plugins", "maven-jar-plugin", "3.3.0")
        assert plugin.dependencies == ()

    def test_hashable_with_dependencies(self) -> None:
        plugin = Plugin("g", "p", "1", dependencies=(Dependency("g", "d", "2"),))

        assert plugin in {plugin}

    def test_str(self) -> None:
        assert str(Plugin("g", "p")) == "g:p:?"


@pytest.mark.unit
class TestSortKeys:
    """Tests for the deterministic orderings of batch results."""

    def test_dependency_order(self) -> None:
        dependencies = [
            Dependency("org.b", "a", "1"),
            Dependency("org.a", "z", "1"),
            Dependency("org.a", "b", "2"),
            Dependency("org.a", "b", "1", classifier="tests"),
            Dependency("org.a", "b", "1"),
        ]

        ordered = sorted(dependencies, key=dependency_sort_key)

        assert ordered == [
            Dependency("org.a", "b", "1"),
            Dependency("org.a", "b", "1", classifier="tests"),
            Dependency("org.a", "b", "2"),
            Dependency("org.a", "z", "1"),
            Dependency("org.b", "a", "1"),
        ]

    def test_missing_version_sorts_first(self) -> None:
        assert dependency_sort_key(Dependency("g", "a")) < dependency_sort_key(
            Dependency("g", "a", "0")
        )

    def test_plugin_order(self) -> None:
        plugins = [Plugin("g", "b"), Plugin("g", "a", "2"), Plugin("g", "a", "1")]

        assert sorted(plugins, key=plugin_sort_key) == [
            Plugin("g", "a", "1"),
            Plugin("g", "a", "2"),
            Plugin("g", "b"),
        ]

    def test_scope_and_optional_break_ties(self) -> None:
        compile_scope = Dependency("g", "a", "1.0", scope="compile")
        test_scope = Dependency("g", "a", "1.0", scope="test")
        optional = Dependency("g", "a", "1.0", scope="test", optional=True)

        expected = [compile_scope, test_scope, optional]

        assert sorted([optional, test_scope, compile_scope], key=dependency_sort_key) == expected
        assert sorted([compile_scope, optional, test_scope], key=dependency_sort_key) == expected

    def test_distinct_dependencies_have_distinct_keys(self) -> None:
        dependencies = {
            Dependency("g", "a", "1.0"),
            Dependency("g", "a", "1.0", type="pom"),
            Dependency("g", "a", "1.0", classifier="sources"),
            Dependency("g", "a", "1.0", scope="runtime"),
            Dependency("g", "a", "1.0", optional=True),
        }

        assert len({dependency_sort_key(d) for d in dependencies}) == len(dependencies)

    def test_plugin_dependencies_break_ties(self) -> None:
        bare = Plugin("g", "p", "1.0")
        with_junit = Plugin("g", "p", "1.0", (Dependency("junit", "junit", "4.13"),))
        with_asm = Plugin("g", "p", "1.0", (Dependency("org.ow2", "asm", "9.0"),))

        assert sorted([with_asm, with_junit, bare], key=plugin_sort_key) == [
            bare,
            with_junit,
            with_asm,
        ]
        assert sorted([bare, with_asm, with_junit], key=plugin_sort_key) == [
            bare,
            with_junit,
            with_asm,
        ]
