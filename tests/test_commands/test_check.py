from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Sequence, Union
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from mvnkeeper.cli import cli
from mvnkeeper.exceptions import RepositoryError
from mvnkeeper.models.artifact import Artifact

VERSIONS: Dict[str, List[str]] = {
    "junit:junit": ["4.11", "4.12", "4.13", "4.13.2", "5.0-beta-1"],
    "org.slf4j:slf4j-api": ["2.0.9"],
    "org.apache.maven.plugins:maven-compiler-plugin": ["3.8.1", "3.11.0", "3.12-SNAPSHOT"],
    "com.example:tool": ["1.0", "1.1-SNAPSHOT"],
}


class FakeMetadataSource:
    """Serves versions from a table and records the repositories asked."""

    def __init__(self, http: object) -> None:
        self.http = http
        self.repositories: Dict[str, List[str]] = {}
        self.failing: Dict[str, Exception] = {}

    async def retrieve_available_versions(
        self,
        artifact: Artifact,
        local_repository: Union[str, Path],
        remote_repositories: Sequence[str],
    ) -> List[str]:
        key = artifact.coordinate.key
        self.repositories[key] = list(remote_repositories)
        if key in self.failing:
            raise self.failing[key]
        return list(VERSIONS.get(key, []))


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("MVNKEEPER_CONFIG", raising=False)
    monkeypatch.setenv("COLUMNS", "200")
    return tmp_path


@pytest.fixture
def source() -> FakeMetadataSource:
    return FakeMetadataSource(None)


@pytest.fixture
def patched(source: FakeMetadataSource):
    """Replace the network layer of the check command."""
    with patch("mvnkeeper.commands.check.HTTPClient", MagicMock()), patch(
        "mvnkeeper.commands.check.MavenMetadataSource", return_value=source
    ):
        yield source


def _invoke(*args: str):
    return CliRunner().invoke(cli, ["check", *args])


def _json(*args: str) -> List[dict]:
    result = _invoke("--format", "json", *args)
    assert result.exit_code in (0, 1), result.output
    return json.loads(result.output)


@pytest.mark.integration
class TestCheckDependencies:
    """Tests for ``mvnkeeper check`` on dependencies."""

    def test_json_report(self, workdir: Path, patched: FakeMetadataSource) -> None:
        report = _json("junit:junit:4.12", "org.slf4j:slf4j-api:2.0.9")

        assert [entry["coordinate"] for entry in report] == [
            "junit:junit",
            "org.slf4j:slf4j-api",
        ]
        junit, slf4j = report
        assert junit["kind"] == "dependency"
        assert junit["current_version"] == "4.12"
        assert junit["newer_versions"] == ["4.13", "4.13.2", "5.0-beta-1"]
        assert junit["latest_version"] == "5.0-beta-1"
        assert junit["update_available"] is True
        assert junit["update_type"] == "major"
        assert junit["comparison_method"] == "maven"
        assert slf4j["update_available"] is False
        assert slf4j["update_type"] is None

    def test_exit_code_reflects_updates(self, workdir: Path, patched: FakeMetadataSource) -> None:
        assert _invoke("-f", "json", "junit:junit:4.12").exit_code == 1
        assert _invoke("-f", "json", "org.slf4j:slf4j-api:2.0.9").exit_code == 0

    def test_rules_filter_and_reorder(
        self, workdir: Path, patched: FakeMetadataSource
    ) -> None:
        rules = workdir / "rules.xml"
        rules.write_text(
            '<ruleset><rules><rule groupId="junit" comparisonMethod="numeric">'
            '<ignoreVersions><ignoreVersion type="regex">.*-beta.*</ignoreVersion>'
            "</ignoreVersions></rule></rules></ruleset>",
            encoding="utf-8",
        )

        (junit,) = _json("--rules", str(rules), "junit:junit:4.12")

        assert junit["newer_versions"] == ["4.13", "4.13.2"]
        assert junit["comparison_method"] == "numeric"

    def test_outdated_only(self, workdir: Path, patched: FakeMetadataSource) -> None:
        report = _json("--outdated-only", "junit:junit:4.12", "org.slf4j:slf4j-api:2.0.9")

        assert [entry["coordinate"] for entry in report] == ["junit:junit"]

    def test_all_up_to_date_message(self, workdir: Path, patched: FakeMetadataSource) -> None:
        result = _invoke("--outdated-only", "org.slf4j:slf4j-api:2.0.9")

        assert result.exit_code == 0
        assert "All artifacts are up to date!" in result.output

    def test_snapshots_hidden_unless_allowed(
        self, workdir: Path, patched: FakeMetadataSource
    ) -> None:
        (hidden,) = _json("com.example:tool:1.0")
        (shown,) = _json("--allow-snapshots", "com.example:tool:1.0")

        assert hidden["newer_versions"] == []
        assert shown["newer_versions"] == ["1.1-SNAPSHOT"]

    def test_snapshots_allowed_by_configuration(
        self, workdir: Path, patched: FakeMetadataSource
    ) -> None:
        (workdir / "mvnkeeper.toml").write_text(
            "[mvnkeeper]\nallow_snapshots = true\n", encoding="utf-8"
        )

        (entry,) = _json("com.example:tool:1.0")

        assert entry["latest_version"] == "1.1-SNAPSHOT"

    def test_configured_repositories_used(
        self, workdir: Path, patched: FakeMetadataSource
    ) -> None:
        (workdir / "mvnkeeper.toml").write_text(
            '[mvnkeeper]\nremote_repositories = ["https://repo.example/maven2"]\n',
            encoding="utf-8",
        )

        _json("junit:junit:4.12")

        assert patched.repositories["junit:junit"] == ["https://repo.example/maven2"]

    def test_unknown_artifact(self, workdir: Path, patched: FakeMetadataSource) -> None:
        (entry,) = _json("com.unknown:lib:1.0")

        assert entry["latest_version"] is None
        assert entry["update_available"] is False

    def test_table_output(self, workdir: Path, patched: FakeMetadataSource) -> None:
        result = _invoke("junit:junit:4.12", "org.slf4j:slf4j-api:2.0.9")

        assert result.exit_code == 1
        assert "Artifact Updates" in result.output
        assert "OUTDATED" in result.output
        assert "1 artifact(s) have updates available" in result.output

    def test_simple_output(self, workdir: Path, patched: FakeMetadataSource) -> None:
        result = _invoke("--format", "simple", "junit:junit:4.12")

        assert "[OUTDATED] junit:junit" in result.output
        assert "4.12" in result.output

    def test_lookup_failure(self, workdir: Path, patched: FakeMetadataSource) -> None:
        patched.failing["junit:junit"] = RepositoryError("HTTP 500", status_code=500)

        result = _invoke("-f", "json", "junit:junit:4.12", "org.slf4j:slf4j-api:2.0.9")

        assert result.exit_code == 1
        assert "Unable to acquire metadata for dependencies" in result.output

    def test_bad_rules_file(self, workdir: Path, patched: FakeMetadataSource) -> None:
        result = _invoke("--rules", str(workdir / "missing.xml"), "junit:junit:4.12")

        assert result.exit_code == 1
        assert "Could not load specified rules" in result.output
        assert patched.repositories == {}

    def test_bad_coordinate(self, workdir: Path, patched: FakeMetadataSource) -> None:
        result = _invoke("junit")

        assert result.exit_code == 2


@pytest.mark.integration
class TestCheckPlugins:
    """Tests for ``mvnkeeper check --plugins``."""

    def test_plugin_uses_plugin_repositories(
        self, workdir: Path, patched: FakeMetadataSource
    ) -> None:
        (workdir / "mvnkeeper.toml").write_text(
            "[mvnkeeper]\n"
            'remote_repositories = ["https://repo.example/maven2"]\n'
            'plugin_repositories = ["https://plugins.example/maven2"]\n',
            encoding="utf-8",
        )

        (entry,) = _json(
            "--plugins", "org.apache.maven.plugins:maven-compiler-plugin:3.8.1"
        )

        assert entry["kind"] == "plugin"
        assert entry["newer_versions"] == ["3.11.0"]
        assert patched.repositories[
            "org.apache.maven.plugins:maven-compiler-plugin"
        ] == ["https://plugins.example/maven2"]

    def test_plugin_snapshots_allowed(
        self, workdir: Path, patched: FakeMetadataSource
    ) -> None:
        (entry,) = _json(
            "--plugins",
            "--allow-snapshots",
            "org.apache.maven.plugins:maven-compiler-plugin:3.8.1",
        )

        assert entry["latest_version"] == "3.12-SNAPSHOT"

    def test_plugin_without_version(
        self, workdir: Path, patched: FakeMetadataSource
    ) -> None:
        (entry,) = _json("--plugins", "org.apache.maven.plugins:maven-compiler-plugin")

        assert entry["current_version"] is None
        assert entry["update_type"] == "new"
        assert entry["newer_versions"] == ["3.8.1", "3.11.0"]

    def test_plugin_failure_names_batch(
        self, workdir: Path, patched: FakeMetadataSource
    ) -> None:
        patched.failing["org.apache.maven.plugins:maven-compiler-plugin"] = RuntimeError(
            "connection reset"
        )

        result = _invoke(
            "--plugins", "-f", "json", "org.apache.maven.plugins:maven-compiler-plugin:3.8.1"
        )

        assert result.exit_code == 1
        assert "Unable to acquire metadata for plugins" in result.output
