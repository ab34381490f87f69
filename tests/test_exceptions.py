from __future__ import annotations

import pytest

from mvnkeeper.exceptions import (
    ConfigError,
    FileOperationError,
    MetadataRetrievalError,
    MvnKeeperError,
    NetworkError,
    RepositoryError,
    RuleSetError,
)


@pytest.mark.unit
class TestMvnKeeperError:
    def test_message_only(self) -> None:
        exc = MvnKeeperError("Something failed")

        assert str(exc) == "Something failed"
        assert exc.details == {}

    def test_details_rendered(self) -> None:
        exc = MvnKeeperError("Something failed", {"coordinate": "g:a"})

        assert str(exc) == "Something failed (coordinate=g:a)"

    def test_details_copied(self) -> None:
        details = {"a": 1}
        exc = MvnKeeperError("x", details)
        details["b"] = 2

        assert exc.details == {"a": 1}

    def test_repr(self) -> None:
        assert repr(MvnKeeperError("x", {"k": "v"})) == (
            "MvnKeeperError(message='x', details={'k': 'v'})"
        )


@pytest.mark.unit
class TestHierarchy:
    @pytest.mark.parametrize(
        "exc_class,parent",
        [
            (ConfigError, MvnKeeperError),
            (RuleSetError, ConfigError),
            (NetworkError, MvnKeeperError),
            (RepositoryError, NetworkError),
            (MetadataRetrievalError, MvnKeeperError),
            (FileOperationError, MvnKeeperError),
        ],
    )
    def test_parent(self, exc_class: type, parent: type) -> None:
        assert issubclass(exc_class, parent)


@pytest.mark.unit
class TestConfigErrors:
    def test_config_error_details(self) -> None:
        exc = ConfigError("Bad value", config_path="mvnkeeper.toml", option="allow_snapshots")

        assert exc.details == {"config": "mvnkeeper.toml", "option": "allow_snapshots"}
        assert exc.option == "allow_snapshots"

    def test_rule_set_error_reports_uri_and_pattern(self) -> None:
        exc = RuleSetError("Invalid pattern", rules_uri="rules.xml", pattern="org.[")

        assert exc.rules_uri == "rules.xml"
        assert exc.config_path == "rules.xml"
        assert str(exc) == "Invalid pattern (config=rules.xml, pattern=org.[)"

    def test_rule_set_error_without_details(self) -> None:
        assert str(RuleSetError("No rules")) == "No rules"


@pytest.mark.unit
class TestNetworkErrors:
    def test_response_body_truncated_in_details(self) -> None:
        exc = NetworkError("HTTP 500", url="https://repo", response_body="x" * 500)

        assert exc.response_body == "x" * 500
        assert exc.details["response"] == "x" * 200 + "..."

    def test_repository_error_keeps_status(self) -> None:
        exc = RepositoryError("Resource not found", url="https://repo/x", status_code=404)

        assert exc.status_code == 404
        assert str(exc) == "Resource not found (url=https://repo/x, status_code=404)"


@pytest.mark.unit
class TestMetadataRetrievalError:
    def test_coordinates_listed(self) -> None:
        exc = MetadataRetrievalError(
            "Unable to acquire metadata", coordinates=["g:a", "g:b"]
        )

        assert exc.coordinates == ["g:a", "g:b"]
        assert exc.details["coordinates"] == "g:a, g:b"

    def test_original_error_repr(self) -> None:
        cause = TimeoutError("slow")

        exc = MetadataRetrievalError("failed", original_error=cause)

        assert exc.original_error is cause
        assert exc.details["original_error"] == repr(cause)
        assert exc.coordinates == []


@pytest.mark.unit
class TestFileOperationError:
    def test_details(self) -> None:
        exc = FileOperationError(
            "File not found", file_path="rules.xml", operation="read"
        )

        assert str(exc) == "File not found (path=rules.xml, operation=read)"
        assert exc.original_error is None
