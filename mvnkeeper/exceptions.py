"""
Custom exception hierarchy for mvnkeeper.

All exceptions inherit from :class:`MvnKeeperError` and carry optional
structured metadata via the ``details`` attribute, which is rendered into
``str()`` so that CLI error lines and log records show the coordinates,
files or URLs involved.

Error taxonomy:

- :class:`ConfigError` / :class:`RuleSetError`: fatal, raised before any
  lookup runs.
- :class:`NetworkError` / :class:`RepositoryError`: transport failures
  while talking to a repository.
- :class:`MetadataRetrievalError`: a version lookup failed; batch lookups
  wrap the first failure and name every coordinate of the batch.
- :class:`FileOperationError`: local file access failed.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, MutableMapping, Optional


class MvnKeeperError(Exception):
    """Base exception for all mvnkeeper errors.

    Args:
        message: Human-readable error message.
        details: Optional structured metadata describing the error.
    """

    __slots__ = ("message", "details")

    def __init__(
        self,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.message: str = message
        self.details: MutableMapping[str, Any] = dict(details) if details else {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        formatted = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({formatted})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, details={dict(self.details)!r})"
        )


def _add_if(details: MutableMapping[str, Any], key: str, value: Any) -> None:
    """Add a key to ``details`` only if ``value`` is not ``None``."""
    if value is not None:
        details[key] = value


def _truncate(text: str, max_length: int = 200) -> str:
    """Truncate long text for safe logging or error reporting."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


class ConfigError(MvnKeeperError):
    """Raised when configuration cannot be loaded or is invalid.

    Args:
        message: Error description.
        config_path: Configuration file involved.
        option: Offending option name.
    """

    __slots__ = ("config_path", "option")

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "config", config_path)
        _add_if(details, "option", option)

        super().__init__(message, details)

        self.config_path = config_path
        self.option = option


class RuleSetError(ConfigError):
    """Raised when a rule set cannot be loaded or one of its rules is malformed.

    Args:
        message: Error description.
        rules_uri: Location the rules were read from.
        pattern: Wildcard pattern that failed to compile.
    """

    __slots__ = ("rules_uri", "pattern")

    def __init__(
        self,
        message: str,
        *,
        rules_uri: Optional[str] = None,
        pattern: Optional[str] = None,
    ) -> None:
        super().__init__(message, config_path=rules_uri)

        self.rules_uri = rules_uri
        self.pattern = pattern
        if pattern is not None:
            self.details["pattern"] = pattern


class NetworkError(MvnKeeperError):
    """Raised when HTTP or network operations fail.

    Args:
        message: Error description.
        url: URL being accessed.
        status_code: HTTP status code, if available.
        response_body: Raw response body, truncated for safety.
    """

    __slots__ = ("url", "status_code", "response_body")

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "url", url)
        _add_if(details, "status_code", status_code)

        if response_body is not None:
            details["response"] = _truncate(response_body)

        super().__init__(message, details)

        self.url = url
        self.status_code = status_code
        self.response_body = response_body


class RepositoryError(NetworkError):
    """Raised when a repository answers a request with an error status.

    The HTTP client raises it for ``404`` so callers can tell "artifact not
    hosted here" apart from transport failures.
    """

    __slots__ = ()


class MetadataRetrievalError(MvnKeeperError):
    """Raised when available versions cannot be retrieved.

    Args:
        message: Error description.
        coordinates: ``groupId:artifactId`` keys the lookup covered.
        original_error: Exception that caused the failure.
    """

    __slots__ = ("coordinates", "original_error")

    def __init__(
        self,
        message: str,
        *,
        coordinates: Optional[Iterable[str]] = None,
        original_error: Optional[BaseException] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        coordinate_list = list(coordinates) if coordinates is not None else []
        if coordinate_list:
            details["coordinates"] = ", ".join(coordinate_list)
        _add_if(
            details,
            "original_error",
            repr(original_error) if original_error else None,
        )

        super().__init__(message, details)

        self.coordinates = coordinate_list
        self.original_error = original_error


class FileOperationError(MvnKeeperError):
    """Raised when file system operations fail.

    Args:
        message: Error description.
        file_path: Path to the file involved.
        operation: Operation being performed.
        original_error: Original exception that triggered this error.
    """

    __slots__ = ("file_path", "operation", "original_error")

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", file_path)
        _add_if(details, "operation", operation)
        _add_if(
            details,
            "original_error",
            str(original_error) if original_error else None,
        )

        super().__init__(message, details)

        self.file_path = file_path
        self.operation = operation
        self.original_error = original_error
