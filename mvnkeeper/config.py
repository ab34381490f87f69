"""Configuration file loader for mvnkeeper.

Two file formats are understood:

- ``mvnkeeper.toml`` with settings under a ``[mvnkeeper]`` table
- ``pyproject.toml`` with settings under ``[tool.mvnkeeper]``

Discovery order:

1. Explicit path from ``--config`` or ``MVNKEEPER_CONFIG``
2. ``mvnkeeper.toml`` in the current directory
3. ``pyproject.toml`` with a ``[tool.mvnkeeper]`` table

Precedence: defaults < config file < CLI options.

Example (``mvnkeeper.toml``)::

    [mvnkeeper]
    rules_uri = "file:///etc/mvnkeeper/rules.xml"
    remote_repositories = [
        "https://repo.maven.apache.org/maven2",
        "https://repo.example.com/releases",
    ]
    local_repository = "~/.m2/repository"
    allow_snapshots = false
"""

from __future__ import annotations

import tomli as tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field

from mvnkeeper.exceptions import ConfigError
from mvnkeeper.utils.logger import get_logger
from mvnkeeper.constants import (
    DEFAULT_ALLOW_SNAPSHOTS,
    DEFAULT_LOCAL_REPOSITORY,
    DEFAULT_PLUGIN_REPOSITORIES,
    DEFAULT_REMOTE_REPOSITORIES,
)

logger = get_logger("config")

_SECTION = "mvnkeeper"
_KNOWN_KEYS = frozenset(
    {
        "rules_uri",
        "remote_repositories",
        "plugin_repositories",
        "local_repository",
        "allow_snapshots",
    }
)


@dataclass
class MvnKeeperConfig:
    """Parsed and validated mvnkeeper configuration.

    Every field has a default, so an empty section is valid.

    Attributes:
        rules_uri: Path or ``file://`` URI of the rules document, or
            ``None`` for no rules.
        remote_repositories: Repositories searched for dependencies.
        plugin_repositories: Repositories searched for plugins.
        local_repository: Local repository directory.
        allow_snapshots: Offer ``-SNAPSHOT`` versions as updates.
        source_path: Path of the loaded file, or ``None`` for defaults.
    """

    rules_uri: Optional[str] = None
    remote_repositories: List[str] = field(
        default_factory=lambda: list(DEFAULT_REMOTE_REPOSITORIES)
    )
    plugin_repositories: List[str] = field(
        default_factory=lambda: list(DEFAULT_PLUGIN_REPOSITORIES)
    )
    local_repository: Path = DEFAULT_LOCAL_REPOSITORY
    allow_snapshots: bool = DEFAULT_ALLOW_SNAPSHOTS

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return the options (without ``source_path``) for debug logging."""
        return {
            "rules_uri": self.rules_uri,
            "remote_repositories": list(self.remote_repositories),
            "plugin_repositories": list(self.plugin_repositories),
            "local_repository": str(self.local_repository),
            "allow_snapshots": self.allow_snapshots,
        }


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file to load.

    Args:
        explicit_path: Path from ``--config``/``MVNKEEPER_CONFIG``. When
            given it must exist.

    Returns:
        Resolved path, or ``None`` when nothing was found.

    Raises:
        ConfigError: ``explicit_path`` does not exist.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    cwd = Path.cwd()

    mvnkeeper_toml = cwd / "mvnkeeper.toml"
    if mvnkeeper_toml.is_file():
        logger.debug("Found mvnkeeper.toml: %s", mvnkeeper_toml)
        return mvnkeeper_toml

    pyproject_toml = cwd / "pyproject.toml"
    if pyproject_toml.is_file() and _pyproject_has_section(pyproject_toml):
        logger.debug("Found [tool.mvnkeeper] in pyproject.toml: %s", pyproject_toml)
        return pyproject_toml

    logger.debug("No configuration file found")
    return None


def _pyproject_has_section(path: Path) -> bool:
    """Return True when ``pyproject.toml`` has a ``[tool.mvnkeeper]`` table.

    An unreadable or invalid file counts as "no section"; it is not ours to
    report.
    """
    try:
        raw = _read_toml(path)
    except ConfigError:
        return False
    return _SECTION in raw.get("tool", {})


def load_config(config_path: Optional[Path] = None) -> MvnKeeperConfig:
    """Load and validate the mvnkeeper configuration.

    Args:
        config_path: Explicit file; ``None`` triggers discovery.

    Returns:
        Validated :class:`MvnKeeperConfig`, or defaults when no file exists.

    Raises:
        ConfigError: Unreadable file, invalid TOML, unknown keys or values
            of the wrong type.
    """
    resolved = discover_config_file(config_path)

    if resolved is None:
        logger.debug("No config file found, using defaults")
        return MvnKeeperConfig()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    if resolved.name == "pyproject.toml":
        section = raw.get("tool", {}).get(_SECTION, {})
    else:
        section = raw.get(_SECTION, {})

    if not section:
        logger.debug("Config file has no mvnkeeper section, using defaults")
        return MvnKeeperConfig(source_path=resolved)

    config = _parse_section(section, config_path=str(resolved))
    config.source_path = resolved

    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    """Parse a TOML file.

    Raises:
        ConfigError: The file cannot be read or is not valid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


_TYPE_NAMES = {bool: "boolean", str: "string", list: "list"}


def _require_type(value: Any, expected: type, option: str, config_path: str) -> None:
    if not isinstance(value, expected):
        raise ConfigError(
            f"{option} must be a {_TYPE_NAMES[expected]}, got {type(value).__name__}",
            config_path=config_path,
            option=option,
        )


def _string_list(value: Any, option: str, config_path: str) -> List[str]:
    _require_type(value, list, option, config_path)
    for item in value:
        if not isinstance(item, str) or not item.strip():
            raise ConfigError(
                f"{option} must contain non-empty strings, got {item!r}",
                config_path=config_path,
                option=option,
            )
    return [item.strip() for item in value]


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> MvnKeeperConfig:
    """Validate a ``[mvnkeeper]`` / ``[tool.mvnkeeper]`` table.

    Raises:
        ConfigError: Unknown keys or values of the wrong type.
    """
    config = MvnKeeperConfig()

    unknown = set(section.keys()) - _KNOWN_KEYS
    if unknown:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown))}",
            config_path=config_path,
        )

    if "rules_uri" in section:
        val = section["rules_uri"]
        _require_type(val, str, "rules_uri", config_path)
        config.rules_uri = val.strip() or None

    if "remote_repositories" in section:
        config.remote_repositories = _string_list(
            section["remote_repositories"], "remote_repositories", config_path
        )

    if "plugin_repositories" in section:
        config.plugin_repositories = _string_list(
            section["plugin_repositories"], "plugin_repositories", config_path
        )

    if "local_repository" in section:
        val = section["local_repository"]
        _require_type(val, str, "local_repository", config_path)
        config.local_repository = Path(val).expanduser()

    if "allow_snapshots" in section:
        val = section["allow_snapshots"]
        _require_type(val, bool, "allow_snapshots", config_path)
        config.allow_snapshots = val

    return config
