"""
Centralized constants for mvnkeeper.

This module defines immutable configuration values used across mvnkeeper,
including repository locations, rule vocabulary, lookup concurrency, network
settings and logging formats. All values are intended to be treated as
read-only.
"""

from pathlib import Path
from typing import Final, Tuple

# ---------------------------------------------------------------------------
# Project metadata
# ---------------------------------------------------------------------------

#: HTTP User-Agent template used for outbound requests.
USER_AGENT_TEMPLATE: Final[str] = "mvnkeeper/{version}"

# ---------------------------------------------------------------------------
# Repositories
# ---------------------------------------------------------------------------

#: Maven Central, used when no remote repositories are configured.
MAVEN_CENTRAL_URL: Final[str] = "https://repo.maven.apache.org/maven2"

#: Default remote repositories consulted for dependency artifacts.
DEFAULT_REMOTE_REPOSITORIES: Final[Tuple[str, ...]] = (MAVEN_CENTRAL_URL,)

#: Default remote repositories consulted for plugin artifacts.
DEFAULT_PLUGIN_REPOSITORIES: Final[Tuple[str, ...]] = (MAVEN_CENTRAL_URL,)

#: Default location of the local repository.
DEFAULT_LOCAL_REPOSITORY: Final[Path] = Path.home() / ".m2" / "repository"

#: Name of the metadata document published per artifact in a repository.
MAVEN_METADATA_FILE: Final[str] = "maven-metadata.xml"

#: Glob matching metadata documents kept in the local repository.
LOCAL_METADATA_GLOB: Final[str] = "maven-metadata*.xml"

#: Version range used when an artifact declares no version.
ANY_VERSION_RANGE: Final[str] = "[0,]"

#: Suffix identifying snapshot versions.
SNAPSHOT_SUFFIX: Final[str] = "-SNAPSHOT"

#: Packaging type of build plugin artifacts.
MAVEN_PLUGIN_TYPE: Final[str] = "maven-plugin"

#: Shown in logs for a plugin declared without a version.
LATEST_VERSION_LABEL: Final[str] = "LATEST"

# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

#: Ignore-version entry matched by string equality.
TYPE_EXACT: Final[str] = "exact"

#: Ignore-version entry matched by a whole-string regular expression.
TYPE_REGEX: Final[str] = "regex"

#: Comparison method used when neither a rule nor the rule set names one.
DEFAULT_COMPARISON_METHOD: Final[str] = "maven"

#: URI scheme accepted for rule files besides plain paths.
FILE_URI_SCHEME: Final[str] = "file"

# ---------------------------------------------------------------------------
# Lookup concurrency
# ---------------------------------------------------------------------------

#: Number of workers used for every batch lookup.
LOOKUP_PARALLEL_WORKERS: Final[int] = 5

# ---------------------------------------------------------------------------
# HTTP configuration
# ---------------------------------------------------------------------------

#: Default network timeout in seconds.
DEFAULT_TIMEOUT: Final[int] = 30

#: Maximum number of retries for failed HTTP requests.
DEFAULT_MAX_RETRIES: Final[int] = 3

#: Maximum number of requests in flight per client.
DEFAULT_MAX_CONCURRENCY: Final[int] = 10

#: Consecutive 429 answers tolerated before a request is abandoned.
MAX_RATE_LIMIT_RETRIES: Final[int] = 5

#: Upper bound (seconds) on a server supplied Retry-After delay.
MAX_RETRY_AFTER: Final[int] = 60

#: Accept header sent with metadata requests.
METADATA_ACCEPT: Final[str] = "application/xml, text/xml;q=0.9, */*;q=0.1"

# ---------------------------------------------------------------------------
# Configuration defaults
# ---------------------------------------------------------------------------

#: Snapshot versions are not offered as updates unless enabled.
DEFAULT_ALLOW_SNAPSHOTS: Final[bool] = False

# ---------------------------------------------------------------------------
# Security constraints
# ---------------------------------------------------------------------------

#: Maximum allowed file size (in bytes) when reading rule or metadata files.
MAX_FILE_SIZE: Final[int] = 10 * 1024 * 1024  # 10 MB

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
