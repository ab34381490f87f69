"""Version-metadata sources.

A metadata source answers "which versions of this artifact exist?" for the
configured local and remote repositories. The engine only depends on the
:class:`MetadataSource` protocol; :class:`MavenMetadataSource` is the
bundled implementation reading ``maven-metadata*.xml`` documents.

Versions are returned unfiltered and unsorted: the local repository first,
then each remote repository in configuration order, keeping the first
occurrence of every version string.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Iterable, List, Protocol, Sequence, Union

from mvnkeeper.constants import LOCAL_METADATA_GLOB, MAVEN_METADATA_FILE
from mvnkeeper.exceptions import (
    FileOperationError,
    MetadataRetrievalError,
    NetworkError,
    RepositoryError,
)
from mvnkeeper.models.artifact import Artifact
from mvnkeeper.utils.filesystem import safe_read_file
from mvnkeeper.utils.http import HTTPClient
from mvnkeeper.utils.logger import get_logger
from mvnkeeper.utils.xml_utils import find_child, iter_children

logger = get_logger("metadata")

__all__ = ["MetadataSource", "MavenMetadataSource", "parse_metadata_versions"]

PathLike = Union[str, Path]


class MetadataSource(Protocol):
    """Anything able to list the available versions of an artifact."""

    async def retrieve_available_versions(
        self,
        artifact: Artifact,
        local_repository: PathLike,
        remote_repositories: Sequence[str],
    ) -> List[str]:
        ...


def parse_metadata_versions(text: str, source: str) -> List[str]:
    """Extract ``versioning/versions/version`` values from a metadata document.

    Args:
        text: XML document.
        source: File path or URL, used in error messages.

    Raises:
        MetadataRetrievalError: The document is not well-formed XML.
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        raise MetadataRetrievalError(
            f"Malformed metadata document {source}: {exc}",
            original_error=exc,
        ) from exc

    versions: List[str] = []
    versioning = find_child(root, "versioning")
    if versioning is None:
        return versions
    versions_elem = find_child(versioning, "versions")
    if versions_elem is None:
        return versions

    for version_elem in iter_children(versions_elem, "version"):
        if version_elem.text and version_elem.text.strip():
            versions.append(version_elem.text.strip())
    return versions


def _merge(target: List[str], seen: set, versions: Iterable[str]) -> None:
    for version in versions:
        if version not in seen:
            seen.add(version)
            target.append(version)


class MavenMetadataSource:
    """Read versions from repository ``maven-metadata.xml`` documents.

    Local files matching ``maven-metadata*.xml`` under
    ``<local>/<group path>/<artifactId>/`` are read first. Each remote
    repository is then asked for ``<repo>/<group path>/<artifactId>/
    maven-metadata.xml``; a ``404`` means the repository does not host the
    artifact and contributes no versions.

    Args:
        http_client: Shared client used for remote repositories.

    Example::

        >>> async with HTTPClient() as http:
        ...     source = MavenMetadataSource(http)
        ...     versions = await source.retrieve_available_versions(
        ...         artifact, "~/.m2/repository", [MAVEN_CENTRAL_URL]
        ...     )
    """

    def __init__(self, http_client: HTTPClient) -> None:
        self.http_client = http_client

    async def retrieve_available_versions(
        self,
        artifact: Artifact,
        local_repository: PathLike,
        remote_repositories: Sequence[str],
    ) -> List[str]:
        """Return every known version of ``artifact``.

        Raises:
            MetadataRetrievalError: A local document cannot be read or
                parsed, or a remote repository fails with anything other
                than ``404``.
        """
        coordinate = artifact.coordinate.key
        versions: List[str] = []
        seen: set = set()

        _merge(versions, seen, self._read_local(artifact, local_repository))

        for repository in remote_repositories:
            _merge(versions, seen, await self._fetch_remote(artifact, repository))

        logger.debug("Found %d versions for %s", len(versions), coordinate)
        return versions

    @staticmethod
    def _artifact_path(artifact: Artifact) -> str:
        return f"{artifact.group_id.replace('.', '/')}/{artifact.artifact_id}"

    def _read_local(self, artifact: Artifact, local_repository: PathLike) -> List[str]:
        directory = Path(local_repository).expanduser() / self._artifact_path(artifact)
        if not directory.is_dir():
            return []

        versions: List[str] = []
        for metadata_file in sorted(directory.glob(LOCAL_METADATA_GLOB)):
            try:
                text = safe_read_file(metadata_file)
            except FileOperationError as exc:
                raise MetadataRetrievalError(
                    f"Unable to read local metadata for "
                    f"{artifact.coordinate.key}: {exc.message}",
                    coordinates=[artifact.coordinate.key],
                    original_error=exc,
                ) from exc
            versions.extend(parse_metadata_versions(text, str(metadata_file)))
        return versions

    async def _fetch_remote(self, artifact: Artifact, repository: str) -> List[str]:
        url = (
            f"{repository.rstrip('/')}/{self._artifact_path(artifact)}/"
            f"{MAVEN_METADATA_FILE}"
        )
        try:
            text = await self.http_client.get_text(url)
        except RepositoryError as exc:
            if exc.status_code != 404:
                raise self._remote_failure(artifact, repository, exc) from exc
            logger.debug("%s not found in %s", artifact.coordinate.key, repository)
            return []
        except NetworkError as exc:
            raise self._remote_failure(artifact, repository, exc) from exc

        return parse_metadata_versions(text, url)

    @staticmethod
    def _remote_failure(
        artifact: Artifact,
        repository: str,
        exc: NetworkError,
    ) -> MetadataRetrievalError:
        return MetadataRetrievalError(
            f"Unable to retrieve metadata for {artifact.coordinate.key} "
            f"from {repository}: {exc.message}",
            coordinates=[artifact.coordinate.key],
            original_error=exc,
        )
