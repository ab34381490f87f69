"""
Coordinate, dependency and plugin models for mvnkeeper.

``Dependency`` and ``Plugin`` are hashable so they can key the ordered result
mappings of batch lookups; :func:`dependency_sort_key` and
:func:`plugin_sort_key` give those mappings a total, deterministic order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple

from mvnkeeper.constants import SNAPSHOT_SUFFIX


@dataclass(frozen=True)
class Coordinate:
    """A versionless ``groupId:artifactId`` pair."""

    group_id: str
    artifact_id: str

    @property
    def key(self) -> str:
        """``"groupId:artifactId"``, the rule cache key."""
        return f"{self.group_id}:{self.artifact_id}"

    @classmethod
    def parse(cls, value: str) -> "Coordinate":
        """Parse ``groupId:artifactId``; anything after a second colon is ignored.

        Raises:
            ValueError: ``value`` lacks a groupId or artifactId.
        """
        parts = value.strip().split(":")
        if len(parts) < 2 or not parts[0] or not parts[1]:
            raise ValueError(f"Expected groupId:artifactId, got {value!r}")
        return cls(parts[0], parts[1])

    def __str__(self) -> str:
        return self.key


@dataclass(frozen=True)
class Artifact:
    """The target of a version lookup.

    Attributes:
        group_id: Artifact groupId.
        artifact_id: Artifact artifactId.
        version: Version or version range the artifact was requested with.
        type: Packaging type (``jar``, ``maven-plugin``, ...).
        classifier: Optional classifier.
        scope: Optional dependency scope.
        optional: Whether the dependency is optional.
    """

    group_id: str
    artifact_id: str
    version: str
    type: str = "jar"
    classifier: Optional[str] = None
    scope: Optional[str] = None
    optional: bool = False

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.group_id, self.artifact_id)

    def __str__(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.type}:{self.version}"


@dataclass(frozen=True)
class Dependency:
    """A dependency as declared by a project or a plugin.

    Attributes:
        group_id: Dependency groupId.
        artifact_id: Dependency artifactId.
        version: Declared version, or ``None`` when managed elsewhere.
        type: Packaging type.
        classifier: Optional classifier.
        scope: Optional scope.
        optional: Optional flag.
    """

    group_id: str
    artifact_id: str
    version: Optional[str] = None
    type: str = "jar"
    classifier: Optional[str] = None
    scope: Optional[str] = None
    optional: bool = False

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.group_id, self.artifact_id)

    @property
    def is_snapshot(self) -> bool:
        return bool(self.version) and self.version.endswith(SNAPSHOT_SUFFIX)

    @classmethod
    def parse(cls, value: str) -> "Dependency":
        """Parse ``groupId:artifactId[:version]``.

        Raises:
            ValueError: ``value`` lacks a groupId or artifactId.
        """
        coordinate = Coordinate.parse(value)
        parts = value.strip().split(":")
        version = parts[2] if len(parts) > 2 and parts[2] else None
        return cls(coordinate.group_id, coordinate.artifact_id, version)

    def __str__(self) -> str:
        return f"{self.coordinate.key}:{self.version or '?'}"


@dataclass(frozen=True)
class Plugin:
    """A build plugin together with the dependencies it declares.

    Attributes:
        group_id: Plugin groupId.
        artifact_id: Plugin artifactId.
        version: Declared version, or ``None``.
        dependencies: Dependencies declared inside the plugin element.
    """

    group_id: str
    artifact_id: str
    version: Optional[str] = None
    dependencies: Tuple[Dependency, ...] = ()

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.group_id, self.artifact_id)

    @classmethod
    def parse(cls, value: str) -> "Plugin":
        """Parse ``groupId:artifactId[:version]`` into a plugin without dependencies."""
        dependency = Dependency.parse(value)
        return cls(dependency.group_id, dependency.artifact_id, dependency.version)

    def __str__(self) -> str:
        return f"{self.coordinate.key}:{self.version or '?'}"


def dependency_sort_key(dependency: Dependency) -> Tuple[Any, ...]:
    """Total ordering for dependencies.

    Every field takes part, so two distinct dependencies never compare equal
    and batch results do not depend on lookup completion order.
    """
    return (
        dependency.group_id,
        dependency.artifact_id,
        dependency.version or "",
        dependency.type or "",
        dependency.classifier or "",
        dependency.scope or "",
        dependency.optional,
    )


def plugin_sort_key(plugin: Plugin) -> Tuple[Any, ...]:
    """Total ordering for plugins: coordinate and version, then declared dependencies."""
    return (
        plugin.group_id,
        plugin.artifact_id,
        plugin.version or "",
        tuple(dependency_sort_key(dependency) for dependency in plugin.dependencies),
    )
