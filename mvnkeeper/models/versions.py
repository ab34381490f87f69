"""
Version views returned by :class:`~mvnkeeper.core.helper.VersionsHelper`.

An :class:`ArtifactVersions` wraps the filtered candidate list for one
artifact together with the comparator chosen for its coordinate. The raw
candidate order is kept as delivered by the metadata source; every ordered
query sorts a copy with the comparator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from mvnkeeper.constants import SNAPSHOT_SUFFIX
from mvnkeeper.models.artifact import Artifact, Dependency

if TYPE_CHECKING:
    from mvnkeeper.core.comparators import VersionComparator


def is_snapshot(version: str) -> bool:
    """Return True for ``-SNAPSHOT`` versions."""
    return version.endswith(SNAPSHOT_SUFFIX)


@dataclass
class ArtifactVersions:
    """Available versions of one artifact.

    Attributes:
        artifact: The artifact that was looked up.
        candidates: Versions left after the ignore filter, in source order.
        comparator: Ordering strategy for this artifact's coordinate.
        include_snapshots: Whether ``-SNAPSHOT`` versions count as candidates.
    """

    artifact: Artifact
    candidates: List[str]
    comparator: "VersionComparator"
    include_snapshots: bool = False

    def get_versions(self, include_snapshots: Optional[bool] = None) -> List[str]:
        """Return candidates sorted ascending by the comparator.

        Args:
            include_snapshots: Override :attr:`include_snapshots`.
        """
        snapshots = (
            self.include_snapshots if include_snapshots is None else include_snapshots
        )
        versions = [v for v in self.candidates if snapshots or not is_snapshot(v)]
        return sorted(versions, key=self.comparator.sort_key)

    def get_newest_version(self) -> Optional[str]:
        """Return the highest candidate, or ``None`` when there is none."""
        versions = self.get_versions()
        return versions[-1] if versions else None

    def get_newer_versions(self, current_version: Optional[str]) -> List[str]:
        """Return candidates strictly newer than ``current_version``, ascending.

        Without a current version every candidate counts as newer.
        """
        versions = self.get_versions()
        if not current_version:
            return versions
        return [
            v for v in versions if self.comparator.compare(v, current_version) > 0
        ]

    def is_update_available(self, current_version: Optional[str]) -> bool:
        return bool(self.get_newer_versions(current_version))

    def to_json(self) -> Dict[str, Any]:
        """Return a JSON-safe representation."""
        return {
            "artifact": str(self.artifact),
            "comparison_method": self.comparator.name,
            "include_snapshots": self.include_snapshots,
            "versions": self.get_versions(),
            "newest_version": self.get_newest_version(),
        }


@dataclass
class PluginUpdatesDetails:
    """Versions of a plugin plus the versions of its own dependencies.

    Attributes:
        artifact_versions: Versions of the plugin artifact itself.
        dependency_versions: Ordered mapping of each plugin dependency to
            its versions.
        include_snapshots: Whether snapshots were allowed for the lookup.
    """

    artifact_versions: ArtifactVersions
    dependency_versions: Dict[Dependency, ArtifactVersions] = field(
        default_factory=dict
    )
    include_snapshots: bool = False

    def is_artifact_update_available(self, current_version: Optional[str]) -> bool:
        return self.artifact_versions.is_update_available(current_version)

    def is_dependency_update_available(self) -> bool:
        """True when any plugin dependency has a newer version than declared."""
        return any(
            versions.is_update_available(dependency.version)
            for dependency, versions in self.dependency_versions.items()
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            "plugin": self.artifact_versions.to_json(),
            "include_snapshots": self.include_snapshots,
            "dependencies": {
                str(dependency): versions.to_json()
                for dependency, versions in self.dependency_versions.items()
            },
        }
