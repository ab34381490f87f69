"""Version-policy engine for mvnkeeper.

:class:`VersionsHelper` ties the rule set to a metadata source. It owns one
:class:`~mvnkeeper.core.rule_selector.RuleSelector` (and therefore one
best-fit cache) for its whole lifetime; construct one helper per run and
pass it to whatever needs it.

Single lookups retrieve the versions of one artifact, drop ignored ones and
attach the comparator chosen for the coordinate. Batch lookups run the
single lookups through a :class:`ConcurrentUpdateResolver` and return
mappings ordered by coordinate.

Typical usage::

    async with HTTPClient() as http:
        helper = VersionsHelper(
            load_rule_set("file:///etc/mvnkeeper/rules.xml"),
            MavenMetadataSource(http),
        )
        updates = await helper.lookup_dependencies_updates(
            {Dependency("junit", "junit", "4.12")},
            use_plugin_repositories=False,
        )
        for dependency, versions in updates.items():
            print(dependency, versions.get_newer_versions(dependency.version))
"""

from __future__ import annotations

from functools import partial
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Union

from mvnkeeper.constants import (
    ANY_VERSION_RANGE,
    DEFAULT_LOCAL_REPOSITORY,
    DEFAULT_PLUGIN_REPOSITORIES,
    DEFAULT_REMOTE_REPOSITORIES,
    LATEST_VERSION_LABEL,
    MAVEN_PLUGIN_TYPE,
)
from mvnkeeper.core.comparators import ComparatorSelector, VersionComparator
from mvnkeeper.core.ignore_filter import IgnoredVersionFilter
from mvnkeeper.core.metadata import MetadataSource
from mvnkeeper.core.resolver import ConcurrentUpdateResolver
from mvnkeeper.core.rule_selector import RuleSelector
from mvnkeeper.models.artifact import (
    Artifact,
    Coordinate,
    Dependency,
    Plugin,
    dependency_sort_key,
    plugin_sort_key,
)
from mvnkeeper.models.rules import IgnoreVersion, Rule, RuleSet
from mvnkeeper.models.versions import ArtifactVersions, PluginUpdatesDetails
from mvnkeeper.utils.logger import get_logger

logger = get_logger("helper")

__all__ = ["VersionsHelper"]

HasCoordinate = Union[Artifact, Coordinate, Dependency, Plugin]


def _coordinate_key(item: Union[Dependency, Plugin]) -> str:
    return item.coordinate.key


class VersionsHelper:
    """Rule-aware version lookups for dependencies and plugins.

    Args:
        rule_set: Rules governing ignore lists and comparison methods.
        metadata_source: Where available versions come from.
        remote_repositories: Repositories searched for dependencies.
        plugin_repositories: Repositories searched for plugins.
        local_repository: Local repository directory.
        resolver: Batch resolver; a default five-worker one is created
            when omitted.
    """

    def __init__(
        self,
        rule_set: RuleSet,
        metadata_source: MetadataSource,
        *,
        remote_repositories: Sequence[str] = DEFAULT_REMOTE_REPOSITORIES,
        plugin_repositories: Sequence[str] = DEFAULT_PLUGIN_REPOSITORIES,
        local_repository: Union[str, Path] = DEFAULT_LOCAL_REPOSITORY,
        resolver: Optional[ConcurrentUpdateResolver] = None,
    ) -> None:
        self.rule_set = rule_set
        self.metadata_source = metadata_source
        self.remote_repositories: List[str] = list(remote_repositories)
        self.plugin_repositories: List[str] = list(plugin_repositories)
        self.local_repository = local_repository

        self.selector = RuleSelector(rule_set)
        self.ignore_filter = IgnoredVersionFilter(self.selector)
        self.comparator_selector = ComparatorSelector(self.selector)
        self.resolver = resolver if resolver is not None else ConcurrentUpdateResolver()

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def best_fit_rule(self, group_id: str, artifact_id: str) -> Optional[Rule]:
        """Return the rule governing ``groupId:artifactId``, or ``None``."""
        return self.selector.best_fit_rule(group_id, artifact_id)

    def get_ignored_versions(self, artifact: HasCoordinate) -> List[IgnoreVersion]:
        """Return the effective ignore entries for ``artifact``'s coordinate."""
        return self.ignore_filter.ignored_versions_for(
            artifact.group_id, artifact.artifact_id
        )

    def get_version_comparator(
        self,
        group_id: str,
        artifact_id: str,
    ) -> VersionComparator:
        return self.comparator_selector.comparator_for(group_id, artifact_id)

    # ------------------------------------------------------------------
    # Artifact factories
    # ------------------------------------------------------------------

    @staticmethod
    def create_dependency_artifact(dependency: Dependency) -> Artifact:
        """Build the lookup artifact for a dependency.

        A blank version becomes the open range ``[0,]``.
        """
        version = dependency.version
        return Artifact(
            group_id=dependency.group_id,
            artifact_id=dependency.artifact_id,
            version=version if version and version.strip() else ANY_VERSION_RANGE,
            type=dependency.type or "jar",
            classifier=dependency.classifier,
            scope=dependency.scope,
            optional=dependency.optional,
        )

    @staticmethod
    def create_plugin_artifact(
        group_id: str,
        artifact_id: str,
        version: Optional[str],
    ) -> Artifact:
        """Build the lookup artifact for a plugin; blank versions become ``[0,]``."""
        return Artifact(
            group_id=group_id,
            artifact_id=artifact_id,
            version=version if version and version.strip() else ANY_VERSION_RANGE,
            type=MAVEN_PLUGIN_TYPE,
        )

    # ------------------------------------------------------------------
    # Single lookups
    # ------------------------------------------------------------------

    async def lookup_artifact_versions(
        self,
        artifact: Artifact,
        use_plugin_repositories: bool,
    ) -> ArtifactVersions:
        """Retrieve, filter and wrap the versions of one artifact.

        Args:
            artifact: Lookup target.
            use_plugin_repositories: Search the plugin repositories instead
                of the dependency repositories.

        Returns:
            :class:`ArtifactVersions` holding the non-ignored candidates in
            source order and the coordinate's comparator.

        Raises:
            MetadataRetrievalError: The metadata source failed.
        """
        repositories = (
            self.plugin_repositories
            if use_plugin_repositories
            else self.remote_repositories
        )
        candidates = await self.metadata_source.retrieve_available_versions(
            artifact, self.local_repository, repositories
        )
        candidates = list(candidates)

        ignored = self.get_ignored_versions(artifact)
        if ignored:
            logger.debug(
                "Found ignored versions: %s", ", ".join(str(e) for e in ignored)
            )
            self.ignore_filter.apply(candidates, ignored, artifact.coordinate.key)

        return ArtifactVersions(
            artifact=artifact,
            candidates=candidates,
            comparator=self.get_version_comparator(
                artifact.group_id, artifact.artifact_id
            ),
        )

    async def lookup_artifact_updates(
        self,
        artifact: Artifact,
        allow_snapshots: bool,
        use_plugin_repositories: bool,
    ) -> ArtifactVersions:
        artifact_versions = await self.lookup_artifact_versions(
            artifact, use_plugin_repositories
        )
        artifact_versions.include_snapshots = allow_snapshots
        return artifact_versions

    async def lookup_dependency_updates(
        self,
        dependency: Dependency,
        use_plugin_repositories: bool,
    ) -> ArtifactVersions:
        logger.debug(
            "Checking %s for updates newer than %s",
            dependency.coordinate.key,
            dependency.version,
        )
        return await self.lookup_artifact_versions(
            self.create_dependency_artifact(dependency), use_plugin_repositories
        )

    async def lookup_plugin_updates(
        self,
        plugin: Plugin,
        allow_snapshots: bool,
    ) -> PluginUpdatesDetails:
        """Look up a plugin and, as a nested batch, its own dependencies.

        The plugin is searched in the plugin repositories; its dependencies
        are searched in the dependency repositories.
        """
        logger.debug(
            "Checking %s for updates newer than %s",
            plugin.coordinate.key,
            plugin.version or LATEST_VERSION_LABEL,
        )

        plugin_versions = await self.lookup_artifact_versions(
            self.create_plugin_artifact(
                plugin.group_id, plugin.artifact_id, plugin.version
            ),
            True,
        )
        dependency_versions = await self.lookup_dependencies_updates(
            plugin.dependencies, False
        )

        return PluginUpdatesDetails(
            artifact_versions=plugin_versions,
            dependency_versions=dependency_versions,
            include_snapshots=allow_snapshots,
        )

    # ------------------------------------------------------------------
    # Batch lookups
    # ------------------------------------------------------------------

    async def lookup_dependencies_updates(
        self,
        dependencies: Iterable[Dependency],
        use_plugin_repositories: bool,
    ) -> Dict[Dependency, ArtifactVersions]:
        """Look up many dependencies concurrently.

        Returns:
            Mapping ordered by groupId, artifactId, version, type and
            classifier.

        Raises:
            MetadataRetrievalError: Any lookup failed; no partial results.
        """
        return await self.resolver.resolve_batch(
            dependencies,
            partial(
                self.lookup_dependency_updates,
                use_plugin_repositories=use_plugin_repositories,
            ),
            sort_key=dependency_sort_key,
            label="dependencies",
            describe=_coordinate_key,
        )

    async def lookup_plugins_updates(
        self,
        plugins: Iterable[Plugin],
        allow_snapshots: bool,
    ) -> Dict[Plugin, PluginUpdatesDetails]:
        """Look up many plugins concurrently.

        Returns:
            Mapping ordered by groupId, artifactId and version.

        Raises:
            MetadataRetrievalError: Any plugin lookup, or any nested
                dependency lookup, failed.
        """
        return await self.resolver.resolve_batch(
            plugins,
            partial(self.lookup_plugin_updates, allow_snapshots=allow_snapshots),
            sort_key=plugin_sort_key,
            label="plugins",
            describe=_coordinate_key,
        )
