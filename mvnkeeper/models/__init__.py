"""
Unified data model exports for mvnkeeper.

Example:
    >>> from mvnkeeper.models import Rule, RuleSet, Dependency, ArtifactVersions
"""

from __future__ import annotations

from mvnkeeper.models.rules import IgnoreVersion, Rule, RuleSet
from mvnkeeper.models.artifact import (
    Artifact,
    Coordinate,
    Dependency,
    Plugin,
    dependency_sort_key,
    plugin_sort_key,
)
from mvnkeeper.models.versions import ArtifactVersions, PluginUpdatesDetails

__all__ = [
    "IgnoreVersion",
    "Rule",
    "RuleSet",
    "Artifact",
    "Coordinate",
    "Dependency",
    "Plugin",
    "dependency_sort_key",
    "plugin_sort_key",
    "ArtifactVersions",
    "PluginUpdatesDetails",
]
