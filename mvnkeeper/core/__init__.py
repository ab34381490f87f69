"""
Core functionality exports for mvnkeeper.

Importing from here keeps user-facing imports short:

    from mvnkeeper.core import VersionsHelper, load_rule_set
"""

from __future__ import annotations

from mvnkeeper.core.wildcard import matches, matches_exact, specificity_score
from mvnkeeper.core.rule_selector import BestFitCache, RuleSelector
from mvnkeeper.core.ignore_filter import IgnoredVersionFilter
from mvnkeeper.core.comparators import (
    ComparatorSelector,
    VersionComparator,
    get_version_comparator,
)
from mvnkeeper.core.resolver import ConcurrentUpdateResolver
from mvnkeeper.core.rules_loader import load_rule_set
from mvnkeeper.core.metadata import MavenMetadataSource, MetadataSource
from mvnkeeper.core.helper import VersionsHelper

__all__ = [
    "matches",
    "matches_exact",
    "specificity_score",
    "BestFitCache",
    "RuleSelector",
    "IgnoredVersionFilter",
    "ComparatorSelector",
    "VersionComparator",
    "get_version_comparator",
    "ConcurrentUpdateResolver",
    "load_rule_set",
    "MavenMetadataSource",
    "MetadataSource",
    "VersionsHelper",
]
