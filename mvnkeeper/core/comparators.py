"""Version comparison strategies and per-coordinate comparator selection.

Parsing of version strings is delegated to version libraries; this module
only wraps them behind one interface and maps comparison-method names (as
used in rule files) to strategies:

=========== =============================================== ============
name        ordering                                        backed by
=========== =============================================== ============
``maven``   Maven ``ComparableVersion`` ordering (default)  ``univers``
``mercury`` alias of ``maven``                              ``univers``
``numeric`` numeric-segment ordering, numbers beat words    pure Python
``pep440``  PEP 440 ordering                                ``packaging``
=========== =============================================== ============

Unknown names fall back to the default.
"""

from __future__ import annotations

import re
from functools import cmp_to_key
from typing import Any, Callable, Dict, List, Optional, Tuple

from packaging.version import InvalidVersion, Version
from univers.versions import MavenVersion

from mvnkeeper.constants import DEFAULT_COMPARISON_METHOD
from mvnkeeper.core.rule_selector import RuleSelector
from mvnkeeper.utils.logger import get_logger

logger = get_logger("comparators")

__all__ = [
    "VersionComparator",
    "MavenVersionComparator",
    "NumericVersionComparator",
    "Pep440VersionComparator",
    "ComparatorSelector",
    "get_version_comparator",
    "available_comparison_methods",
]


class VersionComparator:
    """Ordering strategy for version strings.

    Subclasses implement :meth:`sort_key`; :meth:`compare` is derived from
    it. Comparators hold no state and are shared between coordinates.
    """

    name: str = ""

    def sort_key(self, version: str) -> Any:
        raise NotImplementedError

    def compare(self, left: str, right: str) -> int:
        """Return a negative, zero or positive number like ``cmp``."""
        left_key = self.sort_key(left)
        right_key = self.sort_key(right)
        return (left_key > right_key) - (left_key < right_key)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


class MavenVersionComparator(VersionComparator):
    """Maven ordering (``1.0-alpha < 1.0-SNAPSHOT < 1.0 < 1.0-sp``)."""

    name = "maven"

    def sort_key(self, version: str) -> Tuple[int, Any]:
        try:
            return (1, MavenVersion(version))
        except (ValueError, TypeError):
            # Unparseable strings sort below every real version
            return (0, version)


class NumericVersionComparator(VersionComparator):
    """Segment-wise ordering on ``.`` and ``-`` separators.

    Numeric segments compare as integers and rank above a missing segment,
    which in turn ranks above a textual qualifier, so
    ``1.0-beta < 1.0 < 1.0.1 < 1.10``.
    """

    name = "numeric"

    _SEPARATORS = re.compile(r"[.\-]")
    _MISSING: Tuple[int, int, str] = (1, 0, "")

    def _segments(self, version: str) -> List[Tuple[int, int, str]]:
        segments = []
        for part in self._SEPARATORS.split(version.strip()):
            if part.isdigit():
                segments.append((2, int(part), ""))
            else:
                segments.append((0, 0, part.lower()))
        return segments

    def compare(self, left: str, right: str) -> int:
        left_segments = self._segments(left)
        right_segments = self._segments(right)
        for index in range(max(len(left_segments), len(right_segments))):
            a = left_segments[index] if index < len(left_segments) else self._MISSING
            b = right_segments[index] if index < len(right_segments) else self._MISSING
            if a != b:
                return -1 if a < b else 1
        return 0

    def sort_key(self, version: str) -> Any:
        return _numeric_key(version)


class Pep440VersionComparator(VersionComparator):
    """PEP 440 ordering; versions ``packaging`` rejects sort lowest."""

    name = "pep440"

    def sort_key(self, version: str) -> Tuple[int, Any]:
        try:
            return (1, Version(version))
        except InvalidVersion:
            return (0, version)


_NUMERIC = NumericVersionComparator()
_numeric_key: Callable[[str], Any] = cmp_to_key(_NUMERIC.compare)

_REGISTRY: Dict[str, VersionComparator] = {
    "maven": MavenVersionComparator(),
    "numeric": _NUMERIC,
    "pep440": Pep440VersionComparator(),
}
_ALIASES: Dict[str, str] = {"mercury": "maven"}


def available_comparison_methods() -> List[str]:
    """Return every accepted comparison-method name, sorted."""
    return sorted(set(_REGISTRY) | set(_ALIASES))


def get_version_comparator(name: Optional[str]) -> VersionComparator:
    """Resolve a comparison-method name to its strategy.

    Args:
        name: Method name as written in a rule file; case-insensitive.

    Returns:
        The registered comparator, or the default one for unknown or
        missing names.
    """
    key = (name or "").strip().lower()
    key = _ALIASES.get(key, key)
    comparator = _REGISTRY.get(key)
    if comparator is None:
        if name:
            logger.debug(
                "Unknown comparison method %r, using %r",
                name,
                DEFAULT_COMPARISON_METHOD,
            )
        comparator = _REGISTRY[DEFAULT_COMPARISON_METHOD]
    return comparator


class ComparatorSelector:
    """Pick the comparator for a coordinate.

    Resolution order: best-fit rule override, rule set default, built-in
    default.

    Args:
        selector: Rule selector shared with the rest of the engine.
    """

    def __init__(self, selector: RuleSelector) -> None:
        self.selector = selector

    def comparison_method_for(self, group_id: str, artifact_id: str) -> str:
        rule = self.selector.best_fit_rule(group_id, artifact_id)
        if rule is not None and rule.comparison_method:
            return rule.comparison_method
        if self.selector.rule_set.comparison_method:
            return self.selector.rule_set.comparison_method
        return DEFAULT_COMPARISON_METHOD

    def comparator_for(self, group_id: str, artifact_id: str) -> VersionComparator:
        return get_version_comparator(self.comparison_method_for(group_id, artifact_id))
