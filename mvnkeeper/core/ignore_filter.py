"""Ignored-version filtering for mvnkeeper.

The effective ignore list of a coordinate is the rule set's global entries
followed by the entries of the coordinate's best-fit rule. Entries with an
unknown type, or ``regex`` entries that do not compile, are logged as
warnings and left out; they never remove a version and never abort a lookup.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import List, Optional, Pattern, Sequence

from mvnkeeper.constants import TYPE_EXACT, TYPE_REGEX
from mvnkeeper.core.rule_selector import RuleSelector
from mvnkeeper.models.rules import IgnoreVersion, Rule
from mvnkeeper.utils.logger import get_logger

logger = get_logger("ignore_filter")

__all__ = ["IgnoredVersionFilter"]


@lru_cache(maxsize=512)
def _compile_ignore_regex(expression: str) -> Pattern[str]:
    return re.compile(expression)


class IgnoredVersionFilter:
    """Collect effective ignore entries and strip matching candidates.

    Args:
        selector: Rule selector shared with the rest of the engine.
    """

    def __init__(self, selector: RuleSelector) -> None:
        self.selector = selector

    def ignored_versions_for(
        self,
        group_id: str,
        artifact_id: str,
    ) -> List[IgnoreVersion]:
        """Return the valid ignore entries for a coordinate, globals first."""
        effective: List[IgnoreVersion] = []

        for entry in self.selector.rule_set.ignore_versions:
            if self._accept(entry, None):
                effective.append(entry)

        rule = self.selector.best_fit_rule(group_id, artifact_id)
        if rule is not None:
            for entry in rule.ignore_versions:
                if self._accept(entry, rule):
                    effective.append(entry)

        return effective

    def apply(
        self,
        candidates: List[str],
        ignored_versions: Sequence[IgnoreVersion],
        coordinate: Optional[str] = None,
    ) -> List[str]:
        """Remove ignored versions from ``candidates`` in place.

        Survivors keep their relative order. The first entry matching a
        candidate removes it. Entries that cannot be applied, such as a
        ``regex`` entry that does not compile, are warned about and skipped.

        Args:
            candidates: Versions as returned by the metadata source.
            ignored_versions: Effective entries from
                :meth:`ignored_versions_for`.
            coordinate: ``groupId:artifactId`` used in debug messages.

        Returns:
            ``candidates`` itself, after filtering.
        """
        usable = [
            entry
            for entry in ignored_versions
            if self._accept(entry, None, coordinate)
        ]
        if not usable:
            return candidates

        kept: List[str] = []
        for version in candidates:
            entry = self._first_match(version, usable)
            if entry is None:
                kept.append(version)
            else:
                logger.debug(
                    "Version %s for %s found on ignore list: %s",
                    version,
                    coordinate or "<artifact>",
                    entry,
                )

        candidates[:] = kept
        return candidates

    @staticmethod
    def _first_match(
        version: str,
        ignored_versions: Sequence[IgnoreVersion],
    ) -> Optional[IgnoreVersion]:
        for entry in ignored_versions:
            if entry.type == TYPE_EXACT:
                if version == entry.version:
                    return entry
            elif entry.type == TYPE_REGEX:
                if _compile_ignore_regex(entry.version).fullmatch(version):
                    return entry
        return None

    @staticmethod
    def _accept(
        entry: IgnoreVersion,
        rule: Optional[Rule],
        coordinate: Optional[str] = None,
    ) -> bool:
        """Return True when ``entry`` can be applied, warning otherwise."""
        if rule is not None:
            owner = str(rule)
        elif coordinate is not None:
            owner = f"ignoreVersion of {coordinate}"
        else:
            owner = "global ignoreVersion"

        if not entry.is_valid:
            logger.warning(
                "The type attribute '%s' for %s [%s] is not valid. "
                "Please use either '%s' or '%s'.",
                entry.type,
                owner,
                entry.version,
                TYPE_EXACT,
                TYPE_REGEX,
            )
            return False

        if entry.type == TYPE_REGEX:
            try:
                _compile_ignore_regex(entry.version)
            except re.error as exc:
                logger.warning(
                    "Ignoring invalid regex '%s' for %s: %s",
                    entry.version,
                    owner,
                    exc,
                )
                return False

        return True
