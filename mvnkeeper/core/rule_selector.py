"""Best-fit rule selection for mvnkeeper.

:class:`RuleSelector` answers "which rule of the rule set governs
``groupId:artifactId``?" and memoizes every answer in a
:class:`BestFitCache` owned by the selector instance.

Tie-break rules, in priority order:

1. a more specific groupId pattern (lower wildcard score) wins;
2. within a groupId tier, an exact groupId match beats a wildcard one;
3. the artifactId pattern then decides within the groupId tier, using the
   same specificity and exactness rules;
4. among rules that are still equal, the one scanned last wins.

Typical usage::

    selector = RuleSelector(rule_set)
    rule = selector.best_fit_rule("org.apache.maven", "maven-core")
    if rule is None:
        ...  # fall back to rule set defaults
"""

from __future__ import annotations

import sys
import threading
from typing import Dict, Optional, Tuple

from mvnkeeper.models.rules import Rule, RuleSet
from mvnkeeper.utils.logger import get_logger
from mvnkeeper.core.wildcard import matches, matches_exact, specificity_score

logger = get_logger("rule_selector")

__all__ = ["BestFitCache", "RuleSelector"]

# Worse than any real wildcard score
_WORST_SCORE = sys.maxsize


class BestFitCache:
    """Thread-safe ``"groupId:artifactId"`` → rule mapping.

    ``None`` is a legitimate cached value meaning "no rule applies", so
    lookups report hits separately from values. Entries are never
    invalidated; the first value stored for a key wins so that racing
    workers converge on one answer.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, Optional[Rule]] = {}
        self._lock = threading.Lock()

    def lookup(self, key: str) -> Tuple[bool, Optional[Rule]]:
        """Return ``(hit, rule)`` for ``key``."""
        with self._lock:
            if key in self._entries:
                return True, self._entries[key]
        return False, None

    def store(self, key: str, rule: Optional[Rule]) -> Optional[Rule]:
        """Store ``rule`` unless ``key`` is already cached; return the cached value."""
        with self._lock:
            return self._entries.setdefault(key, rule)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class RuleSelector:
    """Select and memoize the best-fitting rule per coordinate.

    Args:
        rule_set: The immutable rule set to select from.
        cache: Cache to populate; a fresh one is created when omitted.
    """

    def __init__(
        self,
        rule_set: RuleSet,
        cache: Optional[BestFitCache] = None,
    ) -> None:
        self.rule_set = rule_set
        self.cache = cache if cache is not None else BestFitCache()

    def best_fit_rule(self, group_id: str, artifact_id: str) -> Optional[Rule]:
        """Return the rule that best fits the coordinate, or ``None``.

        Args:
            group_id: Coordinate groupId.
            artifact_id: Coordinate artifactId.

        Returns:
            The selected :class:`Rule`; ``None`` means the rule set defaults
            apply.
        """
        key = f"{group_id}:{artifact_id}"
        hit, cached = self.cache.lookup(key)
        if hit:
            return cached

        best_fit = self._scan(group_id, artifact_id)
        logger.debug("Best-fit rule for %s: %s", key, best_fit)
        return self.cache.store(key, best_fit)

    def _scan(self, group_id: str, artifact_id: str) -> Optional[Rule]:
        """Single pass over the rules in load order."""
        best_fit: Optional[Rule] = None
        best_group_score = _WORST_SCORE
        best_artifact_score = _WORST_SCORE
        exact_group_id = False
        exact_artifact_id = False

        for rule in self.rule_set.rules:
            group_score = specificity_score(rule.group_id)
            if group_score > best_group_score:
                continue

            exact = matches_exact(rule.group_id, group_id)
            matched = exact or matches(rule.group_id, group_id)
            if not matched or (exact_group_id and not exact):
                continue

            # A more specific groupId tier invalidates artifactId comparisons
            # made under a less specific one.
            if best_group_score > group_score:
                best_artifact_score = _WORST_SCORE
                exact_artifact_id = False
            best_group_score = group_score

            if exact and not exact_group_id:
                exact_group_id = True
                best_artifact_score = _WORST_SCORE
                exact_artifact_id = False

            artifact_score = specificity_score(rule.artifact_id)
            if artifact_score > best_artifact_score:
                continue

            exact = matches_exact(rule.artifact_id, artifact_id)
            matched = exact or matches(rule.artifact_id, artifact_id)
            if not matched or (exact_artifact_id and not exact):
                continue

            best_artifact_score = artifact_score
            if exact and not exact_artifact_id:
                exact_artifact_id = True

            best_fit = rule

        return best_fit
