"""
Version-policy rule model for mvnkeeper.

A :class:`RuleSet` is loaded once (see :mod:`mvnkeeper.core.rules_loader`)
and is read-only afterwards, so every model here is a frozen dataclass that
can be shared between lookup workers without locking.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from mvnkeeper.constants import TYPE_EXACT, TYPE_REGEX

VALID_IGNORE_TYPES: Tuple[str, ...] = (TYPE_EXACT, TYPE_REGEX)


@dataclass(frozen=True)
class IgnoreVersion:
    """A version excluded from update candidates.

    Attributes:
        version: Literal version (``exact``) or regular expression (``regex``).
        type: Matching mode. Anything other than ``exact`` or ``regex`` is
            invalid; such entries are reported and never applied.
    """

    version: str
    type: str = TYPE_EXACT

    @property
    def is_valid(self) -> bool:
        """Whether ``type`` is one of the supported matching modes."""
        return self.type in VALID_IGNORE_TYPES

    def __str__(self) -> str:
        return f"{self.type}:{self.version}"


@dataclass(frozen=True)
class Rule:
    """Policy bound to a ``groupId``/``artifactId`` wildcard pair.

    Attributes:
        group_id: Wildcard pattern for the groupId.
        artifact_id: Wildcard pattern for the artifactId.
        comparison_method: Comparison method override, or ``None`` to use
            the rule set default.
        ignore_versions: Versions ignored for coordinates this rule fits.
    """

    group_id: str
    artifact_id: str = "*"
    comparison_method: Optional[str] = None
    ignore_versions: Tuple[IgnoreVersion, ...] = ()

    def __str__(self) -> str:
        return f"Rule[{self.group_id}:{self.artifact_id}]"


@dataclass(frozen=True)
class RuleSet:
    """Ordered rules plus global defaults.

    Attributes:
        rules: Rules in the order they were loaded; order matters for
            tie-breaking during best-fit selection.
        ignore_versions: Versions ignored for every coordinate.
        comparison_method: Default comparison method, or ``None`` for the
            built-in default.
    """

    rules: Tuple[Rule, ...] = ()
    ignore_versions: Tuple[IgnoreVersion, ...] = ()
    comparison_method: Optional[str] = None

    def __len__(self) -> int:
        return len(self.rules)
