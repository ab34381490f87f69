"""Wildcard pattern matching for rule coordinates.

Rule ``groupId``/``artifactId`` patterns use a two-character vocabulary:

- ``*`` matches zero or more characters;
- ``?`` matches exactly one character.

Every other character is literal. Each pattern is translated to a regular
expression in two flavours:

- **exact**: the translated pattern must match the whole value;
- **general**: the translated pattern followed by ``.*``, so a pattern
  also matches any value it is a prefix of (``org.apache`` matches
  ``org.apache.maven``).

:func:`specificity_score` orders patterns from most specific (``0`` for a
literal) to most general. All functions here are pure; compiled
expressions are memoized and safe to share between threads.

Example::

    >>> matches_exact("org.*", "org.apache")
    True
    >>> matches_exact("org.apache", "org.apache.maven")
    False
    >>> matches("org.apache", "org.apache.maven")
    True
    >>> specificity_score("org.*"), specificity_score("org.?pache")
    (1000, 1)
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Pattern

from mvnkeeper.exceptions import RuleSetError

__all__ = [
    "wildcard_to_regex",
    "compile_pattern",
    "matches_exact",
    "matches",
    "specificity_score",
]

#: Score contributed by each ``?`` in a pattern.
SINGLE_CHAR_SCORE = 1

#: Score contributed by each ``*`` in a pattern; dominates any run of ``?``.
MULTI_CHAR_SCORE = 1000


def wildcard_to_regex(pattern: str, exact: bool) -> str:
    """Translate a wildcard pattern to a regular expression source.

    Args:
        pattern: Wildcard pattern, e.g. ``"org.codehaus.*"``.
        exact: When ``False``, ``.*`` is appended so the pattern also
            matches longer values.

    Returns:
        Regular expression source meant for ``fullmatch``.
    """
    parts = []
    for char in pattern:
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))

    if not exact:
        parts.append(".*")

    return "".join(parts)


@lru_cache(maxsize=1024)
def compile_pattern(pattern: str, exact: bool) -> Pattern[str]:
    """Compile (and memoize) the regex for ``pattern``.

    Raises:
        RuleSetError: The translated expression does not compile.
    """
    source = wildcard_to_regex(pattern, exact)
    try:
        return re.compile(source)
    except re.error as exc:
        raise RuleSetError(
            f"Invalid wildcard pattern {pattern!r}: {exc}",
            pattern=pattern,
        ) from exc


def matches_exact(pattern: str, value: str) -> bool:
    """Return True when ``pattern`` matches the whole of ``value``."""
    return compile_pattern(pattern, True).fullmatch(value) is not None


def matches(pattern: str, value: str) -> bool:
    """Return True when ``pattern`` matches ``value`` or a prefix of it."""
    return compile_pattern(pattern, False).fullmatch(value) is not None


def specificity_score(pattern: str) -> int:
    """Return how general ``pattern`` is; lower is more specific.

    Literal characters score nothing, each ``?`` scores
    :data:`SINGLE_CHAR_SCORE` and each ``*`` scores :data:`MULTI_CHAR_SCORE`.
    """
    score = 0
    for char in pattern:
        if char == "?":
            score += SINGLE_CHAR_SCORE
        elif char == "*":
            score += MULTI_CHAR_SCORE
    return score
