"""
Version classification helpers for mvnkeeper reports.

Ordering always comes from the coordinate's
:class:`~mvnkeeper.core.comparators.VersionComparator`; this module only
decides *how big* an update is by comparing the leading numeric segments.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Optional, Tuple

if TYPE_CHECKING:
    from mvnkeeper.core.comparators import VersionComparator

_LEADING_NUMBERS = re.compile(r"^(\d+)(?:\.(\d+))?(?:\.(\d+))?")


def get_update_type(
    current_version: Optional[str],
    target_version: Optional[str],
    comparator: VersionComparator,
) -> str:
    """Determine the update type between two versions.

    Args:
        current_version: Version currently declared, or ``None``.
        target_version: Candidate version.
        comparator: Ordering strategy for the coordinate.

    Returns:
        One of ``"new"``, ``"same"``, ``"downgrade"``, ``"major"``,
        ``"minor"``, ``"patch"``, ``"update"`` or ``"unknown"``.

    Examples:
        >>> from mvnkeeper.core.comparators import get_version_comparator
        >>> maven = get_version_comparator("maven")
        >>> get_update_type("1.0.0", "2.0.0", maven)
        'major'
        >>> get_update_type(None, "1.0.0", maven)
        'new'
        >>> get_update_type("1.2.3", "1.2.3", maven)
        'same'
    """
    if target_version is None:
        return "unknown"

    if current_version is None:
        return "new"

    order = comparator.compare(target_version, current_version)
    if order == 0:
        return "same"
    if order < 0:
        return "downgrade"

    current = _release_segments(current_version)
    target = _release_segments(target_version)
    if current is None or target is None:
        return "update"

    return _classify_upgrade(current, target)


def _release_segments(version: str) -> Optional[Tuple[int, int, int]]:
    """Return ``(major, minor, patch)`` from the leading numbers of ``version``."""
    match = _LEADING_NUMBERS.match(version)
    if not match:
        return None
    major, minor, patch = match.groups()
    return int(major), int(minor or 0), int(patch or 0)


def _classify_upgrade(
    current: Tuple[int, int, int],
    target: Tuple[int, int, int],
) -> str:
    """Classify an upgrade between two release triples."""
    if current[0] != target[0]:
        return "major"

    if current[1] != target[1]:
        return "minor"

    if current[2] != target[2]:
        return "patch"

    # Qualifier-only changes such as 1.0-beta-1 -> 1.0
    return "update"
