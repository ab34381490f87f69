"""
Namespace-agnostic helpers over :mod:`xml.etree.ElementTree`.

Rule files may declare the versions-plugin namespace and repository
metadata usually declares none; lookups here compare local tag names only
so both parse the same way.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Iterator, Optional


def local_name(tag: str) -> str:
    """Strip a ``{namespace}`` prefix from an element tag."""
    if tag.startswith("{"):
        return tag.rsplit("}", 1)[-1]
    return tag


def iter_children(element: ET.Element, name: str) -> Iterator[ET.Element]:
    """Yield direct children of ``element`` whose local name is ``name``."""
    for child in element:
        if isinstance(child.tag, str) and local_name(child.tag) == name:
            yield child


def find_child(element: ET.Element, name: str) -> Optional[ET.Element]:
    """Return the first direct child named ``name``, or ``None``."""
    return next(iter_children(element, name), None)


def child_text(element: ET.Element, name: str) -> Optional[str]:
    """Return the stripped text of child ``name``; blank text yields ``None``."""
    child = find_child(element, name)
    if child is None or child.text is None:
        return None
    text = child.text.strip()
    return text or None
