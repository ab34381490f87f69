"""Rule set loading for mvnkeeper.

Rules are read from a versions rules XML document::

    <ruleset comparisonMethod="maven">
      <ignoreVersions>
        <ignoreVersion type="regex">.*-beta.*</ignoreVersion>
      </ignoreVersions>
      <rules>
        <rule groupId="com.example.*" comparisonMethod="numeric">
          <ignoreVersions>
            <ignoreVersion>1.0.1</ignoreVersion>
          </ignoreVersions>
        </rule>
      </rules>
    </ruleset>

Only local files are supported, given as a path or a ``file://`` URI. Any
XML namespace is ignored. ``groupId``, ``artifactId`` and
``comparisonMethod`` may be written as attributes or as child elements.

Every wildcard pattern is compiled while loading, so a rule set that loads
can never fail later during matching.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Optional, Tuple
from urllib.parse import urlparse
from urllib.request import url2pathname

from mvnkeeper.constants import FILE_URI_SCHEME, TYPE_EXACT
from mvnkeeper.core.wildcard import compile_pattern
from mvnkeeper.exceptions import FileOperationError, RuleSetError
from mvnkeeper.models.rules import IgnoreVersion, Rule, RuleSet
from mvnkeeper.utils.filesystem import safe_read_file
from mvnkeeper.utils.logger import get_logger
from mvnkeeper.utils.xml_utils import child_text, find_child, iter_children, local_name

logger = get_logger("rules_loader")

__all__ = ["load_rule_set", "parse_rule_set", "resolve_rules_path"]


def resolve_rules_path(rules_uri: str) -> Path:
    """Turn a rules location into a local path.

    Args:
        rules_uri: Filesystem path or ``file://`` URI.

    Raises:
        RuleSetError: The URI uses any other scheme.
    """
    parsed = urlparse(rules_uri)

    # Single letters are Windows drive letters, not schemes
    if not parsed.scheme or len(parsed.scheme) == 1:
        return Path(rules_uri).expanduser()

    if parsed.scheme == FILE_URI_SCHEME:
        path = url2pathname(parsed.path)
        if parsed.netloc and parsed.netloc != "localhost":
            path = f"//{parsed.netloc}{path}"
        return Path(path)

    raise RuleSetError(
        f"Unsupported rules URI scheme '{parsed.scheme}'; "
        f"use a local path or a {FILE_URI_SCHEME}:// URI",
        rules_uri=rules_uri,
    )


def load_rule_set(rules_uri: Optional[str]) -> RuleSet:
    """Load the rule set at ``rules_uri``.

    Args:
        rules_uri: Path or ``file://`` URI. ``None`` or blank yields an
            empty rule set.

    Returns:
        The parsed, immutable :class:`RuleSet`.

    Raises:
        RuleSetError: The location is unsupported or unreadable, the
            document is malformed, or a pattern does not compile.
    """
    if rules_uri is None or not rules_uri.strip():
        return RuleSet()

    rules_uri = rules_uri.strip()
    path = resolve_rules_path(rules_uri)
    logger.debug('Going to load rules from "%s"', rules_uri)

    try:
        text = safe_read_file(path)
    except FileOperationError as exc:
        raise RuleSetError(
            f"Could not load specified rules from {rules_uri}: {exc.message}",
            rules_uri=rules_uri,
        ) from exc

    rule_set = parse_rule_set(text, rules_uri=rules_uri)
    logger.info(
        "Loaded %d rules and %d global ignore entries from %s",
        len(rule_set.rules),
        len(rule_set.ignore_versions),
        rules_uri,
    )
    return rule_set


def parse_rule_set(text: str, *, rules_uri: Optional[str] = None) -> RuleSet:
    """Parse a rules XML document.

    Raises:
        RuleSetError: Malformed XML, wrong root element, a rule without a
            groupId or a pattern that does not compile.
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        raise RuleSetError(
            f"Malformed rules document: {exc}",
            rules_uri=rules_uri,
        ) from exc

    if local_name(root.tag) != "ruleset":
        raise RuleSetError(
            f"Expected <ruleset> root element, found <{local_name(root.tag)}>",
            rules_uri=rules_uri,
        )

    rules: List[Rule] = []
    rules_elem = find_child(root, "rules")
    if rules_elem is not None:
        for index, rule_elem in enumerate(iter_children(rules_elem, "rule")):
            rules.append(_parse_rule(rule_elem, index, rules_uri))

    return RuleSet(
        rules=tuple(rules),
        ignore_versions=_parse_ignore_versions(root),
        comparison_method=_value(root, "comparisonMethod"),
    )


def _value(element: ET.Element, name: str) -> Optional[str]:
    """Attribute ``name`` if present, else the text of child ``name``."""
    attribute = element.get(name)
    if attribute is not None and attribute.strip():
        return attribute.strip()
    return child_text(element, name)


def _parse_ignore_versions(element: ET.Element) -> Tuple[IgnoreVersion, ...]:
    container = find_child(element, "ignoreVersions")
    if container is None:
        return ()

    entries: List[IgnoreVersion] = []
    for entry in iter_children(container, "ignoreVersion"):
        version = (entry.text or "").strip()
        entry_type = (entry.get("type") or TYPE_EXACT).strip()
        entries.append(IgnoreVersion(version=version, type=entry_type))
    return tuple(entries)


def _parse_rule(element: ET.Element, index: int, rules_uri: Optional[str]) -> Rule:
    group_id = _value(element, "groupId")
    if not group_id:
        raise RuleSetError(
            f"Rule #{index + 1} has no groupId",
            rules_uri=rules_uri,
        )
    artifact_id = _value(element, "artifactId") or "*"

    for pattern in (group_id, artifact_id):
        try:
            compile_pattern(pattern, True)
            compile_pattern(pattern, False)
        except RuleSetError as exc:
            raise RuleSetError(
                exc.message,
                rules_uri=rules_uri,
                pattern=pattern,
            ) from exc

    return Rule(
        group_id=group_id,
        artifact_id=artifact_id,
        comparison_method=_value(element, "comparisonMethod"),
        ignore_versions=_parse_ignore_versions(element),
    )
