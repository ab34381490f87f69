from __future__ import annotations

import logging
from pathlib import Path

import pytest

from mvnkeeper.core.rules_loader import load_rule_set, parse_rule_set, resolve_rules_path
from mvnkeeper.exceptions import RuleSetError
from mvnkeeper.models.rules import IgnoreVersion, Rule, RuleSet

RULES_XML = """\
<?xml version="1.0" encoding="UTF-8"?>
<ruleset comparisonMethod="maven"
         xmlns="http://mojo.codehaus.org/versions-maven-plugin/rule/2.0.0">
  <ignoreVersions>
    <ignoreVersion type="regex">.*-beta.*</ignoreVersion>
    <ignoreVersion>0.9</ignoreVersion>
  </ignoreVersions>
  <rules>
    <rule groupId="com.example.*" comparisonMethod="numeric">
      <ignoreVersions>
        <ignoreVersion>1.0.1</ignoreVersion>
      </ignoreVersions>
    </rule>
    <rule>
      <groupId>org.apache.maven</groupId>
      <artifactId>maven-core</artifactId>
      <comparisonMethod>mercury</comparisonMethod>
    </rule>
  </rules>
</ruleset>
"""


@pytest.fixture
def rules_file(tmp_path: Path) -> Path:
    path = tmp_path / "rules.xml"
    path.write_text(RULES_XML, encoding="utf-8")
    return path


@pytest.mark.unit
class TestResolveRulesPath:
    """Tests for rules location handling."""

    def test_plain_path(self, tmp_path: Path) -> None:
        assert resolve_rules_path(str(tmp_path / "rules.xml")) == tmp_path / "rules.xml"

    def test_file_uri(self, rules_file: Path) -> None:
        assert resolve_rules_path(rules_file.as_uri()) == rules_file

    def test_relative_path(self) -> None:
        assert resolve_rules_path("config/rules.xml") == Path("config/rules.xml")

    @pytest.mark.parametrize(
        "uri",
        ["http://example.com/rules.xml", "https://example.com/rules.xml", "ftp://h/r.xml"],
    )
    def test_other_schemes_rejected(self, uri: str) -> None:
        with pytest.raises(RuleSetError, match="Unsupported rules URI scheme"):
            resolve_rules_path(uri)


@pytest.mark.unit
class TestLoadRuleSet:
    """Tests for loading rule files from disk."""

    @pytest.mark.parametrize("uri", [None, "", "   "])
    def test_blank_location_gives_empty_rule_set(self, uri: str) -> None:
        assert load_rule_set(uri) == RuleSet()

    def test_load_from_path(self, rules_file: Path) -> None:
        rule_set = load_rule_set(str(rules_file))

        assert len(rule_set) == 2
        assert rule_set.comparison_method == "maven"

    def test_load_from_file_uri(self, rules_file: Path) -> None:
        assert load_rule_set(rules_file.as_uri()) == load_rule_set(str(rules_file))

    def test_missing_file(self, tmp_path: Path) -> None:
        missing = tmp_path / "missing.xml"

        with pytest.raises(RuleSetError, match="Could not load specified rules") as exc_info:
            load_rule_set(str(missing))

        assert exc_info.value.rules_uri == str(missing)

    def test_unsupported_scheme(self) -> None:
        with pytest.raises(RuleSetError):
            load_rule_set("https://example.com/rules.xml")

    def test_logs_location(self, rules_file: Path, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="mvnkeeper"):
            load_rule_set(str(rules_file))

        assert f'Going to load rules from "{rules_file}"' in caplog.text
        assert "Loaded 2 rules and 2 global ignore entries" in caplog.text

    def test_malformed_file(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.xml"
        path.write_text("<ruleset><rules>", encoding="utf-8")

        with pytest.raises(RuleSetError, match="Malformed rules document"):
            load_rule_set(str(path))


@pytest.mark.unit
class TestParseRuleSet:
    """Tests for the rules XML format."""

    def test_full_document(self) -> None:
        rule_set = parse_rule_set(RULES_XML)

        assert rule_set == RuleSet(
            rules=(
                Rule(
                    "com.example.*",
                    "*",
                    comparison_method="numeric",
                    ignore_versions=(IgnoreVersion("1.0.1", "exact"),),
                ),
                Rule(
                    "org.apache.maven",
                    "maven-core",
                    comparison_method="mercury",
                ),
            ),
            ignore_versions=(
                IgnoreVersion(".*-beta.*", "regex"),
                IgnoreVersion("0.9", "exact"),
            ),
            comparison_method="maven",
        )

    def test_without_namespace(self) -> None:
        rule_set = parse_rule_set(
            '<ruleset><rules><rule groupId="g" artifactId="a"/></rules></ruleset>'
        )

        assert rule_set.rules == (Rule("g", "a"),)

    def test_rule_order_preserved(self) -> None:
        rule_set = parse_rule_set(
            "<ruleset><rules>"
            '<rule groupId="b"/><rule groupId="a"/><rule groupId="c"/>'
            "</rules></ruleset>"
        )

        assert [rule.group_id for rule in rule_set.rules] == ["b", "a", "c"]

    def test_empty_ruleset(self) -> None:
        assert parse_rule_set("<ruleset/>") == RuleSet()

    def test_comparison_method_as_child_element(self) -> None:
        rule_set = parse_rule_set(
            "<ruleset><comparisonMethod>numeric</comparisonMethod></ruleset>"
        )

        assert rule_set.comparison_method == "numeric"

    def test_attribute_wins_over_child(self) -> None:
        rule_set = parse_rule_set(
            "<ruleset><rules>"
            '<rule groupId="attr"><groupId>child</groupId></rule>'
            "</rules></ruleset>"
        )

        assert rule_set.rules[0].group_id == "attr"

    def test_unknown_ignore_type_kept_for_later_warning(self) -> None:
        """Loading keeps bogus types; the filter reports and skips them."""
        rule_set = parse_rule_set(
            "<ruleset><ignoreVersions>"
            '<ignoreVersion type="glob">1.*</ignoreVersion>'
            "</ignoreVersions></ruleset>"
        )

        assert rule_set.ignore_versions == (IgnoreVersion("1.*", "glob"),)
        assert not rule_set.ignore_versions[0].is_valid

    def test_whitespace_trimmed(self) -> None:
        rule_set = parse_rule_set(
            "<ruleset><rules><rule>"
            "<groupId>  com.example  </groupId>"
            "<ignoreVersions><ignoreVersion>\n  1.0\n</ignoreVersion></ignoreVersions>"
            "</rule></rules></ruleset>"
        )

        assert rule_set.rules[0].group_id == "com.example"
        assert rule_set.rules[0].ignore_versions == (IgnoreVersion("1.0"),)

    def test_rule_without_group_id(self) -> None:
        with pytest.raises(RuleSetError, match="Rule #2 has no groupId"):
            parse_rule_set(
                '<ruleset><rules><rule groupId="g"/><rule artifactId="a"/></rules></ruleset>',
                rules_uri="rules.xml",
            )

    def test_malformed_xml(self) -> None:
        with pytest.raises(RuleSetError, match="Malformed rules document"):
            parse_rule_set("not xml at all")

    def test_wrong_root(self) -> None:
        with pytest.raises(RuleSetError, match="Expected <ruleset> root element, found <project>"):
            parse_rule_set("<project/>")

    def test_error_carries_location(self) -> None:
        with pytest.raises(RuleSetError) as exc_info:
            parse_rule_set("<project/>", rules_uri="file:///tmp/rules.xml")

        assert exc_info.value.details["config"] == "file:///tmp/rules.xml"
