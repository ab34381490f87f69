from __future__ import annotations

import pytest

from mvnkeeper.core.wildcard import (
    MULTI_CHAR_SCORE,
    SINGLE_CHAR_SCORE,
    compile_pattern,
    matches,
    matches_exact,
    specificity_score,
    wildcard_to_regex,
)


@pytest.mark.unit
class TestWildcardToRegex:
    """Tests for wildcard_to_regex translation."""

    def test_literal_is_escaped(self) -> None:
        """Dots and other regex metacharacters are matched literally."""
        assert wildcard_to_regex("org.apache", True) == r"org\.apache"

    def test_star_and_question_mark(self) -> None:
        assert wildcard_to_regex("a*b?", True) == r"a.*b."

    def test_general_form_appends_any_suffix(self) -> None:
        assert wildcard_to_regex("org", False) == "org.*"

    def test_regex_metacharacters_escaped(self) -> None:
        """Characters like + and ( never reach the regex engine raw."""
        pattern = compile_pattern("lib+(x)", True)

        assert pattern.fullmatch("lib+(x)")
        assert not pattern.fullmatch("libbx")


@pytest.mark.unit
class TestMatchesExact:
    """Tests for whole-value matching."""

    def test_literal_equal(self) -> None:
        assert matches_exact("org.apache", "org.apache") is True

    def test_literal_prefix_is_not_exact(self) -> None:
        assert matches_exact("org.apache", "org.apache.maven") is False

    def test_star_matches_empty(self) -> None:
        assert matches_exact("org.apache*", "org.apache") is True

    def test_star_matches_anything(self) -> None:
        assert matches_exact("*", "") is True
        assert matches_exact("*", "anything.at.all") is True

    def test_question_mark_matches_one_character(self) -> None:
        assert matches_exact("lib?", "lib1") is True
        assert matches_exact("lib?", "lib") is False
        assert matches_exact("lib?", "lib12") is False

    def test_dot_is_literal(self) -> None:
        assert matches_exact("org.apache", "orgXapache") is False


@pytest.mark.unit
class TestMatches:
    """Tests for general (prefix-tolerant) matching."""

    def test_literal_matches_longer_value(self) -> None:
        assert matches("org.apache", "org.apache.maven") is True

    def test_literal_matches_itself(self) -> None:
        assert matches("org.apache", "org.apache") is True

    def test_no_match_on_different_prefix(self) -> None:
        assert matches("org.apache", "com.apache") is False

    def test_wildcard_in_middle(self) -> None:
        assert matches("com.*.core", "com.example.core.impl") is True

    @pytest.mark.parametrize(
        "pattern,value",
        [
            ("org.apache", "org.apache"),
            ("org.*", "org.codehaus"),
            ("lib?", "lib2"),
            ("*", "x"),
        ],
    )
    def test_exact_match_implies_general_match(self, pattern: str, value: str) -> None:
        assert matches_exact(pattern, value)
        assert matches(pattern, value)


@pytest.mark.unit
class TestSpecificityScore:
    """Tests for specificity_score ordering."""

    def test_literal_scores_zero(self) -> None:
        assert specificity_score("org.apache.maven") == 0

    def test_question_mark_weight(self) -> None:
        assert specificity_score("lib??") == 2 * SINGLE_CHAR_SCORE

    def test_star_weight(self) -> None:
        assert specificity_score("org.*") == MULTI_CHAR_SCORE

    def test_star_outweighs_many_question_marks(self) -> None:
        assert specificity_score("*") > specificity_score("?" * 999)

    def test_replacing_literal_with_wildcard_never_lowers_score(self) -> None:
        assert specificity_score("org.apache") <= specificity_score("org.?pache")
        assert specificity_score("org.?pache") <= specificity_score("org.*pache")

    def test_adding_wildcards_never_lowers_score(self) -> None:
        assert specificity_score("org.*") <= specificity_score("org.*.*")
        assert specificity_score("a?") <= specificity_score("a??")


@pytest.mark.unit
class TestCompilePattern:
    """Tests for compiled pattern memoization."""

    def test_memoized(self) -> None:
        assert compile_pattern("org.*", True) is compile_pattern("org.*", True)

    def test_exact_and_general_cached_separately(self) -> None:
        assert compile_pattern("org", True) is not compile_pattern("org", False)
