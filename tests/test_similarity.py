"""Tests for edit-distance similarity."""
import pytest

from node_atlas.catalog.similarity import (
    FUZZY_THRESHOLD,
    is_fuzzy_match,
    levenshtein_distance,
    similarity,
)


class TestLevenshtein:

    @pytest.mark.parametrize(
        "a, b, expected",
        [
            ("", "", 0),
            ("abc", "", 3),
            ("", "abc", 3),
            ("abc", "abc", 0),
            ("slack", "slck", 1),
            ("kitten", "sitting", 3),
            ("flaw", "lawn", 2),
        ],
    )
    def test_distance(self, a, b, expected):
        assert levenshtein_distance(a, b) == expected

    def test_distance_is_symmetric(self):
        assert levenshtein_distance("postgres", "progress") == levenshtein_distance("progress", "postgres")


class TestSimilarity:

    def test_identical_strings(self):
        assert similarity("abc", "abc") == 1.0

    def test_both_empty(self):
        assert similarity("", "") == 1.0

    def test_distinct_short_strings_fall_below_threshold(self):
        assert similarity("abc", "xyz") < FUZZY_THRESHOLD
        assert not is_fuzzy_match("abc", "xyz")

    def test_one_deletion_qualifies(self):
        assert similarity("slack", "slck") > FUZZY_THRESHOLD
        assert is_fuzzy_match("slck", "slack")

    def test_threshold_is_strict(self):
        # 5 chars, 2 substitutions -> exactly 0.6
        assert similarity("abcde", "axcye") == pytest.approx(0.6)
        assert not is_fuzzy_match("abcde", "axcye")
