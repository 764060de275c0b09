"""
Tests for Levenshtein distance and fuzzy suggestions.
"""

import pytest

from edit_distance import levenshtein, max_distance_for, character_overlap, find_closest_matches
from lexicon import Lexicon


class TestLevenshtein:

    @pytest.mark.parametrize("a,b,expected", [
        ("kitten", "sitting", 3),
        ("", "abc", 3),
        ("abc", "", 3),
        ("sama", "sama", 0),
        ("rmah", "rumah", 1),
        ("pergu", "pergi", 1),
    ])
    def test_distance(self, a, b, expected):
        assert levenshtein(a, b) == expected

    @pytest.mark.parametrize("a,b", [
        ("bahasa", "bahsa"),
        ("", ""),
        ("", "kata"),
        ("kitten", "sitting"),
        ("café", "cafe"),
        ("ñandú", "nandu"),
        ("rumah", "marah"),
    ])
    def test_symmetric(self, a, b):
        assert levenshtein(a, b) == levenshtein(b, a)

    @pytest.mark.parametrize("s", ["", "a", "bahasa", "café", "kupu-kupu", "ñandú"])
    def test_identity(self, s):
        assert levenshtein(s, s) == 0


class TestThresholds:

    def test_short_words_allow_one_edit(self):
        assert max_distance_for("rmah") == 1

    def test_longer_words_allow_two_edits(self):
        assert max_distance_for("pergu") == 2

    def test_character_overlap(self):
        assert character_overlap("abc", "xyz") == 0.0
        assert character_overlap("aab", "ab") == 1.0
        assert character_overlap("", "a") == 0.0


class TestFindClosestMatches:

    def test_single_suggestion(self):
        lexicon = Lexicon(["pergi", "rumah", "saya"])
        assert find_closest_matches("pergu", lexicon) == ["pergi"]

    def test_missing_letter(self):
        assert find_closest_matches("rmah", Lexicon(["rumah"])) == ["rumah"]

    def test_ties_sorted_alphabetically(self):
        lexicon = Lexicon(["batu", "bata", "batik"])
        assert find_closest_matches("batx", lexicon) == ["bata", "batu"]

    def test_max_results(self):
        lexicon = Lexicon(["batu", "bata", "batik"])
        assert find_closest_matches("batx", lexicon, max_results=1) == ["bata"]

    def test_exact_match_not_suggested(self):
        assert find_closest_matches("saya", Lexicon(["saya"])) == []

    def test_empty_lexicon(self):
        assert find_closest_matches("pergu", Lexicon.not_loaded()) == []

    def test_too_far(self):
        assert find_closest_matches("xyzzy", Lexicon(["pergi", "rumah"])) == []

    def test_case_insensitive(self):
        assert find_closest_matches("PERGU", Lexicon(["pergi"])) == ["pergi"]
