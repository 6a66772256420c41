import math

import pytest

from scoresheet.constants import DISTANCE_EXCEEDED
from scoresheet.utils.edit_distance import damerau_levenshtein, similarity

PAIRS = [
    ("", ""),
    ("", "abc"),
    ("jane doe", "jane d0e"),
    ("kitten", "sitting"),
    ("ca", "abc"),
    ("abcdef", "badcfe"),
    ("john smith", "jon smyth"),
]


@pytest.mark.parametrize("a,b", PAIRS)
def test_distance_is_symmetric(a, b):
    assert damerau_levenshtein(a, b, math.inf) == damerau_levenshtein(b, a, math.inf)


@pytest.mark.parametrize("text", ["", "a", "jane doe", "o'brien-smith"])
@pytest.mark.parametrize("threshold", [0, 1, 5])
def test_distance_to_self_is_zero(text, threshold):
    assert damerau_levenshtein(text, text, threshold) == 0


def test_known_distances():
    assert damerau_levenshtein("kitten", "sitting", 5) == 3
    assert damerau_levenshtein("jane doe", "jane d0e", 5) == 1
    assert damerau_levenshtein("", "abc", 5) == 3
    assert damerau_levenshtein("abc", "", 3) == 3


def test_adjacent_transposition_costs_one():
    assert damerau_levenshtein("jnae", "jane", 5) == 1
    assert damerau_levenshtein("abcdef", "badcfe", 5) == 3


def test_length_gap_beyond_threshold_is_exceeded():
    assert damerau_levenshtein("ab", "abcdefgh", 5) == DISTANCE_EXCEEDED
    assert damerau_levenshtein("", "abcdef", 5) == DISTANCE_EXCEEDED
    assert damerau_levenshtein("abc", "abcd", 0) == DISTANCE_EXCEEDED


def test_distance_beyond_threshold_is_exceeded():
    assert damerau_levenshtein("kitten", "sitting", 2) == DISTANCE_EXCEEDED
    assert damerau_levenshtein("aaaaaaaa", "bbbbbbbb", 5) == DISTANCE_EXCEEDED


def test_distance_at_threshold_is_exact():
    assert damerau_levenshtein("kitten", "sitting", 3) == 3


def test_pruning_does_not_change_near_distances():
    for a, b in PAIRS:
        exact = damerau_levenshtein(a, b, math.inf)
        assert damerau_levenshtein(a, b, exact) == exact


def test_negative_threshold_is_exceeded():
    assert damerau_levenshtein("a", "a", -1) == DISTANCE_EXCEEDED


def test_similarity():
    assert similarity("jane doe", "jane doe", 0) == 1.0
    assert similarity("jane doe", "jane d0e", 1) == pytest.approx(0.875)
    assert similarity("abc", "xyz", DISTANCE_EXCEEDED) == 0.0
    assert similarity("", "", 0) == 1.0
