"""Tests for direction and synonym normalization."""

import pytest

from realms.engine.normalizer import normalize


def test_synonym_collapses_to_canonical_verb():
    assert normalize("grab apple") == "take apple"


def test_walk_north_becomes_go_north():
    assert normalize("walk north") == "go north"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("n", "north"),
        ("s", "south"),
        ("e", "east"),
        ("w", "west"),
        ("head w", "go west"),
        ("eat herb", "use herb"),
        ("slay wolf", "attack wolf"),
        ("inspect sword", "look sword"),
        ("chat", "talk"),
    ],
)
def test_known_words(raw: str, expected: str):
    assert normalize(raw) == expected


def test_unknown_words_pass_through():
    assert normalize("dance wildly") == "dance wildly"


def test_case_and_whitespace_folded():
    assert normalize("  GRAB   The   Apple ") == "take the apple"


def test_abbreviated_direction_after_verb():
    assert normalize("run e") == "go east"


def test_empty_input():
    assert normalize("") == ""
    assert normalize("   ") == ""
