from __future__ import annotations

import pytest

from text_input_engine.buffer.boundaries import (
    is_complete_hangul,
    is_delimiter,
    is_hangul,
    is_incomplete_hangul,
    stop_range,
)

MIXED = "hello한글@@!!!world"


@pytest.mark.parametrize(
    ("position", "expected"),
    [
        (0, (0, 5)),
        (4, (0, 5)),
        (5, (5, 7)),
        (6, (5, 7)),
        (7, (7, 9)),
        (9, (9, 12)),
        (11, (9, 12)),
        (12, (12, 17)),
        (16, (12, 17)),
    ],
)
def test_stop_range_groups_by_character_class(
    position: int, expected: tuple[int, int]
) -> None:
    assert stop_range(MIXED, position) == expected


@pytest.mark.parametrize("position", [-1, 17, 40])
def test_stop_range_out_of_range_is_empty(position: int) -> None:
    assert stop_range(MIXED, position) == (position, position)


def test_stop_range_on_empty_text() -> None:
    assert stop_range("", 0) == (0, 0)


def test_space_run_swallows_one_word_each_side() -> None:
    assert stop_range("hello world", 5) == (0, 11)
    assert stop_range("one a  b two", 6) == (4, 8)


def test_space_run_at_edges() -> None:
    assert stop_range("  hi", 0) == (0, 4)
    assert stop_range("hi  ", 3) == (0, 4)
    assert stop_range("   ", 1) == (0, 3)


def test_incomplete_hangul_forms_its_own_run() -> None:
    text = "ㅎㅎ하"

    assert stop_range(text, 0) == (0, 2)
    assert stop_range(text, 2) == (2, 3)


def test_delimiter_runs_require_identical_characters() -> None:
    assert stop_range("@!", 0) == (0, 1)
    assert stop_range("a--b", 2) == (1, 3)


def test_digits_and_underscore_are_word_characters() -> None:
    assert stop_range("abc_123 x", 2) == (0, 7)


def test_character_classes() -> None:
    assert is_delimiter("@")
    assert is_delimiter(" ")
    assert not is_delimiter("_")
    assert is_hangul("한") and is_complete_hangul("한")
    assert is_hangul("ㅎ") and is_incomplete_hangul("ㅎ")
    assert is_hangul("ᄀ") and is_incomplete_hangul("ᄀ")
    assert not is_hangul("a")
    assert not is_hangul("")
