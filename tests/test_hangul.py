from __future__ import annotations

from typing import Sequence

import pytest

from text_input_engine.buffer.hangul import (
    apply_composition,
    compose,
    decompose,
    delete_jamo,
    insert_jamo,
    to_hangul,
    to_latin,
)
from text_input_engine.buffer.state import EditState


def type_jamo(state: EditState, keys: Sequence[str]) -> EditState:
    for jamo in keys:
        apply_composition(state, insert_jamo(state, jamo))
    return state


@pytest.mark.parametrize(
    ("jamo", "expected"),
    [
        (["ㅎ", "ㅏ", "ㄴ"], "한"),
        (["ㅎ", "ㅏ", "ㄴ", "ㅏ"], "하나"),
        (["ㄱ", "ㅗ", "ㅏ"], "과"),
        (["ㄷ", "ㅏ", "ㄹ", "ㄱ"], "닭"),
        (["ㄷ", "ㅏ", "ㄹ", "ㄱ", "ㅏ"], "달가"),
        (["ㅇ", "ㅡ", "ㅣ"], "의"),
        (["ㅏ"], "ㅏ"),
        (["ㅗ", "ㅏ"], "ㅘ"),
        (["ㄱ", "ㄱ"], "ㄱㄱ"),
    ],
)
def test_compose(jamo: list[str], expected: str) -> None:
    assert compose(jamo) == expected


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("한", ["ㅎ", "ㅏ", "ㄴ"]),
        ("닭", ["ㄷ", "ㅏ", "ㄹ", "ㄱ"]),
        ("과", ["ㄱ", "ㅗ", "ㅏ"]),
        ("ㅘ", ["ㅗ", "ㅏ"]),
        ("a", ["a"]),
    ],
)
def test_decompose(text: str, expected: list[str]) -> None:
    assert decompose(text) == expected


def test_typing_builds_syllable_in_place() -> None:
    state = EditState()

    type_jamo(state, ["ㅎ"])
    assert (state.text, state.selection, state.assemble_position) == ("ㅎ", (1, 1), 0)

    type_jamo(state, ["ㅏ"])
    assert state.text == "하"

    type_jamo(state, ["ㄴ"])
    assert (state.text, state.selection, state.assemble_position) == ("한", (1, 1), 0)


def test_vowel_after_final_starts_next_syllable() -> None:
    state = type_jamo(EditState(), ["ㅎ", "ㅏ", "ㄴ", "ㅏ"])

    assert state.text == "하나"
    assert state.selection == (2, 2)
    assert state.assemble_position == 1


def test_delete_jamo_unwinds_composition() -> None:
    state = type_jamo(EditState(), ["ㅎ", "ㅏ", "ㄴ"])

    observed = []
    while state.assemble_position is not None:
        apply_composition(state, delete_jamo(state))
        observed.append(state.text)

    assert observed == ["하", "ㅎ", ""]
    assert state.selection == (0, 0)


def test_delete_jamo_requires_composition() -> None:
    with pytest.raises(ValueError):
        delete_jamo(EditState(text="한", selection=(1, 1)))


def test_composition_respects_surrounding_text() -> None:
    state = EditState(text="ab", selection=(1, 1))

    type_jamo(state, ["ㅎ", "ㅏ"])

    assert state.text == "a하b"
    assert state.selection == (2, 2)
    assert state.assemble_position == 1


def test_composition_replaces_selection() -> None:
    state = EditState(text="abc", selection=(2, 0))

    type_jamo(state, ["ㅎ"])

    assert state.text == "ㅎc"
    assert state.assemble_position == 0


def test_keyboard_maps() -> None:
    assert to_hangul("k") == "ㅏ"
    assert to_hangul("R") == "ㄲ"
    assert to_hangul("1") == "1"
    assert to_latin("ㅒ") == "O"
    assert to_latin("ㅖ") == "P"
    assert to_latin("ㅎ") == "g"
    assert to_latin("x") == "x"
