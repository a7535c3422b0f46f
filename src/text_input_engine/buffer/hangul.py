"""Hangul jamo composition for keystroke-by-keystroke entry.

Syllables are built with the standard two-set keyboard automaton over
compatibility jamo (U+3131..U+318E). Syllable arithmetic follows Unicode:
``0xAC00 + (lead * 21 + vowel) * 28 + tail``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Final, List, Optional, Sequence, Tuple

from .boundaries import is_complete_hangul
from .state import EditState

CHOSEONG: Final[str] = "ㄱㄲㄴㄷㄸㄹㅁㅂㅃㅅㅆㅇㅈㅉㅊㅋㅌㅍㅎ"
JUNGSEONG: Final[str] = "ㅏㅐㅑㅒㅓㅔㅕㅖㅗㅘㅙㅚㅛㅜㅝㅞㅟㅠㅡㅢㅣ"
# Index 0 is "no final consonant".
JONGSEONG: Final[Tuple[str, ...]] = ("",) + tuple(
    "ㄱㄲㄳㄴㄵㄶㄷㄹㄺㄻㄼㄽㄾㄿㅀㅁㅂㅄㅅㅆㅇㅈㅊㅋㅌㅍㅎ"
)

COMPOUND_VOWELS: Final[Dict[Tuple[str, str], str]] = {
    ("ㅗ", "ㅏ"): "ㅘ",
    ("ㅗ", "ㅐ"): "ㅙ",
    ("ㅗ", "ㅣ"): "ㅚ",
    ("ㅜ", "ㅓ"): "ㅝ",
    ("ㅜ", "ㅔ"): "ㅞ",
    ("ㅜ", "ㅣ"): "ㅟ",
    ("ㅡ", "ㅣ"): "ㅢ",
}
COMPOUND_FINALS: Final[Dict[Tuple[str, str], str]] = {
    ("ㄱ", "ㅅ"): "ㄳ",
    ("ㄴ", "ㅈ"): "ㄵ",
    ("ㄴ", "ㅎ"): "ㄶ",
    ("ㄹ", "ㄱ"): "ㄺ",
    ("ㄹ", "ㅁ"): "ㄻ",
    ("ㄹ", "ㅂ"): "ㄼ",
    ("ㄹ", "ㅅ"): "ㄽ",
    ("ㄹ", "ㅌ"): "ㄾ",
    ("ㄹ", "ㅍ"): "ㄿ",
    ("ㄹ", "ㅎ"): "ㅀ",
    ("ㅂ", "ㅅ"): "ㅄ",
}

# Two-set (dubeolsik) layout: jamo -> the physical Latin key producing it.
KOREAN_TO_LATIN: Final[Dict[str, str]] = {
    "ㅁ": "a", "ㄴ": "s", "ㅇ": "d", "ㄹ": "f", "ㅎ": "g",
    "ㅗ": "h", "ㅓ": "j", "ㅏ": "k", "ㅣ": "l",
    "ㅂ": "q", "ㅈ": "w", "ㄷ": "e", "ㄱ": "r", "ㅅ": "t",
    "ㅛ": "y", "ㅕ": "u", "ㅑ": "i", "ㅐ": "o", "ㅔ": "p",
    "ㅋ": "z", "ㅌ": "x", "ㅊ": "c", "ㅍ": "v",
    "ㅠ": "b", "ㅜ": "n", "ㅡ": "m",
    "ㅃ": "Q", "ㅉ": "W", "ㄸ": "E", "ㄲ": "R", "ㅆ": "T",
    "ㅒ": "O", "ㅖ": "P",
}
LATIN_TO_KOREAN: Final[Dict[str, str]] = {v: k for k, v in KOREAN_TO_LATIN.items()}

_LEAD = {char: index for index, char in enumerate(CHOSEONG)}
_VOWEL = {char: index for index, char in enumerate(JUNGSEONG)}
_TAIL = {char: index for index, char in enumerate(JONGSEONG) if char}
_VOWEL_PARTS = {compound: parts for parts, compound in COMPOUND_VOWELS.items()}
_TAIL_PARTS = {compound: parts for parts, compound in COMPOUND_FINALS.items()}


def to_latin(char: str) -> str:
    return KOREAN_TO_LATIN.get(char, char)


def to_hangul(char: str) -> str:
    return LATIN_TO_KOREAN.get(char, char)


def decompose(text: str) -> List[str]:
    """Split ``text`` into the jamo keystrokes that would type it."""

    jamo: List[str] = []
    for char in text:
        if is_complete_hangul(char):
            index = ord(char) - 0xAC00
            jamo.append(CHOSEONG[index // 588])
            jamo.extend(_split(JUNGSEONG[(index % 588) // 28], _VOWEL_PARTS))
            tail = JONGSEONG[index % 28]
            if tail:
                jamo.extend(_split(tail, _TAIL_PARTS))
        elif char in _VOWEL_PARTS:
            jamo.extend(_VOWEL_PARTS[char])
        elif char in _TAIL_PARTS:
            jamo.extend(_TAIL_PARTS[char])
        else:
            jamo.append(char)
    return jamo


def compose(jamo: Sequence[str]) -> str:
    """Assemble jamo into syllables; leftovers stay uncombined."""

    out: List[str] = []
    index = 0
    while index < len(jamo):
        char = jamo[index]
        if _opens_syllable(jamo, index):
            vowel, index = _take_vowel(jamo, index + 1)
            tail, index = _take_tail(jamo, index)
            out.append(_syllable(char, vowel, tail))
        elif char in _VOWEL:
            vowel, index = _take_vowel(jamo, index)
            out.append(vowel)
        else:
            out.append(char)
            index += 1
    return "".join(out)


@dataclass(frozen=True, slots=True)
class Composition:
    """Result of a composition step, not yet applied to the buffer."""

    before: str
    composed: str
    after: str

    @property
    def text(self) -> str:
        return self.before + self.composed + self.after

    @property
    def caret(self) -> int:
        return len(self.before) + len(self.composed)

    @property
    def assemble_position(self) -> Optional[int]:
        return self.caret - 1 if self.composed else None


def insert_jamo(state: EditState, jamo: str) -> Composition:
    """Compose ``jamo`` into the syllable under construction (or start one)."""

    after = state.outside()[1]
    position = state.assemble_position
    if position is None:
        before = state.outside()[0]
        return Composition(before, compose(decompose(jamo)), after)
    seed = state.text[position]
    return Composition(state.text[:position], compose(decompose(seed + jamo)), after)


def delete_jamo(state: EditState) -> Composition:
    """Drop the most recent jamo of the syllable under construction."""

    position = state.assemble_position
    if position is None:
        raise ValueError("delete_jamo requires an open composition")
    remaining = decompose(state.text[position])[:-1]
    return Composition(
        state.text[:position], compose(remaining), state.text[position + 1 :]
    )


def apply_composition(state: EditState, composition: Composition) -> None:
    caret = composition.caret
    state.text = composition.text
    state.selection = (caret, caret)
    state.assemble_position = composition.assemble_position


def _split(char: str, parts: Dict[str, Tuple[str, str]]) -> Tuple[str, ...]:
    return parts.get(char, (char,))


def _opens_syllable(jamo: Sequence[str], index: int) -> bool:
    return (
        index + 1 < len(jamo) and jamo[index] in _LEAD and jamo[index + 1] in _VOWEL
    )


def _take_vowel(jamo: Sequence[str], index: int) -> Tuple[str, int]:
    vowel = jamo[index]
    index += 1
    if index < len(jamo) and (vowel, jamo[index]) in COMPOUND_VOWELS:
        vowel = COMPOUND_VOWELS[(vowel, jamo[index])]
        index += 1
    return vowel, index


def _take_tail(jamo: Sequence[str], index: int) -> Tuple[str, int]:
    # A consonant followed by a vowel starts the next syllable instead.
    if index >= len(jamo) or jamo[index] not in _TAIL or _opens_syllable(jamo, index):
        return "", index
    tail = jamo[index]
    index += 1
    if (
        index < len(jamo)
        and (tail, jamo[index]) in COMPOUND_FINALS
        and not _opens_syllable(jamo, index)
    ):
        tail = COMPOUND_FINALS[(tail, jamo[index])]
        index += 1
    return tail, index


def _syllable(lead: str, vowel: str, tail: str) -> str:
    code = 0xAC00 + (_LEAD[lead] * 21 + _VOWEL[vowel]) * 28 + JONGSEONG.index(tail)
    return chr(code)


__all__ = [
    "CHOSEONG",
    "JUNGSEONG",
    "JONGSEONG",
    "COMPOUND_VOWELS",
    "COMPOUND_FINALS",
    "KOREAN_TO_LATIN",
    "LATIN_TO_KOREAN",
    "Composition",
    "apply_composition",
    "compose",
    "decompose",
    "delete_jamo",
    "insert_jamo",
    "to_hangul",
    "to_latin",
]
