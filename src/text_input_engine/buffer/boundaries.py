"""Word-boundary classification used for word navigation and double-click.

Every function here is pure: it only looks at the text it is handed.
"""

from __future__ import annotations

from typing import Tuple

Range = Tuple[int, int]

DELIMITERS = frozenset(" ,.;:/[]-\\?#$%^&*()!@+=|~`{}\"'<>")


def is_delimiter(char: str) -> bool:
    return char in DELIMITERS


def is_hangul(char: str) -> bool:
    if not char:
        return False
    code = ord(char[0])
    return (
        0x1100 <= code <= 0x11FF  # conjoining jamo
        or 0x3130 <= code <= 0x318F  # compatibility jamo
        or 0xAC00 <= code <= 0xD7A3  # precomposed syllables
    )


def is_complete_hangul(char: str) -> bool:
    return bool(char) and 0xAC00 <= ord(char[0]) <= 0xD7A3


def is_incomplete_hangul(char: str) -> bool:
    return is_hangul(char) and not is_complete_hangul(char)


def stop_range(text: str, position: int) -> Range:
    """Return the same-class run around ``position`` as ``(start, end)``."""

    if not 0 <= position < len(text):
        return (position, position)
    if text[position] == " ":
        return _space_range(text, position)
    return _class_range(text, position)


def _class_range(text: str, position: int) -> Range:
    if not 0 <= position < len(text):
        return (position, position)
    char = text[position]
    if is_delimiter(char):
        return _delimiter_range(text, position)
    if is_incomplete_hangul(char):
        return _incomplete_hangul_range(text, position)
    return _word_range(text, position)


def _space_range(text: str, position: int) -> Range:
    # A run of spaces swallows exactly one neighbouring word on each side.
    start = position
    end = position
    while start > 0 and text[start - 1] == " ":
        start -= 1
    while end < len(text) and text[end] == " ":
        end += 1
    if start > 0:
        start = _class_range(text, start - 1)[0]
    if end < len(text):
        end = _class_range(text, end)[1]
    return (start, end)


def _delimiter_range(text: str, position: int) -> Range:
    char = text[position]
    start = position
    end = position
    while start > 0 and text[start - 1] == char:
        start -= 1
    while end < len(text) and text[end] == char:
        end += 1
    return (start, end)


def _incomplete_hangul_range(text: str, position: int) -> Range:
    start = position
    end = position + 1
    while start > 0 and is_incomplete_hangul(text[start - 1]):
        start -= 1
    while end < len(text) and is_incomplete_hangul(text[end]):
        end += 1
    return (start, end)


def _word_range(text: str, position: int) -> Range:
    hangul_word = is_hangul(text[position])
    start = position
    end = position + 1
    while start > 0 and not _is_stop(text[start - 1], hangul_word):
        start -= 1
    while end < len(text) and not _is_stop(text[end], hangul_word):
        end += 1
    return (start, end)


def _is_stop(char: str, hangul_word: bool) -> bool:
    if is_delimiter(char):
        return True
    if hangul_word:
        return not is_hangul(char) or is_incomplete_hangul(char)
    return is_hangul(char)


__all__ = [
    "DELIMITERS",
    "Range",
    "is_complete_hangul",
    "is_delimiter",
    "is_hangul",
    "is_incomplete_hangul",
    "stop_range",
]
