"""Input types and the immutable settings object handed to every buffer."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

_NUMERIC_LITERAL = re.compile(r"-?[0-9]+")


class InputType(str, Enum):
    """Closed set of field kinds; each carries its own acceptance and masking."""

    TEXT = "text"
    NUMBER = "number"
    PASSWORD = "password"

    def accepts(self, value: str) -> bool:
        if self is InputType.NUMBER:
            return _NUMERIC_LITERAL.fullmatch(value) is not None
        return True

    @property
    def masked(self) -> bool:
        return self is InputType.PASSWORD

    @property
    def word_navigation(self) -> bool:
        # Masked text has no visible word boundaries to stop on.
        return not self.masked

    def mask(self, text: str, char: str) -> str:
        return char * len(text) if self.masked else text


@dataclass(frozen=True, slots=True)
class InputSettings:
    """Construction-time configuration for an ``InputBuffer``.

    Instances are immutable; derive variants with :meth:`with_overrides`.
    """

    input_type: InputType = InputType.TEXT
    max_length: int = -1
    default_value: str = ""
    placeholder: str = ""
    password_char: str = "●"
    caret_blink_rate: float = 0.5
    disabled: bool = False
    max_undo_levels: Optional[int] = 50
    strict_undo: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "input_type", InputType(self.input_type))
        if self.max_length < -1:
            raise ValueError("max_length must be -1 (unbounded) or non-negative")
        if len(self.password_char) != 1:
            raise ValueError("password_char must be a single character")
        if self.caret_blink_rate <= 0:
            raise ValueError("caret_blink_rate must be positive")
        if self.max_undo_levels is not None and self.max_undo_levels < 0:
            raise ValueError("max_undo_levels must be non-negative or None")

    @property
    def bounded(self) -> bool:
        return self.max_length != -1

    def with_overrides(self, **changes: object) -> "InputSettings":
        return replace(self, **changes)


__all__ = ["InputType", "InputSettings"]
