"""Caret, selection and composition state for a single-line buffer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from text_input_engine.config import InputType

Selection = Tuple[int, int]  # (anchor, caret)


class Direction(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class TextUnit(str, Enum):
    CHARACTER = "character"
    WORD = "word"
    LINE = "line"


@dataclass(slots=True)
class EditState:
    """Mutable editing state owned by exactly one ``InputBuffer``.

    ``selection`` is directional: an anchor greater than the caret means the
    selection was grown leftward.
    """

    text: str = ""
    selection: Selection = (0, 0)
    assemble_position: Optional[int] = None
    mouse_anchor: Optional[int] = None
    input_type: InputType = InputType.TEXT
    max_length: int = -1
    focused: bool = False
    disabled: bool = False
    hovered: bool = False
    hangul_mode: bool = False
    caret_timer: float = 0.0

    @property
    def length(self) -> int:
        return len(self.text)

    @property
    def anchor(self) -> int:
        return self.selection[0]

    @property
    def caret(self) -> int:
        return self.selection[1]

    @property
    def is_selected(self) -> bool:
        return self.selection[0] != self.selection[1]

    @property
    def is_composing(self) -> bool:
        return self.assemble_position is not None

    @property
    def is_rightward(self) -> bool:
        return self.selection[0] < self.selection[1]

    @property
    def is_leftward(self) -> bool:
        return self.selection[0] > self.selection[1]

    def ordered(self) -> Selection:
        anchor, caret = self.selection
        return (min(anchor, caret), max(anchor, caret))

    def outside(self) -> Tuple[str, str]:
        """Text before and after the selection."""

        start, end = self.ordered()
        return self.text[:start], self.text[end:]

    def selected_text(self) -> str:
        start, end = self.ordered()
        return self.text[start:end]

    def clear_composition(self) -> None:
        self.assemble_position = None

    def clear_mouse_anchor(self) -> None:
        self.mouse_anchor = None


__all__ = ["Direction", "EditState", "Selection", "TextUnit"]
