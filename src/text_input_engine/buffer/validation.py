"""Validation helpers shared across buffer services."""

from __future__ import annotations

from .boundaries import is_hangul
from .state import EditState, Selection
from .sync import BufferValidationError


def clamp(value: int, lower: int, upper: int) -> int:
    return min(max(value, lower), upper)


def clamp_selection(state: EditState, anchor: int, caret: int) -> Selection:
    return (clamp(anchor, 0, state.length), clamp(caret, 0, state.length))


def remaining_capacity(state: EditState, before: str, after: str) -> int | None:
    """Code points still insertable between ``before`` and ``after``."""

    if state.max_length == -1:
        return None
    return max(0, state.max_length - (len(before) + len(after)))


def ensure_state(state: EditState) -> EditState:
    length = state.length
    anchor, caret = state.selection
    if not (0 <= anchor <= length and 0 <= caret <= length):
        raise BufferValidationError("Selection out of range", selection=state.selection)
    position = state.assemble_position
    if position is not None:
        if not 0 <= position < length:
            raise BufferValidationError(
                "Assemble position out of range", selection=state.selection
            )
        if not is_hangul(state.text[position]):
            raise BufferValidationError(
                "Assemble position does not hold a Hangul character",
                selection=state.selection,
            )
        # The syllable under construction always sits just before a collapsed caret.
        if state.selection != (position + 1, position + 1):
            raise BufferValidationError(
                "Assemble position is not behind the caret", selection=state.selection
            )
    if state.max_length != -1 and length > state.max_length:
        raise BufferValidationError("Text exceeds max_length")
    return state


__all__ = ["clamp", "clamp_selection", "ensure_state", "remaining_capacity"]
