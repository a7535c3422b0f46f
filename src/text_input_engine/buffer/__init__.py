"""Text buffer, editing state machine and undo/redo data structures."""

from .boundaries import stop_range
from .buffer import BufferDelta, InputBuffer, Transaction
from .hangul import Composition
from .state import Direction, EditState, Selection, TextUnit
from .sync import BufferMirror, BufferSync, BufferValidationError
from .undo import (
    CoalesceMode,
    NothingToRedoError,
    NothingToUndoError,
    UndoError,
    UndoManager,
    UndoPayloadError,
    UndoReentrancyError,
    UndoState,
)
from .validation import ensure_state

__all__ = [
    "EditState",
    "Selection",
    "Direction",
    "TextUnit",
    "Composition",
    "InputBuffer",
    "BufferDelta",
    "Transaction",
    "BufferMirror",
    "BufferSync",
    "BufferValidationError",
    "UndoManager",
    "UndoState",
    "CoalesceMode",
    "UndoError",
    "UndoPayloadError",
    "UndoReentrancyError",
    "NothingToUndoError",
    "NothingToRedoError",
    "ensure_state",
    "stop_range",
]
