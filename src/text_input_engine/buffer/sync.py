"""Adapter boundary types for syncing the buffer with a host renderer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from .state import Selection


@dataclass(frozen=True, slots=True)
class BufferMirror:
    """Read-only snapshot of everything a renderer is allowed to look at."""

    text: str
    display_text: str
    selection: Selection
    ordered_selection: Selection
    assemble_position: Optional[int]
    focused: bool
    disabled: bool
    hovered: bool
    placeholder: str
    caret_visible: bool

    @property
    def is_empty(self) -> bool:
        return not self.text

    @property
    def show_placeholder(self) -> bool:
        return self.is_empty and bool(self.placeholder)


class BufferSync(Protocol):
    """Protocol describing how adapters exchange data with the buffer layer."""

    def pull_buffer(self) -> BufferMirror:
        """Return the latest snapshot the host should render."""
        ...

    def push_paste(self, text: str) -> None:
        """Feed clipboard text obtained by the host back into the buffer."""
        ...


class BufferValidationError(RuntimeError):
    """Raised when a host hands the buffer a state that breaks its invariants."""

    def __init__(self, message: str, *, selection: Selection | None = None) -> None:
        super().__init__(message)
        self.selection = selection


__all__ = ["BufferMirror", "BufferSync", "BufferValidationError"]
