"""Value types shared by the controller and the action handlers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from text_input_engine.buffer import BufferDelta, InputBuffer
from text_input_engine.events import InputBus

COMMAND_MODIFIERS = frozenset({"ctrl", "meta"})


@dataclass(slots=True)
class KeyInput:
    """Normalized key event handed to the controller.

    ``key`` follows DOM naming (``ArrowLeft``, ``Backspace``, ``a``);
    ``text`` is the printable character the key produced, if any.
    """

    key: str
    modifiers: Tuple[str, ...] = ()
    text: Optional[str] = None

    @property
    def chord_key(self) -> str:
        # Chords are case-insensitive: meta+A and meta+a are the same stroke.
        if len(self.key) == 1 and self.has_command_modifier:
            return self.key.lower()
        return self.key

    @property
    def has_command_modifier(self) -> bool:
        return any(mod.lower() in COMMAND_MODIFIERS for mod in self.modifiers)

    @property
    def printable(self) -> Optional[str]:
        char = self.text if self.text is not None else self.key
        if len(char) == 1 and char.isprintable():
            return char
        return None


@dataclass(slots=True)
class CommandResult:
    """Result returned from ``InputController`` entry points."""

    consumed: bool
    status: str = "ok"
    message: Optional[str] = None
    clipboard: Optional[str] = None
    delta: Optional[BufferDelta] = None

    @classmethod
    def from_delta(
        cls, delta: BufferDelta, *, status: str | None = None
    ) -> "CommandResult":
        return cls(
            consumed=True,
            status=status or (delta.label if delta.applied else "noop"),
            delta=delta,
        )


@dataclass(slots=True)
class InputContext:
    """Shared services every action handler can reach."""

    buffer: InputBuffer
    bus: InputBus
    extras: Dict[str, object] = field(default_factory=dict)


__all__ = ["COMMAND_MODIFIERS", "CommandResult", "InputContext", "KeyInput"]
