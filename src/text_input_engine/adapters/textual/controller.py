"""Textual adapter that feeds widget events into an ``InputController``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from textual import events

from text_input_engine.buffer import BufferMirror, BufferSync
from text_input_engine.controller import CommandResult, KeyInput
from text_input_engine.controller.input_controller import InputController
from text_input_engine.events import (
    CLIPBOARD_WRITE,
    COMMITTED,
    FOCUS_CHANGED,
    HOVER_CHANGED,
)

# Textual key names -> DOM key names used by the keymap.
KEY_NAMES: Dict[str, str] = {
    "left": "ArrowLeft",
    "right": "ArrowRight",
    "up": "ArrowUp",
    "down": "ArrowDown",
    "home": "Home",
    "end": "End",
    "backspace": "Backspace",
    "delete": "Delete",
    "enter": "Enter",
    "escape": "Escape",
    "tab": "Tab",
    "space": " ",
}
MODIFIER_NAMES: Dict[str, str] = {
    "ctrl": "ctrl",
    "shift": "shift",
    "alt": "alt",
    "meta": "meta",
    "super": "meta",
}


def _noop(*_args, **_kwargs) -> None:
    return None


def to_key_input(key: str, character: Optional[str] = None) -> KeyInput:
    """Translate a Textual key (``"ctrl+shift+left"``) into a ``KeyInput``."""

    *prefix, name = key.split("+")
    modifiers = tuple(MODIFIER_NAMES[part] for part in prefix if part in MODIFIER_NAMES)
    chord = any(mod in ("ctrl", "meta") for mod in modifiers)
    printable = character if character and character.isprintable() else None

    if name in KEY_NAMES:
        mapped = KEY_NAMES[name]
    elif printable and len(printable) == 1 and not chord:
        mapped = printable
        # Shift is already folded into the produced character.
        modifiers = tuple(mod for mod in modifiers if mod != "shift")
    else:
        mapped = name
    return KeyInput(key=mapped, modifiers=modifiers, text=printable)


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_buffer: Callable[[BufferMirror], None]
    update_status: Callable[[str], None] = _noop
    write_clipboard: Callable[[str], None] = _noop
    read_clipboard: Callable[[], Optional[str]] = _noop
    handle_event: Callable[[str, object | None], None] = _noop
    # Optional realtime log callback a host may use to surface debug lines
    log: Callable[[str], None] = _noop


class TextualInputAdapter(BufferSync):
    """Bridges ``InputController`` and bus events to a Textual-friendly surface."""

    def __init__(self, controller: InputController, hooks: TextualUIHooks) -> None:
        self.controller = controller
        self.hooks = hooks
        self._caret_visible = controller.buffer.caret_visible
        self._subscribe_events()
        self._refresh_buffer()

    def handle_event(self, event: events.Event) -> Optional[CommandResult]:
        """Route a Textual event; events the field does not use return ``None``."""

        if isinstance(event, events.Key):
            return self.handle_textual_key(event.key, character=event.character)
        if isinstance(event, events.Paste):
            return self.handle_paste(event.text)
        if isinstance(event, events.Focus):
            return self._finish(self.controller.focus())
        if isinstance(event, events.Blur):
            return self._finish(self.controller.blur())
        if isinstance(event, events.Enter):
            return self._finish(self.controller.hover(True))
        if isinstance(event, events.Leave):
            return self._finish(self.controller.hover(False))
        return None

    def handle_textual_key(
        self, key: str, *, character: Optional[str] = None
    ) -> CommandResult:
        """Translate a Textual key event into a ``KeyInput`` and dispatch it."""

        key_input = to_key_input(key, character)
        self._log_state("key ->", key=key_input.key, mods=key_input.modifiers)
        result = self.controller.handle_key(key_input)
        if result.status == "paste_requested":
            result = self.controller.paste(self.hooks.read_clipboard())
        self._finish(result)
        self._log_state(
            "result <-",
            consumed=result.consumed,
            status=result.status,
            message=result.message,
        )
        return result

    def handle_paste(self, text: str) -> CommandResult:
        return self._finish(self.controller.paste(text))

    def pull_buffer(self) -> BufferMirror:
        return self.controller.mirror()

    def push_paste(self, text: str) -> None:
        self.handle_paste(text)

    def tick(self, delta: float) -> bool:
        """Advance the caret blink; re-render only when visibility flips."""

        visible = self.controller.tick(delta)
        if visible != self._caret_visible:
            self._caret_visible = visible
            self._refresh_buffer()
        return visible

    def _finish(self, result: CommandResult) -> CommandResult:
        if result.consumed and result.status:
            self.hooks.update_status(result.status)
        self._refresh_buffer()
        return result

    def _subscribe_events(self) -> None:
        bus = self.controller.bus
        bus.subscribe(CLIPBOARD_WRITE, self._write_clipboard)
        for event in (FOCUS_CHANGED, HOVER_CHANGED, COMMITTED, CLIPBOARD_WRITE):
            bus.subscribe(
                event, lambda payload, name=event: self._handle_event(name, payload)
            )

    def _write_clipboard(self, payload: object | None) -> None:
        if isinstance(payload, str):
            self.hooks.write_clipboard(payload)

    def _handle_event(self, name: str, payload: object | None) -> None:
        self._log_state("event ->", event=name, payload=payload)
        self.hooks.handle_event(name, payload)
        if name == COMMITTED and isinstance(payload, str):
            self.hooks.update_status(f"commit::{payload}")

    def _refresh_buffer(self) -> None:
        mirror = self.pull_buffer()
        self._caret_visible = mirror.caret_visible
        self.hooks.update_buffer(mirror)

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))

    def _state_metadata(self) -> Dict[str, object]:
        state = self.controller.buffer.state
        return {
            "buffer": self.controller.buffer.name,
            "selection": state.selection,
            "composing": state.assemble_position,
            "focused": state.focused,
        }


__all__ = ["KEY_NAMES", "TextualInputAdapter", "TextualUIHooks", "to_key_input"]
