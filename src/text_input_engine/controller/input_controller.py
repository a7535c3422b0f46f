"""Key, pointer and clipboard dispatch onto an ``InputBuffer``."""

from __future__ import annotations

from typing import Dict, Optional

from text_input_engine.buffer import BufferMirror, InputBuffer
from text_input_engine.config import InputSettings, InputType
from text_input_engine.events import InputBus
from text_input_engine.keymaps import (
    KeymapRegistry,
    KeymapResolver,
    KeyStroke,
    ResolutionMatch,
    load_default_keymaps,
)
from text_input_engine.runtime import telemetry

from .base import CommandResult, InputContext, KeyInput


class InputController:
    """Owns the keymap and turns host events into buffer commands."""

    def __init__(
        self,
        buffer: InputBuffer | None = None,
        *,
        settings: InputSettings | None = None,
        keymap_registry: KeymapRegistry | None = None,
        keymap_resolver: KeymapResolver | None = None,
        load_defaults: bool = True,
    ) -> None:
        if buffer is not None and settings is not None:
            raise ValueError("Provide either `buffer` or `settings`, not both.")
        self.buffer = buffer or InputBuffer(settings)
        self.context = InputContext(buffer=self.buffer, bus=self.buffer.bus)
        self.keymap_registry = keymap_registry or KeymapRegistry(
            logger_name="text_input_engine.keymaps"
        )
        if load_defaults and keymap_registry is None:
            load_default_keymaps(self.keymap_registry)
        self.keymap_resolver = keymap_resolver or KeymapResolver(
            self.keymap_registry, logger_name="text_input_engine.keymaps"
        )
        self.context.extras.setdefault("keymap_registry", self.keymap_registry)
        self.context.extras.setdefault("keymap_resolver", self.keymap_resolver)
        self.context.extras.setdefault("controller", self)

    @property
    def bus(self) -> InputBus:
        return self.buffer.bus

    def flags(self) -> Dict[str, bool]:
        state = self.buffer.state
        return {
            "selected": state.is_selected,
            "composing": state.is_composing,
            "password": state.input_type.masked,
            "hangul_mode": state.hangul_mode,
        }

    def mirror(self) -> BufferMirror:
        return self.buffer.mirror()

    # -- keyboard -----------------------------------------------------------

    def handle_key(self, key: KeyInput) -> CommandResult:
        with telemetry.span(
            name="input::key",
            component=True,
            metadata={"key": key.key, "buffer": self.buffer.name},
        ) as handle:
            result = self._dispatch_key(key)
            handle.add_metadata("status", result.status)
        return result

    def _dispatch_key(self, key: KeyInput) -> CommandResult:
        if not self.buffer.focused:
            return CommandResult(consumed=False, status="unfocused")

        token = KeyStroke(key.chord_key, key.modifiers).token
        resolution = self.keymap_resolver.resolve(token, context=self.flags())
        if resolution.status == "match" and resolution.match:
            return self._execute_match(resolution.match)

        if key.has_command_modifier:
            return CommandResult(consumed=True, status="swallowed", message=token)

        char = key.printable
        if char is not None:
            return CommandResult.from_delta(self.buffer.insert_character(char))
        return CommandResult(consumed=False, status="unhandled", message=token)

    def _execute_match(self, match: ResolutionMatch) -> CommandResult:
        with telemetry.span(
            "keymaps::execute",
            component="keymaps",
            metadata={"binding_id": match.binding.id, "action": match.action.id},
        ):
            outcome = match.action(self.context, match)

        if isinstance(outcome, CommandResult):
            return outcome
        return CommandResult(consumed=True)

    # -- pointer ------------------------------------------------------------

    def pointer_down(self, index: int, *, click_count: int = 1) -> CommandResult:
        delta = self.buffer.pointer_down(index, click_count=click_count)
        return CommandResult.from_delta(delta)

    def pointer_move(self, index: int) -> CommandResult:
        return CommandResult.from_delta(self.buffer.extend_selection_to_pointer(index))

    def pointer_up(self) -> CommandResult:
        return CommandResult.from_delta(self.buffer.pointer_up())

    def double_click(self, index: int) -> CommandResult:
        return CommandResult.from_delta(self.buffer.double_click(index))

    def hover(self, inside: bool) -> CommandResult:
        changed = self.buffer.set_hover(inside)
        return CommandResult(consumed=changed, status="hover" if changed else "noop")

    # -- clipboard ----------------------------------------------------------

    def copy(self) -> CommandResult:
        text = self.buffer.copy()
        if text is None:
            return CommandResult(consumed=False, status="noop")
        return CommandResult(consumed=True, status="copy", clipboard=text)

    def cut(self) -> CommandResult:
        text = self.buffer.cut()
        if text is None:
            return CommandResult(consumed=False, status="noop")
        return CommandResult(consumed=True, status="cut", clipboard=text)

    def paste(self, text: Optional[str]) -> CommandResult:
        if not self.buffer.focused or not text:
            return CommandResult(consumed=False, status="noop")
        return CommandResult.from_delta(self.buffer.paste(text))

    # -- field state --------------------------------------------------------

    def focus(self) -> CommandResult:
        return CommandResult.from_delta(self.buffer.set_focused(True))

    def blur(self) -> CommandResult:
        return CommandResult.from_delta(self.buffer.set_focused(False))

    def set_text(self, text: str) -> CommandResult:
        return CommandResult.from_delta(self.buffer.set_text(text))

    def set_type(self, input_type: InputType | str) -> CommandResult:
        return CommandResult.from_delta(self.buffer.set_type(input_type))

    def set_disabled(self, disabled: bool) -> CommandResult:
        return CommandResult.from_delta(self.buffer.set_disabled(disabled))

    def tick(self, delta: float) -> bool:
        """Advance the caret blink timer; return whether the caret is shown."""

        self.buffer.tick(delta)
        return self.buffer.caret_visible


__all__ = ["InputController"]
