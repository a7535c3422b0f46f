"""Single-line input buffer: the command surface of the editing engine."""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import ContextManager, Optional, Tuple

from text_input_engine.config import InputSettings, InputType
from text_input_engine.events import (
    CLIPBOARD_WRITE,
    COMMITTED,
    FOCUS_CHANGED,
    HOVER_CHANGED,
    InputBus,
)
from text_input_engine.runtime import telemetry

from . import hangul
from .boundaries import Range, is_hangul, stop_range
from .state import Direction, EditState, Selection, TextUnit
from .sync import BufferMirror
from .undo import UndoManager
from .validation import clamp, clamp_selection, ensure_state, remaining_capacity


@dataclass(frozen=True, slots=True)
class BufferDelta:
    """Outcome of a buffer command and the state it left behind."""

    applied: bool
    text: str
    selection: Selection
    assemble_position: Optional[int]
    label: str


class InputBuffer:
    """Owns an ``EditState`` and exposes every editing command.

    Commands never raise for user input. Out-of-range indices clamp and
    unacceptable input is rejected with ``applied=False``.
    """

    def __init__(
        self,
        settings: Optional[InputSettings] = None,
        *,
        name: str = "default",
        bus: Optional[InputBus] = None,
        undo: Optional[UndoManager[str]] = None,
    ) -> None:
        self.settings = settings or InputSettings()
        self.name = name
        self.bus = bus or InputBus()
        self.undo_manager: UndoManager[str] = undo or UndoManager(
            max_undo_levels=self.settings.max_undo_levels,
            strict=self.settings.strict_undo,
            payload_type=str,
            logger_name="text_input_engine.undo",
        )
        self.undo_manager.on_undo = self._restore_snapshot
        self.undo_manager.on_redo = self._restore_snapshot
        self.state = EditState(
            text=self._initial_text(),
            input_type=self.settings.input_type,
            max_length=self.settings.max_length,
            disabled=self.settings.disabled,
        )

    # -- read surface -------------------------------------------------------

    @property
    def text(self) -> str:
        return self.state.text

    @property
    def selection(self) -> Selection:
        return self.state.selection

    @property
    def assemble_position(self) -> Optional[int]:
        return self.state.assemble_position

    @property
    def focused(self) -> bool:
        return self.state.focused

    @property
    def disabled(self) -> bool:
        return self.state.disabled

    @property
    def input_type(self) -> InputType:
        return self.state.input_type

    @property
    def caret_visible(self) -> bool:
        rate = self.settings.caret_blink_rate
        return int(self.state.caret_timer // rate) % 2 == 1

    def word_range_at(self, index: int) -> Range:
        """Word-class run under ``index`` (clamped into the text)."""

        return stop_range(self.state.text, clamp(index, 0, self.state.length))

    def mirror(self) -> BufferMirror:
        state = self.state
        return BufferMirror(
            text=state.text,
            display_text=state.input_type.mask(state.text, self.settings.password_char),
            selection=state.selection,
            ordered_selection=state.ordered(),
            assemble_position=state.assemble_position,
            focused=state.focused,
            disabled=state.disabled,
            hovered=state.hovered,
            placeholder=self.settings.placeholder,
            caret_visible=self.caret_visible,
        )

    def restore(self, state: EditState) -> BufferDelta:
        """Adopt a host-provided state after checking its invariants."""

        ensure_state(state)
        with Transaction(self, "restore", record_undo=False) as tx:
            self.state = state
            return tx.commit()

    # -- text commands ------------------------------------------------------

    def set_text(self, raw: str) -> BufferDelta:
        state = self.state
        if not state.input_type.accepts(raw):
            return self._rejected("set_text")
        value = raw if state.max_length == -1 else raw[: state.max_length]
        with Transaction(self, "set_text") as tx:
            state.text = value
            state.clear_composition()
            self._move_to(len(value))
            return tx.commit()

    def insert_character(self, value: str) -> BufferDelta:
        return self._insert(value, label="insert_character", keystroke=True)

    def paste(self, value: str) -> BufferDelta:
        return self._insert(value, label="paste", keystroke=False)

    def delete_backward(self, unit: TextUnit = TextUnit.CHARACTER) -> BufferDelta:
        state = self.state
        if state.is_selected:
            return self._delete_selection("delete_backward")
        if unit is TextUnit.CHARACTER and state.is_composing:
            composition = hangul.delete_jamo(state)
            with Transaction(self, "delete_jamo", record_undo=False) as tx:
                hangul.apply_composition(state, composition)
                self._rearm_caret()
                return tx.commit()

        caret = state.caret
        if unit is TextUnit.LINE:
            start = 0
        elif unit is TextUnit.WORD:
            start = self._word_stop(Direction.LEFT, guarded=False)
        else:
            start = caret - 1
        return self._delete_range(clamp(start, 0, caret), caret, "delete_backward")

    def delete_forward(self, unit: TextUnit = TextUnit.CHARACTER) -> BufferDelta:
        state = self.state
        if state.is_selected:
            return self._delete_selection("delete_forward")

        caret = state.caret
        if unit is TextUnit.LINE:
            end = state.length
        elif unit is TextUnit.WORD:
            end = self._word_stop(Direction.RIGHT, guarded=False)
        else:
            end = caret + 1
        end = clamp(end, caret, state.length)
        return self._delete_range(caret, end, "delete_forward")

    # -- caret and selection ------------------------------------------------

    def move_caret(
        self,
        direction: Direction,
        *,
        extend: bool = False,
        unit: TextUnit = TextUnit.CHARACTER,
    ) -> BufferDelta:
        state = self.state
        left = direction is Direction.LEFT
        with Transaction(self, "move_caret", record_undo=False) as tx:
            state.clear_composition()
            anchor, caret = state.selection
            if state.is_selected and not extend:
                if unit is TextUnit.LINE:
                    self._move_to(0 if left else state.length)
                else:
                    start, end = state.ordered()
                    self._move_to(start if left else end)
                return tx.commit()

            if unit is TextUnit.LINE:
                target = 0 if left else state.length
            elif unit is TextUnit.WORD:
                target = self._word_stop(direction, guarded=True)
            else:
                target = caret - 1 if left else caret + 1

            if extend:
                self._select(anchor, target)
            else:
                self._move_to(target)
            return tx.commit()

    def select_all(self) -> BufferDelta:
        with Transaction(self, "select_all", record_undo=False) as tx:
            self.state.clear_composition()
            self._select(0, self.state.length)
            return tx.commit()

    def set_selection(self, anchor: int, caret: int) -> BufferDelta:
        with Transaction(self, "set_selection", record_undo=False) as tx:
            self.state.clear_composition()
            self._select(anchor, caret)
            return tx.commit()

    def collapse_selection(self) -> BufferDelta:
        with Transaction(self, "collapse_selection", record_undo=False) as tx:
            self.state.clear_composition()
            self._move_to(self.state.caret)
            return tx.commit()

    # -- pointer ------------------------------------------------------------

    def pointer_down(self, index: int, *, click_count: int = 1) -> BufferDelta:
        state = self.state
        if state.disabled:
            return self._rejected("pointer_down")
        self.set_focused(True)
        with Transaction(self, "pointer_down", record_undo=False) as tx:
            state.clear_composition()
            index = clamp(index, 0, state.length)
            start, end = state.ordered()
            if click_count >= 3 and start <= index <= end:
                self._select(0, state.length)
                return tx.commit()
            self._move_to(index)
            state.mouse_anchor = index
            return tx.commit()

    def extend_selection_to_pointer(self, index: int) -> BufferDelta:
        state = self.state
        if not state.focused or state.mouse_anchor is None:
            return self._rejected("drag_selection")
        with Transaction(self, "drag_selection", record_undo=False) as tx:
            anchor = state.mouse_anchor
            self._select(min(anchor, index), max(anchor, index))
            return tx.commit()

    def pointer_up(self) -> BufferDelta:
        self.state.clear_mouse_anchor()
        return self._delta("pointer_up", applied=True)

    def double_click(self, index: int) -> BufferDelta:
        state = self.state
        if not state.focused:
            return self._rejected("double_click")
        if not state.input_type.word_navigation:
            return self.select_all()
        start, end = self.word_range_at(index)
        return self.set_selection(start, end)

    # -- clipboard ----------------------------------------------------------

    def copy(self) -> Optional[str]:
        state = self.state
        if not state.focused or state.input_type.masked or not state.is_selected:
            return None
        text = state.selected_text()
        self.bus.emit(CLIPBOARD_WRITE, text)
        return text

    def cut(self) -> Optional[str]:
        text = self.copy()
        if text is None:
            return None
        self._delete_selection("cut")
        return text

    # -- field state --------------------------------------------------------

    def set_type(self, input_type: InputType | str) -> BufferDelta:
        with Transaction(self, "set_type", record_undo=False) as tx:
            self.state.input_type = InputType(input_type)
            self.state.clear_composition()
            self._move_to(self.state.caret)
            return tx.commit()

    def set_focused(self, focused: bool) -> BufferDelta:
        state = self.state
        target = focused and not state.disabled
        with Transaction(self, "focus" if target else "blur", record_undo=False) as tx:
            if target == state.focused:
                self._rearm_caret()
                return tx.commit()
            if target:
                state.focused = True
                self._rearm_caret()
            else:
                state.clear_composition()
                state.clear_mouse_anchor()
                self._move_to(0)
                state.focused = False
            self.bus.emit(FOCUS_CHANGED, target)
            telemetry.record_event(
                "input.focus", data={"buffer": self.name, "focused": target}
            )
            return tx.commit()

    def set_disabled(self, disabled: bool) -> BufferDelta:
        state = self.state
        with Transaction(self, "set_disabled", record_undo=False) as tx:
            state.disabled = disabled
            if disabled:
                state.clear_composition()
                state.clear_mouse_anchor()
                self._move_to(0)
                self.set_hover(False)
            self.set_focused(False)
            return tx.commit()

    def set_hover(self, hovered: bool) -> bool:
        state = self.state
        target = hovered and not state.disabled
        if target == state.hovered:
            return False
        state.hovered = target
        self.bus.emit(HOVER_CHANGED, target)
        return True

    def toggle_hangul_mode(self) -> BufferDelta:
        with Transaction(self, "toggle_hangul_mode", record_undo=False) as tx:
            self.state.hangul_mode = not self.state.hangul_mode
            self.state.clear_composition()
            return tx.commit()

    def commit(self) -> BufferDelta:
        """Finish the current entry (Enter) and notify listeners."""

        with Transaction(self, "commit", record_undo=False) as tx:
            self.state.clear_composition()
            self.bus.emit(COMMITTED, self.state.text)
            return tx.commit()

    def tick(self, delta: float) -> None:
        self.state.caret_timer += delta

    # -- undo ---------------------------------------------------------------

    def undo(self) -> BufferDelta:
        with Transaction(self, "undo", record_undo=False) as tx:
            self.undo_manager.undo()
            return tx.commit()

    def redo(self) -> BufferDelta:
        with Transaction(self, "redo", record_undo=False) as tx:
            self.undo_manager.redo()
            return tx.commit()

    # -- internals ----------------------------------------------------------

    def _initial_text(self) -> str:
        value = self.settings.default_value
        if not self.settings.input_type.accepts(value):
            return ""
        if self.settings.bounded:
            return value[: self.settings.max_length]
        return value

    def _insert(self, value: str, *, label: str, keystroke: bool) -> BufferDelta:
        state = self.state
        if not value or not state.input_type.accepts(value):
            return self._rejected(label)
        # Layout mapping and composition apply to typed keys only.
        if keystroke and state.hangul_mode:
            value = "".join(hangul.to_hangul(char) for char in value)
        if state.input_type.masked:
            value = "".join(hangul.to_latin(char) for char in value)
        elif keystroke and len(value) == 1 and is_hangul(value):
            return self._insert_jamo(value, label=label)
        return self._insert_literal(value, label=label)

    def _insert_literal(self, value: str, *, label: str) -> BufferDelta:
        state = self.state
        before, after = state.outside()
        capacity = remaining_capacity(state, before, after)
        if capacity is not None:
            value = value[:capacity]
        if not value:
            return self._rejected(label)
        with Transaction(self, label) as tx:
            state.text = before + value + after
            state.clear_composition()
            self._move_to(len(before) + len(value))
            return tx.commit()

    def _insert_jamo(self, jamo: str, *, label: str) -> BufferDelta:
        state = self.state
        composing = state.is_composing
        composition = hangul.insert_jamo(state, jamo)
        if state.max_length != -1 and len(composition.text) > state.max_length:
            return self._rejected(label)
        # Keystrokes of one syllable share the snapshot taken when it started.
        with Transaction(self, "compose", record_undo=not composing) as tx:
            hangul.apply_composition(state, composition)
            self._rearm_caret()
            return tx.commit()

    def _delete_selection(self, label: str) -> BufferDelta:
        start, end = self.state.ordered()
        return self._delete_range(start, end, label)

    def _delete_range(self, start: int, end: int, label: str) -> BufferDelta:
        state = self.state
        if start >= end:
            return self._rejected(label)
        with Transaction(self, label) as tx:
            state.text = state.text[:start] + state.text[end:]
            state.clear_composition()
            self._move_to(start)
            return tx.commit()

    def _word_stop(self, direction: Direction, *, guarded: bool) -> int:
        state = self.state
        left = direction is Direction.LEFT
        if not state.input_type.word_navigation:
            return 0 if left else state.length

        anchor, caret = state.selection
        if left:
            stop = stop_range(state.text, caret - 1)[0]
            if guarded and state.is_rightward and stop < anchor:
                return anchor
        else:
            stop = stop_range(state.text, caret)[1]
            if guarded and state.is_leftward and stop > anchor:
                return anchor
        return stop

    def _move_to(self, position: int) -> None:
        self._select(position, position)

    def _select(self, anchor: int, caret: int) -> None:
        self.state.selection = clamp_selection(self.state, anchor, caret)
        self._rearm_caret()

    def _rearm_caret(self) -> None:
        self.state.caret_timer = self.settings.caret_blink_rate

    def _restore_snapshot(self, text: str) -> None:
        self.undo_manager.register_action(self.state.text)
        self.state.text = text
        self.state.clear_composition()
        self._move_to(len(text))

    def _rejected(self, label: str) -> BufferDelta:
        telemetry.record_event(
            "buffer.rejected",
            data={"buffer": self.name, "command": label},
            logger_name="text_input_engine.buffer",
        )
        return self._delta(label, applied=False)

    def _delta(self, label: str, *, applied: bool) -> BufferDelta:
        state = self.state
        return BufferDelta(
            applied=applied,
            text=state.text,
            selection=state.selection,
            assemble_position=state.assemble_position,
            label=label,
        )


_Snapshot = Tuple[object, ...]


class Transaction(AbstractContextManager["Transaction"]):
    """Profiles one command and records an undo snapshot when text changed."""

    def __init__(
        self, buffer: InputBuffer, label: str, *, record_undo: bool = True
    ) -> None:
        self.buffer = buffer
        self.label = label
        self.record_undo = record_undo
        self._span_cm: Optional[ContextManager[telemetry.SpanHandle]] = None
        self._handle: Optional[telemetry.SpanHandle] = None
        self._before: _Snapshot = ()

    def __enter__(self) -> "Transaction":
        self._before = _snapshot(self.buffer.state)
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component=True,
            metadata={"buffer": self.buffer.name},
        )
        self._handle = self._span_cm.__enter__()
        return self

    def commit(self) -> BufferDelta:
        state = self.buffer.state
        before_text = self._before[0]
        if self.record_undo and state.text != before_text:
            self.buffer.undo_manager.register_action(str(before_text))
        applied = _snapshot(state) != self._before
        if self._handle is not None:
            self._handle.add_metadata("applied", applied)
        return self.buffer._delta(self.label, applied=applied)

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False


def _snapshot(state: EditState) -> _Snapshot:
    return (
        state.text,
        state.selection,
        state.assemble_position,
        state.focused,
        state.disabled,
        state.input_type,
        state.hangul_mode,
    )


__all__ = ["BufferDelta", "InputBuffer", "Transaction"]
