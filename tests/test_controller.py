from __future__ import annotations

from typing import List

import pytest

from text_input_engine.buffer import InputBuffer
from text_input_engine.config import InputSettings, InputType
from text_input_engine.controller import CommandResult, KeyInput
from text_input_engine.controller.input_controller import InputController
from text_input_engine.events import COMMITTED
from text_input_engine.keymaps import Binding, KeymapRegistry, load_default_keymaps


def make_controller(text: str = "", **overrides: object) -> InputController:
    settings = InputSettings(**overrides)  # type: ignore[arg-type]
    controller = InputController(settings=settings)
    controller.focus()
    if text:
        controller.set_text(text)
    return controller


def press(controller: InputController, key: str, *modifiers: str) -> CommandResult:
    return controller.handle_key(KeyInput(key=key, modifiers=modifiers))


def type_text(controller: InputController, text: str) -> None:
    for char in text:
        controller.handle_key(KeyInput(key=char, text=char))


def test_keys_are_ignored_without_focus() -> None:
    controller = InputController()

    result = controller.handle_key(KeyInput(key="a", text="a"))

    assert result.consumed is False
    assert result.status == "unfocused"
    assert controller.buffer.text == ""


def test_printable_keys_insert_text() -> None:
    controller = make_controller()

    result = controller.handle_key(KeyInput(key="a", text="a"))
    controller.handle_key(KeyInput(key="B", modifiers=("shift",), text="B"))

    assert result.consumed is True
    assert result.status == "insert_character"
    assert controller.buffer.text == "aB"


def test_jamo_keys_compose() -> None:
    controller = make_controller()

    type_text(controller, "ㅎㅏㄴ")

    assert controller.buffer.text == "한"
    assert controller.flags()["composing"] is True


def test_chords_ignore_letter_case() -> None:
    controller = make_controller("hello")

    result = press(controller, "A", "meta")

    assert result.status == "select_all"
    assert controller.buffer.selection == (0, 5)


def test_korean_chord_aliases_undo_and_redo() -> None:
    controller = make_controller()
    type_text(controller, "ab")

    assert press(controller, "ㅋ", "ctrl").status == "undo"
    assert controller.buffer.text == "a"

    assert press(controller, "Z", "meta", "shift").status == "redo"
    assert controller.buffer.text == "ab"


def test_unbound_command_chords_are_swallowed() -> None:
    controller = make_controller("hello")

    result = press(controller, "q", "meta")

    assert result.consumed is True
    assert result.status == "swallowed"
    assert controller.buffer.text == "hello"


@pytest.mark.parametrize(("key", "modifier"), [("r", "meta"), ("ㄱ", "ctrl")])
def test_reload_chord_passes_through(key: str, modifier: str) -> None:
    controller = make_controller("hello")

    result = press(controller, key, modifier)

    assert result.consumed is False
    assert result.status == "pass_through"


def test_unknown_named_keys_are_left_to_the_host() -> None:
    controller = make_controller()

    result = press(controller, "F5")

    assert result.consumed is False
    assert result.status == "unhandled"


@pytest.mark.parametrize("key", ["ArrowUp", "ArrowDown", "Tab", "Shift"])
def test_single_line_field_swallows_keys(key: str) -> None:
    controller = make_controller("hello")

    result = press(controller, key)

    assert result.consumed is True
    assert result.status == "noop"
    assert controller.buffer.selection == (5, 5)


def test_paste_chord_asks_the_host() -> None:
    controller = make_controller("ab")

    result = press(controller, "v", "ctrl")
    assert result.status == "paste_requested"

    pasted = controller.paste("cd")
    assert pasted.status == "paste"
    assert controller.buffer.text == "abcd"


def test_paste_needs_focus_and_text() -> None:
    controller = InputController()

    assert controller.paste("x").status == "noop"
    controller.focus()
    assert controller.paste("").status == "noop"


def test_copy_and_cut_chords() -> None:
    controller = make_controller("hello")
    press(controller, "a", "meta")

    copied = press(controller, "c", "meta")
    assert (copied.status, copied.clipboard) == ("copy", "hello")

    cut = press(controller, "ㅌ", "ctrl")
    assert (cut.status, cut.clipboard) == ("cut", "hello")
    assert controller.buffer.text == ""


def test_copy_is_blocked_for_passwords() -> None:
    controller = make_controller("secret", input_type=InputType.PASSWORD)
    press(controller, "a", "ctrl")

    result = press(controller, "c", "ctrl")

    assert result.status == "noop"
    assert result.clipboard is None


def test_escape_only_acts_on_a_selection() -> None:
    controller = make_controller("hello")

    assert press(controller, "Escape").consumed is False

    controller.buffer.set_selection(1, 3)
    result = press(controller, "Escape")
    assert result.status == "collapse_selection"
    assert controller.buffer.selection == (3, 3)


def test_enter_commits_value() -> None:
    controller = make_controller("hello")
    commits: List[object] = []
    controller.bus.subscribe(COMMITTED, commits.append)

    result = press(controller, "Enter")

    assert result.status == "commit"
    assert commits == ["hello"]


def test_hangul_mode_key_toggles_layout() -> None:
    controller = make_controller()

    result = press(controller, "HangulMode")
    assert (result.status, result.message) == ("hangul_mode", "on")

    type_text(controller, "gks")
    assert controller.buffer.text == "한"

    assert press(controller, "HangulMode").message == "off"
    assert controller.flags()["composing"] is False


def test_modifier_arrows_move_by_word_and_line() -> None:
    controller = make_controller("hello world")

    result = press(controller, "ArrowLeft", "alt", "shift")
    assert result.status == "select"
    assert controller.buffer.selection == (11, 6)

    assert press(controller, "ArrowLeft", "meta").status == "move"
    assert controller.buffer.selection == (0, 0)

    press(controller, "End", "shift")
    assert controller.buffer.selection == (0, 11)


def test_modifier_backspace_deletes_by_unit() -> None:
    controller = make_controller("hello big world")

    press(controller, "Backspace", "ctrl")
    assert controller.buffer.text == "hello big "

    result = press(controller, "Backspace", "meta")
    assert result.status == "delete_backward"
    assert controller.buffer.text == ""


def test_extra_bindings_reach_builtin_actions() -> None:
    registry = KeymapRegistry()
    load_default_keymaps(
        registry,
        extra_bindings=[
            Binding(
                id="custom.kill",
                stroke="ctrl+k",  # type: ignore[arg-type]
                action_id="editing.delete_forward_line",
            )
        ],
    )
    controller = InputController(keymap_registry=registry)
    controller.focus()
    controller.set_text("hello")
    controller.buffer.set_selection(2, 2)

    press(controller, "k", "ctrl")

    assert controller.buffer.text == "he"


def test_pointer_and_hover_entry_points() -> None:
    controller = make_controller("hello")

    assert controller.pointer_down(3).status == "pointer_down"
    assert controller.pointer_move(0).status == "drag_selection"
    controller.pointer_up()
    assert controller.buffer.selection == (0, 3)

    assert controller.double_click(1).status == "set_selection"
    assert controller.buffer.selection == (0, 5)

    assert controller.hover(True).status == "hover"
    assert controller.hover(True).consumed is False


def test_field_state_entry_points() -> None:
    controller = make_controller("12", input_type=InputType.NUMBER)

    assert controller.set_text("x").status == "noop"
    assert controller.set_type("text").status == "set_type"
    assert controller.set_text("x").status == "set_text"

    controller.set_disabled(True)
    assert controller.buffer.focused is False
    assert controller.focus().status == "noop"


def test_tick_reports_caret_visibility() -> None:
    controller = make_controller(caret_blink_rate=0.5)

    assert controller.tick(0.0) is True
    assert controller.tick(0.5) is False


def test_buffer_and_settings_are_exclusive() -> None:
    with pytest.raises(ValueError):
        InputController(InputBuffer(), settings=InputSettings())
