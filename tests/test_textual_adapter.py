from __future__ import annotations

from typing import List, Optional

import pytest
from textual import events

from text_input_engine.adapters.textual import (
    TextualInputAdapter,
    TextualUIHooks,
    to_key_input,
)
from text_input_engine.buffer import BufferMirror, BufferSync
from text_input_engine.config import InputSettings
from text_input_engine.controller.input_controller import InputController
from text_input_engine.events import CLIPBOARD_WRITE, COMMITTED, FOCUS_CHANGED


class Recorder:
    """Collects everything the adapter pushes at the host."""

    def __init__(self, clipboard: Optional[str] = None) -> None:
        self.mirrors: List[BufferMirror] = []
        self.statuses: List[str] = []
        self.clipboard_writes: List[str] = []
        self.events: List[tuple[str, object | None]] = []
        self.logs: List[str] = []
        self.clipboard = clipboard

    def hooks(self) -> TextualUIHooks:
        return TextualUIHooks(
            update_buffer=self.mirrors.append,
            update_status=self.statuses.append,
            write_clipboard=self.clipboard_writes.append,
            read_clipboard=lambda: self.clipboard,
            handle_event=lambda name, payload: self.events.append((name, payload)),
            log=self.logs.append,
        )


def make_adapter(
    text: str = "", *, clipboard: Optional[str] = None
) -> tuple[TextualInputAdapter, Recorder]:
    controller = InputController(settings=InputSettings(default_value=text))
    recorder = Recorder(clipboard)
    adapter = TextualInputAdapter(controller, recorder.hooks())
    adapter.handle_event(events.Focus())
    return adapter, recorder


@pytest.mark.parametrize(
    ("key", "character", "expected_key", "expected_modifiers"),
    [
        ("ctrl+shift+left", None, "ArrowLeft", ("ctrl", "shift")),
        ("backspace", None, "Backspace", ()),
        ("space", " ", " ", ()),
        ("shift+a", "A", "A", ()),
        ("ctrl+a", None, "a", ("ctrl",)),
        ("super+z", None, "z", ("meta",)),
        ("a", "a", "a", ()),
    ],
)
def test_to_key_input_translates_textual_names(
    key: str,
    character: Optional[str],
    expected_key: str,
    expected_modifiers: tuple[str, ...],
) -> None:
    key_input = to_key_input(key, character)

    assert key_input.key == expected_key
    assert key_input.modifiers == expected_modifiers


def test_focus_event_reaches_buffer_and_host() -> None:
    adapter, recorder = make_adapter()

    assert adapter.controller.buffer.focused is True
    assert (FOCUS_CHANGED, True) in recorder.events

    adapter.handle_event(events.Blur())

    assert adapter.controller.buffer.focused is False
    assert recorder.mirrors[-1].focused is False


def test_key_events_update_buffer_and_status() -> None:
    adapter, recorder = make_adapter()

    adapter.handle_event(events.Key("h", "h"))
    adapter.handle_event(events.Key("i", "i"))

    assert recorder.mirrors[-1].text == "hi"
    assert recorder.mirrors[-1].selection == (2, 2)
    assert recorder.statuses[-1] == "insert_character"
    assert any(line.startswith("key ->") for line in recorder.logs)


def test_paste_event_inserts_text() -> None:
    adapter, recorder = make_adapter("ab")

    result = adapter.handle_event(events.Paste("cd"))

    assert result is not None
    assert result.status == "paste"
    assert recorder.mirrors[-1].text == "cdab"


def test_paste_chord_reads_host_clipboard() -> None:
    adapter, recorder = make_adapter(clipboard="xyz")

    result = adapter.handle_textual_key("ctrl+v")

    assert result.status == "paste"
    assert recorder.mirrors[-1].text == "xyz"


def test_copy_writes_host_clipboard() -> None:
    adapter, recorder = make_adapter("hello")

    adapter.handle_textual_key("ctrl+a")
    adapter.handle_textual_key("ctrl+c")

    assert recorder.clipboard_writes == ["hello"]
    assert (CLIPBOARD_WRITE, "hello") in recorder.events


def test_enter_reports_commit_status() -> None:
    adapter, recorder = make_adapter("done")

    adapter.handle_textual_key("enter")

    assert (COMMITTED, "done") in recorder.events
    assert "commit::done" in recorder.statuses


def test_unhandled_keys_do_not_touch_status() -> None:
    adapter, recorder = make_adapter()
    before = list(recorder.statuses)

    result = adapter.handle_textual_key("f5")

    assert result.consumed is False
    assert recorder.statuses == before


def test_tick_refreshes_only_when_caret_flips() -> None:
    adapter, recorder = make_adapter()
    count = len(recorder.mirrors)

    assert adapter.tick(0.1) is True
    assert len(recorder.mirrors) == count

    assert adapter.tick(0.5) is False
    assert len(recorder.mirrors) == count + 1
    assert recorder.mirrors[-1].caret_visible is False


def test_unrelated_events_are_ignored() -> None:
    adapter, recorder = make_adapter()
    count = len(recorder.mirrors)

    assert adapter.handle_event(events.Mount()) is None
    assert len(recorder.mirrors) == count


def test_adapter_serves_as_buffer_sync() -> None:
    adapter, recorder = make_adapter("ab")
    sync: BufferSync = adapter

    sync.push_paste("cd")

    assert sync.pull_buffer().text == "cdab"
    assert recorder.mirrors[-1] == sync.pull_buffer()
    assert recorder.statuses[-1] == "paste"
