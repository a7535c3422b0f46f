"""Editing verbs bound to keys by the default keymap."""

from .core import (
    collapse_selection,
    commit_input,
    noop_action,
    pass_through,
    toggle_hangul_mode,
)
from .editing import (
    copy_selection,
    cut_selection,
    delete_backward,
    delete_forward,
    redo,
    request_paste,
    undo,
)
from .navigation import move_caret, select_all

__all__ = [
    "collapse_selection",
    "commit_input",
    "noop_action",
    "pass_through",
    "toggle_hangul_mode",
    "copy_selection",
    "cut_selection",
    "delete_backward",
    "delete_forward",
    "redo",
    "request_paste",
    "undo",
    "move_caret",
    "select_all",
]
