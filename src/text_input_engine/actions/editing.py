"""Deletion, history and clipboard actions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from text_input_engine.buffer import TextUnit
from text_input_engine.controller.base import CommandResult, InputContext

if TYPE_CHECKING:
    from text_input_engine.keymaps.resolver import ResolutionMatch


def _unit(match: ResolutionMatch) -> TextUnit:
    return TextUnit(str(match.action.metadata.get("unit", TextUnit.CHARACTER.value)))


def delete_backward(context: InputContext, match: ResolutionMatch) -> CommandResult:
    return CommandResult.from_delta(context.buffer.delete_backward(_unit(match)))


def delete_forward(context: InputContext, match: ResolutionMatch) -> CommandResult:
    return CommandResult.from_delta(context.buffer.delete_forward(_unit(match)))


def undo(context: InputContext, match: ResolutionMatch) -> CommandResult:
    del match
    return CommandResult.from_delta(context.buffer.undo())


def redo(context: InputContext, match: ResolutionMatch) -> CommandResult:
    del match
    return CommandResult.from_delta(context.buffer.redo())


def copy_selection(context: InputContext, match: ResolutionMatch) -> CommandResult:
    del match
    text = context.buffer.copy()
    if text is None:
        return CommandResult(consumed=True, status="noop")
    return CommandResult(consumed=True, status="copy", clipboard=text)


def cut_selection(context: InputContext, match: ResolutionMatch) -> CommandResult:
    del match
    text = context.buffer.cut()
    if text is None:
        return CommandResult(consumed=True, status="noop")
    return CommandResult(consumed=True, status="cut", clipboard=text)


def request_paste(context: InputContext, match: ResolutionMatch) -> CommandResult:
    """The host owns the clipboard; it answers with ``InputController.paste``."""

    del context, match
    return CommandResult(consumed=True, status="paste_requested")


__all__ = [
    "copy_selection",
    "cut_selection",
    "delete_backward",
    "delete_forward",
    "redo",
    "request_paste",
    "undo",
]
