"""Core action implementations that do not touch the text itself."""

from __future__ import annotations

from typing import TYPE_CHECKING

from text_input_engine.controller.base import CommandResult, InputContext

if TYPE_CHECKING:
    from text_input_engine.keymaps.resolver import ResolutionMatch


def noop_action(context: InputContext, match: ResolutionMatch) -> CommandResult:
    del context, match
    return CommandResult(consumed=True, status="noop")


def pass_through(context: InputContext, match: ResolutionMatch) -> CommandResult:
    """Leave the key to the host (browser refresh and the like)."""

    del context
    return CommandResult(
        consumed=False, status="pass_through", message=match.binding.token
    )


def commit_input(context: InputContext, match: ResolutionMatch) -> CommandResult:
    del match
    delta = context.buffer.commit()
    return CommandResult.from_delta(delta, status="commit")


def toggle_hangul_mode(context: InputContext, match: ResolutionMatch) -> CommandResult:
    del match
    delta = context.buffer.toggle_hangul_mode()
    enabled = context.buffer.state.hangul_mode
    return CommandResult(
        consumed=True,
        status="hangul_mode",
        message="on" if enabled else "off",
        delta=delta,
    )


def collapse_selection(context: InputContext, match: ResolutionMatch) -> CommandResult:
    del match
    return CommandResult.from_delta(context.buffer.collapse_selection())


__all__ = [
    "collapse_selection",
    "commit_input",
    "noop_action",
    "pass_through",
    "toggle_hangul_mode",
]
