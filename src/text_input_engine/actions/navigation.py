"""Caret movement and selection actions.

Every movement binding shares ``move_caret``; the action metadata carries the
``direction``, ``unit`` and ``extend`` arguments.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from text_input_engine.buffer import Direction, TextUnit
from text_input_engine.controller.base import CommandResult, InputContext

if TYPE_CHECKING:
    from text_input_engine.keymaps.resolver import ResolutionMatch


def move_caret(context: InputContext, match: ResolutionMatch) -> CommandResult:
    metadata = match.action.metadata
    direction = Direction(str(metadata.get("direction", Direction.RIGHT.value)))
    unit = TextUnit(str(metadata.get("unit", TextUnit.CHARACTER.value)))
    extend = bool(metadata.get("extend", False))
    delta = context.buffer.move_caret(direction, extend=extend, unit=unit)
    return CommandResult.from_delta(delta, status="select" if extend else "move")


def select_all(context: InputContext, match: ResolutionMatch) -> CommandResult:
    del match
    return CommandResult.from_delta(context.buffer.select_all())


__all__ = ["move_caret", "select_all"]
