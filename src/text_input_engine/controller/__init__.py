"""Controller value types; ``InputController`` lives in ``input_controller``."""

from .base import COMMAND_MODIFIERS, CommandResult, InputContext, KeyInput

__all__ = [
    "COMMAND_MODIFIERS",
    "CommandResult",
    "InputContext",
    "KeyInput",
]
