"""Textual integration for the input engine."""

from .controller import TextualInputAdapter, TextualUIHooks, to_key_input

__all__ = ["TextualInputAdapter", "TextualUIHooks", "to_key_input"]
