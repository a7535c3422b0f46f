"""Listener registry for notifications a host may want to react to."""

from __future__ import annotations

from typing import Callable, Dict, List

FOCUS_CHANGED = "focus.changed"
HOVER_CHANGED = "hover.changed"
COMMITTED = "input.committed"
CLIPBOARD_WRITE = "clipboard.write"

Listener = Callable[[object], None]


class InputBus:
    """Minimal event bus; listeners are called synchronously in order."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[Listener]] = {}

    def subscribe(self, event: str, callback: Listener) -> Callable[[], None]:
        """Register ``callback`` and return a function that removes it again."""

        listeners = self._subscribers.setdefault(event, [])
        listeners.append(callback)

        def unsubscribe() -> None:
            if callback in listeners:
                listeners.remove(callback)

        return unsubscribe

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in list(self._subscribers.get(event, [])):
            callback(payload)


__all__ = [
    "CLIPBOARD_WRITE",
    "COMMITTED",
    "FOCUS_CHANGED",
    "HOVER_CHANGED",
    "InputBus",
    "Listener",
]
