"""Grouped undo/redo action log.

The manager knows nothing about text. Actions carry an opaque payload; when a
group is performed each payload is routed to ``on_undo`` or ``on_redo``
depending on which direction the manager is unwinding. Consumers register the
inverse payload while handling the callback, which is how the opposite stack
gets populated.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Generic, List, Optional, TypeVar, Union

from text_input_engine.runtime import telemetry

T = TypeVar("T")


class UndoError(RuntimeError):
    """Base class for undo integration errors."""


class UndoPayloadError(UndoError, ValueError):
    """Raised when an action is registered with an unusable payload."""


class UndoReentrancyError(UndoError):
    """Raised when undo/redo is requested while the manager is unwinding."""


class NothingToUndoError(UndoError):
    pass


class NothingToRedoError(UndoError):
    pass


class UndoState(str, Enum):
    COLLECTING = "collecting"
    UNDOING = "undoing"
    REDOING = "redoing"


class CoalesceMode(str, Enum):
    NONE = "none"
    FIRST = "first"
    LAST = "last"
    CONSECUTIVE_DUPLICATES = "consecutive_duplicates"
    DUPLICATES = "duplicates"


class UndoAction(Generic[T]):
    """Leaf entry holding one payload."""

    __slots__ = ("payload", "parent", "_on_perform")

    def __init__(
        self, payload: T, on_perform: Callable[["UndoAction[T]"], None]
    ) -> None:
        self.payload = payload
        self.parent: Optional["ActionGroup[T]"] = None
        self._on_perform = on_perform

    def perform(self) -> None:
        self._on_perform(self)


class ActionGroup(Generic[T]):
    """Composite entry; replays its children most-recent-first."""

    __slots__ = ("children", "parent", "coalesce")

    def __init__(self, coalesce: CoalesceMode = CoalesceMode.NONE) -> None:
        self.children: List[Union[UndoAction[T], "ActionGroup[T]"]] = []
        self.parent: Optional["ActionGroup[T]"] = None
        self.coalesce = coalesce

    def __len__(self) -> int:
        return len(self.children)

    def actions(self) -> List[UndoAction[T]]:
        return [child for child in self.children if isinstance(child, UndoAction)]

    def add_action(self, action: UndoAction[T]) -> bool:
        """Attach ``action`` honouring the coalescing mode; report whether kept."""

        existing = self.actions()
        mode = self.coalesce
        if mode is CoalesceMode.FIRST and existing:
            return False
        if mode is CoalesceMode.LAST and existing:
            self.children.remove(existing[-1])
        elif mode is CoalesceMode.CONSECUTIVE_DUPLICATES:
            if self.children and _same_payload(self.children[-1], action):
                return False
        elif mode is CoalesceMode.DUPLICATES:
            if any(child.payload == action.payload for child in existing):
                return False
        action.parent = self
        self.children.append(action)
        return True

    def add_group(self, group: "ActionGroup[T]") -> None:
        group.parent = self
        self.children.append(group)

    def is_empty(self) -> bool:
        return all(
            isinstance(child, ActionGroup) and child.is_empty()
            for child in self.children
        )

    def perform(self) -> None:
        for child in reversed(self.children):
            child.perform()


class UndoManager(Generic[T]):
    """Two stacks of action groups plus nested group bookkeeping."""

    def __init__(
        self,
        *,
        max_undo_levels: Optional[int] = None,
        strict: bool = False,
        payload_type: Optional[type] = None,
        on_undo: Optional[Callable[[T], None]] = None,
        on_redo: Optional[Callable[[T], None]] = None,
        logger_name: str | None = None,
    ) -> None:
        self._undo_stack: List[ActionGroup[T]] = []
        self._redo_stack: List[ActionGroup[T]] = []
        self._state = UndoState.COLLECTING
        self._open_group: Optional[ActionGroup[T]] = None
        self._group_level = 0
        self._max_undo_levels: Optional[int] = None
        self.strict = strict
        self.payload_type = payload_type
        self.on_undo = on_undo
        self.on_redo = on_redo
        self._logger_name = logger_name
        self.set_max_undo_levels(max_undo_levels)

    @property
    def state(self) -> UndoState:
        return self._state

    @property
    def group_level(self) -> int:
        return self._group_level

    @property
    def undo_count(self) -> int:
        return len(self._undo_stack)

    @property
    def redo_count(self) -> int:
        return len(self._redo_stack)

    @property
    def max_undo_levels(self) -> Optional[int]:
        return self._max_undo_levels

    def set_max_undo_levels(self, levels: Optional[int]) -> None:
        if levels is not None and levels < 0:
            raise ValueError("levels must be non-negative or None")
        self._max_undo_levels = levels
        self._trim_undo()

    def can_undo(self) -> bool:
        return bool(self._undo_stack) and self._state is UndoState.COLLECTING

    def can_redo(self) -> bool:
        return bool(self._redo_stack) and self._state is UndoState.COLLECTING

    def register_action(self, payload: T) -> None:
        self._validate(payload)
        action: UndoAction[T] = UndoAction(payload, self._perform_action)

        if self._group_level > 0 and self._open_group is not None:
            self._open_group.add_action(action)
        else:
            group: ActionGroup[T] = ActionGroup()
            group.add_action(action)
            self._push(group)

        if self._state is UndoState.COLLECTING:
            self._redo_stack.clear()

    def begin_group(self, coalesce: CoalesceMode = CoalesceMode.NONE) -> None:
        group: ActionGroup[T] = ActionGroup(coalesce)
        if self._group_level == 0 or self._open_group is None:
            self._push(group)
        else:
            self._open_group.add_group(group)
        self._open_group = group
        self._group_level += 1

    def end_group(self) -> None:
        if self._group_level == 0:
            return
        self._group_level -= 1
        closing = self._open_group
        if self._group_level == 0:
            self._open_group = None
            if closing is not None and closing.is_empty():
                self._discard(closing)
        else:
            self._open_group = closing.parent if closing is not None else None

    def undo(self) -> bool:
        self._guard_reentrancy("undo")
        if not self._undo_stack:
            if self.strict:
                raise NothingToUndoError("Nothing to undo")
            return False

        # Undo always closes whatever group is still collecting.
        while self._group_level:
            self.end_group()
        if not self._undo_stack:
            if self.strict:
                raise NothingToUndoError("Nothing to undo")
            return False

        group = self._undo_stack.pop()
        self._unwind(UndoState.UNDOING, group)
        return True

    def redo(self) -> bool:
        self._guard_reentrancy("redo")
        if not self._redo_stack:
            if self.strict:
                raise NothingToRedoError("Nothing to redo")
            return False

        while self._group_level:
            self.end_group()
        group = self._redo_stack.pop()
        self._unwind(UndoState.REDOING, group)
        return True

    def clear_undo(self) -> None:
        self._undo_stack.clear()

    def clear_redo(self) -> None:
        self._redo_stack.clear()

    def _unwind(self, state: UndoState, group: ActionGroup[T]) -> None:
        with telemetry.span(
            f"undo::{state.value}",
            logger_name=self._logger_name,
            component="undo",
            metadata={"entries": len(group)},
        ):
            self._state = state
            try:
                self.begin_group()
                group.perform()
                self.end_group()
            finally:
                self._group_level = 0
                self._open_group = None
                self._state = UndoState.COLLECTING
        telemetry.record_event(
            f"undo.{state.value}",
            data={"undo": self.undo_count, "redo": self.redo_count},
            logger_name=self._logger_name,
        )

    def _push(self, group: ActionGroup[T]) -> None:
        if self._state is UndoState.UNDOING:
            self._redo_stack.append(group)
            return
        self._undo_stack.append(group)
        self._trim_undo()

    def _discard(self, group: ActionGroup[T]) -> None:
        for stack in (self._undo_stack, self._redo_stack):
            if stack and stack[-1] is group:
                stack.pop()
                return

    def _trim_undo(self) -> None:
        limit = self._max_undo_levels
        if limit is None:
            return
        while len(self._undo_stack) > limit:
            self._undo_stack.pop(0)

    def _perform_action(self, action: UndoAction[T]) -> None:
        callback = self.on_undo if self._state is UndoState.UNDOING else self.on_redo
        if callback is not None:
            callback(action.payload)

    def _validate(self, payload: T) -> None:
        if payload is None:
            raise UndoPayloadError("Undo payload cannot be None")
        if self.payload_type is not None and not isinstance(
            payload, self.payload_type
        ):
            raise UndoPayloadError(
                f"Undo payload must be {self.payload_type.__name__}, "
                f"got {type(payload).__name__}"
            )

    def _guard_reentrancy(self, operation: str) -> None:
        if self._state is not UndoState.COLLECTING:
            raise UndoReentrancyError(
                f"Cannot {operation} while the manager is {self._state.value}"
            )


def _same_payload(
    child: Union[UndoAction[T], ActionGroup[T]], action: UndoAction[T]
) -> bool:
    return isinstance(child, UndoAction) and child.payload == action.payload


__all__ = [
    "ActionGroup",
    "CoalesceMode",
    "NothingToRedoError",
    "NothingToUndoError",
    "UndoAction",
    "UndoError",
    "UndoManager",
    "UndoPayloadError",
    "UndoReentrancyError",
    "UndoState",
]
