"""Built-in keymap for a single-line input field.

Modifier conventions: ``alt`` and ``ctrl`` move by word, ``meta`` moves to the
line edge, ``shift`` extends the selection. Chords accept both ``meta`` and
``ctrl`` and the two-set Korean key in the same position.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Sequence

from text_input_engine.actions import core as core_actions
from text_input_engine.actions import editing as editing_actions
from text_input_engine.actions import navigation as navigation_actions
from text_input_engine.buffer import Direction, TextUnit

from .models import ActionRef, Binding, KeyStroke
from .registry import KeymapRegistry

ARROWS = {Direction.LEFT: "ArrowLeft", Direction.RIGHT: "ArrowRight"}
EDGE_KEYS = {Direction.LEFT: "Home", Direction.RIGHT: "End"}
UNIT_MODIFIERS: dict[TextUnit, tuple[tuple[str, ...], ...]] = {
    TextUnit.CHARACTER: ((),),
    TextUnit.WORD: (("alt",), ("ctrl",)),
    TextUnit.LINE: (("meta",),),
}
CHORD_MODIFIERS = ("meta", "ctrl")
# Latin chord key -> the jamo on the same physical key.
KOREAN_CHORD_ALIASES = {"a": "ㅁ", "z": "ㅋ", "c": "ㅊ", "x": "ㅌ", "v": "ㅍ", "r": "ㄱ"}


def _move_id(direction: Direction, unit: TextUnit, extend: bool) -> str:
    verb = "select" if extend else "move"
    return f"navigation.{verb}_{unit.value}_{direction.value}"


def _movement_actions() -> Iterator[ActionRef]:
    for direction in Direction:
        for unit in TextUnit:
            for extend in (False, True):
                verb = "Extend selection" if extend else "Move caret"
                yield ActionRef(
                    id=_move_id(direction, unit, extend),
                    handler=navigation_actions.move_caret,
                    description=f"{verb} one {unit.value} {direction.value}",
                    metadata={
                        "direction": direction.value,
                        "unit": unit.value,
                        "extend": extend,
                    },
                )


def _delete_actions() -> Iterator[ActionRef]:
    for unit in TextUnit:
        yield ActionRef(
            id=f"editing.delete_backward_{unit.value}",
            handler=editing_actions.delete_backward,
            description=f"Delete the {unit.value} before the caret",
            metadata={"unit": unit.value},
        )
        yield ActionRef(
            id=f"editing.delete_forward_{unit.value}",
            handler=editing_actions.delete_forward,
            description=f"Delete the {unit.value} after the caret",
            metadata={"unit": unit.value},
        )


DEFAULT_ACTIONS: tuple[ActionRef, ...] = (
    ActionRef(
        id="core.noop",
        handler=core_actions.noop_action,
        description="Swallow the key",
    ),
    ActionRef(
        id="core.pass_through",
        handler=core_actions.pass_through,
        description="Leave the key to the host",
    ),
    ActionRef(
        id="core.commit",
        handler=core_actions.commit_input,
        description="Submit the current value",
    ),
    ActionRef(
        id="core.toggle_hangul_mode",
        handler=core_actions.toggle_hangul_mode,
        description="Switch between Latin and Hangul entry",
    ),
    ActionRef(
        id="core.collapse_selection",
        handler=core_actions.collapse_selection,
        description="Drop the selection, keeping the caret",
    ),
    ActionRef(
        id="navigation.select_all",
        handler=navigation_actions.select_all,
        description="Select the whole value",
    ),
    ActionRef(
        id="editing.undo",
        handler=editing_actions.undo,
        description="Undo the last edit",
    ),
    ActionRef(
        id="editing.redo",
        handler=editing_actions.redo,
        description="Redo the last undone edit",
    ),
    ActionRef(
        id="editing.copy",
        handler=editing_actions.copy_selection,
        description="Copy the selection",
    ),
    ActionRef(
        id="editing.cut",
        handler=editing_actions.cut_selection,
        description="Cut the selection",
    ),
    ActionRef(
        id="editing.paste",
        handler=editing_actions.request_paste,
        description="Ask the host for clipboard text",
    ),
    *_movement_actions(),
    *_delete_actions(),
)


def _binding(
    prefix: str,
    key: str,
    modifiers: Sequence[str],
    action_id: str,
    *,
    description: str = "",
    when: Sequence[str] = (),
) -> Binding:
    stroke = KeyStroke(key, tuple(modifiers))
    return Binding(
        id=f"{prefix}.{stroke.token}",
        stroke=stroke,
        action_id=action_id,
        description=description,
        when=tuple(when),
    )


def _navigation_bindings() -> Iterator[Binding]:
    for direction, key in ARROWS.items():
        for unit, modifier_sets in UNIT_MODIFIERS.items():
            for modifiers in modifier_sets:
                yield _binding(
                    "navigation", key, modifiers, _move_id(direction, unit, False)
                )
                yield _binding(
                    "navigation",
                    key,
                    modifiers + ("shift",),
                    _move_id(direction, unit, True),
                )
    for direction, key in EDGE_KEYS.items():
        yield _binding("navigation", key, (), _move_id(direction, TextUnit.LINE, False))
        yield _binding(
            "navigation", key, ("shift",), _move_id(direction, TextUnit.LINE, True)
        )


def _delete_bindings() -> Iterator[Binding]:
    for key, verb in (("Backspace", "backward"), ("Delete", "forward")):
        for unit, modifier_sets in UNIT_MODIFIERS.items():
            for modifiers in modifier_sets:
                yield _binding(
                    "editing", key, modifiers, f"editing.delete_{verb}_{unit.value}"
                )


def _chord_bindings() -> Iterator[Binding]:
    chords = (
        ("a", (), "navigation.select_all"),
        ("z", (), "editing.undo"),
        ("z", ("shift",), "editing.redo"),
        ("c", (), "editing.copy"),
        ("x", (), "editing.cut"),
        ("v", (), "editing.paste"),
        ("r", (), "core.pass_through"),
    )
    for latin, extra, action_id in chords:
        for key in (latin, KOREAN_CHORD_ALIASES[latin]):
            for modifier in CHORD_MODIFIERS:
                yield _binding("chord", key, (modifier,) + extra, action_id)


def _core_bindings() -> Iterator[Binding]:
    yield _binding(
        "core",
        "Escape",
        (),
        "core.collapse_selection",
        description="Collapse the selection",
        when=("selected",),
    )
    yield _binding("core", "Enter", (), "core.commit", description="Submit")
    yield _binding("core", "HangulMode", (), "core.toggle_hangul_mode")
    # Keys a single-line field swallows without effect.
    for key in ("ArrowUp", "ArrowDown", "Tab", "Meta", "Alt", "Shift", "Control"):
        yield _binding("core", key, (), "core.noop")


DEFAULT_BINDINGS: tuple[Binding, ...] = (
    *_navigation_bindings(),
    *_delete_bindings(),
    *_chord_bindings(),
    *_core_bindings(),
)


def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    replace: bool = False,
    extra_bindings: Iterable[Binding] | None = None,
    include_actions: Sequence[str] | None = None,
    exclude_actions: Sequence[str] | None = None,
    include_bindings: Sequence[str] | None = None,
    exclude_bindings: Sequence[str] | None = None,
) -> None:
    """Register built-in actions and bindings, optionally filtered by id."""

    allowed_actions = _build_filters(include_actions, exclude_actions)
    allowed_bindings = _build_filters(include_bindings, exclude_bindings)

    for action in DEFAULT_ACTIONS:
        if not _selected(action.id, allowed_actions):
            continue
        registry.register_action(action, replace=replace)

    for binding in DEFAULT_BINDINGS:
        if not _selected(binding.id, allowed_bindings):
            continue
        if not _selected(binding.action_id, allowed_actions):
            continue
        registry.register_binding(binding, replace=replace)

    if extra_bindings:
        for binding in extra_bindings:
            registry.register_binding(binding, replace=replace)


def _build_filters(
    include: Sequence[str] | None, exclude: Sequence[str] | None
) -> tuple[set[str] | None, set[str]]:
    include_set = set(include) if include else None
    exclude_set = set(exclude or ())
    return include_set, exclude_set


def _selected(item_id: str, filters: tuple[set[str] | None, set[str]]) -> bool:
    include, exclude = filters
    if include is not None and item_id not in include:
        return False
    if item_id in exclude:
        return False
    return True


__all__ = ["load_default_keymaps", "DEFAULT_ACTIONS", "DEFAULT_BINDINGS"]
