"""Token-indexed keymap resolution with telemetry instrumentation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Literal, Mapping, Optional

from text_input_engine.runtime.telemetry import span

from .models import ActionRef, Binding
from .registry import KeymapRegistry


@dataclass(frozen=True, slots=True)
class ResolutionMatch:
    """Resolved binding paired with its action."""

    binding: Binding
    action: ActionRef


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    """Outcome returned from the resolver."""

    status: Literal["match", "miss"]
    match: Optional[ResolutionMatch] = None
    token: str = ""


class KeymapResolver:
    """Resolves a stroke token against the registry for the current flags."""

    def __init__(
        self, registry: KeymapRegistry, *, logger_name: str | None = None
    ) -> None:
        self._registry = registry
        self._logger_name = logger_name
        self._cache: Optional[tuple[int, Dict[str, tuple[str, ...]]]] = None

    def resolve(
        self,
        token: str,
        *,
        context: Optional[Mapping[str, bool]] = None,
    ) -> ResolutionResult:
        ctx = context or {}
        with span(
            "keymaps::resolve",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"token": token},
        ) as handle:
            candidates = self._ensure_index().get(token, ())
            match = self._select_match(candidates, ctx)
            if match is None:
                handle.add_metadata("status", "miss")
                return ResolutionResult(status="miss", token=token)

            handle.add_metadata("status", "match")
            handle.add_metadata("binding_id", match.binding.id)
            return ResolutionResult(status="match", match=match, token=token)

    def reset(self) -> None:
        self._cache = None

    def _ensure_index(self) -> Dict[str, tuple[str, ...]]:
        revision = self._registry.revision()
        if self._cache and self._cache[0] == revision:
            return self._cache[1]

        index: Dict[str, list[str]] = {}
        for binding in self._registry.iter_bindings():
            index.setdefault(binding.token, []).append(binding.id)
        frozen = {token: tuple(ids) for token, ids in index.items()}
        self._cache = (revision, frozen)
        return frozen

    def _select_match(
        self, binding_ids: tuple[str, ...], context: Mapping[str, bool]
    ) -> Optional[ResolutionMatch]:
        matches: list[ResolutionMatch] = []
        for binding_id in binding_ids:
            binding = self._registry.get_binding(binding_id)
            if not binding.allows(context):
                continue
            action = self._registry.get_action(binding.action_id)
            matches.append(ResolutionMatch(binding=binding, action=action))

        if not matches:
            return None

        matches.sort(key=lambda m: (-m.binding.priority, m.binding.id))
        return matches[0]


__all__ = [
    "KeymapResolver",
    "ResolutionResult",
    "ResolutionMatch",
]
