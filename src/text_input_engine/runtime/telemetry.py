"""Structured logging and profiling for the input engine, backed by telelog.

Buffer commands, keymap lookups and undo replays report through ``span`` and
``record_event``. Hosts choose where that output goes with ``configure``:
an explicit ``telelog.Config``, one of the ``PRESETS``, or (by default) the
``TEXT_INPUT_ENGINE_*`` environment variables.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, Mapping, Optional

import telelog  # type: ignore[import]

ENV_PREFIX = "TEXT_INPUT_ENGINE_"
ENGINE_LOGGER = "text_input_engine"
_TRUTHY = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True, slots=True)
class TelemetrySettings:
    """Output options translated onto a ``telelog.Config`` by :meth:`build`."""

    level: str = "WARNING"
    console: bool = True
    color: bool = True
    json: bool = False
    log_file: Optional[str] = None
    buffer_size: Optional[int] = None

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "TelemetrySettings":
        env = os.environ if environ is None else environ

        def flag(name: str) -> bool:
            return env.get(ENV_PREFIX + name, "").strip().lower() in _TRUTHY

        buffer_size = None
        if flag("LOG_BUFFERED"):
            buffer_size = int(env.get(ENV_PREFIX + "LOG_BUFFER_SIZE", "2048"))
        return cls(
            level=env.get(ENV_PREFIX + "LOG_LEVEL", "WARNING").upper(),
            console=not flag("DISABLE_CONSOLE"),
            color=not flag("NO_COLOR"),
            json=flag("LOG_JSON"),
            log_file=env.get(ENV_PREFIX + "LOG_FILE") or None,
            buffer_size=buffer_size,
        )

    def build(self) -> Any:
        config = telelog.Config()
        config.with_min_level(self.level)
        config.with_console_output(self.console)
        if self.console:
            config.with_colored_output(self.color)
        config.with_json_format(self.json)
        if self.log_file:
            config.with_file_output(self.log_file)
        if self.buffer_size is not None:
            config.with_buffering(True)
            config.with_buffer_size(self.buffer_size)
        config.with_profiling(True)
        return config


PRESETS: Dict[str, TelemetrySettings] = {
    # Every keystroke, transaction and lookup on the console.
    "development": TelemetrySettings(level="DEBUG"),
    # Embedded in a host application: warnings and failed spans only.
    "production": TelemetrySettings(
        console=False, log_file="text_input_engine.log", buffer_size=2048
    ),
    # Machine-readable span timings for profiling typing latency.
    "performance": TelemetrySettings(
        level="DEBUG",
        console=False,
        json=True,
        log_file="text_input_engine-profile.jsonl",
        buffer_size=8192,
    ),
}

_config: Optional[Any] = None
_loggers: Dict[str, Any] = {}


def configure(*, config: Optional[Any] = None, preset: Optional[str] = None) -> None:
    """Adopt ``config`` or a named preset; with neither, read the environment.

    ``TEXT_INPUT_ENGINE_LOG_FILE`` still overrides the file a preset writes to.
    Loggers handed out earlier are dropped so the next lookup sees the change.
    """

    global _config
    if config is not None and preset is not None:
        raise ValueError("Provide either `config` or `preset`, not both.")

    if preset is not None:
        settings = PRESETS.get(preset.lower())
        if settings is None:
            choices = ", ".join(sorted(PRESETS))
            raise ValueError(f"Unknown preset {preset!r}; use one of {choices}")
        log_file = os.environ.get(ENV_PREFIX + "LOG_FILE")
        if log_file:
            settings = replace(settings, log_file=log_file)
        config = settings.build()
    elif config is None:
        config = TelemetrySettings.from_env().build()

    _config = config
    _loggers.clear()


def get_logger(name: Optional[str] = None) -> Any:
    key = name or ENGINE_LOGGER
    logger = _loggers.get(key)
    if logger is None:
        if _config is None:
            configure()
        logger = _loggers[key] = telelog.Logger.with_config(key, _config)
    return logger


def _emit(logger: Any, level: str, message: str, fields: Mapping[str, Any]) -> None:
    pairs = [(str(key), str(value)) for key, value in fields.items()]
    structured = getattr(logger, f"{level}_with", None)
    if structured is not None:
        structured(message, pairs)
        return
    plain = getattr(logger, level, None)
    if plain is None:
        raise ValueError(f"Unsupported log level {level!r}")
    plain(f"{message} {dict(pairs)}")


def record_event(
    name: str,
    *,
    level: str = "debug",
    data: Optional[Mapping[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Log ``event::<name>`` with ``data`` attached as key/value pairs."""

    fields = {"event": name, **(data or {})}
    _emit(get_logger(logger_name), level.lower(), f"event::{name}", fields)


@dataclass
class SpanHandle:
    """Yielded by ``span``; metadata added here is reported if the block fails."""

    name: str
    logger: Any
    component: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = str(value)

    def fail(self, reason: str) -> None:
        fields: Dict[str, Any] = {"span": self.name, **self.metadata}
        if self.component:
            fields["component"] = self.component
        fields["reason"] = reason
        _emit(self.logger, "error", "span::fail", fields)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Mapping[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile the block as ``name``.

    ``metadata`` is pushed as logger context while the block runs.
    ``component=True`` also tracks the block as a component named ``name``;
    a string names the component explicitly.
    """

    logger = get_logger(logger_name)
    if component is True:
        component_name: Optional[str] = name
    elif isinstance(component, str):
        component_name = component
    else:
        component_name = None
    context = {key: str(value) for key, value in (metadata or {}).items()}
    handle = SpanHandle(name, logger, component_name, dict(context))

    with ExitStack() as stack:
        for key, value in context.items():
            logger.add_context(key, value)
            stack.callback(logger.remove_context, key)
        if component_name:
            stack.enter_context(logger.track_component(component_name))
        stack.enter_context(logger.profile(name))
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise


__all__ = [
    "ENV_PREFIX",
    "PRESETS",
    "SpanHandle",
    "TelemetrySettings",
    "configure",
    "get_logger",
    "record_event",
    "span",
]
