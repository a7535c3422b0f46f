from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, List, Optional

import pytest

from text_input_engine.buffer import InputBuffer
from text_input_engine.runtime import telemetry


class FakeLogger:
    def __init__(self) -> None:
        self.lines: List[tuple[str, str, Any]] = []
        self.context: dict[str, str] = {}
        self.profiled: List[str] = []

    def add_context(self, key: str, value: str) -> None:
        self.context[key] = value

    def remove_context(self, key: str) -> None:
        self.context.pop(key, None)

    @contextmanager
    def track_component(self, name: str) -> Iterator[None]:
        yield

    @contextmanager
    def profile(self, name: str) -> Iterator[None]:
        self.profiled.append(name)
        yield

    def debug_with(self, message: str, pairs: Any) -> None:
        self.lines.append(("debug", message, dict(pairs)))

    def error_with(self, message: str, pairs: Any) -> None:
        self.lines.append(("error", message, dict(pairs)))


@pytest.fixture
def fake_logger(monkeypatch: pytest.MonkeyPatch) -> FakeLogger:
    fake = FakeLogger()

    def get_logger(name: Optional[str] = None) -> FakeLogger:
        return fake

    monkeypatch.setattr(telemetry, "get_logger", get_logger)
    return fake


def test_configure_rejects_conflicting_arguments() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(config=object(), preset="development")


def test_configure_rejects_unknown_preset() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(preset="verbose")


def test_record_event_emits_structured_pairs(fake_logger: FakeLogger) -> None:
    telemetry.record_event("input.focus", data={"focused": True})

    level, message, pairs = fake_logger.lines[-1]
    assert (level, message) == ("debug", "event::input.focus")
    assert pairs == {"event": "input.focus", "focused": "True"}


def test_span_fails_and_reraises(fake_logger: FakeLogger) -> None:
    with pytest.raises(RuntimeError):
        with telemetry.span("buffer::boom", metadata={"buffer": "main"}):
            assert fake_logger.context == {"buffer": "main"}
            raise RuntimeError("boom")

    level, message, pairs = fake_logger.lines[-1]
    assert (level, message) == ("error", "span::fail")
    assert pairs["reason"] == "boom"
    assert fake_logger.context == {}


def test_buffer_commands_are_profiled(fake_logger: FakeLogger) -> None:
    buffer = InputBuffer(name="search")
    buffer.set_focused(True)

    buffer.insert_character("a")

    assert "buffer::focus" in fake_logger.profiled
    assert "buffer::insert_character" in fake_logger.profiled


def test_settings_read_from_environment() -> None:
    settings = telemetry.TelemetrySettings.from_env(
        {
            "TEXT_INPUT_ENGINE_LOG_LEVEL": "info",
            "TEXT_INPUT_ENGINE_DISABLE_CONSOLE": "yes",
            "TEXT_INPUT_ENGINE_LOG_BUFFERED": "1",
            "TEXT_INPUT_ENGINE_LOG_FILE": "input.log",
        }
    )

    assert settings.level == "INFO"
    assert settings.console is False
    assert settings.buffer_size == 2048
    assert settings.log_file == "input.log"
    assert settings.json is False


def test_settings_default_to_quiet_console() -> None:
    settings = telemetry.TelemetrySettings.from_env({})

    assert settings == telemetry.TelemetrySettings()
    assert settings.level == "WARNING"
    assert settings.console is True


def test_presets_cover_the_supported_profiles() -> None:
    assert set(telemetry.PRESETS) == {"development", "production", "performance"}
    assert telemetry.PRESETS["development"].level == "DEBUG"
    assert telemetry.PRESETS["production"].console is False
    assert telemetry.PRESETS["performance"].json is True
