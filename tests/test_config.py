"""Tests for stoptoken.config — StopTokenConfig + configure()."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from stoptoken.config import (
    ENV_TIMER_BACKEND,
    StopTokenConfig,
    TimerBackendName,
    configure,
    get_config,
    reset,
)

# ---------------------------------------------------------------------------
# StopTokenConfig validation
# ---------------------------------------------------------------------------


class TestStopTokenConfig:
    def test_defaults(self) -> None:
        cfg = StopTokenConfig()
        assert cfg.timer_backend == TimerBackendName.ASYNCIO
        assert cfg.log_level == "WARNING"
        assert cfg.log_format == "text"

    def test_custom_values(self) -> None:
        cfg = StopTokenConfig(timer_backend="trio", log_level="DEBUG", log_format="json")
        assert cfg.timer_backend == TimerBackendName.TRIO
        assert cfg.log_level == "DEBUG"
        assert cfg.log_format == "json"

    def test_frozen(self) -> None:
        cfg = StopTokenConfig()
        with pytest.raises(ValidationError):
            cfg.timer_backend = TimerBackendName.TRIO  # type: ignore[misc]

    def test_invalid_backend(self) -> None:
        with pytest.raises(ValidationError):
            StopTokenConfig(timer_backend="gevent")  # type: ignore[arg-type]

    def test_invalid_log_format(self) -> None:
        with pytest.raises(ValidationError):
            StopTokenConfig(log_format="xml")

    def test_backend_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(ENV_TIMER_BACKEND, " Trio ")
        assert StopTokenConfig().timer_backend == TimerBackendName.TRIO

    def test_invalid_backend_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(ENV_TIMER_BACKEND, "gevent")
        with pytest.raises(ValidationError):
            StopTokenConfig()

    def test_explicit_value_beats_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(ENV_TIMER_BACKEND, "trio")
        assert StopTokenConfig(timer_backend="anyio").timer_backend == TimerBackendName.ANYIO


# ---------------------------------------------------------------------------
# configure / get_config / reset
# ---------------------------------------------------------------------------


class TestConfigure:
    def test_get_config_before_configure(self) -> None:
        assert get_config() == StopTokenConfig()

    def test_configure_from_kwargs(self) -> None:
        cfg = configure(timer_backend="anyio")
        assert cfg.timer_backend == TimerBackendName.ANYIO
        assert get_config() is cfg

    def test_configure_with_object(self) -> None:
        cfg = StopTokenConfig(timer_backend="trio")
        assert configure(cfg) is cfg
        assert get_config() is cfg

    def test_idempotent(self) -> None:
        first = configure(timer_backend="trio")
        second = configure(timer_backend="anyio")
        assert second is first
        assert get_config().timer_backend == TimerBackendName.TRIO

    def test_force_reconfigures(self) -> None:
        configure(timer_backend="trio")
        cfg = configure(timer_backend="anyio", force=True)
        assert cfg.timer_backend == TimerBackendName.ANYIO

    def test_reset(self) -> None:
        configure(timer_backend="trio")
        reset()
        assert get_config().timer_backend == TimerBackendName.ASYNCIO

    def test_applies_logging(self) -> None:
        configure(log_level="DEBUG", log_format="json")
        root = logging.getLogger("stoptoken")
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
