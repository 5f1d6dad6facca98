"""Shared fixtures for the stoptoken test suite."""

from __future__ import annotations

import pytest

from stoptoken.config import ENV_TIMER_BACKEND, configure, reset
from stoptoken.log import reset_logging


@pytest.fixture(autouse=True)
def _reset_state(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start every test with default configuration and logging."""
    monkeypatch.delenv(ENV_TIMER_BACKEND, raising=False)
    reset()
    reset_logging()


@pytest.fixture(params=["asyncio", "trio"])
def anyio_backend(request: pytest.FixtureRequest) -> str:
    """Run ``@pytest.mark.anyio`` tests under both runtimes."""
    return request.param


@pytest.fixture
def timer_backend(anyio_backend: str) -> str:
    """Schedule deadline tokens with the timer facility of the running runtime."""
    configure(timer_backend=anyio_backend, force=True)
    return anyio_backend
