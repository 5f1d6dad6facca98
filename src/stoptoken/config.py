"""Library configuration: timer backend selection and logging setup."""

from __future__ import annotations

import os
import threading
from enum import StrEnum

from pydantic import BaseModel, Field

from stoptoken.log import configure_logging

ENV_TIMER_BACKEND = "STOPTOKEN_TIMER_BACKEND"


class TimerBackendName(StrEnum):
    """Timer facilities that deadline tokens can be scheduled with."""

    ASYNCIO = "asyncio"
    TRIO = "trio"
    ANYIO = "anyio"


def _default_timer_backend() -> str:
    return os.environ.get(ENV_TIMER_BACKEND, "").strip().lower() or TimerBackendName.ASYNCIO


class StopTokenConfig(BaseModel, frozen=True):
    """Immutable library configuration."""

    timer_backend: TimerBackendName = Field(
        default_factory=_default_timer_backend,
        validate_default=True,
        description="Timer backend used by deadline tokens (asyncio, trio, anyio)",
    )
    log_level: str = Field(
        default="WARNING",
        description="Log level for the stoptoken logger (DEBUG, INFO, WARNING, ERROR)",
    )
    log_format: str = Field(
        default="text",
        description="Log output format: 'text' (ANSI) or 'json'",
        pattern=r"^(text|json)$",
    )


# ---------------------------------------------------------------------------
# Global state
# ---------------------------------------------------------------------------

_lock = threading.Lock()
_current_config: StopTokenConfig | None = None


def configure(config: StopTokenConfig | None = None, **kwargs: object) -> StopTokenConfig:
    """Initialize the library configuration.

    Idempotent: calling again after the first time is a no-op and returns
    the existing config. Pass ``force=True`` as a kwarg to re-initialize.

    Args:
        config: An explicit config object. If None, one is built from kwargs.
        **kwargs: Forwarded to ``StopTokenConfig(**kwargs)`` when *config*
                  is not provided. Also accepts ``force=True``.

    Returns:
        The active StopTokenConfig.
    """
    global _current_config
    force = bool(kwargs.pop("force", False))

    with _lock:
        if _current_config is not None and not force:
            return _current_config

        if config is None:
            config = StopTokenConfig(**kwargs)  # type: ignore[arg-type]

        configure_logging(level=config.log_level, fmt=config.log_format, force=True)
        _current_config = config
        return config


def get_config() -> StopTokenConfig:
    """Return the current config, or a default (read from the environment) if not yet configured."""
    if _current_config is not None:
        return _current_config
    return StopTokenConfig()


def reset() -> None:
    """Reset global state — for testing only."""
    global _current_config
    with _lock:
        _current_config = None
