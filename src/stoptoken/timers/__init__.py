"""Deadline tokens and the timer backends that drive them.

Exactly one backend is active at a time, chosen by
``StopTokenConfig.timer_backend`` (or the ``STOPTOKEN_TIMER_BACKEND``
environment variable):

- ``asyncio``: reactor timer handle on the running event loop (default).
- ``trio``: a trio system task; needs the ``trio`` extra.
- ``anyio``: a task in the enclosing :func:`deadline_scope` task group.

Tokens and wrappers never depend on which backend is active.
"""

from __future__ import annotations

from stoptoken.config import TimerBackendName, get_config
from stoptoken.log import get_logger
from stoptoken.source import StopSource, StopToken
from stoptoken.time import DeadlineLike, seconds_until
from stoptoken.timers.anyio_backend import AnyioTimer, deadline_scope
from stoptoken.timers.asyncio_backend import AsyncioTimer
from stoptoken.timers.base import TimerBackend
from stoptoken.timers.trio_backend import TrioTimer
from stoptoken.types import TimerBackendError

_log = get_logger(__name__)

_BACKENDS: dict[TimerBackendName, type[TimerBackend]] = {
    TimerBackendName.ASYNCIO: AsyncioTimer,
    TimerBackendName.TRIO: TrioTimer,
    TimerBackendName.ANYIO: AnyioTimer,
}


def get_timer_backend(name: TimerBackendName | str | None = None) -> TimerBackend:
    """Return the timer backend called *name*, or the configured one.

    Raises:
        TimerBackendError: If *name* is not a known backend.
    """
    if name is None:
        name = get_config().timer_backend
    try:
        key = TimerBackendName(name)
    except ValueError as exc:
        raise TimerBackendError(f"unknown timer backend {name!r}") from exc
    return _BACKENDS[key]()


def deadline_token(deadline: DeadlineLike) -> StopToken:
    """Build a token that is cancelled once *deadline* passes.

    A deadline that has already passed yields a cancelled token and
    schedules nothing. Otherwise the active backend is asked to stop a
    private :class:`StopSource` when the deadline elapses; the backend
    only ever holds that source.
    """
    delay = seconds_until(deadline)
    if delay <= 0:
        return StopToken.cancelled_token()

    backend = get_timer_backend()
    source = StopSource()
    token = source.token()
    backend.schedule(delay, source)
    _log.debug(
        "deadline scheduled",
        extra={
            "backend": str(backend.name),
            "delay": round(delay, 3),
            "source_id": f"{id(source):#x}",
        },
    )
    return token


__all__ = [
    "AnyioTimer",
    "AsyncioTimer",
    "TimerBackend",
    "TrioTimer",
    "deadline_scope",
    "deadline_token",
    "get_timer_backend",
]
