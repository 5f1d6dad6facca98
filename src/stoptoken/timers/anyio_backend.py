"""AnyIO timer backend: deadline tasks living in a caller-owned task group.

AnyIO has no detached tasks, so deadline timers run inside the task group
of the innermost :func:`deadline_scope`::

    configure(timer_backend="anyio")

    async with deadline_scope():
        token = StopToken.from_deadline(0.5)
        ...

Leaving the scope cancels pending timers, which stops their sources.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING

import anyio
from anyio.abc import TaskGroup

from stoptoken.config import TimerBackendName
from stoptoken.types import TimerBackendError

if TYPE_CHECKING:
    from stoptoken.source import StopSource

_current_group: ContextVar[TaskGroup | None] = ContextVar(
    "stoptoken_deadline_group", default=None
)


async def _stop_at(deadline: float, source: StopSource) -> None:
    try:
        await anyio.sleep_until(deadline)
    finally:
        source.stop()


@asynccontextmanager
async def deadline_scope() -> AsyncIterator[TaskGroup]:
    """Open a task group that hosts deadline timers for the enclosed code."""
    async with anyio.create_task_group() as tg:
        reset_token = _current_group.set(tg)
        try:
            yield tg
        finally:
            _current_group.reset(reset_token)
            tg.cancel_scope.cancel()


class AnyioTimer:
    """Starts one ``anyio.sleep_until`` task per deadline in the current scope."""

    name = TimerBackendName.ANYIO

    def schedule(self, delay: float, source: StopSource) -> None:
        tg = _current_group.get()
        if tg is None:
            raise TimerBackendError(
                "the anyio timer backend needs an enclosing 'async with deadline_scope()'"
            )
        deadline = anyio.current_time() + delay
        tg.start_soon(_stop_at, deadline, source, name="stoptoken-deadline")
