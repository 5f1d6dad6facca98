"""Reactor-based timer backend: a timer handle on the running asyncio event loop."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from stoptoken.config import TimerBackendName
from stoptoken.types import TimerBackendError

if TYPE_CHECKING:
    from stoptoken.source import StopSource


class AsyncioTimer:
    """Schedules ``source.stop`` with ``loop.call_at`` on the running loop.

    The loop's timer handle keeps the source alive until it fires; closing
    the loop drops pending handles and with them their sources.
    """

    name = TimerBackendName.ASYNCIO

    def schedule(self, delay: float, source: StopSource) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as exc:
            raise TimerBackendError(
                "the asyncio timer backend needs a running asyncio event loop"
            ) from exc
        loop.call_at(loop.time() + delay, source.stop)
