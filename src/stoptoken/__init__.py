"""stoptoken: cooperative cancellation for async Python.

A :class:`StopSource` owns a one-shot cancellation signal and hands out
cheap :class:`StopToken` views of it. Wrapping an awaitable with
:func:`until` or an async iterable with :func:`stop_stream` makes it stop
as soon as the token is cancelled, whether by ``stop()``, by the source
going away, or by a deadline. Works under asyncio and trio.

Usage::

    from stoptoken import StopSource, stop_stream

    async def do_work(events, token):
        async for event in stop_stream(events, token):
            await process_event(event)

    source = StopSource()
    ...
    source.stop()  # do_work finishes between two events
"""

from stoptoken.config import StopTokenConfig, TimerBackendName, configure, get_config
from stoptoken.future import CANCELLED, Cancelled, Completed, Outcome, StopFuture, until
from stoptoken.log import configure_logging, get_logger
from stoptoken.source import StopSource, StopToken
from stoptoken.stream import StopStream, stop_stream
from stoptoken.time import DeadlineLike, Instant, into_deadline
from stoptoken.timers import deadline_scope, get_timer_backend
from stoptoken.types import OperationCancelled, StopTokenError, TimerBackendError

__version__ = "0.7.0"

__all__ = [
    "CANCELLED",
    "Cancelled",
    "Completed",
    "DeadlineLike",
    "Instant",
    "OperationCancelled",
    "Outcome",
    "StopFuture",
    "StopSource",
    "StopStream",
    "StopToken",
    "StopTokenConfig",
    "StopTokenError",
    "TimerBackendError",
    "TimerBackendName",
    "configure",
    "configure_logging",
    "deadline_scope",
    "get_config",
    "get_logger",
    "get_timer_backend",
    "into_deadline",
    "stop_stream",
    "until",
]
