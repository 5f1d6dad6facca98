"""Trio timer backend: a system task sleeping until the deadline.

Install the optional dependency group::

    pip install stoptoken[trio]
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from stoptoken.config import TimerBackendName
from stoptoken.types import TimerBackendError

try:
    import trio

    HAS_TRIO = True
except ImportError:
    HAS_TRIO = False

if TYPE_CHECKING:
    from stoptoken.source import StopSource


async def _stop_at(deadline: float, source: StopSource) -> None:
    try:
        await trio.sleep_until(deadline)
    finally:
        source.stop()


class TrioTimer:
    """Spawns one trio system task per deadline.

    System tasks are cancelled when ``trio.run`` finishes, which stops any
    source whose deadline has not been reached yet.
    """

    name = TimerBackendName.TRIO

    def schedule(self, delay: float, source: StopSource) -> None:
        if not HAS_TRIO:
            raise TimerBackendError("the trio timer backend requires the 'trio' package")
        try:
            deadline = trio.current_time() + delay
        except RuntimeError as exc:
            raise TimerBackendError("the trio timer backend needs a running trio event loop") from exc
        trio.lowlevel.spawn_system_task(_stop_at, deadline, source, name="stoptoken-deadline")
