"""Timer backend contract for deadline tokens."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from stoptoken.config import TimerBackendName
    from stoptoken.source import StopSource


@runtime_checkable
class TimerBackend(Protocol):
    """Schedules a one-shot wake-up with a runtime's timer facility.

    Implementations must hold on to the source only (never a token taken
    from it) and release it once the timer has fired or been torn down.
    A torn-down timer drops its source, which cancels the source's tokens.
    """

    name: TimerBackendName

    def schedule(self, delay: float, source: StopSource) -> None:
        """Stop *source* once *delay* seconds have elapsed on the runtime's clock.

        Raises:
            TimerBackendError: If the runtime is unavailable in the
                current context.
        """
        ...
