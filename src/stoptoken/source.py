"""``StopSource`` / ``StopToken``: the owner and listener halves of a cancellation signal.

A source is the only writer of its signal. It cancels every token taken
from it when :meth:`StopSource.stop` is called, when its ``with`` block
exits, or when the source itself is garbage collected, whichever happens
first. Tokens are cheap read-only views and can be cloned freely.

Usage::

    with StopSource() as source:
        worker = spawn(work(source.token()))
        ...
    # leaving the block stops every token
"""

from __future__ import annotations

from collections.abc import Generator
from typing import TYPE_CHECKING, Any

from stoptoken.log import get_logger
from stoptoken.signal import AnySignal, CancelSignal, NeverSignal, Signal
from stoptoken.types import OperationCancelled

if TYPE_CHECKING:
    from stoptoken.time import DeadlineLike

_log = get_logger(__name__)


class StopToken:
    """A read-only handle on a cancellation signal.

    Tokens are also awaitable: ``await token`` is the same as
    ``await token.cancelled()``.
    """

    __slots__ = ("_signal",)

    def __init__(self, signal: Signal) -> None:
        self._signal = signal

    # -- constructors ------------------------------------------------------

    @classmethod
    def never(cls) -> StopToken:
        """A token that can never be cancelled."""
        return cls(NeverSignal())

    @classmethod
    def cancelled_token(cls) -> StopToken:
        """A token that is cancelled from the start."""
        signal = CancelSignal()
        signal.trigger()
        return cls(signal)

    @classmethod
    def from_deadline(cls, deadline: DeadlineLike) -> StopToken:
        """A token that is cancelled once *deadline* passes.

        Args:
            deadline: An :class:`~stoptoken.time.Instant`, a ``datetime``, a
                ``timedelta`` or a number of seconds from now.

        Raises:
            TimerBackendError: If the configured timer backend cannot
                schedule the deadline from the current context.
        """
        from stoptoken.timers import deadline_token

        return deadline_token(deadline)

    @classmethod
    def any(cls, *tokens: StopToken) -> StopToken:
        """A token that is cancelled as soon as any of *tokens* is."""
        return cls(AnySignal(t._signal for t in tokens))

    # -- queries -----------------------------------------------------------

    @property
    def can_cancel(self) -> bool:
        """``False`` only for tokens that can never be cancelled."""
        return self._signal.can_cancel

    def is_cancelled(self) -> bool:
        """Whether cancellation has been signalled. Never suspends."""
        return self._signal.is_cancelled()

    async def cancelled(self) -> None:
        """Suspend until the token is cancelled.

        Returns without suspending if it already is. Safe to call
        concurrently from any number of tasks and clones.
        """
        await self._signal.cancelled()

    def raise_if_cancelled(self) -> None:
        """Raise ``OperationCancelled`` if the token is cancelled."""
        if self._signal.is_cancelled():
            raise OperationCancelled()

    def clone(self) -> StopToken:
        """Return a new handle on the same signal."""
        return StopToken(self._signal)

    def __copy__(self) -> StopToken:
        return self.clone()

    def __deepcopy__(self, memo: dict[int, Any]) -> StopToken:
        return self.clone()

    def __await__(self) -> Generator[Any, None, None]:
        return self._signal.cancelled().__await__()

    def __repr__(self) -> str:
        return f"StopToken(cancelled={self.is_cancelled()}, can_cancel={self.can_cancel})"


class StopSource:
    """Produces tokens and cancels all of them when stopped or dropped.

    Args:
        parent: Optional token; when it is cancelled, the tokens of this
            source are cancelled too. Stopping this source does not affect
            the parent.
    """

    __slots__ = ("__weakref__", "_signal", "_token")

    def __init__(self, *, parent: StopToken | None = None) -> None:
        self._signal = CancelSignal()
        own = StopToken(self._signal)
        self._token = own if parent is None else StopToken.any(own, parent)

    def token(self) -> StopToken:
        """Produce a new token associated with this source.

        Tokens taken after the source was stopped observe the cancelled state.
        """
        return self._token.clone()

    @property
    def stopped(self) -> bool:
        """Whether tokens of this source are cancelled."""
        return self._token.is_cancelled()

    def stop(self) -> None:
        """Cancel every token of this source. Calling it again is a no-op."""
        if self._signal.trigger():
            _log.debug("stop source triggered", extra={"source_id": f"{id(self):#x}"})

    def __enter__(self) -> StopSource:
        return self

    def __exit__(self, *_: object) -> None:
        self.stop()

    def __del__(self) -> None:
        signal = getattr(self, "_signal", None)
        if signal is not None:
            signal.trigger()

    def __repr__(self) -> str:
        return f"StopSource(stopped={self.stopped})"
