"""Race a single awaitable against a stop token.

``until(op, token)`` resolves to :class:`Completed` with the operation's
value, or to :class:`Cancelled` if the token fires first. Cancellation is
an outcome, not an exception::

    match await until(fetch(url), token):
        case Completed(body):
            handle(body)
        case Cancelled():
            return

When the operation finishes in the same scheduling step in which the token
fires, the operation wins.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Generator
from dataclasses import dataclass
from typing import Any, Generic, NoReturn, TypeAlias, TypeVar

import anyio
from anyio import CancelScope
from anyio.lowlevel import checkpoint

from stoptoken.source import StopToken
from stoptoken.time import DeadlineLike, into_deadline
from stoptoken.types import OperationCancelled

T = TypeVar("T")
D = TypeVar("D")


@dataclass(frozen=True, slots=True)
class Completed(Generic[T]):
    """The wrapped operation finished first."""

    value: T

    def unwrap(self) -> T:
        return self.value

    def value_or(self, default: object) -> T:
        return self.value

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Cancelled:
    """The token fired before the wrapped operation finished."""

    def unwrap(self) -> NoReturn:
        """Raise ``OperationCancelled``."""
        raise OperationCancelled()

    def value_or(self, default: D) -> D:
        return default

    def __bool__(self) -> bool:
        return False


CANCELLED = Cancelled()

Outcome: TypeAlias = Completed[T] | Cancelled


async def _watch_token(token: StopToken, scope: CancelScope) -> None:
    await token.cancelled()
    # One more scheduling step, so an operation that became ready together
    # with the token still gets to finish.
    await checkpoint()
    scope.cancel()


def _discard(awaitable: Awaitable[Any], abort: bool) -> None:
    if inspect.iscoroutine(awaitable):
        awaitable.close()
    elif abort and isinstance(awaitable, asyncio.Future):
        awaitable.cancel()


async def until(
    awaitable: Awaitable[T],
    target: StopToken | DeadlineLike,
    *,
    abort: bool = False,
) -> Outcome[T]:
    """Await *awaitable* unless *target* is cancelled first.

    The operation runs in the calling task, so context variables and the
    caller's cancel scopes apply to it as if it were awaited directly. Only
    the token watcher runs in a child task.

    Args:
        awaitable: The operation. Coroutines and other awaitables are owned
            by the wrapper: if the token wins they are cancelled at their
            current ``await`` and never resumed. An already-cancelled token
            means a coroutine is closed without ever running.
        target: A ``StopToken`` or any deadline accepted by
            ``StopToken.from_deadline``.
        abort: Pre-existing ``asyncio`` futures and tasks are left running
            when the token wins, unless *abort* is set, in which case they
            are cancelled too.

    Returns:
        ``Completed(value)`` or ``Cancelled()``. ``Cancelled`` is only ever
        returned when the token has been cancelled.

    Raises:
        BaseException: Whatever the operation raises, unchanged, including
            cancellation that did not come from the token.
    """
    token = into_deadline(target)
    if token.is_cancelled():
        _discard(awaitable, abort)
        return CANCELLED
    if not token.can_cancel:
        return Completed(await awaitable)

    if isinstance(awaitable, asyncio.Future) and not abort:
        awaitable = asyncio.shield(awaitable)

    finished = False
    error: BaseException | None = None
    async with anyio.create_task_group() as tg:
        tg.start_soon(_watch_token, token, tg.cancel_scope)
        try:
            value = await awaitable
            finished = True
        except BaseException as exc:
            if tg.cancel_scope.cancel_called and isinstance(exc, anyio.get_cancelled_exc_class()):
                raise
            # Kept out of the task group so it is not wrapped in an
            # exception group or absorbed by the group's scope.
            error = exc
        tg.cancel_scope.cancel()

    if error is not None:
        raise error
    if finished:
        return Completed(value)
    return CANCELLED


class StopFuture(Generic[T]):
    """Awaitable form of :func:`until`.

    Example::

        outcome = await StopFuture(download(), token)
    """

    __slots__ = ("_abort", "_awaitable", "_target")

    def __init__(
        self,
        awaitable: Awaitable[T],
        target: StopToken | DeadlineLike,
        *,
        abort: bool = False,
    ) -> None:
        self._awaitable = awaitable
        self._target = target
        self._abort = abort

    def __await__(self) -> Generator[Any, None, Outcome[T]]:
        return until(self._awaitable, self._target, abort=self._abort).__await__()
