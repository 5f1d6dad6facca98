"""Cancellation signals: the shared, one-shot "has it fired" state behind tokens.

A :class:`CancelSignal` is a closable broadcast channel. It is built on a
zero-buffer ``anyio`` memory object stream on which nothing is ever sent:
closing the send half *is* the signal. Closure is observed by every waiting
receiver at once without consuming anything, so any number of
``cancelled()`` callers can wait on the same signal, under asyncio or trio.

Readers only need the small :class:`Signal` protocol, which is also
satisfied by :class:`NeverSignal` (never fires) and :class:`AnySignal`
(fires when any member fires).
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from typing import Protocol, runtime_checkable

import anyio
from anyio import CancelScope


@runtime_checkable
class Signal(Protocol):
    """Read side of a cancellation signal."""

    @property
    def can_cancel(self) -> bool: ...

    def is_cancelled(self) -> bool: ...

    async def cancelled(self) -> None: ...


class CancelSignal:
    """A single-shot, multi-observer cancellation signal.

    The open → closed transition happens at most once and is serialized by
    a lock; closing wakes every task suspended in :meth:`cancelled`.
    """

    __slots__ = ("__weakref__", "_closed", "_lock", "_receive", "_send")

    def __init__(self) -> None:
        self._send, self._receive = anyio.create_memory_object_stream(max_buffer_size=0)
        self._closed = False
        self._lock = threading.Lock()

    @property
    def can_cancel(self) -> bool:
        return True

    def is_cancelled(self) -> bool:
        """Whether the signal has fired. Never suspends."""
        return self._closed

    def trigger(self) -> bool:
        """Close the signal.

        Returns:
            ``True`` for the call that performed the transition, ``False``
            if the signal had already fired.
        """
        with self._lock:
            if self._closed:
                return False
            self._closed = True
        self._send.close()
        return True

    async def cancelled(self) -> None:
        """Suspend until the signal fires; return at once if it already has."""
        if self._closed:
            return
        try:
            await self._receive.receive()
        except anyio.EndOfStream:
            return

    def __del__(self) -> None:
        self._send.close()
        self._receive.close()

    def __repr__(self) -> str:
        return f"CancelSignal(cancelled={self._closed})"


class NeverSignal:
    """A signal that can never fire. Waiting on it sleeps forever."""

    __slots__ = ()

    @property
    def can_cancel(self) -> bool:
        return False

    def is_cancelled(self) -> bool:
        return False

    async def cancelled(self) -> None:
        await anyio.sleep_forever()

    def __repr__(self) -> str:
        return "NeverSignal()"


class AnySignal:
    """Fires as soon as any of its member signals fires.

    Members that can never fire are dropped, and nested ``AnySignal``
    members are flattened. Each ``cancelled()`` call starts one task per
    member inside a task group scoped to that waiter; the tasks end as soon
    as the call returns.
    """

    __slots__ = ("_signals",)

    def __init__(self, signals: Iterable[Signal]) -> None:
        flat: list[Signal] = []
        for sig in signals:
            if isinstance(sig, AnySignal):
                flat.extend(sig._signals)
            elif sig.can_cancel:
                flat.append(sig)
        self._signals: tuple[Signal, ...] = tuple(flat)

    @property
    def can_cancel(self) -> bool:
        return bool(self._signals)

    def is_cancelled(self) -> bool:
        return any(sig.is_cancelled() for sig in self._signals)

    async def cancelled(self) -> None:
        if self.is_cancelled():
            return
        if not self._signals:
            await anyio.sleep_forever()
        async with anyio.create_task_group() as tg:
            for sig in self._signals:
                tg.start_soon(_cancel_scope_when_fired, sig, tg.cancel_scope)

    def __repr__(self) -> str:
        return f"AnySignal(members={len(self._signals)}, cancelled={self.is_cancelled()})"


async def _cancel_scope_when_fired(sig: Signal, scope: CancelScope) -> None:
    await sig.cancelled()
    scope.cancel()
