"""Stop an async iterable once a token is cancelled.

Usage::

    async def do_work(events: AsyncIterable[Event], token: StopToken) -> None:
        async for event in stop_stream(events, token):
            await process_event(event)

Each event is either fully processed or not processed at all: the loop
ends *between* items. Natural exhaustion and cancellation both end the
iteration; :attr:`StopStream.cancelled` tells them apart.
"""

from __future__ import annotations

from collections.abc import AsyncIterable, AsyncIterator
from typing import Generic, TypeVar

from stoptoken.future import Cancelled, until
from stoptoken.log import get_logger
from stoptoken.source import StopToken
from stoptoken.time import DeadlineLike, into_deadline

_log = get_logger(__name__)

T = TypeVar("T")


class StopStream(Generic[T]):
    """An async iterator that yields from *stream* until *target* is cancelled.

    Every request for the next item races the underlying ``__anext__``
    against the token, with the same tie-break as :func:`~stoptoken.until`:
    an item that is ready in the same step as the cancellation is still
    delivered. Once cancellation wins, the stream is finished for good and
    the underlying iterator is closed (``aclose()``) if it supports it.

    Items are requested from the calling task, so the wrapped generator sees
    the caller's context variables across its ``yield``s. Like any code that
    races with cancel scopes, it must not ``yield`` from inside a cancel scope
    or task group of its own.

    Args:
        stream: Any async iterable. It is not touched before the first
            ``__anext__`` call.
        target: A ``StopToken`` or any deadline accepted by
            ``StopToken.from_deadline``.
    """

    def __init__(self, stream: AsyncIterable[T], target: StopToken | DeadlineLike) -> None:
        self._stream = stream
        self._token = into_deadline(target)
        self._iterator: AsyncIterator[T] | None = None
        self._finished = False
        self._cancelled = False
        self._closed = False

    @property
    def token(self) -> StopToken:
        return self._token

    @property
    def cancelled(self) -> bool:
        """Whether the iteration ended because the token was cancelled."""
        return self._cancelled

    def __aiter__(self) -> StopStream[T]:
        return self

    async def __anext__(self) -> T:
        if self._finished:
            raise StopAsyncIteration
        if self._token.is_cancelled():
            await self._end_cancelled()
            raise StopAsyncIteration
        if self._iterator is None:
            self._iterator = aiter(self._stream)

        try:
            if not self._token.can_cancel:
                return await anext(self._iterator)
            outcome = await until(anext(self._iterator), self._token)
        except StopAsyncIteration:
            self._finished = True
            raise

        if isinstance(outcome, Cancelled):
            await self._end_cancelled()
            raise StopAsyncIteration
        return outcome.value

    async def _end_cancelled(self) -> None:
        self._finished = True
        self._cancelled = True
        _log.debug("stream stopped by cancellation")
        await self.aclose()

    async def aclose(self) -> None:
        """Finish the stream and close the underlying iterator, if it can be closed.

        Before the first item is requested, only a source that is its own
        iterator (such as an async generator) is closed.
        """
        self._finished = True
        if self._closed:
            return
        self._closed = True
        source = self._iterator if self._iterator is not None else self._stream
        if source is self._iterator or isinstance(source, AsyncIterator):
            closer = getattr(source, "aclose", None)
            if closer is not None:
                await closer()

    async def __aenter__(self) -> StopStream[T]:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()


def stop_stream(stream: AsyncIterable[T], target: StopToken | DeadlineLike) -> StopStream[T]:
    """Wrap *stream* so that it ends once *target* is cancelled."""
    return StopStream(stream, target)
