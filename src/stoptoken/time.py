"""Points in time and deadline coercion.

Deadlines can be given as an :class:`Instant` on the monotonic clock, a
wall-clock ``datetime``, a ``timedelta`` or a plain number of seconds from
now. Wrappers accept any of these wherever they accept a ``StopToken``.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TypeAlias, overload

from stoptoken.source import StopToken

Delay: TypeAlias = float | int | timedelta


def _delay_seconds(delay: Delay) -> float:
    if isinstance(delay, timedelta):
        return delay.total_seconds()
    if isinstance(delay, bool) or not isinstance(delay, (int, float)):
        raise TypeError(f"expected seconds or timedelta, got {type(delay).__name__}")
    return float(delay)


@dataclass(frozen=True, order=True, slots=True)
class Instant:
    """A point on the monotonic clock (``time.monotonic()`` seconds).

    Example::

        deadline = Instant.now() + timedelta(milliseconds=50)
    """

    seconds: float

    @classmethod
    def now(cls) -> Instant:
        return cls(time.monotonic())

    @classmethod
    def after(cls, delay: Delay) -> Instant:
        """The instant *delay* from now."""
        return cls.now() + delay

    def remaining(self) -> float:
        """Seconds left until this instant, or ``0.0`` once it has passed."""
        return max(0.0, self.seconds - time.monotonic())

    def __add__(self, other: Delay) -> Instant:
        return Instant(self.seconds + _delay_seconds(other))

    __radd__ = __add__

    @overload
    def __sub__(self, other: Instant) -> float: ...

    @overload
    def __sub__(self, other: Delay) -> Instant: ...

    def __sub__(self, other: Instant | Delay) -> float | Instant:
        if isinstance(other, Instant):
            return self.seconds - other.seconds
        return Instant(self.seconds - _delay_seconds(other))


DeadlineLike: TypeAlias = Instant | datetime | timedelta | float | int


def seconds_until(deadline: DeadlineLike) -> float:
    """Seconds from now until *deadline*; zero or negative once it has passed.

    Naive ``datetime`` values are taken as local time.
    """
    if isinstance(deadline, Instant):
        return deadline.seconds - time.monotonic()
    if isinstance(deadline, datetime):
        now = datetime.now(deadline.tzinfo) if deadline.tzinfo else datetime.now()
        return (deadline - now).total_seconds()
    return _delay_seconds(deadline)


def into_deadline(target: StopToken | DeadlineLike) -> StopToken:
    """Return *target* if it already is a token, else a deadline token for it."""
    if isinstance(target, StopToken):
        return target
    return StopToken.from_deadline(target)
