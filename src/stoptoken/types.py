"""Exception types for the stoptoken package."""

from __future__ import annotations


class StopTokenError(Exception):
    """Base exception for all stoptoken errors."""


class OperationCancelled(StopTokenError):
    """Raised on explicit request when a token has been cancelled.

    Wrappers never raise this on their own; it only comes out of
    :meth:`Cancelled.unwrap` and :meth:`StopToken.raise_if_cancelled`.
    """

    def __init__(self, message: str = "operation cancelled") -> None:
        super().__init__(message)


class TimerBackendError(StopTokenError):
    """Raised when a deadline cannot be scheduled with the selected timer backend."""
