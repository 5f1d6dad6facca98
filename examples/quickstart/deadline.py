"""Bound slow work with a deadline.

``until`` accepts a deadline wherever it accepts a token. Cancellation is an
outcome, so the caller decides what a timeout means.

Usage:
    uv run python examples/quickstart/deadline.py
    STOPTOKEN_TIMER_BACKEND=trio uv run python examples/quickstart/deadline.py
"""

from datetime import timedelta

import anyio

from stoptoken import Cancelled, Completed, Instant, deadline_scope, get_config, until


async def slow_lookup(key: str, delay: float) -> str:
    await anyio.sleep(delay)
    return key.upper()


async def main() -> None:
    # deadline_scope hosts the timers when STOPTOKEN_TIMER_BACKEND=anyio
    async with deadline_scope():
        deadline = Instant.after(timedelta(milliseconds=200))
        for key, delay in [("fast", 0.05), ("slow", 1.0)]:
            match await until(slow_lookup(key, delay), deadline):
                case Completed(value):
                    print(f"{key}: {value}")
                case Cancelled():
                    print(f"{key}: gave up at the deadline")


if __name__ == "__main__":
    backend = "trio" if get_config().timer_backend == "trio" else "asyncio"
    anyio.run(main, backend=backend)
