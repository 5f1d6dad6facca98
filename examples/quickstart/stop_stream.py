"""Stop an event stream from another task.

A producer pushes events into an ``anyio`` memory stream; the consumer
drains it with ``stop_stream`` and ends cleanly, between two events, once
the owner stops the source.

Usage:
    uv run python examples/quickstart/stop_stream.py
"""

import anyio
from anyio.abc import ObjectReceiveStream, ObjectSendStream

from stoptoken import StopSource, StopToken, stop_stream


async def produce(send: ObjectSendStream[int]) -> None:
    async with send:
        try:
            for i in range(1_000):
                await send.send(i)
                await anyio.sleep(0.01)
        except anyio.BrokenResourceError:
            print("consumer went away, producer exits")


async def consume(events: ObjectReceiveStream[int], token: StopToken) -> None:
    async for event in stop_stream(events, token):
        print(f"processed event {event}")
    print("consumer finished")


async def main() -> None:
    send, receive = anyio.create_memory_object_stream[int]()
    with StopSource() as source:
        async with anyio.create_task_group() as tg:
            tg.start_soon(produce, send)
            tg.start_soon(consume, receive, source.token())
            await anyio.sleep(0.1)
            source.stop()


if __name__ == "__main__":
    anyio.run(main)
