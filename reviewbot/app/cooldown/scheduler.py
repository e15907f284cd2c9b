from __future__ import annotations

import asyncio
from typing import Callable, Protocol


class Handle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Runs a callback once after a delay on the controller's logical thread."""

    def time(self) -> float: ...

    def call_later(self, delay: float, callback: Callable[[], None]) -> Handle: ...


class AsyncioScheduler:
    """Scheduler backed by the running event loop.

    Must be used from inside a coroutine or loop callback; the handles it
    returns are `asyncio.TimerHandle`, whose `cancel` is idempotent.
    """

    def time(self) -> float:
        return asyncio.get_running_loop().time()

    def call_later(self, delay: float, callback: Callable[[], None]) -> Handle:
        loop = asyncio.get_running_loop()
        return loop.call_later(max(0.0, delay), callback)


__all__ = ["Handle", "Scheduler", "AsyncioScheduler"]
