"""Debounce helper for values that change faster than we want to react."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Generic, TypeVar

T = TypeVar("T")

SleepFunc = Callable[[float], Awaitable[Any]]


class Debouncer(Generic[T]):
    """Emit the latest pushed value once it has been stable for ``delay`` seconds.

    Every push supersedes the pending one and restarts the quiet period.
    Closing the debouncer drops the pending value without emitting it.
    Must be used from inside a running event loop.
    """

    def __init__(
        self,
        delay: float,
        callback: Callable[[T], None],
        *,
        initial: T | None = None,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        self.delay = delay
        self.value = initial
        self._callback = callback
        self._sleep = sleep
        self._task: asyncio.Task | None = None
        self._closed = False

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def task(self) -> asyncio.Task | None:
        return self._task

    def push(self, value: T) -> None:
        """Schedule ``value`` for emission, cancelling any pending one."""
        if self._closed:
            return
        self.cancel()
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._emit_later(value))

    def cancel(self) -> None:
        """Drop the pending value, if any."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    def reset(self, value: T | None = None) -> None:
        """Cancel pending work and set the emitted value without notifying."""
        self.cancel()
        self.value = value

    def close(self) -> None:
        self._closed = True
        self.cancel()

    async def wait(self) -> None:
        """Wait until the pending emission, if any, has run or been cancelled."""
        task = self._task
        if task is not None and not task.done():
            await asyncio.wait([task])

    async def _emit_later(self, value: T) -> None:
        await self._sleep(self.delay)
        if self._closed:
            return
        self._task = None
        self.value = value
        self._callback(value)
