"""Isolation of unexpected errors raised while building a view."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

from hailraisers.constants import ERROR_RESET_SECONDS
from hailraisers.core.debounce import SleepFunc

logger = logging.getLogger(__name__)


class ErrorBoundary:
    """Wrap a render callable so a crash yields a fallback view instead.

    The fallback offers a retry action and is cleared automatically after
    ``reset_after`` seconds when running inside an event loop.
    """

    def __init__(
        self,
        render: Callable[[], dict[str, Any]],
        *,
        reset_after: float = ERROR_RESET_SECONDS,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        self._render = render
        self._sleep = sleep
        self.reset_after = reset_after
        self.error: Exception | None = None
        self._reset_task: asyncio.Task | None = None

    @property
    def has_error(self) -> bool:
        return self.error is not None

    def render(self) -> dict[str, Any]:
        if self.error is None:
            try:
                return self._render()
            except Exception as e:
                logger.exception("Onboarding view failed to render")
                self.error = e
                self._schedule_reset()
        return self.fallback()

    def fallback(self) -> dict[str, Any]:
        return {
            "step": "error",
            "title": "Something went wrong",
            "message": str(self.error) or "An unexpected error occurred",
            "hint": "Please try again. If the problem persists, refresh the page.",
            "actions": ["retry"],
        }

    def retry(self) -> None:
        self._cancel_reset()
        self.error = None

    def close(self) -> None:
        self._cancel_reset()

    async def wait(self) -> None:
        task = self._reset_task
        if task is not None and not task.done():
            await asyncio.wait([task])

    def _schedule_reset(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._cancel_reset()
        self._reset_task = loop.create_task(self._reset_later())

    async def _reset_later(self) -> None:
        await self._sleep(self.reset_after)
        self._reset_task = None
        self.error = None

    def _cancel_reset(self) -> None:
        if self._reset_task is not None and not self._reset_task.done():
            self._reset_task.cancel()
        self._reset_task = None
