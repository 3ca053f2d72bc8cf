"""Debounced remote search with retry and stale-response protection."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Sequence

from hailraisers.constants import (
    DEBOUNCE_SECONDS,
    MAX_SEARCH_RETRIES,
    MIN_SEARCH_LENGTH,
    RETRY_BASE_SECONDS,
)
from hailraisers.core.cancellation import CancellationToken
from hailraisers.core.debounce import Debouncer, SleepFunc
from hailraisers.errors import ErrorKind

from .results import Failure, Result

logger = logging.getLogger(__name__)

LookupFunc = Callable[[str, CancellationToken], Awaitable["Result[Sequence[Any]]"]]

CONNECTION_ERROR = (
    "Unable to connect to the server. Please check your connection and try again."
)
INVALID_QUERY_ERROR = "Please enter a valid search query"
GENERIC_ERROR = "An unexpected error occurred while searching"


def retry_message(delay: float, attempt: int, max_retries: int) -> str:
    plural = "" if delay == 1 else "s"
    return (
        f"Connection issue. Retrying in {delay:g} second{plural} "
        f"(attempt {attempt} of {max_retries})..."
    )


def friendly_error(failure: Failure) -> str:
    if failure.transient:
        return CONNECTION_ERROR
    if failure.kind is ErrorKind.VALIDATION_REJECTED or "invalid" in failure.message.lower():
        return INVALID_QUERY_ERROR
    return GENERIC_ERROR


@dataclass(frozen=True)
class SearchState:
    query: str
    debounced_query: str
    candidates: tuple[Any, ...]
    loading: bool
    error: str | None
    show_create_option: bool


class SearchController:
    """Turns keystrokes into at most one lookup per quiet period.

    Only the most recently started lookup may update ``candidates``; older
    ones still in flight are discarded when they complete, as is everything
    that completes after :meth:`close`.
    """

    def __init__(
        self,
        lookup: LookupFunc,
        *,
        delay: float = DEBOUNCE_SECONDS,
        retry_base: float = RETRY_BASE_SECONDS,
        max_retries: int = MAX_SEARCH_RETRIES,
        min_length: int = MIN_SEARCH_LENGTH,
        sleep: SleepFunc = asyncio.sleep,
        token: CancellationToken | None = None,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self._lookup = lookup
        self._sleep = sleep
        self.retry_base = retry_base
        self.max_retries = max_retries
        self.min_length = min_length
        self._token = token.child() if token is not None else CancellationToken()
        self._on_change = on_change
        self._debouncer: Debouncer[str] = Debouncer(
            delay, self._on_settled, initial="", sleep=sleep
        )
        self._generation = 0
        self._task: asyncio.Task | None = None

        self.query = ""
        self.candidates: tuple[Any, ...] = ()
        self.loading = False
        self.error: str | None = None

    @property
    def debounced_query(self) -> str:
        return self._debouncer.value or ""

    @property
    def show_create_option(self) -> bool:
        return (
            not self.loading
            and not self.error
            and len(self.debounced_query.strip()) >= self.min_length
            and not self.candidates
        )

    @property
    def closed(self) -> bool:
        return self._token.cancelled

    def state(self) -> SearchState:
        return SearchState(
            query=self.query,
            debounced_query=self.debounced_query,
            candidates=self.candidates,
            loading=self.loading,
            error=self.error,
            show_create_option=self.show_create_option,
        )

    def set_query(self, text: str) -> None:
        """Record a keystroke; the lookup happens once typing pauses."""
        if self.closed:
            return
        self.query = text
        self.error = None
        self._debouncer.push(text)
        self._notify()

    def clear(self) -> None:
        """Drop the query, results and anything pending or in flight."""
        self._generation += 1
        self._debouncer.reset("")
        self.query = ""
        self.candidates = ()
        self.loading = False
        self.error = None
        self._notify()

    def close(self) -> None:
        """Tear down: nothing started before this point may update the state."""
        self._token.cancel()
        self._debouncer.close()
        self._generation += 1
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def wait_idle(self) -> None:
        """Wait for the pending debounce and the current lookup to finish."""
        while True:
            pending = [
                task
                for task in (self._debouncer.task, self._task)
                if task is not None and not task.done()
            ]
            if not pending:
                return
            await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)

    def _on_settled(self, text: str) -> None:
        self._generation += 1
        generation = self._generation
        query = text.strip()
        if len(query) < self.min_length:
            self.candidates = ()
            self.error = None
            self.loading = False
            self._notify()
            return
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._search(query, generation))

    def _is_stale(self, generation: int) -> bool:
        return self._token.cancelled or generation != self._generation

    async def _search(self, query: str, generation: int) -> None:
        for attempt in range(self.max_retries + 1):
            if self._is_stale(generation):
                return
            self.loading = True
            self.error = None
            self._notify()

            result = await self._call_lookup(query)
            if self._is_stale(generation):
                logger.debug(f"Discarding stale results for '{query}'")
                return

            self.loading = False
            if result.ok:
                self.candidates = tuple(result.value or ())
                self._notify()
                return

            self.candidates = ()
            if result.transient and attempt < self.max_retries:
                delay = self.retry_base * 2**attempt
                self.error = retry_message(delay, attempt + 1, self.max_retries)
                self._notify()
                await self._sleep(delay)
                continue

            logger.warning(f"Search for '{query}' failed: {result.message}")
            self.error = friendly_error(result)
            self._notify()
            return

    async def _call_lookup(self, query: str) -> Result[Sequence[Any]]:
        try:
            return await self._lookup(query, self._token)
        except Exception as e:
            logger.exception(f"Lookup for '{query}' raised")
            return Failure.from_exception(e)

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change()
