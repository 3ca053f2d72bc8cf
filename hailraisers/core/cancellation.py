"""Cancellation tokens shared between an owner and the async work it starts."""

from __future__ import annotations

from typing import Callable


class CancellationToken:
    """A one-way flag checked before applying the result of async work.

    Child tokens are cancelled together with their parent, so disposing of a
    workflow cancels every search and submission it started.
    """

    def __init__(self, parent: CancellationToken | None = None) -> None:
        self._cancelled = False
        self._callbacks: list[Callable[[], None]] = []
        if parent is not None:
            if parent.cancelled:
                self._cancelled = True
            else:
                parent.on_cancel(self.cancel)

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Cancel the token and notify any registered callbacks once."""
        if self._cancelled:
            return
        self._cancelled = True
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def on_cancel(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` when the token is cancelled (now, if it already is)."""
        if self._cancelled:
            callback()
        else:
            self._callbacks.append(callback)

    def child(self) -> CancellationToken:
        return CancellationToken(parent=self)
