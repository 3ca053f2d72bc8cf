"""Success-or-failure values returned by every collaborator call."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

import httpx
from google.api_core import exceptions as google_exceptions

from hailraisers.errors import AppError, ErrorKind

T = TypeVar("T")

TRANSIENT_MARKERS = ("network", "timeout", "failed to fetch")


def is_transient_message(message: str | None) -> bool:
    """True when an error message looks like a dropped connection or timeout."""
    text = (message or "").lower()
    return any(marker in text for marker in TRANSIENT_MARKERS)


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """A collaborator error mapped onto the user-facing taxonomy."""

    kind: ErrorKind
    message: str
    fields: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return False

    @property
    def transient(self) -> bool:
        return self.kind is ErrorKind.TRANSIENT_NETWORK or is_transient_message(
            self.message
        )

    @classmethod
    def from_exception(cls, exc: BaseException) -> Failure:
        """Map any exception raised by a collaborator onto an :class:`ErrorKind`."""
        message = str(exc) or exc.__class__.__name__
        if isinstance(exc, AppError):
            return cls(exc.kind, exc.message, tuple(exc.messages))
        if isinstance(exc, (google_exceptions.PermissionDenied, google_exceptions.Forbidden)):
            return cls(ErrorKind.PERMISSION_DENIED, message)
        if isinstance(exc, google_exceptions.NotFound):
            return cls(ErrorKind.NOT_FOUND, message)
        if isinstance(exc, google_exceptions.AlreadyExists):
            return cls(ErrorKind.DUPLICATE_NAME, message)
        if isinstance(
            exc,
            (
                httpx.TimeoutException,
                httpx.TransportError,
                google_exceptions.ServiceUnavailable,
                google_exceptions.DeadlineExceeded,
                ConnectionError,
                TimeoutError,
            ),
        ):
            return cls(ErrorKind.TRANSIENT_NETWORK, f"Network error: {message}")
        if is_transient_message(message):
            return cls(ErrorKind.TRANSIENT_NETWORK, message)
        return cls(ErrorKind.UNKNOWN, message)


Result = Union[Success[T], Failure]
