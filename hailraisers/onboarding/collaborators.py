"""The three services the onboarding workflow talks to.

The workflow only sees these protocols. Every call takes the cancellation
token of the work it belongs to and returns a :class:`Success` or a
:class:`Failure`; nothing raised by a collaborator reaches the workflow.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Mapping, Protocol, TypeVar

from hailraisers import validation
from hailraisers.box.services import BoxService
from hailraisers.errors import ErrorKind
from hailraisers.hailraiser.services import HailraiserService

from .results import Failure, Result, Success

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

    from hailraisers.box.models import CandidateRecord, Group, NewGroup
    from hailraisers.box.places import PlacesClient
    from hailraisers.core.cancellation import CancellationToken
    from hailraisers.hailraiser.models import Member, NewMember

logger = logging.getLogger(__name__)

T = TypeVar("T")

CANCELLED = Failure(ErrorKind.UNKNOWN, "Request cancelled.")


class PlaceLookup(Protocol):
    async def lookup(
        self, text: str, token: CancellationToken
    ) -> Result[list[CandidateRecord]]: ...


class Persistence(Protocol):
    async def find_groups_by_keyword(
        self, keyword: str, token: CancellationToken
    ) -> Result[list[Group]]: ...

    async def create_group(
        self, group: NewGroup, token: CancellationToken
    ) -> Result[Group]: ...

    async def create_member(
        self, member: NewMember, token: CancellationToken
    ) -> Result[Member]: ...


class Validation(Protocol):
    async def validate_group(
        self, raw: Mapping[str, Any], token: CancellationToken
    ) -> Result[NewGroup]: ...

    async def validate_member(
        self, raw: Mapping[str, Any], token: CancellationToken
    ) -> Result[NewMember]: ...


@dataclass
class Collaborators:
    places: PlaceLookup
    persistence: Persistence
    validation: Validation


async def run_blocking(
    token: CancellationToken, func: Callable[..., T], *args: Any
) -> Result[T]:
    """Run a blocking collaborator call in a worker thread and wrap the outcome."""
    if token.cancelled:
        return CANCELLED
    try:
        value = await asyncio.to_thread(func, *args)
    except Exception as e:
        failure = Failure.from_exception(e)
        name = getattr(func, "__name__", repr(func))
        logger.warning(f"{name} failed ({failure.kind.value}): {failure.message}")
        return failure
    return Success(value)


class SchemaValidation:
    """Validation against the pydantic record schemas, in process."""

    async def validate_group(self, raw, token):
        return _validate(token, validation.validate_group, raw)

    async def validate_member(self, raw, token):
        return _validate(token, validation.validate_member, raw)


def _validate(token, func, raw):
    if token.cancelled:
        return CANCELLED
    try:
        return Success(func(raw))
    except Exception as e:
        return Failure.from_exception(e)


class FirestorePersistence:
    """Directory reads and writes straight against Firestore."""

    def __init__(self, db: Client, *, limit: int | None = None) -> None:
        self.db = db
        self.limit = limit

    async def find_groups_by_keyword(self, keyword, token):
        if self.limit is None:
            return await run_blocking(token, BoxService.find_by_keyword, self.db, keyword)
        return await run_blocking(
            token, BoxService.find_by_keyword, self.db, keyword, self.limit
        )

    async def create_group(self, group, token):
        return await run_blocking(token, BoxService.create_box, self.db, group)

    async def create_member(self, member, token):
        return await run_blocking(token, HailraiserService.add_hailraiser, self.db, member)


class GooglePlaceLookup:
    """Place suggestions from the Google Places client."""

    def __init__(self, client: PlacesClient) -> None:
        self.client = client

    async def lookup(self, text, token):
        return await run_blocking(token, self.client.search, text)


def local_collaborators(app, db=None) -> Collaborators:
    """Wire the in-process collaborators for a configured Flask app."""
    if db is None:
        from firebase_admin import firestore

        db = firestore.client()
    return Collaborators(
        places=GooglePlaceLookup(app.extensions["places"]),
        persistence=FirestorePersistence(db, limit=app.config.get("SEARCH_RESULT_LIMIT")),
        validation=SchemaValidation(),
    )
