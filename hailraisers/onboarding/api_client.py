"""Collaborators reached over HTTP through the directory's JSON API."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable

import httpx

from hailraisers.box.models import CandidateRecord, Group
from hailraisers.errors import ErrorKind
from hailraisers.hailraiser.models import Member

from .collaborators import CANCELLED, Collaborators, SchemaValidation
from .results import Failure, Result, Success

if TYPE_CHECKING:
    from hailraisers.core.cancellation import CancellationToken

logger = logging.getLogger(__name__)

_STATUS_KINDS = {
    400: ErrorKind.VALIDATION_REJECTED,
    403: ErrorKind.PERMISSION_DENIED,
    404: ErrorKind.NOT_FOUND,
    409: ErrorKind.DUPLICATE_NAME,
    502: ErrorKind.TRANSIENT_NETWORK,
    503: ErrorKind.TRANSIENT_NETWORK,
    504: ErrorKind.TRANSIENT_NETWORK,
}


class DirectoryApiClient:
    """Place lookup and persistence against a running hailraisers server."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def lookup(self, text, token):
        return await self._request(
            token,
            "GET",
            "/api/boxes/places",
            lambda body: [CandidateRecord.model_validate(r) for r in body["results"]],
            params={"q": text},
        )

    async def find_groups_by_keyword(self, keyword, token):
        return await self._request(
            token,
            "GET",
            "/api/boxes/search",
            lambda body: [Group.model_validate(r) for r in body["results"]],
            params={"q": keyword},
        )

    async def create_group(self, group, token):
        return await self._request(
            token,
            "POST",
            "/api/boxes",
            lambda body: Group.model_validate(body["box"]),
            json=group.to_json(),
        )

    async def create_member(self, member, token):
        return await self._request(
            token,
            "POST",
            "/api/hailraisers",
            lambda body: Member.model_validate(body["hailraiser"]),
            json=member.to_json(),
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        token: CancellationToken,
        method: str,
        url: str,
        parse: Callable[[Any], Any],
        **kwargs: Any,
    ) -> Result[Any]:
        if token.cancelled:
            return CANCELLED
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            logger.warning(f"{method} {url} timeout: {e}")
            return Failure(ErrorKind.TRANSIENT_NETWORK, "Request timeout.")
        except httpx.TransportError as e:
            logger.warning(f"{method} {url} network error: {e}")
            return Failure(ErrorKind.TRANSIENT_NETWORK, f"Network error: {e}")

        if response.is_error:
            return _failure_from_response(response)
        try:
            return Success(parse(response.json()))
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"{method} {url} returned an unreadable body: {e}")
            return Failure(ErrorKind.UNKNOWN, "Unexpected response from the server.")


def _failure_from_response(response: httpx.Response) -> Failure:
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    try:
        kind = ErrorKind(body.get("error"))
    except ValueError:
        kind = _STATUS_KINDS.get(response.status_code, ErrorKind.UNKNOWN)
    message = body.get("message") or f"HTTP error: {response.status_code}"
    return Failure(kind, message, tuple(body.get("fields") or ()))


def api_collaborators(client: DirectoryApiClient) -> Collaborators:
    """Collaborators backed by the HTTP API, with schema validation done locally."""
    return Collaborators(places=client, persistence=client, validation=SchemaValidation())
