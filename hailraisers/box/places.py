"""Google Places client used to suggest details for new boxes."""

from __future__ import annotations

import logging
import threading
from typing import Any

import httpx
from cachetools import TTLCache

from hailraisers.constants import (
    PLACES_CACHE_SIZE,
    PLACES_CACHE_TTL,
    PLACES_DETAIL_FIELDS,
    PLACES_DETAILS_URL,
    PLACES_SEARCH_TYPE,
    PLACES_TEXT_SEARCH_URL,
    PLACES_TIMEOUT,
)
from hailraisers.errors import (
    ConfigurationError,
    PlaceLookupError,
    TransientNetworkError,
)

from .models import CandidateRecord

logger = logging.getLogger(__name__)

_COMPONENT_FIELDS = {
    "locality": "city",
    "administrative_area_level_1": "state",
    "country": "country",
}


class PlacesClient:
    """Text search against the Places API, enriched with place details.

    Follows the Flask extension pattern: create it once, then bind it with
    ``init_app``. Responses are kept in a TTL cache keyed by query and by
    place id.
    """

    def __init__(self, app=None, *, api_key=None, transport=None):
        self.api_key = api_key
        self._explicit_key = api_key
        self.timeout = PLACES_TIMEOUT
        self._transport = transport
        self._cache: TTLCache = TTLCache(maxsize=PLACES_CACHE_SIZE, ttl=PLACES_CACHE_TTL)
        self._lock = threading.Lock()
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        """Read credentials and cache settings from the app config."""
        self.api_key = app.config.get("GOOGLE_MAPS_API_KEY") or self._explicit_key
        self.timeout = float(app.config.get("PLACES_TIMEOUT", PLACES_TIMEOUT))
        self._cache = TTLCache(
            maxsize=int(app.config.get("PLACES_CACHE_SIZE", PLACES_CACHE_SIZE)),
            ttl=float(app.config.get("PLACES_CACHE_TTL", PLACES_CACHE_TTL)),
        )
        app.extensions["places"] = self

    def search(self, query: str) -> list[CandidateRecord]:
        """Return candidate boxes for a free-text query.

        Raises:
            ConfigurationError: If no API key is configured.
            TransientNetworkError: On timeouts and connection failures.
            PlaceLookupError: If the API answers with an error status.
        """
        if not self.api_key:
            raise ConfigurationError("Google Maps API key is not configured.")

        query = query.strip().lower()
        cache_key = f"googlePlaces:{query}"
        cached = self._cache_get(cache_key)
        if cached is not None:
            logger.debug(f"Returning cached places results for: {query}")
            return list(cached)

        with self._client() as client:
            data = self._get(
                client,
                PLACES_TEXT_SEARCH_URL,
                {"query": query, "type": PLACES_SEARCH_TYPE},
            )
            status = data.get("status")
            if status == "ZERO_RESULTS":
                return []
            if status != "OK":
                raise PlaceLookupError(_status_message("Failed to fetch places", data))

            results = []
            for place in data.get("results", []):
                try:
                    results.append(self._to_candidate(client, place))
                except (PlaceLookupError, KeyError) as e:
                    logger.warning(f"Error processing place {place.get('place_id')}: {e}")

        if results:
            self._cache_set(cache_key, results)
        return results

    def _to_candidate(self, client: httpx.Client, place: dict[str, Any]) -> CandidateRecord:
        details = self._details(client, place["place_id"])
        location = (place.get("geometry") or {}).get("location") or {}
        address = place.get("formatted_address") or ""
        return CandidateRecord(
            id=place["place_id"],
            name=place["name"],
            address=address,
            lat=location.get("lat"),
            lng=location.get("lng"),
            rating=place.get("rating"),
            total_ratings=place.get("user_ratings_total"),
            **details,
        )

    def _details(self, client: httpx.Client, place_id: str) -> dict[str, Any]:
        cache_key = f"placeDetails:{place_id}"
        cached = self._cache_get(cache_key)
        if cached is not None:
            return cached

        data = self._get(
            client,
            PLACES_DETAILS_URL,
            {"place_id": place_id, "fields": PLACES_DETAIL_FIELDS},
        )
        if data.get("status") != "OK":
            raise PlaceLookupError(_status_message("Failed to fetch place details", data))

        result = data.get("result") or {}
        details = {
            "phone": result.get("formatted_phone_number") or "",
            "website": result.get("website") or "",
            "city": "",
            "state": "",
            "country": "",
            "country_code": "",
        }
        for component in result.get("address_components") or []:
            for component_type, field in _COMPONENT_FIELDS.items():
                if component_type in component.get("types", []):
                    details[field] = component.get("long_name", "")
                    if component_type == "country":
                        details["country_code"] = component.get("short_name", "")

        self._cache_set(cache_key, details)
        return details

    def _get(self, client: httpx.Client, url: str, params: dict[str, str]) -> dict[str, Any]:
        try:
            response = client.get(url, params={**params, "key": self.api_key})
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise TransientNetworkError(f"Places request timeout: {e}") from e
        except httpx.TransportError as e:
            raise TransientNetworkError(f"Places network error: {e}") from e
        except httpx.HTTPStatusError as e:
            raise PlaceLookupError(f"HTTP error: {e.response.status_code}") from e
        return response.json()

    def _client(self) -> httpx.Client:
        return httpx.Client(
            timeout=self.timeout,
            transport=self._transport,
            headers={"Accept": "application/json"},
        )

    def _cache_get(self, key):
        with self._lock:
            return self._cache.get(key)

    def _cache_set(self, key, value):
        with self._lock:
            self._cache[key] = value


def _status_message(prefix: str, data: dict[str, Any]) -> str:
    message = f"{prefix}: {data.get('status')}"
    if data.get("error_message"):
        message += f" - {data['error_message']}"
    return message
