"""Google Places provider.

Uses the Places Web Service (legacy JSON endpoints):
- textsearch: natural-language search, optionally biased by location/radius
- details:    full place data incl. opening hours, photos and reviews
- photo:      photo URL construction (no request is made)

Non-OK statuses are mapped onto ``EnrichmentError`` kinds; transport
failures become ``network_error``.
"""

import logging
from datetime import datetime, timezone
from typing import Any
from urllib.parse import urlencode

import httpx
from pydantic import ValidationError

from place_enrichment.models import (
    Coordinates,
    DayTime,
    EnrichedPlaceData,
    EnrichmentError,
    OpeningHours,
    OpeningPeriod,
    PlacePhoto,
    PlaceProvider,
    PlaceReview,
    SearchQuery,
    SearchResult,
)
from place_enrichment.services.enrichment import (
    DEFAULT_PHOTO_MAX_WIDTH,
    EnrichmentProvider,
    PlaceSearchCache,
)

logger = logging.getLogger(__name__)

DETAIL_FIELDS = (
    "name,formatted_address,geometry,photos,rating,user_ratings_total,"
    "price_level,opening_hours,website,formatted_phone_number,reviews,types"
)


def map_google_status(status: str) -> EnrichmentError:
    """Map a non-OK Places API status to an error kind."""
    if status == "ZERO_RESULTS":
        return EnrichmentError.no_results_found()
    if status == "INVALID_REQUEST":
        return EnrichmentError.invalid_query()
    if status == "OVER_QUERY_LIMIT":
        return EnrichmentError.rate_limit_exceeded()
    if status == "REQUEST_DENIED":
        return EnrichmentError.invalid_api_key()
    return EnrichmentError.service_unavailable(PlaceProvider.GOOGLE)


def _coordinate(result: dict[str, Any]) -> Coordinates:
    location = result["geometry"]["location"]
    return Coordinates(lat=float(location["lat"]), lng=float(location["lng"]))


def map_search_result(result: dict[str, Any]) -> SearchResult:
    """Map one ``textsearch`` result to a ``SearchResult``."""
    return SearchResult(
        id=result["place_id"],
        provider=PlaceProvider.GOOGLE,
        name=result["name"],
        address=result.get("formatted_address"),
        coordinate=_coordinate(result),
        types=result.get("types") or [],
        rating=result.get("rating"),
        user_ratings_total=result.get("user_ratings_total"),
        price_level=result.get("price_level"),
        photo_references=[p["photo_reference"] for p in result.get("photos") or []],
    )


def _map_opening_hours(data: dict[str, Any]) -> OpeningHours:
    periods = []
    for period in data.get("periods") or []:
        close = period.get("close")
        periods.append(OpeningPeriod(
            open=DayTime(day=period["open"]["day"], time=period["open"]["time"]),
            close=DayTime(day=close["day"], time=close["time"]) if close else None,
        ))
    return OpeningHours(
        is_open=data.get("open_now"),
        weekday_text=data.get("weekday_text") or [],
        periods=periods,
    )


def map_place_details(result: dict[str, Any]) -> EnrichedPlaceData:
    """Map a ``details`` result to ``EnrichedPlaceData``.

    Photo and review ids are derived from the place id and their position.
    """
    place_id = result["place_id"]
    photos = [
        PlacePhoto(
            id=f"{place_id}_{i}",
            photo_reference=photo["photo_reference"],
            width=photo.get("width", 0),
            height=photo.get("height", 0),
            attributions=photo.get("html_attributions") or [],
        )
        for i, photo in enumerate(result.get("photos") or [])
    ]
    reviews = [
        PlaceReview(
            id=f"{place_id}_review_{i}",
            author_name=review["author_name"],
            rating=review["rating"],
            text=review.get("text", ""),
            time=datetime.fromtimestamp(review["time"], tz=timezone.utc),
            language=review.get("language"),
        )
        for i, review in enumerate(result.get("reviews") or [])
    ]
    opening_hours = result.get("opening_hours")
    return EnrichedPlaceData(
        place_id=place_id,
        provider=PlaceProvider.GOOGLE,
        name=result["name"],
        formatted_address=result.get("formatted_address"),
        coordinate=_coordinate(result),
        phone_number=result.get("formatted_phone_number"),
        website=result.get("website"),
        rating=result.get("rating"),
        user_ratings_total=result.get("user_ratings_total"),
        price_level=result.get("price_level"),
        opening_hours=_map_opening_hours(opening_hours) if opening_hours else None,
        photos=photos,
        reviews=reviews,
        types=result.get("types") or [],
    )


class GooglePlacesService(EnrichmentProvider):
    """Google Places implementation of ``EnrichmentProvider``.

    Attributes:
        _api_key: Places API key, sent as the ``key`` query parameter.
        _cache: Shared search cache.
        _client: Async HTTP client (created here unless injected).
    """

    BASE_URL = "https://maps.googleapis.com/maps/api/place"

    def __init__(
        self,
        api_key: str,
        cache: PlaceSearchCache,
        client: httpx.AsyncClient | None = None,
        language: str = "en",
        timeout: float = 10.0,
    ) -> None:
        self._api_key = api_key
        self._cache = cache
        self._language = language
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @property
    def provider(self) -> PlaceProvider:
        return PlaceProvider.GOOGLE

    async def _get_json(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        if not self._api_key:
            raise EnrichmentError.invalid_api_key()
        try:
            response = await self._client.get(f"{self.BASE_URL}/{path}", params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            logger.error(f"[GOOGLE] Request to {path} failed: {e}")
            raise self._network_error(e) from e
        except ValueError as e:
            logger.error(f"[GOOGLE] Invalid JSON from {path}: {e}")
            raise self._network_error(e) from e
        if not isinstance(payload, dict):
            raise EnrichmentError.invalid_response()
        return payload

    async def _search_remote(self, query: SearchQuery) -> list[SearchResult]:
        params: dict[str, Any] = {
            "query": query.full_text_query,
            "key": self._api_key,
            "language": self._language,
        }
        if query.coordinate is not None:
            params["location"] = f"{query.coordinate.lat},{query.coordinate.lng}"
        if query.radius_meters is not None:
            params["radius"] = str(query.radius_meters)

        payload = await self._get_json("textsearch/json", params)
        status = payload.get("status")
        if status not in {"OK", "ZERO_RESULTS"}:
            logger.error(
                f"[GOOGLE] Places API error: status={status}, "
                f"error_message={payload.get('error_message')}"
            )
            raise map_google_status(str(status))

        try:
            return [map_search_result(r) for r in payload.get("results") or []]
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            logger.error(f"[GOOGLE] Unexpected search payload: {e}")
            raise EnrichmentError.invalid_response() from e

    async def get_details(self, place_id: str) -> EnrichedPlaceData:
        """Fetch full details for a Google place id."""
        logger.debug(f"[GOOGLE] Fetching details for place: {place_id}")
        params = {
            "place_id": place_id,
            "key": self._api_key,
            "fields": DETAIL_FIELDS,
            "language": self._language,
        }
        payload = await self._get_json("details/json", params)
        status = payload.get("status")
        if status != "OK":
            logger.error(f"[GOOGLE] Places API error: status={status}")
            raise map_google_status(str(status))

        try:
            result = dict(payload["result"])
            # The details endpoint omits place_id unless it is requested as a field.
            result.setdefault("place_id", place_id)
            details = map_place_details(result)
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            logger.error(f"[GOOGLE] Unexpected details payload: {e}")
            raise EnrichmentError.invalid_response() from e

        logger.info(f"[GOOGLE] Fetched details for: {details.name}")
        return details

    async def get_photo_url(
        self, photo_reference: str, max_width: int = DEFAULT_PHOTO_MAX_WIDTH
    ) -> str:
        """Build the photo URL for a reference. No request is made."""
        if not photo_reference:
            raise EnrichmentError.photo_download_failed(photo_reference)
        params = urlencode({
            "photoreference": photo_reference,
            "maxwidth": max_width,
            "key": self._api_key,
        })
        return f"{self.BASE_URL}/photo?{params}"
