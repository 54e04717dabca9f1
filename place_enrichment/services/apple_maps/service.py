"""Apple Maps provider using the Apple Maps Server API.

The long-lived Maps auth token is exchanged for a short-lived access token
(``/v1/token``), which is reused until shortly before it expires. Search
uses ``/v1/search``. Apple returns no ratings, prices or photos, and has no
details endpoint, so ``get_details`` and ``get_photo_url`` always fail.
"""

import logging
import time
from typing import Any

import httpx
from pydantic import ValidationError

from place_enrichment.models import (
    Coordinates,
    EnrichedPlaceData,
    EnrichmentError,
    PlaceProvider,
    SearchQuery,
    SearchResult,
)
from place_enrichment.services.enrichment import (
    DEFAULT_PHOTO_MAX_WIDTH,
    EnrichmentProvider,
    PlaceSearchCache,
)

logger = logging.getLogger(__name__)

# Refresh the access token this many seconds before Apple expires it.
TOKEN_REFRESH_MARGIN = 60


def map_search_result(item: dict[str, Any]) -> SearchResult | None:
    """Map one ``/v1/search`` result; ``None`` if it has no name or coordinate."""
    name = item.get("name")
    coordinate = item.get("coordinate")
    if not isinstance(coordinate, dict):
        return None
    lat = coordinate.get("latitude")
    lng = coordinate.get("longitude")
    if not name or lat is None or lng is None:
        return None

    lines = [line for line in item.get("formattedAddressLines") or [] if line]
    category = item.get("poiCategory")
    return SearchResult(
        id=item.get("id") or f"{name}@{lat},{lng}",
        provider=PlaceProvider.APPLE,
        name=name,
        address=", ".join(lines) if lines else None,
        coordinate=Coordinates(lat=float(lat), lng=float(lng)),
        types=[category] if category else [],
    )


class AppleMapsSearchService(EnrichmentProvider):
    """Apple Maps implementation of ``EnrichmentProvider``."""

    BASE_URL = "https://maps-api.apple.com/v1"

    def __init__(
        self,
        auth_token: str,
        cache: PlaceSearchCache,
        client: httpx.AsyncClient | None = None,
        language: str = "en",
        timeout: float = 10.0,
    ) -> None:
        self._auth_token = auth_token
        self._cache = cache
        self._language = language
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._access_token: str | None = None
        self._access_token_expires_at = 0.0

    @property
    def provider(self) -> PlaceProvider:
        return PlaceProvider.APPLE

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.status_code in (401, 403):
            raise EnrichmentError.invalid_api_key()
        if response.status_code == 429:
            raise EnrichmentError.rate_limit_exceeded()
        response.raise_for_status()

    async def _get_access_token(self) -> str:
        if self._access_token and time.monotonic() < self._access_token_expires_at:
            return self._access_token
        if not self._auth_token:
            raise EnrichmentError.invalid_api_key()

        try:
            response = await self._client.get(
                f"{self.BASE_URL}/token",
                headers={"Authorization": f"Bearer {self._auth_token}"},
            )
            self._raise_for_status(response)
            payload = response.json()
        except httpx.HTTPError as e:
            logger.error(f"[APPLE] Token exchange failed: {e}")
            raise self._network_error(e) from e
        except ValueError as e:
            logger.error(f"[APPLE] Invalid JSON from token exchange: {e}")
            raise self._network_error(e) from e

        token = payload.get("accessToken") if isinstance(payload, dict) else None
        if not token or not isinstance(token, str):
            raise EnrichmentError.invalid_response()
        try:
            expires_in = float(payload.get("expiresInSeconds", 1800))
        except (TypeError, ValueError) as e:
            logger.error(f"[APPLE] Invalid token lifetime: {e}")
            raise EnrichmentError.invalid_response() from e
        self._access_token = token
        self._access_token_expires_at = time.monotonic() + max(0.0, expires_in - TOKEN_REFRESH_MARGIN)
        logger.debug(f"[APPLE] Access token refreshed, valid for {expires_in:.0f}s")
        return token

    async def _search_remote(self, query: SearchQuery) -> list[SearchResult]:
        token = await self._get_access_token()
        params: dict[str, Any] = {"q": query.full_text_query, "lang": self._language}
        if query.coordinate is not None:
            params["searchLocation"] = f"{query.coordinate.lat},{query.coordinate.lng}"

        try:
            response = await self._client.get(
                f"{self.BASE_URL}/search",
                params=params,
                headers={"Authorization": f"Bearer {token}"},
            )
            self._raise_for_status(response)
            payload = response.json()
        except httpx.HTTPError as e:
            logger.error(f"[APPLE] Failed to search places: {e}")
            raise self._network_error(e) from e
        except ValueError as e:
            logger.error(f"[APPLE] Invalid JSON from search: {e}")
            raise self._network_error(e) from e

        if not isinstance(payload, dict):
            raise EnrichmentError.invalid_response()
        results = []
        try:
            for item in payload.get("results") or []:
                result = map_search_result(item) if isinstance(item, dict) else None
                if result is not None:
                    results.append(result)
        except (KeyError, TypeError, ValueError, AttributeError, ValidationError) as e:
            logger.error(f"[APPLE] Malformed search payload: {e}")
            raise EnrichmentError.invalid_response() from e
        return results

    async def get_details(self, place_id: str) -> EnrichedPlaceData:
        logger.warning("[APPLE] Apple Maps does not support detailed place information")
        raise EnrichmentError.service_unavailable(PlaceProvider.APPLE)

    async def get_photo_url(
        self, photo_reference: str, max_width: int = DEFAULT_PHOTO_MAX_WIDTH
    ) -> str:
        logger.warning("[APPLE] Apple Maps does not support photo URLs")
        raise EnrichmentError.photo_download_failed(photo_reference)
