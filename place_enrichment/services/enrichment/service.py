"""Place enrichment provider interface.

Provider-agnostic base class with two concrete implementations:
- GooglePlacesService:     Google Places Web Service (paid API)
- AppleMapsSearchService:  Apple Maps Server API search

The cache-first search lives here. Subclasses only implement
``_search_remote()`` for their specific API, plus details and photos.
"""

import logging
from abc import ABC, abstractmethod

import httpx

from place_enrichment.models import (
    EnrichedPlaceData,
    EnrichmentError,
    PlaceProvider,
    SearchQuery,
    SearchResult,
)
from place_enrichment.utils.cache import ExpiringBoundedCache

logger = logging.getLogger(__name__)

PlaceSearchCache = ExpiringBoundedCache[SearchQuery, SearchResult]

DEFAULT_PHOTO_MAX_WIDTH = 400


class EnrichmentProvider(ABC):
    """Base class for place enrichment providers.

    All providers in a process share one ``PlaceSearchCache`` by reference.
    Errors raised by any public method are ``EnrichmentError``.
    """

    _cache: PlaceSearchCache
    _client: httpx.AsyncClient

    @property
    @abstractmethod
    def provider(self) -> PlaceProvider:
        ...

    @abstractmethod
    async def _search_remote(self, query: SearchQuery) -> list[SearchResult]:
        """Run the search against the provider API, bypassing the cache."""
        ...

    @abstractmethod
    async def get_details(self, place_id: str) -> EnrichedPlaceData:
        ...

    @abstractmethod
    async def get_photo_url(
        self, photo_reference: str, max_width: int = DEFAULT_PHOTO_MAX_WIDTH
    ) -> str:
        ...

    @property
    def tag(self) -> str:
        """Log prefix for this provider."""
        return "GOOGLE" if self.provider is PlaceProvider.GOOGLE else "APPLE"

    async def search(self, query: SearchQuery) -> list[SearchResult]:
        """Search for places, serving from the shared cache when possible.

        Args:
            query: The search parameters. Also the cache key.

        Returns:
            Results in provider order. Cached on success.

        Raises:
            EnrichmentError: If the remote search fails.
        """
        logger.debug(f"[{self.tag}] Searching: {query.full_text_query}")

        cached = self._cache.get(query)
        if cached is not None:
            logger.debug(f"[{self.tag}] Returning {len(cached)} cached results")
            return cached

        results = await self._search_remote(query)
        self._cache.set(query, results)
        logger.info(f"[{self.tag}] Found {len(results)} places")
        return results

    async def close(self) -> None:
        if not self._client.is_closed:
            await self._client.aclose()

    @staticmethod
    def _network_error(error: Exception) -> EnrichmentError:
        detail = str(error) or type(error).__name__
        return EnrichmentError.network_error(detail)
