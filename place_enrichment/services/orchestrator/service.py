"""Search orchestration: ranking, provider fallback and observable state.

The orchestrator holds the state a UI binds to (results, selection,
details, last error). It does not touch the cache itself; providers
consult the shared cache around their own network calls.

Fallback policy:
- Primary provider raises an ``EnrichmentError`` -> record it, then try
  the other provider once.
- Fallback succeeds -> its results replace the (empty) list and the
  other provider becomes the selected one. The primary error is kept.
- Fallback fails -> swallowed; the caller sees the primary error.
"""

import asyncio
import logging
from typing import Any, Callable

from place_enrichment.config import Settings, get_settings
from place_enrichment.models import (
    EnrichedPlaceData,
    EnrichmentError,
    PlaceProvider,
    SearchQuery,
    SearchResult,
)
from place_enrichment.services.apple_maps import AppleMapsSearchService
from place_enrichment.services.enrichment import (
    DEFAULT_PHOTO_MAX_WIDTH,
    EnrichmentProvider,
    PlaceSearchCache,
)
from place_enrichment.services.google_places import GooglePlacesService
from place_enrichment.utils.cache import ExpiringBoundedCache

logger = logging.getLogger(__name__)

StateListener = Callable[[str, Any], None]


def rank_results(results: list[SearchResult]) -> list[SearchResult]:
    """Sort by match score, best first. Ties keep provider order."""
    return sorted(results, key=lambda r: r.match_score, reverse=True)


class SearchOrchestrator:
    """Coordinates place searches across the Google and Apple providers.

    Observable fields: ``selected_provider``, ``search_results``,
    ``selected_result``, ``enriched_details``, ``last_error``,
    ``is_searching`` and ``is_loading_details``. Every assignment is
    reported to subscribed listeners as ``listener(field, value)``.
    """

    def __init__(
        self,
        google_service: EnrichmentProvider,
        apple_service: EnrichmentProvider,
        selected_provider: PlaceProvider = PlaceProvider.GOOGLE,
    ) -> None:
        self._services = {
            PlaceProvider.GOOGLE: google_service,
            PlaceProvider.APPLE: apple_service,
        }
        self._listeners: list[StateListener] = []

        self.selected_provider = selected_provider
        self.search_results: list[SearchResult] = []
        self.selected_result: SearchResult | None = None
        self.enriched_details: EnrichedPlaceData | None = None
        self.last_error: EnrichmentError | None = None
        self.is_searching = False
        self.is_loading_details = False

    # ── Change notification ───────────────────────────────────────────

    def subscribe(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _set(self, field: str, value: Any) -> None:
        setattr(self, field, value)
        for listener in list(self._listeners):
            try:
                listener(field, value)
            except Exception:
                logger.exception(f"[SEARCH] State listener failed for {field}")

    # ── Operations ────────────────────────────────────────────────────

    @property
    def current_service(self) -> EnrichmentProvider:
        return self._services[self.selected_provider]

    async def search_places(self, query: SearchQuery) -> None:
        """Search with the selected provider, falling back once on failure.

        Never raises except for cancellation. If cancelled while waiting on
        a provider, the search fields are restored to their prior values.
        """
        logger.info(f"[SEARCH] Searching places: {query.full_text_query}")
        snapshot = (
            self.search_results,
            self.last_error,
            self.selected_provider,
        )

        self._set("is_searching", True)
        self._set("last_error", None)
        self._set("search_results", [])
        try:
            await self._search_with_fallback(query)
        except asyncio.CancelledError:
            logger.info("[SEARCH] Search cancelled, restoring previous state")
            self._set("search_results", snapshot[0])
            self._set("last_error", snapshot[1])
            self._set("selected_provider", snapshot[2])
            raise
        finally:
            self._set("is_searching", False)

    async def _search_with_fallback(self, query: SearchQuery) -> None:
        provider = self.selected_provider
        try:
            results = await self._services[provider].search(query)
        except EnrichmentError as e:
            logger.error(f"[SEARCH] Search failed on {provider.display_name}: {e!r}")
            self._set("last_error", e)
            await self._search_fallback(query, provider.alternate)
            return
        except Exception as e:
            logger.error(f"[SEARCH] Search failed on {provider.display_name}: {e}")
            self._set("last_error", EnrichmentError.network_error(str(e)))
            return

        logger.info(f"[SEARCH] Found {len(results)} results from {provider.display_name}")
        self._store_results(results)

    async def _search_fallback(self, query: SearchQuery, fallback: PlaceProvider) -> None:
        logger.info(f"[SEARCH] Attempting fallback to {fallback.display_name}")
        try:
            results = await self._services[fallback].search(query)
        except Exception as e:
            logger.error(f"[SEARCH] Fallback also failed: {e}")
            return

        logger.info(f"[SEARCH] Fallback successful: {len(results)} results")
        self._store_results(results)
        self._set("selected_provider", fallback)

    def _store_results(self, results: list[SearchResult]) -> None:
        self._set("search_results", rank_results(results))
        if not results:
            self._set("last_error", EnrichmentError.no_results_found())

    async def select_result(self, result: SearchResult) -> None:
        """Select a result and load its details.

        Details are requested from the currently selected provider, which
        is not necessarily the provider that produced ``result``.
        """
        logger.info(f"[SEARCH] Selected result: {result.name}")
        self._set("selected_result", result)
        self._set("is_loading_details", True)
        self._set("last_error", None)

        try:
            details = await self.current_service.get_details(result.id)
        except EnrichmentError as e:
            logger.error(f"[SEARCH] Failed to load details: {e!r}")
            self._set("last_error", e)
        except Exception as e:
            logger.error(f"[SEARCH] Failed to load details: {e}")
            self._set("last_error", EnrichmentError.network_error(str(e)))
        else:
            self._set("enriched_details", details)
            logger.info(f"[SEARCH] Loaded enriched data for: {result.name}")
        finally:
            self._set("is_loading_details", False)

    async def get_photo_url(
        self, photo_reference: str, max_width: int = DEFAULT_PHOTO_MAX_WIDTH
    ) -> str:
        return await self.current_service.get_photo_url(photo_reference, max_width)

    def change_provider(self, provider: PlaceProvider) -> None:
        """Switch provider and discard all prior search state."""
        logger.info(f"[SEARCH] Changing provider to: {provider.display_name}")
        self._set("selected_provider", provider)
        self._set("search_results", [])
        self._set("selected_result", None)
        self._set("enriched_details", None)
        self._set("last_error", None)

    def reset(self) -> None:
        self._set("search_results", [])
        self._set("selected_result", None)
        self._set("enriched_details", None)
        self._set("last_error", None)
        self._set("is_searching", False)
        self._set("is_loading_details", False)

    async def close(self) -> None:
        for service in self._services.values():
            await service.close()


def create_orchestrator(settings: Settings | None = None) -> SearchOrchestrator:
    """Build both providers around one shared cache."""
    settings = settings or get_settings()
    cache: PlaceSearchCache = ExpiringBoundedCache(
        max_size=settings.cache_max_size,
        ttl_seconds=settings.cache_ttl_seconds,
    )
    google = GooglePlacesService(
        api_key=settings.google_places_api_key,
        cache=cache,
        language=settings.language,
        timeout=settings.http_timeout,
    )
    apple = AppleMapsSearchService(
        auth_token=settings.apple_maps_auth_token,
        cache=cache,
        language=settings.language,
        timeout=settings.http_timeout,
    )
    logger.info(
        f"[SEARCH] Orchestrator ready: default={settings.default_provider.display_name}, "
        f"cache max_size={cache.max_size} ttl={cache.ttl_seconds}s"
    )
    return SearchOrchestrator(google, apple, selected_provider=settings.default_provider)
