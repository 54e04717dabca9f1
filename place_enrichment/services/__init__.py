"""Place Enrichment Services.

Service layer components:
- Enrichment: provider interface with cache-first search
- Google Places: paid API provider (search, details, photos)
- Apple Maps: Apple Maps Server API provider (search only)
- Orchestrator: ranking + fallback between the two providers
"""

from .enrichment import EnrichmentProvider, PlaceSearchCache
from .google_places import GooglePlacesService
from .apple_maps import AppleMapsSearchService
from .orchestrator import SearchOrchestrator, create_orchestrator, rank_results

__all__ = [
    # Providers
    "EnrichmentProvider",
    "PlaceSearchCache",
    "GooglePlacesService",
    "AppleMapsSearchService",
    # Orchestration
    "SearchOrchestrator",
    "create_orchestrator",
    "rank_results",
]
