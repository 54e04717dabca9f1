"""Provider interface and shared search cache type."""

from .service import DEFAULT_PHOTO_MAX_WIDTH, EnrichmentProvider, PlaceSearchCache

__all__ = [
    "DEFAULT_PHOTO_MAX_WIDTH",
    "EnrichmentProvider",
    "PlaceSearchCache",
]
