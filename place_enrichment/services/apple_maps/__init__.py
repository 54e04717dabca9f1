"""Apple Maps provider module."""

from .service import AppleMapsSearchService, map_search_result

__all__ = ["AppleMapsSearchService", "map_search_result"]
