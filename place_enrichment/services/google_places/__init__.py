"""Google Places provider module."""

from .service import (
    GooglePlacesService,
    map_google_status,
    map_place_details,
    map_search_result,
)

__all__ = [
    "GooglePlacesService",
    "map_google_status",
    "map_place_details",
    "map_search_result",
]
