"""Place enrichment models."""

from .core import (
    Coordinates,
    DayTime,
    EnrichedPlaceData,
    OpeningHours,
    OpeningPeriod,
    PlacePhoto,
    PlaceProvider,
    PlaceReview,
    SearchQuery,
    SearchResult,
)
from .errors import AppError, EnrichmentError, ErrorCode

__all__ = [
    "Coordinates",
    "DayTime",
    "EnrichedPlaceData",
    "OpeningHours",
    "OpeningPeriod",
    "PlacePhoto",
    "PlaceProvider",
    "PlaceReview",
    "SearchQuery",
    "SearchResult",
    "AppError",
    "EnrichmentError",
    "ErrorCode",
]
