"""Core data models for place enrichment.

This module contains the Pydantic models used throughout the package for
representing search queries, provider search results and enriched place
details.

Search queries double as cache keys, so they are frozen: equality and
hashing are structural over every field.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PlaceProvider(str, Enum):
    """Available place data providers."""

    GOOGLE = "Google Places"
    APPLE = "Apple Maps"

    @property
    def display_name(self) -> str:
        return self.value

    @property
    def alternate(self) -> "PlaceProvider":
        """The provider used as fallback when this one fails."""
        return PlaceProvider.APPLE if self is PlaceProvider.GOOGLE else PlaceProvider.GOOGLE


class Coordinates(BaseModel):
    """Geographic coordinates.

    Not range-validated: a search query must accept whatever the caller
    builds, and two coordinates are equal only when both components are.
    """

    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., description="Latitude in degrees")
    lng: float = Field(..., description="Longitude in degrees")


class SearchQuery(BaseModel):
    """Parameters of a single place search.

    Immutable and hashable; used as the cache key for search results.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Place name to search for")
    address: Optional[str] = Field(None, description="Street address hint")
    city: Optional[str] = Field(None, description="City hint")
    country_code: Optional[str] = Field(None, description="ISO country code")
    coordinate: Optional[Coordinates] = Field(
        None, description="Center of the search area"
    )
    radius_meters: Optional[int] = Field(
        None, description="Search radius around the coordinate"
    )

    @property
    def full_text_query(self) -> str:
        """Natural-language query: name, address, city joined by ", "."""
        parts = [self.name]
        if self.address is not None:
            parts.append(self.address)
        if self.city is not None:
            parts.append(self.city)
        return ", ".join(parts)


class SearchResult(BaseModel):
    """A place returned by a provider search."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Provider-scoped place identifier")
    provider: PlaceProvider = Field(..., description="Provider that produced this result")
    name: str = Field(..., description="Display name of the place")
    address: Optional[str] = Field(None, description="Formatted address")
    coordinate: Coordinates = Field(..., description="Geographic location")
    types: list[str] = Field(default_factory=list, description="Place type categories")
    rating: Optional[float] = Field(None, description="Average rating, typically 1-5")
    user_ratings_total: Optional[int] = Field(None, description="Number of ratings")
    price_level: Optional[int] = Field(None, ge=0, le=4, description="Price level 0-4")
    photo_references: list[str] = Field(
        default_factory=list, description="Provider photo references"
    )

    @property
    def match_score(self) -> float:
        """Data completeness score in [0, 1], used only for ranking."""
        score = 0.0
        if self.rating is not None:
            score += 0.3
        if (self.user_ratings_total or 0) > 0:
            score += 0.2
        if self.photo_references:
            score += 0.3
        if self.address is not None:
            score += 0.2
        return score


class DayTime(BaseModel):
    """Day of week (0-6, Sunday first) and a ``HHMM`` time."""

    day: int = Field(..., ge=0, le=6)
    time: str


class OpeningPeriod(BaseModel):
    """A single opening period; ``close`` is absent for 24h places."""

    open: DayTime
    close: Optional[DayTime] = None


class OpeningHours(BaseModel):
    """Opening hours information for a place."""

    is_open: Optional[bool] = Field(None, description="Whether the place is currently open")
    weekday_text: list[str] = Field(
        default_factory=list, description="Human-readable opening hours by day"
    )
    periods: list[OpeningPeriod] = Field(
        default_factory=list, description="List of opening periods"
    )


class PlacePhoto(BaseModel):
    id: str
    photo_reference: str
    width: int
    height: int
    attributions: list[str] = Field(default_factory=list)


class PlaceReview(BaseModel):
    id: str
    author_name: str
    rating: int
    text: str
    time: datetime
    language: Optional[str] = None


class EnrichedPlaceData(BaseModel):
    """Full details for a single place, as returned by a details lookup."""

    place_id: str = Field(..., description="Provider-scoped place identifier")
    provider: PlaceProvider
    name: str
    formatted_address: Optional[str] = None
    coordinate: Coordinates
    phone_number: Optional[str] = None
    website: Optional[str] = None
    rating: Optional[float] = None
    user_ratings_total: Optional[int] = None
    price_level: Optional[int] = Field(None, ge=0, le=4)
    opening_hours: Optional[OpeningHours] = None
    photos: list[PlacePhoto] = Field(default_factory=list)
    reviews: list[PlaceReview] = Field(default_factory=list)
    types: list[str] = Field(default_factory=list)
