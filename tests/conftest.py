import sys
from pathlib import Path

import pytest

# Ensure `place_enrichment` is importable when running pytest from the repo root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from place_enrichment.models import (  # noqa: E402
    Coordinates,
    EnrichedPlaceData,
    EnrichmentError,
    PlaceProvider,
    SearchQuery,
    SearchResult,
)


class FakeProvider:
    """In-memory stand-in for an EnrichmentProvider."""

    def __init__(self, provider, results=None, error=None, details=None, details_error=None):
        self.provider = provider
        self.results = results if results is not None else []
        self.error = error
        self.details = details
        self.details_error = details_error
        self.search_calls = []
        self.details_calls = []
        self.closed = False

    async def search(self, query):
        self.search_calls.append(query)
        if self.error is not None:
            raise self.error
        return list(self.results)

    async def get_details(self, place_id):
        self.details_calls.append(place_id)
        if self.details_error is not None:
            raise self.details_error
        return self.details

    async def get_photo_url(self, photo_reference, max_width=400):
        if self.provider is PlaceProvider.APPLE:
            raise EnrichmentError.photo_download_failed(photo_reference)
        return f"https://photos.example/{photo_reference}?w={max_width}"

    async def close(self):
        self.closed = True


def make_result(
    place_id="p1",
    provider=PlaceProvider.GOOGLE,
    name="Cafe Central",
    address=None,
    rating=None,
    user_ratings_total=None,
    photo_references=None,
):
    return SearchResult(
        id=place_id,
        provider=provider,
        name=name,
        address=address,
        coordinate=Coordinates(lat=48.2104, lng=16.3655),
        rating=rating,
        user_ratings_total=user_ratings_total,
        photo_references=photo_references or [],
    )


def make_details(place_id="p1", provider=PlaceProvider.GOOGLE):
    return EnrichedPlaceData(
        place_id=place_id,
        provider=provider,
        name="Cafe Central",
        coordinate=Coordinates(lat=48.2104, lng=16.3655),
    )


@pytest.fixture
def query() -> SearchQuery:
    return SearchQuery(name="Cafe Central", city="Vienna")


@pytest.fixture
def google_provider() -> FakeProvider:
    return FakeProvider(PlaceProvider.GOOGLE)


@pytest.fixture
def apple_provider() -> FakeProvider:
    return FakeProvider(PlaceProvider.APPLE)
