"""Unit tests for search models and the error taxonomy."""

import pytest
from pydantic import ValidationError

from conftest import make_result

from place_enrichment.models import (
    Coordinates,
    EnrichmentError,
    ErrorCode,
    PlaceProvider,
    SearchQuery,
)


class TestSearchQuery:
    def test_basic_query_creation(self) -> None:
        query = SearchQuery(name="Cafe Central")
        assert query.name == "Cafe Central"
        assert query.address is None
        assert query.city is None
        assert query.country_code is None
        assert query.coordinate is None
        assert query.radius_meters is None

    def test_full_text_query_name_only(self) -> None:
        assert SearchQuery(name="Cafe Central").full_text_query == "Cafe Central"

    def test_full_text_query_with_address_and_city(self) -> None:
        query = SearchQuery(name="Cafe Central", address="Herrengasse 14", city="Vienna")
        assert query.full_text_query == "Cafe Central, Herrengasse 14, Vienna"

    def test_full_text_query_skips_missing_address(self) -> None:
        query = SearchQuery(name="Cafe Central", city="Vienna", country_code="AT")
        assert query.full_text_query == "Cafe Central, Vienna"

    def test_equal_queries_are_equal_and_hash_equal(self) -> None:
        q1 = SearchQuery(name="A", city="B", coordinate=Coordinates(lat=1.0, lng=2.0), radius_meters=500)
        q2 = SearchQuery(radius_meters=500, coordinate=Coordinates(lat=1.0, lng=2.0), city="B", name="A")
        assert q1 == q2
        assert hash(q1) == hash(q2)
        assert len({q1, q2}) == 1

    def test_coordinate_component_difference(self) -> None:
        q1 = SearchQuery(name="A", coordinate=Coordinates(lat=1.0, lng=2.0))
        q2 = SearchQuery(name="A", coordinate=Coordinates(lat=1.0, lng=2.0001))
        assert q1 != q2

    def test_missing_coordinate_differs_from_present(self) -> None:
        assert SearchQuery(name="A") != SearchQuery(name="A", coordinate=Coordinates(lat=0.0, lng=0.0))

    @pytest.mark.parametrize(
        "field, value",
        [
            ("address", "Main St"),
            ("city", "Vienna"),
            ("country_code", "AT"),
            ("radius_meters", 100),
        ],
    )
    def test_any_field_difference_breaks_equality(self, field: str, value: object) -> None:
        assert SearchQuery(name="A") != SearchQuery(name="A", **{field: value})

    def test_query_is_immutable(self) -> None:
        query = SearchQuery(name="A")
        with pytest.raises(ValidationError):
            query.name = "B"


class TestSearchResultMatchScore:
    def test_empty_result_scores_zero(self) -> None:
        assert make_result().match_score == 0.0

    def test_complete_result_scores_one(self) -> None:
        result = make_result(
            address="Herrengasse 14",
            rating=4.5,
            user_ratings_total=1200,
            photo_references=["ref1"],
        )
        assert result.match_score == pytest.approx(1.0)

    def test_rating_and_count(self) -> None:
        assert make_result(rating=4.0, user_ratings_total=10).match_score == pytest.approx(0.5)

    def test_zero_ratings_total_does_not_count(self) -> None:
        assert make_result(rating=4.0, user_ratings_total=0).match_score == pytest.approx(0.3)

    def test_photos_only(self) -> None:
        assert make_result(photo_references=["a", "b"]).match_score == pytest.approx(0.3)

    def test_address_only(self) -> None:
        assert make_result(address="Somewhere").match_score == pytest.approx(0.2)


class TestPlaceProvider:
    def test_display_name(self) -> None:
        assert PlaceProvider.GOOGLE.display_name == "Google Places"
        assert PlaceProvider.APPLE.display_name == "Apple Maps"

    def test_alternate(self) -> None:
        assert PlaceProvider.GOOGLE.alternate is PlaceProvider.APPLE
        assert PlaceProvider.APPLE.alternate is PlaceProvider.GOOGLE


class TestEnrichmentError:
    def test_equality_compares_code_and_detail(self) -> None:
        assert EnrichmentError.network_error("timeout") == EnrichmentError.network_error("timeout")
        assert EnrichmentError.network_error("timeout") != EnrichmentError.network_error("reset")
        assert EnrichmentError.invalid_query() != EnrichmentError.invalid_response()

    def test_service_unavailable_message_names_provider(self) -> None:
        error = EnrichmentError.service_unavailable(PlaceProvider.APPLE)
        assert error.message == "Apple Maps is currently unavailable"
        assert error.detail is PlaceProvider.APPLE

    def test_messages(self) -> None:
        assert EnrichmentError.network_error("boom").message == "Network error: boom"
        assert EnrichmentError.photo_download_failed("ref").message == "Failed to download photo: ref"
        assert str(EnrichmentError.no_results_found()) == "No places found matching your search"

    def test_to_app_error(self) -> None:
        app_error = EnrichmentError.rate_limit_exceeded().to_app_error()
        assert app_error.code == ErrorCode.RATE_LIMIT_EXCEEDED
        assert "rate limit" in app_error.message
        assert app_error.user_message

    def test_is_raisable(self) -> None:
        with pytest.raises(EnrichmentError) as exc_info:
            raise EnrichmentError.invalid_api_key()
        assert exc_info.value.code == ErrorCode.INVALID_API_KEY
