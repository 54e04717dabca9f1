"""Tests for the HTTP API routes."""

import pytest
from fastapi.testclient import TestClient

from conftest import FakeProvider, make_details, make_result

from place_enrichment.api import routes
from place_enrichment.main import app
from place_enrichment.models import EnrichmentError, PlaceProvider
from place_enrichment.services import SearchOrchestrator


@pytest.fixture
def providers():
    google = FakeProvider(
        PlaceProvider.GOOGLE,
        results=[
            make_result("g1", name="Plain"),
            make_result("g2", name="Rated", address="Herrengasse 14", rating=4.5),
        ],
        details=make_details("g2"),
    )
    apple = FakeProvider(PlaceProvider.APPLE, results=[make_result("a1", provider=PlaceProvider.APPLE)])
    return google, apple


@pytest.fixture
def client(monkeypatch, providers):
    orchestrator = SearchOrchestrator(*providers)
    monkeypatch.setattr(routes, "_orchestrator", orchestrator)
    return TestClient(app)


class TestSearchRoute:
    def test_search_returns_ranked_results(self, client) -> None:
        response = client.post("/api/search", json={"name": "Cafe", "city": "Vienna"})
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert [r["id"] for r in body["results"]] == ["g2", "g1"]
        assert body["match_scores"] == pytest.approx([0.5, 0.0])
        assert body["selected_provider"] == "Google Places"
        assert body["error"] is None

    def test_search_with_coordinate(self, client, providers) -> None:
        response = client.post(
            "/api/search",
            json={"name": "Cafe", "coordinate": {"lat": 48.2, "lng": 16.37}, "radius_meters": 500},
        )
        assert response.status_code == 200
        query = providers[0].search_calls[0]
        assert query.coordinate.lat == 48.2
        assert query.radius_meters == 500

    def test_search_fallback_reports_primary_error(self, client, providers) -> None:
        providers[0].error = EnrichmentError.network_error("timeout")
        body = client.post("/api/search", json={"name": "Cafe"}).json()
        assert body["success"] is True
        assert body["selected_provider"] == "Apple Maps"
        assert [r["id"] for r in body["results"]] == ["a1"]
        assert body["error"]["code"] == "NETWORK_ERROR"

    def test_search_no_results_is_soft_error(self, client, providers) -> None:
        providers[0].results = []
        body = client.post("/api/search", json={"name": "Cafe"}).json()
        assert body["success"] is True
        assert body["results"] == []
        assert body["error"]["code"] == "NO_RESULTS_FOUND"

    def test_search_validation_error(self, client) -> None:
        response = client.post("/api/search", json={"city": "Vienna"})
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"


class TestSelectRoute:
    def test_select_loads_details(self, client) -> None:
        client.post("/api/search", json={"name": "Cafe"})
        body = client.post("/api/select", json={"result_id": "g2"}).json()
        assert body["success"] is True
        assert body["selected_result"]["id"] == "g2"
        assert body["enriched_details"]["place_id"] == "g2"

    def test_select_unknown_id(self, client) -> None:
        body = client.post("/api/select", json={"result_id": "missing"}).json()
        assert body["success"] is False
        assert body["error"]["code"] == "INVALID_QUERY"


class TestProviderRoutes:
    def test_change_provider_clears_results(self, client) -> None:
        client.post("/api/search", json={"name": "Cafe"})
        body = client.put("/api/provider", json={"provider": "apple"}).json()
        assert body["selected_provider"] == "Apple Maps"
        assert body["results"] == []

    def test_reset_and_state(self, client) -> None:
        client.post("/api/search", json={"name": "Cafe"})
        client.post("/api/reset")
        body = client.get("/api/state").json()
        assert body["results"] == []
        assert body["selected_result"] is None

    def test_photo_url(self, client) -> None:
        body = client.get("/api/photo", params={"reference": "ref", "max_width": 300}).json()
        assert body == {"success": True, "url": "https://photos.example/ref?w=300", "error": None}

    def test_photo_url_unsupported_provider(self, client) -> None:
        client.put("/api/provider", json={"provider": "apple"})
        body = client.get("/api/photo", params={"reference": "ref", "max_width": 300}).json()
        assert body["success"] is False
        assert body["error"]["code"] == "PHOTO_DOWNLOAD_FAILED"

    def test_health(self, client) -> None:
        assert client.get("/health").json() == {"status": "healthy"}
