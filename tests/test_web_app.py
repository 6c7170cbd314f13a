"""HTTP surface tests using the Starlette test client over in-memory services."""

import asyncio
from typing import Any
from unittest.mock import AsyncMock

import pytest
from starlette.testclient import TestClient

from station_registry.adapters.cache import TtlResponseCache
from station_registry.adapters.config import AppConfig
from station_registry.adapters.store import MemoryEntityStore
from station_registry.adapters.web import create_app
from station_registry.domain.errors import StorageError
from station_registry.domain.models.geo import Coordinates
from station_registry.domain.models.route_result import RouteResult, RouteStatus
from station_registry.main import build_services

ORIGIN = "33.58,-7.59"

STATION_PAYLOAD: dict[str, Any] = {
    "name": "Station Atlas",
    "address": "12 Bd Zerktouni",
    "latitude": 33.5731,
    "longitude": -7.5898,
    "type": "Urban",
    "brand": "Afriquia",
    "brand_legal_name": "Afriquia SMDC",
    "province": "Casablanca",
    "commune": "Maarif",
    "manager_first_name": "Youssef",
    "manager_last_name": "Alaoui",
    "manager_national_id": "BE123456",
    "manager_phone": "+212600000001",
    "owner_first_name": "Amina",
    "owner_last_name": "Tazi",
    "authorizations": [{"type": "creation", "number": "A-17", "date": "2019-03-04"}],
    "diesel_capacity": "30000",
}


class FakeDistanceProvider:
    """Returns 1.5 km per destination index, or a scripted result list."""

    name = "fake"

    def __init__(self) -> None:
        self.fetch_distances = AsyncMock(side_effect=self._distances)

    def calls_required(self, destination_count: int) -> int:
        return destination_count

    async def _distances(
        self, _origin: Coordinates, destinations: list[Coordinates]
    ) -> list[RouteResult]:
        return [RouteResult.ok(1500 * (i + 1), 120 * (i + 1)) for i in range(len(destinations))]


@pytest.fixture
def provider() -> FakeDistanceProvider:
    return FakeDistanceProvider()


def _client(
    store: MemoryEntityStore, provider: FakeDistanceProvider, **overrides: Any
) -> TestClient:
    config = AppConfig(_env_file=None, google_maps_api_key="test-key", **overrides)
    services = build_services(config, store, provider, TtlResponseCache())
    return TestClient(create_app(services), raise_server_exceptions=False)


@pytest.fixture
def client(store: MemoryEntityStore, provider: FakeDistanceProvider) -> TestClient:
    return _client(store, provider)


def _create_station(client: TestClient, **overrides: Any) -> str:
    response = client.post("/stations", json={**STATION_PAYLOAD, **overrides})
    assert response.status_code == 201, response.text
    return response.json()["id"]


class TestHealthAndUsage:
    """Health check and quota endpoints."""

    def test_healthz(self, client: TestClient) -> None:
        response = client.get("/healthz")

        assert response.status_code == 200
        assert response.text == "Ok"

    def test_usage_starts_empty(self, client: TestClient) -> None:
        body = client.get("/usage").json()

        assert body["maps"]["used"] == 0
        assert body["maps"]["limit"] == 100
        assert body["routes"]["limit"] == 566
        assert body["routes"]["warning_level"] == "none"

    def test_map_load_is_counted(self, client: TestClient) -> None:
        client.post("/usage/maps")
        body = client.post("/usage/maps").json()

        assert body["used"] == 2
        assert body["remaining"] == 98


class TestDistanceProxy:
    """GET /distance and POST /routes."""

    def test_distance_matrix_shape(
        self, client: TestClient, provider: FakeDistanceProvider
    ) -> None:
        response = client.get(
            "/distance", params={"origins": ORIGIN, "destinations": "33.6,-7.6|33.7,-7.5"}
        )

        assert response.status_code == 200
        assert response.json() == {
            "status": "OK",
            "rows": [
                {
                    "elements": [
                        {"status": "OK", "distance": {"value": 1500}, "duration": {"value": 120}},
                        {"status": "OK", "distance": {"value": 3000}, "duration": {"value": 240}},
                    ]
                }
            ],
        }
        provider.fetch_distances.assert_awaited_once()

    def test_repeated_request_is_served_from_cache_and_counted_once(
        self, client: TestClient, provider: FakeDistanceProvider
    ) -> None:
        params = {"origins": ORIGIN, "destinations": "33.6,-7.6|33.7,-7.5"}

        client.get("/distance", params=params)
        client.get("/distance", params=params)

        assert provider.fetch_distances.await_count == 1
        assert client.get("/usage").json()["routes"]["used"] == 2

    def test_routes_shape_with_failed_destination(
        self, client: TestClient, provider: FakeDistanceProvider
    ) -> None:
        provider.fetch_distances.side_effect = None
        provider.fetch_distances.return_value = [
            RouteResult.ok(2500, 300),
            RouteResult.failed(RouteStatus.NO_ROUTE),
        ]

        response = client.post(
            "/routes",
            json={
                "origin": {"lat": 33.58, "lng": -7.59},
                "destinations": [{"lat": 33.6, "lng": -7.6}, {"lat": 35.0, "lng": -5.0}],
            },
        )

        assert response.status_code == 200
        assert response.json() == {
            "status": "OK",
            "results": [
                {"status": "OK", "distance": 2500, "duration": "300s"},
                {"status": "ZERO_RESULTS"},
            ],
        }

    def test_more_than_25_destinations_is_rejected(
        self, client: TestClient, provider: FakeDistanceProvider
    ) -> None:
        destinations = "|".join(f"33.{i:02d},-7.5" for i in range(26))

        response = client.get("/distance", params={"origins": ORIGIN, "destinations": destinations})

        assert response.status_code == 400
        provider.fetch_distances.assert_not_awaited()

    @pytest.mark.parametrize(
        "params",
        [
            {"destinations": "33.6,-7.6"},
            {"origins": ORIGIN},
            {"origins": "north", "destinations": "1,2"},
        ],
    )
    def test_missing_or_malformed_params_are_rejected(
        self, client: TestClient, params: dict[str, str]
    ) -> None:
        response = client.get("/distance", params=params)

        assert response.status_code == 400
        assert "error" in response.json()

    def test_routes_rejects_non_json_body(self, client: TestClient) -> None:
        response = client.post("/routes", content=b"not json")

        assert response.status_code == 400


class TestStations:
    """Station CRUD and archive."""

    def test_create_then_get_resolves_references(self, client: TestClient) -> None:
        station_id = _create_station(client)

        station = client.get(f"/stations/{station_id}").json()

        assert station["name"] == "Station Atlas"
        assert station["code"] == 1001
        assert station["brand"]["name"] == "Afriquia"
        assert station["province"]["name"] == "Casablanca"
        assert station["manager"]["full_name"] == "Youssef Alaoui"
        assert station["owner"]["display_name"] == "Amina Tazi"
        assert station["creation_authorization"]["number"] == "A-17"
        assert [c["liters"] for c in station["capacities"]] == [30000.0]

    def test_second_station_gets_next_code(self, client: TestClient) -> None:
        _create_station(client)
        second = _create_station(client, name="Station Rif")

        assert client.get(f"/stations/{second}").json()["code"] == 1002
        assert len(client.get("/stations").json()) == 2

    def test_invalid_submission_returns_field_errors(
        self, client: TestClient, store: MemoryEntityStore
    ) -> None:
        response = client.post("/stations", json={**STATION_PAYLOAD, "name": "", "latitude": 91})

        assert response.status_code == 400
        field_errors = response.json()["field_errors"]
        assert {"name", "latitude", "submit"} <= set(field_errors)
        assert store.snapshot() == {}

    def test_unknown_station_returns_404(self, client: TestClient) -> None:
        assert client.get("/stations/missing").status_code == 404
        assert client.put("/stations/missing", json=STATION_PAYLOAD).status_code == 404
        assert client.post("/stations/missing/archive").status_code == 404

    def test_update_changes_fields(self, client: TestClient) -> None:
        station_id = _create_station(client)

        response = client.put(
            f"/stations/{station_id}", json={**STATION_PAYLOAD, "address": "5 Rue Allal"}
        )

        assert response.status_code == 200
        assert client.get(f"/stations/{station_id}").json()["address"] == "5 Rue Allal"

    def test_archive_marks_station(self, client: TestClient) -> None:
        station_id = _create_station(client)

        client.post(f"/stations/{station_id}/archive")

        assert client.get(f"/stations/{station_id}").json()["status"] == "archived"

    def test_delete_is_idempotent(self, client: TestClient) -> None:
        station_id = _create_station(client)

        assert client.delete(f"/stations/{station_id}").status_code == 204
        assert client.delete(f"/stations/{station_id}").status_code == 204
        assert client.get(f"/stations/{station_id}").status_code == 404

    def test_storage_failure_returns_generic_500(
        self, client: TestClient, store: MemoryEntityStore, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(store, "commit", AsyncMock(side_effect=StorageError("disk gone")))

        response = client.post("/stations", json=STATION_PAYLOAD)

        assert response.status_code == 500
        assert "disk gone" not in response.text


class TestNearbyStations:
    """GET /stations/nearby."""

    def test_nearby_lists_reachable_stations(self, client: TestClient) -> None:
        station_id = _create_station(client)

        body = client.get("/stations/nearby", params={"lat": 33.58, "lng": -7.59}).json()

        assert body["empty_reason"] is None
        assert [s["id"] for s in body["stations"]] == [station_id]
        assert body["stations"][0]["distance_km"] == 1.5

    def test_nearby_reports_empty_reason(self, client: TestClient) -> None:
        _create_station(client)

        body = client.get("/stations/nearby", params={"lat": 35.76, "lng": -5.83}).json()

        assert body == {"stations": [], "empty_reason": "no stations within radius"}

    def test_nearby_rejects_out_of_range_latitude(self, client: TestClient) -> None:
        response = client.get("/stations/nearby", params={"lat": 95, "lng": -7.59})

        assert response.status_code == 400

    def test_slow_routing_api_returns_504(
        self, store: MemoryEntityStore, provider: FakeDistanceProvider
    ) -> None:
        async def stall(*_args: Any) -> list[RouteResult]:
            await asyncio.sleep(5)
            return []

        provider.fetch_distances.side_effect = stall
        client = _client(store, provider, routing_timeout_seconds=0.05)
        _create_station(client)

        response = client.get("/stations/nearby", params={"lat": 33.58, "lng": -7.59})

        assert response.status_code == 504
        assert response.json() == {"error": "request cancelled"}


class TestAnalyses:
    """Analysis endpoints."""

    def test_analysis_lifecycle(self, client: TestClient) -> None:
        station_id = _create_station(client)

        created = client.post(
            f"/stations/{station_id}/analyses", json={"code": "AN-1", "date": "2025-02-01"}
        )
        analysis_id = created.json()["id"]
        client.put(f"/analyses/{analysis_id}", json={"result": "Conforme"})

        [analysis] = client.get(f"/stations/{station_id}/analyses").json()
        assert created.status_code == 201
        assert analysis["product"] == "Diesel"
        assert analysis["result"] == "Conforme"

        assert client.delete(f"/analyses/{analysis_id}").status_code == 204
        assert client.get(f"/stations/{station_id}/analyses").json() == []

    def test_analysis_for_unknown_station_returns_404(self, client: TestClient) -> None:
        response = client.post("/stations/missing/analyses", json={"code": "AN-1"})

        assert response.status_code == 404

    def test_numeric_analysis_fields_are_accepted_and_objects_rejected(
        self, client: TestClient
    ) -> None:
        station_id = _create_station(client)

        created = client.post(f"/stations/{station_id}/analyses", json={"code": 123, "result": 0.5})
        rejected = client.put(f"/analyses/{created.json()['id']}", json={"result": {"ppm": 9}})

        assert created.status_code == 201
        assert rejected.status_code == 400
        assert rejected.json()["field_errors"] == {"result": "Expected text"}
        [analysis] = client.get(f"/stations/{station_id}/analyses").json()
        assert (analysis["code"], analysis["result"]) == ("123", "0.5")
