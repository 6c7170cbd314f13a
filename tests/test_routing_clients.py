"""Tests for the Google routing API adapters with a mocked aiohttp session."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from station_registry.adapters.api_rate_limiter import ApiRateLimiter
from station_registry.adapters.routing_api import GoogleDistanceMatrixClient, GoogleRoutesClient
from station_registry.adapters.routing_api.google_routes_client import parse_duration
from station_registry.domain.models.geo import Coordinates
from station_registry.domain.models.route_result import RouteResult, RouteStatus

ORIGIN = Coordinates(33.5731, -7.5898)
DESTINATIONS = [Coordinates(33.58, -7.59), Coordinates(33.6, -7.62)]
ONE_ROUTE = {"routes": [{"distanceMeters": 1, "duration": "1s"}]}


def _response(status: int, payload: Any = None, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status = status
    response.json = AsyncMock(return_value=payload)
    response.text = AsyncMock(return_value=text)
    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=response)
    context.__aexit__ = AsyncMock(return_value=None)
    return context


def _session(method: str, *responses: MagicMock) -> MagicMock:
    session = MagicMock()
    getattr(session, method).side_effect = list(responses)
    return session


class TestParseDuration:
    """Tests for protobuf duration parsing."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("1234s", 1234), ("0s", 0), ("12.6s", 13), ("abc", None), (None, None)],
    )
    def test_parse_duration(self, value: Any, expected: int | None) -> None:
        """Given a duration string, then whole seconds or None are returned."""
        assert parse_duration(value) == expected


class TestGoogleRoutesClient:
    """Tests for GoogleRoutesClient."""

    def test_one_call_per_destination(self) -> None:
        """The Routes API is billed per destination."""
        client = GoogleRoutesClient(MagicMock(), "key")

        assert client.calls_required(7) == 7

    @pytest.mark.asyncio
    async def test_maps_each_response_to_one_result(self) -> None:
        """Given an OK and an empty response, then OK and NO_ROUTE are returned in order."""
        session = _session(
            "post",
            _response(200, {"routes": [{"distanceMeters": 4200, "duration": "540s"}]}),
            _response(200, {}),
        )
        client = GoogleRoutesClient(session, "secret")

        results = await client.fetch_distances(ORIGIN, DESTINATIONS)

        assert results == [RouteResult.ok(4200, 540), RouteResult.failed(RouteStatus.NO_ROUTE)]

    @pytest.mark.asyncio
    async def test_sends_key_and_field_mask_headers(self) -> None:
        """Given a request, then the API key and field mask headers are sent."""
        session = _session("post", _response(200, ONE_ROUTE))
        client = GoogleRoutesClient(session, "secret", language="fr")

        await client.fetch_distances(ORIGIN, DESTINATIONS[:1])

        kwargs = session.post.call_args.kwargs
        assert kwargs["headers"]["X-Goog-Api-Key"] == "secret"
        assert kwargs["headers"]["X-Goog-FieldMask"] == "routes.distanceMeters,routes.duration"
        assert kwargs["json"]["travelMode"] == "DRIVE"
        assert kwargs["json"]["destination"]["location"]["latLng"] == {
            "latitude": 33.58,
            "longitude": -7.59,
        }

    @pytest.mark.asyncio
    async def test_http_429_is_rate_limited_and_other_errors_are_isolated(self) -> None:
        """Given a 429 and a 500, then each destination carries its own status."""
        session = _session("post", _response(429), _response(500, text="boom"))
        client = GoogleRoutesClient(session, "secret")

        results = await client.fetch_distances(ORIGIN, DESTINATIONS)

        assert [r.status for r in results] == [RouteStatus.RATE_LIMITED, RouteStatus.ERROR]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"routes": ["oops"]},
            {"routes": {"distanceMeters": 1}},
            {"routes": [{"distanceMeters": [1], "duration": "1s"}]},
        ],
    )
    async def test_malformed_route_payload_is_isolated_to_its_destination(
        self, payload: dict[str, Any]
    ) -> None:
        """Given a malformed 200 body for one destination, then only that one is ERROR."""
        session = _session("post", _response(200, payload), _response(200, ONE_ROUTE))
        client = GoogleRoutesClient(session, "secret")

        results = await client.fetch_distances(ORIGIN, DESTINATIONS)

        assert [r.status for r in results] == [RouteStatus.ERROR, RouteStatus.OK]
        assert results[1] == RouteResult.ok(1, 1)

    @pytest.mark.asyncio
    async def test_connection_error_becomes_error_status(self) -> None:
        """Given a client error, then the destination is reported as ERROR."""
        session = MagicMock()
        session.post.side_effect = aiohttp.ClientConnectionError("down")
        client = GoogleRoutesClient(session, "secret")

        [result] = await client.fetch_distances(ORIGIN, DESTINATIONS[:1])

        assert result.status == RouteStatus.ERROR

    @pytest.mark.asyncio
    async def test_requests_go_through_rate_limiter(self) -> None:
        """Given a limiter with one slot, then all requests still complete."""
        session = _session(
            "post",
            *(_response(200, ONE_ROUTE) for _ in range(2)),
        )
        limiter = ApiRateLimiter("routes", min_delay_seconds=0.0, max_concurrency=1)
        client = GoogleRoutesClient(session, "secret", rate_limiter=limiter)

        results = await client.fetch_distances(ORIGIN, DESTINATIONS)

        assert all(r.is_ok for r in results)


class TestGoogleDistanceMatrixClient:
    """Tests for GoogleDistanceMatrixClient."""

    def test_one_call_per_request(self) -> None:
        """The Distance Matrix API is one call for every destination."""
        client = GoogleDistanceMatrixClient(MagicMock(), "key")

        assert client.calls_required(25) == 1
        assert client.calls_required(0) == 0

    @pytest.mark.asyncio
    async def test_maps_elements_in_order(self) -> None:
        """Given OK and ZERO_RESULTS elements, then results follow destination order."""
        payload = {
            "status": "OK",
            "rows": [
                {
                    "elements": [
                        {"status": "OK", "distance": {"value": 3100}, "duration": {"value": 420}},
                        {"status": "ZERO_RESULTS"},
                    ]
                }
            ],
        }
        session = _session("get", _response(200, payload))
        client = GoogleDistanceMatrixClient(session, "secret")

        results = await client.fetch_distances(ORIGIN, DESTINATIONS)

        assert results == [RouteResult.ok(3100, 420), RouteResult.failed(RouteStatus.NO_ROUTE)]
        params = session.get.call_args.kwargs["params"]
        assert params["origins"] == "33.5731,-7.5898"
        assert params["destinations"] == "33.58,-7.59|33.6,-7.62"
        assert params["key"] == "secret"

    @pytest.mark.asyncio
    async def test_http_429_marks_every_destination_rate_limited(self) -> None:
        """Given a 429, then every destination is RATE_LIMITED."""
        client = GoogleDistanceMatrixClient(_session("get", _response(429)), "secret")

        results = await client.fetch_distances(ORIGIN, DESTINATIONS)

        assert [r.status for r in results] == [RouteStatus.RATE_LIMITED] * 2

    @pytest.mark.asyncio
    async def test_request_denied_marks_every_destination_error(self) -> None:
        """Given a REQUEST_DENIED body, then every destination is ERROR."""
        payload = {"status": "REQUEST_DENIED", "error_message": "bad key"}
        client = GoogleDistanceMatrixClient(_session("get", _response(200, payload)), "secret")

        results = await client.fetch_distances(ORIGIN, DESTINATIONS)

        assert [r.status for r in results] == [RouteStatus.ERROR] * 2
        assert results[0].error == "bad key"

    @pytest.mark.asyncio
    async def test_missing_elements_are_errors(self) -> None:
        """Given fewer elements than destinations, then the missing tail is ERROR."""
        payload = {
            "status": "OK",
            "rows": [
                {"elements": [{"status": "OK", "distance": {"value": 1}, "duration": {"value": 2}}]}
            ],
        }
        client = GoogleDistanceMatrixClient(_session("get", _response(200, payload)), "secret")

        results = await client.fetch_distances(ORIGIN, DESTINATIONS)

        assert [r.status for r in results] == [RouteStatus.OK, RouteStatus.ERROR]

    @pytest.mark.asyncio
    async def test_malformed_element_is_isolated_to_its_destination(self) -> None:
        """Given one unusable element, then only that destination is ERROR."""
        payload = {
            "status": "OK",
            "rows": [
                {
                    "elements": [
                        {"status": "OK", "distance": {"value": "far"}, "duration": {"value": 2}},
                        {"status": "OK", "distance": {"value": 900}, "duration": {"value": 60}},
                    ]
                }
            ],
        }
        client = GoogleDistanceMatrixClient(_session("get", _response(200, payload)), "secret")

        results = await client.fetch_distances(ORIGIN, DESTINATIONS)

        assert results == [
            RouteResult.failed(RouteStatus.ERROR, "Malformed element"),
            RouteResult.ok(900, 60),
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"status": "OK", "rows": [{"elements": {"a": 1}}]},
            {"status": "OK", "rows": {"elements": []}},
        ],
    )
    async def test_malformed_rows_mark_every_destination_error(
        self, payload: dict[str, Any]
    ) -> None:
        """Given an OK body with unusable rows, then every destination is ERROR."""
        client = GoogleDistanceMatrixClient(_session("get", _response(200, payload)), "secret")

        results = await client.fetch_distances(ORIGIN, DESTINATIONS)

        assert [r.status for r in results] == [RouteStatus.ERROR] * 2
        assert results[0].error == "Malformed response"
