"""Google Routes API adapter: one computeRoutes call per destination."""

import asyncio
import logging
import re
from typing import TYPE_CHECKING, Any

import aiohttp

from station_registry.adapters.api_rate_limiter import ApiRateLimiter
from station_registry.adapters.api_request_logger import log_api_request
from station_registry.adapters.routing_api.constants import (
    HTTP_TOO_MANY_REQUESTS,
    ROUTES_FIELD_MASK,
    ROUTES_URL,
)
from station_registry.domain.errors import ExternalApiError, RateLimitedError
from station_registry.domain.models.geo import Coordinates
from station_registry.domain.models.route_result import RouteResult, RouteStatus

if TYPE_CHECKING:
    from aiohttp import ClientResponse, ClientSession

logger = logging.getLogger(__name__)

_DURATION_PATTERN = re.compile(r"^(\d+(?:\.\d+)?)s$")


def parse_duration(value: Any) -> int | None:
    """Parse a protobuf duration string such as ``"1234s"`` into whole seconds."""
    match = _DURATION_PATTERN.match(str(value or "").strip())
    if not match:
        return None
    return round(float(match.group(1)))


def _lat_lng(point: Coordinates) -> dict[str, Any]:
    return {"location": {"latLng": {"latitude": point.latitude, "longitude": point.longitude}}}


class GoogleRoutesClient:
    """DistanceProvider backed by the Routes API."""

    name = "routes"

    def __init__(
        self,
        session: "ClientSession",
        api_key: str,
        rate_limiter: ApiRateLimiter | None = None,
        language: str = "fr",
    ) -> None:
        """Initialize the client.

        Args:
            session: Shared aiohttp session.
            api_key: Google Maps API key.
            rate_limiter: Outbound pacing, shared by all requests.
            language: Language code sent with each request.
        """
        self._session = session
        self._api_key = api_key
        self._rate_limiter = rate_limiter or ApiRateLimiter(self.name)
        self._language = language

    def calls_required(self, destination_count: int) -> int:
        return destination_count

    def _request_body(self, origin: Coordinates, destination: Coordinates) -> dict[str, Any]:
        return {
            "origin": _lat_lng(origin),
            "destination": _lat_lng(destination),
            "travelMode": "DRIVE",
            "routingPreference": "TRAFFIC_AWARE",
            "computeAlternativeRoutes": False,
            "routeModifiers": {"avoidTolls": False, "avoidHighways": False, "avoidFerries": False},
            "languageCode": self._language,
            "units": "METRIC",
        }

    async def fetch_distances(
        self, origin: Coordinates, destinations: list[Coordinates]
    ) -> list[RouteResult]:
        return list(
            await asyncio.gather(*(self._fetch_one(origin, d) for d in destinations))
        )

    async def _handle_response(self, response: "ClientResponse") -> RouteResult:
        if response.status == HTTP_TOO_MANY_REQUESTS:
            raise RateLimitedError()
        if response.status != 200:
            text = await response.text()
            raise ExternalApiError(f"HTTP {response.status}: {text[:200]}", response.status)

        data = await response.json()
        routes = data.get("routes") if isinstance(data, dict) else None
        if not routes:
            return RouteResult.failed(RouteStatus.NO_ROUTE)

        if not isinstance(routes, list) or not isinstance(routes[0], dict):
            raise ExternalApiError("Malformed response")

        route = routes[0]
        duration = parse_duration(route.get("duration", "0s"))
        if duration is None:
            raise ExternalApiError(f"Malformed duration: {route.get('duration')!r}")
        try:
            distance_meters = int(route.get("distanceMeters") or 0)
        except (TypeError, ValueError) as e:
            raise ExternalApiError(
                f"Malformed distance: {route.get('distanceMeters')!r}"
            ) from e
        return RouteResult.ok(distance_meters, duration)

    async def _fetch_one(self, origin: Coordinates, destination: Coordinates) -> RouteResult:
        body = self._request_body(origin, destination)
        headers = {
            "Content-Type": "application/json",
            "X-Goog-Api-Key": self._api_key,
            "X-Goog-FieldMask": ROUTES_FIELD_MASK,
        }
        async with self._rate_limiter:
            log_api_request("POST", ROUTES_URL, headers=headers, payload=body)
            try:
                async with self._session.post(ROUTES_URL, json=body, headers=headers) as response:
                    return await self._handle_response(response)
            except RateLimitedError as e:
                logger.warning(f"Routes API rate limit exceeded for {destination.as_param()}")
                return RouteResult.failed(RouteStatus.RATE_LIMITED, str(e))
            except ExternalApiError as e:
                logger.error(f"Routes API error for {destination.as_param()}: {e}")
                return RouteResult.failed(RouteStatus.ERROR, str(e))
            except (aiohttp.ClientError, TimeoutError, ValueError) as e:
                logger.warning(f"Error fetching route to {destination.as_param()}: {e}")
                return RouteResult.failed(RouteStatus.ERROR, str(e))
