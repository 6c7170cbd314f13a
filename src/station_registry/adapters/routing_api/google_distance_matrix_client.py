"""Google Distance Matrix API adapter: one call for all destinations."""

import logging
from typing import TYPE_CHECKING, Any

import aiohttp

from station_registry.adapters.api_rate_limiter import ApiRateLimiter
from station_registry.adapters.api_request_logger import log_api_request
from station_registry.adapters.routing_api.constants import (
    DISTANCE_MATRIX_URL,
    HTTP_TOO_MANY_REQUESTS,
    NO_ROUTE_ELEMENT_STATUSES,
    RATE_LIMITED_STATUSES,
)
from station_registry.domain.errors import ExternalApiError, RateLimitedError
from station_registry.domain.models.geo import Coordinates
from station_registry.domain.models.route_result import RouteResult, RouteStatus

if TYPE_CHECKING:
    from aiohttp import ClientResponse, ClientSession

logger = logging.getLogger(__name__)


def _all(count: int, status: RouteStatus, error: str | None = None) -> list[RouteResult]:
    return [RouteResult.failed(status, error) for _ in range(count)]


def parse_element(element: Any) -> RouteResult:
    """Map one Distance Matrix element to a RouteResult."""
    if not isinstance(element, dict):
        return RouteResult.failed(RouteStatus.ERROR, "Malformed element")
    status = element.get("status")
    if status == "OK":
        try:
            return RouteResult.ok(
                int(element["distance"]["value"]), int(element["duration"]["value"])
            )
        except (KeyError, TypeError, ValueError):
            return RouteResult.failed(RouteStatus.ERROR, "Malformed element")
    if status in NO_ROUTE_ELEMENT_STATUSES:
        return RouteResult.failed(RouteStatus.NO_ROUTE)
    if status in RATE_LIMITED_STATUSES:
        return RouteResult.failed(RouteStatus.RATE_LIMITED)
    return RouteResult.failed(RouteStatus.ERROR, str(status))


class GoogleDistanceMatrixClient:
    """DistanceProvider backed by the Distance Matrix API."""

    name = "distance_matrix"

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
        return 1 if destination_count > 0 else 0

    async def _handle_response(self, response: "ClientResponse", count: int) -> list[RouteResult]:
        if response.status == HTTP_TOO_MANY_REQUESTS:
            raise RateLimitedError()
        if response.status != 200:
            text = await response.text()
            raise ExternalApiError(f"HTTP {response.status}: {text[:200]}", response.status)

        data = await response.json()
        if not isinstance(data, dict):
            raise ExternalApiError("Malformed response")

        status = data.get("status")
        if status in RATE_LIMITED_STATUSES:
            raise RateLimitedError(data.get("error_message") or str(status))
        if status != "OK":
            raise ExternalApiError(data.get("error_message") or str(status))

        rows = data.get("rows") or []
        if not isinstance(rows, list):
            raise ExternalApiError("Malformed response")
        first_row = rows[0] if rows and isinstance(rows[0], dict) else {}
        elements = first_row.get("elements") or []
        if not isinstance(elements, list):
            raise ExternalApiError("Malformed response")
        results = [parse_element(e) for e in elements[:count]]
        # A short element list leaves the tail unanswered
        results.extend(_all(count - len(results), RouteStatus.ERROR, "Missing element"))
        return results

    async def fetch_distances(
        self, origin: Coordinates, destinations: list[Coordinates]
    ) -> list[RouteResult]:
        if not destinations:
            return []

        params = {
            "origins": origin.as_param(),
            "destinations": "|".join(d.as_param() for d in destinations),
            "mode": "driving",
            "units": "metric",
            "language": self._language,
            "key": self._api_key,
        }
        count = len(destinations)
        async with self._rate_limiter:
            log_api_request("GET", DISTANCE_MATRIX_URL, params=params)
            try:
                async with self._session.get(DISTANCE_MATRIX_URL, params=params) as response:
                    return await self._handle_response(response, count)
            except RateLimitedError as e:
                logger.warning(f"Distance Matrix API rate limit exceeded: {e}")
                return _all(count, RouteStatus.RATE_LIMITED, str(e))
            except ExternalApiError as e:
                logger.error(f"Distance Matrix API error: {e}")
                return _all(count, RouteStatus.ERROR, str(e))
            except (aiohttp.ClientError, TimeoutError, ValueError) as e:
                logger.warning(f"Error fetching distance matrix: {e}")
                return _all(count, RouteStatus.ERROR, str(e))
