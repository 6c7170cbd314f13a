"""Caching, quota-accounting proxy in front of the driving-distance API."""

import logging
from typing import TYPE_CHECKING

from station_registry.domain.contracts.usage_tracker import ROUTES_SURFACE
from station_registry.domain.errors import ValidationError
from station_registry.domain.models.geo import Coordinates
from station_registry.domain.models.route_result import RouteResult

if TYPE_CHECKING:
    from station_registry.domain.contracts.response_cache import ResponseCacheProtocol
    from station_registry.domain.contracts.usage_tracker import UsageTrackerProtocol
    from station_registry.domain.ports.distance_provider import DistanceProvider

logger = logging.getLogger(__name__)

MAX_DESTINATIONS = 25
COORDINATE_DIGITS = 6


def cache_key(origin: Coordinates, destinations: list[Coordinates]) -> str:
    """Request signature: rounded origin and destinations, pipe joined."""
    parts = [origin.rounded(COORDINATE_DIGITS).as_param()]
    parts.extend(d.rounded(COORDINATE_DIGITS).as_param() for d in destinations)
    return "|".join(parts)


class RouteDistanceProxy:
    """Serves driving distances from cache, or from the provider on a miss.

    Every miss is counted against the daily routes quota. The proxy only
    accounts: it never refuses a call because the quota is used up.
    """

    def __init__(
        self,
        provider: "DistanceProvider",
        cache: "ResponseCacheProtocol",
        usage_tracker: "UsageTrackerProtocol",
        max_destinations: int = MAX_DESTINATIONS,
    ) -> None:
        """Initialize the proxy.

        Args:
            provider: External routing API adapter.
            cache: Response cache shared by all requests of the process.
            usage_tracker: Daily usage counters.
            max_destinations: Largest accepted destination list.
        """
        self._provider = provider
        self._cache = cache
        self._usage_tracker = usage_tracker
        self._max_destinations = max_destinations

    async def batch_distances(
        self, origin: Coordinates, destinations: list[Coordinates]
    ) -> list[RouteResult]:
        """Return one result per destination, in destination order.

        Raises:
            ValidationError: If more than max_destinations are requested.
        """
        if len(destinations) > self._max_destinations:
            raise ValidationError(
                f"Request exceeds the maximum of {self._max_destinations} destinations."
            )
        if not destinations:
            return []

        key = cache_key(origin, destinations)
        cached = await self._cache.get(key)
        if cached is not None:
            logger.info(f"Serving {len(cached)} distance(s) from cache")
            return cached

        rounded_origin = origin.rounded(COORDINATE_DIGITS)
        rounded_destinations = [d.rounded(COORDINATE_DIGITS) for d in destinations]

        calls = self._provider.calls_required(len(destinations))
        await self._usage_tracker.increment(ROUTES_SURFACE, calls)
        logger.info(
            f"Cache miss, fetching {len(destinations)} distance(s) from {self._provider.name} "
            f"({calls} call(s))"
        )
        results = await self._provider.fetch_distances(rounded_origin, rounded_destinations)

        await self._cache.set(key, results)
        return results
