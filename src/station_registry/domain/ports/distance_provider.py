"""Driving-distance provider port."""

from typing import Protocol

from station_registry.domain.models.geo import Coordinates
from station_registry.domain.models.route_result import RouteResult


class DistanceProvider(Protocol):
    """Port for an external routing API computing driving distances."""

    name: str

    def calls_required(self, destination_count: int) -> int:
        """Number of billable API calls needed for this many destinations."""
        ...

    async def fetch_distances(
        self, origin: Coordinates, destinations: list[Coordinates]
    ) -> list[RouteResult]:
        """Return one result per destination, in order.

        Per-destination failures are reported in RouteResult.status, never raised.
        """
        ...
