"""Nearby-station search: great-circle pre-filter, then driving distances."""

import asyncio
import logging
import math

from station_registry.application.services.proximity_prefilter import (
    DEFAULT_MAX_RESULTS,
    DEFAULT_RADIUS_KM,
    Candidate,
    filter_candidates,
)
from station_registry.application.services.route_distance_proxy import RouteDistanceProxy
from station_registry.application.services.station_aggregate_reader import (
    StationAggregateReader,
)
from station_registry.domain.errors import RequestTimeoutError, ValidationError
from station_registry.domain.models.geo import Coordinates
from station_registry.domain.models.nearby_station import (
    NO_ROUTE_REACHABLE_STATIONS,
    NO_STATIONS_WITHIN_RADIUS,
    NearbySearchResult,
    NearbyStation,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 15.0


def _validate_origin(latitude: float, longitude: float) -> Coordinates:
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        raise ValidationError("Invalid coordinates", {"origin": "Coordinates must be finite"})
    if abs(latitude) > 90 or abs(longitude) > 180:
        raise ValidationError("Invalid coordinates", {"origin": "Coordinates out of range"})
    return Coordinates(latitude, longitude)


class NearbyStationService:
    """Finds stations reachable by road within a radius of a point."""

    def __init__(
        self,
        reader: StationAggregateReader,
        proxy: RouteDistanceProxy,
        radius_km: float = DEFAULT_RADIUS_KM,
        max_candidates: int = DEFAULT_MAX_RESULTS,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the service.

        Args:
            reader: Source of stations with details.
            proxy: Driving-distance proxy.
            radius_km: Search radius, for both the pre-filter and driving distance.
            max_candidates: Most stations sent to the routing API.
            timeout_seconds: Budget for the driving-distance lookup.
        """
        self._reader = reader
        self._proxy = proxy
        self._radius_km = radius_km
        self._max_candidates = max_candidates
        self._timeout_seconds = timeout_seconds

    async def find_nearby(self, latitude: float, longitude: float) -> NearbySearchResult:
        """Return stations sorted by driving distance from the given point.

        Raises:
            ValidationError: If the coordinates are not finite or out of range.
            RequestTimeoutError: If the distance lookup exceeds the time budget.
        """
        origin = _validate_origin(latitude, longitude)
        stations = await self._reader.list_all()

        matches = filter_candidates(
            origin,
            (Candidate(s, s.station.latitude, s.station.longitude) for s in stations),
            radius_km=self._radius_km,
            max_results=self._max_candidates,
        )
        if not matches:
            logger.info(f"No station within {self._radius_km} km of {origin.as_param()}")
            return NearbySearchResult(empty_reason=NO_STATIONS_WITHIN_RADIUS)

        try:
            results = await asyncio.wait_for(
                self._proxy.batch_distances(origin, [m.coordinates for m in matches]),
                timeout=self._timeout_seconds,
            )
        except TimeoutError as e:
            logger.warning(f"Distance lookup exceeded {self._timeout_seconds}s, cancelled")
            raise RequestTimeoutError("request cancelled") from e

        nearby = []
        for match, result in zip(matches, results, strict=False):
            if not result.is_ok or result.distance_meters is None:
                continue
            distance_km = result.distance_meters / 1000
            if distance_km <= self._radius_km:
                nearby.append(NearbyStation(match.item, distance_km, result.duration_seconds))
        nearby.sort(key=lambda n: n.distance_km)

        if not nearby:
            return NearbySearchResult(empty_reason=NO_ROUTE_REACHABLE_STATIONS)
        return NearbySearchResult(stations=nearby)
