"""Nearby search result models."""

from dataclasses import dataclass, field

from station_registry.domain.models.station_with_details import StationWithDetails

NO_STATIONS_WITHIN_RADIUS = "no stations within radius"
NO_ROUTE_REACHABLE_STATIONS = "no route-reachable stations"


@dataclass(frozen=True)
class NearbyStation:
    """A station reachable by road, with its driving distance."""

    details: StationWithDetails
    distance_km: float
    duration_seconds: int | None = None


@dataclass(frozen=True)
class NearbySearchResult:
    """Stations sorted by driving distance, or the reason the list is empty."""

    stations: list[NearbyStation] = field(default_factory=list)
    empty_reason: str | None = None
