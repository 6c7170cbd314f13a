"""Great-circle pre-filter for nearby-station search.

Pure and deterministic. It trims the candidate set before any paid routing
call is made.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Generic, TypeVar

from station_registry.domain.models.geo import Coordinates

T = TypeVar("T")

EARTH_RADIUS_KM = 6371.0
DEFAULT_RADIUS_KM = 20.0
# Matches the routing API's destinations-per-request limit
DEFAULT_MAX_RESULTS = 25
COORDINATE_DIGITS = 6


def haversine_km(a: Coordinates, b: Coordinates) -> float:
    """Great-circle distance between two points, in kilometers."""
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    delta_phi = math.radians(b.latitude - a.latitude)
    delta_lambda = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(delta_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


@dataclass(frozen=True)
class Candidate(Generic[T]):
    """An item with possibly missing coordinates."""

    item: T
    latitude: float | None
    longitude: float | None


@dataclass(frozen=True)
class ProximityMatch(Generic[T]):
    """A candidate within the radius, with its rounded coordinates."""

    item: T
    coordinates: Coordinates
    haversine_km: float


def _usable_coordinates(candidate: Candidate[T]) -> Coordinates | None:
    lat, lng = candidate.latitude, candidate.longitude
    if lat is None or lng is None:
        return None
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return None
    return Coordinates(lat, lng).rounded(COORDINATE_DIGITS)


def filter_candidates(
    origin: Coordinates,
    candidates: Iterable[Candidate[T]],
    radius_km: float = DEFAULT_RADIUS_KM,
    max_results: int = DEFAULT_MAX_RESULTS,
) -> list[ProximityMatch[T]]:
    """Keep candidates within radius_km of origin, in input order, at most max_results.

    Candidates with missing or non-finite coordinates are dropped. Coordinates
    are rounded to 6 decimals before measuring so downstream cache keys are
    stable.
    """
    rounded_origin = origin.rounded(COORDINATE_DIGITS)
    matches: list[ProximityMatch[T]] = []
    for candidate in candidates:
        if len(matches) >= max_results:
            break
        coordinates = _usable_coordinates(candidate)
        if coordinates is None:
            continue
        distance = haversine_km(rounded_origin, coordinates)
        if distance <= radius_km:
            matches.append(ProximityMatch(candidate.item, coordinates, distance))
    return matches
