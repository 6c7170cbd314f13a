"""Per-destination result of a driving-distance lookup."""

from dataclasses import dataclass
from enum import Enum


class RouteStatus(str, Enum):
    """Outcome for one destination."""

    OK = "OK"
    NO_ROUTE = "NO_ROUTE"
    RATE_LIMITED = "RATE_LIMITED"
    ERROR = "ERROR"


@dataclass(frozen=True)
class RouteResult:
    """Driving distance and duration to one destination, or why there is none."""

    status: RouteStatus
    distance_meters: int | None = None
    duration_seconds: int | None = None
    error: str | None = None

    @property
    def is_ok(self) -> bool:
        return self.status == RouteStatus.OK

    @classmethod
    def ok(cls, distance_meters: int, duration_seconds: int) -> "RouteResult":
        return cls(RouteStatus.OK, distance_meters, duration_seconds)

    @classmethod
    def failed(cls, status: RouteStatus, error: str | None = None) -> "RouteResult":
        return cls(status, error=error)
