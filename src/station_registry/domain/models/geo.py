"""Geographic value types."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Coordinates:
    """A latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float

    def rounded(self, digits: int = 6) -> "Coordinates":
        return Coordinates(round(self.latitude, digits), round(self.longitude, digits))

    def as_param(self) -> str:
        """Format as ``lat,lng`` for query strings and cache keys."""
        return f"{self.latitude},{self.longitude}"
