"""Domain layer - core models, errors and ports."""

from station_registry.domain.errors import (
    ExternalApiError,
    NotFoundError,
    RateLimitedError,
    RequestTimeoutError,
    StationRegistryError,
    StorageError,
    ValidationError,
)
from station_registry.domain.models import Station, StationSubmission, StationWithDetails
from station_registry.domain.ports import DistanceProvider, EntityStore

__all__ = [
    "DistanceProvider",
    "EntityStore",
    "ExternalApiError",
    "NotFoundError",
    "RateLimitedError",
    "RequestTimeoutError",
    "Station",
    "StationRegistryError",
    "StationSubmission",
    "StationWithDetails",
    "StorageError",
    "ValidationError",
]
