"""Adapters layer - external system integrations."""

from station_registry.adapters.cache import TtlResponseCache
from station_registry.adapters.config import AppConfig
from station_registry.adapters.routing_api import (
    GoogleDistanceMatrixClient,
    GoogleRoutesClient,
)
from station_registry.adapters.store import MemoryEntityStore
from station_registry.adapters.usage import DailyUsageTracker

__all__ = [
    "AppConfig",
    "DailyUsageTracker",
    "GoogleDistanceMatrixClient",
    "GoogleRoutesClient",
    "MemoryEntityStore",
    "TtlResponseCache",
]
