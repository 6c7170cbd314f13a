"""Ports (interfaces) for the ports-and-adapters architecture."""

from station_registry.domain.ports.distance_provider import DistanceProvider
from station_registry.domain.ports.entity_store import FIND_IN_LIMIT, EntityStore, Transaction

__all__ = [
    "FIND_IN_LIMIT",
    "DistanceProvider",
    "EntityStore",
    "Transaction",
]
