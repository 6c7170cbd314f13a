"""Driving-distance API adapters."""

from station_registry.adapters.routing_api.google_distance_matrix_client import (
    GoogleDistanceMatrixClient,
)
from station_registry.adapters.routing_api.google_routes_client import GoogleRoutesClient

__all__ = ["GoogleDistanceMatrixClient", "GoogleRoutesClient"]
