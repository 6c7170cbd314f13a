"""Domain models for the station registry."""

from station_registry.domain.models.analysis import Analysis
from station_registry.domain.models.authorization import Authorization, AuthorizationType
from station_registry.domain.models.brand import UNKNOWN_BRAND, Brand
from station_registry.domain.models.commune import UNKNOWN_COMMUNE, Commune
from station_registry.domain.models.document import Document, WriteKind, WriteOperation
from station_registry.domain.models.geo import Coordinates
from station_registry.domain.models.manager import UNKNOWN_MANAGER, Manager
from station_registry.domain.models.nearby_station import NearbySearchResult, NearbyStation
from station_registry.domain.models.owner import (
    CorporateOwner,
    IndividualOwner,
    Owner,
    OwnerKind,
)
from station_registry.domain.models.province import UNKNOWN_PROVINCE, Province
from station_registry.domain.models.quota_view import QuotaView
from station_registry.domain.models.route_result import RouteResult, RouteStatus
from station_registry.domain.models.station import Station
from station_registry.domain.models.station_submission import (
    AuthorizationEntry,
    StationSubmission,
)
from station_registry.domain.models.station_with_details import StationWithDetails
from station_registry.domain.models.storage_capacity import FuelType, StorageCapacity
from station_registry.domain.models.validation_result import ValidationResult
from station_registry.domain.models.write_batch import WriteBatch

__all__ = [
    "UNKNOWN_BRAND",
    "UNKNOWN_COMMUNE",
    "UNKNOWN_MANAGER",
    "UNKNOWN_PROVINCE",
    "Analysis",
    "Authorization",
    "AuthorizationEntry",
    "AuthorizationType",
    "Brand",
    "Commune",
    "Coordinates",
    "CorporateOwner",
    "Document",
    "FuelType",
    "IndividualOwner",
    "Manager",
    "NearbySearchResult",
    "NearbyStation",
    "Owner",
    "OwnerKind",
    "Province",
    "QuotaView",
    "RouteResult",
    "RouteStatus",
    "Station",
    "StationSubmission",
    "StationWithDetails",
    "StorageCapacity",
    "ValidationResult",
    "WriteBatch",
    "WriteKind",
    "WriteOperation",
]
