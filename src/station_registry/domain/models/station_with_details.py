"""Denormalized station view joined from every referenced collection."""

from dataclasses import dataclass, field

from station_registry.domain.models.analysis import Analysis
from station_registry.domain.models.authorization import Authorization, AuthorizationType
from station_registry.domain.models.brand import Brand
from station_registry.domain.models.commune import Commune
from station_registry.domain.models.manager import Manager
from station_registry.domain.models.owner import Owner
from station_registry.domain.models.province import Province
from station_registry.domain.models.station import Station
from station_registry.domain.models.storage_capacity import StorageCapacity


@dataclass(frozen=True)
class StationWithDetails:
    """A station with all of its references resolved."""

    station: Station
    brand: Brand
    commune: Commune
    province: Province
    manager: Manager
    owner: Owner | None = None
    authorizations: list[Authorization] = field(default_factory=list)
    capacities: list[StorageCapacity] = field(default_factory=list)
    analyses: list[Analysis] = field(default_factory=list)

    @property
    def creation_authorization(self) -> Authorization | None:
        """The first authorization of type creation, if any."""
        return next(
            (a for a in self.authorizations if a.type == AuthorizationType.CREATION), None
        )
