"""Storage capacity domain model."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from station_registry.domain.models.document import Document


class FuelType(str, Enum):
    """Fuel stored in a tank."""

    DIESEL = "Diesel"
    PREMIUM = "Premium"


@dataclass(frozen=True)
class StorageCapacity:
    """Storage capacity of one fuel type at one station, in liters."""

    id: str
    station_id: str
    fuel_type: FuelType
    liters: float

    @classmethod
    def from_document(cls, document: Document) -> "StorageCapacity":
        return cls(
            id=document.id,
            station_id=str(document.get("station_id", "")),
            fuel_type=FuelType(document.get("fuel_type", FuelType.DIESEL.value)),
            liters=float(document.get("liters") or 0),
        )

    def to_fields(self) -> dict[str, Any]:
        return {
            "station_id": self.station_id,
            "fuel_type": self.fuel_type.value,
            "liters": self.liters,
        }
