"""Station domain model."""

import math
from dataclasses import dataclass
from typing import Any

from station_registry.domain.models.document import Document

STATUS_ACTIVE = "active"
STATUS_ARCHIVED = "archived"


def _as_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _as_int(value: Any) -> int | None:
    number = _as_float(value)
    if number is None or not math.isfinite(number):
        return None
    return int(number)


@dataclass(frozen=True)
class Station:
    """A fuel station row. References are foreign-key ids into other collections."""

    id: str
    code: int | None
    name: str
    address: str
    latitude: float | None
    longitude: float | None
    status: str
    type: str
    gerance_type: str
    brand_id: str
    commune_id: str
    manager_id: str
    owner_id: str = ""
    dispenser_count: int = 0
    comments: str = ""

    @classmethod
    def from_document(cls, document: Document) -> "Station":
        return cls(
            id=document.id,
            code=_as_int(document.get("code")),
            name=str(document.get("name", "")),
            address=str(document.get("address", "")),
            latitude=_as_float(document.get("latitude")),
            longitude=_as_float(document.get("longitude")),
            status=str(document.get("status", STATUS_ACTIVE)),
            type=str(document.get("type", "")),
            gerance_type=str(document.get("gerance_type", "")),
            brand_id=str(document.get("brand_id", "")),
            commune_id=str(document.get("commune_id", "")),
            manager_id=str(document.get("manager_id", "")),
            owner_id=str(document.get("owner_id") or ""),
            dispenser_count=max(_as_int(document.get("dispenser_count")) or 0, 0),
            comments=str(document.get("comments") or ""),
        )

    def to_fields(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "name": self.name,
            "address": self.address,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "status": self.status,
            "type": self.type,
            "gerance_type": self.gerance_type,
            "brand_id": self.brand_id,
            "commune_id": self.commune_id,
            "manager_id": self.manager_id,
            "owner_id": self.owner_id,
            "dispenser_count": self.dispenser_count,
            "comments": self.comments,
        }
