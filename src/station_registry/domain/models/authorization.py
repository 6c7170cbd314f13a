"""Authorization domain model."""

from dataclasses import dataclass
import datetime
from enum import Enum
from typing import Any

from station_registry.domain.models.document import Document


class AuthorizationType(str, Enum):
    """Administrative act an authorization records."""

    CREATION = "creation"
    TRANSFORMATION = "transformation"
    TRANSFER = "transfer"
    BRAND_CHANGE = "brand_change"


def parse_iso_date(value: Any) -> datetime.date | None:
    """Parse a stored ``YYYY-MM-DD`` string (or date) into a date."""
    if isinstance(value, datetime.date):
        return value
    if not value:
        return None
    try:
        return datetime.date.fromisoformat(str(value))
    except ValueError:
        return None


@dataclass(frozen=True)
class Authorization:
    """An authorization belonging to exactly one station."""

    id: str
    station_id: str
    type: AuthorizationType
    number: str
    date: datetime.date | None = None

    @classmethod
    def from_document(cls, document: Document) -> "Authorization":
        return cls(
            id=document.id,
            station_id=str(document.get("station_id", "")),
            type=AuthorizationType(document.get("type") or AuthorizationType.CREATION.value),
            number=str(document.get("number", "")),
            date=parse_iso_date(document.get("date")),
        )

    def to_fields(self) -> dict[str, Any]:
        return {
            "station_id": self.station_id,
            "type": self.type.value,
            "number": self.number,
            "date": self.date.isoformat() if self.date else None,
        }
