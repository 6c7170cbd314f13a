"""Fuel quality analysis domain model."""

from dataclasses import dataclass
import datetime
from typing import Any

from station_registry.domain.models.authorization import parse_iso_date
from station_registry.domain.models.document import Document


@dataclass(frozen=True)
class Analysis:
    """A fuel quality analysis performed at one station."""

    id: str
    station_id: str
    product: str
    code: str
    result: str
    date: datetime.date | None = None

    @classmethod
    def from_document(cls, document: Document) -> "Analysis":
        return cls(
            id=document.id,
            station_id=str(document.get("station_id", "")),
            product=str(document.get("product") or "Diesel"),
            code=str(document.get("code") or ""),
            result=str(document.get("result") or ""),
            date=parse_iso_date(document.get("date")),
        )

    def to_fields(self) -> dict[str, Any]:
        return {
            "station_id": self.station_id,
            "product": self.product,
            "code": self.code,
            "result": self.result,
            "date": self.date.isoformat() if self.date else None,
        }
