"""Commune domain model."""

from dataclasses import dataclass
from typing import Any

from station_registry.domain.models.document import Document


@dataclass(frozen=True)
class Commune:
    """A commune. Identified by its name within one province."""

    id: str
    name: str
    province_id: str

    @classmethod
    def from_document(cls, document: Document) -> "Commune":
        return cls(
            id=document.id,
            name=str(document.get("name", "")),
            province_id=str(document.get("province_id", "")),
        )

    def to_fields(self) -> dict[str, Any]:
        return {"name": self.name, "province_id": self.province_id}


UNKNOWN_COMMUNE = Commune(id="", name="Unknown", province_id="")
