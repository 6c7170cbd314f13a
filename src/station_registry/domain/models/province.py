"""Province domain model."""

from dataclasses import dataclass
from typing import Any

from station_registry.domain.models.document import Document


@dataclass(frozen=True)
class Province:
    """A province. Identified by its name."""

    id: str
    name: str

    @classmethod
    def from_document(cls, document: Document) -> "Province":
        return cls(id=document.id, name=str(document.get("name", "")))

    def to_fields(self) -> dict[str, Any]:
        return {"name": self.name}


UNKNOWN_PROVINCE = Province(id="", name="Unknown")
