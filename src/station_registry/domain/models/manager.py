"""Manager (gérant) domain model."""

from dataclasses import dataclass
from typing import Any

from station_registry.domain.models.document import Document


@dataclass(frozen=True)
class Manager:
    """A station manager. Identified by national ID; other fields are mutable."""

    id: str
    national_id: str
    first_name: str
    last_name: str
    phone: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @classmethod
    def from_document(cls, document: Document) -> "Manager":
        return cls(
            id=document.id,
            national_id=str(document.get("national_id", "")),
            first_name=str(document.get("first_name", "")),
            last_name=str(document.get("last_name", "")),
            phone=str(document.get("phone") or ""),
        )

    def to_fields(self) -> dict[str, Any]:
        return {
            "national_id": self.national_id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "phone": self.phone,
        }


UNKNOWN_MANAGER = Manager(id="", national_id="", first_name="", last_name="Unknown")
