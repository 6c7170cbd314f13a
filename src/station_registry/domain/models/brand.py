"""Brand (marque) domain model."""

from dataclasses import dataclass
from typing import Any

from station_registry.domain.models.document import Document


@dataclass(frozen=True)
class Brand:
    """A fuel brand. Identified by its name; the legal name is mutable."""

    id: str
    name: str
    legal_name: str

    @classmethod
    def from_document(cls, document: Document) -> "Brand":
        return cls(
            id=document.id,
            name=str(document.get("name", "")),
            legal_name=str(document.get("legal_name", "")),
        )

    def to_fields(self) -> dict[str, Any]:
        return {"name": self.name, "legal_name": self.legal_name}


UNKNOWN_BRAND = Brand(id="", name="Unknown", legal_name="")
