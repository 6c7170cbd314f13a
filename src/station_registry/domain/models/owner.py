"""Owner (propriétaire) domain model.

An owner row only carries its kind; the name lives in exactly one detail
row, in the detail collection matching that kind.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from station_registry.domain.models.document import Document


class OwnerKind(str, Enum):
    """Kind of owner. Selects the detail collection."""

    INDIVIDUAL = "individual"
    CORPORATE = "corporate"


@dataclass(frozen=True)
class IndividualOwner:
    """An owner who is a natural person."""

    owner_id: str
    first_name: str
    last_name: str

    kind = OwnerKind.INDIVIDUAL

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @classmethod
    def from_document(cls, document: Document) -> "IndividualOwner":
        return cls(
            owner_id=str(document.get("owner_id", "")),
            first_name=str(document.get("first_name", "")),
            last_name=str(document.get("last_name", "")),
        )

    def to_fields(self) -> dict[str, Any]:
        return {
            "owner_id": self.owner_id,
            "first_name": self.first_name,
            "last_name": self.last_name,
        }


@dataclass(frozen=True)
class CorporateOwner:
    """An owner which is a company."""

    owner_id: str
    company_name: str

    kind = OwnerKind.CORPORATE

    @property
    def display_name(self) -> str:
        return self.company_name

    @classmethod
    def from_document(cls, document: Document) -> "CorporateOwner":
        return cls(
            owner_id=str(document.get("owner_id", "")),
            company_name=str(document.get("company_name", "")),
        )

    def to_fields(self) -> dict[str, Any]:
        return {"owner_id": self.owner_id, "company_name": self.company_name}


Owner = IndividualOwner | CorporateOwner
