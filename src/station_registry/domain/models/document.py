"""Stored document and write operation models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class Document:
    """A document read from the entity store."""

    id: str
    data: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        """Return a field value, or default when the field is absent."""
        return self.data.get(key, default)


class WriteKind(str, Enum):
    """Kind of a staged write."""

    SET = "set"
    UPDATE = "update"  # merge into an existing document
    DELETE = "delete"


@dataclass(frozen=True)
class WriteOperation:
    """A single write staged for an atomic commit."""

    kind: WriteKind
    collection: str
    document_id: str
    data: dict[str, Any] | None = None
