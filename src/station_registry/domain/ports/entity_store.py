"""Entity store port.

A schemaless document store with equality queries, atomic multi-document
commits and serializable read-modify-write transactions. There is no join
and no unique constraint: referential integrity is the caller's job.
"""

from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any, Protocol, TypeVar

from station_registry.domain.models.document import Document, WriteOperation

T = TypeVar("T")

# Pseudo-field matching document ids in find_in
DOCUMENT_ID_FIELD = "document_id"

# Maximum number of values accepted by find_in
FIND_IN_LIMIT = 10


class Transaction(Protocol):
    """Read-then-write view handed to a transaction function."""

    async def get(self, collection: str, document_id: str) -> Document | None:
        """Read a document inside the transaction."""
        ...

    def set(self, collection: str, document_id: str, data: dict[str, Any]) -> None:
        """Stage a full document write, applied when the transaction commits."""
        ...


class EntityStore(Protocol):
    """Port for the document store."""

    def new_id(self) -> str:
        """Allocate a fresh unique document id."""
        ...

    async def get(self, collection: str, document_id: str) -> Document | None:
        """Get a document by id, or None."""
        ...

    async def find_equal(self, collection: str, filters: Mapping[str, Any]) -> list[Document]:
        """Find documents whose fields equal every given value."""
        ...

    async def find_in(self, collection: str, field: str, values: Sequence[Any]) -> list[Document]:
        """Find documents whose field is one of at most FIND_IN_LIMIT values.

        Use DOCUMENT_ID_FIELD as field to match on document ids.
        """
        ...

    async def list_all(self, collection: str) -> list[Document]:
        """Return every document of a collection."""
        ...

    async def commit(self, operations: Sequence[WriteOperation]) -> None:
        """Apply all operations atomically, or none of them.

        Raises:
            StorageError: If any operation cannot be applied.
        """
        ...

    async def transact(self, fn: Callable[[Transaction], Awaitable[T]]) -> T:
        """Run fn with serializable read-then-write semantics and commit its writes."""
        ...
