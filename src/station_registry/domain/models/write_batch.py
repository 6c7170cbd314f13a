"""Write batch: writes staged for a single atomic commit."""

from typing import Any

from station_registry.domain.models.document import WriteKind, WriteOperation


class WriteBatch:
    """Collects set/update/delete operations to be committed all at once.

    Nothing is written until the batch is handed to ``EntityStore.commit``.
    """

    def __init__(self) -> None:
        """Initialize an empty batch."""
        self._operations: list[WriteOperation] = []

    def set(self, collection: str, document_id: str, data: dict[str, Any]) -> None:
        """Stage a full document write (create or replace)."""
        self._operations.append(
            WriteOperation(WriteKind.SET, collection, document_id, dict(data))
        )

    def update(self, collection: str, document_id: str, data: dict[str, Any]) -> None:
        """Stage a merge of fields into an existing document."""
        self._operations.append(
            WriteOperation(WriteKind.UPDATE, collection, document_id, dict(data))
        )

    def delete(self, collection: str, document_id: str) -> None:
        """Stage a document deletion."""
        self._operations.append(WriteOperation(WriteKind.DELETE, collection, document_id))

    @property
    def operations(self) -> list[WriteOperation]:
        """Staged operations, in staging order."""
        return list(self._operations)

    def __len__(self) -> int:
        return len(self._operations)
