"""In-memory entity store.

Process-local and non-durable. Honors the EntityStore contract: commits are
all-or-nothing and transactions are serialized with an asyncio.Lock.
"""

from __future__ import annotations

import asyncio
import copy
import logging
import uuid
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any, TypeVar

from station_registry.domain.errors import StorageError
from station_registry.domain.models.document import Document, WriteKind, WriteOperation
from station_registry.domain.ports.entity_store import DOCUMENT_ID_FIELD, FIND_IN_LIMIT

logger = logging.getLogger(__name__)

T = TypeVar("T")


_Collections = dict[str, dict[str, dict[str, Any]]]


def _apply(collections: _Collections, operation: WriteOperation) -> None:
    """Apply one operation to a working copy. Raises StorageError when impossible."""
    documents = collections.setdefault(operation.collection, {})
    if operation.kind == WriteKind.SET:
        documents[operation.document_id] = dict(operation.data or {})
    elif operation.kind == WriteKind.UPDATE:
        existing = documents.get(operation.document_id)
        if existing is None:
            raise StorageError(
                f"Cannot update missing document {operation.collection}/{operation.document_id}"
            )
        existing.update(operation.data or {})
    elif operation.kind == WriteKind.DELETE:
        documents.pop(operation.document_id, None)
    else:
        raise StorageError(f"Unsupported write kind: {operation.kind}")


class _MemoryTransaction:
    """Transaction view: reads see committed state plus this transaction's writes."""

    def __init__(self, collections: _Collections) -> None:
        self._collections = collections
        self._writes: list[WriteOperation] = []

    async def get(self, collection: str, document_id: str) -> Document | None:
        for operation in reversed(self._writes):
            if operation.collection == collection and operation.document_id == document_id:
                return Document(document_id, dict(operation.data or {}))
        data = self._collections.get(collection, {}).get(document_id)
        return Document(document_id, dict(data)) if data is not None else None

    def set(self, collection: str, document_id: str, data: dict[str, Any]) -> None:
        self._writes.append(WriteOperation(WriteKind.SET, collection, document_id, dict(data)))

    @property
    def writes(self) -> list[WriteOperation]:
        return self._writes


class MemoryEntityStore:
    """Dictionary-backed EntityStore."""

    def __init__(self, initial: Mapping[str, Mapping[str, dict[str, Any]]] | None = None) -> None:
        """Initialize the store.

        Args:
            initial: Optional seed data as ``{collection: {document_id: fields}}``.
        """
        self._collections: _Collections = {
            name: {doc_id: dict(fields) for doc_id, fields in docs.items()}
            for name, docs in (initial or {}).items()
        }
        self._lock = asyncio.Lock()

    def new_id(self) -> str:
        return str(uuid.uuid4())

    async def get(self, collection: str, document_id: str) -> Document | None:
        data = self._collections.get(collection, {}).get(document_id)
        if data is None:
            return None
        return Document(document_id, dict(data))

    async def find_equal(self, collection: str, filters: Mapping[str, Any]) -> list[Document]:
        return [
            Document(doc_id, dict(data))
            for doc_id, data in self._collections.get(collection, {}).items()
            if all(data.get(field) == value for field, value in filters.items())
        ]

    async def find_in(self, collection: str, field: str, values: Sequence[Any]) -> list[Document]:
        if len(values) > FIND_IN_LIMIT:
            raise StorageError(
                f"find_in accepts at most {FIND_IN_LIMIT} values, got {len(values)}"
            )
        wanted = set(values)
        results = []
        for doc_id, data in self._collections.get(collection, {}).items():
            value = doc_id if field == DOCUMENT_ID_FIELD else data.get(field)
            if value in wanted:
                results.append(Document(doc_id, dict(data)))
        return results

    async def list_all(self, collection: str) -> list[Document]:
        return [
            Document(doc_id, dict(data))
            for doc_id, data in self._collections.get(collection, {}).items()
        ]

    async def commit(self, operations: Sequence[WriteOperation]) -> None:
        async with self._lock:
            working = copy.deepcopy(self._collections)
            for operation in operations:
                _apply(working, operation)
            self._collections = working
        logger.debug(f"Committed batch of {len(operations)} operation(s)")

    async def transact(self, fn: Callable[[_MemoryTransaction], Awaitable[T]]) -> T:
        async with self._lock:
            transaction = _MemoryTransaction(self._collections)
            result = await fn(transaction)
            working = copy.deepcopy(self._collections)
            for operation in transaction.writes:
                _apply(working, operation)
            self._collections = working
            return result

    def snapshot(self) -> dict[str, dict[str, dict[str, Any]]]:
        """Deep copy of the current contents, for inspection."""
        return copy.deepcopy(self._collections)
