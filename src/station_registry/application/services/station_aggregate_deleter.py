"""Station aggregate deleter."""

import asyncio
import logging

from station_registry.domain.models import collections
from station_registry.domain.models.write_batch import WriteBatch
from station_registry.domain.ports.entity_store import EntityStore

logger = logging.getLogger(__name__)

# Rows that exist only to describe one station
DEPENDENT_COLLECTIONS = (
    collections.AUTHORIZATIONS,
    collections.STORAGE_CAPACITIES,
    collections.ANALYSES,
)


class StationAggregateDeleter:
    """Deletes a station with every row that depends on it exclusively.

    Brands, provinces, communes, managers and owners are shared reference
    rows and are left in place, even when no station references them anymore.
    """

    def __init__(self, store: EntityStore) -> None:
        """Initialize with the entity store."""
        self._store = store

    async def delete(self, station_id: str) -> None:
        """Delete a station and its authorizations, capacities and analyses atomically.

        Raises:
            StorageError: If a read or the commit fails. Nothing is deleted then.
        """
        dependents = await asyncio.gather(
            *(
                self._store.find_equal(collection, {"station_id": station_id})
                for collection in DEPENDENT_COLLECTIONS
            )
        )

        batch = WriteBatch()
        for collection, documents in zip(DEPENDENT_COLLECTIONS, dependents, strict=True):
            for document in documents:
                batch.delete(collection, document.id)
        batch.delete(collections.STATIONS, station_id)

        await self._store.commit(batch.operations)
        logger.info(f"Deleted station {station_id} and {len(batch) - 1} dependent row(s)")
