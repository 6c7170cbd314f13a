"""Resolve-or-create for reference entities identified by a natural key.

Each call queries the store for a row matching the natural key and either
reuses it or stages its creation in the caller's batch. Nothing is written
here: atomicity comes from the caller committing the batch once.

Known limitation: resolve-then-create is not transactional. Two concurrent
submissions introducing the same new natural key can both stage a create and
leave two rows for one logical entity. The store port offers no conditional
create to close this race.
"""

import logging
from dataclasses import dataclass
from typing import Any

from station_registry.application.services.parsing import clean
from station_registry.domain.models import collections
from station_registry.domain.models.write_batch import WriteBatch
from station_registry.domain.ports.entity_store import EntityStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedReference:
    """Id of a resolved reference entity, and whether the batch creates it."""

    id: str
    is_new: bool


class NaturalKeyResolver:
    """Resolves brands, provinces, communes and managers by natural key."""

    def __init__(self, store: EntityStore) -> None:
        """Initialize with the entity store."""
        self._store = store

    async def _resolve(
        self,
        collection: str,
        natural_key: dict[str, Any],
        mutable_fields: dict[str, Any],
        batch: WriteBatch,
    ) -> ResolvedReference:
        matches = await self._store.find_equal(collection, natural_key)
        if matches:
            existing = matches[0]
            if len(matches) > 1:
                logger.warning(
                    f"{len(matches)} rows in {collection} share natural key {natural_key}, "
                    f"using {existing.id}"
                )
            if mutable_fields:
                batch.update(collection, existing.id, mutable_fields)
            return ResolvedReference(existing.id, is_new=False)

        new_id = self._store.new_id()
        batch.set(collection, new_id, {**natural_key, **mutable_fields})
        logger.debug(f"Staged new {collection} row {new_id} for {natural_key}")
        return ResolvedReference(new_id, is_new=True)

    async def resolve_brand(
        self, name: str, legal_name: str, batch: WriteBatch
    ) -> ResolvedReference:
        """Resolve a brand by name; its legal name is overwritten with the submitted one."""
        return await self._resolve(
            collections.BRANDS,
            {"name": clean(name)},
            {"legal_name": clean(legal_name)},
            batch,
        )

    async def resolve_province(self, name: str, batch: WriteBatch) -> ResolvedReference:
        """Resolve a province by name."""
        return await self._resolve(collections.PROVINCES, {"name": clean(name)}, {}, batch)

    async def resolve_commune(
        self, name: str, province_id: str, batch: WriteBatch
    ) -> ResolvedReference:
        """Resolve a commune by (name, province_id). Resolve the province first."""
        return await self._resolve(
            collections.COMMUNES,
            {"name": clean(name), "province_id": province_id},
            {},
            batch,
        )

    async def resolve_manager(
        self,
        national_id: str,
        first_name: str,
        last_name: str,
        phone: str,
        batch: WriteBatch,
    ) -> ResolvedReference:
        """Resolve a manager by national ID; names and phone are overwritten."""
        return await self._resolve(
            collections.MANAGERS,
            {"national_id": clean(national_id)},
            {
                "first_name": clean(first_name),
                "last_name": clean(last_name),
                "phone": clean(phone),
            },
            batch,
        )
