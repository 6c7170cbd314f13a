"""Station aggregate writer.

Turns a flat station submission into normalized rows: reference entities are
resolved by natural key, and the station with its authorizations and storage
capacities is committed in one atomic batch.

Create and update deliberately differ:

- create writes one authorization per non-empty entry, update creates or
  updates a single authorization;
- create writes a capacity row only for non-empty values, update replaces
  all capacity rows with a Diesel and a Premium row, 0 when empty.
"""

import logging
from datetime import date

from station_registry.application.services.display_code_allocator import DisplayCodeAllocator
from station_registry.application.services.natural_key_resolver import NaturalKeyResolver
from station_registry.application.services.owner_resolver import OwnerResolver
from station_registry.application.services.parsing import clean, parse_count, parse_decimal
from station_registry.domain.errors import NotFoundError
from station_registry.domain.models import collections
from station_registry.domain.models.station import STATUS_ACTIVE, STATUS_ARCHIVED
from station_registry.domain.models.station_submission import (
    AuthorizationEntry,
    StationSubmission,
)
from station_registry.domain.models.storage_capacity import FuelType
from station_registry.domain.models.write_batch import WriteBatch
from station_registry.domain.ports.entity_store import EntityStore

logger = logging.getLogger(__name__)


def _authorization_fields(station_id: str, entry: AuthorizationEntry) -> dict:
    entry_date = clean(entry.date)
    try:
        parsed_date = date.fromisoformat(entry_date).isoformat() if entry_date else None
    except ValueError:
        parsed_date = None
    return {
        "station_id": station_id,
        "type": entry.type.value if entry.type else None,
        "number": clean(entry.number),
        "date": parsed_date,
    }


def _filled_authorizations(submission: StationSubmission) -> list[AuthorizationEntry]:
    return [entry for entry in submission.authorizations if clean(entry.number)]


class StationAggregateWriter:
    """Creates and updates stations together with their dependent rows."""

    def __init__(
        self,
        store: EntityStore,
        code_allocator: DisplayCodeAllocator | None = None,
    ) -> None:
        """Initialize the writer.

        Args:
            store: Entity store to read references from and commit to.
            code_allocator: Display-code allocator; one over the same store by default.
        """
        self._store = store
        self._references = NaturalKeyResolver(store)
        self._owners = OwnerResolver(store)
        self._code_allocator = code_allocator or DisplayCodeAllocator(store)

    async def _resolve_references(
        self, submission: StationSubmission, batch: WriteBatch
    ) -> dict[str, str]:
        """Resolve every reference entity and return the station's foreign keys."""
        brand = await self._references.resolve_brand(
            submission.brand, submission.brand_legal_name, batch
        )
        province = await self._references.resolve_province(submission.province, batch)
        commune = await self._references.resolve_commune(submission.commune, province.id, batch)
        manager = await self._references.resolve_manager(
            submission.manager_national_id,
            submission.manager_first_name,
            submission.manager_last_name,
            submission.manager_phone,
            batch,
        )
        owner_id = await self._owners.resolve(submission, batch)
        return {
            "brand_id": brand.id,
            "commune_id": commune.id,
            "manager_id": manager.id,
            "owner_id": owner_id or "",
        }

    @staticmethod
    def _station_fields(submission: StationSubmission) -> dict:
        return {
            "name": clean(submission.name),
            "address": clean(submission.address),
            "latitude": parse_decimal(submission.latitude) or 0.0,
            "longitude": parse_decimal(submission.longitude) or 0.0,
            "type": clean(submission.type),
            "gerance_type": clean(submission.gerance_type),
            "status": clean(submission.status) or STATUS_ACTIVE,
            "dispenser_count": parse_count(submission.dispenser_count),
            "comments": clean(submission.comments),
        }

    async def create(self, submission: StationSubmission) -> str:
        """Create a station and its dependent rows.

        Returns:
            The new station id.

        Raises:
            StorageError: If a read or the commit fails. Nothing is written then.
        """
        batch = WriteBatch()
        references = await self._resolve_references(submission, batch)
        code = await self._code_allocator.next_code()

        station_id = self._store.new_id()
        batch.set(
            collections.STATIONS,
            station_id,
            {"code": code, **self._station_fields(submission), **references},
        )

        for entry in _filled_authorizations(submission):
            batch.set(
                collections.AUTHORIZATIONS,
                self._store.new_id(),
                _authorization_fields(station_id, entry),
            )

        for fuel_type, raw in (
            (FuelType.DIESEL, submission.diesel_capacity),
            (FuelType.PREMIUM, submission.premium_capacity),
        ):
            liters = parse_decimal(raw)
            if liters is None or liters < 0:
                continue
            batch.set(
                collections.STORAGE_CAPACITIES,
                self._store.new_id(),
                {"station_id": station_id, "fuel_type": fuel_type.value, "liters": liters},
            )

        await self._store.commit(batch.operations)
        logger.info(f"Created station {station_id} with code {code} ({len(batch)} writes)")
        return station_id

    async def update(self, station_id: str, submission: StationSubmission) -> None:
        """Update a station and its dependent rows.

        Raises:
            NotFoundError: If the station does not exist.
            StorageError: If a read or the commit fails. Nothing is written then.
        """
        current = await self._store.get(collections.STATIONS, station_id)
        if current is None:
            raise NotFoundError(f"Station not found: {station_id}")

        batch = WriteBatch()
        references = await self._resolve_references(submission, batch)
        batch.update(
            collections.STATIONS,
            station_id,
            {**self._station_fields(submission), **references},
        )

        # Only the first filled entry is kept, against the first existing row.
        entries = _filled_authorizations(submission)
        if entries:
            existing = await self._store.find_equal(
                collections.AUTHORIZATIONS, {"station_id": station_id}
            )
            authorization_id = existing[0].id if existing else self._store.new_id()
            batch.set(
                collections.AUTHORIZATIONS,
                authorization_id,
                _authorization_fields(station_id, entries[0]),
            )
            if len(entries) > 1:
                logger.warning(
                    f"Update of station {station_id} keeps 1 of {len(entries)} authorizations"
                )

        capacities = await self._store.find_equal(
            collections.STORAGE_CAPACITIES, {"station_id": station_id}
        )
        for capacity in capacities:
            batch.delete(collections.STORAGE_CAPACITIES, capacity.id)
        for fuel_type, raw in (
            (FuelType.DIESEL, submission.diesel_capacity),
            (FuelType.PREMIUM, submission.premium_capacity),
        ):
            batch.set(
                collections.STORAGE_CAPACITIES,
                self._store.new_id(),
                {
                    "station_id": station_id,
                    "fuel_type": fuel_type.value,
                    "liters": parse_decimal(raw) or 0.0,
                },
            )

        await self._store.commit(batch.operations)
        logger.info(f"Updated station {station_id} ({len(batch)} writes)")

    async def archive(self, station_id: str) -> None:
        """Mark a station as archived without touching its dependent rows.

        Raises:
            NotFoundError: If the station does not exist.
        """
        if await self._store.get(collections.STATIONS, station_id) is None:
            raise NotFoundError(f"Station not found: {station_id}")
        batch = WriteBatch()
        batch.update(collections.STATIONS, station_id, {"status": STATUS_ARCHIVED})
        await self._store.commit(batch.operations)
        logger.info(f"Archived station {station_id}")
