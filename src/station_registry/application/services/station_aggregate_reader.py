"""Station aggregate reader.

The store has no join, so the denormalized view is rebuilt in memory: ids
are collected from the station rows, fetched in chunked ``find_in`` queries
fanned out with asyncio.gather, then joined. Province is two hops away
(station -> commune -> province), and owner details live in the collection
matching the owner's kind, so those are fetched in a second round.

A dangling reference never fails the read: it degrades to an "Unknown"
placeholder so one bad row cannot blank the whole list.
"""

import asyncio
import logging
from collections.abc import Iterable
from typing import Any

from station_registry.domain.models import collections
from station_registry.domain.models.analysis import Analysis
from station_registry.domain.models.authorization import Authorization
from station_registry.domain.models.brand import UNKNOWN_BRAND, Brand
from station_registry.domain.models.commune import UNKNOWN_COMMUNE, Commune
from station_registry.domain.models.document import Document
from station_registry.domain.models.manager import UNKNOWN_MANAGER, Manager
from station_registry.domain.models.owner import (
    CorporateOwner,
    IndividualOwner,
    Owner,
    OwnerKind,
)
from station_registry.domain.models.province import UNKNOWN_PROVINCE, Province
from station_registry.domain.models.station import Station
from station_registry.domain.models.station_with_details import StationWithDetails
from station_registry.domain.models.storage_capacity import StorageCapacity
from station_registry.domain.ports.entity_store import (
    DOCUMENT_ID_FIELD,
    FIND_IN_LIMIT,
    EntityStore,
)

logger = logging.getLogger(__name__)


def chunk(values: list[Any], size: int = FIND_IN_LIMIT) -> list[list[Any]]:
    """Split values into lists of at most size items."""
    return [values[i : i + size] for i in range(0, len(values), size)]


def _unique(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(v for v in values if v))


def _group_by_station(documents: list[Document]) -> dict[str, list[Document]]:
    grouped: dict[str, list[Document]] = {}
    for document in documents:
        grouped.setdefault(str(document.get("station_id", "")), []).append(document)
    return grouped


class StationAggregateReader:
    """Reconstructs StationWithDetails views from normalized rows."""

    def __init__(self, store: EntityStore) -> None:
        """Initialize with the entity store."""
        self._store = store

    async def _fetch_in(self, collection: str, field: str, values: list[str]) -> list[Document]:
        if not values:
            return []
        results = await asyncio.gather(
            *(self._store.find_in(collection, field, part) for part in chunk(values))
        )
        return [document for part in results for document in part]

    async def list_all(self) -> list[StationWithDetails]:
        """Return every station with its references resolved.

        Raises:
            StorageError: If the store cannot be read.
        """
        documents = await self._store.list_all(collections.STATIONS)
        stations = [Station.from_document(document) for document in documents]
        views = await self._join(stations)
        logger.debug(f"Loaded {len(views)} station(s) with details")
        return views

    async def get(self, station_id: str) -> StationWithDetails | None:
        """Return one station with its references resolved, or None if it does not exist."""
        document = await self._store.get(collections.STATIONS, station_id)
        if document is None:
            return None
        views = await self._join([Station.from_document(document)])
        return views[0]

    async def _join(self, stations: list[Station]) -> list[StationWithDetails]:
        if not stations:
            return []

        station_ids = [s.id for s in stations]
        (
            brand_docs,
            commune_docs,
            manager_docs,
            owner_docs,
            authorization_docs,
            capacity_docs,
            analysis_docs,
        ) = await asyncio.gather(
            self._fetch_in(
                collections.BRANDS, DOCUMENT_ID_FIELD, _unique(s.brand_id for s in stations)
            ),
            self._fetch_in(
                collections.COMMUNES, DOCUMENT_ID_FIELD, _unique(s.commune_id for s in stations)
            ),
            self._fetch_in(
                collections.MANAGERS, DOCUMENT_ID_FIELD, _unique(s.manager_id for s in stations)
            ),
            self._fetch_in(
                collections.OWNERS, DOCUMENT_ID_FIELD, _unique(s.owner_id for s in stations)
            ),
            self._fetch_in(collections.AUTHORIZATIONS, "station_id", station_ids),
            self._fetch_in(collections.STORAGE_CAPACITIES, "station_id", station_ids),
            self._fetch_in(collections.ANALYSES, "station_id", station_ids),
        )

        communes = {d.id: Commune.from_document(d) for d in commune_docs}
        owner_kinds = {d.id: str(d.get("kind", "")) for d in owner_docs}
        individual_ids = [i for i, k in owner_kinds.items() if k == OwnerKind.INDIVIDUAL.value]
        corporate_ids = [i for i, k in owner_kinds.items() if k == OwnerKind.CORPORATE.value]

        province_docs, individual_docs, corporate_docs = await asyncio.gather(
            self._fetch_in(
                collections.PROVINCES,
                DOCUMENT_ID_FIELD,
                _unique(c.province_id for c in communes.values()),
            ),
            self._fetch_in(collections.INDIVIDUAL_OWNERS, "owner_id", individual_ids),
            self._fetch_in(collections.CORPORATE_OWNERS, "owner_id", corporate_ids),
        )

        brands = {d.id: Brand.from_document(d) for d in brand_docs}
        managers = {d.id: Manager.from_document(d) for d in manager_docs}
        provinces = {d.id: Province.from_document(d) for d in province_docs}
        owners: dict[str, Owner] = {}
        for d in individual_docs:
            individual = IndividualOwner.from_document(d)
            owners.setdefault(individual.owner_id, individual)
        for d in corporate_docs:
            corporate = CorporateOwner.from_document(d)
            owners.setdefault(corporate.owner_id, corporate)

        authorizations = _group_by_station(authorization_docs)
        capacities = _group_by_station(capacity_docs)
        analyses = _group_by_station(analysis_docs)

        views = []
        for station in stations:
            commune = communes.get(station.commune_id, UNKNOWN_COMMUNE)
            brand = brands.get(station.brand_id, UNKNOWN_BRAND)
            if brand is UNKNOWN_BRAND:
                logger.warning(
                    f"Station {station.id} references missing brand {station.brand_id!r}"
                )
            views.append(
                StationWithDetails(
                    station=station,
                    brand=brand,
                    commune=commune,
                    province=provinces.get(commune.province_id, UNKNOWN_PROVINCE),
                    manager=managers.get(station.manager_id, UNKNOWN_MANAGER),
                    owner=owners.get(station.owner_id) if station.owner_id else None,
                    authorizations=[
                        Authorization.from_document(d) for d in authorizations.get(station.id, [])
                    ],
                    capacities=[
                        StorageCapacity.from_document(d) for d in capacities.get(station.id, [])
                    ],
                    analyses=[Analysis.from_document(d) for d in analyses.get(station.id, [])],
                )
            )
        return views
