"""Tests for station aggregate deletion."""

import pytest

from station_registry.adapters.store import MemoryEntityStore
from station_registry.application.services.analysis_service import AnalysisService
from station_registry.application.services.station_aggregate_deleter import (
    StationAggregateDeleter,
)
from station_registry.application.services.station_aggregate_writer import (
    StationAggregateWriter,
)
from station_registry.domain.models import collections
from station_registry.domain.models.authorization import AuthorizationType
from station_registry.domain.models.station_submission import AuthorizationEntry

REFERENCE_COLLECTIONS = (
    collections.BRANDS,
    collections.PROVINCES,
    collections.COMMUNES,
    collections.MANAGERS,
    collections.OWNERS,
    collections.INDIVIDUAL_OWNERS,
)


class TestStationAggregateDeleter:
    """Tests for StationAggregateDeleter.delete."""

    @pytest.mark.asyncio
    async def test_delete_removes_dependents_and_keeps_references(
        self, store: MemoryEntityStore, make_submission
    ) -> None:
        """Given a full aggregate, when deleting, then only station-owned rows are removed."""
        station_id = await StationAggregateWriter(store).create(
            make_submission(
                diesel_capacity="5000",
                premium_capacity="2000",
                authorizations=[AuthorizationEntry(AuthorizationType.CREATION, "A-1", "")],
            )
        )
        await AnalysisService(store).create(station_id, {"code": "AN-1", "result": "Conforme"})
        before = store.snapshot()

        await StationAggregateDeleter(store).delete(station_id)

        after = store.snapshot()
        assert station_id not in after[collections.STATIONS]
        assert after[collections.AUTHORIZATIONS] == {}
        assert after[collections.STORAGE_CAPACITIES] == {}
        assert after[collections.ANALYSES] == {}
        for collection in REFERENCE_COLLECTIONS:
            assert after[collection] == before[collection], collection

    @pytest.mark.asyncio
    async def test_delete_leaves_other_stations_alone(
        self, store: MemoryEntityStore, make_submission
    ) -> None:
        """Given two stations, when deleting one, then the other keeps its rows."""
        writer = StationAggregateWriter(store)
        doomed = await writer.create(make_submission(name="Doomed", diesel_capacity="1"))
        kept = await writer.create(make_submission(name="Kept", diesel_capacity="2"))

        await StationAggregateDeleter(store).delete(doomed)

        snapshot = store.snapshot()
        assert list(snapshot[collections.STATIONS]) == [kept]
        assert [row["station_id"] for row in snapshot[collections.STORAGE_CAPACITIES].values()] == [
            kept
        ]

    @pytest.mark.asyncio
    async def test_delete_of_missing_station_is_a_no_op(self, store: MemoryEntityStore) -> None:
        """Given no station, when deleting, then nothing fails."""
        await StationAggregateDeleter(store).delete("missing")

        assert store.snapshot().get(collections.STATIONS, {}) == {}
