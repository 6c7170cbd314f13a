"""Tests for the joined station view."""

import pytest

from station_registry.adapters.store import MemoryEntityStore
from station_registry.application.services.station_aggregate_reader import (
    StationAggregateReader,
    chunk,
)
from station_registry.domain.models import collections
from station_registry.domain.models.brand import UNKNOWN_BRAND
from station_registry.domain.models.commune import UNKNOWN_COMMUNE
from station_registry.domain.models.manager import UNKNOWN_MANAGER
from station_registry.domain.models.province import UNKNOWN_PROVINCE


def _station(index: int, **overrides: object) -> dict:
    row = {
        "code": 1000 + index,
        "name": f"Station {index}",
        "address": "",
        "latitude": 33.5,
        "longitude": -7.6,
        "status": "active",
        "type": "Urban",
        "gerance_type": "",
        "brand_id": "b1",
        "commune_id": "c1",
        "manager_id": "m1",
        "owner_id": "",
    }
    row.update(overrides)
    return row


class TestChunk:
    """Tests for splitting id lists for find_in."""

    def test_splits_into_groups_of_ten(self) -> None:
        """Given 23 values, then chunks of 10, 10 and 3 are returned."""
        assert [len(part) for part in chunk(list(range(23)))] == [10, 10, 3]

    def test_empty_input_gives_no_chunk(self) -> None:
        """Given no value, then no chunk is returned."""
        assert chunk([]) == []


class TestStationAggregateReader:
    """Tests for StationAggregateReader."""

    @pytest.mark.asyncio
    async def test_dangling_references_degrade_to_unknown(self) -> None:
        """Given a station pointing at missing rows, then Unknown sentinels are used."""
        store = MemoryEntityStore(
            {collections.STATIONS: {"s1": _station(1, brand_id="gone", commune_id="gone")}}
        )

        [details] = await StationAggregateReader(store).list_all()

        assert details.brand is UNKNOWN_BRAND
        assert details.commune is UNKNOWN_COMMUNE
        assert details.province is UNKNOWN_PROVINCE
        assert details.manager is UNKNOWN_MANAGER
        assert details.brand.name == "Unknown"
        assert details.owner is None

    @pytest.mark.asyncio
    async def test_province_is_resolved_through_commune(self) -> None:
        """Given a commune with a province, then the station's province is that province."""
        store = MemoryEntityStore(
            {
                collections.STATIONS: {"s1": _station(1)},
                collections.COMMUNES: {"c1": {"name": "Salé", "province_id": "p1"}},
                collections.PROVINCES: {"p1": {"name": "Rabat-Salé"}},
            }
        )

        details = await StationAggregateReader(store).get("s1")

        assert details is not None
        assert details.commune.name == "Salé"
        assert details.province.name == "Rabat-Salé"

    @pytest.mark.asyncio
    async def test_owner_detail_comes_from_collection_matching_kind(self) -> None:
        """Given a corporate owner, then its detail is read from the corporate collection."""
        store = MemoryEntityStore(
            {
                collections.STATIONS: {"s1": _station(1, owner_id="o1")},
                collections.OWNERS: {"o1": {"kind": "corporate"}},
                collections.CORPORATE_OWNERS: {
                    "d1": {"owner_id": "o1", "company_name": "Tazi Holding"}
                },
                collections.INDIVIDUAL_OWNERS: {
                    "d2": {"owner_id": "o1", "first_name": "Wrong", "last_name": "Table"}
                },
            }
        )

        details = await StationAggregateReader(store).get("s1")

        assert details is not None
        assert details.owner is not None
        assert details.owner.display_name == "Tazi Holding"

    @pytest.mark.asyncio
    async def test_list_all_joins_more_stations_than_one_query_accepts(self) -> None:
        """Given 15 stations with distinct brands, then every brand is resolved."""
        store = MemoryEntityStore(
            {
                collections.STATIONS: {f"s{i}": _station(i, brand_id=f"b{i}") for i in range(15)},
                collections.BRANDS: {f"b{i}": {"name": f"Brand {i}"} for i in range(15)},
                collections.STORAGE_CAPACITIES: {
                    f"k{i}": {"station_id": f"s{i}", "fuel_type": "Diesel", "liters": i}
                    for i in range(15)
                },
            }
        )

        views = await StationAggregateReader(store).list_all()

        assert len(views) == 15
        for view in views:
            index = view.station.id[1:]
            assert view.brand.name == f"Brand {index}"
            assert [c.liters for c in view.capacities] == [float(index)]

    @pytest.mark.asyncio
    async def test_get_missing_station_returns_none(self, store: MemoryEntityStore) -> None:
        """Given no station, when getting it, then None is returned."""
        assert await StationAggregateReader(store).get("missing") is None

    @pytest.mark.asyncio
    async def test_malformed_numeric_fields_do_not_hide_other_stations(self) -> None:
        """Given one row with garbage code and dispenser count, then every station is listed."""
        store = MemoryEntityStore(
            {
                collections.STATIONS: {
                    "s1": _station(1, code="n/a", dispenser_count="several"),
                    "s2": _station(2, code="1002", dispenser_count=4),
                }
            }
        )

        views = {v.station.id: v.station for v in await StationAggregateReader(store).list_all()}

        assert (views["s1"].code, views["s1"].dispenser_count) == (None, 0)
        assert (views["s2"].code, views["s2"].dispenser_count) == (1002, 4)
