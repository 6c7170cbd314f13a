"""Tests for the TTL response cache."""

import asyncio

import pytest

from station_registry.adapters.cache import TtlResponseCache
from station_registry.domain.models.route_result import RouteResult


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestTtlResponseCache:
    """Tests for get, set and sweep."""

    @pytest.mark.asyncio
    async def test_fresh_entry_is_served(self) -> None:
        """Given an entry younger than the TTL, then it is returned."""
        clock = FakeClock()
        cache = TtlResponseCache(ttl_seconds=300, clock=clock)
        results = [RouteResult.ok(1200, 180)]

        await cache.set("k", results)
        clock.now += 299

        assert await cache.get("k") == results

    @pytest.mark.asyncio
    async def test_expired_entry_is_not_served(self) -> None:
        """Given an entry as old as the TTL, then it is a miss."""
        clock = FakeClock()
        cache = TtlResponseCache(ttl_seconds=300, clock=clock)

        await cache.set("k", [RouteResult.ok(1200, 180)])
        clock.now += 300

        assert await cache.get("k") is None

    @pytest.mark.asyncio
    async def test_sweep_evicts_only_expired_entries(self) -> None:
        """Given an old and a new entry, when sweeping, then only the old one is evicted."""
        clock = FakeClock()
        cache = TtlResponseCache(ttl_seconds=300, clock=clock)
        await cache.set("old", [])
        clock.now += 200
        await cache.set("new", [])
        clock.now += 150

        evicted = await cache.sweep()

        assert evicted == 1
        assert len(cache) == 1
        assert await cache.get("new") == []

    @pytest.mark.asyncio
    async def test_start_and_stop_sweeper(self) -> None:
        """Given a short TTL, when the sweeper runs, then expired entries disappear."""
        cache = TtlResponseCache(ttl_seconds=0.05)
        await cache.set("k", [])

        await cache.start()
        await asyncio.sleep(0.2)
        await cache.stop()

        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_stop_without_start_is_harmless(self) -> None:
        """Given a cache never started, when stopping, then nothing fails."""
        await TtlResponseCache().stop()
