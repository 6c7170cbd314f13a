"""In-memory TTL cache for distance responses, with a periodic sweeper."""

import asyncio
import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from station_registry.domain.models.route_result import RouteResult

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300.0


class TtlResponseCache:
    """Maps a request signature to its results and the time they were stored.

    Expired entries are never served. They are evicted by sweep(), which the
    background task started by start() runs every TTL.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            ttl_seconds: Lifetime of an entry in seconds.
            clock: Monotonic time source in seconds.
        """
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[float, list["RouteResult"]]] = {}
        self._lock = asyncio.Lock()
        self._task: asyncio.Task | None = None

    def _is_fresh(self, stored_at: float) -> bool:
        return self._clock() - stored_at < self.ttl_seconds

    async def get(self, key: str) -> list["RouteResult"] | None:
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None or not self._is_fresh(entry[0]):
                logger.debug(f"Cache miss for {key}")
                return None
            return list(entry[1])

    async def set(self, key: str, results: list["RouteResult"]) -> None:
        async with self._lock:
            self._entries[key] = (self._clock(), list(results))
        logger.debug(f"Stored {len(results)} result(s) in cache for {key}")

    async def sweep(self) -> int:
        async with self._lock:
            expired = [
                key for key, (stored_at, _) in self._entries.items() if not self._is_fresh(stored_at)
            ]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.info(f"Evicted {len(expired)} expired cache entries")
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)

    async def start(self) -> None:
        """Start the background sweeper."""
        if self._task is not None and not self._task.done():
            logger.warning("Cache sweeper already running")
            return
        self._task = asyncio.create_task(self._sweep_loop())
        logger.info(f"Started cache sweeper (every {self.ttl_seconds}s)")

    async def stop(self) -> None:
        """Stop the background sweeper."""
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                logger.info("Cache sweeper cancelled")
            logger.info("Stopped cache sweeper")

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self.ttl_seconds)
            await self.sweep()
