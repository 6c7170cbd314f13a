"""Rate limiter for outgoing API requests.

Paces calls to a paid external API: a minimum delay between two request
starts, and a cap on requests in flight.
"""

from __future__ import annotations

import asyncio
import logging
import time

logger = logging.getLogger(__name__)


class ApiRateLimiter:
    """Rate limiter for outgoing API requests.

    Ensures a minimum delay between requests to a specific API and bounds
    the number of concurrent requests. Async-safe using asyncio primitives.
    """

    def __init__(
        self, api_name: str, min_delay_seconds: float = 0.0, max_concurrency: int = 5
    ) -> None:
        """Initialize the rate limiter.

        Args:
            api_name: Name of the API (for logging).
            min_delay_seconds: Minimum delay between request starts in seconds.
            max_concurrency: Maximum number of requests in flight.
        """
        self.api_name = api_name
        self.min_delay_seconds = min_delay_seconds
        self.max_concurrency = max_concurrency
        self._last_request_time: float = 0.0
        self._lock = asyncio.Lock()
        self._slots = asyncio.Semaphore(max_concurrency)

    async def acquire(self) -> None:
        """Acquire permission to make a request.

        Blocks until a slot is free and enough time has passed since the
        last request. Every acquire must be paired with a release.
        """
        await self._slots.acquire()
        try:
            async with self._lock:
                now = time.monotonic()
                wait_time = self.min_delay_seconds - (now - self._last_request_time)

                if wait_time > 0:
                    logger.debug(f"{self.api_name}: waiting {wait_time:.2f}s before next request")
                    await asyncio.sleep(wait_time)

                self._last_request_time = time.monotonic()
        except BaseException:
            self._slots.release()
            raise

    def release(self) -> None:
        """Free the slot taken by acquire."""
        self._slots.release()

    async def __aenter__(self) -> ApiRateLimiter:
        """Context manager entry - acquire rate limit."""
        await self.acquire()
        return self

    async def __aexit__(
        self, _exc_type: type | None, _exc_val: Exception | None, _exc_tb: object
    ) -> None:
        """Context manager exit - release the slot."""
        self.release()
