"""Daily API usage counters persisted in the entity store.

One document per UTC calendar day in the api_usage collection, holding one
counter per API surface. Increments run in a store transaction so
concurrent requests never lose a count.
"""

import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime

from station_registry.domain.contracts.usage_tracker import MAPS_SURFACE, ROUTES_SURFACE
from station_registry.domain.errors import ValidationError
from station_registry.domain.models import collections
from station_registry.domain.models.quota_view import QuotaView
from station_registry.domain.ports.entity_store import EntityStore, Transaction

logger = logging.getLogger(__name__)

DEFAULT_LIMITS = {MAPS_SURFACE: 100, ROUTES_SURFACE: 566}


def utc_today() -> str:
    """Today's UTC date as YYYY-MM-DD."""
    return datetime.now(UTC).date().isoformat()


class DailyUsageTracker:
    """Counts external API calls per surface and UTC day against a daily limit."""

    def __init__(
        self,
        store: EntityStore,
        limits: Mapping[str, int] | None = None,
        today: Callable[[], str] = utc_today,
    ) -> None:
        """Initialize the tracker.

        Args:
            store: Entity store holding the daily documents.
            limits: Daily limit per surface.
            today: Source of the current day key.
        """
        self._store = store
        self._limits = dict(limits or DEFAULT_LIMITS)
        self._today = today

    def _check_surface(self, surface: str) -> None:
        if surface not in self._limits:
            raise ValidationError(f"Unknown API surface: {surface}", {"surface": surface})

    async def increment(self, surface: str, amount: int = 1) -> int:
        self._check_surface(surface)
        day = self._today()

        async def apply(transaction: Transaction) -> int:
            document = await transaction.get(collections.API_USAGE, day)
            counters = dict(document.data) if document else {}
            value = int(counters.get(surface, 0)) + amount
            counters[surface] = value
            transaction.set(collections.API_USAGE, day, counters)
            return value

        value = await self._store.transact(apply)
        limit = self._limits[surface]
        if value >= limit:
            logger.warning(f"Daily {surface} quota reached: {value}/{limit} on {day}")
        return value

    async def quota(self, surface: str) -> QuotaView:
        self._check_surface(surface)
        document = await self._store.get(collections.API_USAGE, self._today())
        used = int(document.get(surface, 0)) if document else 0
        return QuotaView.from_usage(used, self._limits[surface])
