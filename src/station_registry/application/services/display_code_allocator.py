"""Monotonic station display-code allocation."""

import logging
from typing import TYPE_CHECKING

from station_registry.domain.models import collections

if TYPE_CHECKING:
    from station_registry.domain.ports.entity_store import EntityStore, Transaction

logger = logging.getLogger(__name__)

DEFAULT_CODE_BASE = 1000


class DisplayCodeAllocator:
    """Allocates station display codes from a counter document.

    The read and the increment run in one store transaction so concurrent
    creations never receive the same code. A plain batch cannot give this
    guarantee.
    """

    def __init__(self, store: "EntityStore", base: int = DEFAULT_CODE_BASE) -> None:
        """Initialize the allocator.

        Args:
            store: Entity store providing transactions.
            base: Value the counter starts from; the first code is base + 1.
        """
        self._store = store
        self._base = base

    async def next_code(self) -> int:
        """Allocate and return the next display code."""

        async def increment(transaction: "Transaction") -> int:
            counter = await transaction.get(collections.COUNTERS, collections.STATION_CODE_COUNTER)
            current = int(counter.get("value", self._base)) if counter else self._base
            next_value = max(current, self._base) + 1
            transaction.set(
                collections.COUNTERS, collections.STATION_CODE_COUNTER, {"value": next_value}
            )
            return next_value

        code = await self._store.transact(increment)
        logger.info(f"Allocated station display code {code}")
        return code
