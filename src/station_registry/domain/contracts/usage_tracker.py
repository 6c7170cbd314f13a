"""Protocol for daily API usage accounting."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from station_registry.domain.models.quota_view import QuotaView

MAPS_SURFACE = "maps"
ROUTES_SURFACE = "routes"


class UsageTrackerProtocol(Protocol):
    """Protocol for counting external API calls per surface and calendar day."""

    async def increment(self, surface: str, amount: int = 1) -> int:
        """Add to today's counter for a surface.

        Args:
            surface: API surface name, e.g. ``routes`` or ``maps``.
            amount: Number of calls to record.

        Returns:
            The counter value after the increment.
        """
        ...

    async def quota(self, surface: str) -> "QuotaView":
        """Get today's quota view for a surface."""
        ...
