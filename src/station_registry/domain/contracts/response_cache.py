"""Protocol for the distance response cache."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from station_registry.domain.models.route_result import RouteResult


class ResponseCacheProtocol(Protocol):
    """Protocol for caching distance responses by request signature."""

    async def get(self, key: str) -> list["RouteResult"] | None:
        """Get a non-expired cached response.

        Args:
            key: The request signature.

        Returns:
            The cached results, or None on a miss or an expired entry.
        """
        ...

    async def set(self, key: str, results: list["RouteResult"]) -> None:
        """Store a response under a request signature.

        Args:
            key: The request signature.
            results: The results to cache.
        """
        ...

    async def sweep(self) -> int:
        """Evict expired entries.

        Returns:
            Number of evicted entries.
        """
        ...
