"""Response cache adapters."""

from station_registry.adapters.cache.ttl_response_cache import TtlResponseCache

__all__ = ["TtlResponseCache"]
