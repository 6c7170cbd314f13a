"""Entity store adapters."""

from station_registry.adapters.store.memory_entity_store import MemoryEntityStore

__all__ = ["MemoryEntityStore"]
