"""Usage tracking adapters."""

from station_registry.adapters.usage.daily_usage_tracker import DailyUsageTracker

__all__ = ["DailyUsageTracker"]
