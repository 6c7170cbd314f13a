"""Configuration adapters."""

from station_registry.adapters.config.app_config import AppConfig

__all__ = ["AppConfig"]
