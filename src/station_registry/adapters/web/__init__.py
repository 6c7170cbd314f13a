"""Web adapters for the station registry HTTP surface."""

from station_registry.adapters.web.app import RegistryServices, create_app

__all__ = ["RegistryServices", "create_app"]
