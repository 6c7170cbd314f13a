"""Fuel station registry: normalized station records and nearby-station search."""

__version__ = "0.1.0"
