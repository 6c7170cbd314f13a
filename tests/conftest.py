"""Shared fixtures for the station registry tests."""

from collections.abc import Callable
from typing import Any

import pytest

from station_registry.adapters.store import MemoryEntityStore
from station_registry.domain.models.station_submission import StationSubmission

SubmissionFactory = Callable[..., StationSubmission]


def _make_submission(**overrides: Any) -> StationSubmission:
    fields: dict[str, Any] = {
        "name": "Station Atlas",
        "address": "12 Bd Zerktouni",
        "latitude": "33.5731",
        "longitude": "-7.5898",
        "type": "Urban",
        "brand": "Afriquia",
        "brand_legal_name": "Afriquia SMDC",
        "province": "Casablanca",
        "commune": "Maarif",
        "manager_first_name": "Youssef",
        "manager_last_name": "Alaoui",
        "manager_national_id": "BE123456",
        "manager_phone": "+212600000001",
        "owner_first_name": "Amina",
        "owner_last_name": "Tazi",
    }
    fields.update(overrides)
    return StationSubmission(**fields)


@pytest.fixture
def make_submission() -> SubmissionFactory:
    """Build a valid submission, with keyword overrides."""
    return _make_submission


@pytest.fixture
def store() -> MemoryEntityStore:
    """Empty in-memory entity store."""
    return MemoryEntityStore()
