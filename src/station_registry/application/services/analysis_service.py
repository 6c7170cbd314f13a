"""Fuel quality analyses attached to a station."""

import datetime
import logging
from typing import Any

from station_registry.application.services.parsing import clean
from station_registry.domain.errors import NotFoundError, ValidationError
from station_registry.domain.models import collections
from station_registry.domain.models.analysis import Analysis
from station_registry.domain.models.authorization import parse_iso_date
from station_registry.domain.models.write_batch import WriteBatch
from station_registry.domain.ports.entity_store import EntityStore

logger = logging.getLogger(__name__)

DEFAULT_PRODUCT = "Diesel"
EDITABLE_FIELDS = ("product", "code", "result", "date")


def _text(name: str, value: Any) -> str:
    """Trim a JSON scalar into text. Numbers are kept as their string form."""
    if value is None:
        return ""
    if isinstance(value, str):
        return clean(value)
    if isinstance(value, int | float) and not isinstance(value, bool):
        return str(value)
    raise ValidationError(f"Invalid analysis {name}", {name: "Expected text"})


def _normalize(fields: dict) -> dict:
    normalized = {}
    for name in EDITABLE_FIELDS:
        if name not in fields:
            continue
        value = fields[name]
        if name == "date":
            if isinstance(value, datetime.date):
                text = value.isoformat()
            elif value is None or isinstance(value, str):
                text = clean(value)
            else:
                raise ValidationError("Invalid analysis date", {"date": "Expected YYYY-MM-DD"})
            parsed = parse_iso_date(text)
            if text and parsed is None:
                raise ValidationError("Invalid analysis date", {"date": "Expected YYYY-MM-DD"})
            normalized[name] = parsed.isoformat() if parsed else None
        else:
            normalized[name] = _text(name, value)
    return normalized


class AnalysisService:
    """Create, list, update and delete analyses."""

    def __init__(self, store: EntityStore) -> None:
        """Initialize the service.

        Args:
            store: Entity store holding stations and analyses.
        """
        self._store = store

    async def create(self, station_id: str, fields: dict) -> str:
        """Create an analysis for an existing station and return its id.

        Raises:
            NotFoundError: If the station does not exist.
            ValidationError: If the date is malformed or a field is not text.
        """
        if await self._store.get(collections.STATIONS, station_id) is None:
            raise NotFoundError(f"Station not found: {station_id}")

        data = {"product": DEFAULT_PRODUCT, "code": "", "result": "", "date": None}
        data.update(_normalize(fields))
        data["product"] = data["product"] or DEFAULT_PRODUCT
        data["station_id"] = station_id

        analysis_id = self._store.new_id()
        batch = WriteBatch()
        batch.set(collections.ANALYSES, analysis_id, data)
        await self._store.commit(batch.operations)
        logger.info(f"Created analysis {analysis_id} for station {station_id}")
        return analysis_id

    async def list_by_station(self, station_id: str) -> list[Analysis]:
        """Return a station's analyses, newest first. Undated ones come last."""
        documents = await self._store.find_equal(collections.ANALYSES, {"station_id": station_id})
        analyses = [Analysis.from_document(d) for d in documents]
        analyses.sort(key=lambda a: a.date or datetime.date.min, reverse=True)
        return analyses

    async def update(self, analysis_id: str, fields: dict) -> None:
        """Merge the editable fields into an existing analysis.

        Raises:
            NotFoundError: If the analysis does not exist.
            ValidationError: If the date is malformed or a field is not text.
        """
        if await self._store.get(collections.ANALYSES, analysis_id) is None:
            raise NotFoundError(f"Analysis not found: {analysis_id}")
        batch = WriteBatch()
        batch.update(collections.ANALYSES, analysis_id, _normalize(fields))
        await self._store.commit(batch.operations)
        logger.info(f"Updated analysis {analysis_id}")

    async def delete(self, analysis_id: str) -> None:
        """Delete an analysis.

        Raises:
            NotFoundError: If the analysis does not exist.
        """
        if await self._store.get(collections.ANALYSES, analysis_id) is None:
            raise NotFoundError(f"Analysis not found: {analysis_id}")
        batch = WriteBatch()
        batch.delete(collections.ANALYSES, analysis_id)
        await self._store.commit(batch.operations)
        logger.info(f"Deleted analysis {analysis_id}")
