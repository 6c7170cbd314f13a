"""Parsing of request payloads into domain values."""

import math
from dataclasses import MISSING, fields
from typing import Any

from station_registry.domain.errors import ValidationError
from station_registry.domain.models.authorization import AuthorizationType
from station_registry.domain.models.geo import Coordinates
from station_registry.domain.models.owner import OwnerKind
from station_registry.domain.models.station_submission import (
    AuthorizationEntry,
    StationSubmission,
)

_TEXT_FIELDS = tuple(
    f.name for f in fields(StationSubmission) if f.name not in ("owner_kind", "authorizations")
)
# Fields without a default, filled with "" when absent so the validator reports them
_REQUIRED_TEXT_FIELDS = tuple(
    f.name for f in fields(StationSubmission) if f.default is MISSING and f.default_factory is MISSING
)


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def parse_coordinates(value: Any, field: str) -> Coordinates:
    """Parse ``"lat,lng"`` or ``{"lat": .., "lng": ..}`` into Coordinates.

    Raises:
        ValidationError: If the value is missing or malformed.
    """
    try:
        if isinstance(value, dict):
            lat, lng = float(value["lat"]), float(value["lng"])
        else:
            lat_text, lng_text = str(value).split(",")
            lat, lng = float(lat_text), float(lng_text)
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(
            f"Invalid coordinates for {field}", {field: "Expected latitude and longitude"}
        ) from e
    if not (math.isfinite(lat) and math.isfinite(lng)):
        raise ValidationError(f"Invalid coordinates for {field}", {field: "Coordinates must be finite"})
    return Coordinates(lat, lng)


def parse_destinations(value: Any) -> list[Coordinates]:
    """Parse a ``|``-separated string or a list of points into destinations."""
    items = value.split("|") if isinstance(value, str) else value
    if not isinstance(items, list):
        raise ValidationError("Invalid destinations", {"destinations": "Expected a list"})
    return [parse_coordinates(item, "destinations") for item in items]


def _authorization_entry(raw: Any, index: int) -> AuthorizationEntry:
    if not isinstance(raw, dict):
        raise ValidationError(
            "Invalid submission", {"authorizations": f"Malformed authorization {index}"}
        )
    raw_type = _text(raw.get("type")).strip()
    try:
        auth_type = AuthorizationType(raw_type) if raw_type else None
    except ValueError as e:
        raise ValidationError(
            "Invalid submission",
            {"authorizations": f"Unknown authorization type for authorization {index}"},
        ) from e
    return AuthorizationEntry(
        type=auth_type, number=_text(raw.get("number")), date=_text(raw.get("date"))
    )


def parse_submission(payload: Any) -> StationSubmission:
    """Build a StationSubmission from a JSON object.

    Numbers are accepted and turned back into form strings. Field-level
    validation is left to StationValidator.

    Raises:
        ValidationError: If the payload is not an object, or an enum value is unknown.
    """
    if not isinstance(payload, dict):
        raise ValidationError("Invalid submission", {"submit": "Expected a JSON object"})

    owner_kind = _text(payload.get("owner_kind") or OwnerKind.INDIVIDUAL.value)
    try:
        kind = OwnerKind(owner_kind)
    except ValueError as e:
        raise ValidationError(
            "Invalid submission", {"owner_kind": "Owner kind must be individual or corporate"}
        ) from e

    raw_authorizations = payload.get("authorizations") or []
    if not isinstance(raw_authorizations, list):
        raise ValidationError("Invalid submission", {"authorizations": "Expected a list"})

    text_values = {name: _text(payload.get(name)) for name in _TEXT_FIELDS if name in payload}
    missing = {name: "" for name in _REQUIRED_TEXT_FIELDS if name not in text_values}
    return StationSubmission(
        **missing,
        **text_values,
        owner_kind=kind,
        authorizations=[
            _authorization_entry(raw, index)
            for index, raw in enumerate(raw_authorizations, start=1)
        ],
    )
