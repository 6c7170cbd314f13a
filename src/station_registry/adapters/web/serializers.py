"""JSON rendering of domain values for the HTTP surface."""

from typing import Any

from station_registry.domain.models.analysis import Analysis
from station_registry.domain.models.authorization import Authorization
from station_registry.domain.models.nearby_station import NearbySearchResult
from station_registry.domain.models.quota_view import QuotaView
from station_registry.domain.models.route_result import RouteResult, RouteStatus
from station_registry.domain.models.station_with_details import StationWithDetails

# Status strings of the Google wire formats
_WIRE_STATUS = {
    RouteStatus.OK: "OK",
    RouteStatus.NO_ROUTE: "ZERO_RESULTS",
    RouteStatus.RATE_LIMITED: "OVER_QUERY_LIMIT",
    RouteStatus.ERROR: "ERROR",
}


def authorization_json(authorization: Authorization) -> dict[str, Any]:
    return {"id": authorization.id, **authorization.to_fields()}


def analysis_json(analysis: Analysis) -> dict[str, Any]:
    return {"id": analysis.id, **analysis.to_fields()}


def station_json(details: StationWithDetails) -> dict[str, Any]:
    """Render a station with its references resolved."""
    station = details.station
    owner = details.owner
    creation = details.creation_authorization
    return {
        "id": station.id,
        **station.to_fields(),
        "brand": {"id": details.brand.id, **details.brand.to_fields()},
        "commune": {"id": details.commune.id, "name": details.commune.name},
        "province": {"id": details.province.id, "name": details.province.name},
        "manager": {
            "id": details.manager.id,
            **details.manager.to_fields(),
            "full_name": details.manager.full_name,
        },
        "owner": (
            {"kind": owner.kind.value, "display_name": owner.display_name, **owner.to_fields()}
            if owner
            else None
        ),
        "authorizations": [authorization_json(a) for a in details.authorizations],
        "creation_authorization": authorization_json(creation) if creation else None,
        "capacities": [
            {"id": c.id, "fuel_type": c.fuel_type.value, "liters": c.liters}
            for c in details.capacities
        ],
        "analyses": [analysis_json(a) for a in details.analyses],
    }


def nearby_json(result: NearbySearchResult) -> dict[str, Any]:
    return {
        "stations": [
            {
                **station_json(n.details),
                "distance_km": n.distance_km,
                "duration_seconds": n.duration_seconds,
            }
            for n in result.stations
        ],
        "empty_reason": result.empty_reason,
    }


def quota_json(view: QuotaView) -> dict[str, Any]:
    return {**view.model_dump(), "warning_level": view.warning_level}


def distance_matrix_element(result: RouteResult) -> dict[str, Any]:
    """Render one result as a Distance Matrix element."""
    element: dict[str, Any] = {"status": _WIRE_STATUS[result.status]}
    if result.is_ok:
        element["distance"] = {"value": result.distance_meters}
        element["duration"] = {"value": result.duration_seconds}
    return element


def routes_result(result: RouteResult) -> dict[str, Any]:
    """Render one result in the Routes proxy format; duration is a ``"<n>s"`` string."""
    rendered: dict[str, Any] = {"status": _WIRE_STATUS[result.status]}
    if result.is_ok:
        rendered["distance"] = result.distance_meters
        rendered["duration"] = f"{result.duration_seconds}s"
    elif result.error:
        rendered["error"] = result.error
    return rendered
