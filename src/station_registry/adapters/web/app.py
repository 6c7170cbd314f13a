"""Starlette application exposing the registry and the distance proxy."""

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from station_registry.adapters.web.payloads import (
    parse_coordinates,
    parse_destinations,
    parse_submission,
)
from station_registry.adapters.web.rate_limit_middleware import RateLimitMiddleware
from station_registry.adapters.web.serializers import (
    analysis_json,
    distance_matrix_element,
    nearby_json,
    quota_json,
    routes_result,
    station_json,
)
from station_registry.application.services.analysis_service import AnalysisService
from station_registry.application.services.nearby_station_service import NearbyStationService
from station_registry.application.services.route_distance_proxy import RouteDistanceProxy
from station_registry.application.services.station_aggregate_deleter import (
    StationAggregateDeleter,
)
from station_registry.application.services.station_aggregate_reader import (
    StationAggregateReader,
)
from station_registry.application.services.station_aggregate_writer import (
    StationAggregateWriter,
)
from station_registry.application.services.station_validator import StationValidator
from station_registry.domain.contracts.usage_tracker import (
    MAPS_SURFACE,
    ROUTES_SURFACE,
    UsageTrackerProtocol,
)
from station_registry.domain.errors import (
    NotFoundError,
    RequestTimeoutError,
    StorageError,
    ValidationError,
)
from station_registry.domain.models.station_submission import StationSubmission

logger = logging.getLogger(__name__)

STORAGE_ERROR_MESSAGE = "The registry could not be updated. Please try again."


@dataclass(frozen=True)
class RegistryServices:
    """Application services the HTTP surface delegates to."""

    reader: StationAggregateReader
    writer: StationAggregateWriter
    deleter: StationAggregateDeleter
    validator: StationValidator
    nearby: NearbyStationService
    proxy: RouteDistanceProxy
    usage_tracker: UsageTrackerProtocol
    analyses: AnalysisService


async def _read_json(request: Request) -> Any:
    try:
        return await request.json()
    except json.JSONDecodeError as e:
        raise ValidationError("Request body is not valid JSON", {"body": str(e)}) from e


def _require(value: Any, name: str) -> Any:
    if value is None or value == "" or value == []:
        raise ValidationError(f"Missing {name}", {name: "Required"})
    return value


async def _validation_error(_request: Request, exc: ValidationError) -> Response:
    return JSONResponse({"error": str(exc), "field_errors": exc.field_errors}, status_code=400)


async def _not_found(_request: Request, exc: Exception) -> Response:
    return JSONResponse({"error": str(exc)}, status_code=404)


async def _storage_error(request: Request, exc: Exception) -> Response:
    logger.error(f"Storage error on {request.method} {request.url.path}: {exc}")
    return JSONResponse({"error": STORAGE_ERROR_MESSAGE}, status_code=500)


async def _timeout(_request: Request, exc: Exception) -> Response:
    return JSONResponse({"error": str(exc)}, status_code=504)


class RegistryEndpoints:
    """Request handlers. Errors propagate to the application's exception handlers."""

    def __init__(self, services: RegistryServices) -> None:
        self._services = services

    def _validated(self, payload: Any) -> StationSubmission:
        submission = parse_submission(payload)
        result = self._services.validator.validate(submission)
        if not result.is_valid:
            raise ValidationError("Invalid submission", result.field_errors)
        return submission

    async def healthz(self, _request: Request) -> Response:
        """Health check endpoint for load balancers and monitoring."""
        return Response(content="Ok", media_type="text/plain")

    async def distance_matrix(self, request: Request) -> Response:
        params = request.query_params
        origin = parse_coordinates(_require(params.get("origins"), "origins"), "origins")
        destinations = parse_destinations(_require(params.get("destinations"), "destinations"))

        results = await self._services.proxy.batch_distances(origin, destinations)
        return JSONResponse(
            {
                "status": "OK",
                "rows": [{"elements": [distance_matrix_element(r) for r in results]}],
            }
        )

    async def routes(self, request: Request) -> Response:
        body = await _read_json(request)
        if not isinstance(body, dict):
            raise ValidationError("Missing origin or destinations", {"body": "Expected an object"})
        origin = parse_coordinates(_require(body.get("origin"), "origin"), "origin")
        destinations = parse_destinations(_require(body.get("destinations"), "destinations"))

        results = await self._services.proxy.batch_distances(origin, destinations)
        return JSONResponse({"status": "OK", "results": [routes_result(r) for r in results]})

    async def usage(self, _request: Request) -> Response:
        tracker = self._services.usage_tracker
        return JSONResponse(
            {
                MAPS_SURFACE: quota_json(await tracker.quota(MAPS_SURFACE)),
                ROUTES_SURFACE: quota_json(await tracker.quota(ROUTES_SURFACE)),
            }
        )

    async def increment_maps(self, _request: Request) -> Response:
        tracker = self._services.usage_tracker
        await tracker.increment(MAPS_SURFACE)
        return JSONResponse(quota_json(await tracker.quota(MAPS_SURFACE)))

    async def list_stations(self, _request: Request) -> Response:
        stations = await self._services.reader.list_all()
        return JSONResponse([station_json(s) for s in stations])

    async def get_station(self, request: Request) -> Response:
        station_id = request.path_params["station_id"]
        details = await self._services.reader.get(station_id)
        if details is None:
            raise NotFoundError(f"Station not found: {station_id}")
        return JSONResponse(station_json(details))

    async def create_station(self, request: Request) -> Response:
        submission = self._validated(await _read_json(request))
        station_id = await self._services.writer.create(submission)
        return JSONResponse({"id": station_id}, status_code=201)

    async def update_station(self, request: Request) -> Response:
        station_id = request.path_params["station_id"]
        submission = self._validated(await _read_json(request))
        await self._services.writer.update(station_id, submission)
        return JSONResponse({"id": station_id})

    async def delete_station(self, request: Request) -> Response:
        await self._services.deleter.delete(request.path_params["station_id"])
        return Response(status_code=204)

    async def archive_station(self, request: Request) -> Response:
        station_id = request.path_params["station_id"]
        await self._services.writer.archive(station_id)
        return JSONResponse({"id": station_id})

    async def nearby_stations(self, request: Request) -> Response:
        params = request.query_params
        origin = parse_coordinates(
            f"{_require(params.get('lat'), 'lat')},{_require(params.get('lng'), 'lng')}", "origin"
        )
        result = await self._services.nearby.find_nearby(origin.latitude, origin.longitude)
        return JSONResponse(nearby_json(result))

    async def list_analyses(self, request: Request) -> Response:
        analyses = await self._services.analyses.list_by_station(request.path_params["station_id"])
        return JSONResponse([analysis_json(a) for a in analyses])

    async def create_analysis(self, request: Request) -> Response:
        body = await _read_json(request)
        if not isinstance(body, dict):
            raise ValidationError("Invalid analysis", {"body": "Expected an object"})
        analysis_id = await self._services.analyses.create(request.path_params["station_id"], body)
        return JSONResponse({"id": analysis_id}, status_code=201)

    async def update_analysis(self, request: Request) -> Response:
        body = await _read_json(request)
        if not isinstance(body, dict):
            raise ValidationError("Invalid analysis", {"body": "Expected an object"})
        analysis_id = request.path_params["analysis_id"]
        await self._services.analyses.update(analysis_id, body)
        return JSONResponse({"id": analysis_id})

    async def delete_analysis(self, request: Request) -> Response:
        await self._services.analyses.delete(request.path_params["analysis_id"])
        return Response(status_code=204)

    def routes_table(self) -> list[Route]:
        return [
            Route("/healthz", self.healthz, methods=["GET"]),
            Route("/distance", self.distance_matrix, methods=["GET"]),
            Route("/routes", self.routes, methods=["POST"]),
            Route("/usage", self.usage, methods=["GET"]),
            Route("/usage/maps", self.increment_maps, methods=["POST"]),
            Route("/stations", self.list_stations, methods=["GET"]),
            Route("/stations", self.create_station, methods=["POST"]),
            # Declared before /stations/{station_id} so "nearby" is not taken for an id
            Route("/stations/nearby", self.nearby_stations, methods=["GET"]),
            Route("/stations/{station_id}", self.get_station, methods=["GET"]),
            Route("/stations/{station_id}", self.update_station, methods=["PUT"]),
            Route("/stations/{station_id}", self.delete_station, methods=["DELETE"]),
            Route("/stations/{station_id}/archive", self.archive_station, methods=["POST"]),
            Route("/stations/{station_id}/analyses", self.list_analyses, methods=["GET"]),
            Route("/stations/{station_id}/analyses", self.create_analysis, methods=["POST"]),
            Route("/analyses/{analysis_id}", self.update_analysis, methods=["PUT"]),
            Route("/analyses/{analysis_id}", self.delete_analysis, methods=["DELETE"]),
        ]


def create_app(
    services: RegistryServices,
    rate_limit_per_minute: int | None = None,
    lifespan: Callable[[Starlette], Any] | None = None,
) -> Starlette:
    """Build the Starlette application.

    Args:
        services: Application services to expose.
        rate_limit_per_minute: Per-IP limit on the distance proxy; None disables it.
        lifespan: Optional lifespan context for background tasks.
    """
    middleware = []
    if rate_limit_per_minute:
        middleware.append(Middleware(RateLimitMiddleware, requests_per_minute=rate_limit_per_minute))

    return Starlette(
        routes=RegistryEndpoints(services).routes_table(),
        middleware=middleware,
        exception_handlers={
            ValidationError: _validation_error,
            NotFoundError: _not_found,
            StorageError: _storage_error,
            RequestTimeoutError: _timeout,
        },
        lifespan=lifespan,
    )
