"""Main entry point for the fuel station registry service."""

import asyncio
import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiohttp
import uvicorn
from starlette.applications import Starlette

from station_registry.adapters.api_rate_limiter import ApiRateLimiter
from station_registry.adapters.cache import TtlResponseCache
from station_registry.adapters.config import AppConfig
from station_registry.adapters.routing_api import (
    GoogleDistanceMatrixClient,
    GoogleRoutesClient,
)
from station_registry.adapters.store import MemoryEntityStore
from station_registry.adapters.usage import DailyUsageTracker
from station_registry.adapters.web import RegistryServices, create_app
from station_registry.application.services.analysis_service import AnalysisService
from station_registry.application.services.display_code_allocator import DisplayCodeAllocator
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
from station_registry.domain.contracts.usage_tracker import MAPS_SURFACE, ROUTES_SURFACE
from station_registry.domain.ports.distance_provider import DistanceProvider

logger = logging.getLogger(__name__)


def build_distance_provider(config: AppConfig, session: aiohttp.ClientSession) -> DistanceProvider:
    """Create the routing API client selected by configuration."""
    rate_limiter = ApiRateLimiter(
        config.routing_api_surface,
        min_delay_seconds=config.routing_min_delay_seconds,
        max_concurrency=config.routing_max_concurrency,
    )
    if config.routing_api_surface == "distance_matrix":
        return GoogleDistanceMatrixClient(
            session, config.google_maps_api_key, rate_limiter, config.language
        )
    return GoogleRoutesClient(session, config.google_maps_api_key, rate_limiter, config.language)


def build_services(
    config: AppConfig,
    store: MemoryEntityStore,
    provider: DistanceProvider,
    cache: TtlResponseCache,
) -> RegistryServices:
    """Wire the application services over one store, provider and cache."""
    reader = StationAggregateReader(store)
    usage_tracker = DailyUsageTracker(
        store,
        limits={
            MAPS_SURFACE: config.maps_daily_limit,
            ROUTES_SURFACE: config.routes_daily_limit,
        },
    )
    proxy = RouteDistanceProxy(
        provider, cache, usage_tracker, max_destinations=config.max_destinations
    )
    return RegistryServices(
        reader=reader,
        writer=StationAggregateWriter(
            store, DisplayCodeAllocator(store, base=config.display_code_base)
        ),
        deleter=StationAggregateDeleter(store),
        validator=StationValidator(),
        nearby=NearbyStationService(
            reader,
            proxy,
            radius_km=config.search_radius_km,
            max_candidates=config.max_destinations,
            timeout_seconds=config.routing_timeout_seconds,
        ),
        proxy=proxy,
        usage_tracker=usage_tracker,
        analyses=AnalysisService(store),
    )


async def main() -> None:
    """Main application entry point."""
    config = AppConfig()
    logging.getLogger().setLevel(config.log_level)

    if not config.google_maps_api_key:
        logger.warning("GOOGLE_MAPS_API_KEY is not set, distance lookups will fail")

    # Create aiohttp session for efficient HTTP connections
    async with aiohttp.ClientSession() as session:
        store = MemoryEntityStore()
        cache = TtlResponseCache(ttl_seconds=config.distance_cache_ttl_seconds)
        provider = build_distance_provider(config, session)
        services = build_services(config, store, provider, cache)

        @asynccontextmanager
        async def lifespan(_app: Starlette) -> AsyncIterator[None]:
            await cache.start()
            try:
                yield
            finally:
                await cache.stop()

        app = create_app(
            services, rate_limit_per_minute=config.rate_limit_per_minute, lifespan=lifespan
        )
        logger.info(
            f"Serving station registry on {config.host}:{config.port} "
            f"(routing via {provider.name})"
        )
        server = uvicorn.Server(
            uvicorn.Config(
                app,
                host=config.host,
                port=config.port,
                log_level=config.log_level.lower(),
            )
        )
        await server.serve()


def run() -> None:
    """Console script entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Shutting down...")


if __name__ == "__main__":
    run()
