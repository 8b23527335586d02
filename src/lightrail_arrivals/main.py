"""Main entry point for the light rail arrivals server."""

import asyncio
import logging
import sys

import aiohttp

from lightrail_arrivals.adapters.api_rate_limiter import ApiRateLimiter
from lightrail_arrivals.adapters.cache import create_snapshot_cache
from lightrail_arrivals.adapters.config import AppConfig
from lightrail_arrivals.adapters.onebusaway_api import (
    OneBusAwayHttpClient,
    OneBusAwayTransitRepository,
)
from lightrail_arrivals.adapters.web import WebServer
from lightrail_arrivals.application.services import (
    FixedIntervalThrottle,
    RouteAggregator,
    RoutesService,
)
from lightrail_arrivals.domain.contracts import SnapshotCacheProtocol

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def create_aggregator(config: AppConfig, session: aiohttp.ClientSession) -> RouteAggregator:
    """Wire the upstream client, repository and aggregator."""
    client = OneBusAwayHttpClient(
        session,
        base_url=config.onebusaway_base_url,
        api_key=config.onebusaway_api_key,
        max_retries=config.upstream_max_retries,
        backoff_base_seconds=config.upstream_backoff_base_seconds,
        backoff_max_seconds=config.upstream_backoff_max_seconds,
        rate_limiter=ApiRateLimiter.get_instance(
            "onebusaway", config.upstream_min_interval_ms / 1000.0
        ),
    )
    return RouteAggregator(
        OneBusAwayTransitRepository(client),
        batch_width=config.batch_width,
        throttle=FixedIntervalThrottle(config.batch_delay_ms / 1000.0),
        horizon_minutes=config.arrivals_horizon_minutes,
    )


def create_routes_service(
    config: AppConfig, session: aiohttp.ClientSession, cache: SnapshotCacheProtocol
) -> RoutesService:
    """Wire the cached routes service."""
    return RoutesService(
        create_aggregator(config, session),
        cache,
        agency_id=config.agency_id,
        single_flight=config.cache_single_flight,
    )


async def main() -> None:
    """Main application entry point."""
    config = AppConfig()
    configure_logging(config.log_level)

    logger.info(f"Serving light rail routes for agency {config.agency_id}")
    if config.onebusaway_api_key == "TEST":
        logger.warning("ONEBUSAWAY_API_KEY not set, using the shared TEST key")

    cache = create_snapshot_cache(config)
    timeout = aiohttp.ClientTimeout(total=config.upstream_timeout_seconds)

    async with aiohttp.ClientSession(timeout=timeout) as session:
        server = WebServer(create_routes_service(config, session, cache), config)
        try:
            await server.start()
        except KeyboardInterrupt:
            logger.info("Shutting down...")
            await server.stop()
        finally:
            await cache.close()


def run() -> None:
    """Synchronous entry point for the server command."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
