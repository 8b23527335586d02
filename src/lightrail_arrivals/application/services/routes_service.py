"""Cached access to the aggregated routes snapshot."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from lightrail_arrivals.domain.errors import CacheBackendError
from lightrail_arrivals.domain.models import RoutesSnapshot

if TYPE_CHECKING:
    from lightrail_arrivals.application.services.route_aggregator import RouteAggregator
    from lightrail_arrivals.domain.contracts import SnapshotCacheProtocol

logger = logging.getLogger(__name__)


class RoutesService:
    """Serves the routes snapshot from cache, aggregating on a miss.

    Cache failures never fail a request: a failed read is a miss and a failed
    write only loses the cached copy. Concurrent misses each aggregate and
    overwrite unless ``single_flight`` is enabled.
    """

    def __init__(
        self,
        aggregator: RouteAggregator,
        cache: SnapshotCacheProtocol,
        agency_id: str,
        single_flight: bool = False,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the service.

        Args:
            aggregator: Builds fresh snapshots.
            cache: Backend holding the current snapshot.
            agency_id: Agency whose routes are served.
            single_flight: Serialize concurrent misses so only one aggregates.
            clock: Wall clock used to stamp snapshots.
        """
        self.aggregator = aggregator
        self.cache = cache
        self.agency_id = agency_id
        self.single_flight = single_flight
        self._clock = clock
        self._refresh_lock = asyncio.Lock()

    async def get_routes(self) -> RoutesSnapshot:
        """Return the cached snapshot, or a freshly aggregated one.

        Raises:
            AggregationError: The snapshot was not cached and could not be built.
        """
        cached = await self._read_cache()
        if cached is not None:
            logger.info("Returning cached route data")
            return cached

        if not self.single_flight:
            return await self._refresh()

        async with self._refresh_lock:
            cached = await self._read_cache()
            if cached is not None:
                logger.info("Returning route data refreshed by a concurrent request")
                return cached
            return await self._refresh()

    async def _read_cache(self) -> RoutesSnapshot | None:
        try:
            return await self.cache.get()
        except CacheBackendError as e:
            logger.warning(f"Cache read failed, treating as miss: {e}")
            return None

    async def _refresh(self) -> RoutesSnapshot:
        logger.info("Cache miss - fetching fresh route data")
        routes = await self.aggregator.aggregate(self.agency_id)
        snapshot = RoutesSnapshot(routes=routes, captured_at=self._clock())
        try:
            await self.cache.put(snapshot)
        except CacheBackendError as e:
            logger.warning(f"Cache write failed, snapshot not cached: {e}")
        return snapshot
