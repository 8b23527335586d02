"""Tests for the cached routes service."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from lightrail_arrivals.adapters.cache import MemorySnapshotCache, RedisSnapshotCache
from lightrail_arrivals.application.services import RoutesService
from lightrail_arrivals.domain.errors import AggregationError, CacheBackendError
from lightrail_arrivals.domain.models import FormattedRoute, RoutesSnapshot

ROUTES = {"40_100479": FormattedRoute(route_name="1 Line")}


def _aggregator(routes: dict[str, FormattedRoute] | None = None) -> MagicMock:
    aggregator = MagicMock()
    aggregator.aggregate = AsyncMock(return_value=ROUTES if routes is None else routes)
    return aggregator


class TestRoutesServiceCaching:
    """Tests for cache hits and misses."""

    @pytest.mark.asyncio
    async def test_miss_aggregates_and_stores_snapshot(self) -> None:
        """Given an empty cache, when getting routes, then aggregates and caches the snapshot."""
        aggregator = _aggregator()
        cache = MemorySnapshotCache(ttl_seconds=300)
        service = RoutesService(aggregator, cache, agency_id="40", clock=lambda: 1234.0)

        snapshot = await service.get_routes()

        assert snapshot == RoutesSnapshot(routes=ROUTES, captured_at=1234.0)
        assert await cache.get() == snapshot
        aggregator.aggregate.assert_awaited_once_with("40")

    @pytest.mark.asyncio
    async def test_hit_returns_cached_snapshot_without_aggregating(self) -> None:
        """Given a cached snapshot, when getting routes, then the aggregator is not called."""
        aggregator = _aggregator()
        cache = MemorySnapshotCache(ttl_seconds=300)
        cached = RoutesSnapshot(routes={}, captured_at=1.0)
        await cache.put(cached)
        service = RoutesService(aggregator, cache, agency_id="40")

        snapshot = await service.get_routes()

        assert snapshot is cached
        aggregator.aggregate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_aggregation_error_propagates_and_nothing_is_cached(self) -> None:
        """Given a failing aggregation, when getting routes, then the error propagates."""
        aggregator = MagicMock()
        aggregator.aggregate = AsyncMock(side_effect=AggregationError("routes down"))
        cache = MemorySnapshotCache(ttl_seconds=300)
        service = RoutesService(aggregator, cache, agency_id="40")

        with pytest.raises(AggregationError):
            await service.get_routes()

        assert await cache.get() is None


class TestRoutesServiceCacheFailures:
    """Tests for degraded cache backends."""

    @pytest.mark.asyncio
    async def test_read_failure_is_treated_as_miss(self) -> None:
        """Given a failing cache read, when getting routes, then a fresh snapshot is served."""
        cache = AsyncMock()
        cache.get.side_effect = CacheBackendError("down")
        service = RoutesService(_aggregator(), cache, agency_id="40")

        snapshot = await service.get_routes()

        assert snapshot.routes == ROUTES
        cache.put.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_write_failure_still_returns_snapshot(self) -> None:
        """Given a failing cache write, when getting routes, then the snapshot is still served."""
        cache = AsyncMock()
        cache.get.return_value = None
        cache.put.side_effect = CacheBackendError("read-only")
        service = RoutesService(_aggregator(), cache, agency_id="40")

        snapshot = await service.get_routes()

        assert snapshot.routes == ROUTES

    @pytest.mark.asyncio
    async def test_unreachable_redis_still_serves_request(self) -> None:
        """Given Redis refusing connections, when getting routes, then the request is served."""
        client = AsyncMock()
        client.get.side_effect = RedisConnectionError("refused")
        client.set.side_effect = RedisConnectionError("refused")
        cache = RedisSnapshotCache(client, key="lightrail:routes", ttl_seconds=120)
        service = RoutesService(_aggregator(), cache, agency_id="40")

        snapshot = await service.get_routes()

        assert snapshot.routes == ROUTES


class TestRoutesServiceSingleFlight:
    """Tests for concurrent cache misses."""

    @staticmethod
    def _slow_aggregator() -> MagicMock:
        async def aggregate(_agency_id: str) -> dict[str, FormattedRoute]:
            await asyncio.sleep(0.01)
            return ROUTES

        aggregator = MagicMock()
        aggregator.aggregate = AsyncMock(side_effect=aggregate)
        return aggregator

    @pytest.mark.asyncio
    async def test_without_single_flight_each_miss_aggregates(self) -> None:
        """Given single-flight off, when two misses race, then both aggregate."""
        aggregator = self._slow_aggregator()
        service = RoutesService(aggregator, MemorySnapshotCache(ttl_seconds=300), agency_id="40")

        await asyncio.gather(service.get_routes(), service.get_routes())

        assert aggregator.aggregate.await_count == 2

    @pytest.mark.asyncio
    async def test_with_single_flight_only_one_miss_aggregates(self) -> None:
        """Given single-flight on, when two misses race, then only one aggregates."""
        aggregator = self._slow_aggregator()
        service = RoutesService(
            aggregator,
            MemorySnapshotCache(ttl_seconds=300),
            agency_id="40",
            single_flight=True,
        )

        first, second = await asyncio.gather(service.get_routes(), service.get_routes())

        assert aggregator.aggregate.await_count == 1
        assert first == second
