"""Snapshot cache backends."""

import logging

from lightrail_arrivals.adapters.cache.memory_snapshot_cache import MemorySnapshotCache
from lightrail_arrivals.adapters.cache.null_snapshot_cache import NullSnapshotCache
from lightrail_arrivals.adapters.cache.redis_snapshot_cache import RedisSnapshotCache
from lightrail_arrivals.adapters.config import AppConfig
from lightrail_arrivals.domain.contracts import SnapshotCacheProtocol

logger = logging.getLogger(__name__)


def create_snapshot_cache(config: AppConfig) -> SnapshotCacheProtocol:
    """Create the snapshot cache selected by the configuration."""
    backend = config.resolved_cache_backend()
    ttl = config.effective_cache_ttl_seconds()

    if backend == "redis" and config.cache_url:
        return RedisSnapshotCache.from_url(config.cache_url, config.cache_key, ttl)
    if backend == "none":
        logger.info("Snapshot caching disabled")
        return NullSnapshotCache()

    logger.info(f"Using in-memory snapshot cache (ttl={ttl}s)")
    return MemorySnapshotCache(ttl_seconds=ttl)


__all__ = [
    "MemorySnapshotCache",
    "NullSnapshotCache",
    "RedisSnapshotCache",
    "create_snapshot_cache",
]
