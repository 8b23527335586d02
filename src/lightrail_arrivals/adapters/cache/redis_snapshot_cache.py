"""Snapshot cache backed by an external Redis store.

The snapshot is stored as JSON under a single key and expires through Redis'
native TTL, so several service instances can share one copy.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import redis.asyncio as redis
from pydantic import ValidationError
from redis.exceptions import RedisError

from lightrail_arrivals.domain.contracts import SnapshotCacheProtocol
from lightrail_arrivals.domain.errors import CacheBackendError
from lightrail_arrivals.domain.models import RoutesSnapshot

if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = logging.getLogger(__name__)


class RedisSnapshotCache(SnapshotCacheProtocol):
    """Stores the snapshot in Redis with ``SET key value EX ttl``."""

    def __init__(self, client: Redis, key: str, ttl_seconds: int) -> None:
        """Initialize the cache.

        Args:
            client: Async Redis client.
            key: Key holding the serialized snapshot.
            ttl_seconds: Expiry applied on every write.
        """
        self._client = client
        self.key = key
        self.ttl_seconds = ttl_seconds

    @classmethod
    def from_url(cls, url: str, key: str, ttl_seconds: int) -> RedisSnapshotCache:
        """Create a cache connected to the store at ``url``."""
        client = redis.from_url(url, decode_responses=True)
        logger.info(f"Using Redis snapshot cache (key={key}, ttl={ttl_seconds}s)")
        return cls(client, key, ttl_seconds)

    async def get(self) -> RoutesSnapshot | None:
        try:
            raw = await self._client.get(self.key)
        except RedisError as e:
            raise CacheBackendError(f"Redis read failed: {e}") from e
        if raw is None:
            return None
        try:
            return RoutesSnapshot.model_validate_json(raw)
        except ValidationError as e:
            raise CacheBackendError(f"Cached snapshot under {self.key} is unreadable") from e

    async def put(self, snapshot: RoutesSnapshot) -> None:
        payload = snapshot.model_dump_json(by_alias=True)
        try:
            await self._client.set(self.key, payload, ex=self.ttl_seconds)
        except RedisError as e:
            raise CacheBackendError(f"Redis write failed: {e}") from e

    async def close(self) -> None:
        await self._client.aclose()
