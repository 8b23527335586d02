"""In-process snapshot cache with a read-time TTL check."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from lightrail_arrivals.domain.contracts import SnapshotCacheProtocol

if TYPE_CHECKING:
    from lightrail_arrivals.domain.models import RoutesSnapshot

logger = logging.getLogger(__name__)


class MemorySnapshotCache(SnapshotCacheProtocol):
    """Keeps the last snapshot in process memory for ``ttl_seconds``."""

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        """Initialize the cache.

        Args:
            ttl_seconds: How long a stored snapshot stays fresh.
            clock: Monotonic clock, replaceable in tests.
        """
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entry: tuple[RoutesSnapshot, float] | None = None

    async def get(self) -> RoutesSnapshot | None:
        if self._entry is None:
            return None
        snapshot, stored_at = self._entry
        if self._clock() - stored_at >= self.ttl_seconds:
            logger.debug("In-memory snapshot expired")
            return None
        return snapshot

    async def put(self, snapshot: RoutesSnapshot) -> None:
        self._entry = (snapshot, self._clock())

    async def close(self) -> None:
        self._entry = None
