"""Snapshot cache that never stores anything."""

from __future__ import annotations

from typing import TYPE_CHECKING

from lightrail_arrivals.domain.contracts import SnapshotCacheProtocol

if TYPE_CHECKING:
    from lightrail_arrivals.domain.models import RoutesSnapshot


class NullSnapshotCache(SnapshotCacheProtocol):
    """Always misses, so every request aggregates."""

    async def get(self) -> RoutesSnapshot | None:
        return None

    async def put(self, snapshot: RoutesSnapshot) -> None:  # noqa: ARG002
        return None

    async def close(self) -> None:
        return None
