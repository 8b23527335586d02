"""Contracts (protocols) implemented by services and adapters."""

from lightrail_arrivals.domain.contracts.batch_throttle import BatchThrottleProtocol
from lightrail_arrivals.domain.contracts.snapshot_cache import SnapshotCacheProtocol

__all__ = ["BatchThrottleProtocol", "SnapshotCacheProtocol"]
