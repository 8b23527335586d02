"""Protocol for caching the aggregated routes snapshot."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from lightrail_arrivals.domain.models.formatted_route import RoutesSnapshot


class SnapshotCacheProtocol(Protocol):
    """Holds at most one fresh snapshot, replaced wholesale on every put."""

    async def get(self) -> "RoutesSnapshot | None":
        """Get the cached snapshot.

        Returns:
            The snapshot if one is stored and still fresh, otherwise None.

        Raises:
            CacheBackendError: The backend could not be read.
        """
        ...

    async def put(self, snapshot: "RoutesSnapshot") -> None:
        """Replace the cached snapshot.

        Raises:
            CacheBackendError: The backend could not be written.
        """
        ...

    async def close(self) -> None:
        """Release backend resources."""
        ...
