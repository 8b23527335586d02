"""Routes provider port."""

from typing import Protocol

from lightrail_arrivals.domain.models.formatted_route import RoutesSnapshot


class RoutesProvider(Protocol):
    """Port through which outer layers obtain the current routes snapshot."""

    async def get_routes(self) -> RoutesSnapshot:
        """Return the current snapshot, building it if necessary."""
        ...
