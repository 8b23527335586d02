"""Transit data repository port."""

from typing import Protocol

from lightrail_arrivals.domain.models.arrival_record import ArrivalRecord
from lightrail_arrivals.domain.models.route import Route
from lightrail_arrivals.domain.models.stop import Stop, StopGroup


class TransitRepository(Protocol):
    """Port for reading routes, stops and arrivals from the upstream API.

    Implementations raise ``TransientUpstreamError`` once retries are exhausted
    and ``UpstreamProtocolError`` for responses they cannot interpret.
    """

    async def list_routes_for_agency(self, agency_id: str) -> list[Route]:
        """List every route operated by an agency."""
        ...

    async def list_stops_for_route(
        self, route_id: str
    ) -> tuple[list[list[StopGroup]], list[Stop]]:
        """List a route's stop groupings and its stop reference table."""
        ...

    async def list_arrivals(self, stop_id: str, horizon_minutes: int) -> list[ArrivalRecord]:
        """List arrivals at a stop within the next ``horizon_minutes``."""
        ...
