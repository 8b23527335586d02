"""OneBusAway adapter for the transit repository port."""

import logging
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from lightrail_arrivals.adapters.onebusaway_api.constants import (
    ARRIVALS_FOR_STOP_PATH,
    NO_PREDICTION,
    ROUTES_FOR_AGENCY_PATH,
    STOPS_FOR_ROUTE_PATH,
)
from lightrail_arrivals.adapters.onebusaway_api.http_client import OneBusAwayHttpClient
from lightrail_arrivals.adapters.onebusaway_api.schemas import (
    ArrivalsForStopData,
    RoutesForAgencyData,
    StopsForRouteData,
)
from lightrail_arrivals.domain.errors import UpstreamProtocolError
from lightrail_arrivals.domain.models import ArrivalRecord, Route, Stop, StopGroup
from lightrail_arrivals.domain.ports import TransitRepository

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def _parse(schema: type[SchemaT], data: Any, what: str) -> SchemaT:
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise UpstreamProtocolError(
            f"Unexpected {what} response shape: {e.error_count()} validation error(s)"
        ) from e


def _timestamp(value: int | None) -> int | None:
    if value is None or value == NO_PREDICTION:
        return None
    return value


class OneBusAwayTransitRepository(TransitRepository):
    """Reads routes, stops and arrivals from a OneBusAway deployment."""

    def __init__(self, client: OneBusAwayHttpClient) -> None:
        """Initialize with an HTTP client."""
        self._client = client

    async def list_routes_for_agency(self, agency_id: str) -> list[Route]:
        data = await self._client.get_data(ROUTES_FOR_AGENCY_PATH.format(agency_id=agency_id))
        parsed = _parse(RoutesForAgencyData, data, "routes-for-agency")
        return [
            Route(id=r.id, short_name=r.short_name, long_name=r.long_name, type=r.type)
            for r in parsed.routes
        ]

    async def list_stops_for_route(
        self, route_id: str
    ) -> tuple[list[list[StopGroup]], list[Stop]]:
        data = await self._client.get_data(
            STOPS_FOR_ROUTE_PATH.format(route_id=route_id),
            params={"includePolylines": "false"},
        )
        parsed = _parse(StopsForRouteData, data, "stops-for-route")

        groupings = [
            [
                StopGroup(id=group.id, name=group.name.name, stop_ids=tuple(group.stop_ids))
                for group in grouping.stop_groups
            ]
            for grouping in parsed.entry.stop_groupings
        ]
        stops = [
            Stop(id=s.id, name=s.name, lat=s.lat, lon=s.lon) for s in parsed.references.stops
        ]
        logger.debug(
            f"Route {route_id}: {len(groupings)} grouping(s), {len(stops)} reference stop(s)"
        )
        return groupings, stops

    async def list_arrivals(self, stop_id: str, horizon_minutes: int) -> list[ArrivalRecord]:
        data = await self._client.get_data(
            ARRIVALS_FOR_STOP_PATH.format(stop_id=stop_id),
            params={"minutesAfter": horizon_minutes},
        )
        parsed = _parse(ArrivalsForStopData, data, "arrivals-and-departures-for-stop")
        return [
            ArrivalRecord(
                stop_id=a.stop_id or stop_id,
                route_id=a.route_id,
                predicted_arrival_time=_timestamp(a.predicted_arrival_time),
                scheduled_arrival_time=_timestamp(a.scheduled_arrival_time),
            )
            for a in parsed.entry.arrivals_and_departures
        ]
