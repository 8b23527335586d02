"""Aggregation of light rail routes into the route -> destination -> stop tree."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from lightrail_arrivals.application.services.arrival_selector import select_next_arrival
from lightrail_arrivals.application.services.batch_scheduler import run_batched
from lightrail_arrivals.domain.errors import (
    AggregationError,
    PerStopResolutionError,
    UpstreamError,
)
from lightrail_arrivals.domain.models import (
    ArrivalLookup,
    ArrivalRecord,
    DestinationStops,
    FormattedRoute,
    ResolvedStop,
    Route,
    Stop,
    StopGroup,
)

if TYPE_CHECKING:
    from lightrail_arrivals.domain.contracts import BatchThrottleProtocol
    from lightrail_arrivals.domain.ports import TransitRepository

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


def filter_light_rail(routes: list[Route]) -> list[Route]:
    """Keep light rail routes, preserving their listing order."""
    return [route for route in routes if route.is_light_rail]


class RouteAggregator:
    """Builds the formatted routes mapping for an agency.

    Only the route listing is allowed to fail the aggregation. Every failure
    further down degrades the affected route or stop instead.
    """

    def __init__(
        self,
        transit_repository: TransitRepository,
        batch_width: int = 5,
        throttle: BatchThrottleProtocol | None = None,
        horizon_minutes: int = 60,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        """Initialize the aggregator.

        Args:
            transit_repository: Source of routes, stops and arrivals.
            batch_width: Number of stops whose arrivals are fetched concurrently.
            throttle: Pacing between batches of arrival lookups.
            horizon_minutes: Forward window for arrival lookups.
            clock: Returns the current time in epoch milliseconds.
        """
        self._repository = transit_repository
        self.batch_width = batch_width
        self.throttle = throttle
        self.horizon_minutes = horizon_minutes
        self._clock = clock

    async def aggregate(self, agency_id: str) -> dict[str, FormattedRoute]:
        """Aggregate every light rail route of ``agency_id``.

        Raises:
            AggregationError: The agency's routes could not be listed.
        """
        started = time.monotonic()
        try:
            routes = await self._repository.list_routes_for_agency(agency_id)
        except UpstreamError as e:
            raise AggregationError(f"Failed to list routes for agency {agency_id}: {e}") from e

        light_rail = filter_light_rail(routes)
        logger.info(
            f"Agency {agency_id}: {len(light_rail)} light rail route(s) out of {len(routes)}"
        )

        formatted: dict[str, FormattedRoute] = {}
        for route in light_rail:
            formatted[route.id] = await self._format_route(route)

        logger.info(f"Aggregated {len(formatted)} route(s) in {time.monotonic() - started:.1f}s")
        return formatted

    async def _format_route(self, route: Route) -> FormattedRoute:
        try:
            groupings, stops = await self._repository.list_stops_for_route(route.id)
        except UpstreamError as e:
            logger.error(f"Failed to list stops for route {route.id}, serving it without stops: {e}")
            return FormattedRoute(route_name=route.display_name)

        stop_groups = groupings[0] if groupings else []
        stops_by_id = {stop.id: stop for stop in stops}

        destinations = await asyncio.gather(
            *(self._resolve_group(route, group, stops_by_id) for group in stop_groups)
        )
        return FormattedRoute(route_name=route.display_name, destinations=tuple(destinations))

    async def _resolve_group(
        self, route: Route, group: StopGroup, stops_by_id: dict[str, Stop]
    ) -> DestinationStops:
        known_stops = [stops_by_id[stop_id] for stop_id in group.stop_ids if stop_id in stops_by_id]
        skipped = len(group.stop_ids) - len(known_stops)
        if skipped:
            logger.debug(f"Route {route.id} group '{group.name}': {skipped} unknown stop id(s)")

        async def resolve(stop: Stop) -> ArrivalLookup:
            return await self.lookup_next_arrival(stop, route.id)

        lookups = await run_batched(known_stops, self.batch_width, resolve, self.throttle)

        stops: list[ResolvedStop] = []
        unresolved = 0
        for stop, lookup in zip(known_stops, lookups, strict=True):
            if lookup is None or not lookup.ok:
                unresolved += 1
            next_arrival = lookup.next_arrival if lookup is not None else None
            stops.append(
                ResolvedStop(name=stop.name, lat=stop.lat, lon=stop.lon, next_arrival=next_arrival)
            )
        if unresolved:
            logger.warning(
                f"Route {route.id} group '{group.name}': {unresolved} of {len(stops)} "
                "stop(s) unresolved, serving them without arrivals"
            )
        return DestinationStops(destination=group.name, stops=tuple(stops))

    async def lookup_next_arrival(self, stop: Stop, route_id: str) -> ArrivalLookup:
        """Look up the next arrival of ``route_id`` at ``stop``.

        Never raises for upstream failures; those come back as a failed lookup.
        """
        try:
            records = await self._fetch_arrivals(stop.id)
        except PerStopResolutionError as e:
            logger.warning(str(e))
            return ArrivalLookup.failed(str(e.cause))
        return ArrivalLookup.resolved(select_next_arrival(records, route_id, self._clock()))

    async def _fetch_arrivals(self, stop_id: str) -> list[ArrivalRecord]:
        try:
            return await self._repository.list_arrivals(stop_id, self.horizon_minutes)
        except UpstreamError as e:
            raise PerStopResolutionError(stop_id, e) from e
