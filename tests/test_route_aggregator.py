"""Tests for the route aggregator."""

import logging
from unittest.mock import AsyncMock

import pytest

from lightrail_arrivals.application.services import RouteAggregator, filter_light_rail
from lightrail_arrivals.domain.errors import (
    AggregationError,
    TransientUpstreamError,
    UpstreamProtocolError,
)
from lightrail_arrivals.domain.models import (
    ArrivalRecord,
    DestinationStops,
    FormattedRoute,
    ResolvedStop,
    Route,
    Stop,
    StopGroup,
)

AGGREGATOR_LOGGER = "lightrail_arrivals.application.services.route_aggregator"
NOW = 1_700_000_000_000
MINUTE = 60_000

LINE_1 = Route(id="40_100479", short_name="1 Line", long_name="Lynnwood - Angle Lake", type=0)
S1 = Stop(id="40_990001", name="Westlake", lat=47.6114, lon=-122.3368)
S2 = Stop(id="40_990002", name="Capitol Hill", lat=47.6191, lon=-122.3204)


class FakeTransitRepository:
    """In-memory transit repository keyed by agency, route and stop ids."""

    def __init__(
        self,
        routes: list[Route] | None = None,
        stops: dict[str, tuple[list[list[StopGroup]], list[Stop]]] | None = None,
        arrivals: dict[str, list[ArrivalRecord]] | None = None,
        failing_stops: dict[str, Exception] | None = None,
    ) -> None:
        self.routes = routes or []
        self.stops = stops or {}
        self.arrivals = arrivals or {}
        self.failing_stops = failing_stops or {}
        self.arrival_calls: list[tuple[str, int]] = []

    async def list_routes_for_agency(self, agency_id: str) -> list[Route]:  # noqa: ARG002
        return self.routes

    async def list_stops_for_route(
        self, route_id: str
    ) -> tuple[list[list[StopGroup]], list[Stop]]:
        return self.stops.get(route_id, ([], []))

    async def list_arrivals(self, stop_id: str, horizon_minutes: int) -> list[ArrivalRecord]:
        self.arrival_calls.append((stop_id, horizon_minutes))
        if stop_id in self.failing_stops:
            raise self.failing_stops[stop_id]
        return self.arrivals.get(stop_id, [])


def _aggregator(repository: FakeTransitRepository, **kwargs: object) -> RouteAggregator:
    return RouteAggregator(repository, clock=lambda: NOW, **kwargs)  # type: ignore[arg-type]


def _single_group_repository(**kwargs: object) -> FakeTransitRepository:
    group = StopGroup(id="1", name="Lynnwood City Center", stop_ids=(S1.id, S2.id))
    return FakeTransitRepository(
        routes=[LINE_1],
        stops={LINE_1.id: ([[group]], [S1, S2])},
        **kwargs,  # type: ignore[arg-type]
    )


class TestFilterLightRail:
    """Tests for light rail route filtering."""

    def test_keeps_only_type_zero_routes_in_order(self) -> None:
        """Given types [0,0,3,2,0], when filtering, then exactly the three type-0 routes remain."""
        routes = [
            Route(id=f"40_{i}", short_name=f"R{i}", long_name=None, type=route_type)
            for i, route_type in enumerate([0, 0, 3, 2, 0])
        ]

        result = filter_light_rail(routes)

        assert [route.id for route in result] == ["40_0", "40_1", "40_4"]


class TestRouteAggregatorAggregate:
    """Tests for RouteAggregator.aggregate."""

    @pytest.mark.asyncio
    async def test_end_to_end_scenario(self) -> None:
        """Given S1 with predicted +10/scheduled +5 and S2 without arrivals, then +5 and null."""
        repository = _single_group_repository(
            arrivals={
                S1.id: [
                    ArrivalRecord(
                        stop_id=S1.id,
                        route_id=LINE_1.id,
                        predicted_arrival_time=NOW + 10 * MINUTE,
                        scheduled_arrival_time=NOW + 5 * MINUTE,
                    )
                ],
                S2.id: [],
            }
        )

        result = await _aggregator(repository).aggregate("40")

        assert result == {
            LINE_1.id: FormattedRoute(
                route_name="1 Line",
                destinations=(
                    DestinationStops(
                        destination="Lynnwood City Center",
                        stops=(
                            ResolvedStop(
                                name="Westlake",
                                lat=47.6114,
                                lon=-122.3368,
                                next_arrival=NOW + 5 * MINUTE,
                            ),
                            ResolvedStop(
                                name="Capitol Hill", lat=47.6191, lon=-122.3204, next_arrival=None
                            ),
                        ),
                    ),
                ),
            )
        }

    @pytest.mark.asyncio
    async def test_only_light_rail_routes_are_aggregated(self) -> None:
        """Given bus and light rail routes, when aggregating, then only light rail is keyed."""
        bus = Route(id="40_545", short_name="545", long_name=None, type=3)
        line_2 = Route(id="40_2LINE", short_name=None, long_name="2 Line", type=0)
        repository = FakeTransitRepository(routes=[LINE_1, bus, line_2])

        result = await _aggregator(repository).aggregate("40")

        assert list(result) == [LINE_1.id, line_2.id]
        assert result[line_2.id].route_name == "2 Line"

    @pytest.mark.asyncio
    async def test_when_route_listing_fails_then_raises_aggregation_error(self) -> None:
        """Given the route listing fails, when aggregating, then AggregationError is raised."""
        repository = FakeTransitRepository()
        repository.list_routes_for_agency = AsyncMock(  # type: ignore[method-assign]
            side_effect=TransientUpstreamError("timeout")
        )

        with pytest.raises(AggregationError, match="agency 40"):
            await _aggregator(repository).aggregate("40")

    @pytest.mark.asyncio
    async def test_when_stop_listing_fails_then_route_has_no_destinations(self) -> None:
        """Given a route whose stops cannot be listed, then it is served without destinations."""
        repository = _single_group_repository()
        repository.list_stops_for_route = AsyncMock(  # type: ignore[method-assign]
            side_effect=UpstreamProtocolError("bad shape")
        )

        result = await _aggregator(repository).aggregate("40")

        assert result == {LINE_1.id: FormattedRoute(route_name="1 Line", destinations=())}

    @pytest.mark.asyncio
    async def test_when_one_stop_fails_then_other_stops_are_intact(self) -> None:
        """Given arrivals failing for S1, when aggregating, then S1 is null and S2 resolves."""
        repository = _single_group_repository(
            arrivals={
                S2.id: [
                    ArrivalRecord(
                        stop_id=S2.id, route_id=LINE_1.id, scheduled_arrival_time=NOW + MINUTE
                    )
                ]
            },
            failing_stops={S1.id: TransientUpstreamError("503")},
        )

        result = await _aggregator(repository).aggregate("40")

        stops = result[LINE_1.id].destinations[0].stops
        assert [stop.name for stop in stops] == ["Westlake", "Capitol Hill"]
        assert stops[0].next_arrival is None
        assert stops[1].next_arrival == NOW + MINUTE

    @pytest.mark.asyncio
    async def test_unresolved_stops_are_reported_per_group(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Given one failing stop, when aggregating, then the group reports 1 of 2 unresolved."""
        repository = _single_group_repository(failing_stops={S2.id: TransientUpstreamError("503")})

        with caplog.at_level(logging.WARNING, logger=AGGREGATOR_LOGGER):
            await _aggregator(repository).aggregate("40")

        messages = [record.getMessage() for record in caplog.records]
        assert any("1 of 2 stop(s) unresolved" in message for message in messages)

    @pytest.mark.asyncio
    async def test_resolved_stops_are_not_reported(self, caplog: pytest.LogCaptureFixture) -> None:
        """Given every lookup succeeding, when aggregating, then nothing is reported unresolved."""
        repository = _single_group_repository()

        with caplog.at_level(logging.WARNING, logger=AGGREGATOR_LOGGER):
            await _aggregator(repository).aggregate("40")

        assert not any("unresolved" in record.getMessage() for record in caplog.records)

    @pytest.mark.asyncio
    async def test_only_first_grouping_is_used_and_unknown_stops_skipped(self) -> None:
        """Given two groupings and an unknown stop id, then only the first grouping's known stops."""
        northbound = StopGroup(id="0", name="Northgate", stop_ids=(S2.id, "40_missing", S1.id))
        southbound = StopGroup(id="1", name="Angle Lake", stop_ids=(S1.id,))
        ignored = StopGroup(id="9", name="Alternate", stop_ids=(S1.id,))
        repository = FakeTransitRepository(
            routes=[LINE_1],
            stops={LINE_1.id: ([[northbound, southbound], [ignored]], [S1, S2])},
        )

        result = await _aggregator(repository).aggregate("40")

        destinations = result[LINE_1.id].destinations
        assert [d.destination for d in destinations] == ["Northgate", "Angle Lake"]
        assert [s.name for s in destinations[0].stops] == ["Capitol Hill", "Westlake"]
        assert [s.name for s in destinations[1].stops] == ["Westlake"]

    @pytest.mark.asyncio
    async def test_arrivals_are_requested_with_configured_horizon(self) -> None:
        """Given a 30 minute horizon, when aggregating, then every lookup uses it."""
        repository = _single_group_repository()

        await _aggregator(repository, horizon_minutes=30).aggregate("40")

        assert repository.arrival_calls == [(S1.id, 30), (S2.id, 30)]

    @pytest.mark.asyncio
    async def test_throttle_pauses_between_stop_batches(self) -> None:
        """Given batch width 1 and two stops, when aggregating, then pauses once."""
        throttle = AsyncMock()
        repository = _single_group_repository()

        await _aggregator(repository, batch_width=1, throttle=throttle).aggregate("40")

        assert throttle.pause.await_count == 1


class TestLookupNextArrival:
    """Tests for RouteAggregator.lookup_next_arrival."""

    @pytest.mark.asyncio
    async def test_when_upstream_fails_then_returns_failed_lookup(self) -> None:
        """Given an upstream failure, when looking up, then a failed lookup is returned."""
        repository = FakeTransitRepository(failing_stops={S1.id: TransientUpstreamError("boom")})

        lookup = await _aggregator(repository).lookup_next_arrival(S1, LINE_1.id)

        assert not lookup.ok
        assert lookup.next_arrival is None
        assert lookup.error == "boom"

    @pytest.mark.asyncio
    async def test_when_nothing_due_then_returns_resolved_empty_lookup(self) -> None:
        """Given no arrivals, when looking up, then the lookup is ok with no arrival."""
        repository = FakeTransitRepository()

        lookup = await _aggregator(repository).lookup_next_arrival(S1, LINE_1.id)

        assert lookup.ok
        assert lookup.next_arrival is None
