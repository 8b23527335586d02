"""Application services (use cases) for light rail arrivals."""

from lightrail_arrivals.application.services.arrival_selector import select_next_arrival
from lightrail_arrivals.application.services.batch_scheduler import (
    FixedIntervalThrottle,
    run_batched,
)
from lightrail_arrivals.application.services.route_aggregator import (
    RouteAggregator,
    filter_light_rail,
)
from lightrail_arrivals.application.services.routes_service import RoutesService

__all__ = [
    "FixedIntervalThrottle",
    "RouteAggregator",
    "RoutesService",
    "filter_light_rail",
    "run_batched",
    "select_next_arrival",
]
