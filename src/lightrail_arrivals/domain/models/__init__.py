"""Domain models for light rail arrivals."""

from lightrail_arrivals.domain.models.arrival_lookup import ArrivalLookup
from lightrail_arrivals.domain.models.arrival_record import ArrivalRecord
from lightrail_arrivals.domain.models.formatted_route import (
    DestinationStops,
    FormattedRoute,
    ResolvedStop,
    RoutesSnapshot,
)
from lightrail_arrivals.domain.models.route import LIGHT_RAIL_ROUTE_TYPE, Route
from lightrail_arrivals.domain.models.stop import Stop, StopGroup

__all__ = [
    "LIGHT_RAIL_ROUTE_TYPE",
    "ArrivalLookup",
    "ArrivalRecord",
    "DestinationStops",
    "FormattedRoute",
    "ResolvedStop",
    "Route",
    "RoutesSnapshot",
    "Stop",
    "StopGroup",
]
