"""Domain layer - core models, ports and error taxonomy."""

from lightrail_arrivals.domain.models import (
    ArrivalRecord,
    FormattedRoute,
    Route,
    RoutesSnapshot,
    Stop,
    StopGroup,
)
from lightrail_arrivals.domain.ports import RoutesProvider, TransitRepository

__all__ = [
    "ArrivalRecord",
    "FormattedRoute",
    "Route",
    "RoutesProvider",
    "RoutesSnapshot",
    "Stop",
    "StopGroup",
    "TransitRepository",
]
