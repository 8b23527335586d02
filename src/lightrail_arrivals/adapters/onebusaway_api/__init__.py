"""OneBusAway API adapters."""

from lightrail_arrivals.adapters.onebusaway_api.http_client import OneBusAwayHttpClient
from lightrail_arrivals.adapters.onebusaway_api.transit_repository import (
    OneBusAwayTransitRepository,
)

__all__ = ["OneBusAwayHttpClient", "OneBusAwayTransitRepository"]
