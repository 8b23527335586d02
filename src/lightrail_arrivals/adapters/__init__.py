"""Adapters layer - external system integrations."""

from lightrail_arrivals.adapters.config import AppConfig
from lightrail_arrivals.adapters.onebusaway_api import (
    OneBusAwayHttpClient,
    OneBusAwayTransitRepository,
)

__all__ = [
    "AppConfig",
    "OneBusAwayHttpClient",
    "OneBusAwayTransitRepository",
]
