"""Ports (interfaces) for the ports-and-adapters architecture."""

from lightrail_arrivals.domain.ports.routes_provider import RoutesProvider
from lightrail_arrivals.domain.ports.transit_repository import TransitRepository

__all__ = ["RoutesProvider", "TransitRepository"]
