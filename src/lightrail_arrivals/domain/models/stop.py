"""Stop and stop group domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Stop:
    """Represents a physical stop from a route's reference table."""

    id: str
    name: str
    lat: float
    lon: float


@dataclass(frozen=True)
class StopGroup:
    """A destination-oriented group of stops on a route.

    Stop ids are kept in the order the upstream lists them, which is the
    order vehicles serve them.
    """

    name: str
    stop_ids: tuple[str, ...]
    id: str | None = None
