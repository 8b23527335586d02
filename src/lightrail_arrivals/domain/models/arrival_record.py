"""Arrival record domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ArrivalRecord:
    """A predicted and/or scheduled arrival of a route's vehicle at a stop.

    Times are epoch milliseconds. Either may be missing.
    """

    stop_id: str
    route_id: str
    predicted_arrival_time: int | None = None
    scheduled_arrival_time: int | None = None
