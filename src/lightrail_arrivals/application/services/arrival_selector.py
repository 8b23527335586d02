"""Selection of the next arrival of a route at a stop."""

from collections.abc import Iterable

from lightrail_arrivals.domain.models import ArrivalRecord


def _record_candidate(record: ArrivalRecord, now: int) -> int | None:
    """Earliest of the record's predicted/scheduled times that is still ahead."""
    upcoming = [
        value
        for value in (record.predicted_arrival_time, record.scheduled_arrival_time)
        if value is not None and value > now
    ]
    return min(upcoming) if upcoming else None


def select_next_arrival(records: Iterable[ArrivalRecord], route_id: str, now: int) -> int | None:
    """Pick the soonest future arrival of ``route_id`` among ``records``.

    Times at or before ``now`` belong to vehicles that already left and are
    ignored, so the result is always strictly greater than ``now``.

    Args:
        records: Raw arrival records for one stop (any routes).
        route_id: Route whose arrivals are of interest.
        now: Current time in epoch milliseconds.

    Returns:
        The earliest qualifying time in epoch milliseconds, or None.
    """
    best: int | None = None
    for record in records:
        if record.route_id != route_id:
            continue
        candidate = _record_candidate(record, now)
        if candidate is not None and (best is None or candidate < best):
            best = candidate
    return best
