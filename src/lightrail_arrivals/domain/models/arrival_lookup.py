"""Outcome of looking up the next arrival at a single stop."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ArrivalLookup:
    """Either a resolved (possibly empty) next arrival, or a failed lookup.

    A resolved lookup with ``next_arrival=None`` means nothing is due within the
    horizon. A failed lookup carries the reason and never a timestamp.
    """

    next_arrival: int | None
    error: str | None = None

    @classmethod
    def resolved(cls, next_arrival: int | None) -> ArrivalLookup:
        return cls(next_arrival=next_arrival)

    @classmethod
    def failed(cls, reason: str) -> ArrivalLookup:
        return cls(next_arrival=None, error=reason)

    @property
    def ok(self) -> bool:
        return self.error is None
