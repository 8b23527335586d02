"""Error taxonomy shared by all layers."""


class LightRailArrivalsError(Exception):
    """Base class for errors raised by this package."""


class UpstreamError(LightRailArrivalsError):
    """A call to the upstream transit API failed."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class TransientUpstreamError(UpstreamError):
    """Network failure, timeout, rate limiting or 5xx. Safe to retry."""


class UpstreamProtocolError(UpstreamError):
    """The upstream answered with something we cannot interpret. Not retried."""


class AggregationError(LightRailArrivalsError):
    """The route listing failed, so no snapshot can be built."""


class CacheBackendError(LightRailArrivalsError):
    """The snapshot cache backend failed. Callers treat this as a miss."""


class PerStopResolutionError(LightRailArrivalsError):
    """Arrivals for a single stop could not be resolved."""

    def __init__(self, stop_id: str, cause: Exception) -> None:
        super().__init__(f"Could not resolve arrivals for stop {stop_id}: {cause}")
        self.stop_id = stop_id
        self.cause = cause
