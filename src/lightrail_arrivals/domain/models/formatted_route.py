"""Output models: the route -> destination -> stop tree served to clients."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

_OUTPUT_CONFIG = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class ResolvedStop(BaseModel):
    """A stop annotated with the next arrival of one route, if any."""

    model_config = _OUTPUT_CONFIG

    name: str
    lat: float
    lon: float
    next_arrival: int | None = None


class DestinationStops(BaseModel):
    """The resolved stops of one destination group, in travel order."""

    model_config = _OUTPUT_CONFIG

    destination: str
    stops: tuple[ResolvedStop, ...] = ()


class FormattedRoute(BaseModel):
    """A light rail route with its destinations."""

    model_config = _OUTPUT_CONFIG

    route_name: str
    destinations: tuple[DestinationStops, ...] = ()


class RoutesSnapshot(BaseModel):
    """The complete aggregated payload at one point in time.

    Snapshots are immutable and replaced wholesale in the cache.
    """

    model_config = _OUTPUT_CONFIG

    routes: dict[str, FormattedRoute]
    captured_at: float

    def to_payload(self) -> dict[str, dict]:
        """Render the routes mapping in the shape served over HTTP."""
        return {
            route_id: route.model_dump(mode="json", by_alias=True)
            for route_id, route in self.routes.items()
        }
