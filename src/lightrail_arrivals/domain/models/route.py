"""Route domain model."""

from dataclasses import dataclass

# Vehicle-type code the upstream API uses for light rail.
LIGHT_RAIL_ROUTE_TYPE = 0


@dataclass(frozen=True)
class Route:
    """Represents a transit route as listed for an agency."""

    id: str
    short_name: str | None
    long_name: str | None
    type: int

    @property
    def is_light_rail(self) -> bool:
        """Whether this route is served by light rail vehicles."""
        return self.type == LIGHT_RAIL_ROUTE_TYPE

    @property
    def display_name(self) -> str:
        """Short name, falling back to the long name, then "Unknown"."""
        return self.short_name or self.long_name or "Unknown"
