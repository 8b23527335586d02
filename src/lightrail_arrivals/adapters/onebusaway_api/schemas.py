"""Pydantic schemas validating OneBusAway response payloads.

Only the fields this service reads are declared; everything else is ignored.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_SCHEMA_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class RouteSchema(BaseModel):
    model_config = _SCHEMA_CONFIG

    id: str
    short_name: str | None = None
    long_name: str | None = None
    type: int


class RoutesForAgencyData(BaseModel):
    model_config = _SCHEMA_CONFIG

    routes: list[RouteSchema] = Field(alias="list")


class StopGroupNameSchema(BaseModel):
    model_config = _SCHEMA_CONFIG

    name: str


class StopGroupSchema(BaseModel):
    model_config = _SCHEMA_CONFIG

    id: str | None = None
    name: StopGroupNameSchema
    stop_ids: list[str] = []


class StopGroupingSchema(BaseModel):
    model_config = _SCHEMA_CONFIG

    stop_groups: list[StopGroupSchema] = []


class StopsForRouteEntry(BaseModel):
    model_config = _SCHEMA_CONFIG

    route_id: str | None = None
    stop_groupings: list[StopGroupingSchema] = []


class StopSchema(BaseModel):
    model_config = _SCHEMA_CONFIG

    id: str
    name: str
    lat: float
    lon: float


class References(BaseModel):
    model_config = _SCHEMA_CONFIG

    stops: list[StopSchema] = []


class StopsForRouteData(BaseModel):
    model_config = _SCHEMA_CONFIG

    entry: StopsForRouteEntry
    references: References = Field(default_factory=References)


class ArrivalSchema(BaseModel):
    model_config = _SCHEMA_CONFIG

    route_id: str
    stop_id: str | None = None
    predicted_arrival_time: int | None = None
    scheduled_arrival_time: int | None = None


class ArrivalsEntry(BaseModel):
    model_config = _SCHEMA_CONFIG

    arrivals_and_departures: list[ArrivalSchema] = []


class ArrivalsForStopData(BaseModel):
    model_config = _SCHEMA_CONFIG

    entry: ArrivalsEntry
