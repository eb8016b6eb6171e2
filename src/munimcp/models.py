"""Canonical Pydantic models shared across all munimcp modules.

This is the single source of truth for data shapes in the project. The models
fall into three groups:

**Configuration models** -- resolved from the environment and CLI flags:
    :class:`CacheConfig` and :class:`ServerConfig`.

**Upstream models** -- the JSON documents returned by the MUNI API, decoded
with their original camelCase field names via aliases:
    :class:`RouteInfo`, :class:`BoundingBox`, :class:`Stop`,
    :class:`Direction`, :class:`PathPoint`, :class:`Path`,
    :class:`RouteDetails`, and the prediction envelope
    :class:`PredictionResponse` with its parts :class:`Agency`,
    :class:`PredictionRoute`, :class:`PredictionStop`,
    :class:`PredictionDirection`, and :class:`PredictionValue`.

**Normalized models** -- flattened views handed to tool callers:
    :class:`Prediction`.

The upstream API omits fields freely, so every upstream field has a zero-value
default. Unknown fields are ignored.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


DEFAULT_BASE_URL = "https://api.prd-1.iq.live.umoiq.com"
DEFAULT_CACHE_TTL_SECONDS = 300.0


# --- Configuration ---


class CacheConfig(BaseModel):
    """Response cache settings handed to a transit client at construction."""

    enabled: bool = Field(default=True, description="Start with caching enabled")
    ttl_seconds: float = Field(
        default=DEFAULT_CACHE_TTL_SECONDS, description="Cache TTL in seconds"
    )


class ServerConfig(BaseModel):
    """Effective configuration for one muni-mcp process.

    Produced by :func:`~munimcp.config.resolve_config` from CLI flags, the
    ``MUNI_*`` environment variables, and these defaults.
    """

    base_url: str = Field(default=DEFAULT_BASE_URL, description="MUNI API base URL")
    api_key: Optional[str] = Field(
        default=None, description="API key passed through to the client"
    )
    cache: CacheConfig = Field(default_factory=CacheConfig)


# --- Upstream shapes ---


class UpstreamModel(BaseModel):
    """Base for models decoded from MUNI API JSON (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        """Dump with upstream field names, JSON-compatible values."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class RouteInfo(UpstreamModel):
    """Summary of one route as returned by the route list endpoint."""

    id: str = ""
    rev: int = 0
    title: str = ""
    description: str = ""
    color: str = ""
    text_color: str = ""
    hidden: bool = False
    timestamp: str = ""


class BoundingBox(UpstreamModel):
    """Geographic bounds of a route."""

    lat_min: float = 0.0
    lat_max: float = 0.0
    lon_min: float = 0.0
    lon_max: float = 0.0


class Stop(UpstreamModel):
    """A stop served by a route.

    ``directions`` holds the ids of the directions serving this stop.
    """

    id: str = ""
    lat: float = 0.0
    lon: float = 0.0
    name: str = ""
    code: Optional[str] = None
    hidden: bool = False
    show_destination_selector: bool = False
    directions: list[str] = Field(default_factory=list)


class Direction(UpstreamModel):
    """One direction of travel with its ordered stop ids."""

    id: str = ""
    short_name: str = ""
    name: str = ""
    use_for_ui: bool = False
    stops: list[str] = Field(default_factory=list)


class PathPoint(UpstreamModel):
    lat: float = 0.0
    lon: float = 0.0


class Path(UpstreamModel):
    """A polyline tracing part of the route geometry."""

    id: str = ""
    points: list[PathPoint] = Field(default_factory=list)


class RouteDetails(UpstreamModel):
    """Full description of a route: summary fields plus geometry and stops."""

    id: str = ""
    rev: int = 0
    title: str = ""
    description: str = ""
    color: str = ""
    text_color: str = ""
    hidden: bool = False
    bounding_box: BoundingBox = Field(default_factory=BoundingBox)
    stops: list[Stop] = Field(default_factory=list)
    directions: list[Direction] = Field(default_factory=list)
    paths: list[Path] = Field(default_factory=list)
    timestamp: str = ""


class PredictionDirection(UpstreamModel):
    id: str = ""
    name: str = ""
    destination_name: str = ""


class PredictionValue(UpstreamModel):
    """One vehicle estimate inside a prediction envelope.

    ``timestamp`` is milliseconds since the Unix epoch.
    """

    timestamp: int = 0
    minutes: int = 0
    affected_by_layover: bool = False
    is_departure: bool = False
    occupancy_status: int = 0
    occupancy_description: str = ""
    vehicles_in_consist: int = 0
    linked_vehicle_ids: str = ""
    vehicle_id: str = ""
    vehicle_type: str = ""
    direction: PredictionDirection = Field(default_factory=PredictionDirection)
    trip_id: str = ""
    delay: int = 0
    pred_using_navigation_tm: bool = False
    departure: bool = False


class PredictionRoute(UpstreamModel):
    id: str = ""
    title: str = ""
    description: str = ""
    color: str = ""
    text_color: str = ""
    hidden: bool = False


class PredictionStop(UpstreamModel):
    id: str = ""
    lat: float = 0.0
    lon: float = 0.0
    name: str = ""
    code: Optional[str] = None
    hidden: bool = False
    show_destination_selector: bool = False
    route: str = ""


class Agency(UpstreamModel):
    rev: int = 0
    id: str = ""
    name: str = ""
    short_name: str = ""


class PredictionResponse(UpstreamModel):
    """Envelope wrapping prediction values for one route/stop pair."""

    server_timestamp: int = 0
    nxbs2_redirect_url: str = ""
    agency: Agency = Field(default_factory=Agency)
    route: PredictionRoute = Field(default_factory=PredictionRoute)
    stop: PredictionStop = Field(default_factory=PredictionStop)
    values: list[PredictionValue] = Field(default_factory=list)


# --- Normalized output ---


class Prediction(BaseModel):
    """A flattened arrival/departure estimate for one vehicle."""

    vehicle_id: str
    minutes: int
    direction: str
    destination_name: str
    timestamp: datetime
    vehicle_type: str
    is_departure: bool

    @classmethod
    def from_value(cls, value: PredictionValue) -> Prediction:
        """Flatten an upstream :class:`PredictionValue`.

        The millisecond timestamp is truncated toward zero to whole seconds;
        sub-second precision is dropped.

        Raises:
            ValueError, OverflowError, OSError: The timestamp is outside the
                range :class:`datetime` can represent.
        """
        seconds = abs(value.timestamp) // 1000
        if value.timestamp < 0:
            seconds = -seconds
        return cls(
            vehicle_id=value.vehicle_id,
            minutes=value.minutes,
            direction=value.direction.name,
            destination_name=value.direction.destination_name,
            timestamp=datetime.fromtimestamp(seconds, tz=timezone.utc),
            vehicle_type=value.vehicle_type,
            is_departure=value.is_departure,
        )
