"""Pydantic schemas for coordinates, elevation requests and alarm results."""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from sealevel_alarm.exceptions import AppError, InvalidCoordinateError


class Provider(str, Enum):
    """Known third-party elevation services."""

    OPEN_ELEVATION = "open-elevation"
    GPS_VISUALIZER = "gpsvisualizer"
    GOOGLE = "google"


class ContentKind(str, Enum):
    CALLBACK_SCRIPT = "callback-script"
    JSON = "json"
    UNRECOGNIZED = "unrecognized"


class AlarmState(str, Enum):
    SAFE = "safe"
    ALARM = "alarm"


class MonitorState(str, Enum):
    """States of a single elevation attempt inside the monitor."""

    IDLE = "idle"
    REQUESTING = "requesting"
    PARSING_SUCCESS = "parsing-success"
    PARSING_FAILURE = "parsing-failure"
    TRANSPORT_FAILURE = "transport-failure"


class Coordinate(BaseModel):
    """A geographic position in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class ElevationRequest(BaseModel):
    """A single outstanding lookup against a provider."""

    model_config = ConfigDict(frozen=True)

    provider: Provider
    url: str
    issued_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ElevationResponse(BaseModel):
    """A provider response body tagged with its detected grammar."""

    raw_body: bytes
    content_kind: ContentKind


class Elevation(BaseModel):
    """Height above sea level in meters."""

    meters: float
    source: str | None = None


class ElevationOutcome(BaseModel):
    """What one elevation attempt ended with."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    state: MonitorState
    request: ElevationRequest | None = None
    elevation: Elevation | None = None
    alarm: AlarmState | None = None
    error: AppError | None = None


class PositionErrorReport(BaseModel):
    """Error notification forwarded by a position source."""

    error: str


class AcceptedResponse(BaseModel):
    status: str = "accepted"


class MonitorStatus(BaseModel):
    """Response schema for the monitor status endpoint."""

    state: MonitorState
    provider: str
    threshold_meters: float


def parse_location(location: str) -> Coordinate:
    """Parse a 'lat,lon' string into a Coordinate.

    Args:
        location: Comma-separated latitude and longitude, e.g. '41.161758,-8.583933'.

    Returns:
        The parsed Coordinate.

    Raises:
        InvalidCoordinateError: If the format is wrong or values are out of range.
    """
    try:
        lat_str, lon_str = location.split(",")
        latitude = float(lat_str.strip())
        longitude = float(lon_str.strip())
    except ValueError as exc:
        raise InvalidCoordinateError(
            f"Invalid location format: '{location}'. Expected 'latitude,longitude'."
        ) from exc

    if not (-90 <= latitude <= 90):
        raise InvalidCoordinateError(
            f"Invalid latitude: {latitude}. Must be between -90 and 90."
        )
    if not (-180 <= longitude <= 180):
        raise InvalidCoordinateError(
            f"Invalid longitude: {longitude}. Must be between -180 and 180."
        )

    return Coordinate(latitude=latitude, longitude=longitude)
