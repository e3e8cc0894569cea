"""Elevation providers: request URL construction and response parsing.

Two response grammars are understood:

    Callback script (gpsvisualizer)::

        LocalElevationCallback(0.5,'srtm30', ...)

    The number is the reciprocal of the elevation in meters.

    JSON (open-elevation, google)::

        {"results": [{"elevation": 11.0, ...}], ...}
"""

import json
import logging
import math
import re
from abc import ABC, abstractmethod
from decimal import Decimal
from urllib.parse import urlencode

from sealevel_alarm.config import DEFAULT_OPEN_ELEVATION_URL
from sealevel_alarm.elevation.schemas import (
    ContentKind,
    Coordinate,
    Elevation,
    ElevationResponse,
    Provider,
)
from sealevel_alarm.exceptions import (
    DivideByZeroElevationError,
    MalformedResponseError,
    MissingFieldError,
    ProviderConfigurationError,
    UnrecognizedFormatError,
)

logger = logging.getLogger(__name__)

GPS_VISUALIZER_URL = "http://www.gpsvisualizer.com/elevation_data/elev2018.js"
GOOGLE_ELEVATION_URL = "https://maps.googleapis.com/maps/api/elevation/json"

_CALLBACK_PREFIX = re.compile(r"[A-Za-z_$][\w$.]*\(")
_CALLBACK_ARGS = re.compile(
    r"""
    \s*(?P<number>[^,]*?)\s*,     # first field, up to the first comma
    [^']*'(?P<label>[^']*)'       # first single-quoted string after it
    """,
    re.VERBOSE,
)
_DECIMAL = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_PREVIEW_LENGTH = 80


def format_degrees(value: float) -> str:
    """Render a coordinate as a plain decimal number, never in exponent form."""
    return format(Decimal(repr(float(value))), "f")


def location_param(coordinate: Coordinate) -> str:
    """Return the 'lat,lon' pair used by every known provider."""
    return f"{format_degrees(coordinate.latitude)},{format_degrees(coordinate.longitude)}"


class ElevationProvider(ABC):
    """A third-party elevation service with its own URL scheme."""

    @abstractmethod
    def build_request_url(self, coordinate: Coordinate) -> str:
        raise NotImplementedError


class OpenElevationProvider(ElevationProvider):
    """open-elevation lookup API, public or self-hosted."""

    def __init__(self, base_url: str = DEFAULT_OPEN_ELEVATION_URL) -> None:
        self.base_url = base_url

    def build_request_url(self, coordinate: Coordinate) -> str:
        query = urlencode({"locations": location_param(coordinate)}, safe=",")
        return f"{self.base_url}?{query}"


class GpsVisualizerProvider(ElevationProvider):
    """gpsvisualizer.com script endpoint; answers with a callback script."""

    def __init__(self, base_url: str = GPS_VISUALIZER_URL) -> None:
        self.base_url = base_url

    def build_request_url(self, coordinate: Coordinate) -> str:
        query = urlencode({"coords": location_param(coordinate)}, safe=",")
        return f"{self.base_url}?{query}"


class GoogleElevationProvider(ElevationProvider):
    """Google Maps Elevation API. Needs an API key."""

    def __init__(self, api_key: str | None, base_url: str = GOOGLE_ELEVATION_URL) -> None:
        self.api_key = api_key
        self.base_url = base_url

    def build_request_url(self, coordinate: Coordinate) -> str:
        if not self.api_key:
            raise ProviderConfigurationError("The google provider requires GOOGLE_API_KEY")
        query = urlencode(
            {"locations": location_param(coordinate), "key": self.api_key},
            safe=",",
        )
        return f"{self.base_url}?{query}"


def classify_body(text: str) -> ContentKind:
    """Detect which response grammar a decoded body uses."""
    stripped = text.lstrip()
    if _CALLBACK_PREFIX.match(stripped):
        return ContentKind.CALLBACK_SCRIPT
    if stripped.startswith(("{", "[")):
        return ContentKind.JSON
    return ContentKind.UNRECOGNIZED


def parse_callback_script(text: str) -> Elevation:
    """Parse ``Name(<reciprocal>,'<label>',...)`` into an Elevation.

    Raises:
        MalformedResponseError: If the number or label cannot be extracted.
        DivideByZeroElevationError: If the number is zero or too small to invert.
    """
    _, _, arguments = text.partition("(")
    if "," not in arguments:
        raise MalformedResponseError(f"Callback arguments have no comma: {arguments!r}")

    match = _CALLBACK_ARGS.match(arguments)
    if match is None:
        raise MalformedResponseError(f"Callback arguments have no quoted label: {arguments!r}")

    number_str = match.group("number")
    if not _DECIMAL.fullmatch(number_str):
        raise MalformedResponseError(f"Callback value is not a number: {number_str!r}")

    number = float(number_str)
    if not math.isfinite(number):
        raise MalformedResponseError(f"Callback value is out of range: {number_str!r}")
    if number == 0:
        raise DivideByZeroElevationError()

    meters = 1.0 / number
    if not math.isfinite(meters):
        raise DivideByZeroElevationError()

    return Elevation(meters=meters, source=match.group("label"))


def parse_json_results(text: str) -> Elevation:
    """Parse ``{"results": [{"elevation": <number>}]}`` into an Elevation.

    Raises:
        UnrecognizedFormatError: If the text is not valid JSON.
        MissingFieldError: If part of the expected structure is absent.
        MalformedResponseError: If the elevation is not a number.
    """
    try:
        document = json.loads(text)
    except ValueError as exc:
        raise UnrecognizedFormatError(text[:_PREVIEW_LENGTH]) from exc

    if not isinstance(document, dict):
        raise MissingFieldError("object")

    results = document.get("results")
    if not isinstance(results, list):
        raise MissingFieldError("results")
    if not results or not isinstance(results[0], dict):
        raise MissingFieldError("results[0]")

    first = results[0]
    if "elevation" not in first:
        raise MissingFieldError("results[0].elevation")

    value = first["elevation"]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedResponseError(f"Elevation is not a number: {value!r}")
    try:
        meters = float(value)
    except OverflowError as exc:
        raise MalformedResponseError("Elevation is out of range") from exc
    if not math.isfinite(meters):
        raise MalformedResponseError(f"Elevation is not a number: {value!r}")

    return Elevation(meters=meters)


class ElevationCodec:
    """Builds provider URLs and turns provider responses into elevations.

    Providers live in a registry keyed by :class:`Provider`, so new services
    can be added with :meth:`register` without touching the runner or the
    monitor.
    """

    def __init__(
        self,
        *,
        google_api_key: str | None = None,
        open_elevation_url: str = DEFAULT_OPEN_ELEVATION_URL,
    ) -> None:
        self._providers: dict[Provider, ElevationProvider] = {
            Provider.OPEN_ELEVATION: OpenElevationProvider(open_elevation_url),
            Provider.GPS_VISUALIZER: GpsVisualizerProvider(),
            Provider.GOOGLE: GoogleElevationProvider(google_api_key),
        }

    def register(self, provider_id: Provider, provider: ElevationProvider) -> None:
        self._providers[provider_id] = provider

    def build_request_url(self, coordinate: Coordinate, provider: Provider) -> str:
        """Build the lookup URL for a coordinate.

        Raises:
            ProviderConfigurationError: If the provider is unknown or misconfigured.
        """
        try:
            elevation_provider = self._providers[provider]
        except KeyError as exc:
            raise ProviderConfigurationError(f"Unknown elevation provider: {provider}") from exc
        return elevation_provider.build_request_url(coordinate)

    def parse_response(self, body: bytes) -> Elevation:
        """Parse a provider response body into an Elevation.

        Raises:
            ParseError: One of its subclasses, depending on what failed.
        """
        text = body.decode("utf-8", errors="replace")
        response = ElevationResponse(raw_body=body, content_kind=classify_body(text))

        if response.content_kind is ContentKind.CALLBACK_SCRIPT:
            elevation = parse_callback_script(text)
            logger.debug("Elevation data source", extra={"source": elevation.source})
            return elevation
        if response.content_kind is ContentKind.JSON:
            return parse_json_results(text)

        raise UnrecognizedFormatError(text[:_PREVIEW_LENGTH])
