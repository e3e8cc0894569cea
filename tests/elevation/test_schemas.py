"""Tests for elevation schemas."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from sealevel_alarm.elevation.schemas import (
    Coordinate,
    Elevation,
    ElevationRequest,
    Provider,
    parse_location,
)
from sealevel_alarm.exceptions import InvalidCoordinateError


class TestCoordinate:
    def test_valid_coordinate(self) -> None:
        coordinate = Coordinate(latitude=41.161758, longitude=-8.583933)

        assert coordinate.latitude == 41.161758
        assert coordinate.longitude == -8.583933

    def test_is_immutable(self) -> None:
        coordinate = Coordinate(latitude=1.0, longitude=2.0)

        with pytest.raises(ValidationError):
            coordinate.latitude = 3.0  # type: ignore[misc]

    def test_rejects_latitude_out_of_range(self) -> None:
        with pytest.raises(ValidationError):
            Coordinate(latitude=91.0, longitude=0.0)

    def test_rejects_longitude_out_of_range(self) -> None:
        with pytest.raises(ValidationError):
            Coordinate(latitude=0.0, longitude=-181.0)

    def test_rejects_missing_fields(self) -> None:
        with pytest.raises(ValidationError):
            Coordinate(latitude=51.5)  # type: ignore[call-arg]


class TestElevationRequest:
    def test_issued_at_defaults_to_utc_now(self) -> None:
        request = ElevationRequest(provider=Provider.GPS_VISUALIZER, url="http://elev.test")

        assert request.issued_at.utcoffset() == timedelta(0)


class TestElevation:
    def test_negative_elevation(self) -> None:
        assert Elevation(meters=-430.0).meters == -430.0

    def test_source_is_optional(self) -> None:
        assert Elevation(meters=1.0).source is None


class TestParseLocation:
    def test_parses_valid_location(self) -> None:
        assert parse_location("41.161758,-8.583933") == Coordinate(
            latitude=41.161758, longitude=-8.583933
        )

    def test_handles_whitespace(self) -> None:
        coordinate = parse_location(" 48.8 , 2.3 ")

        assert coordinate.latitude == 48.8
        assert coordinate.longitude == 2.3

    def test_rejects_invalid_format(self) -> None:
        with pytest.raises(InvalidCoordinateError, match="Invalid location format"):
            parse_location("not-a-coordinate")

    def test_rejects_single_value(self) -> None:
        with pytest.raises(InvalidCoordinateError, match="Invalid location format"):
            parse_location("51.5")

    def test_rejects_latitude_out_of_range(self) -> None:
        with pytest.raises(InvalidCoordinateError, match="Invalid latitude"):
            parse_location("-91.0,0.0")

    def test_rejects_longitude_out_of_range(self) -> None:
        with pytest.raises(InvalidCoordinateError, match="Invalid longitude"):
            parse_location("0.0,181.0")

    def test_accepts_boundaries(self) -> None:
        assert parse_location("90.0,180.0").latitude == 90.0
        assert parse_location("-90.0,-180.0").longitude == -180.0
