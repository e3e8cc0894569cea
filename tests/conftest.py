"""Shared test fixtures."""

from concurrent.futures import ThreadPoolExecutor
from collections.abc import Generator

import pytest

from sealevel_alarm.config import Settings
from sealevel_alarm.elevation.providers import ElevationCodec
from sealevel_alarm.elevation.schemas import Coordinate
from sealevel_alarm.elevation.threshold import ThresholdEvaluator

PORTO = Coordinate(latitude=41.161758, longitude=-8.583933)


@pytest.fixture
def settings() -> Settings:
    """Create test settings with conservative limits."""
    return Settings(
        provider="gpsvisualizer",
        google_api_key=None,
        threshold_meters=2.0,
        max_redirects=5,
        request_timeout=1.0,
        max_workers=2,
    )


@pytest.fixture
def porto() -> Coordinate:
    return PORTO


@pytest.fixture
def codec() -> ElevationCodec:
    return ElevationCodec(google_api_key="test-key")


@pytest.fixture
def evaluator() -> ThresholdEvaluator:
    return ThresholdEvaluator()


@pytest.fixture
def executor() -> Generator[ThreadPoolExecutor, None, None]:
    """A small thread pool shut down after the test."""
    pool = ThreadPoolExecutor(max_workers=4)
    yield pool
    pool.shutdown(wait=True, cancel_futures=True)
