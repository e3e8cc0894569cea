"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager

from fastapi import FastAPI

from sealevel_alarm.config import Settings
from sealevel_alarm.elevation.monitor import ElevationMonitor
from sealevel_alarm.elevation.providers import ElevationCodec
from sealevel_alarm.elevation.routes import router
from sealevel_alarm.elevation.runner import HttpRequestRunner
from sealevel_alarm.elevation.schemas import Provider, parse_location
from sealevel_alarm.elevation.threshold import ThresholdEvaluator
from sealevel_alarm.exceptions import ProviderConfigurationError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)


def build_monitor(settings: Settings) -> tuple[ElevationMonitor, HttpRequestRunner]:
    """Wire codec, runner and evaluator into a monitor.

    Raises:
        ProviderConfigurationError: If the configured provider is unknown.
    """
    try:
        provider = Provider(settings.provider)
    except ValueError as exc:
        raise ProviderConfigurationError(
            f"Unknown elevation provider: {settings.provider!r}"
        ) from exc

    codec = ElevationCodec(
        google_api_key=settings.google_api_key,
        open_elevation_url=settings.open_elevation_url,
    )
    runner = HttpRequestRunner(
        max_redirects=settings.max_redirects,
        timeout=settings.request_timeout,
        executor=ThreadPoolExecutor(max_workers=settings.max_workers),
    )
    evaluator = ThresholdEvaluator(settings.threshold_meters)
    return ElevationMonitor(codec, runner, evaluator, provider), runner


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application startup and shutdown.

    Builds the elevation pipeline on startup, optionally requests the
    elevation of a configured start location, and releases the HTTP
    session and thread pool on teardown.
    """
    settings = Settings.from_env()
    initial = parse_location(settings.initial_location) if settings.initial_location else None
    monitor, runner = build_monitor(settings)
    app.state.elevation_monitor = monitor
    logger.info("Elevation monitor initialized", extra={"provider": monitor.provider.value})

    if initial is not None:
        monitor.on_position_updated(initial)

    yield
    await monitor.shutdown()
    runner.close()
    logger.info("Elevation monitor shut down")


app = FastAPI(title="Sea Level Alarm", lifespan=lifespan)
app.include_router(router)
