"""Elevation monitor: turns position events into sea-level alarms."""

import asyncio
import logging
from collections.abc import Callable

from sealevel_alarm.elevation.providers import ElevationCodec
from sealevel_alarm.elevation.runner import HttpRequestRunner
from sealevel_alarm.elevation.schemas import (
    AlarmState,
    Coordinate,
    Elevation,
    ElevationOutcome,
    ElevationRequest,
    MonitorState,
    Provider,
)
from sealevel_alarm.elevation.threshold import ThresholdEvaluator
from sealevel_alarm.exceptions import (
    ParseError,
    ProviderConfigurationError,
    RequestSupersededError,
    TransportError,
)

logger = logging.getLogger(__name__)

AlarmListener = Callable[[Elevation, AlarmState], None]


def log_alarm(elevation: Elevation, alarm: AlarmState) -> None:
    """Default alarm listener."""
    if alarm is AlarmState.ALARM:
        logger.warning(
            "Sea level alarm: this land is projected to be under water by 2100",
            extra={"elevation_m": elevation.meters},
        )


class ElevationMonitor:
    """Requests the elevation of every reported position and evaluates it.

    A coordinate arriving while a request is outstanding supersedes it: the
    new request is issued at once and the older result is dropped by the
    runner. Failures are logged and never retried; the next position event
    is the only trigger for another attempt.
    """

    def __init__(
        self,
        codec: ElevationCodec,
        runner: HttpRequestRunner,
        evaluator: ThresholdEvaluator,
        provider: Provider,
    ) -> None:
        self._codec = codec
        self._runner = runner
        self._evaluator = evaluator
        self._provider = provider
        self._state = MonitorState.IDLE
        self._listeners: list[AlarmListener] = [log_alarm]
        self._tasks: set[asyncio.Task[ElevationOutcome | None]] = set()

    @property
    def state(self) -> MonitorState:
        return self._state

    @property
    def provider(self) -> Provider:
        return self._provider

    @property
    def threshold_meters(self) -> float:
        return self._evaluator.threshold_meters

    def add_alarm_listener(self, listener: AlarmListener) -> None:
        self._listeners.append(listener)

    # Position source callbacks

    def on_position_updated(self, coordinate: Coordinate) -> "asyncio.Task[ElevationOutcome | None]":
        """Schedule an elevation lookup for a new position on the running loop."""
        logger.info(
            "Position updated",
            extra={"latitude": coordinate.latitude, "longitude": coordinate.longitude},
        )
        task = asyncio.get_running_loop().create_task(self.request_elevation(coordinate))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def on_position_update_timeout(self) -> None:
        logger.warning("Position update timed out")

    def on_position_error(self, error: str) -> None:
        logger.error("Position source error", extra={"error": error})

    async def request_elevation(self, coordinate: Coordinate) -> ElevationOutcome | None:
        """Run one elevation attempt to completion.

        Args:
            coordinate: Position to look up.

        Returns:
            The attempt's outcome, or None if a newer coordinate superseded it.
        """
        try:
            return await self._attempt(coordinate)
        except Exception:
            logger.exception("Elevation attempt failed unexpectedly")
            return self._finish(ElevationOutcome(state=MonitorState.IDLE))

    async def _attempt(self, coordinate: Coordinate) -> ElevationOutcome | None:
        try:
            url = self._codec.build_request_url(coordinate, self._provider)
        except ProviderConfigurationError as exc:
            logger.error("Cannot build elevation request", extra={"error": str(exc)})
            return self._finish(ElevationOutcome(state=MonitorState.IDLE, error=exc))

        request = ElevationRequest(provider=self._provider, url=url)
        logger.info(
            "Requesting elevation",
            extra={
                "latitude": coordinate.latitude,
                "longitude": coordinate.longitude,
                "provider": self._provider.value,
            },
        )
        self._transition(MonitorState.REQUESTING)

        try:
            body = await self._runner.execute(url)
        except RequestSupersededError:
            return None
        except TransportError as exc:
            logger.error(
                "Elevation request failed",
                extra={"url": exc.url, "status_code": exc.status_code, "error": str(exc)},
            )
            return self._finish(
                ElevationOutcome(state=MonitorState.TRANSPORT_FAILURE, request=request, error=exc)
            )

        try:
            elevation = self._codec.parse_response(body)
        except ParseError as exc:
            logger.error(
                "Could not parse elevation response",
                extra={"code": exc.code, "error": str(exc)},
            )
            return self._finish(
                ElevationOutcome(state=MonitorState.PARSING_FAILURE, request=request, error=exc)
            )

        alarm = self._evaluator.evaluate(elevation.meters)
        logger.info("Elevation changed", extra={"elevation_m": elevation.meters, "alarm": alarm.value})
        self._notify(elevation, alarm)
        return self._finish(
            ElevationOutcome(
                state=MonitorState.PARSING_SUCCESS,
                request=request,
                elevation=elevation,
                alarm=alarm,
            )
        )

    def _finish(self, outcome: ElevationOutcome) -> ElevationOutcome:
        if outcome.state is not MonitorState.IDLE:
            self._transition(outcome.state)
        self._transition(MonitorState.IDLE)
        return outcome

    def _transition(self, state: MonitorState) -> None:
        logger.debug("Monitor state change", extra={"from_state": self._state.value, "to_state": state.value})
        self._state = state

    def _notify(self, elevation: Elevation, alarm: AlarmState) -> None:
        for listener in self._listeners:
            try:
                listener(elevation, alarm)
            except Exception:
                logger.exception("Alarm listener failed")

    async def shutdown(self) -> None:
        """Cancel every pending lookup, superseded ones included."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
        self._state = MonitorState.IDLE
