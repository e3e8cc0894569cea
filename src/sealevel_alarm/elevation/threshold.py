"""Sea-level threshold evaluation."""

from sealevel_alarm.elevation.schemas import AlarmState

# Most extreme projected sea-level rise by 2100.
THRESHOLD_METERS = 2.0


class ThresholdEvaluator:
    """Compares elevations against a fixed threshold.

    Stateless: every evaluation is independent, so a low elevation raises an
    alarm each time it is observed.
    """

    def __init__(self, threshold_meters: float = THRESHOLD_METERS) -> None:
        self._threshold_meters = threshold_meters

    @property
    def threshold_meters(self) -> float:
        return self._threshold_meters

    def evaluate(self, elevation: float) -> AlarmState:
        if elevation < self._threshold_meters:
            return AlarmState.ALARM
        return AlarmState.SAFE
