"""Tests for the sea-level threshold evaluator."""

import pytest

from sealevel_alarm.elevation.schemas import AlarmState
from sealevel_alarm.elevation.threshold import THRESHOLD_METERS, ThresholdEvaluator


class TestEvaluate:
    def test_default_threshold(self, evaluator: ThresholdEvaluator) -> None:
        assert evaluator.threshold_meters == THRESHOLD_METERS == 2.0

    @pytest.mark.parametrize(
        ("elevation", "expected"),
        [
            (1.9, AlarmState.ALARM),
            (2.0, AlarmState.SAFE),
            (2.1, AlarmState.SAFE),
            (-430.0, AlarmState.ALARM),
            (0.0, AlarmState.ALARM),
            (8848.0, AlarmState.SAFE),
        ],
    )
    def test_alarm_below_threshold(
        self, evaluator: ThresholdEvaluator, elevation: float, expected: AlarmState
    ) -> None:
        assert evaluator.evaluate(elevation) is expected

    def test_repeats_alarm_for_same_elevation(self, evaluator: ThresholdEvaluator) -> None:
        results = [evaluator.evaluate(1.0) for _ in range(3)]

        assert results == [AlarmState.ALARM] * 3

    def test_custom_threshold(self) -> None:
        evaluator = ThresholdEvaluator(threshold_meters=0.5)

        assert evaluator.evaluate(0.4) is AlarmState.ALARM
        assert evaluator.evaluate(1.9) is AlarmState.SAFE
