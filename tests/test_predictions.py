"""
Tests for metric-trend predictions.
"""
import datetime

from models import DeliveryType, PredictionPolarity, RecoveryMetricSample
from recovery.metrics import rolling_means
from recovery.predictions import START_TRACKING, predict_trends
from recovery.thresholds import RecoveryThresholds


def make_samples(values, start=datetime.date(2024, 5, 20)):
    """values: (energy, mood, sleep) newest first."""
    return [
        RecoveryMetricSample(
            date=start - datetime.timedelta(days=i),
            energy_level=energy,
            mood_score=mood,
            sleep_hours=sleep,
        )
        for i, (energy, mood, sleep) in enumerate(values)
    ]


def titles(predictions):
    return [p.title for p in predictions]


class TestRollingMeans:

    def test_empty(self):
        assert rolling_means([]) is None

    def test_window_limits_to_newest_seven(self):
        samples = make_samples([(8, 8, 8)] * 7 + [(1, 1, 0)] * 3)
        means = rolling_means(samples)
        assert means.energy == 8
        assert means.sample_count == 7


class TestPredictTrends:

    def test_no_samples_start_tracking_only(self):
        assert predict_trends([], 3, DeliveryType.VAGINAL) == [START_TRACKING]
        assert START_TRACKING.polarity == PredictionPolarity.NEUTRAL

    def test_strong_metrics_early(self):
        result = predict_trends(make_samples([(8, 8, 8)] * 3), 10, DeliveryType.VAGINAL)
        assert titles(result) == [
            "Excellent Energy Recovery",
            "Positive Mood Trend",
            "Good Sleep Recovery",
            "Faster Recovery",
        ]
        assert all(p.polarity == PredictionPolarity.POSITIVE for p in result)

    def test_low_metrics(self):
        result = predict_trends(make_samples([(3, 3, 4)] * 3), 10, DeliveryType.VAGINAL)
        assert titles(result) == ["Energy Support Needed", "Mood Support", "Sleep Optimization"]
        assert all(p.polarity == PredictionPolarity.INSIGHT for p in result)

    def test_middle_band_produces_nothing(self):
        result = predict_trends(make_samples([(5, 5, 6)] * 3), 40, DeliveryType.VAGINAL)
        assert result == []

    def test_boundaries_inclusive(self):
        result = predict_trends(make_samples([(7, 4, 5)]), 40, DeliveryType.VAGINAL)
        assert "Excellent Energy Recovery" in titles(result)
        assert "Mood Support" in titles(result)
        # sleep 5 is not below 5
        assert "Sleep Optimization" not in titles(result)

    def test_faster_recovery_needs_progress_below_threshold(self):
        samples = make_samples([(6, 5, 6)] * 3)
        # 33/42 = 78.6%
        assert "Faster Recovery" in titles(predict_trends(samples, 33, DeliveryType.VAGINAL))
        # 34/42 = 80.9%
        assert "Faster Recovery" not in titles(predict_trends(samples, 34, DeliveryType.VAGINAL))
        # cesarean window is longer
        assert "Faster Recovery" in titles(predict_trends(samples, 34, DeliveryType.CESAREAN))

    def test_faster_recovery_needs_energy(self):
        samples = make_samples([(5, 5, 6)] * 3)
        assert "Faster Recovery" not in titles(predict_trends(samples, 5, DeliveryType.VAGINAL))

    def test_custom_thresholds(self):
        strict = RecoveryThresholds(high_energy=9.0)
        result = predict_trends(make_samples([(8, 5, 6)]), 40, DeliveryType.VAGINAL, strict)
        assert "Excellent Energy Recovery" not in titles(result)
