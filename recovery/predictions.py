"""
Qualitative predictions from rolling metric means.

Each metric has its own independent rules, so any number of predictions can
fire at once. The "Faster Recovery" rule is the only one that also reads the
elapsed-time progress.
"""

from typing import List, Sequence

from models import DeliveryType, Prediction, PredictionPolarity, RecoveryMetricSample
from .metrics import MetricAverages, rolling_means
from .phases import expected_recovery_days
from .thresholds import DEFAULT_THRESHOLDS, RecoveryThresholds

START_TRACKING = Prediction(
    title="Start Tracking",
    description="Begin logging your daily health metrics to get personalized predictions.",
    polarity=PredictionPolarity.NEUTRAL,
)


def _energy_predictions(means: MetricAverages, t: RecoveryThresholds) -> List[Prediction]:
    if means.energy >= t.high_energy:
        return [Prediction(
            title="Excellent Energy Recovery",
            description=f"Your average energy is {means.energy:.1f}/10 - you're recovering faster than average!",
            polarity=PredictionPolarity.POSITIVE,
        )]
    if means.energy <= t.low_energy:
        return [Prediction(
            title="Energy Support Needed",
            description="Your energy is lower than expected. Focus on rest and nutrition.",
            polarity=PredictionPolarity.INSIGHT,
        )]
    return []


def _mood_predictions(means: MetricAverages, t: RecoveryThresholds) -> List[Prediction]:
    if means.mood >= t.high_mood:
        return [Prediction(
            title="Positive Mood Trend",
            description="Your mood scores show excellent emotional wellbeing during recovery.",
            polarity=PredictionPolarity.POSITIVE,
        )]
    if means.mood <= t.low_mood:
        return [Prediction(
            title="Mood Support",
            description="Consider reaching out to your support network or healthcare provider.",
            polarity=PredictionPolarity.INSIGHT,
        )]
    return []


def _sleep_predictions(means: MetricAverages, t: RecoveryThresholds) -> List[Prediction]:
    if means.sleep_hours >= t.good_sleep_hours:
        return [Prediction(
            title="Good Sleep Recovery",
            description="Your sleep patterns are supporting your healing process well.",
            polarity=PredictionPolarity.POSITIVE,
        )]
    if means.sleep_hours < t.poor_sleep_hours:
        return [Prediction(
            title="Sleep Optimization",
            description="Try to nap when baby sleeps to improve your rest quality.",
            polarity=PredictionPolarity.INSIGHT,
        )]
    return []


def _faster_recovery_prediction(
    means: MetricAverages,
    elapsed_days: int,
    delivery_type: DeliveryType,
    t: RecoveryThresholds,
) -> List[Prediction]:
    progress = 100 * max(elapsed_days, 0) / expected_recovery_days(delivery_type)
    if progress < t.faster_recovery_max_progress and means.energy >= t.faster_recovery_min_energy:
        return [Prediction(
            title="Faster Recovery",
            description=(
                f"Your energy is already strong at {round(progress)}% of the expected "
                "recovery window. You're healing faster than expected."
            ),
            polarity=PredictionPolarity.POSITIVE,
        )]
    return []


def predict_trends(
    samples: Sequence[RecoveryMetricSample],
    elapsed_days: int,
    delivery_type: DeliveryType,
    thresholds: RecoveryThresholds = DEFAULT_THRESHOLDS,
) -> List[Prediction]:
    """
    Predictions for the newest samples (newest first). With no samples there
    is nothing to evaluate and a single "Start Tracking" placeholder is
    returned.
    """
    means = rolling_means(samples)
    if means is None:
        return [START_TRACKING]

    return (
        _energy_predictions(means, thresholds)
        + _mood_predictions(means, thresholds)
        + _sleep_predictions(means, thresholds)
        + _faster_recovery_prediction(means, elapsed_days, DeliveryType.parse(delivery_type), thresholds)
    )
