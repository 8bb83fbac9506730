"""
Rolling means over the most recent daily metric samples.
"""

from typing import NamedTuple, Optional, Sequence

from models import RecoveryMetricSample
from .thresholds import METRIC_WINDOW


class MetricAverages(NamedTuple):
    energy: float
    mood: float
    sleep_hours: float
    sample_count: int


def recent_window(
    samples: Sequence[RecoveryMetricSample],
    window: int = METRIC_WINDOW
) -> Sequence[RecoveryMetricSample]:
    """Samples are newest first; keep the first ``window`` of them."""
    return list(samples or [])[:window]


def rolling_means(
    samples: Sequence[RecoveryMetricSample],
    window: int = METRIC_WINDOW
) -> Optional[MetricAverages]:
    """
    Arithmetic means of energy, mood and sleep over the newest ``window``
    samples, or None when there are none.
    """
    recent = recent_window(samples, window)
    if not recent:
        return None

    count = len(recent)
    return MetricAverages(
        energy=sum(s.energy_level for s in recent) / count,
        mood=sum(s.mood_score for s in recent) / count,
        sleep_hours=sum(s.sleep_hours for s in recent) / count,
        sample_count=count,
    )


def latest_sample(samples: Sequence[RecoveryMetricSample]) -> Optional[RecoveryMetricSample]:
    return samples[0] if samples else None
