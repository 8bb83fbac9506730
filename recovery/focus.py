"""
Today's focus: one message, picked from the latest sample only.
"""

from typing import Sequence

from models import RecoveryMetricSample, TodaysFocus
from .metrics import latest_sample
from .thresholds import DEFAULT_THRESHOLDS, RecoveryThresholds

# (last day, focus) ascending; the final entry covers everything after.
PHASE_FOCUS = (
    (7, TodaysFocus(
        title="Initial Recovery",
        message="Focus on rest and gentle movement. Your body is healing from delivery.",
    )),
    (14, TodaysFocus(
        title="Early Recovery",
        message="You should start feeling more comfortable. Continue with gentle activities.",
    )),
    (28, TodaysFocus(
        title="Building Strength",
        message="You can start light activities. Listen to your body and don't overexert.",
    )),
)

CONTINUED_RECOVERY = TodaysFocus(
    title="Continued Recovery",
    message="You're doing well! Continue with your daily routine and self-care.",
)


def phase_default_focus(elapsed_days: int) -> TodaysFocus:
    for last_day, focus in PHASE_FOCUS:
        if elapsed_days <= last_day:
            return focus
    return CONTINUED_RECOVERY


def select_todays_focus(
    elapsed_days: int,
    samples: Sequence[RecoveryMetricSample],
    thresholds: RecoveryThresholds = DEFAULT_THRESHOLDS,
) -> TodaysFocus:
    """
    First match wins: low energy, then low mood, then short sleep, each read
    from the newest sample. Otherwise (including when nothing has been logged
    yet) the default for the current phase.
    """
    latest = latest_sample(samples)

    if latest is not None:
        if latest.energy_level <= thresholds.focus_low_energy:
            return TodaysFocus(
                title="Energy Support",
                message="Your energy levels are low. Focus on rest, gentle movement, and proper nutrition today.",
            )
        if latest.mood_score <= thresholds.focus_low_mood:
            return TodaysFocus(
                title="Emotional Wellbeing",
                message="Take time for self-care today. Consider reaching out to your support network.",
            )
        if latest.sleep_hours < thresholds.focus_low_sleep_hours:
            return TodaysFocus(
                title="Sleep Recovery",
                message="Try to nap when baby sleeps to improve your rest quality today.",
            )

    return phase_default_focus(max(elapsed_days, 0))
