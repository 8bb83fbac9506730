"""
Recovery phase and percent-complete from days since delivery.
"""

import datetime
import math
from typing import Optional, Tuple

from models import DeliveryType

# Expected total recovery window in days.
EXPECTED_RECOVERY_DAYS = {
    DeliveryType.VAGINAL: 42,
    DeliveryType.CESAREAN: 56,
}

RECOVERY_COMPLETE = "Recovery Complete"

# (last day of bucket, phase name), ascending. Past the last bucket the
# recovery is complete.
_COMMON_BUCKETS = (
    (7, "Initial Healing"),
    (14, "Early Recovery"),
    (28, "Recovery Phase"),
    (42, "Strengthening Phase"),
)

PHASE_BUCKETS = {
    DeliveryType.VAGINAL: _COMMON_BUCKETS,
    DeliveryType.CESAREAN: _COMMON_BUCKETS + ((56, "Final Recovery"),),
}


def expected_recovery_days(delivery_type: DeliveryType) -> int:
    return EXPECTED_RECOVERY_DAYS[DeliveryType.parse(delivery_type)]


def calculate_days_since(
    delivery_date: Optional[datetime.date],
    today: Optional[datetime.date] = None
) -> int:
    """
    Whole days between delivery and today. Unknown or future dates give 0.
    """
    if delivery_date is None:
        return 0
    if isinstance(delivery_date, datetime.datetime):
        delivery_date = delivery_date.date()

    today = today or datetime.date.today()
    return max((today - delivery_date).days, 0)


def calculate_percent(elapsed_days: int, delivery_type: DeliveryType) -> int:
    elapsed_days = max(int(elapsed_days or 0), 0)
    # halves round up
    percent = math.floor(100 * elapsed_days / expected_recovery_days(delivery_type) + 0.5)
    return max(0, min(percent, 100))


def calculate_phase(elapsed_days: int, delivery_type: DeliveryType) -> str:
    """
    Step function over the delivery type's day buckets; cesarean recovery has
    an extra "Final Recovery" bucket before completion.
    """
    elapsed_days = max(int(elapsed_days or 0), 0)
    for last_day, phase in PHASE_BUCKETS[DeliveryType.parse(delivery_type)]:
        if elapsed_days <= last_day:
            return phase
    return RECOVERY_COMPLETE


def calculate_progress(elapsed_days: int, delivery_type: DeliveryType) -> Tuple[str, int]:
    """Returns (phase, percent)."""
    return (
        calculate_phase(elapsed_days, delivery_type),
        calculate_percent(elapsed_days, delivery_type),
    )
