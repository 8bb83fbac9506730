"""
Personalized recovery tips.
"""

from typing import List, Sequence

from models import DeliveryType, RecoveryMetricSample, Tip, TipCategory
from .metrics import rolling_means
from .thresholds import DEFAULT_THRESHOLDS, RecoveryThresholds

START_HEALTH_TRACKING = Tip(
    title="Start Health Tracking",
    description="Begin logging your daily health metrics to get personalized recovery tips.",
    category=TipCategory.HEALTH,
)

FAMILY_SUPPORT = Tip(
    title="Family Support",
    description="Don't hesitate to ask for help from family and friends. Your recovery is important.",
    category=TipCategory.FAMILY,
)

# Cesarean-specific care by days since delivery: (before day, tip).
CESAREAN_CARE_TIPS = (
    (14, Tip(
        title="C-section Care",
        description="Keep your incision clean and dry. Avoid heavy lifting and support your abdomen when moving.",
        category=TipCategory.HEALTH,
    )),
    (42, Tip(
        title="Gradual Activity",
        description="You can start light activities but avoid strenuous exercise until cleared by your doctor.",
        category=TipCategory.HEALTH,
    )),
)


def _delivery_tips(delivery_type: DeliveryType, elapsed_days: int) -> List[Tip]:
    if delivery_type != DeliveryType.CESAREAN:
        return []
    for before_day, tip in CESAREAN_CARE_TIPS:
        if elapsed_days < before_day:
            return [tip]
    return []


def select_tips(
    samples: Sequence[RecoveryMetricSample],
    elapsed_days: int,
    delivery_type: DeliveryType,
    thresholds: RecoveryThresholds = DEFAULT_THRESHOLDS,
) -> List[Tip]:
    """
    Tips ordered sleep, health, family, delivery-specific, then the standing
    family-support reminder, which is always last.
    """
    means = rolling_means(samples)
    if means is None:
        return [START_HEALTH_TRACKING]

    tips: List[Tip] = []

    if means.sleep_hours < thresholds.tip_sleep_hours:
        tips.append(Tip(
            title="Sleep Quality",
            description=(
                "Your sleep hours are below optimal. Try to nap when baby sleeps "
                "and maintain a consistent bedtime routine."
            ),
            category=TipCategory.SLEEP,
        ))
    else:
        tips.append(Tip(
            title="Sleep Maintenance",
            description="Great job maintaining good sleep! Continue your current sleep routine.",
            category=TipCategory.SLEEP,
        ))

    if means.energy < thresholds.tip_low_energy:
        tips.append(Tip(
            title="Energy Boost",
            description="Focus on light movement, proper nutrition, and adequate rest to boost your energy levels.",
            category=TipCategory.HEALTH,
        ))

    if means.mood <= thresholds.tip_low_mood:
        tips.append(Tip(
            title="Emotional Support",
            description="Share how you feel with someone you trust. Low mood after delivery is common and help is available.",
            category=TipCategory.FAMILY,
        ))

    tips.extend(_delivery_tips(DeliveryType.parse(delivery_type), max(elapsed_days, 0)))
    tips.append(FAMILY_SUPPORT)
    return tips
