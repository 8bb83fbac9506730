"""
Recovery milestones per delivery type.
"""

from typing import List, NamedTuple, Tuple

from models import DeliveryType, Milestone

# A milestone is flagged upcoming at most this many days ahead.
UPCOMING_WINDOW_DAYS = 2


class MilestoneDefinition(NamedTuple):
    day_offset: int
    title: str
    description: str


MILESTONES = {
    DeliveryType.VAGINAL: (
        MilestoneDefinition(
            7, "Initial healing complete",
            "Most initial discomfort should be resolved. You should feel more comfortable.",
        ),
        MilestoneDefinition(
            14, "Energy improvement",
            "Your energy levels should start improving significantly.",
        ),
        MilestoneDefinition(
            21, "Light activities",
            "You can start light household work and gentle exercises.",
        ),
        MilestoneDefinition(
            42, "Full recovery expected",
            "Complete recovery milestone with full energy restoration.",
        ),
    ),
    DeliveryType.CESAREAN: (
        MilestoneDefinition(
            7, "Incision healing check",
            "Your C-section incision should be healing well. Keep it clean and dry.",
        ),
        MilestoneDefinition(
            14, "Staples/stitches removal",
            "If you have external stitches, they may be removed around this time.",
        ),
        MilestoneDefinition(
            21, "Increased mobility",
            "You should feel more comfortable with daily activities and light movement.",
        ),
        MilestoneDefinition(
            42, "Light exercise clearance",
            "You may be cleared for light exercises and more physical activities.",
        ),
        MilestoneDefinition(
            56, "Full recovery milestone",
            "Complete recovery expected. You should feel much stronger and more energetic.",
        ),
    ),
}


def _check_ordering(table) -> None:
    for delivery_type, definitions in table.items():
        offsets = [d.day_offset for d in definitions]
        if any(b <= a for a, b in zip(offsets, offsets[1:])):
            raise ValueError(f"Milestone offsets for {delivery_type.value} must strictly increase: {offsets}")


_check_ordering(MILESTONES)


def milestone_definitions(delivery_type: DeliveryType) -> Tuple[MilestoneDefinition, ...]:
    return MILESTONES[DeliveryType.parse(delivery_type)]


def build_milestones(delivery_type: DeliveryType, elapsed_days: int) -> List[Milestone]:
    """
    Milestones in day order with achieved/upcoming state for ``elapsed_days``.

    Only the first milestone not yet reached can be upcoming, and only once
    it is within UPCOMING_WINDOW_DAYS.
    """
    elapsed_days = max(int(elapsed_days or 0), 0)
    milestones = []
    upcoming_assigned = False

    for definition in milestone_definitions(delivery_type):
        achieved = elapsed_days >= definition.day_offset
        upcoming = False
        if not achieved and not upcoming_assigned:
            upcoming_assigned = True
            upcoming = definition.day_offset - elapsed_days <= UPCOMING_WINDOW_DAYS

        milestones.append(Milestone(
            day_offset=definition.day_offset,
            title=definition.title,
            description=definition.description,
            achieved=achieved,
            upcoming=upcoming,
        ))

    return milestones
