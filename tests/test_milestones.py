"""
Tests for the milestone ledger.
"""
import pytest
from hypothesis import given, strategies as st

from models import DeliveryType
from recovery.milestones import (
    MILESTONES,
    MilestoneDefinition,
    UPCOMING_WINDOW_DAYS,
    _check_ordering,
    build_milestones,
)


def _upcoming(milestones):
    return [m.day_offset for m in milestones if m.upcoming]


class TestBuildMilestones:

    def test_vaginal_offsets(self):
        offsets = [m.day_offset for m in build_milestones(DeliveryType.VAGINAL, 0)]
        assert offsets == [7, 14, 21, 42]

    def test_cesarean_offsets(self):
        offsets = [m.day_offset for m in build_milestones(DeliveryType.CESAREAN, 0)]
        assert offsets == [7, 14, 21, 42, 56]

    def test_nothing_achieved_on_delivery_day(self):
        milestones = build_milestones(DeliveryType.CESAREAN, 0)
        assert not any(m.achieved for m in milestones)
        assert _upcoming(milestones) == []

    @pytest.mark.parametrize("elapsed,upcoming", [
        (4, []),
        (5, [7]),
        (6, [7]),
        (7, []),
        (12, [14]),
        (13, [14]),
    ])
    def test_upcoming_window(self, elapsed, upcoming):
        assert _upcoming(build_milestones(DeliveryType.CESAREAN, elapsed)) == upcoming

    def test_achieved_on_the_day(self):
        milestones = build_milestones(DeliveryType.VAGINAL, 14)
        assert [m.achieved for m in milestones] == [True, True, False, False]

    def test_all_achieved_after_recovery(self):
        milestones = build_milestones(DeliveryType.VAGINAL, 60)
        assert all(m.achieved for m in milestones)
        assert _upcoming(milestones) == []

    def test_titles(self):
        titles = [m.title for m in build_milestones(DeliveryType.CESAREAN, 0)]
        assert titles[0] == "Incision healing check"
        assert titles[-1] == "Full recovery milestone"


class TestTableValidation:

    def test_shipped_tables_are_ordered(self):
        _check_ordering(MILESTONES)

    def test_unordered_table_rejected(self):
        bad = {DeliveryType.VAGINAL: (
            MilestoneDefinition(14, "b", "b"),
            MilestoneDefinition(7, "a", "a"),
        )}
        with pytest.raises(ValueError):
            _check_ordering(bad)


@given(st.integers(min_value=0, max_value=120), st.sampled_from(list(DeliveryType)))
def test_at_most_one_upcoming(elapsed, delivery_type):
    """
    Property: at most one milestone is upcoming, it is the first unachieved
    one, and it is within the look-ahead window.
    """
    milestones = build_milestones(delivery_type, elapsed)
    upcoming = [m for m in milestones if m.upcoming]
    assert len(upcoming) <= 1

    for m in upcoming:
        assert not m.achieved
        assert 0 < m.day_offset - elapsed <= UPCOMING_WINDOW_DAYS
        first_unachieved = next(x for x in milestones if not x.achieved)
        assert m.day_offset == first_unachieved.day_offset


@given(st.integers(min_value=0, max_value=120), st.sampled_from(list(DeliveryType)))
def test_achieved_matches_elapsed(elapsed, delivery_type):
    for m in build_milestones(delivery_type, elapsed):
        assert m.achieved == (elapsed >= m.day_offset)
