"""
Tests for personalized recovery tips.
"""
from models import DeliveryType, TipCategory
from recovery.tips import FAMILY_SUPPORT, START_HEALTH_TRACKING, select_tips

from test_predictions import make_samples


def titles(tips):
    return [t.title for t in tips]


class TestSelectTips:

    def test_no_samples(self):
        assert select_tips([], 3, DeliveryType.CESAREAN) == [START_HEALTH_TRACKING]

    def test_good_sleep_vaginal(self):
        result = select_tips(make_samples([(7, 7, 7)] * 2), 20, DeliveryType.VAGINAL)
        assert titles(result) == ["Sleep Maintenance", "Family Support"]

    def test_short_sleep_low_energy(self):
        result = select_tips(make_samples([(4, 6, 5)] * 2), 20, DeliveryType.VAGINAL)
        assert titles(result) == ["Sleep Quality", "Energy Boost", "Family Support"]
        assert result[0].category == TipCategory.SLEEP
        assert result[1].category == TipCategory.HEALTH

    def test_low_mood_adds_emotional_support(self):
        result = select_tips(make_samples([(6, 4, 7)]), 20, DeliveryType.VAGINAL)
        assert "Emotional Support" in titles(result)
        support = next(t for t in result if t.title == "Emotional Support")
        assert support.category == TipCategory.FAMILY

    def test_cesarean_first_two_weeks(self):
        result = select_tips(make_samples([(7, 7, 7)]), 5, DeliveryType.CESAREAN)
        assert titles(result) == ["Sleep Maintenance", "C-section Care", "Family Support"]

    def test_cesarean_until_six_weeks(self):
        result = select_tips(make_samples([(7, 7, 7)]), 20, DeliveryType.CESAREAN)
        assert "Gradual Activity" in titles(result)
        assert "C-section Care" not in titles(result)

    def test_cesarean_after_six_weeks(self):
        result = select_tips(make_samples([(7, 7, 7)]), 45, DeliveryType.CESAREAN)
        assert titles(result) == ["Sleep Maintenance", "Family Support"]

    def test_family_support_always_last(self):
        for values in ([(2, 2, 2)], [(9, 9, 9)]):
            result = select_tips(make_samples(values), 1, DeliveryType.CESAREAN)
            assert result[-1] == FAMILY_SUPPORT
