"""
Tests for recovery snapshot orchestration.
"""
import datetime
from unittest.mock import MagicMock

import pytest

from insight_cache import InsightCache
from models import DeliveryContext, DeliveryType, Insight, RecoveryMetricSample
from recovery.timeline import build_recovery_snapshot, get_recovery_snapshot, record_metric_sample
from storage import Stores, StoreError
from storage.memory import InMemoryCheckInStore, InMemoryMetricStore, InMemoryProfileStore

from test_predictions import make_samples

TODAY = datetime.date(2024, 6, 1)


class RecordingDispatcher:

    def __init__(self):
        self.calls = []

    def __call__(self, fn, *args, description="", **kwargs):
        self.calls.append((fn, args, description))


@pytest.fixture
def stores():
    return Stores(
        profiles=InMemoryProfileStore(),
        metrics=InMemoryMetricStore(),
        checkins=InMemoryCheckInStore(),
    )


class TestBuildRecoverySnapshot:

    def test_cesarean_delivery_day(self):
        snapshot = build_recovery_snapshot(
            DeliveryContext(delivery_type=DeliveryType.CESAREAN, delivery_date=TODAY),
            [],
            today=TODAY,
        )
        assert snapshot.phase == "Initial Healing"
        assert snapshot.percent == 0
        assert snapshot.days_since_delivery == 0
        assert len(snapshot.milestones) == 5
        assert not any(m.upcoming for m in snapshot.milestones)

    def test_cesarean_day_five_marks_day_seven_upcoming(self):
        snapshot = build_recovery_snapshot(
            DeliveryContext(delivery_type="cesarean", delivery_date=TODAY - datetime.timedelta(days=5)),
            [],
            today=TODAY,
        )
        assert [m.day_offset for m in snapshot.milestones if m.upcoming] == [7]

    def test_zero_samples(self):
        snapshot = build_recovery_snapshot(
            DeliveryContext(delivery_date=TODAY - datetime.timedelta(days=10)), [], today=TODAY
        )
        assert [p.title for p in snapshot.predictions] == ["Start Tracking"]
        assert [t.title for t in snapshot.tips] == ["Start Health Tracking"]
        assert snapshot.todays_focus.title == "Early Recovery"

    def test_missing_delivery_context_defaults(self):
        snapshot = build_recovery_snapshot(None, [], today=TODAY)
        assert snapshot.delivery_type == DeliveryType.VAGINAL
        assert snapshot.days_since_delivery == 0

    def test_samples_are_windowed_newest_first(self):
        old_bad = make_samples([(1, 1, 1)] * 5, start=TODAY - datetime.timedelta(days=20))
        recent_good = make_samples([(8, 8, 8)] * 7, start=TODAY)
        snapshot = build_recovery_snapshot(
            DeliveryContext(delivery_date=TODAY - datetime.timedelta(days=30)),
            old_bad + recent_good,
            today=TODAY,
        )
        titles = [p.title for p in snapshot.predictions]
        assert "Excellent Energy Recovery" in titles
        assert snapshot.todays_focus.title == "Continued Recovery"

    def test_insights_passed_through(self):
        insight = Insight(title="t", description="d", recommendation="r")
        snapshot = build_recovery_snapshot(None, [], today=TODAY, insights=[insight])
        assert snapshot.insights == [insight]


class TestGetRecoverySnapshot:

    def test_reads_stores_and_schedules_enrichment(self, stores):
        stores.profiles.set_delivery_context(
            "user-1",
            DeliveryContext(delivery_type="c-section", delivery_date=TODAY - datetime.timedelta(days=12)),
        )
        for sample in make_samples([(7, 7, 8), (6, 6, 7)], start=TODAY):
            stores.metrics.append_sample("user-1", sample)
        dispatch = RecordingDispatcher()
        cache = InsightCache()

        snapshot = get_recovery_snapshot("user-1", stores, cache=cache, today=TODAY, dispatch=dispatch)

        assert snapshot.delivery_type == DeliveryType.CESAREAN
        assert snapshot.days_since_delivery == 12
        assert snapshot.insights == []
        assert len(dispatch.calls) == 1
        assert dispatch.calls[0][2] == "insight enrichment"

    def test_cached_insights_included(self, stores):
        cache = InsightCache()
        insight = Insight(title="Cached", description="d", recommendation="r")
        cache.store("user-1", [insight])

        snapshot = get_recovery_snapshot("user-1", stores, cache=cache, today=TODAY,
                                         dispatch=RecordingDispatcher())
        assert snapshot.insights == [insight]

    def test_store_failures_fall_back_to_defaults(self, stores):
        stores.profiles.get_delivery_context = MagicMock(side_effect=StoreError("down"))
        stores.metrics.recent_samples = MagicMock(side_effect=StoreError("down"))

        snapshot = get_recovery_snapshot("user-1", stores, cache=InsightCache(), today=TODAY,
                                         dispatch=RecordingDispatcher())

        assert snapshot.delivery_type == DeliveryType.VAGINAL
        assert snapshot.days_since_delivery == 0
        assert [p.title for p in snapshot.predictions] == ["Start Tracking"]

    def test_enrichment_scheduling_failure_is_ignored(self, stores):
        def broken(*args, **kwargs):
            raise RuntimeError("pool closed")

        snapshot = get_recovery_snapshot("user-1", stores, cache=InsightCache(), today=TODAY, dispatch=broken)
        assert snapshot.phase == "Initial Healing"


class TestRecordMetricSample:

    def test_appends(self, stores):
        sample = RecoveryMetricSample(date=TODAY, energy_level=6, mood_score=7, sleep_hours=6.5)
        assert record_metric_sample("user-1", sample, stores.metrics) == sample
        assert stores.metrics.recent_samples("user-1") == [sample]

    def test_store_error_propagates(self):
        store = MagicMock()
        store.append_sample.side_effect = StoreError("throttled")
        sample = RecoveryMetricSample(date=TODAY, energy_level=6, mood_score=7, sleep_hours=6.5)
        with pytest.raises(StoreError):
            record_metric_sample("user-1", sample, store)
