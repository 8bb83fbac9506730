# recovery/timeline.py
import datetime
from typing import List, Optional, Sequence

from background import submit_background
from insight_cache import InsightCache, get_insight_cache
from logging_config import get_request_logger, log_error
from models import (
    DeliveryContext,
    Insight,
    RecoveryMetricSample,
    RecoverySnapshot,
)
from storage import Stores, get_stores
from storage.base import MetricStore
from .focus import select_todays_focus
from .insights import InsightEnricher, schedule_enrichment
from .milestones import build_milestones
from .phases import calculate_days_since, calculate_progress
from .predictions import predict_trends
from .thresholds import DEFAULT_THRESHOLDS, METRIC_WINDOW, RecoveryThresholds
from .tips import select_tips


def build_recovery_snapshot(
    delivery: Optional[DeliveryContext],
    samples: Sequence[RecoveryMetricSample],
    today: Optional[datetime.date] = None,
    thresholds: RecoveryThresholds = DEFAULT_THRESHOLDS,
    insights: Optional[List[Insight]] = None,
) -> RecoverySnapshot:
    """
    Compose the full snapshot from already-loaded data. No I/O.

    A missing delivery context or delivery date is treated as a vaginal
    delivery on ``today``.
    """
    delivery = delivery or DeliveryContext()
    today = today or datetime.date.today()
    delivery_date = delivery.delivery_date or today
    delivery_type = delivery.delivery_type

    # Newest first; a store may hand back more than the window.
    samples = sorted(samples or [], key=lambda s: s.date, reverse=True)[:METRIC_WINDOW]

    elapsed = calculate_days_since(delivery_date, today)
    phase, percent = calculate_progress(elapsed, delivery_type)

    return RecoverySnapshot(
        phase=phase,
        days_since_delivery=elapsed,
        percent=percent,
        delivery_type=delivery_type,
        milestones=build_milestones(delivery_type, elapsed),
        predictions=predict_trends(samples, elapsed, delivery_type, thresholds),
        tips=select_tips(samples, elapsed, delivery_type, thresholds),
        todays_focus=select_todays_focus(elapsed, samples, thresholds),
        insights=list(insights or []),
    )


def get_recovery_snapshot(
    user_id: str,
    stores: Optional[Stores] = None,
    enricher: Optional[InsightEnricher] = None,
    cache: Optional[InsightCache] = None,
    thresholds: RecoveryThresholds = DEFAULT_THRESHOLDS,
    today: Optional[datetime.date] = None,
    dispatch=submit_background,
) -> RecoverySnapshot:
    """
    Load the user's delivery context and recent samples, build the snapshot
    and schedule insight enrichment for the next request.

    Read failures are logged and replaced by defaults (vaginal delivery today,
    no samples) so a snapshot is always returned. Insights come from the cache
    only; enrichment never delays the response.
    """
    stores = stores or get_stores()
    cache = cache or get_insight_cache()
    request_logger = get_request_logger(__name__, user_id=user_id, endpoint="recovery_snapshot")

    try:
        delivery = stores.profiles.get_delivery_context(user_id)
    except Exception as e:
        log_error(request_logger, e, "Could not load delivery context, using defaults", {'user_id': user_id})
        delivery = None

    try:
        samples = stores.metrics.recent_samples(user_id, limit=METRIC_WINDOW)
    except Exception as e:
        log_error(request_logger, e, "Could not load metric samples, using none", {'user_id': user_id})
        samples = []

    snapshot = build_recovery_snapshot(
        delivery,
        samples,
        today=today,
        thresholds=thresholds,
        insights=cache.get(user_id),
    )
    request_logger.info(
        f"Snapshot built: day {snapshot.days_since_delivery}, {snapshot.percent}% ({snapshot.phase}), "
        f"{len(samples)} samples"
    )

    try:
        schedule_enrichment(user_id, snapshot, enricher=enricher, cache=cache, dispatch=dispatch)
    except Exception as e:
        log_error(request_logger, e, "Could not schedule insight enrichment", {'user_id': user_id})

    return snapshot


def record_metric_sample(
    user_id: str,
    sample: RecoveryMetricSample,
    store: Optional[MetricStore] = None,
) -> RecoveryMetricSample:
    """
    Append one daily sample. Store failures propagate so the caller can
    report them; the sample itself was already validated by the model.
    """
    store = store or get_stores().metrics
    store.append_sample(user_id, sample)
    get_request_logger(__name__, user_id=user_id, endpoint="recovery_metrics").info(
        f"Recorded metric sample for {sample.date.isoformat()}"
    )
    return sample
