"""
In-process stores for local development and tests (STORAGE_BACKEND=memory).
"""

import threading
from typing import Dict, List, Optional

from logging_config import get_logger
from models import (
    CheckInRecord,
    DeliveryContext,
    RecoveryMetricSample,
    SenderProfile,
)

logger = get_logger(__name__)


class InMemoryProfileStore:
    def __init__(self):
        self._profiles: Dict[str, SenderProfile] = {}
        self._deliveries: Dict[str, DeliveryContext] = {}
        self._lock = threading.Lock()

    def add_profile(self, profile: SenderProfile) -> None:
        with self._lock:
            self._profiles[profile.sender_id] = profile

    def set_delivery_context(self, user_id: str, context: DeliveryContext) -> None:
        with self._lock:
            self._deliveries[user_id] = context

    def get_profile(self, sender_id: str) -> Optional[SenderProfile]:
        return self._profiles.get(sender_id)

    def set_sms_consent(self, sender_id: str, consent: bool) -> None:
        with self._lock:
            profile = self._profiles.get(sender_id)
            if profile is None:
                logger.warning(f"Consent update for unknown sender {sender_id} ignored")
                return
            self._profiles[sender_id] = profile.model_copy(update={'sms_consent': consent})

    def get_delivery_context(self, user_id: str) -> Optional[DeliveryContext]:
        return self._deliveries.get(user_id)


class InMemoryMetricStore:
    def __init__(self):
        self._samples: Dict[str, List[RecoveryMetricSample]] = {}
        self._lock = threading.Lock()

    def recent_samples(self, user_id: str, limit: int = 7) -> List[RecoveryMetricSample]:
        samples = self._samples.get(user_id, [])
        # Stable sort: for same-day samples the last one appended comes first after reversing.
        ordered = sorted(samples, key=lambda s: s.date)
        return list(reversed(ordered))[:limit]

    def append_sample(self, user_id: str, sample: RecoveryMetricSample) -> None:
        with self._lock:
            self._samples.setdefault(user_id, []).append(sample)


class InMemoryCheckInStore:
    def __init__(self):
        self.records: List[CheckInRecord] = []
        self._lock = threading.Lock()

    def save_checkin(self, record: CheckInRecord) -> None:
        with self._lock:
            self.records.append(record)
