"""
Record-store interfaces consumed by the triage and recovery engines.

Implementations raise ``StoreError`` for backend failures. "Not found" is not
a failure: lookups return None.
"""

from typing import List, Optional, Protocol

from models import (
    CheckInRecord,
    DeliveryContext,
    RecoveryMetricSample,
    SenderProfile,
)


class StoreError(Exception):
    """Raised when a backing store cannot be read or written."""
    pass


class ProfileStore(Protocol):
    def get_profile(self, sender_id: str) -> Optional[SenderProfile]:
        ...

    def set_sms_consent(self, sender_id: str, consent: bool) -> None:
        ...

    def get_delivery_context(self, user_id: str) -> Optional[DeliveryContext]:
        ...


class MetricStore(Protocol):
    def recent_samples(self, user_id: str, limit: int = 7) -> List[RecoveryMetricSample]:
        """Newest first, at most ``limit`` samples."""
        ...

    def append_sample(self, user_id: str, sample: RecoveryMetricSample) -> None:
        ...


class CheckInStore(Protocol):
    def save_checkin(self, record: CheckInRecord) -> None:
        ...
