"""
Insight Cache Module

Holds the latest AI-enriched recovery insights per user. Enrichment runs in
the background after a snapshot is served, so a user sees the insights on
their next snapshot request.
"""

import datetime
import threading
from typing import Dict, List, NamedTuple, Optional

from logging_config import get_logger
from models import Insight

logger = get_logger(__name__)


class CachedInsights(NamedTuple):
    insights: List[Insight]
    stored_at: datetime.datetime


class InsightCache:
    """
    In-process, per-user insight store. Last write wins.
    """

    def __init__(self, max_age: Optional[datetime.timedelta] = None):
        """
        Args:
            max_age: Entries older than this are ignored on read. None keeps
                entries until they are overwritten or cleared.
        """
        self._entries: Dict[str, CachedInsights] = {}
        self._lock = threading.Lock()
        self._max_age = max_age

    def store(self, user_id: str, insights: List[Insight]) -> None:
        logger.debug(f"Caching {len(insights)} insights for user {user_id}")
        entry = CachedInsights(list(insights), datetime.datetime.now(datetime.timezone.utc))
        with self._lock:
            self._entries[user_id] = entry

    def get(self, user_id: str) -> List[Insight]:
        """
        Cached insights for the user, or an empty list when nothing usable
        is cached.
        """
        with self._lock:
            entry = self._entries.get(user_id)

        if entry is None:
            return []

        if self._max_age is not None:
            age = datetime.datetime.now(datetime.timezone.utc) - entry.stored_at
            if age > self._max_age:
                logger.debug(f"Cached insights for user {user_id} expired")
                return []

        return list(entry.insights)

    def clear(self, user_id: Optional[str] = None) -> None:
        with self._lock:
            if user_id is None:
                self._entries.clear()
            else:
                self._entries.pop(user_id, None)


# Global insight cache instance
_insight_cache = None


def get_insight_cache() -> InsightCache:
    """
    Get the global insight cache instance.

    Returns:
        InsightCache instance
    """
    global _insight_cache
    if _insight_cache is None:
        _insight_cache = InsightCache()
    return _insight_cache
