"""
Store wiring. ``get_stores()`` picks the backend from STORAGE_BACKEND
("dynamodb" by default, "memory" for local runs).
"""

import os
from dataclasses import dataclass
from typing import Optional

from logging_config import get_logger
from .base import CheckInStore, MetricStore, ProfileStore, StoreError

logger = get_logger(__name__)


@dataclass
class Stores:
    profiles: ProfileStore
    metrics: MetricStore
    checkins: CheckInStore


_stores: Optional[Stores] = None


def build_stores(backend: Optional[str] = None) -> Stores:
    backend = (backend or os.getenv('STORAGE_BACKEND', 'dynamodb')).lower()

    if backend == 'memory':
        from .memory import InMemoryCheckInStore, InMemoryMetricStore, InMemoryProfileStore
        logger.info("Using in-memory stores")
        return Stores(
            profiles=InMemoryProfileStore(),
            metrics=InMemoryMetricStore(),
            checkins=InMemoryCheckInStore(),
        )

    if backend != 'dynamodb':
        raise ValueError(f"Unknown STORAGE_BACKEND '{backend}'. Use 'dynamodb' or 'memory'")

    from .dynamodb import (
        DynamoCheckInStore,
        DynamoMetricStore,
        DynamoProfileStore,
        get_dynamodb_resource,
    )
    resource = get_dynamodb_resource()
    logger.info("Using DynamoDB stores")
    return Stores(
        profiles=DynamoProfileStore(resource=resource),
        metrics=DynamoMetricStore(resource=resource),
        checkins=DynamoCheckInStore(resource=resource),
    )


def get_stores() -> Stores:
    """
    Get the process-wide stores, building them on first use.
    """
    global _stores
    if _stores is None:
        _stores = build_stores()
    return _stores


def set_stores(stores: Optional[Stores]) -> None:
    """Replace the process-wide stores (tests, local seeding)."""
    global _stores
    _stores = stores


__all__ = [
    'CheckInStore',
    'MetricStore',
    'ProfileStore',
    'StoreError',
    'Stores',
    'build_stores',
    'get_stores',
    'set_stores',
]
