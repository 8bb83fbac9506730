"""
Shared thread pool for fire-and-forget work (emergency alerts, AI insight
enrichment). Callers never wait on the returned futures on a request path.
"""

import os
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable

from logging_config import get_logger, log_error

logger = get_logger(__name__)

MAX_WORKERS = int(os.getenv('BACKGROUND_WORKERS', '4'))

_executor = ThreadPoolExecutor(max_workers=MAX_WORKERS, thread_name_prefix='aarogya-bg')


def _log_failure(description: str) -> Callable[[Future], None]:
    def _callback(future: Future) -> None:
        error = future.exception()
        if error is not None:
            log_error(logger, error, f"Background task failed: {description}")
    return _callback


def submit_background(fn: Callable[..., Any], *args, description: str = "", **kwargs) -> Future:
    """
    Run ``fn(*args, **kwargs)`` on the shared pool. Exceptions are logged,
    never re-raised into the caller.
    """
    future = _executor.submit(fn, *args, **kwargs)
    future.add_done_callback(_log_failure(description or getattr(fn, '__name__', 'task')))
    return future


def shutdown(wait: bool = True) -> None:
    _executor.shutdown(wait=wait)
