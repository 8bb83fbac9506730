"""
Logging configuration for the Aarogya triage and recovery service.

JSON logs (CloudWatch Logs Insights friendly) in production, plain
human-readable lines in development. Every module gets its logger through
``get_logger(__name__)``; request handlers attach sender/request context with
``get_request_logger``.
"""

import logging
import sys
import json
import os
from typing import Any, Dict, Optional
from datetime import datetime, timezone
import traceback


_CONTEXT_FIELDS = ('sender_id', 'user_id', 'request_id', 'endpoint')


class StructuredFormatter(logging.Formatter):
    """
    Render each record as a single JSON object.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        if record.exc_info and record.exc_info[0] is not None:
            log_data['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': traceback.format_exception(*record.exc_info)
            }

        if hasattr(record, 'extra_fields'):
            log_data.update(record.extra_fields)

        for field in _CONTEXT_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        return json.dumps(log_data, default=str, ensure_ascii=False)


class HumanReadableFormatter(logging.Formatter):
    """
    Formatter for console output during development.
    """

    def __init__(self):
        super().__init__(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )


def setup_logging(
    log_level: Optional[str] = None,
    structured: Optional[bool] = None
) -> None:
    """
    Configure application-wide logging.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL.
                   Defaults to the LOG_LEVEL env var or INFO.
        structured: JSON output when True. Defaults to True only when
                    ENVIRONMENT is 'production'.
    """
    if log_level is None:
        log_level = os.getenv('LOG_LEVEL', 'INFO').upper()

    environment = os.getenv('ENVIRONMENT', 'development').lower()

    if structured is None:
        structured = environment == 'production'

    level = getattr(logging, log_level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(
        StructuredFormatter() if structured else HumanReadableFormatter()
    )
    root_logger.addHandler(console_handler)

    root_logger.info(
        f"Logging configured: level={log_level}, "
        f"environment={environment}, structured={structured}"
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module (typically ``__name__``).
    """
    return logging.getLogger(name)


class LoggerAdapter(logging.LoggerAdapter):
    """
    Adds request-scoped context (sender_id, request_id, endpoint) to every
    record logged through it.
    """

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        extra = kwargs.setdefault('extra', {})
        for key, value in self.extra.items():
            extra.setdefault(key, value)
        return msg, kwargs


def get_request_logger(
    name: str,
    sender_id: Optional[str] = None,
    request_id: Optional[str] = None,
    endpoint: Optional[str] = None,
    user_id: Optional[str] = None
) -> LoggerAdapter:
    """
    Get a logger carrying request context.

    Example:
        >>> logger = get_request_logger(__name__, sender_id="+919800000000", endpoint="/sms/inbound")
        >>> logger.info("Processing inbound message")
    """
    context = {}
    if sender_id:
        context['sender_id'] = sender_id
    if user_id:
        context['user_id'] = user_id
    if request_id:
        context['request_id'] = request_id
    if endpoint:
        context['endpoint'] = endpoint

    return LoggerAdapter(get_logger(name), context)


def log_error(
    logger: logging.Logger,
    error: Exception,
    message: str,
    extra: Optional[Dict[str, Any]] = None
) -> None:
    """
    Log an error with exception details and context.

    Args:
        logger: Logger or LoggerAdapter
        error: Exception that occurred
        message: Human-readable description of what failed
        extra: Additional context to include in the record

    Example:
        >>> try:
        ...     store.save_checkin(record)
        ... except Exception as e:
        ...     log_error(logger, e, "Failed to save check-in", {"sender_id": "+91..."})
    """
    log_data = {
        'error_type': type(error).__name__,
        'error_message': str(error),
    }
    if extra:
        log_data.update(extra)

    logger.error(
        f"{message}: {str(error)}",
        exc_info=(type(error), error, error.__traceback__),
        extra={'extra_fields': log_data}
    )


def log_aws_service_call(
    logger: logging.Logger,
    service: str,
    operation: str,
    success: bool,
    duration_ms: Optional[float] = None,
    error: Optional[Exception] = None,
    extra: Optional[Dict[str, Any]] = None
) -> None:
    """
    Log an AWS call (dynamodb, lambda, bedrock) with timing and outcome.

    Example:
        >>> log_aws_service_call(logger, 'dynamodb', 'put_item', True, duration_ms=12.4)
    """
    log_data = {
        'aws_service': service,
        'operation': operation,
        'success': success,
    }
    if duration_ms is not None:
        log_data['duration_ms'] = duration_ms
    if error:
        log_data['error_type'] = type(error).__name__
        log_data['error_message'] = str(error)
    if extra:
        log_data.update(extra)

    level = logging.INFO if success else logging.ERROR
    message = f"AWS {service}.{operation}: {'success' if success else 'failed'}"
    if duration_ms is not None:
        message += f" ({duration_ms:.2f}ms)"

    logger.log(
        level,
        message,
        extra={'extra_fields': log_data},
        exc_info=(type(error), error, error.__traceback__) if error else None
    )


def log_request_start(
    logger: logging.Logger,
    endpoint: str,
    sender_id: Optional[str] = None,
    extra: Optional[Dict[str, Any]] = None
) -> None:
    log_data = {
        'endpoint': endpoint,
        'event': 'request_start'
    }
    if sender_id:
        log_data['sender_id'] = sender_id
    if extra:
        log_data.update(extra)

    logger.info(
        f"Request started: {endpoint}",
        extra={'extra_fields': log_data}
    )


def log_request_end(
    logger: logging.Logger,
    endpoint: str,
    status_code: int,
    duration_ms: float,
    sender_id: Optional[str] = None,
    extra: Optional[Dict[str, Any]] = None
) -> None:
    log_data = {
        'endpoint': endpoint,
        'status_code': status_code,
        'duration_ms': duration_ms,
        'event': 'request_end'
    }
    if sender_id:
        log_data['sender_id'] = sender_id
    if extra:
        log_data.update(extra)

    if status_code >= 500:
        level = logging.ERROR
    elif status_code >= 400:
        level = logging.WARNING
    else:
        level = logging.INFO

    logger.log(
        level,
        f"Request completed: {endpoint} - {status_code} ({duration_ms:.2f}ms)",
        extra={'extra_fields': log_data}
    )
