"""
Emergency-contact alerts for red-tier check-ins.

The alert Lambda looks up the sender's primary emergency contact and sends the
SMS. We only hand it the event; nothing here may change or delay the reply
already composed for the sender.
"""

import os
from typing import Optional

from lambda_client import invoke_lambda_async
from logging_config import get_logger, log_error
from models import Language, SymptomTag
from triage.response_builder import build_emergency_alert

logger = get_logger(__name__)


def notify_emergency_contacts(
    sender_id: str,
    symptom: SymptomTag,
    language: Language = Language.ENGLISH,
    function_arn: Optional[str] = None
) -> bool:
    """
    Queue an alert for the sender's emergency contacts.

    Returns True when the event was queued. Never raises.
    """
    function_arn = function_arn or os.getenv('EMERGENCY_ALERT_LAMBDA_ARN')
    if not function_arn:
        logger.warning("EMERGENCY_ALERT_LAMBDA_ARN not configured, skipping emergency alert")
        return False

    payload = {
        'sender_id': sender_id,
        'symptom': symptom.value,
        'message': build_emergency_alert(symptom, language),
        'primary_only': True,
    }

    try:
        invoke_lambda_async(function_arn, payload)
    except Exception as e:
        log_error(
            logger, e, "Failed to queue emergency alert",
            {'sender_id': sender_id, 'symptom': symptom.value}
        )
        return False

    logger.info(
        f"Emergency alert queued for {sender_id}",
        extra={'extra_fields': {'sender_id': sender_id, 'symptom': symptom.value}}
    )
    return True
