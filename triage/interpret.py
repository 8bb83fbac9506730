# triage/interpret.py
import random
from typing import Callable, Optional, Tuple

from background import submit_background
from emergency_alerts import notify_emergency_contacts
from logging_config import get_request_logger, log_error
from models import (
    CheckInRecord,
    Command,
    InboundMessage,
    RiskTier,
    SenderProfile,
    TriageResult,
)
from storage import Stores, get_stores
from .commands import interpret_command
from .response_builder import (
    build_help_reply,
    build_start_reply,
    build_stop_reply,
    build_triage_reply,
    build_welcome_reply,
    normalize_language,
)
from .risk_engine import assess_risk, primary_symptom
from .symptom_extraction import extract_symptoms

Dispatcher = Callable[..., object]


def _load_profile(stores: Stores, sender_id: str, request_logger) -> Tuple[Optional[SenderProfile], bool]:
    """
    Returns (profile, lookup_failed). A missing profile is (None, False);
    a store failure is (None, True) and must not be treated as a new sender.
    """
    try:
        return stores.profiles.get_profile(sender_id), False
    except Exception as e:
        log_error(request_logger, e, "Could not load sender profile", {'sender_id': sender_id})
        return None, True


def _set_consent(stores: Stores, sender_id: str, consent: bool, request_logger) -> None:
    try:
        stores.profiles.set_sms_consent(sender_id, consent)
        request_logger.info(f"SMS consent set to {consent}")
    except Exception as e:
        log_error(request_logger, e, "Could not update SMS consent", {'sender_id': sender_id, 'consent': consent})


def _save_checkin(stores: Stores, record: CheckInRecord, request_logger) -> None:
    try:
        stores.checkins.save_checkin(record)
    except Exception as e:
        log_error(request_logger, e, "Could not save SMS check-in", {'sender_id': record.sender_id})


def interpret_inbound_message(
    message: InboundMessage,
    stores: Optional[Stores] = None,
    dispatch: Dispatcher = submit_background,
    rng: Optional[random.Random] = None,
) -> TriageResult:
    """
    Answer one inbound SMS.

    Order of evaluation:
      1. control commands (help / stop / start),
      2. onboarding for senders without a profile,
      3. symptom extraction, risk tier, reply.

    The tier and reply are decided from the text alone before any write. The
    check-in record and the emergency alert are best-effort side effects: a
    failure is logged and the reply is returned unchanged. ``dispatch`` runs
    the alert off the request path (tests pass a synchronous runner).
    """
    stores = stores or get_stores()
    request_logger = get_request_logger(__name__, sender_id=message.sender_id, endpoint="triage")

    command = interpret_command(message.raw_text)
    tags = extract_symptoms(message.raw_text)
    tier = assess_risk(tags)

    profile, lookup_failed = _load_profile(stores, message.sender_id, request_logger)
    language = normalize_language(profile.preferred_language if profile else None)

    if command == Command.HELP:
        request_logger.info("HELP command received")
        return TriageResult(message=build_help_reply(language), language=language, command=command)

    if command == Command.STOP:
        _set_consent(stores, message.sender_id, False, request_logger)
        return TriageResult(message=build_stop_reply(language), language=language, command=command)

    if command == Command.START:
        _set_consent(stores, message.sender_id, True, request_logger)
        return TriageResult(message=build_start_reply(language), language=language, command=command)

    if profile is None and not lookup_failed:
        request_logger.info("Unknown sender, sending onboarding welcome")
        return TriageResult(
            message=build_welcome_reply(language=language),
            language=language,
            onboarding=True,
        )

    reply = build_triage_reply(tier, tags, language, rng=rng)

    request_logger.info(
        f"Triage result: {tier.value}",
        extra={'extra_fields': {'risk_tier': tier.value, 'tags': [t.value for t in tags]}}
    )

    if tags:
        _save_checkin(
            stores,
            CheckInRecord(
                sender_id=message.sender_id,
                date=message.timestamp.date(),
                tags=tags,
                tier=tier,
                raw_text=message.raw_text,
            ),
            request_logger,
        )

    if tier == RiskTier.RED:
        try:
            dispatch(
                notify_emergency_contacts,
                message.sender_id,
                primary_symptom(tags),
                language,
                description="emergency alert",
            )
        except Exception as e:
            log_error(request_logger, e, "Could not dispatch emergency alert", {'sender_id': message.sender_id})

    return TriageResult(
        risk_tier=tier,
        matched_tags=tags,
        message=reply,
        language=language,
    )
