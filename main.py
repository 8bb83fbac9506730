# main.py
from fastapi import FastAPI, HTTPException, Request as FastAPIRequest
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv
import time
import uuid
import os

from models import (
    InboundMessage,
    MetricSampleRequest,
    RecoveryMetricSample,
    RecoverySnapshot,
    SnapshotRequest,
    TriageResult,
)
from background import shutdown as shutdown_background
from config_validator import parse_cors_origins
from recovery.thresholds import RecoveryThresholds
from recovery.timeline import get_recovery_snapshot, record_metric_sample
from storage import StoreError
from triage.interpret import interpret_inbound_message
from triage.response_builder import build_error_reply

# Import logging configuration
from logging_config import (
    setup_logging,
    get_logger,
    get_request_logger,
    log_error,
    log_request_start,
    log_request_end
)

load_dotenv()

# Initialize logging
setup_logging()
logger = get_logger(__name__)

app = FastAPI(title="Aarogya Health Triage & Recovery API", version="1.0.0")

logger.info("Aarogya triage & recovery API starting up")

thresholds = RecoveryThresholds.from_env()


# Configure CORS based on environment
def get_cors_origins():
    """
    Get allowed CORS origins from environment variable.
    In production, wildcard is not allowed.
    """
    environment = os.getenv("ENVIRONMENT", "development").lower()
    logger.info(f"Configuring CORS for environment: {environment}")

    try:
        origins = parse_cors_origins(os.getenv("ALLOWED_ORIGINS", ""), environment)
    except ValueError as e:
        logger.error(str(e))
        raise

    logger.info(f"CORS origins configured: {origins}")
    return origins


cors_origins = get_cors_origins()

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)


# Middleware for request logging
@app.middleware("http")
async def log_requests(request: FastAPIRequest, call_next):
    """
    Middleware to log all HTTP requests with timing information.
    """
    request_id = str(uuid.uuid4())
    start_time = time.time()

    log_request_start(
        logger,
        endpoint=request.url.path,
        extra={
            'request_id': request_id,
            'method': request.method,
            'client_host': request.client.host if request.client else None
        }
    )

    try:
        response = await call_next(request)

        duration_ms = (time.time() - start_time) * 1000
        log_request_end(
            logger,
            endpoint=request.url.path,
            status_code=response.status_code,
            duration_ms=duration_ms,
            extra={
                'request_id': request_id,
                'method': request.method
            }
        )
        response.headers["X-Request-ID"] = request_id
        return response

    except Exception as e:
        duration_ms = (time.time() - start_time) * 1000
        log_error(
            logger,
            e,
            f"Request failed: {request.url.path}",
            extra={
                'request_id': request_id,
                'method': request.method,
                'duration_ms': duration_ms
            }
        )

        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"}
        )


@app.get("/health")
def health():
    return {
        "status": "healthy",
        "service": "aarogya-triage",
        "environment": os.getenv("ENVIRONMENT", "development"),
    }


@app.post("/sms/inbound", response_model=TriageResult)
def sms_inbound(msg: InboundMessage):
    """
    Triage one inbound SMS. The sender always gets a reply: if anything
    unexpected fails, the generic error text is returned instead of a 500.
    """
    if not msg.sender_id.strip():
        raise HTTPException(status_code=400, detail="sender_id is required")

    request_logger = get_request_logger(__name__, sender_id=msg.sender_id, endpoint="/sms/inbound")

    try:
        result = interpret_inbound_message(msg)
        request_logger.info("Inbound SMS handled", extra={
            'extra_fields': {
                'risk_tier': result.risk_tier.value if result.risk_tier else None,
                'command': result.command.value if result.command else None,
                'onboarding': result.onboarding,
            }
        })
        return result
    except Exception as e:
        log_error(request_logger, e, "Failed to triage inbound SMS", {'sender_id': msg.sender_id})
        return TriageResult(message=build_error_reply())


@app.post("/recovery/snapshot", response_model=RecoverySnapshot)
def recovery_snapshot(req: SnapshotRequest):
    if not req.user_id.strip():
        raise HTTPException(status_code=400, detail="user_id is required")

    request_logger = get_request_logger(__name__, user_id=req.user_id, endpoint="/recovery/snapshot")

    try:
        return get_recovery_snapshot(req.user_id, thresholds=thresholds)
    except Exception as e:
        log_error(request_logger, e, "Failed to build recovery snapshot", {'user_id': req.user_id})
        raise HTTPException(status_code=500, detail="Error building recovery snapshot")


@app.post("/recovery/metrics", response_model=RecoveryMetricSample)
def recovery_metrics(req: MetricSampleRequest):
    if not req.user_id.strip():
        raise HTTPException(status_code=400, detail="user_id is required")

    request_logger = get_request_logger(__name__, user_id=req.user_id, endpoint="/recovery/metrics")

    try:
        return record_metric_sample(req.user_id, req.sample)
    except StoreError as e:
        log_error(request_logger, e, "Failed to store metric sample", {'user_id': req.user_id})
        raise HTTPException(status_code=503, detail="Metric store unavailable, please retry")


@app.on_event("shutdown")
def drain_background_work():
    """Let queued alerts and insight enrichment finish before the process exits."""
    logger.info("Draining background work pool")
    shutdown_background(wait=True)
