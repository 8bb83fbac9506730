"""
Supplementary recovery insights.

Insights are optional enrichment on top of the rule-based snapshot. Any
failure here degrades to a locally generated insight; nothing in this module
may block or break a snapshot.
"""

import json
import os
import re
import time
from typing import Any, Dict, List, Optional, Protocol

import boto3

from background import submit_background
from insight_cache import InsightCache, get_insight_cache
from logging_config import get_logger, log_aws_service_call, log_error
from models import Insight, InsightPriority, RecoverySnapshot

logger = get_logger(__name__)

DEFAULT_BEDROCK_MODEL = "anthropic.claude-3-haiku-20240307-v1:0"
MAX_INSIGHTS = 3

_JSON_LIST = re.compile(r"\[.*\]", re.DOTALL)


class InsightEnricher(Protocol):
    def enrich(self, context: Dict[str, Any]) -> List[Insight]:
        ...


def local_recovery_insights() -> List[Insight]:
    return [Insight(
        title="Recovery Progress",
        description="You are actively tracking your recovery journey.",
        recommendation=(
            "Continue monitoring your recovery milestones and consult your "
            "healthcare provider for any concerns."
        ),
        priority=InsightPriority.MEDIUM,
        source="local_analysis",
    )]


class LocalInsightEnricher:
    """Used when AI insights are disabled."""

    def enrich(self, context: Dict[str, Any]) -> List[Insight]:
        return local_recovery_insights()


def build_enrichment_context(snapshot: RecoverySnapshot) -> Dict[str, Any]:
    return {
        "phase": snapshot.phase,
        "days_since_delivery": snapshot.days_since_delivery,
        "percent": snapshot.percent,
        "delivery_type": snapshot.delivery_type.value,
        "milestones": [m.title for m in snapshot.milestones],
        "predictions": [p.title for p in snapshot.predictions],
    }


def build_insight_prompt(context: Dict[str, Any]) -> str:
    lines = [
        f"Analyze postpartum recovery data and provide {MAX_INSIGHTS} insights in JSON format.",
        "",
        "RECOVERY DATA:",
        f"Delivery: {context.get('delivery_type', 'vaginal')}, "
        f"day {context.get('days_since_delivery', 0)}, "
        f"{context.get('percent', 0)}% of expected recovery ({context.get('phase', '')})",
    ]
    if context.get("milestones"):
        lines.append("Milestones: " + ", ".join(context["milestones"][:3]))
    if context.get("predictions"):
        lines.append("Predictions: " + ", ".join(context["predictions"][:2]))
    lines += [
        "",
        'Provide JSON only: [{"title":"Title","description":"Description",'
        '"recommendation":"Action","priority":"high/medium/low"}]',
        "Do not give a diagnosis. Recommend a healthcare provider for any medical concern.",
    ]
    return "\n".join(lines)


def parse_insights(text: str) -> List[Insight]:
    """
    Pull the first JSON list out of the model text. Raises ValueError when
    there is no usable list.
    """
    match = _JSON_LIST.search(text or "")
    if not match:
        raise ValueError("No JSON list in model response")

    items = json.loads(match.group(0))
    if not isinstance(items, list):
        raise ValueError("Model response is not a list")

    insights = []
    for item in items[:MAX_INSIGHTS]:
        if not isinstance(item, dict):
            continue
        priority = str(item.get("priority", "medium")).lower()
        if priority not in {p.value for p in InsightPriority}:
            priority = InsightPriority.MEDIUM.value
        insights.append(Insight(
            title=item.get("title") or "Recovery Insight",
            description=item.get("description") or "AI-generated recovery insight",
            recommendation=item.get("recommendation") or "Continue monitoring your recovery",
            priority=InsightPriority(priority),
            source="ai_generated",
        ))

    if not insights:
        raise ValueError("Model response contained no insights")
    return insights


class BedrockInsightEnricher:
    """
    Prompts a Bedrock Anthropic model for recovery insights.
    """

    def __init__(self, model_id: Optional[str] = None, region: Optional[str] = None, client=None):
        self.model_id = model_id or os.getenv("BEDROCK_INFERENCE_PROFILE_ARN") or os.getenv(
            "BEDROCK_MODEL", DEFAULT_BEDROCK_MODEL
        )
        self.region = region or os.getenv("BEDROCK_REGION", os.getenv("AWS_REGION", "us-east-1"))
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = boto3.client("bedrock-runtime", region_name=self.region)
        return self._client

    def _invoke(self, prompt: str) -> str:
        body = {
            "anthropic_version": "bedrock-2023-05-31",
            "max_tokens": 600,
            "temperature": 0.3,
            "messages": [
                {"role": "user", "content": [{"type": "text", "text": prompt}]}
            ],
        }

        start_time = time.time()
        try:
            response = self.client.invoke_model(
                modelId=self.model_id,
                body=json.dumps(body),
                accept="application/json",
                contentType="application/json",
            )
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            log_aws_service_call(logger, 'bedrock', 'invoke_model', False, duration_ms, e)
            raise
        duration_ms = (time.time() - start_time) * 1000
        log_aws_service_call(logger, 'bedrock', 'invoke_model', True, duration_ms,
                             extra={'model_id': self.model_id})

        response_json = json.loads(response["body"].read())
        return response_json["content"][0]["text"].strip()

    def enrich(self, context: Dict[str, Any]) -> List[Insight]:
        try:
            return parse_insights(self._invoke(build_insight_prompt(context)))
        except Exception as e:
            log_error(logger, e, "Falling back to local recovery insights",
                      {'model_id': self.model_id})
            return local_recovery_insights()


def ai_insights_enabled() -> bool:
    return os.getenv("ENABLE_AI_INSIGHTS", "true").lower() in ("1", "true", "yes")


def get_default_enricher() -> InsightEnricher:
    if ai_insights_enabled():
        return BedrockInsightEnricher()
    return LocalInsightEnricher()


def _enrich_and_cache(user_id: str, context: Dict[str, Any], enricher: InsightEnricher,
                      cache: InsightCache) -> None:
    try:
        insights = enricher.enrich(context)
    except Exception as e:
        log_error(logger, e, "Insight enrichment failed", {'user_id': user_id})
        insights = local_recovery_insights()
    cache.store(user_id, insights)


def schedule_enrichment(
    user_id: str,
    snapshot: RecoverySnapshot,
    enricher: Optional[InsightEnricher] = None,
    cache: Optional[InsightCache] = None,
    dispatch=submit_background,
):
    """
    Fire-and-forget: enrich in the background and cache the result for the
    user's next snapshot. Returns whatever ``dispatch`` returns (a Future for
    the default pool); callers must not wait on it on a request path.
    """
    return dispatch(
        _enrich_and_cache,
        user_id,
        build_enrichment_context(snapshot),
        enricher or get_default_enricher(),
        cache or get_insight_cache(),
        description="insight enrichment",
    )
