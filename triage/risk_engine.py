# triage/risk_engine.py
from typing import Iterable, Optional, Sequence

from models import RiskTier, SymptomTag

# Seek care now.
RED_FLAGS = frozenset({
    SymptomTag.BLEEDING,
    SymptomTag.FEVER,
    SymptomTag.BREAST_PAIN,
})

# Self-care and monitor.
YELLOW_FLAGS = frozenset({
    SymptomTag.PAIN,
    SymptomTag.URINATION_PAIN,
    SymptomTag.CRAMPING,
    SymptomTag.LOW_MOOD,
})


def assess_risk(tags: Iterable[SymptomTag]) -> RiskTier:
    """
    Classify a set of extracted tags into green / yellow / red.

    Tags co-occur, so red flags are checked before yellow ones: a single red
    flag makes the whole report red whatever else was mentioned.
    """
    tags = set(tags)

    if tags & RED_FLAGS:
        return RiskTier.RED

    if tags & YELLOW_FLAGS:
        return RiskTier.YELLOW

    return RiskTier.GREEN


def primary_symptom(tags: Sequence[SymptomTag]) -> Optional[SymptomTag]:
    """First tag in lexicon order, or None when nothing was extracted."""
    return tags[0] if tags else None
