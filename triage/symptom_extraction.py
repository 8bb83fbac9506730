# triage/symptom_extraction.py
from typing import List, Optional

from models import SymptomTag
from .lexicon import SYMPTOM_LEXICON


def extract_symptoms(text: Optional[str]) -> List[SymptomTag]:
    """
    Map a free-text report onto canonical symptom tags.

    A tag matches when any of its keywords is a case-insensitive substring of
    the text. Tags come back in lexicon order, never in the order they appear
    in the message, so the first tag is a stable "primary symptom".
    """
    if not text:
        return []

    lowered = text.casefold()
    return [
        tag
        for tag, keywords in SYMPTOM_LEXICON
        if any(keyword.casefold() in lowered for keyword in keywords)
    ]
