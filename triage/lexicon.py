# triage/lexicon.py
"""
Keyword lexicon for SMS symptom reports.

Each entry pairs a canonical tag with keywords in English, romanised Hindi and
Devanagari. Entry order is significant: extraction returns tags in this order
and the first one is treated as the primary symptom.
"""

from typing import Tuple

from models import SymptomTag

SymptomKeywords = Tuple[SymptomTag, Tuple[str, ...]]

SYMPTOM_LEXICON: Tuple[SymptomKeywords, ...] = (
    (SymptomTag.BLEEDING, ("bleeding", "bleed", "blood", "discharge", "khoon", "rakt", "खून", "रक्त")),
    (SymptomTag.FEVER, ("fever", "feverish", "hot", "temperature", "bukhar", "taap", "बुखार")),
    (SymptomTag.PAIN, ("pain", "painful", "ache", "hurts", "dard", "दर्द")),
    (SymptomTag.BREAST_PAIN, ("breast", "nipple", "mastitis", "स्तन", "निप्पल")),
    (SymptomTag.URINATION_PAIN, ("urine", "urination", "pee", "bladder", "peshab", "पेशाब")),
    (SymptomTag.CRAMPING, ("cramp", "contraction", "ainthan", "marod", "ऐंठन", "मरोड़")),
    (SymptomTag.LOW_MOOD, ("sad", "depressed", "low", "down", "mood", "udaas", "उदास")),
    (SymptomTag.TIRED, ("tired", "exhausted", "fatigue", "weak", "thakaan", "kamzor", "थकान", "कमजोर")),
    (SymptomTag.NAUSEA, ("nausea", "nauseous", "vomit", "sick", "ulti", "ji machal", "उल्टी", "मतली")),
    (SymptomTag.HEADACHE, ("headache", "head pain", "migraine", "sir dard", "सिर दर्द", "सिरदर्द")),
)
