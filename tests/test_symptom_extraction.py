"""
Tests for keyword symptom extraction.
"""
import pytest
from hypothesis import given, strategies as st

from models import SymptomTag
from triage.lexicon import SYMPTOM_LEXICON
from triage.symptom_extraction import extract_symptoms


LEXICON_ORDER = [tag for tag, _ in SYMPTOM_LEXICON]
LEXICON_KEYWORDS = dict(SYMPTOM_LEXICON)


class TestExtractSymptoms:
    """Keyword matching against free text"""

    def test_empty_text_returns_no_tags(self):
        assert extract_symptoms("") == []
        assert extract_symptoms(None) == []

    def test_text_without_keywords_returns_no_tags(self):
        assert extract_symptoms("all good today, baby slept well") == []

    def test_case_insensitive(self):
        assert extract_symptoms("BLEEDING since morning") == [SymptomTag.BLEEDING]

    def test_substring_match(self):
        """'painful' contains 'pain'"""
        assert SymptomTag.PAIN in extract_symptoms("stitches are painful")

    def test_romanised_hindi(self):
        assert extract_symptoms("mujhe bukhar hai") == [SymptomTag.FEVER]

    def test_devanagari(self):
        assert extract_symptoms("बहुत खून आ रहा है") == [SymptomTag.BLEEDING]

    def test_multiple_tags_in_lexicon_order(self):
        """Order follows the lexicon, not the message"""
        tags = extract_symptoms("fever and bleeding")
        assert tags == [SymptomTag.BLEEDING, SymptomTag.FEVER]

    def test_tag_appears_once_even_if_repeated(self):
        tags = extract_symptoms("blood, bleeding, khoon")
        assert tags == [SymptomTag.BLEEDING]

    def test_breast_pain_also_matches_pain(self):
        tags = extract_symptoms("breast pain")
        assert tags == [SymptomTag.PAIN, SymptomTag.BREAST_PAIN]

    def test_low_mood_keywords(self):
        assert extract_symptoms("feeling sad") == [SymptomTag.LOW_MOOD]
        assert extract_symptoms("main udaas hoon") == [SymptomTag.LOW_MOOD]

    @pytest.mark.parametrize("tag", LEXICON_ORDER)
    def test_every_keyword_maps_to_its_tag(self, tag):
        for keyword in LEXICON_KEYWORDS[tag]:
            assert tag in extract_symptoms(f"today {keyword} again")


class TestLexicon:
    """Static lexicon table"""

    def test_every_tag_has_keywords(self):
        assert set(LEXICON_ORDER) == set(SymptomTag)
        for tag in SymptomTag:
            assert LEXICON_KEYWORDS[tag], f"{tag} has no keywords"

    def test_lexicon_order_matches_enum_declaration(self):
        assert LEXICON_ORDER == list(SymptomTag)


@given(st.text(max_size=200))
def test_extraction_output_is_ordered_and_unique(text):
    """
    Property: for any text, tags are unique and in lexicon order.
    """
    tags = extract_symptoms(text)
    positions = [LEXICON_ORDER.index(tag) for tag in tags]
    assert positions == sorted(set(positions))


@given(st.lists(st.sampled_from(LEXICON_ORDER), min_size=1, max_size=5))
def test_extraction_finds_every_mentioned_tag(tags):
    """
    Property: mentioning a tag's first keyword always yields that tag.
    """
    text = " ".join(LEXICON_KEYWORDS[tag][0] for tag in tags)
    extracted = extract_symptoms(text)
    for tag in tags:
        assert tag in extracted
