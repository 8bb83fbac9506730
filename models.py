# models.py
from enum import Enum
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
import datetime


# ─────────────────────────────────────────
# TRIAGE
# ─────────────────────────────────────────

class SymptomTag(str, Enum):
    # Declaration order is the lexicon order; "primary symptom" relies on it.
    BLEEDING = "bleeding"
    FEVER = "fever"
    PAIN = "pain"
    BREAST_PAIN = "breast_pain"
    URINATION_PAIN = "urination_pain"
    CRAMPING = "cramping"
    LOW_MOOD = "low_mood"
    TIRED = "tired"
    NAUSEA = "nausea"
    HEADACHE = "headache"


class RiskTier(str, Enum):
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"

    @property
    def rank(self) -> int:
        return _RISK_RANK[self]

    # str comparison would order alphabetically; compare by severity instead.
    def __lt__(self, other):
        if not isinstance(other, RiskTier):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, RiskTier):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, RiskTier):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, RiskTier):
            return NotImplemented
        return self.rank >= other.rank


_RISK_RANK = {RiskTier.GREEN: 0, RiskTier.YELLOW: 1, RiskTier.RED: 2}


class Language(str, Enum):
    ENGLISH = "english"
    HINDI = "hindi"


class Command(str, Enum):
    HELP = "help"
    STOP = "stop"
    START = "start"


class InboundMessage(BaseModel):
    """
    Raw text message handed over by the messaging transport.
    """
    sender_id: str
    raw_text: str
    timestamp: datetime.datetime = Field(
        default_factory=lambda: datetime.datetime.now(datetime.timezone.utc)
    )


class TriageResult(BaseModel):
    """
    Answer for one inbound message. risk_tier is None when a control command
    or the onboarding path answered instead of the symptom rules.
    """
    risk_tier: Optional[RiskTier] = None
    matched_tags: List[SymptomTag] = []
    message: str
    language: Language = Language.ENGLISH
    command: Optional[Command] = None
    onboarding: bool = False


class CheckInRecord(BaseModel):
    sender_id: str
    date: datetime.date
    tags: List[SymptomTag]
    tier: RiskTier
    raw_text: str
    source: str = "sms"


# ─────────────────────────────────────────
# PROFILE / DELIVERY
# ─────────────────────────────────────────

class DeliveryType(str, Enum):
    VAGINAL = "vaginal"
    CESAREAN = "cesarean"

    @classmethod
    def parse(cls, value) -> "DeliveryType":
        """Map stored/legacy spellings onto the enum; unknown means vaginal."""
        if isinstance(value, DeliveryType):
            return value
        normalized = (value or "").strip().lower().replace("-", "_")
        if normalized in ("cesarean", "caesarean", "c_section", "csection"):
            return cls.CESAREAN
        return cls.VAGINAL


class SenderProfile(BaseModel):
    sender_id: str                       # phone number for SMS senders
    user_id: Optional[str] = None        # app account, if linked
    name: Optional[str] = None
    preferred_language: Optional[str] = None
    sms_consent: bool = True


class DeliveryContext(BaseModel):
    delivery_type: DeliveryType = DeliveryType.VAGINAL
    delivery_date: Optional[datetime.date] = None

    @field_validator("delivery_type", mode="before")
    @classmethod
    def _parse_delivery_type(cls, value):
        return DeliveryType.parse(value)


# ─────────────────────────────────────────
# RECOVERY
# ─────────────────────────────────────────

class RecoveryMetricSample(BaseModel):
    date: datetime.date
    energy_level: int = Field(ge=1, le=10)
    mood_score: int = Field(ge=1, le=10)
    sleep_hours: float = Field(ge=0, le=24)
    notes: Optional[str] = None


class Milestone(BaseModel):
    day_offset: int
    title: str
    description: str
    achieved: bool = False
    upcoming: bool = False


class PredictionPolarity(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    INSIGHT = "insight"


class Prediction(BaseModel):
    title: str
    description: str
    polarity: PredictionPolarity


class TipCategory(str, Enum):
    SLEEP = "sleep"
    FAMILY = "family"
    HEALTH = "health"


class Tip(BaseModel):
    title: str
    description: str
    category: TipCategory


class TodaysFocus(BaseModel):
    title: str
    message: str


class InsightPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Insight(BaseModel):
    """
    Supplementary, AI-generated (or locally generated fallback) insight.
    Never required for a correct snapshot.
    """
    title: str
    description: str
    recommendation: str
    priority: InsightPriority = InsightPriority.MEDIUM
    source: str = "local_analysis"


class RecoverySnapshot(BaseModel):
    """
    Recomputed on every request; never persisted.
    """
    phase: str
    days_since_delivery: int
    percent: int
    delivery_type: DeliveryType
    milestones: List[Milestone] = []
    predictions: List[Prediction] = []
    tips: List[Tip] = []
    todays_focus: TodaysFocus
    insights: List[Insight] = []


# ─────────────────────────────────────────
# API
# ─────────────────────────────────────────

class SnapshotRequest(BaseModel):
    user_id: str


class MetricSampleRequest(BaseModel):
    user_id: str
    sample: RecoveryMetricSample
