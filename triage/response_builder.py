# triage/response_builder.py
import random
from types import MappingProxyType
from typing import Optional, Sequence

from models import Language, RiskTier, SymptomTag
from .risk_engine import primary_symptom

DEFAULT_LANGUAGE = Language.ENGLISH

_LANGUAGE_ALIASES = MappingProxyType({
    "english": Language.ENGLISH,
    "en": Language.ENGLISH,
    "hindi": Language.HINDI,
    "hi": Language.HINDI,
    "हिन्दी": Language.HINDI,
    "हिंदी": Language.HINDI,
})

TEMPLATES = MappingProxyType({
    Language.ENGLISH: MappingProxyType({
        "green": "Aarogya: All looks OK today. Tip: {tip}. Reply HELP for options.",
        "yellow": (
            "Aarogya: Caution - we noticed {symptom}. Try home care: {remedy}. "
            "Re-check in 24 hrs or reply HELP for more."
        ),
        "red": (
            "Aarogya: URGENT - we found signs of {symptom}. Please contact a doctor "
            "or the nearest clinic now. If it gets worse, call local emergency services."
        ),
        "help": (
            "Aarogya: Send symptoms like: bleeding, fever, pain, sad, tired. "
            "Reply STOP to opt out. For emergency call local health services."
        ),
        "stop": "Aarogya: You have opted out of SMS alerts. Reply START to opt back in.",
        "start": "Aarogya: Welcome back! You can now receive health alerts. Send symptoms for guidance.",
        "welcome": (
            "Aarogya: Namaste{name}! Welcome to Aarogya. Send your daily symptoms like: "
            "\"bleeding\" or \"fever\" or \"sad\". For help reply HELP."
        ),
        "error": (
            "Aarogya: Sorry, there was an error processing your message. "
            "Please try again or contact support."
        ),
        "emergency_alert": (
            "Aarogya Emergency Alert: {symptom} detected. "
            "Please check on your family member immediately."
        ),
    }),
    Language.HINDI: MappingProxyType({
        "green": "आरोग्य: आज सब ठीक है। सुझाव: {tip}। विकल्पों के लिए HELP भेजें।",
        "yellow": (
            "आरोग्य: सावधान - {symptom} दिखा। घरेलू उपाय: {remedy}। "
            "24 घंटे में फिर से जांचें या HELP भेजें।"
        ),
        "red": (
            "आरोग्य: जरूरी - {symptom} के लक्षण मिले। तुरंत डॉक्टर या नजदीकी क्लिनिक से "
            "संपर्क करें। हालत बिगड़े तो आपातकालीन सेवा को कॉल करें।"
        ),
        "help": (
            "आरोग्य: लक्षण भेजें: खून, बुखार, दर्द, उदासी, थकान। "
            "बंद करने के लिए STOP भेजें। आपातकाल में स्थानीय स्वास्थ्य सेवा को कॉल करें।"
        ),
        "stop": "आरोग्य: आपने SMS अलर्ट बंद कर दिए हैं। फिर से शुरू करने के लिए START भेजें।",
        "start": "आरोग्य: फिर से स्वागत है! अब आपको स्वास्थ्य अलर्ट मिलेंगे। सलाह के लिए लक्षण भेजें।",
        "welcome": (
            "आरोग्य: नमस्ते{name}! आरोग्य में आपका स्वागत है। अपने लक्षण भेजें: "
            "\"खून\" या \"बुखार\" या \"उदासी\"। मदद के लिए HELP भेजें।"
        ),
        "error": "आरोग्य: माफ़ कीजिए, आपका संदेश संसाधित नहीं हो सका। कृपया फिर से कोशिश करें।",
        "emergency_alert": (
            "आरोग्य आपातकालीन अलर्ट: {symptom} के लक्षण मिले। "
            "कृपया तुरंत अपने परिवार के सदस्य की जांच करें।"
        ),
    }),
})

SYMPTOM_NAMES = MappingProxyType({
    Language.ENGLISH: MappingProxyType({
        SymptomTag.BLEEDING: "bleeding",
        SymptomTag.FEVER: "fever",
        SymptomTag.PAIN: "pain",
        SymptomTag.BREAST_PAIN: "breast pain",
        SymptomTag.URINATION_PAIN: "pain while urinating",
        SymptomTag.CRAMPING: "cramping",
        SymptomTag.LOW_MOOD: "low mood",
        SymptomTag.TIRED: "tiredness",
        SymptomTag.NAUSEA: "nausea",
        SymptomTag.HEADACHE: "headache",
    }),
    Language.HINDI: MappingProxyType({
        SymptomTag.BLEEDING: "खून बहना",
        SymptomTag.FEVER: "बुखार",
        SymptomTag.PAIN: "दर्द",
        SymptomTag.BREAST_PAIN: "स्तन में दर्द",
        SymptomTag.URINATION_PAIN: "पेशाब में दर्द",
        SymptomTag.CRAMPING: "ऐंठन",
        SymptomTag.LOW_MOOD: "उदासी",
        SymptomTag.TIRED: "थकान",
        SymptomTag.NAUSEA: "मतली",
        SymptomTag.HEADACHE: "सिरदर्द",
    }),
})

# Rotated on green replies.
GREEN_TIPS = MappingProxyType({
    Language.ENGLISH: (
        "Drink warm fluids and rest",
        "Take short walks when possible",
        "Eat nutritious meals regularly",
        "Get adequate sleep",
    ),
    Language.HINDI: (
        "गर्म तरल पिएं और आराम करें",
        "जब हो सके थोड़ा टहलें",
        "नियमित रूप से पौष्टिक भोजन करें",
        "पर्याप्त नींद लें",
    ),
})

HOME_REMEDIES = MappingProxyType({
    Language.ENGLISH: MappingProxyType({
        SymptomTag.PAIN: "Apply a warm compress and rest",
        SymptomTag.URINATION_PAIN: "Drink plenty of water",
        SymptomTag.CRAMPING: "Gentle massage and a warm bath",
        SymptomTag.LOW_MOOD: "Deep breathing exercises and talk to family",
    }),
    Language.HINDI: MappingProxyType({
        SymptomTag.PAIN: "गर्म सिकाई करें और आराम करें",
        SymptomTag.URINATION_PAIN: "खूब पानी पिएं",
        SymptomTag.CRAMPING: "हल्की मालिश और गुनगुने पानी से स्नान",
        SymptomTag.LOW_MOOD: "गहरी सांस लें और परिवार से बात करें",
    }),
})

FALLBACK_REMEDY = MappingProxyType({
    Language.ENGLISH: "Rest and monitor symptoms",
    Language.HINDI: "आराम करें और लक्षणों पर नज़र रखें",
})


def normalize_language(value: Optional[str]) -> Language:
    """
    Resolve a language name or code ('hindi', 'hi', 'hi-IN', ...) to a
    supported Language. Anything unknown falls back to the default.
    """
    if isinstance(value, Language):
        return value
    if not value:
        return DEFAULT_LANGUAGE

    normalized = value.strip().lower()
    if normalized in _LANGUAGE_ALIASES:
        return _LANGUAGE_ALIASES[normalized]

    base = normalized.replace("_", "-").split("-")[0]
    return _LANGUAGE_ALIASES.get(base, DEFAULT_LANGUAGE)


def symptom_name(tag: SymptomTag, language: Language) -> str:
    return SYMPTOM_NAMES[language][tag]


def build_triage_reply(
    tier: RiskTier,
    tags: Sequence[SymptomTag],
    language=DEFAULT_LANGUAGE,
    rng: Optional[random.Random] = None,
) -> str:
    """
    Render the guidance text for a classified report.

    Green (or nothing extracted): reassurance plus one rotating tip.
    Yellow: the primary symptom with a home remedy.
    Red: the primary symptom with an instruction to seek care now. No
    self-care remedy is given at this tier.

    ``rng`` picks the green tip; pass a seeded ``random.Random`` to pin it.
    """
    language = normalize_language(language)
    templates = TEMPLATES[language]
    primary = primary_symptom(tags)

    if tier == RiskTier.RED and primary is not None:
        return templates["red"].format(symptom=symptom_name(primary, language))

    if tier == RiskTier.YELLOW and primary is not None:
        remedy = HOME_REMEDIES[language].get(primary, FALLBACK_REMEDY[language])
        return templates["yellow"].format(
            symptom=symptom_name(primary, language),
            remedy=remedy,
        )

    tip = (rng or random).choice(GREEN_TIPS[language])
    return templates["green"].format(tip=tip)


def build_help_reply(language=DEFAULT_LANGUAGE) -> str:
    return TEMPLATES[normalize_language(language)]["help"]


def build_stop_reply(language=DEFAULT_LANGUAGE) -> str:
    return TEMPLATES[normalize_language(language)]["stop"]


def build_start_reply(language=DEFAULT_LANGUAGE) -> str:
    return TEMPLATES[normalize_language(language)]["start"]


def build_welcome_reply(name: Optional[str] = None, language=DEFAULT_LANGUAGE) -> str:
    name_part = f" {name.strip()}" if name and name.strip() else ""
    return TEMPLATES[normalize_language(language)]["welcome"].format(name=name_part)


def build_error_reply(language=DEFAULT_LANGUAGE) -> str:
    return TEMPLATES[normalize_language(language)]["error"]


def build_emergency_alert(tag: SymptomTag, language=DEFAULT_LANGUAGE) -> str:
    language = normalize_language(language)
    return TEMPLATES[language]["emergency_alert"].format(symptom=symptom_name(tag, language))
