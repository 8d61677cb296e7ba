"""
String lookup for user-facing text.

The engine itself only deals in semantic keys (topics, tweak names, phase
names). Views call translate() to turn them into display strings.
"""
import re
import logging
from typing import Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"
SUPPORTED_LANGUAGES = ("en", "uk")

# "ua" shows up as a country code in client requests
LANGUAGE_ALIASES = {"ua": "uk"}

_CYRILLIC = re.compile(r"[Ѐ-ӿ]")
_LATIN = re.compile(r"[A-Za-z]")

TRANSLATIONS: Dict[str, Dict[str, str]] = {
    "en": {
        "topic.goal": "Goal",
        "topic.role": "Role",
        "topic.context": "Context",
        "topic.output_format": "Output format",
        "topic.warning": "Warnings",
        "topic.example": "Example",
        "tweak.make_funnier": "Make it funnier",
        "tweak.add_details": "Add more details",
        "tweak.make_shorter": "Make it shorter",
        "tweak.more_professional": "More professional",
        "phase.idle": "Describe what you need",
        "phase.awaiting_answers": "Answer a few questions",
        "phase.round_complete": "Working on it...",
        "phase.preliminary_offered": "Here is a first draft",
        "phase.result_ready": "Your prompt got better",
        "phase.finished": "All done!",
        "phase.max_iterations_reached": "Your prompt is ready",
        "score.excellent": "Excellent",
        "score.good": "Good",
        "score.needs_work": "Needs Work",
        "score.poor": "Poor",
    },
    "uk": {
        "topic.goal": "Мета",
        "topic.role": "Роль",
        "topic.context": "Контекст",
        "topic.output_format": "Формат відповіді",
        "topic.warning": "Застереження",
        "topic.example": "Приклад",
        "tweak.make_funnier": "Зробити смішніше",
        "tweak.add_details": "Додати деталей",
        "tweak.make_shorter": "Зробити коротше",
        "tweak.more_professional": "Більш професійно",
        "phase.idle": "Опишіть, що вам потрібно",
        "phase.awaiting_answers": "Дайте відповідь на кілька питань",
        "phase.round_complete": "Працюємо...",
        "phase.preliminary_offered": "Ось перша чернетка",
        "phase.result_ready": "Ваш промт став кращим",
        "phase.finished": "Готово!",
        "phase.max_iterations_reached": "Ваш промт готовий",
        "score.excellent": "Відмінно",
        "score.good": "Добре",
        "score.needs_work": "Потребує покращення",
        "score.poor": "Погано",
    },
}


def normalize_language(language: Optional[str]) -> str:
    """Map a client language code to a supported one."""
    if not language:
        return DEFAULT_LANGUAGE
    code = language.strip().lower().split("-")[0]
    code = LANGUAGE_ALIASES.get(code, code)
    return code if code in SUPPORTED_LANGUAGES else DEFAULT_LANGUAGE


def detect_language(text: str, selected: Optional[str] = None) -> str:
    """
    Pick the language for generation.

    An explicitly selected language wins. Otherwise Ukrainian is chosen when
    Cyrillic letters outnumber Latin ones in the text.
    """
    if selected:
        return normalize_language(selected)
    cyrillic = len(_CYRILLIC.findall(text or ""))
    latin = len(_LATIN.findall(text or ""))
    return "uk" if cyrillic > latin else DEFAULT_LANGUAGE


def translate(language: Optional[str], key: str, fallback: Optional[str] = None) -> str:
    """Look up a key in the language table, then English, then the fallback."""
    table = TRANSLATIONS.get(normalize_language(language), {})
    if key in table:
        return table[key]
    if key in TRANSLATIONS[DEFAULT_LANGUAGE]:
        return TRANSLATIONS[DEFAULT_LANGUAGE][key]
    if fallback is not None:
        return fallback
    logger.debug(f"Missing translation for {key!r}")
    return key


def translate_score_label(language: Optional[str], label: str) -> str:
    """Show an analysis score label in the given language, whichever table it came from."""
    for table in TRANSLATIONS.values():
        for key, value in table.items():
            if key.startswith("score.") and value == label:
                return translate(language, key, label)
    return label
