import logging
from typing import Optional

from agriwise.core.config import settings

logger = logging.getLogger(__name__)

LANGUAGES: dict[str, str] = {
    "en": "English",
    "hi": "हिंदी (Hindi)",
    "pa": "ਪੰਜਾਬੀ (Punjabi)",
    "ta": "தமிழ் (Tamil)",
    "te": "తెలుగు (Telugu)",
    "bn": "বাংলা (Bengali)",
    "es": "Español",
    "fr": "Français",
}


def fallback_language_code() -> str:
    if settings.FALLBACK_LANGUAGE in LANGUAGES:
        return settings.FALLBACK_LANGUAGE
    logger.warning(
        "FALLBACK_LANGUAGE %r is not a supported language, using English",
        settings.FALLBACK_LANGUAGE,
    )
    return "en"


def resolve_language_code(code: Optional[str]) -> str:
    """Return a registered language code, falling back to the base language."""
    normalized = (code or "").strip().lower()
    if normalized in LANGUAGES:
        return normalized
    fallback = fallback_language_code()
    logger.debug("Unknown language code %r, falling back to %s", code, fallback)
    return fallback


def get_language_name(code: Optional[str]) -> str:
    return LANGUAGES.get(resolve_language_code(code), LANGUAGES["en"])
