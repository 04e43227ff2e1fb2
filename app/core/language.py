# File: app/core/language.py
"""
Language code normalization.

Callers resolve the request language before entering the services: values
such as "pt", "EN" or an Accept-Language header ("pt-BR,pt;q=0.9,en;q=0.8")
are reduced to a supported two-letter code. Unsupported or empty values fall
back to the configured default language instead of raising.
"""

import logging
from typing import List, Optional

from app.core.config import settings

logger = logging.getLogger(__name__)


def get_supported_languages() -> List[str]:
    """Get list of supported language codes from configuration."""
    return list(settings.SUPPORTED_LANGUAGES)


def get_default_language() -> str:
    return settings.DEFAULT_LANGUAGE


def is_supported_language(language: Optional[str]) -> bool:
    return bool(language) and language.lower() in settings.SUPPORTED_LANGUAGES


def normalize_language(value: Optional[str]) -> str:
    """
    Reduce a language code or Accept-Language value to a supported code.

    Args:
        value: Raw language value from the caller

    Returns:
        Supported lower-case language code, or the default language
    """
    default_language = get_default_language()
    if not value or not value.strip():
        return default_language

    # "pt-BR,pt;q=0.9" -> "pt-BR" -> "pt"
    first = value.split(",")[0].split(";")[0].strip()
    code = first.replace("_", "-").split("-")[0].lower()

    if code in settings.SUPPORTED_LANGUAGES:
        return code

    logger.warning(
        f"Unsupported language '{value}', falling back to '{default_language}'"
    )
    return default_language
