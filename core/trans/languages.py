"""Supported language table.

The set is fixed; requests naming any other language are rejected at the HTTP boundary.
"""

from __future__ import annotations

from typing import Final

__all__: list[str] = ["DEFAULT_LANGUAGE", "SUPPORTED_LANGUAGES", "is_supported", "language_name"]

SUPPORTED_LANGUAGES: Final[dict[str, str]] = {
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "it": "Italian",
    "pt": "Portuguese",
    "nl": "Dutch",
    "pl": "Polish",
    "ru": "Russian",
    "ar": "Arabic",
    "hi": "Hindi",
    "zh": "Chinese",
    "ja": "Japanese",
    "ko": "Korean",
    "vi": "Vietnamese",
    "th": "Thai",
    "tr": "Turkish",
}

# Fallback for failed or unusable language detection.
DEFAULT_LANGUAGE: Final[str] = "en"


def is_supported(code: object) -> bool:
    return isinstance(code, str) and code in SUPPORTED_LANGUAGES


def language_name(code: str | None, default: str = "the original language") -> str:
    """Display name of a language code, or ``default`` when the code is unknown or None."""
    if code is None:
        return default
    return SUPPORTED_LANGUAGES.get(code, default)
