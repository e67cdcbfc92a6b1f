"""Translation service, completion engines and room broadcast.

This package provides cache-aware translation and language detection through pluggable completion engines,
with retry on transient failures and parallel translation for room broadcasts.
"""

from core.trans.broadcast import RoomTranslationBroadcaster
from core.trans.interface import (
    CompletionInterface,
    FailureKind,
    NotSupportedLanguagesError,
    TranslateExceptionError,
    TranslationConfigError,
    TranslationEmptyResponseError,
    TranslationNetworkError,
    TranslationRateLimitError,
    TranslationTimeoutError,
)
from core.trans.languages import DEFAULT_LANGUAGE, SUPPORTED_LANGUAGES
from core.trans.manager import TransManager

__all__: list[str] = [
    "DEFAULT_LANGUAGE",
    "SUPPORTED_LANGUAGES",
    "CompletionInterface",
    "FailureKind",
    "NotSupportedLanguagesError",
    "RoomTranslationBroadcaster",
    "TransManager",
    "TranslateExceptionError",
    "TranslationConfigError",
    "TranslationEmptyResponseError",
    "TranslationNetworkError",
    "TranslationRateLimitError",
    "TranslationTimeoutError",
]
