"""Data models for the chat translation service.

This package contains dataclass definitions for configuration, cache entries, translation requests/results,
chat message state, and HTTP API payloads.
"""

from __future__ import annotations

from models.api_models import (
    CacheClearResponse,
    ErrorResponse,
    RoomTranslateResponse,
    TranslateRequest,
    TranslateResponse,
    UsageResponse,
)
from models.cache_models import CacheEntry, CacheStatistics
from models.chat_models import ChatMessageDTO, RenderedMessage, TranslationRequestState, TranslationStatus
from models.config_models import Config
from models.translation_models import CompletionRequest, TranslationResult

__all__: list[str] = [
    "CacheClearResponse",
    "CacheEntry",
    "CacheStatistics",
    "ChatMessageDTO",
    "CompletionRequest",
    "Config",
    "ErrorResponse",
    "RenderedMessage",
    "RoomTranslateResponse",
    "TranslateRequest",
    "TranslateResponse",
    "TranslationRequestState",
    "TranslationResult",
    "TranslationStatus",
    "UsageResponse",
]
