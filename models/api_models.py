"""Data models for the translate HTTP API payloads.

Payloads use camelCase keys on the wire and snake_case attributes in Python.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from dataclasses_json import DataClassJsonMixin, LetterCase, dataclass_json

__all__: list[str] = [
    "CacheClearResponse",
    "ErrorResponse",
    "RoomTranslateResponse",
    "TranslateRequest",
    "TranslateResponse",
    "UsageResponse",
]


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class TranslateRequest(DataClassJsonMixin):
    """POST body. Exactly one of target_language / target_languages is expected."""

    text: str | None = None
    target_language: str | None = None
    target_languages: list[str] | None = None
    source_language: str | None = None


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class TranslateResponse(DataClassJsonMixin):
    original_text: str
    translated_text: str
    target_language: str
    source_language: str | None = None
    cached: bool = False
    success: bool = True


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class RoomTranslateResponse(DataClassJsonMixin):
    original_text: str
    translations: dict[str, str]
    source_language: str
    success: bool = True


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class ErrorResponse(DataClassJsonMixin):
    error: str
    details: str | None = None


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class UsageResponse(DataClassJsonMixin):
    supported_languages: dict[str, str]
    usage: dict[str, dict[str, object]] = field(default_factory=dict)


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class CacheClearResponse(DataClassJsonMixin):
    """Statistics captured immediately before the cache was cleared."""

    cleared_entries: int
    hits: int
    misses: int
    expirations: int
    evictions: int
    success: bool = True
