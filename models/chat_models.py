"""Data models for chat messages and their per-message translation state.

Defines the chat record delivered by the room transport, the translation state tracked for it,
and the renderable value handed to the chat view.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final

from utils.string_utils import StringUtils

__all__: list[str] = [
    "ChatMessageDTO",
    "RenderedMessage",
    "TranslationRequestState",
    "TranslationStatus",
]

TRANSLATING_INDICATOR: Final[str] = "Translating..."
FAILED_INDICATOR: Final[str] = "Translation failed"


class TranslationStatus(Enum):
    PENDING = "pending"
    DONE = "done"
    ERROR = "error"


@dataclass(frozen=True)
class ChatMessageDTO:
    """Chat record as delivered by the room transport.

    Attributes:
        sender_identity (str): Identity of the participant who sent the message.
        timestamp_ms (int): Send time in milliseconds since the epoch.
        text (str): Message body.
        message_id (str | None): Transport-assigned unique id, if the transport provides one.
    """

    sender_identity: str
    timestamp_ms: int
    text: str
    message_id: str | None = None

    @property
    def message_key(self) -> str:
        """Stable identity of the message.

        The transport id is preferred. Without it, sender, timestamp and a digest of the text are combined so
        that identical texts from different senders or times never share a key.
        """
        if self.message_id:
            return self.message_id
        return f"{self.sender_identity}:{self.timestamp_ms}:{StringUtils.text_digest(self.text)}"


@dataclass(frozen=True)
class TranslationRequestState:
    """Translation state of one chat message.

    Attributes:
        key (str): Message key.
        status (TranslationStatus): Current status.
        translated_text (str | None): Translation once done; None for own messages and unfinished requests.
        error_detail (str | None): Human-readable failure detail for the ERROR status.
    """

    key: str
    status: TranslationStatus
    translated_text: str | None = None
    error_detail: str | None = None

    @property
    def is_settled(self) -> bool:
        return self.status is not TranslationStatus.PENDING


@dataclass(frozen=True)
class RenderedMessage:
    """What the chat view shows for one visible message.

    The original text is always present so that the view can fall back to it while pending or on failure.
    """

    original_text: str
    status: TranslationStatus | None = None
    translated_text: str | None = None
    error_detail: str | None = None

    @property
    def has_translation(self) -> bool:
        return self.status is TranslationStatus.DONE and self.translated_text is not None

    @property
    def indicator(self) -> str | None:
        if self.status is TranslationStatus.PENDING:
            return TRANSLATING_INDICATOR
        if self.status is TranslationStatus.ERROR:
            return FAILED_INDICATOR
        return None

    @classmethod
    def from_state(cls, original_text: str, state: TranslationRequestState | None) -> RenderedMessage:
        if state is None:
            return cls(original_text=original_text)
        return cls(
            original_text=original_text,
            status=state.status,
            translated_text=state.translated_text,
            error_detail=state.error_detail,
        )
