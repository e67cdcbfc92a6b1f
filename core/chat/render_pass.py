from __future__ import annotations

from collections import defaultdict, deque
from typing import TYPE_CHECKING

from models.chat_models import RenderedMessage

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from models.chat_models import ChatMessageDTO, TranslationRequestState


__all__: list[str] = ["RenderPass"]


class RenderPass:
    """Maps message texts back to message keys for a single render of the chat view.

    The chat view only hands over the original text of each message it draws. Messages sharing a text are
    consumed in (timestamp, input order) order, exactly once each, so N identical texts resolve to N distinct
    states. A new pass must be started for every render.
    """

    def __init__(
        self,
        visible_messages: Iterable[ChatMessageDTO],
        lookup: Callable[[str], TranslationRequestState | None],
    ) -> None:
        self._lookup: Callable[[str], TranslationRequestState | None] = lookup
        ordered: list[ChatMessageDTO] = sorted(visible_messages, key=lambda message: message.timestamp_ms)
        self._keys_by_text: defaultdict[str, deque[str]] = defaultdict(deque)
        for message in ordered:
            self._keys_by_text[message.text].append(message.message_key)

    def remaining(self, text: str) -> int:
        """Number of not-yet-formatted messages carrying this text."""
        keys: deque[str] | None = self._keys_by_text.get(text)
        return len(keys) if keys is not None else 0

    def format(self, text: str) -> RenderedMessage:
        """Resolve the next visible message with this text to its current translation state.

        Args:
            text (str): Original text of the message being drawn.

        Returns:
            RenderedMessage: Renderable value; plain original text when no message is left to match.
        """
        keys: deque[str] | None = self._keys_by_text.get(text)
        if not keys:
            return RenderedMessage(original_text=text)
        return RenderedMessage.from_state(text, self._lookup(keys.popleft()))
