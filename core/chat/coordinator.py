"""Per-message translation coordinator for the chat view.

Tracks one translation state per chat message, keeps at most one request in flight per message, and discards
results that arrive after the target language changed or the view was torn down.
"""

from __future__ import annotations

import asyncio
from types import MappingProxyType
from typing import TYPE_CHECKING

from core.chat.render_pass import RenderPass
from core.trans.interface import TranslateExceptionError
from models.chat_models import TranslationRequestState, TranslationStatus
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable, Iterable, Mapping

    from core.trans.manager import TransManager
    from models.chat_models import ChatMessageDTO, RenderedMessage
    from models.translation_models import TranslationResult


__all__: list[str] = ["ChatTranslationCoordinator"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

UNEXPECTED_ERROR_DETAIL: str = "Unexpected error during translation"


class ChatTranslationCoordinator:
    """Coordinates translation of a live chat stream into one target language.

    State per message key moves ``unseen -> PENDING -> DONE | ERROR`` and never leaves DONE or ERROR.
    Every request task is tagged with the generation it was started in; a language change or teardown bumps
    the generation, so a late result from an earlier generation is never committed.
    """

    def __init__(self, trans_manager: TransManager, *, local_identity: str, target_language: str) -> None:
        """Initialize the coordinator.

        Args:
            trans_manager (TransManager): Translation service shared with other consumers.
            local_identity (str): Identity of the local participant; their messages are never translated.
            target_language (str): Language the chat is translated into.
        """
        self.trans_manager: TransManager = trans_manager
        self.local_identity: str = local_identity
        self._target_language: str = target_language
        self._states: dict[str, TranslationRequestState] = {}
        self._inflight: dict[str, asyncio.Task[None]] = {}
        self._generation: int = 0
        self._closed: bool = False

    @property
    def target_language(self) -> str:
        return self._target_language

    @property
    def states(self) -> Mapping[str, TranslationRequestState]:
        """Read-only view of the current per-message states."""
        return MappingProxyType(self._states)

    @property
    def pending_count(self) -> int:
        return len(self._inflight)

    @property
    def is_closed(self) -> bool:
        return self._closed

    def state_for(self, key: str) -> TranslationRequestState | None:
        return self._states.get(key)

    def observe(self, message: ChatMessageDTO) -> str:
        """Register a chat message and start its translation if needed.

        Idempotent per message key, so redelivered or re-rendered messages are ignored.

        Args:
            message (ChatMessageDTO): Incoming chat record.

        Returns:
            str: The message key.

        Raises:
            RuntimeError: If the coordinator has been closed.
        """
        if self._closed:
            msg = "ChatTranslationCoordinator is closed"
            raise RuntimeError(msg)

        key: str = message.message_key
        if key in self._states:
            return key

        if message.sender_identity == self.local_identity:
            self._states[key] = TranslationRequestState(key=key, status=TranslationStatus.DONE)
            logger.debug("Own message, translation skipped: %s", key)
            return key

        self._states[key] = TranslationRequestState(key=key, status=TranslationStatus.PENDING)
        task: asyncio.Task[None] = asyncio.get_running_loop().create_task(
            self._translate_message(key, message.text, self._target_language, self._generation),
            name=f"chat-translate:{key}",
        )
        self._inflight[key] = task
        logger.debug("Translation requested for message: %s", key)
        return key

    def observe_many(self, messages: Iterable[ChatMessageDTO]) -> list[str]:
        return [self.observe(message) for message in messages]

    async def _translate_message(self, key: str, text: str, target_language: str, generation: int) -> None:
        try:
            result: TranslationResult = await self.trans_manager.translate(text, target_language)
        except asyncio.CancelledError:
            logger.debug("Translation cancelled for message: %s", key)
            raise
        except TranslateExceptionError as err:
            logger.warning("Translation failed for message %s: %s", key, err)
            self._commit(
                key,
                generation,
                TranslationRequestState(key=key, status=TranslationStatus.ERROR, error_detail=str(err)),
            )
        except Exception:
            logger.exception("Unexpected error while translating message %s", key)
            self._commit(
                key,
                generation,
                TranslationRequestState(key=key, status=TranslationStatus.ERROR, error_detail=UNEXPECTED_ERROR_DETAIL),
            )
        else:
            self._commit(
                key,
                generation,
                TranslationRequestState(key=key, status=TranslationStatus.DONE, translated_text=result.translated_text),
            )
        finally:
            if generation == self._generation:
                self._inflight.pop(key, None)

    def _commit(self, key: str, generation: int, state: TranslationRequestState) -> bool:
        """Store a finished state unless the request went stale in the meantime.

        Returns:
            bool: True if the state was stored.
        """
        if self._closed or generation != self._generation:
            logger.debug("Discarding stale translation result for message: %s", key)
            return False

        current: TranslationRequestState | None = self._states.get(key)
        if current is None or current.is_settled:
            logger.debug("Discarding translation result for settled or unknown message: %s", key)
            return False

        self._states[key] = state
        return True

    def _reset(self) -> list[asyncio.Task[None]]:
        """Cancel every request and drop all state within the current event-loop turn.

        Returns:
            list[asyncio.Task[None]]: The cancelled tasks.
        """
        tasks: list[asyncio.Task[None]] = list(self._inflight.values())
        for task in tasks:
            task.cancel()
        self._inflight.clear()
        self._states.clear()
        self._generation += 1
        return tasks

    def set_target_language(self, target_language: str) -> None:
        """Switch the chat to another target language.

        Every outstanding translation targets the old language, so all requests are cancelled and all state is
        discarded. Messages must be observed again to be translated into the new language.

        Args:
            target_language (str): New target language code.
        """
        if target_language == self._target_language:
            return

        cancelled: list[asyncio.Task[None]] = self._reset()
        logger.info(
            "Target language changed '%s' -> '%s'; %d request(s) cancelled",
            self._target_language,
            target_language,
            len(cancelled),
        )
        self._target_language = target_language

    async def aclose(self) -> None:
        """Cancel every request, wait for the tasks to unwind, and drop all state."""
        if self._closed:
            return
        self._closed = True
        tasks: list[asyncio.Task[None]] = self._reset()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.debug("ChatTranslationCoordinator closed (%d request(s) cancelled)", len(tasks))

    def begin_render_pass(self, visible_messages: Iterable[ChatMessageDTO]) -> RenderPass:
        """Start a render pass over the messages currently shown by the chat view."""
        return RenderPass(visible_messages, self.state_for)

    def message_formatter(self, visible_messages: Iterable[ChatMessageDTO]) -> Callable[[str], RenderedMessage]:
        """Formatter for one render pass: call once per visible message, with that message's text."""
        return self.begin_render_pass(visible_messages).format
