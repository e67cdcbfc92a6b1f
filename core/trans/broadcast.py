from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Iterable

    from core.trans.manager import TransManager
    from models.translation_models import TranslationResult


__all__: list[str] = ["RoomTranslationBroadcaster"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class RoomTranslationBroadcaster:
    """Translates one room message into every language present in the room.

    The source language is resolved once; every other target is translated in parallel through the shared
    TransManager, so repeated broadcast text is answered from the cache. The call is all-or-nothing.
    """

    def __init__(self, trans_manager: TransManager) -> None:
        self.trans_manager: TransManager = trans_manager

    async def resolve_source_language(self, text: str, source_lang: str | None = None) -> str:
        """Return the given source language, or detect it when absent."""
        if source_lang:
            return source_lang
        return await self.trans_manager.detect_language(text)

    async def translate_for_room(
        self, text: str, target_languages: Iterable[str], source_lang: str | None = None
    ) -> dict[str, str]:
        """Translate text into every target language.

        Callers are expected to validate and cap ``target_languages``; no admission control is applied here.

        Args:
            text (str): Message to broadcast.
            target_languages (Iterable[str]): Languages present in the room.
            source_lang (str | None): Source language, detected when None.

        Returns:
            dict[str, str]: Language code to text. The source language maps to the original text.

        Raises:
            TranslateExceptionError: If any single translation fails; no partial mapping is returned.
        """
        resolved: str = await self.resolve_source_language(text, source_lang)
        results: dict[str, str] = {resolved: text}

        targets: list[str] = [lang for lang in dict.fromkeys(target_languages) if lang != resolved]
        if not targets:
            return results

        logger.debug("Broadcast translation from '%s' to %s", resolved, targets)
        tasks: list[asyncio.Task[TranslationResult]] = [
            asyncio.create_task(self.trans_manager.translate(text, lang, resolved), name=f"broadcast:{lang}")
            for lang in targets
        ]
        try:
            translations: list[TranslationResult] = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            # Let the cancelled siblings unwind before the failure propagates.
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        for lang, result in zip(targets, translations, strict=True):
            results[lang] = result.translated_text
        return results
