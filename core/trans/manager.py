from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, ClassVar, Final

from core.cache.inflight_manager import InFlightAbandonedError
from core.trans.engines import OpenAIChatCompletion  # noqa: F401
from core.trans.interface import (
    CompletionInterface,
    NotSupportedLanguagesError,
    TranslateExceptionError,
    TranslationConfigError,
    TranslationEmptyResponseError,
)
from core.trans.languages import DEFAULT_LANGUAGE, is_supported, language_name
from models.translation_models import CompletionRequest, TranslationResult
from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Awaitable, Callable

    from core.cache.inflight_manager import InFlightManager
    from core.cache.manager import TranslationCache
    from models.config_models import Config


__all__: list[str] = ["TransManager"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

TRANSLATION_INSTRUCTION: Final[str] = (
    "You are a translator. Translate the following text from {source} to {target}.\n"
    "Only output the translation, nothing else. Preserve formatting, emojis, and tone.\n"
    "If the text is already in the target language, return it unchanged."
)
DETECTION_INSTRUCTION: Final[str] = (
    "Detect the language of the following text.\n"
    "Respond with ONLY the 2-letter language code (e.g., {examples}).\n"
    'If you can\'t detect it, respond with "{default}".'
)


class TransManager:
    """Translation service in front of a completion engine.

    Consults the shared translation cache, calls the engine on a miss, retries transient failures with
    exponential backoff, and optionally coalesces concurrent misses for the same key. Holds no per-call state,
    so it can be shared by the per-message coordinator and the room broadcaster.

    Attributes:
        DEFAULT_MAX_RETRIES (ClassVar[int]): Retries after the first attempt.
        DEFAULT_BASE_DELAY_SEC (ClassVar[float]): First backoff delay; doubled for every further retry.
    """

    DEFAULT_MAX_RETRIES: ClassVar[int] = 2
    DEFAULT_BASE_DELAY_SEC: ClassVar[float] = 1.0

    def __init__(
        self,
        config: Config,
        engine: CompletionInterface,
        cache: TranslationCache,
        inflight_manager: InFlightManager | None = None,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the TransManager.

        Args:
            config (Config): Application configuration (sampling parameters and retry policy).
            engine (CompletionInterface): Initialized completion engine.
            cache (TranslationCache): Shared translation cache.
            inflight_manager (InFlightManager | None): Coalesces concurrent misses when provided.
            sleep (Callable[[float], Awaitable[None]]): Backoff delay function.
        """
        self.config: Config = config
        self.engine: CompletionInterface = engine
        self.cache: TranslationCache = cache
        self.inflight_manager: InFlightManager | None = inflight_manager
        self._sleep: Callable[[float], Awaitable[None]] = sleep
        self.max_retries: int = max(0, config.RETRY.MAX_RETRIES)
        self.base_delay_sec: float = max(0.0, config.RETRY.BASE_DELAY_SEC)
        logger.debug(
            "TransManager created (engine='%s', retries=%d, base_delay=%.1fs, coalescing=%s)",
            engine.engine_name,
            self.max_retries,
            self.base_delay_sec,
            inflight_manager is not None,
        )

    @classmethod
    def create_engine(cls, config: Config) -> CompletionInterface:
        """Instantiate and initialize the first configured engine that is registered.

        Args:
            config (Config): Application configuration.

        Returns:
            CompletionInterface: Initialized engine.

        Raises:
            TranslationConfigError: If none of the configured engines is registered.
        """
        for name in config.TRANSLATION.ENGINE:
            engine_cls: type[CompletionInterface] | None = CompletionInterface.registered.get(name)
            if engine_cls is None:
                logger.critical("Completion engine class not found: '%s'", name)
                continue
            engine: CompletionInterface = engine_cls()
            engine.initialize(config)
            logger.info("Completion engine initialized: '%s'", name)
            return engine

        msg: str = f"No registered completion engine among {config.TRANSLATION.ENGINE}"
        raise TranslationConfigError(msg)

    async def translate(self, text: str, target_lang: str, source_lang: str | None = None) -> TranslationResult:
        """Translate text into the target language.

        Args:
            text (str): Text to translate.
            target_lang (str): Target language code.
            source_lang (str | None): Source language code, or None to let the model detect it.

        Returns:
            TranslationResult: The translation, with ``cached`` set when answered from the cache.

        Raises:
            NotSupportedLanguagesError: If the target or the given source language is not supported.
            TranslateExceptionError: If the engine fails non-transiently or retries are exhausted.
        """
        for code in (target_lang, source_lang):
            if code is not None and not is_supported(code):
                msg: str = f"Unsupported language: {code}"
                raise NotSupportedLanguagesError(msg)

        if source_lang is not None and source_lang == target_lang:
            return TranslationResult(translated_text=text, detected_language=source_lang, cached=False)

        cache_key: str = self.cache.build_key(text, target_lang, source_lang)
        while True:
            cached: str | None = self.cache.get(cache_key)
            if cached is not None:
                logger.debug("Translation cache hit: '%s'", cached[:50])
                return TranslationResult(translated_text=cached, detected_language=source_lang, cached=True)

            if self.inflight_manager is None:
                break

            waiter: asyncio.Future[str] | None = self.inflight_manager.claim(cache_key)
            if waiter is None:
                break
            try:
                shared: str = await self.inflight_manager.wait(waiter)
            except InFlightAbandonedError:
                logger.debug("In-flight producer went away; retrying lookup for key: %s", cache_key[:48])
                continue
            logger.debug("Received in-flight translation result: '%s'", shared[:50])
            return TranslationResult(translated_text=shared, detected_language=source_lang, cached=False)

        request = CompletionRequest(
            system_instruction=TRANSLATION_INSTRUCTION.format(
                source=language_name(source_lang), target=language_name(target_lang)
            ),
            user_text=text,
            max_output_tokens=self.config.TRANSLATION.MAX_OUTPUT_TOKENS,
            temperature=self.config.TRANSLATION.TEMPERATURE,
        )
        try:
            translated: str = await self._complete_with_retry(request)
        except asyncio.CancelledError:
            if self.inflight_manager is not None:
                self.inflight_manager.abandon(cache_key)
            raise
        except Exception as err:
            if self.inflight_manager is not None:
                self.inflight_manager.reject(cache_key, err)
            raise

        self.cache.set(cache_key, translated)
        if self.inflight_manager is not None:
            self.inflight_manager.resolve(cache_key, translated)
        logger.debug(
            "Final translation result (src: '%s', tgt: '%s'): %s", source_lang or "auto", target_lang, translated[:50]
        )
        return TranslationResult(translated_text=translated, detected_language=source_lang, cached=False)

    async def _complete_with_retry(self, request: CompletionRequest) -> str:
        """Call the engine, retrying transient failures with exponential backoff.

        Args:
            request (CompletionRequest): Completion to run.

        Returns:
            str: Non-empty, stripped completion text.

        Raises:
            TranslateExceptionError: The non-transient error, or the last transient one once retries run out.
        """
        attempt: int = 0
        while True:
            try:
                text: str = StringUtils.ensure_str(await self.engine.complete(request)).strip()
                if not text:
                    msg = "Empty response from translation API"
                    raise TranslationEmptyResponseError(msg)
            except TranslateExceptionError as err:
                if not err.is_transient or attempt >= self.max_retries:
                    logger.error("Translation failed after %d attempt(s) (%s): %s", attempt + 1, err.kind.value, err)
                    raise
                delay: float = self.base_delay_sec * (2**attempt)
                attempt += 1
                logger.warning(
                    "Transient translation failure (%s), retry %d/%d in %.1fs: %s",
                    err.kind.value,
                    attempt,
                    self.max_retries,
                    delay,
                    err,
                )
                await self._sleep(delay)
            else:
                return text

    async def detect_language(self, text: str) -> str:
        """Detect the language of the text.

        Detection is a best-effort hint: unsupported answers and engine failures fall back to DEFAULT_LANGUAGE.

        Args:
            text (str): Text to analyze.

        Returns:
            str: Supported language code.
        """
        request = CompletionRequest(
            system_instruction=DETECTION_INSTRUCTION.format(
                examples='"en", "es", "fr", "de", "zh", "ja"', default=DEFAULT_LANGUAGE
            ),
            user_text=text,
            max_output_tokens=self.config.TRANSLATION.DETECTION_MAX_OUTPUT_TOKENS,
            temperature=0.0,
        )
        try:
            response: str = await self.engine.complete(request)
        except Exception as err:  # noqa: BLE001
            logger.warning("Language detection failed, assuming '%s': %s", DEFAULT_LANGUAGE, err)
            return DEFAULT_LANGUAGE

        code: str = StringUtils.clean_language_code(response)
        if is_supported(code):
            logger.debug("Detected language: '%s'", code)
            return code

        logger.info("Unsupported detection result '%s', assuming '%s'", code, DEFAULT_LANGUAGE)
        return DEFAULT_LANGUAGE

    def clear_cache(self) -> None:
        self.cache.clear()

    async def close(self) -> None:
        """Abandon coalesced requests and release the engine."""
        if self.inflight_manager is not None:
            self.inflight_manager.clear()
        await self.engine.close()
        logger.info("TransManager closed")
