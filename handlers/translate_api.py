"""HTTP boundary for the translation service.

Exposes ``/api/translate`` on an ``aiohttp.web`` application. Requests are validated and rate limited here, so
the translation core only ever sees supported language codes and bounded input.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Final

from aiohttp import web

from core.trans.interface import TranslateExceptionError
from core.trans.languages import SUPPORTED_LANGUAGES, is_supported
from handlers.rate_limiter import SlidingWindowRateLimiter
from models.api_models import (
    CacheClearResponse,
    ErrorResponse,
    RoomTranslateResponse,
    TranslateRequest,
    TranslateResponse,
    UsageResponse,
)
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from core.shared_data import SharedData
    from core.trans.broadcast import RoomTranslationBroadcaster
    from handlers.rate_limiter import RateLimitDecision
    from models.cache_models import CacheStatistics
    from models.translation_models import TranslationResult


__all__: list[str] = ["SHARED_DATA_KEY", "TranslateApi", "TranslateRequestError", "create_app"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

SHARED_DATA_KEY: Final[web.AppKey[SharedData]] = web.AppKey("shared_data")

TRANSLATE_PATH: Final[str] = "/api/translate"
CACHE_PATH: Final[str] = "/api/translate/cache"
TRANSLATION_FAILED: Final[str] = "Translation failed"

USAGE_EXAMPLES: Final[dict[str, dict[str, object]]] = {
    "singleTranslation": {
        "method": "POST",
        "body": {"text": "Hello world", "targetLanguage": "es", "sourceLanguage": "en (optional)"},
    },
    "multipleTranslations": {
        "method": "POST",
        "body": {"text": "Hello world", "targetLanguages": ["es", "fr", "de"], "sourceLanguage": "en (optional)"},
    },
}


class TranslateRequestError(Exception):
    """The request body failed validation; the message is returned to the client."""


def _error_response(
    status: int, error: str, details: str | None = None, headers: dict[str, str] | None = None
) -> web.Response:
    body: dict[str, Any] = {key: value for key, value in ErrorResponse(error, details).to_dict().items() if value}
    return web.json_response(body, status=status, headers=headers)


class TranslateApi:
    """Request handlers for the translate endpoints.

    Args:
        shared_data (SharedData): Initialized shared components.
        rate_limiter (SlidingWindowRateLimiter | None): Limiter for translation requests; built from the
            ``SERVER`` section when None.
    """

    def __init__(self, shared_data: SharedData, rate_limiter: SlidingWindowRateLimiter | None = None) -> None:
        self.shared_data: SharedData = shared_data
        self.rate_limiter: SlidingWindowRateLimiter = rate_limiter or SlidingWindowRateLimiter(
            shared_data.config.SERVER.RATE_LIMIT_REQUESTS, shared_data.config.SERVER.RATE_LIMIT_WINDOW_SEC
        )
        self.max_text_length: int = shared_data.config.SERVER.MAX_TEXT_LENGTH
        self.max_target_languages: int = shared_data.config.SERVER.MAX_TARGET_LANGUAGES

    def register_routes(self, app: web.Application) -> None:
        app.router.add_get(TRANSLATE_PATH, self.handle_get)
        app.router.add_post(TRANSLATE_PATH, self.handle_post)
        app.router.add_delete(CACHE_PATH, self.handle_clear_cache)

    async def handle_get(self, request: web.Request) -> web.Response:
        """Describe the supported languages and request shapes."""
        _ = request
        usage = UsageResponse(supported_languages=dict(SUPPORTED_LANGUAGES), usage=USAGE_EXAMPLES)
        return web.json_response(usage.to_dict())

    async def handle_post(self, request: web.Request) -> web.Response:
        """Translate text into one target language, or into every language of a room.

        Returns:
            web.Response: 200 with the translation, 400 on invalid input, 429 when rate limited,
            500 when the translation fails.
        """
        client_key: str = request.remote or "unknown"
        decision: RateLimitDecision = self.rate_limiter.check(client_key)
        if not decision.allowed:
            return _error_response(
                429,
                "Too many requests",
                f"Retry after {decision.retry_after_header} second(s)",
                headers={"Retry-After": decision.retry_after_header},
            )

        try:
            payload: TranslateRequest = self._parse_request(await self._read_json(request))
            text: str = payload.text or ""
            if payload.target_language is not None:
                return await self._translate_single(text, payload.target_language, payload.source_language)
            return await self._translate_room(text, payload.target_languages or [], payload.source_language)
        except TranslateRequestError as err:
            logger.debug("Rejected translate request from '%s': %s", client_key, err)
            return _error_response(400, str(err))
        except TranslateExceptionError as err:
            logger.error("Translation error (%s): %s", err.kind.value, err)
            return _error_response(500, TRANSLATION_FAILED, str(err) or err.kind.value)
        except Exception:
            logger.exception("Unexpected error while handling translate request")
            return _error_response(500, TRANSLATION_FAILED, "Unknown error")

    async def handle_clear_cache(self, request: web.Request) -> web.Response:
        """Clear the translation cache and report the statistics it had."""
        _ = request
        stats: CacheStatistics = self.shared_data.cache.statistics()
        self.shared_data.trans_manager.clear_cache()
        logger.info("Translation cache cleared over HTTP (%d entries)", stats.size)
        response = CacheClearResponse(
            cleared_entries=stats.size,
            hits=stats.hits,
            misses=stats.misses,
            expirations=stats.expirations,
            evictions=stats.evictions,
        )
        return web.json_response(response.to_dict())

    @staticmethod
    async def _read_json(request: web.Request) -> dict[str, Any]:
        try:
            body: Any = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as err:
            msg = "Request body must be valid JSON"
            raise TranslateRequestError(msg) from err
        if not isinstance(body, dict):
            msg = "Request body must be a JSON object"
            raise TranslateRequestError(msg)
        return body

    def _parse_request(self, body: dict[str, Any]) -> TranslateRequest:
        """Validate raw JSON field types and limits, then build the request model.

        Raises:
            TranslateRequestError: If any field is missing, mistyped or unsupported.
        """
        text: Any = body.get("text")
        if not isinstance(text, str) or not text.strip():
            msg = "Missing required field: text"
            raise TranslateRequestError(msg)
        if len(text) > self.max_text_length:
            msg = f"Text exceeds the maximum length of {self.max_text_length} characters"
            raise TranslateRequestError(msg)

        for name in ("targetLanguage", "sourceLanguage"):
            value: Any = body.get(name)
            if value is not None and not is_supported(value):
                msg = f"Unsupported language: {value}"
                raise TranslateRequestError(msg)

        if body.get("targetLanguage") is not None:
            body = {key: value for key, value in body.items() if key != "targetLanguages"}
            return TranslateRequest.from_dict(body, infer_missing=True)

        target_languages: Any = body.get("targetLanguages")
        if target_languages is None:
            msg = "Must provide either targetLanguage or targetLanguages"
            raise TranslateRequestError(msg)
        if not isinstance(target_languages, list):
            msg = "targetLanguages must be a list"
            raise TranslateRequestError(msg)

        payload: TranslateRequest = TranslateRequest.from_dict(body, infer_missing=True)
        valid: list[str] = list(dict.fromkeys(filter(is_supported, target_languages)))
        if not valid:
            msg = "No valid target languages provided"
            raise TranslateRequestError(msg)
        if len(valid) > self.max_target_languages:
            logger.info("Target languages capped at %d (requested %d)", self.max_target_languages, len(valid))
        payload.target_languages = valid[: self.max_target_languages]
        return payload

    async def _translate_single(self, text: str, target_language: str, source_language: str | None) -> web.Response:
        result: TranslationResult = await self.shared_data.trans_manager.translate(
            text, target_language, source_language
        )
        response = TranslateResponse(
            original_text=text,
            translated_text=result.translated_text,
            target_language=target_language,
            source_language=source_language or result.detected_language,
            cached=result.cached,
        )
        return web.json_response(response.to_dict())

    async def _translate_room(
        self, text: str, target_languages: list[str], source_language: str | None
    ) -> web.Response:
        broadcaster: RoomTranslationBroadcaster = self.shared_data.broadcaster
        resolved: str = await broadcaster.resolve_source_language(text, source_language)
        translations: dict[str, str] = await broadcaster.translate_for_room(text, target_languages, resolved)
        response = RoomTranslateResponse(original_text=text, translations=translations, source_language=resolved)
        return web.json_response(response.to_dict())


def create_app(shared_data: SharedData, rate_limiter: SlidingWindowRateLimiter | None = None) -> web.Application:
    """Build the web application and register the translate routes.

    The shared components are released when the application shuts down.

    Args:
        shared_data (SharedData): Initialized shared components.
        rate_limiter (SlidingWindowRateLimiter | None): Optional limiter override.

    Returns:
        web.Application: Application ready to be served.
    """
    app = web.Application()
    app[SHARED_DATA_KEY] = shared_data
    TranslateApi(shared_data, rate_limiter).register_routes(app)
    app.on_cleanup.append(_close_shared_data)
    return app


async def _close_shared_data(app: web.Application) -> None:
    await app[SHARED_DATA_KEY].close()
