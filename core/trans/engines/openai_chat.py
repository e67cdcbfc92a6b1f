from __future__ import annotations

from typing import TYPE_CHECKING

import openai
from openai import AsyncOpenAI

from core.trans.interface import (
    CompletionInterface,
    EngineAttributes,
    TranslateExceptionError,
    TranslationConfigError,
    TranslationNetworkError,
    TranslationRateLimitError,
    TranslationTimeoutError,
)
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from models.config_models import Config
    from models.translation_models import CompletionRequest


__all__: list[str] = ["OpenAIChatCompletion", "classify_openai_error"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


def classify_openai_error(err: openai.OpenAIError) -> TranslateExceptionError:
    """Map an OpenAI SDK error onto the translation exception hierarchy.

    APITimeoutError subclasses APIConnectionError, so it is tested first.

    Args:
        err (openai.OpenAIError): Error raised by the SDK.

    Returns:
        TranslateExceptionError: Classified error carrying the SDK error's message.
    """
    message: str = str(err) or err.__class__.__name__
    if isinstance(err, openai.APITimeoutError):
        return TranslationTimeoutError(message)
    if isinstance(err, openai.APIConnectionError):
        return TranslationNetworkError(message)
    if isinstance(err, openai.RateLimitError):
        return TranslationRateLimitError(message)
    if isinstance(err, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return TranslationConfigError(message)
    if isinstance(err, openai.InternalServerError):
        return TranslationNetworkError(message)
    return TranslateExceptionError(message)


class OpenAIChatCompletion(CompletionInterface):
    """Completion engine backed by the OpenAI chat completions API.

    The SDK's own retries are disabled; retry policy belongs to the translation manager.
    """

    def __init__(self) -> None:
        super().__init__()
        self.__client: AsyncOpenAI | None = None

    @staticmethod
    def fetch_engine_name() -> str:
        return "openai"

    @property
    def is_available(self) -> bool:
        return self.__client is not None

    @property
    def _client(self) -> AsyncOpenAI:
        if self.__client is None:
            msg = "OPENAI_API_KEY is not configured"
            raise TranslationConfigError(msg)
        return self.__client

    @_client.setter
    def _client(self, client: AsyncOpenAI | None) -> None:
        self.__client = client
        logger.debug("'%s': 'set client'", self.__class__.__name__)

    def initialize(self, config: Config) -> None:
        """Create the SDK client if an API key is available.

        Args:
            config (Config): Application configuration (model, timeout, optional base URL).
        """
        logger.debug("'%s' Initialization start", self.__class__.__name__)
        self.engine_attributes = EngineAttributes(name=self.fetch_engine_name(), model=config.TRANSLATION.MODEL)

        api_key: str = self.get_authentication_key()
        if not api_key:
            logger.critical("OPENAI_API_KEY is not set; every translation will fail until it is configured")
            self._client = None
            return

        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=config.TRANSLATION.BASE_URL or None,
            timeout=config.TRANSLATION.REQUEST_TIMEOUT_SEC,
            max_retries=0,
        )

    async def complete(self, request: CompletionRequest) -> str:
        """Run one chat completion.

        Args:
            request (CompletionRequest): Instruction, input text and sampling parameters.

        Returns:
            str: Content of the first choice, or an empty string if there is none.

        Raises:
            TranslateExceptionError: Classified by ``classify_openai_error``.
        """
        client: AsyncOpenAI = self._client
        try:
            response = await client.chat.completions.create(
                model=self.engine_attributes.model,
                messages=[
                    {"role": "system", "content": request.system_instruction},
                    {"role": "user", "content": request.user_text},
                ],
                max_tokens=request.max_output_tokens,
                temperature=request.temperature,
            )
        except openai.OpenAIError as err:
            classified: TranslateExceptionError = classify_openai_error(err)
            logger.debug("Completion failed (%s): %s", classified.kind.value, err)
            raise classified from err

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    async def close(self) -> None:
        if self.__client is not None:
            await self.__client.close()
            logger.info("'%s' client closed", self.__class__.__name__)
        self._client = None
