"""Unit tests for core.trans.engines.openai_chat module."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest

from core.trans.engines.openai_chat import OpenAIChatCompletion, classify_openai_error
from core.trans.interface import (
    CompletionInterface,
    FailureKind,
    TranslateExceptionError,
    TranslationConfigError,
    TranslationNetworkError,
    TranslationRateLimitError,
    TranslationTimeoutError,
)
from models.config_models import Config
from models.translation_models import CompletionRequest

REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def status_error(cls: type[openai.APIStatusError], status: int) -> openai.APIStatusError:
    return cls(f"HTTP {status}", response=httpx.Response(status, request=REQUEST), body=None)


def completion(content: str | None) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.fixture
def engine(monkeypatch: pytest.MonkeyPatch) -> OpenAIChatCompletion:
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    instance = OpenAIChatCompletion()
    instance.initialize(Config())
    return instance


@pytest.mark.parametrize(
    ("error", "expected_type", "expected_kind"),
    [
        (openai.APITimeoutError(request=REQUEST), TranslationTimeoutError, FailureKind.TIMEOUT),
        (openai.APIConnectionError(request=REQUEST), TranslationNetworkError, FailureKind.NETWORK),
        (status_error(openai.RateLimitError, 429), TranslationRateLimitError, FailureKind.RATE_LIMITED),
        (status_error(openai.AuthenticationError, 401), TranslationConfigError, FailureKind.CONFIGURATION),
        (status_error(openai.PermissionDeniedError, 403), TranslationConfigError, FailureKind.CONFIGURATION),
        (status_error(openai.InternalServerError, 500), TranslationNetworkError, FailureKind.NETWORK),
        (status_error(openai.BadRequestError, 400), TranslateExceptionError, FailureKind.OTHER),
    ],
)
def test_classify_openai_error(
    error: openai.OpenAIError, expected_type: type[TranslateExceptionError], expected_kind: FailureKind
) -> None:
    classified: TranslateExceptionError = classify_openai_error(error)

    assert type(classified) is expected_type
    assert classified.kind is expected_kind
    assert str(classified)


def test_engine_is_registered() -> None:
    assert CompletionInterface.registered["openai"] is OpenAIChatCompletion


def test_initialize_without_key(engine: OpenAIChatCompletion) -> None:
    assert engine.is_available is False
    assert engine.engine_name == "openai"
    assert engine.engine_attributes.model == "gpt-4o-mini"


@pytest.mark.asyncio
async def test_initialize_with_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    instance = OpenAIChatCompletion()

    instance.initialize(Config())

    assert instance.is_available is True
    await instance.close()
    assert instance.is_available is False


@pytest.mark.asyncio
async def test_complete_without_key_raises_config_error(engine: OpenAIChatCompletion) -> None:
    with pytest.raises(TranslationConfigError, match="OPENAI_API_KEY"):
        await engine.complete(CompletionRequest(system_instruction="sys", user_text="Hello"))


@pytest.mark.asyncio
async def test_complete_sends_chat_request(engine: OpenAIChatCompletion) -> None:
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=completion("Hola"))
    engine._client = client  # noqa: SLF001

    text: str = await engine.complete(
        CompletionRequest(system_instruction="sys", user_text="Hello", max_output_tokens=500, temperature=0.1)
    )

    assert text == "Hola"
    client.chat.completions.create.assert_awaited_once_with(
        model="gpt-4o-mini",
        messages=[{"role": "system", "content": "sys"}, {"role": "user", "content": "Hello"}],
        max_tokens=500,
        temperature=0.1,
    )


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [completion(None), SimpleNamespace(choices=[])])
async def test_complete_returns_empty_text_for_missing_content(
    engine: OpenAIChatCompletion, response: SimpleNamespace
) -> None:
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=response)
    engine._client = client  # noqa: SLF001

    assert await engine.complete(CompletionRequest(system_instruction="sys", user_text="Hello")) == ""


@pytest.mark.asyncio
async def test_complete_classifies_sdk_errors(engine: OpenAIChatCompletion) -> None:
    client = MagicMock()
    client.chat.completions.create = AsyncMock(side_effect=status_error(openai.RateLimitError, 429))
    engine._client = client  # noqa: SLF001

    with pytest.raises(TranslationRateLimitError) as exc_info:
        await engine.complete(CompletionRequest(system_instruction="sys", user_text="Hello"))

    assert isinstance(exc_info.value.__cause__, openai.RateLimitError)
    assert exc_info.value.is_transient is True
