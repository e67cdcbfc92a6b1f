"""Tests for the translate HTTP endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest
from aiohttp.test_utils import TestClient, TestServer

from core.shared_data import SharedData
from core.trans.interface import TranslationConfigError
from handlers.rate_limiter import SlidingWindowRateLimiter
from handlers.translate_api import create_app
from models.config_models import Config
from tests.core.trans.fakes import DummyEngine

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


@pytest.fixture
def config() -> Config:
    config = Config()
    config.SERVER.MAX_TARGET_LANGUAGES = 3
    return config


@pytest.fixture
def engine(config: Config) -> DummyEngine:
    dummy = DummyEngine()
    dummy.initialize(config)
    return dummy


@pytest.fixture
async def shared_data(config: Config, engine: DummyEngine) -> SharedData:
    shared = SharedData(config)
    await shared.async_init(engine=engine)
    return shared


@pytest.fixture
def rate_limiter() -> SlidingWindowRateLimiter:
    return SlidingWindowRateLimiter(100, 60.0)


@pytest.fixture
async def client(shared_data: SharedData, rate_limiter: SlidingWindowRateLimiter) -> AsyncIterator[TestClient]:
    async with TestClient(TestServer(create_app(shared_data, rate_limiter))) as test_client:
        yield test_client


async def post_json(client: TestClient, body: Any) -> tuple[int, dict[str, Any]]:
    response = await client.post("/api/translate", json=body)
    return response.status, await response.json()


@pytest.mark.asyncio
async def test_get_describes_usage(client: TestClient) -> None:
    response = await client.get("/api/translate")
    body: dict[str, Any] = await response.json()

    assert response.status == 200
    assert len(body["supportedLanguages"]) == 17
    assert body["supportedLanguages"]["ja"] == "Japanese"
    assert set(body["usage"]) == {"singleTranslation", "multipleTranslations"}


@pytest.mark.asyncio
async def test_single_translation(client: TestClient, engine: DummyEngine) -> None:
    engine.responses = ["Hola"]

    status, body = await post_json(client, {"text": "Hello", "targetLanguage": "es", "sourceLanguage": "en"})
    _, repeated = await post_json(client, {"text": "Hello", "targetLanguage": "es", "sourceLanguage": "en"})

    assert status == 200
    assert body == {
        "success": True,
        "originalText": "Hello",
        "translatedText": "Hola",
        "targetLanguage": "es",
        "sourceLanguage": "en",
        "cached": False,
    }
    assert repeated["cached"] is True
    assert len(engine.requests) == 1


@pytest.mark.asyncio
async def test_single_translation_same_language(client: TestClient, engine: DummyEngine) -> None:
    status, body = await post_json(client, {"text": "Hello", "targetLanguage": "en", "sourceLanguage": "en"})

    assert status == 200
    assert body["translatedText"] == "Hello"
    assert engine.requests == []


@pytest.mark.asyncio
async def test_single_target_wins_over_target_list(client: TestClient, engine: DummyEngine) -> None:
    engine.responses = ["Hola"]

    status, body = await post_json(
        client, {"text": "Hello", "targetLanguage": "es", "targetLanguages": "fr", "sourceLanguage": "en"}
    )

    assert status == 200
    assert body["translatedText"] == "Hola"
    assert body["targetLanguage"] == "es"
    assert len(engine.requests) == 1


@pytest.mark.asyncio
async def test_room_translation(client: TestClient, engine: DummyEngine) -> None:
    engine.responses = ["Bonjour"]

    status, body = await post_json(
        client, {"text": "Hello", "targetLanguages": ["fr", "xx", "fr", "en"], "sourceLanguage": "en"}
    )

    assert status == 200
    assert body == {
        "success": True,
        "originalText": "Hello",
        "translations": {"en": "Hello", "fr": "Bonjour"},
        "sourceLanguage": "en",
    }
    assert len(engine.requests) == 1


@pytest.mark.asyncio
async def test_room_translation_detects_source(client: TestClient, engine: DummyEngine) -> None:
    engine.responses = ["de", "Hello"]

    status, body = await post_json(client, {"text": "Hallo", "targetLanguages": ["en"]})

    assert status == 200
    assert body["sourceLanguage"] == "de"
    assert body["translations"] == {"de": "Hallo", "en": "Hello"}


@pytest.mark.asyncio
async def test_room_translation_caps_target_languages(client: TestClient, engine: DummyEngine) -> None:
    status, body = await post_json(
        client, {"text": "Hello", "targetLanguages": ["es", "fr", "de", "it", "ja"], "sourceLanguage": "en"}
    )

    assert status == 200
    assert set(body["translations"]) == {"en", "es", "fr", "de"}
    assert len(engine.requests) == 3


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("body", "error"),
    [
        ({"targetLanguage": "es"}, "Missing required field: text"),
        ({"text": "", "targetLanguage": "es"}, "Missing required field: text"),
        ({"text": "   ", "targetLanguage": "es"}, "Missing required field: text"),
        ({"text": 12, "targetLanguage": "es"}, "Missing required field: text"),
        ({"text": "a" * 5001, "targetLanguage": "es"}, "maximum length of 5000"),
        ({"text": "Hello", "targetLanguage": "xx"}, "Unsupported language: xx"),
        ({"text": "Hello", "targetLanguage": "es", "sourceLanguage": "klingon"}, "Unsupported language: klingon"),
        ({"text": "Hello", "targetLanguages": "es"}, "targetLanguages must be a list"),
        ({"text": "Hello", "targetLanguages": ["xx", "yy"]}, "No valid target languages provided"),
        ({"text": "Hello", "targetLanguages": []}, "No valid target languages provided"),
        ({"text": "Hello"}, "Must provide either targetLanguage or targetLanguages"),
        (["Hello", "es"], "Request body must be a JSON object"),
    ],
)
async def test_invalid_requests(client: TestClient, engine: DummyEngine, body: Any, error: str) -> None:
    status, response = await post_json(client, body)

    assert status == 400
    assert error in response["error"]
    assert engine.requests == []


@pytest.mark.asyncio
async def test_malformed_json(client: TestClient) -> None:
    response = await client.post(
        "/api/translate", data="{not json", headers={"Content-Type": "application/json"}
    )

    assert response.status == 400
    assert (await response.json()) == {"error": "Request body must be valid JSON"}


@pytest.mark.asyncio
async def test_body_not_utf8(client: TestClient, engine: DummyEngine) -> None:
    response = await client.post(
        "/api/translate", data=b'{"text":"\xff", "targetLanguage": "es"}', headers={"Content-Type": "application/json"}
    )

    assert response.status == 400
    assert (await response.json()) == {"error": "Request body must be valid JSON"}
    assert engine.requests == []


@pytest.mark.asyncio
async def test_text_at_maximum_length_is_accepted(client: TestClient) -> None:
    status, _ = await post_json(client, {"text": "a" * 5000, "targetLanguage": "es"})

    assert status == 200


@pytest.mark.asyncio
async def test_translation_failure_returns_500(client: TestClient, engine: DummyEngine) -> None:
    engine.responses = [TranslationConfigError("OPENAI_API_KEY is not configured")]

    status, body = await post_json(client, {"text": "Hello", "targetLanguage": "es"})

    assert status == 500
    assert body == {"error": "Translation failed", "details": "OPENAI_API_KEY is not configured"}


@pytest.mark.asyncio
async def test_room_failure_returns_500(client: TestClient, engine: DummyEngine) -> None:
    engine.responses = [TranslationConfigError("no key")]

    status, body = await post_json(client, {"text": "Hello", "targetLanguages": ["es", "fr"], "sourceLanguage": "en"})

    assert status == 500
    assert body["error"] == "Translation failed"
    assert "translations" not in body


@pytest.mark.asyncio
@pytest.mark.parametrize("rate_limiter", [SlidingWindowRateLimiter(1, 60.0)])
async def test_rate_limit(client: TestClient) -> None:
    first, _ = await post_json(client, {"text": "Hello", "targetLanguage": "es"})
    response = await client.post("/api/translate", json={"text": "Hello", "targetLanguage": "es"})

    assert first == 200
    assert response.status == 429
    assert response.headers["Retry-After"] == "60"
    assert (await response.json())["error"] == "Too many requests"


@pytest.mark.asyncio
async def test_clear_cache(client: TestClient, shared_data: SharedData) -> None:
    await post_json(client, {"text": "Hello", "targetLanguage": "es"})

    response = await client.delete("/api/translate/cache")
    body: dict[str, Any] = await response.json()

    assert response.status == 200
    assert body == {
        "success": True,
        "clearedEntries": 1,
        "hits": 0,
        "misses": 1,
        "expirations": 0,
        "evictions": 0,
    }
    assert len(shared_data.cache) == 0


@pytest.mark.asyncio
async def test_cleanup_closes_engine(shared_data: SharedData, engine: DummyEngine) -> None:
    async with TestClient(TestServer(create_app(shared_data))):
        pass

    assert engine.closed is True
