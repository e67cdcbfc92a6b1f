from __future__ import annotations

from models.api_models import ErrorResponse, RoomTranslateResponse, TranslateRequest, TranslateResponse


def test_translate_request_reads_camel_case() -> None:
    request: TranslateRequest = TranslateRequest.from_dict(
        {"text": "Hello", "targetLanguages": ["es", "fr"], "sourceLanguage": "en"}, infer_missing=True
    )

    assert request.text == "Hello"
    assert request.target_language is None
    assert request.target_languages == ["es", "fr"]
    assert request.source_language == "en"


def test_responses_write_camel_case() -> None:
    single = TranslateResponse(original_text="Hello", translated_text="Hola", target_language="es")
    room = RoomTranslateResponse(original_text="Hello", translations={"en": "Hello"}, source_language="en")

    assert single.to_dict() == {
        "originalText": "Hello",
        "translatedText": "Hola",
        "targetLanguage": "es",
        "sourceLanguage": None,
        "cached": False,
        "success": True,
    }
    assert room.to_dict()["sourceLanguage"] == "en"
    assert ErrorResponse("Translation failed", "boom").to_dict() == {"error": "Translation failed", "details": "boom"}
