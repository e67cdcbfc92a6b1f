"""Models for translation-related data.

Defines the completion request passed to an engine and the result returned by the translation manager.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__: list[str] = ["CompletionRequest", "TranslationResult"]


@dataclass(frozen=True)
class CompletionRequest:
    """Single call to a completion engine.

    Attributes:
        system_instruction (str): Fixed instruction describing the task.
        user_text (str): Text the instruction applies to.
        max_output_tokens (int): Upper bound on generated tokens.
        temperature (float): Sampling temperature; low values keep the output deterministic.
    """

    system_instruction: str
    user_text: str
    max_output_tokens: int = 500
    temperature: float = 0.1


@dataclass(frozen=True)
class TranslationResult:
    """Result of a single translation.

    Attributes:
        translated_text (str): Translated text (the original text for the identity short-circuit).
        detected_language (str | None): Source language code when it is known to the caller.
        cached (bool): True if the text was answered from the translation cache.
    """

    translated_text: str
    detected_language: str | None = None
    cached: bool = False

    def __str__(self) -> str:
        return self.translated_text
