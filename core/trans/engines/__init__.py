"""Completion engine implementations.

Importing this package registers every engine with CompletionInterface.registered.
"""

from core.trans.engines.openai_chat import OpenAIChatCompletion, classify_openai_error

__all__: list[str] = ["OpenAIChatCompletion", "classify_openai_error"]
