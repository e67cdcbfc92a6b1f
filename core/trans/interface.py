"""This module defines the abstract base class for completion engines and the translation exception hierarchy.

Every failure raised across the engine boundary carries a FailureKind decided where the call failed, so that
retry decisions never depend on the wording of an error message.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, ClassVar, Final

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from models.config_models import Config
    from models.translation_models import CompletionRequest

__all__: list[str] = [
    "TRANSIENT_KINDS",
    "CompletionInterface",
    "EngineAttributes",
    "FailureKind",
    "NotSupportedLanguagesError",
    "TranslateExceptionError",
    "TranslationConfigError",
    "TranslationEmptyResponseError",
    "TranslationNetworkError",
    "TranslationRateLimitError",
    "TranslationTimeoutError",
]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class FailureKind(Enum):
    """Category of a failed engine call."""

    RATE_LIMITED = "rate_limited"
    TIMEOUT = "timeout"
    NETWORK = "network"
    MALFORMED = "malformed"
    CONFIGURATION = "configuration"
    OTHER = "other"


TRANSIENT_KINDS: Final[frozenset[FailureKind]] = frozenset(
    {FailureKind.RATE_LIMITED, FailureKind.TIMEOUT, FailureKind.NETWORK, FailureKind.MALFORMED}
)


class TranslateExceptionError(Exception):
    """An error occurred during the translation process."""

    kind: ClassVar[FailureKind] = FailureKind.OTHER

    @property
    def is_transient(self) -> bool:
        """True if retrying the same request may succeed."""
        return self.kind in TRANSIENT_KINDS


class TranslationConfigError(TranslateExceptionError):
    """The engine is not configured (e.g. missing or rejected credentials)."""

    kind = FailureKind.CONFIGURATION


class TranslationRateLimitError(TranslateExceptionError):
    """The translation request was rate-limited by the API."""

    kind = FailureKind.RATE_LIMITED


class TranslationTimeoutError(TranslateExceptionError):
    """The translation request timed out."""

    kind = FailureKind.TIMEOUT


class TranslationNetworkError(TranslateExceptionError):
    """The translation request failed at the transport level or the server failed transiently."""

    kind = FailureKind.NETWORK


class TranslationEmptyResponseError(TranslateExceptionError):
    """The engine answered with an empty or unusable completion."""

    kind = FailureKind.MALFORMED


class NotSupportedLanguagesError(TranslateExceptionError):
    """An unsupported language code was specified."""


@dataclass
class EngineAttributes:
    """Engine-specific identity and behaviour.

    Attributes:
        name (str): Name of the completion engine.
        model (str): Model identifier used for completions.
    """

    name: str
    model: str = ""


class CompletionInterface(ABC):
    """Abstract base class for completion engines.

    A completion engine turns a CompletionRequest into text. Implementations must raise a
    TranslateExceptionError subclass for every failure, choosing the subclass that matches the failure
    category, and must not retry on their own.

    Attributes:
        registered (ClassVar[dict[str, type[CompletionInterface]]]): Registered engine classes, keyed by
            their distinguished names.
    """

    registered: ClassVar[dict[str, type[CompletionInterface]]] = {}

    def __init_subclass__(cls, **kwargs) -> None:
        """Register the subclass under its distinguished name.

        Raises:
            ValueError: If another engine already uses the same name.
        """
        super().__init_subclass__(**kwargs)
        name: str = cls.fetch_engine_name()
        if not isinstance(name, str) or name == "":
            return  # Unnamed engines (e.g. test doubles) are allowed but not registered.

        if name in cls.registered:
            msg: str = f"A completion engine with the name '{name}' is already registered."
            raise ValueError(msg)

        cls.registered[name] = cls

    def __init__(self) -> None:
        self._engine_attributes: EngineAttributes | None = None

    @property
    def engine_attributes(self) -> EngineAttributes:
        if self._engine_attributes is None:
            msg = "Engine attributes have not been set."
            raise RuntimeError(msg)
        return self._engine_attributes

    @engine_attributes.setter
    def engine_attributes(self, attributes: EngineAttributes) -> None:
        if self._engine_attributes is not None:
            msg = "Engine attributes can only be set once during initialization."
            raise RuntimeError(msg)
        self._engine_attributes = attributes

    @property
    def engine_name(self) -> str:
        return self.engine_attributes.name

    @staticmethod
    @abstractmethod
    def fetch_engine_name() -> str:
        """Fetch the distinguished name of the engine.

        Called from __init_subclass__, so the implementation must be available at class definition time.

        Returns:
            str: The distinguished name of the engine.
        """
        raise NotImplementedError

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """True if the engine holds usable credentials."""
        raise NotImplementedError

    @abstractmethod
    def initialize(self, config: Config) -> None:
        """Initialize the engine with the given configuration.

        A missing credential must not raise here; ``complete`` reports it as TranslationConfigError instead.

        Args:
            config (Config): Application configuration.
        """
        raise NotImplementedError

    @abstractmethod
    async def complete(self, request: CompletionRequest) -> str:
        """Run one completion.

        Args:
            request (CompletionRequest): Instruction, input text and sampling parameters.

        Returns:
            str: Raw completion text, possibly empty.

        Raises:
            TranslationConfigError: If credentials are missing or rejected.
            TranslationRateLimitError: If the request was rate-limited.
            TranslationTimeoutError: If the request timed out.
            TranslationNetworkError: If the transport failed.
            TranslateExceptionError: For any other failure.
        """
        raise NotImplementedError

    @abstractmethod
    async def close(self) -> None:
        """Release network resources held by the engine."""
        raise NotImplementedError

    def get_authentication_key(self) -> str:
        """Retrieve the API key from the ``<ENGINE>_API_KEY`` environment variable.

        Returns:
            str: The API key, or an empty string if the variable is not set.
        """
        return os.getenv(f"{self.fetch_engine_name().upper()}_API_KEY", "")
