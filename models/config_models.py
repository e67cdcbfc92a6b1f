"""Configuration data models for the chat translation service.

Each data class maps to one section of the INI file. Field names match the INI keys, and field defaults
double as the type hints used by the loader to coerce the string values read from the file.
"""

from __future__ import annotations

from dataclasses import dataclass, field

__all__: list[str] = [
    "Cache",
    "Config",
    "General",
    "Retry",
    "Server",
    "Translation",
]


@dataclass
class General:
    DEBUG: bool = False
    LOG_FILE: str = ""
    SCRIPT_NAME: str = ""


@dataclass
class Translation:
    ENGINE: list[str] = field(default_factory=lambda: ["openai"])
    MODEL: str = "gpt-4o-mini"
    MAX_OUTPUT_TOKENS: int = 500
    TEMPERATURE: float = 0.1
    DETECTION_MAX_OUTPUT_TOKENS: int = 5
    REQUEST_TIMEOUT_SEC: float = 30.0
    COALESCE_REQUESTS: bool = True
    BASE_URL: str = ""


@dataclass
class Cache:
    MAX_SIZE: int = 1000
    TTL_SEC: float = 30 * 60.0


@dataclass
class Retry:
    MAX_RETRIES: int = 2
    BASE_DELAY_SEC: float = 1.0


@dataclass
class Server:
    HOST: str = "127.0.0.1"
    PORT: int = 8080
    MAX_TEXT_LENGTH: int = 5000
    MAX_TARGET_LANGUAGES: int = 17
    RATE_LIMIT_REQUESTS: int = 30
    RATE_LIMIT_WINDOW_SEC: float = 60.0


@dataclass
class Config:
    GENERAL: General = field(default_factory=General)
    TRANSLATION: Translation = field(default_factory=Translation)
    CACHE: Cache = field(default_factory=Cache)
    RETRY: Retry = field(default_factory=Retry)
    SERVER: Server = field(default_factory=Server)
