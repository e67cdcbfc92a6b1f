"""Logging setup for the translation service.

All application loggers live under one namespace so that a single pair of handlers (console and rotating file)
covers every module. Third-party libraries that log on their own (aiohttp, openai) can be routed into the same
handlers with ``adopt``.
"""

from __future__ import annotations

import logging
import sys
from logging import Formatter, Handler, NullHandler, StreamHandler
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING, ClassVar, Final, Literal, NamedTuple, Self, TypeAlias

if TYPE_CHECKING:
    from pathlib import Path

__all__: list[str] = ["LogLevel", "LoggerUtils"]

LevelType: TypeAlias = Literal["NOTSET", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

LOG_FILE_MAX_BYTES: Final[int] = 2 * 1024 * 1024
LOG_FILE_BACKUPS: Final[int] = 2
DEFAULT_LOG_LEVEL: Final[int] = logging.INFO
DEFAULT_NAMESPACE: Final[str] = "ChatTranslator"

CONSOLE_FORMAT: Final[str] = "%(levelname)s: %(message)s"
FILE_FORMAT: Final[str] = "%(asctime)s %(levelname)-8s %(name)-44s %(funcName)s:%(lineno)d\t%(message)s"


class LogLevel(NamedTuple):
    name: str
    value: int


class LoggerUtils:
    """Process-wide logging configuration.

    The first construction attaches the handlers; later constructions return the same, already configured
    instance. Modules never need an instance: they call ``LoggerUtils.get_logger(__name__)`` at import time,
    and the records reach the handlers once the entry point has constructed LoggerUtils.

    Attributes:
        NAMESPACE (ClassVar[str]): Prefix of every application logger.
    """

    NAMESPACE: ClassVar[str] = DEFAULT_NAMESPACE
    _instance: ClassVar[Self | None] = None
    _configured: ClassVar[bool] = False

    def __new__(cls, *args, **kwargs) -> Self:
        _ = args, kwargs
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, filename: str | Path = "", *, use_null_console: bool = False) -> None:
        """Attach the console handler and, when a file name is given, the rotating file handler.

        Args:
            filename (str | Path): Log file path; empty disables file logging.
            use_null_console (bool): Discard console output (e.g. when running without a terminal).
        """
        self.root_logger: logging.Logger = logging.getLogger(self.NAMESPACE)
        if LoggerUtils._configured:
            return

        self.handlers: list[Handler] = []
        self.root_logger.setLevel(DEFAULT_LOG_LEVEL)
        self._add_handler(self._console_handler(null=use_null_console or sys.stderr is None))

        log_file: str = str(filename).strip()
        if log_file:
            file_handler: Handler | None = self._file_handler(log_file)
            if file_handler is not None:
                self._add_handler(file_handler)
        LoggerUtils._configured = True

    def _add_handler(self, handler: Handler) -> None:
        self.handlers.append(handler)
        self.root_logger.addHandler(handler)

    @staticmethod
    def _console_handler(*, null: bool) -> Handler:
        if null:
            return NullHandler()
        handler: StreamHandler = StreamHandler(sys.stderr)
        handler.setLevel(logging.WARNING)
        handler.setFormatter(Formatter(CONSOLE_FORMAT))
        return handler

    def _file_handler(self, filename: str) -> Handler | None:
        try:
            handler = RotatingFileHandler(
                filename=filename, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS, encoding="utf-8"
            )
        except OSError as err:
            self.root_logger.error("Cannot open log file '%s', file logging disabled: %s", filename, err)
            return None
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(Formatter(FILE_FORMAT))
        return handler

    def adopt(self, library: str, level: LevelType = "WARNING") -> logging.Logger:
        """Route a third-party logger into the application handlers.

        Args:
            library (str): Logger name of the library, e.g. ``"aiohttp.access"``.
            level (LevelType): Minimum level forwarded from the library.

        Returns:
            logging.Logger: The adopted library logger.
        """
        library_logger: logging.Logger = logging.getLogger(library)
        library_logger.setLevel(level)
        library_logger.propagate = False
        for handler in self.handlers:
            if handler not in library_logger.handlers:
                library_logger.addHandler(handler)
        return library_logger

    def set_level(self, level: LevelType) -> None:
        """Set the application log level; unknown names fall back to INFO."""
        value: int | None = logging.getLevelNamesMapping().get(str(level).upper())
        if value is None:
            self.root_logger.setLevel(DEFAULT_LOG_LEVEL)
            self.root_logger.warning("Unknown log level '%s', using INFO", level)
            return
        self.root_logger.setLevel(value)

    def get_level(self) -> LogLevel:
        value: int = self.root_logger.getEffectiveLevel()
        return LogLevel(name=logging.getLevelName(value), value=value)

    @staticmethod
    def get_logger(name: str | None = None) -> logging.Logger:
        """Logger for a module, placed under the application namespace.

        Args:
            name (str | None): Module name, usually ``__name__``. None returns the namespace logger itself.

        Returns:
            logging.Logger: The namespaced logger.
        """
        if not name:
            return logging.getLogger(LoggerUtils.NAMESPACE)
        return logging.getLogger(f"{LoggerUtils.NAMESPACE}.{name}")
