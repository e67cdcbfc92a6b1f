"""Configuration file loader and validator.

Handles reading, formatting, and validating settings from the INI configuration file.
Raises exceptions for any issues encountered during loading.
"""

from __future__ import annotations

import ast
import configparser
from configparser import ConfigParser
from dataclasses import fields
from pathlib import Path
from typing import TYPE_CHECKING, Any

from core.trans.languages import SUPPORTED_LANGUAGES
from models.config_models import Config
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable
    from dataclasses import Field as DataclassField

__all__: list[str] = [
    "Config",
    "ConfigFileNotFoundError",
    "ConfigFormatError",
    "ConfigLoader",
    "ConfigLoaderError",
    "ConfigTypeError",
    "ConfigValueError",
]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

ALLOWED_COMPLETION_ENGINES: list[str] = ["openai"]


class ConfigLoaderError(Exception):
    """An error occurred while processing the configuration file."""


class ConfigFileNotFoundError(ConfigLoaderError):
    """The specified configuration file does not exist."""


class ConfigFormatError(ConfigLoaderError):
    """The configuration file is not formatted correctly."""


class ConfigValueError(ConfigFormatError):
    """The configuration file contains an invalid value."""


class ConfigTypeError(ConfigFormatError):
    """The configuration file contains an invalid type."""


class ConfigLoader:
    """Handles loading and validation of configuration settings.

    Keys absent from the file keep the defaults declared in ``models.config_models``.

    Args:
        config_filename (str): INI file name to load.
        script_name (str): Executing script name, used in error messaging.
        **args: Command-line overrides (``debug``, ``host``, ``port``, ``log_file``).

    Raises:
        ConfigFileNotFoundError: If the configuration file does not exist.
        ConfigFormatError: If the file cannot be parsed or contains invalid values/types.
    """

    def __init__(
        self,
        *,
        config_filename: str,
        script_name: str,
        **args,
    ) -> None:
        config_path = Path(config_filename)
        msg: str
        if not config_path.exists():
            msg = (
                f"Configuration file '{config_filename}' not found. "
                f"Please create '{config_filename}' in the same directory as '{script_name}'."
            )
            raise ConfigFileNotFoundError(msg)

        parser: ConfigParser = ConfigParser()
        parser.optionxform = str  # type: ignore[assignment, method-assign]  # keep upper-case keys

        try:
            parser.read(config_filename, encoding="utf-8")
        except configparser.Error as err:
            msg = f"Failed to parse configuration file '{config_filename}': {err}"
            raise ConfigFormatError(msg) from None

        self.config = Config()
        self.config.GENERAL.SCRIPT_NAME = script_name
        self._convert_settings(parser)

        if args.get("debug", False):
            self.config.GENERAL.DEBUG = True
        if args.get("host") is not None:
            self.config.SERVER.HOST = args["host"]
        if args.get("port") is not None:
            self.config.SERVER.PORT = int(args["port"])
        if args.get("log_file") is not None:
            self.config.GENERAL.LOG_FILE = args["log_file"]
        self._validate_settings()

    def _convert_settings(self, parser: ConfigParser) -> None:
        """Convert every known section and key from the parser into the Config object.

        Args:
            parser (ConfigParser): Parsed INI data.

        Raises:
            ConfigFormatError: If a value cannot be parsed or coerced to the expected type.
        """
        formatter = _ConfigFormatter(self.config, parser)
        for section in fields(self.config):
            if not parser.has_section(section.name):
                logger.debug("Section not defined, defaults kept: '%s'", section.name)
                continue
            for key in fields(getattr(self.config, section.name)):
                if not parser.has_option(section.name, key.name):
                    logger.debug("Skipping undefined setting: '%s.%s'", section.name, key.name)
                    continue
                setattr(getattr(self.config, section.name), key.name, formatter.apply_format(section, key))

    def _validate_settings(self) -> None:
        """Validate engine names, sizes, and limits.

        Raises:
            ConfigFormatError: If validation fails for any setting.
        """
        self._inspect_defined_item("TRANSLATION", "ENGINE", ALLOWED_COMPLETION_ENGINES)
        self._validate_positive("CACHE", "MAX_SIZE")
        self._validate_positive("CACHE", "TTL_SEC")
        self._validate_positive("TRANSLATION", "MAX_OUTPUT_TOKENS")
        self._validate_positive("TRANSLATION", "DETECTION_MAX_OUTPUT_TOKENS")
        self._validate_positive("TRANSLATION", "REQUEST_TIMEOUT_SEC")
        self._validate_positive("SERVER", "MAX_TEXT_LENGTH")
        self._validate_positive("SERVER", "MAX_TARGET_LANGUAGES")
        self._validate_positive("SERVER", "RATE_LIMIT_REQUESTS")
        self._validate_positive("SERVER", "RATE_LIMIT_WINDOW_SEC")
        self._validate_range("SERVER", "PORT", 0, 65535)
        self._validate_range("TRANSLATION", "TEMPERATURE", 0.0, 2.0)
        self._validate_range("RETRY", "MAX_RETRIES", 0, 10)
        self._validate_range("RETRY", "BASE_DELAY_SEC", 0.0, 60.0)

        if self.config.SERVER.MAX_TARGET_LANGUAGES > len(SUPPORTED_LANGUAGES):
            logger.info(
                "'SERVER.MAX_TARGET_LANGUAGES' (%d) exceeds the number of supported languages (%d)",
                self.config.SERVER.MAX_TARGET_LANGUAGES,
                len(SUPPORTED_LANGUAGES),
            )

    def _inspect_defined_item(self, section_name: str, key_name: str, defined_list: list[str]) -> None:
        """Verify that configuration values match allowed options.

        Logs warnings for unrecognized values; fails only when no value is usable.

        Raises:
            ConfigTypeError: If the configured value is neither list nor str.
            ConfigValueError: If none of the configured values is allowed.
        """
        value: Any = getattr(getattr(self.config, section_name), key_name)
        field_name: str = f"{section_name}.{key_name}"

        if not isinstance(value, (list, str)):
            msg: str = f"Unsupported type used for '{field_name}': {type(value)}"
            raise ConfigTypeError(msg)

        values: list[str] = value if isinstance(value, list) else [value]
        for val in values:
            if val not in defined_list:
                logger.warning("Unknown value '%s' is set for '%s'", val, field_name)
        if not any(val in defined_list for val in values):
            msg = f"No supported value is set for '{field_name}': {values}"
            raise ConfigValueError(msg)
        setattr(getattr(self.config, section_name), key_name, values)

    def _validate_positive(self, section_name: str, key_name: str) -> None:
        """Raise ConfigValueError unless the numeric setting is greater than zero."""
        value: int | float = getattr(getattr(self.config, section_name), key_name)
        if value <= 0:
            msg: str = f"'{section_name}.{key_name}' must be greater than zero: {value}"
            raise ConfigValueError(msg)

    def _validate_range(self, section_name: str, key_name: str, lower: float, upper: float) -> None:
        """Raise ConfigValueError unless lower <= value <= upper."""
        value: int | float = getattr(getattr(self.config, section_name), key_name)
        if not lower <= value <= upper:
            msg: str = f"'{section_name}.{key_name}' must be between {lower} and {upper}: {value}"
            raise ConfigValueError(msg)


class _ConfigFormatter:
    """Converts INI string values to typed Python objects (bool, int, float, str, list)."""

    def __init__(self, config: Config, parser: ConfigParser) -> None:
        self.config: Config = config
        self.parser: ConfigParser = parser

    def apply_format(self, section: DataclassField[Any], key: DataclassField[Any]) -> Any:
        """Convert INI value to the type of the field's current (default) value.

        Args:
            section (DataclassField[Any]): Configuration section field containing the key.
            key (DataclassField[Any]): Target field within the section.

        Returns:
            Any: Parsed value coerced to the type of the config dataclass default.

        Raises:
            ConfigValueError: If a value cannot be coerced to the expected type.
            ConfigFormatError: If literal evaluation fails due to invalid syntax.
            ConfigTypeError: If the literal evaluates to an unexpected type.
        """
        formatters: dict[type, Callable[[DataclassField[Any], DataclassField[Any]], Any]] = {
            bool: self.parse_as_boolean,
            int: self.parse_as_integer,
            float: self.parse_as_float,
            str: self.parse_as_string,
        }

        expected_type: type = type(getattr(getattr(self.config, section.name), key.name))
        formatter: Callable[[DataclassField[Any], DataclassField[Any]], Any] | None = formatters.get(expected_type)
        if formatter:
            try:
                return formatter(section, key)
            except ValueError as err:
                msg = f"Invalid value for {section.name}.{key.name}: {err}"
                raise ConfigValueError(msg) from err

        value_str: str = self.parser[section.name][key.name]
        try:
            value: Any = ast.literal_eval(value_str)
        except ValueError as err:
            msg = f"Invalid literal for {section.name}.{key.name}: {value_str}"
            raise ConfigValueError(msg) from err
        except SyntaxError as err:
            msg = f"Invalid literal for {section.name}.{key.name}: {value_str}"
            raise ConfigFormatError(msg) from err

        if expected_type is list and isinstance(value, str):
            value = [value]
        if not isinstance(value, expected_type):
            msg = f"Unsupported type used for '{section.name}.{key.name}': {type(value).__name__}"
            raise ConfigTypeError(msg)
        return value

    def _raw(self, section: DataclassField[Any], key: DataclassField[Any]) -> str:
        value: str = self.parser.get(section.name, key.name).strip()
        for char in ("'", '"'):
            value = value.removeprefix(char).removesuffix(char)
        return value

    def parse_as_float(self, section: DataclassField[Any], key: DataclassField[Any]) -> float:
        """Convert INI string to float."""
        return float(self._raw(section, key))

    def parse_as_integer(self, section: DataclassField[Any], key: DataclassField[Any]) -> int:
        """Convert INI string to integer."""
        return int(float(self._raw(section, key)))

    def parse_as_boolean(self, section: DataclassField[Any], key: DataclassField[Any]) -> bool:
        """Convert INI string to boolean."""
        return self.parser.getboolean(section.name, key.name)

    def parse_as_string(self, section: DataclassField[Any], key: DataclassField[Any]) -> str:
        """Strip surrounding quotes from an INI string."""
        return self._raw(section, key)
