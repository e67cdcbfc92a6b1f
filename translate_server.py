"""Entry point of the chat translation service.

Loads the INI configuration, sets up logging, builds the shared translation components and serves the
``/api/translate`` endpoints with aiohttp.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Final

from aiohttp import web

from config.loader import ConfigLoader, ConfigLoaderError
from core.shared_data import SharedData
from core.trans.interface import TranslationConfigError
from core.version import VERSION
from handlers.translate_api import create_app
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from models.config_models import Config

DEFAULT_CONFIG_FILENAME: Final[str] = "translate_server.ini"
SCRIPT_NAME: Final[str] = Path(__file__).name

logger: logging.Logger = LoggerUtils.get_logger(__name__)


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Cached LLM translation service for chat rooms.")
    parser.add_argument("--config", default=DEFAULT_CONFIG_FILENAME, help="configuration file (INI)")
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    parser.add_argument("--host", default=None, help="override SERVER.HOST")
    parser.add_argument("--port", type=int, default=None, help="override SERVER.PORT")
    parser.add_argument("--log-file", dest="log_file", default=None, help="override GENERAL.LOG_FILE")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    return parser.parse_args(argv)


async def build_app(config: Config) -> web.Application:
    """Initialize the shared components and wrap them in the web application."""
    shared_data = SharedData(config)
    await shared_data.async_init()
    return create_app(shared_data)


def main(argv: list[str] | None = None) -> int:
    args: argparse.Namespace = parse_arguments(argv)
    try:
        config: Config = ConfigLoader(
            config_filename=args.config,
            script_name=SCRIPT_NAME,
            debug=args.debug,
            host=args.host,
            port=args.port,
            log_file=args.log_file,
        ).config
    except ConfigLoaderError as err:
        print(err, file=sys.stderr)
        return 1

    logger_utils = LoggerUtils(config.GENERAL.LOG_FILE)
    logger_utils.set_level("DEBUG" if config.GENERAL.DEBUG else "INFO")
    logger.debug("Log level: %s", logger_utils.get_level().name)
    logger_utils.adopt("aiohttp.access", "INFO")
    logger_utils.adopt("aiohttp.server")
    logger_utils.adopt("openai")
    logger.info("Starting %s %s on %s:%d", SCRIPT_NAME, VERSION, config.SERVER.HOST, config.SERVER.PORT)

    try:
        web.run_app(build_app(config), host=config.SERVER.HOST, port=config.SERVER.PORT, print=None)
    except TranslationConfigError as err:
        logger.critical("Translation engine could not be configured: %s", err)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    logger.info("%s stopped", SCRIPT_NAME)
    return 0


if __name__ == "__main__":
    sys.exit(main())
