"""Utility modules for the chat translation service.

This package provides logging setup and string helpers shared by the other packages.
"""

from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils

__all__: list[str] = ["LoggerUtils", "StringUtils"]
