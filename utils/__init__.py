"""Utility modules for the translation relay.

This package provides logging configuration and string helpers shared by every layer.
"""

from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils

__all__: list[str] = ["LoggerUtils", "StringUtils"]
