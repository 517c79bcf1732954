"""Message handling utilities for the translation relay.

This package provides the asynchronous HTTP client used by the HTTP translation providers,
flag-emoji resolution for the reaction path and the relay envelope formatter.
"""

from handlers.async_comm import (
    AsyncCommError,
    AsyncCommInvalidContentTypeError,
    AsyncCommTimeoutError,
    AsyncHttp,
)
from handlers.flag_reaction import FlagLanguageResolver
from handlers.message_formatter import MessageFormatter

__all__: list[str] = [
    "AsyncCommError",
    "AsyncCommInvalidContentTypeError",
    "AsyncCommTimeoutError",
    "AsyncHttp",
    "FlagLanguageResolver",
    "MessageFormatter",
]
