"""This module defines the abstract base class for translation providers and related exceptions.
It includes the Result data class for translation results, the engine capability description,
and the error taxonomy used by the provider chain.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from models.config_models import Config

__all__: list[str] = [
    "AllProvidersExhaustedError",
    "EngineAttributes",
    "NotSupportedLanguagesError",
    "ProviderUnavailableError",
    "Result",
    "TransInterface",
    "TranslateExceptionError",
    "TranslationQuotaExceededError",
    "TranslationRateLimitError",
]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


@dataclass
class EngineAttributes:
    """Engine-specific capabilities and behavior flags.

    Attributes:
        name (str): Name of translation engine.
        supported_languages (frozenset[str] | None): Two-letter tags the engine can translate to and from.
            None means universal support.
        supports_auto_detection (bool): Whether the engine detects the source language itself.
            Engines without it must be given an explicit source tag.
    """

    name: str
    supported_languages: frozenset[str] | None = None
    supports_auto_detection: bool = True


@dataclass
class Result:
    """Data class for translation results.

    Attributes:
        text (str | None): Translated text. None if translation fails.
        detected_source_lang (str | None): Detected source language code. None if not reported.
        metadata (dict[str, str] | None): Engine-specific metadata.
    """

    text: str | None = None
    detected_source_lang: str | None = None
    metadata: dict[str, str] | None = None

    def __str__(self) -> str:
        if self.text is None:
            return ""
        return self.text


class TranslateExceptionError(Exception):
    """An error occurred during the translation process."""


class NotSupportedLanguagesError(TranslateExceptionError):
    """An unsupported language code was specified."""


class TranslationQuotaExceededError(TranslateExceptionError):
    """The translatable character quota has been exceeded."""


class TranslationRateLimitError(TranslateExceptionError):
    """The translation request was rate-limited by the API."""


class ProviderUnavailableError(Exception):
    """The provider cannot be used, typically because its credentials are missing."""


class AllProvidersExhaustedError(Exception):
    """Every eligible provider failed or was unavailable for one translation attempt."""


class TransInterface(ABC):
    """Abstract base class for translation providers.

    Subclasses register themselves by their distinguished name when defined, so the
    provider chain can instantiate them from the configured engine list.

    Attributes:
        registered (ClassVar[dict[str, type[TransInterface]]]): Registered provider classes keyed by name.
    """

    registered: ClassVar[dict[str, type[TransInterface]]] = {}

    def __init_subclass__(cls, **kwargs) -> None:
        super().__init_subclass__(**kwargs)
        if not hasattr(cls, "fetch_engine_name") or not callable(cls.fetch_engine_name):
            msg = "Subclasses of TransInterface must implement the static method fetch_engine_name()."
            raise TypeError(msg)

        name = cls.fetch_engine_name()
        if not isinstance(name, str) or name == "":
            return  # Nameless subclasses (test doubles, intermediate bases) stay unregistered.

        if name in cls.registered:
            msg: str = f"A translation engine with the name '{name}' is already registered."
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

    @property
    def supports_auto_detection(self) -> bool:
        return self.engine_attributes.supports_auto_detection

    def supports(self, tgt_lang: str, src_lang: str | None = None) -> bool:
        """Check whether the engine can translate into ``tgt_lang`` (from ``src_lang`` when given).

        Args:
            tgt_lang (str): Target language tag.
            src_lang (str | None): Explicit source language tag, or None for auto detection.

        Returns:
            bool: True if the engine declares support for the tags.
        """
        supported: frozenset[str] | None = self.engine_attributes.supported_languages
        if supported is None:
            return True
        if tgt_lang not in supported:
            return False
        return src_lang is None or src_lang in supported

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Check if the translation engine is usable right now.

        Returns:
            bool: True if the engine has what it needs to serve requests.
        """
        raise NotImplementedError

    @staticmethod
    @abstractmethod
    def fetch_engine_name() -> str:
        """Fetch the distinguished name of the translation engine.

        Called during class registration in __init_subclass__, so the implementation must be
        available at subclass definition time.

        Returns:
            str: The distinguished name of the translation engine.
        """
        raise NotImplementedError

    @abstractmethod
    def initialize(self, config: Config) -> None:
        """Initialize the translation engine with the given configuration.

        Args:
            config (Config): Configuration object containing settings for the translation engine.

        Raises:
            ProviderUnavailableError: If required credentials are missing.
            TranslateExceptionError: If the engine rejects its setup.
        """
        raise NotImplementedError

    @abstractmethod
    async def translation(self, content: str, tgt_lang: str, src_lang: str | None = None) -> Result:
        """Translate input text to the target language.

        Language tags are two-letter lowercase codes; engines map them to their own
        vocabulary internally.

        Args:
            content (str): Text to be translated.
            tgt_lang (str): Target language code.
            src_lang (str | None): Source language code. If None, the engine detects it.

        Returns:
            Result: Translation result with translated text.

        Raises:
            NotSupportedLanguagesError: If the specified language is not supported.
            TranslationQuotaExceededError: If the character quota has been exceeded.
            TranslationRateLimitError: If the request is rate-limited by the API.
            TranslateExceptionError: If translation fails.
        """
        raise NotImplementedError

    @abstractmethod
    async def close(self) -> None:
        """Release resources held by the engine."""
        raise NotImplementedError

    def get_authentication_key(self) -> str:
        """Retrieve the authentication key from environment variables.

        The variable is named after the engine with the suffix "_API_KEY",
        for example "DEEPL_API_KEY" for the "deepl" engine.

        Returns:
            str: The authentication key, or an empty string if the environment variable is not set.
        """
        return os.getenv(f"{self.fetch_engine_name().upper()}_API_KEY", "")
