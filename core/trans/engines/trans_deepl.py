from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, ClassVar

from deepl import DeepLClient, Language, TextResult
from deepl.exceptions import (
    AuthorizationException,
    ConnectionException,
    DeepLException,
    QuotaExceededException,
    TooManyRequestsException,
)

from core.trans.interface import (
    EngineAttributes,
    NotSupportedLanguagesError,
    ProviderUnavailableError,
    Result,
    TransInterface,
    TranslateExceptionError,
    TranslationQuotaExceededError,
    TranslationRateLimitError,
)
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from models.config_models import Config


__all__: list[str] = ["DeeplTranslation"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

# DeepL rejects bare 'EN' and 'PT' as target languages
_TARGET_OVERRIDES: dict[str, str] = {"en": "EN-US", "pt": "PT-PT", "zh": "ZH"}


class DeeplTranslation(TransInterface):
    _source_codes: ClassVar[dict[str, str]] = {}  # two-letter tag -> DeepL source code
    _target_codes: ClassVar[dict[str, str]] = {}  # two-letter tag -> DeepL target code

    def __init__(self) -> None:
        super().__init__()
        self.__inst: DeepLClient | None = None
        self.__available: bool = False
        self._generate_langcode_mappings()

    def _generate_langcode_mappings(self) -> None:
        """Build the two-letter tag to DeepL code tables from the SDK's Language constants.

        Region-qualified constants collapse onto their base tag. Targets that DeepL only accepts
        with a region are pinned by _TARGET_OVERRIDES.
        """
        language_constants: dict[str, str] = {
            name: value for name, value in vars(Language).items() if isinstance(value, str) and name.isupper()
        }

        for code in language_constants.values():
            base_code: str = code.split("-")[0].lower()
            DeeplTranslation._source_codes[base_code] = base_code.upper()
            DeeplTranslation._target_codes.setdefault(base_code, code.upper())

        DeeplTranslation._target_codes.update(_TARGET_OVERRIDES)
        logger.debug("Language code mapping generated for DeepL.")

    @property
    def _inst(self) -> DeepLClient:
        if self.__inst is None:
            msg = "The DeepL instance is not initialised"
            raise TranslateExceptionError(msg)
        return self.__inst

    @property
    def is_available(self) -> bool:
        return self.__available

    @staticmethod
    def fetch_engine_name() -> str:
        return "deepl"

    def initialize(self, config: Config) -> None:
        """Create the DeepL client from ``DEEPL_API_KEY``.

        Args:
            config (Config): Unused, kept for interface consistency.

        Raises:
            ProviderUnavailableError: If no authentication key is configured.
            RuntimeError: If the client cannot be created.
        """
        logger.debug("'%s' Initialization start", self.__class__.__name__)
        _ = config

        self.engine_attributes = EngineAttributes(
            name="deepl",
            supported_languages=frozenset(DeeplTranslation._target_codes),
            supports_auto_detection=True,
        )
        api_key: str = self.get_authentication_key()
        if not api_key:
            msg = "DEEPL_API_KEY is not set"
            raise ProviderUnavailableError(msg)
        try:
            # The key is only verified when the API is first used
            self.__inst = DeepLClient(api_key)
            self.__available = True
        except (AttributeError, ValueError) as err:
            logger.critical(err)
            msg = "An error occurred while creating the DeepL client instance"
            raise RuntimeError(msg) from err

    async def translation(self, content: str, tgt_lang: str, src_lang: str | None = None) -> Result:
        """Translate ``content`` with DeepL.

        Args:
            content (str): The text content to be translated.
            tgt_lang (str): Two-letter target tag.
            src_lang (str | None): Two-letter source tag. If None, DeepL detects it.

        Returns:
            Result: The translated text and detected source language.

        Raises:
            NotSupportedLanguagesError: If the specified languages are not supported by DeepL.
            TranslationQuotaExceededError: If the translation quota has been exceeded.
            TranslationRateLimitError: If DeepL throttles the request.
            TranslateExceptionError: If an error occurs during the translation process.
        """
        logger.debug("'content': '%s', 'src_lang': '%s', 'tgt_lang': '%s'", content, src_lang, tgt_lang)
        try:
            _src_lang: str | None = DeeplTranslation._source_codes[src_lang] if src_lang else None
            _tgt_lang: str = DeeplTranslation._target_codes[tgt_lang]
        except KeyError:
            msg: str = (
                f"Languages not supported by DeepL. Source language: '{src_lang}'. Target language: '{tgt_lang}'."
            )
            raise NotSupportedLanguagesError(msg) from None

        try:
            results: TextResult | list[TextResult] = await asyncio.to_thread(
                self._inst.translate_text,
                content,
                source_lang=_src_lang,
                target_lang=_tgt_lang,
            )
            logger.info("translation completed (%s > %s)", _src_lang, _tgt_lang)
            return self._build_result(results)

        except QuotaExceededException as err:
            self.__available = False
            raise TranslationQuotaExceededError(err) from None
        except AuthorizationException:
            self.__available = False
            msg = "Authorisation failed. Please check your authentication key"
            raise TranslateExceptionError(msg) from None
        except TooManyRequestsException as err:
            msg = "DeepL rate limit reached"
            raise TranslationRateLimitError(msg) from err
        except ConnectionException:
            msg = "An error occurred when connecting to the DeepL server"
            raise TranslateExceptionError(msg) from None
        except DeepLException:
            msg = "An anomaly occurred during the translation process at DeepL"
            raise TranslateExceptionError(msg) from None
        except (ValueError, TypeError):
            msg = "An anomaly occurred during the translation process at DeepL"
            raise TranslateExceptionError(msg) from None

    def _build_result(self, results: TextResult | list[TextResult]) -> Result:
        if isinstance(results, list):
            if not results:
                msg = "DeepL returned no translation"
                raise TranslateExceptionError(msg)
            result: TextResult = results[0]
        else:
            result = results

        _result = Result(
            text=result.text,
            detected_source_lang=result.detected_source_lang.lower() if result.detected_source_lang else None,
            metadata={"engine": "deepl"},
        )
        logger.debug("'return': '%s'", _result)
        return _result

    async def close(self) -> None:
        self.__available = False
        self.__inst = None
        logger.debug("'%s' process termination", self.__class__.__name__)
