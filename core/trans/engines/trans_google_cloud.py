"""Google Cloud Translation API Basic (v2) provider.

Requires the google-cloud-translate library and either an API key or service account credentials.
"""

from __future__ import annotations

import asyncio
import os
from typing import TYPE_CHECKING, Any

import requests
from google.api_core.exceptions import BadRequest, Forbidden, GoogleAPIError, TooManyRequests, Unauthorized
from google.auth.credentials import AnonymousCredentials
from google.auth.exceptions import TransportError
from google.auth.transport.requests import AuthorizedSession
from google.cloud import translate_v2 as translate

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
from utils.string_utils import StringUtils

if TYPE_CHECKING:
    import logging

    from models.config_models import Config

__all__: list[str] = ["GoogleCloudTranslation"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

UNDETERMINED_LANGUAGE: str = "und"


class APIKeySession:
    """HTTP session that appends the API key to every request URL."""

    def __init__(self, api_key: str) -> None:
        self.api_key: str = api_key
        self._session: AuthorizedSession = AuthorizedSession(AnonymousCredentials())

    def request(self, method: str, url: str, **kwargs):
        separator = "&" if "?" in url else "?"
        url_with_key: str = f"{url}{separator}key={self.api_key}"
        return self._session.request(method, url_with_key, **kwargs)


class GoogleCloudTranslation(TransInterface):
    """Google Cloud Translation API Basic (v2) provider.

    Authentication can be done via:
    1. API key (GOOGLE_CLOUD_API_KEY env var)
    2. Service account JSON key file (GOOGLE_APPLICATION_CREDENTIALS env var)
    """

    def __init__(self) -> None:
        super().__init__()
        self.__inst: translate.Client | None = None

    @property
    def _inst(self) -> translate.Client:
        if self.__inst is None:
            msg = "The Google Cloud Translate instance is not initialised"
            raise TranslateExceptionError(msg)
        return self.__inst

    @property
    def is_available(self) -> bool:
        return self.__inst is not None

    @staticmethod
    def fetch_engine_name() -> str:
        return "google_cloud"

    def initialize(self, config: Config) -> None:
        """Create the Google Cloud Translation client.

        Args:
            config (Config): Unused, kept for interface consistency.

        Raises:
            ProviderUnavailableError: If neither an API key nor service account credentials are configured.
            TranslateExceptionError: If authentication fails.
            RuntimeError: If client initialization fails.
        """
        logger.debug("'%s' Initialization start", self.__class__.__name__)
        _ = config

        self.engine_attributes = EngineAttributes(
            name="google_cloud",
            supported_languages=None,
            supports_auto_detection=True,
        )
        api_key: str = self.get_authentication_key()
        if not api_key and not os.getenv("GOOGLE_APPLICATION_CREDENTIALS"):
            msg = "Neither GOOGLE_CLOUD_API_KEY nor GOOGLE_APPLICATION_CREDENTIALS is set"
            raise ProviderUnavailableError(msg)

        try:
            if api_key:
                logger.debug("Using API key authentication")
                session: APIKeySession = APIKeySession(api_key)
                self.__inst = translate.Client(credentials=AnonymousCredentials(), _http=session)
            else:
                logger.debug("Using default credentials (GOOGLE_APPLICATION_CREDENTIALS)")
                self.__inst = translate.Client()
        except Unauthorized as err:
            logger.critical("Authentication failed: %s", err)
            msg = "Authentication failed. Please check GOOGLE_APPLICATION_CREDENTIALS or GOOGLE_CLOUD_API_KEY"
            raise TranslateExceptionError(msg) from err
        except (GoogleAPIError, ValueError, OSError) as err:
            logger.critical("Unexpected error during initialization: %s", err)
            msg: str = f"Failed to initialize Google Cloud Translation client: {err}"
            raise RuntimeError(msg) from err

    async def translation(self, content: str, tgt_lang: str, src_lang: str | None = None) -> Result:
        """Translate input text to the target language.

        Raises:
            NotSupportedLanguagesError: If Google rejects the language pair.
            TranslationQuotaExceededError: If the project quota is exhausted.
            TranslationRateLimitError: If the request is throttled.
            TranslateExceptionError: If translation fails.
        """
        logger.debug("'content': '%s', 'src_lang': '%s', 'tgt_lang': '%s'", content, src_lang, tgt_lang)

        try:
            translation_result: Any = await asyncio.to_thread(
                self._inst.translate,
                content,
                target_language=tgt_lang,
                source_language=src_lang,
                format_="text",
            )
            translated_text: str = translation_result["translatedText"]
        except BadRequest as err:
            msg: str = f"Unsupported language pair (src: '{src_lang}', tgt: '{tgt_lang}'): {err}"
            raise NotSupportedLanguagesError(msg) from err
        except TooManyRequests as err:
            msg = f"Translation rate limited: {err}"
            raise TranslationRateLimitError(msg) from err
        except Forbidden as err:
            msg = f"Translation quota exhausted or access denied: {err}"
            raise TranslationQuotaExceededError(msg) from err
        except GoogleAPIError as err:
            msg = f"Translation failed: {err}"
            raise TranslateExceptionError(msg) from err
        except (requests.RequestException, TransportError) as err:
            msg = f"Google Cloud Translation unreachable: {err}"
            raise TranslateExceptionError(msg) from err
        except (KeyError, TypeError) as err:
            msg = f"Malformed Google Cloud response: {err}"
            raise TranslateExceptionError(msg) from err

        detected_lang: str | None = translation_result.get("detectedSourceLanguage", src_lang)
        if detected_lang:
            detected_lang = StringUtils.normalize_language_tag(detected_lang)
        if detected_lang == UNDETERMINED_LANGUAGE:
            detected_lang = None

        result = Result(
            text=translated_text,
            detected_source_lang=detected_lang,
            metadata={"engine": "google_cloud"},
        )
        logger.info("translation completed (%s > %s)", src_lang or detected_lang, tgt_lang)
        logger.debug("'return': '%s'", result)
        return result

    async def close(self) -> None:
        self.__inst = None
        logger.info("'%s' process termination", self.__class__.__name__)
