"""LibreTranslate provider.

Posts ``{q, source, target, format}`` to a LibreTranslate instance. The service detects the
source language itself when ``source`` is ``auto``. An API key is optional and only sent when
``LIBRETRANSLATE_API_KEY`` is set.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from core.trans.interface import (
    EngineAttributes,
    Result,
    TransInterface,
    TranslateExceptionError,
    TranslationRateLimitError,
)
from handlers.async_comm import AsyncCommError, AsyncHttp
from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils

if TYPE_CHECKING:
    import logging

    from models.config_models import Config

__all__: list[str] = ["LibreTranslation"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

HTTP_TOO_MANY_REQUESTS: int = 429


class LibreTranslation(TransInterface):
    def __init__(self) -> None:
        super().__init__()
        self.__http: AsyncHttp | None = None
        self._url: str = ""
        self._timeout: float = 10.0

    @property
    def _http(self) -> AsyncHttp:
        if self.__http is None:
            msg = "The LibreTranslate client is not initialised"
            raise TranslateExceptionError(msg)
        return self.__http

    @property
    def is_available(self) -> bool:
        return self.__http is not None

    @staticmethod
    def fetch_engine_name() -> str:
        return "libretranslate"

    def initialize(self, config: Config) -> None:
        logger.debug("'%s' Initialization start", self.__class__.__name__)
        self.engine_attributes = EngineAttributes(
            name="libretranslate",
            supported_languages=None,
            supports_auto_detection=True,
        )
        self._url = config.TRANSLATION.LIBRETRANSLATE_URL
        self._timeout = config.TRANSLATION.TIMEOUT
        self.__http = AsyncHttp()

    async def translation(self, content: str, tgt_lang: str, src_lang: str | None = None) -> Result:
        logger.debug("'content': '%s', 'src_lang': '%s', 'tgt_lang': '%s'", content, src_lang, tgt_lang)
        payload: dict[str, str] = {
            "q": content,
            "source": src_lang or "auto",
            "target": tgt_lang,
            "format": "text",
        }
        if api_key := self.get_authentication_key():
            payload["api_key"] = api_key

        try:
            response: Any = await self._http.post(url=self._url, data=payload, total_timeout=self._timeout)
        except AsyncCommError as err:
            if err.status == HTTP_TOO_MANY_REQUESTS:
                msg = "LibreTranslate rate limit reached"
                raise TranslationRateLimitError(msg) from err
            msg: str = f"LibreTranslate request failed: {err}"
            raise TranslateExceptionError(msg) from err

        return self._build_result(response, src_lang)

    def _build_result(self, response: Any, src_lang: str | None) -> Result:
        """Extract the translated text and detected language from the response body.

        Raises:
            TranslateExceptionError: If the body does not carry a translated text.
        """
        if not isinstance(response, dict) or not isinstance(response.get("translatedText"), str):
            msg = "Malformed LibreTranslate response"
            raise TranslateExceptionError(msg)

        detected: str | None = src_lang
        detected_info: Any = response.get("detectedLanguage")
        if isinstance(detected_info, dict) and isinstance(detected_info.get("language"), str):
            detected = StringUtils.normalize_language_tag(detected_info["language"])

        result = Result(
            text=response["translatedText"],
            detected_source_lang=detected,
            metadata={"engine": "libretranslate"},
        )
        logger.debug("'return': '%s'", result)
        return result

    async def close(self) -> None:
        if self.__http is not None:
            await self.__http.close()
        self.__http = None
        logger.debug("'%s' process termination", self.__class__.__name__)
