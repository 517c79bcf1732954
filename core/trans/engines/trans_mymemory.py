"""MyMemory provider.

Issues ``GET ?q=...&langpair=src|tgt`` against the MyMemory API. The service has no automatic
source detection, so callers must always supply an explicit source tag. An optional key from
``MYMEMORY_API_KEY`` raises the free quota.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from core.trans.interface import (
    EngineAttributes,
    NotSupportedLanguagesError,
    Result,
    TransInterface,
    TranslateExceptionError,
    TranslationQuotaExceededError,
    TranslationRateLimitError,
)
from handlers.async_comm import AsyncCommError, AsyncHttp
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from models.config_models import Config

__all__: list[str] = ["MyMemoryTranslation"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

HTTP_OK: int = 200
HTTP_FORBIDDEN: int = 403
HTTP_TOO_MANY_REQUESTS: int = 429


class MyMemoryTranslation(TransInterface):
    def __init__(self) -> None:
        super().__init__()
        self.__http: AsyncHttp | None = None
        self._url: str = ""
        self._timeout: float = 10.0

    @property
    def _http(self) -> AsyncHttp:
        if self.__http is None:
            msg = "The MyMemory client is not initialised"
            raise TranslateExceptionError(msg)
        return self.__http

    @property
    def is_available(self) -> bool:
        return self.__http is not None

    @staticmethod
    def fetch_engine_name() -> str:
        return "mymemory"

    def initialize(self, config: Config) -> None:
        logger.debug("'%s' Initialization start", self.__class__.__name__)
        self.engine_attributes = EngineAttributes(
            name="mymemory",
            supported_languages=None,
            supports_auto_detection=False,
        )
        self._url = config.TRANSLATION.MYMEMORY_URL
        self._timeout = config.TRANSLATION.TIMEOUT
        self.__http = AsyncHttp()

    async def translation(self, content: str, tgt_lang: str, src_lang: str | None = None) -> Result:
        """Translate ``content`` with MyMemory.

        Raises:
            NotSupportedLanguagesError: If no explicit source language is given.
            TranslationQuotaExceededError: If the daily free quota is used up.
            TranslationRateLimitError: If the API answers with HTTP 429.
            TranslateExceptionError: On transport errors, a non-200 response status or a malformed body.
        """
        logger.debug("'content': '%s', 'src_lang': '%s', 'tgt_lang': '%s'", content, src_lang, tgt_lang)
        if not src_lang:
            msg = "MyMemory requires an explicit source language"
            raise NotSupportedLanguagesError(msg)

        params: dict[str, str] = {"q": content, "langpair": f"{src_lang}|{tgt_lang}"}
        if api_key := self.get_authentication_key():
            params["key"] = api_key

        try:
            response: Any = await self._http.get(url=self._url, params=params, total_timeout=self._timeout)
        except AsyncCommError as err:
            if err.status == HTTP_TOO_MANY_REQUESTS:
                msg = "MyMemory rate limit reached"
                raise TranslationRateLimitError(msg) from err
            msg: str = f"MyMemory request failed: {err}"
            raise TranslateExceptionError(msg) from err

        return self._build_result(response, src_lang)

    def _build_result(self, response: Any, src_lang: str) -> Result:
        if not isinstance(response, dict):
            msg = "Malformed MyMemory response"
            raise TranslateExceptionError(msg)

        # responseStatus arrives as an int or a numeric string depending on the endpoint
        try:
            status: int = int(response.get("responseStatus", 0))
        except (TypeError, ValueError):
            status = 0
        if status == HTTP_FORBIDDEN and response.get("quotaFinished"):
            msg = "MyMemory daily quota exhausted"
            raise TranslationQuotaExceededError(msg)
        if status == HTTP_TOO_MANY_REQUESTS:
            msg = "MyMemory rate limit reached"
            raise TranslationRateLimitError(msg)
        if status != HTTP_OK:
            msg = f"MyMemory returned status {response.get('responseStatus')}: {response.get('responseDetails')}"
            raise TranslateExceptionError(msg)

        data: Any = response.get("responseData")
        if not isinstance(data, dict) or not isinstance(data.get("translatedText"), str):
            msg = "Malformed MyMemory response"
            raise TranslateExceptionError(msg)

        result = Result(
            text=data["translatedText"],
            detected_source_lang=src_lang,
            metadata={"engine": "mymemory"},
        )
        logger.debug("'return': '%s'", result)
        return result

    async def close(self) -> None:
        if self.__http is not None:
            await self.__http.close()
        self.__http = None
        logger.debug("'%s' process termination", self.__class__.__name__)
