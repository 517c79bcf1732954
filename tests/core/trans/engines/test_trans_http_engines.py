"""Tests for the HTTP based providers (LibreTranslate and MyMemory)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from unittest.mock import AsyncMock

import pytest

from core.trans.engines import trans_libre as trans_libre_module
from core.trans.engines import trans_mymemory as trans_mymemory_module
from core.trans.interface import (
    NotSupportedLanguagesError,
    Result,
    TranslateExceptionError,
    TranslationQuotaExceededError,
    TranslationRateLimitError,
)
from handlers.async_comm import AsyncCommError

if TYPE_CHECKING:
    from models.config_models import Config


class DummyHttp:
    response: Any = None
    error: Exception | None = None

    def __init__(self) -> None:
        self.get = AsyncMock(side_effect=self._respond)
        self.post = AsyncMock(side_effect=self._respond)
        self.close = AsyncMock()

    async def _respond(self, **kwargs: Any) -> Any:
        _ = kwargs
        if type(self).error is not None:
            raise type(self).error
        return type(self).response


def _status_error(status: int) -> AsyncCommError:
    err = AsyncCommError("Error response from the server.")
    err.status = status
    return err


@pytest.fixture(autouse=True)
def setup_http(monkeypatch: pytest.MonkeyPatch) -> None:
    DummyHttp.response = None
    DummyHttp.error = None
    monkeypatch.setattr(trans_libre_module, "AsyncHttp", DummyHttp)
    monkeypatch.setattr(trans_mymemory_module, "AsyncHttp", DummyHttp)
    monkeypatch.delenv("LIBRETRANSLATE_API_KEY", raising=False)
    monkeypatch.delenv("MYMEMORY_API_KEY", raising=False)


def _libre(config: Config) -> trans_libre_module.LibreTranslation:
    engine = trans_libre_module.LibreTranslation()
    engine.initialize(config)
    return engine


def _mymemory(config: Config) -> trans_mymemory_module.MyMemoryTranslation:
    engine = trans_mymemory_module.MyMemoryTranslation()
    engine.initialize(config)
    return engine


def test_libre_attributes(config: Config) -> None:
    engine: trans_libre_module.LibreTranslation = _libre(config)

    assert engine.engine_name == "libretranslate"
    assert engine.supports_auto_detection is True
    assert engine.is_available is True


@pytest.mark.asyncio
async def test_libre_drops_region_from_detected_language(config: Config) -> None:
    DummyHttp.response = {"translatedText": "hello", "detectedLanguage": {"confidence": 80, "language": "pt-BR"}}
    engine: trans_libre_module.LibreTranslation = _libre(config)

    result: Result = await engine.translation("olá", tgt_lang="en")

    assert result.detected_source_lang == "pt"


@pytest.mark.asyncio
async def test_libre_posts_auto_source_and_reads_detection(config: Config) -> None:
    DummyHttp.response = {"translatedText": "hola", "detectedLanguage": {"confidence": 90, "language": "EN"}}
    engine: trans_libre_module.LibreTranslation = _libre(config)

    result: Result = await engine.translation("hello", tgt_lang="es")

    assert result.text == "hola"
    assert result.detected_source_lang == "en"
    http: Any = engine._http
    http.post.assert_awaited_once_with(
        url=config.TRANSLATION.LIBRETRANSLATE_URL,
        data={"q": "hello", "source": "auto", "target": "es", "format": "text"},
        total_timeout=config.TRANSLATION.TIMEOUT,
    )


@pytest.mark.asyncio
async def test_libre_sends_api_key_when_set(monkeypatch: pytest.MonkeyPatch, config: Config) -> None:
    monkeypatch.setenv("LIBRETRANSLATE_API_KEY", "secret")
    DummyHttp.response = {"translatedText": "hola"}
    engine: trans_libre_module.LibreTranslation = _libre(config)

    result: Result = await engine.translation("hello", tgt_lang="es", src_lang="en")

    assert result.detected_source_lang == "en"
    http: Any = engine._http
    assert http.post.await_args.kwargs["data"]["api_key"] == "secret"


@pytest.mark.asyncio
async def test_libre_rate_limit_and_transport_errors(config: Config) -> None:
    engine: trans_libre_module.LibreTranslation = _libre(config)

    DummyHttp.error = _status_error(429)
    with pytest.raises(TranslationRateLimitError):
        await engine.translation("hello", tgt_lang="es")

    DummyHttp.error = AsyncCommError("The server could not be reached.")
    with pytest.raises(TranslateExceptionError):
        await engine.translation("hello", tgt_lang="es")


@pytest.mark.asyncio
async def test_libre_malformed_response(config: Config) -> None:
    DummyHttp.response = {"error": "nope"}
    engine: trans_libre_module.LibreTranslation = _libre(config)

    with pytest.raises(TranslateExceptionError):
        await engine.translation("hello", tgt_lang="es")


@pytest.mark.asyncio
async def test_libre_close_releases_session(config: Config) -> None:
    engine: trans_libre_module.LibreTranslation = _libre(config)
    http: Any = engine._http

    await engine.close()

    http.close.assert_awaited_once()
    assert engine.is_available is False


def test_mymemory_requires_explicit_source(config: Config) -> None:
    engine: trans_mymemory_module.MyMemoryTranslation = _mymemory(config)

    assert engine.engine_name == "mymemory"
    assert engine.supports_auto_detection is False


@pytest.mark.asyncio
async def test_mymemory_rejects_missing_source(config: Config) -> None:
    engine: trans_mymemory_module.MyMemoryTranslation = _mymemory(config)

    with pytest.raises(NotSupportedLanguagesError):
        await engine.translation("hello", tgt_lang="es")


@pytest.mark.asyncio
async def test_mymemory_returns_translation(config: Config) -> None:
    DummyHttp.response = {"responseStatus": 200, "responseData": {"translatedText": "hola"}}
    engine: trans_mymemory_module.MyMemoryTranslation = _mymemory(config)

    result: Result = await engine.translation("hello", tgt_lang="es", src_lang="en")

    assert result.text == "hola"
    assert result.detected_source_lang == "en"
    http: Any = engine._http
    http.get.assert_awaited_once_with(
        url=config.TRANSLATION.MYMEMORY_URL,
        params={"q": "hello", "langpair": "en|es"},
        total_timeout=config.TRANSLATION.TIMEOUT,
    )


@pytest.mark.parametrize(
    ("response", "expected"),
    [
        ({"responseStatus": "403", "quotaFinished": True}, TranslationQuotaExceededError),
        ({"responseStatus": 429}, TranslationRateLimitError),
        ({"responseStatus": 500, "responseDetails": "server error"}, TranslateExceptionError),
        ({"responseStatus": 200, "responseData": None}, TranslateExceptionError),
        ("not json", TranslateExceptionError),
    ],
)
@pytest.mark.asyncio
async def test_mymemory_error_statuses(
    config: Config, response: Any, expected: type[TranslateExceptionError]
) -> None:
    DummyHttp.response = response
    engine: trans_mymemory_module.MyMemoryTranslation = _mymemory(config)

    with pytest.raises(expected):
        await engine.translation("hello", tgt_lang="es", src_lang="en")


@pytest.mark.asyncio
async def test_mymemory_http_429_is_rate_limit(config: Config) -> None:
    DummyHttp.error = _status_error(429)
    engine: trans_mymemory_module.MyMemoryTranslation = _mymemory(config)

    with pytest.raises(TranslationRateLimitError):
        await engine.translation("hello", tgt_lang="es", src_lang="en")
