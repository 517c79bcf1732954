import json
import logging
from typing import Any

import aiohttp
import pytest

from handlers.async_comm import AsyncCommError, AsyncCommInvalidContentTypeError, AsyncCommTimeoutError, AsyncHttp


class FakeResponse:
    def __init__(self, body: bytes, content_type: str) -> None:
        self.headers: dict[str, str] = {"Content-Type": content_type}
        self._body: bytes = body

    async def read(self) -> bytes:
        return self._body

    def raise_for_status(self) -> None:
        return None


class FakeRequestContext:
    def __init__(self, response: FakeResponse | None = None, error: BaseException | None = None) -> None:
        self.response: FakeResponse | None = response
        self.error: BaseException | None = error

    async def __aenter__(self) -> FakeResponse | None:
        if self.error is not None:
            raise self.error
        return self.response

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        return None


class FakeSession:
    closed: bool = False

    def __init__(self, context: FakeRequestContext) -> None:
        self.context: FakeRequestContext = context
        self.requests: list[dict[str, Any]] = []

    def request(self, **kwargs: Any) -> FakeRequestContext:
        self.requests.append(kwargs)
        return self.context

    async def close(self) -> None:
        self.closed = True


def _with_session(http: AsyncHttp, session: FakeSession) -> AsyncHttp:
    http._AsyncHttp__session = session  # type: ignore[attr-defined]
    return http


@pytest.mark.asyncio
async def test_session_is_created_lazily(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG)

    http = AsyncHttp()
    assert not any("session initialized" in rec.message for rec in caplog.records)

    session: aiohttp.ClientSession = http.session
    assert any("AsyncHttp session initialized" in rec.message for rec in caplog.records)
    assert http.session is session

    await http.close()


@pytest.mark.asyncio
async def test_reenter_after_close_creates_new_session() -> None:
    http = AsyncHttp()

    async with http:
        first: aiohttp.ClientSession = http.session

    assert first.closed

    async with http:
        second: aiohttp.ClientSession = http.session
        assert second is not first
        assert not second.closed


@pytest.mark.asyncio
async def test_get_decodes_json_and_passes_params() -> None:
    session = FakeSession(FakeRequestContext(FakeResponse(json.dumps({"ok": 1}).encode(), "application/json; utf-8")))
    http: AsyncHttp = _with_session(AsyncHttp(), session)

    data: Any = await http.get(url="https://example.invalid/get", params={"q": "hi"}, total_timeout=5.0)

    assert data == {"ok": 1}
    assert session.requests[0]["method"] == "GET"
    assert session.requests[0]["params"] == {"q": "hi"}
    assert session.requests[0]["timeout"].connect == 1.0


@pytest.mark.asyncio
async def test_post_sends_json_body() -> None:
    session = FakeSession(FakeRequestContext(FakeResponse(b"plain", "text/plain")))
    http: AsyncHttp = _with_session(AsyncHttp(), session)

    assert await http.post(url="https://example.invalid/post", data={"q": "hi"}, total_timeout=0.5) == "plain"
    assert session.requests[0]["json"] == {"q": "hi"}
    assert session.requests[0]["timeout"].connect is None


@pytest.mark.asyncio
async def test_empty_body_decodes_to_none() -> None:
    http: AsyncHttp = _with_session(AsyncHttp(), FakeSession(FakeRequestContext(FakeResponse(b"", "text/plain"))))

    assert await http.get(url="https://example.invalid") is None


@pytest.mark.asyncio
async def test_unknown_content_type_raises() -> None:
    http: AsyncHttp = _with_session(AsyncHttp(), FakeSession(FakeRequestContext(FakeResponse(b"x", "image/png"))))

    with pytest.raises(AsyncCommInvalidContentTypeError):
        await http.get(url="https://example.invalid")


@pytest.mark.asyncio
async def test_malformed_json_raises() -> None:
    response = FakeResponse(b"{not json", "application/json")
    http: AsyncHttp = _with_session(AsyncHttp(), FakeSession(FakeRequestContext(response)))

    with pytest.raises(AsyncCommInvalidContentTypeError):
        await http.get(url="https://example.invalid")


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (TimeoutError(), AsyncCommTimeoutError),
        (ConnectionResetError(), AsyncCommError),
        (aiohttp.ClientPayloadError("broken"), AsyncCommError),
    ],
)
@pytest.mark.asyncio
async def test_transport_errors_are_mapped(error: BaseException, expected: type[AsyncCommError]) -> None:
    http: AsyncHttp = _with_session(AsyncHttp(), FakeSession(FakeRequestContext(error=error)))

    with pytest.raises(expected) as excinfo:
        await http.get(url="https://example.invalid")
    assert excinfo.value.status is None


def test_add_handler_replaces_existing(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG)
    http = AsyncHttp()

    http.add_handler("text/plain", lambda raw: raw.upper())

    assert http.content_handlers["text/plain"](b"a") == b"A"
    assert any("already exists" in rec.message for rec in caplog.records)
