"""Asynchronous HTTP utilities used by the network translation providers.

The `AsyncHttp` class wraps a shared aiohttp session, decodes responses by content type and
maps transport failures onto a small exception hierarchy so provider adapters only need to
handle `AsyncCommError` and its subclasses.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Final, Literal, Self

import aiohttp
from aiohttp.client import ClientSession

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable

    from aiohttp.client import ClientResponse


__all__: list[str] = [
    "AsyncCommError",
    "AsyncCommInvalidContentTypeError",
    "AsyncCommTimeoutError",
    "AsyncHttp",
]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

HTTPMethod = Literal["GET", "POST"]

CONNECT_TIMEOUT: Final[float] = 1.0


class AsyncHttp:
    """Asynchronous HTTP client shared by the HTTP-based translation providers.

    The session is created lazily on first use so the client may be constructed before the
    event loop starts. Responses are decoded through content type handlers:

        - "text/plain": Decodes bytes to a UTF-8 string.
        - "text/html": Decodes bytes to a UTF-8 string.
        - "application/json": Parses bytes as JSON.
    """

    def __init__(self) -> None:
        logger.info("%s initializing", self.__class__.__name__)
        self.__session: ClientSession | None = None
        self.content_handlers: dict[str, Callable[[bytes], Any]] = {}

        self.add_handler("text/plain", lambda x: x.decode("utf-8"))
        self.add_handler("text/html", lambda x: x.decode("utf-8"))
        self.add_handler("application/json", lambda x: json.loads(x.decode("utf-8")))

    async def __aenter__(self) -> Self:
        logger.debug("%s entering context", self.__class__.__name__)
        self.initialize_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        _ = exc_type, exc_val, exc_tb
        logger.debug("%s exiting context", self.__class__.__name__)
        await self.close()

    def initialize_session(self) -> None:
        """Create the aiohttp session if there is none or the previous one was closed."""
        if self.__session is None or self.__session.closed:
            self.__session = ClientSession(raise_for_status=True)
            logger.debug("%s session initialized", self.__class__.__name__)

    @property
    def session(self) -> ClientSession:
        """Return the current aiohttp session, creating it on demand."""
        self.initialize_session()
        if self.__session is None:
            msg = "Session could not be initialized"
            raise RuntimeError(msg)
        return self.__session

    async def close(self) -> None:
        """Close the aiohttp session if it is open."""
        if self.__session and not self.__session.closed:
            await self.__session.close()
        self.__session = None
        logger.info("%s session closed", self.__class__.__name__)

    async def get(
        self,
        *,
        url: str,
        params: dict[str, str] | None = None,
        total_timeout: float = 10.0,
    ) -> Any:
        """Perform an asynchronous HTTP GET request.

        Args:
            url (str): The URL to send the GET request to.
            params (dict[str, str] | None): Optional query parameters.
            total_timeout (float): Total timeout for the request in seconds.

        Returns:
            Any: The response data, decoded by content type.
        """
        return await self._request("GET", url=url, total_timeout=total_timeout, params=params)

    async def post(
        self,
        *,
        url: str,
        data: Any | None = None,
        total_timeout: float = 10.0,
    ) -> Any:
        """Perform an asynchronous HTTP POST request with a JSON body.

        Args:
            url (str): The URL to send the POST request to.
            data (Any | None): JSON-serializable request body.
            total_timeout (float): Total timeout for the request in seconds.

        Returns:
            Any: The response data, decoded by content type.
        """
        return await self._request("POST", url=url, total_timeout=total_timeout, json=data)

    async def decode_response(self, resp: ClientResponse) -> Any:
        """Decode the response body according to its 'Content-Type' header.

        Args:
            resp (ClientResponse): The response object from the aiohttp request.

        Returns:
            Any: The decoded body, or None if the body is empty.

        Raises:
            AsyncCommInvalidContentTypeError: If no handler is registered for the content type.
        """
        content_type: str = resp.headers.get("Content-Type", "").split(";")[0].strip()
        logger.debug("'Content-Type': '%s'", content_type)

        raw: bytes = await resp.read()
        if not raw:
            logger.debug("Received empty response")
            return None

        handler: Callable[[bytes], Any] | None = self.content_handlers.get(content_type)
        if handler is None:
            msg: str = f"Unknown Content-Type '{content_type}'"
            raise AsyncCommInvalidContentTypeError(msg)
        try:
            return handler(raw)
        except (UnicodeDecodeError, ValueError) as err:
            msg = f"Malformed '{content_type}' response body"
            raise AsyncCommInvalidContentTypeError(msg) from err

    def add_handler(self, content_type: str, handler: Callable[[bytes], Any]) -> None:
        """Add a custom handler for a specific content type.

        Args:
            content_type (str): The content type to handle (e.g., "application/json").
            handler (Callable[[bytes], Any]): A function that takes bytes and returns the parsed data.
        """
        if self.content_handlers.get(content_type):
            logger.warning("Handler for content type '%s' already exists, replacing it", content_type)
        self.content_handlers[content_type] = handler
        logger.debug("Added handler for content type '%s'", content_type)

    async def _request(
        self,
        method: HTTPMethod,
        *,
        url: str,
        total_timeout: float,
        **kwargs: Any,
    ) -> Any:
        logger.debug("[%s] url=%s timeout=%s kwargs=%s", method, url, total_timeout, kwargs)
        if total_timeout <= 0:
            _timeout = aiohttp.ClientTimeout(total=None)
        elif total_timeout < CONNECT_TIMEOUT:
            # A connect timeout longer than the total would never apply
            _timeout = aiohttp.ClientTimeout(total=total_timeout)
        else:
            _timeout = aiohttp.ClientTimeout(connect=CONNECT_TIMEOUT, total=total_timeout)

        try:
            async with self.session.request(method=method, url=url, timeout=_timeout, **kwargs) as resp:
                resp.raise_for_status()
                return await self.decode_response(resp)

        except TimeoutError as err:
            logger.debug(err)
            msg = "Timeout due to a lack of response from the server."
            raise AsyncCommTimeoutError(msg) from err
        except ConnectionResetError as err:
            logger.debug(err)
            msg = "The connection to the server has been disconnected."
            raise AsyncCommError(msg) from err
        except aiohttp.ClientConnectorError as err:
            logger.debug(err)
            msg = "The server could not be reached."
            raise AsyncCommError(msg) from err
        except aiohttp.ClientResponseError as err:
            logger.debug(err)
            msg = "Error response from the server."
            raise AsyncCommError(msg, response=err) from err
        except aiohttp.ClientError as err:
            logger.debug(err)
            msg = "HTTP client error."
            raise AsyncCommError(msg) from err


class AsyncCommError(Exception):
    """Base class for asynchronous communication errors.

    Carries the HTTP status in the message when built from an error response.
    """

    def __init__(self, msg: str | BaseException, **kwargs: Any) -> None:
        self.msg: str = str(msg)
        self.status: int | None = None

        rsp: aiohttp.ClientResponseError | None = kwargs.pop("response", None)
        if isinstance(rsp, aiohttp.ClientResponseError):
            self.status = rsp.status
            self.msg = f"{self.msg}: status='{rsp.status}'"

        super().__init__(self.msg)


class AsyncCommTimeoutError(AsyncCommError):
    """Error raised when a request does not complete within its timeout."""


class AsyncCommInvalidContentTypeError(AsyncCommError):
    """Error raised when a response has an unsupported content type or a malformed body."""
