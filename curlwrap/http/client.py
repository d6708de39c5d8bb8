"""
HTTP Client

Verb-level façade: builds a request from the client state, hands it to a
transport and parses what comes back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence, Union, TYPE_CHECKING

from curlwrap.schemas.errors import ResponseParseError, TransportError, TransportFailure
from .builder import Params, RequestBuilder, RequestConfig
from .parser import Response, ResponseParser
from .state import ClientState
from .transport import RequestsTransport, Transport, TransportErrorCode

if TYPE_CHECKING:
    from curlwrap.config import ClientConfig


logger = logging.getLogger(__name__)

Headers = Union[Mapping[str, Any], Sequence[str], None]


@dataclass(frozen=True)
class TransferResult:
    """Either a parsed Response or the TransportError that prevented one."""
    response: Optional[Response] = None
    error: Optional[TransportError] = None

    def __post_init__(self) -> None:
        if (self.response is None) == (self.error is None):
            raise ValueError("TransferResult needs exactly one of response or error")

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Response:
        """Return the response, raising TransportFailure if there is none."""
        if self.response is None:
            raise self.error.to_exception()  # type: ignore[union-attr]
        return self.response


class HttpClient:
    """
    HTTP client façade.

    Usage:
        client = HttpClient(follow_redirects=True)

        response = client.get("http://example.com/a?x=1", {"y": "2"})
        if response.ok:
            data = response.json()

        result = client.execute("GET", "http://unreachable.invalid/")
        if not result.ok:
            print(client.error)
    """

    def __init__(
        self,
        user_agent: Optional[str] = None,
        cookie_file: Optional[str] = None,
        follow_redirects: bool = False,
        referrer: Optional[str] = None,
        options: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        *,
        transport: Optional[Transport] = None,
    ) -> None:
        """
        Initialize HTTP client.

        Args:
            user_agent: User-Agent to send; a library default when None
            cookie_file: File cookies are read from and written back to
            follow_redirects: Follow 3xx responses
            referrer: Referer header to send
            options: Default transport options, applied after everything else
            headers: Headers to include in all requests

        Raises:
            ConfigurationException: If an option name is unknown
        """
        self.state = ClientState(
            user_agent=user_agent,
            cookie_file=cookie_file,
            follow_redirects=follow_redirects,
            referrer=referrer,
            headers=dict(headers or {}),
            options=dict(options or {}),
        )
        self.transport = transport or RequestsTransport()
        self.builder = RequestBuilder()
        self.parser = ResponseParser()

    @classmethod
    def from_config(
        cls,
        config: "ClientConfig",
        *,
        transport: Optional[Transport] = None,
    ) -> "HttpClient":
        """Create a client from a loaded ClientConfig."""
        return cls(
            user_agent=config.user_agent,
            cookie_file=config.cookie_file,
            follow_redirects=config.follow_redirects,
            referrer=config.referrer,
            options=config.options,
            headers=config.headers,
            transport=transport,
        )

    @property
    def error(self) -> str:
        """Description of the last request's error, empty if it succeeded."""
        return self.state.error

    def get_error(self) -> str:
        return self.state.error

    def execute(
        self,
        method: str,
        url: str,
        params: Params = None,
        headers: Headers = None,
    ) -> TransferResult:
        """
        Make a request without raising on transport failure.

        Returns:
            TransferResult holding the Response, or the TransportError
        """
        self.state.error = ""
        config = self.builder.build(method, url, params, headers, self.state)
        return self._perform(config)

    def _perform(self, config: RequestConfig) -> TransferResult:
        try:
            transfer = self.transport.perform(config)
        except TransportFailure as e:
            error = e.to_error_model()
            self.state.error = error.describe()
            logger.warning("%s %s failed: %s", config.method, config.url, self.state.error)
            return TransferResult(error=error)

        if not transfer.raw:
            error = TransportError(
                transport_code=int(TransportErrorCode.RECV_ERROR),
                message="Empty reply from server",
            )
            self.state.error = error.describe()
            logger.warning("%s %s failed: %s", config.method, config.url, self.state.error)
            return TransferResult(error=error)

        try:
            response = self.parser.parse(transfer.raw, transfer.header_size)
        except ResponseParseError as e:
            self.state.error = e.message
            raise

        logger.debug(
            "%s %s -> %d (%d bytes)",
            config.method, config.url, response.status_code, len(response.body),
        )
        return TransferResult(response=response)

    def request(
        self,
        method: str,
        url: str,
        params: Params = None,
        headers: Headers = None,
    ) -> Response:
        """
        Make an HTTP request.

        Args:
            method: HTTP method (GET, POST, PUT, PATCH, ...)
            url: Request URL
            params: Mapping or pre-encoded string; query string for GET/HEAD,
                body for everything else
            headers: Additional headers for this call

        Returns:
            Parsed Response

        Raises:
            TransportFailure: If the transport could not complete the exchange
        """
        return self.execute(method, url, params, headers).unwrap()

    def get(self, url: str, params: Params = None) -> Response:
        """Make a GET request."""
        return self.request("GET", url, params)

    def head(self, url: str, params: Params = None) -> Response:
        """Make a HEAD request."""
        return self.request("HEAD", url, params)

    def post(self, url: str, params: Params = None, headers: Headers = None) -> Response:
        """Make a POST request."""
        return self.request("POST", url, params, headers)

    def put(self, url: str, params: Params = None) -> Response:
        """Make a PUT request."""
        return self.request("PUT", url, params)

    def delete(self, url: str, params: Params = None) -> Response:
        """Make a DELETE request."""
        return self.request("DELETE", url, params)

    def close(self) -> None:
        """Nothing to release; every request owns and closes its own handle."""

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()
