"""
Transports

A transport executes a RequestConfig and hands back the raw response bytes
together with the header/body boundary. The default transport runs on
``requests`` with a fresh session per call.
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum
from http.cookiejar import LoadError, MozillaCookieJar
from typing import Any, Optional

import requests
from requests.structures import CaseInsensitiveDict

from curlwrap.schemas.errors import TransportFailure
from .builder import RequestConfig
from .options import TransportOption


logger = logging.getLogger(__name__)


class TransportErrorCode(IntEnum):
    """Numeric failure codes, numbered as libcurl numbers them."""
    UNSUPPORTED_PROTOCOL = 1
    URL_MALFORMAT = 3
    COULDNT_RESOLVE_PROXY = 5
    COULDNT_RESOLVE_HOST = 6
    COULDNT_CONNECT = 7
    OPERATION_TIMEDOUT = 28
    SSL_CONNECT_ERROR = 35
    TOO_MANY_REDIRECTS = 47
    RECV_ERROR = 56


@dataclass(frozen=True)
class RawTransfer:
    """Raw bytes returned by a transport."""
    raw: bytes
    header_size: Optional[int] = None
    effective_url: str = ""


class Transport(ABC):
    """Executes a fully configured request."""

    @abstractmethod
    def perform(self, config: RequestConfig) -> RawTransfer:
        """
        Execute ``config``.

        Raises:
            TransportFailure: If the exchange could not be completed
        """
        ...


_RESOLVE_MARKERS = (
    "name or service not known",
    "nodename nor servname",
    "failed to resolve",
    "name resolution",
    "getaddrinfo failed",
    "no address associated",
)


def classify_exception(exc: requests.RequestException) -> TransportErrorCode:
    """Map a ``requests`` exception onto a transport error code."""
    if isinstance(exc, requests.exceptions.ProxyError):
        return TransportErrorCode.COULDNT_RESOLVE_PROXY
    if isinstance(exc, requests.exceptions.SSLError):
        return TransportErrorCode.SSL_CONNECT_ERROR
    if isinstance(exc, requests.exceptions.Timeout):
        return TransportErrorCode.OPERATION_TIMEDOUT
    if isinstance(exc, requests.exceptions.TooManyRedirects):
        return TransportErrorCode.TOO_MANY_REDIRECTS
    if isinstance(exc, requests.exceptions.InvalidSchema):
        return TransportErrorCode.UNSUPPORTED_PROTOCOL
    if isinstance(exc, (requests.exceptions.MissingSchema,
                        requests.exceptions.InvalidURL)):
        return TransportErrorCode.URL_MALFORMAT
    if isinstance(exc, requests.exceptions.ConnectionError):
        text = str(exc).lower()
        if any(marker in text for marker in _RESOLVE_MARKERS):
            return TransportErrorCode.COULDNT_RESOLVE_HOST
        return TransportErrorCode.COULDNT_CONNECT
    return TransportErrorCode.RECV_ERROR


_FAILURE_MESSAGES = {
    TransportErrorCode.UNSUPPORTED_PROTOCOL: "Unsupported protocol",
    TransportErrorCode.URL_MALFORMAT: "URL using bad/illegal format or missing URL",
    TransportErrorCode.COULDNT_RESOLVE_PROXY: "Could not resolve proxy",
    TransportErrorCode.COULDNT_RESOLVE_HOST: "Could not resolve host",
    TransportErrorCode.COULDNT_CONNECT: "Could not connect to server",
    TransportErrorCode.OPERATION_TIMEDOUT: "Operation timed out",
    TransportErrorCode.SSL_CONNECT_ERROR: "SSL connect error",
    TransportErrorCode.TOO_MANY_REDIRECTS: "Number of redirects hit maximum amount",
    TransportErrorCode.RECV_ERROR: "Failure when receiving data from the peer",
}


def _status_block(response: requests.Response) -> bytes:
    """Rebuild the status line and header lines of one response."""
    raw = getattr(response, "raw", None)
    version = getattr(raw, "version", 11) if raw is not None else 11
    version_text = {10: "1.0", 11: "1.1", 20: "2"}.get(version, "1.1")
    lines = [f"HTTP/{version_text} {response.status_code} {response.reason or ''}".rstrip()]

    # urllib3 keeps repeated headers apart; requests folds them into one.
    raw_headers = getattr(raw, "headers", None) if raw is not None else None
    if raw_headers is not None and hasattr(raw_headers, "iteritems"):
        pairs = list(raw_headers.iteritems())
    else:
        pairs = list(response.headers.items())
    lines.extend(f"{name}: {value}" for name, value in pairs)
    return ("\r\n".join(lines) + "\r\n\r\n").encode("iso-8859-1", errors="replace")


def _split_header_lines(lines: list[str]) -> CaseInsensitiveDict:
    headers: CaseInsensitiveDict = CaseInsensitiveDict()
    for line in lines:
        name, sep, value = line.partition(":")
        if not sep:
            continue
        name, value = name.strip(), value.strip()
        # One value per name; repeats are folded the way HTTP allows.
        headers[name] = f"{headers[name]}, {value}" if name in headers else value
    return headers


class RequestsTransport(Transport):
    """
    Transport backed by ``requests``.

    Each call opens its own session and closes it on the way out, whether the
    transfer succeeded or not.
    """

    def perform(self, config: RequestConfig) -> RawTransfer:
        options = config.options
        method = self._resolve_method(options)
        url = options.get(TransportOption.URL, config.url)

        headers = _split_header_lines(list(options.get(TransportOption.HTTPHEADER, ())))
        user_agent = options.get(TransportOption.USERAGENT)
        if user_agent:
            headers.setdefault("User-Agent", user_agent)
        referrer = options.get(TransportOption.REFERER)
        if referrer:
            headers.setdefault("Referer", referrer)
        # requests decodes compressed bodies but the rebuilt header block keeps
        # the server's Content-Encoding, so compression is only asked for when
        # configured. An empty ENCODING leaves requests' own default.
        encoding = options.get(TransportOption.ENCODING)
        if encoding is None:
            headers.setdefault("Accept-Encoding", "identity")
        elif encoding:
            headers.setdefault("Accept-Encoding", encoding)

        data = options.get(TransportOption.POSTFIELDS)
        if data is not None and "Content-Type" not in headers and isinstance(data, str):
            headers["Content-Type"] = "application/x-www-form-urlencoded"

        kwargs: dict[str, Any] = {
            "headers": headers,
            "data": data,
            "allow_redirects": bool(options.get(TransportOption.FOLLOWLOCATION, False)),
            "timeout": self._timeout(options),
        }
        verify = options.get(TransportOption.SSL_VERIFYPEER)
        cainfo = options.get(TransportOption.CAINFO)
        if cainfo and verify is not False:
            kwargs["verify"] = cainfo
        elif verify is not None:
            kwargs["verify"] = bool(verify)
        cert = options.get(TransportOption.SSLCERT)
        if cert:
            key = options.get(TransportOption.SSLKEY)
            kwargs["cert"] = (cert, key) if key else cert
        proxy = options.get(TransportOption.PROXY)
        if proxy:
            kwargs["proxies"] = {"http": proxy, "https": proxy}
        userpwd = options.get(TransportOption.USERPWD)
        if userpwd:
            user, _, password = str(userpwd).partition(":")
            kwargs["auth"] = (user, password)

        jar = self._load_cookies(options.get(TransportOption.COOKIEFILE))

        logger.debug("Performing %s %s", method, url)
        with requests.Session() as session:
            session.cookies = jar
            max_redirects = options.get(TransportOption.MAXREDIRS)
            if max_redirects is not None:
                session.max_redirects = int(max_redirects)
            try:
                response = session.request(method, url, **kwargs)
                content = response.content
            except requests.RequestException as e:
                code = classify_exception(e)
                raise TransportFailure(
                    transport_code=code,
                    message=f"{_FAILURE_MESSAGES[code]}: {e}",
                    details={"url": url, "method": method},
                ) from e
            finally:
                self._save_cookies(jar, options.get(TransportOption.COOKIEJAR))

        header_area = b"".join(_status_block(hop) for hop in response.history)
        header_area += _status_block(response)
        if method == "HEAD":
            content = b""
        return RawTransfer(
            raw=header_area + content,
            header_size=len(header_area),
            effective_url=str(response.url),
        )

    @staticmethod
    def _resolve_method(options) -> str:
        custom = options.get(TransportOption.CUSTOMREQUEST)
        if custom:
            return str(custom).upper()
        if options.get(TransportOption.NOBODY):
            return "HEAD"
        if options.get(TransportOption.POST):
            return "POST"
        if options.get(TransportOption.HTTPGET):
            return "GET"
        if options.get(TransportOption.POSTFIELDS) is not None:
            return "POST"
        return "GET"

    @staticmethod
    def _timeout(options) -> Any:
        total = options.get(TransportOption.TIMEOUT)
        connect = options.get(TransportOption.CONNECTTIMEOUT)
        if connect is None:
            return total
        return (connect, total)

    @staticmethod
    def _load_cookies(path: Optional[str]) -> MozillaCookieJar:
        jar = MozillaCookieJar()
        if path and os.path.exists(path) and os.path.getsize(path) > 0:
            try:
                jar.load(path, ignore_discard=True, ignore_expires=True)
            except (LoadError, OSError) as e:
                logger.warning("Ignoring unreadable cookie file %s: %s", path, e)
        return jar

    @staticmethod
    def _save_cookies(jar: MozillaCookieJar, path: Optional[str]) -> None:
        if not path:
            return
        try:
            jar.save(path, ignore_discard=True, ignore_expires=True)
        except OSError as e:
            logger.warning("Could not write cookie file %s: %s", path, e)
