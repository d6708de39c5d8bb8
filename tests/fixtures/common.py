"""
Common test fixtures shared by all test modules.

Provides:
- Raw HTTP response builders (status line, header lines, body)
- FakeTransport, which records every RequestConfig it is handed
- Canned ``requests.Response`` objects for RequestsTransport tests
"""

from typing import Optional, Sequence, Union

import requests
from requests.structures import CaseInsensitiveDict

from curlwrap.http.builder import RequestConfig
from curlwrap.http.transport import RawTransfer, Transport
from curlwrap.schemas.errors import TransportFailure


# =============================================================================
# Raw Response Factories
# =============================================================================

def make_header_block(
    status_code: int = 200,
    reason: str = "OK",
    headers: Optional[Sequence[tuple[str, str]]] = None,
    version: str = "1.1",
) -> bytes:
    """
    Build one header block, terminated by the blank line.

    Args:
        status_code: Status code for the status line
        reason: Reason phrase
        headers: Ordered (name, value) pairs; repeats are kept
        version: HTTP version string
    """
    if headers is None:
        headers = [("Content-Type", "text/plain")]
    lines = [f"HTTP/{version} {status_code} {reason}"]
    lines.extend(f"{name}: {value}" for name, value in headers)
    return ("\r\n".join(lines) + "\r\n\r\n").encode("iso-8859-1")


def make_raw_response(
    status_code: int = 200,
    reason: str = "OK",
    headers: Optional[Sequence[tuple[str, str]]] = None,
    body: bytes = b"hello",
    interim: Sequence[bytes] = (),
) -> tuple[bytes, int]:
    """
    Build a raw response and its header size.

    ``interim`` blocks (100 Continue, redirect hops) are placed before the
    final header block.
    """
    header_area = b"".join(interim) + make_header_block(status_code, reason, headers)
    return header_area + body, len(header_area)


def make_transfer(
    status_code: int = 200,
    headers: Optional[Sequence[tuple[str, str]]] = None,
    body: bytes = b"hello",
    report_header_size: bool = True,
) -> RawTransfer:
    """Build a RawTransfer as a transport would return it."""
    raw, header_size = make_raw_response(status_code=status_code, headers=headers, body=body)
    return RawTransfer(
        raw=raw,
        header_size=header_size if report_header_size else None,
        effective_url="http://example.com/",
    )


# =============================================================================
# Fake Transport
# =============================================================================

class FakeTransport(Transport):
    """Transport that records configs and replays canned outcomes."""

    def __init__(self, *outcomes: Union[RawTransfer, TransportFailure]) -> None:
        self.outcomes = list(outcomes) or [make_transfer()]
        self.configs: list[RequestConfig] = []

    @property
    def last_config(self) -> RequestConfig:
        return self.configs[-1]

    def perform(self, config: RequestConfig) -> RawTransfer:
        self.configs.append(config)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, TransportFailure):
            raise outcome
        return outcome


# =============================================================================
# requests.Response Factory
# =============================================================================

def make_requests_response(
    status_code: int = 200,
    reason: str = "OK",
    headers: Optional[dict[str, str]] = None,
    content: bytes = b"hello",
    url: str = "http://example.com/",
    history: Optional[list[requests.Response]] = None,
) -> requests.Response:
    """Build a ``requests.Response`` without touching the network."""
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response.headers = CaseInsensitiveDict(headers or {"Content-Type": "text/plain"})
    response._content = content
    response.url = url
    response.history = history or []
    response.raw = None
    return response
