"""
curlwrap

Convenience HTTP client: verb methods, shared request options and raw
response parsing on top of a pluggable transport.

Usage:
    from curlwrap import HttpClient

    client = HttpClient(follow_redirects=True)
    response = client.get("https://example.com/search", {"q": "curl"})
"""

__version__ = "0.1.0"

from curlwrap.http import (  # noqa: E402
    ClientState,
    HttpClient,
    RequestConfig,
    Response,
    TransferResult,
    TransportOption,
)
from curlwrap.schemas.errors import (  # noqa: E402
    ConfigurationException,
    ResponseParseError,
    TransportError,
    TransportFailure,
)

__all__ = [
    "ClientState",
    "ConfigurationException",
    "HttpClient",
    "RequestConfig",
    "Response",
    "ResponseParseError",
    "TransferResult",
    "TransportError",
    "TransportFailure",
    "TransportOption",
    "__version__",
]
