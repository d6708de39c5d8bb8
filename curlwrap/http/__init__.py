"""
HTTP Client Module

Verb-level HTTP façade: request building, transports and response parsing.
"""

from .builder import HttpMethod, RequestBuilder, RequestConfig, append_query, encode_params
from .client import HttpClient, TransferResult
from .options import TransportOption
from .parser import Response, ResponseParser
from .state import DEFAULT_USER_AGENT, ClientState
from .transport import RawTransfer, RequestsTransport, Transport, TransportErrorCode

__all__ = [
    "ClientState",
    "DEFAULT_USER_AGENT",
    "HttpClient",
    "HttpMethod",
    "RawTransfer",
    "RequestBuilder",
    "RequestConfig",
    "RequestsTransport",
    "Response",
    "ResponseParser",
    "TransferResult",
    "Transport",
    "TransportErrorCode",
    "TransportOption",
    "append_query",
    "encode_params",
]
