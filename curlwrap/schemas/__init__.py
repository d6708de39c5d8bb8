"""
Error models and exceptions shared across curlwrap.
"""

from .errors import (
    ConfigurationException,
    CurlwrapError,
    CurlwrapException,
    ErrorCodes,
    ResponseParseError,
    TransportError,
    TransportFailure,
)

__all__ = [
    "ConfigurationException",
    "CurlwrapError",
    "CurlwrapException",
    "ErrorCodes",
    "ResponseParseError",
    "TransportError",
    "TransportFailure",
]
