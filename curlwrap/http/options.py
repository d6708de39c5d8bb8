"""
Transport Options

Enum-keyed vocabulary of transport options. Names follow libcurl's
``CURLOPT_*`` constants so existing option sets carry over, but every name is
validated against this enum instead of being looked up dynamically.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping

from curlwrap.schemas.errors import ConfigurationException


OPTION_PREFIX = "CURLOPT_"


class TransportOption(str, Enum):
    """Options understood by the request builder and transports."""

    URL = "URL"
    HTTPGET = "HTTPGET"
    NOBODY = "NOBODY"
    POST = "POST"
    CUSTOMREQUEST = "CUSTOMREQUEST"
    POSTFIELDS = "POSTFIELDS"
    HTTPHEADER = "HTTPHEADER"
    HEADER = "HEADER"
    RETURNTRANSFER = "RETURNTRANSFER"
    USERAGENT = "USERAGENT"
    REFERER = "REFERER"
    COOKIEFILE = "COOKIEFILE"
    COOKIEJAR = "COOKIEJAR"
    FOLLOWLOCATION = "FOLLOWLOCATION"
    MAXREDIRS = "MAXREDIRS"
    TIMEOUT = "TIMEOUT"
    CONNECTTIMEOUT = "CONNECTTIMEOUT"
    SSL_VERIFYPEER = "SSL_VERIFYPEER"
    CAINFO = "CAINFO"
    SSLCERT = "SSLCERT"
    SSLKEY = "SSLKEY"
    PROXY = "PROXY"
    USERPWD = "USERPWD"
    ENCODING = "ENCODING"

    @classmethod
    def parse(cls, name: "str | TransportOption") -> "TransportOption":
        """
        Resolve an option name.

        Names are case-insensitive and may carry a redundant ``CURLOPT_``
        prefix, so ``"followlocation"``, ``"CURLOPT_FOLLOWLOCATION"`` and
        ``TransportOption.FOLLOWLOCATION`` are the same option.

        Raises:
            ConfigurationException: If the name is not a known option.
        """
        if isinstance(name, cls):
            return name
        if not isinstance(name, str):
            raise ConfigurationException(
                f"Transport option names must be strings, got {type(name).__name__}",
                option=repr(name),
            )
        key = name.strip().upper()
        if key.startswith(OPTION_PREFIX):
            key = key[len(OPTION_PREFIX):]
        try:
            return cls(key)
        except ValueError:
            raise ConfigurationException(
                f"Unknown transport option: {name!r}",
                option=name,
            ) from None


# Options the client relies on to get a parseable response back.
MANAGED_OPTIONS = frozenset({TransportOption.HEADER, TransportOption.RETURNTRANSFER})


def normalize_options(options: Mapping[Any, Any] | None) -> dict[TransportOption, Any]:
    """Return a copy of ``options`` keyed by TransportOption.

    Later entries win when two spellings name the same option.

    Raises:
        ConfigurationException: On an unknown name, or when a managed option
            (HEADER, RETURNTRANSFER) is switched off.
    """
    normalized: dict[TransportOption, Any] = {}
    for name, value in (options or {}).items():
        option = TransportOption.parse(name)
        if option in MANAGED_OPTIONS and not value:
            raise ConfigurationException(
                f"{option.value} is managed by the client and cannot be disabled",
                option=option.value,
            )
        normalized[option] = value
    return normalized
