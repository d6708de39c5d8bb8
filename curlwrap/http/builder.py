"""
Request Builder

Turns a verb, URL, parameters and headers into a RequestConfig that a
transport can execute.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Sequence, Union
from urllib.parse import urlencode

from .options import TransportOption, normalize_options
from .state import ClientState


logger = logging.getLogger(__name__)


Params = Union[Mapping[str, Any], str, None]


class HttpMethod(str, Enum):
    """Verbs with a dedicated entry point on the client."""
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


# Verbs the transport pre-configures with a convenience flag.
CONVENIENCE_FLAGS: dict[str, TransportOption] = {
    HttpMethod.GET.value: TransportOption.HTTPGET,
    HttpMethod.HEAD.value: TransportOption.NOBODY,
    HttpMethod.POST.value: TransportOption.POST,
}

# Verbs whose parameters travel in the query string.
QUERY_METHODS = frozenset({HttpMethod.GET.value, HttpMethod.HEAD.value})


@dataclass(frozen=True)
class RequestConfig:
    """
    Fully assembled request, built fresh for every call.

    ``body`` is None when no body option is set, which is not the same as an
    empty string body.
    """
    method: str
    url: str
    body: Optional[str] = None
    headers: tuple[str, ...] = ()
    options: Mapping[TransportOption, Any] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def get_option(self, option: "str | TransportOption", default: Any = None) -> Any:
        return self.options.get(TransportOption.parse(option), default)

    @property
    def uses_custom_method(self) -> bool:
        return TransportOption.CUSTOMREQUEST in self.options


def encode_params(params: Params) -> str:
    """
    Encode request parameters as application/x-www-form-urlencoded.

    Strings pass through untouched. Mappings are percent-encoded with ``&``
    between pairs; sequence values repeat the key, nested mappings become
    ``key[sub]`` pairs and None values are dropped.
    """
    if params is None:
        return ""
    if isinstance(params, (bytes, bytearray)):
        return bytes(params).decode("utf-8")
    if isinstance(params, str):
        return params

    pairs: list[tuple[str, Any]] = []
    for key, value in params.items():
        _flatten(str(key), value, pairs)
    return urlencode(pairs)


def _flatten(key: str, value: Any, pairs: list[tuple[str, Any]]) -> None:
    if value is None:
        return
    if isinstance(value, bool):
        value = int(value)
    if isinstance(value, Mapping):
        for sub_key, sub_value in value.items():
            _flatten(f"{key}[{sub_key}]", sub_value, pairs)
    elif isinstance(value, (list, tuple)):
        for item in value:
            _flatten(key, item, pairs)
    else:
        pairs.append((key, value))


def append_query(url: str, query: str) -> str:
    """Append an encoded query string to ``url``, reusing an existing ``?``."""
    if not query:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{query}"


def format_headers(headers: Union[Mapping[str, Any], Iterable[str], None]) -> list[str]:
    """Return headers as ``"Name: Value"`` strings, preserving order."""
    if not headers:
        return []
    if isinstance(headers, Mapping):
        return [f"{name}: {value}" for name, value in headers.items()]
    return [str(line) for line in headers]


class RequestBuilder:
    """
    Assembles RequestConfig objects from client state.

    Usage:
        builder = RequestBuilder()
        config = builder.build("GET", "http://example.com/a", {"q": "1"}, None, state)
    """

    def build(
        self,
        method: str,
        url: str,
        params: Params = None,
        extra_headers: Union[Mapping[str, Any], Sequence[str], None] = None,
        state: Optional[ClientState] = None,
    ) -> RequestConfig:
        """
        Build the configuration for a single request.

        Args:
            method: HTTP verb; anything other than GET/HEAD/POST is sent as a
                method override
            url: Target URL
            params: Mapping or pre-encoded string
            extra_headers: Headers for this call only
            state: Client state supplying defaults

        Returns:
            RequestConfig ready for a transport
        """
        state = state if state is not None else ClientState()
        method = method.upper()
        encoded = encode_params(params)

        body: Optional[str] = None
        if method in QUERY_METHODS:
            url = append_query(url, encoded)
        elif encoded:
            body = encoded

        options: dict[TransportOption, Any] = {}
        self._set_method(options, method)
        options[TransportOption.URL] = url
        if body is not None:
            options[TransportOption.POSTFIELDS] = body

        options[TransportOption.HEADER] = True
        options[TransportOption.RETURNTRANSFER] = True
        options[TransportOption.USERAGENT] = state.user_agent
        if state.cookie_file:
            options[TransportOption.COOKIEFILE] = state.cookie_file
            options[TransportOption.COOKIEJAR] = state.cookie_file
        if state.follow_redirects:
            options[TransportOption.FOLLOWLOCATION] = True
        if state.referrer:
            options[TransportOption.REFERER] = state.referrer

        # Caller overrides go last. State options may have been mutated after
        # construction, so they are validated again here.
        options.update(normalize_options(state.options))

        headers = format_headers(extra_headers) + format_headers(state.headers)
        options[TransportOption.HTTPHEADER] = list(headers)

        config = RequestConfig(
            method=method,
            url=options[TransportOption.URL],
            body=options.get(TransportOption.POSTFIELDS),
            headers=tuple(headers),
            options=MappingProxyType(options),
        )
        logger.debug(
            "Built %s request for %s (%d headers, body=%s)",
            config.method,
            config.url,
            len(config.headers),
            "none" if config.body is None else f"{len(config.body)} chars",
        )
        return config

    @staticmethod
    def _set_method(options: dict[TransportOption, Any], method: str) -> None:
        flag = CONVENIENCE_FLAGS.get(method)
        if flag is not None:
            options[flag] = True
        else:
            options[TransportOption.CUSTOMREQUEST] = method
