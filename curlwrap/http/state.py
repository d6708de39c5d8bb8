"""
Client State

Mutable per-client configuration read by the request builder on every call.
"""

from __future__ import annotations

import platform
from dataclasses import dataclass, field
from typing import Any, Optional

import requests

from curlwrap import __version__
from .options import TransportOption, normalize_options


DEFAULT_USER_AGENT = (
    f"curlwrap/{__version__} (Python {platform.python_version()}; "
    f"requests/{requests.__version__})"
)


@dataclass
class ClientState:
    """
    Configuration held by an HttpClient between requests.

    Callers may mutate the fields between requests. The state is not
    thread-safe: use one client per thread.
    """
    user_agent: str = DEFAULT_USER_AGENT
    cookie_file: Optional[str] = None
    follow_redirects: bool = False
    referrer: Optional[str] = None
    headers: dict[str, str] = field(default_factory=dict)
    options: dict[TransportOption, Any] = field(default_factory=dict)
    error: str = ""

    def __post_init__(self) -> None:
        if self.user_agent is None:
            self.user_agent = DEFAULT_USER_AGENT
        self.headers = dict(self.headers or {})
        # Unknown option names fail here, at construction.
        self.options = normalize_options(self.options)

    def set_option(self, name: "str | TransportOption", value: Any) -> None:
        """Validate and store a default transport option."""
        self.options.update(normalize_options({name: value}))
