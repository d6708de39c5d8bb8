"""
Runtime Configuration

Client defaults loaded from the environment, a YAML file or a dictionary.
The client itself never reads the environment; load a ClientConfig and pass
it to ``HttpClient.from_config`` instead.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from curlwrap.http.options import normalize_options
from curlwrap.http.state import DEFAULT_USER_AGENT

load_dotenv()


ENV_PREFIX = "CURLWRAP_"


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ClientConfig:
    """
    Construction-time settings for an HttpClient.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    user_agent: str = DEFAULT_USER_AGENT
    cookie_file: Optional[str] = None
    follow_redirects: bool = False
    referrer: Optional[str] = None
    headers: dict[str, str] = field(default_factory=dict)
    options: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Fail on unknown option names as soon as the config is built.
        normalize_options(self.options)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - CURLWRAP_USER_AGENT: User-Agent string
        - CURLWRAP_COOKIE_FILE: Cookie file path
        - CURLWRAP_FOLLOW_REDIRECTS: Follow redirects (true/false)
        - CURLWRAP_REFERRER: Referer header
        - CURLWRAP_TIMEOUT: Transfer timeout in seconds (TIMEOUT option)
        - CURLWRAP_PROXY: Proxy URL (PROXY option)
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}USER_AGENT"):
            overrides["user_agent"] = os.getenv(f"{ENV_PREFIX}USER_AGENT")
        if os.getenv(f"{ENV_PREFIX}COOKIE_FILE"):
            overrides["cookie_file"] = os.getenv(f"{ENV_PREFIX}COOKIE_FILE")
        if os.getenv(f"{ENV_PREFIX}FOLLOW_REDIRECTS"):
            overrides["follow_redirects"] = _env_flag(os.getenv(f"{ENV_PREFIX}FOLLOW_REDIRECTS", ""))
        if os.getenv(f"{ENV_PREFIX}REFERRER"):
            overrides["referrer"] = os.getenv(f"{ENV_PREFIX}REFERRER")

        # Transport options
        if os.getenv(f"{ENV_PREFIX}TIMEOUT"):
            overrides.setdefault("options", {})["TIMEOUT"] = float(os.getenv(f"{ENV_PREFIX}TIMEOUT", "0"))
        if os.getenv(f"{ENV_PREFIX}PROXY"):
            overrides.setdefault("options", {})["PROXY"] = os.getenv(f"{ENV_PREFIX}PROXY")

        return overrides

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "ClientConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ClientConfig":
        """Load configuration from a dictionary (supports partial data)."""
        return cls(
            user_agent=data.get("user_agent") or DEFAULT_USER_AGENT,
            cookie_file=data.get("cookie_file"),
            follow_redirects=bool(data.get("follow_redirects", False)),
            referrer=data.get("referrer"),
            headers=dict(data.get("headers") or {}),
            options=dict(data.get("options") or {}),
        )

    def with_env_overrides(self) -> "ClientConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)
        for key, value in overrides.items():
            if key == "options":
                new_config.options.update(value)
            else:
                setattr(new_config, key, value)
        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "user_agent": self.user_agent,
            "cookie_file": self.cookie_file,
            "follow_redirects": self.follow_redirects,
            "referrer": self.referrer,
            "headers": dict(self.headers),
            "options": dict(self.options),
        }
