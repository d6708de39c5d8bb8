"""
CLI Request Command

Send one request and print the response.

Usage:
    curlwrap request GET https://example.com/search -d q=curl
    curlwrap request PUT https://example.com/items/1 -d name=widget --json
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import replace
from typing import Any

from curlwrap.config import ClientConfig
from curlwrap.http import HttpClient, Response
from curlwrap.schemas.errors import ConfigurationException


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_TRANSPORT_FAILURE = 1
EXIT_CONFIGURATION_ERROR = 2


def _coerce(value: str) -> Any:
    """Turn a command-line option value into a bool, int or float when it looks like one."""
    lowered = value.lower()
    if lowered in ("true", "yes", "on"):
        return True
    if lowered in ("false", "no", "off"):
        return False
    for cast in (int, float):
        try:
            return cast(value)
        except ValueError:
            continue
    return value


def _split_pairs(items: list[str] | None, separator: str, what: str) -> list[tuple[str, str]]:
    pairs = []
    for item in items or []:
        key, sep, value = item.partition(separator)
        if not sep or not key.strip():
            raise ConfigurationException(f"Expected {what}, got {item!r}")
        pairs.append((key.strip(), value.strip() if separator == ":" else value))
    return pairs


def build_client_config(args: Namespace, base: ClientConfig) -> ClientConfig:
    """Overlay command-line flags on the loaded configuration."""
    changes: dict[str, Any] = {}
    if args.user_agent:
        changes["user_agent"] = args.user_agent
    if args.cookie_file:
        changes["cookie_file"] = args.cookie_file
    if args.location:
        changes["follow_redirects"] = True
    if args.referrer:
        changes["referrer"] = args.referrer
    if args.opt:
        options = dict(base.options)
        options.update((name, _coerce(value)) for name, value in _split_pairs(args.opt, "=", "NAME=VALUE"))
        changes["options"] = options
    return replace(base, **changes)


def response_to_dict(response: Response) -> dict[str, Any]:
    return {
        "status_code": response.status_code,
        "reason": response.reason,
        "http_version": response.http_version,
        "headers": dict(response.headers),
        "body": response.text,
    }


def request_cmd(args: Namespace) -> int:
    """Execute the request command."""
    base: ClientConfig = args.client_config
    try:
        config = build_client_config(args, base)
        client = HttpClient.from_config(config)
        headers = [f"{name}: {value}" for name, value in _split_pairs(args.header, ":", "'Name: Value'")]
        if args.data_raw is not None:
            params: Any = args.data_raw
        else:
            params = {}
            for key, value in _split_pairs(args.data, "=", "key=value"):
                params.setdefault(key, []).append(value)
            params = {key: values[0] if len(values) == 1 else values for key, values in params.items()}
    except ConfigurationException as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIGURATION_ERROR

    result = client.execute(args.method, args.url, params or None, headers)
    if not result.ok:
        if args.json:
            print(json.dumps({"ok": False, "error": client.error}, indent=2))
        else:
            print(f"Error: {client.error}", file=sys.stderr)
        return EXIT_TRANSPORT_FAILURE

    response = result.unwrap()
    if args.json:
        print(json.dumps({"ok": True, "response": response_to_dict(response)}, indent=2))
        return EXIT_SUCCESS

    if args.include:
        print(f"HTTP/{response.http_version} {response.status}")
        for name, value in response.headers.items():
            for item in (value if isinstance(value, tuple) else (value,)):
                print(f"{name}: {item}")
        print()
    sys.stdout.write(response.text)
    return EXIT_SUCCESS
