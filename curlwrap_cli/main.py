"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m curlwrap_cli request METHOD URL [-d key=value] [-H "Name: Value"] [-L] [--json]
    python -m curlwrap_cli config --show

Environment Variables:
    CURLWRAP_USER_AGENT         User-Agent string
    CURLWRAP_COOKIE_FILE        Cookie file path
    CURLWRAP_FOLLOW_REDIRECTS   Follow redirects (default: false)
    CURLWRAP_REFERRER           Referer header
    CURLWRAP_TIMEOUT            Transfer timeout in seconds
    CURLWRAP_PROXY              Proxy URL
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from curlwrap.config import ClientConfig
from curlwrap.schemas.errors import ConfigurationException
from curlwrap_cli import __version__
from curlwrap_cli.commands import request


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_CONFIGURATION_ERROR = 2


def setup_logging(level: str = "WARNING", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.WARNING)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="curlwrap",
        description="curlwrap CLI - send HTTP requests and inspect the parsed response.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to a YAML configuration file (environment variables override it)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: WARNING)",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Also write logs to this file",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- request command ---
    request_parser = subparsers.add_parser(
        "request",
        help="Send a single HTTP request",
        description="Send a request and print the response body.",
    )
    request_parser.add_argument("method", type=str, help="HTTP method (GET, POST, PUT, DELETE, HEAD, ...)")
    request_parser.add_argument("url", type=str, help="Target URL")
    request_parser.add_argument(
        "--data", "-d",
        action="append",
        default=None,
        metavar="KEY=VALUE",
        help="Parameter to encode (query string for GET/HEAD, body otherwise); repeatable",
    )
    request_parser.add_argument(
        "--data-raw",
        type=str,
        default=None,
        help="Pre-encoded parameter string, sent as-is",
    )
    request_parser.add_argument(
        "--header", "-H",
        action="append",
        default=None,
        metavar="'NAME: VALUE'",
        help="Extra header for this request; repeatable",
    )
    request_parser.add_argument("--user-agent", "-A", type=str, default=None, help="User-Agent string")
    request_parser.add_argument("--cookie-file", "-b", type=str, default=None, help="Cookie file to read and write")
    request_parser.add_argument("--location", "-L", action="store_true", default=False, help="Follow redirects")
    request_parser.add_argument("--referrer", "-e", type=str, default=None, help="Referer header")
    request_parser.add_argument(
        "--opt",
        action="append",
        default=None,
        metavar="NAME=VALUE",
        help="Transport option override, e.g. TIMEOUT=5 or CURLOPT_MAXREDIRS=3; repeatable",
    )
    request_parser.add_argument("--include", "-i", action="store_true", default=False, help="Print response headers")
    request_parser.add_argument("--json", action="store_true", default=False, help="Output a JSON summary")
    request_parser.add_argument("--debug", action="store_true", default=False, help="Show tracebacks on error")
    request_parser.set_defaults(func=request.request_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Show the effective client configuration",
        description="Print the configuration after file and environment overrides.",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def load_client_config(path: Path | None) -> ClientConfig:
    """Load configuration from file and/or environment; environment wins."""
    if path is not None:
        return ClientConfig.from_yaml(path).with_env_overrides()
    return ClientConfig.from_env()


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.show:
        print(json.dumps(args.client_config.to_dict(), indent=2, default=str))
        return EXIT_SUCCESS

    print("Usage: curlwrap config --show")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=configuration error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    setup_logging(level=args.log_level, log_file=args.log_file)

    try:
        args.client_config = load_client_config(args.config)
    except ConfigurationException as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIGURATION_ERROR
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
