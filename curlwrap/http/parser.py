"""
Response Parser

Splits a raw transfer (header blocks followed by the body) into a Response.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

from curlwrap.schemas.errors import ResponseParseError


HeaderValue = Union[str, tuple[str, ...]]

STATUS_LINE = re.compile(rb"^HTTP/(\d+(?:\.\d+)?)\s+(\d{3})(?:\s+(.*))?$")
BLOCK_TERMINATOR = re.compile(rb"\r?\n\r?\n")


@dataclass(frozen=True)
class Response:
    """
    Parsed HTTP response.

    Header names are lower-cased. A header sent more than once maps to the
    ordered tuple of its values; a header sent once maps to a plain string.
    The header mapping is read-only.
    """
    status_code: int
    headers: Mapping[str, HeaderValue] = field(default_factory=dict)
    body: bytes = b""
    http_version: str = "1.1"
    reason: str = ""

    def __post_init__(self) -> None:
        frozen = {
            name: tuple(value) if isinstance(value, (list, tuple)) else value
            for name, value in self.headers.items()
        }
        object.__setattr__(self, "headers", MappingProxyType(frozen))

    @property
    def ok(self) -> bool:
        """Check if request was successful (2xx status)."""
        return 200 <= self.status_code < 300

    @property
    def status(self) -> str:
        """Status code and reason phrase, e.g. ``"404 Not Found"``."""
        return f"{self.status_code} {self.reason}".rstrip()

    def header(self, name: str, default: Optional[HeaderValue] = None) -> Optional[HeaderValue]:
        """Look up a header by case-insensitive name."""
        return self.headers.get(name.lower(), default)

    def header_values(self, name: str) -> list[str]:
        """All values sent for ``name``, in order."""
        value = self.header(name)
        if value is None:
            return []
        if isinstance(value, tuple):
            return list(value)
        return [value]

    @property
    def encoding(self) -> str:
        content_type = self.header_values("content-type")
        if content_type:
            match = re.search(r"charset=([\w.:-]+)", content_type[-1], re.IGNORECASE)
            if match:
                return match.group(1).strip("\"'")
        return "utf-8"

    @property
    def text(self) -> str:
        """Get the body as text."""
        try:
            return self.body.decode(self.encoding, errors="replace")
        except LookupError:
            return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """Parse the body as JSON."""
        return json.loads(self.body)

    def __str__(self) -> str:
        return self.text


def _is_interim(block: bytes) -> bool:
    """True for a 1xx block or a 3xx block carrying a Location header."""
    lines = block.splitlines()
    match = STATUS_LINE.match(lines[0].strip()) if lines else None
    if match is None:
        return False
    code = int(match.group(2))
    if 100 <= code < 200:
        return True
    if 300 <= code < 400:
        return any(line.lower().startswith(b"location:") for line in lines[1:])
    return False


def _find_boundary(raw: bytes) -> int:
    """Offset of the first body byte, found by walking the header blocks.

    The body starts after the first blank line, unless that block is an
    interim one (``100 Continue``, a redirect hop) and another status line
    follows it.
    """
    if not raw.startswith(b"HTTP/"):
        raise ResponseParseError("Raw response does not start with an HTTP status line")
    offset = 0
    while True:
        match = BLOCK_TERMINATOR.search(raw, offset)
        if match is None:
            # Headers without a trailing blank line: no body.
            return len(raw)
        end = match.end()
        if _is_interim(raw[offset:match.start()]) and raw.startswith(b"HTTP/", end):
            offset = end
            continue
        return end


def _last_block(header_area: bytes) -> list[bytes]:
    blocks = [block for block in BLOCK_TERMINATOR.split(header_area) if block.strip()]
    if not blocks:
        raise ResponseParseError("Raw response has an empty header block")
    return blocks[-1].splitlines()


class ResponseParser:
    """
    Parses raw transfers into Response objects.

    Usage:
        parser = ResponseParser()
        response = parser.parse(raw, header_size=transfer.header_size)
    """

    def parse(self, raw: bytes, header_size: Optional[int] = None) -> Response:
        """
        Parse a raw response.

        Args:
            raw: Header blocks followed by the body
            header_size: Boundary offset reported by the transport; when None
                the boundary is found by scanning for the blank line

        Returns:
            Response with the final block's status, headers and the body

        Raises:
            ResponseParseError: If no valid status line is found
        """
        if isinstance(raw, str):
            raw = raw.encode("iso-8859-1")
        if header_size is None:
            header_size = _find_boundary(raw)
        if header_size < 0 or header_size > len(raw):
            raise ResponseParseError(
                f"Header size {header_size} is outside the {len(raw)} byte response",
                details={"header_size": header_size, "length": len(raw)},
            )

        lines = _last_block(raw[:header_size])
        body = raw[header_size:]

        match = STATUS_LINE.match(lines[0].strip())
        if match is None:
            raise ResponseParseError(
                "Malformed status line",
                details={"status_line": lines[0].decode("iso-8859-1")},
            )
        version, code, reason = match.groups()

        headers: dict[str, HeaderValue] = {}
        for line in lines[1:]:
            name, sep, value = line.decode("iso-8859-1").partition(":")
            if not sep or not name.strip():
                continue
            key = name.strip().lower()
            value = value.strip()
            existing = headers.get(key)
            if existing is None:
                headers[key] = value
            elif isinstance(existing, tuple):
                headers[key] = existing + (value,)
            else:
                headers[key] = (existing, value)

        return Response(
            status_code=int(code),
            headers=headers,
            body=body,
            http_version=version.decode("ascii"),
            reason=(reason or b"").decode("iso-8859-1").strip(),
        )
