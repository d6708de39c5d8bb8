"""
Test fixtures package for curlwrap tests.

Provides factory functions and fakes:
- common.py: raw response builders, a recording fake transport and
  canned ``requests`` responses

Usage:
    from fixtures import make_raw_response, FakeTransport

    def test_something():
        transport = FakeTransport(make_transfer(status_code=204))
"""

from .common import (
    FakeTransport,
    make_header_block,
    make_raw_response,
    make_requests_response,
    make_transfer,
)

__all__ = [
    "FakeTransport",
    "make_header_block",
    "make_raw_response",
    "make_requests_response",
    "make_transfer",
]
