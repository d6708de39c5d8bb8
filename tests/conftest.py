"""
Pytest configuration and shared fixtures for curlwrap tests.

This conftest.py:
1. Adds project root and tests root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

from fixtures import FakeTransport, make_transfer  # noqa: E402

from curlwrap.http import ClientState, HttpClient  # noqa: E402


_ENV_VARS = (
    "CURLWRAP_USER_AGENT",
    "CURLWRAP_COOKIE_FILE",
    "CURLWRAP_FOLLOW_REDIRECTS",
    "CURLWRAP_REFERRER",
    "CURLWRAP_TIMEOUT",
    "CURLWRAP_PROXY",
)


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep CURLWRAP_* variables from the developer's shell out of tests."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def state():
    """Provide a default ClientState."""
    return ClientState()


@pytest.fixture
def transport():
    """Provide a FakeTransport answering 200 OK."""
    return FakeTransport(make_transfer())


@pytest.fixture
def client(transport):
    """Provide an HttpClient wired to the fake transport."""
    return HttpClient(transport=transport)
