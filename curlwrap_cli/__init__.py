"""
curlwrap CLI

Command-line interface for curlwrap.

Usage:
    python -m curlwrap_cli request GET https://example.com -d q=curl
    python -m curlwrap_cli request POST https://example.com/form -d a=1 -H "X-Trace: 1"
    python -m curlwrap_cli config --show
"""

__version__ = "0.1.0"
