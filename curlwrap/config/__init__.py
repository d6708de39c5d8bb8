"""
Runtime Configuration Module

Provides configuration loading for curlwrap clients.
"""

from .runtime import ClientConfig

__all__ = [
    "ClientConfig",
]
