"""
CLI command handlers.
"""

from . import request

__all__ = ["request"]
