"""Shared utilities for eztag.

Modules:
- logger: get_logger for namespaced logging
"""

from eztag.utils.logger import get_logger

__all__ = [
    "get_logger",
]
