"""State-specific scanners for the eztag lexer.

Each scanner is a mixin that provides scanning logic for one family of
scanner states (content, tags and attributes, raw text).
"""

from __future__ import annotations

from eztag.lexer.scanners.content import ContentScannerMixin
from eztag.lexer.scanners.raw_text import RawTextScannerMixin
from eztag.lexer.scanners.tag import TagScannerMixin

__all__ = [
    "ContentScannerMixin",
    "RawTextScannerMixin",
    "TagScannerMixin",
]
