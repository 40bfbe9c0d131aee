"""Lexer scanner states and constants.

This module defines the finite state machine states for the lexer
and constant sets used for tag classification.
"""

from __future__ import annotations

from enum import Enum, auto


class RawTextKind(Enum):
    """Kind of raw-text element whose content is not scanned for tags."""

    SCRIPT = auto()
    STYLE = auto()


class ScannerState(Enum):
    """Lexer scanning states.

    The lexer switches between states based on the characters consumed:
    - CONTENT: Between tags, scanning text up to the next ``<``
    - WITHIN_COMMENT / WITHIN_DOCTYPE: Inside ``<!-- ... -->`` / ``<!doctype ...>``
    - AFTER_OPENING_START_TAG / AFTER_OPENING_END_TAG: Right after ``<`` / ``</``
    - WITHIN_TAG / WITHIN_END_TAG: Inside a start / end tag, after its name
    - AFTER_ATTRIBUTE_NAME / BEFORE_ATTRIBUTE_VALUE: Attribute sub-states
    - WITHIN_SCRIPT_CONTENT / WITHIN_STYLE_CONTENT: Raw text of
      ``<script>`` / ``<style>`` (see ``raw_text_kind``)

    """

    CONTENT = auto()
    WITHIN_COMMENT = auto()
    WITHIN_DOCTYPE = auto()
    AFTER_OPENING_START_TAG = auto()
    AFTER_OPENING_END_TAG = auto()
    WITHIN_TAG = auto()
    WITHIN_END_TAG = auto()
    AFTER_ATTRIBUTE_NAME = auto()
    BEFORE_ATTRIBUTE_VALUE = auto()
    WITHIN_SCRIPT_CONTENT = auto()
    WITHIN_STYLE_CONTENT = auto()

    @property
    def raw_text_kind(self) -> RawTextKind | None:
        """The raw-text kind for WITHIN_*_CONTENT states, else None."""
        return _RAW_TEXT_KINDS.get(self)

    @classmethod
    def within_raw_text(cls, kind: RawTextKind) -> ScannerState:
        """Return the raw-text content state for the given kind."""
        if kind is RawTextKind.SCRIPT:
            return cls.WITHIN_SCRIPT_CONTENT
        return cls.WITHIN_STYLE_CONTENT


_RAW_TEXT_KINDS = {
    ScannerState.WITHIN_SCRIPT_CONTENT: RawTextKind.SCRIPT,
    ScannerState.WITHIN_STYLE_CONTENT: RawTextKind.STYLE,
}

# <script type="..."> values whose content is still markup, not script
HTML_SCRIPT_CONTENT_TYPES = frozenset({"text/x-handlebars-template", "text/html"})

# Standard HTML void elements (no closing tag, no children)
HTML_VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "keygen",
        "link",
        "menuitem",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

# Attributes holding whitespace-separated token lists. Instance values are
# appended to skeleton values for these; all other attributes overwrite.
MULTI_VALUED_ATTRIBUTES = frozenset(
    {
        "accept-charset",
        "accesskey",
        "aria-controls",
        "aria-describedby",
        "aria-labelledby",
        "aria-owns",
        "class",
        "for",
        "headers",
        "itemprop",
        "itemref",
        "itemtype",
        "ping",
        "rel",
        "rev",
        "sandbox",
        "sizes",
    }
)
