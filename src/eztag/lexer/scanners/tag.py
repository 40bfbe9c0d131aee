"""Start tag, end tag and attribute state scanner mixin."""

from __future__ import annotations

import re

from eztag.lexer.modes import HTML_SCRIPT_CONTENT_TYPES, RawTextKind, ScannerState
from eztag.tokens import TokenKind

_ELEMENT_NAME_RE = re.compile(r"[_:\w][_:\w.\-]*", re.ASCII)
_ATTRIBUTE_NAME_RE = re.compile(r"[^\s\"'></=\x00-\x0F\x7F\x80-\x9F]*")
_UNQUOTED_VALUE_RE = re.compile(r"[^\s\"'`=<>]+")

MSG_NAME_AFTER_BRACKET = "Tag name must directly follow the open bracket."
MSG_START_TAG_NAME = "Start tag name expected."
MSG_END_TAG_NAME = "End tag name expected."
MSG_CLOSING_BRACKET_EXPECTED = "Closing bracket expected."
MSG_CLOSING_BRACKET_MISSING = "Closing bracket missing."
MSG_UNEXPECTED_CHARACTER = "Unexpected character in tag."
MSG_UNTERMINATED_VALUE = "Unterminated attribute value."


class TagScannerMixin:
    """Mixin providing scanning inside start and end tags.

    Tracks the tag name, whether whitespace was seen since the last
    name/value (which gates attribute-name scanning), and the value of a
    ``type`` attribute so ``<script type="text/html">`` stays in content
    mode.

    """

    # These will be set by the Lexer class
    _source: str
    _pos: int
    _state: ScannerState
    _emit_pseudo_close_tags: bool
    _has_space_after_tag: bool
    _last_tag: str
    _last_attribute_name: str | None
    _last_type_value: str | None

    def _peek(self, n: int = 0) -> str:
        raise NotImplementedError

    def _advance(self, n: int = 1) -> None:
        raise NotImplementedError

    def _go_back(self, n: int) -> None:
        raise NotImplementedError

    def _advance_if_char(self, ch: str) -> bool:
        raise NotImplementedError

    def _advance_if_chars(self, chars: str) -> bool:
        raise NotImplementedError

    def _advance_if_regex(self, pattern: re.Pattern[str]) -> str:
        raise NotImplementedError

    def _advance_until_char(self, ch: str) -> bool:
        raise NotImplementedError

    def _skip_whitespace(self) -> bool:
        raise NotImplementedError

    def _finish_token(
        self, offset: int, kind: TokenKind, error: str | None = None
    ) -> TokenKind:
        raise NotImplementedError

    def _internal_scan(self) -> TokenKind:
        raise NotImplementedError

    def _next_element_name(self) -> str:
        return self._advance_if_regex(_ELEMENT_NAME_RE).lower()

    def _next_attribute_name(self) -> str:
        return self._advance_if_regex(_ATTRIBUTE_NAME_RE).lower()

    # =========================================================================
    # End tags
    # =========================================================================

    def _scan_after_opening_end_tag(self, offset: int) -> TokenKind:
        if self._next_element_name():
            self._state = ScannerState.WITHIN_END_TAG
            return self._finish_token(offset, TokenKind.END_TAG)
        if self._skip_whitespace():
            return self._finish_token(offset, TokenKind.WHITESPACE, MSG_NAME_AFTER_BRACKET)
        self._state = ScannerState.WITHIN_END_TAG
        self._advance_until_char(">")
        if offset < self._pos:
            return self._finish_token(offset, TokenKind.UNKNOWN, MSG_END_TAG_NAME)
        return self._internal_scan()

    def _scan_within_end_tag(self, offset: int) -> TokenKind:
        if self._skip_whitespace():
            return self._finish_token(offset, TokenKind.WHITESPACE)
        if self._advance_if_char(">"):
            self._state = ScannerState.CONTENT
            return self._finish_token(offset, TokenKind.END_TAG_CLOSE)
        if self._emit_pseudo_close_tags and self._peek() == "<":
            self._state = ScannerState.CONTENT
            return self._finish_token(offset, TokenKind.END_TAG_CLOSE, MSG_CLOSING_BRACKET_MISSING)
        self._advance()
        self._state = ScannerState.CONTENT
        return self._finish_token(offset, TokenKind.UNKNOWN, MSG_CLOSING_BRACKET_EXPECTED)

    # =========================================================================
    # Start tags
    # =========================================================================

    def _scan_after_opening_start_tag(self, offset: int) -> TokenKind:
        self._last_tag = self._next_element_name()
        self._last_type_value = None
        self._last_attribute_name = None
        if self._last_tag:
            self._has_space_after_tag = False
            self._state = ScannerState.WITHIN_TAG
            return self._finish_token(offset, TokenKind.START_TAG)
        if self._skip_whitespace():
            return self._finish_token(offset, TokenKind.WHITESPACE, MSG_NAME_AFTER_BRACKET)
        self._state = ScannerState.WITHIN_TAG
        self._advance_until_char(">")
        if offset < self._pos:
            return self._finish_token(offset, TokenKind.UNKNOWN, MSG_START_TAG_NAME)
        return self._internal_scan()

    def _scan_within_tag(self, offset: int) -> TokenKind:
        if self._skip_whitespace():
            self._has_space_after_tag = True
            return self._finish_token(offset, TokenKind.WHITESPACE)

        if self._has_space_after_tag:
            self._last_attribute_name = self._next_attribute_name()
            if self._last_attribute_name:
                self._state = ScannerState.AFTER_ATTRIBUTE_NAME
                self._has_space_after_tag = False
                return self._finish_token(offset, TokenKind.ATTRIBUTE_NAME)

        if self._advance_if_chars("/>"):
            self._state = ScannerState.CONTENT
            return self._finish_token(offset, TokenKind.START_TAG_SELF_CLOSE)

        if self._advance_if_char(">"):
            self._state = self._content_state_after(self._last_tag)
            return self._finish_token(offset, TokenKind.START_TAG_CLOSE)

        if self._emit_pseudo_close_tags and self._peek() == "<":
            self._state = ScannerState.CONTENT
            return self._finish_token(offset, TokenKind.START_TAG_CLOSE, MSG_CLOSING_BRACKET_MISSING)

        self._advance()
        return self._finish_token(offset, TokenKind.UNKNOWN, MSG_UNEXPECTED_CHARACTER)

    def _content_state_after(self, tag: str) -> ScannerState:
        """Pick the state that follows the ``>`` of a start tag."""
        if tag == "script":
            if self._last_type_value and self._last_type_value in HTML_SCRIPT_CONTENT_TYPES:
                return ScannerState.CONTENT
            return ScannerState.within_raw_text(RawTextKind.SCRIPT)
        if tag == "style":
            return ScannerState.within_raw_text(RawTextKind.STYLE)
        return ScannerState.CONTENT

    # =========================================================================
    # Attributes
    # =========================================================================

    def _scan_after_attribute_name(self, offset: int) -> TokenKind:
        if self._skip_whitespace():
            self._has_space_after_tag = True
            return self._finish_token(offset, TokenKind.WHITESPACE)
        if self._advance_if_char("="):
            self._state = ScannerState.BEFORE_ATTRIBUTE_VALUE
            return self._finish_token(offset, TokenKind.DELIMITER_ASSIGN)
        # no advance yet - jump to WITHIN_TAG
        self._state = ScannerState.WITHIN_TAG
        return self._internal_scan()

    def _scan_before_attribute_value(self, offset: int) -> TokenKind:
        if self._skip_whitespace():
            return self._finish_token(offset, TokenKind.WHITESPACE)

        value = self._advance_if_regex(_UNQUOTED_VALUE_RE)
        if value:
            # <a href=http://host/> : the trailing "/" closes the tag
            if self._peek() == ">" and self._peek(-1) == "/":
                self._go_back(1)
                value = value[:-1]
            if self._last_attribute_name == "type":
                self._last_type_value = value
            if value:
                self._state = ScannerState.WITHIN_TAG
                self._has_space_after_tag = False
                return self._finish_token(offset, TokenKind.ATTRIBUTE_VALUE)

        quote = self._peek()
        if quote == "'" or quote == '"':
            self._advance()
            error = None
            if self._advance_until_char(quote):
                self._advance()
                value_end = self._pos - 1
            else:
                error = MSG_UNTERMINATED_VALUE
                value_end = self._pos
            if self._last_attribute_name == "type":
                self._last_type_value = self._source[offset + 1 : value_end]
            self._state = ScannerState.WITHIN_TAG
            self._has_space_after_tag = False
            return self._finish_token(offset, TokenKind.ATTRIBUTE_VALUE, error)

        # no advance yet - jump to WITHIN_TAG
        self._state = ScannerState.WITHIN_TAG
        self._has_space_after_tag = False
        return self._internal_scan()
