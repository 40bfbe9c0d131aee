"""Content, comment and doctype state scanner mixin."""

from __future__ import annotations

import re

from eztag.lexer.modes import ScannerState
from eztag.tokens import TokenKind

_DOCTYPE_RE = re.compile(r"!doctype", re.IGNORECASE)


class ContentScannerMixin:
    """Mixin providing scanning for text between tags.

    Handles the CONTENT state (text and the ``<`` that starts any tag,
    comment or doctype) and the WITHIN_COMMENT / WITHIN_DOCTYPE states.

    """

    # These will be set by the Lexer class
    _state: ScannerState

    def _eos(self) -> bool:
        raise NotImplementedError

    def _peek(self, n: int = 0) -> str:
        raise NotImplementedError

    def _advance_if_char(self, ch: str) -> bool:
        raise NotImplementedError

    def _advance_if_chars(self, chars: str) -> bool:
        raise NotImplementedError

    def _advance_if_regex(self, pattern: re.Pattern[str]) -> str:
        raise NotImplementedError

    def _advance_until_char(self, ch: str) -> bool:
        raise NotImplementedError

    def _advance_until_chars(self, chars: str) -> bool:
        raise NotImplementedError

    def _finish_token(
        self, offset: int, kind: TokenKind, error: str | None = None
    ) -> TokenKind:
        raise NotImplementedError

    def _scan_content(self, offset: int) -> TokenKind:
        """Scan text up to the next ``<``, or the markup that ``<`` opens."""
        if self._advance_if_char("<"):
            if not self._eos() and self._peek() == "!":
                if self._advance_if_chars("!--"):
                    self._state = ScannerState.WITHIN_COMMENT
                    return self._finish_token(offset, TokenKind.START_COMMENT_TAG)
                if self._advance_if_regex(_DOCTYPE_RE):
                    self._state = ScannerState.WITHIN_DOCTYPE
                    return self._finish_token(offset, TokenKind.START_DOCTYPE_TAG)
            if self._advance_if_char("/"):
                self._state = ScannerState.AFTER_OPENING_END_TAG
                return self._finish_token(offset, TokenKind.END_TAG_OPEN)
            self._state = ScannerState.AFTER_OPENING_START_TAG
            return self._finish_token(offset, TokenKind.START_TAG_OPEN)

        self._advance_until_char("<")
        return self._finish_token(offset, TokenKind.CONTENT)

    def _scan_comment(self, offset: int) -> TokenKind:
        """Scan comment body, then the ``-->`` that ends it."""
        if self._advance_if_chars("-->"):
            self._state = ScannerState.CONTENT
            return self._finish_token(offset, TokenKind.END_COMMENT_TAG)
        self._advance_until_chars("-->")
        return self._finish_token(offset, TokenKind.COMMENT)

    def _scan_doctype(self, offset: int) -> TokenKind:
        """Scan doctype body, then the ``>`` that ends it."""
        if self._advance_if_char(">"):
            self._state = ScannerState.CONTENT
            return self._finish_token(offset, TokenKind.END_DOCTYPE_TAG)
        self._advance_until_char(">")
        return self._finish_token(offset, TokenKind.DOCTYPE)
