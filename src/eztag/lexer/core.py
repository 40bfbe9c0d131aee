"""Pull-based state-machine lexer for markup text.

``scan()`` returns one token per call over non-overlapping, monotonically
increasing ground until END_OF_STREAM. Every call makes forward progress:
if a state transition would leave the cursor in place, the lexer skips one
character and reports it as UNKNOWN.

Thread Safety:
Lexer instances are single-use. Create one per source string.
All state is instance-local; no shared mutable state.

"""

from __future__ import annotations

import re
from collections.abc import Iterator

from eztag.lexer.modes import ScannerState
from eztag.lexer.scanners import (
    ContentScannerMixin,
    RawTextScannerMixin,
    TagScannerMixin,
)
from eztag.tokens import Token, TokenKind
from eztag.utils.logger import get_logger

logger = get_logger(__name__)

_WHITESPACE = " \t\n\f\r"

# Tokens that may legitimately cover zero characters when pseudo-closes are on
_PSEUDO_CLOSE_KINDS = frozenset({TokenKind.START_TAG_CLOSE, TokenKind.END_TAG_CLOSE})


class Lexer(
    ContentScannerMixin,
    TagScannerMixin,
    RawTextScannerMixin,
):
    """State-machine lexer over a text buffer.

    Usage:
            >>> lexer = Lexer('<p class="x">Hi</p>')
            >>> [t.kind.name for t in lexer.tokenize()][:4]
        ['START_TAG_OPEN', 'START_TAG', 'WHITESPACE', 'ATTRIBUTE_NAME']

    The current token is also exposed through accessors (``token_kind``,
    ``token_offset``, ``token_length``, ``token_text``, ``token_error``)
    and the scanning state through ``state``.

    Thread Safety:
        Lexer instances are single-use. Create one per source string.

    """

    __slots__ = (
        "_source",
        "_source_len",
        "_pos",
        "_state",
        "_emit_pseudo_close_tags",
        # Current token
        "_token_kind",
        "_token_offset",
        "_token_error",
        # Tag scanning state
        "_has_space_after_tag",
        "_last_tag",
        "_last_attribute_name",
        "_last_type_value",
    )

    def __init__(
        self,
        source: str,
        initial_offset: int = 0,
        initial_state: ScannerState = ScannerState.CONTENT,
        emit_pseudo_close_tags: bool = False,
    ) -> None:
        """Initialize lexer with source text.

        Args:
            source: Markup source text
            initial_offset: Offset to start scanning from
            initial_state: Scanner state at ``initial_offset``
            emit_pseudo_close_tags: Emit a zero-length START_TAG_CLOSE /
                END_TAG_CLOSE when a ``<`` appears before a tag's ``>``
        """
        self._source = source
        self._source_len = len(source)
        self._pos = initial_offset
        self._state = initial_state
        self._emit_pseudo_close_tags = emit_pseudo_close_tags

        self._token_kind = TokenKind.UNKNOWN
        self._token_offset = 0
        self._token_error: str | None = None

        self._has_space_after_tag = False
        self._last_tag = ""
        self._last_attribute_name: str | None = None
        self._last_type_value: str | None = None

    # =========================================================================
    # Public API
    # =========================================================================

    def scan(self) -> Token:
        """Scan and return the next token.

        Returns:
            The next Token; END_OF_STREAM (repeatedly) once input is exhausted.
        """
        offset = self._pos
        old_state = self._state
        kind = self._internal_scan()
        if (
            kind is not TokenKind.END_OF_STREAM
            and offset == self._pos
            and not (self._emit_pseudo_close_tags and kind in _PSEUDO_CLOSE_KINDS)
        ):
            logger.warning(
                "Lexer has not advanced at offset %d, state before: %s after: %s",
                offset,
                old_state.name,
                self._state.name,
            )
            self._advance()
            kind = self._finish_token(offset, TokenKind.UNKNOWN)
        return Token(
            kind=kind,
            start_offset=self._token_offset,
            length=self._pos - self._token_offset,
            scanner_state=self._state,
            error=self._token_error,
        )

    def tokenize(self) -> Iterator[Token]:
        """Tokenize source into token stream.

        Yields:
            Token objects one at a time, ending with one END_OF_STREAM token.

        Complexity: O(n) where n = len(source)
        """
        while True:
            token = self.scan()
            yield token
            if token.kind is TokenKind.END_OF_STREAM:
                return

    @property
    def state(self) -> ScannerState:
        return self._state

    @property
    def token_kind(self) -> TokenKind:
        return self._token_kind

    @property
    def token_offset(self) -> int:
        return self._token_offset

    @property
    def token_length(self) -> int:
        return self._pos - self._token_offset

    @property
    def token_end(self) -> int:
        return self._pos

    @property
    def token_text(self) -> str:
        return self._source[self._token_offset : self._pos]

    @property
    def token_error(self) -> str | None:
        return self._token_error

    # =========================================================================
    # State dispatch
    # =========================================================================

    def _internal_scan(self) -> TokenKind:
        """Dispatch to the scanner for the current state."""
        offset = self._pos
        if self._eos():
            return self._finish_token(offset, TokenKind.END_OF_STREAM)

        state = self._state
        if state is ScannerState.CONTENT:
            return self._scan_content(offset)
        if state is ScannerState.WITHIN_COMMENT:
            return self._scan_comment(offset)
        if state is ScannerState.WITHIN_DOCTYPE:
            return self._scan_doctype(offset)
        if state is ScannerState.AFTER_OPENING_END_TAG:
            return self._scan_after_opening_end_tag(offset)
        if state is ScannerState.WITHIN_END_TAG:
            return self._scan_within_end_tag(offset)
        if state is ScannerState.AFTER_OPENING_START_TAG:
            return self._scan_after_opening_start_tag(offset)
        if state is ScannerState.WITHIN_TAG:
            return self._scan_within_tag(offset)
        if state is ScannerState.AFTER_ATTRIBUTE_NAME:
            return self._scan_after_attribute_name(offset)
        if state is ScannerState.BEFORE_ATTRIBUTE_VALUE:
            return self._scan_before_attribute_value(offset)
        if state is ScannerState.WITHIN_SCRIPT_CONTENT:
            return self._scan_script_content(offset)
        return self._scan_style_content(offset)

    def _finish_token(
        self, offset: int, kind: TokenKind, error: str | None = None
    ) -> TokenKind:
        self._token_kind = kind
        self._token_offset = offset
        self._token_error = error
        return kind

    # =========================================================================
    # Cursor helpers
    # =========================================================================

    def _eos(self) -> bool:
        return self._pos >= self._source_len

    def _peek(self, n: int = 0) -> str:
        """Character at cursor + n, or empty string outside the buffer."""
        idx = self._pos + n
        if 0 <= idx < self._source_len:
            return self._source[idx]
        return ""

    def _advance(self, n: int = 1) -> None:
        self._pos = min(self._pos + n, self._source_len)

    def _go_back(self, n: int) -> None:
        self._pos -= n

    def _advance_if_char(self, ch: str) -> bool:
        if self._pos < self._source_len and self._source[self._pos] == ch:
            self._pos += 1
            return True
        return False

    def _advance_if_chars(self, chars: str) -> bool:
        if self._source.startswith(chars, self._pos):
            self._pos += len(chars)
            return True
        return False

    def _advance_if_regex(self, pattern: re.Pattern[str]) -> str:
        """Consume a match of pattern anchored at the cursor.

        Returns:
            The matched text, or empty string if nothing matched.
        """
        match = pattern.match(self._source, self._pos)
        if match is None:
            return ""
        self._pos = match.end()
        return match.group()

    def _advance_until_char(self, ch: str) -> bool:
        """Move to the next occurrence of ch (or end of input)."""
        idx = self._source.find(ch, self._pos)
        if idx == -1:
            self._pos = self._source_len
            return False
        self._pos = idx
        return True

    def _advance_until_chars(self, chars: str) -> bool:
        """Move to the next occurrence of chars (or end of input)."""
        idx = self._source.find(chars, self._pos)
        if idx == -1:
            self._pos = self._source_len
            return False
        self._pos = idx
        return True

    def _skip_whitespace(self) -> bool:
        start = self._pos
        source = self._source
        while self._pos < self._source_len and source[self._pos] in _WHITESPACE:
            self._pos += 1
        return self._pos > start
