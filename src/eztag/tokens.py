"""Token and TokenKind definitions for the eztag lexer.

The lexer produces a stream of Token objects that the parser consumes.
Each Token is a view into the lexer's source buffer: it records where the
token starts and how long it is, never a copy of the text.

Thread Safety:
Token is frozen (immutable) and safe to share across threads.
TokenKind is an enum (inherently immutable).

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from eztag.lexer.modes import ScannerState


class TokenKind(Enum):
    """Token kinds produced by the lexer.

    Organized by category:
    - Start tags and their attributes
    - End tags
    - Comments and doctype declarations
    - Text and raw-text content
    - Recovery and stream markers

    """

    # Start tags
    START_TAG_OPEN = auto()  # <
    START_TAG = auto()  # tag name
    ATTRIBUTE_NAME = auto()
    DELIMITER_ASSIGN = auto()  # =
    ATTRIBUTE_VALUE = auto()
    START_TAG_CLOSE = auto()  # >
    START_TAG_SELF_CLOSE = auto()  # />

    # End tags
    END_TAG_OPEN = auto()  # </
    END_TAG = auto()  # tag name
    END_TAG_CLOSE = auto()  # >

    # Comments
    START_COMMENT_TAG = auto()  # <!--
    COMMENT = auto()
    END_COMMENT_TAG = auto()  # -->

    # Doctype
    START_DOCTYPE_TAG = auto()  # <!doctype
    DOCTYPE = auto()
    END_DOCTYPE_TAG = auto()  # >

    # Content
    CONTENT = auto()
    SCRIPT = auto()
    STYLES = auto()
    WHITESPACE = auto()

    # Recovery / end of input
    UNKNOWN = auto()
    END_OF_STREAM = auto()


@dataclass(frozen=True, slots=True)
class Token:
    """A token produced by the lexer.

    Attributes:
        kind: The token kind
        start_offset: Absolute start position in source
        length: Number of characters covered (0 for pseudo-closes and
            the end-of-stream marker)
        scanner_state: Lexer state after the token was produced
        error: Diagnostic attached to malformed input, if any

    """

    kind: TokenKind
    start_offset: int
    length: int
    scanner_state: ScannerState
    error: str | None = None

    @property
    def end_offset(self) -> int:
        """Absolute end position (exclusive)."""
        return self.start_offset + self.length

    def text(self, source: str) -> str:
        """Slice this token's text out of the source it was scanned from."""
        return source[self.start_offset : self.start_offset + self.length]

    def __repr__(self) -> str:
        """Compact repr for debugging."""
        err = f", error={self.error!r}" if self.error else ""
        return f"Token({self.kind.name}, {self.start_offset}+{self.length}{err})"
