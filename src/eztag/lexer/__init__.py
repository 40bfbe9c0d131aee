"""State-machine lexer for markup text.

The lexer turns raw text into a typed token stream while tracking a
scanning state machine. It has no knowledge of tree structure.

Architecture:
lexer/
├── __init__.py          # Re-exports Lexer, ScannerState, RawTextKind
├── core.py              # Lexer class (mixin composition + cursor helpers)
├── modes.py             # ScannerState enum, tag/attribute constants
└── scanners/            # State-specific scanners
    ├── content.py       # Content, comments, doctype
    ├── tag.py           # Start/end tags and attributes
    └── raw_text.py      # <script> and <style> content

Usage:
    >>> from eztag.lexer import Lexer
    >>> lexer = Lexer("<br/>")
    >>> for token in lexer.tokenize():
    ...     print(token)
Token(START_TAG_OPEN, 0+1)
Token(START_TAG, 1+2)
Token(START_TAG_SELF_CLOSE, 3+2)
Token(END_OF_STREAM, 5+0)

"""

from eztag.lexer.core import Lexer
from eztag.lexer.modes import RawTextKind, ScannerState

__all__ = ["Lexer", "RawTextKind", "ScannerState"]
