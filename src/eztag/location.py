"""Offset ranges over source text.

Provides OffsetRange for tracking where a tag's opening or closing form sits
in the source buffer. Ranges hold indices only, never a copy of the text.

"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class OffsetRange:
    """Half-open ``[start, end)`` character range in a source buffer.

    A negative ``start`` or ``end`` means that bound is not known yet
    (for example, the end of an opening tag whose ``>`` was never found).
    Ranges are mutated by the parser while the tag is being scanned.

    Examples:
            >>> r = OffsetRange(3)
            >>> r.is_closed
            False
            >>> r.end = 8
            >>> r.slice("abc<div>xyz")
            '<div>'

    """

    start: int = -1
    end: int = -1

    @property
    def is_known(self) -> bool:
        """True if the start offset has been recorded."""
        return self.start >= 0

    @property
    def is_closed(self) -> bool:
        """True if both bounds are recorded."""
        return self.start >= 0 and self.end >= 0

    def __len__(self) -> int:
        if not self.is_closed:
            return 0
        return self.end - self.start

    def contains(self, offset: int) -> bool:
        """Check whether offset lies within the closed range."""
        return self.is_closed and self.start <= offset < self.end

    def slice(self, source: str) -> str:
        """Return the text covered by this range (empty if not closed)."""
        if not self.is_closed:
            return ""
        return source[self.start : self.end]

    def __str__(self) -> str:
        start = str(self.start) if self.start >= 0 else "?"
        end = str(self.end) if self.end >= 0 else "?"
        return f"[{start}, {end})"
