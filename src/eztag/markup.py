"""MarkupBuilder for line-oriented expansion output.

Collects the lines of an expanded custom tag (opening tags, content
slices, closing tags) in a list and joins them once at the end: O(n)
total vs O(n²) for repeated string concatenation.

Thread Safety:
MarkupBuilder instances are local to each expand() call.
No shared mutable state.

"""

from __future__ import annotations


class MarkupBuilder:
    """Line accumulator for expanded markup.

    Usage:
            >>> mb = MarkupBuilder()
            >>> mb.open_tag("<p>").content("  Hello  ").close_tag("</p>")
            >>> mb.build()
            '<p>\\nHello\\n</p>'

    Content slices are stripped of surrounding whitespace (unless ``trim``
    is False) and dropped when nothing is left.

    """

    __slots__ = ("_lines", "_line_break", "_trim")

    def __init__(self, line_break: str = "\n", *, trim: bool = True) -> None:
        self._lines: list[str] = []
        self._line_break = line_break
        self._trim = trim

    def open_tag(self, tag: str) -> MarkupBuilder:
        self._lines.append(tag)
        return self

    def close_tag(self, tag: str) -> MarkupBuilder:
        self._lines.append(tag)
        return self

    def content(self, text: str) -> MarkupBuilder:
        """Append a content slice as its own line.

        Args:
            text: Raw slice of the custom tag's inner text

        Returns:
            self for method chaining
        """
        if self._trim:
            text = text.strip()
        if text:
            self._lines.append(text)
        return self

    def build(self) -> str:
        """Join all lines with the configured line break."""
        return self._line_break.join(self._lines)

    def __len__(self) -> int:
        """Return number of lines (not total length)."""
        return len(self._lines)

    def __bool__(self) -> bool:
        return bool(self._lines)
