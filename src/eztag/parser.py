"""Tree-building parser.

Drives the Lexer token by token and reconstructs the tag hierarchy as a
TagTree. Single pass, synchronous, deterministic; malformed input never
raises. Recovery rules:

- A stray end tag with no matching open ancestor is dropped.
- An end tag matching an ancestor closes every node in between
  implicitly.
- A tag whose ``>`` is missing when the next tag begins is abandoned as
  insertion point (pseudo-close) without being marked closed.
- Nodes still open at end of input are reported closed only if void.

Thread Safety:
- Parser instances are single-use; create one per source snapshot.
- Configuration is read from ContextVar (thread-local).
- The registry is read-only.

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from eztag.config import get_parse_config
from eztag.lexer import Lexer
from eztag.nodes import Closure, TagNode, TagTree
from eztag.registry.registry import resolve_registry
from eztag.tokens import TokenKind
from eztag.utils.logger import get_logger

if TYPE_CHECKING:
    from eztag.registry.registry import TagRegistry

logger = get_logger(__name__)


class Parser:
    """Builds a TagTree from markup text.

    Usage:
            >>> tree = Parser("<div><p>Hi<br></div>").parse()
            >>> [(n.name, n.closure.name) for n in tree.walk()]
        [('div', 'END_TAG'), ('p', 'IMPLICIT'), ('br', 'VOID')]

    Configuration:
        Pseudo-close emission is read from the active ParseConfig. The
        registry defaults to the one in ParseConfig, then to the default
        registry (HTML void elements, no custom tags).

    """

    __slots__ = (
        "_source",
        "_registry",
        "_emit_pseudo_close_tags",
        "_tree",
        "_current",
        "_end_tag_start",
        "_end_tag_name",
        "_pending_attribute",
    )

    def __init__(self, source: str, registry: TagRegistry | None = None) -> None:
        """Initialize parser with source text.

        Args:
            source: Markup source text (a stable snapshot)
            registry: Supplies void and custom tag names
        """
        config = get_parse_config()
        self._source = source
        self._registry = resolve_registry(registry, config.registry)
        self._emit_pseudo_close_tags = config.emit_pseudo_close_tags

        self._tree = TagTree(len(source))
        self._current: TagNode = self._tree.root
        self._end_tag_start = -1
        self._end_tag_name: str | None = None
        self._pending_attribute: str | None = None

    def parse(self) -> TagTree:
        """Parse the entire source into a tree of tags.

        Returns:
            TagTree whose root is a synthetic, unnamed document node.
        """
        lexer = Lexer(self._source, emit_pseudo_close_tags=self._emit_pseudo_close_tags)
        source = self._source
        token = lexer.scan()
        while token.kind is not TokenKind.END_OF_STREAM:
            kind = token.kind
            if kind is TokenKind.START_TAG_OPEN:
                self._current = self._tree.add_child(self._current, token.start_offset)
            elif kind is TokenKind.START_TAG:
                self._current.name = token.text(source)
            elif kind is TokenKind.START_TAG_CLOSE:
                self._on_start_tag_close(token.end_offset, token.length)
            elif kind is TokenKind.START_TAG_SELF_CLOSE:
                self._on_start_tag_self_close(token.end_offset)
            elif kind is TokenKind.END_TAG_OPEN:
                self._end_tag_start = token.start_offset
                self._end_tag_name = None
            elif kind is TokenKind.END_TAG:
                self._end_tag_name = token.text(source).lower()
            elif kind is TokenKind.END_TAG_CLOSE:
                self._on_end_tag_close(token.end_offset)
            elif kind is TokenKind.ATTRIBUTE_NAME:
                self._on_attribute_name(token.text(source).lower())
            elif kind is TokenKind.ATTRIBUTE_VALUE:
                self._on_attribute_value(token.text(source))
            token = lexer.scan()

        self._close_dangling()
        tree = self._tree
        logger.debug(
            "Parsed %d chars into %d tags (%d unclosed)",
            len(source),
            len(tree),
            len(tree.unclosed_nodes()),
        )
        return tree

    # =========================================================================
    # Start tags
    # =========================================================================

    def _on_start_tag_close(self, end_offset: int, length: int) -> None:
        node = self._current
        if node.is_root:
            return
        parent = self._tree.parent_of(node)
        assert parent is not None

        if length == 0:
            # pseudo-close: abandon as insertion point, leave it open
            node.closure = Closure.PSEUDO
            node.end = end_offset
            self._current = parent
            return

        node.opening_tag.end = end_offset
        if node.name is None:
            return
        node.is_custom = self._registry.is_custom(node.name)
        if self._registry.is_void(node.name):
            node.is_void = True
            node.is_closed = True
            node.closure = Closure.VOID
            node.end = end_offset
            parent.has_void_children = True
            self._current = parent

    def _on_start_tag_self_close(self, end_offset: int) -> None:
        node = self._current
        if node.is_root:
            return
        parent = self._tree.parent_of(node)
        assert parent is not None

        node.opening_tag.end = end_offset
        node.is_custom = node.name is not None and self._registry.is_custom(node.name)
        node.is_void = True
        node.is_closed = True
        node.closure = Closure.SELF_CLOSED
        node.end = end_offset
        parent.has_void_children = True
        self._current = parent

    # =========================================================================
    # End tags
    # =========================================================================

    def _on_end_tag_close(self, end_offset: int) -> None:
        """Match the end tag against the current node and its ancestors."""
        match = self._current
        while not match.is_same_tag(self._end_tag_name) and match.parent is not None:
            match = self._tree[match.parent]

        if match.is_root:
            # stray end tag: no open ancestor has this name
            return

        node = self._current
        while node is not match:
            if not node.is_closed:
                node.is_closed = True
                node.closure = Closure.IMPLICIT
                node.end = self._end_tag_start
            node = self._tree[node.parent]

        match.is_closed = True
        match.closure = Closure.END_TAG
        match.closing_tag.start = self._end_tag_start
        match.closing_tag.end = end_offset
        match.end = end_offset
        self._current = self._tree[match.parent]

    # =========================================================================
    # Attributes
    # =========================================================================

    def _on_attribute_name(self, name: str) -> None:
        node = self._current
        self._pending_attribute = name
        if node.attributes is None:
            node.attributes = {}
        # placeholder for valueless attributes
        node.attributes[name] = None

    def _on_attribute_value(self, value: str) -> None:
        node = self._current
        if node.attributes is not None and self._pending_attribute:
            node.attributes[self._pending_attribute] = value
            self._pending_attribute = None

    # =========================================================================
    # End of input
    # =========================================================================

    def _close_dangling(self) -> None:
        """Report nodes still open at end of input as closed only if void."""
        node = self._current
        end = len(self._source)
        while not node.is_root:
            node.is_closed = node.is_void
            node.closure = Closure.END_OF_INPUT
            node.end = end
            node = self._tree[node.parent]
