"""Tag tree nodes for eztag.

The tree is an arena: TagTree owns every TagNode in a flat, insertion
ordered list, and nodes refer to their parent and children by index. This
keeps O(1) ascent during end-tag matching without parent/child reference
cycles, and gives a linear traversal order (document order of opening
tags) for free.

Tree Structure:
TagTree
└── nodes[0]   synthetic root (no name, represents the document)
    ├── nodes[1]   <html>
    │   └── ...
    └── ...

Lifecycle:
A TagTree is built fresh for one parse of one source snapshot and is
discarded afterwards. Nodes are mutated only by the Parser that creates
them.

"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum, auto

from eztag.location import OffsetRange


class Closure(Enum):
    """How a node's extent ended. Exactly one applies per node."""

    OPEN = auto()  # root, or still being built
    SELF_CLOSED = auto()  # <tag/>
    VOID = auto()  # registered void tag, closed at its opening >
    END_TAG = auto()  # matched by its own end tag
    IMPLICIT = auto()  # closed because an ancestor's end tag matched
    PSEUDO = auto()  # abandoned when a new tag began before its >
    END_OF_INPUT = auto()  # still open when the input ran out


def same_tag_name(a: str | None, b: str | None) -> bool:
    """Compare tag names: length first, then ASCII-lowercase equality."""
    if a is None:
        return b is None
    return b is not None and len(a) == len(b) and a.lower() == b.lower()


@dataclass(slots=True)
class TagNode:
    """One tag in the tree.

    Attributes:
        index: Position of this node in the owning tree's arena
        name: Tag name as written (None until the name token is scanned)
        opening_tag: Range of ``<name ...>``
        closing_tag: Range of ``</name>`` (unknown unless matched)
        parent: Arena index of the parent (None for the root)
        children: Arena indices of children, in document order
        attributes: Attribute name -> raw value as written (quotes kept);
            None value means a valueless attribute. None until the first
            attribute is seen.
        is_void: Tag has no content (self-closed or registered void)
        is_closed: Tag's extent is known to have ended
        is_custom: Tag name is a registered custom tag
        has_void_children: At least one child was void or self-closed
        closure: Which event ended the node
        end: Offset where the node's whole extent ends (-1 if unknown)

    """

    index: int
    name: str | None = None
    opening_tag: OffsetRange = field(default_factory=OffsetRange)
    closing_tag: OffsetRange = field(default_factory=OffsetRange)
    parent: int | None = None
    children: list[int] = field(default_factory=list)
    attributes: dict[str, str | None] | None = None
    is_void: bool = False
    is_closed: bool = False
    is_custom: bool = False
    has_void_children: bool = False
    closure: Closure = Closure.OPEN
    end: int = -1

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def start(self) -> int:
        return self.opening_tag.start

    def is_same_tag(self, other_name: str | None) -> bool:
        """Check whether other_name names this tag (case-insensitive)."""
        return same_tag_name(self.name, other_name)

    def get_attribute(self, name: str) -> str | None:
        """Return an attribute's value with surrounding quotes removed."""
        if not self.attributes:
            return None
        return unquote(self.attributes.get(name.lower()))

    def contains(self, offset: int) -> bool:
        """Check whether offset lies within this node's extent."""
        if self.is_root:
            return True
        end = self.end
        if end < 0:
            end = self.closing_tag.end if self.closing_tag.end >= 0 else self.opening_tag.end
        return self.opening_tag.start <= offset < end

    def __repr__(self) -> str:
        name = self.name if self.name is not None else "#root" if self.is_root else "?"
        return (
            f"TagNode({name!r}, {self.opening_tag}..{self.closing_tag}, "
            f"children={len(self.children)}, {self.closure.name})"
        )


def unquote(value: str | None) -> str | None:
    """Strip one pair of matching quotes from a raw attribute value."""
    if value is None or len(value) < 2:
        return value
    if value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


class TagTree:
    """Arena that owns all nodes of one parse.

    Usage:
            >>> from eztag import parse
            >>> tree = parse("<ul><li>a</li><li>b</li></ul>")
            >>> [n.name for n in tree.walk()]
        ['ul', 'li', 'li']
            >>> [n.name for n in tree.children_of(tree.nodes[1])]
        ['li', 'li']

    """

    __slots__ = ("_nodes", "source_length")

    def __init__(self, source_length: int = 0) -> None:
        root = TagNode(index=0, opening_tag=OffsetRange(0, 0), end=source_length)
        self._nodes: list[TagNode] = [root]
        self.source_length = source_length

    # =========================================================================
    # Construction
    # =========================================================================

    def add_child(self, parent: TagNode, opening_start: int) -> TagNode:
        """Create a node opened at opening_start as parent's last child."""
        node = TagNode(
            index=len(self._nodes),
            opening_tag=OffsetRange(opening_start),
            parent=parent.index,
        )
        self._nodes.append(node)
        parent.children.append(node.index)
        return node

    # =========================================================================
    # Navigation
    # =========================================================================

    @property
    def root(self) -> TagNode:
        return self._nodes[0]

    @property
    def nodes(self) -> list[TagNode]:
        """All nodes, root first, in document order of their opening tags."""
        return self._nodes

    def __len__(self) -> int:
        """Number of tag nodes, excluding the synthetic root."""
        return len(self._nodes) - 1

    def __getitem__(self, index: int) -> TagNode:
        return self._nodes[index]

    def __iter__(self) -> Iterator[TagNode]:
        return iter(self._nodes)

    def parent_of(self, node: TagNode) -> TagNode | None:
        if node.parent is None:
            return None
        return self._nodes[node.parent]

    def children_of(self, node: TagNode) -> list[TagNode]:
        return [self._nodes[i] for i in node.children]

    def ancestors(self, node: TagNode) -> Iterator[TagNode]:
        """Yield parent, grandparent, ... up to and including the root."""
        current = node.parent
        while current is not None:
            ancestor = self._nodes[current]
            yield ancestor
            current = ancestor.parent

    def walk(self) -> Iterator[TagNode]:
        """Yield every tag node (root excluded) in document order."""
        return iter(self._nodes[1:])

    def custom_nodes(self) -> list[TagNode]:
        return [node for node in self._nodes if node.is_custom]

    def unclosed_nodes(self) -> list[TagNode]:
        """Nodes left open by malformed input (root excluded)."""
        return [node for node in self._nodes[1:] if not node.is_closed]

    def find_node_at(self, offset: int) -> TagNode:
        """Return the innermost node whose extent contains offset.

        Falls back to the root when offset is outside every tag.
        """
        node = self.root
        while True:
            for child_index in reversed(node.children):
                child = self._nodes[child_index]
                if child.contains(offset):
                    node = child
                    break
            else:
                return node

    def find_custom_ancestor(self, node: TagNode) -> TagNode | None:
        """Return node itself or its nearest ancestor that is a custom tag."""
        if node.is_custom:
            return node
        for ancestor in self.ancestors(node):
            if ancestor.is_custom:
                return ancestor
        return None

    # =========================================================================
    # Source extraction
    # =========================================================================

    def inner_range(self, node: TagNode) -> OffsetRange | None:
        """Range between the end of the opening tag and the closing tag.

        Returns:
            The content range, or None for void nodes and nodes whose
            opening or closing tag is incomplete.
        """
        if node.is_void or node.opening_tag.end < 0 or node.closing_tag.start < 0:
            return None
        return OffsetRange(node.opening_tag.end, node.closing_tag.start)

    def inner_text(self, source: str, node: TagNode) -> str:
        inner = self.inner_range(node)
        return inner.slice(source) if inner is not None else ""

    def outer_range(self, node: TagNode) -> OffsetRange:
        """Range from the opening tag's start to the end of the node's extent."""
        end = node.end
        if node.closing_tag.end >= 0:
            end = node.closing_tag.end
        elif end < 0:
            end = node.opening_tag.end
        return OffsetRange(node.opening_tag.start, end)
