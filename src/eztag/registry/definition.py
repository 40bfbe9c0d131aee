"""Custom tag definitions.

A custom tag expands into a skeleton of standard tags. The skeleton is a
tree of ExpansionNode; its pre-order flattening gives each node a slot
index, and the definition's delimiters are aligned to those slots. When the
expansion engine finds delimiter ``i`` in the captured content, the content
that follows belongs to the node in slot ``i``.

Example:
    >>> skeleton = ExpansionNode("outer", children=(ExpansionNode("inner"),))
    >>> definition = CustomTagDefinition("custom", skeleton, delimiters=("\\n\\n",))
    >>> [node.tag_name for node in definition.nodes]
    ['outer', 'inner']
    >>> definition.delimiter_slots
    (('\\n\\n', 1),)

Thread Safety:
Definitions are frozen and safe to share.

"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from eztag.errors import DefinitionError


@dataclass(frozen=True, slots=True)
class ExpansionNode:
    """One standard tag of a custom tag's skeleton.

    Attributes:
        tag_name: Tag to emit
        attributes: (name, value) pairs in declaration order; a None value
            is a valueless attribute
        children: Nested skeleton nodes
        void: Emit only the opening tag (no content, no closing tag)

    """

    tag_name: str
    attributes: tuple[tuple[str, str | None], ...] = ()
    children: tuple[ExpansionNode, ...] = ()
    void: bool = False

    def iter_preorder(self) -> Iterator[tuple[ExpansionNode, int]]:
        """Yield (node, parent_slot) pairs in pre-order; the root's parent is -1."""
        stack: list[tuple[ExpansionNode, int]] = [(self, -1)]
        slot = 0
        while stack:
            node, parent_slot = stack.pop()
            yield node, parent_slot
            for child in reversed(node.children):
                stack.append((child, slot))
            slot += 1

    def opening_tag(self, attributes: tuple[tuple[str, str | None], ...] | None = None) -> str:
        """Serialize the opening tag.

        Valueless attributes are written as a bare ``name=``.

        Args:
            attributes: Overrides this node's own attributes (used for the
                merged skeleton root)
        """
        attrs = self.attributes if attributes is None else attributes
        parts = [f"<{self.tag_name}"]
        for name, value in attrs:
            if value is None:
                parts.append(f" {name}=")
            else:
                parts.append(f' {name}="{value}"')
        parts.append(">")
        return "".join(parts)

    def closing_tag(self) -> str:
        return f"</{self.tag_name}>"


@dataclass(frozen=True, slots=True)
class CustomTagDefinition:
    """Definition of one custom tag.

    Attributes:
        name: Custom tag name (matched case-insensitively)
        skeleton: Root of the tag tree the custom tag expands into
        delimiters: Literal delimiter strings aligned with the pre-order
            slots of the skeleton. Either one per node, or one per
            non-root node (the root is then only entered at the start).
        void: The custom tag itself is written without a closing tag
        transform: Optional transform reference applied to the content
            before expansion (see eztag.registry.transforms)

    Raises:
        DefinitionError: If the name is empty, a delimiter is empty or
            repeated, or the delimiter count does not fit the skeleton.

    """

    name: str
    skeleton: ExpansionNode
    delimiters: tuple[str, ...] = ()
    void: bool = False
    transform: str | None = None

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise DefinitionError("tag name must not be empty")
        if not isinstance(self.delimiters, tuple):
            object.__setattr__(self, "delimiters", tuple(self.delimiters))

        align_delimiters(self.delimiters, len(self.nodes), self.name)

    @property
    def key(self) -> str:
        """Lookup key (lowercase name)."""
        return self.name.lower()

    @property
    def nodes(self) -> tuple[ExpansionNode, ...]:
        """Skeleton nodes in pre-order (slot order)."""
        return tuple(node for node, _ in self.skeleton.iter_preorder())

    @property
    def delimiter_slots(self) -> tuple[tuple[str, int], ...]:
        """(delimiter, slot index) pairs."""
        return align_delimiters(self.delimiters, len(self.nodes), self.name)


def align_delimiters(
    delimiters: tuple[str, ...] | list[str],
    slot_count: int,
    tag_name: str | None = None,
) -> tuple[tuple[str, int], ...]:
    """Pair each delimiter with the skeleton slot it opens.

    With one delimiter per slot, delimiter ``i`` addresses slot ``i``.
    With one fewer, the root slot has no delimiter and delimiter ``i``
    addresses slot ``i + 1``. No delimiters at all is always valid.

    Raises:
        DefinitionError: If a delimiter is empty or repeated, or the count
            does not fit the skeleton.
    """
    count = len(delimiters)
    if count > slot_count:
        msg = f"{count} delimiters for a skeleton of {slot_count} nodes"
        raise DefinitionError(msg, tag_name)
    if count and count < slot_count - 1:
        msg = f"{count} delimiters cannot be aligned with a skeleton of {slot_count} nodes"
        raise DefinitionError(msg, tag_name)
    if any(not d for d in delimiters):
        raise DefinitionError("delimiters must not be empty", tag_name)
    if len(set(delimiters)) != count:
        raise DefinitionError("each delimiter must address a distinct skeleton node", tag_name)

    shift = 1 if count < slot_count else 0
    return tuple((d, i + shift) for i, d in enumerate(delimiters))
