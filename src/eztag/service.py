"""Editor boundary: expand the custom tag under a cursor.

Glue between a text buffer and the core pipeline. Parses a snapshot,
locates the innermost custom tag covering an offset, runs the tag's
transform (if any) over its trimmed inner text, expands the result with
the tag's definition and returns the replacement as a TextEdit. Applying
the edit to a live buffer is the caller's business; ``TextEdit.apply`` is
a pure helper for plain strings.

Transform failures never escape: an unavailable transform leaves the
inner text unmodified.

Example:
    >>> from eztag.registry import CustomTagDefinition, ExpansionNode, TagRegistryBuilder
    >>> registry = (
    ...     TagRegistryBuilder()
    ...     .register(CustomTagDefinition("note", ExpansionNode("aside")))
    ...     .build()
    ... )
    >>> source = "<note> hi </note>"
    >>> edit = expand_at(source, 8, registry=registry)
    >>> edit.apply(source)
    '<aside>\\nhi\\n</aside>'

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from eztag.config import get_parse_config
from eztag.expansion import expand_definition
from eztag.location import OffsetRange
from eztag.parser import Parser
from eztag.registry.registry import resolve_registry
from eztag.registry.transforms import apply_transform
from eztag.utils.logger import get_logger

if TYPE_CHECKING:
    from eztag.nodes import TagNode, TagTree
    from eztag.registry.registry import TagRegistry

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class TextEdit:
    """Replacement of ``source[range.start:range.end]`` by new_text."""

    range: OffsetRange
    new_text: str

    def apply(self, source: str) -> str:
        return source[: self.range.start] + self.new_text + source[self.range.end :]


def find_custom_tag(tree: TagTree, offset: int) -> TagNode | None:
    """Return the innermost custom tag whose extent contains offset."""
    return tree.find_custom_ancestor(tree.find_node_at(offset))


def expand_at(
    source: str,
    offset: int,
    *,
    registry: TagRegistry | None = None,
) -> TextEdit | None:
    """Expand the custom tag under offset.

    Args:
        source: Stable snapshot of the buffer text
        offset: Cursor offset into source
        registry: Custom tag registry; the configured one if None

    Returns:
        The edit replacing the custom tag with its expansion, or None when
        no expandable custom tag covers offset.
    """
    registry = resolve_registry(registry, get_parse_config().registry)
    tree = Parser(source, registry).parse()
    node = find_custom_tag(tree, offset)
    if node is None:
        return None
    return _expand_node(source, tree, node, registry)


def expand_all(source: str, *, registry: TagRegistry | None = None) -> str:
    """Expand every outermost custom tag in source.

    Custom tags nested inside another custom tag are part of its inner
    text and are not expanded separately. Edits are applied back to
    front so earlier offsets stay valid.
    """
    registry = resolve_registry(registry, get_parse_config().registry)
    tree = Parser(source, registry).parse()

    edits: list[TextEdit] = []
    for node in tree.custom_nodes():
        if any(ancestor.is_custom for ancestor in tree.ancestors(node)):
            continue
        edit = _expand_node(source, tree, node, registry)
        if edit is not None:
            edits.append(edit)

    result = source
    for edit in reversed(edits):
        result = edit.apply(result)
    logger.debug("Expanded %d custom tags", len(edits))
    return result


def _expand_node(
    source: str,
    tree: TagTree,
    node: TagNode,
    registry: TagRegistry,
) -> TextEdit | None:
    definition = registry.get(node.name)
    if definition is None:
        logger.warning("Unknown custom tag %r", node.name)
        return None

    replaced = _replacement_range(node)
    if replaced is None:
        return None

    text = tree.inner_text(source, node)
    if get_parse_config().trim_content:
        text = text.strip()

    transform = registry.transform_for(definition.name)
    if transform is not None:
        transformed = apply_transform(transform, text)
        if transformed is not None:
            text = transformed

    return TextEdit(replaced, expand_definition(definition, text, node.attributes))


def _replacement_range(node: TagNode) -> OffsetRange | None:
    """Opening tag through closing tag, or just the opening tag if there is none."""
    if node.opening_tag.end < 0:
        # abandoned before its '>'
        return None
    if node.closing_tag.is_closed:
        return OffsetRange(node.opening_tag.start, node.closing_tag.end)
    return OffsetRange(node.opening_tag.start, node.opening_tag.end)


__all__ = ["TextEdit", "expand_all", "expand_at", "find_custom_tag"]
