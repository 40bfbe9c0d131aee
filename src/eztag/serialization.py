"""Tag tree serialization.

Converts a TagTree to JSON-compatible dicts for inspection and caching,
and back to markup for the structural round-trip: parsing the markup
written by ``to_markup`` yields a tree with the same names, attributes,
void-ness and child order.

All output is deterministic (sorted keys, document order).

Example:
    >>> from eztag import parse
    >>> tree = parse('<ul class="x"><li>a</li><br/></ul>')
    >>> to_markup(tree)
    '<ul class="x"><li></li><br/></ul>'

Thread Safety:
    All functions are pure and safe to call from any thread.

"""

from __future__ import annotations

import json
from typing import Any

from eztag.location import OffsetRange
from eztag.nodes import Closure, TagNode, TagTree


def to_dict(tree: TagTree, node: TagNode | None = None) -> dict[str, Any]:
    """Convert a tree (or the subtree under node) to a JSON-compatible dict.

    Args:
        tree: Tree that owns the nodes
        node: Subtree root; the synthetic document root if None

    Returns:
        Nested dict; the document root has ``name`` None.
    """
    node = node if node is not None else tree.root
    return {
        "name": node.name,
        "attributes": dict(node.attributes) if node.attributes else {},
        "opening_tag": _range(node.opening_tag),
        "closing_tag": _range(node.closing_tag),
        "end": node.end,
        "is_void": node.is_void,
        "is_closed": node.is_closed,
        "is_custom": node.is_custom,
        "closure": node.closure.name,
        "children": [to_dict(tree, child) for child in tree.children_of(node)],
    }


def _range(offsets: OffsetRange) -> list[int]:
    return [offsets.start, offsets.end]


def to_json(tree: TagTree, *, indent: int | None = None) -> str:
    """Serialize a tree to a JSON string.

    Args:
        tree: Tree to serialize.
        indent: JSON indentation level (None for compact).

    """
    return json.dumps(to_dict(tree), sort_keys=True, indent=indent)


def to_markup(tree: TagTree) -> str:
    """Write the tree's tag structure back as markup, without content.

    Attribute values are written as captured (quotes kept). Self-closed
    nodes are written ``<name/>``, registered void nodes ``<name>``, and
    every other node gets an explicit end tag. Nodes whose name was never
    scanned contribute only their children.
    """
    parts: list[str] = []
    for child in tree.children_of(tree.root):
        _write_node(tree, child, parts)
    return "".join(parts)


def _write_node(tree: TagTree, node: TagNode, parts: list[str]) -> None:
    if node.name is None:
        for child in tree.children_of(node):
            _write_node(tree, child, parts)
        return

    parts.append(f"<{node.name}")
    for name, value in (node.attributes or {}).items():
        parts.append(f" {name}" if value is None else f" {name}={value}")

    if node.closure is Closure.SELF_CLOSED:
        parts.append("/>")
        return
    parts.append(">")
    if node.is_void:
        return

    for child in tree.children_of(node):
        _write_node(tree, child, parts)
    parts.append(f"</{node.name}>")


__all__ = ["to_dict", "to_json", "to_markup"]
