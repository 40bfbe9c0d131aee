"""Expansion engine for custom tags.

Turns the inner text of a custom tag into markup shaped by the tag's
skeleton. The skeleton is flattened pre-order into slots; each delimiter
addresses one slot. Scanning the inner text for delimiters splits it into
slices, and each slice is emitted into the slot that was open before the
delimiter that ends it.

Moving from the open slot to the addressed one closes slots down to their
common ancestor and opens the rest of the addressed slot's path, so the
skeleton may be any tree, not just a chain. A delimiter that addresses
the slot already open keeps the level flat: later slices are appended in
order.

Example:
    >>> from eztag.registry import ExpansionNode
    >>> skeleton = ExpansionNode("outer", children=(ExpansionNode("inner"),))
    >>> print(expand("Outer content\\n\\nInner content", skeleton, ("\\n\\n",)))
    <outer>
    Outer content
    <inner>
    Inner content
    </inner>
    </outer>

Thread Safety:
Expander instances are immutable after construction and safe to share.
Output settings are read from the active ParseConfig on every call.

"""

from __future__ import annotations

import re
from collections.abc import Mapping
from functools import lru_cache

from eztag.config import get_parse_config
from eztag.markup import MarkupBuilder
from eztag.nodes import unquote
from eztag.registry.definition import CustomTagDefinition, ExpansionNode, align_delimiters

Attributes = tuple[tuple[str, str | None], ...]


def merge_attributes(
    skeleton_attributes: Attributes,
    instance_attributes: Mapping[str, str | None] | None,
    multi_valued: frozenset[str],
) -> Attributes:
    """Merge a custom tag instance's attributes into the skeleton root's.

    Names match case-insensitively; the skeleton's spelling is kept.
    Multi-valued attributes are unioned: the skeleton's tokens first, then
    the instance's tokens that are not already present. A blank or missing
    instance value leaves a skeleton token list alone. Any other instance
    attribute overwrites the skeleton's value. Names new to the skeleton
    are appended in instance order.

    Args:
        skeleton_attributes: Attributes declared on the skeleton root
        instance_attributes: Raw attributes captured by the parser (values
            may still carry their quotes)
        multi_valued: Lowercase names of list-valued attributes

    Returns:
        Merged (name, value) pairs
    """
    # lowercase name -> (spelling, value)
    merged: dict[str, tuple[str, str | None]] = {
        name.lower(): (name, value) for name, value in skeleton_attributes
    }
    if not instance_attributes:
        return tuple(merged.values())

    for name, raw in instance_attributes.items():
        key = name.lower()
        value = unquote(raw)
        spelling, current = merged.get(key, (name, None))
        if key in multi_valued and current:
            if value is None or not value.strip():
                continue
            tokens = current.split()
            tokens.extend(t for t in value.split() if t not in tokens)
            value = " ".join(tokens)
        merged[key] = (spelling, value)
    return tuple(merged.values())


class Expander:
    """Compiled expansion of one skeleton and its delimiters.

    The delimiter alternation is compiled once, longest delimiter first so
    that a delimiter is never shadowed by one of its prefixes.

    Usage:
        >>> skeleton = ExpansionNode("p")
        >>> Expander(skeleton).expand("  hi  ")
        '<p>\\nhi\\n</p>'

    Raises:
        DefinitionError: If the delimiters cannot be aligned with the
            skeleton's slots.

    """

    __slots__ = ("_nodes", "_paths", "_pattern", "_multi_valued")

    def __init__(
        self,
        skeleton: ExpansionNode,
        delimiters: tuple[str, ...] | list[str] = (),
        *,
        multi_valued_attributes: frozenset[str] | None = None,
    ) -> None:
        nodes: list[ExpansionNode] = []
        paths: list[tuple[int, ...]] = []
        for node, parent_slot in skeleton.iter_preorder():
            parent_path = paths[parent_slot] if parent_slot >= 0 else ()
            paths.append((*parent_path, len(nodes)))
            nodes.append(node)
        self._nodes = tuple(nodes)
        self._paths = tuple(paths)

        slots = align_delimiters(tuple(delimiters), len(nodes))
        self._pattern = _compile_delimiters(slots)
        self._multi_valued = multi_valued_attributes

    @property
    def nodes(self) -> tuple[ExpansionNode, ...]:
        return self._nodes

    def expand(self, inner_text: str, attributes: Mapping[str, str | None] | None = None) -> str:
        """Expand inner text into markup.

        Args:
            inner_text: Content captured between the custom tag's opening
                and closing tags (already transformed, if applicable)
            attributes: The custom tag instance's own attributes, merged
                into the skeleton root

        Returns:
            One line per opening tag, content slice and closing tag, joined
            by the configured line break.
        """
        config = get_parse_config()
        multi_valued = (
            self._multi_valued
            if self._multi_valued is not None
            else config.multi_valued_attributes
        )
        root_attributes = merge_attributes(self._nodes[0].attributes, attributes, multi_valued)
        out = MarkupBuilder(config.line_break, trim=config.trim_content)

        open_slots: list[int] = []
        self._move_to(out, open_slots, 0, root_attributes)

        pos = 0
        if self._pattern is not None:
            for match in self._pattern.finditer(inner_text):
                out.content(inner_text[pos : match.start()])
                slot = int(match.lastgroup[1:])  # type: ignore[index]
                self._move_to(out, open_slots, slot, root_attributes)
                pos = match.end()
        out.content(inner_text[pos:])

        while open_slots:
            self._close(out, open_slots.pop())
        return out.build()

    def _move_to(
        self,
        out: MarkupBuilder,
        open_slots: list[int],
        slot: int,
        root_attributes: Attributes,
    ) -> None:
        """Close open slots down to the common ancestor, then open slot's path."""
        target = self._paths[slot]
        common = 0
        limit = min(len(open_slots), len(target))
        while common < limit and open_slots[common] == target[common]:
            common += 1

        while len(open_slots) > common:
            self._close(out, open_slots.pop())
        for opened in target[common:]:
            node = self._nodes[opened]
            out.open_tag(node.opening_tag(root_attributes if opened == 0 else None))
            open_slots.append(opened)

    def _close(self, out: MarkupBuilder, slot: int) -> None:
        node = self._nodes[slot]
        if not node.void:
            out.close_tag(node.closing_tag())


def _compile_delimiters(slots: tuple[tuple[str, int], ...]) -> re.Pattern[str] | None:
    if not slots:
        return None
    ordered = sorted(slots, key=lambda pair: len(pair[0]), reverse=True)
    alternation = "|".join(f"(?P<d{slot}>{re.escape(delim)})" for delim, slot in ordered)
    return re.compile(alternation)


@lru_cache(maxsize=256)
def compile_definition(definition: CustomTagDefinition) -> Expander:
    """Get the (cached) Expander for a custom tag definition."""
    return Expander(definition.skeleton, definition.delimiters)


def expand(
    inner_text: str,
    skeleton: ExpansionNode,
    delimiters: tuple[str, ...] | list[str] = (),
    attributes: Mapping[str, str | None] | None = None,
) -> str:
    """Expand inner text with a skeleton and its delimiters.

    Convenience wrapper; compile an Expander to reuse the delimiter pattern.
    """
    return Expander(skeleton, delimiters).expand(inner_text, attributes)


def expand_definition(
    definition: CustomTagDefinition,
    inner_text: str,
    attributes: Mapping[str, str | None] | None = None,
) -> str:
    """Expand inner text with a registered custom tag definition."""
    return compile_definition(definition).expand(inner_text, attributes)


__all__ = [
    "Expander",
    "compile_definition",
    "expand",
    "expand_definition",
    "merge_attributes",
]
