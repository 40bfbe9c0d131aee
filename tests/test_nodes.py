"""Tests for the arena tag tree and offset ranges."""

from __future__ import annotations

from eztag import parse
from eztag.location import OffsetRange
from eztag.nodes import TagTree, same_tag_name, unquote


class TestOffsetRange:
    def test_unknown_by_default(self) -> None:
        r = OffsetRange()
        assert not r.is_known
        assert not r.is_closed
        assert len(r) == 0
        assert r.slice("abc") == ""
        assert str(r) == "[?, ?)"

    def test_closed(self) -> None:
        r = OffsetRange(3, 8)
        assert r.is_closed
        assert len(r) == 5
        assert r.contains(3) and not r.contains(8)
        assert r.slice("abc<div>xyz") == "<div>"
        assert str(r) == "[3, 8)"


class TestHelpers:
    def test_same_tag_name(self) -> None:
        assert same_tag_name("Div", "dIV")
        assert not same_tag_name("div", "di")
        assert not same_tag_name("div", None)
        assert same_tag_name(None, None)

    def test_unquote(self) -> None:
        assert unquote('"a b"') == "a b"
        assert unquote("'x'") == "x"
        assert unquote("bare") == "bare"
        assert unquote("\"mixed'") == "\"mixed'"
        assert unquote('"') == '"'
        assert unquote(None) is None


class TestTagTree:
    def test_empty_tree(self) -> None:
        tree = TagTree(10)
        assert len(tree) == 0
        assert tree.root.end == 10
        assert list(tree.walk()) == []

    def test_navigation(self) -> None:
        tree = parse("<a><b><c></c></b><d></d></a>")
        a, b, c, d = tree.walk()

        assert tree.parent_of(tree.root) is None
        assert tree.parent_of(c) is b
        assert tree.children_of(a) == [b, d]
        assert list(tree.ancestors(c)) == [b, a, tree.root]
        assert tree[c.index] is c
        assert list(tree)[0] is tree.root
        assert tree.nodes[1:] == [a, b, c, d]

    def test_find_node_at(self) -> None:
        source = "<a><b>x</b> y</a> z"
        tree = parse(source)
        a, b = tree.walk()

        assert tree.find_node_at(source.index("x")) is b
        assert tree.find_node_at(source.index("y")) is a
        assert tree.find_node_at(source.index("z")) is tree.root

    def test_find_node_at_unclosed(self) -> None:
        source = "<a>text"
        tree = parse(source)
        assert tree.find_node_at(5).name == "a"

    def test_find_custom_ancestor(self, registry) -> None:  # type: ignore[no-untyped-def]
        tree = parse("<note><b><i></i></b></note>", registry=registry)
        note, b, i = tree.walk()
        assert tree.find_custom_ancestor(i) is note
        assert tree.find_custom_ancestor(note) is note
        assert tree.find_custom_ancestor(tree.root) is None

    def test_inner_and_outer_ranges(self) -> None:
        source = "<a> x </a><br>"
        tree = parse(source)
        a, br = tree.walk()

        assert tree.inner_range(a) == OffsetRange(3, 6)
        assert tree.inner_text(source, a) == " x "
        assert tree.outer_range(a) == OffsetRange(0, 10)
        assert tree.inner_range(br) is None
        assert tree.inner_text(source, br) == ""
        assert tree.outer_range(br) == OffsetRange(10, 14)

    def test_inner_range_of_unclosed_node(self) -> None:
        tree = parse("<a>text")
        (a,) = tree.walk()
        assert tree.inner_range(a) is None

    def test_repr(self) -> None:
        tree = parse("<a></a>")
        assert repr(tree.nodes[1]).startswith("TagNode('a', [0, 3)..[3, 7)")
        assert "#root" in repr(tree.root)
