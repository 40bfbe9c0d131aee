"""Tests for eztag.serialization: tree to dict/JSON and back to markup."""

from __future__ import annotations

import json

from hypothesis import given, settings
from hypothesis import strategies as st

from eztag import parse
from eztag.nodes import TagNode, TagTree
from eztag.serialization import to_dict, to_json, to_markup


def _shape(tree: TagTree, node: TagNode) -> tuple:
    """Structural identity: name, attributes, void-ness and child order."""
    return (
        node.name,
        tuple((node.attributes or {}).items()),
        node.is_void,
        tuple(_shape(tree, child) for child in tree.children_of(node)),
    )


# =============================================================================
# Generated well-formed markup
# =============================================================================

_names = st.sampled_from(["div", "p", "span", "ul", "li", "x-box", "my:tag", "A"])
_void_names = st.sampled_from(["br", "img", "hr"])
_attr_names = st.sampled_from(["class", "id", "data-x", "hidden", "title"])
_attr_values = st.one_of(
    st.none(),
    st.text(alphabet="abc xyz-", max_size=8).map(lambda v: f'"{v}"'),
    st.text(alphabet="abc xyz-", max_size=8).map(lambda v: f"'{v}'"),
    st.text(alphabet="abcxyz", min_size=1, max_size=5),
)
_attrs = st.lists(st.tuples(_attr_names, _attr_values), max_size=3, unique_by=lambda a: a[0])
_text = st.text(alphabet="abc \n", max_size=6)


def _attr_markup(attrs: list[tuple[str, str | None]]) -> str:
    return "".join(f" {n}" if v is None else f" {n}={v}" for n, v in attrs)


_leaf = st.one_of(
    _text,
    st.builds(lambda n, a: f"<{n}{_attr_markup(a)}>", _void_names, _attrs),
    st.builds(lambda n, a: f"<{n}{_attr_markup(a)}/>", _names, _attrs),
)


def _element(children: st.SearchStrategy[list[str]]) -> st.SearchStrategy[str]:
    return st.builds(
        lambda n, a, kids: f"<{n}{_attr_markup(a)}>{''.join(kids)}</{n}>",
        _names,
        _attrs,
        children,
    )


well_formed = st.recursive(
    _leaf,
    lambda inner: st.one_of(_element(st.lists(inner, max_size=4)), inner),
    max_leaves=20,
)


class TestToMarkup:
    def test_structure_without_content(self) -> None:
        tree = parse('<ul class="x"><li>a</li><br/></ul>')
        assert to_markup(tree) == '<ul class="x"><li></li><br/></ul>'

    def test_void_and_valueless_attributes(self) -> None:
        tree = parse("<p hidden>x<img src=a.png>y</p>")
        assert to_markup(tree) == "<p hidden><img src=a.png></p>"

    def test_implicitly_closed_nodes_get_end_tags(self) -> None:
        assert to_markup(parse("<a><b></a>")) == "<a><b></b></a>"

    def test_unclosed_nodes_get_end_tags(self) -> None:
        assert to_markup(parse("<div><p>x")) == "<div><p></p></div>"

    @given(st.lists(well_formed, max_size=4).map("".join))
    @settings(max_examples=150)
    def test_structural_round_trip(self, source: str) -> None:
        """parse(to_markup(parse(text))) has the same structure as parse(text)."""
        tree = parse(source)
        again = parse(to_markup(tree))
        assert _shape(again, again.root) == _shape(tree, tree.root)

    @given(st.lists(well_formed, max_size=4).map("".join))
    @settings(max_examples=100)
    def test_markup_is_a_fixed_point(self, source: str) -> None:
        once = to_markup(parse(source))
        assert to_markup(parse(once)) == once


class TestToDict:
    def test_nested_structure(self) -> None:
        tree = parse("<a x=1><br></a>")
        data = to_dict(tree)

        assert data["name"] is None
        (a,) = data["children"]
        assert a["name"] == "a"
        assert a["attributes"] == {"x": "1"}
        assert a["opening_tag"] == [0, 7]
        assert a["closing_tag"] == [11, 15]
        assert a["closure"] == "END_TAG"
        (br,) = a["children"]
        assert br["is_void"] is True
        assert br["closure"] == "VOID"
        assert br["children"] == []

    def test_subtree(self) -> None:
        tree = parse("<a><b></b></a>")
        b = next(node for node in tree.walk() if node.name == "b")
        assert to_dict(tree, b)["name"] == "b"

    def test_json_is_deterministic(self) -> None:
        tree = parse("<a><b c='d'></b></a>")
        text = to_json(tree)
        assert text == to_json(tree)
        assert json.loads(text) == to_dict(tree)
        assert "\n" in to_json(tree, indent=2)
