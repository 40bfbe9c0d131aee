"""Tests for custom tag definitions and the tag registry."""

from __future__ import annotations

import pytest

from eztag.errors import DefinitionError, RegistryError
from eztag.lexer.modes import HTML_VOID_ELEMENTS
from eztag.registry import (
    CustomTagDefinition,
    ExpansionNode,
    TagRegistryBuilder,
    create_default_registry,
    create_registry_with_defaults,
    resolve_registry,
)
from eztag.registry.definition import align_delimiters


class TestExpansionNode:
    def test_preorder_with_parent_slots(self) -> None:
        skeleton = ExpansionNode(
            "a",
            children=(ExpansionNode("b", children=(ExpansionNode("c"),)), ExpansionNode("d")),
        )
        assert [(n.tag_name, parent) for n, parent in skeleton.iter_preorder()] == [
            ("a", -1),
            ("b", 0),
            ("c", 1),
            ("d", 0),
        ]

    def test_opening_and_closing_tag(self) -> None:
        node = ExpansionNode("a", attributes=(("href", "/x"), ("download", None)))
        assert node.opening_tag() == '<a href="/x" download=>'
        assert node.opening_tag((("id", "y"),)) == '<a id="y">'
        assert node.closing_tag() == "</a>"


class TestCustomTagDefinition:
    def test_nodes_and_slots(self) -> None:
        skeleton = ExpansionNode("outer", children=(ExpansionNode("inner"),))
        definition = CustomTagDefinition("Custom", skeleton, ["\n\n"])  # type: ignore[arg-type]

        assert definition.delimiters == ("\n\n",)
        assert definition.key == "custom"
        assert [n.tag_name for n in definition.nodes] == ["outer", "inner"]
        assert definition.delimiter_slots == (("\n\n", 1),)

    @pytest.mark.parametrize("name", ["", "   "])
    def test_empty_name(self, name: str) -> None:
        with pytest.raises(DefinitionError):
            CustomTagDefinition(name, ExpansionNode("p"))

    def test_delimiter_count_mismatch_names_the_tag(self) -> None:
        with pytest.raises(DefinitionError, match="Custom tag 'bad'"):
            CustomTagDefinition("bad", ExpansionNode("p"), ("a", "b"))

    def test_definition_error_is_registry_error(self) -> None:
        with pytest.raises(RegistryError):
            CustomTagDefinition("bad", ExpansionNode("p"), ("",))


class TestAlignDelimiters:
    def test_one_per_slot(self) -> None:
        assert align_delimiters(("a", "b"), 2) == (("a", 0), ("b", 1))

    def test_root_slot_omitted(self) -> None:
        assert align_delimiters(("a", "b"), 3) == (("a", 1), ("b", 2))

    def test_none(self) -> None:
        assert align_delimiters((), 5) == ()

    def test_single_node_single_delimiter(self) -> None:
        assert align_delimiters(("a",), 1) == (("a", 0),)


class TestTagRegistry:
    def test_lookup_is_case_insensitive(self, registry) -> None:  # type: ignore[no-untyped-def]
        assert registry.get("NOTE") is registry.get("note")
        assert registry.get("note").skeleton.tag_name == "aside"
        assert registry.get("missing") is None
        assert registry.get(None) is None
        assert "Custom" in registry
        assert 42 not in registry
        assert registry.has("callout")
        assert registry.is_custom("icon")

    def test_names_and_definitions(self, registry) -> None:  # type: ignore[no-untyped-def]
        assert len(registry) == 4
        assert registry.names == frozenset({"note", "custom", "callout", "icon"})
        assert [d.name for d in registry.definitions] == ["note", "custom", "callout", "icon"]

    def test_void_names(self, registry) -> None:  # type: ignore[no-untyped-def]
        assert registry.is_void("BR")
        assert registry.is_void("icon")
        assert not registry.is_void("note")
        assert not registry.is_void(None)
        assert registry.void_names == HTML_VOID_ELEMENTS | {"icon"}

    def test_duplicate_registration(self) -> None:
        builder = TagRegistryBuilder().register(CustomTagDefinition("note", ExpansionNode("p")))
        with pytest.raises(RegistryError, match="already registered"):
            builder.register(CustomTagDefinition("NOTE", ExpansionNode("div")))

    def test_register_all(self) -> None:
        builder = TagRegistryBuilder().register_all(
            CustomTagDefinition(name, ExpansionNode("p")) for name in ("a1", "a2")
        )
        assert len(builder) == 2
        assert builder.build().names == frozenset({"a1", "a2"})

    def test_builder_is_not_shared_with_registry(self) -> None:
        builder = TagRegistryBuilder()
        registry = builder.build()
        builder.register(CustomTagDefinition("late", ExpansionNode("p")))
        assert "late" not in registry

    def test_custom_void_names(self) -> None:
        registry = TagRegistryBuilder(void_names=["Slot"]).build()
        assert registry.is_void("slot")
        assert not registry.is_void("br")


class TestTransformsOnRegistry:
    def test_registered_transform(self) -> None:
        registry = (
            TagRegistryBuilder()
            .register_transform("shout", str.upper)
            .register(CustomTagDefinition("loud", ExpansionNode("p"), transform="shout"))
            .build()
        )
        assert registry.transforms["shout"] is str.upper
        assert registry.transform_for("LOUD") is str.upper

    def test_no_transform(self, registry) -> None:  # type: ignore[no-untyped-def]
        assert registry.transform_for("note") is None
        assert registry.transform_for("missing") is None

    def test_unresolvable_transform_is_unavailable(self) -> None:
        registry = (
            TagRegistryBuilder()
            .register(CustomTagDefinition("t", ExpansionNode("p"), transform="lambda s: s"))
            .build()
        )
        assert registry.transform_for("t") is None

    def test_non_callable_transform(self) -> None:
        with pytest.raises(RegistryError, match="not callable"):
            TagRegistryBuilder().register_transform("x", "upper")  # type: ignore[arg-type]

    def test_base_dir(self, tmp_path) -> None:  # type: ignore[no-untyped-def]
        registry = TagRegistryBuilder().with_base_dir(str(tmp_path)).build()
        assert registry.base_dir == tmp_path


class TestDefaultRegistry:
    def test_cached(self) -> None:
        assert create_default_registry() is create_default_registry()

    def test_contents(self) -> None:
        registry = create_default_registry()
        assert len(registry) == 0
        assert registry.void_names == HTML_VOID_ELEMENTS

    def test_with_defaults_builder(self) -> None:
        builder = create_registry_with_defaults()
        builder.register(CustomTagDefinition("note", ExpansionNode("aside")))
        registry = builder.build()
        assert "note" in registry
        assert registry.is_void("img")

    def test_resolve_registry(self, registry) -> None:  # type: ignore[no-untyped-def]
        empty = TagRegistryBuilder().build()
        assert resolve_registry(empty, registry) is empty
        assert resolve_registry(None, registry) is registry
        assert resolve_registry(None) is create_default_registry()
