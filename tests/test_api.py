"""Tests for the top-level API, error types and logging."""

from __future__ import annotations

import logging

import pytest

import eztag
from eztag import (
    CustomTagDefinition,
    DefinitionError,
    ExpansionNode,
    EzTagError,
    RegistryError,
    TokenKind,
    TransformError,
    create_registry_with_defaults,
    expand_all,
    parse,
    tokenize,
)
from eztag.utils import get_logger


class TestPublicApi:
    def test_all_exports_exist(self) -> None:
        for name in eztag.__all__:
            assert hasattr(eztag, name), name

    def test_parse(self) -> None:
        tree = parse("<div><p>Hello<br></div>")
        assert [node.name for node in tree.walk()] == ["div", "p", "br"]

    def test_tokenize(self) -> None:
        tokens = tokenize("<p>")
        assert [t.kind for t in tokens] == [
            TokenKind.START_TAG_OPEN,
            TokenKind.START_TAG,
            TokenKind.START_TAG_CLOSE,
            TokenKind.END_OF_STREAM,
        ]

    def test_end_to_end(self) -> None:
        builder = create_registry_with_defaults()
        skeleton = ExpansionNode("outer", children=(ExpansionNode("inner"),))
        builder.register(CustomTagDefinition("custom", skeleton, ("\n\n",)))
        registry = builder.build()

        result = expand_all("<custom>Outer\n\nInner</custom><br>", registry=registry)
        assert result == "<outer>\nOuter\n<inner>\nInner\n</inner>\n</outer><br>"


class TestErrors:
    def test_hierarchy(self) -> None:
        assert issubclass(RegistryError, EzTagError)
        assert issubclass(DefinitionError, RegistryError)
        assert issubclass(TransformError, EzTagError)
        assert not issubclass(TransformError, RegistryError)

    def test_registry_error_message(self) -> None:
        err = RegistryError("bad entry", "note")
        assert str(err) == "Custom tag 'note': bad entry"
        assert err.message == "bad entry"
        assert err.tag_name == "note"
        assert str(RegistryError("bad document")) == "bad document"

    def test_transform_error_truncates_long_references(self) -> None:
        err = TransformError("x" * 100, "refused")
        assert err.reference == "x" * 100
        assert "..." in str(err)
        assert str(err).endswith(": refused")

    def test_errors_are_catchable_as_base(self) -> None:
        with pytest.raises(EzTagError):
            CustomTagDefinition("", ExpansionNode("p"))


class TestLogging:
    def test_prefix(self) -> None:
        assert get_logger("lexer").name == "eztag.lexer"
        assert get_logger("eztag.parser").name == "eztag.parser"
        assert get_logger("eztag").name == "eztag"
        assert get_logger("eztagger").name == "eztag.eztagger"

    def test_parse_summary_is_logged(self, caplog) -> None:  # type: ignore[no-untyped-def]
        with caplog.at_level(logging.DEBUG, logger="eztag"):
            parse("<a><b>")
        assert any(
            r.name == "eztag.parser" and "2 tags (2 unclosed)" in r.getMessage()
            for r in caplog.records
        )
