"""
eztag: markup tag parsing and custom tag expansion for Python

Parses markup into a tag tree that tolerates malformed input, and expands
author-defined custom tags into a skeleton of standard tags. Zero runtime
dependencies.

Quick Start:
    >>> from eztag import parse
    >>> tree = parse("<div><p>Hello<br></div>")
    >>> [node.name for node in tree.walk()]
    ['div', 'p', 'br']

Custom Tags:
    >>> from eztag import CustomTagDefinition, ExpansionNode, expand_all
    >>> from eztag import create_registry_with_defaults
    >>>
    >>> builder = create_registry_with_defaults()
    >>> skeleton = ExpansionNode("outer", children=(ExpansionNode("inner"),))
    >>> builder.register(CustomTagDefinition("custom", skeleton, ("\\n\\n",)))
    >>> registry = builder.build()
    >>> print(expand_all("<custom>Outer\\n\\nInner</custom>", registry=registry))
    <outer>
    Outer
    <inner>
    Inner
    </inner>
    </outer>
"""

from eztag.config import (
    ParseConfig,
    get_parse_config,
    parse_config_context,
    reset_parse_config,
    set_parse_config,
)
from eztag.errors import DefinitionError, EzTagError, RegistryError, TransformError
from eztag.expansion import Expander, expand, expand_definition, merge_attributes
from eztag.lexer import Lexer, RawTextKind, ScannerState
from eztag.location import OffsetRange
from eztag.nodes import Closure, TagNode, TagTree
from eztag.parser import Parser
from eztag.registry import (
    CustomTagDefinition,
    ExpansionNode,
    TagRegistry,
    TagRegistryBuilder,
    create_default_registry,
    create_registry_with_defaults,
    dump_registry,
    dumps_registry,
    load_registry,
    loads_registry,
)
from eztag.serialization import to_dict, to_json, to_markup
from eztag.service import TextEdit, expand_all, expand_at, find_custom_tag
from eztag.tokens import Token, TokenKind

__version__ = "0.1.0"


def parse(source: str, *, registry: TagRegistry | None = None) -> TagTree:
    """Parse markup source into a tag tree.

    Args:
        source: Markup source text
        registry: Tag registry supplying void and custom tag names (the
            configured one, or the default registry, if None)

    Returns:
        TagTree; never raises on malformed input

    Example:
        >>> tree = parse("<a><b></a>")
        >>> [(node.name, node.is_closed) for node in tree.walk()]
        [('a', True), ('b', True)]
    """
    return Parser(source, registry).parse()


def tokenize(source: str) -> list[Token]:
    """Scan source into a list of tokens, ending with END_OF_STREAM."""
    return list(Lexer(source).tokenize())


__all__ = [
    # Version
    "__version__",
    # Entry points
    "parse",
    "tokenize",
    "expand",
    "expand_at",
    "expand_all",
    "expand_definition",
    # Core
    "Lexer",
    "Parser",
    "Expander",
    "merge_attributes",
    "find_custom_tag",
    "TextEdit",
    # Tokens and states
    "Token",
    "TokenKind",
    "ScannerState",
    "RawTextKind",
    # Tree
    "Closure",
    "OffsetRange",
    "TagNode",
    "TagTree",
    # Registry
    "CustomTagDefinition",
    "ExpansionNode",
    "TagRegistry",
    "TagRegistryBuilder",
    "create_default_registry",
    "create_registry_with_defaults",
    "dump_registry",
    "dumps_registry",
    "load_registry",
    "loads_registry",
    # Serialization
    "to_dict",
    "to_json",
    "to_markup",
    # Configuration
    "ParseConfig",
    "get_parse_config",
    "parse_config_context",
    "reset_parse_config",
    "set_parse_config",
    # Errors
    "EzTagError",
    "RegistryError",
    "DefinitionError",
    "TransformError",
]
