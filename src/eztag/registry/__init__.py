"""Custom tag registry for eztag.

Provides:
- CustomTagDefinition / ExpansionNode: what a custom tag expands into
- TagRegistry / TagRegistryBuilder: immutable lookup of custom and void tags
- JSON persistence of definitions
- Transform resolution and safe invocation

Example:
    >>> from eztag.registry import (
    ...     CustomTagDefinition, ExpansionNode, TagRegistryBuilder,
    ... )
    >>> skeleton = ExpansionNode("outer", children=(ExpansionNode("inner"),))
    >>> registry = (
    ...     TagRegistryBuilder()
    ...     .register(CustomTagDefinition("custom", skeleton, ("\\n\\n",)))
    ...     .build()
    ... )
    >>> "custom" in registry
    True
"""

from eztag.registry.definition import CustomTagDefinition, ExpansionNode
from eztag.registry.registry import (
    TagRegistry,
    TagRegistryBuilder,
    create_default_registry,
    create_registry_with_defaults,
    resolve_registry,
)
from eztag.registry.storage import (
    definition_from_dict,
    definition_to_dict,
    dump_registry,
    dumps_registry,
    load_registry,
    loads_registry,
)
from eztag.registry.transforms import (
    Transform,
    apply_transform,
    load_transform,
    resolve_transform,
)

__all__ = [
    # Definitions
    "CustomTagDefinition",
    "ExpansionNode",
    # Registry
    "TagRegistry",
    "TagRegistryBuilder",
    "create_default_registry",
    "create_registry_with_defaults",
    "resolve_registry",
    # Persistence
    "definition_from_dict",
    "definition_to_dict",
    "dump_registry",
    "dumps_registry",
    "load_registry",
    "loads_registry",
    # Transforms
    "Transform",
    "apply_transform",
    "load_transform",
    "resolve_transform",
]
