"""JSON persistence for custom tag definitions.

The persisted form is a JSON object keyed by custom tag name:

    {
      "callout": {
        "void": false,
        "skeleton": {
          "tag": "div",
          "attributes": {"class": "box"},
          "children": [{"tag": "p"}]
        },
        "delimiters": ["\\n\\n"],
        "transform": "transforms/callout.py"
      }
    }

``attributes`` keeps declaration order; a null value is a valueless
attribute. ``transform`` is a transform reference (see
eztag.registry.transforms) and is optional. Relative transform paths are
resolved against the directory of the loaded file.

Output is deterministic (registration order, stable key order).

"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from eztag.errors import DefinitionError, RegistryError
from eztag.registry.definition import CustomTagDefinition, ExpansionNode
from eztag.registry.registry import TagRegistry, TagRegistryBuilder


def node_to_dict(node: ExpansionNode) -> dict[str, Any]:
    """Convert a skeleton node (and its children) to a JSON-compatible dict."""
    data: dict[str, Any] = {"tag": node.tag_name}
    if node.attributes:
        data["attributes"] = dict(node.attributes)
    if node.children:
        data["children"] = [node_to_dict(child) for child in node.children]
    if node.void:
        data["void"] = True
    return data


def node_from_dict(data: Any, tag_name: str | None = None) -> ExpansionNode:
    """Reconstruct a skeleton node from a dict.

    Raises:
        RegistryError: If the structure is malformed.
    """
    if not isinstance(data, dict):
        raise RegistryError(f"skeleton node must be an object, got {type(data).__name__}", tag_name)
    name = data.get("tag")
    if not isinstance(name, str) or not name:
        raise RegistryError("skeleton node is missing its 'tag'", tag_name)

    raw_attrs = data.get("attributes")
    if raw_attrs is None:
        raw_attrs = {}
    if not isinstance(raw_attrs, dict):
        raise RegistryError(f"attributes of <{name}> must be an object", tag_name)
    attributes: list[tuple[str, str | None]] = []
    for attr_name, value in raw_attrs.items():
        if value is not None and not isinstance(value, str):
            value = str(value)
        attributes.append((attr_name, value))

    raw_children = data.get("children")
    if raw_children is None:
        raw_children = []
    if not isinstance(raw_children, list):
        raise RegistryError(f"children of <{name}> must be a list", tag_name)

    return ExpansionNode(
        tag_name=name,
        attributes=tuple(attributes),
        children=tuple(node_from_dict(child, tag_name) for child in raw_children),
        void=bool(data.get("void", False)),
    )


def definition_to_dict(definition: CustomTagDefinition) -> dict[str, Any]:
    """Convert a definition to its persisted form (without the name key)."""
    return {
        "void": definition.void,
        "skeleton": node_to_dict(definition.skeleton),
        "delimiters": list(definition.delimiters),
        "transform": definition.transform,
    }


def definition_from_dict(name: str, data: Any) -> CustomTagDefinition:
    """Reconstruct a definition from its persisted form.

    Raises:
        RegistryError: If the entry is malformed or the definition invalid.
    """
    if not isinstance(data, dict):
        raise RegistryError(f"entry must be an object, got {type(data).__name__}", name)

    skeleton = data.get("skeleton")
    if isinstance(skeleton, list):
        if len(skeleton) != 1:
            raise RegistryError("skeleton must have exactly one root tag", name)
        skeleton = skeleton[0]
    if skeleton is None:
        raise RegistryError("missing 'skeleton'", name)

    delimiters = data.get("delimiters") or []
    if not isinstance(delimiters, list) or not all(isinstance(d, str) for d in delimiters):
        raise RegistryError("'delimiters' must be a list of strings", name)

    transform = data.get("transform")
    if transform is not None and not isinstance(transform, str):
        raise RegistryError("'transform' must be a string", name)

    try:
        return CustomTagDefinition(
            name=data.get("name", name),
            skeleton=node_from_dict(skeleton, name),
            delimiters=tuple(delimiters),
            void=bool(data.get("void", False)),
            transform=transform or None,
        )
    except DefinitionError:
        raise
    except (TypeError, ValueError) as e:
        raise RegistryError(str(e), name) from e


def loads_registry(
    text: str,
    *,
    base_dir: str | Path | None = None,
    builder: TagRegistryBuilder | None = None,
) -> TagRegistry:
    """Build a registry from a JSON document.

    Args:
        text: JSON document keyed by custom tag name
        base_dir: Directory relative transform paths resolve against
        builder: Builder to register into (e.g. one with in-process
            transforms already registered); a fresh one if None

    Raises:
        RegistryError: If the document is not valid JSON or an entry is
            malformed.
    """
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise RegistryError(f"invalid JSON: {e}") from e
    if not isinstance(raw, dict):
        raise RegistryError("registry document must be an object keyed by tag name")

    builder = builder if builder is not None else TagRegistryBuilder()
    for name, entry in raw.items():
        builder.register(definition_from_dict(name, entry))
    if base_dir is not None:
        builder.with_base_dir(base_dir)
    return builder.build()


def load_registry(
    path: str | Path,
    *,
    builder: TagRegistryBuilder | None = None,
) -> TagRegistry:
    """Load a registry from a JSON file.

    Relative transform paths resolve against the file's directory.

    Raises:
        RegistryError: If the file cannot be read or is malformed.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise RegistryError(f"cannot read {path}: {e}") from e
    return loads_registry(text, base_dir=path.parent, builder=builder)


def dumps_registry(registry: TagRegistry, *, indent: int | None = 2) -> str:
    """Serialize a registry's definitions to a JSON string."""
    data = {d.name: definition_to_dict(d) for d in registry.definitions}
    return json.dumps(data, indent=indent, ensure_ascii=False)


def dump_registry(registry: TagRegistry, path: str | Path, *, indent: int | None = 2) -> None:
    """Write a registry's definitions to a JSON file."""
    Path(path).write_text(dumps_registry(registry, indent=indent) + "\n", encoding="utf-8")
