"""Tag registry for custom tag lookup and registration.

The registry supplies the parser with the set of void tag names (HTML void
elements plus void custom tags) and maps custom tag names to their
definitions for the expansion engine. It is passed explicitly to the
parser and the service layer; there is no global mutable tag map.

Thread Safety:
TagRegistry is immutable after creation. Safe to share.
Use TagRegistryBuilder for mutable construction.

Example:
    >>> builder = TagRegistryBuilder()
    >>> builder.register(CustomTagDefinition("note", ExpansionNode("aside")))
    >>> registry = builder.build()
    >>> registry.get("NOTE").skeleton.tag_name
    'aside'
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path

from eztag.errors import RegistryError
from eztag.lexer.modes import HTML_VOID_ELEMENTS
from eztag.registry.definition import CustomTagDefinition
from eztag.registry.transforms import Transform, load_transform


class TagRegistry:
    """Immutable registry of custom tag definitions.

    Lookups are case-insensitive.

    Thread Safety:
        Immutable after creation. Safe to share across threads.
    """

    __slots__ = ("_definitions", "_by_name", "_void_names", "_transforms", "_base_dir")

    def __init__(
        self,
        definitions: tuple[CustomTagDefinition, ...],
        by_name: dict[str, CustomTagDefinition],
        void_names: frozenset[str],
        transforms: Mapping[str, Transform],
        base_dir: Path | None = None,
    ) -> None:
        """Initialize registry with pre-built mappings.

        Use TagRegistryBuilder to create instances.
        """
        self._definitions = definitions
        self._by_name = by_name
        self._void_names = void_names
        self._transforms = dict(transforms)
        self._base_dir = base_dir

    def get(self, name: str | None) -> CustomTagDefinition | None:
        """Get definition for a custom tag name.

        Returns:
            Definition if registered, None otherwise
        """
        if name is None:
            return None
        return self._by_name.get(name.lower())

    def has(self, name: str | None) -> bool:
        """Check if a custom tag name is registered."""
        return name is not None and name.lower() in self._by_name

    def is_custom(self, name: str | None) -> bool:
        return self.has(name)

    def is_void(self, name: str | None) -> bool:
        """Check if name is a void tag (HTML void element or void custom tag)."""
        return name is not None and name.lower() in self._void_names

    @property
    def names(self) -> frozenset[str]:
        """Get all registered custom tag names (lowercase)."""
        return frozenset(self._by_name.keys())

    @property
    def void_names(self) -> frozenset[str]:
        return self._void_names

    @property
    def definitions(self) -> tuple[CustomTagDefinition, ...]:
        """Get all registered definitions, in registration order."""
        return self._definitions

    @property
    def base_dir(self) -> Path | None:
        """Directory that relative transform file paths resolve against."""
        return self._base_dir

    @property
    def transforms(self) -> Mapping[str, Transform]:
        """Transforms registered in-process, by name."""
        return self._transforms

    def transform_for(self, name: str) -> Transform | None:
        """Resolve the transform of a custom tag.

        Returns:
            The transform callable, or None if the tag has no transform or
            it cannot be resolved.
        """
        definition = self.get(name)
        if definition is None:
            return None
        return load_transform(
            definition.transform,
            registered=self._transforms,
            base_dir=self._base_dir,
        )

    def __contains__(self, name: object) -> bool:
        """Support 'name in registry' syntax."""
        return isinstance(name, str) and self.has(name)

    def __len__(self) -> int:
        """Number of registered custom tags."""
        return len(self._by_name)


class TagRegistryBuilder:
    """Mutable builder for TagRegistry.

    Example:
        >>> builder = TagRegistryBuilder()
        >>> builder.register_transform("shout", str.upper)
        >>> builder.register(CustomTagDefinition("loud", ExpansionNode("p"), transform="shout"))
        >>> registry = builder.build()
    """

    __slots__ = ("_definitions", "_by_name", "_void_names", "_transforms", "_base_dir")

    def __init__(self, void_names: Iterable[str] = HTML_VOID_ELEMENTS) -> None:
        """Initialize builder.

        Args:
            void_names: Standard void tag names (HTML void elements by default)
        """
        self._definitions: list[CustomTagDefinition] = []
        self._by_name: dict[str, CustomTagDefinition] = {}
        self._void_names: set[str] = {name.lower() for name in void_names}
        self._transforms: dict[str, Transform] = {}
        self._base_dir: Path | None = None

    def register(self, definition: CustomTagDefinition) -> TagRegistryBuilder:
        """Register a custom tag definition.

        Returns:
            Self for chaining

        Raises:
            RegistryError: If the name is already registered
        """
        key = definition.key
        if key in self._by_name:
            raise RegistryError("already registered", definition.name)
        self._by_name[key] = definition
        self._definitions.append(definition)
        return self

    def register_all(self, definitions: Iterable[CustomTagDefinition]) -> TagRegistryBuilder:
        for definition in definitions:
            self.register(definition)
        return self

    def register_transform(self, name: str, transform: Transform) -> TagRegistryBuilder:
        """Register an in-process transform that definitions can reference by name.

        Raises:
            RegistryError: If the transform is not callable
        """
        if not callable(transform):
            msg = f"transform {name!r} is not callable"
            raise RegistryError(msg)
        self._transforms[name] = transform
        return self

    def with_base_dir(self, base_dir: str | Path | None) -> TagRegistryBuilder:
        """Set the directory relative transform file paths resolve against."""
        self._base_dir = Path(base_dir) if base_dir is not None else None
        return self

    def build(self) -> TagRegistry:
        """Build immutable registry from registered definitions."""
        void_names = set(self._void_names)
        void_names.update(d.key for d in self._definitions if d.void)
        return TagRegistry(
            definitions=tuple(self._definitions),
            by_name=dict(self._by_name),
            void_names=frozenset(void_names),
            transforms=dict(self._transforms),
            base_dir=self._base_dir,
        )

    def __len__(self) -> int:
        """Number of registered definitions."""
        return len(self._definitions)


# Cached singleton; TagRegistry is immutable, so sharing it across threads is safe
_DEFAULT_REGISTRY: TagRegistry | None = None


def create_default_registry() -> TagRegistry:
    """Get the default registry (cached singleton).

    Returns:
        Registry with the HTML void elements and no custom tags.
    """
    global _DEFAULT_REGISTRY
    if _DEFAULT_REGISTRY is None:
        _DEFAULT_REGISTRY = TagRegistryBuilder().build()
    return _DEFAULT_REGISTRY


def create_registry_with_defaults() -> TagRegistryBuilder:
    """Create a builder pre-populated with the HTML void elements.

        >>> builder = create_registry_with_defaults()
        >>> builder.register(my_definition)
        >>> registry = builder.build()
    """
    return TagRegistryBuilder()


def resolve_registry(registry: TagRegistry | None, fallback: TagRegistry | None = None) -> TagRegistry:
    """Pick the first registry given, else the default registry.

    An empty registry is still a registry: it may carry custom void names.
    """
    if registry is not None:
        return registry
    if fallback is not None:
        return fallback
    return create_default_registry()
