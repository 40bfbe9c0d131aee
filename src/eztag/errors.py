"""Exception classes for eztag.

The lexer and parser never raise on malformed markup; they degrade to a
best-effort tree. Exceptions are reserved for the registry boundary:
malformed persisted definitions and transform references that cannot be
resolved.
"""

from __future__ import annotations


class EzTagError(Exception):
    """Base exception for all eztag errors.

    Subclass this for specific error categories.
    """

    pass


class RegistryError(EzTagError):
    """Error while building or loading a tag registry.

    Raised for duplicate registrations and malformed persisted documents.
    """

    def __init__(self, message: str, tag_name: str | None = None) -> None:
        """Initialize registry error.

        Args:
            message: Error description
            tag_name: Custom tag the error relates to (optional)
        """
        self.message = message
        self.tag_name = tag_name

        prefix = f"Custom tag '{tag_name}': " if tag_name else ""
        super().__init__(f"{prefix}{message}")


class DefinitionError(RegistryError):
    """A custom tag definition is internally inconsistent.

    Raised for empty names, empty or duplicate delimiters, and delimiter
    lists that cannot be aligned with the skeleton.
    """

    pass


class TransformError(EzTagError):
    """A transform reference could not be resolved to a callable.

    The expansion path converts this into "transform unavailable" and falls
    back to the untransformed inner text.
    """

    def __init__(self, reference: str, message: str) -> None:
        """Initialize transform error.

        Args:
            reference: The transform reference as stored in the definition
            message: Description of the failure
        """
        self.reference = reference
        shown = reference if len(reference) <= 60 else reference[:57] + "..."
        super().__init__(f"Transform {shown!r}: {message}")
