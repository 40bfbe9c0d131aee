"""ContextVar-based configuration for eztag.

Provides thread-local configuration using Python's ContextVars (PEP 567).
Config is read by the parser, the expansion engine and the service layer.

Thread Safety:
    ContextVars are thread-local by design. Each thread has independent storage,
    so no locks are needed.

Usage:
    from eztag.config import ParseConfig, parse_config_context

    with parse_config_context(ParseConfig(emit_pseudo_close_tags=False)):
        tree = Parser(source).parse()

"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import TYPE_CHECKING

from eztag.lexer.modes import MULTI_VALUED_ATTRIBUTES

if TYPE_CHECKING:
    from eztag.registry.registry import TagRegistry


@dataclass(frozen=True, slots=True)
class ParseConfig:
    """Immutable parse and expansion configuration.

    Attributes:
        registry: Tag registry supplying void and custom tag names. None
            means the default registry (HTML void elements, no custom tags).
        emit_pseudo_close_tags: Close a tag implicitly when a new tag starts
            before its ``>`` was found.
        line_break: Separator between the lines of an expanded tag.
        trim_content: Strip whitespace around content slices on expansion.
        multi_valued_attributes: Attribute names whose values are unioned
            (rather than overwritten) when merging instance attributes into
            the skeleton root.

    """

    registry: TagRegistry | None = None
    emit_pseudo_close_tags: bool = True
    line_break: str = "\n"
    trim_content: bool = True
    multi_valued_attributes: frozenset[str] = MULTI_VALUED_ATTRIBUTES

    @classmethod
    def from_dict(cls, config_dict: dict) -> "ParseConfig":
        """Create ParseConfig from dictionary.

        Only includes keys that are valid ParseConfig fields; unknown keys
        are silently ignored.

        Example:
            >>> config = ParseConfig.from_dict({"line_break": "\\r\\n", "x": 1})
            >>> config.line_break
            '\\r\\n'

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        if "multi_valued_attributes" in filtered:
            filtered["multi_valued_attributes"] = frozenset(
                name.lower() for name in filtered["multi_valued_attributes"]
            )
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: ParseConfig = ParseConfig()

_parse_config: ContextVar[ParseConfig] = ContextVar(
    "eztag_parse_config",
    default=_DEFAULT_CONFIG,
)


def get_parse_config() -> ParseConfig:
    """Get current configuration (thread-local)."""
    return _parse_config.get()


def set_parse_config(config: ParseConfig) -> None:
    """Set configuration for current context.

    Args:
        config: ParseConfig instance to use for this context.
    """
    _parse_config.set(config)


def reset_parse_config() -> None:
    """Reset to default configuration."""
    _parse_config.set(_DEFAULT_CONFIG)


@contextmanager
def parse_config_context(config: ParseConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Restores the previous config even if an exception is raised.

    Example:
        >>> with parse_config_context(ParseConfig(line_break="\\r\\n")):
        ...     get_parse_config().line_break
        '\\r\\n'

    """
    previous = _parse_config.get()
    _parse_config.set(config)
    try:
        yield
    finally:
        _parse_config.set(previous)


__all__ = [
    "ParseConfig",
    "get_parse_config",
    "set_parse_config",
    "reset_parse_config",
    "parse_config_context",
]
