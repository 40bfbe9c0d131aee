"""Logger namespacing for eztag.

Every module logs under the ``eztag`` hierarchy, so an application can
tune the whole package with one logger:

    >>> import logging
    >>> logging.getLogger("eztag").setLevel(logging.WARNING)

The lexer warns on liveness recovery, the transform layer warns when a
transform cannot be resolved or fails, and the parser logs a debug summary
of every parse. The service warns when a custom tag has no definition.
"""

from __future__ import annotations

import logging

_ROOT = "eztag"


def get_logger(name: str) -> logging.Logger:
    """Return the logger for name inside the ``eztag`` hierarchy.

    Module names already under ``eztag`` are used as-is; anything else is
    nested below it.

    Example:
        >>> get_logger("eztag.registry.transforms").name
        'eztag.registry.transforms'
        >>> get_logger("lexer").name
        'eztag.lexer'
    """
    if name != _ROOT and not name.startswith(_ROOT + "."):
        name = f"{_ROOT}.{name}"
    return logging.getLogger(name)
