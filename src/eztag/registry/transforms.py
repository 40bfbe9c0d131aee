"""Custom transform capability.

A transform is a plain ``str -> str`` callable applied to a custom tag's
trimmed content before expansion. Definitions refer to transforms by a
reference string, resolved in this order:

1. A name registered in-process (TagRegistryBuilder.register_transform)
2. A path to a ``.py`` file, loaded as a module; its ``transform``
   function is the entry point (``callme`` is accepted as well)
3. An import reference ``package.module:function``; the function must be
   defined in that module, and interpreter and process modules (builtins,
   os, subprocess, ...) are refused

Anything else is treated as inline source code and refused: inline source
is never evaluated.

Failures never propagate into parsing or expansion. ``load_transform``
returns None and ``apply_transform`` returns None ("unavailable"), and the
caller keeps the untransformed content.

Example:
    >>> fn = resolve_transform("string:capwords", registered={})
    >>> apply_transform(fn, "hello world")
    'Hello World'
    >>> resolve_transform("def transform(s): return s", registered={})
    Traceback (most recent call last):
    ...
    eztag.errors.TransformError: Transform 'def transform(s): return s': inline transform source is not evaluated
    >>> apply_transform(str.upper, "hello")
    'HELLO'

"""

from __future__ import annotations

import importlib
import importlib.util
import re
from collections.abc import Callable, Mapping
from functools import lru_cache
from pathlib import Path

from eztag.errors import TransformError
from eztag.utils.logger import get_logger

logger = get_logger(__name__)

Transform = Callable[[str], str]

ENTRY_POINTS = ("transform", "callme")
MODULE_SUFFIXES = frozenset({".py"})

# Packages whose callables run text as code or commands
REFUSED_MODULES = frozenset(
    {
        "builtins",
        "code",
        "codeop",
        "importlib",
        "nt",
        "os",
        "posix",
        "pty",
        "runpy",
        "shutil",
        "subprocess",
        "sys",
    }
)

_IMPORT_REF_RE = re.compile(r"^[A-Za-z_][\w.]*:[A-Za-z_]\w*$")


def resolve_transform(
    reference: str,
    *,
    registered: Mapping[str, Transform],
    base_dir: Path | None = None,
) -> Transform:
    """Resolve a transform reference to a callable.

    Args:
        reference: Transform reference from a custom tag definition
        registered: Transforms registered in-process, by name
        base_dir: Directory relative file paths are resolved against

    Returns:
        The transform callable

    Raises:
        TransformError: If the reference cannot be resolved
    """
    ref = reference.strip()
    if not ref:
        raise TransformError(reference, "empty reference")

    if ref in registered:
        return registered[ref]

    path = Path(ref)
    if path.suffix in MODULE_SUFFIXES:
        if not path.is_absolute() and base_dir is not None:
            path = base_dir / path
        return _load_from_file(reference, path)

    if _IMPORT_REF_RE.match(ref):
        return _load_from_import(reference, ref)

    raise TransformError(reference, "inline transform source is not evaluated")


def load_transform(
    reference: str | None,
    *,
    registered: Mapping[str, Transform],
    base_dir: Path | None = None,
) -> Transform | None:
    """Resolve a transform reference, reporting failure as None.

    Returns:
        The transform callable, or None if there is no reference or it
        cannot be resolved (the failure is logged).
    """
    if not reference:
        return None
    try:
        return resolve_transform(reference, registered=registered, base_dir=base_dir)
    except TransformError as e:
        logger.warning("%s", e)
        return None


def apply_transform(transform: Transform | None, content: str) -> str | None:
    """Call a transform on content.

    Args:
        transform: The transform, or None if unavailable
        content: Trimmed custom tag content

    Returns:
        The transformed text, or None if the transform is unavailable,
        raised, or returned something other than a string. An empty
        string result is returned as-is.
    """
    if transform is None:
        return None
    try:
        result = transform(content)
    except Exception:
        logger.warning("Transform %r failed", transform, exc_info=True)
        return None
    if not isinstance(result, str):
        logger.warning(
            "Transform %r returned %s, expected str", transform, type(result).__name__
        )
        return None
    return result


def _load_from_file(reference: str, path: Path) -> Transform:
    if not path.is_file():
        raise TransformError(reference, f"file not found: {path}")
    resolved = path.resolve()
    return _load_module_file(reference, str(resolved), resolved.stat().st_mtime_ns)


@lru_cache(maxsize=64)
def _load_module_file(reference: str, path: str, mtime_ns: int) -> Transform:
    """Execute a transform file once per (path, modification time)."""
    module_name = f"eztag_transform_{Path(path).stem}_{abs(hash(path))}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise TransformError(reference, f"cannot load module from {path}")
    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        raise TransformError(reference, f"module failed to load: {e}") from e
    return _entry_point(reference, module)


def _load_from_import(reference: str, ref: str) -> Transform:
    module_path, _, attr = ref.partition(":")
    if _is_refused_module(module_path):
        raise TransformError(reference, f"module {module_path!r} is not allowed")
    try:
        module = importlib.import_module(module_path)
    except ImportError as e:
        raise TransformError(reference, f"cannot import {module_path!r}: {e}") from e
    fn = getattr(module, attr, None)
    if not callable(fn):
        raise TransformError(reference, f"{module_path!r} has no callable {attr!r}")
    # re-exports (os.system, a builtin imported into a module) are refused
    if getattr(fn, "__module__", None) != module.__name__:
        raise TransformError(reference, f"{attr!r} is not defined in {module_path!r}")
    return fn


def _entry_point(reference: str, module: object) -> Transform:
    for name in ENTRY_POINTS:
        fn = getattr(module, name, None)
        if callable(fn):
            if _is_refused_module(getattr(fn, "__module__", None) or "builtins"):
                raise TransformError(
                    reference, f"entry point {name!r} comes from a refused module"
                )
            return fn
    names = " or ".join(ENTRY_POINTS)
    raise TransformError(reference, f"module defines no {names} function")


def _is_refused_module(module_path: str) -> bool:
    return module_path.partition(".")[0] in REFUSED_MODULES
