"""Import utilities for resolving type identifiers to Python objects.

Type identifiers in parameter files come in three shapes:

- ``package.module:Symbol`` (explicit module/attribute split)
- ``./path/to/file.py:Symbol`` (load a module straight from a file)
- ``package.module.Symbol`` (dotted; the longest importable module
  prefix wins and the rest is an attribute chain)
"""

from __future__ import annotations
from importlib import import_module, util
from pathlib import Path
import types
from typing import Any


def _import_from_file(pyfile: str) -> types.ModuleType:
    """Import a module directly from a Python file path.

    This bypasses sys.path entirely and loads the module from the specified file.

    Args:
        pyfile: Path to Python file (e.g., "./plugins/scorers.py")

    Returns:
        Loaded module object

    Raises:
        ModuleNotFoundError: If file doesn't exist or can't be loaded
    """
    py = Path(pyfile).resolve()
    if not py.exists():
        raise ModuleNotFoundError(f"No such file: {py}")
    spec = util.spec_from_file_location(py.stem, py)
    if spec is None or spec.loader is None:
        raise ModuleNotFoundError(f"Could not load module from {py}")
    mod = util.module_from_spec(spec)
    spec.loader.exec_module(mod)  # type: ignore[attr-defined]
    return mod


def _get_attribute_chain(obj: Any, chain: str, origin: str) -> Any:
    for name in chain.split("."):
        if not hasattr(obj, name):
            raise AttributeError(f"{origin} has no attribute '{chain}'")
        obj = getattr(obj, name)
    return obj


def _load_dotted(qualified: str) -> Any:
    parts = qualified.split(".")
    if len(parts) < 2 or not all(parts):
        raise ValueError(
            f"Expected 'module.Symbol' or 'module:Symbol' format, got: {qualified}"
        )

    # Try the longest module prefix first so "pkg.mod.Outer.Inner" works
    for split in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:split])
        try:
            mod = import_module(module_name)
        except ModuleNotFoundError as e:
            # Only swallow "this prefix is not a module", not failures inside it
            if e.name is not None and not module_name.startswith(e.name):
                raise
            continue
        return _get_attribute_chain(mod, ".".join(parts[split:]), f"Module {module_name}")

    raise ModuleNotFoundError(f"No importable module prefix in '{qualified}'")


def load_symbol(qualified: str) -> Any:
    """Load a symbol from a qualified identifier.

    Args:
        qualified: 'module.path:Symbol', '/path/to/file.py:Symbol'
            or 'module.path.Symbol'

    Returns:
        The loaded symbol (class, function, etc.)

    Raises:
        ValueError: If the identifier format is invalid
        ModuleNotFoundError: If the module can't be imported
        AttributeError: If the symbol doesn't exist in the module

    Examples:
        >>> load_symbol("collections:OrderedDict")
        <class 'collections.OrderedDict'>
        >>> load_symbol("collections.OrderedDict")
        <class 'collections.OrderedDict'>
    """
    qualified = qualified.strip()
    module_part, sep, symbol = qualified.rpartition(":")
    if not sep:
        return _load_dotted(qualified)

    if not module_part or not symbol:
        raise ValueError(
            f"Expected 'module_or_file:Symbol' format, got: {qualified}"
        )

    # Path-style import (e.g., "./plugins/scorers.py:F1Scorer")
    if module_part.endswith(".py") or "/" in module_part or "\\" in module_part:
        mod = _import_from_file(module_part)
    else:
        mod = import_module(module_part)
    return _get_attribute_chain(mod, symbol, f"Module {module_part}")
