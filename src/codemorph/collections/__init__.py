"""Collection methods grouped by the node kind they work on.

Each module exposes a ``register(registry)`` function installing its
methods, and may contribute filter factories (``FILTERS``) and mapping
helpers (``MAPPINGS``) that are plain functions rather than methods.
"""

from __future__ import annotations

from types import SimpleNamespace
from typing import TYPE_CHECKING

from codemorph.collections import import_declaration, jsx_element, node, variable_declarator

if TYPE_CHECKING:
    from codemorph.registry import MethodRegistry

MODULES = {
    "Node": node,
    "VariableDeclarator": variable_declarator,
    "ImportDeclaration": import_declaration,
    "JSXElement": jsx_element,
}

filters = SimpleNamespace(
    **{
        name: SimpleNamespace(**module.FILTERS)
        for name, module in MODULES.items()
        if hasattr(module, "FILTERS")
    }
)
mappings = SimpleNamespace(
    **{
        name: SimpleNamespace(**module.MAPPINGS)
        for name, module in MODULES.items()
        if hasattr(module, "MAPPINGS")
    }
)


def register_builtins(registry: MethodRegistry) -> None:
    """Install the methods of every built-in collection module."""
    for module in MODULES.values():
        module.register(registry)


__all__ = ["MODULES", "filters", "mappings", "register_builtins"]
