"""Node builders for every concrete kind.

Builders are named after their kind in snake_case and accept the kind's
build parameters positionally, followed by any extra fields as keywords::

    from codemorph import builders as b

    b.variable_declaration("const", [b.variable_declarator(b.identifier("x"))])
"""

from __future__ import annotations

import copy
import keyword
import re
from collections.abc import Callable
from typing import Any, TypeAlias

from codemorph.errors import InvalidArgumentError
from codemorph.nodes import Node
from codemorph.types import KindDef

Builder: TypeAlias = "Callable[..., Node]"

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_builders: dict[str, Builder] = {}


def builder_name(kind: str) -> str:
    """Derive the builder name of a kind (``JSXElement`` -> ``jsx_element``)."""
    name = _CAMEL_BOUNDARY.sub("_", kind).lower()
    return f"{name}_" if keyword.iskeyword(name) else name


def build(kind: str, *args: Any, **fields: Any) -> Node:
    """Build a node of ``kind``.

    Args:
        kind: Name of a concrete kind
        *args: Values for the kind's build parameters, in order
        **fields: Build parameters by name, or extra fields

    Returns:
        The new node

    Raises:
        InvalidArgumentError: If the kind is unknown or abstract, too many
            positional values are given, or a required parameter is missing

    """
    definition = KindDef.registry.get(kind)
    if definition is None or definition.abstract:
        msg = f"No builder for kind '{kind}'"
        raise InvalidArgumentError(msg)

    params = definition.build
    if len(args) > len(params):
        msg = (
            f"{builder_name(kind)}() takes {len(params)} positional arguments "
            f"but {len(args)} were given"
        )
        raise InvalidArgumentError(msg)

    node = Node(type=kind)
    for index, param in enumerate(params):
        if index < len(args):
            node[param] = args[index]
        elif param in fields:
            node[param] = fields.pop(param)
        elif param in definition.defaults:
            node[param] = copy.deepcopy(definition.defaults[param])
        else:
            msg = f"{builder_name(kind)}() missing required argument '{param}'"
            raise InvalidArgumentError(msg)

    for key, default in definition.defaults.items():
        if key not in node:
            node[key] = fields.pop(key) if key in fields else copy.deepcopy(default)
    node.update(fields)
    return node


def get_builder(name: str) -> Builder:
    """Look up a builder by snake_case name.

    Raises:
        AttributeError: If no concrete kind has that builder name

    """
    if not _builders:
        for kind, definition in KindDef.registry.items():
            if not definition.abstract:
                _builders[builder_name(kind)] = _make_builder(kind)
    if (found := _builders.get(name)) is None:
        msg = f"No builder named '{name}'"
        raise AttributeError(msg)
    return found


def _make_builder(kind: str) -> Builder:
    def builder(*args: Any, **fields: Any) -> Node:
        return build(kind, *args, **fields)

    builder.__name__ = builder.__qualname__ = builder_name(kind)
    builder.__doc__ = f"Build a {kind} node."
    return builder


def __getattr__(name: str) -> Builder:
    return get_builder(name)


def __dir__() -> list[str]:
    get_builder("identifier")
    return sorted([*globals(), *_builders])
