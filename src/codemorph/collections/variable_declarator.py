"""Finding, filtering and renaming variable declarators."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

from codemorph.collections.node import find
from codemorph.types import is_kind

if TYPE_CHECKING:
    from codemorph.collection import Collection
    from codemorph.paths import NodePath
    from codemorph.registry import MethodRegistry

# Parent kinds whose non-computed key names a property, not a variable
_KEYED_PARENTS = (
    ("MemberExpression", "property"),
    ("Property", "key"),
    ("MethodDefinition", "key"),
    ("JSXAttribute", "name"),
)


def find_variable_declarators(collection: Collection, name: str | None = None) -> Collection:
    """Find variable declarators, optionally only those declaring ``name``."""
    return find(collection, "VariableDeclarator", {"id": {"name": name}} if name else None)


def requires_module(names: str | Sequence[str] | None = None) -> Callable[[NodePath], bool]:
    """Build a filter keeping declarators initialized by ``require(...)``.

    Args:
        names: Module name or names the ``require`` call must load; any
            module when omitted

    Returns:
        A predicate for `Collection.filter`

    """
    if isinstance(names, str):
        names = [names]

    def is_require(path: NodePath) -> bool:
        node = path.value
        if not is_kind(node, "VariableDeclarator"):
            return False
        init = node.get("init")
        if not is_kind(init, "CallExpression"):
            return False
        callee = init.get("callee")
        if not (is_kind(callee, "Identifier") and callee.get("name") == "require"):
            return False
        if names is None:
            return True
        arguments = init.get("arguments") or []
        first = arguments[0] if arguments else None
        return (
            is_kind(first, "Literal")
            and isinstance(first.get("value"), str)
            and first["value"] in names
        )

    return is_require


def _is_variable_reference(path: NodePath) -> bool:
    parent = path.parent
    if parent is None:
        return True
    container = parent.value
    for kind, field in _KEYED_PARENTS:
        if (
            is_kind(container, kind)
            and container.get(field) is path.value
            and not container.get("computed")
        ):
            return False
    return True


def rename_to(collection: Collection, new_name: str) -> Collection:
    """Rename the declared variables and every reference to them.

    References are searched in the scope declaring the variable. Identifiers
    in a nested scope that declares the same name again are left alone, as
    are property keys, non-computed member properties and JSX attribute
    names. Shorthand properties are expanded to ``key: new_name``. Declarators
    binding a destructuring pattern are skipped.

    Returns:
        The collection itself

    """
    for path in collection.paths():
        if not is_kind(path.value["id"], "Identifier"):
            continue
        old_name = path.value["id"]["name"]
        root_scope = path.scope
        if root_scope is None:
            continue
        references = find(
            collection.from_paths([root_scope.path], registry=collection.registry),
            "Identifier",
            {"name": old_name},
        )
        for reference in references.paths():
            if not _is_variable_reference(reference):
                continue
            scope = reference.scope
            while scope is not None and scope is not root_scope:
                if scope.declares(old_name):
                    break
                scope = scope.parent
            if scope is None or scope is not root_scope:
                continue

            parent = reference.parent
            if (
                parent is not None
                and is_kind(parent.value, "Property")
                and parent.value.get("shorthand")
                and not parent.value.get("method")
            ):
                parent.get("shorthand").replace(False)
            reference.get("name").replace(new_name)
    return collection


FILTERS: dict[str, Callable[..., Any]] = {"requires_module": requires_module}


def register(registry: MethodRegistry) -> None:
    """Install the declarator methods."""
    registry.register_methods({"find_variable_declarators": find_variable_declarators}, "Node")
    registry.register_methods({"rename_to": rename_to}, "VariableDeclarator")
