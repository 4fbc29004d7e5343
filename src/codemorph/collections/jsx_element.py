"""Finding and inspecting JSX elements."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from codemorph.collections.node import closest_scope, find
from codemorph.collections.variable_declarator import requires_module
from codemorph.errors import InvalidArgumentError
from codemorph.types import is_kind

if TYPE_CHECKING:
    from codemorph.collection import Collection
    from codemorph.paths import NodePath
    from codemorph.registry import MethodRegistry


def find_jsx_elements(collection: Collection, name: str | None = None) -> Collection:
    """Find JSX elements, optionally only those whose tag is ``name``."""
    name_filter = {"openingElement": {"name": {"name": name}}} if name else None
    return find(collection, "JSXElement", name_filter)


def find_jsx_elements_by_module_name(collection: Collection, module_name: str) -> Collection:
    """Find the elements whose tag is bound to ``require(module_name)``.

    Given ``var Bar = require("Foo")``, looking up ``"Foo"`` finds every
    ``<Bar />`` in the scope of that declaration.
    """
    if not module_name or not isinstance(module_name, str):
        msg = "find_jsx_elements_by_module_name(...) needs a name to look for"
        raise InvalidArgumentError(msg)

    def elements(path: NodePath) -> list[NodePath] | None:
        local = path.value["id"].get("name")
        if not local:
            return None
        declaration = collection.from_paths([path], registry=collection.registry)
        return find_jsx_elements(closest_scope(declaration), local).paths()

    declarators = find(collection, "VariableDeclarator").filter(requires_module(module_name))
    return declarators.map(elements, "JSXElement")


def _children(collection: Collection, *, elements_only: bool) -> list[NodePath]:
    paths: list[NodePath] = []
    for path in collection.paths():
        children = path.get("children")
        for index in range(len(children.value or ())):
            child = children.get(index)
            if not elements_only or is_kind(child.value, "JSXElement"):
                paths.append(child)
    return paths


def child_nodes(collection: Collection) -> Collection:
    """Get every child of the elements, text and expressions included."""
    return collection.from_paths(_children(collection, elements_only=False), collection)


def child_elements(collection: Collection) -> Collection:
    """Get the children of the elements that are elements themselves."""
    return collection.from_paths(
        _children(collection, elements_only=True), collection, "JSXElement"
    )


def _attribute_value(attribute: Any) -> Any:
    value = attribute.get("value")
    if is_kind(value, "Literal"):
        return value.get("value")
    if value is None:
        return None
    return value.get("expression")


def _attribute_matches(expected: Any, actual: Any) -> bool:
    if callable(expected):
        return bool(expected(actual))
    if isinstance(expected, bool):
        expected = "true" if expected else "false"
    return str(expected) == actual


def has_attributes(attribute_filter: dict[str, Any]) -> Callable[[NodePath], bool]:
    """Build a filter keeping elements whose attributes match.

    Args:
        attribute_filter: Expected value per attribute name. Literal values
            are compared as strings; a callable receives the attribute's
            literal value or expression and decides.

    Returns:
        A predicate for `Collection.filter`

    """

    def matches(path: NodePath) -> bool:
        if not is_kind(path.value, "JSXElement"):
            return False
        attributes: dict[str, Any] = {}
        for attribute in path.value["openingElement"].get("attributes") or []:
            if not is_kind(attribute, "JSXAttribute"):
                continue
            name = attribute["name"].get("name")
            if isinstance(name, str) and name in attribute_filter:
                attributes[name] = attribute
        return all(
            name in attributes
            and _attribute_matches(expected, _attribute_value(attributes[name]))
            for name, expected in attribute_filter.items()
        )

    return matches


def has_children(name: str) -> Callable[[NodePath], bool]:
    """Build a filter keeping elements with a direct child element named ``name``."""

    def matches(path: NodePath) -> bool:
        if not is_kind(path.value, "JSXElement"):
            return False
        return any(
            is_kind(child, "JSXElement")
            and child["openingElement"]["name"].get("name") == name
            for child in path.value.get("children") or []
        )

    return matches


def get_root_name(path: NodePath) -> str | None:
    """Get the root name of an element's tag: ``Foo`` for ``<Foo.Bar />``."""
    name = path.value["openingElement"]["name"]
    while is_kind(name, "JSXMemberExpression"):
        name = name["object"]
    return (name.get("name") if name else None) or None


FILTERS: dict[str, Callable[..., Any]] = {
    "has_attributes": has_attributes,
    "has_children": has_children,
}
MAPPINGS: dict[str, Callable[..., Any]] = {"get_root_name": get_root_name}


def register(registry: MethodRegistry) -> None:
    """Install the JSX element methods."""
    registry.register_methods(
        {
            "find_jsx_elements": find_jsx_elements,
            "find_jsx_elements_by_module_name": find_jsx_elements_by_module_name,
        },
        "Node",
    )
    registry.register_methods(
        {"child_nodes": child_nodes, "child_elements": child_elements},
        "JSXElement",
    )
