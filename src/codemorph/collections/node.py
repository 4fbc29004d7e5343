"""Traversal and mutation methods available on every node collection."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from typing import TYPE_CHECKING, Any, TypeAlias

from codemorph.errors import InvalidArgumentError
from codemorph.match import Pattern, match_node
from codemorph.nodes import is_node
from codemorph.types import NamedType, is_kind, kind_name

if TYPE_CHECKING:
    from codemorph.collection import Collection
    from codemorph.paths import NodePath
    from codemorph.registry import MethodRegistry

NodeSource: TypeAlias = "Any | Sequence[Any] | Callable[..., Any]"


def _descendants(start: NodePath, skip: set[int]) -> Iterator[NodePath]:
    """Yield the node paths below ``start`` in pre-order.

    Nodes whose identity is in ``skip`` are neither yielded nor entered.
    """
    stack = list(reversed(list(start.iter_children())))
    while stack:
        path = stack.pop()
        value = path.value
        if is_node(value):
            if id(value) in skip:
                continue
            yield path
        elif not isinstance(value, list):
            continue
        stack.extend(reversed(list(path.iter_children())))


def find(
    collection: Collection,
    type: str | NamedType,  # noqa: A002
    filter: Pattern | None = None,  # noqa: A002
) -> Collection:
    """Find the descendants of kind ``type`` below every position.

    The starting positions themselves are never part of the result, and a
    traversal does not enter another starting position of the collection.
    Subtypes of ``type`` match too. ``filter`` narrows the result with
    `match_node` once all candidates have been collected.

    Args:
        collection: The collection to search
        type: Kind to look for
        filter: Optional pattern the found nodes must match

    Returns:
        A new collection typed ``type``

    """
    kind = kind_name(type)
    lattice = collection.lattice
    starts = collection.paths()
    start_ids = {id(path.value) for path in starts}

    found: list[NodePath] = []
    for start in starts:
        skip = start_ids - {id(start.value)}
        found.extend(
            path
            for path in _descendants(start, skip)
            if is_kind(path.value, kind, lattice)
        )

    if filter is not None:
        found = [path for path in found if match_node(path.value, filter)]
    return collection.from_paths(found, collection, kind)


def closest_scope(collection: Collection) -> Collection:
    """Map every position to the position of its enclosing scope."""
    return collection.map(lambda path: path.scope.path if path.scope else None)


def closest(
    collection: Collection,
    type: str | NamedType,  # noqa: A002
    filter: Pattern | None = None,  # noqa: A002
) -> Collection:
    """Map every position to its nearest strict ancestor of kind ``type``.

    Positions without such an ancestor are dropped.
    """
    kind = kind_name(type)
    lattice = collection.lattice

    def nearest(path: NodePath) -> NodePath | None:
        parent = path.parent
        while parent is not None and not (
            is_kind(parent.value, kind, lattice)
            and (filter is None or match_node(parent.value, filter))
        ):
            parent = parent.parent
        return parent

    return collection.map(nearest)


def get_variable_declarators(
    collection: Collection,
    name_getter: Callable[..., str | None],
) -> Collection:
    """Map every position to the declarator of the variable it names.

    ``name_getter(path, index, paths)`` returns the variable name to resolve
    for a position. The name is looked up through the enclosing scopes; a
    position is kept only when its binding resolves to exactly one
    `VariableDeclarator`.
    """
    from codemorph.collection import positional_callback

    get_name = positional_callback(name_getter)

    def declarator(path: NodePath, index: int, paths: list[NodePath]) -> Any:
        scope = path.scope
        if scope is None:
            return None
        name = get_name(path, index, paths)
        if not name:
            return None
        declaring = scope.lookup(name)
        if declaring is None:
            return None
        bindings = declaring.get_bindings().get(name)
        if not bindings:
            return None
        declarators = collection.from_paths(bindings, registry=collection.registry)
        found = closest(declarators, "VariableDeclarator")
        return found.paths()[0] if found.size() == 1 else None

    return collection.map(declarator, "VariableDeclarator")


def _produce(source: NodeSource, path: NodePath, index: int) -> list[Any]:
    from codemorph.collection import positional_callback

    value = positional_callback(source, 2)(path, index) if callable(source) else source
    values = list(value) if isinstance(value, (list, tuple)) else [value]
    for item in values:
        if not is_node(item):
            msg = f"Expected a node or a list of nodes, got {item!r}"
            raise InvalidArgumentError(msg)
    return values


def replace_with(collection: Collection, nodes: NodeSource) -> Collection:
    """Replace every position with ``nodes``.

    Args:
        collection: The positions to replace
        nodes: A node, a list of nodes, or a callable ``(path, index)``
            returning either

    Returns:
        The collection itself

    Raises:
        InvalidArgumentError: If anything produced is not a node

    """
    for index, path in enumerate(collection.paths()):
        path.replace(*_produce(nodes, path, index))
    return collection


def insert_before(collection: Collection, nodes: NodeSource) -> Collection:
    """Insert ``nodes`` before every position; see `replace_with`."""
    for index, path in enumerate(collection.paths()):
        path.insert_before(*_produce(nodes, path, index))
    return collection


def insert_after(collection: Collection, nodes: NodeSource) -> Collection:
    """Insert ``nodes`` after every position; see `replace_with`."""
    for index, path in enumerate(collection.paths()):
        path.insert_after(*_produce(nodes, path, index))
    return collection


def remove(collection: Collection) -> Collection:
    """Remove every position from the tree.

    Declarations left without declarators and expression statements left
    without an expression are removed too.
    """
    for path in collection.paths():
        path.prune()
    return collection


METHODS = {
    "find": find,
    "closest_scope": closest_scope,
    "closest": closest,
    "get_variable_declarators": get_variable_declarators,
    "replace_with": replace_with,
    "insert_before": insert_before,
    "insert_after": insert_after,
    "remove": remove,
}


def register(registry: MethodRegistry) -> None:
    """Install the node methods and make ``Node`` the empty collection type."""
    registry.register_methods(METHODS, "Node")
    registry.set_default_collection_type("Node")
