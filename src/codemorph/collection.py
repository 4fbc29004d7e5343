"""Typed collections of tree positions."""

from __future__ import annotations

import inspect
from collections.abc import Callable, Iterable, Iterator, Sequence
from types import MethodType
from typing import TYPE_CHECKING, Any, TypeAlias

from codemorph.errors import InvalidArgumentError
from codemorph.nodes import is_node
from codemorph.paths import NodePath
from codemorph.registry import MethodRegistry
from codemorph.types import NamedType, kind_name

if TYPE_CHECKING:
    from codemorph.types import TypeLattice

KindSpec: TypeAlias = "str | NamedType | Sequence[str | NamedType]"
Callback: TypeAlias = "Callable[..., Any]"


class Collection:
    """An ordered set of positions and the node kinds they have in common.

    Which methods a collection offers beyond the built-in ones depends on its
    types: they are looked up in its `MethodRegistry`, so a collection of
    ``VariableDeclarator`` positions has ``rename_to`` while a collection of
    ``Identifier`` positions does not.

    Membership never changes after construction; querying returns new
    collections linked to this one as their parent. Mutating methods change
    the shared tree and return the receiver.
    """

    def __init__(
        self,
        paths: Iterable[NodePath],
        parent: Collection | None = None,
        types: KindSpec | None = None,
        *,
        registry: MethodRegistry | None = None,
    ) -> None:
        """Initialize the collection.

        Args:
            paths: The positions, in order
            parent: The collection this one was derived from
            types: Explicit kinds; inferred from the positions when omitted
            registry: Method table; the parent's or the default one if omitted

        Raises:
            InvalidArgumentError: If any element is not a `NodePath`

        """
        paths = list(paths)
        for path in paths:
            if not isinstance(path, NodePath):
                msg = f"Every element in the list must be a NodePath, got {path!r}"
                raise InvalidArgumentError(msg)

        if registry is None:
            registry = parent.registry if parent is not None else MethodRegistry.default()

        self._paths = paths
        self._parent = parent
        self.registry = registry
        self.types: tuple[str, ...] = (
            _expand_types(types, registry.lattice)
            if types is not None
            else _infer_types(paths, registry)
        )

    @classmethod
    def from_paths(
        cls,
        paths: Iterable[NodePath],
        parent: Collection | None = None,
        types: KindSpec | None = None,
        *,
        registry: MethodRegistry | None = None,
    ) -> Collection:
        """Create a collection from positions."""
        return cls(paths, parent, types, registry=registry)

    @classmethod
    def from_nodes(
        cls,
        nodes: Iterable[Any],
        parent: Collection | None = None,
        types: KindSpec | None = None,
        *,
        registry: MethodRegistry | None = None,
    ) -> Collection:
        """Create a collection wrapping each node in a new root position.

        Raises:
            InvalidArgumentError: If any element is not a node

        """
        nodes = list(nodes)
        for node in nodes:
            if not is_node(node):
                msg = f"Every element in the list must be a node, got {node!r}"
                raise InvalidArgumentError(msg)
        return cls([NodePath(node) for node in nodes], parent, types, registry=registry)

    # Registered methods

    def __getattr__(self, name: str) -> Any:
        registry = self.__dict__.get("registry")
        if name.startswith("_") or registry is None or name not in registry.names():
            msg = f"'{type(self).__name__}' object has no attribute '{name}'"
            raise AttributeError(msg)

        def dispatch(*args: Any, **kwargs: Any) -> Any:
            method = registry.resolve(name, self.types)
            return MethodType(method, self)(*args, **kwargs)

        dispatch.__name__ = name
        return dispatch

    def __dir__(self) -> list[str]:
        return sorted({*super().__dir__(), *self.registry.names()})

    # Container protocol

    def __len__(self) -> int:
        return len(self._paths)

    def __iter__(self) -> Iterator[NodePath]:
        return iter(list(self._paths))

    def __repr__(self) -> str:
        return f"Collection(size={len(self._paths)}, types={list(self.types)})"

    # Queries

    @property
    def parent(self) -> Collection | None:
        """The collection this one was derived from."""
        return self._parent

    @property
    def lattice(self) -> TypeLattice:
        """The supertype relation of this collection's registry."""
        return self.registry.lattice

    def size(self) -> int:
        """Get the number of positions."""
        return len(self._paths)

    def paths(self) -> list[NodePath]:
        """Get the positions."""
        return list(self._paths)

    def nodes(self) -> list[Any]:
        """Get the values stored at the positions."""
        return [path.value for path in self._paths]

    def get_types(self) -> list[str]:
        """Get the kinds shared by every position."""
        return list(self.types)

    def is_of_type(self, kind: str | NamedType) -> bool:
        """Check whether ``kind`` is among the collection's types."""
        return kind_name(kind) in self.types

    def filter(self, predicate: Callback) -> Collection:
        """Keep the positions for which ``predicate(path, index, paths)`` is true."""
        call = positional_callback(predicate)
        paths = self.paths()
        kept = [path for index, path in enumerate(paths) if call(path, index, paths)]
        return type(self)(kept, self)

    def for_each(self, visit: Callback) -> Collection:
        """Call ``visit(path, index, paths)`` for each position.

        Returns:
            The collection itself

        """
        call = positional_callback(visit)
        paths = self.paths()
        for index, path in enumerate(paths):
            call(path, index, paths)
        return self

    def some(self, predicate: Callback) -> bool:
        """Check whether ``predicate`` holds for any position."""
        call = positional_callback(predicate)
        paths = self.paths()
        return any(call(path, index, paths) for index, path in enumerate(paths))

    def every(self, predicate: Callback) -> bool:
        """Check whether ``predicate`` holds for every position."""
        call = positional_callback(predicate)
        paths = self.paths()
        return all(call(path, index, paths) for index, path in enumerate(paths))

    def map(self, project: Callback, types: KindSpec | None = None) -> Collection:
        """Collect the positions produced by ``project(path, index, paths)``.

        The callback may return a position, a sequence of positions or None.
        Positions are deduplicated by identity; the first occurrence wins.

        Args:
            project: Callback producing the new positions
            types: Explicit kinds for the result; inferred when omitted

        Returns:
            A new collection with this one as parent

        """
        call = positional_callback(project)
        paths = self.paths()
        result: list[NodePath] = []
        seen: set[int] = set()
        for index, path in enumerate(paths):
            produced = call(path, index, paths)
            if produced is None:
                continue
            items = produced if isinstance(produced, (list, tuple)) else [produced]
            for item in items:
                if item is None or id(item) in seen:
                    continue
                seen.add(id(item))
                result.append(item)
        return type(self)(result, self, types)

    def at(self, index: int) -> Collection:
        """Get a collection holding only the position at ``index``.

        Negative indexes count from the end. Out of range yields an empty
        collection.
        """
        size = len(self._paths)
        position = index + size if index < 0 else index
        selected = [self._paths[position]] if 0 <= position < size else []
        return type(self)(selected, self)

    def get(self, *names: str | int) -> NodePath:
        """Call `NodePath.get` on the first position.

        Raises:
            IndexError: If the collection is empty

        """
        if not self._paths:
            msg = "You cannot call 'get' on a collection with no paths."
            raise IndexError(msg)
        return self._paths[0].get(*names)

    def get_ast(self) -> list[NodePath]:
        """Get the positions of the root collection."""
        root = self
        while root._parent is not None:
            root = root._parent
        return root.paths()

    def to_source(self, **options: Any) -> str | list[str]:
        """Print the tree back to source text.

        A derived collection prints its root collection. The root prints one
        string for a single position and a list of strings otherwise.

        Args:
            **options: Fields of `codemorph.options.PrintOptions`

        """
        if self._parent is not None:
            return self._parent.to_source(**options)

        from codemorph.options import PrintOptions
        from codemorph.printer import print_node

        print_options = PrintOptions(**options)
        if len(self._paths) == 1:
            return print_node(self._paths[0].value, print_options)
        return [print_node(path.value, print_options) for path in self._paths]


def _expand_types(types: KindSpec, lattice: TypeLattice) -> tuple[str, ...]:
    if isinstance(types, (str, NamedType)):
        kind = kind_name(types)
        return (kind, *lattice.supertypes(kind))
    return tuple(dict.fromkeys(kind_name(kind) for kind in types))


def _infer_types(paths: Sequence[NodePath], registry: MethodRegistry) -> tuple[str, ...]:
    lattice = registry.lattice
    if not paths:
        default = registry.default_collection_type
        return (default, *lattice.supertypes(default)) if default else ()

    kinds = [path.node.get("type") if is_node(path.node) else None for path in paths]
    if any(kind is None for kind in kinds):
        return ()

    first = kinds[0]
    if all(kind == first for kind in kinds):
        return (first, *lattice.supertypes(first))

    common = [first, *lattice.supertypes(first)]
    for kind in kinds[1:]:
        chain = {kind, *lattice.supertypes(kind)}
        common = [name for name in common if name in chain]
    return tuple(common)


def positional_callback(callback: Callback, max_args: int = 3) -> Callback:
    """Adapt ``callback`` to receive only as many arguments as it declares."""
    try:
        signature = inspect.signature(callback)
    except (TypeError, ValueError):
        count = 1
    else:
        count = 0
        for parameter in signature.parameters.values():
            if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
                count = max_args
                break
            if parameter.kind in (
                inspect.Parameter.POSITIONAL_ONLY,
                inspect.Parameter.POSITIONAL_OR_KEYWORD,
            ):
                count += 1
        count = min(count, max_args)

    def call(*args: Any) -> Any:
        return callback(*args[:count])

    return call
