"""The ``codemorph`` entry point: parsing, collections, builders and helpers."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from codemorph import collections as builtin_collections
from codemorph.builders import get_builder
from codemorph.collection import Collection, KindSpec
from codemorph.errors import InvalidArgumentError
from codemorph.match import Pattern, match_node
from codemorph.nodes import is_node
from codemorph.parser import get_parser
from codemorph.paths import NodePath
from codemorph.registry import Method, MethodRegistry
from codemorph.template import Template
from codemorph.types import KindDef, NamedType, TypeLattice


class Codemorph:
    """Callable entry point bound to a parser and a method registry.

    Calling the instance builds a collection. Attribute access gives the
    rest of the toolbox:

    - ``j.Identifier`` (a kind name) is a `NamedType`
    - ``j.identifier(...)`` (a snake_case kind name) is a node builder
    - ``j.filters`` / ``j.mappings`` hold the helper functions of the
      built-in collection modules
    - ``j.template`` parses snippets with the instance's parser

    Usage:
        j = Codemorph()
        root = j("var foo = 42;")
        root.find_variable_declarators("foo").rename_to("bar")
        root.to_source()
    """

    def __init__(self, parser: Any = None, registry: MethodRegistry | None = None) -> None:
        """Initialize the entry point.

        Args:
            parser: Parser name or object for source strings
            registry: Method table, the process default when omitted

        """
        self.parser = get_parser(parser)
        self.registry = registry or MethodRegistry.default()
        self.template = Template(self.parser)
        self.filters = builtin_collections.filters
        self.mappings = builtin_collections.mappings

    def __repr__(self) -> str:
        return f"Codemorph(parser={getattr(self.parser, 'name', self.parser)!r})"

    def __call__(self, source: Any, types: KindSpec | None = None) -> Collection:
        """Build a collection.

        Args:
            source: Source text, a node, a position, or a list of nodes or
                positions
            types: Explicit kinds for the collection

        Returns:
            A collection of the given positions; parsed source yields a
            collection holding the root `Program` position

        Raises:
            InvalidArgumentError: If ``source`` is none of the accepted shapes
            SourceParseError: If source text cannot be parsed

        """
        if isinstance(source, str):
            tree = self.parser.parse(source)
            return Collection.from_nodes([tree], types=types, registry=self.registry)
        if isinstance(source, NodePath):
            return Collection.from_paths([source], types=types, registry=self.registry)
        if is_node(source):
            return Collection.from_nodes([source], types=types, registry=self.registry)
        if isinstance(source, (list, tuple)):
            if all(isinstance(item, NodePath) for item in source):
                return Collection.from_paths(source, types=types, registry=self.registry)
            if all(is_node(item) for item in source):
                return Collection.from_nodes(source, types=types, registry=self.registry)
            msg = "Expected a list of only nodes or only positions"
            raise InvalidArgumentError(msg)

        msg = f"Received an unexpected value {source!r}"
        raise InvalidArgumentError(msg)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            msg = f"'{type(self).__name__}' object has no attribute '{name}'"
            raise AttributeError(msg)
        if name in KindDef.registry:
            return NamedType(name, self.types)
        return get_builder(name)

    @property
    def types(self) -> TypeLattice:
        """The supertype relation collections are typed with."""
        return self.registry.lattice

    def register_methods(
        self,
        methods: Mapping[str, Method],
        type: str | NamedType | None = None,  # noqa: A002
    ) -> None:
        """Add collection methods, see `MethodRegistry.register_methods`."""
        self.registry.register_methods(methods, type)

    def use(self, plugin: Callable[[Codemorph], Any]) -> None:
        """Run ``plugin`` with this instance, at most once per method table.

        Entry points sharing a registry (see `with_parser`) share the record
        of installed plugins.
        """
        self.registry.use(plugin, self)

    def with_parser(self, parser: Any) -> Codemorph:
        """Get an entry point using ``parser`` and sharing this method table."""
        return type(self)(parser, self.registry)

    def match(self, target: NodePath | Mapping[str, Any], pattern: Pattern) -> bool:
        """Check whether a node (or the node at a position) matches ``pattern``.

        Raises:
            InvalidArgumentError: If ``target`` is neither a node nor a position

        """
        if isinstance(target, NodePath):
            target = target.value
        if not isinstance(target, Mapping):
            msg = f"match() needs a node or a position, got {target!r}"
            raise InvalidArgumentError(msg)
        return match_node(target, pattern)


codemorph = Codemorph()
j = codemorph
