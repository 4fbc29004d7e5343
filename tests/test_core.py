"""Tests for codemorph.core module."""

import pytest

from codemorph import builders as b
from codemorph.collection import Collection
from codemorph.core import Codemorph, j
from codemorph.errors import InvalidArgumentError, SourceParseError
from codemorph.paths import NodePath
from codemorph.registry import MethodRegistry
from codemorph.types import NamedType


class TestCall:
    """Test building collections from the entry point."""

    def test_source(self) -> None:
        """Test that source text yields the program position."""
        root = j("var a = 1;")
        assert isinstance(root, Collection)
        assert root.size() == 1
        assert root.get_types()[0] == "Program"
        assert root.to_source() == "var a = 1;"

    def test_invalid_source(self) -> None:
        """Test that unparseable text raises SourceParseError."""
        with pytest.raises(SourceParseError):
            j("var = ;")

    def test_node(self) -> None:
        """Test wrapping a single node."""
        node = b.identifier("a")
        assert j(node).nodes() == [node]

    def test_path(self) -> None:
        """Test wrapping a single position."""
        path = NodePath(b.identifier("a"))
        assert j(path).paths() == [path]

    def test_lists(self) -> None:
        """Test wrapping lists of nodes or positions."""
        nodes = [b.identifier("a"), b.literal(1)]
        assert j(nodes).nodes() == nodes
        paths = [NodePath(node) for node in nodes]
        assert j(paths).paths() == paths

    def test_explicit_types(self) -> None:
        """Test passing collection types."""
        assert j([], "Identifier").get_types()[0] == "Identifier"

    def test_mixed_list(self) -> None:
        """Test that lists mixing nodes and positions are rejected."""
        node = b.identifier("a")
        with pytest.raises(InvalidArgumentError, match="only nodes or only positions"):
            j([node, NodePath(node)])

    def test_unexpected_value(self) -> None:
        """Test that other values are rejected."""
        with pytest.raises(InvalidArgumentError, match="Received an unexpected value 42"):
            j(42)


class TestAttributes:
    """Test the toolbox reachable through attributes."""

    def test_named_types(self) -> None:
        """Test that kind names resolve to NamedType."""
        assert j.Identifier == NamedType("Identifier")
        assert j.Expression.check(b.identifier("a"))
        assert not j.Statement.check(b.identifier("a"))

    def test_builders(self) -> None:
        """Test that snake_case names resolve to builders."""
        assert j.identifier("a") == {"type": "Identifier", "name": "a"}
        with pytest.raises(AttributeError, match="No builder named 'nothing'"):
            j.nothing  # noqa: B018

    def test_private_names(self) -> None:
        """Test that private names are not looked up."""
        with pytest.raises(AttributeError):
            j._missing  # noqa: B018

    def test_helpers(self) -> None:
        """Test the filter and mapping namespaces."""
        assert callable(j.filters.VariableDeclarator.requires_module)
        assert callable(j.filters.JSXElement.has_attributes)
        assert callable(j.mappings.JSXElement.get_root_name)

    def test_template(self) -> None:
        """Test that templates use the entry point's parser."""
        statement = j.template.statement("throw ${value};", value=b.literal(1))
        assert statement["type"] == "ThrowStatement"
        assert statement["argument"]["value"] == 1

    def test_repr(self) -> None:
        """Test the entry point repr."""
        assert repr(j) == "Codemorph(parser='esprima')"


class TestConfiguration:
    """Test parsers, methods and plugins."""

    def test_with_parser(self) -> None:
        """Test switching parsers while sharing the registry."""
        script = j.with_parser("esprima-script")
        assert script.parser.name == "esprima-script"
        assert script.registry is j.registry
        assert script("with (o) { x; }").size() == 1

    def test_unknown_parser(self) -> None:
        """Test that unknown parser names are rejected."""
        with pytest.raises(InvalidArgumentError, match="Unknown parser"):
            Codemorph("nope")

    def test_register_methods(self) -> None:
        """Test adding methods on a private registry."""
        local = Codemorph(registry=MethodRegistry())
        local.register_methods(
            {"names": lambda collection: [node["name"] for node in collection.nodes()]}
        )
        assert local([b.identifier("a"), b.identifier("b")]).names() == ["a", "b"]
        assert "names" not in MethodRegistry.default().names()

    def test_use_once(self) -> None:
        """Test that a plugin runs once and receives the instance."""
        local = Codemorph(registry=MethodRegistry())
        received: list[Codemorph] = []

        def plugin(instance: Codemorph) -> None:
            received.append(instance)

        local.use(plugin)
        local.use(plugin)
        assert received == [local]

    def test_use_once_across_parsers(self) -> None:
        """Test that entry points sharing a registry share installed plugins."""
        base = Codemorph(registry=MethodRegistry())
        received: list[Codemorph] = []

        def plugin(instance: Codemorph) -> None:
            received.append(instance)
            instance.register_methods({"count": lambda collection: collection.size()})

        base.use(plugin)
        script = base.with_parser("esprima-script")
        script.use(plugin)
        assert received == [base]
        assert script("a; b;").count() == 1

    def test_types(self) -> None:
        """Test that the lattice comes from the registry."""
        assert j.types is j.registry.lattice
        assert "Expression" in j.types.supertypes("Identifier")


class TestMatch:
    """Test structural matching through the entry point."""

    def test_match_node_and_path(self) -> None:
        """Test matching nodes and positions."""
        node = b.identifier("a")
        assert j.match(node, {"name": "a"})
        assert j.match(NodePath(node), {"type": "Identifier"})
        assert not j.match(node, {"name": "b"})

    def test_match_rejects_other_values(self) -> None:
        """Test that only nodes and positions can be matched."""
        with pytest.raises(InvalidArgumentError, match="needs a node or a position"):
            j.match("a", {"name": "a"})
