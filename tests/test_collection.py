"""Tests for codemorph.collection module."""

import pytest

from codemorph import builders as b
from codemorph.collection import Collection, positional_callback
from codemorph.errors import InvalidArgumentError, UnsupportedOperationError
from codemorph.parser import EsprimaParser
from codemorph.paths import NodePath
from codemorph.types import NamedType


def call_paths() -> Collection:
    """Build a collection of the two arguments of ``f(a, 1)``."""
    call = b.call_expression(b.identifier("f"), [b.identifier("a"), b.literal(1)])
    root = NodePath(call)
    return Collection([root.get("arguments", 0), root.get("arguments", 1)])


class TestConstruction:
    """Test creating collections."""

    def test_rejects_non_paths(self) -> None:
        """Test that every element must be a NodePath."""
        with pytest.raises(InvalidArgumentError, match="must be a NodePath"):
            Collection([b.identifier("a")])

    def test_from_nodes_rejects_non_nodes(self) -> None:
        """Test that from_nodes only wraps nodes."""
        with pytest.raises(InvalidArgumentError, match="must be a node"):
            Collection.from_nodes([{"name": "a"}])

    def test_from_nodes_creates_roots(self) -> None:
        """Test that each node gets its own root position."""
        nodes = [b.identifier("a"), b.identifier("b")]
        collection = Collection.from_nodes(nodes)
        assert collection.nodes() == nodes
        assert all(path.parent_path is None for path in collection.paths())
        assert collection.parent is None

    def test_repr(self) -> None:
        """Test the collection repr."""
        collection = Collection.from_nodes([b.literal(1)])
        assert repr(collection) == "Collection(size=1, types=['Literal', 'Expression', 'Node'])"


class TestTypes:
    """Test inferring and declaring collection types."""

    def test_single_kind(self) -> None:
        """Test that a uniform collection has the kind and its supertypes."""
        collection = Collection.from_nodes([b.identifier("a"), b.identifier("b")])
        assert collection.get_types() == ["Identifier", "Expression", "Pattern", "Node"]
        assert collection.is_of_type("Pattern")
        assert collection.is_of_type(NamedType("Identifier"))
        assert not collection.is_of_type("Literal")

    def test_mixed_kinds(self) -> None:
        """Test that mixed collections keep the shared supertypes."""
        assert call_paths().get_types() == ["Expression", "Node"]

    def test_empty_collection(self) -> None:
        """Test that empty collections get the default type."""
        assert Collection.from_nodes([]).get_types() == ["Node"]

    def test_positions_without_nodes(self) -> None:
        """Test that positions outside any node have no types."""
        assert Collection([NodePath([])]).get_types() == []

    def test_list_positions(self) -> None:
        """Test that a list position is typed by the node owning it."""
        root = NodePath(b.program([]))
        assert Collection([root.get("body")]).get_types() == ["Program", "Node"]

    def test_explicit_type(self) -> None:
        """Test that a single explicit kind is expanded."""
        collection = Collection.from_nodes([b.identifier("a")], types="Expression")
        assert collection.get_types() == ["Expression", "Node"]

    def test_explicit_type_list(self) -> None:
        """Test that an explicit list is used as given."""
        collection = Collection.from_nodes([b.identifier("a")], types=["Identifier", "Node"])
        assert collection.get_types() == ["Identifier", "Node"]


class TestQueries:
    """Test the built-in collection methods."""

    def test_filter(self) -> None:
        """Test filtering with callbacks of different arities."""
        collection = call_paths()
        identifiers = collection.filter(lambda path: path.value["type"] == "Identifier")
        assert identifiers.size() == 1
        assert identifiers.parent is collection
        assert identifiers.get_types() == ["Identifier", "Expression", "Pattern", "Node"]
        assert collection.filter(lambda path, index: index == 1).nodes()[0]["value"] == 1
        assert collection.filter(lambda path, index, paths: len(paths) == 2).size() == 2

    def test_for_each(self) -> None:
        """Test visiting every position in order."""
        collection = call_paths()
        seen: list[int] = []
        assert collection.for_each(lambda path, index: seen.append(index)) is collection
        assert seen == [0, 1]

    def test_some_and_every(self) -> None:
        """Test the boolean queries."""
        collection = call_paths()
        assert collection.some(lambda path: path.value["type"] == "Literal")
        assert not collection.every(lambda path: path.value["type"] == "Literal")
        assert collection.every(lambda path: path.parent.value["type"] == "CallExpression")

    def test_map_deduplicates(self) -> None:
        """Test that mapped positions are deduplicated by identity."""
        parents = call_paths().map(lambda path: path.parent)
        assert parents.size() == 1
        assert parents.get_types()[0] == "CallExpression"

    def test_map_flattens_and_drops_none(self) -> None:
        """Test that sequences are flattened and None is skipped."""
        collection = call_paths()
        mapped = collection.map(
            lambda path, index: [path, path.parent] if index == 0 else None,
        )
        assert mapped.size() == 2

    def test_at(self) -> None:
        """Test selecting single positions."""
        collection = call_paths()
        assert collection.at(0).nodes()[0]["name"] == "a"
        assert collection.at(-1).nodes()[0]["value"] == 1
        assert collection.at(5).size() == 0

    def test_get(self) -> None:
        """Test descending from the first position."""
        call = b.call_expression(b.identifier("f"), [])
        assert Collection.from_nodes([call]).get("callee", "name").value == "f"
        with pytest.raises(IndexError, match="no paths"):
            Collection.from_nodes([]).get("callee")

    def test_get_ast(self) -> None:
        """Test reaching the root collection's positions."""
        program = EsprimaParser().parse("a(b);")
        root = Collection.from_nodes([program])
        derived = root.find("Identifier").at(1)
        assert derived.get_ast() == root.paths()

    def test_len_and_iter(self) -> None:
        """Test the container protocol."""
        collection = call_paths()
        assert len(collection) == 2
        assert list(collection) == collection.paths()


class TestToSource:
    """Test printing from collections."""

    def test_derived_prints_root(self) -> None:
        """Test that a derived collection prints the whole tree."""
        source = "var answer = 42;\n"
        root = Collection.from_nodes([EsprimaParser().parse(source)])
        assert root.find("Literal").to_source() == source

    def test_several_roots(self) -> None:
        """Test that several roots print to a list."""
        collection = Collection.from_nodes([b.identifier("a"), b.literal("b")])
        assert collection.to_source(quote="single") == ["a", "'b'"]


class TestDispatch:
    """Test calling registered methods."""

    def test_registered_method(self) -> None:
        """Test that registered methods are reachable as attributes."""
        collection = Collection.from_nodes([b.program([])])
        assert "find" in dir(collection)
        assert collection.find("Identifier").size() == 0

    def test_unsupported_type(self) -> None:
        """Test the error for a typed method on the wrong collection."""
        collection = Collection.from_nodes([b.literal(1)])
        with pytest.raises(UnsupportedOperationError) as exc_info:
            collection.rename_to("x")
        assert str(exc_info.value) == (
            "You have a collection of type [Literal, Expression, Node]. "
            "'rename_to' is only defined for: VariableDeclarator."
        )

    def test_unknown_attribute(self) -> None:
        """Test that unknown names raise AttributeError."""
        with pytest.raises(AttributeError, match="no attribute 'nope'"):
            Collection.from_nodes([]).nope()


class TestPositionalCallback:
    """Test adapting callbacks to their arity."""

    def test_arities(self) -> None:
        """Test that extra arguments are dropped."""
        assert positional_callback(lambda: 0)(1, 2, 3) == 0
        assert positional_callback(lambda a: a)(1, 2, 3) == 1
        assert positional_callback(lambda *args: args)(1, 2, 3, 4) == (1, 2, 3)

    def test_builtin(self) -> None:
        """Test that callables without a signature get one argument."""
        assert positional_callback(len)([1, 2], 0, []) == 2
