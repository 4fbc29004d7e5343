"""Tests for codemorph.paths module."""

import pytest

from codemorph import builders as b
from codemorph.errors import PathError
from codemorph.paths import NodePath


def make_program() -> NodePath:
    """Build ``var a = 1; f(a); if (a) g();`` and return its root path."""
    return NodePath(
        b.program(
            [
                b.variable_declaration(
                    "var", [b.variable_declarator(b.identifier("a"), b.literal(1))]
                ),
                b.expression_statement(b.call_expression(b.identifier("f"), [b.identifier("a")])),
                b.if_statement(
                    b.identifier("a"),
                    b.expression_statement(b.call_expression(b.identifier("g"), [])),
                ),
            ]
        )
    )


class TestNavigation:
    """Test walking down and up the tree."""

    def test_get_descends_through_lists(self) -> None:
        """Test that lists are a path level of their own."""
        root = make_program()
        body = root.get("body")
        assert isinstance(body.value, list)
        statement = root.get("body", 1)
        assert statement.value["type"] == "ExpressionStatement"
        assert statement.name == 1
        assert statement.parent_path is body

    def test_child_paths_are_cached(self) -> None:
        """Test that the same location yields the same path object."""
        root = make_program()
        assert root.get("body", 0) is root.get("body", 0)

    def test_cache_follows_outside_mutation(self) -> None:
        """Test that a location whose value was swapped gets a fresh path."""
        root = make_program()
        first = root.get("body", 0)
        root.value["body"][0] = b.empty_statement()
        fresh = root.get("body", 0)
        assert fresh is not first
        assert fresh.value["type"] == "EmptyStatement"

    def test_missing_location(self) -> None:
        """Test that absent fields and indexes have a None value."""
        root = make_program()
        assert root.get("nothing").value is None
        assert root.get("body", 10).value is None

    def test_parent_skips_lists(self) -> None:
        """Test that parent is the nearest node above the node."""
        root = make_program()
        declarator = root.get("body", 0, "declarations", 0)
        assert declarator.parent.value["type"] == "VariableDeclaration"
        assert declarator.parent.parent is root
        assert root.parent is None

    def test_parent_of_list_path(self) -> None:
        """Test that a list path's parent is the node above its owner."""
        root = make_program()
        declarations = root.get("body", 0, "declarations")
        assert declarations.node["type"] == "VariableDeclaration"
        assert declarations.parent is root

    def test_iter_children(self) -> None:
        """Test iterating over node fields and list elements."""
        root = make_program()
        assert [child.name for child in root.iter_children()] == ["body"]
        assert [child.name for child in root.get("body").iter_children()] == [0, 1, 2]


class TestReplace:
    """Test replacing values."""

    def test_replace_field(self) -> None:
        """Test replacing a node stored in a field."""
        root = make_program()
        callee = root.get("body", 1, "expression", "callee")
        callee.replace(b.identifier("h"))
        assert root.value["body"][1]["expression"]["callee"]["name"] == "h"
        assert callee.value["name"] == "h"

    def test_replace_list_element_with_many(self) -> None:
        """Test splicing several values into a list."""
        root = make_program()
        second = root.get("body", 1)
        third = root.get("body", 2)
        paths = second.replace(b.empty_statement(), b.debugger_statement())
        kinds = [node["type"] for node in root.value["body"]]
        assert kinds == [
            "VariableDeclaration",
            "EmptyStatement",
            "DebuggerStatement",
            "IfStatement",
        ]
        assert [path.name for path in paths] == [1, 2]
        assert third.name == 3
        assert root.get("body", 3) is third

    def test_remove_list_element(self) -> None:
        """Test that replacing with nothing removes the element."""
        root = make_program()
        third = root.get("body", 2)
        root.get("body", 0).replace()
        assert len(root.value["body"]) == 2
        assert third.name == 1

    def test_remove_field(self) -> None:
        """Test that replacing a field with nothing empties it."""
        root = make_program()
        init = root.get("body", 0, "declarations", 0, "init")
        init.replace()
        assert root.value["body"][0]["declarations"][0]["init"] is None

    def test_field_takes_one_value(self) -> None:
        """Test that a field cannot receive several values."""
        root = make_program()
        with pytest.raises(PathError, match="Cannot replace field 'callee' with 2 values"):
            root.get("body", 1, "expression", "callee").replace(
                b.identifier("x"), b.identifier("y")
            )

    def test_root_and_detached_paths(self) -> None:
        """Test that roots and removed paths cannot be modified."""
        root = make_program()
        with pytest.raises(PathError, match="it is a root position"):
            root.replace(b.program([]))
        first = root.get("body", 0)
        first.replace()
        with pytest.raises(PathError, match="it was removed from the tree"):
            first.replace(b.empty_statement())

    def test_repair_after_outside_insert(self) -> None:
        """Test that a path finds its value again after the list moved."""
        root = make_program()
        last = root.get("body", 2)
        root.value["body"].insert(0, b.empty_statement())
        last.replace(b.debugger_statement())
        assert root.value["body"][3]["type"] == "DebuggerStatement"

    def test_value_removed_from_outside(self) -> None:
        """Test that a path whose value left the tree cannot be modified."""
        root = make_program()
        first = root.get("body", 0)
        del root.value["body"][0]
        with pytest.raises(PathError, match="no longer in the tree"):
            first.replace(b.empty_statement())
        with pytest.raises(PathError, match="no longer in the tree"):
            first.insert_after(b.empty_statement())


class TestInsert:
    """Test inserting values next to paths."""

    def test_insert_at(self) -> None:
        """Test inserting into a list path."""
        root = make_program()
        root.get("body").insert_at(0, b.empty_statement())
        assert root.value["body"][0]["type"] == "EmptyStatement"
        assert len(root.value["body"]) == 4

    def test_insert_before_and_after(self) -> None:
        """Test inserting around a list element."""
        root = make_program()
        middle = root.get("body", 1)
        middle.insert_before(b.empty_statement())
        middle.insert_after(b.debugger_statement())
        kinds = [node["type"] for node in root.value["body"]]
        assert kinds == [
            "VariableDeclaration",
            "EmptyStatement",
            "ExpressionStatement",
            "DebuggerStatement",
            "IfStatement",
        ]
        assert middle.name == 2

    def test_insert_beside_field(self) -> None:
        """Test that only list elements have siblings."""
        root = make_program()
        with pytest.raises(PathError, match="its location is not a list"):
            root.get("body", 1, "expression").insert_before(b.empty_statement())
        with pytest.raises(PathError, match="it does not hold a list"):
            root.get("body", 1).insert_at(0, b.empty_statement())


class TestPrune:
    """Test removing values and cleaning up after them."""

    def test_prune_last_declarator(self) -> None:
        """Test that a declaration without declarators is removed too."""
        root = make_program()
        root.get("body", 0, "declarations", 0).prune()
        assert [node["type"] for node in root.value["body"]] == [
            "ExpressionStatement",
            "IfStatement",
        ]

    def test_prune_keeps_other_declarators(self) -> None:
        """Test that a declaration with declarators left is kept."""
        root = make_program()
        declarations = root.value["body"][0]["declarations"]
        declarations.append(b.variable_declarator(b.identifier("b")))
        root.get("body", 0, "declarations", 0).prune()
        assert len(root.value["body"]) == 3
        assert root.value["body"][0]["declarations"][0]["id"]["name"] == "b"

    def test_prune_if_consequent(self) -> None:
        """Test that an if statement without consequent keeps its test."""
        root = make_program()
        root.get("body", 2, "consequent").prune()
        statement = root.value["body"][2]
        assert statement["type"] == "ExpressionStatement"
        assert statement["expression"]["name"] == "a"
