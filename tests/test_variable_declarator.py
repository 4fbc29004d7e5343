"""Tests for codemorph.collections.variable_declarator module."""

import pytest

from codemorph.collection import Collection
from codemorph.collections.variable_declarator import requires_module
from codemorph.errors import UnsupportedOperationError
from codemorph.parser import EsprimaParser

SOURCE = """
var foo = 42;
var bar = require("module");
var baz = require("module2");
function func() {
  var x = bar;
  bar.someMethod();
  func1(bar);
}
function func1(bar) {
  var bar = 21;
}
foo.bar();
foo[bar]();
bar.foo();
function func() {
  var blah;
  var obj = {
    blah: 4,
    blah() {},
  };
  obj.blah = 3;
  class A {
    blah() {}
  }
}
<Component foo={foo} />
"""


def make_root(source: str = SOURCE) -> Collection:
    """Parse ``source`` into a root collection."""
    return Collection.from_nodes([EsprimaParser().parse(source)])


class TestTraversal:
    """Test finding declarators."""

    def test_method_on_empty_collection(self) -> None:
        """Test that the finder is offered on an empty collection."""
        assert "find_variable_declarators" in dir(Collection.from_nodes([]))

    def test_find_all(self) -> None:
        """Test finding every declarator."""
        declarators = make_root().find_variable_declarators()
        assert "VariableDeclarator" in declarators.get_types()
        assert declarators.size() == 7

    def test_find_by_name(self) -> None:
        """Test finding declarators of one name."""
        assert make_root().find_variable_declarators("bar").size() == 2


class TestRequiresModule:
    """Test the require filter."""

    def test_any_module(self) -> None:
        """Test keeping every require declarator."""
        declarators = make_root().find_variable_declarators().filter(requires_module())
        assert declarators.size() == 2

    def test_module_name(self) -> None:
        """Test keeping the declarators loading one module."""
        declarators = make_root().find_variable_declarators().filter(requires_module("module"))
        assert declarators.size() == 1
        assert declarators.nodes()[0]["id"]["name"] == "bar"

    def test_module_names(self) -> None:
        """Test keeping declarators loading any of several modules."""
        declarators = (
            make_root()
            .find_variable_declarators()
            .filter(requires_module(["module", "module2"]))
        )
        assert declarators.size() == 2


class TestRenameTo:
    """Test renaming declared variables."""

    def test_rename_considers_scope(self) -> None:
        """Test that shadowing declarations and properties are left alone."""
        root = make_root()
        root.find_variable_declarators().filter(requires_module("module")).rename_to("xyz")
        assert root.find("Identifier", {"name": "xyz"}).size() == 6

    def test_property_names_are_not_renamed(self) -> None:
        """Test that keys and member properties keep their names."""
        root = make_root()
        root.find_variable_declarators("blah").rename_to("blarg")
        assert root.find("Identifier", {"name": "blarg"}).size() == 1

    def test_shorthand_property(self) -> None:
        """Test that a shorthand property is expanded to keep its key."""
        root = make_root("var foo = 42;\nvar obj2 = {\n  foo,\n};\n")
        root.find_variable_declarators("foo").rename_to("newFoo")

        assert root.find("Identifier", {"name": "newFoo"}).size() == 2
        assert root.find("Identifier", {"name": "foo"}).size() == 1
        properties = root.find("Property")
        assert properties.filter(lambda path: not path.value["shorthand"]).size() == 1
        assert properties.filter(lambda path: path.value["shorthand"]).size() == 0

    def test_jsx_attribute_name_is_kept(self) -> None:
        """Test that a JSX prop with the variable's name is not renamed."""
        root = make_root()
        root.find_variable_declarators("foo").rename_to("xyz")
        assert root.find("JSXIdentifier", {"name": "foo"}).size() == 1
        assert root.find("Identifier", {"name": "xyz"}).size() == 4

    def test_renamed_source(self) -> None:
        """Test the printed result of a rename."""
        root = make_root("var a = 1;\nconsole.log(a, { a });\n")
        root.find_variable_declarators("a").rename_to("b")
        assert root.to_source() == "var b = 1;\nconsole.log(b, { a: b });\n"

    def test_destructuring_declarators_are_skipped(self) -> None:
        """Test that pattern declarators are left alone while others are renamed."""
        root = make_root("var {a} = obj;\nvar c = 1;\nc;\n")
        root.find_variable_declarators().rename_to("z")
        assert root.to_source() == "var {a} = obj;\nvar z = 1;\nz;\n"

    def test_not_offered_on_other_kinds(self) -> None:
        """Test that rename_to is typed to declarators."""
        root = make_root()
        identifiers = root.find("Identifier")
        assert "rename_to" in dir(identifiers)
        with pytest.raises(UnsupportedOperationError, match="only defined for: VariableDeclarator"):
            identifiers.rename_to("x")
