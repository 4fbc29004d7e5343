"""Tests for codemorph.collections.jsx_element module."""

import pytest

from codemorph import builders as b
from codemorph.collection import Collection
from codemorph.collections.jsx_element import get_root_name, has_attributes, has_children
from codemorph.errors import InvalidArgumentError
from codemorph.parser import EsprimaParser

SOURCE = """\
var FooBar = require("XYZ");
<FooBar foo="bar" bar="foo">
  <Child id="1" foo="bar">
     <Child />
     <Baz.Bar />
  </Child>
  <Child id="2" foo="baz"/>
</FooBar>"""


def make_root() -> Collection:
    """Parse the sample source into a root collection."""
    return Collection.from_nodes([EsprimaParser().parse(SOURCE)])


class TestTraversal:
    """Test finding elements and their children."""

    def test_find_elements(self) -> None:
        """Test that find returns a JSXElement collection."""
        elements = make_root().find("JSXElement")
        assert "JSXElement" in elements.get_types()
        assert elements.size() == 5

    def test_find_by_name(self) -> None:
        """Test finding elements by tag name."""
        assert make_root().find_jsx_elements("Child").size() == 3

    def test_find_by_module_name(self) -> None:
        """Test finding elements bound to a required module."""
        elements = make_root().find_jsx_elements_by_module_name("XYZ")
        assert elements.size() == 1
        assert elements.nodes()[0]["openingElement"]["name"]["name"] == "FooBar"

    def test_find_by_module_name_needs_name(self) -> None:
        """Test that an empty module name is rejected."""
        with pytest.raises(InvalidArgumentError, match="needs a name to look for"):
            make_root().find_jsx_elements_by_module_name("")

    def test_child_nodes(self) -> None:
        """Test that child nodes include text."""
        children = make_root().find_jsx_elements("FooBar").child_nodes()
        assert children.size() == 5
        assert "Expression" in children.get_types()

    def test_child_elements(self) -> None:
        """Test that child elements skip text."""
        children = make_root().find_jsx_elements("FooBar").child_elements()
        assert children.size() == 2
        assert "JSXElement" in children.get_types()

    def test_empty_child_elements_are_typed(self) -> None:
        """Test that an empty result is still a JSXElement collection."""
        children = Collection.from_nodes([]).find_jsx_elements("Foo").child_elements()
        assert children.size() == 0
        assert "JSXElement" in children.get_types()


class TestFilters:
    """Test the element filters."""

    def test_has_attributes(self) -> None:
        """Test filtering by literal attribute values."""
        elements = make_root().find_jsx_elements().filter(has_attributes({"foo": "bar"}))
        assert elements.size() == 2

    def test_has_attributes_callback(self) -> None:
        """Test filtering with a callable attribute check."""
        elements = (
            make_root()
            .find_jsx_elements()
            .filter(has_attributes({"foo": lambda value: value in ("bar", "baz")}))
        )
        assert elements.size() == 3

    def test_missing_attribute(self) -> None:
        """Test that every named attribute must be present."""
        elements = make_root().find_jsx_elements().filter(has_attributes({"id": "1", "bar": "x"}))
        assert elements.size() == 0

    def test_has_children(self) -> None:
        """Test filtering by child element name."""
        assert make_root().find_jsx_elements().filter(has_children("Child")).size() == 2


class TestMappings:
    """Test the element mapping helpers."""

    def test_root_names(self) -> None:
        """Test getting the root name of every element's tag."""
        names = [get_root_name(path) for path in make_root().find_jsx_elements().paths()]
        assert "FooBar" in names
        assert "Child" in names
        assert "Baz" in names


class TestMutation:
    """Test editing children."""

    def test_insert_before_child(self) -> None:
        """Test inserting before the second of two identical children."""
        child = b.jsx_element(b.jsx_opening_element(b.jsx_identifier("Bar"), [], True))
        new_child = b.jsx_element(b.jsx_opening_element(b.jsx_identifier("Baz"), [], True))
        text = b.jsx_text("\n  ", "\n  ")
        element = b.jsx_element(
            b.jsx_opening_element(b.jsx_identifier("Foo")),
            b.jsx_closing_element(b.jsx_identifier("Foo")),
            [text, child, text, child, b.jsx_text("\n", "\n")],
        )

        Collection.from_nodes([element]).child_elements().at(1).insert_before(new_child)

        assert len(element["children"]) == 6
        assert element["children"][3] is new_child

    def test_printed_element(self) -> None:
        """Test printing an element built from scratch."""
        element = b.jsx_element(
            b.jsx_opening_element(
                b.jsx_identifier("Foo"),
                [b.jsx_attribute(b.jsx_identifier("title"), b.literal("a"))],
            ),
            b.jsx_closing_element(b.jsx_identifier("Foo")),
            [b.jsx_text("hi", "hi")],
        )
        assert Collection.from_nodes([element]).to_source() == '<Foo title="a">hi</Foo>'
