"""Building nodes from source snippets with ``${name}`` placeholders."""

from __future__ import annotations

import re
import textwrap
from typing import Any

from codemorph.errors import InvalidArgumentError
from codemorph.nodes import Node, child_fields, is_node
from codemorph.parser import get_parser
from codemorph.types import is_kind

_PLACEHOLDER = re.compile(r"\$\{(\w+)\}")


class Template:
    """Parses snippets and fills their placeholders.

    Placeholders are written ``${name}`` and filled from keyword arguments:

    - a string is pasted into the snippet text before parsing
    - a node replaces the identifier standing in for the placeholder, or
      the whole statement when the node is a statement and the placeholder
      stands alone as an expression statement
    - a list of nodes is spliced into the surrounding list (parameters,
      arguments, array elements, declarations, properties, statements)

    Usage:
        template = Template()
        template.statement("const ${name} = require(${source});",
                           name=b.identifier("x"), source=b.literal("y"))
    """

    def __init__(self, parser: Any = None) -> None:
        """Initialize the template helper.

        Args:
            parser: Parser name or object used for snippets

        """
        self.parser = get_parser(parser)

    def statements(self, source: str, /, **values: Any) -> list[Node]:
        """Parse ``source`` into a list of statements."""
        return self._parse(source, values)["body"]

    def statement(self, source: str, /, **values: Any) -> Node:
        """Parse ``source`` into exactly one statement.

        Raises:
            InvalidArgumentError: If the snippet holds more or fewer statements

        """
        body = self.statements(source, **values)
        if len(body) != 1:
            msg = f"Expected one statement in template, found {len(body)}"
            raise InvalidArgumentError(msg)
        return body[0]

    def expression(self, source: str, /, **values: Any) -> Node:
        """Parse ``source`` into an expression."""
        program = self._parse(f"({textwrap.dedent(source).strip()})", values)
        body = program["body"]
        if len(body) != 1 or not is_kind(body[0], "ExpressionStatement"):
            msg = f"Template is not an expression: {source!r}"
            raise InvalidArgumentError(msg)
        return body[0]["expression"]

    def _parse(self, source: str, values: dict[str, Any]) -> Node:
        placeholders: dict[str, Any] = {}

        def fill(match: re.Match[str]) -> str:
            name = match.group(1)
            if name not in values:
                msg = f"No value given for template placeholder '{name}'"
                raise InvalidArgumentError(msg)
            value = values[name]
            if isinstance(value, str):
                return value
            if not (is_node(value) or isinstance(value, list)):
                msg = f"Template value '{name}' must be a node, a list or a string"
                raise InvalidArgumentError(msg)
            identifier = f"__tpl{len(placeholders)}__"
            placeholders[identifier] = value
            return identifier

        text = _PLACEHOLDER.sub(fill, textwrap.dedent(source).strip("\n"))
        program = self.parser.parse(text)
        if placeholders:
            _substitute(program, placeholders)
        return program


def _placeholder(node: Any, placeholders: dict[str, Any]) -> str | None:
    if node_type := (node.get("type") if is_node(node) else None):
        if node_type in ("Identifier", "JSXIdentifier") and node.get("name") in placeholders:
            return node["name"]
        if node_type == "ExpressionStatement":
            name = _placeholder(node.get("expression"), placeholders)
            if name is not None and _is_statement_value(placeholders[name]):
                return name
    return None


def _is_statement_value(value: Any) -> bool:
    if isinstance(value, list):
        return all(is_kind(item, "Statement") for item in value)
    return is_kind(value, "Statement")


def _substitute(node: Any, placeholders: dict[str, Any]) -> None:
    for key, value in list(child_fields(node)):
        if isinstance(value, list):
            items: list[Any] = []
            changed = False
            for item in value:
                name = _placeholder(item, placeholders)
                if name is None:
                    if is_node(item):
                        _substitute(item, placeholders)
                    items.append(item)
                    continue
                changed = True
                replacement = placeholders[name]
                items.extend(replacement if isinstance(replacement, list) else [replacement])
            if changed:
                node[key] = items
            continue

        name = _placeholder(value, placeholders)
        if name is None:
            _substitute(value, placeholders)
            continue
        replacement = placeholders[name]
        if isinstance(replacement, list):
            msg = f"Cannot insert a list where a single node is expected ('{key}')"
            raise InvalidArgumentError(msg)
        node[key] = replacement
