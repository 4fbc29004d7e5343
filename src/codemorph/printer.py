"""Source printer that reuses the original text of unmodified nodes.

Printing a node picks the first strategy that applies:

1. The node and everything below it are unchanged since parsing: its
   original source slice is returned as is.
2. The node's own fields are unchanged but some children are not: the
   original slice is patched, splicing the printed children into their
   original ranges. Lists that grew or shrank are rebuilt over the range
   of their original elements, reusing the original separators next to
   surviving elements.
3. Otherwise the node is printed from scratch, still reusing the text of
   any unchanged child.

All printing methods return text whose continuation lines are indented
relative to the line the node starts on; callers add their own indentation
when they embed it.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from typing import Any, TypeAlias

from codemorph.builders import builder_name
from codemorph.errors import InvalidArgumentError
from codemorph.nodes import META_KEYS, is_node
from codemorph.options import PrintOptions
from codemorph.types import is_kind

logger = logging.getLogger(__name__)

Edit: TypeAlias = "tuple[int, int, str]"

STATEMENT_LISTS = frozenset(
    {
        ("Program", "body"),
        ("BlockStatement", "body"),
        ("ClassBody", "body"),
        ("SwitchCase", "consequent"),
        ("SwitchStatement", "cases"),
    }
)
_LIST_SEPARATORS = {
    ("JSXElement", "children"): "",
    ("JSXOpeningElement", "attributes"): " ",
}
_BINARY_PRECEDENCE = {
    "||": 3,
    "&&": 4,
    "|": 5,
    "^": 6,
    "&": 7,
    "==": 8,
    "!=": 8,
    "===": 8,
    "!==": 8,
    "<": 9,
    ">": 9,
    "<=": 9,
    ">=": 9,
    "in": 9,
    "instanceof": 9,
    "<<": 10,
    ">>": 10,
    ">>>": 10,
    "+": 11,
    "-": 11,
    "*": 12,
    "/": 12,
    "%": 12,
    "**": 13,
}
# Fields whose expression is a comma separated list item
_LIST_ITEM_FIELDS = frozenset(
    {
        ("CallExpression", "arguments"),
        ("NewExpression", "arguments"),
        ("ArrayExpression", "elements"),
        ("Property", "value"),
        ("VariableDeclarator", "init"),
        ("SpreadElement", "argument"),
        ("AssignmentExpression", "right"),
        ("AssignmentPattern", "right"),
        ("YieldExpression", "argument"),
        ("ExportDefaultDeclaration", "declaration"),
    }
)
_LEFTMOST_CHILD = {
    "CallExpression": "callee",
    "MemberExpression": "object",
    "TaggedTemplateExpression": "tag",
    "BinaryExpression": "left",
    "LogicalExpression": "left",
    "AssignmentExpression": "left",
    "ConditionalExpression": "test",
}
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


def print_node(node: Any, options: PrintOptions | None = None) -> str:
    """Print ``node`` back to source text.

    Args:
        node: Root of the tree to print
        options: Formatting of generated code

    Returns:
        The source text; identical to the parsed text if nothing changed

    """
    return Printer(options, getattr(node, "source", None)).print(node)


def infer_tab_width(source: str, default: int = 4) -> int:
    """Guess the indentation width used by ``source``."""
    deltas: Counter[int] = Counter()
    previous = 0
    for line in source.splitlines():
        stripped = line.lstrip(" ")
        if not stripped.strip() or stripped.startswith(("\t", "*")):
            continue
        width = len(line) - len(stripped)
        if width > previous:
            deltas[width - previous] += 1
        previous = width
    return deltas.most_common(1)[0][0] if deltas else default


def precedence(node: Any) -> int:
    """Get the binding strength of an expression; higher binds tighter."""
    kind = node.get("type")
    if kind == "SequenceExpression":
        return 0
    if kind in ("AssignmentExpression", "ArrowFunctionExpression", "YieldExpression"):
        return 1
    if kind == "ConditionalExpression":
        return 2
    if kind in ("LogicalExpression", "BinaryExpression"):
        return _BINARY_PRECEDENCE.get(node.get("operator"), 3)
    if kind in ("UnaryExpression", "AwaitExpression"):
        return 14
    if kind == "UpdateExpression":
        return 14 if node.get("prefix") else 15
    if kind in ("CallExpression", "NewExpression", "MemberExpression", "TaggedTemplateExpression"):
        return 17
    return 19


def needs_parens(child: Any, parent: Any, key: str) -> bool:
    """Check whether ``child`` must be parenthesized in ``parent[key]``."""
    if not (is_node(child) and is_node(parent) and is_kind(child, "Expression")):
        return False
    if is_kind(child, "JSXElement") or child["type"] in ("JSXText", "JSXExpressionContainer"):
        return False

    strength = precedence(child)
    kind = parent["type"]
    if kind in ("BinaryExpression", "LogicalExpression"):
        parent_strength = precedence(parent)
        if strength != parent_strength:
            return strength < parent_strength
        return key == ("left" if parent.get("operator") == "**" else "right")
    if kind in ("UnaryExpression", "AwaitExpression"):
        return strength < 14
    if kind == "UpdateExpression":
        return strength < 17
    if (kind, key) in (("MemberExpression", "object"), ("TaggedTemplateExpression", "tag")):
        number = child["type"] == "Literal" and type(child.get("value")) in (int, float)
        return strength < 17 or number
    if kind in ("CallExpression", "NewExpression") and key == "callee":
        if strength < 17:
            return True
        return kind == "NewExpression" and _contains_call(child)
    if kind == "ConditionalExpression":
        return strength <= 2 if key == "test" else strength < 1
    if kind == "ArrowFunctionExpression" and key == "body":
        return is_kind(child, "ObjectExpression") or strength < 1
    if kind == "ExpressionStatement" and key == "expression":
        return _starts_ambiguously(child)
    if (kind, key) in _LIST_ITEM_FIELDS:
        return strength < 1
    return False


def _contains_call(node: Any) -> bool:
    while is_node(node):
        if node["type"] == "CallExpression":
            return True
        node = node.get("object") if node["type"] == "MemberExpression" else None
    return False


def _starts_ambiguously(node: Any) -> bool:
    """Check whether a statement starting with ``node`` reads as a declaration."""
    while is_node(node):
        if node["type"] in ("ObjectExpression", "FunctionExpression", "ClassExpression"):
            return True
        if node["type"] == "SequenceExpression":
            node = (node.get("expressions") or [None])[0]
        elif node["type"] == "UpdateExpression" and not node.get("prefix"):
            node = node.get("argument")
        else:
            node = node.get(_LEFTMOST_CHILD.get(node["type"], ""))
    return False


def _range(node: Any) -> tuple[int, int] | None:
    if not is_node(node):
        return None
    value = node.get("range")
    if isinstance(value, (list, tuple)) and len(value) == 2:
        return value[0], value[1]
    return None


def _same_scalar(value: Any, old: Any) -> bool:
    return value is old or (type(value) is type(old) and value == old)


def _line_indent(source: str, position: int) -> str:
    start = source.rfind("\n", 0, position) + 1
    end = start
    while end < len(source) and source[end] in " \t":
        end += 1
    return source[start:end]


def _leading_whitespace(line: str) -> str:
    return line[: len(line) - len(line.lstrip(" \t"))]


def _dedent_tail(text: str, base: str) -> str:
    if not base or "\n" not in text:
        return text
    first, *rest = text.split("\n")
    return "\n".join([first, *(line.removeprefix(base) for line in rest)])


def _indent_tail(text: str, base: str) -> str:
    if not base or "\n" not in text:
        return text
    first, *rest = text.split("\n")
    return "\n".join([first, *(base + line if line.strip() else line for line in rest)])


def _parenthesized(source: str, start: int, end: int) -> bool:
    before = source[:start].rstrip()
    after = source[end:].lstrip()
    return before.endswith("(") and after.startswith(")")


class Printer:
    """Prints one tree; see the module docstring for the strategies."""

    def __init__(self, options: PrintOptions | None = None, source: str | None = None) -> None:
        """Initialize the printer.

        Args:
            options: Formatting of generated code
            source: Original text, used to infer the indentation width

        """
        self.options = options or PrintOptions()
        width = self.options.tab_width or (infer_tab_width(source) if source else 4)
        self.indent_unit = "\t" if self.options.use_tabs else " " * width
        self.nl = self.options.line_terminator
        self._reusable: dict[int, bool] = {}

    def print(self, node: Any) -> str:
        """Print ``node`` with the best strategy available."""
        if node is None:
            return ""
        if not is_node(node):
            msg = f"Cannot print {node!r}: it is not a node"
            raise InvalidArgumentError(msg)
        if self.is_reusable(node):
            return self._reuse(node)
        patched = self._patch(node)
        if patched is not None:
            return patched
        return self._generic(node)

    def print_statement(self, node: Any) -> str:
        """Print a node standing in a statement position."""
        text = self.print(node)
        if is_kind(node, "VariableDeclaration") and not text.rstrip().endswith(";"):
            text += ";"
        return text

    # Reuse

    def is_reusable(self, node: Any) -> bool:
        """Check whether ``node`` and its subtree are unchanged since parsing."""
        key = id(node)
        if key not in self._reusable:
            self._reusable[key] = False
            self._reusable[key] = self._check_reusable(node)
        return self._reusable[key]

    def _check_reusable(self, node: Any) -> bool:
        original = getattr(node, "original", None)
        if original is None or getattr(node, "source", None) is None:
            return False
        if _range(original) is None or node.keys() != original.keys():
            return False

        for key, value in node.items():
            old = original[key]
            if key in META_KEYS:
                if key == "range" and value != old:
                    return False
            elif isinstance(value, list) or isinstance(old, list):
                if not (isinstance(value, list) and isinstance(old, list)):
                    return False
                if len(value) != len(old):
                    return False
                for item, old_item in zip(value, old, strict=True):
                    if item is not old_item or (is_node(item) and not self.is_reusable(item)):
                        return False
            elif is_node(value) or is_node(old):
                if value is not old or not self.is_reusable(value):
                    return False
            elif not _same_scalar(value, old):
                return False
        return True

    def _reuse(self, node: Any) -> str:
        source = node.source
        start, end = _range(node.original)
        return _dedent_tail(source[start:end], _line_indent(source, start))

    # Patching

    def _patch(self, node: Any) -> str | None:
        original = getattr(node, "original", None)
        source = getattr(node, "source", None)
        bounds = _range(original)
        if original is None or source is None or bounds is None:
            return None
        if node.keys() != original.keys() or node["type"] == "TemplateLiteral":
            return None
        if _range(node) != bounds:
            return None

        edits: list[Edit] = []
        for key, value in node.items():
            if key in META_KEYS:
                continue
            old = original[key]
            if isinstance(value, list) or isinstance(old, list):
                if not (isinstance(value, list) and isinstance(old, list)):
                    return None
                list_edits = self._patch_list(node, key, value, old, source)
                if list_edits is None:
                    return None
                edits.extend(list_edits)
            elif is_node(value) or is_node(old):
                if value is old and self.is_reusable(value):
                    continue
                edit = self._patch_child(node, key, value, old, source)
                if edit is None:
                    return None
                edits.append(edit)
            elif not _same_scalar(value, old):
                return None

        start, end = bounds
        parts: list[str] = []
        cursor = start
        for edit_start, edit_end, text in sorted(edits, key=lambda edit: edit[0]):
            if edit_start < cursor or edit_end > end:
                return None
            parts.append(source[cursor:edit_start])
            parts.append(text)
            cursor = edit_end
        parts.append(source[cursor:end])
        logger.debug("Patched %s at %s with %d edits", node["type"], bounds, len(edits))
        return _dedent_tail("".join(parts), _line_indent(source, start))

    def _patch_child(self, node: Any, key: str, value: Any, old: Any, source: str) -> Edit | None:
        bounds = _range(old)
        if value is None or bounds is None or getattr(old, "source", None) is not source:
            return None
        start, end = bounds
        if is_kind(value, "Statement"):
            text = self.print_statement(value)
        else:
            text = self.print(value)
            if needs_parens(value, node, key) and not _parenthesized(source, start, end):
                text = f"({text})"
        return start, end, _indent_tail(text, _line_indent(source, start))

    def _patch_list(
        self,
        node: Any,
        key: str,
        items: list[Any],
        old_items: list[Any],
        source: str,
    ) -> list[Edit] | None:
        if len(items) != len(old_items) or any(
            item is not old for item, old in zip(items, old_items, strict=True)
        ):
            return self._patch_region(node, key, items, old_items, source)

        edits: list[Edit] = []
        for item in items:
            if not is_node(item) or self.is_reusable(item):
                continue
            bounds = _range(getattr(item, "original", None))
            if bounds is None or getattr(item, "source", None) is not source:
                return None
            text = self._print_element(node, key, item)
            text = _indent_tail(text, _line_indent(source, bounds[0]))
            edits.append((bounds[0], bounds[1], text))
        return edits

    def _patch_region(
        self,
        node: Any,
        key: str,
        items: list[Any],
        old_items: list[Any],
        source: str,
    ) -> list[Edit] | None:
        if not old_items or any(item is None for item in items):
            return None
        ranges = [_range(old) for old in old_items]
        if any(
            bounds is None or getattr(old, "source", None) is not source
            for bounds, old in zip(ranges, old_items, strict=True)
        ):
            return None

        region_start = ranges[0][0]
        region_end = ranges[-1][1]
        positions = {id(old): index for index, old in enumerate(old_items)}
        gaps = [source[ranges[i][1] : ranges[i + 1][0]] for i in range(len(ranges) - 1)]
        used: set[int] = set()

        if (node["type"], key) in STATEMENT_LISTS:
            default = self.nl + _line_indent(source, region_start)
        elif (node["type"], key) in _LIST_SEPARATORS:
            default = _LIST_SEPARATORS[node["type"], key]
        else:
            default = gaps[0] if gaps else ", "

        def separator(before: Any, after: Any) -> str:
            index = positions.get(id(after))
            if index is not None and index > 0 and index - 1 not in used:
                used.add(index - 1)
                return gaps[index - 1]
            index = positions.get(id(before))
            if index is not None and index < len(gaps) and index not in used:
                used.add(index)
                return gaps[index]
            return default

        line_prefix = source[source.rfind("\n", 0, region_start) + 1 : region_start]
        out = ""
        for position, item in enumerate(items):
            if position:
                out += separator(items[position - 1], item)
            indent = _leading_whitespace((line_prefix + out).rsplit("\n", 1)[-1])
            out += _indent_tail(self._print_element(node, key, item), indent)

        logger.debug(
            "Rebuilt %s.%s: %d -> %d elements", node["type"], key, len(old_items), len(items)
        )
        return [(region_start, region_end, out)]

    def _print_element(self, node: Any, key: str, item: Any) -> str:
        if (node["type"], key) in STATEMENT_LISTS:
            return self.print_statement(item)
        text = self.print(item)
        return f"({text})" if needs_parens(item, node, key) else text

    # Generic printing

    def _generic(self, node: Any) -> str:
        method = getattr(self, f"_print_{builder_name(node['type'])}", None)
        if method is None:
            if _range(getattr(node, "original", None)) is not None and node.source is not None:
                return self._reuse(node)
            msg = f"Cannot print nodes of kind '{node['type']}'"
            raise InvalidArgumentError(msg)
        return method(node)

    def _indent_all(self, text: str) -> str:
        return "\n".join(
            self.indent_unit + line if line.strip() else line for line in text.split("\n")
        )

    def _braced(self, items: list[str]) -> str:
        if not items:
            return "{}"
        body = self.nl.join(self._indent_all(item) for item in items)
        return "{" + self.nl + body + self.nl + "}"

    def _expr(self, node: Any, parent: Any, key: str) -> str:
        text = self.print(node)
        return f"({text})" if needs_parens(node, parent, key) else text

    def _list(self, parent: Any, key: str) -> str:
        return ", ".join(self._expr(item, parent, key) for item in parent.get(key) or [])

    def _params(self, node: Any) -> str:
        return "(" + ", ".join(self.print(param) for param in node.get("params") or []) + ")"

    def _key(self, node: Any) -> str:
        key = self.print(node["key"])
        return f"[{key}]" if node.get("computed") else key

    # Statements

    def _print_program(self, node: Any) -> str:
        return self.nl.join(self.print_statement(stmt) for stmt in node.get("body") or [])

    def _print_block_statement(self, node: Any) -> str:
        return self._braced([self.print_statement(stmt) for stmt in node.get("body") or []])

    def _print_expression_statement(self, node: Any) -> str:
        return self._expr(node["expression"], node, "expression") + ";"

    def _print_empty_statement(self, node: Any) -> str:
        return ";"

    def _print_debugger_statement(self, node: Any) -> str:
        return "debugger;"

    def _print_with_statement(self, node: Any) -> str:
        return f"with ({self.print(node['object'])}) {self.print_statement(node['body'])}"

    def _print_return_statement(self, node: Any) -> str:
        argument = node.get("argument")
        return f"return {self.print(argument)};" if argument is not None else "return;"

    def _print_labeled_statement(self, node: Any) -> str:
        return f"{self.print(node['label'])}: {self.print_statement(node['body'])}"

    def _print_break_statement(self, node: Any) -> str:
        label = node.get("label")
        return f"break {self.print(label)};" if label else "break;"

    def _print_continue_statement(self, node: Any) -> str:
        label = node.get("label")
        return f"continue {self.print(label)};" if label else "continue;"

    def _print_if_statement(self, node: Any) -> str:
        text = f"if ({self.print(node['test'])}) {self.print_statement(node['consequent'])}"
        alternate = node.get("alternate")
        if alternate is not None:
            text += f" else {self.print_statement(alternate)}"
        return text

    def _print_switch_statement(self, node: Any) -> str:
        head = f"switch ({self.print(node['discriminant'])}) "
        return head + self._braced([self.print(case) for case in node.get("cases") or []])

    def _print_switch_case(self, node: Any) -> str:
        test = node.get("test")
        head = f"case {self.print(test)}:" if test is not None else "default:"
        consequent = node.get("consequent") or []
        if len(consequent) == 1 and is_kind(consequent[0], "BlockStatement"):
            return f"{head} {self.print(consequent[0])}"
        body = [self._indent_all(self.print_statement(stmt)) for stmt in consequent]
        return self.nl.join([head, *body])

    def _print_throw_statement(self, node: Any) -> str:
        return f"throw {self.print(node['argument'])};"

    def _print_try_statement(self, node: Any) -> str:
        text = f"try {self.print(node['block'])}"
        if node.get("handler") is not None:
            text += f" {self.print(node['handler'])}"
        if node.get("finalizer") is not None:
            text += f" finally {self.print(node['finalizer'])}"
        return text

    def _print_catch_clause(self, node: Any) -> str:
        param = node.get("param")
        head = f"catch ({self.print(param)})" if param is not None else "catch"
        return f"{head} {self.print(node['body'])}"

    def _print_while_statement(self, node: Any) -> str:
        return f"while ({self.print(node['test'])}) {self.print_statement(node['body'])}"

    def _print_do_while_statement(self, node: Any) -> str:
        return f"do {self.print_statement(node['body'])} while ({self.print(node['test'])});"

    def _print_for_statement(self, node: Any) -> str:
        init, test, update = (self.print(node.get(key)) for key in ("init", "test", "update"))
        head = f"for ({init};{' ' + test if test else ''};{' ' + update if update else ''})"
        return f"{head} {self.print_statement(node['body'])}"

    def _print_for_in_statement(self, node: Any) -> str:
        left, right = self.print(node["left"]), self.print(node["right"])
        return f"for ({left} in {right}) {self.print_statement(node['body'])}"

    def _print_for_of_statement(self, node: Any) -> str:
        left, right = self.print(node["left"]), self.print(node["right"])
        keyword = "for await" if node.get("await") else "for"
        return f"{keyword} ({left} of {right}) {self.print_statement(node['body'])}"

    # Functions and classes

    def _function(self, node: Any) -> str:
        head = ("async " if node.get("async") else "") + "function"
        if node.get("generator"):
            head += "*"
        if node.get("id") is not None:
            head += f" {self.print(node['id'])}"
        return f"{head}{self._params(node)} {self.print(node['body'])}"

    def _print_function_declaration(self, node: Any) -> str:
        return self._function(node)

    def _print_function_expression(self, node: Any) -> str:
        return self._function(node)

    def _print_arrow_function_expression(self, node: Any) -> str:
        params = node.get("params") or []
        if len(params) == 1 and params[0].get("type") == "Identifier":
            head = self.print(params[0])
        else:
            head = self._params(node)
        body = self._expr(node["body"], node, "body")
        return ("async " if node.get("async") else "") + f"{head} => {body}"

    def _print_variable_declaration(self, node: Any) -> str:
        declarations = ", ".join(self.print(decl) for decl in node.get("declarations") or [])
        return f"{node['kind']} {declarations}"

    def _print_variable_declarator(self, node: Any) -> str:
        init = node.get("init")
        target = self.print(node["id"])
        return f"{target} = {self._expr(init, node, 'init')}" if init is not None else target

    def _class(self, node: Any) -> str:
        head = "class"
        if node.get("id") is not None:
            head += f" {self.print(node['id'])}"
        if node.get("superClass") is not None:
            head += f" extends {self._expr(node['superClass'], node, 'superClass')}"
        return f"{head} {self.print(node['body'])}"

    def _print_class_declaration(self, node: Any) -> str:
        return self._class(node)

    def _print_class_expression(self, node: Any) -> str:
        return self._class(node)

    def _print_class_body(self, node: Any) -> str:
        return self._braced([self.print(member) for member in node.get("body") or []])

    def _method(self, prefix: str, node: Any, function: Any) -> str:
        if function.get("async"):
            prefix += "async "
        if function.get("generator"):
            prefix += "*"
        return f"{prefix}{self._key(node)}{self._params(function)} {self.print(function['body'])}"

    def _print_method_definition(self, node: Any) -> str:
        prefix = "static " if node.get("static") else ""
        if node.get("kind") in ("get", "set"):
            prefix += f"{node['kind']} "
        return self._method(prefix, node, node["value"])

    # Expressions

    def _print_identifier(self, node: Any) -> str:
        return node["name"]

    def _print_this_expression(self, node: Any) -> str:
        return "this"

    def _print_super(self, node: Any) -> str:
        return "super"

    def _print_import_(self, node: Any) -> str:
        return "import"

    def _print_literal(self, node: Any) -> str:
        raw = node.get("raw")
        original = getattr(node, "original", None)
        if isinstance(raw, str) and (
            original is None
            or (
                _same_scalar(node.get("value"), original.get("value"))
                and raw == original.get("raw")
            )
        ):
            return raw

        value = node.get("value")
        regex = node.get("regex")
        if isinstance(regex, dict):
            return f"/{regex.get('pattern', '')}/{regex.get('flags', '')}"
        if value is None:
            return "null"
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, int):
            return str(value)
        if isinstance(value, float):
            return str(int(value)) if value.is_integer() and abs(value) < 1e21 else repr(value)
        if isinstance(value, str):
            previous = original.get("raw") if original is not None else None
            return self._quote(value, previous)
        return str(value)

    def _quote(self, value: str, previous_raw: Any = None) -> str:
        if isinstance(previous_raw, str) and previous_raw[:1] in ("'", '"'):
            quote = previous_raw[0]
        else:
            quote = '"' if self.options.quote == "double" else "'"
        escaped = (
            value.replace("\\", "\\\\")
            .replace(quote, "\\" + quote)
            .replace("\n", "\\n")
            .replace("\r", "\\r")
            .replace("\t", "\\t")
            .replace("\u2028", "\\u2028")
            .replace("\u2029", "\\u2029")
        )
        escaped = _CONTROL_CHARS.sub(lambda match: f"\\x{ord(match.group()):02x}", escaped)
        return f"{quote}{escaped}{quote}"

    def _array(self, node: Any) -> str:
        elements = node.get("elements") or []
        items = ["" if item is None else self._expr(item, node, "elements") for item in elements]
        text = ", ".join(items)
        if elements and elements[-1] is None:
            text += ","
        return f"[{text}]"

    def _print_array_expression(self, node: Any) -> str:
        return self._array(node)

    def _print_array_pattern(self, node: Any) -> str:
        return self._array(node)

    def _print_object_expression(self, node: Any) -> str:
        properties = [self.print(prop) for prop in node.get("properties") or []]
        if not properties:
            return "{}"
        items = [f"{text}," for text in properties[:-1]]
        items.append(properties[-1] + ("," if self.options.trailing_comma else ""))
        return self._braced(items)

    def _print_object_pattern(self, node: Any) -> str:
        properties = ", ".join(self.print(prop) for prop in node.get("properties") or [])
        return f"{{ {properties} }}" if properties else "{}"

    def _print_property(self, node: Any) -> str:
        value = node["value"]
        if node.get("kind") in ("get", "set"):
            return self._method(f"{node['kind']} ", node, value)
        if node.get("method"):
            return self._method("", node, value)
        if node.get("shorthand"):
            return self.print(value)
        return f"{self._key(node)}: {self._expr(value, node, 'value')}"

    def _print_sequence_expression(self, node: Any) -> str:
        return self._list(node, "expressions")

    def _print_unary_expression(self, node: Any) -> str:
        operator = node["operator"]
        argument = self._expr(node["argument"], node, "argument")
        if operator.isalpha() or argument.startswith(operator[-1]):
            return f"{operator} {argument}"
        return operator + argument

    def _binary(self, node: Any) -> str:
        left = self._expr(node["left"], node, "left")
        right = self._expr(node["right"], node, "right")
        return f"{left} {node['operator']} {right}"

    def _print_binary_expression(self, node: Any) -> str:
        return self._binary(node)

    def _print_logical_expression(self, node: Any) -> str:
        return self._binary(node)

    def _print_assignment_expression(self, node: Any) -> str:
        return self._binary(node)

    def _print_assignment_pattern(self, node: Any) -> str:
        return f"{self.print(node['left'])} = {self._expr(node['right'], node, 'right')}"

    def _print_update_expression(self, node: Any) -> str:
        argument = self._expr(node["argument"], node, "argument")
        return node["operator"] + argument if node.get("prefix") else argument + node["operator"]

    def _print_conditional_expression(self, node: Any) -> str:
        test = self._expr(node["test"], node, "test")
        consequent = self._expr(node["consequent"], node, "consequent")
        alternate = self._expr(node["alternate"], node, "alternate")
        return f"{test} ? {consequent} : {alternate}"

    def _print_new_expression(self, node: Any) -> str:
        callee = self._expr(node["callee"], node, "callee")
        return f"new {callee}({self._list(node, 'arguments')})"

    def _print_call_expression(self, node: Any) -> str:
        callee = self._expr(node["callee"], node, "callee")
        return f"{callee}({self._list(node, 'arguments')})"

    def _print_member_expression(self, node: Any) -> str:
        target = self._expr(node["object"], node, "object")
        if node.get("computed"):
            return f"{target}[{self.print(node['property'])}]"
        return f"{target}.{self.print(node['property'])}"

    def _print_yield_expression(self, node: Any) -> str:
        keyword = "yield*" if node.get("delegate") else "yield"
        argument = node.get("argument")
        return f"{keyword} {self.print(argument)}" if argument is not None else keyword

    def _print_await_expression(self, node: Any) -> str:
        return f"await {self._expr(node['argument'], node, 'argument')}"

    def _print_template_literal(self, node: Any) -> str:
        expressions = node.get("expressions") or []
        parts = ["`"]
        for index, quasi in enumerate(node.get("quasis") or []):
            parts.append(quasi["value"]["raw"])
            if index < len(expressions):
                parts.append("${" + self.print(expressions[index]) + "}")
        parts.append("`")
        return "".join(parts)

    def _print_template_element(self, node: Any) -> str:
        return node["value"]["raw"]

    def _print_tagged_template_expression(self, node: Any) -> str:
        return self._expr(node["tag"], node, "tag") + self.print(node["quasi"])

    def _print_spread_element(self, node: Any) -> str:
        return "..." + self._expr(node["argument"], node, "argument")

    def _print_rest_element(self, node: Any) -> str:
        return "..." + self.print(node["argument"])

    def _print_meta_property(self, node: Any) -> str:
        return f"{self.print(node['meta'])}.{self.print(node['property'])}"

    # Modules

    def _print_import_declaration(self, node: Any) -> str:
        specifiers = node.get("specifiers") or []
        clauses = [
            self.print(spec)
            for spec in specifiers
            if spec["type"] in ("ImportDefaultSpecifier", "ImportNamespaceSpecifier")
        ]
        named = [self.print(spec) for spec in specifiers if spec["type"] == "ImportSpecifier"]
        if named:
            clauses.append("{ " + ", ".join(named) + " }")
        source = self.print(node["source"])
        if not clauses:
            return f"import {source};"
        return f"import {', '.join(clauses)} from {source};"

    def _aliased(self, name: Any, alias: Any) -> str:
        text = self.print(name)
        if alias is None or alias.get("name") == name.get("name"):
            return text
        return f"{text} as {self.print(alias)}"

    def _print_import_specifier(self, node: Any) -> str:
        return self._aliased(node["imported"], node.get("local"))

    def _print_import_default_specifier(self, node: Any) -> str:
        return self.print(node["local"])

    def _print_import_namespace_specifier(self, node: Any) -> str:
        return f"* as {self.print(node['local'])}"

    def _print_export_named_declaration(self, node: Any) -> str:
        declaration = node.get("declaration")
        if declaration is not None:
            return f"export {self.print_statement(declaration)}"
        specifiers = ", ".join(self.print(spec) for spec in node.get("specifiers") or [])
        text = f"export {{ {specifiers} }}" if specifiers else "export {}"
        if node.get("source") is not None:
            text += f" from {self.print(node['source'])}"
        return text + ";"

    def _print_export_specifier(self, node: Any) -> str:
        return self._aliased(node["local"], node.get("exported"))

    def _print_export_default_declaration(self, node: Any) -> str:
        declaration = node["declaration"]
        if is_kind(declaration, "Declaration"):
            return f"export default {self.print(declaration)}"
        return f"export default {self._expr(declaration, node, 'declaration')};"

    def _print_export_all_declaration(self, node: Any) -> str:
        return f"export * from {self.print(node['source'])};"

    # JSX

    def _print_jsx_identifier(self, node: Any) -> str:
        return node["name"]

    def _print_jsx_namespaced_name(self, node: Any) -> str:
        return f"{self.print(node['namespace'])}:{self.print(node['name'])}"

    def _print_jsx_member_expression(self, node: Any) -> str:
        return f"{self.print(node['object'])}.{self.print(node['property'])}"

    def _print_jsx_attribute(self, node: Any) -> str:
        name = self.print(node["name"])
        value = node.get("value")
        if value is None:
            return name
        text = value.get("value") if is_kind(value, "Literal") else None
        if isinstance(text, str) and not value.get("raw"):
            return f'{name}="{text.replace(chr(34), "&quot;")}"'
        return f"{name}={self.print(value)}"

    def _print_jsx_spread_attribute(self, node: Any) -> str:
        return "{..." + self.print(node["argument"]) + "}"

    def _print_jsx_expression_container(self, node: Any) -> str:
        return "{" + self.print(node["expression"]) + "}"

    def _print_jsx_empty_expression(self, node: Any) -> str:
        return ""

    def _print_jsx_text(self, node: Any) -> str:
        raw = node.get("raw")
        original = getattr(node, "original", None)
        unchanged = original is None or node.get("value") == original.get("value")
        if isinstance(raw, str) and unchanged:
            return raw
        return node.get("value") or ""

    def _print_jsx_opening_element(self, node: Any) -> str:
        attributes = "".join(" " + self.print(attr) for attr in node.get("attributes") or [])
        closing = " />" if node.get("selfClosing") else ">"
        return f"<{self.print(node['name'])}{attributes}{closing}"

    def _print_jsx_closing_element(self, node: Any) -> str:
        return f"</{self.print(node['name'])}>"

    def _print_jsx_element(self, node: Any) -> str:
        opening = node["openingElement"]
        text = self.print(opening)
        if opening.get("selfClosing"):
            return text
        text += "".join(self.print(child) for child in node.get("children") or [])
        closing = node.get("closingElement")
        if closing is not None:
            return text + self.print(closing)
        return text + f"</{self.print(opening['name'])}>"
