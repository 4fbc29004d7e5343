"""Lexical scopes over a syntax tree.

Scopes are established by programs, functions and catch clauses. Block
level declarations (``let``, ``const``, ``class``) are hoisted to the
enclosing function scope, so a lookup answers "which function or program
declares this name" rather than modelling block scoping.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeAlias

from codemorph.nodes import child_fields, is_node
from codemorph.types import is_kind

if TYPE_CHECKING:
    from codemorph.paths import NodePath

SCOPE_KINDS = ("Program", "Function", "CatchClause")
_IMPORT_SPECIFIERS = frozenset(
    {"ImportSpecifier", "ImportDefaultSpecifier", "ImportNamespaceSpecifier"}
)

Bindings: TypeAlias = "dict[str, list[NodePath]]"


class Scope:
    """The bindings declared directly by one scope-establishing node."""

    def __init__(self, path: NodePath, parent: Scope | None = None) -> None:
        """Initialize the scope.

        Args:
            path: Path of the node establishing the scope
            parent: The enclosing scope, None for the global scope

        """
        self.path = path
        self.node = path.value
        self.parent = parent
        self.is_global = parent is None
        self.depth: int = 0 if parent is None else parent.depth + 1
        self._bindings: Bindings = {}
        self._scanned = False

    def __repr__(self) -> str:
        return f"Scope({self.node.get('type')}, depth={self.depth})"

    @staticmethod
    def is_established_by(value: Any) -> bool:
        """Check whether ``value`` is a node that opens a new scope."""
        return any(is_kind(value, kind) for kind in SCOPE_KINDS)

    def scan(self, *, force: bool = False) -> None:
        """Collect the bindings of this scope, once unless ``force`` is set."""
        if self._scanned and not force:
            return
        self._bindings = {}
        if is_kind(self.node, "CatchClause"):
            _add_pattern(self.path.get("param"), self._bindings)
        else:
            _scan_scope(self.path, self._bindings)
        self._scanned = True

    def declares(self, name: str) -> bool:
        """Check whether this scope itself declares ``name``."""
        self.scan()
        return name in self._bindings

    def get_bindings(self) -> Bindings:
        """Get the binding paths of every name declared by this scope."""
        self.scan()
        return self._bindings

    def lookup(self, name: str) -> Scope | None:
        """Find the nearest scope, starting here, that declares ``name``."""
        scope: Scope | None = self
        while scope is not None and not scope.declares(name):
            scope = scope.parent
        return scope

    def get_global_scope(self) -> Scope:
        """Get the outermost scope."""
        scope = self
        while scope.parent is not None:
            scope = scope.parent
        return scope


def _scan_scope(path: NodePath, bindings: Bindings) -> None:
    node = path.value
    parent = path.parent
    if (
        parent is not None
        and is_kind(parent.value, "FunctionExpression")
        and parent.value.get("id")
    ):
        _add_pattern(parent.get("id"), bindings)

    if isinstance(node, list):
        path.each(lambda child: _scan_child(child, bindings))
    elif is_kind(node, "Function"):
        path.get("params").each(lambda param: _add_pattern(param, bindings))
        _scan_child(path.get("body"), bindings)
    elif is_kind(node, "VariableDeclarator"):
        _add_pattern(path.get("id"), bindings)
        _scan_child(path.get("init"), bindings)
    elif is_node(node) and node["type"] in _IMPORT_SPECIFIERS:
        _add_pattern(path.get("local" if node.get("local") else "imported"), bindings)
    elif is_node(node) and not is_kind(node, "Expression"):
        for key, _ in list(child_fields(node)):
            _scan_child(path.get(key), bindings)


def _scan_child(path: NodePath, bindings: Bindings) -> None:
    node = path.value
    if not node or is_kind(node, "Expression"):
        return
    if is_kind(node, "FunctionDeclaration") and node.get("id") is not None:
        _add_pattern(path.get("id"), bindings)
    elif is_kind(node, "ClassDeclaration") and node.get("id") is not None:
        _add_pattern(path.get("id"), bindings)
        _scan_scope(path.get("body"), bindings)
    elif Scope.is_established_by(node):
        if is_kind(node, "CatchClause"):
            param = node.get("param")
            name = param.get("name") if is_kind(param, "Identifier") else None
            had_binding = name in bindings
            _scan_scope(path.get("body"), bindings)
            if name is not None and not had_binding:
                bindings.pop(name, None)
    else:
        _scan_scope(path, bindings)


def _add_pattern(path: NodePath, bindings: Bindings) -> None:
    pattern = path.value
    if is_kind(pattern, "Identifier"):
        bindings.setdefault(pattern["name"], []).append(path)
    elif is_kind(pattern, "AssignmentPattern"):
        _add_pattern(path.get("left"), bindings)
    elif is_kind(pattern, "ObjectPattern"):
        for index in range(len(pattern.get("properties") or ())):
            prop = path.get("properties", index)
            if is_kind(prop.value, "Pattern"):
                _add_pattern(prop, bindings)
            elif is_kind(prop.value, "Property"):
                _add_pattern(prop.get("value"), bindings)
    elif is_kind(pattern, "ArrayPattern"):
        for index in range(len(pattern.get("elements") or ())):
            element = path.get("elements", index)
            if is_kind(element.value, "Pattern"):
                _add_pattern(element, bindings)
            elif is_kind(element.value, "SpreadElement"):
                _add_pattern(element.get("argument"), bindings)
    elif is_kind(pattern, "RestElement"):
        _add_pattern(path.get("argument"), bindings)
