"""Node kind definitions and the supertype lattice they form."""

from __future__ import annotations

from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar, Protocol, runtime_checkable


@dataclass(frozen=True)
class KindDef:
    """Definition of one node kind.

    Attributes:
        name: The kind name, as found in a node's ``type`` field
        bases: Direct supertypes of this kind
        build: Field names a builder accepts positionally, in order
        defaults: Default values for optional fields (build params included)
        abstract: Abstract kinds group others and have no builder

    """

    name: str
    bases: tuple[str, ...] = ()
    build: tuple[str, ...] = ()
    defaults: Mapping[str, Any] = field(default_factory=dict)
    abstract: bool = False

    registry: ClassVar[dict[str, KindDef]] = {}


def define(
    name: str,
    *bases: str,
    build: tuple[str, ...] = (),
    abstract: bool = False,
    **defaults: Any,
) -> KindDef:
    """Register a node kind in the default ESTree table."""
    if (existing := KindDef.registry.get(name)) is not None:
        msg = f"Kind '{name}' already defined as {existing}."
        raise ValueError(msg)
    kind = KindDef(name, bases, build, defaults, abstract)
    KindDef.registry[name] = kind
    return kind


# Abstract kinds
define("Node", abstract=True)
define("Statement", "Node", abstract=True)
define("Expression", "Node", abstract=True)
define("Pattern", "Node", abstract=True)
define("Declaration", "Statement", abstract=True)
define("Function", "Node", abstract=True)
define("Specifier", "Node", abstract=True)
define("ModuleSpecifier", "Specifier", abstract=True)

# Program and identifiers
define("Program", "Node", build=("body",), sourceType="module")
define("Identifier", "Expression", "Pattern", build=("name",))
define("Literal", "Expression", build=("value",))

# Statements
define("ExpressionStatement", "Statement", build=("expression",))
define("BlockStatement", "Statement", build=("body",))
define("EmptyStatement", "Statement")
define("DebuggerStatement", "Statement")
define("WithStatement", "Statement", build=("object", "body"))
define("ReturnStatement", "Statement", build=("argument",), argument=None)
define("LabeledStatement", "Statement", build=("label", "body"))
define("BreakStatement", "Statement", build=("label",), label=None)
define("ContinueStatement", "Statement", build=("label",), label=None)
define(
    "IfStatement",
    "Statement",
    build=("test", "consequent", "alternate"),
    alternate=None,
)
define("SwitchStatement", "Statement", build=("discriminant", "cases"))
define("SwitchCase", "Node", build=("test", "consequent"))
define("ThrowStatement", "Statement", build=("argument",))
define(
    "TryStatement",
    "Statement",
    build=("block", "handler", "finalizer"),
    handler=None,
    finalizer=None,
)
define("CatchClause", "Node", build=("param", "body"))
define("WhileStatement", "Statement", build=("test", "body"))
define("DoWhileStatement", "Statement", build=("body", "test"))
define("ForStatement", "Statement", build=("init", "test", "update", "body"))
define("ForInStatement", "Statement", build=("left", "right", "body"))
define("ForOfStatement", "Statement", build=("left", "right", "body"))

# Functions and declarations
_function_defaults = {"generator": False, "async": False, "expression": False}
define(
    "FunctionDeclaration",
    "Function",
    "Declaration",
    build=("id", "params", "body"),
    **_function_defaults,
)
define(
    "FunctionExpression",
    "Function",
    "Expression",
    build=("id", "params", "body"),
    id=None,
    **_function_defaults,
)
define(
    "ArrowFunctionExpression",
    "Function",
    "Expression",
    build=("params", "body"),
    id=None,
    **_function_defaults,
)
define("VariableDeclaration", "Declaration", build=("kind", "declarations"))
define("VariableDeclarator", "Node", build=("id", "init"), init=None)
define(
    "ClassDeclaration",
    "Declaration",
    build=("id", "superClass", "body"),
)
define(
    "ClassExpression",
    "Expression",
    build=("id", "superClass", "body"),
    id=None,
    superClass=None,
)
define("ClassBody", "Node", build=("body",))
define(
    "MethodDefinition",
    "Node",
    build=("kind", "key", "value", "static"),
    computed=False,
    static=False,
)

# Expressions
define("ThisExpression", "Expression")
define("Super", "Expression")
define("ArrayExpression", "Expression", build=("elements",))
define("ObjectExpression", "Expression", build=("properties",))
define(
    "Property",
    "Node",
    build=("kind", "key", "value"),
    computed=False,
    method=False,
    shorthand=False,
)
define("SequenceExpression", "Expression", build=("expressions",))
define(
    "UnaryExpression",
    "Expression",
    build=("operator", "argument", "prefix"),
    prefix=True,
)
define("BinaryExpression", "Expression", build=("operator", "left", "right"))
define("AssignmentExpression", "Expression", build=("operator", "left", "right"))
define(
    "UpdateExpression",
    "Expression",
    build=("operator", "argument", "prefix"),
)
define("LogicalExpression", "Expression", build=("operator", "left", "right"))
define(
    "ConditionalExpression",
    "Expression",
    build=("test", "consequent", "alternate"),
)
define("NewExpression", "Expression", build=("callee", "arguments"))
define("CallExpression", "Expression", build=("callee", "arguments"))
define(
    "MemberExpression",
    "Expression",
    build=("object", "property", "computed"),
    computed=False,
)
define(
    "YieldExpression",
    "Expression",
    build=("argument", "delegate"),
    argument=None,
    delegate=False,
)
define("AwaitExpression", "Expression", build=("argument",))
define("TemplateLiteral", "Expression", build=("quasis", "expressions"))
define("TaggedTemplateExpression", "Expression", build=("tag", "quasi"))
define("TemplateElement", "Node", build=("value", "tail"), tail=False)
define("MetaProperty", "Expression", build=("meta", "property"))
define("Import", "Expression")

# Patterns
define("SpreadElement", "Node", build=("argument",))
define("RestElement", "Pattern", build=("argument",))
define("AssignmentPattern", "Pattern", build=("left", "right"))
define("ArrayPattern", "Pattern", build=("elements",))
define("ObjectPattern", "Pattern", build=("properties",))

# Modules
define("ImportDeclaration", "Declaration", build=("specifiers", "source"))
define(
    "ImportSpecifier",
    "ModuleSpecifier",
    build=("imported", "local"),
    local=None,
)
define("ImportDefaultSpecifier", "ModuleSpecifier", build=("local",))
define("ImportNamespaceSpecifier", "ModuleSpecifier", build=("local",))
define(
    "ExportNamedDeclaration",
    "Declaration",
    build=("declaration", "specifiers", "source"),
    specifiers=[],
    source=None,
)
define(
    "ExportSpecifier",
    "ModuleSpecifier",
    build=("local", "exported"),
    exported=None,
)
define("ExportDefaultDeclaration", "Declaration", build=("declaration",))
define("ExportAllDeclaration", "Declaration", build=("source",))

# JSX
define("JSXIdentifier", "Identifier", build=("name",))
define("JSXNamespacedName", "Node", build=("namespace", "name"))
define(
    "JSXMemberExpression",
    "MemberExpression",
    build=("object", "property"),
    computed=False,
)
define("JSXAttribute", "Node", build=("name", "value"), value=None)
define("JSXSpreadAttribute", "Node", build=("argument",))
define(
    "JSXElement",
    "Expression",
    build=("openingElement", "closingElement", "children"),
    closingElement=None,
    children=[],
)
define(
    "JSXOpeningElement",
    "Node",
    build=("name", "attributes", "selfClosing"),
    attributes=[],
    selfClosing=False,
)
define("JSXClosingElement", "Node", build=("name",))
define("JSXExpressionContainer", "Expression", build=("expression",))
define("JSXEmptyExpression", "Node")
define("JSXText", "Literal", build=("value", "raw"), raw=None)


@runtime_checkable
class TypeLattice(Protocol):
    """Capability answering supertype questions about node kinds."""

    def supertypes(self, kind: str) -> tuple[str, ...]:
        """Return every ancestor of ``kind``, nearest first, without ``kind``."""
        ...


class ESTreeLattice:
    """Lattice over a table of `KindDef` entries.

    Kinds missing from the table are treated as direct subtypes of ``Node``,
    so trees produced by other parsers still get the universal methods.
    """

    root = "Node"

    def __init__(self, kinds: Mapping[str, KindDef] | None = None) -> None:
        """Initialize the lattice.

        Args:
            kinds: Kind table to use, the built-in ESTree table by default

        """
        self.kinds = KindDef.registry if kinds is None else kinds
        self._cache: dict[str, tuple[str, ...]] = {}

    def supertypes(self, kind: str) -> tuple[str, ...]:
        """Return the transitive supertypes of ``kind`` in breadth-first order."""
        if (cached := self._cache.get(kind)) is not None:
            return cached

        definition = self.kinds.get(kind)
        if definition is None:
            result: tuple[str, ...] = () if kind == self.root else (self.root,)
        else:
            seen: list[str] = []
            queue = deque(definition.bases)
            while queue:
                base = queue.popleft()
                if base in seen:
                    continue
                seen.append(base)
                if (base_def := self.kinds.get(base)) is not None:
                    queue.extend(base_def.bases)
            result = tuple(seen)

        self._cache[kind] = result
        return result

    def is_subtype(self, kind: str, ancestor: str) -> bool:
        """Check whether ``kind`` is ``ancestor`` or one of its subtypes."""
        return kind == ancestor or ancestor in self.supertypes(kind)

    def check(self, value: Any, kind: str) -> bool:
        """Check whether ``value`` is a node of ``kind`` (or a subtype)."""
        node_type = getattr(value, "get", None) and value.get("type")
        return isinstance(node_type, str) and self.is_subtype(node_type, kind)

    def __contains__(self, kind: object) -> bool:
        return kind in self.kinds


ESTREE = ESTreeLattice()


def supertypes(kind: str, lattice: TypeLattice = ESTREE) -> tuple[str, ...]:
    """Get the supertypes of ``kind`` from ``lattice``."""
    return lattice.supertypes(kind)


def is_kind(value: Any, kind: str | NamedType, lattice: TypeLattice = ESTREE) -> bool:
    """Check whether ``value`` is a node of ``kind``, subtypes included."""
    name = kind_name(kind)
    node_type = value.get("type") if isinstance(value, Mapping) else None
    if not isinstance(node_type, str):
        return False
    return node_type == name or name in lattice.supertypes(node_type)


@dataclass(frozen=True)
class NamedType:
    """A kind name with a ``check`` method, usable wherever a kind is expected."""

    name: str
    lattice: TypeLattice = field(default=ESTREE, compare=False, repr=False)

    def check(self, value: Any) -> bool:
        """Check whether ``value`` is a node of this kind."""
        return is_kind(value, self.name, self.lattice)

    def __str__(self) -> str:
        return self.name


def kind_name(kind: str | NamedType) -> str:
    """Normalize a kind given as a string or `NamedType` to its name."""
    if isinstance(kind, NamedType):
        return kind.name
    if isinstance(kind, str) and kind:
        return kind
    from codemorph.errors import InvalidArgumentError

    msg = f"Expected a node kind name, got {kind!r}"
    raise InvalidArgumentError(msg)
