"""Positions: live, parent-linked handles into a mutable syntax tree."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from codemorph.errors import PathError
from codemorph.nodes import is_node
from codemorph.types import is_kind

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from codemorph.scope import Scope

logger = logging.getLogger(__name__)

_MISSING = object()


class NodePath:
    """A location in the tree and the value currently stored there.

    A path is either a root (no parent) or a child of another path, addressed
    by ``name``: a field name when the parent holds a node, a list index when
    it holds a list. Lists get their own path level, so the second statement
    of a program is ``program_path.get("body", 1)``.

    Child paths are cached and re-validated against the container on every
    read: asking twice for the same unchanged location returns the same
    object, while a location whose value was swapped returns a fresh path.
    """

    def __init__(
        self,
        value: Any,
        parent_path: NodePath | None = None,
        name: str | int | None = None,
    ) -> None:
        """Initialize the path.

        Args:
            value: The value stored at this location
            parent_path: Path of the containing node or list, None for roots
            name: Field name or list index inside the parent's value

        """
        self.value = value
        self.parent_path = parent_path
        self.name = name
        self._children: dict[str | int, NodePath] = {}
        self._scope: Any = _MISSING
        self._scope_value: Any = _MISSING
        self._detached = False

    def __repr__(self) -> str:
        kind = self.value.get("type") if is_node(self.value) else type(self.value).__name__
        return f"NodePath({kind!s} at {self.name!r})"

    # Navigation

    def get(self, *names: str | int) -> NodePath:
        """Get the path of a descendant location.

        Args:
            *names: Field names and list indexes to follow, in order

        Returns:
            The descendant path; its value is None where the location is empty

        """
        path = self
        for name in names:
            path = path._child(name)
        return path

    def _child(self, name: str | int) -> NodePath:
        actual = _read(self.value, name)
        cached = self._children.get(name)
        if cached is not None and cached.value is actual:
            return cached
        child = NodePath(actual, self, name)
        self._children[name] = child
        return child

    def each(self, visit: Callable[[NodePath], Any]) -> None:
        """Call ``visit`` with the path of every element of a list value."""
        for index in range(len(self.value) if isinstance(self.value, list) else 0):
            visit(self.get(index))

    def iter_children(self) -> Iterator[NodePath]:
        """Yield the paths of every element or child field of this value."""
        value = self.value
        if isinstance(value, list):
            for index in range(len(value)):
                yield self.get(index)
        elif is_node(value):
            from codemorph.nodes import child_fields

            for key, _ in list(child_fields(value)):
                yield self.get(key)

    @property
    def node(self) -> Any:
        """The nearest node value at or above this location."""
        path: NodePath | None = self
        while path is not None:
            if is_node(path.value):
                return path.value
            path = path.parent_path
        return None

    @property
    def parent(self) -> NodePath | None:
        """The path of the nearest node strictly above this location's node."""
        path = self.parent_path
        if not is_node(self.value):
            while path is not None and not is_node(path.value):
                path = path.parent_path
            if path is not None:
                path = path.parent_path
        while path is not None and not is_node(path.value):
            path = path.parent_path
        return path

    @property
    def scope(self) -> Scope | None:
        """The innermost scope this location belongs to."""
        if self._scope is not _MISSING and self._scope_value is self.value:
            return self._scope

        from codemorph.scope import Scope

        scope = self.parent_path.scope if self.parent_path is not None else None
        if Scope.is_established_by(self.value):
            scope = Scope(self, scope)
        self._scope = scope
        self._scope_value = self.value
        return scope

    # Mutation

    def replace(self, *values: Any) -> list[NodePath]:
        """Replace the value at this location.

        Inside a list, the element is spliced out and every given value takes
        its place; this path keeps pointing at the first of them. In a field,
        exactly one value replaces the old one. With no values the location
        is emptied: list elements are removed and fields are set to None.

        Returns:
            The paths of the inserted values

        Raises:
            PathError: If this path is a root, no longer attached, or several
                values are given for a field

        """
        parent, container = self._repair()
        name = self.name

        if isinstance(container, list) and isinstance(name, int):
            if parent._children.get(name) is self:
                del parent._children[name]
            parent._shift_children(name + 1, len(values) - 1)
            container[name : name + 1] = values
            if not values:
                self._detach()
                return []
            if self.value is not values[0]:
                self._reset(values[0])
            parent._children[name] = self
            return [parent.get(name + offset) for offset in range(len(values))]

        if len(values) > 1:
            msg = f"Cannot replace field '{name}' with {len(values)} values"
            raise PathError(msg)

        if not values:
            container[name] = None
            parent._children.pop(name, None)
            self._detach()
            return []

        container[name] = values[0]
        if self.value is not values[0]:
            self._reset(values[0])
        return [self]

    def insert_at(self, index: int, *values: Any) -> NodePath:
        """Insert values into the list held by this path, at ``index``.

        Raises:
            PathError: If this path does not hold a list

        """
        if not isinstance(self.value, list):
            msg = f"Cannot insert into {self!r}: it does not hold a list"
            raise PathError(msg)
        if not values:
            return self
        index = max(0, min(index, len(self.value)))
        self._shift_children(index, len(values))
        self.value[index:index] = values
        return self

    def insert_before(self, *values: Any) -> NodePath:
        """Insert values into the enclosing list right before this element."""
        parent, index = self._list_parent()
        return parent.insert_at(index, *values)

    def insert_after(self, *values: Any) -> NodePath:
        """Insert values into the enclosing list right after this element."""
        parent, index = self._list_parent()
        return parent.insert_at(index + 1, *values)

    def prune(self) -> NodePath | None:
        """Remove this value and clean up parents left empty by its removal.

        A `VariableDeclaration` without declarators or an `ExpressionStatement`
        without an expression is pruned as well, and an `IfStatement` that
        lost its consequent is rewritten around its remaining parts.

        Returns:
            The nearest node path that survived the pruning

        """
        remaining = self.parent
        self.replace()
        if remaining is None:
            return None
        return _clean_up_after_prune(remaining)

    # Internals

    def _list_parent(self) -> tuple[NodePath, int]:
        parent, container = self._repair()
        if not isinstance(container, list) or not isinstance(self.name, int):
            msg = f"Cannot insert beside {self!r}: its location is not a list"
            raise PathError(msg)
        return parent, self.name

    def _repair(self) -> tuple[NodePath, Any]:
        """Re-locate this path in its container after outside mutation.

        Returns:
            The parent path and the container holding this path's value

        """
        parent = self.parent_path
        if parent is None:
            msg = f"Cannot modify {self!r}: it is a root position"
            raise PathError(msg)
        if self._detached:
            msg = f"Cannot modify {self!r}: it was removed from the tree"
            raise PathError(msg)

        container = parent.value
        if isinstance(container, list) and isinstance(self.name, int):
            if 0 <= self.name < len(container) and container[self.name] is self.value:
                return parent, container
            for index, item in enumerate(container):
                if item is self.value:
                    logger.debug("Repaired position %r: %s -> %s", self, self.name, index)
                    if parent._children.get(self.name) is self:
                        del parent._children[self.name]
                    self.name = index
                    parent._children[index] = self
                    return parent, container
        elif is_node(container) or isinstance(container, dict):
            if container.get(self.name, _MISSING) is self.value or (
                self.value is None and self.name not in container
            ):
                return parent, container

        msg = f"Cannot modify {self!r}: its value is no longer in the tree"
        raise PathError(msg)

    def _shift_children(self, start: int, offset: int) -> None:
        if offset == 0:
            return
        moved = {
            index: path
            for index, path in self._children.items()
            if isinstance(index, int) and index >= start
        }
        for index in moved:
            del self._children[index]
        for index, path in moved.items():
            path.name = index + offset
            self._children[index + offset] = path

    def _reset(self, value: Any) -> None:
        self.value = value
        self._children = {}
        self._scope = _MISSING

    def _detach(self) -> None:
        self.value = None
        self._children = {}
        self._scope = _MISSING
        self._detached = True


def _read(container: Any, name: str | int) -> Any:
    if isinstance(container, list):
        if isinstance(name, int) and 0 <= name < len(container):
            return container[name]
        return None
    if isinstance(container, dict) or is_node(container):
        return container.get(name)
    return None


def _clean_up_after_prune(path: NodePath) -> NodePath | None:
    node = path.value
    if is_kind(node, "VariableDeclaration"):
        if not node.get("declarations"):
            return path.prune()
    elif is_kind(node, "ExpressionStatement"):
        if not node.get("expression"):
            return path.prune()
    elif is_kind(node, "IfStatement"):
        _clean_up_if_statement(path)
    return path


def _clean_up_if_statement(path: NodePath) -> None:
    from codemorph import builders as b

    node = path.value
    test = node.get("test")
    consequent = node.get("consequent")
    alternate = node.get("alternate")
    if not consequent and not alternate:
        path.replace(b.expression_statement(test))
    elif not consequent:
        if is_kind(test, "UnaryExpression") and test.get("operator") == "!":
            negated = test["argument"]
        else:
            negated = b.unary_expression("!", test, True)
        path.get("test").replace(negated)
        path.get("consequent").replace(alternate)
        path.get("alternate").replace()
