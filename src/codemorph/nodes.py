"""ESTree node representation shared by the parser, paths and printer."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

# Keys carrying location or bookkeeping data rather than child nodes
META_KEYS = frozenset(
    {
        "type",
        "range",
        "loc",
        "start",
        "end",
        "comments",
        "leadingComments",
        "trailingComments",
        "innerComments",
        "extra",
    }
)


class Node(dict[str, Any]):
    """A syntax tree node.

    A node is a plain dictionary whose ``"type"`` entry names its kind, so it
    compares, matches and serializes like the ESTree JSON it mirrors. Nodes
    produced by a parser additionally carry two attributes that stay out of
    the dictionary:

    - ``original``: shallow snapshot of the node as parsed; child nodes are
      shared by identity, lists are copied
    - ``source``: the text the node was parsed from

    The printer compares a node against its snapshot to decide which parts
    of the original text it can reuse.
    """

    original: Node | None = None
    source: str | None = None

    @property
    def kind(self) -> str:
        """The node's kind name."""
        return self["type"]

    def __repr__(self) -> str:
        return f"Node({dict.__repr__(self)})"


def is_node(value: Any) -> bool:
    """Check whether ``value`` is a syntax tree node (a mapping with a kind)."""
    return isinstance(value, Mapping) and isinstance(value.get("type"), str)


def node_kind(value: Any) -> str | None:
    """Get the kind of ``value`` or None when it is not a node."""
    return value["type"] if is_node(value) else None


def child_fields(node: Mapping[str, Any]) -> Iterator[tuple[str, Any]]:
    """Yield ``(key, value)`` for every field that may hold child nodes.

    Node-valued fields and list-valued fields are yielded in field order.
    Metadata keys are skipped.
    """
    for key, value in node.items():
        if key in META_KEYS:
            continue
        if isinstance(value, list) or is_node(value):
            yield key, value


def iter_nodes(root: Any) -> Iterator[Mapping[str, Any]]:
    """Yield every node of the tree below and including ``root``, pre-order."""
    stack = [root]
    while stack:
        value = stack.pop()
        if isinstance(value, list):
            stack.extend(reversed(value))
        elif is_node(value):
            yield value
            stack.extend(reversed([child for _, child in child_fields(value)]))


def snapshot(node: Mapping[str, Any]) -> Node:
    """Take a shallow copy of ``node`` with its lists copied."""
    return Node(
        {
            key: list(value) if isinstance(value, list) else value
            for key, value in node.items()
        }
    )


def attach_original(root: Any, source: str) -> None:
    """Record the as-parsed state of every `Node` in the tree.

    Args:
        root: Root of the freshly parsed tree
        source: The text the tree was parsed from

    """
    for node in iter_nodes(root):
        if isinstance(node, Node):
            node.original = snapshot(node)
            node.source = source


def to_node(value: Any) -> Any:
    """Recursively convert plain mappings with a kind into `Node` objects."""
    if isinstance(value, list):
        return [to_node(item) for item in value]
    if isinstance(value, Mapping):
        converted = {key: to_node(item) for key, item in value.items()}
        return Node(converted) if is_node(value) else converted
    return value
