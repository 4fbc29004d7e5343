"""Querying and editing ``import`` declarations."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from codemorph import builders as b
from codemorph.collections.node import find
from codemorph.errors import InvalidArgumentError
from codemorph.types import is_kind

if TYPE_CHECKING:
    from codemorph.collection import Collection
    from codemorph.registry import MethodRegistry


def _require_source(value: Any, operation: str, what: str = "a source path") -> str:
    if not value or not isinstance(value, str):
        msg = f"{operation}(...) needs {what}"
        raise InvalidArgumentError(msg)
    return value


def find_import_declarations(collection: Collection, source_path: str) -> Collection:
    """Find the import declarations loading ``source_path``."""
    _require_source(source_path, "find_import_declarations")
    return find(collection, "ImportDeclaration", {"source": {"value": source_path}})


def has_import_declaration(collection: Collection, source_path: str) -> bool:
    """Check whether any import declaration loads ``source_path``."""
    _require_source(source_path, "has_import_declaration")
    return find_import_declarations(collection, source_path).size() > 0


def insert_import_declaration(
    collection: Collection,
    source_path: str,
    specifiers: Sequence[Any],
) -> Collection:
    """Add ``import <specifiers> from "<source_path>"`` at the top of each program.

    Nothing is inserted when an import of ``source_path`` already exists.

    Args:
        collection: Collection whose `Program` positions receive the import
        source_path: Module to import from
        specifiers: Import specifier nodes

    Returns:
        The collection itself

    Raises:
        InvalidArgumentError: If the source path is missing or the specifiers
            are not a list

    """
    _require_source(source_path, "insert_import_declaration")
    if isinstance(specifiers, (str, bytes)) or not isinstance(specifiers, Sequence):
        msg = "insert_import_declaration(...) needs a list of specifiers"
        raise InvalidArgumentError(msg)

    if has_import_declaration(collection, source_path):
        return collection

    declaration = b.import_declaration(list(specifiers), b.literal(source_path))
    for path in collection.paths():
        if is_kind(path.value, "Program"):
            path.get("body").insert_at(0, declaration)
    return collection


def rename_import_declaration(
    collection: Collection,
    source_path: str,
    new_source_path: str,
) -> Collection:
    """Point every import of ``source_path`` at ``new_source_path`` instead."""
    _require_source(source_path, "rename_import_declaration", "a name to look for")
    _require_source(new_source_path, "rename_import_declaration", "a new name to rename to")
    for path in find_import_declarations(collection, source_path).paths():
        path.get("source", "value").replace(new_source_path)
        path.value["source"].pop("raw", None)
    return collection


METHODS = {
    "find_import_declarations": find_import_declarations,
    "has_import_declaration": has_import_declaration,
    "insert_import_declaration": insert_import_declaration,
    "rename_import_declaration": rename_import_declaration,
}


def register(registry: MethodRegistry) -> None:
    """Install the import declaration methods."""
    registry.register_methods(METHODS, "Node")
