"""Parser adapters turning JavaScript source into ESTree `Node` trees."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Literal, TypeAlias

import esprima

from codemorph.errors import InvalidArgumentError, SourceParseError
from codemorph.nodes import Node, attach_original

logger = logging.getLogger(__name__)

SourceType: TypeAlias = 'Literal["module", "script"]'

# Python-safe attribute names used by esprima for ESTree keywords
_RENAMED_FIELDS = {"isAsync": "async", "allowAwait": "await"}


class ParserAdapter(ABC):
    """Base class for parsers producing ESTree `Node` trees.

    Implementations return a `Program` node whose nodes carry ``range``
    fields, with original snapshots attached so the printer can reuse the
    source text.
    """

    name: str = "parser"

    @abstractmethod
    def parse(self, source: str) -> Node:
        """Parse ``source`` into a `Program` node.

        Raises:
            SourceParseError: If the source is not valid

        """
        ...


class EsprimaParser(ParserAdapter):
    """ESTree parser backed by the ``esprima`` package (ES2017 plus JSX).

    Source is parsed as a module first. With ``fallback`` enabled, source
    rejected as a module (e.g. sloppy-mode code using ``with``) is parsed
    again as a script.
    """

    def __init__(
        self,
        source_type: SourceType = "module",
        *,
        jsx: bool = True,
        fallback: bool = True,
    ) -> None:
        """Initialize the parser.

        Args:
            source_type: Goal symbol to parse with first
            jsx: Whether JSX syntax is accepted
            fallback: Retry as a script when module parsing fails

        """
        self.source_type = source_type
        self.jsx = jsx
        self.fallback = fallback and source_type == "module"
        self.name = "esprima" if self.fallback else f"esprima-{source_type}"

    def __repr__(self) -> str:
        return f"EsprimaParser({self.source_type!r}, jsx={self.jsx}, fallback={self.fallback})"

    def parse(self, source: str) -> Node:
        """Parse ``source`` into a `Program` node."""
        attempts: list[SourceType] = [self.source_type]
        if self.fallback:
            attempts.append("script")

        errors: list[Exception] = []
        for source_type in attempts:
            parse = esprima.parseModule if source_type == "module" else esprima.parseScript
            try:
                tree = parse(source, {"jsx": self.jsx, "range": True})
            except Exception as exc:  # noqa: BLE001
                logger.debug("Parsing as %s failed: %s", source_type, exc)
                errors.append(exc)
                continue
            program = convert(tree)
            program["range"] = [0, len(source)]
            attach_original(program, source)
            return program

        raise SourceParseError(self.name, str(errors[-1])) from errors[-1]


def _is_esprima_object(value: Any) -> bool:
    return type(value).__module__.startswith("esprima")


def convert(value: Any) -> Any:
    """Convert esprima output into `Node` dictionaries.

    Fields are copied in declaration order. ``None`` values are kept, since
    ESTree distinguishes a null field from an absent one.
    """
    if isinstance(value, list):
        return [convert(item) for item in value]
    if not _is_esprima_object(value):
        return value

    fields: dict[str, Any] = {}
    for key, item in vars(value).items():
        if key.startswith("_"):
            continue
        fields[_RENAMED_FIELDS.get(key, key)] = convert(item)
    if isinstance(fields.get("type"), str):
        return Node(fields)
    return fields


PARSERS: dict[str, ParserAdapter] = {
    "esprima": EsprimaParser("module"),
    "esprima-module": EsprimaParser("module", fallback=False),
    "esprima-script": EsprimaParser("script"),
}


def get_parser(parser: str | ParserAdapter | Any | None = None) -> Any:
    """Resolve a parser name or object.

    Args:
        parser: A name from `PARSERS`, any object with a ``parse(source)``
            method, or None for the default parser

    Returns:
        The parser object

    Raises:
        InvalidArgumentError: If the name is unknown or the object cannot parse

    """
    if parser is None:
        return PARSERS["esprima"]
    if isinstance(parser, str):
        if (found := PARSERS.get(parser)) is None:
            available = ", ".join(PARSERS)
            msg = f"Unknown parser '{parser}'. Available parsers: {available}"
            raise InvalidArgumentError(msg)
        return found
    if callable(getattr(parser, "parse", None)):
        return parser
    msg = f"Expected a parser name or an object with a parse() method, got {parser!r}"
    raise InvalidArgumentError(msg)
