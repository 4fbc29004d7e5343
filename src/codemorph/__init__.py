"""codemorph - Codemod toolkit for JavaScript syntax trees."""

from codemorph import builders
from codemorph.collection import Collection
from codemorph.core import Codemorph, codemorph, j
from codemorph.errors import (
    CodemorphError,
    ConflictingRegistrationError,
    InvalidArgumentError,
    PathError,
    SourceParseError,
    UnsupportedOperationError,
)
from codemorph.match import match_node
from codemorph.nodes import Node, is_node
from codemorph.options import PrintOptions, RunOptions
from codemorph.parser import EsprimaParser, ParserAdapter, get_parser
from codemorph.paths import NodePath
from codemorph.printer import print_node
from codemorph.registry import MethodRegistry
from codemorph.runner import API, FileInfo, RunReport, run
from codemorph.scope import Scope
from codemorph.template import Template
from codemorph.types import ESTREE, NamedType, is_kind, supertypes

__all__ = [
    # Engine
    "API",
    "Codemorph",
    "Collection",
    # Errors
    "CodemorphError",
    "ConflictingRegistrationError",
    "ESTREE",
    "EsprimaParser",
    "FileInfo",
    "InvalidArgumentError",
    "MethodRegistry",
    "NamedType",
    # Trees
    "Node",
    "NodePath",
    "ParserAdapter",
    "PathError",
    "PrintOptions",
    "RunOptions",
    "RunReport",
    "Scope",
    "SourceParseError",
    "Template",
    "UnsupportedOperationError",
    "builders",
    "codemorph",
    "get_parser",
    "is_kind",
    "is_node",
    "j",
    "match_node",
    "print_node",
    "run",
    "supertypes",
]
