"""Configuration objects for printing and running transforms."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal


@dataclass(frozen=True)
class PrintOptions:
    """Formatting choices for code the printer has to generate.

    Text reused from the original source keeps its formatting; these options
    only affect nodes that are printed from scratch.

    Attributes:
        quote: Quote style for new string literals
        tab_width: Spaces per indentation level; inferred from the original
            source when None, falling back to 4
        use_tabs: Indent with tab characters instead of spaces
        line_terminator: Line break used between generated lines
        trailing_comma: Add trailing commas to multi-line objects and arrays

    """

    quote: Literal["double", "single"] = "double"
    tab_width: int | None = None
    use_tabs: bool = False
    line_terminator: str = "\n"
    trailing_comma: bool = False

    def __post_init__(self) -> None:
        """Validate option values."""
        if self.quote not in ("double", "single"):
            msg = f"quote must be 'double' or 'single', got {self.quote!r}"
            raise ValueError(msg)
        if self.tab_width is not None and self.tab_width < 1:
            msg = f"tab_width must be positive, got {self.tab_width}"
            raise ValueError(msg)


DEFAULT_EXTENSIONS = ("js", "jsx", "mjs", "cjs")


@dataclass(frozen=True)
class RunOptions:
    """Options of a transform run over many files.

    Attributes:
        cpus: Worker processes; all but one CPU when None
        dry: Do not write changed files back
        print_output: Print transformed sources to stdout
        verbose: 0 reports totals, 1 adds per-file errors, 2 every file
        extensions: File extensions searched for in directories
        ignore_patterns: Glob patterns of paths to leave out
        ignore_config: Files with one ignore pattern per line
        parser: Parser name used for sources, unless the transform sets one
        silent: Suppress all output
        transform_options: Extra options handed to the transform

    """

    cpus: int | None = None
    dry: bool = False
    print_output: bool = False
    verbose: int = 0
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    ignore_patterns: tuple[str, ...] = ()
    ignore_config: tuple[str, ...] = ()
    parser: str = "esprima"
    silent: bool = False
    transform_options: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate option values."""
        if self.cpus is not None and self.cpus < 1:
            msg = f"cpus must be at least 1, got {self.cpus}"
            raise ValueError(msg)
        if self.verbose not in (0, 1, 2):
            msg = f"verbose must be 0, 1 or 2, got {self.verbose}"
            raise ValueError(msg)
