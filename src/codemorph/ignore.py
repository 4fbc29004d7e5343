"""Gitignore-style rules for leaving files out of a run."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path, PurePath

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IgnorePattern:
    """One ignore rule.

    Attributes:
        glob: The glob, without negation, anchoring or trailing slash
        negated: The rule re-includes matching paths (``!pattern``)
        directory_only: The rule only matches directories (``pattern/``)
        anchored: The glob matches the path relative to the root rather than
            a single path component

    """

    glob: str
    negated: bool = False
    directory_only: bool = False
    anchored: bool = False

    @classmethod
    def parse(cls, line: str) -> IgnorePattern | None:
        """Parse a rule, returning None for blank lines and comments."""
        line = line.strip()
        if not line or line.startswith("#"):
            return None
        negated = line.startswith("!")
        line = line.removeprefix("!")
        directory_only = line.endswith("/")
        line = line.rstrip("/")
        line = line.removeprefix("**/")
        anchored = "/" in line
        line = line.lstrip("/")
        if not line:
            return None
        return cls(line, negated, directory_only, anchored)

    def matches(self, parts: tuple[str, ...], *, is_dir: bool = False) -> bool:
        """Check the path given by its ``parts`` and each of its ancestors."""
        for end in range(1, len(parts) + 1):
            prefix_is_dir = end < len(parts) or is_dir
            if self.directory_only and not prefix_is_dir:
                continue
            target = "/".join(parts[:end]) if self.anchored else parts[end - 1]
            if fnmatchcase(target, self.glob):
                return True
        return False


class IgnoreRules:
    """An ordered list of ignore rules; the last matching rule decides.

    Usage:
        rules = IgnoreRules(["node_modules/", "*.min.js"])
        rules.ignores(Path("src/vendor/lib.min.js"), root=Path("src"))
    """

    def __init__(self, patterns: Iterable[str] = ()) -> None:
        """Initialize the rules.

        Args:
            patterns: Rules in gitignore syntax

        """
        self.patterns: list[IgnorePattern] = []
        self.extend(patterns)

    def __len__(self) -> int:
        return len(self.patterns)

    @classmethod
    def from_files(cls, files: Iterable[str | Path]) -> IgnoreRules:
        """Load rules from files holding one rule per line."""
        rules = cls()
        for file in files:
            lines = Path(file).read_text(encoding="utf-8").splitlines()
            rules.extend(lines)
            logger.debug("Loaded ignore rules from %s", file)
        return rules

    def extend(self, patterns: Iterable[str]) -> None:
        """Append rules."""
        for line in patterns:
            if (pattern := IgnorePattern.parse(line)) is not None:
                self.patterns.append(pattern)

    def ignores(
        self,
        path: str | PurePath,
        root: str | PurePath | None = None,
        *,
        is_dir: bool = False,
    ) -> bool:
        """Check whether ``path`` is excluded.

        Args:
            path: Path to check
            root: Directory anchored rules are relative to
            is_dir: Whether ``path`` itself is a directory

        Returns:
            True if the last matching rule excludes the path

        """
        path = PurePath(path)
        if root is not None and path.is_relative_to(root):
            path = path.relative_to(root)
        parts = tuple(part for part in path.parts if part not in (path.anchor, "."))
        ignored = False
        for pattern in self.patterns:
            if pattern.matches(parts, is_dir=is_dir):
                ignored = not pattern.negated
        return ignored
