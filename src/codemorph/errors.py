"""Exception hierarchy for codemorph.

Every error raised on purpose by the engine derives from `CodemorphError`.
Errors raised by transform functions are never wrapped; they propagate to
whoever invoked the transform.
"""

from __future__ import annotations

from collections.abc import Iterable


class CodemorphError(Exception):
    """Base exception for all codemorph errors."""


class InvalidArgumentError(CodemorphError, TypeError, ValueError):
    """Raised when a construction or entry point call receives malformed input."""


class ConflictingRegistrationError(CodemorphError):
    """Raised when two method registrations overlap on related node kinds."""

    def __init__(self, method: str, kind: str | None, reason: str) -> None:
        """Initialize the exception.

        Args:
            method: Name of the method being registered
            kind: Kind the registration was scoped to (None for universal)
            reason: Human readable description of the overlap

        """
        self.method = method
        self.kind = kind
        scope = f"type '{kind}'" if kind else "all types"
        super().__init__(f"Cannot register '{method}' for {scope}: {reason}")


class UnsupportedOperationError(CodemorphError, TypeError):
    """Raised when a typed method is called on a collection of the wrong kind."""

    def __init__(
        self,
        method: str,
        collection_types: Iterable[str],
        supported_types: Iterable[str],
    ) -> None:
        """Initialize the exception.

        Args:
            method: Name of the method that was called
            collection_types: Inferred types of the receiving collection
            supported_types: Types the method has implementations for

        """
        self.method = method
        self.collection_types = tuple(collection_types)
        self.supported_types = tuple(supported_types)
        super().__init__(
            f"You have a collection of type [{', '.join(self.collection_types)}]. "
            f"'{method}' is only defined for: {', '.join(self.supported_types)}."
        )


class SourceParseError(CodemorphError):
    """Raised when the configured parser rejects the source text."""

    def __init__(self, parser: str, reason: str) -> None:
        """Initialize the exception.

        Args:
            parser: Name of the parser that failed
            reason: The parser's own error message

        """
        self.parser = parser
        self.reason = reason
        super().__init__(f"{parser} could not parse source: {reason}")


class PathError(CodemorphError):
    """Raised when a position is used in a way its location does not allow."""
