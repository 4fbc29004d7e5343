"""Structural subset matching of nodes against patterns."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any, TypeAlias

Pattern: TypeAlias = "Mapping[str, Any] | Sequence[Any] | Callable[[Any], bool] | Any"


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _strict_equal(candidate: Any, pattern: Any) -> bool:
    if isinstance(candidate, bool) or isinstance(pattern, bool):
        return type(candidate) is type(pattern) and candidate == pattern
    if isinstance(candidate, str) != isinstance(pattern, str):
        return False
    return candidate == pattern


def match_node(candidate: Any, pattern: Pattern) -> bool:
    """Check whether ``candidate`` matches ``pattern``.

    A callable pattern is called with the candidate. A mapping or sequence
    pattern matches when every key (or index) it lists is present in the
    candidate and the values match recursively; unlisted keys of the
    candidate are ignored. Anything else is compared by strict equality:
    booleans never equal numbers and strings never equal numbers.

    Args:
        candidate: A node, a field value, or any nested part of either
        pattern: The pattern to match against

    Returns:
        True if the candidate matches

    """
    if callable(pattern):
        return bool(pattern(candidate))

    if isinstance(pattern, Mapping):
        if not isinstance(candidate, Mapping):
            return False
        return all(
            key in candidate and match_node(candidate[key], value)
            for key, value in pattern.items()
        )

    if _is_sequence(pattern):
        if not _is_sequence(candidate):
            return False
        return len(pattern) <= len(candidate) and all(
            match_node(candidate[index], value) for index, value in enumerate(pattern)
        )

    return _strict_equal(candidate, pattern)
