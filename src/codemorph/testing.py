"""Helpers for testing transforms against inline sources or fixture files.

Usage with pytest::

    from codemorph.testing import define_inline_test, define_test

    test_rename = define_inline_test(
        my_transform, {}, "var foo;", "var bar;", name="test_rename"
    )
    test_fixture = define_test(Path(__file__).parent, "my_transform")
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from types import ModuleType
from typing import Any, TypeAlias

from codemorph.core import Codemorph
from codemorph.errors import InvalidArgumentError
from codemorph.runner import API, FileInfo, Transform, load_transform

TransformSource: TypeAlias = "Transform | ModuleType | str | Path"


def _resolve(transform: TransformSource) -> tuple[Transform, Any]:
    if isinstance(transform, (str, Path)):
        transform = load_transform(transform)
    if isinstance(transform, ModuleType):
        function = getattr(transform, "transform", None)
        if not callable(function):
            msg = f"Module {transform.__name__} does not define a transform function"
            raise InvalidArgumentError(msg)
        return function, getattr(transform, "parser", None)
    if callable(transform):
        return transform, None
    msg = f"Expected a transform function, module or file, got {transform!r}"
    raise InvalidArgumentError(msg)


def apply_transform(
    transform: TransformSource,
    source: str,
    options: dict[str, Any] | None = None,
    *,
    path: str = "test.js",
    parser: Any = None,
) -> str:
    """Run a transform on ``source`` and return its output.

    Args:
        transform: Transform function, module defining ``transform``, or the
            path of a transform file
        source: Input source text
        options: Options passed to the transform
        path: File path reported to the transform
        parser: Parser overriding the module's ``parser``

    Returns:
        The output with surrounding whitespace stripped; an empty string when
        the transform skipped the file

    """
    function, module_parser = _resolve(transform)
    codemorph = Codemorph(parser or module_parser)
    api = API(codemorph, lambda name, quantity=1: None, lambda message: None)
    output = function(FileInfo(path, source), api, dict(options or {}))
    return (output or "").strip()


def run_inline_test(
    transform: TransformSource,
    options: dict[str, Any] | None,
    source: str,
    expected: str,
    *,
    parser: Any = None,
) -> str:
    """Check that the transform turns ``source`` into ``expected``.

    Raises:
        AssertionError: If the output differs from ``expected``

    """
    output = apply_transform(transform, source, options, parser=parser)
    expected = expected.strip()
    if output != expected:
        msg = (
            "Transform output differs from expected output.\n"
            f"--- got\n{output}\n--- expected\n{expected}"
        )
        raise AssertionError(msg)
    return output


def define_inline_test(
    transform: TransformSource,
    options: dict[str, Any] | None,
    source: str,
    expected: str,
    *,
    name: str = "test_transform",
    parser: Any = None,
) -> Callable[[], None]:
    """Build a test function running `run_inline_test`."""

    def test() -> None:
        run_inline_test(transform, options, source, expected, parser=parser)

    test.__name__ = test.__qualname__ = name
    return test


def _fixture_prefix(transform: TransformSource) -> str:
    if isinstance(transform, (str, Path)):
        return Path(transform).stem
    if isinstance(transform, ModuleType):
        return transform.__name__.rsplit(".", 1)[-1]
    return getattr(transform, "__name__", "transform")


def run_test(
    directory: str | Path,
    transform: TransformSource,
    options: dict[str, Any] | None = None,
    prefix: str | None = None,
    *,
    extension: str = "js",
    parser: Any = None,
) -> str:
    """Check a transform against ``testfixtures/<prefix>.input.<ext>``.

    A bare transform name is resolved as ``<directory>/<name>.py``.

    Args:
        directory: Directory holding the transform and its ``testfixtures``
        transform: Transform, or the name of a transform file in ``directory``
        options: Options passed to the transform
        prefix: Fixture name, the transform's name by default
        extension: Fixture file extension
        parser: Parser overriding the module's ``parser``

    Raises:
        AssertionError: If the output differs from the ``.output`` fixture

    """
    directory = Path(directory)
    if isinstance(transform, str) and not transform.endswith(".py"):
        transform = directory / f"{transform}.py"
    prefix = prefix or _fixture_prefix(transform)
    fixtures = directory / "testfixtures"
    source = (fixtures / f"{prefix}.input.{extension}").read_text(encoding="utf-8")
    expected = (fixtures / f"{prefix}.output.{extension}").read_text(encoding="utf-8")
    return run_inline_test(transform, options, source, expected, parser=parser)


def define_test(
    directory: str | Path,
    transform: TransformSource,
    options: dict[str, Any] | None = None,
    prefix: str | None = None,
    *,
    extension: str = "js",
    parser: Any = None,
) -> Callable[[], None]:
    """Build a test function running `run_test`."""

    def test() -> None:
        run_test(directory, transform, options, prefix, extension=extension, parser=parser)

    test.__name__ = test.__qualname__ = f"test_{prefix or _fixture_prefix(transform)}"
    return test
