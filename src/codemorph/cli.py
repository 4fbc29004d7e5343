"""Command line interface: ``codemorph -t transform.py src/``."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from typing import Any

from codemorph.errors import CodemorphError
from codemorph.options import DEFAULT_EXTENSIONS, RunOptions
from codemorph.parser import PARSERS
from codemorph.runner import run

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="codemorph",
        description="Apply a transform to JavaScript files.",
        epilog="Unknown --key=value flags are passed to the transform as options.",
    )
    parser.add_argument("paths", nargs="+", help="files or directories to transform")
    parser.add_argument(
        "-t", "--transform", default="transform.py", help="transform file (default: %(default)s)"
    )
    parser.add_argument("-c", "--cpus", type=int, help="worker processes (default: CPUs - 1)")
    parser.add_argument(
        "-v", "--verbose", type=int, choices=(0, 1, 2), default=0, help="output detail level"
    )
    parser.add_argument("-d", "--dry", action="store_true", help="do not write files")
    parser.add_argument(
        "-p", "--print", dest="print_output", action="store_true", help="print transformed files"
    )
    parser.add_argument(
        "--extensions",
        default=",".join(DEFAULT_EXTENSIONS),
        help="comma separated extensions searched for in directories (default: %(default)s)",
    )
    parser.add_argument(
        "--ignore-pattern",
        action="append",
        default=[],
        help="glob of paths to leave out; may be repeated",
    )
    parser.add_argument(
        "--ignore-config",
        action="append",
        default=[],
        help="file of ignore patterns; may be repeated",
    )
    parser.add_argument(
        "--parser",
        choices=sorted(PARSERS),
        default="esprima",
        help="parser used unless the transform sets one (default: %(default)s)",
    )
    parser.add_argument("-s", "--silent", action="store_true", help="no output")
    return parser


def parse_transform_options(extra: Sequence[str]) -> dict[str, Any]:
    """Turn leftover ``--key=value`` flags into transform options.

    A flag without a value is True. Dashes in keys become underscores.

    Raises:
        ValueError: If an argument is not a ``--`` flag

    """
    options: dict[str, Any] = {}
    for argument in extra:
        if not argument.startswith("--") or argument == "--":
            msg = f"Unrecognized argument: {argument}"
            raise ValueError(msg)
        key, separator, value = argument[2:].partition("=")
        options[key.replace("-", "_")] = value if separator else True
    return options


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line interface.

    Returns:
        Exit status: 1 if any file failed, 0 otherwise

    """
    parser = build_parser()
    args, extra = parser.parse_known_args(argv)
    try:
        transform_options = parse_transform_options(extra)
    except ValueError as exc:
        parser.error(str(exc))

    if not args.silent:
        level = logging.DEBUG if args.verbose == 2 else logging.INFO
        logging.basicConfig(level=level, format="%(message)s")

    try:
        options = RunOptions(
            cpus=args.cpus,
            dry=args.dry,
            print_output=args.print_output,
            verbose=args.verbose,
            extensions=tuple(ext.strip() for ext in args.extensions.split(",") if ext.strip()),
            ignore_patterns=tuple(args.ignore_pattern),
            ignore_config=tuple(args.ignore_config),
            parser=args.parser,
            silent=args.silent,
            transform_options=transform_options,
        )
    except ValueError as exc:
        parser.error(str(exc))

    try:
        report = run(args.transform, args.paths, options)
    except (CodemorphError, OSError) as exc:
        logger.error("%s", exc)
        return 1

    if not args.silent:
        for line in report.summary():
            logger.info("%s", line)
    return 1 if report.error else 0


if __name__ == "__main__":
    sys.exit(main())
