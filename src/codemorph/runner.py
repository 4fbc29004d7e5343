"""Running a transform over many files in worker processes."""

from __future__ import annotations

import importlib.util
import logging
import math
import os
import sys
import time
from collections import Counter
from collections.abc import Callable, Iterable
from concurrent.futures import Future, ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType
from typing import Any, Literal, TypeAlias

from codemorph.core import Codemorph
from codemorph.errors import InvalidArgumentError
from codemorph.ignore import IgnoreRules
from codemorph.options import RunOptions

logger = logging.getLogger(__name__)

Status: TypeAlias = 'Literal["ok", "nochange", "skip", "error"]'
Transform: TypeAlias = "Callable[[FileInfo, API, dict[str, Any]], str | None]"

STATUSES: tuple[Status, ...] = ("ok", "nochange", "skip", "error")
CHUNK_SIZE = 50


@dataclass(frozen=True)
class FileInfo:
    """The file handed to a transform."""

    path: str
    source: str


@dataclass(frozen=True)
class API:
    """Helpers handed to a transform.

    Attributes:
        codemorph: Entry point bound to the run's parser
        stats: ``stats(name, quantity=1)`` adds to a named counter
        report: ``report(message)`` attaches a message to the file's result

    """

    codemorph: Codemorph
    stats: Callable[..., None]
    report: Callable[[str], None]

    @property
    def j(self) -> Codemorph:
        """Short alias of `codemorph`."""
        return self.codemorph


@dataclass(frozen=True)
class FileResult:
    """Outcome of transforming one file."""

    path: str
    status: Status
    error: str | None = None
    output: str | None = None
    stats: dict[str, int] = field(default_factory=dict)
    reports: tuple[str, ...] = ()


@dataclass
class RunReport:
    """Aggregated outcome of a run."""

    counts: Counter[str] = field(default_factory=Counter)
    stats: Counter[str] = field(default_factory=Counter)
    results: list[FileResult] = field(default_factory=list)
    elapsed: float = 0.0

    def add(self, result: FileResult) -> None:
        """Record the result of one file."""
        self.results.append(result)
        self.counts[result.status] += 1
        self.stats.update(result.stats)

    @property
    def total(self) -> int:
        """Number of files processed."""
        return len(self.results)

    @property
    def ok(self) -> int:
        return self.counts["ok"]

    @property
    def nochange(self) -> int:
        return self.counts["nochange"]

    @property
    def skip(self) -> int:
        return self.counts["skip"]

    @property
    def error(self) -> int:
        return self.counts["error"]

    def summary(self) -> list[str]:
        """Describe the run in a few lines of text."""
        lines = [
            f"{self.error} errors",
            f"{self.nochange} unmodified",
            f"{self.skip} skipped",
            f"{self.ok} ok",
        ]
        lines.extend(f"{name}: {count}" for name, count in sorted(self.stats.items()))
        lines.append(f"Time elapsed: {self.elapsed:.3f}s")
        return lines


def load_transform(transform_file: str | Path) -> ModuleType:
    """Import a transform module from a file.

    Raises:
        InvalidArgumentError: If the file cannot be loaded or defines no
            ``transform`` function

    """
    path = Path(transform_file)
    if not path.is_file():
        msg = f"Transform file {path} does not exist"
        raise InvalidArgumentError(msg)
    spec = importlib.util.spec_from_file_location(f"codemorph_transform_{path.stem}", path)
    if spec is None or spec.loader is None:
        msg = f"Cannot load transform file {path}"
        raise InvalidArgumentError(msg)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    if not callable(getattr(module, "transform", None)):
        msg = f"Transform file {path} does not define a transform(file, api, options) function"
        raise InvalidArgumentError(msg)
    return module


def collect_files(paths: Iterable[str | Path], options: RunOptions) -> list[Path]:
    """Expand directories and apply the ignore rules.

    Directories are searched recursively for files with one of the
    configured extensions; files given explicitly are kept whatever their
    extension unless an ignore rule excludes them.
    """
    rules = IgnoreRules.from_files(options.ignore_config)
    rules.extend(options.ignore_patterns)
    extensions = {extension.lstrip(".").lower() for extension in options.extensions}
    cwd = Path.cwd()

    files: dict[Path, None] = {}
    for entry in paths:
        root = Path(entry)
        if root.is_dir():
            for dirpath, dirnames, filenames in os.walk(root):
                directory = Path(dirpath)
                dirnames[:] = sorted(
                    name
                    for name in dirnames
                    if not rules.ignores(directory / name, root, is_dir=True)
                )
                for name in sorted(filenames):
                    candidate = directory / name
                    if candidate.suffix.lstrip(".").lower() not in extensions:
                        continue
                    if not rules.ignores(candidate, root):
                        files[candidate] = None
        elif root.is_file():
            if not rules.ignores(root.absolute(), cwd):
                files[root] = None
        else:
            logger.warning("Skipping %s: no such file or directory", root)
    return list(files)


def transform_file(
    transform: Transform,
    path: str | Path,
    codemorph: Codemorph,
    options: RunOptions,
) -> FileResult:
    """Apply ``transform`` to one file, writing the result unless dry.

    Exceptions raised by the transform are reported as an ``error`` status.
    """
    path = str(path)
    try:
        source = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        return FileResult(path, "error", error=f"{type(exc).__name__}: {exc}")

    stats: Counter[str] = Counter()
    reports: list[str] = []

    def count(name: str, quantity: int = 1) -> None:
        stats[name] += quantity

    api = API(codemorph, count, reports.append)
    try:
        output = transform(FileInfo(path, source), api, dict(options.transform_options))
        if output is not None and not isinstance(output, str):
            msg = f"transform() must return a string or None, got {type(output).__name__}"
            raise InvalidArgumentError(msg)
    except Exception as exc:  # noqa: BLE001
        logger.debug("Transform failed on %s", path, exc_info=True)
        return FileResult(
            path,
            "error",
            error=f"{type(exc).__name__}: {exc}",
            stats=dict(stats),
            reports=tuple(reports),
        )

    if not output:
        status: Status = "skip"
    elif output == source:
        status = "nochange"
    else:
        status = "ok"
        if not options.dry:
            Path(path).write_text(output, encoding="utf-8")
    return FileResult(
        path,
        status,
        output=output if options.print_output else None,
        stats=dict(stats),
        reports=tuple(reports),
    )


def _run_chunk(transform_path: str, paths: list[str], options: RunOptions) -> list[FileResult]:
    module = load_transform(transform_path)
    codemorph = Codemorph(getattr(module, "parser", None) or options.parser)
    return [transform_file(module.transform, path, codemorph, options) for path in paths]


def _log_result(result: FileResult, options: RunOptions) -> None:
    if options.silent:
        return
    for message in result.reports:
        logger.info(" REP %s %s", result.path, message)
    if result.status == "error":
        if options.verbose >= 1:
            logger.error(" ERR %s %s", result.path, result.error)
    elif options.verbose >= 2:
        label = {"ok": "OKK", "nochange": "NOC", "skip": "SKIP"}[result.status]
        logger.info("%4s %s", label, result.path)
    if result.output is not None:
        sys.stdout.write(result.output)


def run(
    transform_path: str | Path,
    paths: Iterable[str | Path],
    options: RunOptions | None = None,
) -> RunReport:
    """Run a transform file over files and directories.

    Files are split into chunks and processed by worker processes, or in
    this process when only one CPU is requested.

    Args:
        transform_path: Python file defining ``transform(file, api, options)``
        paths: Files and directories to process
        options: Run configuration

    Returns:
        Per-status counts, summed stats and per-file results

    Raises:
        InvalidArgumentError: If the transform file cannot be loaded

    """
    options = options or RunOptions()
    started = time.perf_counter()
    load_transform(transform_path)

    files = [str(path) for path in collect_files(paths, options)]
    report = RunReport()
    if not files:
        logger.warning("No files selected, nothing to do")
        return report

    cpus = options.cpus or max(1, (os.cpu_count() or 2) - 1)
    workers = min(cpus, len(files))
    size = min(CHUNK_SIZE, math.ceil(len(files) / workers))
    chunks = [files[index : index + size] for index in range(0, len(files), size)]
    if not options.silent:
        logger.info("Processing %d files with %d workers", len(files), workers)

    transform_file_path = str(transform_path)
    if workers == 1:
        for chunk in chunks:
            for result in _run_chunk(transform_file_path, chunk, options):
                report.add(result)
                _log_result(result, options)
    else:
        with ProcessPoolExecutor(max_workers=workers) as pool:
            futures: dict[Future[list[FileResult]], list[str]] = {
                pool.submit(_run_chunk, transform_file_path, chunk, options): chunk
                for chunk in chunks
            }
            for future in as_completed(futures):
                try:
                    results = future.result()
                except Exception as exc:  # noqa: BLE001
                    logger.error("Worker failed: %s", exc)
                    error = f"{type(exc).__name__}: {exc}"
                    results = [FileResult(path, "error", error=error) for path in futures[future]]
                for result in results:
                    report.add(result)
                    _log_result(result, options)

    report.elapsed = time.perf_counter() - started
    return report
