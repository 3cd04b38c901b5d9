"""Multiprocessing fan-out for large access logs.

Strategy:
    1. Lines are read sequentially so input order is preserved.
    2. A window of ``workers * chunksize`` raw lines is handed to the pool;
       each worker runs the pure line parser over ``chunksize`` of them.
    3. ``Pool.map`` returns the window's results in submission order, and
       the next window is only read once those have been yielded.

Memory stays bounded by one window, and a caller that stops early stops
reading. Errors come back as values, so one malformed line never sinks a
batch.

Usage::

    from elblog.perf.parallel_parser import parse_file_parallel

    for result in parse_file_parallel("access.log", workers=8):
        if isinstance(result, ParseError):
            continue
        handle(result)
"""
from __future__ import annotations

import logging
import os
from itertools import chain, islice
from multiprocessing import Pool
from typing import Iterable, Iterator

from ..errors import ParseError, StreamReadError
from ..parsers.elb import parse_line
from ..record import LogRecord

logger = logging.getLogger(__name__)

Result = LogRecord | ParseError


def _parse_one(args: tuple[int, bytes | str]) -> Result:
    """Worker function: parse one numbered line, returning errors as values."""
    number, raw = args
    try:
        return parse_line(raw)
    except ParseError as exc:
        exc.line_number = number
        return exc


def parse_lines_parallel(
    lines: Iterable[bytes | str],
    workers: int | None = None,
    chunksize: int = 1000,
) -> Iterator[Result]:
    """Lazily parse ``lines`` on a process pool.

    Args:
        lines:     Raw lines, terminators optional. Consumed one window at
                   a time, never all at once.
        workers:   Number of worker processes. Defaults to os.cpu_count().
        chunksize: Lines sent to a worker per task.

    Yields:
        One LogRecord or ParseError per input line, in input order.
    """
    numbered = enumerate(lines, start=1)
    n = workers or os.cpu_count() or 4
    first = list(islice(numbered, chunksize))

    if n == 1 or len(first) < chunksize:
        # Single worker or a single short batch: skip multiprocessing overhead
        for item in chain(first, numbered):
            yield _parse_one(item)
        return

    window = n * chunksize
    logger.debug("Parsing on %d workers, %d lines per window", n, window)
    with Pool(processes=n) as pool:
        batch = first + list(islice(numbered, window - len(first)))
        while batch:
            yield from pool.map(_parse_one, batch, chunksize=chunksize)
            batch = list(islice(numbered, window))


def _read_lines(path: str) -> Iterator[bytes]:
    try:
        with open(path, "rb") as fh:
            yield from fh
    except OSError as exc:
        raise StreamReadError(f"failed to read {path}: {exc}") from exc


def parse_file_parallel(
    path: str,
    workers: int | None = None,
    chunksize: int = 1000,
) -> Iterator[Result]:
    """Stream ``path`` line by line through :func:`parse_lines_parallel`."""
    return parse_lines_parallel(_read_lines(path), workers=workers, chunksize=chunksize)


def benchmark(path: str, workers: int | None = None) -> dict[str, float]:
    """Parse path and return throughput statistics."""
    import time

    start = time.perf_counter()
    lines = errors = 0
    for result in parse_file_parallel(path, workers=workers):
        lines += 1
        if isinstance(result, ParseError):
            errors += 1
    elapsed = time.perf_counter() - start

    return {
        "lines": lines,
        "errors": errors,
        "elapsed_sec": round(elapsed, 3),
        "lines_per_sec": round(lines / elapsed) if elapsed > 0 else 0,
        "workers": workers or os.cpu_count() or 4,
    }
