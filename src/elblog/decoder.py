"""Streaming decoder: one access-log record per line of a byte stream.

Usage::

    with open("access.log", "rb") as fh:
        dec = Decoder(fh)
        while dec.has_more():
            try:
                record = dec.decode_next()
            except ParseError as exc:
                print(exc)
                continue
            handle(record)

At most one line is read ahead of the caller, and only by ``has_more``.
A decoder is not thread-safe; use one per worker.
"""
from __future__ import annotations

import logging
from typing import BinaryIO, Iterator

from .errors import DecoderExhaustedError, ParseError, StreamReadError
from .parsers.elb import parse_line
from .record import LogRecord

logger = logging.getLogger(__name__)


class Decoder:
    """Pull-based decoder over anything with a ``readline()`` method."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._pending: bytes | None = None
        self._exhausted = False
        self.line_number = 0

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def has_more(self) -> bool:
        """Return True if another line is available.

        Reads at most one line into the look-ahead slot; repeated calls
        without ``decode_next`` in between do not touch the stream again.
        """
        if self._pending is not None:
            return True
        if self._exhausted:
            return False
        try:
            raw = self._stream.readline()
        except OSError as exc:
            raise StreamReadError(
                f"failed to read line {self.line_number + 1}: {exc}"
            ) from exc
        if not raw:
            self._exhausted = True
            logger.debug("Stream exhausted after %d lines", self.line_number)
            return False
        self._pending = raw
        return True

    def decode_next(self) -> LogRecord:
        """Consume one line and parse it.

        Parse errors propagate with ``line_number`` set; the decoder stays
        usable and the failed line is not retried.
        """
        if not self.has_more():
            raise DecoderExhaustedError("decode_next() called on an exhausted stream")
        raw = self._pending
        self._pending = None
        self.line_number += 1
        try:
            return parse_line(raw)
        except ParseError as exc:
            exc.line_number = self.line_number
            raise

    def __iter__(self) -> Iterator[LogRecord]:
        while self.has_more():
            yield self.decode_next()

    def iter_records(self, skip_errors: bool = False) -> Iterator[LogRecord]:
        """Yield records; with ``skip_errors`` bad lines are logged and dropped."""
        while self.has_more():
            try:
                record = self.decode_next()
            except ParseError as exc:
                if not skip_errors:
                    raise
                logger.warning("Skipping malformed line: %s", exc)
                continue
            yield record

    def iter_results(self) -> Iterator[tuple[int, LogRecord | ParseError]]:
        """Yield ``(line_number, record_or_error)`` for every line, in order."""
        while self.has_more():
            try:
                result: LogRecord | ParseError = self.decode_next()
            except ParseError as exc:
                result = exc
            yield self.line_number, result


def decode_file(path: str, skip_errors: bool = False) -> Iterator[LogRecord]:
    """Open ``path`` in binary mode and stream its records."""
    with open(path, "rb") as fh:
        yield from Decoder(fh).iter_records(skip_errors=skip_errors)
