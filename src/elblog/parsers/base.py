"""Parser protocol implemented by every line parser."""
from __future__ import annotations

from typing import Iterator, Protocol, runtime_checkable

from ..record import LogRecord


@runtime_checkable
class LogParser(Protocol):
    """Protocol for log parsers; duck-typed, no inheritance required."""

    def parse_line(self, line: bytes | str) -> LogRecord:
        """Parse a single log line. Raises ParseError if it is malformed."""
        ...

    def parse_file(self, path: str) -> Iterator[LogRecord]:
        """Stream-parse a log file line by line."""
        ...

    @property
    def name(self) -> str:
        """Human-readable parser name (e.g. 'elb')."""
        ...
