"""Exception hierarchy for ELB access-log decoding.

Parse errors are scoped to one line and leave the decoder usable.
Stream errors wrap the underlying ``OSError`` and end the session.
"""
from __future__ import annotations


class ElbLogError(Exception):
    """Base class for every error raised by elblog."""


class ParseError(ElbLogError):
    """A single line could not be turned into a record.

    ``line_number`` is filled in by the decoder (1-based) and stays ``None``
    when the line was parsed on its own.
    """

    line_number: int | None = None

    def _where(self) -> str:
        return f"line {self.line_number}: " if self.line_number is not None else ""


class ArityError(ParseError):
    """The line has more or fewer tokens than the format defines."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(expected, actual)
        self.expected = expected
        self.actual = actual

    def __str__(self) -> str:
        return f"{self._where()}expected {self.expected} fields, got {self.actual}"


class FieldFormatError(ParseError):
    """One field's raw token failed its typed conversion."""

    def __init__(self, field: str, value: str, reason: str) -> None:
        super().__init__(field, value, reason)
        self.field = field
        self.value = value
        self.reason = reason

    def __str__(self) -> str:
        return f"{self._where()}invalid {self.field} {self.value!r}: {self.reason}"


class StreamReadError(ElbLogError):
    """Reading the next line from the underlying stream failed."""


class DecoderExhaustedError(ElbLogError):
    """``decode_next`` was called after the stream reported end-of-input."""
