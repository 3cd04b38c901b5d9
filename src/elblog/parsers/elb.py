"""Classic ELB access-log line parser.

Format (space separated, request and user agent double-quoted)::

    type time elb client:port backend:port request_processing_time
    backend_processing_time response_processing_time elb_status_code
    backend_status_code received_bytes sent_bytes "request" "user_agent"
    ssl_cipher ssl_protocol
"""
from __future__ import annotations

from typing import Iterator

from ..errors import ArityError, FieldFormatError
from ..record import LogRecord
from .fields import parse_address, parse_duration, parse_timestamp, parse_uint

FIELD_NAMES: tuple[str, ...] = (
    "type",
    "time",
    "name",
    "client",
    "backend",
    "request_processing_time",
    "backend_processing_time",
    "response_processing_time",
    "elb_status_code",
    "backend_status_code",
    "received_bytes",
    "sent_bytes",
    "request",
    "user_agent",
    "ssl_cipher",
    "ssl_protocol",
)

_WHITESPACE = " \t"


def tokenize(line: str) -> list[str]:
    """Split on whitespace, keeping double-quoted runs intact without quotes.

    Only space and tab separate tokens; any other character, including
    other whitespace such as ``\\v`` or ``\\f``, stays part of its token.
    An unclosed quote at end of line raises FieldFormatError.
    """
    tokens: list[str] = []
    buf: list[str] = []
    in_token = False
    in_quotes = False
    quote_start = 0

    for i, ch in enumerate(line):
        if in_quotes:
            if ch == '"':
                in_quotes = False
            else:
                buf.append(ch)
        elif ch == '"':
            in_quotes = True
            in_token = True
            quote_start = i
        elif ch in _WHITESPACE:
            if in_token:
                tokens.append("".join(buf))
                buf.clear()
                in_token = False
        else:
            buf.append(ch)
            in_token = True

    if in_quotes:
        raise FieldFormatError("line", line[quote_start:], "unterminated quoted field")
    if in_token:
        tokens.append("".join(buf))
    return tokens


def parse_line(line: bytes | str) -> LogRecord:
    """Parse one access-log line into a LogRecord.

    Raises ArityError for a wrong token count and FieldFormatError for the
    first column that fails conversion. Never returns a partial record.
    """
    if isinstance(line, (bytes, bytearray, memoryview)):
        line = bytes(line).decode("utf-8", errors="replace")
    line = line.rstrip("\r\n")

    tokens = tokenize(line)
    if len(tokens) != len(FIELD_NAMES):
        raise ArityError(len(FIELD_NAMES), len(tokens))

    (
        type_, time, name, client, backend,
        req_time, backend_time, resp_time,
        elb_status, backend_status, received, sent,
        request, user_agent, ssl_cipher, ssl_protocol,
    ) = tokens

    return LogRecord(
        type=type_,
        time=parse_timestamp("time", time),
        name=name,
        client=parse_address("client", client),
        backend=parse_address("backend", backend),
        request_processing_time=parse_duration("request_processing_time", req_time),
        backend_processing_time=parse_duration("backend_processing_time", backend_time),
        response_processing_time=parse_duration("response_processing_time", resp_time),
        elb_status_code=parse_uint("elb_status_code", elb_status),
        backend_status_code=parse_uint("backend_status_code", backend_status),
        received_bytes=parse_uint("received_bytes", received),
        sent_bytes=parse_uint("sent_bytes", sent),
        request=request,
        user_agent=user_agent,
        ssl_cipher=ssl_cipher,
        ssl_protocol=ssl_protocol,
    )


class ElbParser:
    """Parse Classic ELB access logs."""

    @property
    def name(self) -> str:
        return "elb"

    def parse_line(self, line: bytes | str) -> LogRecord:
        return parse_line(line)

    def parse_file(self, path: str) -> Iterator[LogRecord]:
        """Stream-parse an access-log file; the first bad line raises."""
        from ..decoder import decode_file

        yield from decode_file(path)
