"""Typed conversions for individual ELB log columns.

Each function takes the column name and its raw token and either returns the
converted value or raises :class:`FieldFormatError` naming that column.
"""
from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation
from ipaddress import ip_address

from ..errors import FieldFormatError
from ..record import TCPAddr

PLACEHOLDER = "-"

# 2015-05-13T23:39:43.945958Z; fraction up to nanoseconds, truncated to µs
_TIMESTAMP_RE = re.compile(
    r"(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"T(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})"
    r"(?:\.(?P<fraction>\d{1,9}))?Z",
    re.ASCII,
)

# Seconds with optional fraction; no sign, no exponent
_SECONDS_RE = re.compile(r"\d+(?:\.\d+)?", re.ASCII)

_MICROS = Decimal(1_000_000)


def _is_digits(raw: str) -> bool:
    return raw.isascii() and raw.isdigit()


def parse_timestamp(field: str, raw: str) -> datetime:
    """Parse an RFC 3339 UTC instant such as ``2015-05-13T23:39:43.945958Z``."""
    m = _TIMESTAMP_RE.fullmatch(raw)
    if m is None:
        raise FieldFormatError(field, raw, "expected YYYY-MM-DDTHH:MM:SS[.ffffff]Z")
    fraction = (m["fraction"] or "").ljust(6, "0")[:6]
    try:
        return datetime(
            int(m["year"]), int(m["month"]), int(m["day"]),
            int(m["hour"]), int(m["minute"]), int(m["second"]),
            int(fraction), tzinfo=timezone.utc,
        )
    except ValueError as exc:
        raise FieldFormatError(field, raw, str(exc)) from exc


def parse_address(field: str, raw: str) -> TCPAddr | None:
    """Parse ``ip:port`` (``[v6]:port`` also accepted); ``-`` means absent."""
    if raw == PLACEHOLDER:
        return None
    host, sep, port = raw.rpartition(":")
    if not sep or not host:
        raise FieldFormatError(field, raw, "expected ip:port")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    try:
        ip = ip_address(host)
    except ValueError as exc:
        raise FieldFormatError(field, raw, f"invalid IP address {host!r}") from exc
    if not _is_digits(port) or int(port) > 0xFFFF:
        raise FieldFormatError(field, raw, f"invalid port {port!r}")
    return TCPAddr(ip, int(port))


def parse_duration(field: str, raw: str) -> timedelta:
    """Parse decimal seconds (``0.000073``) into a timedelta, exact to 1µs."""
    if _SECONDS_RE.fullmatch(raw) is None:
        raise FieldFormatError(field, raw, "expected non-negative decimal seconds")
    try:
        micros = (Decimal(raw) * _MICROS).quantize(Decimal(1), rounding=ROUND_HALF_EVEN)
        return timedelta(microseconds=int(micros))
    except (InvalidOperation, OverflowError) as exc:
        raise FieldFormatError(field, raw, "duration out of range") from exc


def parse_uint(field: str, raw: str) -> int:
    """Parse a base-10 non-negative integer (status codes, byte counts)."""
    if not _is_digits(raw):
        raise FieldFormatError(field, raw, "expected a non-negative integer")
    return int(raw)
