"""Tests for the per-column conversion functions."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from ipaddress import ip_address

import pytest

from elblog.errors import FieldFormatError
from elblog.parsers.fields import parse_address, parse_duration, parse_timestamp, parse_uint
from elblog.record import TCPAddr


# ---------------------------------------------------------------------------
# parse_timestamp
# ---------------------------------------------------------------------------

class TestParseTimestamp:
    def test_fractional_utc(self) -> None:
        ts = parse_timestamp("time", "2015-05-13T23:39:43.945958Z")
        assert ts == datetime(2015, 5, 13, 23, 39, 43, 945958, tzinfo=timezone.utc)

    def test_no_fraction(self) -> None:
        ts = parse_timestamp("time", "2015-05-13T23:39:43Z")
        assert ts.microsecond == 0

    def test_nanoseconds_truncated(self) -> None:
        ts = parse_timestamp("time", "2015-05-13T23:39:43.123456789Z")
        assert ts.microsecond == 123456

    def test_short_fraction_padded(self) -> None:
        assert parse_timestamp("time", "2015-05-13T23:39:43.5Z").microsecond == 500000

    @pytest.mark.parametrize("raw", [
        "2015-05-13T23:39:43.945958",         # no Z
        "2015-05-13T23:39:43.945958+00:00",
        "2015-05-13 23:39:43Z",
        "13/May/2015:23:39:43 +0000",
        "2015-13-13T23:39:43Z",               # month out of range
        "",
    ])
    def test_rejects(self, raw: str) -> None:
        with pytest.raises(FieldFormatError) as info:
            parse_timestamp("time", raw)
        assert info.value.field == "time"
        assert info.value.value == raw


# ---------------------------------------------------------------------------
# parse_address
# ---------------------------------------------------------------------------

class TestParseAddress:
    def test_ipv4(self) -> None:
        addr = parse_address("client", "192.168.131.39:2817")
        assert addr == TCPAddr(ip_address("192.168.131.39"), 2817)
        assert str(addr) == "192.168.131.39:2817"

    def test_placeholder_is_none(self) -> None:
        assert parse_address("backend", "-") is None

    def test_bracketed_ipv6(self) -> None:
        addr = parse_address("client", "[2001:db8::1]:443")
        assert addr is not None
        assert addr.ip == ip_address("2001:db8::1")
        assert addr.port == 443
        assert str(addr) == "[2001:db8::1]:443"

    def test_bare_ipv6_splits_on_last_colon(self) -> None:
        addr = parse_address("client", "2001:db8::1:8080")
        assert addr == TCPAddr(ip_address("2001:db8::1"), 8080)

    @pytest.mark.parametrize("raw", [
        "192.168.131.39",            # no port
        "192.168.131.39:",           # empty port
        ":80",                       # empty host
        "example.com:80",            # hostname, not a literal
        "10.0.0.256:80",
        "10.0.0.1:65536",
        "10.0.0.1:-1",
        "10.0.0.1:8o",
        "",
    ])
    def test_rejects(self, raw: str) -> None:
        with pytest.raises(FieldFormatError) as info:
            parse_address("backend", raw)
        assert info.value.field == "backend"


# ---------------------------------------------------------------------------
# parse_duration
# ---------------------------------------------------------------------------

class TestParseDuration:
    @pytest.mark.parametrize("raw,expected", [
        ("0.000073", timedelta(microseconds=73)),
        ("0.001048", timedelta(microseconds=1048)),
        ("0.000057", timedelta(microseconds=57)),
        ("0", timedelta(0)),
        ("0.000000", timedelta(0)),
        ("1.5", timedelta(seconds=1, microseconds=500000)),
        ("12", timedelta(seconds=12)),
    ])
    def test_values(self, raw: str, expected: timedelta) -> None:
        assert parse_duration("request_processing_time", raw) == expected

    def test_sub_microsecond_rounds(self) -> None:
        assert parse_duration("d", "0.0000005") == timedelta(0)
        assert parse_duration("d", "0.0000015") == timedelta(microseconds=2)

    @pytest.mark.parametrize("raw", ["-1", "-0.5", "+1", "1e-3", "nan", "inf", ".5", "1.", "", "-"])
    def test_rejects(self, raw: str) -> None:
        with pytest.raises(FieldFormatError) as info:
            parse_duration("backend_processing_time", raw)
        assert info.value.field == "backend_processing_time"


# ---------------------------------------------------------------------------
# parse_uint
# ---------------------------------------------------------------------------

class TestParseUint:
    def test_digits(self) -> None:
        assert parse_uint("sent_bytes", "1396") == 1396

    def test_unregistered_status_accepted(self) -> None:
        assert parse_uint("elb_status_code", "999") == 999

    @pytest.mark.parametrize("raw", ["-1", "+1", "1.0", "", "-", "２００"])
    def test_rejects(self, raw: str) -> None:
        with pytest.raises(FieldFormatError):
            parse_uint("elb_status_code", raw)
