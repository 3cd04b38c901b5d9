"""Shared pytest fixtures for elblog tests."""
from __future__ import annotations

from pathlib import Path

import pytest

HTTP_LINE = (
    'http 2015-05-13T23:39:43.945958Z my-loadbalancer 192.168.131.39:2817 10.0.0.1:80 '
    '0.000073 0.001048 0.000057 200 200 0 29 '
    '"GET http://www.example.com:80/ HTTP/1.1" "curl/7.38.0" - -'
)

HTTPS_LINE = (
    'https 2015-05-13T23:39:43.945958Z my-loadbalancer 192.168.131.39:2817 10.0.0.1:80 '
    '0.000000 0.002000 0.000000 200 200 145 1396 '
    '"GET https://www.example.com:443/ HTTP/1.1" "-" ECDHE-RSA-AES128-GCM-SHA256 TLSv1.2'
)


@pytest.fixture()
def http_line() -> str:
    return HTTP_LINE


@pytest.fixture()
def https_line() -> str:
    return HTTPS_LINE


@pytest.fixture()
def tmp_log_file(tmp_path: Path):
    """Return a factory that creates temporary access-log files."""

    def _make(lines: list[str], name: str = "access.log") -> Path:
        p = tmp_path / name
        p.write_bytes(("\n".join(lines) + "\n").encode("utf-8") if lines else b"")
        return p

    return _make
