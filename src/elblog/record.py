"""Typed representation of one ELB access-log entry."""
from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime, timedelta
from ipaddress import IPv4Address, IPv6Address
from typing import Any, NamedTuple


class TCPAddr(NamedTuple):
    """An IP literal plus port, as found in the client/backend columns."""

    ip: IPv4Address | IPv6Address
    port: int

    def __str__(self) -> str:
        if self.ip.version == 6:
            return f"[{self.ip}]:{self.port}"
        return f"{self.ip}:{self.port}"


@dataclass(frozen=True)
class LogRecord:
    """One decoded access-log line.

    String columns keep the ``-`` placeholder verbatim; only the two address
    columns map it to ``None``.
    """

    type: str
    time: datetime
    name: str
    client: TCPAddr | None
    backend: TCPAddr | None
    request_processing_time: timedelta
    backend_processing_time: timedelta
    response_processing_time: timedelta
    elb_status_code: int
    backend_status_code: int
    received_bytes: int
    sent_bytes: int
    request: str
    user_agent: str
    ssl_cipher: str
    ssl_protocol: str

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly dict (ISO time, seconds, ``ip:port`` strings)."""
        out: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, datetime):
                value = value.isoformat().replace("+00:00", "Z")
            elif isinstance(value, timedelta):
                value = value.total_seconds()
            elif isinstance(value, TCPAddr):
                value = str(value)
            out[f.name] = value
        return out
