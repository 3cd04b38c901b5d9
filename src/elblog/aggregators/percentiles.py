"""Latency and size percentiles over a record attribute."""
from __future__ import annotations

import math
from bisect import insort
from datetime import timedelta

from ..record import LogRecord

_MS = timedelta(milliseconds=1)


def nearest_rank(ordered: list[float], p: float) -> float:
    """Value at percentile ``p`` (0-100) of an ascending list; 0.0 when empty."""
    if not ordered:
        return 0.0
    index = math.ceil(len(ordered) * p / 100) - 1
    return ordered[min(max(index, 0), len(ordered) - 1)]


class Percentiles:
    """Distribution of one numeric record attribute.

    ``timedelta`` attributes (the three processing times) are measured in
    milliseconds; integer attributes such as ``sent_bytes`` are used as is.
    Anything else (strings, absent addresses) is ignored.
    """

    def __init__(self, field: str) -> None:
        self._field = field
        self._ordered: list[float] = []

    def add(self, record: LogRecord) -> None:
        value = getattr(record, self._field, None)
        if isinstance(value, timedelta):
            insort(self._ordered, value / _MS)
        elif isinstance(value, int) and not isinstance(value, bool):
            insort(self._ordered, float(value))

    def percentile(self, p: float) -> float:
        return nearest_rank(self._ordered, p)

    def summary(self, points: tuple[float, ...] = (50, 90, 95, 99)) -> dict[str, float]:
        """``pNN`` keys for each point plus min/max/mean (when non-empty) and count."""
        stats = {f"p{p:g}": nearest_rank(self._ordered, p) for p in points}
        if self._ordered:
            stats.update(
                min=self._ordered[0],
                max=self._ordered[-1],
                mean=math.fsum(self._ordered) / len(self._ordered),
            )
        stats["count"] = float(len(self._ordered))
        return stats

    def __len__(self) -> int:
        return len(self._ordered)
