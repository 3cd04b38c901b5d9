"""Tally access-log records by the value of one attribute."""
from __future__ import annotations

from collections import Counter as _Counter
from typing import Iterable

from ..record import LogRecord


class Counter:
    """Tally records by an attribute such as ``elb_status_code`` or ``backend``.

    Absent addresses are tallied under the ``-`` placeholder, matching how
    they appear in the raw log.
    """

    def __init__(self, field: str) -> None:
        self._field = field
        self._tally: _Counter[str] = _Counter()

    def add(self, record: LogRecord) -> None:
        value = getattr(record, self._field, None)
        self._tally["-" if value is None else str(value)] += 1

    def update(self, records: Iterable[LogRecord]) -> None:
        for record in records:
            self.add(record)

    def top(self, n: int = 10) -> list[tuple[str, int]]:
        """Most frequent values first; ties keep first-seen order."""
        return self._tally.most_common(n)

    @property
    def total(self) -> int:
        return self._tally.total()
