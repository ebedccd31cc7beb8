"""Buffered result handle returned by :meth:`Database.query`."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Sequence
from typing import Any

Row = dict[str, Any]


class QueryResult:
    """Hold the rows one executed statement produced.

    Rows are buffered at execution time so the statement cursor can be closed
    straight away. A result is truthy even when it holds no rows.
    """

    def __init__(self, columns: Sequence[str], rows: Iterable[Sequence[Any]]) -> None:
        self._columns = tuple(columns)
        self._rows: deque[tuple[Any, ...]] = deque(tuple(row) for row in rows)
        self._num_rows = len(self._rows)
        self._freed = False

    @property
    def columns(self) -> tuple[str, ...]:
        """Return the column names in select-list order."""
        return self._columns

    @property
    def num_rows(self) -> int:
        """Return how many rows the statement produced."""
        return self._num_rows

    @property
    def freed(self) -> bool:
        return self._freed

    def fetch_row(self) -> Row | None:
        """Return the next row keyed by column name, or ``None`` when exhausted."""
        if not self._rows:
            return None
        values = self._rows.popleft()
        return dict(zip(self._columns, values))

    def free(self) -> None:
        """Release any rows still buffered."""
        self._rows.clear()
        self._freed = True

    def __repr__(self) -> str:
        return f"QueryResult(columns={list(self._columns)!r}, num_rows={self._num_rows})"


__all__ = ["QueryResult", "Row"]
