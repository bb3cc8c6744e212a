#!/usr/bin/env python3
"""
Query Result Model

This module contains QueryResult, the fully materialized outcome of a
single statement: either a row-set or an update count, never both.
"""

from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")

Row = Dict[str, Any]


class QueryResult:
    """
    Immutable result of a database statement.

    Row-set results hold every row as an ordered mapping from column name to
    value, in column order. Update results hold the affected row count.
    Accessors that return collections hand out copies, never live views.
    """

    __slots__ = ("_rows", "_update_count", "_is_update")

    def __init__(self, rows: Tuple[Row, ...], update_count: int, is_update: bool):
        self._rows = rows
        self._update_count = update_count
        self._is_update = is_update

    @classmethod
    def from_rows(cls, columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> "QueryResult":
        """
        Build a row-set result from column names and raw row tuples.

        Args:
            columns: Column names in select order
            rows: Raw row values as returned by ``cursor.fetchall()``

        Returns:
            Row-set QueryResult
        """
        names = list(columns)
        materialized = tuple(dict(zip(names, values)) for values in rows)
        return cls(materialized, -1, False)

    @classmethod
    def from_update_count(cls, count: int) -> "QueryResult":
        """Build an update result. Negative driver counts are reported as 0."""
        return cls((), max(int(count), 0), True)

    @property
    def is_update(self) -> bool:
        return self._is_update

    @property
    def update_count(self) -> int:
        """Affected rows for update results, -1 for row-sets."""
        return self._update_count

    @property
    def rows(self) -> List[Row]:
        """A copy of all rows."""
        return [dict(row) for row in self._rows]

    @property
    def first(self) -> Optional[Row]:
        """A copy of the first row, or None if there are no rows."""
        if not self._rows:
            return None
        return dict(self._rows[0])

    @property
    def size(self) -> int:
        return len(self._rows)

    @property
    def is_empty(self) -> bool:
        return not self._rows

    def map(self, mapper: Callable[[Row], T]) -> List[T]:
        """
        Convert every row with ``mapper``.

        Each row is passed as a copy, so mappers cannot alter the result.
        """
        return [mapper(dict(row)) for row in self._rows]

    def column(self, name: str) -> List[Any]:
        """Values of one column across all rows (None where missing)."""
        return [row.get(name) for row in self._rows]

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    def __repr__(self) -> str:
        if self._is_update:
            return f"QueryResult(update_count={self._update_count})"
        return f"QueryResult(rows={len(self._rows)})"
