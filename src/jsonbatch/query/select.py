from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterator

import polars as pl
import sqlalchemy as sa

from jsonbatch.placeholders import PlaceholderCounter
from jsonbatch.query.base import ConditionMixin, Query
from jsonbatch.query.condition import Condition

if TYPE_CHECKING:
    from jsonbatch.connection import Connection


class Select(ConditionMixin, Query):
    """SELECT over a single table with a WHERE condition tree.

    Large ``IN`` lists are compiled by the connection's dialect, so a select may carry
    several of them without running into the backend's parameter limit.
    """

    def __init__(self, connection: 'Connection', table: str, alias: str | None = None):
        super().__init__(connection)
        self.table = table
        self.alias = alias
        self._fields: list[str] = []
        self._order: list[tuple[str, str]] = []
        self._range: tuple[int, int] | None = None
        self._distinct = False
        self._condition = Condition('AND')

    def fields(self, *names: str) -> 'Select':
        if len(names) == 1 and isinstance(names[0], (list, tuple)):
            names = tuple(names[0])
        self._fields.extend(names)
        return self

    def distinct(self, distinct: bool = True) -> 'Select':
        self._distinct = distinct
        return self

    def order_by(self, field: str, direction: str = 'ASC') -> 'Select':
        direction = direction.upper()
        if direction not in ('ASC', 'DESC'):
            raise ValueError("direction must be 'ASC' or 'DESC'")
        self._order.append((field, direction))
        return self

    def range(self, start: int = 0, length: int | None = None) -> 'Select':
        if not isinstance(start, int) or start < 0:
            raise ValueError('start must be a non-negative integer')
        if length is None:
            self._range = None
            return self
        if not isinstance(length, int) or length < 0:
            raise ValueError('length must be a non-negative integer')
        self._range = (start, length)
        return self

    def compile(self, placeholders: PlaceholderCounter | None = None) -> tuple[str, dict[str, Any]]:
        conn = self._connection
        placeholders = placeholders or PlaceholderCounter()
        columns = ', '.join(conn.escape_field(f) for f in self._fields) if self._fields else '*'
        sql = self.comment_sql() + 'SELECT '
        if self._distinct:
            sql += 'DISTINCT '
        sql += f'{columns} FROM {conn.quote_table(self.table)}'
        if self.alias:
            sql += f' {conn.escape_field(self.alias)}'
        where, arguments = self._condition.compile(conn, placeholders)
        if where:
            sql += f' WHERE {where}'
        if self._order:
            sql += ' ORDER BY ' + ', '.join(f'{conn.escape_field(f)} {d}' for f, d in self._order)
        if self._range is not None:
            start, length = self._range
            sql += f' LIMIT {length} OFFSET {start}'
        return sql, arguments

    def __str__(self) -> str:
        return self.compile()[0]

    def execute(self) -> sa.CursorResult:
        sql, arguments = self.compile()
        return self._connection.query(sql, arguments)

    def collect(self, *, infer_schema_length=200) -> pl.DataFrame:
        """Execute and return a polars DataFrame."""
        res = self.execute()
        rows = [tuple(r) for r in res.fetchall()]
        names = list(res.keys())
        return pl.DataFrame(rows, schema=names, orient='row', infer_schema_length=infer_schema_length)

    def iter_rows(self, *, named: bool = False) -> Iterator[tuple[Any, ...] | dict[str, Any]]:
        res = self.execute()
        for row in res:
            yield row._asdict() if named else tuple(row)


class Delete(ConditionMixin, Query):
    def __init__(self, connection: 'Connection', table: str):
        super().__init__(connection)
        self.table = table
        self._condition = Condition('AND')

    def compile(self, placeholders: PlaceholderCounter | None = None) -> tuple[str, dict[str, Any]]:
        conn = self._connection
        sql = f'{self.comment_sql()}DELETE FROM {conn.quote_table(self.table)}'
        where, arguments = self._condition.compile(conn, placeholders or PlaceholderCounter())
        if where:
            sql += f' WHERE {where}'
        return sql, arguments

    def __str__(self) -> str:
        return self.compile()[0]

    def execute(self) -> int:
        """Delete the matching rows and return how many were removed."""
        sql, arguments = self.compile()
        return self._connection.query(sql, arguments).rowcount
