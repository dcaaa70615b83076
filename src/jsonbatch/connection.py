from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any, Iterable, Mapping

import sqlalchemy as sa

from jsonbatch.config import BatchConfig, DEFAULT_CONFIG
from jsonbatch.dialects import BaseDialect, get_dialect

if TYPE_CHECKING:
    from jsonbatch.query import Condition, Delete, Insert, Select, Upsert

logger = logging.getLogger(__name__)

_IDENTIFIER_STRIP = re.compile(r'[^A-Za-z0-9_.]+')


class Connection:
    """Statement builder bound to a caller-owned sqlalchemy connection.

    The connection's transaction is never committed or rolled back here; wrap the
    work in ``engine.begin()`` (or commit yourself) as with any sqlalchemy connection.

    Construction
    ------------
        with engine.begin() as conn:
            db = Connection(conn)
            db.upsert('people').key('job').fields(['job', 'age']).values(...).execute()
    """

    def __init__(self, conn: sa.Connection, config: BatchConfig | None = None, dialect: BaseDialect | None = None):
        if not isinstance(conn, sa.Connection):
            raise TypeError('conn must be a sqlalchemy Connection')
        self._conn = conn
        self.config = config or DEFAULT_CONFIG
        self.dialect = dialect or get_dialect(conn, self.config)
        self._escaped_fields: dict[str, str] = {}
        self._escaped_tables: dict[str, str] = {}

    @property
    def connection(self) -> sa.Connection:
        return self._conn

    @property
    def database_type(self) -> str:
        return self._conn.dialect.name

    def _quote(self, name: str) -> str:
        return self._conn.dialect.identifier_preparer.quote_identifier(name)

    def escape_field(self, field: str) -> str:
        """Strip anything but ``[A-Za-z0-9_.]`` and quote each dotted part."""
        escaped = self._escaped_fields.get(field)
        if escaped is None:
            stripped = _IDENTIFIER_STRIP.sub('', field)
            escaped = '.'.join(self._quote(part) for part in stripped.split('.') if part)
            self._escaped_fields[field] = escaped
        return escaped

    def quote_table(self, table: str) -> str:
        """Escape a table name, prefixing its last part with ``config.table_prefix``."""
        escaped = self._escaped_tables.get(table)
        if escaped is None:
            parts = [p for p in _IDENTIFIER_STRIP.sub('', table).split('.') if p]
            if not parts:
                raise ValueError(f'invalid table name: {table!r}')
            parts[-1] = self.config.table_prefix + parts[-1]
            escaped = '.'.join(self._quote(p) for p in parts)
            self._escaped_tables[table] = escaped
        return escaped

    def escape_like(self, value: str) -> str:
        """Escape %, _ and backslash for use in a LIKE pattern with ``ESCAPE '\\'``."""
        return value.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')

    def make_comment(self, comments: Iterable[str]) -> str:
        comments = [c for c in comments if c]
        if not comments:
            return ''
        return '/* ' + self._filter_comment('; '.join(comments)) + ' */ '

    @staticmethod
    def _filter_comment(comment: str) -> str:
        # no way to close the comment early, and no bare colons for the bind parser
        return comment.replace('*', ' * ').replace(':', '\\:')

    def query(self, statement: str, arguments: Mapping[str, Any] | None = None) -> sa.CursorResult:
        """Execute raw statement text with named ``:placeholder`` arguments."""
        arguments = dict(arguments or {})
        if len(arguments) > self.config.placeholder_ceiling:
            logger.warning(
                'statement binds %d parameters, above the configured ceiling of %d',
                len(arguments), self.config.placeholder_ceiling,
            )
        logger.debug('executing %s with %d parameters', statement, len(arguments))
        return self._conn.execute(sa.text(statement), arguments)

    def condition(self, conjunction: str = 'AND') -> 'Condition':
        from jsonbatch.query import Condition

        return Condition(conjunction)

    def select(self, table: str, alias: str | None = None) -> 'Select':
        from jsonbatch.query import Select

        return Select(self, table, alias)

    def insert(self, table: str) -> 'Insert':
        from jsonbatch.query import Insert

        return Insert(self, table)

    def upsert(self, table: str) -> 'Upsert':
        from jsonbatch.query import Upsert

        return Upsert(self, table)

    def delete(self, table: str) -> 'Delete':
        from jsonbatch.query import Delete

        return Delete(self, table)
