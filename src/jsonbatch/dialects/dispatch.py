from __future__ import annotations

import sqlalchemy as sa

from jsonbatch.config import BatchConfig
from jsonbatch.dialects.base import BaseDialect
from jsonbatch.dialects.sqlite import SqliteDialect

_DIALECTS: dict[str, type[BaseDialect]] = {
    'sqlite': SqliteDialect,
    'postgresql': BaseDialect,
}


def get_dialect(conn: sa.Connection | sa.Engine, config: BatchConfig | None = None) -> BaseDialect:
    dialect = conn.dialect.name
    driver = getattr(conn.dialect, 'driver', '')  # e.g. 'pysqlite', 'psycopg'

    try:
        cls = _DIALECTS[dialect]
    except KeyError:
        raise NotImplementedError(f'No batch statement dialect for {dialect}+{driver}') from None
    return cls(config)
