from __future__ import annotations

from typing import Any, Sequence

import polars as pl
import sqlalchemy as sa

from jsonbatch.config import BatchConfig
from jsonbatch.connection import Connection


def _connection(conn: sa.Connection | Connection, config: BatchConfig | None) -> Connection:
    if isinstance(conn, Connection):
        return conn
    return Connection(conn, config=config)


def upsert_frame(
        conn: sa.Connection | Connection,
        df: pl.DataFrame,
        table_name: str,
        key: str,
        columns: Sequence[str] | None = None,
        *,
        config: BatchConfig | None = None,
) -> Any:
    """Insert the rows of a polars DataFrame, replacing rows that collide on ``key``.

    Parameters:
        conn : sqlalchemy.Connection | Connection
            Connection to write through; the caller owns the transaction.
        df : polars.DataFrame
            Rows to write.
        table_name : str
            Target table (unprefixed).
        key : str
            Column carrying the table's unique constraint.
        columns : Sequence[str] | None
            Columns to write; defaults to every column of ``df``.
        config : BatchConfig | None
            Limits to use when ``conn`` is a plain sqlalchemy connection.

    Returns the backend's last inserted row id, or None for an empty frame.
    """
    if df.height == 0:
        return None
    cols = list(columns) if columns is not None else list(df.columns)
    query = _connection(conn, config).upsert(table_name).key(key).fields(cols)
    return query.values_from(df).execute()


def insert_frame(
        conn: sa.Connection | Connection,
        df: pl.DataFrame,
        table_name: str,
        columns: Sequence[str] | None = None,
        *,
        config: BatchConfig | None = None,
) -> Any:
    """Insert the rows of a polars DataFrame; see ``upsert_frame``."""
    if df.height == 0:
        return None
    cols = list(columns) if columns is not None else list(df.columns)
    query = _connection(conn, config).insert(table_name).fields(cols)
    return query.values_from(df).execute()


def select_in(
        conn: sa.Connection | Connection,
        table_name: str,
        field: str,
        values: Sequence[Any] | pl.Series,
        columns: Sequence[str] | None = None,
        *,
        config: BatchConfig | None = None,
) -> pl.DataFrame:
    """Fetch the rows whose ``field`` is one of ``values`` as a polars DataFrame.

    The value list may be arbitrarily long; past the dialect's threshold it is bound as
    one encoded parameter.
    """
    query = _connection(conn, config).select(table_name)
    if columns:
        query.fields(*columns)
    return query.condition(field, values, 'IN').collect()
