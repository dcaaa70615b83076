"""JSON encoding of value lists and row batches for single-parameter statements.

The encoded text is consumed server-side by ``json_each`` (one element per value
or row) and ``json_extract`` (one field per column).
"""
from __future__ import annotations

import datetime
from typing import Any, Mapping, Sequence

import orjson

from jsonbatch.exceptions import SerializationError


def _default(value: Any) -> Any:
    # same text the sqlite3 driver stores when the value is bound directly
    if isinstance(value, datetime.datetime):
        return value.isoformat(' ')
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    raise TypeError(f'Type is not JSON serializable: {type(value).__name__}')


def encode(value: Any) -> str:
    try:
        return orjson.dumps(value, default=_default, option=orjson.OPT_PASSTHROUGH_DATETIME).decode('utf-8')
    except orjson.JSONEncodeError as exc:
        raise SerializationError(f'cannot encode batch parameter: {exc}') from exc


def decode(text: str | bytes) -> Any:
    try:
        return orjson.loads(text)
    except orjson.JSONDecodeError as exc:
        raise SerializationError(f'cannot decode batch parameter: {exc}') from exc


def encode_rows(columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> str:
    """Encode positional rows as a JSON array of objects keyed by unescaped column name."""
    payload = []
    for row in rows:
        if len(row) != len(columns):
            raise SerializationError(
                f'row has {len(row)} values but {len(columns)} columns were declared'
            )
        payload.append(dict(zip(columns, row)))
    return encode(payload)


def decode_rows(columns: Sequence[str], text: str | bytes) -> list[tuple[Any, ...]]:
    """Inverse of ``encode_rows``: extract each declared column by name, in column order."""
    rows: list[Mapping[str, Any]] = decode(text)
    return [tuple(row.get(c) for c in columns) for row in rows]
