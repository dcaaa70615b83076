from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any, Mapping, Sequence

import polars as pl

from jsonbatch.dialects.base import EncodingMode
from jsonbatch.exceptions import ConfigurationError, FieldsOverlapError, NoFieldsError, NoUniqueFieldError
from jsonbatch.query.base import Query

if TYPE_CHECKING:
    from jsonbatch.connection import Connection

logger = logging.getLogger(__name__)

_FIELD_NAME = re.compile(r'^[A-Za-z0-9_]+$')


def _check_field_names(fields: Sequence[str]) -> list[str]:
    names = list(fields)
    for name in names:
        if not isinstance(name, str) or not _FIELD_NAME.match(name):
            raise ConfigurationError(f'invalid field name: {name!r}')
    if len(set(names)) != len(names):
        raise ConfigurationError(f'duplicate field names in {names!r}')
    return names


class Insert(Query):
    """Multi-row INSERT builder.

    Rows accumulate through ``values()`` and are sent as one statement by ``execute()``.
    The dialect decides per execution whether values are bound one placeholder each or
    packed into a single JSON parameter; nothing about that choice is kept on the builder.
    """

    def __init__(self, connection: 'Connection', table: str):
        super().__init__(connection)
        self.table = table
        self._insert_fields: list[str] = []
        self._default_fields: list[str] = []
        self._insert_values: list[tuple[Any, ...]] = []

    @property
    def insert_fields(self) -> list[str]:
        return list(self._insert_fields)

    @property
    def default_fields(self) -> list[str]:
        return list(self._default_fields)

    @property
    def insert_values(self) -> list[tuple[Any, ...]]:
        return list(self._insert_values)

    def __len__(self) -> int:
        return len(self._insert_values)

    def fields(self, fields: Sequence[str] | Mapping[str, Any], values: Sequence[Any] | None = None) -> 'Insert':
        """Declare the insert columns.

        A mapping declares its keys as columns and adds its values as the first row.
        """
        if isinstance(fields, Mapping):
            values = list(fields.values())
            fields = list(fields.keys())
        if self._insert_values:
            raise ConfigurationError('fields cannot change once values have been added')
        self._insert_fields = _check_field_names(fields)
        if values is not None:
            self.values(values)
        return self

    def values(self, row: Sequence[Any] | Mapping[str, Any]) -> 'Insert':
        """Add one row, given positionally or keyed by field name."""
        if isinstance(row, Mapping):
            if not self._insert_fields:
                self._insert_fields = _check_field_names(list(row.keys()))
            missing = [f for f in self._insert_fields if f not in row]
            extra = [k for k in row if k not in self._insert_fields]
            if missing or extra:
                raise ConfigurationError(f'row keys do not match fields; missing={missing!r}, unexpected={extra!r}')
            values = tuple(row[f] for f in self._insert_fields)
        else:
            if isinstance(row, (str, bytes)):
                raise TypeError('row must be a sequence of values or a mapping, not a string')
            values = tuple(row)
            if len(values) != len(self._insert_fields):
                raise ConfigurationError(
                    f'row has {len(values)} values but {len(self._insert_fields)} fields were declared'
                )
        if not values:
            raise ConfigurationError('a row needs at least one value; declare fields before adding rows')
        self._insert_values.append(values)
        return self

    def values_from(self, df: pl.DataFrame) -> 'Insert':
        """Add every row of a polars DataFrame, selecting the declared fields by name."""
        if not self._insert_fields:
            self.fields(df.columns)
        for row in df.select(self._insert_fields).iter_rows():
            self.values(row)
        return self

    def use_defaults(self, fields: Sequence[str]) -> 'Insert':
        """Columns that take their schema default in every inserted row."""
        self._default_fields = _check_field_names(fields)
        return self

    def _pre_execute(self) -> bool:
        if not self._insert_fields and not self._default_fields:
            raise NoFieldsError()
        if set(self._insert_fields) & set(self._default_fields):
            raise FieldsOverlapError()
        # rows may be added conditionally, so an empty batch is skipped rather than refused
        return bool(self._insert_values) or not self._insert_fields

    def encoding_mode(self) -> EncodingMode:
        return self._connection.dialect.insert_mode(len(self._insert_values))

    def compile(self, mode: EncodingMode | None = None) -> tuple[str, dict[str, Any]]:
        """Render the statement text and its arguments; ``mode`` defaults to what ``execute`` would use."""
        if mode is None:
            mode = self.encoding_mode()
        return self._connection.dialect.render_insert(self, mode)

    def to_sql(self, mode: EncodingMode | None = None) -> str:
        return self.compile(mode)[0]

    def arguments(self, mode: EncodingMode | None = None) -> dict[str, Any]:
        return self.compile(mode)[1]

    def __str__(self) -> str:
        return self.to_sql()

    def execute(self) -> Any:
        """Run the statement and return the backend's last inserted row id.

        The accumulated rows are cleared afterwards so the builder can take a new batch.
        """
        if not self._pre_execute():
            return None
        mode = self.encoding_mode()
        logger.debug('%s into %s: %d rows, %s mode', type(self).__name__, self.table, len(self), mode.value)
        sql, arguments = self.compile(mode)
        result = self._connection.query(sql, arguments)
        self._insert_values = []
        return result.lastrowid


class Upsert(Insert):
    """Insert that replaces any existing row colliding on the unique key.

    Replacing a row may assign it a new surrogate id; that is up to the backend.
    """

    def __init__(self, connection: 'Connection', table: str):
        super().__init__(connection, table)
        self._key: str | None = None

    @property
    def unique_key(self) -> str | None:
        return self._key

    def key(self, field: str) -> 'Upsert':
        self._key = _check_field_names([field])[0]
        return self

    def _pre_execute(self) -> bool:
        if not self._key:
            raise NoUniqueFieldError()
        ok = super()._pre_execute()
        if self._key not in self._insert_fields:
            raise ConfigurationError(f'unique key {self._key!r} must be one of the insert fields')
        return ok

    def compile(self, mode: EncodingMode | None = None) -> tuple[str, dict[str, Any]]:
        if mode is None:
            mode = self.encoding_mode()
        return self._connection.dialect.render_upsert(self, mode)
