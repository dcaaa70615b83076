from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Sequence

from jsonbatch import serialization
from jsonbatch.dialects.base import BaseDialect, EncodingMode
from jsonbatch.placeholders import PlaceholderCounter, condition_placeholder, insert_placeholder

if TYPE_CHECKING:
    from jsonbatch.query.insert import Insert, Upsert

logger = logging.getLogger(__name__)


class SqliteDialect(BaseDialect):
    """SQLite strategy.

    SQLite refuses statements with more bound variables than its compile-time limit
    (999 unless the library was built otherwise). Large value lists and row batches
    are therefore sent as a single JSON-encoded parameter and expanded with
    ``json_each`` / ``json_extract``.
    """

    name = 'sqlite'

    def map_condition_operator(self, operator: str) -> dict[str, Any] | None:
        info = super().map_condition_operator(operator)
        if info is not None and operator in ('LIKE', 'NOT LIKE'):
            info['postfix'] = " ESCAPE '\\'"
        return info

    def compile_value_list(
            self,
            values: Sequence[Any],
            placeholders: PlaceholderCounter,
    ) -> tuple[list[str], dict[str, Any]]:
        # a statement may carry several conditions, so each list gets a much
        # smaller budget than the whole statement's ceiling
        if len(values) > self.config.condition_list_threshold:
            name = condition_placeholder(placeholders)
            logger.debug('packing %d condition values into :%s', len(values), name)
            return [f'select value from json_each(:{name})'], {name: serialization.encode(list(values))}
        return super().compile_value_list(values, placeholders)

    def insert_mode(self, row_count: int) -> EncodingMode:
        # assuming fewer than 20 fields per row, fewer than 50 rows stays under 999
        if row_count < self.config.upsert_row_threshold:
            return EncodingMode.DIRECT
        return EncodingMode.BATCHED

    def render_insert(self, query: 'Insert', mode: EncodingMode) -> tuple[str, dict[str, Any]]:
        return self._render(query, 'INSERT INTO', mode)

    def render_upsert(self, query: 'Upsert', mode: EncodingMode) -> tuple[str, dict[str, Any]]:
        # the unique key is enforced by the table's own constraint
        return self._render(query, 'INSERT OR REPLACE INTO', mode)

    def _render(self, query: 'Insert', verb: str, mode: EncodingMode) -> tuple[str, dict[str, Any]]:
        connection = query.connection
        head = f'{query.comment_sql()}{verb} {connection.quote_table(query.table)}'
        # default fields are left out of the column list; SQLite fills in the schema default
        fields = list(query.insert_fields)
        if not fields:
            return f'{head} DEFAULT VALUES', {}
        escaped = ', '.join(connection.escape_field(f) for f in fields)

        placeholders = PlaceholderCounter()
        if mode is EncodingMode.BATCHED:
            name = insert_placeholder(placeholders)
            extracts = ', '.join(
                f"json_extract(value, '{_json_path(f)}') AS {connection.escape_field(f)}" for f in fields
            )
            sql = f'{head} ({escaped}) SELECT {extracts} FROM json_each(:{name})'
            return sql, {name: serialization.encode_rows(fields, query.insert_values)}

        arguments: dict[str, Any] = {}
        groups: list[str] = []
        for row in query.insert_values:
            slots: list[str] = []
            for value in row:
                name = insert_placeholder(placeholders)
                slots.append(f':{name}')
                arguments[name] = value
            groups.append('(' + ', '.join(slots) + ')')
        return f'{head} ({escaped}) VALUES ' + ', '.join(groups), arguments


def _json_path(field: str) -> str:
    """Path selecting ``field`` from one encoded row; quoted so keywords are literal keys."""
    return '$."' + field.replace('"', '\\"') + '"'
