from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Any, Sequence

from jsonbatch.config import BatchConfig, DEFAULT_CONFIG
from jsonbatch.placeholders import PlaceholderCounter, condition_placeholder, insert_placeholder

if TYPE_CHECKING:
    from jsonbatch.query.insert import Insert, Upsert


class EncodingMode(enum.Enum):
    """How the values of one statement are bound."""
    DIRECT = 'direct'  # one placeholder per value
    BATCHED = 'batched'  # one placeholder holding the JSON-encoded batch


_OPERATORS: dict[str, dict[str, Any]] = {
    '=': {},
    '<>': {},
    '!=': {},
    '<': {},
    '<=': {},
    '>': {},
    '>=': {},
    'LIKE': {},
    'NOT LIKE': {},
    'IN': {'list': True},
    'NOT IN': {'list': True},
    'BETWEEN': {'between': True},
    'NOT BETWEEN': {'between': True},
    'IS NULL': {'use_value': False},
    'IS NOT NULL': {'use_value': False},
}


class BaseDialect:
    """Statement strategy shared by every backend.

    Renders one placeholder per value and upserts through ``ON CONFLICT ... DO UPDATE``.
    Backends with a bound-parameter ceiling override the value-list and insert
    rendering once a batch grows past the configured thresholds.
    """

    name = 'default'

    def __init__(self, config: BatchConfig | None = None):
        self.config = config or DEFAULT_CONFIG

    def map_condition_operator(self, operator: str) -> dict[str, Any] | None:
        info = _OPERATORS.get(operator)
        return dict(info) if info is not None else None

    def compile_value_list(
            self,
            values: Sequence[Any],
            placeholders: PlaceholderCounter,
    ) -> tuple[list[str], dict[str, Any]]:
        """Return one ``:name`` fragment per value and the matching arguments."""
        fragments: list[str] = []
        arguments: dict[str, Any] = {}
        for value in values:
            name = condition_placeholder(placeholders)
            fragments.append(f':{name}')
            arguments[name] = value
        return fragments, arguments

    def insert_mode(self, row_count: int) -> EncodingMode:
        return EncodingMode.DIRECT

    def render_insert(self, query: 'Insert', mode: EncodingMode) -> tuple[str, dict[str, Any]]:
        head = f'{query.comment_sql()}INSERT INTO {query.connection.quote_table(query.table)}'
        return self._render_values(query, head, mode)

    def render_upsert(self, query: 'Upsert', mode: EncodingMode) -> tuple[str, dict[str, Any]]:
        connection = query.connection
        head = f'{query.comment_sql()}INSERT INTO {connection.quote_table(query.table)}'
        sql, arguments = self._render_values(query, head, mode)
        updates = ', '.join(
            f'{connection.escape_field(f)} = EXCLUDED.{connection.escape_field(f)}'
            for f in query.insert_fields
        )
        sql += f' ON CONFLICT ({connection.escape_field(query.unique_key)}) DO UPDATE SET {updates}'
        return sql, arguments

    def _render_values(self, query: 'Insert', head: str, mode: EncodingMode) -> tuple[str, dict[str, Any]]:
        if mode is not EncodingMode.DIRECT:
            raise NotImplementedError(f'{self.name} dialect does not support {mode.value} inserts')
        connection = query.connection
        columns = list(query.default_fields) + list(query.insert_fields)
        if not query.insert_fields:
            return f'{head} DEFAULT VALUES', {}
        escaped = ', '.join(connection.escape_field(c) for c in columns)
        defaults = ['DEFAULT'] * len(query.default_fields)

        placeholders = PlaceholderCounter()
        arguments: dict[str, Any] = {}
        groups: list[str] = []
        for row in query.insert_values:
            slots = list(defaults)
            for value in row:
                name = insert_placeholder(placeholders)
                slots.append(f':{name}')
                arguments[name] = value
            groups.append('(' + ', '.join(slots) + ')')
        return f'{head} ({escaped}) VALUES ' + ', '.join(groups), arguments
