from __future__ import annotations

from typing import TYPE_CHECKING, Any

import polars as pl

from jsonbatch.exceptions import InvalidQueryError
from jsonbatch.placeholders import PlaceholderCounter, condition_placeholder

if TYPE_CHECKING:
    from jsonbatch.connection import Connection


def _as_values(value: Any) -> Any:
    """Normalize list-like inputs to a python list; strings and bytes stay scalar."""
    if isinstance(value, pl.Series):
        return value.to_list()
    if value is None or isinstance(value, (str, bytes)):
        return value
    try:
        return list(value)
    except TypeError:
        return value


class Condition:
    """A group of WHERE predicates joined by one conjunction.

    Predicates are stored unrendered. ``compile`` turns them into SQL text and the
    arguments to bind, drawing placeholder names from a counter shared with the rest
    of the statement, so the same group can be compiled into any number of statements.

    Examples:
        cond = Condition('OR').condition('age', 30, '>').is_null('name')
        cond.condition('id', [1, 2, 3])  # IN
    """

    def __init__(self, conjunction: str = 'AND'):
        conjunction = conjunction.upper()
        if conjunction not in ('AND', 'OR'):
            raise ValueError("conjunction must be 'AND' or 'OR'")
        self._conjunction = conjunction
        # (kind, payload); kind is 'field', 'group' or 'where'
        self._conditions: list[tuple[str, Any]] = []

    @property
    def conjunction(self) -> str:
        return self._conjunction

    def __len__(self) -> int:
        return len(self._conditions)

    def condition(self, field: Any, value: Any = None, operator: str | None = None) -> 'Condition':
        """Add ``field <operator> value``, or a nested ``Condition`` group.

        Without an operator, iterables (a polars Series, ``range``, a generator) use ``IN``
        and scalars, strings included, use ``=``.
        """
        if isinstance(field, Condition):
            self._conditions.append(('group', field))
            return self
        if not isinstance(field, str):
            raise TypeError('field must be a column name or a Condition')
        value = _as_values(value)
        if operator is None:
            operator = 'IN' if isinstance(value, list) else '='
        self._conditions.append(('field', (field, value, operator.upper().strip())))
        return self

    def is_null(self, field: str) -> 'Condition':
        return self.condition(field, None, 'IS NULL')

    def is_not_null(self, field: str) -> 'Condition':
        return self.condition(field, None, 'IS NOT NULL')

    def where(self, snippet: str, arguments: dict[str, Any] | None = None) -> 'Condition':
        """Add a raw SQL fragment; its ``:name`` placeholders are bound from ``arguments``."""
        args = {k.lstrip(':'): v for k, v in (arguments or {}).items()}
        self._conditions.append(('where', (snippet, args)))
        return self

    def compile(
            self,
            connection: 'Connection',
            placeholders: PlaceholderCounter | None = None,
    ) -> tuple[str, dict[str, Any]]:
        if placeholders is None:
            placeholders = PlaceholderCounter()
        fragments: list[str] = []
        arguments: dict[str, Any] = {}
        for kind, payload in self._conditions:
            if kind == 'group':
                sql, args = payload.compile(connection, placeholders)
                if sql:
                    fragments.append(f'({sql})')
            elif kind == 'where':
                sql, args = payload
                fragments.append(f'({sql})')
            else:
                sql, args = self._compile_field(connection, placeholders, *payload)
                fragments.append(sql)
            arguments.update(args)
        return f' {self._conjunction} '.join(fragments), arguments

    @staticmethod
    def _compile_field(
            connection: 'Connection',
            placeholders: PlaceholderCounter,
            field: str,
            value: Any,
            operator: str,
    ) -> tuple[str, dict[str, Any]]:
        info = connection.dialect.map_condition_operator(operator)
        if info is None:
            raise InvalidQueryError(f'Invalid characters in query operator: {operator}')
        escaped = connection.escape_field(field)
        postfix = info.get('postfix', '')

        if not info.get('use_value', True):
            return f'{escaped} {operator}', {}

        if info.get('list'):
            values = value if isinstance(value, list) else [value]
            if not values:
                raise InvalidQueryError(f"Query condition '{field} {operator} ()' cannot be empty.")
            value_fragments, arguments = connection.dialect.compile_value_list(values, placeholders)
            return f'{escaped} {operator} (' + ', '.join(value_fragments) + f'){postfix}', arguments

        if info.get('between'):
            if not isinstance(value, list) or len(value) != 2:
                raise InvalidQueryError(f"Query condition '{field} {operator}' requires exactly two values.")
            low, high = condition_placeholder(placeholders), condition_placeholder(placeholders)
            return f'{escaped} {operator} :{low} AND :{high}{postfix}', {low: value[0], high: value[1]}

        if isinstance(value, list):
            raise InvalidQueryError(f"Query condition '{field} {operator}' requires a single value.")
        name = condition_placeholder(placeholders)
        return f'{escaped} {operator} :{name}{postfix}', {name: value}
