from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from jsonbatch.connection import Connection
    from jsonbatch.query.condition import Condition


class Query:
    """Common state of every statement builder: the connection and its comments."""

    def __init__(self, connection: 'Connection'):
        self._connection = connection
        self._comments: list[str] = []

    @property
    def connection(self) -> 'Connection':
        return self._connection

    def comment(self, text: str) -> 'Query':
        """Prepend ``/* text */`` to the statement, e.g. to tag it in a slow-query log."""
        self._comments.append(text)
        return self

    def comment_sql(self) -> str:
        return self._connection.make_comment(self._comments)


class ConditionMixin:
    """Delegates the condition-building API to a top-level ``Condition``."""

    _condition: 'Condition'

    def condition(self, field: Any, value: Any = None, operator: str | None = None):
        self._condition.condition(field, value, operator)
        return self

    def is_null(self, field: str):
        self._condition.is_null(field)
        return self

    def is_not_null(self, field: str):
        self._condition.is_not_null(field)
        return self

    def where(self, snippet: str, arguments: dict[str, Any] | None = None):
        self._condition.where(snippet, arguments)
        return self

    def condition_group_and(self) -> 'Condition':
        from jsonbatch.query.condition import Condition

        return Condition('AND')

    def condition_group_or(self) -> 'Condition':
        from jsonbatch.query.condition import Condition

        return Condition('OR')
