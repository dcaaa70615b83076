from __future__ import annotations

from typing import Any

__all__ = (
    'ConfigurationError',
    'FieldsOverlapError',
    'InvalidQueryError',
    'JsonBatchError',
    'NoFieldsError',
    'NoUniqueFieldError',
    'SerializationError',
)


class JsonBatchError(Exception):
    """Base exception class from which all jsonbatch exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = '') -> None:
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, 'detail'):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f'{self.__class__.__name__} - {self.detail}'
        return self.__class__.__name__

    def __str__(self) -> str:
        return ' '.join((*self.args, self.detail)).strip()


class ConfigurationError(JsonBatchError):
    """A statement was assembled in a way that cannot be rendered."""


class NoFieldsError(ConfigurationError):
    """Insert or upsert executed without any declared fields."""

    detail = 'There are no fields available to insert with.'


class NoUniqueFieldError(ConfigurationError):
    """Upsert executed without a unique key field."""

    detail = 'There is no unique field specified.'


class FieldsOverlapError(ConfigurationError):
    """A field was declared both as a default field and as an insert field."""

    detail = 'You may not specify the same field to have a value and a schema-default value.'


class InvalidQueryError(JsonBatchError):
    """A condition cannot be compiled into valid SQL."""


class SerializationError(JsonBatchError):
    """A batch could not be encoded into a single JSON parameter."""
