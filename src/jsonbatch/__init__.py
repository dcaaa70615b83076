from jsonbatch.config import BatchConfig
from jsonbatch.connection import Connection
from jsonbatch.dialects import BaseDialect, EncodingMode, SqliteDialect, get_dialect
from jsonbatch.exceptions import (
    ConfigurationError,
    FieldsOverlapError,
    InvalidQueryError,
    JsonBatchError,
    NoFieldsError,
    NoUniqueFieldError,
    SerializationError,
)
from jsonbatch.placeholders import PlaceholderCounter
from jsonbatch.query import Condition, Delete, Insert, Select, Upsert
from jsonbatch.sql import insert_frame, select_in, upsert_frame

__all__ = [
    'BaseDialect',
    'BatchConfig',
    'Condition',
    'ConfigurationError',
    'Connection',
    'Delete',
    'EncodingMode',
    'FieldsOverlapError',
    'Insert',
    'InvalidQueryError',
    'JsonBatchError',
    'NoFieldsError',
    'NoUniqueFieldError',
    'PlaceholderCounter',
    'Select',
    'SerializationError',
    'SqliteDialect',
    'Upsert',
    'get_dialect',
    'insert_frame',
    'select_in',
    'upsert_frame',
]
