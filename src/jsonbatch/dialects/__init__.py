from jsonbatch.dialects.base import BaseDialect, EncodingMode
from jsonbatch.dialects.dispatch import get_dialect
from jsonbatch.dialects.sqlite import SqliteDialect

__all__ = ['BaseDialect', 'EncodingMode', 'SqliteDialect', 'get_dialect']
