from __future__ import annotations

from dataclasses import dataclass, replace as _replace
from typing import Any


@dataclass(frozen=True)
class BatchConfig:
    """Limits and naming used when rendering statements.

    Parameters:
        placeholder_ceiling : int, default 999
            Maximum number of bound parameters the backend accepts in one statement.
        condition_list_threshold : int, default 50
            A single ``IN`` value list longer than this is packed into one parameter.
        upsert_row_threshold : int, default 50
            Insert/upsert batches with at least this many rows are packed into one parameter.
        table_prefix : str, default ''
            Prefix prepended to every table name before quoting.
    """
    placeholder_ceiling: int = 999
    condition_list_threshold: int = 50
    upsert_row_threshold: int = 50
    table_prefix: str = ''

    def __post_init__(self):
        for name in ('placeholder_ceiling', 'condition_list_threshold', 'upsert_row_threshold'):
            value = getattr(self, name)
            if not isinstance(value, int) or value <= 0:
                raise ValueError(f'{name} must be a positive integer')
        if not isinstance(self.table_prefix, str):
            raise TypeError('table_prefix must be a string')

    def replace(self, **changes: Any) -> 'BatchConfig':
        return _replace(self, **changes)


DEFAULT_CONFIG = BatchConfig()
