from __future__ import annotations


class PlaceholderCounter:
    """Hands out placeholder suffixes that are unique within one statement.

    One counter is threaded through every clause of a statement so conditions,
    subqueries and inserted rows never reuse a name.
    """

    def __init__(self, start: int = 0):
        self._next = start

    def next_placeholder(self) -> int:
        value = self._next
        self._next += 1
        return value

    def __repr__(self) -> str:
        return f'PlaceholderCounter(next={self._next})'


def condition_placeholder(counter: PlaceholderCounter) -> str:
    return f'db_condition_placeholder_{counter.next_placeholder()}'


def insert_placeholder(counter: PlaceholderCounter) -> str:
    return f'db_insert_placeholder_{counter.next_placeholder()}'
