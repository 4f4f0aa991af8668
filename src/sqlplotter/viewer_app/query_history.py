"""Bounded history of submitted SQL queries."""

from __future__ import annotations

from collections import deque
from typing import Iterator

DEFAULT_MAX_QUERY_HISTORY = 10


class QueryHistory:
    """Most recent queries, oldest first; the oldest is dropped when full."""

    def __init__(self, max_entries: int = DEFAULT_MAX_QUERY_HISTORY) -> None:
        if max_entries < 1:
            raise ValueError(f"max_entries must be >= 1, got {max_entries}")
        self._entries: deque[str] = deque(maxlen=max_entries)

    @property
    def max_entries(self) -> int:
        return self._entries.maxlen or 0

    @property
    def entries(self) -> list[str]:
        return list(self._entries)

    def add(self, query: str) -> None:
        self._entries.append(query)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))
