"""Translate a column selection into a sort key."""

from __future__ import annotations

from .models import SortKey


def select_sort_key(column: str) -> SortKey:
    """Map a clicked column name (e.g. ' Last ') to its SortKey.

    Raises ValueError for columns that cannot be sorted on.
    """
    name = column.strip().lower()
    try:
        return SortKey(name)
    except ValueError:
        choices = ", ".join(key.value for key in SortKey)
        raise ValueError(f"Unknown sort column {column!r}; expected one of: {choices}") from None
