"""Descending sort of tick snapshots by a numeric field."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from .models import SortKey, TickRecord


def project(records: Sequence[TickRecord], sort_key: SortKey | str) -> list[TickRecord]:
    """Order records by `sort_key`, largest first.

    Records whose field is the NaN marker always sort last. Ties keep
    their input order.
    """
    if not records:
        return []
    field = SortKey(sort_key).value
    values = np.array([record.numeric(field) for record in records], dtype=float)
    # argsort places NaN at the end; negating keeps it there while flipping the order
    order = np.argsort(-values, kind="stable")
    return [records[i] for i in order]


class SortedProjector:
    """Memoized project(): recomputes only when the snapshot or key changes.

    Snapshots are compared by identity. Publishers always hand out a new
    list, so identity is a reliable change signal.
    """

    def __init__(self) -> None:
        self._records: Sequence[TickRecord] | None = None
        self._key: SortKey | None = None
        self._result: list[TickRecord] = []

    def __call__(self, records: Sequence[TickRecord], sort_key: SortKey | str) -> list[TickRecord]:
        key = SortKey(sort_key)
        if records is not self._records or key is not self._key:
            self._result = project(records, key)
            self._records = records
            self._key = key
        return self._result
