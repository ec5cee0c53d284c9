"""In-memory view state published to the rendering layer."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .constants import TICK_FIELDS
from .models import ConnectionStatus, SortKey, TickRecord
from .projector import SortedProjector
from .sorting import select_sort_key

logger = logging.getLogger(__name__)


class QuoteBoard:
    """Latest published quote table plus the state needed to render it.

    Writer: QuoteStreamClient (status and labels directly, records through
    its throttle gate). Sort key: changed by the UI through select_sort().
    Readers: SSE streaming endpoint.

    All access happens on the event loop thread, so there is no lock.
    """

    def __init__(self, sort_key: SortKey = SortKey.LAST) -> None:
        self._status = ConnectionStatus.DISCONNECTED
        self._records: list[TickRecord] = []
        self._labels: dict[str, str] = {}
        self._sort_key = sort_key
        self._projector = SortedProjector()
        self._version: int = 0  # Monotonically increasing; bumped on every change

    def publish(self, records: Iterable[TickRecord]) -> None:
        """Replace the published snapshot."""
        self._records = list(records)
        self._version += 1

    def set_labels(self, labels: dict[str, str]) -> None:
        self._labels = dict(labels)
        self._version += 1

    def set_status(self, status: ConnectionStatus) -> None:
        if status is self._status:
            return
        logger.info("Quote stream status: %s -> %s", self._status.value, status.value)
        self._status = status
        self._version += 1

    def select_sort(self, column: str) -> SortKey:
        """Sort-change event from the UI. Raises ValueError for unknown columns."""
        self._sort_key = select_sort_key(column)
        self._version += 1
        return self._sort_key

    def rows(self) -> list[TickRecord]:
        """Published records ordered by the active sort key."""
        return self._projector(self._records, self._sort_key)

    def label(self, symbol: str) -> str:
        """Display label for an instrument; falls back to its id."""
        return self._labels.get(symbol, symbol)

    def to_dict(self) -> dict:
        """Serialize the full view for JSON / SSE transmission."""
        rows = []
        for record in self.rows():
            row = record.to_dict()
            row["label"] = self.label(record.id)
            rows.append(row)
        return {
            "status": self._status.value,
            "sort": self._sort_key.value,
            "columns": list(TICK_FIELDS),
            "rows": rows,
        }

    def view_since(self, version: int) -> tuple[int, dict | None]:
        """Current version, plus the serialized view if it moved past `version`."""
        if self._version == version:
            return version, None
        return self._version, self.to_dict()

    @property
    def status(self) -> ConnectionStatus:
        return self._status

    @property
    def records(self) -> list[TickRecord]:
        """Published snapshot in publication order."""
        return self._records

    @property
    def labels(self) -> dict[str, str]:
        return dict(self._labels)

    @property
    def sort_key(self) -> SortKey:
        return self._sort_key

    @property
    def version(self) -> int:
        """Current version counter. Useful for SSE change detection."""
        return self._version

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, symbol: str) -> bool:
        return any(record.id == symbol for record in self._records)
