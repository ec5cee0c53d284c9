"""Symbol registry and tick reconciliation."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from . import codec
from .constants import FIRST_SUBSCRIBE_ID, NAN_MARKER, TICK_FIELDS
from .models import CatalogEntry, TickRecord

logger = logging.getLogger(__name__)


def normalize_price(value: Any) -> str:
    """Format a wire value as 2-decimal text, or NAN_MARKER if it isn't a finite number."""
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return NAN_MARKER
    if not math.isfinite(number):
        return NAN_MARKER
    return f"{number:.2f}"


def normalize_tick(params: Mapping[str, Any]) -> TickRecord:
    """Build a TickRecord from ticker params. Bad fields degrade individually."""
    fields = {field: normalize_price(params.get(field)) for field in TICK_FIELDS}
    return TickRecord(id=str(params["symbol"]), **fields)


class TickAccumulator:
    """Working set of tick records for one connection, keyed by id.

    Insertion-ordered; a later record for a known id replaces the old one
    in place. Records are never removed individually, only by reset().
    """

    def __init__(self) -> None:
        self._records: list[TickRecord] = []

    def merge(self, record: TickRecord) -> None:
        # Linear scan is fine for a few hundred instruments
        for i, existing in enumerate(self._records):
            if existing.id == record.id:
                self._records[i] = record
                return
        self._records.append(record)

    def snapshot(self) -> list[TickRecord]:
        """Fresh copy of the current records."""
        return list(self._records)

    def reset(self) -> None:
        self._records = []

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, symbol: str) -> bool:
        return any(record.id == symbol for record in self._records)


class StreamSession:
    """State scoped to a single connection: the accumulator and request ids."""

    def __init__(self) -> None:
        self.ticks = TickAccumulator()
        self._next_request_id = FIRST_SUBSCRIBE_ID

    def next_request_id(self) -> int:
        request_id = self._next_request_id
        self._next_request_id += 1
        return request_id

    def reset(self) -> None:
        self.ticks.reset()
        self._next_request_id = FIRST_SUBSCRIBE_ID


class SymbolRegistry:
    """Instrument id -> display label, rebuilt on every catalog response."""

    def __init__(self) -> None:
        self._labels: dict[str, str] = {}

    def load_catalog(self, entries: Iterable[CatalogEntry]) -> list[str]:
        """Replace the label map. Returns instrument ids in response order."""
        entries = list(entries)
        self._labels = {entry.id: entry.label for entry in entries}
        return [entry.id for entry in entries]

    def label(self, symbol: str) -> str | None:
        return self._labels.get(symbol)

    @property
    def labels(self) -> dict[str, str]:
        """Copy of the current label map."""
        return dict(self._labels)

    def __len__(self) -> int:
        return len(self._labels)


class Reconciler:
    """Applies decoded messages to the session and registry.

    `publish` receives a full snapshot after every merged tick; it is
    normally a Throttle gate. `publish_labels` receives the new label map
    after every catalog response. handle() returns the outbound frames the
    caller must send.
    """

    def __init__(
        self,
        session: StreamSession,
        registry: SymbolRegistry,
        publish: Callable[[list[TickRecord]], Any],
        publish_labels: Callable[[dict[str, str]], Any] | None = None,
    ) -> None:
        self._session = session
        self._registry = registry
        self._publish = publish
        self._publish_labels = publish_labels

    def handle(self, message: Mapping[str, Any]) -> list[str]:
        if codec.is_catalog_response(message):
            return self._on_catalog(message)
        if codec.is_ticker_update(message):
            self._on_ticker(message["params"])
        return []

    def _on_catalog(self, message: Mapping[str, Any]) -> list[str]:
        symbols = self._registry.load_catalog(codec.catalog_entries(message))
        if self._publish_labels is not None:
            self._publish_labels(self._registry.labels)
        logger.info("Catalog received: subscribing to %d instruments", len(symbols))
        return [
            codec.encode_subscribe_request(self._session.next_request_id(), symbol)
            for symbol in symbols
        ]

    def _on_ticker(self, params: Mapping[str, Any]) -> None:
        record = normalize_tick(params)
        self._session.ticks.merge(record)
        logger.debug("Tick %s last=%s", record.id, record.last)
        self._publish(self._session.ticks.snapshot())
