"""Data models for the quote board."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from .constants import NAN_DISPLAY, NAN_MARKER, TICK_FIELDS


class ConnectionStatus(str, Enum):
    """Lifecycle state of the quote stream connection."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class SortKey(str, Enum):
    """Numeric tick fields the board can be ordered by."""

    BID = "bid"
    ASK = "ask"
    HIGH = "high"
    LOW = "low"
    LAST = "last"


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    """One instrument from the getSymbols catalog response."""

    id: str
    quote_currency: str
    base_currency: str

    @property
    def label(self) -> str:
        """Human-readable label, e.g. 'ETH / BTC'."""
        return f"{self.quote_currency} / {self.base_currency}"


@dataclass(frozen=True, slots=True)
class TickRecord:
    """Latest normalized ticker values for one instrument.

    Price fields hold fixed 2-decimal text, or NAN_MARKER when the
    upstream value could not be parsed as a number.
    """

    id: str
    bid: str = NAN_MARKER
    ask: str = NAN_MARKER
    high: str = NAN_MARKER
    low: str = NAN_MARKER
    last: str = NAN_MARKER

    def numeric(self, field: str) -> float:
        """Float value of a price field; nan for the marker."""
        value = getattr(self, field)
        if value == NAN_MARKER:
            return math.nan
        return float(value)

    def display(self, field: str) -> str:
        """Cell text for a price field."""
        value = getattr(self, field)
        return NAN_DISPLAY if value == NAN_MARKER else value

    def to_dict(self) -> dict:
        """Serialize for JSON / SSE transmission."""
        data = {"id": self.id}
        for field in TICK_FIELDS:
            data[field] = self.display(field)
        return data
