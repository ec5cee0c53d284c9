"""JSON codec for the quote service wire protocol.

Inbound frames are told apart by the fields they carry, not by a tag:

    catalog response   {"id": 1, "result": [{"id", "quoteCurrency", "baseCurrency"}, ...]}
    ticker update      {"method": "ticker", "params": {"symbol", "bid", "ask", "high", "low", "last"}}

Anything else is ignored by the reconciler.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from .constants import (
    CATALOG_REQUEST_ID,
    METHOD_GET_SYMBOLS,
    METHOD_SUBSCRIBE_TICKER,
    METHOD_TICKER,
)
from .models import CatalogEntry

logger = logging.getLogger(__name__)


def decode(raw: str | bytes) -> dict[str, Any]:
    """Parse a raw frame. Malformed or non-object frames decode to {}."""
    try:
        message = json.loads(raw)
    except (TypeError, ValueError, RecursionError) as e:
        logger.warning("Dropping undecodable frame: %s", e)
        return {}

    if not isinstance(message, dict):
        logger.warning("Dropping non-object frame of type %s", type(message).__name__)
        return {}
    return message


def is_catalog_response(message: Mapping[str, Any]) -> bool:
    request_id = message.get("id")
    return (
        type(request_id) is int
        and request_id == CATALOG_REQUEST_ID
        and isinstance(message.get("result"), list)
    )


def is_ticker_update(message: Mapping[str, Any]) -> bool:
    params = message.get("params")
    return (
        message.get("method") == METHOD_TICKER
        and isinstance(params, Mapping)
        and params.get("symbol") is not None
    )


def catalog_entries(message: Mapping[str, Any]) -> list[CatalogEntry]:
    """Extract catalog entries, skipping any without an id."""
    entries = []
    for item in message.get("result", []):
        if not isinstance(item, Mapping) or item.get("id") is None:
            logger.debug("Skipping catalog item without id: %r", item)
            continue
        entries.append(
            CatalogEntry(
                id=str(item["id"]),
                quote_currency=str(item.get("quoteCurrency", "")),
                base_currency=str(item.get("baseCurrency", "")),
            )
        )
    return entries


def encode_catalog_request() -> str:
    return json.dumps({"id": CATALOG_REQUEST_ID, "method": METHOD_GET_SYMBOLS, "params": {}})


def encode_subscribe_request(request_id: int, symbol: str) -> str:
    return json.dumps(
        {
            "id": request_id,
            "method": METHOD_SUBSCRIBE_TICKER,
            "params": {"symbol": symbol},
        }
    )
