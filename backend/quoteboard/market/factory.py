"""Factory for creating the quote stream client."""

from __future__ import annotations

import logging
import os

from .board import QuoteBoard
from .connection import QuoteStreamClient
from .constants import DEFAULT_WS_URL

logger = logging.getLogger(__name__)


def create_quote_stream(board: QuoteBoard) -> QuoteStreamClient:
    """Create a quote stream client that publishes into `board`.

    - QUOTEBOARD_WS_URL set and non-empty → connect to that endpoint
    - Otherwise → DEFAULT_WS_URL

    Returns an unstarted client. Caller must await client.start().
    """
    url = os.environ.get("QUOTEBOARD_WS_URL", "").strip() or DEFAULT_WS_URL
    logger.info("Quote stream endpoint: %s", url)
    return QuoteStreamClient(board=board, url=url)
