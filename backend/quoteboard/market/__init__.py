"""Live quote subsystem for the quote board.

Public API:
    TickRecord          - Immutable normalized ticker values for one instrument
    ConnectionStatus    - disconnected / connecting / connected
    SortKey             - Numeric columns the board can be ordered by
    QuoteBoard          - Published view state (status, rows, labels, sort)
    QuoteStreamClient   - Websocket client with subscribe handshake and reconnect
    throttle            - Collapse bursts of calls to one per interval
    project             - Descending sort of records by a numeric field
    create_quote_stream - Factory that builds a client for a board
    create_stream_router - FastAPI router factory for SSE endpoint
"""

from .board import QuoteBoard
from .connection import QuoteStreamClient
from .factory import create_quote_stream
from .models import ConnectionStatus, SortKey, TickRecord
from .projector import project
from .stream import create_stream_router
from .throttle import throttle

__all__ = [
    "TickRecord",
    "ConnectionStatus",
    "SortKey",
    "QuoteBoard",
    "QuoteStreamClient",
    "throttle",
    "project",
    "create_quote_stream",
    "create_stream_router",
]
