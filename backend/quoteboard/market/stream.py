"""SSE streaming endpoint and sort control for the quote board."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncGenerator

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import StreamingResponse

from .board import QuoteBoard

logger = logging.getLogger(__name__)


def create_stream_router(board: QuoteBoard) -> APIRouter:
    """Create the quote board router with a reference to the board.

    This factory pattern lets us inject the QuoteBoard without globals.
    """
    router = APIRouter(prefix="/api/quotes", tags=["quotes"])

    @router.get("")
    async def get_quotes() -> dict:
        """Current view: status, active sort key and ordered rows."""
        return board.to_dict()

    @router.post("/sort/{column}")
    async def sort_quotes(column: str) -> dict:
        """Change the sort column. Rows are re-ordered on the next event."""
        try:
            key = board.select_sort(column)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        return {"sort": key.value}

    @router.get("/stream")
    async def stream_quotes(request: Request) -> StreamingResponse:
        """SSE endpoint for the live quote table.

        Emits the whole view whenever the board changes, checking every
        ~500ms. Events look like:

            data: {"status": "connected", "sort": "last", "columns": [...], "rows": [...]}

        Includes a retry directive so the browser auto-reconnects on
        disconnection (EventSource built-in behavior).
        """
        return StreamingResponse(
            _generate_events(board, request),
            media_type="text/event-stream",
            headers={
                "Cache-Control": "no-cache",
                "Connection": "keep-alive",
                "X-Accel-Buffering": "no",  # Disable nginx buffering if proxied
            },
        )

    return router


async def _generate_events(
    board: QuoteBoard,
    request: Request,
    interval: float = 0.5,
) -> AsyncGenerator[str, None]:
    """Async generator that yields SSE-formatted board views.

    Each event carries the board version as its id, so a reconnecting
    EventSource reports the last view it saw in Last-Event-ID. Stops when
    the client disconnects (detected via request.is_disconnected()).
    """
    # Tell the client to retry after 1 second if the connection drops
    yield "retry: 1000\n\n"

    seen_version = -1
    client_ip = request.client.host if request.client else "unknown"
    logger.info("SSE client connected: %s (board %s)", client_ip, board.status.value)

    try:
        while not await request.is_disconnected():
            seen_version, view = board.view_since(seen_version)
            if view is not None:
                yield f"id: {seen_version}\ndata: {json.dumps(view)}\n\n"
            await asyncio.sleep(interval)
        logger.info("SSE client disconnected: %s", client_ip)
    except asyncio.CancelledError:
        logger.info("SSE stream cancelled for: %s", client_ip)
