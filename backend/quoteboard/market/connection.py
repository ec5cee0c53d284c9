"""Websocket client that keeps a QuoteBoard fed from the quote service."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from . import codec
from .board import QuoteBoard
from .constants import DEFAULT_WS_URL, UPDATE_INTERVAL
from .models import ConnectionStatus
from .registry import Reconciler, StreamSession, SymbolRegistry
from .throttle import throttle

logger = logging.getLogger(__name__)


class QuoteStreamClient:
    """Streams ticker updates from the quote service into a QuoteBoard.

    Each connection runs the same handshake: send getSymbols, and on the
    catalog response send one subscribeTicker per instrument. Ticker
    updates are merged into a per-connection accumulator and published to
    the board through a throttle, at most once per `interval`.

    When the connection closes or fails, the client waits `interval`
    seconds and reconnects, forever, until stop() is called. Every new
    connection starts from an empty accumulator.

    Lifecycle:
        client = QuoteStreamClient(board)
        await client.start()
        # ... app runs ...
        await client.stop()
    """

    def __init__(
        self,
        board: QuoteBoard,
        url: str = DEFAULT_WS_URL,
        interval: float = UPDATE_INTERVAL,
        connect: Callable[[str], Any] = websockets.connect,
    ) -> None:
        self._board = board
        self._url = url
        self._interval = interval
        self._connect = connect
        self._session = StreamSession()
        self._registry = SymbolRegistry()
        self._reconciler = Reconciler(
            self._session,
            self._registry,
            publish=throttle(board.publish, interval),
            publish_labels=board.set_labels,
        )
        self._ws: Any = None
        self._task: asyncio.Task | None = None
        self._stopped = False

    async def start(self) -> None:
        """Connect and keep reconnecting in a background task.

        A stopped client stays stopped; create a new one to reconnect.
        """
        if self._stopped:
            logger.warning("Quote stream was stopped; ignoring start()")
            return
        if self._task is not None:
            logger.warning("Quote stream already started")
            return
        self._task = asyncio.create_task(self._run_loop(), name="quote-stream")
        logger.info("Quote stream started: %s (retry every %.1fs)", self._url, self._interval)

    async def stop(self) -> None:
        """Close the connection and cancel any pending reconnect.

        Safe to call multiple times. After stop() the client will not
        connect again.
        """
        self._stopped = True
        await self._close_transport()
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        logger.info("Quote stream stopped")

    @property
    def status(self) -> ConnectionStatus:
        return self._board.status

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def session(self) -> StreamSession:
        return self._session

    @property
    def registry(self) -> SymbolRegistry:
        return self._registry

    # --- Internal ---

    async def _run_loop(self) -> None:
        """One connection per pass, then a fixed delay before the next."""
        while not self._stopped:
            try:
                await self._run_session()
            except Exception:
                logger.exception("Quote stream session failed")
            if self._stopped:
                break
            logger.info("Reconnecting to quote stream in %.1fs", self._interval)
            await asyncio.sleep(self._interval)

    async def _run_session(self) -> None:
        self._session.reset()
        self._board.set_status(ConnectionStatus.CONNECTING)
        try:
            async with self._connect(self._url) as ws:
                self._ws = ws
                await self._on_open()
                async for frame in ws:
                    await self._on_frame(frame)
        except ConnectionClosed as e:
            logger.warning("Quote stream connection lost: %s", e)
        except (WebSocketException, OSError, asyncio.TimeoutError) as e:
            logger.error("Quote stream error: %s", e)
            await self._close_transport()
        finally:
            self._on_closed()

    async def _on_open(self) -> None:
        self._board.set_status(ConnectionStatus.CONNECTED)
        await self._send(codec.encode_catalog_request())

    async def _on_frame(self, frame: str | bytes) -> None:
        message = codec.decode(frame)
        for outbound in self._reconciler.handle(message):
            await self._send(outbound)

    def _on_closed(self) -> None:
        # Drop the reference before any reconnect can be scheduled
        self._ws = None
        self._board.set_status(ConnectionStatus.DISCONNECTED)
        logger.info("Quote stream closed")

    async def _send(self, frame: str) -> None:
        if self._ws is None:
            logger.debug("Not connected; dropping outbound frame")
            return
        await self._ws.send(frame)

    async def _close_transport(self) -> None:
        ws = self._ws
        if ws is None:
            return
        try:
            await ws.close()
        except (WebSocketException, OSError) as e:
            logger.warning("Error closing quote stream: %s", e)
