"""Fixtures for quote stream tests.

Provides an in-memory stand-in for a websocket connection so the stream
client can be driven frame by frame without a network.
"""

import asyncio
import json

import pytest

_CLOSE = object()


class FakeSocket:
    """Async-iterable, async-context-manager websocket double."""

    def __init__(self) -> None:
        self.sent: list[str] = []
        self.closed = False
        self._frames: asyncio.Queue = asyncio.Queue()

    def feed(self, message) -> None:
        """Queue an inbound frame. Dicts are JSON-encoded, strings sent raw."""
        if isinstance(message, dict):
            message = json.dumps(message)
        self._frames.put_nowait(message)

    def drop(self, error: BaseException | None = None) -> None:
        """Simulate the server going away, cleanly or with an error."""
        self._frames.put_nowait(error if error is not None else _CLOSE)

    def sent_messages(self) -> list[dict]:
        return [json.loads(frame) for frame in self.sent]

    async def send(self, frame: str) -> None:
        self.sent.append(frame)

    async def close(self) -> None:
        self.closed = True
        self._frames.put_nowait(_CLOSE)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info) -> None:
        if not self.closed:
            await self.close()

    def __aiter__(self):
        return self

    async def __anext__(self):
        item = await self._frames.get()
        if item is _CLOSE:
            raise StopAsyncIteration
        if isinstance(item, BaseException):
            raise item
        return item


class FakeConnector:
    """Replacement for websockets.connect that hands out FakeSockets.

    The first `failures` attempts raise OSError, as a refused connection would.
    """

    def __init__(self, failures: int = 0) -> None:
        self.urls: list[str] = []
        self.sockets: list[FakeSocket] = []
        self._failures = failures

    def __call__(self, url: str) -> FakeSocket:
        self.urls.append(url)
        if self._failures > 0:
            self._failures -= 1
            raise OSError("connection refused")
        socket = FakeSocket()
        self.sockets.append(socket)
        return socket

    @property
    def attempts(self) -> int:
        return len(self.urls)


@pytest.fixture
def connector() -> FakeConnector:
    return FakeConnector()


@pytest.fixture
def failing_connector() -> FakeConnector:
    """Connector whose every attempt is refused."""
    return FakeConnector(failures=10**6)


@pytest.fixture
def wait_until():
    """Poll a predicate on the event loop until it holds or time runs out."""

    async def _wait_until(predicate, timeout: float = 2.0) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while not predicate():
            if loop.time() > deadline:
                raise AssertionError("condition not met within %.1fs" % timeout)
            await asyncio.sleep(0.005)

    return _wait_until


def catalog_response(*symbols: tuple[str, str, str]) -> dict:
    return {
        "id": 1,
        "result": [
            {"id": symbol, "quoteCurrency": quote, "baseCurrency": base}
            for symbol, quote, base in symbols
        ],
    }


def ticker_update(symbol: str, **fields) -> dict:
    params = {"symbol": symbol, "bid": "1", "ask": "1", "high": "1", "low": "1", "last": "1"}
    params.update(fields)
    return {"method": "ticker", "params": params}


@pytest.fixture
def make_catalog():
    return catalog_response


@pytest.fixture
def make_ticker():
    return ticker_update
