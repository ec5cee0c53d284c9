"""Rate limiter that collapses bursts of calls into one call per window."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)


class Throttle:
    """Gate around a sink that runs it at most once per `interval` seconds.

    The first call in a quiet period opens a window. When the window
    elapses the sink runs once with the arguments of the latest call made
    during it. With `leading=True` the very first call ever also runs the
    sink synchronously.

    Must be called from inside a running event loop. There is no cancel:
    the gate stays live for the life of its owner.
    """

    def __init__(self, sink: Callable[..., Any], interval: float, leading: bool = False) -> None:
        self._sink = sink
        self._interval = interval
        self._leading = leading
        self._handle: asyncio.TimerHandle | None = None
        self._args: tuple = ()
        self._kwargs: dict[str, Any] = {}

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        self._args = args
        self._kwargs = kwargs

        if self._leading:
            self._leading = False
            self._run(args, kwargs)

        if self._handle is None:
            loop = asyncio.get_running_loop()
            self._handle = loop.call_later(self._interval, self._fire)

    @property
    def pending(self) -> bool:
        """True while a window is open and the trailing call has not run."""
        return self._handle is not None

    def _fire(self) -> None:
        self._handle = None
        args, kwargs = self._args, self._kwargs
        self._args, self._kwargs = (), {}
        self._run(args, kwargs)

    def _run(self, args: tuple, kwargs: dict[str, Any]) -> None:
        try:
            self._sink(*args, **kwargs)
        except Exception:
            logger.exception("Throttled sink %r failed", self._sink)


def throttle(sink: Callable[..., Any], interval: float, leading: bool = False) -> Throttle:
    """Wrap `sink` so bursts of calls collapse to one call per `interval` seconds."""
    return Throttle(sink, interval, leading=leading)
