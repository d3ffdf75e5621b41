"""Debouncing of rapidly changing query text."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

logger = logging.getLogger(__name__)


class QueryDebouncer:
    """Emit a query only once it has been stable for ``delay`` seconds.

    Each :meth:`push` cancels the pending timer and arms a new one, so a burst
    of values arriving faster than the quiet window produces exactly one
    emission carrying the last value. Must be used from inside a running
    event loop.
    """

    def __init__(self, on_settled: Callable[[str], object], *, delay: float = 0.5):
        if delay < 0:
            raise ValueError("Debounce delay cannot be negative")
        self._on_settled = on_settled
        self._delay = delay
        self._handle: asyncio.TimerHandle | None = None
        self._value: str = ""
        self._closed = False

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        return self._handle is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def push(self, value: str) -> None:
        if self._closed:
            return
        self._cancel_timer()
        self._value = value or ""
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self._delay, self._fire)

    def flush(self) -> None:
        """Emit the pending value right away, if there is one."""

        if self._handle is None or self._closed:
            return
        self._cancel_timer()
        self._emit()

    def close(self) -> None:
        """Drop any pending emission; later pushes are ignored."""

        self._cancel_timer()
        self._closed = True

    def _fire(self) -> None:
        self._handle = None
        if self._closed:
            return
        self._emit()

    def _emit(self) -> None:
        logger.debug("Query settled: %r", self._value)
        self._on_settled(self._value)

    def _cancel_timer(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
