"""
Debounced calls and stale-response discarding.

Debouncer delays a call until input has been quiet for a fixed time.
LatestOnly numbers requests so that a slow, older response never
overwrites a newer one.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


class LatestOnly:
    """Sequence gate: only the most recently issued request may apply."""

    def __init__(self) -> None:
        self._seq = 0

    def begin(self) -> int:
        self._seq += 1
        return self._seq

    def is_current(self, ticket: int) -> bool:
        return ticket == self._seq

    def invalidate(self) -> None:
        """Make every outstanding ticket stale."""
        self._seq += 1


class Debouncer:
    """
    Run `fn` once input has been quiet for `delay_ms`.

    Re-triggering before the delay elapses restarts the timer. A call that
    already started is not cancelled; pair with LatestOnly to drop its
    result if it has been superseded.
    """

    def __init__(self, delay_ms: int, fn: Callable[[], Awaitable[None]]):
        self.delay = delay_ms / 1000
        self._fn = fn
        self._handle: asyncio.TimerHandle | None = None
        self._inflight: set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        return self._handle is not None or bool(self._inflight)

    def trigger(self) -> None:
        """Restart the quiet-period timer. Needs a running event loop."""
        loop = asyncio.get_running_loop()
        if self._handle is not None:
            self._handle.cancel()
        self._handle = loop.call_later(self.delay, self._fire)

    def _fire(self) -> None:
        self._handle = None
        task = asyncio.ensure_future(self._fn())
        self._inflight.add(task)
        task.add_done_callback(self._done)

    def _done(self, task: asyncio.Task) -> None:
        self._inflight.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("debounced call failed", exc_info=task.exception())

    def cancel(self) -> None:
        """Drop the pending timer and abandon in-flight calls."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        for task in list(self._inflight):
            task.cancel()

    async def wait(self) -> None:
        """Block until no timer is pending and no call is running."""
        while self.pending:
            if self._inflight:
                await asyncio.gather(*self._inflight, return_exceptions=True)
            else:
                await asyncio.sleep(self.delay / 10 or 0.001)
