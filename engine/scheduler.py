"""
scheduler.py — Cooperative Timer Source
========================================
The playback engine never sleeps and never spawns threads.  It asks a
scheduler for a one-shot timer with `call_later(delay, fn)` and keeps the
returned handle so it can `cancel()` it later.

TickScheduler is the in-process implementation used by the web app:
timers are stored in a heap and fire only when somebody pumps the
scheduler with `run_pending()`.  The Flask state endpoint does exactly
that on every poll, the tests do it with an explicit `now`.

Anything with the same shape works as a drop-in replacement, e.g. an
asyncio event loop (`loop.call_later` returns a cancellable TimerHandle).
"""

import heapq
import itertools
import logging
import time
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Timer handle
# ---------------------------------------------------------------------------
class TimerHandle:
    """
    Attributes:
        when     : Absolute due time (scheduler clock, seconds).
        callback : Zero-arg callable fired once when due.
    """

    def __init__(self, when: float, callback: Callable[[], None]):
        self.when:       float               = when
        self.callback:   Callable[[], None]  = callback
        self._cancelled: bool                = False

    def cancel(self) -> None:
        """Idempotent; a cancelled handle never fires."""
        self._cancelled = True

    def cancelled(self) -> bool:
        return self._cancelled

    def __repr__(self) -> str:
        flag = " cancelled" if self._cancelled else ""
        return f"<TimerHandle when={self.when:.3f}{flag}>"


# ---------------------------------------------------------------------------
# Scheduler
# ---------------------------------------------------------------------------
class TickScheduler:
    """
    Single-threaded timer heap.

    Args:
        clock : Monotonic time source.  Tests pass a fake one; the app
                uses time.monotonic.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._heap:  List[Tuple[float, int, TimerHandle]] = []
        self._seq    = itertools.count()

    def time(self) -> float:
        return self._clock()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(self._clock() + max(0.0, delay), callback)
        heapq.heappush(self._heap, (handle.when, next(self._seq), handle))
        return handle

    def run_pending(self, now: Optional[float] = None) -> int:
        """
        Fire every live timer due at or before `now` (default: clock).
        Timers scheduled by a callback for a time <= now also fire in this
        pass, so an explicit `now` ahead of the clock runs a whole stretch.
        Returns the number of callbacks run.
        """
        if now is None:
            now = self._clock()
        fired = 0
        while self._heap and self._heap[0][0] <= now:
            _, _, handle = heapq.heappop(self._heap)
            if handle.cancelled():
                continue
            handle.cancel()
            handle.callback()
            fired += 1
        if fired:
            logger.debug(f"run_pending fired {fired} timer(s)")
        return fired

    def pending(self) -> int:
        """Number of live (not cancelled) timers."""
        return sum(1 for _, _, h in self._heap if not h.cancelled())

    def clear(self) -> None:
        for _, _, handle in self._heap:
            handle.cancel()
        self._heap = []
