# timers.py
"""
One-shot timers driven by the host loop's clock.

The main loop polls `run_due(now)` once per iteration, so a timer fires on
the first poll at or after its deadline regardless of how many frames have
passed.
"""
import heapq
import itertools
import logging
from typing import Callable, List, Tuple


class TimerHandle:
    """Handle to a scheduled callback; cancelling it prevents the call."""
    def __init__(self, deadline: float, callback: Callable[[], None]):
        self.deadline = deadline
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)


class TimerQueue:
    """
    Ordered set of pending one-shot timers.
    """
    def __init__(self):
        self._heap: List[Tuple[float, int, TimerHandle]] = []
        self._sequence = itertools.count()

    def call_later(self, delay_ms: float, callback: Callable[[], None], now: float) -> TimerHandle:
        handle = TimerHandle(now + delay_ms, callback)
        # The sequence number keeps equal deadlines in scheduling order.
        heapq.heappush(self._heap, (handle.deadline, next(self._sequence), handle))
        logging.debug(f"Timer scheduled for t={handle.deadline:.0f}ms.")
        return handle

    def run_due(self, now: float) -> int:
        """Fires every live timer whose deadline has passed. Returns the count fired."""
        fired = 0
        while self._heap and self._heap[0][0] <= now:
            _, _, handle = heapq.heappop(self._heap)
            if handle.cancelled:
                continue
            handle.fired = True
            handle.callback()
            fired += 1
        return fired

    @property
    def pending(self) -> int:
        return sum(1 for _, _, handle in self._heap if handle.active)
