"""
Scheduler
=========

Simulation clock with deferred, cancellable one-shot timers.

Timers fire from ``advance()`` on the simulation timeline, never from wall
clock, so a run is reproducible given the same sequence of calls.
"""

from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Callable, List, Tuple


@dataclass
class TimerHandle:
    """Handle for a pending one-shot timer."""
    due_ms: float
    callback: Callable[[], None] = field(repr=False)
    cancelled: bool = False
    fired: bool = False

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> None:
        """Prevent the callback from running. Idempotent."""
        self.cancelled = True


class SimScheduler:
    """
    Millisecond simulation clock plus a timer heap.

    Due timers run in (due time, scheduling order) order. A callback may
    schedule further timers; those run in the same advance() if already due.
    """

    def __init__(self, start_ms: float = 0.0):
        self._now_ms = start_ms
        self._heap: List[Tuple[float, int, TimerHandle]] = []
        self._counter = itertools.count()

    @property
    def now_ms(self) -> float:
        """Current simulation time."""
        return self._now_ms

    @property
    def pending_count(self) -> int:
        """Number of timers that have not fired or been cancelled."""
        return sum(1 for _, _, handle in self._heap if handle.pending)

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        """
        Schedule callback to run delay_ms after the current time.

        Args:
            delay_ms: Delay in milliseconds (negative is treated as zero).
            callback: Zero-argument callable.

        Returns:
            TimerHandle that can be cancelled.
        """
        handle = TimerHandle(due_ms=self._now_ms + max(0.0, delay_ms), callback=callback)
        heapq.heappush(self._heap, (handle.due_ms, next(self._counter), handle))
        return handle

    def advance(self, dt_ms: float) -> int:
        """
        Move the clock forward and run every timer that became due.

        Args:
            dt_ms: Time step in milliseconds.

        Returns:
            Number of callbacks that ran.
        """
        target = self._now_ms + dt_ms
        fired = 0
        while self._heap and self._heap[0][0] <= target:
            due_ms, _, handle = heapq.heappop(self._heap)
            if not handle.pending:
                continue
            # Callbacks observe the clock at their own due time
            self._now_ms = max(self._now_ms, due_ms)
            handle.fired = True
            handle.callback()
            fired += 1
        self._now_ms = target
        return fired

    def cancel_all(self) -> None:
        """Cancel every pending timer."""
        for _, _, handle in self._heap:
            handle.cancel()
        self._heap.clear()

    def reset(self, start_ms: float = 0.0) -> None:
        """Cancel all timers and rewind the clock."""
        self.cancel_all()
        self._now_ms = start_ms
