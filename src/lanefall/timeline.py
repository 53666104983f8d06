"""Cooperative session timeline: one logical clock, many cancellable timers."""

from __future__ import annotations

import heapq
import itertools
import logging
from typing import Callable

logger = logging.getLogger(__name__)

Task = Callable[[], None]


class TimerHandle:
    """Cancellation handle returned for every scheduled timer."""

    def __init__(self, due: float, task: Task, interval: float | None = None) -> None:
        self.due = due
        self.task = task
        self.interval = interval
        self.cancelled = False

    @property
    def repeating(self) -> bool:
        return self.interval is not None

    def cancel(self) -> None:
        self.cancelled = True


class Timeline:
    """Virtual millisecond clock driven by ``advance``.

    Timers fire in (due time, registration order). While a task runs, ``now``
    equals that timer's due time, so timing arithmetic inside tasks is exact
    regardless of how coarsely the clock is advanced.
    """

    def __init__(self) -> None:
        self.now: float = 0.0
        self._heap: list[tuple[float, int, TimerHandle]] = []
        self._seq = itertools.count()

    def schedule_once(self, delay_ms: float, task: Task) -> TimerHandle:
        handle = TimerHandle(self.now + max(0.0, delay_ms), task)
        self._push(handle)
        return handle

    def schedule_repeating(
        self, interval_ms: float, task: Task, first_delay_ms: float | None = None
    ) -> TimerHandle:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        first = interval_ms if first_delay_ms is None else max(0.0, first_delay_ms)
        handle = TimerHandle(self.now + first, task, interval=interval_ms)
        self._push(handle)
        return handle

    def advance(self, dt_ms: float) -> None:
        """Move the clock forward by dt_ms, firing every timer that falls due."""
        self.advance_to(self.now + max(0.0, dt_ms))

    def advance_to(self, target_ms: float) -> None:
        while self._heap and self._heap[0][0] <= target_ms:
            due, _, handle = heapq.heappop(self._heap)
            if handle.cancelled:
                continue
            self.now = due
            if handle.repeating:
                handle.due = due + handle.interval
                self._push(handle)
            handle.task()
        self.now = max(self.now, target_ms)

    @property
    def pending(self) -> int:
        return sum(1 for _, _, h in self._heap if not h.cancelled)

    def _push(self, handle: TimerHandle) -> None:
        heapq.heappush(self._heap, (handle.due, next(self._seq), handle))
