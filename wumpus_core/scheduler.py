from __future__ import annotations

import heapq
import itertools
import threading
from typing import Callable, List, Tuple

Callback = Callable[[], None]


class Scheduler:
    """Runs a callback once after a delay in seconds. Fire and forget."""

    def call_later(self, delay: float, fn: Callback) -> None:
        raise NotImplementedError


class TimerScheduler(Scheduler):
    """Real-time scheduler backed by daemon threading.Timer threads."""

    def call_later(self, delay: float, fn: Callback) -> None:
        timer = threading.Timer(delay, fn)
        timer.daemon = True
        timer.start()


class ManualScheduler(Scheduler):
    """Scheduler with an explicit clock. Nothing runs until advance() is called."""

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: List[Tuple[float, int, Callback]] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, fn: Callback) -> None:
        heapq.heappush(self._queue, (self.now + max(0.0, delay), next(self._seq), fn))

    @property
    def pending(self) -> int:
        return len(self._queue)

    def advance(self, seconds: float) -> int:
        """Moves the clock forward and runs every callback that came due, in order."""
        target = self.now + seconds
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, fn = heapq.heappop(self._queue)
            self.now = due
            fn()
            ran += 1
        self.now = target
        return ran

    def run_all(self) -> int:
        ran = 0
        while self._queue:
            due, _, fn = heapq.heappop(self._queue)
            self.now = max(self.now, due)
            fn()
            ran += 1
        return ran
