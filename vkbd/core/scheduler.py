"""Deferral primitives: next-frame callbacks and short timers.

Both deferrals are fire-and-forget. Callbacks must tolerate the state
they touch having changed in the meantime.
"""

from __future__ import annotations

import heapq
import itertools
import logging
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class Scheduler(Protocol):
    def request_animation_frame(self, callback: Callable[[], None]) -> None: ...

    def call_later(self, delay: float, callback: Callable[[], None]) -> None: ...


class ManualScheduler:
    """Scheduler driven by virtual time.

    Nothing runs until the owner calls ``run_frame()`` or ``advance()``.
    ``advance`` also flushes pending frame callbacks, since a frame always
    elapses before any timer of non-zero delay.
    """

    def __init__(self):
        self.now = 0.0
        self._frames: list[Callable[[], None]] = []
        self._timers: list[tuple[float, int, Callable[[], None]]] = []
        self._seq = itertools.count()

    def request_animation_frame(self, callback: Callable[[], None]) -> None:
        self._frames.append(callback)

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        heapq.heappush(self._timers, (self.now + max(0.0, delay), next(self._seq), callback))

    @property
    def pending(self) -> int:
        return len(self._frames) + len(self._timers)

    def run_frame(self) -> int:
        """Run callbacks queued for the next frame. Returns how many ran."""
        frames, self._frames = self._frames, []
        for callback in frames:
            self._run(callback)
        return len(frames)

    def advance(self, seconds: float) -> int:
        """Move virtual time forward, firing due timers in order."""
        count = self.run_frame()
        deadline = self.now + seconds
        while self._timers and self._timers[0][0] <= deadline:
            when, _seq, callback = heapq.heappop(self._timers)
            self.now = when
            self._run(callback)
            count += 1
        self.now = deadline
        return count

    @staticmethod
    def _run(callback: Callable[[], None]) -> None:
        try:
            callback()
        except Exception:
            logger.exception("Scheduled callback failed: %r", callback)
