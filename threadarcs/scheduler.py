"""Cancellable timers for deferred highlight and tooltip updates.

Anything with ``call_later(delay, callback)`` returning an object with a
``cancel()`` method works as a scheduler, including an asyncio event loop.
``ManualScheduler`` runs on a virtual clock advanced by the caller.
"""

from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


@dataclass(order=True)
class ScheduledCall:
    when: float
    seq: int
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Deterministic scheduler; time only moves through :meth:`advance`."""

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: List[ScheduledCall] = []
        self._counter = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        if delay < 0:
            raise ValueError(f"delay must not be negative (got {delay})")
        call = ScheduledCall(self.now + delay, next(self._counter), callback)
        heapq.heappush(self._queue, call)
        return call

    @property
    def pending(self) -> int:
        return sum(1 for call in self._queue if not call.cancelled)

    def advance(self, seconds: float) -> int:
        """Move the clock forward and run every call that became due.

        Calls scheduled by callbacks run too if they fall inside the window.
        Returns the number of callbacks executed.
        """

        deadline = self.now + seconds
        executed = 0
        while self._queue and self._queue[0].when <= deadline:
            call = heapq.heappop(self._queue)
            if call.cancelled:
                continue
            self.now = call.when
            call.callback()
            executed += 1
        self.now = deadline
        return executed


def cancel(handle: Optional[TimerHandle]) -> None:
    if handle is not None:
        handle.cancel()
