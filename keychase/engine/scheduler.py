from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Protocol

logger = logging.getLogger(__name__)


class Handle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(ABC):
    """Single-threaded timer primitive: run a callback after a delay."""

    @abstractmethod
    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> Handle:
        raise NotImplementedError


class AsyncioScheduler(Scheduler):
    """Schedules callbacks on an asyncio event loop.

    Callbacks run on the loop thread and never yield, so each one finishes
    its mutation before any other callback or request handler runs.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self.loop = loop or asyncio.get_running_loop()

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(delay_ms / 1000, callback)


class ManualHandle:
    def __init__(self, due_ms: int, callback: Callable[[], None]) -> None:
        self.due_ms = due_ms
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler(Scheduler):
    """Virtual-clock scheduler driven explicitly with ``advance``."""

    def __init__(self) -> None:
        self.now_ms = 0
        self._queue: list[tuple[int, int, ManualHandle]] = []
        self._counter = itertools.count()

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> ManualHandle:
        handle = ManualHandle(self.now_ms + delay_ms, callback)
        heapq.heappush(self._queue, (handle.due_ms, next(self._counter), handle))
        return handle

    def pending(self) -> list[ManualHandle]:
        return sorted(
            (h for _, _, h in self._queue if not h.cancelled), key=lambda h: h.due_ms
        )

    def advance(self, ms: int) -> int:
        """Move the clock forward, firing due callbacks in order. Returns the count fired."""
        until = self.now_ms + ms
        fired = 0
        while self._queue and self._queue[0][0] <= until:
            due, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now_ms = due
            handle.callback()
            fired += 1
        self.now_ms = until
        return fired


class RepeatingTask:
    """Run ``fn`` every ``period_ms`` until cancelled.

    The next run is scheduled only after the current one returns, so a slow
    run pushes the following one back. Cancelling during a run stops it.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        period_ms: int,
        fn: Callable[[], None],
        name: str = "task",
    ) -> None:
        self.scheduler = scheduler
        self.period_ms = period_ms
        self.fn = fn
        self.name = name
        self.active = False
        self._handle: Handle | None = None

    def start(self, initial_delay_ms: int) -> None:
        self.cancel()
        self.active = True
        logger.debug("Scheduling %s in %sms", self.name, initial_delay_ms)
        self._handle = self.scheduler.call_later(initial_delay_ms, self._run)

    def cancel(self) -> None:
        self.active = False
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _run(self) -> None:
        self._handle = None
        self.fn()
        # fn may have cancelled (game over) or restarted this task.
        if self.active and self._handle is None:
            self._handle = self.scheduler.call_later(self.period_ms, self._run)
