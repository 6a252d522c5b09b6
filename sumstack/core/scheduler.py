"""
Scheduler
=========

Cancellable delayed and periodic callbacks.

ManualScheduler runs on a virtual clock that the owner advances
explicitly (tests, headless simulation, a pygame frame loop).
AsyncioScheduler runs on a live asyncio event loop. TimerGroup scopes a
set of timers so they are all released together.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from typing import Callable, List, Optional, Set, Tuple

# Tolerance for float clock comparisons
_EPSILON = 1e-9


class TimerHandle:
    """Handle to a scheduled callback."""

    def __init__(self, callback: Callable[[], None], period: Optional[float] = None):
        self._callback = callback
        self._period = period
        self._cancelled = False
        self._fired = 0
        self._on_cancel: Optional[Callable[["TimerHandle"], None]] = None

    @property
    def periodic(self) -> bool:
        return self._period is not None

    @property
    def period(self) -> Optional[float]:
        return self._period

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def fire_count(self) -> int:
        """Number of times the callback has run."""
        return self._fired

    @property
    def active(self) -> bool:
        """True while the callback may still run."""
        if self._cancelled:
            return False
        return self.periodic or self._fired == 0

    def cancel(self) -> None:
        """Stop the callback from running again. Safe to call twice."""
        if self._cancelled:
            return
        self._cancelled = True
        if self._on_cancel is not None:
            self._on_cancel(self)

    def _run(self) -> None:
        self._fired += 1
        self._callback()


def _check_delay(delay: float) -> None:
    if delay < 0:
        raise ValueError(f"delay must be >= 0, got {delay}")


def _check_period(period: float) -> None:
    if period <= 0:
        raise ValueError(f"period must be positive, got {period}")


class ManualScheduler:
    """
    Scheduler driven by an explicit virtual clock.

    Timers due at the same instant run in the order they were scheduled.
    Periodic due times are computed as ``start + n * period`` so long
    runs do not drift.
    """

    def __init__(self, start_time: float = 0.0):
        self._now = start_time
        self._queue: List[Tuple[float, int, TimerHandle]] = []
        self._seq = itertools.count()
        # handle -> (origin, runs scheduled so far) for periodic timers
        self._periodic: dict = {}

    @property
    def now(self) -> float:
        """Current virtual time in seconds."""
        return self._now

    @property
    def pending(self) -> int:
        """Number of timers that may still fire."""
        return sum(1 for _, _, handle in self._queue if not handle.cancelled)

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Run callback once, delay seconds from now."""
        _check_delay(delay)
        handle = TimerHandle(callback)
        self._push(self._now + delay, handle)
        return handle

    def call_every(self, period: float, callback: Callable[[], None]) -> TimerHandle:
        """Run callback every period seconds, first run one period from now."""
        _check_period(period)
        handle = TimerHandle(callback, period)
        self._periodic[handle] = (self._now, 1)
        self._push(self._now + period, handle)
        return handle

    def _push(self, when: float, handle: TimerHandle) -> None:
        heapq.heappush(self._queue, (when, next(self._seq), handle))

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward, running every timer that comes due.

        Callbacks observe ``now`` equal to their own due time. Timers
        scheduled or cancelled by a callback take effect immediately.

        Args:
            seconds: Amount of virtual time to elapse.

        Returns:
            Number of callbacks run.
        """
        _check_delay(seconds)
        deadline = self._now + seconds
        ran = 0

        while self._queue and self._queue[0][0] <= deadline + _EPSILON:
            when, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                self._periodic.pop(handle, None)
                continue

            self._now = max(self._now, when)
            if handle.periodic:
                origin, runs = self._periodic[handle]
                runs += 1
                self._periodic[handle] = (origin, runs)
                self._push(origin + runs * handle.period, handle)

            handle._run()
            ran += 1

        self._now = max(self._now, deadline)
        return ran


class AsyncioScheduler:
    """
    Scheduler backed by a running asyncio event loop.

    Without an explicit loop it must be created from inside a coroutine.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop if loop is not None else asyncio.get_running_loop()

    @property
    def now(self) -> float:
        return self._loop.time()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Run callback once, delay seconds from now."""
        _check_delay(delay)
        handle = TimerHandle(callback)
        timer = self._loop.call_later(delay, self._fire_once, handle)
        handle._on_cancel = lambda _: timer.cancel()
        return handle

    def call_every(self, period: float, callback: Callable[[], None]) -> TimerHandle:
        """Run callback every period seconds."""
        _check_period(period)
        handle = TimerHandle(callback, period)
        origin = self._loop.time()
        state = {"timer": None}

        def fire(runs: int) -> None:
            if handle.cancelled:
                return
            state["timer"] = self._loop.call_at(origin + (runs + 1) * period, fire, runs + 1)
            handle._run()

        state["timer"] = self._loop.call_at(origin + period, fire, 1)
        handle._on_cancel = lambda _: state["timer"].cancel()
        return handle

    @staticmethod
    def _fire_once(handle: TimerHandle) -> None:
        if not handle.cancelled:
            handle._run()


class TimerGroup:
    """
    Owns a set of timers and releases them together.

    Use as a context manager to guarantee cancellation on every exit path::

        with TimerGroup(scheduler) as timers:
            timers.call_every(0.1, tick)
            ...
    """

    def __init__(self, scheduler):
        self._scheduler = scheduler
        self._handles: Set[TimerHandle] = set()

    @property
    def scheduler(self):
        return self._scheduler

    @property
    def active_count(self) -> int:
        self._prune()
        return len(self._handles)

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        self._prune()
        handle = self._scheduler.call_later(delay, callback)
        self._handles.add(handle)
        return handle

    def call_every(self, period: float, callback: Callable[[], None]) -> TimerHandle:
        self._prune()
        handle = self._scheduler.call_every(period, callback)
        self._handles.add(handle)
        return handle

    def cancel_all(self) -> int:
        """Cancel every owned timer. Returns how many were still active."""
        active = [h for h in self._handles if h.active]
        for handle in self._handles:
            handle.cancel()
        self._handles.clear()
        return len(active)

    def _prune(self) -> None:
        self._handles = {h for h in self._handles if h.active}

    def __enter__(self) -> "TimerGroup":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cancel_all()
