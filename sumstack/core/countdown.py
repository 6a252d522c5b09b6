"""
Countdown Controller
====================

Periodic tick for time mode. RUNNING while a periodic timer is armed,
STOPPED otherwise; stopping cancels the timer so no tick can land on a
superseded game.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional

from sumstack.core.scheduler import TimerGroup, TimerHandle

logger = logging.getLogger(__name__)


class CountdownState(str, Enum):
    RUNNING = "running"
    STOPPED = "stopped"


class CountdownController:
    """Arms and disarms the countdown tick on a timer group."""

    def __init__(self, timers: TimerGroup, period: float, on_tick: Callable[[], None]):
        """
        Args:
            timers: Timer group that owns the periodic handle.
            period: Seconds between ticks.
            on_tick: Called once per period while running.
        """
        self._timers = timers
        self._period = period
        self._on_tick = on_tick
        self._handle: Optional[TimerHandle] = None

    @property
    def state(self) -> CountdownState:
        if self._handle is not None and self._handle.active:
            return CountdownState.RUNNING
        return CountdownState.STOPPED

    @property
    def running(self) -> bool:
        return self.state is CountdownState.RUNNING

    @property
    def period(self) -> float:
        return self._period

    def start(self) -> None:
        """Enter RUNNING. No-op if already running."""
        if self.running:
            return
        self._handle = self._timers.call_every(self._period, self._on_tick)
        logger.debug("Countdown started (period=%.3fs)", self._period)

    def stop(self) -> None:
        """Enter STOPPED, cancelling the pending tick."""
        if self._handle is None:
            return
        if self._handle.active:
            logger.debug("Countdown stopped after %d ticks", self._handle.fire_count)
        self._handle.cancel()
        self._handle = None

    def sync(self, should_run: bool) -> None:
        """Start or stop to match should_run."""
        if should_run:
            self.start()
        else:
            self.stop()
