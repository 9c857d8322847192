"""
Cancelable repeating timers.

Callbacks always run on the thread that drives the scheduler, so ticks,
playback steps and pointer input never overlap.
"""

import time
from typing import Callable, List, Optional


class TimerHandle:
    """A repeating callback. Once cancelled it never fires again."""

    def __init__(self, scheduler: "ManualScheduler", interval: float, callback: Callable[[], None]):
        self.scheduler = scheduler
        self.interval = interval
        self.callback = callback
        self.next_due = scheduler.now() + interval
        self.cancelled = False

    @property
    def active(self) -> bool:
        return not self.cancelled

    def cancel(self) -> None:
        """Idempotent"""
        if self.cancelled:
            return
        self.cancelled = True
        self.scheduler._discard(self)


class ManualScheduler:
    """
    Scheduler on a virtual clock.

    Time only moves when ``advance`` is called, which fires every due callback
    in chronological order. Used by tests and by hosts that own their loop.
    """

    EPSILON = 1e-9

    def __init__(self):
        self._time = 0.0
        self._handles: List[TimerHandle] = []

    def now(self) -> float:
        return self._time

    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        if interval <= 0:
            raise ValueError("interval must be positive")
        handle = TimerHandle(self, interval, callback)
        self._handles.append(handle)
        return handle

    def _discard(self, handle: TimerHandle) -> None:
        if handle in self._handles:
            self._handles.remove(handle)

    @property
    def pending(self) -> int:
        return len(self._handles)

    def next_due(self) -> Optional[float]:
        if not self._handles:
            return None
        return min(h.next_due for h in self._handles)

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward and fire what came due.

        Returns:
            number of callbacks fired
        """
        if seconds < 0:
            raise ValueError(f"Cannot move the clock backwards by {seconds}")
        target = self._time + seconds
        fired = 0
        while True:
            due = [h for h in self._handles if h.next_due <= target + self.EPSILON]
            if not due:
                break
            handle = min(due, key=lambda h: h.next_due)
            self._time = max(self._time, handle.next_due)
            handle.next_due += handle.interval
            handle.callback()
            fired += 1
        self._time = target
        return fired

    def cancel_all(self) -> None:
        for handle in list(self._handles):
            handle.cancel()


class RealTimeScheduler(ManualScheduler):
    """Drives the virtual clock from the wall clock in a blocking loop."""

    def __init__(self, poll_interval: float = 0.05):
        super().__init__()
        self.poll_interval = poll_interval
        self._origin = time.monotonic()

    def poll(self) -> int:
        """Fire everything that came due on the wall clock since the last call"""
        elapsed = time.monotonic() - self._origin
        if elapsed <= self._time:
            return 0
        return self.advance(elapsed - self._time)

    def run_until(self, done: Callable[[], bool], timeout: Optional[float] = None) -> bool:
        """
        Fire callbacks as they come due until ``done()`` or no timers remain.

        Returns:
            True if ``done()`` became true, False on timeout or idle
        """
        started = time.monotonic()
        while not done():
            if not self._handles:
                return done()
            if timeout is not None and time.monotonic() - started >= timeout:
                return False
            self.poll()
            wait = self.next_due()
            if wait is not None:
                time.sleep(max(0.0, min(self.poll_interval, wait - self._time)))
        return True
