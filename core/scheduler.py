"""
Fixed-rate periodic tasks polled from the application loop.

Callbacks run on the thread that calls poll(), so everything they touch is
owned by that one loop. A task fires at most once per poll; ticks missed
while the loop was busy are dropped rather than replayed.
"""

import time
from typing import Callable, List, Optional


class PeriodicTask:
    """A callback fired every `period` seconds while running."""

    def __init__(self, scheduler: "Scheduler", period: float, callback: Callable[[], None], name: str = ""):
        if period <= 0:
            raise ValueError("period must be positive")
        self.scheduler = scheduler
        self.period = float(period)
        self.callback = callback
        self.name = name or getattr(callback, "__name__", "task")
        self.running = False
        self.cancelled = False
        self.next_due: Optional[float] = None
        self.ticks = 0

    def start(self, now: float = None):
        if self.cancelled:
            raise RuntimeError(f"task '{self.name}' was cancelled")
        if self.running:
            return
        now = self.scheduler.now() if now is None else now
        self.running = True
        self.next_due = now + self.period

    def stop(self):
        self.running = False
        self.next_due = None

    def cancel(self):
        """Stop and release the task. It cannot be restarted."""
        self.stop()
        if not self.cancelled:
            self.cancelled = True
            self.scheduler._remove(self)

    def is_due(self, now: float) -> bool:
        return self.running and now >= self.next_due

    def _fire(self, now: float):
        self.ticks += 1
        self.next_due += self.period
        if self.next_due <= now:
            self.next_due = now + self.period
        self.callback()


class Scheduler:
    """Owns the periodic tasks of one application loop."""

    def __init__(self, clock: Callable[[], float] = None):
        self._clock = clock or time.monotonic
        self._tasks: List[PeriodicTask] = []
        self.closed = False

    def now(self) -> float:
        return self._clock()

    @property
    def tasks(self) -> tuple:
        return tuple(self._tasks)

    def every(self, period: float, callback: Callable[[], None], name: str = "") -> PeriodicTask:
        """Register a (stopped) periodic task."""
        if self.closed:
            raise RuntimeError("scheduler is shut down")
        task = PeriodicTask(self, period, callback, name)
        self._tasks.append(task)
        return task

    def _remove(self, task: PeriodicTask):
        if task in self._tasks:
            self._tasks.remove(task)

    def poll(self, now: float = None) -> int:
        """Fire every due task once. Returns how many fired."""
        now = self.now() if now is None else now
        fired = 0
        for task in list(self._tasks):
            if task.is_due(now):
                task._fire(now)
                fired += 1
        return fired

    def time_until_next(self, now: float = None) -> Optional[float]:
        """Seconds until the earliest running task is due, None if nothing runs."""
        now = self.now() if now is None else now
        due = [task.next_due for task in self._tasks if task.running]
        if not due:
            return None
        return max(0.0, min(due) - now)

    def shutdown(self):
        """Cancel every task."""
        for task in list(self._tasks):
            task.cancel()
        self.closed = True
