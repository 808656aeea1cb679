"""Fixed-rate cooperative scheduler."""

import pytest

from core.scheduler import Scheduler


class ManualClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class TestScheduler:
    """Polling, missed ticks and teardown."""

    def test_fires_once_per_period(self):
        clock = ManualClock()
        scheduler = Scheduler(clock)
        calls = []
        task = scheduler.every(0.1, lambda: calls.append(clock.now))
        task.start()

        for step in range(1, 6):
            clock.now = step * 0.1 + 1e-9
            scheduler.poll()

        assert len(calls) == 5
        assert task.ticks == 5

    def test_not_running_until_started(self):
        scheduler = Scheduler(ManualClock())
        calls = []
        scheduler.every(0.1, lambda: calls.append(1))

        assert scheduler.poll(10.0) == 0
        assert calls == []

    def test_missed_ticks_are_dropped(self):
        scheduler = Scheduler(ManualClock())
        calls = []
        task = scheduler.every(0.1, lambda: calls.append(1))
        task.start(now=0.0)

        assert scheduler.poll(5.0) == 1
        assert scheduler.poll(5.05) == 0
        assert task.next_due == pytest.approx(5.1)

    def test_independent_tasks(self):
        scheduler = Scheduler(ManualClock())
        fast, slow = [], []
        scheduler.every(0.1, lambda: fast.append(1)).start(now=0.0)
        scheduler.every(0.5, lambda: slow.append(1)).start(now=0.0)

        for step in range(1, 11):
            scheduler.poll(step * 0.1 + 1e-9)

        assert len(fast) == 10
        assert len(slow) == 2

    def test_stop_inside_callback(self):
        scheduler = Scheduler(ManualClock())
        calls = []

        def once():
            calls.append(1)
            task.stop()

        task = scheduler.every(0.1, once)
        task.start(now=0.0)
        scheduler.poll(0.2)
        scheduler.poll(0.4)

        assert calls == [1]
        assert not task.running

    def test_shutdown_cancels_everything(self):
        scheduler = Scheduler(ManualClock())
        calls = []
        task = scheduler.every(0.1, lambda: calls.append(1))
        task.start(now=0.0)

        scheduler.shutdown()

        assert scheduler.poll(1.0) == 0
        assert scheduler.tasks == ()
        assert task.cancelled
        with pytest.raises(RuntimeError):
            task.start()
        with pytest.raises(RuntimeError):
            scheduler.every(0.1, lambda: None)

    def test_time_until_next(self):
        scheduler = Scheduler(ManualClock())
        assert scheduler.time_until_next(0.0) is None
        scheduler.every(0.25, lambda: None).start(now=0.0)
        assert scheduler.time_until_next(0.1) == pytest.approx(0.15)
