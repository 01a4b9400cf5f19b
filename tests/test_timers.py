"""
Tests for tick-counted delay timers.
"""

from gauntlet.orb_core.timers import DelayTimer


class Counter:
    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1


class TestDelayTimer:
    """Test one-shot tick countdowns."""

    def test_fires_after_n_ticks(self):
        """The callback runs on the Nth tick and only then."""
        counter = Counter()
        timer = DelayTimer()
        timer.start(3, counter)
        assert not timer.tick()
        assert not timer.tick()
        assert timer.tick()
        assert counter.calls == 1
        assert not timer.active

    def test_fires_once(self):
        """Further ticks after firing do nothing."""
        counter = Counter()
        timer = DelayTimer()
        timer.start(1, counter)
        for _ in range(5):
            timer.tick()
        assert counter.calls == 1

    def test_cancel(self):
        """A cancelled timer never fires."""
        counter = Counter()
        timer = DelayTimer()
        timer.start(2, counter)
        timer.tick()
        timer.cancel()
        for _ in range(5):
            assert not timer.tick()
        assert counter.calls == 0

    def test_restart_replaces_callback(self):
        """Starting again drops the old callback."""
        first, second = Counter(), Counter()
        timer = DelayTimer()
        timer.start(2, first)
        timer.start(2, second)
        timer.tick()
        timer.tick()
        assert first.calls == 0
        assert second.calls == 1

    def test_zero_delay_fires_on_next_tick(self):
        """A zero delay still waits for the next tick."""
        counter = Counter()
        timer = DelayTimer()
        timer.start(0, counter)
        assert counter.calls == 0
        assert timer.tick()
        assert counter.calls == 1
