"""Tests for poll_until."""

from sysvctl.daemon.polling import poll_until

from .conftest import VirtualClock


class TestPollUntil:
    """Tests for the fixed-count polling loop."""

    def test_immediate_success_never_sleeps(self):
        clock = VirtualClock()
        assert poll_until(lambda: True, attempts=30, interval=1.0, clock=clock)
        assert clock.sleeps == []

    def test_timeout_sleeps_after_every_check(self):
        clock = VirtualClock()
        checks = []

        def predicate():
            checks.append(1)
            return False

        assert not poll_until(predicate, attempts=10, interval=1.0, clock=clock)
        assert len(checks) == 10
        assert clock.sleeps == [1.0] * 10
        assert clock.elapsed == 10.0

    def test_success_on_later_attempt(self):
        clock = VirtualClock()
        results = iter([False, False, True])

        assert poll_until(lambda: next(results), attempts=5, interval=0.5, clock=clock)
        assert clock.sleeps == [0.5, 0.5]

    def test_on_wait_runs_before_each_sleep(self):
        clock = VirtualClock()
        ticks = []

        poll_until(lambda: False, attempts=3, interval=1.0, clock=clock, on_wait=lambda: ticks.append(len(clock.sleeps)))
        assert ticks == [0, 1, 2]

    def test_zero_attempts_times_out(self):
        clock = VirtualClock()
        assert not poll_until(lambda: True, attempts=0, interval=1.0, clock=clock)
