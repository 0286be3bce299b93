"""Tests for step pacing."""

import pytest

from engine import RunController, RunSettings, StepScheduler, step_delay
from errors import StepAdvanceError


def broken():
    raise RuntimeError("producer broke")
    yield


@pytest.fixture
def running(clock):
    c = RunController("bubble", [5, 4, 3, 2, 1], clock=clock)
    c.start()
    return c


class TestStepDelay:
    @pytest.mark.parametrize("speed,expected", [(1, 460), (5, 260), (10, 10)])
    def test_formula(self, speed, expected):
        assert step_delay(speed) == expected

    @pytest.mark.parametrize("speed,expected", [(0, 460), (-3, 460), (11, 10), (99, 10)])
    def test_speed_is_clamped(self, speed, expected):
        assert step_delay(speed) == expected

    def test_delay_shrinks_as_speed_grows(self):
        delays = [step_delay(s) for s in range(1, 11)]
        assert delays == sorted(delays, reverse=True)


class TestScheduling:
    def test_unscheduled_tick_does_nothing(self, running):
        s = StepScheduler()
        assert s.tick(0.0, running, RunSettings()) is False
        assert running.steps_applied == 0

    def test_first_tick_advances_immediately(self, running):
        s = StepScheduler()
        s.schedule()
        assert s.tick(0.0, running, RunSettings(speed=1)) is True
        assert running.steps_applied == 1

    def test_waits_for_delay(self, running):
        s = StepScheduler()
        s.schedule()
        settings = RunSettings(speed=5)
        s.tick(10.0, running, settings)
        assert s.tick(10.1, running, settings) is False
        assert s.tick(10.259, running, settings) is False
        assert s.tick(10.26, running, settings) is True
        assert running.steps_applied == 2

    def test_one_step_per_tick_even_after_long_gap(self, running):
        s = StepScheduler()
        s.schedule()
        settings = RunSettings(speed=10)
        s.tick(0.0, running, settings)
        s.tick(60.0, running, settings)
        assert running.steps_applied == 2

    def test_baseline_is_last_applied_step(self, running):
        s = StepScheduler()
        s.schedule()
        settings = RunSettings(speed=1)
        s.tick(0.0, running, settings)
        s.tick(0.3, running, settings)
        s.tick(0.46, running, settings)
        assert running.steps_applied == 2
        assert s.tick(0.8, running, settings) is False
        assert s.tick(0.92, running, settings) is True

    def test_speed_read_from_each_tick(self, running):
        s = StepScheduler()
        s.schedule()
        s.tick(0.0, running, RunSettings(speed=1))
        assert s.tick(0.01, running, RunSettings(speed=10)) is True


class TestCancellation:
    def test_cancel_voids_handle(self, running):
        s = StepScheduler()
        handle = s.schedule()
        s.cancel()
        assert handle.cancelled
        assert not s.is_scheduled
        assert s.tick(0.0, running, RunSettings()) is False

    def test_reschedule_issues_fresh_handle(self, running):
        s = StepScheduler()
        first = s.schedule()
        s.tick(0.0, running, RunSettings(speed=1))
        second = s.schedule()
        assert second.generation > first.generation
        assert first.cancelled
        # fresh loop: no baseline, so the next tick advances at once
        assert s.tick(0.01, running, RunSettings(speed=1)) is True

    def test_stops_when_controller_paused(self, running):
        s = StepScheduler()
        s.schedule()
        s.tick(0.0, running, RunSettings(speed=10))
        running.pause()
        assert s.tick(1.0, running, RunSettings(speed=10)) is False
        assert not s.is_scheduled
        running.start()
        assert s.tick(2.0, running, RunSettings(speed=10)) is False

    def test_stops_when_controller_completes(self, clock):
        c = RunController("insertion", [2, 1], clock=clock)
        c.start()
        s = StepScheduler()
        s.schedule()
        now = 0.0
        while s.is_scheduled:
            s.tick(now, c, RunSettings(speed=10))
            now += 0.01
        assert c.is_complete

    def test_fault_stops_loop_and_propagates(self, running):
        s = StepScheduler()
        s.schedule()
        running._producer = broken()
        with pytest.raises(StepAdvanceError):
            s.tick(0.0, running, RunSettings())
        assert not s.is_scheduled
        assert running.is_idle
