"""Tests for the auto-reset timer."""

import pytest

from engine import CompletionCoordinator, RunController, RunSettings


def completed(clock, algorithm="bubble"):
    c = RunController(algorithm, [2, 1], clock=clock)
    c.start()
    while c.is_running:
        c.advance(RunSettings(sound_enabled=False))
    return c


@pytest.fixture
def fired():
    return []


@pytest.fixture
def coordinator(fired):
    return CompletionCoordinator(lambda: fired.append(True), delay=3.0)


class TestCompletionCoordinator:
    def test_idle_while_one_panel_running(self, clock, coordinator, fired):
        left = completed(clock)
        right = RunController("quick", [3, 2, 1], clock=clock)
        right.start()
        assert coordinator.tick(0.0, left, right, run_id=1) is False
        assert not coordinator.armed
        assert fired == []

    def test_arms_when_both_complete(self, clock, coordinator):
        left, right = completed(clock), completed(clock, "quick")
        coordinator.tick(10.0, left, right, run_id=1)
        assert coordinator.armed
        assert coordinator.deadline == pytest.approx(13.0)

    def test_fires_once_after_delay(self, clock, coordinator, fired):
        left, right = completed(clock), completed(clock, "quick")
        coordinator.tick(10.0, left, right, run_id=1)
        assert coordinator.tick(12.99, left, right, run_id=1) is False
        assert coordinator.tick(13.0, left, right, run_id=1) is True
        assert fired == [True]
        assert not coordinator.armed
        for t in (14.0, 20.0, 30.0):
            coordinator.tick(t, left, right, run_id=1)
        assert fired == [True]

    def test_new_run_supersedes_timer(self, clock, coordinator, fired):
        left, right = completed(clock), completed(clock, "quick")
        coordinator.tick(10.0, left, right, run_id=1)
        coordinator.tick(11.0, left, right, run_id=2)
        assert coordinator.deadline == pytest.approx(14.0)
        coordinator.tick(13.5, left, right, run_id=2)
        assert fired == []

    def test_panel_reset_cancels(self, clock, coordinator, fired):
        left, right = completed(clock), completed(clock, "quick")
        coordinator.tick(10.0, left, right, run_id=1)
        left.reset()
        coordinator.tick(11.0, left, right, run_id=1)
        assert not coordinator.armed
        coordinator.tick(20.0, left, right, run_id=1)
        assert fired == []

    def test_explicit_cancel(self, clock, coordinator, fired):
        left, right = completed(clock), completed(clock, "quick")
        coordinator.tick(10.0, left, right, run_id=1)
        coordinator.cancel()
        assert coordinator.deadline is None

    def test_custom_delay(self, clock, fired):
        coordinator = CompletionCoordinator(lambda: fired.append(True), delay=0.5)
        left, right = completed(clock), completed(clock, "quick")
        coordinator.tick(1.0, left, right, run_id=1)
        assert coordinator.tick(1.5, left, right, run_id=1) is True
