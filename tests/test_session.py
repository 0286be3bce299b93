"""Tests for the two-panel comparison session."""

import random

import pytest

from algorithms.step import Step
from arrays import Distribution
from engine import ComparisonSession
from errors import ConfigOutOfRange


def run_until_both_complete(session, clock, step=0.01, limit=20000):
    for _ in range(limit):
        if session.left.is_complete and session.right.is_complete:
            return
        clock.advance(step)
        session.tick()
    raise AssertionError("panels never completed")


class TestDefaults:
    def test_default_configuration(self, seeded_session):
        s = seeded_session
        assert s.left.info.label == "Bubble Sort"
        assert s.right.info.label == "Quick Sort"
        assert s.state.element_count == 30
        assert s.state.distribution is Distribution.RANDOM
        assert s.state.speed == 5
        assert s.state.sound_enabled is True
        assert not s.state.is_running

    def test_both_panels_share_one_array(self, seeded_session):
        s = seeded_session
        assert sorted(s.state.initial_array) == list(range(1, 31))
        assert s.left.source == s.right.source == s.state.initial_array

    def test_same_seed_same_array(self, clock):
        a = ComparisonSession(rng=random.Random(5), clock=clock)
        b = ComparisonSession(rng=random.Random(5), clock=clock)
        assert a.state.initial_array == b.state.initial_array

    def test_config_overrides(self, clock):
        s = ComparisonSession(
            config={"DEFAULT_ELEMENTS": 12, "DEFAULT_SPEED": 9, "DEFAULT_RIGHT_ALGORITHM": "heap"},
            clock=clock,
        )
        assert s.state.element_count == 12
        assert s.state.speed == 9
        assert s.right.info.label == "Heap Sort"


class TestTransport:
    def test_start_runs_both_panels(self, seeded_session):
        s = seeded_session
        s.start()
        assert s.state.is_running and not s.state.is_paused
        assert s.left.is_running and s.right.is_running
        assert s.run_id == 1

    def test_first_tick_advances_each_panel_once(self, seeded_session):
        s = seeded_session
        s.start()
        s.tick()
        assert s.left.steps_applied == 1
        assert s.right.steps_applied == 1

    def test_ticks_pace_by_speed(self, seeded_session, clock):
        s = seeded_session
        s.set_speed(5)
        s.start()
        s.tick()
        clock.advance(0.1)
        s.tick()
        assert s.left.steps_applied == 1
        clock.advance(0.16)
        s.tick()
        assert s.left.steps_applied == 2

    def test_pause_freezes_both(self, seeded_session, clock):
        s = seeded_session
        s.start()
        s.tick()
        s.pause()
        assert s.state.is_paused
        for _ in range(10):
            clock.advance(1.0)
            s.tick()
        assert s.left.steps_applied == 1
        assert s.right.steps_applied == 1

    def test_resume_continues(self, seeded_session, clock):
        s = seeded_session
        s.start()
        s.tick()
        comparisons = s.left.run_state.comparisons
        s.pause()
        s.start()
        assert s.run_id == 1
        clock.advance(0.01)
        s.tick()
        assert s.left.steps_applied == 2
        assert s.left.run_state.comparisons >= comparisons

    def test_reset_clears_everything(self, seeded_session):
        s = seeded_session
        s.start()
        s.tick()
        s.reset()
        assert not s.state.is_running
        assert s.left.is_idle and s.right.is_idle
        assert not s.panels["left"].scheduler.is_scheduled
        assert s.left.run_state.array == s.state.initial_array

    def test_reset_is_idempotent(self, seeded_session):
        s = seeded_session
        s.start()
        s.tick()
        s.reset()
        first = s.snapshot()
        s.reset()
        second = s.snapshot()
        first.pop("run_id")
        second.pop("run_id")
        assert first == second


class TestAutoReset:
    def test_both_complete_then_reset_after_delay(self, seeded_session, clock):
        s = seeded_session
        s.set_speed(10)
        s.start()
        run_until_both_complete(s, clock)
        assert s.coordinator.armed
        assert s.snapshot()["auto_reset"]["armed"] is True

        clock.advance(2.9)
        s.tick()
        assert s.left.is_complete

        clock.advance(0.2)
        s.tick()
        assert s.left.is_idle and s.right.is_idle
        assert not s.state.is_running

    def test_reset_before_expiry_cancels_timer(self, seeded_session, clock):
        s = seeded_session
        s.set_speed(10)
        s.start()
        run_until_both_complete(s, clock)
        s.reset()
        assert not s.coordinator.armed

    def test_completed_panels_are_correct(self, seeded_session, clock):
        s = seeded_session
        s.set_speed(10)
        s.start()
        run_until_both_complete(s, clock)
        for c in (s.left, s.right):
            assert list(c.run_state.array) == sorted(s.state.initial_array)
            assert c.run_state.sorted_indices == tuple(range(30))


class TestConfiguration:
    @pytest.mark.parametrize("count,expected", [(5, 10), (10, 10), (75, 75), (200, 200), (500, 200)])
    def test_element_count_clamped(self, seeded_session, count, expected):
        assert seeded_session.set_element_count(count) == expected
        assert len(seeded_session.state.initial_array) == expected

    @pytest.mark.parametrize("speed,expected", [(0, 1), (1, 1), (7, 7), (10, 10), (42, 10), ("3", 3)])
    def test_speed_clamped(self, seeded_session, speed, expected):
        assert seeded_session.set_speed(speed) == expected

    @pytest.mark.parametrize("speed,expected", [
        (float("inf"), 10),
        ("inf", 10),
        ("1e999", 10),
        (float("-inf"), 1),
        ("-Infinity", 1),
    ])
    def test_infinite_speed_clamped(self, seeded_session, speed, expected):
        assert seeded_session.set_speed(speed) == expected

    def test_infinite_count_clamped(self, seeded_session):
        assert seeded_session.set_element_count(float("inf")) == 200

    @pytest.mark.parametrize("speed", ["fast", float("nan"), "nan", None])
    def test_non_numeric_speed_rejected(self, seeded_session, speed):
        with pytest.raises(ConfigOutOfRange):
            seeded_session.set_speed(speed)

    def test_speed_change_does_not_reset(self, seeded_session):
        s = seeded_session
        s.start()
        s.tick()
        s.set_speed(9)
        assert s.left.steps_applied == 1
        assert s.state.is_running

    def test_distribution_change_regenerates(self, seeded_session):
        s = seeded_session
        s.set_distribution("ascending")
        assert s.state.distribution is Distribution.ASCENDING
        assert list(s.state.initial_array) == list(range(1, 31))

    def test_unknown_distribution_rejected(self, seeded_session):
        with pytest.raises(ConfigOutOfRange):
            seeded_session.set_distribution("zigzag")

    def test_array_change_resets_both_and_clears_flags(self, seeded_session):
        s = seeded_session
        s.start()
        s.tick()
        before = s.run_id
        s.regenerate_array()
        assert not s.state.is_running and not s.state.is_paused
        assert s.left.is_idle and s.right.is_idle
        assert not any(p.scheduler.is_scheduled for p in s.panels.values())
        assert s.run_id > before
        assert s.left.source == s.state.initial_array

    def test_algorithm_switch_resets_only_that_panel(self, seeded_session):
        s = seeded_session
        s.start()
        s.tick()
        s.set_algorithm("right", "Merge Sort")
        assert s.right.info.label == "Merge Sort"
        assert s.right.is_idle
        assert s.left.steps_applied == 1
        assert s.left.is_running

    def test_start_picks_up_switched_panel(self, seeded_session):
        s = seeded_session
        s.start()
        s.tick()
        s.set_algorithm("right", "heap")
        s.start()
        assert s.right.is_running
        assert s.left.steps_applied == 1

    def test_unknown_algorithm_or_panel_rejected(self, seeded_session):
        with pytest.raises(ConfigOutOfRange):
            seeded_session.set_algorithm("left", "bogo")
        with pytest.raises(ConfigOutOfRange):
            seeded_session.set_algorithm("middle", "heap")

    def test_load_custom_array(self, seeded_session):
        values = [9, 3, 7, 1, 5, 2, 8, 4, 6, 10, 11]
        seeded_session.load_array(values)
        assert seeded_session.state.initial_array == tuple(values)
        assert seeded_session.state.element_count == 11

    @pytest.mark.parametrize("bad", [[1, 2, 3], list(range(300)), "1,2,3", [1] * 9 + [float("nan")], [1] * 9 + ["x"]])
    def test_bad_custom_array_rejected(self, seeded_session, bad):
        with pytest.raises(ConfigOutOfRange):
            seeded_session.load_array(bad)


class TestSound:
    def test_tones_drained_after_tick(self, seeded_session):
        s = seeded_session
        s.start()
        s.tick()
        tones = s.drain_tones()
        assert len(tones["left"]) == 2
        assert tones["left"][0]["cue"] == "comparison"
        assert s.drain_tones() == {"left": [], "right": []}

    def test_sound_off_queues_nothing(self, seeded_session):
        s = seeded_session
        assert s.toggle_sound() is False
        s.start()
        s.tick()
        assert s.drain_tones() == {"left": [], "right": []}


class TestFaultIsolation:
    def test_fault_in_one_panel_leaves_other_running(self, seeded_session, clock):
        def broken():
            yield Step(step_number=0, array=(1, 2), comparing_indices=(0, 1), comparisons=1)
            raise RuntimeError("right panel broke")

        s = seeded_session
        s.start()
        s.panels["right"].controller._producer = broken()
        s.tick()
        clock.advance(1.0)
        snap = s.tick()
        assert "right panel broke" in snap["right"]["error"]
        assert snap["right"]["state"] == "idle"
        assert snap["left"]["error"] is None
        assert s.left.is_running
        assert s.left.steps_applied == 2

    def test_start_retries_faulted_panel(self, seeded_session, clock):
        def broken():
            raise RuntimeError("boom")
            yield

        s = seeded_session
        s.start()
        s.panels["right"].controller._producer = broken()
        s.tick()
        assert s.right.error
        s.start()
        assert s.right.is_running
        assert s.right.error is None


class TestViews:
    def test_snapshot_shape(self, seeded_session):
        snap = seeded_session.snapshot()
        assert set(snap) == {"run_id", "global", "left", "right", "auto_reset"}
        assert snap["global"]["distribution"] == "random"
        assert snap["left"]["algorithm_name"] == "Bubble Sort"

    def test_live_comparison(self, seeded_session, clock):
        s = seeded_session
        s.set_speed(10)
        s.start()
        run_until_both_complete(s, clock)
        result = s.comparison()
        assert result.left.algo_label == "Bubble Sort"
        assert result.right.algo_label == "Quick Sort"
        assert result.left.sorted_ok and result.right.sorted_ok
        assert result.winner_comparisons in ("Bubble Sort", "Quick Sort", "tie")

    def test_forecast_runs_headlessly(self, seeded_session):
        result = seeded_session.forecast()
        assert result.left.sorted_ok and result.right.sorted_ok
        assert result.left.element_count == 30
        assert seeded_session.left.is_idle
