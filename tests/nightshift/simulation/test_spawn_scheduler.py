"""Unit tests for SpawnScheduler pacing and cancellation."""

from __future__ import annotations

import random

import pytest

from nightshift.simulation.scheduler import FIRST_SPAWN_DELAY, PACING_BANDS, spawn_delay
from nightshift.simulation.shift import ShiftConfig, ShiftController, ShiftState
from nightshift.simulation.timers import ManualTimers


pytestmark = pytest.mark.unit


def _controller(bus, room_factory, max_anomalies=5, rng=None):
    timers = ManualTimers()
    controller = ShiftController(
        bus,
        timers,
        config=ShiftConfig(max_anomalies=max_anomalies),
        catalogue_factory=lambda: {"a": room_factory("a"), "b": room_factory("b")},
        rng=rng or random.Random(3),
    )
    return controller, timers


# --------------------------------------------------------------------------
# Delay bands
# --------------------------------------------------------------------------

class TestSpawnDelay:
    @pytest.mark.parametrize("progress,low,high", [
        (0.0, 90.0, 120.0),
        (0.32, 90.0, 120.0),
        (0.33, 60.0, 80.0),
        (0.5, 60.0, 80.0),
        (0.67, 35.0, 55.0),
        (0.99, 35.0, 55.0),
        (1.2, 35.0, 55.0),
    ])
    def test_band_bounds(self, progress, low, high, scripted_random):
        assert spawn_delay(progress, scripted_random(randoms=[0.0])) == pytest.approx(low)
        near_top = spawn_delay(progress, scripted_random(randoms=[0.999999]))
        assert low <= near_top < high

    def test_uniform_sampling_stays_in_band(self):
        rng = random.Random(11)
        for _ in range(500):
            assert 60.0 <= spawn_delay(0.5, rng) <= 80.0

    def test_bands_tighten(self):
        mins = [low for _, low, _ in PACING_BANDS]
        assert mins == sorted(mins, reverse=True)


# --------------------------------------------------------------------------
# Scheduling
# --------------------------------------------------------------------------

class TestScheduling:
    def test_first_spawn_after_fixed_delay(self, bus, room_factory):
        controller, timers = _controller(bus, room_factory)
        controller.start_shift()
        assert controller.scheduler.next_delay == FIRST_SPAWN_DELAY

        timers.advance(FIRST_SPAWN_DELAY - 0.1)
        assert controller.session.total_triggered == 0
        timers.advance(0.1)
        assert controller.session.total_triggered == 1

    def test_next_spawn_uses_early_band(self, bus, room_factory):
        controller, timers = _controller(bus, room_factory)
        controller.start_shift()
        timers.advance(FIRST_SPAWN_DELAY)
        assert 90.0 <= controller.scheduler.next_delay <= 120.0
        assert controller.scheduler.pending

    def test_late_shift_uses_tense_band(self, bus, room_factory):
        controller, timers = _controller(bus, room_factory)
        controller.start_shift()
        controller.tick(2100.0)  # 70% of a 3000 s real-time shift
        assert controller.clock.progress == pytest.approx(0.7)
        timers.advance(FIRST_SPAWN_DELAY)
        assert 35.0 <= controller.scheduler.next_delay <= 55.0

    def test_loss_on_fifth_spawn_stops_scheduling(self, bus, room_factory):
        controller, timers = _controller(bus, room_factory, max_anomalies=5)
        over = bus.subscribe("shift_over")
        controller.start_shift()

        timers.advance(10_000.0)

        assert controller.state == ShiftState.COMPLETE
        assert controller.result == "loss"
        assert controller.session.total_triggered == 5
        assert controller.scheduler.spawn_count == 5
        assert not controller.scheduler.pending
        assert timers.pending == 0
        assert over.qsize() == 1

    def test_end_of_shift_cancels_pending_spawn(self, bus, room_factory):
        controller, timers = _controller(bus, room_factory)
        controller.start_shift()
        assert timers.pending == 1
        controller.abort()
        assert timers.pending == 0
        timers.advance(1000.0)
        assert controller.session.total_triggered == 0

    def test_stale_timer_is_ignored(self, bus, room_factory):
        """A timer that escapes cancellation must not spawn after the shift."""
        controller, timers = _controller(bus, room_factory)
        controller.start_shift()
        # Skip end_shift() so the timer is still armed
        controller.state = ShiftState.COMPLETE
        timers.advance(FIRST_SPAWN_DELAY)
        assert controller.session.total_triggered == 0
        assert timers.pending == 0

    def test_stale_timer_from_old_shift_does_not_touch_new_one(self, bus, room_factory):
        controller, timers = _controller(bus, room_factory)
        controller.start_shift()
        old_scheduler = controller.scheduler
        controller.abort()
        controller.reset()
        controller.start_shift()

        old_scheduler._fire()
        assert controller.session.total_triggered == 0
        assert old_scheduler.spawn_count == 0
