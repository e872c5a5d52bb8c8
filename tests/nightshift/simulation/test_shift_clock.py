"""Unit tests for ShiftClock and the 12-hour label."""

from __future__ import annotations

import pytest

from nightshift.simulation.clock import ShiftClock, format_clock


pytestmark = pytest.mark.unit


class TestFormatClock:
    @pytest.mark.parametrize("seconds,label", [
        (0, "12:00 AM"),
        (59, "12:00 AM"),
        (60, "12:01 AM"),
        (3600, "01:00 AM"),
        (7200, "02:00 AM"),
        (12 * 3600, "12:00 PM"),
        (13 * 3600 + 5 * 60, "01:05 PM"),
        (24 * 3600, "12:00 AM"),
    ])
    def test_labels(self, seconds, label):
        assert format_clock(seconds) == label


class TestShiftClock:
    def test_scale(self):
        clock = ShiftClock(7200, real_seconds_per_hour=1500)
        clock.start()
        clock.advance(25.0)  # 25 real seconds = 1 simulated minute
        assert clock.elapsed == pytest.approx(60.0)
        clock.advance(1.0)
        assert clock.label == "12:01 AM"

    def test_ignores_ticks_when_stopped(self):
        clock = ShiftClock()
        clock.advance(100.0)
        assert clock.elapsed == 0.0
        clock.start()
        clock.advance(1.0)
        clock.stop()
        frozen = clock.elapsed
        clock.advance(100.0)
        assert clock.elapsed == frozen

    def test_never_goes_backwards(self):
        clock = ShiftClock()
        clock.start()
        clock.advance(10.0)
        before = clock.elapsed
        clock.advance(-5.0)
        assert clock.elapsed == before

    def test_start_resets(self):
        clock = ShiftClock()
        clock.start()
        clock.advance(100.0)
        clock.start()
        assert clock.elapsed == 0.0

    def test_expiry_and_progress(self):
        clock = ShiftClock(7200, real_seconds_per_hour=1500)
        clock.start()
        clock.advance(1500.0)
        assert clock.progress == pytest.approx(0.5)
        assert not clock.expired
        clock.advance(1500.5)
        assert clock.expired
        assert clock.label == "02:00 AM"

    def test_rejects_bad_config(self):
        with pytest.raises(ValueError):
            ShiftClock(duration=0)
        with pytest.raises(ValueError):
            ShiftClock(real_seconds_per_hour=0)
