"""Headless shift runner: a full night on virtual timers."""
from __future__ import annotations

import argparse

import pytest

import run_shift


def _args(**overrides):
    defaults = dict(
        seed=7,
        detect_chance=1.0,
        mistake_chance=0.0,
        reaction=20.0,
        max_anomalies=5,
        step=0.5,
    )
    defaults.update(overrides)
    return argparse.Namespace(**defaults)


@pytest.mark.unit
class TestRunShift:
    def test_attentive_operator_survives(self):
        report = run_shift.run(_args())
        assert report["won"] is True
        assert report["final_clock"] == "02:00 AM"
        assert report["penalties"] == 0
        # An anomaly spawned in the last reaction window may still be open
        assert report["total_resolved"] >= report["total_triggered"] - 1
        assert report["operator_reports"] == report["total_resolved"]
        assert report["operator_wrong"] == 0

    def test_absent_operator_loses(self):
        report = run_shift.run(_args(detect_chance=0.0))
        assert report["result"] == "loss"
        assert report["total_triggered"] == 5
        assert report["detection_rate"] == 0
        assert report["operator_reports"] == 0

    def test_same_seed_same_night(self):
        first = run_shift.run(_args(detect_chance=0.5, mistake_chance=0.5))
        second = run_shift.run(_args(detect_chance=0.5, mistake_chance=0.5))
        assert first == second

    def test_wrong_reports_counted(self):
        report = run_shift.run(_args(detect_chance=0.0, mistake_chance=1.0))
        assert report["operator_wrong"] > 0
        assert report["operator_wrong"] == report["penalties"]
