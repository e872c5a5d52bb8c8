#!/usr/bin/env python3
"""Fast-forward a full night shift headlessly and print the debrief.

Usage:
    .venv/bin/python3 run_shift.py [--seed N] [--detect-chance P] [--reaction S]

A scripted operator watches the event bus.  Each spawned anomaly is
spotted with probability ``--detect-chance`` and reported ``--reaction``
real seconds later; a missed anomaly may instead draw a wrong report with
probability ``--mistake-chance``.  Time runs on virtual timers, so a
50-minute shift finishes in well under a second.
"""

import argparse
import queue
import random
import sys
from pathlib import Path

# Ensure src/ is on path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from nightshift.comms.event_bus import EventBus
from nightshift.simulation.anomaly import AnomalyKind
from nightshift.simulation.shift import ShiftConfig, ShiftController
from nightshift.simulation.timers import ManualTimers


class ScriptedOperator:
    """Reacts to spawn events with delayed correct or wrong reports."""

    def __init__(self, controller, timers, rng, detect_chance, mistake_chance, reaction):
        self.controller = controller
        self.timers = timers
        self.rng = rng
        self.detect_chance = detect_chance
        self.mistake_chance = mistake_chance
        self.reaction = reaction
        self.reports = 0
        self.wrong = 0

    def on_spawn(self, data: dict) -> None:
        room, kind = data["room"], data["kind"]
        if self.rng.random() < self.detect_chance:
            self.timers.call_later(self.reaction, lambda: self._report(room, kind))
        elif self.rng.random() < self.mistake_chance:
            wrong_kind = self.rng.choice([k.value for k in AnomalyKind if k.value != kind])
            self.timers.call_later(self.reaction, lambda: self._report(room, wrong_kind))

    def _report(self, room: str, kind: str) -> None:
        if not self.controller.is_active:
            return
        self.reports += 1
        if not self.controller.report(room, kind):
            self.wrong += 1


def run(args: argparse.Namespace) -> dict:
    rng = random.Random(args.seed)
    bus = EventBus()
    events = bus.subscribe()
    timers = ManualTimers()
    config = ShiftConfig(max_anomalies=args.max_anomalies)
    controller = ShiftController(bus, timers, config=config, rng=rng)
    operator = ScriptedOperator(
        controller, timers, rng,
        detect_chance=args.detect_chance,
        mistake_chance=args.mistake_chance,
        reaction=args.reaction,
    )

    controller.start_shift()
    while controller.is_active:
        timers.advance(args.step)
        controller.tick(args.step)
        while True:
            try:
                event = events.get_nowait()
            except queue.Empty:
                break
            if event["type"] == "anomaly_spawned":
                data = event["data"]
                print(f"  [{controller.clock.label}] {data['kind']:<9} in {data['room']}"
                      f"  (undetected {data['undetected']})")
                operator.on_spawn(data)
            elif event["type"] == "report_rejected":
                data = event["data"]
                print(f"  [{controller.clock.label}] wrong report: {data['kind']} in {data['room']}")

    report = controller.last_report.to_dict()
    report["operator_reports"] = operator.reports
    report["operator_wrong"] = operator.wrong
    return report


def main() -> int:
    parser = argparse.ArgumentParser(description="Simulate one night shift")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--detect-chance", type=float, default=0.8)
    parser.add_argument("--mistake-chance", type=float, default=0.1)
    parser.add_argument("--reaction", type=float, default=20.0,
                        help="real seconds between spawn and report")
    parser.add_argument("--max-anomalies", type=int, default=5)
    parser.add_argument("--step", type=float, default=0.5,
                        help="real seconds per simulated tick")
    args = parser.parse_args()

    print(f"\n{'='*60}")
    print("  NIGHT SHIFT — midnight to 02:00 AM")
    print(f"{'='*60}")
    report = run(args)

    title = "SHIFT COMPLETE" if report["won"] else f"SHIFT ENDED ({report['result'].upper()})"
    print(f"\n  {title} at {report['final_clock']}")
    for row in report["rooms"]:
        print(f"    {row['name']:<12} triggered {row['triggered']:>2}  "
              f"resolved {row['resolved']:>2}  missed {row['missed']:>2}")
    print(f"\n  Total: {report['total_triggered']}  Resolved: {report['total_resolved']}  "
          f"Missed: {report['missed']}  Wrong reports: {report['penalties']}")
    print(f"  Operator reports: {report['operator_reports']} ({report['operator_wrong']} wrong)")
    print(f"  Detection rate: {report['detection_rate']}%")
    return 0 if report["won"] else 1


if __name__ == "__main__":
    sys.exit(main())
