"""ShiftClock — simulated night-shift time.

Simulated time starts at midnight (0 s) and advances by
``real_delta * 3600 / real_seconds_per_hour`` per tick.  With the default
1500 real seconds per hour one simulated minute lasts 25 real seconds and a
two-hour shift lasts 50 real minutes.

The clock only moves while running.  The shift controller starts it when a
shift becomes active and stops it on any ending; ticks delivered outside
that window are ignored.
"""

from __future__ import annotations

DEFAULT_SHIFT_DURATION = 7200.0   # simulated seconds (midnight -> 02:00)
DEFAULT_REAL_PER_HOUR = 1500.0    # real seconds per simulated hour


def format_clock(seconds: float) -> str:
    """12-hour label for *seconds* past midnight, e.g. ``12:05 AM``."""
    total_minutes = int(seconds // 60)
    hour = (total_minutes // 60) % 24
    minute = total_minutes % 60
    ampm = "AM" if hour < 12 else "PM"
    display_hour = 12 if hour == 0 else (hour - 12 if hour > 12 else hour)
    return f"{display_hour:02d}:{minute:02d} {ampm}"


class ShiftClock:
    """Accumulates simulated seconds from real-time deltas."""

    def __init__(
        self,
        duration: float = DEFAULT_SHIFT_DURATION,
        real_seconds_per_hour: float = DEFAULT_REAL_PER_HOUR,
    ) -> None:
        if duration <= 0:
            raise ValueError(f"shift duration must be positive, got {duration}")
        if real_seconds_per_hour <= 0:
            raise ValueError(
                f"real_seconds_per_hour must be positive, got {real_seconds_per_hour}"
            )
        self.duration = float(duration)
        self.real_seconds_per_hour = float(real_seconds_per_hour)
        self.elapsed: float = 0.0
        self.running: bool = False

    def start(self) -> None:
        self.elapsed = 0.0
        self.running = True

    def stop(self) -> None:
        self.running = False

    def advance(self, real_dt: float) -> float:
        """Advance by *real_dt* real seconds. Returns simulated elapsed time."""
        if self.running and real_dt > 0:
            self.elapsed += real_dt * 3600.0 / self.real_seconds_per_hour
        return self.elapsed

    @property
    def progress(self) -> float:
        """Fraction of the shift elapsed (may exceed 1.0 on the final tick)."""
        return self.elapsed / self.duration

    @property
    def expired(self) -> bool:
        return self.elapsed >= self.duration

    @property
    def label(self) -> str:
        return format_clock(self.elapsed)
