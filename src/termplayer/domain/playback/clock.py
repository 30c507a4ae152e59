"""
Progress clock for the playing item.

Position is estimated locally, one second per tick, independent of the
external player's real clock. The drift this allows is accepted: the value
only drives the progress display and tick-based end-of-track detection.
"""

from typing import Optional


def format_time(seconds: float) -> str:
    """Format time in seconds to MM:SS format."""
    if seconds < 0:
        return "00:00"

    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes:02d}:{secs:02d}"


class ProgressClock:
    """Position/duration bookkeeping plus the 1-second timer that drives it.

    The timer only runs while armed. The event loop calls due(now) every
    frame and fires one tick per whole interval elapsed, so a slow frame
    delays ticks but never drops them.
    """

    def __init__(self, interval: float = 1.0):
        self.interval = interval
        self.position = 0
        self.duration = 0
        self._deadline: Optional[float] = None

    @property
    def running(self) -> bool:
        return self._deadline is not None

    def reset(self, duration: int = 0) -> None:
        """Back to 0 with a new duration; the timer is disarmed."""
        self.position = 0
        self.duration = max(0, duration)
        self._deadline = None

    def arm(self, now: float) -> None:
        """Start (or resume) the timer; the first tick is one interval away."""
        self._deadline = now + self.interval

    def freeze(self) -> None:
        self._deadline = None

    def due(self, now: float) -> int:
        """Number of ticks that have come due since the last call."""
        if self._deadline is None or now < self._deadline:
            return 0
        ticks = int((now - self._deadline) // self.interval) + 1
        self._deadline += ticks * self.interval
        return ticks

    def advance(self) -> bool:
        """Add one second. Returns True when a known duration has been reached."""
        self.position += 1
        return self.finished

    @property
    def finished(self) -> bool:
        # Duration 0 is unknown; such items never finish by the clock
        return self.duration > 0 and self.position >= self.duration

    def seek_by(self, delta: int) -> int:
        """Move by delta seconds, clamped to [0, duration] (unbounded if unknown)."""
        position = max(0, self.position + delta)
        if self.duration > 0:
            position = min(position, self.duration)
        self.position = position
        return position

    @property
    def display_position(self) -> int:
        if self.duration > 0:
            return min(self.position, self.duration)
        return self.position

    @property
    def percent(self) -> int:
        if self.duration <= 0:
            return 0
        return int(self.display_position / self.duration * 100)

    @property
    def label(self) -> str:
        return f"{format_time(self.display_position)} / {format_time(self.duration)}"
