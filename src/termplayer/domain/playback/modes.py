"""Repeat policies applied when a track reaches its end."""

from enum import Enum

from termplayer.core.config import VOLUME_GRID


class PlayMode(Enum):
    """Cyclic play modes, in toggle order."""

    LOOP_ALL = "Loop All"
    LOOP_ONE = "Loop One"
    NO_LOOP = "No Loop"
    RANDOM = "Random"

    @property
    def label(self) -> str:
        return self.value

    def next(self) -> "PlayMode":
        """Return the mode after this one, wrapping from RANDOM back to LOOP_ALL."""
        modes = list(PlayMode)
        return modes[(modes.index(self) + 1) % len(modes)]


class TransportState(Enum):
    STOPPED = "Stopped"
    PLAYING = "Playing"
    PAUSED = "Paused"

    @property
    def label(self) -> str:
        return self.value


def step_volume(volume: int, delta: int) -> int:
    """Move volume by delta, snapped to the nearest multiple of 5 and clamped to 0-100."""
    snapped = int(round((volume + delta) / VOLUME_GRID)) * VOLUME_GRID
    return max(0, min(100, snapped))
