"""Playback domain - transport state machine and external players.

This domain handles:
- The transport state machine (stopped, playing, paused)
- Play modes applied at end of track
- The local progress clock and the browse cursor
- External player processes (mpv, ffplay, vlc)
"""

from .backend import BackendExited, PlayerBackend
from .clock import ProgressClock, format_time
from .cursor import SelectionCursor, clamp_selection, move_selection, page_window_start
from .modes import PlayMode, TransportState, step_volume
from .player import SubprocessBackend, has_desktop_environment, send_mpv_command
from .transport import Command, TransportController
from .view import DisplaySink, PlayerView

__all__ = [
    # Backend contract
    "BackendExited",
    "PlayerBackend",
    # Clock
    "ProgressClock",
    "format_time",
    # Cursor
    "SelectionCursor",
    "clamp_selection",
    "move_selection",
    "page_window_start",
    # Modes
    "PlayMode",
    "TransportState",
    "step_volume",
    # Player processes
    "SubprocessBackend",
    "has_desktop_environment",
    "send_mpv_command",
    # Transport
    "Command",
    "TransportController",
    # View
    "DisplaySink",
    "PlayerView",
]
