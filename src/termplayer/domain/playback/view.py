"""Render-state snapshots pushed from the transport to the display."""

from typing import NamedTuple, Optional, Protocol


class PlayerView(NamedTuple):
    """Everything the display needs for one frame. Built fresh per transition."""

    info_lines: tuple[str, ...]
    playlist: tuple[str, ...]
    cursor: int
    playing_index: Optional[int]
    status: str
    progress_percent: int
    progress_label: str
    volume: int
    play_mode: str
    message: Optional[str] = None


class DisplaySink(Protocol):
    def render(self, view: PlayerView) -> None:
        ...
