"""Main event loop and display sink for the blessed UI."""

import queue
from typing import Optional

from blessed import Terminal
from loguru import logger

from termplayer.core.config import UIConfig
from termplayer.domain.playback.backend import BackendExited
from termplayer.domain.playback.transport import Command, TransportController
from termplayer.domain.playback.view import PlayerView

from .components import (
    calculate_layout,
    render_info_panel,
    render_legend,
    render_playlist,
    render_progress_gauge,
    render_volume_gauge,
)
from .events.keyboard import parse_key
from .helpers import TerminalSession, write_at


def build_frame(term: Terminal, view: PlayerView, width: int, height: int) -> list[str]:
    """
    Pure function: compose every screen row for one view.

    Args:
        term: blessed Terminal instance (for formatting only)
        view: Snapshot pushed by the transport
        width: Screen width
        height: Screen height

    Returns:
        One formatted string per screen row
    """
    layout = calculate_layout(width, height)

    left = (
        render_info_panel(term, view, layout["left_width"], layout["info_height"])
        + render_progress_gauge(term, view, layout["left_width"])
        + render_volume_gauge(term, view, layout["left_width"])
    )
    right = render_playlist(term, view, layout["right_width"], layout["playlist_height"])

    rows = [l_row + r_row for l_row, r_row in zip(left, right)]
    rows.extend(render_legend(term, view, layout["width"]))
    return rows


class BlessedDisplay:
    """DisplaySink that redraws the whole screen from each pushed view."""

    def __init__(self, term: Terminal):
        self.term = term
        self.last_view: Optional[PlayerView] = None
        self._needs_clear = True

    def invalidate(self) -> None:
        """Clear the screen before the next frame (after a resize)."""
        self._needs_clear = True

    def render(self, view: PlayerView) -> None:
        self.last_view = view
        term = self.term
        if self._needs_clear:
            term.stream.write(term.home + term.clear)
            self._needs_clear = False

        for y, row in enumerate(build_frame(term, view, term.width, term.height)):
            write_at(term, 0, y, row)
        term.stream.flush()


def process_pending_events(
    controller: TransportController, events: "queue.Queue[BackendExited]"
) -> int:
    """Apply every queued backend exit on the calling (event loop) thread."""
    handled = 0
    while True:
        try:
            event = events.get_nowait()
        except queue.Empty:
            return handled
        controller.handle_backend_exit(event)
        handled += 1


def main_loop(
    term: Terminal,
    display: BlessedDisplay,
    controller: TransportController,
    events: "queue.Queue[BackendExited]",
    ui_config: UIConfig,
) -> None:
    """
    Serial event loop: backend exits, clock ticks, resizes, then one key.

    Every transition runs to completion before the next event is looked at.
    The player is always shut down on the way out.
    """
    last_size = (term.width, term.height)
    should_quit = False

    try:
        while not should_quit:
            process_pending_events(controller, events)
            controller.poll()

            size = (term.width, term.height)
            if size != last_size:
                last_size = size
                display.invalidate()
                controller.dispatch(Command.RESIZE)

            key = term.inkey(timeout=ui_config.frame_timeout)
            if not key:
                continue

            command = parse_key(key)
            if command is Command.QUIT:
                should_quit = True
            elif command is not None:
                controller.dispatch(command)
    except KeyboardInterrupt:
        logger.info("Ctrl+C detected - cleaning up")
    finally:
        controller.shutdown()


def run_interactive_ui(
    controller: TransportController,
    events: "queue.Queue[BackendExited]",
    ui_config: UIConfig,
    term: Optional[Terminal] = None,
) -> None:
    """
    Run the interactive UI until the user quits.

    Raises:
        TerminalError: If the terminal cannot be initialised
    """
    with TerminalSession(term) as term:
        display = BlessedDisplay(term)
        controller.sink = display
        controller.publish()
        try:
            main_loop(term, display, controller, events, ui_config)
        finally:
            controller.sink = None
