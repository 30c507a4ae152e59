"""
Transport controller - the playback state machine.

Owns what is playing, where, at what volume and under which play mode.
All methods run on the event loop thread and complete before the next
event is handled; the only cross-thread input is BackendExited, which
arrives through the event queue.
"""

import random
import time
from enum import Enum, auto
from typing import Callable, Optional

from loguru import logger

from termplayer.core.config import VOLUME_GRID
from termplayer.domain.library.metadata import get_display_name, get_info_lines
from termplayer.domain.library.models import Catalog, MediaItem
from termplayer.errors import BackendStartError, EmptyCatalogError, ScanError

from .backend import BackendExited, PlayerBackend
from .clock import ProgressClock
from .cursor import SelectionCursor
from .modes import PlayMode, TransportState, step_volume
from .view import DisplaySink, PlayerView


class Command(Enum):
    """Logical commands; key bindings map onto these."""

    QUIT = auto()
    REFRESH = auto()
    PAUSE_RESUME = auto()
    SEEK_FORWARD = auto()
    SEEK_BACKWARD = auto()
    STOP = auto()
    SELECT = auto()
    CURSOR_UP = auto()
    CURSOR_DOWN = auto()
    VOLUME_UP = auto()
    VOLUME_DOWN = auto()
    PREVIOUS = auto()
    NEXT = auto()
    TOGGLE_PLAY_MODE = auto()
    RESIZE = auto()


class TransportController:
    """Playback state machine over a Catalog and a PlayerBackend.

    Args:
        catalog: Non-empty catalog to play from
        backend: Player process lifecycle
        sink: Display to push a PlayerView to after every transition
        volume: Initial volume percent
        volume_step: Percent per volume_up/volume_down
        seek_step: Seconds per seek_forward/seek_backward
        tick_interval: Seconds per progress clock tick
        rng: Random source for PlayMode.RANDOM
        scanner: Rebuilds the catalog on refresh()
        now: Monotonic time source
    """

    def __init__(
        self,
        catalog: Catalog,
        backend: PlayerBackend,
        sink: Optional[DisplaySink] = None,
        *,
        volume: int = 100,
        volume_step: int = 5,
        seek_step: int = 10,
        tick_interval: float = 1.0,
        rng: Optional[random.Random] = None,
        scanner: Optional[Callable[[], Catalog]] = None,
        now: Callable[[], float] = time.monotonic,
    ):
        if len(catalog) == 0:
            raise EmptyCatalogError("Cannot control playback of an empty catalog")

        self.catalog = catalog
        self.backend = backend
        self.sink = sink
        self.cursor = SelectionCursor(len(catalog))
        self.progress = ProgressClock(tick_interval)
        self.state = TransportState.STOPPED
        self.play_mode = PlayMode.LOOP_ALL
        self.playing_index: Optional[int] = None
        # Both land on the 5-percent grid whatever the caller passed
        self.volume = step_volume(volume, 0)
        self.volume_step = max(VOLUME_GRID, step_volume(0, volume_step))
        self.seek_step = seek_step
        self.message: Optional[str] = None

        self._rng = rng or random.Random()
        self._scanner = scanner
        self._now = now
        self._names = self._build_names(catalog)
        # Bumped whenever the bound track changes, so batched ticks stop
        # at a track boundary
        self._generation = 0

        self.backend.set_volume(self.volume)

    # -- read-only helpers -------------------------------------------------

    @property
    def position(self) -> int:
        return self.progress.position

    @property
    def duration(self) -> int:
        return self.progress.duration

    @property
    def playing_item(self) -> Optional[MediaItem]:
        if self.playing_index is None:
            return None
        return self.catalog[self.playing_index]

    @staticmethod
    def _build_names(catalog: Catalog) -> tuple[str, ...]:
        return tuple(get_display_name(item, i) for i, item in enumerate(catalog))

    def view(self) -> PlayerView:
        if self.state is TransportState.STOPPED:
            percent, label = 0, "Stopped"
        else:
            percent, label = self.progress.percent, self.progress.label

        return PlayerView(
            info_lines=tuple(get_info_lines(self.playing_item)),
            playlist=self._names,
            cursor=self.cursor.index,
            playing_index=self.playing_index,
            status=self.state.label,
            progress_percent=percent,
            progress_label=label,
            volume=self.volume,
            play_mode=self.play_mode.label,
            message=self.message,
        )

    def publish(self) -> None:
        if self.sink is not None:
            self.sink.render(self.view())

    # -- transport ---------------------------------------------------------

    def select(self, index: int) -> bool:
        """Stop whatever is playing and start catalog[index] from 0.

        Returns:
            True if the backend started, False if it failed (state STOPPED)
        """
        if not 0 <= index < len(self.catalog):
            raise IndexError(f"Catalog index {index} out of range 0-{len(self.catalog) - 1}")

        self.backend.stop()
        self._generation += 1
        self.playing_index = index
        self.cursor.set(index)
        self.progress.reset()
        self.message = None

        item = self.catalog[index]
        try:
            duration = self.backend.start(item)
        except BackendStartError as e:
            logger.error(f"Cannot play {item.path}: {e}")
            self.state = TransportState.STOPPED
            self.message = f"Cannot play {item.display_path}: {e}"
            self.publish()
            return False

        self.progress.reset(duration)
        self.progress.arm(self._now())
        self.state = TransportState.PLAYING
        logger.info(f"Playing [{index}] {item.path} ({duration}s, mode={self.play_mode.label})")
        self.publish()
        return True

    def pause(self) -> bool:
        if self.state is not TransportState.PLAYING:
            return False
        self.backend.pause(True)
        self.progress.freeze()
        self.state = TransportState.PAUSED
        self.publish()
        return True

    def resume(self) -> bool:
        if self.state is not TransportState.PAUSED:
            return False
        # The process was never stopped; resuming only restarts the clock
        self.backend.pause(False)
        self.progress.arm(self._now())
        self.state = TransportState.PLAYING
        self.publish()
        return True

    def toggle_pause(self) -> bool:
        if self.state is TransportState.PLAYING:
            return self.pause()
        if self.state is TransportState.PAUSED:
            return self.resume()
        return False

    def stop(self) -> bool:
        if self.state is TransportState.STOPPED:
            return False
        self.backend.stop()
        self._generation += 1
        self.progress.reset()
        self.state = TransportState.STOPPED
        logger.info("Playback stopped")
        self.publish()
        return True

    def seek(self, delta: int) -> bool:
        if self.playing_index is None:
            return False
        position = self.progress.seek_by(delta)
        self.backend.seek(position)
        self.publish()
        return True

    def seek_forward(self) -> bool:
        return self.seek(self.seek_step)

    def seek_backward(self) -> bool:
        return self.seek(-self.seek_step)

    def tick(self) -> None:
        """One second of playback elapsed."""
        if self.state is not TransportState.PLAYING:
            return
        if self.progress.advance():
            self.end_of_track()
        else:
            self.publish()

    def poll(self, now: Optional[float] = None) -> int:
        """Fire every tick that has come due. Returns the number fired."""
        now = self._now() if now is None else now
        fired = 0
        generation = self._generation
        for _ in range(self.progress.due(now)):
            if self.state is not TransportState.PLAYING or self._generation != generation:
                break
            self.tick()
            fired += 1
        return fired

    def end_of_track(self) -> None:
        """Apply the play mode after the bound track finished."""
        if self.playing_index is None:
            return

        count = len(self.catalog)
        current = self.playing_index
        logger.debug(f"End of track [{current}] under {self.play_mode.label}")

        if self.play_mode is PlayMode.LOOP_ALL:
            self.select((current + 1) % count)
        elif self.play_mode is PlayMode.LOOP_ONE:
            self.select(current)
        elif self.play_mode is PlayMode.NO_LOOP:
            if current + 1 >= count:
                self.stop()
            else:
                self.select(current + 1)
        else:
            self.select(self._random_index(current, count))

    def _random_index(self, current: int, count: int) -> int:
        """Uniform over every index except the one that just finished."""
        if count <= 1:
            return 0
        choice = self._rng.randrange(count - 1)
        return choice + 1 if choice >= current else choice

    def handle_backend_exit(self, event: BackendExited) -> None:
        """React to a player process that exited without being stopped."""
        if not self.backend.is_current(event.handle_id):
            logger.debug(f"Ignoring exit of stale player handle {event.handle_id}")
            return
        if self.state is TransportState.STOPPED:
            return

        if event.returncode not in (0, None):
            item = self.playing_item
            name = item.display_path if item else "player"
            logger.warning(f"Player exited with code {event.returncode} while playing {name}")
            self.message = f"Player exited with code {event.returncode}"
            self.stop()
            return

        if self.progress.duration == 0:
            # No clock-based end for externally timed items: the exit is the end
            self.end_of_track()

    # -- volume / mode -----------------------------------------------------

    def volume_up(self) -> int:
        return self._set_volume(step_volume(self.volume, self.volume_step))

    def volume_down(self) -> int:
        return self._set_volume(step_volume(self.volume, -self.volume_step))

    def _set_volume(self, volume: int) -> int:
        self.volume = volume
        self.backend.set_volume(volume)
        self.publish()
        return volume

    def toggle_play_mode(self) -> PlayMode:
        self.play_mode = self.play_mode.next()
        logger.info(f"Play mode: {self.play_mode.label}")
        self.publish()
        return self.play_mode

    # -- browsing ----------------------------------------------------------

    def cursor_up(self) -> int:
        index = self.cursor.move_up()
        self.publish()
        return index

    def cursor_down(self) -> int:
        index = self.cursor.move_down()
        self.publish()
        return index

    def play_selected(self) -> bool:
        return self.select(self.cursor.index)

    def previous(self) -> bool:
        """Play the item before the playing one (the cursor if nothing has played yet)."""
        base = self.cursor.index if self.playing_index is None else self.playing_index
        if base <= 0:
            return False
        return self.select(base - 1)

    def next(self) -> bool:
        """Play the item after the playing one (the cursor if nothing has played yet)."""
        base = self.cursor.index if self.playing_index is None else self.playing_index
        if base >= len(self.catalog) - 1:
            return False
        return self.select(base + 1)

    def refresh(self) -> bool:
        """Rescan the catalog; on failure keep the current one."""
        if self._scanner is None:
            return False

        try:
            catalog = self._scanner()
        except (ScanError, EmptyCatalogError) as e:
            logger.error(f"Refresh failed, keeping previous catalog: {e}")
            self.message = f"Refresh failed: {e}"
            self.publish()
            return False

        playing = self.playing_item
        browsing = self.catalog[self.cursor.index]

        self.catalog = catalog
        self._names = self._build_names(catalog)

        if playing is not None:
            self.playing_index = catalog.index_of(playing.path)
            if self.playing_index is None:
                logger.info(f"{playing.path} disappeared on refresh, stopping")
                self.backend.stop()
                self._generation += 1
                self.progress.reset()
                self.state = TransportState.STOPPED

        cursor = catalog.index_of(browsing.path)
        self.cursor.resize(len(catalog), 0 if cursor is None else cursor)

        self.message = f"Found {len(catalog)} media files"
        logger.info(f"Catalog refreshed: {len(catalog)} items")
        self.publish()
        return True

    def dispatch(self, command: Command) -> None:
        """Run the transition bound to a logical command."""
        handlers: dict[Command, Callable[[], object]] = {
            Command.REFRESH: self.refresh,
            Command.PAUSE_RESUME: self.toggle_pause,
            Command.SEEK_FORWARD: self.seek_forward,
            Command.SEEK_BACKWARD: self.seek_backward,
            Command.STOP: self.stop,
            Command.SELECT: self.play_selected,
            Command.CURSOR_UP: self.cursor_up,
            Command.CURSOR_DOWN: self.cursor_down,
            Command.VOLUME_UP: self.volume_up,
            Command.VOLUME_DOWN: self.volume_down,
            Command.PREVIOUS: self.previous,
            Command.NEXT: self.next,
            Command.TOGGLE_PLAY_MODE: self.toggle_play_mode,
            Command.RESIZE: self.publish,
            Command.QUIT: self.shutdown,
        }
        handlers[command]()

    def shutdown(self) -> None:
        """Terminate the player before the application exits."""
        self.backend.stop()
        self._generation += 1
        self.progress.reset()
        self.state = TransportState.STOPPED
        logger.info("Transport shut down")
