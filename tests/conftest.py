"""Shared fixtures: in-memory catalogs, a fake player backend and a recording display."""

from pathlib import Path
from typing import Optional

import pytest

from termplayer.domain.library.models import Catalog, MediaItem, TrackMetadata
from termplayer.domain.playback.transport import TransportController
from termplayer.domain.playback.view import PlayerView
from termplayer.errors import BackendStartError


class FakeBackend:
    """PlayerBackend double that records calls and counts live handles."""

    def __init__(self, durations: Optional[dict[str, int]] = None):
        self.durations = durations or {}
        self.fail_paths: set[str] = set()
        self.calls: list[tuple] = []
        self.active_handles = 0
        self.max_active_handles = 0
        self.current_handle: Optional[int] = None
        self._next_handle = 1

    def start(self, item: MediaItem) -> int:
        self.calls.append(("start", item.path.name))
        if item.path.name in self.fail_paths:
            raise BackendStartError(f"no player for {item.path.name}")
        self.active_handles += 1
        self.max_active_handles = max(self.max_active_handles, self.active_handles)
        self.current_handle = self._next_handle
        self._next_handle += 1
        return self.durations.get(item.path.name, 0)

    def stop(self) -> None:
        self.calls.append(("stop",))
        if self.current_handle is not None:
            self.active_handles -= 1
            self.current_handle = None

    def seek(self, position: int) -> None:
        self.calls.append(("seek", position))

    def set_volume(self, percent: int) -> None:
        self.calls.append(("set_volume", percent))

    def pause(self, paused: bool) -> None:
        self.calls.append(("pause", paused))

    def is_current(self, handle_id: int) -> bool:
        return self.current_handle == handle_id

    def names(self, call: str) -> list:
        return [c[1] for c in self.calls if c[0] == call]


class RecordingSink:
    def __init__(self):
        self.views: list[PlayerView] = []

    def render(self, view: PlayerView) -> None:
        self.views.append(view)

    @property
    def last(self) -> PlayerView:
        return self.views[-1]


def make_item(name: str, title: Optional[str] = None, artist: Optional[str] = None,
              is_video: bool = False) -> MediaItem:
    metadata = TrackMetadata(title=title, artist=artist) if title or artist else None
    return MediaItem(
        path=Path("/media") / name,
        display_path=name,
        metadata=metadata,
        is_video=is_video,
    )


def make_catalog(*names: str) -> Catalog:
    return Catalog(items=tuple(make_item(n) for n in names), roots=(Path("/media"),))


class ManualClock:
    """Monotonic time source the tests advance by hand."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend({"a.mp3": 180, "b.mp3": 200, "c.mp3": 60})


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def manual_clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def controller(backend, sink, manual_clock) -> TransportController:
    return TransportController(
        make_catalog("a.mp3", "b.mp3", "c.mp3"),
        backend,
        sink,
        now=manual_clock,
    )
