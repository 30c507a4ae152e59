"""Tests for the subprocess player backend."""

import queue
import subprocess
import threading
from pathlib import Path

import pytest

from conftest import make_item

from termplayer.core.config import PlayerConfig
from termplayer.domain.playback import player
from termplayer.domain.playback.backend import BackendExited
from termplayer.domain.playback.player import (
    SubprocessBackend,
    audio_launch_specs,
    has_desktop_environment,
    send_mpv_command,
    video_launch_specs,
)
from termplayer.errors import BackendStartError


class FakeProcess:
    """Popen stand-in whose exit is controlled by the test."""

    def __init__(self, pid: int, ignore_terminate: bool = False):
        self.pid = pid
        self.ignore_terminate = ignore_terminate
        self.returncode = None
        self.terminated = False
        self.killed = False
        self._exited = threading.Event()

    def exit(self, returncode: int) -> None:
        self.returncode = returncode
        self._exited.set()

    def poll(self):
        return self.returncode

    def wait(self, timeout=None):
        if not self._exited.wait(timeout):
            raise subprocess.TimeoutExpired("fake", timeout)
        return self.returncode

    def terminate(self):
        self.terminated = True
        if not self.ignore_terminate:
            self.exit(-15)

    def kill(self):
        self.killed = True
        self.exit(-9)


class FakePopen:
    """Records launches; commands named in missing raise FileNotFoundError."""

    def __init__(self, missing=(), ignore_terminate: bool = False):
        self.missing = set(missing)
        self.ignore_terminate = ignore_terminate
        self.launches: list[tuple[list[str], object]] = []
        self.processes: list[FakeProcess] = []

    def __call__(self, argv, env=None, **kwargs):
        self.launches.append((argv, env))
        if argv[0] in self.missing:
            raise FileNotFoundError(2, "No such file or directory", argv[0])
        process = FakeProcess(1000 + len(self.processes), self.ignore_terminate)
        self.processes.append(process)
        return process

    @property
    def programs(self) -> list[str]:
        return [argv[0] for argv, _ in self.launches]


@pytest.fixture(autouse=True)
def fixed_duration(monkeypatch):
    monkeypatch.setattr(player, "read_duration", lambda path: 180)


@pytest.fixture
def events():
    return queue.Queue()


def make_backend(tmp_path, events, popen, environ=None, platform="linux", **config):
    player_config = PlayerConfig(mpv_socket_path=str(tmp_path / "mpv.sock"), **config)
    return SubprocessBackend(
        player_config,
        events,
        environ=environ if environ is not None else {},
        platform=platform,
        popen=popen,
    )


class TestDesktopDetection:
    def test_display_variables(self):
        assert has_desktop_environment({"DISPLAY": ":1"}, "linux")
        assert has_desktop_environment({"WAYLAND_DISPLAY": "wayland-0"}, "linux")
        assert not has_desktop_environment({}, "linux")

    def test_windows_and_macos_always_have_desktop(self):
        assert has_desktop_environment({}, "win32")
        assert has_desktop_environment({}, "darwin")


class TestLaunchSpecs:
    def test_audio_prefers_mpv_with_ipc(self):
        specs = audio_launch_specs(Path("/m/a.mp3"), 80, "/tmp/s")
        assert [s.argv[0] for s in specs] == ["mpv", "ffplay"]
        assert specs[0].ipc
        assert "--input-ipc-server=/tmp/s" in specs[0].argv
        assert "--volume=80" in specs[0].argv
        assert specs[0].argv[-1] == "/m/a.mp3"

    def test_video_on_desktop(self):
        specs = video_launch_specs(Path("/m/v.mkv"), 100, "/tmp/s", desktop=True)
        assert [s.argv[0] for s in specs] == ["vlc", "ffplay"]

    def test_video_headless_forces_display(self):
        specs = video_launch_specs(Path("/m/v.mkv"), 100, "/tmp/s", desktop=False, environ={"HOME": "/root"})
        assert len(specs) == 1
        assert specs[0].argv[0] == "mpv"
        assert specs[0].env == {"HOME": "/root", "DISPLAY": ":0"}


class TestStart:
    def test_audio_starts_mpv_and_returns_duration(self, tmp_path, events):
        popen = FakePopen()
        backend = make_backend(tmp_path, events, popen)
        assert backend.start(make_item("a.mp3")) == 180
        assert popen.programs == ["mpv"]
        assert backend.active

    def test_falls_back_when_player_missing(self, tmp_path, events):
        popen = FakePopen(missing={"mpv"})
        backend = make_backend(tmp_path, events, popen)
        backend.start(make_item("a.mp3"))
        assert popen.programs == ["mpv", "ffplay"]

    def test_no_player_available(self, tmp_path, events):
        popen = FakePopen(missing={"mpv", "ffplay"})
        backend = make_backend(tmp_path, events, popen)
        with pytest.raises(BackendStartError):
            backend.start(make_item("a.mp3"))
        assert not backend.active

    def test_video_duration_unknown(self, tmp_path, events):
        popen = FakePopen()
        backend = make_backend(tmp_path, events, popen, environ={"DISPLAY": ":1"})
        assert backend.start(make_item("v.mkv", is_video=True)) == 0
        assert popen.programs == ["vlc"]

    def test_start_stops_previous_player(self, tmp_path, events):
        popen = FakePopen()
        backend = make_backend(tmp_path, events, popen)
        backend.start(make_item("a.mp3"))
        backend.start(make_item("b.mp3"))
        first, second = popen.processes
        assert first.terminated
        assert not second.terminated

    def test_volume_applies_to_next_launch(self, tmp_path, events):
        popen = FakePopen()
        backend = make_backend(tmp_path, events, popen)
        backend.set_volume(35)
        backend.start(make_item("a.mp3"))
        argv, _ = popen.launches[0]
        assert "--volume=35" in argv


class TestStop:
    def test_stop_terminates(self, tmp_path, events):
        popen = FakePopen()
        backend = make_backend(tmp_path, events, popen)
        backend.start(make_item("a.mp3"))
        backend.stop()
        process = popen.processes[0]
        assert process.terminated
        assert not process.killed
        assert not backend.active

    def test_stop_kills_unresponsive_player(self, tmp_path, events):
        popen = FakePopen(ignore_terminate=True)
        backend = make_backend(tmp_path, events, popen, stop_timeout=0.01)
        backend.start(make_item("a.mp3"))
        backend.stop()
        assert popen.processes[0].killed

    def test_stop_is_idempotent(self, tmp_path, events):
        backend = make_backend(tmp_path, events, FakePopen())
        backend.stop()
        backend.stop()
        assert not backend.active

    def test_stop_skips_exited_process(self, tmp_path, events):
        popen = FakePopen()
        backend = make_backend(tmp_path, events, popen)
        backend.start(make_item("a.mp3"))
        popen.processes[0].exit(0)
        backend.stop()
        assert not popen.processes[0].terminated


class TestExitWatcher:
    def test_natural_exit_is_posted(self, tmp_path, events):
        popen = FakePopen()
        backend = make_backend(tmp_path, events, popen)
        backend.start(make_item("a.mp3"))
        popen.processes[0].exit(0)
        event = events.get(timeout=2)
        assert event == BackendExited(1, 0)
        assert backend.is_current(1)

    def test_stopped_handle_is_not_current(self, tmp_path, events):
        popen = FakePopen()
        backend = make_backend(tmp_path, events, popen)
        backend.start(make_item("a.mp3"))
        backend.start(make_item("b.mp3"))
        event = events.get(timeout=2)
        assert event.handle_id == 1
        assert not backend.is_current(1)
        assert backend.is_current(2)


class TestIpcCommands:
    def test_commands_without_socket_fail_quietly(self):
        assert send_mpv_command(None, {"command": ["get_property", "pause"]}) is False
        assert send_mpv_command("/nonexistent/socket", {"command": []}) is False

    def test_controls_are_noops_for_ffplay(self, tmp_path, events, monkeypatch):
        sent = []
        monkeypatch.setattr(player, "send_mpv_command", lambda path, cmd: sent.append(cmd) or True)
        backend = make_backend(tmp_path, events, FakePopen(missing={"mpv"}))
        backend.start(make_item("a.mp3"))
        backend.seek(30)
        backend.pause(True)
        backend.set_volume(50)
        assert sent == []

    def test_controls_reach_mpv(self, tmp_path, events, monkeypatch):
        sent = []
        monkeypatch.setattr(player, "send_mpv_command", lambda path, cmd: sent.append(cmd) or True)
        backend = make_backend(tmp_path, events, FakePopen())
        backend.start(make_item("a.mp3"))
        backend.seek(30)
        backend.pause(True)
        backend.set_volume(50)
        assert sent == [
            {"command": ["seek", 30, "absolute"]},
            {"command": ["set_property", "pause", True]},
            {"command": ["set_property", "volume", 50]},
        ]
