"""
External player processes for termplayer.

Audio is decoded by mpv (controlled over its JSON IPC socket) or ffplay.
Video is handed to a GUI player when a desktop is available, or to mpv on a
forced virtual display otherwise. Every launch is a non-blocking Popen; a
watcher thread reports the process exit back through a queue so the event
loop can react on its own thread.
"""

import json
import os
import queue
import socket
import subprocess
import sys
import tempfile
import threading
from pathlib import Path
from typing import Any, Callable, Mapping, NamedTuple, Optional

from loguru import logger

from termplayer.core.config import PlayerConfig
from termplayer.domain.library.metadata import read_duration
from termplayer.domain.library.models import MediaItem
from termplayer.errors import BackendStartError

from .backend import BackendExited


class LaunchSpec(NamedTuple):
    """One candidate command line for playing an item."""

    argv: list[str]
    env: Optional[dict[str, str]] = None
    ipc: bool = False  # argv includes --input-ipc-server


class PlayerProcess(NamedTuple):
    """The single owned player process."""

    handle_id: int
    process: subprocess.Popen
    argv: list[str]
    socket_path: Optional[str]


def has_desktop_environment(
    environ: Optional[Mapping[str, str]] = None, platform: Optional[str] = None
) -> bool:
    """Detect whether a GUI video player can open a window."""
    environ = os.environ if environ is None else environ
    platform = sys.platform if platform is None else platform

    if platform.startswith("win") or platform == "darwin":
        return True
    return bool(environ.get("DISPLAY") or environ.get("WAYLAND_DISPLAY"))


def default_socket_path(config: PlayerConfig) -> str:
    if config.mpv_socket_path:
        return config.mpv_socket_path
    return str(Path(tempfile.gettempdir()) / f"termplayer-mpv-{os.getpid()}")


def send_mpv_command(socket_path: Optional[str], command: dict[str, Any]) -> bool:
    """Send JSON IPC command to MPV."""
    if not socket_path or not os.path.exists(socket_path):
        return False

    try:
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        sock.settimeout(2.0)
        sock.connect(socket_path)

        command_json = json.dumps(command) + "\n"
        sock.send(command_json.encode("utf-8"))

        response = sock.recv(4096).decode("utf-8").strip()
        sock.close()

        if response:
            try:
                # mpv may interleave events; the reply is the line with "error"
                for line in response.splitlines():
                    response_data = json.loads(line)
                    if "error" in response_data:
                        return response_data.get("error") == "success"
            except json.JSONDecodeError:
                return False

        return True

    except (socket.error, OSError):
        return False


def audio_launch_specs(path: Path, volume: int, socket_path: str) -> list[LaunchSpec]:
    return [
        LaunchSpec(
            argv=[
                "mpv",
                "--no-video",
                "--no-terminal",
                f"--input-ipc-server={socket_path}",
                f"--volume={volume}",
                "--load-scripts=no",
                str(path),
            ],
            ipc=True,
        ),
        LaunchSpec(
            argv=[
                "ffplay",
                "-nodisp",
                "-autoexit",
                "-loglevel",
                "quiet",
                "-volume",
                str(volume),
                str(path),
            ]
        ),
    ]


def video_launch_specs(
    path: Path,
    volume: int,
    socket_path: str,
    desktop: bool,
    environ: Optional[Mapping[str, str]] = None,
) -> list[LaunchSpec]:
    if desktop:
        return [
            LaunchSpec(argv=["vlc", str(path)]),
            LaunchSpec(argv=["ffplay", str(path)]),
        ]

    # Headless console: force the first X display
    env = dict(os.environ if environ is None else environ)
    env["DISPLAY"] = ":0"
    return [
        LaunchSpec(
            argv=[
                "mpv",
                "--no-terminal",
                f"--input-ipc-server={socket_path}",
                f"--volume={volume}",
                str(path),
            ],
            env=env,
            ipc=True,
        )
    ]


class SubprocessBackend:
    """PlayerBackend that runs one external player process at a time."""

    def __init__(
        self,
        config: PlayerConfig,
        events: "queue.Queue[BackendExited]",
        environ: Optional[Mapping[str, str]] = None,
        platform: Optional[str] = None,
        popen: Callable[..., subprocess.Popen] = subprocess.Popen,
    ):
        self._config = config
        self._events = events
        self._environ = environ
        self._platform = platform
        self._popen = popen
        self._socket_path = default_socket_path(config)
        self._current: Optional[PlayerProcess] = None
        self._next_handle = 1
        self._volume = config.volume
        self._ipc = False

    @property
    def active(self) -> bool:
        return self._current is not None

    def is_current(self, handle_id: int) -> bool:
        return self._current is not None and self._current.handle_id == handle_id

    def start(self, item: MediaItem) -> int:
        self.stop()

        if item.is_video:
            duration = 0
            specs = video_launch_specs(
                item.path,
                self._volume,
                self._socket_path,
                has_desktop_environment(self._environ, self._platform),
                self._environ,
            )
        else:
            duration = read_duration(item.path)
            specs = audio_launch_specs(item.path, self._volume, self._socket_path)

        errors = []
        for spec in specs:
            if spec.ipc:
                self._remove_socket()
            try:
                process = self._popen(
                    spec.argv,
                    env=spec.env,
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.DEVNULL,
                )
            except OSError as e:
                logger.debug(f"Player {spec.argv[0]} unavailable: {e}")
                errors.append(f"{spec.argv[0]}: {e}")
                continue

            handle_id = self._next_handle
            self._next_handle += 1
            self._current = PlayerProcess(
                handle_id=handle_id,
                process=process,
                argv=spec.argv,
                socket_path=self._socket_path if spec.ipc else None,
            )
            self._ipc = spec.ipc
            self._watch(handle_id, process)
            logger.info(
                f"Started {spec.argv[0]} (handle {handle_id}, pid {process.pid}) "
                f"for {item.path} duration={duration}s"
            )
            return duration

        raise BackendStartError(
            f"No player could open {item.path.name} ({'; '.join(errors)})"
        )

    def _watch(self, handle_id: int, process: subprocess.Popen) -> None:
        def wait_for_exit() -> None:
            returncode = process.wait()
            logger.debug(f"Player handle {handle_id} exited with code {returncode}")
            self._events.put(BackendExited(handle_id, returncode))

        watcher = threading.Thread(
            target=wait_for_exit, name=f"player-watch-{handle_id}", daemon=True
        )
        watcher.start()

    def stop(self) -> None:
        current = self._current
        self._current = None
        self._ipc = False
        if current is None:
            return

        process = current.process
        timeout = self._config.stop_timeout
        try:
            if process.poll() is None:
                process.terminate()
                try:
                    process.wait(timeout=timeout)
                except subprocess.TimeoutExpired:
                    logger.warning(f"{current.argv[0]} ignored SIGTERM, killing pid {process.pid}")
                    process.kill()
                    process.wait(timeout=timeout)
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.error(f"Failed to stop {current.argv[0]} (pid {process.pid}): {e}")

        logger.debug(f"Stopped handle {current.handle_id}")
        if current.socket_path:
            self._remove_socket()

    def _remove_socket(self) -> None:
        if os.path.exists(self._socket_path):
            try:
                os.unlink(self._socket_path)
            except OSError as e:
                logger.debug(f"Could not remove stale socket {self._socket_path}: {e}")

    def _command(self, *args: Any) -> bool:
        if not self._ipc or self._current is None:
            return False
        return send_mpv_command(self._current.socket_path, {"command": list(args)})

    def seek(self, position: int) -> None:
        if not self._command("seek", position, "absolute"):
            logger.debug(f"Seek to {position}s not supported by the active player")

    def set_volume(self, percent: int) -> None:
        # Remembered for the next launch even when the current player has no IPC
        self._volume = max(0, min(100, percent))
        self._command("set_property", "volume", self._volume)

    def pause(self, paused: bool) -> None:
        if not self._command("set_property", "pause", paused):
            logger.debug(f"Pause={paused} not supported by the active player")
