"""Contract between the transport controller and whatever renders media."""

from typing import NamedTuple, Optional, Protocol

from termplayer.domain.library.models import MediaItem


class BackendExited(NamedTuple):
    """Posted by a watcher thread when a player process ends on its own."""

    handle_id: int
    returncode: Optional[int]


class PlayerBackend(Protocol):
    """External decoder/player lifecycle.

    start() must return as soon as playback is launched. At most one handle
    is owned at a time; start() replaces the previous one only after it has
    been stopped. seek, set_volume and pause are best-effort and never raise
    for players that cannot honour them.
    """

    def start(self, item: MediaItem) -> int:
        """Launch playback of item and return its duration in seconds (0 if unknown).

        Raises:
            BackendStartError: If no player could be launched
        """
        ...

    def stop(self) -> None:
        """Terminate the active player, if any. Idempotent."""
        ...

    def seek(self, position: int) -> None:
        ...

    def set_volume(self, percent: int) -> None:
        ...

    def pause(self, paused: bool) -> None:
        ...

    def is_current(self, handle_id: int) -> bool:
        """Whether handle_id refers to the player that is still owned."""
        ...
