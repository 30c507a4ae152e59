"""
Media library domain models.

Contains data structures for representing discovered media files.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, NamedTuple, Optional


class TrackMetadata(NamedTuple):
    """Tags read from a media file. A tag that is missing is None, never ""."""

    artist: Optional[str] = None
    title: Optional[str] = None
    album: Optional[str] = None
    track: Optional[int] = None
    year: Optional[int] = None
    genre: Optional[str] = None
    lyrics: Optional[str] = None


class MediaItem(NamedTuple):
    """A playable file found by the scanner.

    display_path is the path relative to the scan root it was found under,
    used as the name when the file has no usable tags.
    """

    path: Path
    display_path: str
    metadata: Optional[TrackMetadata] = None
    is_video: bool = False


@dataclass(frozen=True)
class Catalog:
    """Ordered, index-addressed collection of media items for a session.

    Replaced wholesale on reload, never mutated in place.
    """

    items: tuple[MediaItem, ...]
    roots: tuple[Path, ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> MediaItem:
        return self.items[index]

    def __iter__(self) -> Iterator[MediaItem]:
        return iter(self.items)

    def index_of(self, path: Path) -> Optional[int]:
        """Return the index of the item at path, or None if absent."""
        for i, item in enumerate(self.items):
            if item.path == path:
                return i
        return None
