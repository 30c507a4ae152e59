"""
Media metadata extraction and display helpers.

Reads tags and duration from media files using Mutagen. A file Mutagen
cannot identify simply has no metadata; a file it chokes on raises
MetadataError so the scanner can decide what to do with it.
"""

import re
from pathlib import Path
from typing import Any, Optional

from loguru import logger
from mutagen import File as MutagenFile
from mutagen import MutagenError

from termplayer.errors import MetadataError

from .models import MediaItem, TrackMetadata

# ID3, MP4 atoms and Vorbis comments (both cases)
TITLE_TAGS = ["TIT2", "\xa9nam", "TITLE", "title"]
ARTIST_TAGS = ["TPE1", "\xa9ART", "ARTIST", "artist"]
ALBUM_TAGS = ["TALB", "\xa9alb", "ALBUM", "album"]
GENRE_TAGS = ["TCON", "\xa9gen", "GENRE", "genre"]
YEAR_TAGS = ["TDRC", "TYER", "\xa9day", "DATE", "YEAR", "date", "year"]
TRACK_TAGS = ["TRCK", "trkn", "TRACKNUMBER", "tracknumber"]
LYRICS_TAGS = ["\xa9lyr", "LYRICS", "lyrics", "UNSYNCEDLYRICS", "unsyncedlyrics"]

_LEADING_INT = re.compile(r"^\s*(\d+)")


def _open(path: Path) -> Any:
    try:
        return MutagenFile(str(path))
    except (MutagenError, OSError) as e:
        raise MetadataError(f"Could not read {path}: {e}") from e


def get_tag_value(audio_file: Any, tag_names: list[str]) -> Any:
    """Get the first non-empty raw tag value, trying multiple possible tag names."""
    for tag_name in tag_names:
        try:
            value = audio_file.get(tag_name)
        except (KeyError, ValueError):
            # Some formats (like Vorbis) raise ValueError for non-existent keys
            continue
        if value:
            if isinstance(value, list):
                return value[0]
            return value
    return None


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _leading_int(value: Any) -> Optional[int]:
    """Parse "3", "3/12", "2019-04-01" or an MP4 (3, 12) pair into an int."""
    if value is None:
        return None
    if isinstance(value, tuple):
        value = value[0] if value else None
        return value if isinstance(value, int) and value > 0 else None
    match = _LEADING_INT.match(str(value))
    if not match:
        return None
    number = int(match.group(1))
    return number or None


def _lyrics(audio_file: Any) -> Optional[str]:
    tags = getattr(audio_file, "tags", None)
    if tags is not None and hasattr(tags, "getall"):
        # ID3 stores lyrics in USLT frames keyed by language
        for frame in tags.getall("USLT"):
            text = _text(frame)
            if text:
                return text
    return _text(get_tag_value(audio_file, LYRICS_TAGS))


def read_metadata(path: Path) -> Optional[TrackMetadata]:
    """Read tags from a media file.

    Returns:
        TrackMetadata, or None when the file carries no recognisable tags

    Raises:
        MetadataError: If the file exists but cannot be parsed
    """
    audio_file = _open(path)
    if audio_file is None or getattr(audio_file, "tags", None) is None:
        return None

    metadata = TrackMetadata(
        artist=_text(get_tag_value(audio_file, ARTIST_TAGS)),
        title=_text(get_tag_value(audio_file, TITLE_TAGS)),
        album=_text(get_tag_value(audio_file, ALBUM_TAGS)),
        track=_leading_int(get_tag_value(audio_file, TRACK_TAGS)),
        year=_leading_int(get_tag_value(audio_file, YEAR_TAGS)),
        genre=_text(get_tag_value(audio_file, GENRE_TAGS)),
        lyrics=_lyrics(audio_file),
    )

    if all(value is None for value in metadata):
        return None
    return metadata


def read_duration(path: Path) -> int:
    """Read the stream length in whole seconds; 0 when it cannot be determined."""
    try:
        audio_file = _open(path)
    except MetadataError as e:
        logger.warning(f"Duration unavailable: {e}")
        return 0

    if audio_file is None or not hasattr(audio_file, "info"):
        return 0
    length = getattr(audio_file.info, "length", None) or 0
    return max(0, int(round(length)))


def get_display_name(item: MediaItem, index: int) -> str:
    """Playlist row text: "[n] Artist - Title", "[n] Title" or "[n] relative/path"."""
    metadata = item.metadata
    if metadata is not None and metadata.title:
        if metadata.artist:
            return f"[{index + 1}] {metadata.artist} - {metadata.title}"
        return f"[{index + 1}] {metadata.title}"
    return f"[{index + 1}] {item.display_path}"


def get_info_lines(item: Optional[MediaItem]) -> list[str]:
    """Info panel rows for an item, or the relative filename when untagged."""
    if item is None:
        return []

    metadata = item.metadata
    if metadata is None:
        return [f"File:   {item.display_path}"]

    def show(value: Any) -> str:
        return "" if value is None else str(value)

    lines = [
        f"Artist: {show(metadata.artist)}",
        f"Title:  {show(metadata.title)}",
        f"Album:  {show(metadata.album)}",
        f"Track:  {show(metadata.track)}",
        f"Genre:  {show(metadata.genre)}",
        f"Year:   {show(metadata.year)}",
    ]
    if metadata.lyrics:
        lines.append(f"Lyrics: {metadata.lyrics}")
    return lines
