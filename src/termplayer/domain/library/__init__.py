"""Library domain - scanning, metadata extraction and the session catalog.

This domain handles:
- Walking scan roots for supported audio/video files
- Reading tags and durations with Mutagen
- The immutable Catalog the transport plays from
"""

from .metadata import (
    get_display_name,
    get_info_lines,
    read_duration,
    read_metadata,
)
from .models import Catalog, MediaItem, TrackMetadata
from .scanner import (
    build_catalog,
    is_supported_format,
    is_video_file,
    list_media_files,
    scan_directory,
)

__all__ = [
    # Models
    "Catalog",
    "MediaItem",
    "TrackMetadata",
    # Metadata
    "get_display_name",
    "get_info_lines",
    "read_duration",
    "read_metadata",
    # Scanner
    "build_catalog",
    "is_supported_format",
    "is_video_file",
    "list_media_files",
    "scan_directory",
]
