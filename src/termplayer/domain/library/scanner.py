"""
Media library scanning.

Walks scan roots for supported audio and video files, skipping hidden
files and directories, and builds the session Catalog.
"""

import os
from pathlib import Path
from typing import Callable, Iterable, Optional

from loguru import logger

from termplayer.core.config import LibraryConfig
from termplayer.errors import EmptyCatalogError, MetadataError, ScanError

from .metadata import read_metadata
from .models import Catalog, MediaItem


def is_hidden(name: str) -> bool:
    return name.startswith(".")


def is_supported_format(path: Path, supported_formats: list[str]) -> bool:
    """Check if file format is supported."""
    return path.suffix.lower() in supported_formats


def is_video_file(path: Path, video_formats: list[str]) -> bool:
    return path.suffix.lower() in video_formats


def list_media_files(root: Path, library: LibraryConfig) -> list[Path]:
    """List supported media files under root in lexical walk order.

    Raises:
        ScanError: If root itself cannot be read
    """
    if not root.is_dir():
        raise ScanError(f"Not a readable directory: {root}")
    try:
        os.listdir(root)
    except OSError as e:
        raise ScanError(f"Cannot read directory {root}: {e}") from e

    def on_error(error: OSError) -> None:
        logger.warning(f"Skipping unreadable directory: {error.filename} ({error})")

    files: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
        # Prune in place so os.walk never descends into hidden directories
        dirnames[:] = sorted(d for d in dirnames if not is_hidden(d))
        if not library.scan_recursive:
            dirnames[:] = []

        for filename in sorted(filenames):
            if is_hidden(filename):
                continue
            path = Path(dirpath) / filename
            if is_supported_format(path, library.supported_formats):
                files.append(path)

    return files


def build_item(path: Path, root: Path, library: LibraryConfig) -> MediaItem:
    """Create a MediaItem, falling back to filename-only when tags are unreadable."""
    try:
        metadata = read_metadata(path)
    except MetadataError as e:
        logger.warning(f"Keeping {path} without metadata: {e}")
        metadata = None

    return MediaItem(
        path=path,
        display_path=str(path.relative_to(root)),
        metadata=metadata,
        is_video=is_video_file(path, library.video_formats),
    )


def scan_directory(
    root: Path,
    library: LibraryConfig,
    progress_callback: Optional[Callable[[Path], None]] = None,
) -> list[MediaItem]:
    """Scan one directory and extract metadata for every media file found.

    Args:
        root: Directory to scan
        library: Library configuration (formats, recursion)
        progress_callback: Optional callback(path) called per file

    Returns:
        List of MediaItem objects in walk order

    Raises:
        ScanError: If root cannot be read
    """
    items = []
    for path in list_media_files(root, library):
        items.append(build_item(path, root, library))
        if progress_callback:
            progress_callback(path)
    return items


def build_catalog(roots: Iterable[Path], library: LibraryConfig, strict: bool = True) -> Catalog:
    """Scan every root and merge the results into one Catalog.

    Args:
        roots: Directories to scan, in order
        library: Library configuration
        strict: When True an unreadable root raises ScanError; when False it is
            skipped with a warning (used for the default locations)

    Raises:
        ScanError: A root could not be read and strict is True
        EmptyCatalogError: No playable media was found
    """
    roots = tuple(Path(r).expanduser() for r in roots)
    items: list[MediaItem] = []

    for root in roots:
        try:
            found = scan_directory(root, library)
        except ScanError:
            if strict:
                raise
            logger.warning(f"Library path unavailable, skipping: {root}")
            continue
        logger.info(f"Scanned {root}: {len(found)} media files")
        items.extend(found)

    if not items:
        raise EmptyCatalogError(
            "Could not find any media to play in: " + ", ".join(str(r) for r in roots)
        )

    return Catalog(items=tuple(items), roots=roots)
