"""
termplayer CLI - entry point.

Scans a directory (or the configured default locations), then hands the
catalog to the transport controller and the blessed UI.
"""

import argparse
import queue
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from termplayer import __version__
from termplayer.core.config import VALID_LOG_LEVELS, Config, get_log_file_path, load_config
from termplayer.core.console import print_failure
from termplayer.core.output import setup_loguru
from termplayer.domain.library.scanner import build_catalog
from termplayer.domain.playback.player import SubprocessBackend
from termplayer.domain.playback.transport import TransportController
from termplayer.errors import EmptyCatalogError, ScanError, TerminalError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="termplayer",
        description="Terminal audio/video player",
    )
    parser.add_argument(
        "directory",
        nargs="?",
        help="Directory to scan (default: the configured library paths, ~/Music and ~/Videos)",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=sorted(VALID_LOG_LEVELS),
        help="Override the configured log level",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to an alternative config.toml",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def fatal(message: str) -> int:
    """Log and print a startup failure; returns the exit code."""
    logger.critical(message)
    print_failure(message)
    return 1


def resolve_roots(directory: Optional[str], config: Config) -> tuple[list[Path], bool]:
    """Scan roots and whether an unreadable root is fatal.

    An explicit directory must be readable; the default locations are
    merged and any missing one is skipped.
    """
    if directory:
        return [Path(directory).expanduser()], True
    return [Path(p).expanduser() for p in config.library.library_paths], False


def run(argv: Optional[list[str]] = None) -> int:
    """Run termplayer and return the process exit code."""
    args = build_parser().parse_args(argv)

    config = load_config(args.config)
    if args.log_level:
        config.logging.level = args.log_level

    setup_loguru(get_log_file_path(config), config.logging.level)

    roots, strict = resolve_roots(args.directory, config)

    def scan():
        return build_catalog(roots, config.library, strict=strict)

    try:
        catalog = scan()
    except ScanError as e:
        return fatal(f"Can't get media list: {e}")
    except EmptyCatalogError as e:
        return fatal(str(e))

    logger.info(f"Catalog ready: {len(catalog)} items from {', '.join(map(str, roots))}")

    events: queue.Queue = queue.Queue()
    backend = SubprocessBackend(config.player, events)
    controller = TransportController(
        catalog,
        backend,
        volume=config.player.volume,
        volume_step=config.player.volume_step,
        seek_step=config.player.seek_step,
        tick_interval=config.ui.tick_interval,
        scanner=scan,
    )

    # Imported late so --help and --version never touch the terminal library
    from termplayer.ui.blessed.app import run_interactive_ui

    try:
        run_interactive_ui(controller, events, config.ui)
    except TerminalError as e:
        return fatal(f"Could not start the terminal UI: {e}")
    finally:
        backend.stop()

    logger.info("termplayer exited normally")
    return 0


def main() -> None:
    """Main entry point for the termplayer command."""
    sys.exit(run())


if __name__ == "__main__":
    main()
