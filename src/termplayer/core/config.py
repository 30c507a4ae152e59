"""
Configuration management for termplayer
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from loguru import logger

VALID_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}

# Volume percent always moves on this grid
VOLUME_GRID = 5


@dataclass
class LibraryConfig:
    """Configuration for media library scanning."""

    library_paths: List[str] = field(
        default_factory=lambda: [
            str(Path.home() / "Music"),
            str(Path.home() / "Videos"),
        ]
    )
    audio_formats: List[str] = field(
        default_factory=lambda: [".mp3", ".flac", ".ogg", ".wav", ".m4a", ".opus"]
    )
    video_formats: List[str] = field(
        default_factory=lambda: [".mp4", ".mkv", ".avi", ".mov", ".webm"]
    )
    scan_recursive: bool = True

    @property
    def supported_formats(self) -> List[str]:
        return self.audio_formats + self.video_formats


@dataclass
class PlayerConfig:
    """Configuration for transport and external players."""

    volume: int = 100
    seek_step: int = 10
    volume_step: int = 5
    mpv_socket_path: Optional[str] = None
    stop_timeout: float = 2.0

    def validate(self) -> None:
        """Validate player configuration values.

        Volume moves on a grid of 5, so the initial volume and the step
        must both sit on it.

        Raises:
            ValueError: If configuration values are invalid
        """
        for name in ("volume", "seek_step", "volume_step"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")
        if isinstance(self.stop_timeout, bool) or not isinstance(self.stop_timeout, (int, float)):
            raise ValueError(f"stop_timeout must be a number, got {self.stop_timeout!r}")

        if not 0 <= self.volume <= 100 or self.volume % VOLUME_GRID:
            raise ValueError(f"volume must be a multiple of {VOLUME_GRID} within 0-100, got {self.volume}")
        if not 0 < self.volume_step <= 100 or self.volume_step % VOLUME_GRID:
            raise ValueError(
                f"volume_step must be a multiple of {VOLUME_GRID} within 5-100, got {self.volume_step}"
            )
        if self.seek_step <= 0:
            raise ValueError(f"seek_step must be positive, got {self.seek_step}")
        if self.stop_timeout <= 0:
            raise ValueError(f"stop_timeout must be positive, got {self.stop_timeout}")


@dataclass
class UIConfig:
    """Configuration for the terminal interface."""

    tick_interval: float = 1.0
    frame_timeout: float = 0.1

    def validate(self) -> None:
        """Raises ValueError unless both intervals are positive numbers."""
        for name in ("tick_interval", "frame_timeout"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{name} must be a number of seconds, got {value!r}")
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"
    log_file: Optional[str] = None  # default: ~/.local/share/termplayer/termplayer.log


@dataclass
class Config:
    """Main configuration object."""

    library: LibraryConfig = field(default_factory=LibraryConfig)
    player: PlayerConfig = field(default_factory=PlayerConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "termplayer"
    return Path.home() / ".config" / "termplayer"


def get_config_path() -> Path:
    """Get the main configuration file path.

    A config.toml in the current working directory wins over the one in
    XDG_CONFIG_HOME/termplayer (or ~/.config/termplayer).
    """
    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config
    return get_config_dir() / "config.toml"


def get_data_dir() -> Path:
    """Get the data directory path."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "termplayer"
    return Path.home() / ".local" / "share" / "termplayer"


def get_log_file_path(config: Config) -> Path:
    """Resolve the log file location from config, falling back to the data dir."""
    if config.logging.log_file:
        return Path(config.logging.log_file).expanduser()
    return get_data_dir() / "termplayer.log"


def create_default_config() -> str:
    """Create a default configuration TOML content."""
    return """
# termplayer configuration

[library]
# Directories scanned when no directory is given on the command line
library_paths = ["~/Music", "~/Videos"]

# Extensions treated as audio and video
audio_formats = [".mp3", ".flac", ".ogg", ".wav", ".m4a", ".opus"]
video_formats = [".mp4", ".mkv", ".avi", ".mov", ".webm"]

# Recursively scan subdirectories
scan_recursive = true

[player]
# Initial volume (0-100)
volume = 100

# Seconds moved by the seek keys
seek_step = 10

# Percent moved by the volume keys
volume_step = 5

# Path for the mpv IPC socket (a per-process temp path if not set)
# mpv_socket_path = "/tmp/termplayer-mpv"

# Seconds to wait for a player process to exit before killing it
stop_timeout = 2.0

[ui]
# Progress clock period in seconds
tick_interval = 1.0

# Keyboard poll timeout per frame in seconds
frame_timeout = 0.1

[logging]
# Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
level = "INFO"

# Custom log file path (default: ~/.local/share/termplayer/termplayer.log)
# log_file = "/path/to/termplayer.log"
""".strip()


def _apply_env_overrides(config: Config) -> Config:
    """Apply TERMPLAYER_* environment variables on top of file values."""
    library_paths = os.environ.get("TERMPLAYER_LIBRARY_PATHS")
    if library_paths:
        config.library.library_paths = [
            str(Path(p).expanduser()) for p in library_paths.split(os.pathsep) if p
        ]

    log_level = os.environ.get("TERMPLAYER_LOG_LEVEL")
    if log_level:
        if log_level.upper() in VALID_LOG_LEVELS:
            config.logging.level = log_level.upper()
        else:
            logger.warning(f"Ignoring invalid TERMPLAYER_LOG_LEVEL={log_level!r}")

    return config


def parse_config(toml_data: dict) -> Config:
    """Build a Config from parsed TOML data, keeping defaults for missing keys."""
    config = Config()

    if "library" in toml_data:
        library_data = toml_data["library"]
        config.library = LibraryConfig(
            library_paths=[
                str(Path(p).expanduser())
                for p in library_data.get("library_paths", config.library.library_paths)
            ],
            audio_formats=[
                ext.lower()
                for ext in library_data.get("audio_formats", config.library.audio_formats)
            ],
            video_formats=[
                ext.lower()
                for ext in library_data.get("video_formats", config.library.video_formats)
            ],
            scan_recursive=library_data.get(
                "scan_recursive", config.library.scan_recursive
            ),
        )

    if "player" in toml_data:
        player_data = toml_data["player"]
        config.player = PlayerConfig(
            volume=player_data.get("volume", config.player.volume),
            seek_step=player_data.get("seek_step", config.player.seek_step),
            volume_step=player_data.get("volume_step", config.player.volume_step),
            mpv_socket_path=player_data.get("mpv_socket_path"),
            stop_timeout=player_data.get("stop_timeout", config.player.stop_timeout),
        )
        try:
            config.player.validate()
        except ValueError as e:
            logger.warning(f"Invalid player configuration: {e}. Using defaults.")
            config.player = PlayerConfig()

    if "ui" in toml_data:
        ui_data = toml_data["ui"]
        config.ui = UIConfig(
            tick_interval=ui_data.get("tick_interval", config.ui.tick_interval),
            frame_timeout=ui_data.get("frame_timeout", config.ui.frame_timeout),
        )
        try:
            config.ui.validate()
        except ValueError as e:
            logger.warning(f"Invalid ui configuration: {e}. Using defaults.")
            config.ui = UIConfig()

    if "logging" in toml_data:
        logging_data = toml_data["logging"]
        log_file = logging_data.get("log_file")
        if log_file:
            log_file = str(Path(log_file).expanduser())
        level = str(logging_data.get("level", config.logging.level)).upper()
        if level not in VALID_LOG_LEVELS:
            logger.warning(f"Invalid log level {level!r}. Using INFO.")
            level = "INFO"
        config.logging = LoggingConfig(level=level, log_file=log_file)

    return config


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file or create default.

    Environment variables (optionally from a .env file in the config
    directory) override TOML values:
    - TERMPLAYER_LIBRARY_PATHS
    - TERMPLAYER_LOG_LEVEL
    """
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    config_path = config_path or get_config_path()

    if not config_path.exists():
        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(config_path, "w", encoding="utf-8") as f:
                f.write(create_default_config())
            logger.info(f"Created default configuration at: {config_path}")
        except OSError as e:
            logger.warning(f"Could not write default configuration to {config_path}: {e}")
        return _apply_env_overrides(Config())

    try:
        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning(f"Error loading configuration from {config_path}: {e}. Using defaults.")
        return _apply_env_overrides(Config())

    return _apply_env_overrides(parse_config(toml_data))
