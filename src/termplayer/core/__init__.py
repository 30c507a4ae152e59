"""Core infrastructure layer - no playback or UI dependencies.

This module provides foundation-level services:
- Configuration management (TOML)
- Logging setup (Loguru)
- Console management (Rich)
"""

from .config import (
    Config,
    LibraryConfig,
    LoggingConfig,
    PlayerConfig,
    UIConfig,
    create_default_config,
    get_config_dir,
    get_config_path,
    get_data_dir,
    get_log_file_path,
    load_config,
    parse_config,
)
from .console import get_console, print_failure, safe_print
from .output import setup_loguru

__all__ = [
    # Config
    "Config",
    "LibraryConfig",
    "LoggingConfig",
    "PlayerConfig",
    "UIConfig",
    "create_default_config",
    "get_config_dir",
    "get_config_path",
    "get_data_dir",
    "get_log_file_path",
    "load_config",
    "parse_config",
    # Logging
    "setup_loguru",
    # Console
    "get_console",
    "print_failure",
    "safe_print",
]
