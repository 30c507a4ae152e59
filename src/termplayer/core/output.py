"""
Loguru setup for termplayer.

The blessed UI owns the terminal for the whole session, so the default
stderr sink is replaced by a rotating log file.
"""

from pathlib import Path

from loguru import logger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {thread.name} | {name}:{line} | {message}"


def setup_loguru(log_file: Path, level: str = "INFO") -> None:
    """
    Route all logging to log_file.

    Player watcher threads log too, so each record carries its thread name.

    Args:
        log_file: Path to log file (parent directories are created)
        level: Minimum level, one of loguru's level names
    """
    logger.remove()
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logger.add(
        log_file,
        level=level,
        format=LOG_FORMAT,
        rotation="10 MB",
        retention=5,
        backtrace=False,
        diagnose=False,
    )
    logger.debug(f"Logging to {log_file} at {level}")
