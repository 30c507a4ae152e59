"""Tests for loguru file logging setup."""

from loguru import logger

from termplayer.core.output import setup_loguru


def test_logs_to_file_at_level(tmp_path):
    log_file = tmp_path / "logs" / "termplayer.log"
    try:
        setup_loguru(log_file, "WARNING")
        logger.info("hidden message")
        logger.warning("visible message")
    finally:
        logger.remove()

    text = log_file.read_text(encoding="utf-8")
    assert "visible message" in text
    assert "hidden message" not in text
