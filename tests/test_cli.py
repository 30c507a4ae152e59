"""Tests for the command line entry point."""

import pytest
from loguru import logger

from termplayer import cli
from termplayer.core.config import Config
from termplayer.domain.playback.modes import TransportState
from termplayer.errors import TerminalError
from termplayer.ui.blessed import app


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    """Config that logs into tmp_path, with the real environment isolated."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.delenv("TERMPLAYER_LIBRARY_PATHS", raising=False)
    monkeypatch.delenv("TERMPLAYER_LOG_LEVEL", raising=False)

    path = tmp_path / "config.toml"
    path.write_text(f'[logging]\nlog_file = "{(tmp_path / "test.log").as_posix()}"\n', encoding="utf-8")
    yield path
    logger.remove()


@pytest.fixture
def media_dir(tmp_path):
    root = tmp_path / "media"
    root.mkdir()
    for name in ["a.mp3", "b.ogg", "notes.txt"]:
        (root / name).write_bytes(b"")
    return root


class TestParser:
    def test_directory_optional(self):
        args = cli.build_parser().parse_args([])
        assert args.directory is None

    def test_log_level_uppercased(self):
        args = cli.build_parser().parse_args(["--log-level", "debug", "/music"])
        assert args.log_level == "DEBUG"
        assert args.directory == "/music"


class TestStartupFailures:
    def test_missing_directory(self, tmp_path, config_file, capsys):
        assert cli.run(["--config", str(config_file), str(tmp_path / "missing")]) == 1
        assert "Can't get media list" in capsys.readouterr().err

    def test_empty_directory(self, tmp_path, config_file):
        empty = tmp_path / "empty"
        empty.mkdir()
        assert cli.run(["--config", str(config_file), str(empty)]) == 1

    def test_terminal_failure(self, config_file, media_dir, monkeypatch):
        def no_terminal(*args, **kwargs):
            raise TerminalError("stdout is not a terminal")

        monkeypatch.setattr(app, "run_interactive_ui", no_terminal)
        assert cli.run(["--config", str(config_file), str(media_dir)]) == 1

    def test_main_exits_with_code(self, tmp_path, config_file, monkeypatch):
        monkeypatch.setattr("sys.argv", ["termplayer", "--config", str(config_file), str(tmp_path / "nope")])
        with pytest.raises(SystemExit) as excinfo:
            cli.main()
        assert excinfo.value.code == 1


class TestRun:
    def test_hands_catalog_to_ui(self, config_file, media_dir, monkeypatch):
        seen = {}

        def fake_ui(controller, events, ui_config):
            seen["names"] = controller.view().playlist
            seen["state"] = controller.state

        monkeypatch.setattr(app, "run_interactive_ui", fake_ui)
        assert cli.run(["--config", str(config_file), str(media_dir)]) == 0
        assert seen["names"] == ("[1] a.mp3", "[2] b.ogg")
        assert seen["state"] is TransportState.STOPPED

    def test_log_file_written(self, tmp_path, config_file, media_dir, monkeypatch):
        monkeypatch.setattr(app, "run_interactive_ui", lambda *args: None)
        cli.run(["--config", str(config_file), "--log-level", "debug", str(media_dir)])
        logger.remove()
        assert "Catalog ready: 2 items" in (tmp_path / "test.log").read_text(encoding="utf-8")


class TestResolveRoots:
    def test_explicit_directory_is_strict(self):
        roots, strict = cli.resolve_roots("/music", Config())
        assert [r.as_posix() for r in roots] == ["/music"]
        assert strict is True

    def test_default_locations_are_lenient(self):
        config = Config()
        config.library.library_paths = ["/srv/music", "/srv/videos"]
        roots, strict = cli.resolve_roots(None, config)
        assert [r.as_posix() for r in roots] == ["/srv/music", "/srv/videos"]
        assert strict is False
