"""Tests for the command line interface."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
from rich.logging import RichHandler

from file_rotation.config import RotationConfig
from file_rotation.main import main, parse_args, setup_logging


@pytest.fixture(autouse=True)
def reset_logger() -> Iterator[None]:
    """Remove handlers and level left on the shared logger by each test."""
    yield
    logger = logging.getLogger("file-rotation")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    """Path of a config file that does not exist yet."""
    return tmp_path / "config" / "config.yaml"


def _run(config_path: Path, *args: str) -> int:
    return main(["--config", str(config_path), *args])


class TestParseArgs:
    """Tests for argument parsing."""

    def test_rotate_options(self) -> None:
        """Test that rotate options are parsed."""
        args = parse_args(["rotate", "app.log", "-n", "3", "--extension", "txt", "--numeric"])

        assert args.command == "rotate"
        assert args.path == "app.log"
        assert args.max_old_files == 3
        assert args.extension == "txt"
        assert args.numeric is True

    def test_unset_options_are_none(self) -> None:
        """Test that omitted options do not override config values."""
        args = parse_args(["plan", "app.log"])

        assert args.max_old_files is None
        assert args.extension is None
        assert args.numeric is None


class TestRotateCommand:
    """Tests for the rotate command."""

    def test_rotates_file(self, tmp_path: Path, config_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test that the rotate command renames the active file."""
        (tmp_path / "app.log").write_text("active")

        assert _run(config_path, "rotate", str(tmp_path / "app.log")) == 0

        assert (tmp_path / "app.1.log").read_text() == "active"
        assert not (tmp_path / "app.log").exists()
        assert "renamed" in capsys.readouterr().out

    def test_cli_overrides_config(self, tmp_path: Path, config_path: Path) -> None:
        """Test that command line options win over the config file."""
        RotationConfig(max_old_files=5).save(config_path)
        for name in ("app.log", "app.1.log", "app.2.log"):
            (tmp_path / name).write_text(name)

        assert _run(config_path, "rotate", str(tmp_path / "app.log"), "--max-old-files", "1") == 0

        assert sorted(p.name for p in tmp_path.iterdir()) == ["app.1.log", "config"]

    def test_config_retention_applied(self, tmp_path: Path, config_path: Path) -> None:
        """Test that the config file retention cap is used by default."""
        RotationConfig(max_old_files=1).save(config_path)
        logs = tmp_path / "logs"
        logs.mkdir()
        (logs / "app.log").write_text("a")
        (logs / "app.1.log").write_text("b")

        assert _run(config_path, "rotate", str(logs / "app.log")) == 0

        assert [p.name for p in logs.iterdir()] == ["app.1.log"]

    def test_nothing_to_rotate(self, tmp_path: Path, config_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test that a missing family is reported, not an error."""
        assert _run(config_path, "rotate", str(tmp_path / "app.log")) == 0
        assert "Nothing to rotate" in capsys.readouterr().out

    def test_directory_path_fails(self, tmp_path: Path, config_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test that a directory target exits with status 1."""
        assert _run(config_path, "rotate", "logs/") == 1
        assert "Not a file" in capsys.readouterr().out

    def test_missing_directory_fails(self, tmp_path: Path, config_path: Path) -> None:
        """Test that an unreadable directory exits with status 1."""
        assert _run(config_path, "rotate", str(tmp_path / "missing" / "app.log")) == 1

    def test_negative_max_old_files_fails(self, tmp_path: Path, config_path: Path) -> None:
        """Test that invalid options exit with status 1."""
        assert _run(config_path, "rotate", str(tmp_path / "app.log"), "-n", "-1") == 1


class TestPlanCommand:
    """Tests for the plan command."""

    def test_plan_does_not_mutate(self, tmp_path: Path, config_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test that plan only prints what would happen."""
        (tmp_path / "app.log").write_text("a")
        (tmp_path / "app.1.log").write_text("b")

        assert _run(config_path, "plan", str(tmp_path / "app.log"), "-n", "1") == 0

        assert sorted(p.name for p in tmp_path.iterdir()) == ["app.1.log", "app.log"]
        out = capsys.readouterr().out
        assert "delete" in out
        assert "rename" in out

    def test_plan_empty(self, tmp_path: Path, config_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test that an empty plan is reported."""
        assert _run(config_path, "plan", str(tmp_path / "app.log")) == 0
        assert "Nothing to rotate" in capsys.readouterr().out


class TestConfigCommand:
    """Tests for the config command."""

    def test_init_creates_config(self, config_path: Path) -> None:
        """Test that --init writes the default config."""
        assert _run(config_path, "config", "--init") == 0

        assert config_path.exists()
        assert RotationConfig.load(config_path) == RotationConfig()

    def test_init_refuses_overwrite(self, config_path: Path) -> None:
        """Test that --init keeps an existing config."""
        RotationConfig(max_old_files=9).save(config_path)

        assert _run(config_path, "config", "--init") == 1
        assert RotationConfig.load(config_path).max_old_files == 9

    def test_show(self, config_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test that --show prints the effective settings."""
        assert _run(config_path, "config", "--show") == 0
        assert "unbounded" in capsys.readouterr().out

    def test_no_flags(self, config_path: Path) -> None:
        """Test that the config command needs a flag."""
        assert _run(config_path, "config") == 1

    def test_invalid_config_file(self, config_path: Path) -> None:
        """Test that a broken config file exits with status 1."""
        config_path.parent.mkdir(parents=True)
        config_path.write_text("rotation: [\n  unclosed")

        assert _run(config_path, "config", "--show") == 1


class TestSetupLogging:
    """Tests for logging setup."""

    def test_no_duplicate_handlers(self) -> None:
        """Test that repeated setup replaces handlers."""
        config = RotationConfig()

        setup_logging(config)
        logger = setup_logging(config)

        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RichHandler)

    def test_file_handler(self, tmp_path: Path) -> None:
        """Test that a configured log file receives records."""
        config = RotationConfig(log_file=tmp_path / "logs" / "rotation.log")

        logger = setup_logging(config)
        logger.info("rotated something")
        for handler in logger.handlers:
            handler.flush()

        assert len(logger.handlers) == 2
        assert "INFO | rotated something" in config.log_file.read_text()

    def test_verbose_sets_debug(self) -> None:
        """Test that --verbose lowers the level to DEBUG."""
        logger = setup_logging(RotationConfig(), verbose=True)
        assert logger.level == logging.DEBUG

    def test_logger_starts_clean(self) -> None:
        """Test that handlers and level from earlier setups were removed."""
        logger = logging.getLogger("file-rotation")

        assert logger.handlers == []
        assert logger.level == logging.NOTSET

    def test_no_command(self, config_path: Path) -> None:
        """Test that running without a command exits with status 1."""
        assert _run(config_path) == 1
