"""Tests for TodoConfig -- configuration and logging setup.

All tests use real files in temporary directories and real environment
variables.  No mocks, no stubs, no fakes.
"""

import json
import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from todo_tracker.config import (
    ENV_PREFIX,
    PACKAGE_LOGGER,
    TodoConfig,
    _load_config_file,
    _load_env_overrides,
)
from todo_tracker.storage.store import default_store_path


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "todo-config.json"
    path.write_text(
        json.dumps(
            {"store_path": str(tmp_path / "from-file.json"), "log_level": "info"},
            indent=2,
        ),
        encoding="utf-8",
    )
    return path


# ---------------------------------------------------------------------------
# Default construction
# ---------------------------------------------------------------------------


class TestDefaults:
    def test_default_store_path(self) -> None:
        assert TodoConfig().store_path == str(default_store_path())

    def test_default_log_level(self) -> None:
        assert TodoConfig().log_level == "WARNING"

    def test_explicit_store_path_is_absolute(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)
        config = TodoConfig(store_path="relative.json")
        assert config.store_path == str(tmp_path.resolve() / "relative.json")

    def test_tilde_is_expanded(self, tmp_path: Path) -> None:
        config = TodoConfig(store_path="~/tasks.json")
        assert config.store_path == str((tmp_path / "home" / "tasks.json").resolve())

    def test_to_dict(self) -> None:
        data = TodoConfig(log_level="debug").to_dict()
        assert data["log_level"] == "DEBUG"
        assert set(data) == {"store_path", "log_level"}


class TestLogLevelValidation:
    @pytest.mark.parametrize("level", ["debug", " Info ", "ERROR"])
    def test_normalised(self, level: str) -> None:
        assert TodoConfig(log_level=level).log_level == level.strip().upper()

    def test_invalid(self) -> None:
        with pytest.raises(ValidationError, match="Invalid log_level"):
            TodoConfig(log_level="LOUD")


# ---------------------------------------------------------------------------
# Layered loading
# ---------------------------------------------------------------------------


class TestLoad:
    def test_no_sources(self) -> None:
        config = TodoConfig.load()
        assert config.store_path == str(default_store_path())
        assert config.log_level == "WARNING"

    def test_config_file(self, config_file: Path, tmp_path: Path) -> None:
        config = TodoConfig.load(str(config_file))
        assert config.store_path == str((tmp_path / "from-file.json").resolve())
        assert config.log_level == "INFO"

    def test_env_beats_file(self, config_file: Path, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.setenv(f"{ENV_PREFIX}STORE_PATH", str(tmp_path / "from-env.json"))
        config = TodoConfig.load(str(config_file))
        assert config.store_path == str((tmp_path / "from-env.json").resolve())
        assert config.log_level == "INFO"

    def test_overrides_beat_env(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.setenv(f"{ENV_PREFIX}LOG_LEVEL", "ERROR")
        config = TodoConfig.load(log_level="DEBUG")
        assert config.log_level == "DEBUG"

    def test_none_overrides_are_ignored(self, monkeypatch) -> None:
        monkeypatch.setenv(f"{ENV_PREFIX}LOG_LEVEL", "ERROR")
        config = TodoConfig.load(log_level=None, store_path=None)
        assert config.log_level == "ERROR"


class TestConfigFile:
    def test_missing_file(self, tmp_path: Path) -> None:
        assert _load_config_file(str(tmp_path / "nope.json")) == {}

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{", encoding="utf-8")
        assert _load_config_file(str(path)) == {}

    def test_not_an_object(self, tmp_path: Path) -> None:
        path = tmp_path / "list.json"
        path.write_text("[1, 2]", encoding="utf-8")
        assert _load_config_file(str(path)) == {}

    def test_unknown_keys_are_ignored(self, tmp_path: Path) -> None:
        path = tmp_path / "extra.json"
        path.write_text('{"colour": "blue"}', encoding="utf-8")
        config = TodoConfig.load(str(path))
        assert "colour" not in config.to_dict()


class TestEnvOverrides:
    def test_empty_environment(self) -> None:
        assert _load_env_overrides() == {}

    def test_reads_both_keys(self, monkeypatch) -> None:
        monkeypatch.setenv("TODO_STORE_PATH", "/tmp/x.json")
        monkeypatch.setenv("TODO_LOG_LEVEL", "debug")
        assert _load_env_overrides() == {
            "store_path": "/tmp/x.json",
            "log_level": "debug",
        }

    def test_blank_values_are_ignored(self, monkeypatch) -> None:
        monkeypatch.setenv("TODO_STORE_PATH", "")
        assert _load_env_overrides() == {}


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


class TestConfigureLogging:
    def test_sets_level(self) -> None:
        TodoConfig(log_level="DEBUG").configure_logging()
        assert logging.getLogger(PACKAGE_LOGGER).level == logging.DEBUG

    def test_idempotent(self) -> None:
        TodoConfig().configure_logging()
        TodoConfig(log_level="ERROR").configure_logging()
        pkg_logger = logging.getLogger(PACKAGE_LOGGER)
        assert len(pkg_logger.handlers) == 1
        assert pkg_logger.level == logging.ERROR
        assert pkg_logger.handlers[0].level == logging.ERROR
