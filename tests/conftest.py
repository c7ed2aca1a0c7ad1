"""Shared fixtures for todo-tracker tests.

File handling in tests:
- Use tmp_path for every store file so tests are isolated and cleaned up.
- Never touch the real ~/.todo.json: TODO_* variables are cleared and HOME is
  pointed at a temp directory for every test.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import pytest

from todo_tracker.config import ENV_PREFIX, PACKAGE_LOGGER
from todo_tracker.storage.store import TaskStore


@pytest.fixture(autouse=True)
def clean_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Remove TODO_* env vars and isolate HOME for each test."""
    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key)
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    yield


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers added by configure_logging (they hold CliRunner streams)."""
    yield
    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(pkg_logger.handlers):
        pkg_logger.removeHandler(handler)
    pkg_logger.setLevel(logging.NOTSET)


@pytest.fixture()
def store_path(tmp_path: Path) -> Path:
    """Path of a not-yet-existing store file."""
    return tmp_path / "tasks.json"


@pytest.fixture()
def store(store_path: Path) -> TaskStore:
    """A TaskStore backed by a fresh temp file."""
    return TaskStore(store_path)
