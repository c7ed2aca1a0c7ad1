"""Configuration for the todo command.

Provides :class:`TodoConfig`.  Values are resolved in priority order:

1. **Environment variables** (highest priority) -- ``TODO_*``
2. **Config file** -- an optional JSON file passed to :meth:`TodoConfig.load`
3. **Defaults** (lowest priority) -- ``~/.todo.json``, log level ``WARNING``

Typical usage::

    config = TodoConfig.load()                          # env + defaults
    config = TodoConfig.load("/path/to/config.json")    # file + env + defaults
    config = TodoConfig(store_path="/tmp/tasks.json")   # programmatic

    store = TaskStore(config.store_path)
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from todo_tracker.storage.store import default_store_path

logger = logging.getLogger(__name__)

# Environment variable prefix, e.g. ``TODO_STORE_PATH``.
ENV_PREFIX = "TODO_"

# Name of the package logger configured by :meth:`TodoConfig.configure_logging`.
PACKAGE_LOGGER = "todo_tracker"

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class TodoConfig(BaseModel):
    """Settings for one invocation of the todo command.

    Attributes
    ----------
    store_path:
        Absolute path to the JSON task store.  When not set, it resolves to
        :func:`~todo_tracker.storage.store.default_store_path`.
    log_level:
        Python logging level name for the ``todo_tracker`` logger.
    """

    store_path: Optional[str] = Field(
        default=None,
        description="Absolute path to the JSON task store.",
    )
    log_level: str = Field(
        default="WARNING",
        description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL.",
    )

    @model_validator(mode="after")
    def resolve_store_path(self) -> "TodoConfig":
        """Expand and absolutise ``store_path``, falling back to the default."""
        if self.store_path:
            self.store_path = str(Path(self.store_path).expanduser().resolve())
        else:
            self.store_path = str(default_store_path())
        return self

    @model_validator(mode="after")
    def validate_log_level(self) -> "TodoConfig":
        """Normalise and validate the log level string."""
        normalised = self.log_level.upper().strip()
        if normalised not in VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid log_level '{self.log_level}'. "
                f"Must be one of: {', '.join(sorted(VALID_LOG_LEVELS))}."
            )
        self.log_level = normalised
        return self

    @classmethod
    def load(cls, config_path: Optional[str] = None, **overrides) -> "TodoConfig":
        """Load configuration: defaults, then *config_path*, then ``TODO_*`` env.

        Keyword *overrides* that are not ``None`` win over everything else;
        the CLI passes its command-line options through here.
        """
        merged: dict = {}
        if config_path is not None:
            merged.update(_load_config_file(config_path))
        merged.update(_load_env_overrides())
        merged.update({k: v for k, v in overrides.items() if v is not None})
        return cls.model_validate(merged)

    def configure_logging(self) -> None:
        """Apply the configured level to the ``todo_tracker`` logger.

        Adds one stderr handler the first time it is called; later calls only
        update the level.
        """
        pkg_logger = logging.getLogger(PACKAGE_LOGGER)
        pkg_logger.setLevel(self.log_level)

        if not pkg_logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
            handler.setFormatter(formatter)
            pkg_logger.addHandler(handler)
        for handler in pkg_logger.handlers:
            handler.setLevel(self.log_level)

    def to_dict(self) -> dict:
        """Return all configuration values as a plain dictionary."""
        return self.model_dump()


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


def _load_config_file(config_path: str) -> dict:
    """Read a JSON config file and return its contents as a dict.

    Returns an empty dict if the file does not exist or is malformed.
    """
    path = Path(config_path).expanduser()

    if not path.is_file():
        logger.warning("Config file %s not found. Using defaults.", path)
        return {}

    try:
        with open(path, "r", encoding="utf-8") as fp:
            data = json.load(fp)
    except json.JSONDecodeError:
        logger.warning(
            "Config file %s contains invalid JSON. Ignoring.",
            path,
            exc_info=True,
        )
        return {}
    except OSError:
        logger.warning(
            "Could not read config file %s. Ignoring.",
            path,
            exc_info=True,
        )
        return {}

    if not isinstance(data, dict):
        logger.warning(
            "Config file %s does not contain a JSON object. Ignoring.",
            path,
        )
        return {}

    logger.info("Loaded configuration from %s", path)
    return data


def _load_env_overrides() -> dict:
    """Read ``TODO_STORE_PATH`` and ``TODO_LOG_LEVEL`` from the environment."""
    overrides: dict = {}

    store_path = os.environ.get(f"{ENV_PREFIX}STORE_PATH")
    if store_path:
        overrides["store_path"] = store_path

    log_level = os.environ.get(f"{ENV_PREFIX}LOG_LEVEL")
    if log_level:
        overrides["log_level"] = log_level

    if overrides:
        logger.debug(
            "Environment overrides applied: %s",
            ", ".join(overrides.keys()),
        )

    return overrides
