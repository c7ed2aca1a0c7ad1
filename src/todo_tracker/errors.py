"""Error types raised by the task store and the command dispatcher.

Every error the user can trigger derives from :class:`TodoError`.  The CLI
catches that base class, prints ``error: <message>`` to stderr and exits
with status 1.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union


class TodoError(Exception):
    """Base class for all user-facing todo-tracker errors."""


class UsageError(TodoError):
    """A command was given the wrong number or shape of arguments."""


class InvalidIDError(TodoError):
    """An id argument is not a positive integer."""

    def __init__(self, raw: str) -> None:
        super().__init__(f"invalid id: {raw}")
        self.raw = raw


class InvalidInputError(TodoError):
    """Task text is empty after trimming whitespace."""


class NotFoundError(TodoError):
    """No task in the store carries the requested id."""

    def __init__(self, task_id: int) -> None:
        super().__init__(f"task {task_id} not found")
        self.task_id = task_id


class _StoreError(TodoError):
    """Failure touching the store file at *path*."""

    template = "{path}: {reason}"

    def __init__(self, path: Union[str, Path], reason: str) -> None:
        super().__init__(self.template.format(path=path, reason=reason))
        self.path = Path(path)
        self.reason = reason


class StoreReadError(_StoreError):
    """The store file exists but could not be read."""

    template = "cannot read {path}: {reason}"


class CorruptStoreError(StoreReadError):
    """The store file is non-empty but does not hold a valid task list."""

    template = "corrupt task store {path}: {reason}"


class StoreWriteError(_StoreError):
    """The store file could not be written."""

    template = "cannot write {path}: {reason}"
