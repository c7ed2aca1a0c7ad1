"""TaskStore -- file-backed persistence for the task list.

The whole list lives in one JSON file (``~/.todo.json`` by default).  Every
operation is a complete cycle: read the file, apply at most one change,
write the full list back.  Nothing is cached between calls.

Writes go to a temporary file in the same directory which is then renamed
over the target, so a reader never sees a half-written list.  There is no
locking: two processes saving at the same time race, and the last rename
wins.  The earlier write is silently lost.

Typical usage::

    store = TaskStore()                       # ~/.todo.json
    store = TaskStore("/tmp/tasks.json")      # explicit store location

    task = store.add("buy milk")
    store.mark_done(task.id)
    store.remove(task.id)
    tasks = store.list_tasks()
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, Optional, Union

from pydantic import ValidationError

from todo_tracker.errors import (
    CorruptStoreError,
    InvalidInputError,
    NotFoundError,
    StoreReadError,
    StoreWriteError,
)
from todo_tracker.models.task import Task

logger = logging.getLogger(__name__)

# File name of the store inside the user's home directory.
DEFAULT_STORE_FILE = ".todo.json"

# File name used in the current directory when no home directory is known.
FALLBACK_STORE_FILE = "todo.json"

# Permissions applied to the written store file.
STORE_FILE_MODE = 0o644


def default_store_path() -> Path:
    """Return the default store location.

    ``~/.todo.json`` when the home directory can be determined, otherwise
    ``todo.json`` in the current working directory.
    """
    try:
        return Path.home() / DEFAULT_STORE_FILE
    except (RuntimeError, KeyError):
        logger.debug("Home directory unavailable, storing tasks in cwd.")
        return Path.cwd() / FALLBACK_STORE_FILE


def next_id(tasks: Iterable[Task]) -> int:
    """Return one more than the highest id in *tasks*, or 1 when empty."""
    return max((t.id for t in tasks), default=0) + 1


class TaskStore:
    """Load, mutate and save the task list held in a single JSON file.

    Parameters
    ----------
    path:
        Location of the store file.  When *None*, :func:`default_store_path`
        is used.  The file and its directory are created on first save.
    """

    next_id = staticmethod(next_id)

    def __init__(self, path: Optional[Union[str, Path]] = None) -> None:
        if path is not None:
            self._path = Path(path).expanduser()
        else:
            self._path = default_store_path()

    @property
    def path(self) -> Path:
        """The store file location."""
        return self._path

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load(self) -> list[Task]:
        """Read the task list from disk.

        Returns
        -------
        list[Task]
            The stored tasks in creation order.  Empty when the file is
            missing, zero-length or holds JSON ``null``.

        Raises
        ------
        StoreReadError
            The file exists but cannot be read.
        CorruptStoreError
            The file has content that is not a valid task list.
        """
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            logger.debug("No store at %s, starting with an empty list.", self._path)
            return []
        except OSError as exc:
            logger.debug("Could not read %s.", self._path, exc_info=True)
            raise StoreReadError(self._path, exc.strerror or str(exc)) from exc

        if not raw:
            return []

        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise CorruptStoreError(self._path, str(exc)) from exc

        if data is None:
            return []
        if not isinstance(data, list):
            raise CorruptStoreError(
                self._path,
                f"expected a JSON array, got {type(data).__name__}",
            )

        try:
            tasks = Task.list_from_json(raw)
        except ValidationError as exc:
            first = exc.errors()[0]
            raise CorruptStoreError(
                self._path,
                f"record {first['loc'][0]} is invalid: {first['msg']}",
            ) from exc

        logger.debug("Loaded %d task(s) from %s", len(tasks), self._path)
        return tasks

    def save(self, tasks: Iterable[Task]) -> Path:
        """Overwrite the store file with *tasks*.

        The list is written to a temp file next to the store and renamed over
        it, so the previous content survives any failure.

        Returns
        -------
        Path
            The path to the written file.

        Raises
        ------
        StoreWriteError
            The directory or file could not be written.
        """
        records = [task.to_json_dict() for task in tasks]
        payload = json.dumps(records, indent=2, ensure_ascii=False) + "\n"

        tmp_path: Optional[Path] = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self._path.parent,
                prefix=".tmp_",
                suffix=".json",
                delete=False,
            ) as fp:
                tmp_path = Path(fp.name)
                fp.write(payload)
                fp.flush()
                os.fsync(fp.fileno())
            tmp_path.chmod(STORE_FILE_MODE)
            tmp_path.replace(self._path)
        except OSError as exc:
            if tmp_path is not None:
                with contextlib.suppress(OSError):
                    tmp_path.unlink()
            logger.debug("Could not write %s.", self._path, exc_info=True)
            raise StoreWriteError(self._path, exc.strerror or str(exc)) from exc

        logger.info("Saved %d task(s) to %s", len(records), self._path)
        return self._path

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def list_tasks(self) -> list[Task]:
        """Return the stored tasks in display order."""
        return self.load()

    def add(self, text: str) -> Task:
        """Append a new task and persist the list.

        Raises
        ------
        InvalidInputError
            *text* is empty or only whitespace.
        """
        text = text.strip()
        if not text:
            raise InvalidInputError("task text must not be empty")

        tasks = self.load()
        task = Task.new(next_id(tasks), text)
        tasks.append(task)
        self.save(tasks)
        return task

    def mark_done(self, task_id: int) -> Task:
        """Flag the task with *task_id* as done and persist the list.

        Marking an already-done task succeeds and leaves it done.

        Raises
        ------
        NotFoundError
            No task has *task_id*.  The store is left untouched.
        """
        tasks = self.load()
        task = tasks[_index_of(tasks, task_id)]
        task.done = True
        self.save(tasks)
        return task

    def remove(self, task_id: int) -> Task:
        """Delete the task with *task_id* and persist the rest in order.

        Raises
        ------
        NotFoundError
            No task has *task_id*.  The store is left untouched.
        """
        tasks = self.load()
        task = tasks.pop(_index_of(tasks, task_id))
        self.save(tasks)
        return task


def _index_of(tasks: list[Task], task_id: int) -> int:
    """Return the position of the first task with *task_id*.

    Raises :class:`NotFoundError` when there is none.
    """
    for index, task in enumerate(tasks):
        if task.id == task_id:
            return index
    raise NotFoundError(task_id)
