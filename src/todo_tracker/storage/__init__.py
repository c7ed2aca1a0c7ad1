"""File-based storage for the task list."""

from todo_tracker.storage.store import TaskStore, default_store_path, next_id

__all__ = ["TaskStore", "default_store_path", "next_id"]
