"""todo-tracker - a personal task list kept in a single JSON file."""

__version__ = "0.1.0"

from todo_tracker.config import TodoConfig

__all__ = ["TodoConfig", "__version__"]
