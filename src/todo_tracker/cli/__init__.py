"""Click CLI for the ``todo`` command.

Subcommands:
- ``todo add``   -- Add a task.
- ``todo list``  -- List tasks as a table (or JSON with --json-output).
- ``todo done``  -- Mark a task done.
- ``todo rm``    -- Remove a task.
- ``todo help``  -- Show usage text.
"""

from todo_tracker.cli.main import add, cli, done, list_tasks, rm

__all__ = ["add", "cli", "done", "list_tasks", "rm"]
