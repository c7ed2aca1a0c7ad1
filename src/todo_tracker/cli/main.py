"""Main Click CLI entry point for the todo command.

Entry point registered in pyproject.toml::

    [project.scripts]
    todo = "todo_tracker.cli.main:cli"

Usage examples::

    todo add buy milk
    todo list
    todo list --json-output
    todo done 1
    todo rm 1
    todo --store-path /tmp/tasks.json list

Argument checking is done by the commands themselves rather than by click,
so that every mistake is reported as ``error: <message>`` with exit status
1.  Unknown commands print a notice and the usage text and exit 0.
"""

from __future__ import annotations

import functools
import json
import re
import sys
from typing import Optional

import click
from pydantic import ValidationError

from todo_tracker import __version__
from todo_tracker.config import VALID_LOG_LEVELS, TodoConfig
from todo_tracker.errors import InvalidIDError, TodoError, UsageError
from todo_tracker.models.task import Task
from todo_tracker.storage.store import TaskStore

# Unknown options at the top level fall through to resolve_command as
# unknown commands.
CONTEXT_SETTINGS = {
    "help_option_names": ["-h", "--help"],
    "ignore_unknown_options": True,
}

# Lets variadic arguments swallow things like ``-5`` so they reach our checks.
PASSTHROUGH_SETTINGS = {"ignore_unknown_options": True}

TABLE_HEADER = "ID  Done  Task"
TABLE_SEPARATOR = "-" * 31

_ID_PATTERN = re.compile(r"[+-]?[0-9]+")


class TodoGroup(click.Group):
    """Click group that treats an unknown command as a soft failure."""

    def resolve_command(self, ctx, args):
        name = args[0]
        if self.get_command(ctx, name) is None:
            return name, _unknown_command(name), args[1:]
        return super().resolve_command(ctx, args)


def _fail(message: str) -> None:
    click.echo(f"error: {message}", err=True)
    sys.exit(1)


def _reports_errors(func):
    """Turn a :class:`TodoError` raised by *func* into ``error:`` + exit 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except TodoError as exc:
            _fail(str(exc))

    return wrapper


@click.group(
    cls=TodoGroup,
    invoke_without_command=True,
    context_settings=CONTEXT_SETTINGS,
)
@click.version_option(version=__version__, prog_name="todo-tracker")
@click.option(
    "--store-path",
    type=click.Path(),
    default=None,
    help="Task store file. Defaults to ~/.todo.json (env: TODO_STORE_PATH).",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(),
    default=None,
    envvar="TODO_CONFIG",
    help="Optional JSON config file with store_path and log_level keys.",
)
@click.option(
    "--log-level",
    type=click.Choice(sorted(VALID_LOG_LEVELS), case_sensitive=False),
    default=None,
    help="Logging level (env: TODO_LOG_LEVEL). Defaults to WARNING.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    store_path: Optional[str],
    config_path: Optional[str],
    log_level: Optional[str],
) -> None:
    """Simple TODO CLI.

    \b
    Usage:
      todo add "task text"   Add a new task
      todo list               List tasks
      todo done <id>          Mark task done
      todo rm <id>            Remove task
    """
    try:
        config = TodoConfig.load(
            config_path,
            store_path=store_path,
            log_level=log_level,
        )
    except ValidationError as exc:
        _fail(f"invalid configuration: {exc.errors()[0]['msg']}")
    config.configure_logging()

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["store"] = TaskStore(config.store_path)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@cli.command(
    "add",
    context_settings=PASSTHROUGH_SETTINGS,
    add_help_option=False,
)
@click.argument("words", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
@_reports_errors
def add(obj: dict, words: tuple[str, ...]) -> None:
    """Add a new task. All words, including ones like --help, form the text."""
    if not words:
        raise UsageError('usage: todo add "task text"')
    task = obj["store"].add(" ".join(words))
    click.echo(f"added {task.id}: {task.text}")


@cli.command("list", context_settings=PASSTHROUGH_SETTINGS)
@click.argument("extra", nargs=-1, type=click.UNPROCESSED)
@click.option(
    "--json-output",
    "output_json",
    is_flag=True,
    default=False,
    help="Print the stored JSON array instead of a table.",
)
@click.pass_obj
@_reports_errors
def list_tasks(obj: dict, extra: tuple[str, ...], output_json: bool) -> None:
    """List tasks."""
    if extra:
        raise UsageError("usage: todo list")
    tasks = obj["store"].list_tasks()
    if output_json:
        click.echo(json.dumps([t.to_json_dict() for t in tasks], indent=2))
    else:
        _render_task_table(tasks)


@cli.command("done", context_settings=PASSTHROUGH_SETTINGS)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
@_reports_errors
def done(obj: dict, args: tuple[str, ...]) -> None:
    """Mark task done."""
    task_id = _single_id(args, "usage: todo done <id>")
    obj["store"].mark_done(task_id)
    click.echo(f"marked {task_id} done")


@cli.command("rm", context_settings=PASSTHROUGH_SETTINGS)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
@_reports_errors
def rm(obj: dict, args: tuple[str, ...]) -> None:
    """Remove task."""
    task_id = _single_id(args, "usage: todo rm <id>")
    obj["store"].remove(task_id)
    click.echo(f"removed {task_id}")


@cli.command("help", context_settings=PASSTHROUGH_SETTINGS)
@click.argument("extra", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def help_command(ctx: click.Context, extra: tuple[str, ...]) -> None:
    """Show usage text."""
    click.echo(ctx.find_root().get_help())


def _unknown_command(name: str) -> click.Command:
    """Build a throwaway command that reports *name* as unknown."""

    @click.command(
        name=name,
        context_settings=PASSTHROUGH_SETTINGS,
        add_help_option=False,
    )
    @click.argument("extra", nargs=-1, type=click.UNPROCESSED)
    @click.pass_context
    def unknown(ctx: click.Context, extra: tuple[str, ...]) -> None:
        click.echo(f"unknown command: {name}\n")
        click.echo(ctx.find_root().get_help())

    return unknown


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def parse_task_id(raw: str) -> int:
    """Parse a task id argument.

    Raises :class:`InvalidIDError` unless *raw* is a positive base-10 integer.
    """
    if not _ID_PATTERN.fullmatch(raw):
        raise InvalidIDError(raw)
    task_id = int(raw)
    if task_id <= 0:
        raise InvalidIDError(raw)
    return task_id


def _single_id(args: tuple[str, ...], usage: str) -> int:
    if len(args) != 1:
        raise UsageError(usage)
    return parse_task_id(args[0])


# ---------------------------------------------------------------------------
# Text rendering
# ---------------------------------------------------------------------------


def format_task_row(task: Task) -> str:
    """Format one table row: ``<id>  [<x or space>]   <text>``."""
    mark = "x" if task.done else " "
    return f"{task.id:<3}  [{mark}]   {task.text}"


def _render_task_table(tasks: list[Task]) -> None:
    if not tasks:
        click.echo("no tasks")
        return
    click.echo(TABLE_HEADER)
    click.echo(TABLE_SEPARATOR)
    for task in tasks:
        click.echo(format_task_row(task))
