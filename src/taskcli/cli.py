"""task-cli entry point."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .commands import AddCommand, Command, DeleteCommand, ListCommand, UpdateCommand, run_command
from .config import Config
from .console import run_console, task_line
from .state.store import FileTaskStore, TaskStoreError
from .state.tasks import TaskStatus
from .utils.logger import Logger


class StatusType(click.ParamType):
    """Task status accepting any spelling TaskStatus.parse understands."""

    name = "status"

    def get_metavar(self, param, *args) -> str:
        return "[" + "|".join(status.value for status in TaskStatus) + "]"

    def convert(self, value, param, ctx) -> TaskStatus:
        if isinstance(value, TaskStatus):
            return value
        try:
            return TaskStatus.parse(value)
        except ValueError as exc:
            self.fail(str(exc), param, ctx)


STATUS = StatusType()


@dataclass
class AppContext:
    store: FileTaskStore
    logger: Optional[Logger]


def _build_context(data_dir: Optional[Path], strict: Optional[bool]) -> AppContext:
    config = Config()
    directory = data_dir or config.data_dir()
    if strict is None:
        strict = config.get_bool("storage.strict_load")
    store = FileTaskStore(directory, file_name=config.get("storage.file_name", "tasks.json"), strict=strict)
    logger = Logger(directory) if config.get_bool("general.event_log", True) else None
    return AppContext(store=store, logger=logger)


def _execute(app: AppContext, command: Command):
    try:
        return run_command(command, app.store, app.logger)
    except TaskStoreError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group(invoke_without_command=True)
@click.version_option(version=__version__)
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding tasks.json (default: per-user data directory)",
)
@click.option(
    "--strict/--no-strict",
    default=None,
    help="Fail on an unreadable tasks file instead of treating it as empty",
)
@click.pass_context
def main(ctx: click.Context, data_dir: Optional[Path], strict: Optional[bool]) -> None:
    """Personal task tracker. Run without a command for interactive mode."""
    try:
        app = _build_context(data_dir, strict)
    except (OSError, ValueError) as exc:
        raise click.ClickException(f"Unable to load configuration: {exc}") from exc
    ctx.obj = app

    if ctx.invoked_subcommand is None:
        try:
            run_console(app.store, app.logger)
        except TaskStoreError as exc:
            raise click.ClickException(str(exc)) from exc


@main.command()
@click.option("-s", "--status", type=STATUS, required=True, help="Task status")
@click.option("-d", "--description", required=True, help="Task description")
@click.pass_obj
def add(app: AppContext, status: TaskStatus, description: str) -> None:
    """Add a new task."""
    _execute(app, AddCommand(status=status, description=description))


@main.command()
@click.option("--id", "task_id", required=True, help="Id of the task to delete")
@click.pass_obj
def delete(app: AppContext, task_id: str) -> None:
    """Delete a task."""
    _execute(app, DeleteCommand(id=task_id))


@main.command()
@click.option("--id", "task_id", required=True, help="Id of the task to update")
@click.option("-s", "--status", type=STATUS, required=True, help="New status")
@click.option("-d", "--description", required=True, help="New description")
@click.pass_obj
def update(app: AppContext, task_id: str, status: TaskStatus, description: str) -> None:
    """Replace the status and description of a task."""
    _execute(app, UpdateCommand(id=task_id, status=status, description=description))


@main.command(name="list")
@click.option("--json", "as_json", is_flag=True, help="Print the raw JSON array")
@click.pass_obj
def list_tasks(app: AppContext, as_json: bool) -> None:
    """List all tasks."""
    tasks = _execute(app, ListCommand()) or []
    if as_json:
        click.echo(json.dumps([task.to_dict() for task in tasks], indent=2))
        return
    if not tasks:
        click.echo("No tasks found.")
        return
    for task in tasks:
        click.echo(task_line(task))


if __name__ == "__main__":
    main()
