"""Command values and their dispatch against a task store."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Union

from .state.store import TaskStore, TaskStoreError
from .state.tasks import Task, TaskStatus
from .utils.logger import Logger


@dataclass(frozen=True)
class AddCommand:
    status: TaskStatus
    description: str


@dataclass(frozen=True)
class DeleteCommand:
    id: str


@dataclass(frozen=True)
class UpdateCommand:
    id: str
    status: TaskStatus
    description: str


@dataclass(frozen=True)
class ListCommand:
    pass


Command = Union[AddCommand, DeleteCommand, UpdateCommand, ListCommand]


def command_name(command: Command) -> str:
    """Short lowercase name used in logs ("add", "delete", ...)."""
    return type(command).__name__[: -len("Command")].lower()


def run_command(command: Command, store: TaskStore, logger: Optional[Logger] = None) -> Optional[List[Task]]:
    """
    Execute a single command against the store.

    Returns the task list for ListCommand and None for mutating commands.
    Store errors propagate to the caller after being logged.
    """
    try:
        return _dispatch(command, store, logger)
    except TaskStoreError as exc:
        if logger:
            logger.log_command_failed(command_name(command), str(exc))
        raise


def _dispatch(command: Command, store: TaskStore, logger: Optional[Logger]) -> Optional[List[Task]]:
    if isinstance(command, AddCommand):
        task = Task.new(command.status, command.description)
        store.write_task(task)
        if logger:
            logger.log_task_added(task)
        return None

    if isinstance(command, DeleteCommand):
        store.remove_task(command.id)
        if logger:
            logger.log_task_removed(command.id)
        return None

    if isinstance(command, UpdateCommand):
        store.update_task(command.id, command.status, command.description)
        if logger:
            logger.log_task_updated(command.id, command.status.value)
        return None

    if isinstance(command, ListCommand):
        return store.load_tasks()

    raise TypeError(f"Unsupported command: {command!r}")
