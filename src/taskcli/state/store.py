"""Task storage: the store protocol plus file-backed and in-memory stores.

Every mutation is a full read-modify-write of the whole collection. There is
no locking; a single process is assumed to own the backing file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Protocol, Sequence

from .persistence import Persistence
from .tasks import Task, TaskStatus

DEFAULT_FILE_NAME = "tasks.json"


class TaskStoreError(Exception):
    """Base exception for task storage errors."""


class TaskNotFoundError(TaskStoreError):
    """Raised when no task matches the requested id."""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"No task with id {task_id} found")
        self.task_id = task_id


class StorageIOError(TaskStoreError):
    """Raised when the backing store cannot be read or written."""


class MalformedStoreError(TaskStoreError):
    """Raised in strict mode when the backing file cannot be decoded."""


class TaskStore(Protocol):
    """Capability interface shared by every task store."""

    def load_tasks(self) -> List[Task]:
        ...

    def write_task(self, task: Task) -> None:
        ...

    def remove_task(self, task_id: str) -> None:
        ...

    def update_task(self, task_id: str, status: TaskStatus, description: str) -> None:
        ...


def _decode(data: object) -> List[Task]:
    if not isinstance(data, list):
        raise ValueError("Task file must contain a JSON array")
    tasks = []
    for entry in data:
        if not isinstance(entry, dict):
            raise ValueError("Task entries must be JSON objects")
        tasks.append(Task.from_dict(entry))
    return tasks


def _index_of(tasks: Sequence[Task], task_id: str) -> int:
    for index, task in enumerate(tasks):
        if task.id == task_id:
            return index
    raise TaskNotFoundError(task_id)


class FileTaskStore:
    """Stores the task collection as a JSON array in a single file."""

    def __init__(self, data_dir: Path, file_name: str = DEFAULT_FILE_NAME, strict: bool = False) -> None:
        self.data_dir = Path(data_dir)
        self.tasks_file = self.data_dir / file_name
        self.strict = strict

    def load_tasks(self) -> List[Task]:
        """Load every task in file order.

        A missing file is an empty collection. Content that does not decode
        is also treated as empty unless the store is strict.
        """
        self._ensure_data_dir()
        if not self.tasks_file.exists():
            return []

        try:
            data = Persistence.read_json(self.tasks_file)
        except OSError as exc:
            raise StorageIOError(f"Unable to read {self.tasks_file}: {exc}") from exc
        except ValueError as exc:
            return self._malformed(exc)

        try:
            return _decode(data)
        except (KeyError, TypeError, ValueError) as exc:
            return self._malformed(exc)

    def write_task(self, task: Task) -> None:
        """Append a task and rewrite the file."""
        tasks = self.load_tasks()
        tasks.append(task)
        self._save(tasks)

    def remove_task(self, task_id: str) -> None:
        """Delete the task with the given id and rewrite the file."""
        tasks = self.load_tasks()
        del tasks[_index_of(tasks, task_id)]
        self._save(tasks)

    def update_task(self, task_id: str, status: TaskStatus, description: str) -> None:
        """Replace status and description of a task, keeping its position."""
        tasks = self.load_tasks()
        task = tasks[_index_of(tasks, task_id)]
        task.status = status
        task.description = description
        self._save(tasks)

    def _malformed(self, exc: Exception) -> List[Task]:
        if self.strict:
            raise MalformedStoreError(f"Unable to decode {self.tasks_file}: {exc}") from exc
        return []

    def _ensure_data_dir(self) -> None:
        try:
            Persistence.ensure_dir(self.data_dir)
        except OSError as exc:
            raise StorageIOError(f"Unable to create data directory {self.data_dir}: {exc}") from exc

    def _save(self, tasks: List[Task]) -> None:
        try:
            Persistence.write_json(self.tasks_file, [task.to_dict() for task in tasks])
        except OSError as exc:
            raise StorageIOError(f"Unable to write {self.tasks_file}: {exc}") from exc


class MemoryTaskStore:
    """In-memory store, mainly for tests.

    Tasks are kept serialized so callers never share state with the store.
    """

    def __init__(self, tasks: Optional[Sequence[Task]] = None, fail_writes: bool = False) -> None:
        self._entries: List[Dict[str, str]] = [task.to_dict() for task in tasks or []]
        self.fail_writes = fail_writes

    def load_tasks(self) -> List[Task]:
        return [Task.from_dict(entry) for entry in self._entries]

    def write_task(self, task: Task) -> None:
        tasks = self.load_tasks()
        tasks.append(task)
        self._save(tasks)

    def remove_task(self, task_id: str) -> None:
        tasks = self.load_tasks()
        del tasks[_index_of(tasks, task_id)]
        self._save(tasks)

    def update_task(self, task_id: str, status: TaskStatus, description: str) -> None:
        tasks = self.load_tasks()
        task = tasks[_index_of(tasks, task_id)]
        task.status = status
        task.description = description
        self._save(tasks)

    def _save(self, tasks: List[Task]) -> None:
        if self.fail_writes:
            raise StorageIOError("Simulated write failure")
        self._entries = [task.to_dict() for task in tasks]
