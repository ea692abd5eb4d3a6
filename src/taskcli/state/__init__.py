"""State management modules."""

from .persistence import Persistence
from .store import (
    FileTaskStore,
    MalformedStoreError,
    MemoryTaskStore,
    StorageIOError,
    TaskNotFoundError,
    TaskStore,
    TaskStoreError,
)
from .tasks import STATUS_MENU, Task, TaskStatus

__all__ = [
    "Persistence",
    "FileTaskStore",
    "MemoryTaskStore",
    "TaskStore",
    "TaskStoreError",
    "TaskNotFoundError",
    "StorageIOError",
    "MalformedStoreError",
    "STATUS_MENU",
    "Task",
    "TaskStatus",
]
