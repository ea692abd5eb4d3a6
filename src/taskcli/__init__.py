"""task-cli - Personal task tracker."""

__version__ = "0.1.0"
__author__ = "task-cli Contributors"

from .config import Config
from .state.store import FileTaskStore, MemoryTaskStore, TaskStore
from .state.tasks import Task, TaskStatus

__all__ = ["Config", "FileTaskStore", "MemoryTaskStore", "TaskStore", "Task", "TaskStatus"]
