"""Task value types."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Dict


class TaskStatus(Enum):
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    BLOCKED = "blocked"
    DONE = "done"

    @property
    def label(self) -> str:
        """Human readable name."""
        return STATUS_LABELS[self]

    @classmethod
    def parse(cls, text: str) -> "TaskStatus":
        """Parse a status token case-insensitively.

        Accepts the persisted tokens ("in-progress") as well as the loose
        spellings people type ("In Progress", "in_progress", "InProgress").
        """
        normalized = text.strip().lower().replace("_", "-").replace(" ", "-")
        for status in cls:
            if normalized in (status.value, status.value.replace("-", "")):
                return status
        raise ValueError(f"Unknown task status: {text!r}")


STATUS_LABELS = {
    TaskStatus.TODO: "To Do",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.BLOCKED: "Blocked",
    TaskStatus.DONE: "Done",
}

# Numeric menu used when picking a status with a single keypress.
STATUS_MENU = {
    "1": TaskStatus.TODO,
    "2": TaskStatus.IN_PROGRESS,
    "3": TaskStatus.BLOCKED,
    "4": TaskStatus.DONE,
}


@dataclass
class Task:
    """Represents a single task."""

    id: str
    status: TaskStatus
    description: str

    @classmethod
    def new(cls, status: TaskStatus, description: str) -> "Task":
        """Create a task with a freshly generated id."""
        return cls(id=str(uuid.uuid4()), status=status, description=description)

    def to_dict(self) -> Dict[str, str]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "status": self.status.value,
            "description": self.description,
        }

    @staticmethod
    def from_dict(data: Dict) -> "Task":
        """Create from dictionary.

        Raises KeyError for missing fields and ValueError for an unknown
        status or a non-string field.
        """
        task_id = data["id"]
        description = data["description"]
        if not isinstance(task_id, str) or not isinstance(description, str):
            raise ValueError("Task id and description must be strings")
        return Task(id=task_id, status=TaskStatus(data["status"]), description=description)
