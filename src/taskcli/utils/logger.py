"""Task event log."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import click

from ..state.tasks import Task


class Logger:
    """Minimal logger that appends task events as JSON lines."""

    def __init__(self, data_dir: Path) -> None:
        self.logs_dir = Path(data_dir) / "logs"
        self.log_file = self.logs_dir / "tasks.log"

    def _write(self, payload: dict) -> None:
        # The event log is optional; a write failure never changes a command's outcome.
        entry = {"timestamp": datetime.now(timezone.utc).isoformat(), **payload}
        try:
            self.logs_dir.mkdir(parents=True, exist_ok=True)
            with self.log_file.open("a", encoding="utf-8") as fp:
                fp.write(json.dumps(entry) + "\n")
        except OSError as exc:
            click.echo(f"Warning: unable to write event log {self.log_file}: {exc}", err=True)

    def log_task_added(self, task: Task) -> None:
        self._write({"event": "added", "task_id": task.id, "status": task.status.value})

    def log_task_updated(self, task_id: str, status: str) -> None:
        self._write({"event": "updated", "task_id": task_id, "status": status})

    def log_task_removed(self, task_id: str) -> None:
        self._write({"event": "removed", "task_id": task_id})

    def log_command_failed(self, command: str, reason: str) -> None:
        self._write({"event": "failed", "command": command, "reason": reason})
