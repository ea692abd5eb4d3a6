"""Interactive single-keypress console mode."""

from __future__ import annotations

from typing import Iterable, List, Optional

import click

from .commands import AddCommand, Command, DeleteCommand, ListCommand, UpdateCommand, run_command
from .state.store import TaskNotFoundError, TaskStore
from .state.tasks import STATUS_MENU, Task, TaskStatus
from .utils.logger import Logger


STATUS_SYMBOLS = {
    TaskStatus.TODO: "○",
    TaskStatus.IN_PROGRESS: "◐",
    TaskStatus.BLOCKED: "⚠",
    TaskStatus.DONE: "●",
}


class KeyInputError(Exception):
    """Raised when a keypress or line cannot be turned into a command."""


def task_line(task: Task) -> str:
    """Format a single task line."""
    symbol = STATUS_SYMBOLS.get(task.status, "?")
    return f"{symbol} [{task.id}] {task.description} ({task.status.label})"


def color(text: str, style: str) -> str:
    palette = {
        "primary": "bright_green",
        "accent": "bright_cyan",
        "muted": "bright_black",
        "warning": "bright_yellow",
    }
    return click.style(text, fg=palette.get(style, "white"))


def bold(text: str) -> str:
    return click.style(text, bold=True)


def _extend_number(typed: str, digit: str, count: int) -> str:
    """Append a digit to a typed 1-based choice, restarting when it runs past count."""
    for candidate in (typed + digit, digit):
        if 1 <= int(candidate) <= count:
            return candidate
    return ""


class ConsoleLoop:
    """Prompt for a key, run the matching command, recover from bad input.

    The loop ends when the user presses Q at the error prompt or on Ctrl+C.
    Storage failures other than a missing task propagate to the caller.
    """

    def __init__(self, store: TaskStore, logger: Optional[Logger] = None) -> None:
        self.store = store
        self.logger = logger

    def run(self) -> None:
        while True:
            try:
                command = self._read_command()
            except KeyboardInterrupt:
                click.echo("\nExiting task-cli.")
                return
            except KeyInputError as exc:
                if not self._recover(exc):
                    return
                continue

            if command is None:
                continue

            try:
                self._execute(command)
            except TaskNotFoundError as exc:
                click.echo(color(str(exc), "warning"), err=True)

            try:
                self._wait_for_key()
            except KeyboardInterrupt:
                click.echo("\nExiting task-cli.")
                return
            except KeyInputError:
                # A broken input stream is picked up by the next menu read.
                continue

    def _execute(self, command: Command) -> None:
        tasks = run_command(command, self.store, self.logger)
        if tasks is not None:
            self._print_tasks(tasks)

    def _recover(self, error: Exception) -> bool:
        """Report an input error. Returns False when the loop should end."""
        click.echo(color("There has been an error.", "warning"))
        click.echo(str(error), err=True)
        click.echo("Press Q to quit. Or any key to restart")
        try:
            key = self._read_key()
        except KeyInputError as exc:
            click.echo(str(exc), err=True)
            return False
        except KeyboardInterrupt:
            return False
        return key.lower() != "q"

    # ------------------------------------------------------------------ #
    # Command resolution
    # ------------------------------------------------------------------ #
    def _read_command(self) -> Optional[Command]:
        """Show the menu and resolve one keypress. None means cancelled."""
        click.clear()
        self._present_commands_prompt()
        key = self._read_key().lower()

        if key == "a":
            return self._make_add_command()
        if key == "l":
            return ListCommand()
        if key == "d":
            return self._make_delete_command()
        if key == "u":
            return self._make_update_command()
        raise KeyInputError(f"Key not supported: {key!r}")

    def _make_add_command(self) -> AddCommand:
        click.clear()
        self._ask_for_status()
        status = self._read_status()

        click.clear()
        description = self._read_line("Task description: ")
        return AddCommand(status=status, description=description)

    def _make_delete_command(self) -> Optional[DeleteCommand]:
        task = self._select_task("delete")
        if task is None:
            return None
        return DeleteCommand(id=task.id)

    def _make_update_command(self) -> Optional[UpdateCommand]:
        task = self._select_task("update")
        if task is None:
            return None

        click.clear()
        click.echo(task_line(task))
        click.echo()
        self._ask_for_status()
        status = self._read_status()

        click.echo()
        description = self._read_line(f"New description [{task.description}]: ")
        return UpdateCommand(id=task.id, status=status, description=description or task.description)

    def _select_task(self, action: str) -> Optional[Task]:
        tasks = self.store.load_tasks()
        if not tasks:
            raise KeyInputError("No tasks available")

        click.clear()
        click.echo(bold(f"Select a task to {action}:"))
        click.echo(color("Use up/down and Enter, or type its number (Enter confirms a prefix). (q to cancel)", "muted"))
        choice = self._prompt_choice([task_line(task) for task in tasks])
        if choice is None:
            return None
        return tasks[choice]

    def _read_status(self) -> TaskStatus:
        key = self._read_key()
        status = STATUS_MENU.get(key)
        if status is None:
            raise KeyInputError(f"Invalid status selection: {key!r}")
        return status

    def _prompt_choice(self, options: Iterable[str]) -> Optional[int]:
        """Prompt user for a choice with arrow or numeric input."""
        options_list = list(options)
        index = 0
        typed = ""
        self._render_options(options_list, index)

        while True:
            key = self._read_key()

            if key == "up":
                typed = ""
                index = (index - 1) % len(options_list)
            elif key == "down":
                typed = ""
                index = (index + 1) % len(options_list)
            elif key == "enter":
                return index
            elif key.isdigit():
                typed = _extend_number(typed, key, len(options_list))
                if not typed:
                    continue
                num = int(typed)
                # No further digit can extend the number past the list.
                if num * 10 > len(options_list):
                    return num - 1
                index = num - 1
            elif key.lower() in ("q", "escape"):
                return None
            else:
                continue

            self._move_cursor_up(len(options_list))
            self._render_options(options_list, index)

    # ------------------------------------------------------------------ #
    # Input
    # ------------------------------------------------------------------ #
    def _getchar(self) -> str:
        # click.getchar switches the terminal to raw mode for this read only.
        try:
            char = click.getchar(echo=False)
        except (EOFError, OSError) as exc:
            raise KeyInputError(f"Unable to read key: {str(exc) or 'end of input'}") from exc
        if not char:
            raise KeyInputError("Unable to read key: end of input")
        return char

    def _read_key(self) -> str:
        """Read a single keypress, translating arrows and enter."""
        char = self._getchar()

        # A whole escape sequence arrives in one read; a lone ESC is the Esc key.
        if char == "\x1b":
            return "escape"
        if char.startswith("\x1b["):
            if char[2:3] == "A":
                return "up"
            if char[2:3] == "B":
                return "down"
            return char

        if char in ("\r", "\n"):
            return "enter"

        return char

    def _read_line(self, prompt: str) -> str:
        click.echo(prompt, nl=False)
        try:
            return input()
        except EOFError as exc:
            raise KeyInputError("Unable to read line: end of input") from exc

    def _wait_for_key(self) -> None:
        click.echo(color("\nPress any key to continue...", "muted"))
        self._getchar()

    # ------------------------------------------------------------------ #
    # Rendering
    # ------------------------------------------------------------------ #
    def _present_commands_prompt(self) -> None:
        click.echo(bold(color("Please enter the command initial letter to execute:", "primary")))
        click.echo()
        click.echo("  [A]dd     - Add a new task with status and description")
        click.echo("  [D]elete  - Delete an existing task")
        click.echo("  [U]pdate  - Update a task")
        click.echo("  [L]ist    - List all tasks")
        click.echo()
        self._print_dashed_line()

    def _ask_for_status(self) -> None:
        click.echo(bold("Select the status for this task:"))
        for key, status in STATUS_MENU.items():
            click.echo(f"  ({key}) {status.label}")
        click.echo()
        self._print_dashed_line()

    def _print_tasks(self, tasks: List[Task]) -> None:
        if not tasks:
            click.echo("No tasks found.")
            return

        for task in tasks:
            click.echo(task_line(task))

    def _render_options(self, options: List[str], index: int) -> None:
        for i, option in enumerate(options):
            prefix = ">" if i == index else " "
            line = f"{prefix} {i + 1}) {option}"
            if i == index:
                line = bold(color(line, "primary"))
            click.echo(f"\r\033[K{line}")

    @staticmethod
    def _move_cursor_up(lines: int) -> None:
        if lines > 0:
            click.echo(f"\033[{lines}A", nl=False)

    @staticmethod
    def _print_dashed_line() -> None:
        click.echo(color("-" * 44, "muted"))


def run_console(store: TaskStore, logger: Optional[Logger] = None) -> None:
    """Helper to run the interactive loop."""
    ConsoleLoop(store, logger).run()
