from typing import Iterable

import click
import pytest

from taskcli.console import ConsoleLoop, task_line
from taskcli.state.store import MemoryTaskStore, StorageIOError, TaskNotFoundError
from taskcli.state.tasks import Task, TaskStatus


def script(monkeypatch, keys: Iterable[str], lines: Iterable[str] = ()) -> None:
    """Feed keypresses and typed lines; an exhausted script behaves like a closed stdin."""
    key_iter = iter(keys)
    line_iter = iter(lines)

    def fake_getchar(echo: bool = False) -> str:
        try:
            return next(key_iter)
        except StopIteration:
            raise EOFError from None

    def fake_input(prompt: str = "") -> str:
        try:
            return next(line_iter)
        except StopIteration:
            raise EOFError from None

    monkeypatch.setattr(click, "getchar", fake_getchar)
    monkeypatch.setattr("builtins.input", fake_input)


@pytest.fixture
def seeded() -> MemoryTaskStore:
    return MemoryTaskStore(
        [
            Task(id="task-a", status=TaskStatus.TODO, description="first"),
            Task(id="task-b", status=TaskStatus.BLOCKED, description="second"),
        ]
    )


def test_add_flow(monkeypatch) -> None:
    store = MemoryTaskStore()
    script(monkeypatch, ["a", "1", " ", "x", "q"], ["buy milk"])

    ConsoleLoop(store).run()

    [task] = store.load_tasks()
    assert task.description == "buy milk"
    assert task.status is TaskStatus.TODO


def test_keys_are_case_insensitive(monkeypatch) -> None:
    store = MemoryTaskStore()
    script(monkeypatch, ["A", "3", " ", "x", "Q"], [""])

    ConsoleLoop(store).run()

    [task] = store.load_tasks()
    assert task.status is TaskStatus.BLOCKED
    assert task.description == ""


def test_list_prints_tasks(monkeypatch, capsys, seeded) -> None:
    script(monkeypatch, ["l", " ", "x", "q"])

    ConsoleLoop(seeded).run()

    out = capsys.readouterr().out
    assert "first" in out
    assert "second" in out
    assert "(Blocked)" in out


def test_unsupported_key_then_resume(monkeypatch, capsys, seeded) -> None:
    script(monkeypatch, ["z", "r", "l", " ", "x", "q"])

    ConsoleLoop(seeded).run()

    captured = capsys.readouterr()
    assert "Key not supported: 'z'" in captured.err
    assert "There has been an error." in captured.out
    assert "second" in captured.out


def test_quit_from_error_prompt(monkeypatch, seeded) -> None:
    script(monkeypatch, ["z", "q", "a", "1"], ["never read"])

    ConsoleLoop(seeded).run()

    assert len(seeded.load_tasks()) == 2


def test_invalid_status_is_input_error(monkeypatch, capsys) -> None:
    store = MemoryTaskStore()
    script(monkeypatch, ["a", "9", "q"])

    ConsoleLoop(store).run()

    assert store.load_tasks() == []
    assert "Invalid status selection" in capsys.readouterr().err


def test_delete_by_number(monkeypatch, seeded) -> None:
    script(monkeypatch, ["d", "2", " ", "x", "q"])

    ConsoleLoop(seeded).run()

    assert [task.id for task in seeded.load_tasks()] == ["task-a"]


def test_delete_with_arrow_keys(monkeypatch, seeded) -> None:
    script(monkeypatch, ["d", "\x1b[B", "\r", " ", "x", "q"])

    ConsoleLoop(seeded).run()

    assert [task.id for task in seeded.load_tasks()] == ["task-a"]


def test_delete_cancelled(monkeypatch, seeded) -> None:
    script(monkeypatch, ["d", "q", "x", "q"])

    ConsoleLoop(seeded).run()

    assert len(seeded.load_tasks()) == 2


def test_delete_on_empty_store(monkeypatch, capsys) -> None:
    script(monkeypatch, ["d", "q"])

    ConsoleLoop(MemoryTaskStore()).run()

    assert "No tasks available" in capsys.readouterr().err


def test_update_flow(monkeypatch, seeded) -> None:
    script(monkeypatch, ["u", "1", "4", " ", "x", "q"], ["first, finished"])

    ConsoleLoop(seeded).run()

    first, second = seeded.load_tasks()
    assert first.id == "task-a"
    assert first.status is TaskStatus.DONE
    assert first.description == "first, finished"
    assert second.description == "second"


def test_update_keeps_description_on_empty_input(monkeypatch, seeded) -> None:
    script(monkeypatch, ["u", "2", "2", " ", "x", "q"], [""])

    ConsoleLoop(seeded).run()

    second = seeded.load_tasks()[1]
    assert second.status is TaskStatus.IN_PROGRESS
    assert second.description == "second"


def test_storage_failure_aborts_loop(monkeypatch) -> None:
    store = MemoryTaskStore(fail_writes=True)
    script(monkeypatch, ["a", "1", " ", "l"], ["x"])

    with pytest.raises(StorageIOError):
        ConsoleLoop(store).run()


def test_not_found_is_reported_and_loop_continues(monkeypatch, capsys, seeded) -> None:
    def vanished(task_id: str) -> None:
        raise TaskNotFoundError(task_id)

    monkeypatch.setattr(seeded, "remove_task", vanished)
    script(monkeypatch, ["d", "1", " ", "l", " ", "x", "q"])

    ConsoleLoop(seeded).run()

    captured = capsys.readouterr()
    assert "No task with id task-a found" in captured.err
    assert "second" in captured.out


def test_ctrl_c_exits(monkeypatch, capsys) -> None:
    def interrupt(echo: bool = False) -> str:
        raise KeyboardInterrupt

    monkeypatch.setattr(click, "getchar", interrupt)

    ConsoleLoop(MemoryTaskStore()).run()

    assert "Exiting task-cli." in capsys.readouterr().out


def test_closed_input_ends_loop(monkeypatch, capsys) -> None:
    script(monkeypatch, [])

    ConsoleLoop(MemoryTaskStore()).run()

    assert "end of input" in capsys.readouterr().err


def test_task_line() -> None:
    task = Task(id="abc", status=TaskStatus.IN_PROGRESS, description="write docs")

    assert task_line(task) == "◐ [abc] write docs (In Progress)"


def test_escape_cancels_picker_without_eating_next_key(monkeypatch, capsys, seeded) -> None:
    script(monkeypatch, ["d", "\x1b", "l", " ", "x", "q"])

    ConsoleLoop(seeded).run()

    assert len(seeded.load_tasks()) == 2
    captured = capsys.readouterr()
    # once in the picker, once more from List
    assert captured.out.count("[task-a] first (To Do)") == 2
    assert "Key not supported: ' '" not in captured.err


def test_unknown_escape_sequence_is_ignored_in_picker(monkeypatch, seeded) -> None:
    # Right arrow neither selects nor cancels.
    script(monkeypatch, ["d", "\x1b[C", "2", " ", "x", "q"])

    ConsoleLoop(seeded).run()

    assert [task.id for task in seeded.load_tasks()] == ["task-a"]


@pytest.fixture
def twelve() -> MemoryTaskStore:
    return MemoryTaskStore([Task(id=f"task-{n}", status=TaskStatus.TODO, description=f"t{n}") for n in range(1, 13)])


def test_two_digit_selection(monkeypatch, twelve) -> None:
    script(monkeypatch, ["d", "1", "2", " ", "x", "q"])

    ConsoleLoop(twelve).run()

    ids = [task.id for task in twelve.load_tasks()]
    assert "task-12" not in ids
    assert len(ids) == 11


def test_digit_prefix_confirmed_with_enter(monkeypatch, twelve) -> None:
    script(monkeypatch, ["d", "1", "\r", " ", "x", "q"])

    ConsoleLoop(twelve).run()

    ids = [task.id for task in twelve.load_tasks()]
    assert ids[0] == "task-2"
    assert len(ids) == 11


def test_out_of_range_digits_restart_the_number(monkeypatch, twelve) -> None:
    # "1" then "5" -> 15 is too large, so 5 is taken on its own and is final.
    script(monkeypatch, ["d", "1", "5", " ", "x", "q"])

    ConsoleLoop(twelve).run()

    assert "task-5" not in [task.id for task in twelve.load_tasks()]
