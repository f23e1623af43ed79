# tests/test_shell.py

from pathlib import Path

from onelist import core
from onelist.models import Status, TaskList
from onelist.shell import TaskShell, render_list
from onelist.storage import create_list, load_list

from .conftest import SECOND, ScriptedInput


def _shell(task_dir: Path, lines, output):
    path = create_list(str(task_dir), "Groceries")
    shell = TaskShell(path, load_list(path), read_line=ScriptedInput(lines), write=output)
    return path, shell


def test_render_list_markers(clock) -> None:
    task_list = TaskList(title="Groceries")
    core.add_task(task_list, "Milk", now=clock.now)
    core.add_task(task_list, "Bread", now=clock.now)
    core.add_task(task_list, "Eggs", now=clock.now)
    core.toggle_timer(task_list, 2, now=clock.advance(1))
    core.complete_task(task_list, 3, now=clock.advance(1))
    core.set_comment(task_list, 1, "oat")

    lines = render_list(task_list, now=clock.advance(64))
    assert lines[0] == "📋 Groceries"
    assert lines[1] == "=" * len("Groceries    ")
    assert lines[2] == "  1. [ ] Milk"
    assert lines[3] == "       💬 oat"
    assert lines[4] == "  2. [>] Bread  (running, 1m 5s)"
    assert lines[5] == "  3. [x] Eggs  (done, 0s)"

    hidden = render_list(task_list, show_done=False, now=clock.now)
    assert not any("Eggs" in line for line in hidden)


def test_render_empty_list() -> None:
    assert render_list(TaskList(title="x"))[-1] == "(no tasks yet)"


def test_shell_session_saves_each_change(task_dir: Path, output) -> None:
    path, shell = _shell(task_dir, ["add Milk", "add Bread", "1", "2", "done 2", "q"], output)
    shell.run()

    saved = load_list(path)
    milk, bread = saved.items
    assert milk.status is Status.PAUSED
    assert len(milk.sessions) == 1
    assert bread.status is Status.DONE
    assert len(bread.sessions) == 1
    assert "✨ Added: Milk" in output.lines


def test_shell_reports_errors_and_continues(task_dir: Path, output) -> None:
    path, shell = _shell(task_dir, ["add   ", "rm 3", "frobnicate", "done x", "add Milk"], output)
    shell.run()
    assert "❌ Task title cannot be empty" in output.lines
    assert "❌ Invalid task number 3. The list is empty" in output.lines
    assert "❌ Enter a number, 'add <task>', 'help' or 'q'" in output.lines
    assert "❌ 'x' is not a task number" in output.lines
    assert [t.title for t in load_list(path).items] == ["Milk"]


def test_shell_toggle_done_task(task_dir: Path, output) -> None:
    _, shell = _shell(task_dir, ["add Milk", "done 1", "done 1", "1"], output)
    shell.run()
    assert "Already done." in output.lines
    assert "❌ Task already done: Milk" in output.lines


def test_shell_edit_note_show_clean(task_dir: Path, output) -> None:
    lines = ["add Milk", "add Eggs", "edit 1 Oat milk", "note 1 barista", "show 1", "done 2", "clean"]
    path, shell = _shell(task_dir, lines, output)
    shell.run()
    saved = load_list(path)
    assert len(saved.items) == 1
    task = saved.items[0]
    assert task.title == "Oat milk"
    assert task.comment == "barista"
    assert task.comment_displayed is False
    assert "Removed 1 done task(s)." in output.lines


def test_shell_help_does_not_save(task_dir: Path, output) -> None:
    path, shell = _shell(task_dir, ["help", "quit"], output)
    before = load_list(path).updated_at
    shell.run()
    assert "Commands:" in output.lines
    assert load_list(path).updated_at == before


def test_session_time_is_recorded(task_dir: Path, output, monkeypatch, clock) -> None:
    monkeypatch.setattr("onelist.core.now_ns", lambda: clock.now)
    path, shell = _shell(task_dir, [], output)
    shell.handle("add Milk")
    shell.handle("1")
    clock.advance(125)
    shell.handle("1")
    task = shell.task_list.items[0]
    assert task.total_duration == 125 * SECOND
    assert "⏸️  Paused: Milk (2m 5s)" in output.lines


def test_shell_rejects_non_decimal_digits(task_dir: Path, output) -> None:
    path, shell = _shell(task_dir, ["add Milk", "²", "done ²", "1"], output)
    shell.run()
    assert "❌ Enter a number, 'add <task>', 'help' or 'q'" in output.lines
    assert "❌ '²' is not a task number" in output.lines
    assert load_list(path).items[0].status is Status.ACTIVE
