# tests/test_core.py

import random
import time

import pytest

from onelist import core
from onelist.errors import EmptyTitleError, IndexOutOfRangeError, TaskAlreadyDoneError
from onelist.models import Session, Status, Task, TaskList

from .conftest import SECOND


def _check_invariants(task_list: TaskList) -> None:
    running = [t for t in task_list.items if t.status is Status.ACTIVE]
    assert len(running) <= 1
    for t in task_list.items:
        assert t.total_duration == sum(s.duration for s in t.sessions)
        assert (t.active_start_time is not None) == (t.status is Status.ACTIVE)
        assert (t.completed_at is not None) == (t.status is Status.DONE)
        if t.status is Status.PAUSED:
            assert t.sessions


@pytest.mark.parametrize(
    "ns, expected",
    [
        (0, "0s"),
        (999_999_999, "0s"),
        (SECOND, "1s"),
        (59 * SECOND, "59s"),
        (60 * SECOND, "1m 0s"),
        (61 * SECOND + 500_000_000, "1m 1s"),
        (3599 * SECOND, "59m 59s"),
        (3600 * SECOND, "1h 0m 0s"),
        (26 * 3600 * SECOND + 62 * SECOND, "26h 1m 2s"),
    ],
)
def test_format_duration(ns: int, expected: str) -> None:
    assert core.format_duration(ns) == expected


def test_add_task_appends_pending(empty_list, clock) -> None:
    task = core.add_task(empty_list, "  Milk  ", now=clock.now)
    assert empty_list.items == [task]
    assert task.title == "Milk"
    assert task.status is Status.PENDING
    assert task.id == clock.now
    assert task.created_at == clock.now
    assert task.sessions == []
    assert task.total_duration == 0
    assert task.active_start_time is None
    assert task.completed_at is None


@pytest.mark.parametrize("title", ["", "   ", "\t\n"])
def test_add_task_rejects_blank_title(empty_list, title: str) -> None:
    with pytest.raises(EmptyTitleError):
        core.add_task(empty_list, title)
    assert empty_list.items == []


def test_remove_task_keeps_order(empty_list) -> None:
    for title in ("a", "b", "c"):
        core.add_task(empty_list, title)
    removed = core.remove_task(empty_list, 2)
    assert removed.title == "b"
    assert [t.title for t in empty_list.items] == ["a", "c"]


def test_remove_only_task_leaves_empty_list(empty_list) -> None:
    core.add_task(empty_list, "Milk")
    core.remove_task(empty_list, 1)
    assert empty_list.items == []


@pytest.mark.parametrize("index", [0, 2, -1])
def test_remove_task_out_of_range_leaves_list(empty_list, index: int) -> None:
    core.add_task(empty_list, "Milk")
    before = list(empty_list.items)
    with pytest.raises(IndexOutOfRangeError):
        core.remove_task(empty_list, index)
    assert empty_list.items == before


def test_toggle_starts_and_pauses(empty_list, clock) -> None:
    core.add_task(empty_list, "Milk", now=clock.now)
    start = clock.advance(1)
    task = core.toggle_timer(empty_list, 1, now=start)
    assert task.status is Status.ACTIVE
    assert task.active_start_time == start

    end = clock.advance(90)
    core.toggle_timer(empty_list, 1, now=end)
    assert task.status is Status.PAUSED
    assert task.active_start_time is None
    assert task.sessions == [Session(start, end, 90 * SECOND)]
    assert task.total_duration == 90 * SECOND
    _check_invariants(empty_list)


def test_toggle_accumulates_sessions(empty_list, clock) -> None:
    core.add_task(empty_list, "Milk", now=clock.now)
    for seconds in (10, 20, 30):
        core.toggle_timer(empty_list, 1, now=clock.advance(5))
        core.toggle_timer(empty_list, 1, now=clock.advance(seconds))
    task = empty_list.items[0]
    assert [s.duration for s in task.sessions] == [10 * SECOND, 20 * SECOND, 30 * SECOND]
    assert task.total_duration == 60 * SECOND


def test_toggle_wall_clock_elapsed(empty_list) -> None:
    core.add_task(empty_list, "Milk")
    before = time.time_ns()
    core.toggle_timer(empty_list, 1)
    time.sleep(0.02)
    core.toggle_timer(empty_list, 1)
    after = time.time_ns()
    task = empty_list.items[0]
    assert task.status is Status.PAUSED
    assert len(task.sessions) == 1
    assert 20_000_000 <= task.total_duration <= after - before


def test_starting_a_task_pauses_the_running_one(empty_list, clock) -> None:
    core.add_task(empty_list, "a", now=clock.now)
    core.add_task(empty_list, "b", now=clock.now + 1)
    core.toggle_timer(empty_list, 1, now=clock.advance(1))
    switch = clock.advance(30)
    core.toggle_timer(empty_list, 2, now=switch)

    a, b = empty_list.items
    assert a.status is Status.PAUSED
    assert a.total_duration == 30 * SECOND
    assert a.sessions[-1].end_time == switch
    assert b.status is Status.ACTIVE
    assert b.active_start_time == switch
    _check_invariants(empty_list)


def test_toggle_done_task_fails(empty_list, clock) -> None:
    core.add_task(empty_list, "Milk", now=clock.now)
    core.complete_task(empty_list, 1, now=clock.advance(1))
    with pytest.raises(TaskAlreadyDoneError):
        core.toggle_timer(empty_list, 1, now=clock.advance(1))
    assert empty_list.items[0].status is Status.DONE


def test_toggle_out_of_range(empty_list) -> None:
    with pytest.raises(IndexOutOfRangeError):
        core.toggle_timer(empty_list, 1)


def test_complete_running_task_closes_session(empty_list, clock) -> None:
    core.add_task(empty_list, "Milk", now=clock.now)
    core.toggle_timer(empty_list, 1, now=clock.advance(1))
    core.toggle_timer(empty_list, 1, now=clock.advance(10))
    core.toggle_timer(empty_list, 1, now=clock.advance(1))
    task = empty_list.items[0]
    sessions_before = len(task.sessions)
    total_before = task.total_duration

    done_at = clock.advance(15)
    core.complete_task(empty_list, 1, now=done_at)
    assert task.status is Status.DONE
    assert task.completed_at == done_at
    assert len(task.sessions) == sessions_before + 1
    assert task.total_duration == total_before + task.sessions[-1].duration
    assert task.sessions[-1].duration == 15 * SECOND
    assert task.active_start_time is None


def test_complete_pending_task_has_no_session(empty_list, clock) -> None:
    core.add_task(empty_list, "Milk", now=clock.now)
    task = core.complete_task(empty_list, 1, now=clock.advance(1))
    assert task.status is Status.DONE
    assert task.sessions == []
    assert task.total_duration == 0


def test_complete_is_idempotent(empty_list, clock) -> None:
    core.add_task(empty_list, "Milk", now=clock.now)
    first = clock.advance(1)
    core.complete_task(empty_list, 1, now=first)
    core.complete_task(empty_list, 1, now=clock.advance(100))
    assert empty_list.items[0].completed_at == first


def test_groceries_scenario(empty_list, clock) -> None:
    task = core.add_task(empty_list, "Milk", now=clock.now)
    assert task.status is Status.PENDING

    started = clock.advance(2)
    core.toggle_timer(empty_list, 1, now=started)
    assert task.status is Status.ACTIVE
    assert task.active_start_time == started

    core.toggle_timer(empty_list, 1, now=clock.advance(42))
    assert task.status is Status.PAUSED
    assert len(task.sessions) == 1
    assert task.total_duration == 42 * SECOND

    done_at = clock.advance(300)
    core.complete_task(empty_list, 1, now=done_at)
    assert task.status is Status.DONE
    assert task.completed_at == done_at
    assert task.total_duration == 42 * SECOND


def test_random_toggles_keep_single_active_task(clock) -> None:
    rng = random.Random(1234)
    task_list = TaskList(title="prop")
    for i in range(5):
        core.add_task(task_list, f"task {i}", now=clock.now + i)

    for _ in range(500):
        now = clock.advance(rng.randint(0, 120))
        index = rng.randint(1, len(task_list.items))
        roll = rng.random()
        if roll < 0.05:
            core.complete_task(task_list, index, now=now)
        elif roll < 0.08:
            core.add_task(task_list, "late", now=now)
        else:
            try:
                core.toggle_timer(task_list, index, now=now)
            except TaskAlreadyDoneError:
                assert task_list.items[index - 1].status is Status.DONE
        _check_invariants(task_list)


def test_elapsed_includes_running_session(empty_list, clock) -> None:
    core.add_task(empty_list, "Milk", now=clock.now)
    core.toggle_timer(empty_list, 1, now=clock.advance(1))
    core.toggle_timer(empty_list, 1, now=clock.advance(10))
    core.toggle_timer(empty_list, 1, now=clock.advance(1))
    task = empty_list.items[0]
    assert core.elapsed(task, now=clock.advance(5)) == 15 * SECOND
    assert task.total_duration == 10 * SECOND
    assert core.active_task(empty_list) is task


def test_edit_and_comments(empty_list) -> None:
    core.add_task(empty_list, "Milk")
    core.edit_task(empty_list, 1, " Oat milk ")
    task = empty_list.items[0]
    assert task.title == "Oat milk"
    with pytest.raises(EmptyTitleError):
        core.edit_task(empty_list, 1, " ")

    core.set_comment(empty_list, 1, "the barista one")
    assert task.comment == "the barista one"
    assert task.comment_displayed is True
    core.toggle_comment(empty_list, 1)
    assert task.comment_displayed is False
    core.set_comment(empty_list, 1, "")
    assert task.comment == ""
    assert task.comment_displayed is False


def test_clean_done(empty_list, clock) -> None:
    for title in ("a", "b", "c"):
        core.add_task(empty_list, title, now=clock.now)
    core.complete_task(empty_list, 2, now=clock.advance(1))
    assert core.clean_done(empty_list) == 1
    assert [t.title for t in empty_list.items] == ["a", "c"]
    assert core.clean_done(empty_list) == 0


def test_close_session_without_start_raises() -> None:
    task = Task(id=1, title="x")
    with pytest.raises(ValueError):
        task.close_session(5)
