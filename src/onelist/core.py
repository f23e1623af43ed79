"""Task and timer operations (pure functions over TaskList, no I/O).

Every function that reads the clock takes an optional ``now`` in epoch
nanoseconds and reads it at most once.
"""

import logging
from typing import Optional

from .errors import EmptyTitleError, IndexOutOfRangeError, TaskAlreadyDoneError
from .models import Session, Status, Task, TaskList, now_ns

logger = logging.getLogger(__name__)

_NS_PER_SECOND = 1_000_000_000


def format_duration(nanoseconds: int) -> str:
    """Render a duration as ``1h 2m 3s`` / ``2m 3s`` / ``3s``."""
    if nanoseconds <= 0:
        return "0s"
    total_seconds = nanoseconds // _NS_PER_SECOND
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours > 0:
        return f"{hours}h {minutes}m {seconds}s"
    if minutes > 0:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"


def get_task(task_list: TaskList, index: int) -> Task:
    """Return the task at 1-based ``index``."""
    if index < 1 or index > len(task_list.items):
        raise IndexOutOfRangeError(index, len(task_list.items))
    return task_list.items[index - 1]


def active_task(task_list: TaskList) -> Optional[Task]:
    """Return the running task, or None."""
    for t in task_list.items:
        if t.is_running:
            return t
    return None


def elapsed(task: Task, now: Optional[int] = None) -> int:
    """Total time including the running session, for display only."""
    if task.active_start_time is None:
        return task.total_duration
    now = now_ns() if now is None else now
    return task.total_duration + max(0, now - task.active_start_time)


def add_task(task_list: TaskList, title: str, now: Optional[int] = None) -> Task:
    """Append a new pending task."""
    title = title.strip()
    if not title:
        raise EmptyTitleError()
    now = now_ns() if now is None else now
    task = Task(id=now, title=title, created_at=now)
    task_list.items.append(task)
    logger.debug("Added task %d %r", task.id, title)
    return task


def remove_task(task_list: TaskList, index: int) -> Task:
    """Remove and return the task at 1-based ``index``."""
    get_task(task_list, index)
    task = task_list.items.pop(index - 1)
    logger.debug("Removed task %d %r", task.id, task.title)
    return task


def edit_task(task_list: TaskList, index: int, title: str) -> Task:
    """Retitle the task at 1-based ``index``."""
    task = get_task(task_list, index)
    title = title.strip()
    if not title:
        raise EmptyTitleError()
    task.title = title
    return task


def set_comment(task_list: TaskList, index: int, text: str) -> Task:
    """Attach a comment and show it; blank text clears it."""
    task = get_task(task_list, index)
    task.comment = text.strip()
    task.comment_displayed = bool(task.comment)
    return task


def toggle_comment(task_list: TaskList, index: int) -> Task:
    """Show or hide the comment of the task at ``index``."""
    task = get_task(task_list, index)
    task.comment_displayed = not task.comment_displayed
    return task


def _stop(task: Task, now: int) -> Session:
    """Close the running session and park the task as PAUSED."""
    session = task.close_session(now)
    task.status = Status.PAUSED
    logger.debug("Stopped task %d after %s", task.id, format_duration(session.duration))
    return session


def toggle_timer(task_list: TaskList, index: int, now: Optional[int] = None) -> Task:
    """Start a stopped task or pause a running one.

    Starting a task pauses whichever other task in the list is running, so
    at most one task is ACTIVE at a time.
    """
    task = get_task(task_list, index)
    if task.is_done:
        raise TaskAlreadyDoneError(task.title)
    now = now_ns() if now is None else now

    if task.is_running:
        _stop(task, now)
        return task

    for other in task_list.items:
        if other is not task and other.is_running:
            _stop(other, now)
    task.status = Status.ACTIVE
    task.active_start_time = now
    logger.debug("Started task %d", task.id)
    return task


def complete_task(task_list: TaskList, index: int, now: Optional[int] = None) -> Task:
    """Mark a task done, closing its running session first.

    Completing an already done task leaves it untouched.
    """
    task = get_task(task_list, index)
    if task.is_done:
        return task
    now = now_ns() if now is None else now
    if task.is_running:
        task.close_session(now)
    task.status = Status.DONE
    task.completed_at = now
    logger.debug("Completed task %d", task.id)
    return task


def clean_done(task_list: TaskList) -> int:
    """Drop done tasks; return how many were removed."""
    before = len(task_list.items)
    task_list.items[:] = [t for t in task_list.items if not t.is_done]
    return before - len(task_list.items)
