"""File I/O for onelist task lists.

One JSON file per list, named ``<stem>-<n>.1list``. Files are rewritten in
full on every save.
"""

import json
import logging
import os
import re
from typing import Any, Dict, List, Optional, Tuple

from .errors import (
    DirectoryUnreadableError,
    EmptyNameError,
    ListReadError,
    ListRemoveError,
    ListWriteError,
    MalformedListError,
    NoListsFoundError,
    NotConfiguredError,
)
from .models import LIST_SUFFIX, STEM_RE, Session, Status, Task, TaskList, now_ns

logger = logging.getLogger(__name__)

DEFAULT_STEM = "list"
_SEPARATORS_RE = re.compile(r"[\s/\\]+")
_DISALLOWED_RE = re.compile(r"[^a-z0-9_-]")
_HYPHENS_RE = re.compile(r"-{2,}")


# ---- directory level ----


def discover_lists(directory: Optional[str]) -> List[str]:
    """Return the list filenames in ``directory``, sorted by name."""
    if not directory:
        raise NotConfiguredError()
    try:
        with os.scandir(directory) as it:
            names = [e.name for e in it if e.is_file() and e.name.endswith(LIST_SUFFIX)]
    except OSError as exc:
        raise DirectoryUnreadableError(directory, exc.strerror or str(exc)) from exc
    if not names:
        raise NoListsFoundError(directory)
    names.sort()
    logger.debug("Found %d list(s) in %s", len(names), directory)
    return names


def folder_contents(directory: str) -> Tuple[List[str], List[str]]:
    """Split the regular files in ``directory`` into (list files, other files)."""
    try:
        with os.scandir(directory) as it:
            names = sorted(e.name for e in it if e.is_file())
    except OSError as exc:
        raise DirectoryUnreadableError(directory, exc.strerror or str(exc)) from exc
    lists = [n for n in names if n.endswith(LIST_SUFFIX)]
    others = [n for n in names if not n.endswith(LIST_SUFFIX)]
    return lists, others


def sanitize_stem(title: str) -> str:
    """Turn a list title into a filesystem-safe stem.

    Lowercases, maps whitespace and path separators to hyphens and drops
    anything outside ``[a-z0-9_-]``.
    """
    stem = _SEPARATORS_RE.sub("-", title.strip().lower())
    stem = _DISALLOWED_RE.sub("", stem)
    stem = _HYPHENS_RE.sub("-", stem).strip("-")
    return stem or DEFAULT_STEM


def split_filename(filename: str) -> Tuple[str, Optional[int]]:
    """Return (stem, counter) for ``<stem>-<n>.1list``; counter is None if absent."""
    base = filename[: -len(LIST_SUFFIX)] if filename.endswith(LIST_SUFFIX) else filename
    m = STEM_RE.match(base)
    if not m:
        return base, None
    return m.group("stem"), int(m.group("n"))


def next_filename(directory: str, stem: str) -> str:
    """Pick ``<stem>-<n>.1list`` with n one past the highest existing counter."""
    try:
        existing = os.listdir(directory)
    except OSError as exc:
        raise DirectoryUnreadableError(directory, exc.strerror or str(exc)) from exc
    highest = 0
    for name in existing:
        if not name.endswith(LIST_SUFFIX):
            continue
        other_stem, n = split_filename(name)
        if other_stem == stem and n is not None:
            highest = max(highest, n)
    return f"{stem}-{highest + 1}{LIST_SUFFIX}"


def create_list(directory: str, title: str, now: Optional[int] = None) -> str:
    """Create an empty list titled ``title``; return the new file's path."""
    title = title.strip()
    if not title:
        raise EmptyNameError()
    if not directory:
        raise NotConfiguredError()
    ts = now_ns() if now is None else now
    path = os.path.join(directory, next_filename(directory, sanitize_stem(title)))
    task_list = TaskList(title=title, items=[], created_at=ts, updated_at=ts)
    _write(path, task_list)
    logger.info("Created list %r at %s", title, path)
    return path


def remove_list(directory: str, filename: str) -> None:
    """Delete a list file. Confirmation is the caller's job."""
    path = os.path.join(directory, filename)
    try:
        os.remove(path)
    except OSError as exc:
        raise ListRemoveError(f"Failed to remove {filename}: {exc.strerror or exc}") from exc
    logger.info("Removed list file %s", path)


# ---- file level ----


def load_list(path: str) -> TaskList:
    """Read and parse a list file."""
    try:
        with open(path, "rb") as f:
            raw = f.read()
        mtime = os.stat(path).st_mtime_ns
    except OSError as exc:
        raise ListReadError(f"Cannot read {path}: {exc.strerror or exc}") from exc
    try:
        data = json.loads(raw.decode("utf-8"))
    except ValueError as exc:
        # UnicodeDecodeError is a ValueError too
        raise MalformedListError(f"{os.path.basename(path)} is not valid UTF-8 JSON: {exc}") from exc
    try:
        return list_from_dict(data, default_time=mtime)
    except (KeyError, TypeError, ValueError) as exc:
        raise MalformedListError(f"{os.path.basename(path)}: {exc}") from exc


def save_list(path: str, task_list: TaskList, now: Optional[int] = None) -> None:
    """Refresh ``updated_at`` and overwrite the file with the whole list."""
    task_list.updated_at = now_ns() if now is None else now
    _write(path, task_list)
    logger.debug("Saved %s (%d tasks)", path, len(task_list.items))


def list_summary(path: str) -> Tuple[str, int, int]:
    """Return (title, open tasks, total tasks) for a list file."""
    task_list = load_list(path)
    open_count = sum(1 for t in task_list.items if not t.is_done)
    return task_list.title, open_count, len(task_list.items)


def _write(path: str, task_list: TaskList) -> None:
    text = json.dumps(list_to_dict(task_list), indent=2, ensure_ascii=False)
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
            f.write("\n")
    except OSError as exc:
        raise ListWriteError(f"Cannot write {path}: {exc.strerror or exc}") from exc


# ---- (de)serialization ----


def session_to_dict(s: Session) -> Dict[str, int]:
    """Serialize a session with camelCase keys."""
    return {"startTime": s.start_time, "endTime": s.end_time, "duration": s.duration}


def task_to_dict(t: Task) -> Dict[str, Any]:
    """Serialize a task; ``done`` is kept for readers of the older format."""
    return {
        "id": t.id,
        "title": t.title,
        "status": t.status.value,
        "done": t.is_done,
        "comment": t.comment,
        "commentDisplayed": t.comment_displayed,
        "sessions": [session_to_dict(s) for s in t.sessions],
        "totalDuration": t.total_duration,
        "activeStartTime": t.active_start_time,
        "completedAt": t.completed_at,
        "createdAt": t.created_at,
    }


def list_to_dict(task_list: TaskList) -> Dict[str, Any]:
    """Serialize a whole list, ready for json.dumps."""
    return {
        "title": task_list.title,
        "items": [task_to_dict(t) for t in task_list.items],
        "createdAt": task_list.created_at,
        "updatedAt": task_list.updated_at,
    }


def _int(value: Any, name: str) -> int:
    """Return ``value`` if it is a plain int."""
    # bool is an int subclass; a flag in a number slot is a format error
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer, got {value!r}")
    return value


def _opt_int(value: Any, name: str) -> Optional[int]:
    """Like _int, but None passes through."""
    return None if value is None else _int(value, name)


def session_from_dict(data: Dict[str, Any]) -> Session:
    """Build a Session; duration defaults to end minus start."""
    start = _int(data["startTime"], "startTime")
    end = _int(data["endTime"], "endTime")
    duration = _int(data.get("duration", end - start), "duration")
    return Session(start_time=start, end_time=end, duration=duration)


def task_from_dict(data: Any) -> Task:
    """Build a Task, filling fields that older files do not carry."""
    if not isinstance(data, dict):
        raise TypeError(f"task entry must be an object, got {type(data).__name__}")
    task_id = _int(data["id"], "id")
    title = data.get("title")
    if not isinstance(title, str):
        raise TypeError(f"task {task_id} has no title")

    raw_status = data.get("status")
    if raw_status is None:
        status = Status.DONE if data.get("done") else Status.PENDING
    else:
        status = Status(raw_status)

    sessions_raw = data.get("sessions")
    if sessions_raw is None:
        sessions_raw = []
    if not isinstance(sessions_raw, list):
        raise TypeError("sessions must be an array")
    sessions = [session_from_dict(s) for s in sessions_raw]
    session_total = sum(s.duration for s in sessions)
    total_duration = _int(data.get("totalDuration", session_total), "totalDuration")
    if total_duration != session_total:
        raise ValueError(
            f"task {task_id} totalDuration {total_duration} does not match its sessions ({session_total})"
        )
    if status is Status.PAUSED and not sessions:
        raise ValueError(f"task {task_id} is paused without any session")

    created_at = _opt_int(data.get("createdAt"), "createdAt")
    if created_at is None:
        # ids were taken from the creation clock
        created_at = task_id

    active_start = _opt_int(data.get("activeStartTime"), "activeStartTime")
    completed_at = _opt_int(data.get("completedAt"), "completedAt")
    if status is Status.ACTIVE:
        if active_start is None:
            raise ValueError(f"task {task_id} is active without activeStartTime")
    else:
        active_start = None
    if status is Status.DONE:
        if completed_at is None:
            completed_at = created_at
    else:
        completed_at = None

    comment = data.get("comment") or ""
    if not isinstance(comment, str):
        raise TypeError("comment must be a string")

    return Task(
        id=task_id,
        title=title,
        status=status,
        comment=comment,
        comment_displayed=bool(data.get("commentDisplayed", False)),
        sessions=sessions,
        total_duration=total_duration,
        active_start_time=active_start,
        completed_at=completed_at,
        created_at=created_at,
    )


def list_from_dict(data: Any, default_time: int = 0) -> TaskList:
    """Build a TaskList; missing timestamps fall back to ``default_time``."""
    if not isinstance(data, dict):
        raise TypeError("list file must hold an object")
    title = data.get("title", "")
    if not isinstance(title, str):
        raise TypeError("title must be a string")
    items = data.get("items")
    if items is None:
        items = []
    if not isinstance(items, list):
        raise TypeError("items must be an array")
    created_at = _opt_int(data.get("createdAt"), "createdAt")
    updated_at = _opt_int(data.get("updatedAt"), "updatedAt")
    return TaskList(
        title=title,
        items=[task_from_dict(t) for t in items],
        created_at=default_time if created_at is None else created_at,
        updated_at=default_time if updated_at is None else updated_at,
    )
