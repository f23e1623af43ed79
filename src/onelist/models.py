"""Data models and constants for onelist."""

import re
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

LIST_SUFFIX = ".1list"
STEM_RE = re.compile(r"^(?P<stem>.+)-(?P<n>\d+)$")


class Status(Enum):
    """Time-tracking state of a task."""

    PENDING = "pending"
    ACTIVE = "active"
    PAUSED = "paused"
    DONE = "done"


# status -> (marker, label)
STATUS_MARKERS: Dict[Status, Tuple[str, str]] = {
    Status.PENDING: ("[ ]", "pending"),
    Status.ACTIVE: ("[>]", "running"),
    Status.PAUSED: ("[=]", "paused"),
    Status.DONE: ("[x]", "done"),
}


def now_ns() -> int:
    """Current time in epoch nanoseconds."""
    return time.time_ns()


@dataclass(frozen=True)
class Session:
    """One contiguous interval during which a task was timed (epoch ns)."""

    start_time: int
    end_time: int
    duration: int


@dataclass
class Task:
    """A single task with its timer state.

    ``active_start_time`` is set only while the task is ACTIVE and
    ``completed_at`` only once it is DONE. ``total_duration`` is kept equal
    to the sum of ``sessions`` durations.
    """

    id: int
    title: str
    status: Status = Status.PENDING
    comment: str = ""
    comment_displayed: bool = False
    sessions: List[Session] = field(default_factory=list)
    total_duration: int = 0
    active_start_time: Optional[int] = None
    completed_at: Optional[int] = None
    created_at: int = 0

    @property
    def is_running(self) -> bool:
        return self.status is Status.ACTIVE

    @property
    def is_done(self) -> bool:
        return self.status is Status.DONE

    def close_session(self, now: int) -> Session:
        """Stop the running session at ``now`` and fold it into the total."""
        if self.active_start_time is None:
            raise ValueError(f"task {self.id} has no running session")
        duration = max(0, now - self.active_start_time)
        session = Session(self.active_start_time, self.active_start_time + duration, duration)
        self.sessions.append(session)
        self.total_duration += duration
        self.active_start_time = None
        return session


@dataclass
class TaskList:
    """A titled, ordered list of tasks; one per list file."""

    title: str
    items: List[Task] = field(default_factory=list)
    created_at: int = 0
    updated_at: int = 0
