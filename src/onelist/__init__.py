"""onelist - terminal task lists with time tracking."""

__version__ = "1.0.0"

from .models import LIST_SUFFIX, Session, Status, Task, TaskList
from .storage import create_list, discover_lists, load_list, remove_list, save_list
from .core import (
    add_task,
    complete_task,
    format_duration,
    remove_task,
    toggle_timer,
)
from .selector import ListSelector, parse_command

__all__ = [
    "LIST_SUFFIX",
    "Session",
    "Status",
    "Task",
    "TaskList",
    "create_list",
    "discover_lists",
    "load_list",
    "remove_list",
    "save_list",
    "add_task",
    "complete_task",
    "format_duration",
    "remove_task",
    "toggle_timer",
    "ListSelector",
    "parse_command",
]
