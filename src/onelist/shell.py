"""Interactive command loop for one open task list."""

import logging
from typing import Callable, List, Optional

from . import core
from .errors import OneListError
from .models import STATUS_MARKERS, Status, TaskList
from .storage import save_list

logger = logging.getLogger(__name__)

HELP_TEXT = [
    "Commands:",
    "  <n>              Start/stop the timer of task n",
    "  add <title>      Add a task",
    "  done <n>         Mark task n done (stops its timer)",
    "  rm <n>           Remove task n",
    "  edit <n> <title> Rename task n",
    "  note <n> <text>  Set the comment of task n (empty text clears it)",
    "  show <n>         Show/hide the comment of task n",
    "  clean            Remove all done tasks",
    "  help             Show this help",
    "  q                Quit",
]
PROMPT_HINT = "💡 Commands: <number>, 'add <task>', 'done <n>', 'help', 'q':"
QUIT_WORDS = ("q", "quit", "exit")


def render_list(
    task_list: TaskList, show_done: bool = True, now: Optional[int] = None
) -> List[str]:
    """Return the printable lines for a task list."""
    lines = [f"📋 {task_list.title}", "=" * (len(task_list.title) + 4)]
    if not task_list.items:
        lines.append("(no tasks yet)")
        return lines
    for i, t in enumerate(task_list.items, start=1):
        if not show_done and t.status is Status.DONE:
            continue
        marker, label = STATUS_MARKERS[t.status]
        spent = core.elapsed(t, now)
        suffix = ""
        if t.status is not Status.PENDING or spent:
            suffix = f"  ({label}, {core.format_duration(spent)})"
        lines.append(f"{i:>3}. {marker} {t.title}{suffix}")
        if t.comment and t.comment_displayed:
            lines.append(f"       💬 {t.comment}")
    return lines


def _index(arg: str) -> int:
    """Parse a 1-based task number typed by the user."""
    raw = arg.strip().rstrip(".")
    if not raw.isdecimal():
        raise OneListError(f"'{arg}' is not a task number")
    return int(raw)


class TaskShell:
    """Read commands, apply them to ``task_list`` and save after each change."""

    def __init__(
        self,
        path: str,
        task_list: TaskList,
        read_line: Optional[Callable[[str], str]] = None,
        write: Optional[Callable[[str], None]] = None,
    ):
        self.path = path
        self.task_list = task_list
        self.read_line = read_line or input
        self.write = write or print
        self.commands = {
            "add": self.add,
            "a": self.add,
            "done": self.done,
            "d": self.done,
            "rm": self.remove,
            "remove": self.remove,
            "edit": self.edit,
            "note": self.note,
            "show": self.show,
            "clean": self.clean,
        }

    def show_list(self) -> None:
        self.write("")
        for line in render_list(self.task_list):
            self.write(line)
        self.write("")
        self.write(PROMPT_HINT)

    def run(self) -> None:
        self.show_list()
        while True:
            try:
                line = self.read_line("> ")
            except EOFError:
                logger.debug("Input closed, leaving %s", self.path)
                return
            line = line.strip()
            if not line:
                continue
            if line.lower() in QUIT_WORDS:
                return
            try:
                changed = self.handle(line)
                if changed:
                    save_list(self.path, self.task_list)
            except OneListError as exc:
                self.write(f"❌ {exc}")
                continue
            if changed:
                self.show_list()

    def handle(self, line: str) -> bool:
        """Apply one command line; return True if the list changed."""
        word, _, rest = line.partition(" ")
        word = word.lower()
        if word.rstrip(".").isdecimal():
            return self.toggle(line)
        if word == "help":
            for h in HELP_TEXT:
                self.write(h)
            return False
        handler = self.commands.get(word)
        if handler is None:
            raise OneListError("Enter a number, 'add <task>', 'help' or 'q'")
        return handler(rest.strip())

    def toggle(self, arg: str) -> bool:
        task = core.toggle_timer(self.task_list, _index(arg))
        if task.status is Status.ACTIVE:
            self.write(f"▶️  Started: {task.title}")
        else:
            self.write(f"⏸️  Paused: {task.title} ({core.format_duration(task.total_duration)})")
        return True

    def add(self, arg: str) -> bool:
        task = core.add_task(self.task_list, arg)
        self.write(f"✨ Added: {task.title}")
        return True

    def done(self, arg: str) -> bool:
        index = _index(arg)
        if core.get_task(self.task_list, index).is_done:
            self.write("Already done.")
            return False
        task = core.complete_task(self.task_list, index)
        self.write(f"✅ Completed: {task.title} ({core.format_duration(task.total_duration)})")
        return True

    def remove(self, arg: str) -> bool:
        task = core.remove_task(self.task_list, _index(arg))
        self.write(f"🗑️  Removed: {task.title}")
        return True

    def edit(self, arg: str) -> bool:
        num, _, title = arg.partition(" ")
        core.edit_task(self.task_list, _index(num), title)
        return True

    def note(self, arg: str) -> bool:
        num, _, text = arg.partition(" ")
        core.set_comment(self.task_list, _index(num), text)
        return True

    def show(self, arg: str) -> bool:
        core.toggle_comment(self.task_list, _index(arg))
        return True

    def clean(self, arg: str) -> bool:
        removed = core.clean_done(self.task_list)
        self.write(f"Removed {removed} done task(s).")
        return removed > 0
