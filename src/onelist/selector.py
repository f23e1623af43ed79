"""Line-based list picker with inline create/remove commands."""

import logging
import os
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Union

from .errors import (
    InputClosedError,
    InvalidSelectionError,
    NoListsFoundError,
    OneListError,
)
from .storage import create_list, discover_lists, list_summary, remove_list, split_filename

logger = logging.getLogger(__name__)

CREATE_WORDS = ("create", "c")
REMOVE_WORDS = ("remove", "r")
_INT_RE = re.compile(r"^-?[0-9]+$")


@dataclass(frozen=True)
class Select:
    number: int


@dataclass(frozen=True)
class Create:
    name: str


@dataclass(frozen=True)
class Remove:
    number: int


@dataclass(frozen=True)
class Invalid:
    text: str


Command = Union[Select, Create, Remove, Invalid]


def _parse_int(text: str) -> Optional[int]:
    """Parse a signed decimal integer, or return None."""
    text = text.strip()
    if _INT_RE.match(text):
        return int(text)
    return None


def parse_command(line: str) -> Command:
    """Parse one line of picker input."""
    text = line.strip()
    head, _, rest = text.partition(" ")
    word = head.lower()
    if word in CREATE_WORDS:
        return Create(rest.strip())
    if word in REMOVE_WORDS:
        n = _parse_int(rest)
        return Remove(n) if n is not None else Invalid(text)
    n = _parse_int(text)
    if n is not None:
        return Select(n)
    return Invalid(text)


def confirmed(answer: str) -> bool:
    """True for a yes answer to a y/N prompt."""
    return answer.strip().lower() in ("y", "yes")


class ListSelector:
    """Pick a list file from ``directory``, creating or removing lists on the way."""

    def __init__(
        self,
        directory: str,
        read_line: Optional[Callable[[str], str]] = None,
        write: Optional[Callable[[str], None]] = None,
    ):
        self.directory = directory
        self.read_line = read_line or input
        self.write = write or print

    def ask(self, prompt: str) -> str:
        try:
            return self.read_line(prompt)
        except EOFError as exc:
            raise InputClosedError() from exc

    def display(self, filenames: List[str]) -> None:
        self.write(f"\n📋 Found {len(filenames)} task lists:\n")
        for i, name in enumerate(filenames, start=1):
            self.write(f"{i}. {self.describe(name)}")

    def describe(self, filename: str) -> str:
        stem, _ = split_filename(filename)
        try:
            title, open_count, total = list_summary(os.path.join(self.directory, filename))
        except OneListError as exc:
            logger.warning("Cannot summarize %s: %s", filename, exc)
            return f"{stem}  (unreadable: {exc})"
        return f"{title or stem}  ({open_count} open / {total})"

    def select(self, filenames: List[str]) -> str:
        """Return the path of the chosen list.

        Loops until a valid number is entered; raises InputClosedError when
        input runs out and NoListsFoundError when the last list is removed.
        """
        if len(filenames) == 1:
            return os.path.join(self.directory, filenames[0])

        self.display(filenames)
        while True:
            line = self.ask(
                f"\nSelect a list (1-{len(filenames)}), "
                "create one 'create <name>' or remove 'remove <number>': "
            )
            command = parse_command(line)
            try:
                if isinstance(command, Select):
                    return os.path.join(self.directory, self._pick(filenames, command.number))
                if isinstance(command, Create):
                    filenames = self._create(command.name)
                elif isinstance(command, Remove):
                    filenames = self._remove(filenames, command.number)
                else:
                    raise InvalidSelectionError(command.text)
            except (InputClosedError, NoListsFoundError):
                raise
            except OneListError as exc:
                self.write(f"❌ {exc}")

    def _pick(self, filenames: List[str], number: int) -> str:
        if number < 1 or number > len(filenames):
            raise InvalidSelectionError(str(number))
        return filenames[number - 1]

    def _create(self, name: str) -> List[str]:
        path = create_list(self.directory, name)
        self.write(f"✅ Created list: {name.strip()} ({os.path.basename(path)})")
        filenames = discover_lists(self.directory)
        self.display(filenames)
        return filenames

    def _remove(self, filenames: List[str], number: int) -> List[str]:
        filename = self._pick(filenames, number)
        if not confirmed(self.ask(f"Remove '{filename}'? (y/N): ")):
            return filenames
        remove_list(self.directory, filename)
        self.write(f"✅ Removed: {filename}")
        filenames = discover_lists(self.directory)
        self.display(filenames)
        return filenames
