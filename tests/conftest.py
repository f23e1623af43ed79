# tests/conftest.py

from pathlib import Path
from typing import Iterable, List

import pytest

from onelist.models import TaskList

SECOND = 1_000_000_000
T0 = 1_700_000_000 * SECOND


class FakeClock:
    """Manually advanced epoch-nanosecond clock passed as ``now=``."""

    def __init__(self, start: int = T0) -> None:
        self.now = start

    def advance(self, seconds: float) -> int:
        self.now += int(seconds * SECOND)
        return self.now


class ScriptedInput:
    """Callable standing in for ``input``; raises EOFError when the script runs out."""

    def __init__(self, lines: Iterable[str]) -> None:
        self.lines: List[str] = list(lines)
        self.prompts: List[str] = []

    def __call__(self, prompt: str = "") -> str:
        self.prompts.append(prompt)
        if not self.lines:
            raise EOFError
        return self.lines.pop(0)


class Output:
    def __init__(self) -> None:
        self.lines: List[str] = []

    def __call__(self, text: str = "") -> None:
        self.lines.append(text)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def output() -> Output:
    return Output()


@pytest.fixture()
def task_dir(tmp_path: Path) -> Path:
    d = tmp_path / "tasks"
    d.mkdir()
    return d


@pytest.fixture()
def empty_list(clock: FakeClock) -> TaskList:
    return TaskList(title="Groceries", items=[], created_at=clock.now, updated_at=clock.now)
