"""Shared fixtures for roundpack tests.

File handling in tests:
- Use tmp_path for any task file creation so tests are isolated and cleaned up.
- Use roundpack.io_utils read_text/write_text for consistent UTF-8 I/O.
"""

from __future__ import annotations

import pytest

from roundpack import log
from roundpack.tasks.model import Task, TaskFile


def _make_task(
    id: str,
    minutes: int = 10,
    title: str = "",
    completed: bool = False,
    round: int | None = None,
) -> Task:
    return Task(
        id=id,
        title=title or f"Task {id}",
        estimated_minutes=minutes,
        completed=completed,
        round=round,
    )


def _make_task_file(tasks: list[Task]) -> TaskFile:
    return TaskFile(tasks=tasks)


@pytest.fixture
def make_task():
    """Factory fixture that creates Task instances."""
    return _make_task


@pytest.fixture
def make_task_file():
    """Factory fixture that creates TaskFile instances."""
    return _make_task_file


@pytest.fixture(autouse=True)
def _reset_log_state():
    """Undo verbose / stderr routing a CLI invocation may have left behind."""
    yield
    log.set_verbose(False)
    log.use_stderr(False)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove ROUNDPACK_* overrides so defaults apply."""
    for name in ("ROUNDPACK_ROUNDS", "ROUNDPACK_CAPACITY", "ROUNDPACK_POLICY"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
