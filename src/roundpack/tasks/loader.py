"""Read and write brain-dump task files (YAML or JSON)."""

from __future__ import annotations

import json
import uuid
from datetime import date
from pathlib import Path
from typing import Any

import yaml

from roundpack.errors import TaskFileError
from roundpack.io_utils import read_text, write_text
from roundpack.tasks.model import Task, TaskFile

_YAML_SUFFIXES = {".yaml", ".yml"}
_MINUTES_KEYS = ("estimated_minutes", "estimatedMinutes", "estimated")


def new_task_id() -> str:
    return f"task-{uuid.uuid4().hex[:8]}"


def _is_yaml(path: Path) -> bool:
    return path.suffix.lower() in _YAML_SUFFIXES


def _as_text(value: Any) -> str:
    # unquoted YAML timestamps arrive as datetime objects
    if isinstance(value, date):
        return value.isoformat()
    return str(value or "")


def _task_from_dict(raw: Any, position: int) -> Task:
    if not isinstance(raw, dict):
        raise TaskFileError(f"Task #{position} is not a mapping")

    minutes: Any = 0
    for key in _MINUTES_KEYS:
        if key in raw:
            minutes = raw[key]
            break

    round_index = raw.get("round")
    if round_index is not None and (not isinstance(round_index, int) or isinstance(round_index, bool)):
        raise TaskFileError(f"Task #{position}: round must be an integer, got {round_index!r}")

    completed = raw.get("completed", False)
    if not isinstance(completed, bool):
        raise TaskFileError(f"Task #{position}: completed must be true or false, got {completed!r}")

    return Task(
        id=str(raw.get("id") or ""),
        title=str(raw.get("title") or ""),
        estimated_minutes=minutes,
        completed=completed,
        created_at=_as_text(raw.get("created_at") or raw.get("createdAt")),
        round=round_index,
    )


def parse_task_file(data: Any) -> TaskFile:
    """Build a TaskFile from an already-decoded YAML/JSON document."""
    if data is None:
        return TaskFile()
    if isinstance(data, list):
        data = {"tasks": data}
    if not isinstance(data, dict):
        raise TaskFileError("Task file must be a mapping with a 'tasks' list")

    raw_tasks = data.get("tasks") or []
    if not isinstance(raw_tasks, list):
        raise TaskFileError("'tasks' must be a list")

    version = data.get("version", 1)
    if not isinstance(version, int) or isinstance(version, bool):
        raise TaskFileError(f"version must be an integer, got {version!r}")

    return TaskFile(
        tasks=[_task_from_dict(raw, i) for i, raw in enumerate(raw_tasks, start=1)],
        version=version,
    )


def load_task_file(path: Path | str) -> TaskFile:
    """Load *path*; ``.yaml``/``.yml`` are read as YAML, anything else as JSON."""
    p = Path(path)
    text = read_text(p)
    try:
        data = yaml.safe_load(text) if _is_yaml(p) else (json.loads(text) if text.strip() else None)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise TaskFileError(f"Cannot parse {p}: {exc}") from exc
    return parse_task_file(data)


def task_file_to_dict(tf: TaskFile) -> dict[str, Any]:
    tasks: list[dict[str, Any]] = []
    for t in tf.tasks:
        entry: dict[str, Any] = {
            "id": t.id,
            "title": t.title,
            "estimated_minutes": t.estimated_minutes,
            "completed": t.completed,
        }
        if t.created_at:
            entry["created_at"] = t.created_at
        if t.round is not None:
            entry["round"] = t.round
        tasks.append(entry)
    return {"version": tf.version, "tasks": tasks}


def dump_task_file(tf: TaskFile, path: Path | str) -> None:
    """Write *tf* back to *path* in the format its suffix implies."""
    p = Path(path)
    data = task_file_to_dict(tf)
    if _is_yaml(p):
        text = yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    else:
        text = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    write_text(p, text)
