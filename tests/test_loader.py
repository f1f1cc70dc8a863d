"""Tests for roundpack.tasks.loader — YAML/JSON task files."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from roundpack.errors import TaskFileError
from roundpack.io_utils import read_text, write_text
from roundpack.tasks.loader import (
    dump_task_file,
    load_task_file,
    new_task_id,
    parse_task_file,
)
from roundpack.tasks.model import Task, TaskFile


YAML_DOC = """\
version: 1
tasks:
  - id: T1
    title: Answer emails
    estimated_minutes: 15
  - id: T2
    title: Review PR
    estimatedMinutes: 20
    completed: true
    round: 2
  - id: T3
    title: Call dentist
    estimated: 5
"""


class TestLoad:
    """Reading task files."""

    def test_load_yaml(self, tmp_path: Path):
        path = tmp_path / "tasks.yaml"
        write_text(path, YAML_DOC)
        tf = load_task_file(path)
        assert [t.id for t in tf.tasks] == ["T1", "T2", "T3"]
        assert [t.estimated_minutes for t in tf.tasks] == [15, 20, 5]
        assert tf.tasks[1].completed is True
        assert tf.tasks[1].round == 2
        assert tf.tasks[0].round is None

    def test_load_json(self, tmp_path: Path):
        path = tmp_path / "tasks.json"
        write_text(path, json.dumps({"tasks": [{"id": "a", "title": "A", "estimatedMinutes": 10}]}))
        tf = load_task_file(path)
        assert tf.tasks[0].estimated_minutes == 10
        assert tf.version == 1

    def test_bare_list_is_accepted(self):
        tf = parse_task_file([{"id": "a", "title": "A", "estimated_minutes": 5}])
        assert len(tf.tasks) == 1

    def test_empty_document(self, tmp_path: Path):
        path = tmp_path / "tasks.yaml"
        write_text(path, "")
        assert load_task_file(path).tasks == []

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_task_file(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "tasks.yaml"
        write_text(path, "tasks: [unclosed")
        with pytest.raises(TaskFileError, match="Cannot parse"):
            load_task_file(path)

    def test_invalid_json(self, tmp_path: Path):
        path = tmp_path / "tasks.json"
        write_text(path, "{not json")
        with pytest.raises(TaskFileError):
            load_task_file(path)

    @pytest.mark.parametrize(
        "data",
        [
            "just a string",
            {"tasks": "not a list"},
            {"tasks": ["not a mapping"]},
            {"tasks": [{"id": "a", "round": "two"}]},
            {"tasks": [{"id": "a", "completed": "false"}]},
            {"tasks": [{"id": "a", "completed": 1}]},
            {"version": "one", "tasks": []},
        ],
    )
    def test_bad_structure(self, data):
        with pytest.raises(TaskFileError):
            parse_task_file(data)


class TestDump:
    """Writing task files back."""

    def test_yaml_round_trip_keeps_rounds(self, tmp_path: Path):
        path = tmp_path / "tasks.yaml"
        tf = TaskFile(tasks=[
            Task(id="a", title="A", estimated_minutes=10, round=3, created_at="2026-01-01T00:00:00+00:00"),
            Task(id="b", title="B", estimated_minutes=5, completed=True),
        ])
        dump_task_file(tf, path)
        loaded = load_task_file(path)
        assert loaded == tf

    def test_json_output_uses_snake_case(self, tmp_path: Path):
        path = tmp_path / "tasks.json"
        dump_task_file(TaskFile(tasks=[Task(id="a", title="A", estimated_minutes=10)]), path)
        data = json.loads(read_text(path))
        assert data["tasks"][0]["estimated_minutes"] == 10
        assert "round" not in data["tasks"][0]

    def test_write_creates_parent_dirs(self, tmp_path: Path):
        path = tmp_path / "nested" / "dir" / "tasks.yaml"
        dump_task_file(TaskFile(), path)
        assert path.is_file()
        assert list(path.parent.iterdir()) == [path]


def test_new_task_id_format():
    tid = new_task_id()
    assert tid.startswith("task-")
    assert len(tid) == len("task-") + 8
    assert new_task_id() != tid
