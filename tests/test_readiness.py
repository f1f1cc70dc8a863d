"""Tests for the session readiness gate."""

from __future__ import annotations

import pytest

from roundpack.errors import InvalidConfiguration
from roundpack.packer import Round, pack, readiness
from roundpack.tasks.model import Task


def _tasks(*minutes: int) -> list[Task]:
    return [Task(id=f"T{i}", title=f"Task {i}", estimated_minutes=m) for i, m in enumerate(minutes)]


class TestReadinessGate:
    """4 x 25 sessions: startable at 75 minutes, full at 100."""

    def test_75_minutes_is_startable_not_full(self):
        gate = readiness(pack(_tasks(25, 25, 25), 4, 25))
        assert gate.total_minutes == 75
        assert gate.planned_minutes == 100
        assert gate.startable is True
        assert gate.full is False
        assert gate.minutes_to_start == 0

    def test_100_minutes_is_full(self):
        gate = readiness(pack(_tasks(25, 25, 25, 25), 4, 25))
        assert gate.startable is True
        assert gate.full is True

    def test_74_minutes_needs_one_more(self):
        gate = readiness(pack(_tasks(25, 25, 24), 4, 25))
        assert gate.startable is False
        assert gate.minutes_to_start == 1

    def test_empty_session(self):
        gate = readiness(pack([], 4, 25))
        assert gate.total_minutes == 0
        assert gate.startable is False
        assert gate.minutes_to_start == 75

    def test_overfilled_minutes_still_count(self):
        """Overflowed minutes are part of the aggregate total."""
        gate = readiness(pack(_tasks(60, 10, 10, 5), 4, 25))
        assert gate.total_minutes == 85
        assert gate.startable is True
        assert gate.full is False

    def test_quick_battle_ratio(self):
        """A single round with an 80% ratio starts at 20 minutes."""
        assert readiness(pack(_tasks(20), 1, 25), startable_ratio=0.8).startable is True
        gate = readiness(pack(_tasks(19), 1, 25), startable_ratio=0.8)
        assert gate.startable is False
        assert gate.minutes_to_start == 1

    def test_full_tolerates_float_rounding(self):
        """0.1 + 0.1 + 0.1 planned minutes still counts 0.3 as a full session."""
        rounds = [
            Round(index=1, capacity_minutes=0.1, assigned_tasks=(Task(id="a", estimated_minutes=0.3),)),
            Round(index=2, capacity_minutes=0.1, assigned_tasks=()),
            Round(index=3, capacity_minutes=0.1, assigned_tasks=()),
        ]
        gate = readiness(rounds)
        assert gate.total_minutes < gate.planned_minutes
        assert gate.startable is True
        assert gate.full is True


class TestReadinessErrors:
    def test_no_rounds(self):
        with pytest.raises(InvalidConfiguration):
            readiness([])

    @pytest.mark.parametrize("ratio", [0, -0.5, 1.5])
    def test_bad_ratio(self, ratio):
        with pytest.raises(InvalidConfiguration):
            readiness(pack([], 4, 25), startable_ratio=ratio)
