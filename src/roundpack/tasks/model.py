"""Task and TaskFile data models used across loading, splitting and packing."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Task:
    id: str
    title: str = ""
    estimated_minutes: int = 0
    completed: bool = False
    created_at: str = ""
    round: int | None = None  # last recorded placement, read by repack()


@dataclass
class TaskFile:
    tasks: list[Task] = field(default_factory=list)
    version: int = 1

    def pending_ids(self) -> list[str]:
        return [t.id for t in self.tasks if not t.completed]

    def get_task(self, task_id: str) -> Task | None:
        for t in self.tasks:
            if t.id == task_id:
                return t
        return None

    def total_minutes(self) -> int:
        return sum(t.estimated_minutes for t in self.tasks)

    def previous_rounds(self) -> dict[str, int]:
        """Map task id -> recorded round for tasks that carry one."""
        return {t.id: t.round for t in self.tasks if t.round is not None}
