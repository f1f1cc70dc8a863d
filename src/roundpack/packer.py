"""Round packer: first-fit-decreasing assignment of tasks to fixed-capacity rounds."""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum

from roundpack import log
from roundpack.errors import InvalidConfiguration, InvalidTask
from roundpack.tasks.model import Task


class FillPolicy(str, Enum):
    """How to choose among the rounds a task still fits into."""

    LEAST_FULL = "least-full"  # spread load evenly
    MOST_FULL = "most-full"  # best fit, keep other rounds free for big tasks


class RoundStatus(str, Enum):
    EMPTY = "empty"
    OPTIMAL = "optimal"
    OVERFILLED = "overfilled"


@dataclass(frozen=True)
class Round:
    """One fixed-capacity time bucket.

    ``total_minutes`` and ``status`` are computed from ``assigned_tasks`` on
    every access, so they can never go stale.
    """

    index: int
    capacity_minutes: float
    assigned_tasks: tuple[Task, ...] = ()

    @property
    def total_minutes(self) -> int:
        return sum(t.estimated_minutes for t in self.assigned_tasks)

    @property
    def remaining_minutes(self) -> float:
        return self.capacity_minutes - self.total_minutes

    @property
    def status(self) -> RoundStatus:
        total = self.total_minutes
        if total == 0:
            return RoundStatus.EMPTY
        if total <= self.capacity_minutes:
            return RoundStatus.OPTIMAL
        return RoundStatus.OVERFILLED

    def task_ids(self) -> list[str]:
        return [t.id for t in self.assigned_tasks]


@dataclass(frozen=True)
class Readiness:
    """Aggregate gate read by whoever decides if a session may start."""

    total_minutes: int
    planned_minutes: float
    startable_threshold: float
    startable: bool
    full: bool

    @property
    def minutes_to_start(self) -> int:
        return max(0, math.ceil(round(self.startable_threshold - self.total_minutes, 6)))


# ── input checks ─────────────────────────────────────────────────


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def check_config(round_count: int, capacity: float) -> None:
    if not isinstance(round_count, int) or isinstance(round_count, bool) or round_count <= 0:
        raise InvalidConfiguration(f"round_count must be a positive integer, got {round_count!r}")
    if not _is_number(capacity) or not capacity > 0:
        raise InvalidConfiguration(f"capacity must be a positive number, got {capacity!r}")


def _check_tasks(tasks: Sequence[Task]) -> None:
    for task in tasks:
        minutes = task.estimated_minutes
        if not _is_number(minutes) or not minutes > 0:
            raise InvalidTask(
                f"Task {task.id}: estimated_minutes must be positive, got {minutes!r}"
            )


# ── placement ────────────────────────────────────────────────────


def _choose_round(
    totals: list[float],
    minutes: float,
    capacity: float,
    policy: FillPolicy,
) -> tuple[int, bool]:
    """Return ``(position, overflowed)`` for a task of *minutes*.

    Ties always go to the lowest round index.
    """
    fitting = [i for i, total in enumerate(totals) if total + minutes <= capacity]
    if fitting:
        if policy is FillPolicy.MOST_FULL:
            return min(fitting, key=lambda i: (-totals[i], i)), False
        return min(fitting, key=lambda i: (totals[i], i)), False
    return min(range(len(totals)), key=lambda i: (totals[i], i)), True


def _pack(
    tasks: Sequence[Task],
    round_count: int,
    capacity: float,
    policy: FillPolicy | str,
    pinned: Mapping[int, int],
) -> list[Round]:
    check_config(round_count, capacity)
    _check_tasks(tasks)
    try:
        policy = FillPolicy(policy)
    except ValueError:
        raise InvalidConfiguration(f"Unknown fill policy: {policy}") from None

    bins: list[list[Task]] = [[] for _ in range(round_count)]
    totals: list[float] = [0] * round_count

    for pos, index in pinned.items():
        task = tasks[pos]
        bins[index - 1].append(task)
        totals[index - 1] += task.estimated_minutes
        log.debug(f"Task {task.id}: pinned to round {index}")

    free = [t for pos, t in enumerate(tasks) if pos not in pinned]
    # sorted() keeps input order among equal estimates, reverse included
    for task in sorted(free, key=lambda t: t.estimated_minutes, reverse=True):
        pos, overflowed = _choose_round(totals, task.estimated_minutes, capacity, policy)
        bins[pos].append(task)
        totals[pos] += task.estimated_minutes
        if overflowed:
            log.debug(
                f"Task {task.id} ({task.estimated_minutes} min): no round fits, "
                f"overflowing into round {pos + 1} ({totals[pos]}/{capacity})"
            )
        else:
            log.debug(f"Task {task.id} ({task.estimated_minutes} min) -> round {pos + 1}")

    return [
        Round(index=i + 1, capacity_minutes=capacity, assigned_tasks=tuple(b))
        for i, b in enumerate(bins)
    ]


# ── public API ───────────────────────────────────────────────────


def pack(
    tasks: Sequence[Task],
    round_count: int = 4,
    capacity: float = 25,
    policy: FillPolicy | str = FillPolicy.LEAST_FULL,
) -> list[Round]:
    """Assign every task to exactly one of *round_count* rounds.

    Tasks are taken largest first. Each goes to a round it still fits in,
    picked by *policy*; when none fits it goes to the round with the
    smallest total, which may then exceed *capacity*. Completed tasks are
    packed like any other. The result always holds *round_count* rounds in
    index order, empty ones included.

    Raises :class:`InvalidConfiguration` for a non-positive round count or
    capacity and :class:`InvalidTask` for a non-positive estimate.
    """
    return _pack(tasks, round_count, capacity, policy, pinned={})


def repack(
    tasks: Sequence[Task],
    previous: Mapping[str, int],
    round_count: int = 4,
    capacity: float = 25,
    policy: FillPolicy | str = FillPolicy.LEAST_FULL,
) -> list[Round]:
    """Like :func:`pack`, but completed tasks stay in the round they had.

    *previous* maps task id to its earlier round index. Completed tasks with
    an index in ``1..round_count`` are placed there first; everything else
    is packed around them.
    """
    check_config(round_count, capacity)
    pinned: dict[int, int] = {}
    for pos, task in enumerate(tasks):
        if not task.completed:
            continue
        index = previous.get(task.id)
        if index is None:
            continue
        if isinstance(index, int) and not isinstance(index, bool) and 1 <= index <= round_count:
            pinned[pos] = index
        else:
            log.debug(f"Task {task.id}: recorded round {index!r} out of range, repacking")
    return _pack(tasks, round_count, capacity, policy, pinned=pinned)


def assignments(rounds: Sequence[Round]) -> dict[str, int]:
    """Return task id -> round index for every placed task."""
    return {t.id: r.index for r in rounds for t in r.assigned_tasks}


def readiness(rounds: Sequence[Round], startable_ratio: float = 0.75) -> Readiness:
    """Evaluate the session-start gate over packed *rounds*.

    A session is startable once the packed minutes reach *startable_ratio*
    of the planned minutes (75 of 100 for 4x25) and full once they reach
    all of them.
    """
    if not rounds:
        raise InvalidConfiguration("readiness needs at least one round")
    if not _is_number(startable_ratio) or not 0 < startable_ratio <= 1:
        raise InvalidConfiguration(
            f"startable_ratio must be in (0, 1], got {startable_ratio!r}"
        )

    total = sum(r.total_minutes for r in rounds)
    planned = sum(r.capacity_minutes for r in rounds)
    threshold = startable_ratio * planned
    return Readiness(
        total_minutes=total,
        planned_minutes=planned,
        startable_threshold=threshold,
        startable=total >= threshold or math.isclose(total, threshold),
        full=total >= planned or math.isclose(total, planned),
    )
