"""Split one oversized task into steps that each fit a round."""

from __future__ import annotations

import math
import re
from collections.abc import Sequence
from datetime import datetime, timezone

from roundpack.errors import InvalidTask
from roundpack.packer import check_config
from roundpack.tasks.model import Task


def slugify(text: str, max_len: int = 40) -> str:
    """Convert text to an id-safe slug."""
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    return slug[:max_len].rstrip("-")


def split_task(
    title: str,
    total_minutes: int,
    steps: Sequence[str] | int,
    round_count: int = 4,
    capacity: int = 25,
) -> list[Task]:
    """Break *title* into one task per step, sharing *total_minutes*.

    *steps* is either the step titles or just how many steps to make. The
    whole thing must fit one session (``round_count * capacity``) and no
    step may need more than *capacity* minutes. Minutes are spread exactly:
    60 minutes over 7 steps gives four 9s and three 8s.
    """
    check_config(round_count, capacity)

    if isinstance(steps, int):
        step_titles = [""] * steps
    else:
        step_titles = [s.strip() for s in steps]
    n = len(step_titles)

    if n <= 0:
        raise InvalidTask("Split needs at least one step.")
    if not isinstance(total_minutes, int) or isinstance(total_minutes, bool) or total_minutes <= 0:
        raise InvalidTask(f"Total time must be a positive number of minutes, got {total_minutes!r}.")

    session_minutes = round_count * capacity
    if total_minutes > session_minutes:
        raise InvalidTask(
            f"{total_minutes} min is too big for one session "
            f"({round_count} rounds max = {session_minutes} minutes). "
            "What's the most important part you can realistically finish today?"
        )

    per_step = math.ceil(total_minutes / n)
    if per_step > capacity:
        raise InvalidTask(
            f"Each step still exceeds {capacity} min (you'd need {per_step} min). "
            "Try adding more steps or reducing total time."
        )
    if n > total_minutes:
        raise InvalidTask(f"Cannot split {total_minutes} min into {n} steps of at least 1 min.")

    base, extra = divmod(total_minutes, n)
    slug = slugify(title) or "task"
    created_at = datetime.now(timezone.utc).isoformat(timespec="seconds")

    tasks: list[Task] = []
    for i, step in enumerate(step_titles, start=1):
        tasks.append(
            Task(
                id=f"{slug}-{i}",
                title=step or f"{title} (part {i}/{n})",
                estimated_minutes=base + (1 if i <= extra else 0),
                created_at=created_at,
            )
        )
    return tasks
