"""Schema validation for task files before they reach the packer."""

from __future__ import annotations

from roundpack.tasks.model import TaskFile

SUPPORTED_VERSIONS = (1,)


def validate(tf: TaskFile) -> list[str]:
    """Return a list of human-readable problems; empty means valid.

    An empty task list is valid: it packs into empty rounds. Recorded
    rounds are not checked here, repack() ignores out-of-range ones.
    """
    errors: list[str] = []

    if tf.version not in SUPPORTED_VERSIONS:
        errors.append(f"Unsupported version: {tf.version}")

    seen: set[str] = set()
    for pos, task in enumerate(tf.tasks, start=1):
        label = task.id or f"#{pos}"
        if not task.id:
            errors.append(f"Task #{pos}: missing id")
        elif task.id in seen:
            errors.append(f"Duplicate id: {task.id}")
        seen.add(task.id)

        if not task.title.strip():
            errors.append(f"Task {label}: missing title")

        minutes = task.estimated_minutes
        if not isinstance(minutes, int) or isinstance(minutes, bool):
            errors.append(f"Task {label}: estimated_minutes must be an integer, got {minutes!r}")
        elif minutes <= 0:
            errors.append(f"Task {label}: estimated_minutes must be positive, got {minutes}")

    return errors
