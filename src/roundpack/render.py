"""Rich table and JSON views of packed rounds."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from rich.markup import escape
from rich.table import Table

from roundpack.packer import Readiness, Round, RoundStatus

_STATUS_STYLE = {
    RoundStatus.EMPTY: "dim",
    RoundStatus.OPTIMAL: "green",
    RoundStatus.OVERFILLED: "red",
}


def _fmt_minutes(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:g}"


def rounds_table(rounds: Sequence[Round], title: str = "Rounds") -> Table:
    table = Table(title=title, show_lines=True)
    table.add_column("#", justify="right", style="bold")
    table.add_column("Tasks")
    table.add_column("Minutes", justify="right")
    table.add_column("Status")

    for r in rounds:
        lines = []
        for t in r.assigned_tasks:
            mark = "[green]✓[/green] " if t.completed else ""
            lines.append(f"{mark}\\[{escape(t.id)}] {escape(t.title)} ({t.estimated_minutes} min)")
        style = _STATUS_STYLE[r.status]
        table.add_row(
            str(r.index),
            "\n".join(lines) or "[dim]-[/dim]",
            f"{_fmt_minutes(r.total_minutes)}/{_fmt_minutes(r.capacity_minutes)}",
            f"[{style}]{r.status.value}[/{style}]",
        )
    return table


def readiness_line(gate: Readiness) -> str:
    total = f"{_fmt_minutes(gate.total_minutes)}/{_fmt_minutes(gate.planned_minutes)} min"
    if gate.full:
        return f"[bold green]FULL SESSION[/bold green] {total}"
    if gate.startable:
        return f"[green]READY TO START[/green] {total}"
    if gate.total_minutes == 0:
        return f"[dim]ADD TASKS TO BEGIN[/dim] {total}"
    return f"[yellow]NEED {gate.minutes_to_start} MIN MORE[/yellow] {total}"


def rounds_to_dict(rounds: Sequence[Round], gate: Readiness | None = None) -> dict[str, Any]:
    data: dict[str, Any] = {
        "rounds": [
            {
                "index": r.index,
                "capacity_minutes": r.capacity_minutes,
                "total_minutes": r.total_minutes,
                "status": r.status.value,
                "tasks": [
                    {
                        "id": t.id,
                        "title": t.title,
                        "estimated_minutes": t.estimated_minutes,
                        "completed": t.completed,
                    }
                    for t in r.assigned_tasks
                ],
            }
            for r in rounds
        ]
    }
    if gate is not None:
        data["readiness"] = {
            "total_minutes": gate.total_minutes,
            "planned_minutes": gate.planned_minutes,
            "startable": gate.startable,
            "full": gate.full,
            "minutes_to_start": gate.minutes_to_start,
        }
    return data
