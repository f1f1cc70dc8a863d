"""roundpack CLI — brain-dump tasks, pack them into rounds, check the session gate.

Installed as ``roundpack`` console_script via pipx / pip.
"""

from __future__ import annotations

import json
import sys
from datetime import datetime, timezone
from pathlib import Path

import click
from rich.markup import escape

from roundpack import __version__, log
from roundpack.config import Config
from roundpack.errors import InvalidConfiguration, InvalidTask, PackerError, TaskFileError
from roundpack.packer import (
    FillPolicy,
    Round,
    RoundStatus,
    assignments,
    check_config,
    readiness,
    repack,
)
from roundpack.render import readiness_line, rounds_table, rounds_to_dict
from roundpack.tasks.loader import dump_task_file, load_task_file, new_task_id
from roundpack.tasks.model import Task, TaskFile
from roundpack.tasks.split import split_task
from roundpack.tasks.validate import validate


CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])

FILE_ARG = click.Path(dir_okay=False, path_type=Path)


# ── helpers ──────────────────────────────────────────────────────


def _load_or_exit(path: Path) -> TaskFile:
    try:
        return load_task_file(path)
    except FileNotFoundError:
        log.error(f"Task file not found: {path}")
        sys.exit(1)
    except TaskFileError as exc:
        log.error(escape(str(exc)))
        sys.exit(1)


def _load_or_empty(path: Path) -> TaskFile:
    if not path.exists():
        log.debug(f"{path} does not exist yet, starting an empty brain dump")
        return TaskFile()
    return _load_or_exit(path)


def _validate_or_exit(tf: TaskFile, path: Path) -> None:
    errors = validate(tf)
    if not errors:
        return
    log.error(f"{path} has {len(errors)} problem(s):")
    for err in errors:
        log.error(f"  - {escape(err)}")
    sys.exit(1)


def _pack_file(cfg: Config, tf: TaskFile) -> list[Round]:
    previous = tf.previous_rounds() if cfg.pin_completed else {}
    try:
        return repack(
            tf.tasks,
            previous,
            round_count=cfg.round_count,
            capacity=cfg.capacity_minutes,
            policy=cfg.fill_policy(),
        )
    except PackerError as exc:
        log.error(escape(str(exc)))
        sys.exit(1)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


# ── group ────────────────────────────────────────────────────────


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option("--rounds", "round_count", type=int, default=None, help="Rounds per session (default 4, env ROUNDPACK_ROUNDS)")
@click.option("--capacity", type=int, default=None, help="Minutes per round (default 25, env ROUNDPACK_CAPACITY)")
@click.option(
    "--policy",
    type=click.Choice([p.value for p in FillPolicy], case_sensitive=False),
    default=None,
    help="Which fitting round gets the next task (env ROUNDPACK_POLICY)",
)
@click.option("--quick", is_flag=True, help="Quick battle: one round, startable at 80%")
@click.option("-v", "--verbose", is_flag=True, help="Show debug output")
@click.version_option(__version__, prog_name="roundpack")
@click.pass_context
def main(
    ctx: click.Context,
    round_count: int | None,
    capacity: int | None,
    policy: str | None,
    quick: bool,
    verbose: bool,
) -> None:
    """roundpack — pack brain-dumped tasks into fixed-length work rounds.

    \b
    EXAMPLES:
      roundpack add tasks.yaml "Answer emails" -m 15
      roundpack split tasks.yaml "Write report" -m 60 --steps 3
      roundpack pack tasks.yaml                # 4 rounds x 25 min
      roundpack --policy most-full pack tasks.yaml --json
      roundpack --quick check tasks.yaml       # single 25 min round
    """
    log.set_verbose(verbose)
    log.use_stderr(False)

    try:
        cfg = Config(
            round_count=round_count,
            capacity_minutes=capacity,
            policy=policy or "",
            quick=quick,
            verbose=verbose,
        )
        cfg.fill_policy()
        check_config(cfg.round_count, cfg.capacity_minutes)
    except InvalidConfiguration as exc:
        raise click.UsageError(str(exc)) from None

    log.debug(
        f"Session: {cfg.round_count} x {cfg.capacity_minutes} min, policy {cfg.policy}"
    )
    ctx.obj = cfg


# ── Subcommand: pack ─────────────────────────────────────────────


@main.command()
@click.argument("file", type=FILE_ARG)
@click.option("--json", "as_json", is_flag=True, help="Print rounds as JSON")
@click.option("--save", is_flag=True, help="Record each task's round in FILE")
@click.option("--no-pin", is_flag=True, help="Repack completed tasks too")
@click.pass_obj
def pack(cfg: Config, file: Path, as_json: bool, save: bool, no_pin: bool) -> None:
    """Pack the tasks in FILE into rounds.

    Completed tasks that already have a recorded round stay there unless
    --no-pin is given.
    """
    if as_json:
        log.use_stderr(True)
    if no_pin:
        cfg.pin_completed = False

    tf = _load_or_exit(file)
    _validate_or_exit(tf, file)
    rounds = _pack_file(cfg, tf)
    gate = readiness(rounds, cfg.startable_ratio)

    if as_json:
        click.echo(json.dumps(rounds_to_dict(rounds, gate), indent=2))
    else:
        log.console.print(rounds_table(rounds))
        log.console.print(readiness_line(gate))

    overfilled = [str(r.index) for r in rounds if r.status is RoundStatus.OVERFILLED]
    if overfilled:
        log.warn(
            f"Overfilled round(s): {', '.join(overfilled)}. "
            "Consider 'roundpack split' for tasks longer than a round."
        )

    if save:
        placed = assignments(rounds)
        for task in tf.tasks:
            task.round = placed.get(task.id)
        dump_task_file(tf, file)
        log.success(f"Saved round assignments to {file}")


# ── Subcommand: add ──────────────────────────────────────────────


@main.command()
@click.argument("file", type=FILE_ARG)
@click.argument("title")
@click.option("--minutes", "-m", type=click.IntRange(min=1), default=25, show_default=True, help="Estimated minutes")
@click.pass_obj
def add(cfg: Config, file: Path, title: str, minutes: int) -> None:
    """Add a task to FILE (created if missing)."""
    title = title.strip()
    if not title:
        raise click.BadParameter("Title cannot be empty.", param_hint="TITLE")

    tf = _load_or_empty(file)

    if cfg.quick:
        remaining = cfg.planned_minutes - tf.total_minutes()
        if remaining <= 0:
            log.error(f"Quick battle is full ({tf.total_minutes()}/{cfg.planned_minutes} min).")
            sys.exit(1)
        if minutes > remaining:
            log.warn(f"Only {remaining} min left in the quick battle; estimate trimmed from {minutes}.")
            minutes = remaining

    task = Task(id=new_task_id(), title=title, estimated_minutes=minutes, created_at=_now())
    tf.tasks.append(task)
    dump_task_file(tf, file)
    log.success(f"Added \\[{task.id}] {escape(title)} ({minutes} min), {tf.total_minutes()} min total")


# ── Subcommand: split ────────────────────────────────────────────


@main.command()
@click.argument("file", type=FILE_ARG)
@click.argument("title")
@click.option("--minutes", "-m", type=int, required=True, help="Total minutes for the whole task")
@click.option("--step", "step_titles", multiple=True, help="Step title (repeat for each step)")
@click.option("--steps", "step_count", type=int, default=0, help="Number of unnamed steps")
@click.pass_obj
def split(
    cfg: Config,
    file: Path,
    title: str,
    minutes: int,
    step_titles: tuple[str, ...],
    step_count: int,
) -> None:
    """Split a large task into steps that each fit a round, and add them to FILE.

    \b
    EXAMPLES:
      roundpack split tasks.yaml "Write report" -m 60 --steps 3
      roundpack split tasks.yaml "Tax return" -m 45 --step "Find receipts" --step "Fill form"
    """
    if step_titles and step_count:
        raise click.UsageError("Use either --step (repeatable) or --steps N, not both.")
    if not step_titles and not step_count:
        raise click.UsageError("Give the steps with --step TEXT or --steps N.")

    tf = _load_or_empty(file)
    try:
        new_tasks = split_task(
            title,
            minutes,
            list(step_titles) or step_count,
            round_count=cfg.round_count,
            capacity=cfg.capacity_minutes,
        )
    except InvalidTask as exc:
        log.error(escape(str(exc)))
        sys.exit(1)

    existing = {t.id for t in tf.tasks}
    for task in new_tasks:
        if task.id in existing:
            task.id = new_task_id()
        existing.add(task.id)
        log.debug(f"Split step \\[{task.id}] {escape(task.title)} ({task.estimated_minutes} min)")

    tf.tasks.extend(new_tasks)
    dump_task_file(tf, file)
    log.success(f"Split '{escape(title)}' into {len(new_tasks)} tasks ({minutes} min total)")


# ── Subcommand: check ────────────────────────────────────────────


@main.command()
@click.argument("file", type=FILE_ARG)
@click.pass_obj
def check(cfg: Config, file: Path) -> None:
    """Exit 0 when FILE packs into a startable session, 1 otherwise."""
    tf = _load_or_exit(file)
    _validate_or_exit(tf, file)
    rounds = _pack_file(cfg, tf)
    gate = readiness(rounds, cfg.startable_ratio)
    log.console.print(readiness_line(gate))
    if not gate.startable:
        sys.exit(1)
