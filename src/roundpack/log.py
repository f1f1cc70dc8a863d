"""Logging utilities with colored output via Rich."""

from __future__ import annotations

from rich.console import Console

console = Console(highlight=False)
_err_console = Console(highlight=False, stderr=True)

_verbose = False
_out = console


def set_verbose(enabled: bool) -> None:
    global _verbose
    _verbose = enabled


def use_stderr(enabled: bool) -> None:
    """Send every message to stderr (keeps stdout clean for ``--json``)."""
    global _out
    _out = _err_console if enabled else console


def info(msg: str) -> None:
    _out.print(f"[blue]\\[INFO][/blue] {msg}")


def success(msg: str) -> None:
    _out.print(f"[green]\\[OK][/green] {msg}")


def warn(msg: str) -> None:
    _out.print(f"[yellow]\\[WARN][/yellow] {msg}")


def error(msg: str) -> None:
    _err_console.print(f"[red]\\[ERROR][/red] {msg}")


def debug(msg: str) -> None:
    if _verbose:
        _out.print(f"[dim]\\[DEBUG] {msg}[/dim]")
