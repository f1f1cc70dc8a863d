"""Exceptions raised by the packer, the task loader and the split helper."""

from __future__ import annotations


class PackerError(ValueError):
    """Base class for roundpack errors."""


class InvalidConfiguration(PackerError):
    """Raised when the round count, capacity or readiness ratio is unusable."""


class InvalidTask(PackerError):
    """Raised for tasks that cannot be packed (non-positive estimate, impossible split)."""


class TaskFileError(PackerError):
    """Raised when a task file cannot be parsed into a TaskFile."""
