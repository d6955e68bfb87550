"""Custom exceptions for chapterpress."""

from __future__ import annotations

from pathlib import Path


class ChapterpressError(Exception):
    """Base exception for chapterpress operations."""


class StorageError(ChapterpressError):
    """Filesystem failure while reading or writing project data."""

    def __init__(self, operation: str, path: Path | str, reason: object | None = None) -> None:
        self.operation = operation
        self.path = Path(path)
        message = f"Failed to {operation} {self.path}"
        if reason is not None:
            message = f"{message}: {reason}"
        super().__init__(message)


class ProjectNotFoundError(StorageError):
    """The project directory has no project.json."""

    def __init__(self, path: Path | str) -> None:
        super().__init__("find project record", path, "project.json not found")


class RecordParseError(ChapterpressError):
    """Persisted JSON for a project or settings record is malformed."""


class InvalidContentError(ChapterpressError):
    """Chapter content does not describe a valid document tree."""
