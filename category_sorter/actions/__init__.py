"""Actions module for file operations."""

from .file_operations import FileMover, MoveOutcome, MoveSummary

__all__ = [
    "FileMover",
    "MoveOutcome",
    "MoveSummary",
]
