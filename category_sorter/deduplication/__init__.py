"""Deduplication module."""

from .hash_engine import FileHasher
from .resolver import (
    Disposition,
    DuplicateGroup,
    DuplicateResolver,
    ResolutionResult,
    find_duplicate_groups,
    parse_disposition,
)

__all__ = [
    "FileHasher",
    "Disposition",
    "DuplicateGroup",
    "DuplicateResolver",
    "ResolutionResult",
    "find_duplicate_groups",
    "parse_disposition",
]
