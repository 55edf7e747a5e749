"""Classification module for file selection and categorization."""

from .extension_filter import ExtensionFilter, SelectionMode, SelectionKind
from .scanner import FileScanner, FileRecord, ScanResult

__all__ = [
    "ExtensionFilter",
    "SelectionMode",
    "SelectionKind",
    "FileScanner",
    "FileRecord",
    "ScanResult",
]
