"""Utilities module for Category Sorter."""

from .logging_config import setup_logging, get_logger, LoggingConfig
from .exceptions import (
    ErrorCode,
    SorterError,
    ConfigurationError,
    ValidationError,
    TargetNotFoundError,
    TargetNotADirectoryError,
    TargetNotReadableError,
    FileProcessingError,
    FileReadError,
    ConflictError,
    InputError,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "LoggingConfig",
    "ErrorCode",
    "SorterError",
    "ConfigurationError",
    "ValidationError",
    "TargetNotFoundError",
    "TargetNotADirectoryError",
    "TargetNotReadableError",
    "FileProcessingError",
    "FileReadError",
    "ConflictError",
    "InputError",
]
