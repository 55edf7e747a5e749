"""
Custom Exceptions
=================

Defines custom exception classes for the Category Sorter.
All exceptions include error codes for programmatic handling.
"""

from enum import Enum
from typing import Optional


class ErrorCode(Enum):
    """Error codes for programmatic error handling."""

    # General errors (1000-1099)
    UNKNOWN_ERROR = 1000
    CONFIGURATION_ERROR = 1001
    VALIDATION_ERROR = 1002

    # Target directory errors (1100-1199)
    TARGET_NOT_FOUND = 1100
    TARGET_NOT_A_DIRECTORY = 1101
    TARGET_NOT_READABLE = 1102

    # Per-file errors (1200-1299)
    FILE_READ_FAILED = 1200
    DESTINATION_CONFLICT = 1201
    MOVE_FAILED = 1202

    # Interactive errors (1300-1399)
    INVALID_RESPONSE = 1300


class SorterError(Exception):
    """Base exception for all Category Sorter errors.

    Attributes:
        message: Human-readable error message.
        error_code: Programmatic error code.
        details: Additional error context.
        cause: Original exception that caused this error.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        details: Optional[dict] = None,
        cause: Optional[Exception] = None
    ):
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Programmatic error code.
            details: Additional context as key-value pairs.
            cause: Original exception if wrapping another error.
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        """Return a formatted error string."""
        result = f"[{self.error_code.name}] {self.message}"
        if self.details:
            result += f" | Details: {self.details}"
        if self.cause:
            result += f" | Caused by: {type(self.cause).__name__}: {self.cause}"
        return result

    def to_dict(self) -> dict:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": type(self).__name__,
            "message": self.message,
            "error_code": self.error_code.value,
            "error_name": self.error_code.name,
            "details": self.details,
            "cause": str(self.cause) if self.cause else None,
        }


class ConfigurationError(SorterError):
    """Raised when the run cannot be configured.

    Examples:
        - Unknown category passed to --only/--except
        - Both --only and --except supplied
        - Invalid configuration file
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.CONFIGURATION_ERROR,
        **kwargs
    ):
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key
        super().__init__(
            message,
            error_code=error_code,
            details=details,
            **kwargs
        )


class ValidationError(ConfigurationError):
    """Raised when a category selection refers to unknown categories."""

    def __init__(self, message: str, categories: Optional[list] = None, **kwargs):
        details = kwargs.pop("details", {})
        if categories:
            details["categories"] = list(categories)
        super().__init__(
            message,
            error_code=ErrorCode.VALIDATION_ERROR,
            details=details,
            **kwargs
        )


class TargetNotFoundError(SorterError):
    """Raised when the directory to organize does not exist."""

    def __init__(self, message: str, directory: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if directory:
            details["directory"] = directory
        super().__init__(
            message,
            error_code=ErrorCode.TARGET_NOT_FOUND,
            details=details,
            **kwargs
        )


class TargetNotADirectoryError(SorterError):
    """Raised when the path to organize exists but is not a directory."""

    def __init__(self, message: str, directory: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if directory:
            details["directory"] = directory
        super().__init__(
            message,
            error_code=ErrorCode.TARGET_NOT_A_DIRECTORY,
            details=details,
            **kwargs
        )


class TargetNotReadableError(SorterError):
    """Raised when the directory to organize cannot be listed."""

    def __init__(self, message: str, directory: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if directory:
            details["directory"] = directory
        super().__init__(
            message,
            error_code=ErrorCode.TARGET_NOT_READABLE,
            details=details,
            **kwargs
        )


class FileProcessingError(SorterError):
    """Raised when a single file cannot be processed.

    Per-file errors never abort the run; the file is excluded
    and the error is reported.
    """

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.MOVE_FAILED,
        **kwargs
    ):
        details = kwargs.pop("details", {})
        if file_path:
            details["file_path"] = file_path
        super().__init__(
            message,
            error_code=error_code,
            details=details,
            **kwargs
        )

    @property
    def file_path(self) -> Optional[str]:
        return self.details.get("file_path")


class FileReadError(FileProcessingError):
    """Raised when a file cannot be read for hashing."""

    def __init__(self, message: str, file_path: Optional[str] = None, **kwargs):
        super().__init__(
            message,
            file_path=file_path,
            error_code=ErrorCode.FILE_READ_FAILED,
            **kwargs
        )


class ConflictError(FileProcessingError):
    """Raised when the destination already holds a file with the same name."""

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        destination: Optional[str] = None,
        **kwargs
    ):
        details = kwargs.pop("details", {})
        if destination:
            details["destination"] = destination
        super().__init__(
            message,
            file_path=file_path,
            error_code=ErrorCode.DESTINATION_CONFLICT,
            details=details,
            **kwargs
        )


class InputError(SorterError):
    """Raised for a response the duplicate prompt does not accept."""

    def __init__(self, message: str, response: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if response is not None:
            details["response"] = response
        super().__init__(
            message,
            error_code=ErrorCode.INVALID_RESPONSE,
            details=details,
            **kwargs
        )
