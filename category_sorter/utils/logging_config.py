"""
Logging Configuration
=====================

Provides console logging for interactive runs and optional structured JSON
logging to a rotating file. Every record carries the id of the current run.
"""

import logging
import logging.handlers
import json
import sys
import time
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass
import threading


ROOT_LOGGER_NAME = "category_sorter"

_thread_local = threading.local()


def get_run_id() -> str:
    """Get the id of the current run."""
    if not hasattr(_thread_local, 'run_id'):
        _thread_local.run_id = new_run_id()
    return _thread_local.run_id


def set_run_id(run_id: str) -> None:
    """Set the id of the current run."""
    _thread_local.run_id = run_id


def new_run_id() -> str:
    return str(uuid.uuid4())[:8]


class JSONFormatter(logging.Formatter):
    """Formats log records as JSON for structured logging."""

    CONTEXT_FIELDS = ("file_path", "category", "operation", "duration_ms")

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as JSON."""
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "run_id": get_run_id(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key in self.CONTEXT_FIELDS:
            if hasattr(record, key):
                log_data[key] = getattr(record, key)

        return json.dumps(log_data)


class ConsoleFormatter(logging.Formatter):
    """Human-readable console formatter, coloured on a terminal."""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, use_color: bool = False):
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        """Format a record as a single console line."""
        color = self.COLORS.get(record.levelname, '') if self.use_color else ''
        reset = self.RESET if self.use_color else ''
        timestamp = datetime.now().strftime('%H:%M:%S')

        msg = f"{color}[{timestamp}] {record.levelname:8}{reset} "
        msg += f"[{get_run_id()}] "
        msg += f"{record.name}: {record.getMessage()}"

        if record.exc_info:
            msg += "\n" + self.formatException(record.exc_info)

        return msg


@dataclass
class LoggingConfig:
    """Configuration for the logging system.

    Attributes:
        level: Log level name.
        log_file: Path of the JSON log file; no file logging when None.
        console_output: Whether to log to stdout.
        json_format: Use JSON for the console too.
        max_file_size: Rotate the log file after this many bytes.
        backup_count: Number of rotated files to keep.
    """
    level: str = "INFO"
    log_file: Optional[Path] = None
    console_output: bool = True
    json_format: bool = False
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LoggingConfig":
        """Create LoggingConfig from dictionary."""
        if not data:
            return cls()
        if not isinstance(data, dict):
            raise TypeError(f"expected a mapping, got {type(data).__name__}")

        level = str(data.get("level", cls.level)).upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {level!r}")

        log_file = data.get("log_file")
        return cls(
            level=level,
            log_file=Path(log_file).expanduser() if log_file else None,
            console_output=_as_bool(data.get("console_output", cls.console_output), "console_output"),
            json_format=_as_bool(data.get("json_format", cls.json_format), "json_format"),
            max_file_size=int(data.get("max_file_size", cls.max_file_size)),
            backup_count=int(data.get("backup_count", cls.backup_count)),
        )


def _as_bool(value: Any, key: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be true or false, got {value!r}")
    return value


def setup_logging(config: Optional[LoggingConfig] = None) -> None:
    """Set up the logging system.

    Args:
        config: Logging configuration. Uses defaults if not provided.
    """
    if config is None:
        config = LoggingConfig()

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(getattr(logging, config.level.upper(), logging.INFO))

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    if config.console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        if config.json_format:
            console_handler.setFormatter(JSONFormatter())
        else:
            console_handler.setFormatter(
                ConsoleFormatter(use_color=sys.stdout.isatty())
            )
        root_logger.addHandler(console_handler)

    if config.log_file:
        config.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            config.log_file,
            maxBytes=config.max_file_size,
            backupCount=config.backup_count,
            encoding='utf-8'
        )
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)

    # Prevent propagation to root logger
    root_logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a specific module.

    Args:
        name: Name of the module (typically __name__).

    Returns:
        Logger instance under the application namespace.
    """
    prefix = ROOT_LOGGER_NAME + "."
    if name.startswith(prefix):
        name = name[len(prefix):]
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


class LogContext:
    """Context manager for adding extra context to log messages."""

    def __init__(self, logger: logging.Logger, **context):
        """Initialize with context fields.

        Args:
            logger: Logger to add context to.
            **context: Key-value pairs to add to log records.
        """
        self.logger = logger
        self.context = context
        self._old_factory = None

    def __enter__(self):
        """Set up the log record factory with extra context."""
        old_factory = logging.getLogRecordFactory()
        context = self.context

        def record_factory(*args, **kwargs):
            record = old_factory(*args, **kwargs)
            for key, value in context.items():
                setattr(record, key, value)
            return record

        self._old_factory = old_factory
        logging.setLogRecordFactory(record_factory)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Restore the original log record factory."""
        if self._old_factory:
            logging.setLogRecordFactory(self._old_factory)
        return False


class Timer:
    """Context manager for timing operations and logging duration."""

    def __init__(self, logger: logging.Logger, operation: str):
        """Initialize timer.

        Args:
            logger: Logger to log the duration to.
            operation: Name of the operation being timed.
        """
        self.logger = logger
        self.operation = operation
        self.start_time = None
        self.duration_ms = 0.0

    def __enter__(self):
        """Start the timer."""
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Stop the timer and log the duration."""
        self.duration_ms = round((time.perf_counter() - self.start_time) * 1000, 2)

        if exc_type is None:
            with LogContext(self.logger, operation=self.operation,
                            duration_ms=self.duration_ms):
                self.logger.debug(
                    f"Operation completed: {self.operation} ({self.duration_ms} ms)"
                )

        return False
