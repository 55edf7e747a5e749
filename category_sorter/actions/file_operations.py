"""
File Operations
===============

Moves each file into a category folder next to it. Failures are isolated
to the file that caused them; the remaining files are still moved.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence, TYPE_CHECKING
import shutil

from category_sorter.utils.logging_config import get_logger, LogContext
from category_sorter.utils.exceptions import (
    ConflictError,
    ErrorCode,
    FileProcessingError,
)

if TYPE_CHECKING:
    from category_sorter.classification.scanner import FileRecord

logger = get_logger(__name__)


@dataclass
class MoveOutcome:
    """A completed (or, in dry-run mode, planned) move."""
    source: Path
    destination: Path
    category: str


@dataclass
class MoveSummary:
    """Result of moving a working set.

    Attributes:
        moved: Successful moves in processing order.
        failures: Per-file errors; those files were left in place.
        dry_run: True if nothing was actually touched.
    """
    moved: List[MoveOutcome] = field(default_factory=list)
    failures: List[FileProcessingError] = field(default_factory=list)
    dry_run: bool = False

    @property
    def attempted(self) -> int:
        return len(self.moved) + len(self.failures)


class FileMover:
    """Moves files into ``<parent>/<category>/<name>``.

    An existing file at the destination is never overwritten.
    """

    def __init__(self, dry_run: bool = False):
        """Initialize the mover.

        Args:
            dry_run: Report planned moves without touching the filesystem.
        """
        self.dry_run = dry_run

    @staticmethod
    def destination_for(record: "FileRecord") -> Path:
        """Destination path of a record: its parent / category / name."""
        return record.path.parent / record.category / record.name

    def _ensure_directory(self, dest_dir: Path, record: "FileRecord") -> None:
        """Create the category folder if absent.

        Only the category folder itself is created; its parent is the
        scanned directory.
        """
        if dest_dir.is_dir():
            return
        if dest_dir.exists():
            raise FileProcessingError(
                f"Cannot create folder {dest_dir.name}: a file with that name exists",
                file_path=str(record.path),
                details={"destination": str(dest_dir)}
            )
        if self.dry_run:
            return
        try:
            dest_dir.mkdir(exist_ok=True)
        except OSError as e:
            raise FileProcessingError(
                f"Cannot create folder {dest_dir}: {e.strerror or e}",
                file_path=str(record.path),
                cause=e
            )

    def move_file(self, record: "FileRecord") -> MoveOutcome:
        """Move one file into its category folder.

        Args:
            record: File to move.

        Returns:
            The completed move.

        Raises:
            ConflictError: If the destination already holds a same-named file.
            FileProcessingError: If the source vanished or the move failed.
        """
        source = record.path
        dest_path = self.destination_for(record)

        if not source.exists():
            raise FileProcessingError(
                "Source file does not exist",
                file_path=str(source),
                error_code=ErrorCode.MOVE_FAILED
            )

        self._ensure_directory(dest_path.parent, record)

        if dest_path.exists() or dest_path.is_symlink():
            raise ConflictError(
                f"{record.category}/{record.name} already exists",
                file_path=str(source),
                destination=str(dest_path)
            )

        if not self.dry_run:
            try:
                shutil.move(str(source), str(dest_path))
            except OSError as e:
                raise FileProcessingError(
                    f"Failed to move file: {e.strerror or e}",
                    file_path=str(source),
                    error_code=ErrorCode.MOVE_FAILED,
                    cause=e
                )

        return MoveOutcome(source=source, destination=dest_path, category=record.category)

    def move_all(self, records: Sequence["FileRecord"]) -> MoveSummary:
        """Move every record, continuing past per-file failures.

        Args:
            records: Final working set.

        Returns:
            MoveSummary with successes and failures.
        """
        summary = MoveSummary(dry_run=self.dry_run)
        verb = "Would move" if self.dry_run else "Moved"

        for record in records:
            with LogContext(logger, file_path=str(record.path),
                            category=record.category, operation="move"):
                try:
                    outcome = self.move_file(record)
                except FileProcessingError as e:
                    summary.failures.append(e)
                    logger.error(f"Could not move {record.name}: {e.message}")
                    continue

                summary.moved.append(outcome)
                logger.info(f"{verb}: {record.name} -> {record.category}/{record.name}")

        logger.info(
            f"{verb} {len(summary.moved)} of {summary.attempted} file(s)"
            + (f", {len(summary.failures)} failed" if summary.failures else "")
        )
        return summary
