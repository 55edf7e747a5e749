"""
File Scanner
============

Lists the top-level files of a directory that match the target
extensions, and turns each into an immutable FileRecord carrying its
category and content hash.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, List

from category_sorter.config.categories import CategoryRegistry, normalize_extension
from category_sorter.deduplication.hash_engine import FileHasher
from category_sorter.utils.exceptions import (
    ConfigurationError,
    FileReadError,
    TargetNotADirectoryError,
    TargetNotFoundError,
    TargetNotReadableError,
)
from category_sorter.utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class FileRecord:
    """A scanned file.

    Attributes:
        path: Absolute path to the file.
        name: Base name, preserved when the file is moved.
        extension: Lower-case, dot-prefixed extension.
        category: Category name the file is sorted into.
        content_hash: Hex digest of the file content.
    """
    path: Path
    name: str
    extension: str
    category: str
    content_hash: str

    def __post_init__(self):
        path = Path(self.path)
        if not path.is_absolute():
            raise ValueError(f"FileRecord path must be absolute: {path}")
        if path.name != self.name:
            raise ValueError(f"FileRecord name {self.name!r} does not match {path}")
        if not self.category:
            raise ValueError(f"FileRecord for {path} has no category")
        if not self.content_hash:
            raise ValueError(f"FileRecord for {path} has no content hash")
        object.__setattr__(self, "path", path)
        object.__setattr__(self, "extension", normalize_extension(self.extension))


@dataclass
class ScanResult:
    """Outcome of scanning a directory.

    Attributes:
        directory: Directory that was scanned.
        records: Records in scan order (sorted by file name).
        failures: Per-file read errors; those files are excluded.
    """
    directory: Path
    records: List[FileRecord] = field(default_factory=list)
    failures: List[FileReadError] = field(default_factory=list)


class FileScanner:
    """Scans a single directory level and classifies matching files."""

    def __init__(self, registry: CategoryRegistry, hasher: FileHasher = None):
        """Initialize the scanner.

        Args:
            registry: Category registry used for classification.
            hasher: Content hasher. Defaults to SHA-256.
        """
        self.registry = registry
        self.hasher = hasher or FileHasher()

    @staticmethod
    def validate_directory(directory: Path) -> Path:
        """Check that the target exists and is a directory.

        Returns:
            The absolute directory path.

        Raises:
            TargetNotFoundError: If the path does not exist.
            TargetNotADirectoryError: If the path is not a directory.
        """
        directory = Path(directory).expanduser().absolute()
        if not directory.exists():
            raise TargetNotFoundError(
                f"Directory not found: {directory}",
                directory=str(directory)
            )
        if not directory.is_dir():
            raise TargetNotADirectoryError(
                f"Not a directory: {directory}",
                directory=str(directory)
            )
        return directory

    def candidates(self, directory: Path, extensions: FrozenSet[str]) -> List[Path]:
        """Top-level regular files whose extension is in ``extensions``.

        Sorted by name so scan order does not depend on the filesystem.
        """
        matches = []
        try:
            for entry in directory.iterdir():
                if not entry.is_file():
                    continue
                if entry.suffix.lower() in extensions:
                    matches.append(entry)
        except OSError as e:
            raise TargetNotReadableError(
                f"Cannot list directory: {directory}: {e.strerror or e}",
                directory=str(directory),
                cause=e
            )
        return sorted(matches, key=lambda p: p.name)

    def scan(self, directory: Path, extensions: FrozenSet[str]) -> ScanResult:
        """Scan ``directory`` and build a record for each matching file.

        Args:
            directory: Directory whose top-level files are considered.
            extensions: Target extensions (normalized).

        Returns:
            ScanResult with records and per-file failures.

        Raises:
            TargetNotFoundError: If the directory does not exist.
            TargetNotADirectoryError: If the path is not a directory.
            TargetNotReadableError: If the directory cannot be listed.
        """
        directory = self.validate_directory(directory)
        result = ScanResult(directory=directory)

        logger.info(f"Scanning directory: {directory}")

        for file_path in self.candidates(directory, extensions):
            extension = file_path.suffix.lower()
            category = self.registry.classify(extension)
            if category is None:
                # Target extensions always come from the registry
                raise ConfigurationError(
                    f"Extension {extension} is not in the category registry"
                )

            try:
                content_hash = self.hasher.compute(file_path)
            except FileReadError as e:
                logger.error(f"Skipping {file_path.name}: {e.message}")
                result.failures.append(e)
                continue

            record = FileRecord(
                path=file_path,
                name=file_path.name,
                extension=extension,
                category=category,
                content_hash=content_hash,
            )
            result.records.append(record)
            logger.debug(f"Found: {record.name} [{record.category}]")

        logger.info(
            f"Found {len(result.records)} matching file(s)"
            + (f", {len(result.failures)} unreadable" if result.failures else "")
        )
        return result
