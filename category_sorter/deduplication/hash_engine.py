"""
Hash Engine
===========

Cryptographic content hashing for duplicate detection.
"""

from pathlib import Path
import hashlib

from category_sorter.utils.logging_config import get_logger
from category_sorter.utils.exceptions import FileReadError

logger = get_logger(__name__)


class FileHasher:
    """Computes a full-content digest of a file.

    Uses buffered reading for memory efficiency with large files.
    The digest depends only on file content, so it is stable across
    runs and platforms.
    """

    BUFFER_SIZE = 65536  # 64KB buffer

    def __init__(self, algorithm: str = "sha256", buffer_size: int = BUFFER_SIZE):
        """Initialize the hasher.

        Args:
            algorithm: Name of a hashlib algorithm.
            buffer_size: Read buffer size in bytes.
        """
        hashlib.new(algorithm)
        self.algorithm = algorithm
        self.buffer_size = buffer_size

    def compute(self, file_path: Path) -> str:
        """Compute the content digest.

        Args:
            file_path: Path to the file.

        Returns:
            Hexadecimal hash string.

        Raises:
            FileReadError: If the file vanished or cannot be read.
        """
        hasher = hashlib.new(self.algorithm)

        try:
            with open(file_path, 'rb') as f:
                while True:
                    data = f.read(self.buffer_size)
                    if not data:
                        break
                    hasher.update(data)

        except OSError as e:
            raise FileReadError(
                f"Cannot read file: {e.strerror or e}",
                file_path=str(file_path),
                cause=e
            )

        digest = hasher.hexdigest()
        logger.debug(f"{self.algorithm}({Path(file_path).name}) = {digest[:12]}")
        return digest
