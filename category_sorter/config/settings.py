"""
Configuration Management System
===============================

Provides dataclass-based configuration with YAML file loading support.
All settings are validated and have sensible defaults.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Any, Dict, List
import hashlib
import logging

import yaml

from category_sorter.config.categories import CategoryRegistry, DEFAULT_CATEGORIES
from category_sorter.utils.exceptions import ConfigurationError
from category_sorter.utils.logging_config import LoggingConfig

logger = logging.getLogger(__name__)


@dataclass
class HashingConfig:
    """Content hashing settings.

    Attributes:
        algorithm: hashlib algorithm used for duplicate detection.
        buffer_size: Read buffer size in bytes.
    """
    algorithm: str = "sha256"
    buffer_size: int = 65536  # 64KB

    def __post_init__(self):
        self.algorithm = str(self.algorithm).lower()
        if self.algorithm not in hashlib.algorithms_guaranteed:
            raise ConfigurationError(
                f"Unsupported hash algorithm: {self.algorithm}",
                config_key="hashing.algorithm"
            )
        if self.algorithm.startswith("shake_"):
            raise ConfigurationError(
                "Variable-length digests are not supported",
                config_key="hashing.algorithm"
            )
        if isinstance(self.buffer_size, bool):
            raise ConfigurationError(
                "Hash buffer size must be an integer",
                config_key="hashing.buffer_size"
            )
        try:
            buffer_size = int(self.buffer_size)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Hash buffer size must be an integer, got {self.buffer_size!r}",
                config_key="hashing.buffer_size",
                cause=e
            )
        if buffer_size <= 0:
            raise ConfigurationError(
                "Hash buffer size must be positive",
                config_key="hashing.buffer_size"
            )
        self.buffer_size = buffer_size

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HashingConfig":
        """Create HashingConfig from dictionary."""
        if not data:
            return cls()
        return cls(
            algorithm=data.get("algorithm", cls.algorithm),
            buffer_size=data.get("buffer_size", cls.buffer_size),
        )


@dataclass
class Config:
    """Main configuration container.

    Aggregates all configuration sections and provides loading from YAML.
    """
    categories: Dict[str, List[str]] = field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_CATEGORIES.items()}
    )
    hashing: HashingConfig = field(default_factory=HashingConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """Load configuration from YAML file.

        Args:
            config_path: Path to the configuration file. If None, the
                        built-in defaults are used.

        Returns:
            Config instance with loaded settings.

        Raises:
            ConfigurationError: If the file is missing or not valid YAML.
        """
        if config_path is None:
            logger.debug("No config file given, using defaults")
            return cls()

        config_path = Path(config_path).expanduser()
        if not config_path.is_file():
            raise ConfigurationError(
                f"Config file not found: {config_path}",
                details={"config_path": str(config_path)}
            )

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Failed to parse config file: {config_path}",
                cause=e
            )
        except OSError as e:
            raise ConfigurationError(
                f"Failed to read config file: {config_path}",
                cause=e
            )

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Config file must contain a mapping: {config_path}"
            )

        logger.info(f"Loaded configuration from {config_path}")
        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create Config from dictionary."""
        categories = data.get("categories")
        if categories is None:
            categories = {k: list(v) for k, v in DEFAULT_CATEGORIES.items()}
        elif not isinstance(categories, dict):
            raise ConfigurationError(
                "Categories must be a mapping of name to extensions",
                config_key="categories"
            )

        sections = {}
        for key in ("hashing", "logging"):
            section = data.get(key) or {}
            if not isinstance(section, dict):
                raise ConfigurationError(
                    f"Config section '{key}' must be a mapping",
                    config_key=key
                )
            sections[key] = section

        try:
            logging_config = LoggingConfig.from_dict(sections["logging"])
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Invalid logging setting: {e}",
                config_key="logging",
                cause=e
            )

        return cls(
            categories=categories,
            hashing=HashingConfig.from_dict(sections["hashing"]),
            logging=logging_config,
        )

    def build_registry(self) -> CategoryRegistry:
        """Build the category registry described by this configuration."""
        return CategoryRegistry.from_mapping(self.categories)
