"""Configuration module for Category Sorter."""

from .settings import Config, HashingConfig
from .categories import (
    Category,
    CategoryRegistry,
    DEFAULT_CATEGORIES,
    DEFAULT_REGISTRY,
    normalize_extension,
)

__all__ = [
    "Config",
    "HashingConfig",
    "Category",
    "CategoryRegistry",
    "DEFAULT_CATEGORIES",
    "DEFAULT_REGISTRY",
    "normalize_extension",
]
