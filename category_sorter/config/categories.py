"""
Category Definitions
====================

Defines the file categories and the extensions recognised for each.

Lookups are case-insensitive and extensions are always stored dot-prefixed
and lower-case. When two categories claim the same extension the category
registered first wins.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple, FrozenSet

from category_sorter.utils.exceptions import ConfigurationError
from category_sorter.utils.logging_config import get_logger

logger = get_logger(__name__)


def normalize_extension(extension: str) -> str:
    """Return ``extension`` lower-cased with a single leading dot.

    Raises:
        ConfigurationError: If the extension is empty.
    """
    ext = str(extension).strip().lower()
    if ext.startswith("."):
        ext = "." + ext.lstrip(".")
    else:
        ext = "." + ext
    if ext == ".":
        raise ConfigurationError(
            "Empty file extension",
            details={"extension": extension}
        )
    return ext


@dataclass(frozen=True)
class Category:
    """A named bucket of file extensions.

    Attributes:
        name: Category identifier, also used as the destination folder name.
        extensions: Recognised extensions in declaration order.
    """
    name: str
    extensions: Tuple[str, ...]

    def __post_init__(self):
        name = str(self.name).strip()
        if not name:
            raise ConfigurationError("Category name must not be empty")
        if any(sep in name for sep in ("/", "\\")) or name in (".", ".."):
            raise ConfigurationError(
                f"Category name is not a valid folder name: {name!r}",
                config_key="categories"
            )

        seen = []
        for ext in self.extensions:
            ext = normalize_extension(ext)
            if ext not in seen:
                seen.append(ext)
        if not seen:
            raise ConfigurationError(
                f"Category {name} has no extensions",
                config_key="categories"
            )

        object.__setattr__(self, "name", name)
        object.__setattr__(self, "extensions", tuple(seen))


DEFAULT_CATEGORIES: Dict[str, Tuple[str, ...]] = {
    "Images": (
        ".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp", ".svg",
        ".tiff", ".tif", ".heic", ".heif", ".ico",
    ),
    "Documents": (
        ".pdf", ".doc", ".docx", ".odt", ".rtf", ".txt", ".md",
        ".xls", ".xlsx", ".ods", ".csv", ".ppt", ".pptx", ".odp",
    ),
    "Videos": (
        ".mp4", ".mov", ".avi", ".mkv", ".wmv", ".flv", ".webm",
        ".m4v", ".mpeg", ".mpg", ".3gp",
    ),
    "Audio": (
        ".mp3", ".m4a", ".aac", ".flac", ".wav", ".ogg", ".wma",
        ".aiff", ".opus",
    ),
}


class CategoryRegistry:
    """Ordered collection of categories.

    Iteration order is the registration order and decides which category
    wins when an extension is claimed more than once.
    """

    def __init__(self, categories: Iterable[Category]):
        """Initialize the registry.

        Args:
            categories: Categories in priority order.

        Raises:
            ConfigurationError: On an empty registry or duplicate names.
        """
        self._categories: List[Category] = []
        self._by_key: Dict[str, Category] = {}
        self._owner: Dict[str, str] = {}

        for category in categories:
            key = category.name.lower()
            if key in self._by_key:
                raise ConfigurationError(
                    f"Category defined twice: {category.name}",
                    config_key="categories"
                )
            self._categories.append(category)
            self._by_key[key] = category

            for ext in category.extensions:
                if ext in self._owner:
                    logger.warning(
                        f"Extension {ext} is listed under both "
                        f"{self._owner[ext]} and {category.name}; "
                        f"using {self._owner[ext]}"
                    )
                    continue
                self._owner[ext] = category.name

        if not self._categories:
            raise ConfigurationError(
                "At least one category is required",
                config_key="categories"
            )

    @classmethod
    def from_mapping(cls, mapping: Dict[str, Iterable[str]]) -> "CategoryRegistry":
        """Build a registry from a ``name -> extensions`` mapping.

        Mapping order is preserved as the tie-break order.
        """
        if not isinstance(mapping, dict):
            raise ConfigurationError(
                "Categories must be a mapping of name to extensions",
                config_key="categories"
            )
        categories = []
        for name, extensions in mapping.items():
            if isinstance(extensions, str) or not isinstance(extensions, (list, tuple, set)):
                raise ConfigurationError(
                    f"Extensions for {name} must be a list",
                    config_key=f"categories.{name}"
                )
            categories.append(Category(name=name, extensions=tuple(extensions)))
        return cls(categories)

    @classmethod
    def default(cls) -> "CategoryRegistry":
        """Registry with the built-in Images/Documents/Videos/Audio categories."""
        return cls.from_mapping(DEFAULT_CATEGORIES)

    def __iter__(self):
        return iter(self._categories)

    def __len__(self) -> int:
        return len(self._categories)

    def __contains__(self, name: str) -> bool:
        return str(name).strip().lower() in self._by_key

    @property
    def names(self) -> List[str]:
        """Canonical category names in registry order."""
        return [c.name for c in self._categories]

    def resolve_name(self, name: str) -> str:
        """Return the canonical spelling of a category name.

        Raises:
            ConfigurationError: If the category is unknown.
        """
        category = self._by_key.get(str(name).strip().lower())
        if category is None:
            raise ConfigurationError(
                f"Unknown category: {name}. "
                f"Valid categories: {', '.join(self.names)}",
                config_key="categories",
                details={"category": name}
            )
        return category.name

    def extensions_of(self, name: str) -> FrozenSet[str]:
        """Extensions recognised for a category.

        Raises:
            ConfigurationError: If the category is unknown.
        """
        return frozenset(self._by_key[self.resolve_name(name).lower()].extensions)

    def all_extensions(self) -> FrozenSet[str]:
        return frozenset(self._owner)

    def classify(self, extension: str) -> Optional[str]:
        """Get the category for an extension.

        Args:
            extension: File extension including the dot (e.g., ".pdf").

        Returns:
            Category name, or None if no category recognises it.
        """
        if not extension or not extension.strip(". "):
            return None
        return self._owner.get(normalize_extension(extension))


# Global default registry instance
DEFAULT_REGISTRY = CategoryRegistry.default()
