"""
Extension Filter
================

Turns a category selection (all, only some, all except some) into the set
of file extensions the scanner should pick up. Pure and filesystem-free.
"""

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Iterable, Optional, Tuple

from category_sorter.config.categories import CategoryRegistry
from category_sorter.utils.exceptions import ConfigurationError, ValidationError
from category_sorter.utils.logging_config import get_logger

logger = get_logger(__name__)


class SelectionKind(Enum):
    """How categories are selected."""
    ALL = "all"
    ONLY = "only"
    EXCEPT = "except"


@dataclass(frozen=True)
class SelectionMode:
    """Category selection for a run.

    Attributes:
        kind: Selection kind.
        categories: Category names named by ONLY/EXCEPT, empty for ALL.
    """
    kind: SelectionKind = SelectionKind.ALL
    categories: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "categories", tuple(self.categories))
        if self.kind is SelectionKind.ALL and self.categories:
            raise ConfigurationError("Selecting all categories takes no category list")

    @classmethod
    def all(cls) -> "SelectionMode":
        return cls()

    @classmethod
    def only(cls, categories: Iterable[str]) -> "SelectionMode":
        return cls(SelectionKind.ONLY, tuple(categories))

    @classmethod
    def excluding(cls, categories: Iterable[str]) -> "SelectionMode":
        return cls(SelectionKind.EXCEPT, tuple(categories))

    @classmethod
    def from_options(
        cls,
        only: Optional[Iterable[str]] = None,
        exclude: Optional[Iterable[str]] = None
    ) -> "SelectionMode":
        """Build a selection from --only/--except style options.

        Raises:
            ConfigurationError: If both lists are supplied.
        """
        if only is not None and exclude is not None:
            raise ConfigurationError(
                "--only and --except cannot be used together",
                details={"only": list(only), "except": list(exclude)}
            )
        if only is not None:
            return cls.only(only)
        if exclude is not None:
            return cls.excluding(exclude)
        return cls.all()


class ExtensionFilter:
    """Derives target extensions from a SelectionMode."""

    def __init__(self, registry: CategoryRegistry):
        self.registry = registry

    def _validate(self, categories: Tuple[str, ...]) -> Tuple[str, ...]:
        """Resolve names to canonical spelling, rejecting unknown ones."""
        if not categories:
            raise ValidationError(
                "No categories given. "
                f"Valid categories: {', '.join(self.registry.names)}"
            )
        unknown = [name for name in categories if name not in self.registry]
        if unknown:
            raise ValidationError(
                f"Unknown categor{'y' if len(unknown) == 1 else 'ies'}: "
                f"{', '.join(unknown)}. "
                f"Valid categories: {', '.join(self.registry.names)}",
                categories=unknown
            )
        return tuple(self.registry.resolve_name(name) for name in categories)

    def selected_categories(self, mode: SelectionMode) -> Tuple[str, ...]:
        """Category names a selection keeps, in registry order.

        Raises:
            ValidationError: If the selection names unknown categories.
        """
        if mode.kind is SelectionKind.ALL:
            return tuple(self.registry.names)

        named = set(self._validate(mode.categories))
        if mode.kind is SelectionKind.ONLY:
            return tuple(n for n in self.registry.names if n in named)
        return tuple(n for n in self.registry.names if n not in named)

    def target_extensions(self, mode: SelectionMode) -> FrozenSet[str]:
        """Extensions the scanner should accept for a selection.

        Extensions claimed by an earlier, unselected category are still
        included when a selected category lists them; classification then
        decides the destination by registry order.
        """
        extensions = set()
        for name in self.selected_categories(mode):
            extensions |= self.registry.extensions_of(name)

        logger.debug(
            f"Selection {mode.kind.value} -> {len(extensions)} extension(s)"
        )
        return frozenset(extensions)
