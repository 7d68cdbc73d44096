"""Domain models for the category catalog.

The catalog is the authoritative set of labels a repository may be assigned
to. Anything a model proposes outside of it is dropped.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, FrozenSet, Iterable, Iterator, List, Mapping, Sequence, Tuple

from .common import CategoryName

logger = logging.getLogger(__name__)

# Used when the catalog is empty and no first entry can serve as the default.
FALLBACK_DEFAULT_CATEGORY = CategoryName("Lang: ETC")


@dataclass(frozen=True)
class Category:
    """A single classification label."""
    name: CategoryName
    description: str = ""
    keywords: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Category":
        """Builds a Category from a plain mapping (e.g. loaded from YAML)."""
        if not isinstance(data, Mapping):
            raise ValueError(f"Category entry must be a mapping, got {type(data).__name__}")
        name = str(data.get("name") or "").strip()
        if not name:
            raise ValueError(f"Category entry is missing a name: {dict(data)}")
        keywords = data.get("keywords") or ()
        if isinstance(keywords, str):
            keywords = [k.strip() for k in keywords.split(",") if k.strip()]
        return cls(
            name=CategoryName(name),
            description=str(data.get("description") or ""),
            keywords=tuple(str(k) for k in keywords),
        )


class CategoryCatalog:
    """Ordered collection of categories with a pre-built set of valid names."""

    def __init__(self, categories: Iterable[Category]):
        self.categories: Tuple[Category, ...] = tuple(categories)
        self.valid_names: FrozenSet[str] = frozenset(c.name for c in self.categories)

    @classmethod
    def from_dicts(cls, entries: Sequence[Mapping[str, Any]]) -> "CategoryCatalog":
        return cls(Category.from_dict(entry) for entry in entries)

    @property
    def default_category(self) -> CategoryName:
        """First catalog entry, or the literal fallback for an empty catalog."""
        if self.categories:
            return self.categories[0].name
        return FALLBACK_DEFAULT_CATEGORY

    def is_valid(self, name: Any) -> bool:
        return isinstance(name, str) and name in self.valid_names

    def select_valid(self, names: Iterable[Any], limit: int) -> List[CategoryName]:
        """Keeps catalog names in their given order, truncated to ``limit``.

        Returns an empty list when nothing is valid; callers decide whether to
        substitute the default.
        """
        selected: List[CategoryName] = []
        for name in names:
            if self.is_valid(name):
                selected.append(CategoryName(name))
            else:
                logger.debug(f"Dropping category not in catalog: {name!r}")
        return selected[:max(limit, 0)]

    def select_or_default(self, names: Iterable[Any], limit: int) -> List[CategoryName]:
        selected = self.select_valid(names, limit)
        return selected if selected else [self.default_category]

    def __len__(self) -> int:
        return len(self.categories)

    def __iter__(self) -> Iterator[Category]:
        return iter(self.categories)
