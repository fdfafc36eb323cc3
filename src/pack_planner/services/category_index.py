"""
Category grouping for sectioned gear lists.

Partitions any collection of category-bearing items into sorted
category sections. Used by the gear catalog and by the hike aggregator,
both for their list sections and for grouping weights.

Ordering rules:
- Categories are sorted by plain string comparison (code point order)
- Items keep their original relative order inside each category
"""

from typing import Callable, Dict, Generic, Iterable, List, Tuple, TypeVar

T = TypeVar("T")


class CategoryIndex(Generic[T]):
    """Sorted category -> items index with section/row addressing."""

    def __init__(self, sorted_categories: List[str], by_category: Dict[str, List[T]]):
        self.sorted_categories = sorted_categories
        self.by_category = by_category

    @classmethod
    def build(cls, items: Iterable[T], category_of: Callable[[T], str]) -> "CategoryIndex[T]":
        """
        Group items by category.

        Args:
            items: Items to group
            category_of: Function returning an item's category label

        Returns:
            CategoryIndex; empty input gives no categories
        """
        by_category: Dict[str, List[T]] = {}
        for item in items:
            by_category.setdefault(category_of(item), []).append(item)

        return cls(sorted(by_category), by_category)

    # ------------------------------------------------------------------
    # Section addressing
    # ------------------------------------------------------------------

    @property
    def section_count(self) -> int:
        """Number of non-empty categories."""
        return len(self.sorted_categories)

    def category_at(self, index: int) -> str:
        """Category name for a section index. Raises IndexError if out of range."""
        if index < 0 or index >= len(self.sorted_categories):
            raise IndexError(f"Section {index} out of range")
        return self.sorted_categories[index]

    def items_in(self, category: str) -> List[T]:
        """Items of a category, in original order (empty if absent)."""
        return list(self.by_category.get(category, []))

    def row_count(self, section: int) -> int:
        return len(self.by_category[self.category_at(section)])

    def item_at(self, section: int, row: int) -> T:
        """Item at a section/row position. Raises IndexError if out of range."""
        items = self.by_category[self.category_at(section)]
        if row < 0 or row >= len(items):
            raise IndexError(f"Row {row} out of range for section {section}")
        return items[row]

    def sections(self) -> List[Tuple[str, List[T]]]:
        """Ordered (category, items) pairs."""
        return [(category, list(self.by_category[category])) for category in self.sorted_categories]

    def is_empty(self) -> bool:
        return not self.sorted_categories

    def __len__(self) -> int:
        """Total number of items across all categories."""
        return sum(len(items) for items in self.by_category.values())

    def __repr__(self) -> str:
        return f"CategoryIndex(categories={self.sorted_categories})"
