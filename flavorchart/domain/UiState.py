"""UI filter state shared between the engine and the presentation layer."""
from typing import FrozenSet, Iterable, Optional

from flavorchart.domain.Flavor import Category, CATEGORY_ORDER


class UIFilterState:
    def __init__(self, split_by_category: bool = True,
                 active_categories: Optional[Iterable[Category]] = None,
                 store_label: str = ""):
        self.split_by_category = split_by_category
        # Empty set means "all categories"
        self.active_categories: FrozenSet[Category] = frozenset(active_categories or ())
        self.store_label = store_label

    def replace(self, **changes) -> "UIFilterState":
        values = {
            "split_by_category": self.split_by_category,
            "active_categories": self.active_categories,
            "store_label": self.store_label,
        }
        values.update(changes)
        return UIFilterState(**values)

    def __eq__(self, other) -> bool:
        if not isinstance(other, UIFilterState):
            return NotImplemented
        return (self.split_by_category, self.active_categories, self.store_label) == \
            (other.split_by_category, other.active_categories, other.store_label)

    def __repr__(self) -> str:
        cats = ", ".join(c.value for c in self.ordered_categories()) or "all"
        return f"UIFilterState(split={self.split_by_category}, categories={cats}, label={self.store_label!r})"

    def ordered_categories(self):
        return [c for c in CATEGORY_ORDER if c in self.active_categories]

    def to_dict(self):
        '''Share/persist shape (camelCase keys, as the browser client stores it).'''
        return {
            "splitByCategory": self.split_by_category,
            "activeCategories": [c.value for c in self.ordered_categories()],
            "storeLabel": self.store_label,
        }
