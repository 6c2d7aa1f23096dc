"""Pure row derivations over a catalog.

The engine recomputes these after every mutation; they take plain inputs so
they can be exercised directly.
"""
from __future__ import annotations
from typing import AbstractSet, Iterable, List, Optional, Sequence, Tuple

from flavorchart.domain.Flavor import Category, CATEGORY_ORDER, Flavor

__all__ = [
    "sort_key", "sort_flavors", "merge_catalog", "category_allowed",
    "derive_visible_rows", "derive_selected_rows", "derive_output_rows",
    "group_by_category", "derive_grouped_output", "available_categories",
    "requires_confirmation",
]

Group = Tuple[Optional[Category], List[Flavor]]


def sort_key(flavor: Flavor):
    return (flavor.name.casefold(), flavor.name)


def sort_flavors(rows: Iterable[Flavor]) -> List[Flavor]:
    return sorted(rows, key=sort_key)


def merge_catalog(manual: Sequence[Flavor], reference: Sequence[Flavor]) -> List[Flavor]:
    """Manual rows first, then reference rows; the stable sort keeps that order for equal names."""
    return sort_flavors(list(manual) + list(reference))


def category_allowed(category: Category, active: AbstractSet[Category]) -> bool:
    # An empty filter means every category
    return not active or category in active


def derive_visible_rows(catalog: Sequence[Flavor], search: str,
                        active: AbstractSet[Category]) -> List[Flavor]:
    q = (search or "").strip().lower()
    return [
        r for r in catalog
        if category_allowed(r.category, active) and (not q or q in r.name.lower())
    ]


def derive_selected_rows(catalog: Sequence[Flavor], selected: AbstractSet[str]) -> List[Flavor]:
    return sort_flavors(r for r in catalog if r.name in selected)


def derive_output_rows(catalog: Sequence[Flavor], selected: AbstractSet[str],
                       active: AbstractSet[Category]) -> List[Flavor]:
    """Rows that would print or export; the search text plays no part."""
    return [r for r in derive_selected_rows(catalog, selected) if category_allowed(r.category, active)]


def group_by_category(rows: Iterable[Flavor]) -> List[Group]:
    buckets = {c: [] for c in CATEGORY_ORDER}
    for r in rows:
        buckets[r.category].append(r)
    return [(c, sort_flavors(buckets[c])) for c in CATEGORY_ORDER if buckets[c]]


def derive_grouped_output(rows: Sequence[Flavor], split_by_category: bool) -> List[Group]:
    if split_by_category:
        return group_by_category(rows)
    return [(None, sort_flavors(rows))]


def available_categories(catalog: Iterable[Flavor]) -> List[Category]:
    return sorted({r.category for r in catalog}, key=lambda c: c.value)


def requires_confirmation(selected_count: int, reference_count: int) -> bool:
    """True when some reference flavors are not selected yet."""
    return reference_count > 0 and selected_count < reference_count
