"""Normalization of untrusted state (persisted entries, share payloads, reference rows).

Every function here is total: wrong types, missing keys and extra keys all fall
back to a safe value instead of raising.
"""
from __future__ import annotations
import json
from typing import Any, Dict, Iterable, List, Optional, Tuple

from flavorchart.domain.Flavor import (
    AllergenValue, Category, DEFAULT_CATEGORY, Flavor, Origin
)
from flavorchart.domain.UiState import UIFilterState
from flavorchart.logic.classification.classifier import classify
from flavorchart.utilities.constants import ALLERGENS

__all__ = [
    "safe_parse_json", "normalize_allergen_value", "normalize_category",
    "normalize_attributes", "normalize_manual_item", "normalize_reference_row",
    "normalize_ui_state", "normalize_selection", "normalize_share_payload",
]

_CATEGORY_BY_VALUE = {c.value: c for c in Category}


def safe_parse_json(text: Optional[str]) -> Any:
    """Parse JSON text, returning None for missing or malformed input."""
    if not text or not isinstance(text, (str, bytes)):
        return None
    try:
        return json.loads(text)
    except ValueError:
        return None


def normalize_allergen_value(raw: Any) -> AllergenValue:
    return AllergenValue.parse(raw)


def normalize_category(raw: Any) -> Category:
    """Exact category spellings pass through; anything else becomes Mix-In."""
    if isinstance(raw, Category):
        return raw
    if isinstance(raw, str):
        return _CATEGORY_BY_VALUE.get(raw, DEFAULT_CATEGORY)
    return DEFAULT_CATEGORY


def normalize_attributes(raw: Any, allergens: Iterable[str] = ALLERGENS) -> Dict[str, AllergenValue]:
    source = raw if isinstance(raw, dict) else {}
    return {a: normalize_allergen_value(source.get(a)) for a in allergens}


def _clean_name(raw: Dict[str, Any]) -> str:
    # "flavor" is the key older saved entries used
    name = raw.get("name", raw.get("flavor"))
    return name.strip() if isinstance(name, str) else ""


def normalize_manual_item(raw: Any, allergens: Iterable[str] = ALLERGENS) -> Optional[Flavor]:
    """Build a manual Flavor from a stored record, or None when it has no usable name."""
    if not isinstance(raw, dict):
        return None
    name = _clean_name(raw)
    if not name:
        return None
    stored_category = raw.get("category")
    category = classify(name) if stored_category is None else normalize_category(stored_category)
    attrs = raw.get("attributes", raw.get("allergens"))
    allergens = tuple(allergens)
    return Flavor(name, category, normalize_attributes(attrs, allergens), Origin.MANUAL, allergens)


def normalize_reference_row(raw: Any, allergens: Iterable[str] = ALLERGENS) -> Optional[Flavor]:
    """Build a reference Flavor from a loader row; the category always comes from the classifier."""
    if not isinstance(raw, dict):
        return None
    name = _clean_name(raw)
    if not name:
        return None
    attrs = raw.get("attributes", raw.get("allergens"))
    allergens = tuple(allergens)
    return Flavor(name, classify(name), normalize_attributes(attrs, allergens), Origin.REFERENCE, allergens)


def _pick(raw: Dict[str, Any], *keys: str) -> Any:
    for k in keys:
        if k in raw:
            return raw[k]
    return None


def normalize_ui_state(raw: Any, previous: UIFilterState) -> UIFilterState:
    """Overlay a loosely-typed UI object on `previous`, field by field."""
    if not isinstance(raw, dict):
        return previous.replace()

    split = _pick(raw, "splitByCategory", "split_by_category")
    if not isinstance(split, bool):
        split = previous.split_by_category

    cats = _pick(raw, "activeCategories", "active_categories")
    if isinstance(cats, list):
        active = frozenset(normalize_category(c) for c in cats)
    else:
        active = previous.active_categories

    label = _pick(raw, "storeLabel", "store_label")
    label = label.strip() if isinstance(label, str) else previous.store_label

    return UIFilterState(split, active, label)


def normalize_selection(raw: Any) -> List[str]:
    if not isinstance(raw, list):
        return []
    names: List[str] = []
    for item in raw:
        if not isinstance(item, str):
            continue
        name = item.strip()
        if name and name not in names:
            names.append(name)
    return names


def normalize_share_payload(raw: Any, previous_ui: UIFilterState) -> Tuple[List[str], UIFilterState]:
    """Split a decoded share payload into (selection, ui) with the usual fallbacks."""
    if not isinstance(raw, dict):
        return [], previous_ui.replace()
    return normalize_selection(raw.get("selection")), normalize_ui_state(raw.get("ui"), previous_ui)
