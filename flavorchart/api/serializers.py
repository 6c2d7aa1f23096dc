"""JSON shapes returned by the chart API."""
from typing import Any, Dict, List, Optional, Tuple

from flavorchart.domain.Flavor import Category, Flavor


def flavor_json(f: Flavor) -> Dict[str, Any]:
    return {
        "name": f.name,
        "category": f.category.value,
        "origin": f.origin.value,
        "attributes": {a: v.value for a, v in f.attributes.items()},
    }


def groups_json(groups: List[Tuple[Optional[Category], List[Flavor]]]) -> List[Dict[str, Any]]:
    return [
        {"category": c.value if c is not None else None, "rows": [flavor_json(r) for r in rows]}
        for c, rows in groups
    ]


def engine_state(engine) -> Dict[str, Any]:
    return {
        "reference_status": engine.reference_status,
        "reference_count": engine.reference_count,
        "catalog_count": len(engine.catalog),
        "allergens": list(engine.allergens),
        "selected": sorted(engine.selected),
        "search": engine.search_text,
        "ui": engine.ui.to_dict(),
        "available_categories": [c.value for c in engine.available_categories],
        "visible": [flavor_json(r) for r in engine.visible_rows],
        "output": groups_json(engine.grouped_output),
        "needs_confirmation": engine.needs_confirmation(),
    }
