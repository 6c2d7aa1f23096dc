"""Event helper utilities.

Publishing helpers used by the selection engine so payload shapes live in one
place.

Quick import:
    from flavorchart.events.event_helpers import (
        publish_selection_changed, publish_manual_changed,
        publish_ui_changed, publish_catalog_changed,
    )
"""
from __future__ import annotations
from typing import Iterable, Any
from .Event_Bus import (
    EventBus, CATALOG_CHANGED, SELECTION_CHANGED, MANUAL_CHANGED, UI_CHANGED
)

__all__ = [
    'publish_selection_changed', 'publish_manual_changed',
    'publish_ui_changed', 'publish_catalog_changed',
]


def publish_selection_changed(bus: EventBus, selected: Iterable[str]):
    """Publish a selection.changed event with the names in sorted order."""
    bus.publish(SELECTION_CHANGED, {'selected': sorted(selected)})


def publish_manual_changed(bus: EventBus, items: Iterable[Any]):
    bus.publish(MANUAL_CHANGED, {'items': list(items)})


def publish_ui_changed(bus: EventBus, ui: Any):
    bus.publish(UI_CHANGED, {'ui': ui})


def publish_catalog_changed(bus: EventBus, reference_count: int, status: str):
    bus.publish(CATALOG_CHANGED, {
        'reference_count': reference_count,
        'status': status,
    })
