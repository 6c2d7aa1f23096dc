"""Storage observers for chart state events.

Subscribes to an engine's EventBus and writes each changed piece of state to
its storage key:
  - selection.changed -> fac_selected_flavors_v1 (sorted array of names)
  - manual.changed    -> fac_manual_flavors_v2   (array of {name, category, attributes})
  - ui.changed        -> fac_ui_v1               (camelCase UI object)

Writes are fire-and-forget; the last write for a key wins. A failing write is
logged by the bus and never reaches the engine.
"""
from __future__ import annotations
import json
from typing import Any, Dict

from .Event_Bus import EventBus, SELECTION_CHANGED, MANUAL_CHANGED, UI_CHANGED
from flavorchart.utilities.constants import STORAGE_SELECTED, STORAGE_MANUAL, STORAGE_UI


class StorageObserver:
    def __init__(self, storage):
        self.storage = storage
        self.writes = 0

    def _write(self, key: str, value: Any):
        self.storage.set(key, json.dumps(value, ensure_ascii=False))
        self.writes += 1

    def on_selection(self, event_name: str, payload: Dict[str, Any]):
        self._write(STORAGE_SELECTED, list(payload.get('selected', [])))

    def on_manual(self, event_name: str, payload: Dict[str, Any]):
        self._write(STORAGE_MANUAL, [item.to_dict() for item in payload.get('items', [])])

    def on_ui(self, event_name: str, payload: Dict[str, Any]):
        self._write(STORAGE_UI, payload['ui'].to_dict())

    def attach(self, bus: EventBus):
        bus.subscribe(SELECTION_CHANGED, self.on_selection)
        bus.subscribe(MANUAL_CHANGED, self.on_manual)
        bus.subscribe(UI_CHANGED, self.on_ui)
        return self

    def detach(self, bus: EventBus):
        bus.unsubscribe(SELECTION_CHANGED, self.on_selection)
        bus.unsubscribe(MANUAL_CHANGED, self.on_manual)
        bus.unsubscribe(UI_CHANGED, self.on_ui)
        return self


def start(bus: EventBus, storage) -> StorageObserver:
    """Attach a storage observer for `storage` to `bus` and return it."""
    return StorageObserver(storage).attach(bus)


__all__ = ['StorageObserver', 'start']
