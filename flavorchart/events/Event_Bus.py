"""Simple Event Bus / Observer implementation for chart state changes.

Event names:
  catalog.changed   -> payload {"reference_count": int, "status": str}
  selection.changed -> payload {"selected": [str, ...]}  (sorted)
  manual.changed    -> payload {"items": [Flavor, ...]}
  ui.changed        -> payload {"ui": UIFilterState}

Subscribers are callables taking (event_name, payload). Delivery is
fire-and-forget: a failing subscriber is logged and the publisher carries on.
"""
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
CATALOG_CHANGED = "catalog.changed"
SELECTION_CHANGED = "selection.changed"
MANUAL_CHANGED = "manual.changed"
UI_CHANGED = "ui.changed"


class EventBus:
	def __init__(self):
		self._subscribers: Dict[str, List[Callable[[str, Any], None]]] = defaultdict(list)

	def subscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		if callback not in self._subscribers[event_name]:
			self._subscribers[event_name].append(callback)

	def unsubscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		try:
			self._subscribers[event_name].remove(callback)
		except (ValueError, KeyError):
			pass

	def subscriber_count(self, event_name: str) -> int:
		return len(self._subscribers.get(event_name, []))

	def publish(self, event_name: str, payload: Any):
		for cb in list(self._subscribers.get(event_name, [])):
			try:
				cb(event_name, payload)
			except Exception:
				logger.exception("Error delivering %s to %r", event_name, cb)


__all__ = [
	'EventBus', 'CATALOG_CHANGED', 'SELECTION_CHANGED', 'MANUAL_CHANGED', 'UI_CHANGED'
]
