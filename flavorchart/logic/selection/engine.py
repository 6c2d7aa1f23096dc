"""Selection engine: owns the working catalog, the selection and the chart filters.

The engine is the single owner of chart state. The presentation layer calls its
mutators (toggle, add, filter...) and reads the derived rows back; every
mutation is announced on the engine's EventBus so observers can persist it.
"""
from __future__ import annotations
import logging
from typing import Any, Dict, FrozenSet, Iterable, List, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from flavorchart.domain.Flavor import Category, Flavor
from flavorchart.domain.UiState import UIFilterState
from flavorchart.events.Event_Bus import EventBus
from flavorchart.events.event_helpers import (
    publish_catalog_changed, publish_manual_changed,
    publish_selection_changed, publish_ui_changed,
)
from flavorchart.logic.normalization.normalizer import (
    normalize_category, normalize_manual_item, normalize_reference_row,
    normalize_selection, normalize_share_payload, normalize_ui_state,
    safe_parse_json,
)
from flavorchart.logic.selection import derive
from flavorchart.logic.selection.capabilities import Clipboard, Confirmer, LinkContext, Storage
from flavorchart.logic.sharing.share_codec import ShareTokenError, decode, encode
from flavorchart.utilities.constants import (
    ALLERGENS, CONFIRM_MESSAGE, SHARE_PARAM, SHARE_VERSION,
    STORAGE_MANUAL, STORAGE_SELECTED, STORAGE_UI,
)

logger = logging.getLogger(__name__)

STATUS_LOADING = "loading"
STATUS_READY = "ready"
STATUS_FAILED = "failed"


class SelectionEngine:
    def __init__(self, allergens: Iterable[str] = ALLERGENS, event_bus: Optional[EventBus] = None):
        self.allergens = tuple(allergens)
        self._reference: List[Flavor] = []
        self._manual: List[Flavor] = []
        self._catalog: List[Flavor] = []
        self._selected: set = set()
        self._ui = UIFilterState()
        self._search = ""
        self.reference_status = STATUS_LOADING
        self._event_bus = event_bus or EventBus()

    # --- Observer helpers -------------------------------------------------
    @property
    def event_bus(self) -> EventBus:
        return self._event_bus

    def set_event_bus(self, bus: EventBus):
        self._event_bus = bus
        return self

    def _selection_changed(self):
        publish_selection_changed(self._event_bus, self._selected)

    def _manual_changed(self):
        publish_manual_changed(self._event_bus, self._manual)

    def _ui_changed(self):
        publish_ui_changed(self._event_bus, self._ui)

    def _rebuild_catalog(self):
        self._catalog = derive.merge_catalog(self._manual, self._reference)

    # --- Read access -------------------------------------------------------
    @property
    def catalog(self) -> List[Flavor]:
        return list(self._catalog)

    @property
    def reference_items(self) -> List[Flavor]:
        return list(self._reference)

    @property
    def manual_items(self) -> List[Flavor]:
        return list(self._manual)

    @property
    def reference_count(self) -> int:
        return len(self._reference)

    @property
    def selected(self) -> FrozenSet[str]:
        return frozenset(self._selected)

    @property
    def ui(self) -> UIFilterState:
        return self._ui

    @property
    def search_text(self) -> str:
        return self._search

    # --- Derived rows ------------------------------------------------------
    @property
    def visible_rows(self) -> List[Flavor]:
        return derive.derive_visible_rows(self._catalog, self._search, self._ui.active_categories)

    @property
    def selected_rows(self) -> List[Flavor]:
        return derive.derive_selected_rows(self._catalog, self._selected)

    @property
    def output_rows(self) -> List[Flavor]:
        return derive.derive_output_rows(self._catalog, self._selected, self._ui.active_categories)

    @property
    def grouped_output(self):
        return derive.derive_grouped_output(self.output_rows, self._ui.split_by_category)

    @property
    def available_categories(self) -> List[Category]:
        return derive.available_categories(self._catalog)

    # --- Catalog -----------------------------------------------------------
    def set_catalog(self, reference_items: Iterable[Flavor]):
        '''
        Replaces the reference part of the catalog and merges it with the manual flavors.
        '''
        self._reference = derive.sort_flavors(reference_items)
        self.reference_status = STATUS_READY
        self._rebuild_catalog()
        publish_catalog_changed(self._event_bus, len(self._reference), self.reference_status)
        return self

    def set_reference_rows(self, rows: Iterable[Any]):
        '''
        Normalizes raw loader rows ({name, attributes}) and installs them as the reference catalog.
        '''
        items = []
        for row in rows:
            flavor = normalize_reference_row(row, self.allergens)
            if flavor is not None:
                items.append(flavor)
        return self.set_catalog(items)

    def mark_reference_failed(self):
        '''
        The reference loader failed: keep the manual flavors, report zero reference rows.
        '''
        self._reference = []
        self.reference_status = STATUS_FAILED
        self._rebuild_catalog()
        publish_catalog_changed(self._event_bus, 0, self.reference_status)
        return self

    # --- Selection ---------------------------------------------------------
    def toggle_selected(self, name: str):
        if name in self._selected:
            self._selected.discard(name)
        else:
            self._selected.add(name)
        self._selection_changed()

    def clear_selected(self):
        self._selected = set()
        self._selection_changed()

    def select_all_reference(self):
        self._selected = {r.name for r in self._reference}
        self._selection_changed()

    def select_all_visible(self):
        self._selected |= {r.name for r in self.visible_rows}
        self._selection_changed()

    def clear_visible(self):
        self._selected -= {r.name for r in self.visible_rows}
        self._selection_changed()

    def set_selected(self, names: Iterable[str]):
        self._selected = set(normalize_selection(list(names)))
        self._selection_changed()

    # --- Manual flavors ----------------------------------------------------
    def add_manual_item(self, record: Any) -> Optional[Flavor]:
        '''
        Adds (or replaces, by name) a manual flavor and selects it.
        Returns the stored Flavor, or None when the record has no usable name.
        '''
        if isinstance(record, Flavor):
            record = record.to_dict()
        flavor = normalize_manual_item(record, self.allergens)
        if flavor is None:
            return None
        self._manual = derive.sort_flavors(
            [m for m in self._manual if m.name != flavor.name] + [flavor]
        )
        self._rebuild_catalog()
        self._selected.add(flavor.name)
        self._manual_changed()
        self._selection_changed()
        return flavor

    # --- Filters -----------------------------------------------------------
    def set_search_text(self, text: str):
        self._search = text if isinstance(text, str) else ""

    def set_active_categories(self, categories: Iterable[Any]):
        self._ui = self._ui.replace(active_categories=frozenset(normalize_category(c) for c in categories))
        self._ui_changed()

    def toggle_category(self, category: Any):
        '''
        Flips one category chip. An empty filter stands for every category present,
        so it is expanded first.
        '''
        c = normalize_category(category)
        current = set(self._ui.active_categories or self.available_categories)
        if c in current:
            current.discard(c)
        else:
            current.add(c)
        self.set_active_categories(current)

    def reset_categories(self):
        self.set_active_categories(())

    def set_split_by_category(self, split: bool):
        self._ui = self._ui.replace(split_by_category=bool(split))
        self._ui_changed()

    def set_store_label(self, label: str):
        self._ui = self._ui.replace(store_label=label.strip() if isinstance(label, str) else "")
        self._ui_changed()

    def apply_ui(self, raw: Any):
        '''Overlays a partial UI object (camelCase or snake_case keys) on the current state.'''
        self._ui = normalize_ui_state(raw, self._ui)
        self._ui_changed()

    # --- Export gate -------------------------------------------------------
    def needs_confirmation(self) -> bool:
        return derive.requires_confirmation(len(self.selected_rows), self.reference_count)

    def confirm_export(self, confirmer: Confirmer) -> bool:
        '''
        Asks "did you see every flavor you carry?" when fewer flavors are selected than the
        reference list holds. Returns False if the user declines.
        '''
        if not self.needs_confirmation():
            return True
        return bool(confirmer.confirm(CONFIRM_MESSAGE))

    # --- Sharing -----------------------------------------------------------
    def share_payload(self) -> Dict[str, Any]:
        return {
            "version": SHARE_VERSION,
            "selection": sorted(self._selected),
            "ui": {
                "splitByCategory": self._ui.split_by_category,
                "activeCategories": [c.value for c in self._ui.ordered_categories()],
            },
        }

    def share_token(self) -> str:
        return encode(self.share_payload())

    def share_link(self, base_url: str) -> str:
        parts = urlsplit(base_url)
        query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != SHARE_PARAM]
        query.append((SHARE_PARAM, self.share_token()))
        return urlunsplit((parts.scheme, parts.netloc, parts.path or "/", urlencode(query), parts.fragment))

    def apply_share_token(self, token: str) -> Optional[str]:
        '''
        Restores selection and filters from a share token.
        Returns None on success or a one-line error message; on error nothing changes.
        '''
        try:
            payload = decode(token)
        except ShareTokenError as e:
            logger.warning(f"Ignoring share token: {e}")
            return e.message
        selection, ui = normalize_share_payload(payload, self._ui)
        self._selected = set(selection)
        self._ui = ui
        self._selection_changed()
        self._ui_changed()
        logger.info(f"Applied share token with {len(selection)} selected flavors")
        return None

    def apply_link_context(self, link: LinkContext) -> Optional[str]:
        '''Applies the share parameter of a link, if there is one.'''
        token = link.read_param(SHARE_PARAM)
        if token is None:
            return None
        return self.apply_share_token(token)

    def write_link_context(self, link: LinkContext):
        link.write_param(SHARE_PARAM, self.share_token())

    def copy_share_link(self, clipboard: Clipboard, base_url: str) -> Optional[str]:
        '''Best-effort copy of the share link; returns an error message instead of raising.'''
        try:
            clipboard.copy(self.share_link(base_url))
        except OSError as e:
            logger.warning(f"Clipboard copy failed: {e}")
            return "Could not copy the share link."
        return None

    # --- Persistence -------------------------------------------------------
    def restore_from_storage(self, storage: Storage):
        '''
        Loads the selection, manual flavors and UI state saved by a previous session.
        Missing or corrupt entries fall back to defaults.
        '''
        manual = []
        raw_manual = safe_parse_json(storage.get(STORAGE_MANUAL))
        if isinstance(raw_manual, list):
            for entry in raw_manual:
                flavor = normalize_manual_item(entry, self.allergens)
                if flavor is not None:
                    manual = [m for m in manual if m.name != flavor.name] + [flavor]
        self._manual = derive.sort_flavors(manual)
        self._selected = set(normalize_selection(safe_parse_json(storage.get(STORAGE_SELECTED))))
        self._ui = normalize_ui_state(safe_parse_json(storage.get(STORAGE_UI)), UIFilterState())
        self._rebuild_catalog()
        logger.info(f"Restored {len(self._manual)} manual flavors and {len(self._selected)} selections")
        return self

    def __str__(self) -> str:
        return (f"SelectionEngine({len(self._catalog)} flavors, {len(self._selected)} selected, "
                f"reference={self.reference_status})")

    __repr__ = __str__


__all__ = ["SelectionEngine", "STATUS_LOADING", "STATUS_READY", "STATUS_FAILED"]
