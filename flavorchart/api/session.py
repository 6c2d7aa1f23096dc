"""Process-wide chart session used by the API (single user, like the file-backed data it keeps)."""
import logging
from typing import Optional

from flavorchart.events.storage_observers import StorageObserver, start as start_storage_observer
from flavorchart.infra.Reference_Repository import ReferenceLoader
from flavorchart.infra.State_Storage import JsonFileStorage
from flavorchart.infra.paths import STATE_FILE
from flavorchart.infra.qr_utils import ShareQrRenderer
from flavorchart.logic.selection.engine import SelectionEngine
from flavorchart.utilities.config import REFERENCE_SOURCE

logger = logging.getLogger(__name__)

reference_loader = ReferenceLoader(REFERENCE_SOURCE)
qr_renderer = ShareQrRenderer()

_engine: Optional[SelectionEngine] = None
_observer: Optional[StorageObserver] = None


def set_engine(engine: SelectionEngine, storage=None) -> SelectionEngine:
    """Install `engine` as the session engine, persisting its changes to `storage` if given."""
    global _engine, _observer
    if _engine is not None and _observer is not None:
        _observer.detach(_engine.event_bus)
    _engine = engine
    _observer = start_storage_observer(engine.event_bus, storage) if storage is not None else None
    return engine


def get_engine() -> SelectionEngine:
    """FastAPI dependency returning the session engine (restored from disk on first use)."""
    if _engine is None:
        storage = JsonFileStorage(STATE_FILE)
        set_engine(SelectionEngine().restore_from_storage(storage), storage)
        logger.info(f"Chart state restored from {STATE_FILE}")
    return _engine


__all__ = ['get_engine', 'set_engine', 'reference_loader', 'qr_renderer']
