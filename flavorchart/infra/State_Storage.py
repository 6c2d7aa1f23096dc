"""Key/value storage for chart state (file persistence).

Values are JSON text, mirroring the browser localStorage the chart was first
built on; the engine parses and normalizes them on restore.
"""
import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class MemoryStorage:
    """In-process store, used by tests and by the CLI."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value


class JsonFileStorage:
    """All keys live in one JSON object on disk; every write replaces the file atomically."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _load(self) -> Dict[str, str]:
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.error(f"Unreadable state file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._atomic_write(data)

    def _atomic_write(self, data: Dict[str, str]):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), prefix=".state_", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump(data, tmp, indent=2, ensure_ascii=False)
            shutil.move(tmp_path, self.path)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)


__all__ = ['MemoryStorage', 'JsonFileStorage']
