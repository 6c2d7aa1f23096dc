"""Reference catalog repository: reads the master flavor list and feeds it to the engine.

Two sources are supported:
  * a local CSV file with a ``flavor`` column and one column per allergen,
  * an http(s) URL answering ``{"rows": [{"name": ..., "attributes": {...}}]}``.

Any failure is converted into "zero reference rows" plus a failed status on the
engine; it never propagates to callers.
"""
import asyncio
import csv
import io
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import httpx

from flavorchart.infra.latest_only import LatestOnly
from flavorchart.utilities.config import REFERENCE_SOURCE, REFERENCE_TIMEOUT_SECONDS
from flavorchart.utilities.constants import ALLERGENS

logger = logging.getLogger(__name__)

NAME_HEADERS = ("flavor", "name")


class ReferenceLoadError(Exception):
    """The reference source could not be read or understood."""


def parse_reference_csv(text: str, allergens: Iterable[str] = ALLERGENS) -> List[Dict]:
    """Parse master CSV text into raw rows: {name, attributes: {allergen: raw cell}}.

    Headers are matched case-insensitively; a missing allergen column yields ''
    for every row. Blank lines are skipped.
    """
    reader = csv.reader(io.StringIO(text))
    lines = [[c.strip() for c in line] for line in reader if any(c.strip() for c in line)]
    if not lines:
        return []
    header = [h.lower() for h in lines[0]]
    idx_name = next((header.index(h) for h in NAME_HEADERS if h in header), -1)
    if idx_name < 0:
        raise ReferenceLoadError("reference CSV has no 'flavor' column")
    allergen_idx = {a: (header.index(a.lower()) if a.lower() in header else -1) for a in allergens}

    def cell(cols: List[str], i: int) -> str:
        return cols[i] if 0 <= i < len(cols) else ""

    return [
        {
            "name": cell(cols, idx_name),
            "attributes": {a: cell(cols, i) for a, i in allergen_idx.items()},
        }
        for cols in lines[1:]
    ]


def reading_from_reference(path: Path, allergens: Iterable[str] = ALLERGENS) -> List[Dict]:
    """Read the master CSV, raising ReferenceLoadError when it is missing or malformed."""
    try:
        with open(path, 'r', encoding='utf-8', newline='') as f:
            text = f.read()
        return parse_reference_csv(text, allergens)
    except FileNotFoundError as e:
        raise ReferenceLoadError(f"reference file not found: {path}") from e
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise ReferenceLoadError(f"could not read {path}: {e}") from e


def _rows_from_json(body) -> List[Dict]:
    if not isinstance(body, dict) or not isinstance(body.get("rows"), list):
        raise ReferenceLoadError("reference response has no 'rows' list")
    return body["rows"]


async def fetch_reference_rows(source: str = REFERENCE_SOURCE,
                               allergens: Iterable[str] = ALLERGENS,
                               timeout: float = REFERENCE_TIMEOUT_SECONDS,
                               transport: Optional[httpx.AsyncBaseTransport] = None) -> List[Dict]:
    """Fetch raw reference rows from a URL or a CSV path."""
    allergens = tuple(allergens)
    if source.startswith(("http://", "https://")):
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
                response = await client.get(source)
                response.raise_for_status()
                return _rows_from_json(response.json())
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            raise ReferenceLoadError(f"could not fetch {source}: {e}") from e
    return await asyncio.to_thread(reading_from_reference, Path(source), allergens)


class ReferenceLoader:
    """Loads the reference catalog into an engine; only the newest load may apply its result."""

    def __init__(self, source: str = REFERENCE_SOURCE, fetch=fetch_reference_rows):
        self.source = source
        self._fetch = fetch
        self._latest = LatestOnly()
        self.last_error: Optional[str] = None

    def cancel(self):
        self._latest.cancel()

    async def load(self, engine) -> bool:
        """Fetch and install the reference rows. Returns False when superseded by a newer load."""
        ticket = self._latest.begin()
        try:
            rows = await self._fetch(self.source, engine.allergens)
            error = None
        except ReferenceLoadError as e:
            rows, error = [], str(e)

        if not self._latest.is_current(ticket):
            logger.info(f"Discarding stale reference load from {self.source}")
            return False

        self.last_error = error
        if error is not None:
            logger.error(f"Reference catalog unavailable: {error}")
            engine.mark_reference_failed()
        else:
            engine.set_reference_rows(rows)
            logger.info(f"Loaded {engine.reference_count} reference flavors from {self.source}")
        return True


__all__ = [
    'ReferenceLoadError', 'ReferenceLoader', 'parse_reference_csv',
    'reading_from_reference', 'fetch_reference_rows',
]
