import asyncio
import unittest

import httpx
import pytest

from flavorchart.domain.Flavor import AllergenValue
from flavorchart.infra.Reference_Repository import (
    ReferenceLoadError, ReferenceLoader, fetch_reference_rows,
    parse_reference_csv, reading_from_reference,
)
from flavorchart.logic.selection.engine import STATUS_FAILED, STATUS_READY, SelectionEngine

MASTER_TEXT = (
    "Flavor,Egg,Milk,Peanuts,Sesame,Soy,Tree Nuts,Wheat\n"
    '"Cake Batter, Deluxe",No,Yes,No,No,Yes,No,Yes\n'
    "\n"
    "Mango Sorbet,No,No,No,No,No,No,No\n"
)


class TestParseReferenceCsv(unittest.TestCase):

    def test_rows(self):
        rows = parse_reference_csv(MASTER_TEXT)
        self.assertEqual(len(rows), 2)
        self.assertEqual(rows[0]["name"], "Cake Batter, Deluxe")
        self.assertEqual(rows[0]["attributes"]["Milk"], "Yes")
        self.assertEqual(rows[1]["attributes"]["Tree Nuts"], "No")

    def test_headers_case_insensitive_and_missing_columns(self):
        rows = parse_reference_csv("NAME,milk\nVanilla Ice Cream,yes\n")
        self.assertEqual(rows[0]["name"], "Vanilla Ice Cream")
        self.assertEqual(rows[0]["attributes"]["Milk"], "yes")
        self.assertEqual(rows[0]["attributes"]["Egg"], "")

    def test_empty_text(self):
        self.assertEqual(parse_reference_csv(""), [])

    def test_no_flavor_column(self):
        with self.assertRaises(ReferenceLoadError):
            parse_reference_csv("Item,Milk\nVanilla,Yes\n")

    def test_rows_feed_the_engine(self):
        engine = SelectionEngine()
        engine.set_reference_rows(parse_reference_csv(MASTER_TEXT))
        cake = engine.catalog[0]
        self.assertEqual(cake.value_of("Soy"), AllergenValue.YES)
        self.assertEqual(engine.reference_count, 2)


def test_reading_missing_file(tmp_path):
    with pytest.raises(ReferenceLoadError):
        reading_from_reference(tmp_path / "missing.csv")


@pytest.mark.asyncio
async def test_fetch_from_csv_path(tmp_path):
    master = tmp_path / "master.csv"
    master.write_text(MASTER_TEXT, encoding="utf-8")
    rows = await fetch_reference_rows(str(master))
    assert [r["name"] for r in rows] == ["Cake Batter, Deluxe", "Mango Sorbet"]


@pytest.mark.asyncio
async def test_fetch_from_url():
    def handler(request):
        return httpx.Response(200, json={"rows": [{"name": "Chocolate", "attributes": {"Milk": "Yes"}}]})

    rows = await fetch_reference_rows("http://reference.test/api/flavors",
                                      transport=httpx.MockTransport(handler))
    assert rows == [{"name": "Chocolate", "attributes": {"Milk": "Yes"}}]


@pytest.mark.asyncio
async def test_fetch_from_url_errors():
    def server_error(request):
        return httpx.Response(500)

    def wrong_shape(request):
        return httpx.Response(200, json=[{"name": "Chocolate"}])

    for handler in (server_error, wrong_shape):
        with pytest.raises(ReferenceLoadError):
            await fetch_reference_rows("http://reference.test/api/flavors",
                                       transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_loader_failure_keeps_manual_flavors(tmp_path):
    engine = SelectionEngine()
    engine.add_manual_item({"name": "House Special"})
    loader = ReferenceLoader(str(tmp_path / "missing.csv"))

    assert await loader.load(engine) is True
    assert engine.reference_status == STATUS_FAILED
    assert engine.reference_count == 0
    assert [r.name for r in engine.catalog] == ["House Special"]
    assert "not found" in loader.last_error


@pytest.mark.asyncio
async def test_loader_malformed_url_marks_failure():
    engine = SelectionEngine()
    engine.add_manual_item({"name": "House Special"})
    loader = ReferenceLoader("https://[::1/rows")

    assert await loader.load(engine) is True
    assert engine.reference_status == STATUS_FAILED
    assert engine.reference_count == 0
    assert [r.name for r in engine.manual_items] == ["House Special"]
    assert loader.last_error


@pytest.mark.asyncio
async def test_stale_load_is_discarded():
    calls = []
    release_first = asyncio.Event()

    async def fake_fetch(source, allergens):
        calls.append(source)
        if len(calls) == 1:
            await release_first.wait()
            return [{"name": "Stale Flavor"}]
        return [{"name": "Fresh Flavor"}]

    engine = SelectionEngine()
    loader = ReferenceLoader("memory", fetch=fake_fetch)
    first = asyncio.create_task(loader.load(engine))
    await asyncio.sleep(0)

    assert await loader.load(engine) is True
    release_first.set()
    assert await first is False

    assert engine.reference_status == STATUS_READY
    assert [r.name for r in engine.catalog] == ["Fresh Flavor"]


@pytest.mark.asyncio
async def test_cancel_discards_pending_load():
    release = asyncio.Event()

    async def slow_fetch(source, allergens):
        await release.wait()
        return [{"name": "Chocolate"}]

    engine = SelectionEngine()
    loader = ReferenceLoader("memory", fetch=slow_fetch)
    pending = asyncio.create_task(loader.load(engine))
    await asyncio.sleep(0)
    loader.cancel()
    release.set()
    assert await pending is False
    assert engine.catalog == []


if __name__ == '__main__':
    unittest.main()
