import unittest

from flavorchart.domain.Flavor import AllergenValue, Category
from flavorchart.events.Event_Bus import CATALOG_CHANGED, SELECTION_CHANGED, UI_CHANGED
from flavorchart.logic.selection.capabilities import FixedAnswer
from flavorchart.logic.selection.derive import requires_confirmation
from flavorchart.logic.selection.engine import STATUS_FAILED, STATUS_LOADING, STATUS_READY, SelectionEngine
from flavorchart.utilities.constants import CONFIRM_MESSAGE


def names(rows):
    return [r.name for r in rows]


class TestConfirmationGate(unittest.TestCase):

    def setUp(self):
        self.engine = SelectionEngine()
        self.engine.set_reference_rows([{"name": f"Flavor {i:02d}", "attributes": {}} for i in range(10)])

    def test_partial_selection_asks(self):
        for name in ("Flavor 01", "Flavor 02", "Flavor 03"):
            self.engine.toggle_selected(name)
        self.assertTrue(self.engine.needs_confirmation())
        confirmer = FixedAnswer(False)
        self.assertFalse(self.engine.confirm_export(confirmer))
        self.assertEqual(confirmer.asked, [CONFIRM_MESSAGE])
        self.assertTrue(self.engine.confirm_export(FixedAnswer(True)))

    def test_full_selection_does_not_ask(self):
        self.engine.select_all_reference()
        confirmer = FixedAnswer(False)
        self.assertFalse(self.engine.needs_confirmation())
        self.assertTrue(self.engine.confirm_export(confirmer))
        self.assertEqual(confirmer.asked, [])

    def test_no_reference_never_asks(self):
        self.engine.mark_reference_failed()
        self.engine.add_manual_item({"name": "House Special"})
        self.assertFalse(self.engine.needs_confirmation())
        self.assertTrue(self.engine.confirm_export(FixedAnswer(False)))

    def test_requires_confirmation(self):
        self.assertTrue(requires_confirmation(3, 10))
        self.assertFalse(requires_confirmation(10, 10))
        self.assertFalse(requires_confirmation(12, 10))
        self.assertFalse(requires_confirmation(0, 0))


class TestRowsAndFilters(unittest.TestCase):

    def setUp(self):
        self.engine = SelectionEngine()
        self.engine.set_reference_rows([
            {"name": "Vanilla Ice Cream", "attributes": {"Milk": "Yes", "Egg": "No"}},
            {"name": "Chocolate Chips", "attributes": {"Milk": "Yes", "Soy": "Yes"}},
            {"name": "Waffle Cone", "attributes": {"Wheat": "Yes"}},
        ])

    def test_reference_loaded(self):
        self.assertEqual(self.engine.reference_status, STATUS_READY)
        self.assertEqual(self.engine.reference_count, 3)
        self.assertEqual(names(self.engine.catalog), ["Chocolate Chips", "Vanilla Ice Cream", "Waffle Cone"])
        self.assertEqual(self.engine.catalog[1].category, Category.ICE_CREAM)
        self.assertEqual(self.engine.catalog[2].value_of("Wheat"), AllergenValue.YES)
        self.assertEqual(self.engine.catalog[2].value_of("Egg"), AllergenValue.UNKNOWN)

    def test_new_engine_is_loading(self):
        self.assertEqual(SelectionEngine().reference_status, STATUS_LOADING)

    def test_visible_rows_search(self):
        self.engine.set_search_text("  VANILLA ")
        self.assertEqual(names(self.engine.visible_rows), ["Vanilla Ice Cream"])
        self.engine.set_search_text("   ")
        self.assertEqual(len(self.engine.visible_rows), 3)

    def test_output_rows_ignore_search(self):
        self.engine.toggle_selected("Vanilla Ice Cream")
        self.engine.toggle_selected("Waffle Cone")
        self.engine.set_search_text("zzz")
        self.assertEqual(self.engine.visible_rows, [])
        self.assertEqual(names(self.engine.output_rows), ["Vanilla Ice Cream", "Waffle Cone"])

    def test_output_rows_respect_category_filter(self):
        self.engine.select_all_reference()
        self.engine.set_active_categories([Category.ICE_CREAM])
        self.assertEqual(names(self.engine.output_rows), ["Vanilla Ice Cream"])
        # Filtered rows stay selected
        self.assertEqual(len(self.engine.selected), 3)

    def test_grouped_output(self):
        self.engine.select_all_reference()
        groups = self.engine.grouped_output
        self.assertEqual([c for c, _ in groups], [Category.ICE_CREAM, Category.MIX_IN, Category.CONE_OR_BOWL])
        self.assertEqual(names(groups[1][1]), ["Chocolate Chips"])

        self.engine.set_split_by_category(False)
        groups = self.engine.grouped_output
        self.assertEqual(len(groups), 1)
        self.assertIsNone(groups[0][0])
        self.assertEqual(names(groups[0][1]), ["Chocolate Chips", "Vanilla Ice Cream", "Waffle Cone"])

    def test_grouped_output_empty(self):
        self.assertEqual(self.engine.grouped_output, [])

    def test_available_categories(self):
        self.assertEqual(self.engine.available_categories,
                         [Category.CONE_OR_BOWL, Category.ICE_CREAM, Category.MIX_IN])

    def test_toggle_category_expands_empty_filter(self):
        self.engine.toggle_category(Category.ICE_CREAM)
        self.assertEqual(self.engine.ui.active_categories,
                         frozenset({Category.MIX_IN, Category.CONE_OR_BOWL}))
        self.engine.toggle_category("Ice Cream")
        self.assertIn(Category.ICE_CREAM, self.engine.ui.active_categories)
        self.engine.reset_categories()
        self.assertEqual(self.engine.ui.active_categories, frozenset())

    def test_select_and_clear_visible(self):
        self.engine.toggle_selected("Waffle Cone")
        self.engine.set_search_text("chip")
        self.engine.select_all_visible()
        self.assertEqual(self.engine.selected, frozenset({"Waffle Cone", "Chocolate Chips"}))
        self.engine.clear_visible()
        self.assertEqual(self.engine.selected, frozenset({"Waffle Cone"}))

    def test_select_all_reference_replaces_selection(self):
        self.engine.add_manual_item({"name": "House Special"})
        self.engine.select_all_reference()
        self.assertNotIn("House Special", self.engine.selected)
        self.assertEqual(len(self.engine.selected), 3)

    def test_set_selected_normalizes(self):
        self.engine.set_selected(["  Waffle Cone ", "Waffle Cone", ""])
        self.assertEqual(self.engine.selected, frozenset({"Waffle Cone"}))

    def test_ui_setters(self):
        self.engine.set_store_label("  Main St ")
        self.assertEqual(self.engine.ui.store_label, "Main St")
        self.engine.apply_ui({"splitByCategory": False})
        self.assertFalse(self.engine.ui.split_by_category)
        self.assertEqual(self.engine.ui.store_label, "Main St")


class TestManualFlavors(unittest.TestCase):

    def setUp(self):
        self.engine = SelectionEngine()
        self.engine.set_reference_rows([{"name": "Chocolate", "attributes": {"Milk": "Yes"}}])

    def test_add_selects_and_classifies(self):
        flavor = self.engine.add_manual_item({"name": " Brownie Bites ", "attributes": {"Wheat": "yes"}})
        self.assertEqual(flavor.name, "Brownie Bites")
        self.assertEqual(flavor.category, Category.CAKE)
        self.assertTrue(flavor.is_manual)
        self.assertIn("Brownie Bites", self.engine.selected)

    def test_blank_name_rejected(self):
        self.assertIsNone(self.engine.add_manual_item({"name": "   "}))
        self.assertEqual(len(self.engine.catalog), 1)

    def test_same_name_replaces_and_stays_selected(self):
        self.engine.add_manual_item({"name": "Brownie Bites", "attributes": {"Wheat": "Yes"}})
        self.engine.clear_selected()
        self.engine.add_manual_item({"name": "Brownie Bites", "category": "Other", "attributes": {"Wheat": "No"}})
        self.assertEqual(len(self.engine.manual_items), 1)
        item = self.engine.manual_items[0]
        self.assertEqual(item.category, Category.OTHER)
        self.assertEqual(item.value_of("Wheat"), AllergenValue.NO)
        self.assertIn("Brownie Bites", self.engine.selected)

    def test_manual_and_reference_duplicates_coexist(self):
        self.engine.add_manual_item({"name": "Chocolate", "attributes": {"Milk": "No"}})
        catalog = self.engine.catalog
        self.assertEqual(names(catalog), ["Chocolate", "Chocolate"])
        self.assertTrue(catalog[0].is_manual)
        self.assertFalse(catalog[1].is_manual)
        self.assertEqual(len(self.engine.output_rows), 2)

    def test_reference_reload_keeps_manual(self):
        self.engine.add_manual_item({"name": "House Special"})
        self.engine.set_reference_rows([{"name": "Mango Sorbet"}])
        self.assertEqual(names(self.engine.catalog), ["House Special", "Mango Sorbet"])

    def test_failed_reference_keeps_manual(self):
        self.engine.add_manual_item({"name": "House Special"})
        self.engine.mark_reference_failed()
        self.assertEqual(self.engine.reference_status, STATUS_FAILED)
        self.assertEqual(self.engine.reference_count, 0)
        self.assertEqual(names(self.engine.catalog), ["House Special"])


class TestEngineEvents(unittest.TestCase):

    def setUp(self):
        self.engine = SelectionEngine()
        self.events = []
        for name in (CATALOG_CHANGED, SELECTION_CHANGED, UI_CHANGED):
            self.engine.event_bus.subscribe(name, lambda event, payload: self.events.append((event, payload)))

    def test_selection_event_payload_sorted(self):
        self.engine.set_selected(["b", "a"])
        self.assertEqual(self.events[-1], (SELECTION_CHANGED, {"selected": ["a", "b"]}))

    def test_search_does_not_publish(self):
        self.engine.set_search_text("vanilla")
        self.assertEqual(self.events, [])

    def test_catalog_event(self):
        self.engine.set_reference_rows([{"name": "Chocolate"}])
        event, payload = self.events[-1]
        self.assertEqual(event, CATALOG_CHANGED)
        self.assertEqual(payload["reference_count"], 1)
        self.assertEqual(payload["status"], STATUS_READY)

    def test_ui_event(self):
        self.engine.set_split_by_category(False)
        event, payload = self.events[-1]
        self.assertEqual(event, UI_CHANGED)
        self.assertFalse(payload["ui"].split_by_category)


if __name__ == '__main__':
    unittest.main()
