import json
import tempfile
import unittest
from pathlib import Path

from customer_catalog import DEFAULT_CUSTOMERS, load_customer_catalog


class CustomerCatalogTests(unittest.TestCase):
    def test_loads_defaults_when_file_missing(self):
        catalog = load_customer_catalog(Path("does_not_exist.json"))
        self.assertEqual(list(catalog), [1, 2, 3, 4, 5])
        self.assertEqual(catalog[1]["name"], "Alex")
        self.assertEqual(catalog[3]["drink"], "mocha")
        self.assertEqual(catalog[2]["extras"], ["whipped-cream", "marshmallows"])

    def test_default_roster_covers_every_drink(self):
        drinks = {definition.drink for definition in DEFAULT_CUSTOMERS.values()}
        self.assertEqual(drinks, {"coffee", "hot-chocolate", "mocha"})

    def test_falls_back_on_malformed_json(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "customers.json"
            path.write_text("{not json")
            catalog = load_customer_catalog(path)

        self.assertEqual(len(catalog), len(DEFAULT_CUSTOMERS))

    def test_filters_invalid_entries_and_orders_by_id(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "customers.json"
            path.write_text(
                json.dumps(
                    {
                        "7": {"name": "Robin", "drink": "mocha", "extras": ["sprinkles"]},
                        "2": {"name": "Sam", "drink": "coffee"},
                        "3": {"name": "Bad Drink", "drink": "tea"},
                        "4": {"name": "Bad Extra", "drink": "coffee", "extras": ["ketchup"]},
                        "5": {"name": "", "drink": "coffee"},
                        "zero": {"name": "No Id", "drink": "coffee"},
                        "6": {"name": "Dup", "drink": "coffee", "extras": ["sprinkles", "sprinkles"]},
                    }
                )
            )
            catalog = load_customer_catalog(path)

        self.assertEqual(list(catalog), [2, 7])
        self.assertEqual(catalog[7]["extras"], ["sprinkles"])
        self.assertEqual(catalog[2]["patience"], 100)

    def test_all_invalid_file_uses_defaults(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "customers.json"
            path.write_text(json.dumps({"1": {"name": "Nobody", "drink": "soup"}}))
            catalog = load_customer_catalog(path)

        self.assertEqual(catalog[1]["name"], "Alex")

    def test_rejects_negative_patience(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "customers.json"
            path.write_text(
                json.dumps(
                    {
                        "1": {"name": "Ok", "drink": "coffee", "patience": 40.0},
                        "2": {"name": "Grumpy", "drink": "coffee", "patience": -5},
                    }
                )
            )
            catalog = load_customer_catalog(path)

        self.assertEqual(list(catalog), [1])
        self.assertEqual(catalog[1]["patience"], 40)
