"""Dataclass construction and defaults."""
from __future__ import annotations

import unittest

from config import COFFEE, HOT_CHOCOLATE, MARSHMALLOWS, MOCHA
from cafe.entities import DrinkInProgress, DrinkMetrics, Order, Transaction


class TestDrinkInProgress(unittest.TestCase):
    def test_empty_drink_has_no_kind(self):
        self.assertIsNone(DrinkInProgress().kind)

    def test_bases_are_unique(self):
        drink = DrinkInProgress()
        self.assertTrue(drink.add_base(COFFEE))
        self.assertFalse(drink.add_base(COFFEE))
        self.assertFalse(drink.add_base("tea"))
        self.assertEqual(drink.kind, COFFEE)

    def test_both_bases_make_mocha(self):
        drink = DrinkInProgress()
        drink.add_base(HOT_CHOCOLATE)
        drink.add_base(COFFEE)
        self.assertEqual(drink.kind, MOCHA)

    def test_extras_return_index_once(self):
        drink = DrinkInProgress()
        self.assertEqual(drink.add_extra(MARSHMALLOWS), 0)
        self.assertEqual(drink.add_extra(MARSHMALLOWS), -1)


class TestDrinkMetrics(unittest.TestCase):
    def test_fields_are_write_once(self):
        metrics = DrinkMetrics()
        metrics.record(coffee_level=50)
        metrics.record(coffee_level=90, milk_level=None)
        self.assertEqual(metrics.coffee_level, 50)
        self.assertIsNone(metrics.milk_level)

    def test_overflow_is_sticky(self):
        metrics = DrinkMetrics()
        metrics.record(overflowed=True)
        metrics.record(overflowed=False)
        self.assertTrue(metrics.overflowed)

    def test_unknown_fields_ignored(self):
        metrics = DrinkMetrics()
        metrics.record(colour="brown")
        self.assertFalse(hasattr(metrics, "colour"))


class TestValueObjects(unittest.TestCase):
    def test_order_extras_compare_as_set(self):
        self.assertEqual(Order(COFFEE, frozenset({"a", "b"})), Order(COFFEE, frozenset({"b", "a"})))

    def test_transaction_total(self):
        self.assertEqual(Transaction(customer_id=1, score=75, amount=5.0, tip=2.5, refunded=False).total, 7.5)
