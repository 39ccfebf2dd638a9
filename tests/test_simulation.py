"""Tests for the CafeSim facade: action routing, events and full orders."""
from __future__ import annotations

import unittest

from config import (
    BEAN_REFILL_THRESHOLD,
    COFFEE,
    EVENT_LOG_LENGTH,
    HOT_CHOCOLATE,
    MARSHMALLOWS,
    MOCHA,
    SPRINKLES,
    WHIPPED_CREAM,
)
from cafe import CafeSim, Customer, Order
from cafe.simulation import RECIPES, customers_from_catalog, normalize_action_name


def customer(cid: int, drink: str, *extras: str) -> Customer:
    return Customer(id=cid, name=f"Guest {cid}", order=Order(drink, frozenset(extras)))


def run(sim: CafeSim, seconds: float, step: float = 0.1) -> None:
    elapsed = 0.0
    while elapsed < seconds - 1e-9:
        dt = min(step, seconds - elapsed)
        sim.tick(dt)
        elapsed += dt


def make_coffee(sim: CafeSim, seconds: float = 5.0) -> None:
    sim.dispatch("place_cup")
    sim.dispatch("start_brewing")
    run(sim, seconds)
    sim.dispatch("stop_brewing")
    sim.dispatch("add_milk")


def make_hot_milk(sim: CafeSim, pour_seconds: float) -> None:
    sim.dispatch("place_kettle_on_stove")
    sim.dispatch("toggle_stove")
    run(sim, 4.0)
    sim.dispatch("start_pour")
    run(sim, pour_seconds)
    sim.dispatch("stop_pour")
    sim.dispatch("toggle_stove")
    sim.dispatch("add_chocolate")
    sim.dispatch("start_stir")
    run(sim, 3.0)


class TestActionRouting(unittest.TestCase):
    def setUp(self):
        self.sim = CafeSim([customer(1, COFFEE), customer(2, HOT_CHOCOLATE)])

    def test_normalize_action_name(self):
        self.assertEqual(normalize_action_name("startBrewing"), "start_brewing")
        self.assertEqual(normalize_action_name("serve_drink"), "serve_drink")
        self.assertEqual(normalize_action_name("cup-to-trash"), "cup_to_trash")

    def test_camel_case_actions_are_accepted(self):
        self.assertTrue(self.sim.dispatch("placeCup"))
        self.assertTrue(self.sim.dispatch("startBrewing"))
        self.assertTrue(self.sim.assembly.brewer.brewing)

    def test_unknown_action_is_ignored(self):
        self.assertFalse(self.sim.dispatch("launchRocket"))
        self.assertFalse(self.sim.dispatch(""))
        self.assertFalse(self.sim.dispatch(42))
        self.assertIn("Unknown action 'launchRocket'", self.sim.event_log)

    def test_malformed_payload_is_ignored(self):
        self.assertFalse(self.sim.dispatch("place_cup", item="cup"))
        self.assertFalse(self.sim.assembly.cup_present)

    def test_mapping_action(self):
        self.assertTrue(self.sim.dispatch({"type": "drop", "item": "cup"}))
        self.assertTrue(self.sim.assembly.cup_present)

    def test_drop_routes_by_item(self):
        self.assertFalse(self.sim.dispatch("drop", item="teapot"))
        self.assertTrue(self.sim.dispatch("drop", item="cup"))
        self.assertTrue(self.sim.dispatch("drop", item="marshmallow-scoop"))
        for _ in range(3):
            self.sim.dispatch("drop", item="sprinkles")
        self.assertEqual(self.sim.assembly.drink.extras, [MARSHMALLOWS, SPRINKLES])
        self.assertTrue(self.sim.dispatch("drop", item="cup-to-trash"))
        self.assertFalse(self.sim.assembly.cup_present)
        self.assertEqual(self.sim.assembly.drink.extras, [])

    def test_whipped_cream_hold_phases(self):
        self.sim.dispatch("place_cup")
        self.assertTrue(self.sim.dispatch("apply_whipped_cream_hold", phase="start"))
        run(self.sim, 2.0)
        self.assertTrue(self.sim.dispatch("applyWhippedCreamHold", phase="stop"))
        self.assertEqual(self.sim.assembly.drink.extras, [WHIPPED_CREAM])
        self.assertFalse(self.sim.dispatch("apply_whipped_cream_hold", phase="sideways"))

    def test_rejected_actions_are_logged(self):
        self.assertFalse(self.sim.dispatch("start_brewing"))
        self.assertEqual(self.sim.event_log[-1], "start_brewing ignored")

    def test_event_log_is_bounded(self):
        for _ in range(EVENT_LOG_LENGTH * 2):
            self.sim.dispatch("stop_brewing")
        self.assertEqual(len(self.sim.event_log), EVENT_LOG_LENGTH)

    def test_bad_tick_values_are_ignored(self):
        for dt in (0, -1.0, float("nan"), float("inf"), "1", True):
            self.sim.tick(dt)
        self.assertEqual(self.sim.time, 0.0)

    def test_cancel_discards_cup_and_timers(self):
        self.sim.dispatch("place_cup")
        self.sim.dispatch("start_brewing")
        run(self.sim, 1.0)
        self.assertTrue(self.sim.dispatch("cancel_drink"))
        run(self.sim, 1.0)
        self.assertEqual(self.sim.assembly.coffee_level, 0)
        self.assertFalse(self.sim.assembly.brewer.brewing)


class TestTickTransitions(unittest.TestCase):
    def test_overflow_is_logged(self):
        sim = CafeSim([customer(1, COFFEE)])
        sim.dispatch("place_cup")
        sim.dispatch("start_brewing")
        run(sim, 5.5)
        self.assertIn("Cup overflowed! Discard and start again", sim.event_log)
        self.assertFalse(sim.dispatch("complete_station_step"))

    def test_fire_is_logged_and_put_out_by_stove_toggle(self):
        sim = CafeSim([customer(1, HOT_CHOCOLATE)])
        sim.dispatch("place_cup")
        sim.dispatch("place_kettle_on_stove")
        sim.dispatch("toggle_stove")
        run(sim, 8.0)
        self.assertTrue(sim.assembly.kettle.on_fire)
        self.assertIn("Stove on fire! Turn it off", sim.event_log)
        sim.dispatch("toggle_stove")
        self.assertFalse(sim.assembly.kettle.on_fire)

    def test_long_idle_tick_leaves_cold_kettle_quiet(self):
        sim = CafeSim([customer(1, HOT_CHOCOLATE)])
        sim.dispatch("place_kettle_on_stove")
        sim.dispatch("toggle_stove")
        run(sim, 4.0)
        sim.dispatch("remove_kettle_from_stove")
        sim.tick(600.0)
        self.assertEqual(sim.assembly.kettle.temperature, 0)
        self.assertEqual([t for t in sim.assembly.timers if t.active], [])


class TestBeans(unittest.TestCase):
    def test_brewing_blocked_until_refill(self):
        sim = CafeSim([customer(i, COFFEE) for i in range(1, BEAN_REFILL_THRESHOLD + 2)])
        for _ in range(BEAN_REFILL_THRESHOLD):
            make_coffee(sim)
            self.assertTrue(sim.dispatch("serve_drink"))
            self.assertTrue(sim.dispatch("continue_after_score"))
        self.assertTrue(sim.session.beans_exhausted)
        sim.dispatch("place_cup")
        self.assertFalse(sim.dispatch("start_brewing"))
        self.assertEqual(sim.event_log[-1], "Brewing blocked: refill beans")
        self.assertTrue(sim.dispatch("refill_beans"))
        self.assertTrue(sim.dispatch("start_brewing"))

    def test_hot_chocolate_does_not_use_beans(self):
        sim = CafeSim([customer(1, HOT_CHOCOLATE)])
        sim.dispatch("place_cup")
        make_hot_milk(sim, 2.0)
        self.assertTrue(sim.dispatch("complete_station_step"))
        self.assertEqual(sim.session.beans_used_since_refill, 0)


class TestEvents(unittest.TestCase):
    def test_subscribe_rejects_unknown_event(self):
        sim = CafeSim([customer(1, COFFEE)])
        self.assertFalse(sim.subscribe("exploded", lambda: None))

    def test_order_flow_emits_events(self):
        sim = CafeSim([customer(1, COFFEE), customer(2, COFFEE, MARSHMALLOWS)])
        completed, scored, days = [], [], []
        sim.subscribe("drink_completed", completed.append)
        sim.subscribe("order_scored", lambda score, txn: scored.append((score, txn)))
        sim.subscribe("day_completed", days.append)

        make_coffee(sim)
        self.assertTrue(sim.dispatch("complete_station_step"))
        self.assertEqual(len(completed), 1)
        self.assertEqual(completed[0].coffee_level, 100)
        self.assertTrue(sim.dispatch("serve_drink"))
        self.assertEqual(scored[0][0], 100)
        self.assertEqual(scored[0][1].customer_id, 1)
        self.assertTrue(sim.dispatch("continue_after_score"))
        self.assertEqual(days, [])

        make_coffee(sim)
        sim.dispatch("drop", item="marshmallow-scoop")
        sim.dispatch("serve_drink")
        sim.dispatch("continue_after_score")
        self.assertEqual(len(days), 1)
        self.assertEqual([t.customer_id for t in days[0]], [1, 2])
        self.assertFalse(sim.dispatch("continue_after_score"))
        self.assertEqual(len(days), 1)


class TestServing(unittest.TestCase):
    def test_serve_auto_completes(self):
        sim = CafeSim([customer(1, COFFEE)])
        make_coffee(sim, 4.5)
        self.assertTrue(sim.dispatch("serve_drink"))
        self.assertEqual(sim.session.last_score, 100)

    def test_serve_refused_when_drink_unfinished(self):
        sim = CafeSim([customer(1, COFFEE)])
        sim.dispatch("place_cup")
        self.assertFalse(sim.dispatch("serve_drink"))
        self.assertEqual(sim.ledger(), ())

    def test_actions_locked_while_scorecard_shown(self):
        sim = CafeSim([customer(1, COFFEE), customer(2, COFFEE)])
        make_coffee(sim)
        sim.dispatch("serve_drink")
        self.assertFalse(sim.dispatch("place_cup"))
        self.assertFalse(sim.dispatch("serve_drink"))
        self.assertFalse(sim.dispatch("cancel_drink"))
        sim.dispatch("continue_after_score")
        self.assertTrue(sim.dispatch("place_cup"))

    def test_wrong_drink_scores_zero_and_refunds(self):
        sim = CafeSim([customer(1, MOCHA)])
        make_coffee(sim)
        sim.dispatch("serve_drink")
        transaction = sim.ledger()[0]
        self.assertEqual(transaction.score, 0)
        self.assertTrue(transaction.refunded)

    def test_base_stations_locked_after_completion_but_toppings_open(self):
        sim = CafeSim([customer(1, COFFEE, MARSHMALLOWS)])
        make_coffee(sim)
        sim.dispatch("complete_station_step")
        self.assertFalse(sim.dispatch("start_brewing"))
        self.assertTrue(sim.dispatch("drop", item="marshmallow-scoop"))
        sim.dispatch("serve_drink")
        self.assertEqual(sim.session.last_score, 100)

    def test_mocha_end_to_end_scores_100(self):
        sim = CafeSim([customer(1, MOCHA, WHIPPED_CREAM)])
        sim.dispatch("place_cup")
        sim.dispatch("start_brewing")
        run(sim, 2.5)
        sim.dispatch("stop_brewing")
        make_hot_milk(sim, 1.0)
        self.assertEqual(sim.assembly.coffee_level, 50)
        self.assertEqual(sim.assembly.milk_level, 50)
        sim.dispatch("apply_whipped_cream_hold", phase="start")
        run(sim, 5.0)
        sim.dispatch("apply_whipped_cream_hold", phase="stop")
        self.assertTrue(sim.dispatch("serve_drink"))
        self.assertEqual(sim.assembly.drink.kind, MOCHA)
        self.assertEqual(sim.session.last_score, 100)
        self.assertEqual(sim.session.total_earnings, 10.0)

    def test_restart_day_resets_queue_and_earnings(self):
        sim = CafeSim([customer(1, COFFEE), customer(2, COFFEE)])
        make_coffee(sim)
        sim.dispatch("serve_drink")
        old_ledger = sim.ledger()
        self.assertTrue(sim.dispatch("restart_day"))
        self.assertEqual(sim.session.current_customer.id, 1)
        self.assertEqual(sim.ledger(), ())
        self.assertEqual(len(old_ledger), 1)
        self.assertEqual(sim.session.beans_used_since_refill, 1)


class TestSnapshots(unittest.TestCase):
    def test_to_dict_contains_all_sections(self):
        sim = CafeSim([customer(1, HOT_CHOCOLATE)])
        state = sim.to_dict()
        self.assertEqual(state["session"]["current_customer"]["drink"], HOT_CHOCOLATE)
        self.assertIn("kettle", state["assembly"])
        self.assertIsNone(state["metrics"])
        self.assertEqual(state["recipe"], RECIPES[HOT_CHOCOLATE])

    def test_default_roster_comes_from_catalog(self):
        sim = CafeSim()
        self.assertEqual(sim.session.current_customer.name, "Alex")

    def test_customers_from_catalog(self):
        customers = customers_from_catalog({4: {"name": "Claire", "drink": COFFEE, "extras": [MARSHMALLOWS]}})
        self.assertEqual(customers[0].order, Order(COFFEE, frozenset({MARSHMALLOWS})))
        self.assertEqual(customers[0].patience, 100)
