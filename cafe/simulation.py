"""Deterministic, headless-compatible café simulation.

All gameplay constants are imported from ``config``.  The simulation has no
pygame dependency and no wall clock: the host advances it with :meth:`tick`
and drives it with :meth:`dispatch` (or the action methods directly).
"""
from __future__ import annotations

import inspect
import math
import re
from dataclasses import asdict
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from config import (
    COFFEE,
    DROP_CUP,
    DROP_CUP_TO_TRASH,
    DROP_MARSHMALLOW_SCOOP,
    DROP_SPRINKLES,
    EVENT_LOG_LENGTH,
    MARSHMALLOWS,
    SPRINKLES,
    WHIPPED_CREAM,
)
from cafe.assembly import DrinkAssembly
from cafe.entities import Customer, DrinkMetrics, Order, Transaction
from cafe.session import CafeSession
from cafe.timers import advance_timers
from customer_catalog import load_customer_catalog
from recipe_catalog import load_recipe_catalog

CUSTOMERS = load_customer_catalog()
RECIPES = load_recipe_catalog()

DRINK_COMPLETED = "drink_completed"
ORDER_SCORED = "order_scored"
DAY_COMPLETED = "day_completed"
OUTBOUND_EVENTS = (DRINK_COMPLETED, ORDER_SCORED, DAY_COMPLETED)

ACTIONS = (
    "place_cup",
    "start_brewing",
    "stop_brewing",
    "refill_beans",
    "add_milk",
    "toggle_stove",
    "place_kettle_on_stove",
    "remove_kettle_from_stove",
    "start_pour",
    "stop_pour",
    "add_chocolate",
    "start_stir",
    "stop_stir",
    "apply_whipped_cream_hold",
    "start_whipped_cream",
    "stop_whipped_cream",
    "apply_marshmallow",
    "shake_sprinkles",
    "drop",
    "cancel_drink",
    "complete_station_step",
    "serve_drink",
    "continue_after_score",
    "restart_day",
)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def customers_from_catalog(catalog: Mapping[int, Mapping[str, Any]]) -> List[Customer]:
    return [
        Customer(
            id=int(customer_id),
            name=str(entry["name"]),
            order=Order(drink=str(entry["drink"]), extras=frozenset(entry.get("extras", []))),
            patience=int(entry.get("patience", 100)),
        )
        for customer_id, entry in catalog.items()
    ]


def normalize_action_name(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name.strip()).replace("-", "_").lower()


class CafeSim:
    """Tick-based café simulation for one day of customers.

    Station state lives in a :class:`DrinkAssembly` that is replaced whenever
    a drink is cancelled or served; the :class:`CafeSession` keeps the ledger
    across drinks.  Every action returns ``True`` when applied and ``False``
    when ignored; nothing here raises for a bad action.
    """

    def __init__(
        self,
        customers: Optional[Sequence[Customer]] = None,
        *,
        strict_topping_order: bool = False,
    ) -> None:
        if customers is None:
            customers = customers_from_catalog(CUSTOMERS)
        self.time: float = 0.0
        self.strict_topping_order = strict_topping_order
        self.session = CafeSession(customers)
        self.assembly = DrinkAssembly(strict_topping_order=strict_topping_order)
        self.last_metrics: Optional[DrinkMetrics] = None
        self.event_log: List[str] = []
        self._listeners: Dict[str, List[Callable[..., None]]] = {event: [] for event in OUTBOUND_EVENTS}
        self._log_event("Café opened")

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def _log_event(self, message: str) -> None:
        self.event_log.append(message)
        self.event_log = self.event_log[-EVENT_LOG_LENGTH:]

    def subscribe(self, event: str, callback: Callable[..., None]) -> bool:
        if event not in self._listeners:
            return False
        self._listeners[event].append(callback)
        return True

    def _emit(self, event: str, *args: Any) -> None:
        for callback in list(self._listeners[event]):
            callback(*args)

    def _result(self, applied: bool, action: str, message: str) -> bool:
        self._log_event(message if applied else f"{action} ignored")
        return applied

    # ------------------------------------------------------------------
    # Drink lifecycle
    # ------------------------------------------------------------------

    def _new_drink(self) -> None:
        self.assembly.cancel_all()
        self.assembly = DrinkAssembly(strict_topping_order=self.strict_topping_order)
        self.last_metrics = None

    @property
    def drink_locked(self) -> bool:
        return self.session.awaiting_continue or self.session.day_complete

    def _station_open(self) -> bool:
        return not self.drink_locked and not self.assembly.completed

    # ------------------------------------------------------------------
    # Coffee brewer
    # ------------------------------------------------------------------

    def place_cup(self) -> bool:
        applied = self._station_open() and self.assembly.brewer.place_cup()
        return self._result(applied, "place_cup", "Cup placed")

    def start_brewing(self) -> bool:
        applied = self._station_open() and self.assembly.brewer.start_brewing(
            beans_available=not self.session.beans_exhausted
        )
        if not applied and self.session.beans_exhausted:
            self._log_event("Brewing blocked: refill beans")
            return False
        return self._result(applied, "start_brewing", "Brewing started")

    def stop_brewing(self) -> bool:
        return self._result(self.assembly.brewer.stop_brewing(), "stop_brewing", "Brewing stopped")

    def refill_beans(self) -> bool:
        return self._result(self.session.refill_beans(), "refill_beans", "Beans refilled")

    def add_milk(self) -> bool:
        applied = self._station_open() and self.assembly.brewer.add_milk()
        return self._result(applied, "add_milk", "Cold milk added")

    # ------------------------------------------------------------------
    # Kettle / stove
    # ------------------------------------------------------------------

    def toggle_stove(self) -> bool:
        if self.drink_locked:
            return self._result(False, "toggle_stove", "")
        kettle = self.assembly.kettle
        kettle.toggle_stove()
        return self._result(True, "toggle_stove", "Stove on" if kettle.stove_on else "Stove off")

    def place_kettle_on_stove(self) -> bool:
        applied = self._station_open() and self.assembly.kettle.place_kettle_on_stove()
        return self._result(applied, "place_kettle_on_stove", "Kettle on stove")

    def remove_kettle_from_stove(self) -> bool:
        applied = not self.drink_locked and self.assembly.kettle.remove_kettle_from_stove()
        return self._result(applied, "remove_kettle_from_stove", "Kettle off stove")

    def start_pour(self) -> bool:
        applied = self._station_open() and self.assembly.kettle.start_pour()
        return self._result(applied, "start_pour", "Pouring hot milk")

    def stop_pour(self) -> bool:
        return self._result(self.assembly.kettle.stop_pour(), "stop_pour", "Pour stopped")

    # ------------------------------------------------------------------
    # Chocolate
    # ------------------------------------------------------------------

    def add_chocolate(self) -> bool:
        applied = self._station_open() and self.assembly.chocolate.add_chocolate()
        return self._result(applied, "add_chocolate", "Chocolate added")

    def start_stir(self) -> bool:
        applied = self._station_open() and self.assembly.chocolate.start_stir()
        return self._result(applied, "start_stir", "Stirring")

    def stop_stir(self) -> bool:
        return self._result(self.assembly.chocolate.stop_stir(), "stop_stir", "Stirring stopped")

    # ------------------------------------------------------------------
    # Toppings
    # ------------------------------------------------------------------

    def start_whipped_cream(self) -> bool:
        applied = not self.drink_locked and self.assembly.toppings.start_whipped_cream()
        return self._result(applied, "start_whipped_cream", "Whipping cream")

    def stop_whipped_cream(self) -> bool:
        applied = self.assembly.toppings.stop_whipped_cream()
        return self._result(applied, "stop_whipped_cream", "Whipped cream released")

    def apply_whipped_cream_hold(self, phase: str = "start") -> bool:
        if phase == "start":
            return self.start_whipped_cream()
        if phase == "stop":
            return self.stop_whipped_cream()
        return self._result(False, f"apply_whipped_cream_hold({phase!r})", "")

    def apply_marshmallow(self) -> bool:
        applied = not self.drink_locked and self.assembly.toppings.apply_marshmallow()
        return self._result(applied, "apply_marshmallow", "Marshmallows added")

    def shake_sprinkles(self) -> bool:
        applied = not self.drink_locked and self.assembly.toppings.shake_sprinkles()
        done = SPRINKLES in self.assembly.drink.extras
        return self._result(applied, "shake_sprinkles", "Sprinkles added" if done else "Sprinkles shaken")

    def drop(self, item: str = "") -> bool:
        """Route a drag-and-drop; the payload names the dropped item."""
        routes: Dict[str, Callable[[], bool]] = {
            DROP_CUP: self.place_cup,
            DROP_MARSHMALLOW_SCOOP: self.apply_marshmallow,
            DROP_SPRINKLES: self.shake_sprinkles,
            DROP_CUP_TO_TRASH: self.cancel_drink,
        }
        handler = routes.get(item) if isinstance(item, str) else None
        if handler is None:
            return self._result(False, f"drop({item!r})", "")
        return handler()

    # ------------------------------------------------------------------
    # Completion, serving and the day
    # ------------------------------------------------------------------

    def cancel_drink(self) -> bool:
        if self.drink_locked:
            return self._result(False, "cancel_drink", "")
        self._new_drink()
        return self._result(True, "cancel_drink", "Drink discarded")

    def complete_station_step(self) -> bool:
        if self.drink_locked:
            return self._result(False, "complete_station_step", "")
        blockers = self.assembly.completion_blockers()
        metrics = self.assembly.complete()
        if metrics is None:
            self._log_event(f"Complete blocked: {', '.join(blockers)}")
            return False
        if COFFEE in self.assembly.drink.bases:
            self.session.record_coffee_used()
        self.last_metrics = metrics
        self._log_event(f"Drink completed: {self.assembly.drink.kind}")
        self._emit(DRINK_COMPLETED, metrics)
        return True

    def serve_drink(self) -> bool:
        if not self.session.can_serve():
            return self._result(False, "serve_drink", "")
        if not self.assembly.completed and not self.complete_station_step():
            return self._result(False, "serve_drink", "")
        self.assembly.finish_toppings()
        self.assembly.cancel_all()
        transaction = self.session.serve(self.assembly.drink, self.assembly.metrics)
        self.last_metrics = self.assembly.metrics
        self._log_event(f"Served customer {transaction.customer_id}: score {transaction.score}")
        self._emit(ORDER_SCORED, transaction.score, transaction)
        return True

    def continue_after_score(self) -> bool:
        if not self.session.awaiting_continue:
            return self._result(False, "continue_after_score", "")
        day_over = self.session.continue_after_score()
        self._new_drink()
        if day_over:
            self._log_event("Day complete! All customers served")
            self._emit(DAY_COMPLETED, self.session.ledger())
        else:
            self._log_event("Next customer")
        return True

    def restart_day(self) -> bool:
        self.session.restart_day()
        self._new_drink()
        self._log_event("Day restarted")
        return True

    # ------------------------------------------------------------------
    # Inbound boundary
    # ------------------------------------------------------------------

    def dispatch(self, action: Any, **payload: Any) -> bool:
        """Apply an inbound action by name, or from a ``{"type": ...}`` mapping.

        Unknown actions and payloads that do not fit the action are ignored.
        """
        if isinstance(action, Mapping):
            payload = {**{k: v for k, v in action.items() if k != "type"}, **payload}
            action = action.get("type")
        if not isinstance(action, str) or not action.strip():
            return False
        name = normalize_action_name(action)
        if name not in ACTIONS:
            self._log_event(f"Unknown action {action!r}")
            return False
        handler = getattr(self, name)
        try:
            inspect.signature(handler).bind(**payload)
        except TypeError:
            self._log_event(f"Malformed payload for {name}")
            return False
        return handler(**payload)

    def tick(self, dt: float) -> None:
        if isinstance(dt, bool) or not isinstance(dt, (int, float)) or not math.isfinite(dt) or dt <= 0:
            return
        assembly = self.assembly
        was_overflowed = assembly.overflowed
        was_on_fire = assembly.kettle.on_fire
        had_extras = set(assembly.drink.extras)

        advance_timers(lambda: self.assembly.timers, dt)
        self.time += dt

        if assembly.overflowed and not was_overflowed:
            self._log_event("Cup overflowed! Discard and start again")
        if assembly.kettle.on_fire and not was_on_fire:
            self._log_event("Stove on fire! Turn it off")
        for extra in (WHIPPED_CREAM, MARSHMALLOWS, SPRINKLES):
            if extra in assembly.drink.extras and extra not in had_extras:
                self._log_event(f"Topping added: {extra}")

    # ------------------------------------------------------------------
    # Outbound snapshots
    # ------------------------------------------------------------------

    def ledger(self) -> tuple[Transaction, ...]:
        return self.session.ledger()

    def recipe_for_current_order(self) -> Optional[Dict[str, Any]]:
        customer = self.session.current_customer
        if customer is None:
            return None
        return RECIPES.get(customer.order.drink)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "time": self.time,
            "session": self.session.to_dict(),
            "assembly": self.assembly.to_dict(),
            "metrics": None if self.last_metrics is None else asdict(self.last_metrics),
            "recipe": self.recipe_for_current_order(),
            "event_log": list(self.event_log),
        }
