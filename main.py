from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple

try:
    import pygame  # type: ignore
except Exception:
    pygame = None

from config import (
    COFFEE,
    CUSTOMERS_FILE,
    DROP_CUP_TO_TRASH,
    DROP_MARSHMALLOW_SCOOP,
    DROP_SPRINKLES,
    FULL_CUP_LEVEL,
    HOT_CHOCOLATE,
    MARSHMALLOWS,
    MOCHA,
    MOCHA_SPLIT_CAP,
    SPRINKLE_SHAKES_REQUIRED,
    SPRINKLES,
    WHIPPED_CREAM,
)
from cafe import CafeSim, Customer
from cafe.economy import format_money
from cafe.scoring import customer_reaction
from cafe.simulation import customers_from_catalog
from customer_catalog import load_customer_catalog

SCREEN_W = 960
SCREEN_H = 640
WHIPPED_CREAM_DEMO_HOLD = 5.0


def _tick_until(sim: CafeSim, done: Callable[[], bool], dt: float, limit: float = 30.0) -> None:
    waited = 0.0
    while not done() and waited < limit:
        sim.tick(dt)
        waited += dt


def _brew(sim: CafeSim, target: float, dt: float) -> None:
    if sim.session.beans_exhausted:
        sim.dispatch("refill_beans")
    sim.dispatch("start_brewing")
    _tick_until(sim, lambda: sim.assembly.coffee_level >= target or not sim.assembly.brewer.brewing, dt)
    sim.dispatch("stop_brewing")


def _heat_and_pour(sim: CafeSim, target: float, dt: float) -> None:
    kettle = sim.assembly.kettle
    sim.dispatch("place_kettle_on_stove")
    sim.dispatch("toggle_stove")
    _tick_until(sim, lambda: kettle.hot, dt)
    sim.dispatch("start_pour")
    _tick_until(sim, lambda: kettle.milk_level >= target or not kettle.pouring, dt)
    sim.dispatch("stop_pour")
    sim.dispatch("toggle_stove")
    sim.dispatch("add_chocolate")
    sim.dispatch("start_stir")
    _tick_until(sim, lambda: not sim.assembly.chocolate.stirring, dt)


def _top(sim: CafeSim, customer: Customer, dt: float) -> None:
    extras = customer.order.extras
    if WHIPPED_CREAM in extras:
        sim.dispatch("apply_whipped_cream_hold", phase="start")
        _tick_until(sim, lambda: sim.assembly.toppings.whipped_progress >= WHIPPED_CREAM_DEMO_HOLD, dt)
        sim.dispatch("apply_whipped_cream_hold", phase="stop")
    if MARSHMALLOWS in extras:
        sim.dispatch("drop", item=DROP_MARSHMALLOW_SCOOP)
    if SPRINKLES in extras:
        for _ in range(SPRINKLE_SHAKES_REQUIRED):
            sim.dispatch("drop", item=DROP_SPRINKLES)


def play_order(sim: CafeSim, customer: Customer, dt: float) -> None:
    """Make ``customer``'s drink the way a careful barista would."""
    sim.dispatch("place_cup")
    drink = customer.order.drink
    if drink == COFFEE:
        _brew(sim, FULL_CUP_LEVEL, dt)
        sim.dispatch("add_milk")
    elif drink == HOT_CHOCOLATE:
        _heat_and_pour(sim, FULL_CUP_LEVEL, dt)
    elif drink == MOCHA:
        _brew(sim, MOCHA_SPLIT_CAP, dt)
        _heat_and_pour(sim, MOCHA_SPLIT_CAP, dt)
    _top(sim, customer, dt)
    sim.dispatch("serve_drink")


def run_headless(dt: float, customers_path: Path, strict_topping_order: bool = False) -> CafeSim:
    sim = CafeSim(
        customers_from_catalog(load_customer_catalog(customers_path)),
        strict_topping_order=strict_topping_order,
    )
    while sim.session.current_customer is not None:
        play_order(sim, sim.session.current_customer, dt)
        if not sim.dispatch("continue_after_score"):
            break

    summary = sim.session.day_summary()
    print(
        f"headless_done t={sim.time:.1f} served={summary.customers_served} "
        f"avg_score={summary.average_score} perfect={summary.perfect_orders} "
        f"refunds={summary.refunds} stars={summary.stars} "
        f"economy[earned={format_money(summary.total_earnings)},tips={format_money(summary.total_tips)}]"
    )
    return sim


class GameUI:
    """Keyboard-driven text panel over :class:`CafeSim`.

    Held keys map to the hold actions (brew, pour, stir, whipped cream);
    everything else is a single press.
    """

    HOLD_KEYS: Dict[str, Tuple[str, str]] = {
        "b": ("start_brewing", "stop_brewing"),
        "p": ("start_pour", "stop_pour"),
        "s": ("start_stir", "stop_stir"),
        "w": ("start_whipped_cream", "stop_whipped_cream"),
    }
    PRESS_KEYS: Dict[str, Tuple[str, Dict[str, str]]] = {
        "c": ("place_cup", {}),
        "m": ("add_milk", {}),
        "k": ("place_kettle_on_stove", {}),
        "l": ("remove_kettle_from_stove", {}),
        "o": ("toggle_stove", {}),
        "h": ("add_chocolate", {}),
        "j": ("drop", {"item": DROP_MARSHMALLOW_SCOOP}),
        "r": ("drop", {"item": DROP_SPRINKLES}),
        "x": ("drop", {"item": DROP_CUP_TO_TRASH}),
        "f": ("refill_beans", {}),
        "return": ("complete_station_step", {}),
        "f5": ("restart_day", {}),
    }

    def __init__(self, sim: CafeSim):
        if pygame is None:
            raise RuntimeError("pygame is required for graphical mode. Relaunch with --headless.")
        pygame.init()
        if not pygame.display.get_init():
            raise RuntimeError("Display subsystem is unavailable. Relaunch with --headless.")
        try:
            self.screen = pygame.display.set_mode((SCREEN_W, SCREEN_H))
        except pygame.error as exc:
            raise RuntimeError(f"Could not open a window ({exc}). Relaunch with --headless.") from exc
        pygame.display.set_caption("Café Barista")
        self.sim = sim
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("arial", 22)
        self.small = pygame.font.SysFont("arial", 17)
        self.running = True

        self.palette = {
            "bg": (24, 18, 14),
            "panel": (40, 31, 25),
            "panel_border": (92, 70, 52),
            "text": (244, 234, 220),
            "muted": (190, 170, 150),
            "alert": (255, 120, 96),
            "good": (140, 214, 150),
        }

    def _key_name(self, ev) -> str:
        return pygame.key.name(ev.key)

    def handle_input(self) -> None:
        for ev in pygame.event.get():
            if ev.type == pygame.QUIT:
                self.running = False
            elif ev.type == pygame.KEYDOWN:
                name = self._key_name(ev)
                if name == "escape":
                    self.running = False
                elif name == "space":
                    self._serve_or_continue()
                elif name in self.HOLD_KEYS:
                    self.sim.dispatch(self.HOLD_KEYS[name][0])
                elif name in self.PRESS_KEYS:
                    action, payload = self.PRESS_KEYS[name]
                    self.sim.dispatch(action, **payload)
            elif ev.type == pygame.KEYUP:
                name = self._key_name(ev)
                if name in self.HOLD_KEYS:
                    self.sim.dispatch(self.HOLD_KEYS[name][1])

    def _serve_or_continue(self) -> None:
        if self.sim.session.awaiting_continue:
            self.sim.dispatch("continue_after_score")
        else:
            self.sim.dispatch("serve_drink")

    def _blit(self, text: str, x: int, y: int, color: Optional[Tuple[int, int, int]] = None, big: bool = False) -> None:
        font = self.font if big else self.small
        self.screen.blit(font.render(text, True, color or self.palette["text"]), (x, y))

    def _draw_panel(self, rect: pygame.Rect, title: str) -> None:
        pygame.draw.rect(self.screen, self.palette["panel"], rect, border_radius=10)
        pygame.draw.rect(self.screen, self.palette["panel_border"], rect, width=1, border_radius=10)
        self._blit(title, rect.x + 10, rect.y + 8, self.palette["muted"])

    def draw(self) -> None:
        sim = self.sim
        state = sim.to_dict()
        session = state["session"]
        assembly = state["assembly"]
        self.screen.fill(self.palette["bg"])

        order_panel = pygame.Rect(10, 10, SCREEN_W - 20, 70)
        self._draw_panel(order_panel, "Order")
        customer = session["current_customer"]
        if session["day_complete"]:
            summary = sim.session.day_summary()
            line = (
                f"Day complete! Served {summary.customers_served}, earned "
                f"{format_money(summary.total_earnings)}, {summary.stars} stars (F5 to restart)"
            )
        elif customer is None:
            line = "No customers today"
        else:
            extras = ", ".join(customer["extras"]) or "no toppings"
            line = f"{customer['name']} wants a {customer['drink']} with {extras}"
        self._blit(line, order_panel.x + 10, order_panel.y + 32, big=True)

        brewer = assembly["coffee_brewer"]
        kettle = assembly["kettle"]
        chocolate = assembly["chocolate"]
        toppings = assembly["toppings"]
        station_panel = pygame.Rect(10, 90, SCREEN_W // 2 - 15, 300)
        self._draw_panel(station_panel, "Stations")
        lines = [
            f"Cup: {'yes' if assembly['cup_present'] else 'no'}   Coffee: {brewer['coffee_level']:.0f}"
            f"   Milk: {kettle['milk_level']:.0f}",
            f"Brewing: {brewer['brewing']}   Cold milk: {brewer['milk_added']}"
            f"   Beans used: {session['beans_used_since_refill']}",
            f"Stove: {'on' if kettle['stove_on'] else 'off'}   Kettle on stove: {kettle['kettle_on_stove']}",
            f"Kettle: {kettle['temperature']:.0f}°{' HOT' if kettle['hot'] else ''}   Pouring: {kettle['pouring']}",
            f"Chocolate: {chocolate['chocolate_added']}   Stirred: {chocolate['stirring_seconds']:.0f}s",
            f"Toppings: {', '.join(assembly['drink']['extras']) or '-'}   Whipping: {toppings['whipping']}",
            f"Drink: {assembly['drink']['kind'] or '-'}   Completed: {assembly['completed']}",
        ]
        for i, text in enumerate(lines):
            self._blit(text, station_panel.x + 10, station_panel.y + 36 + i * 34)
        if kettle["on_fire"]:
            self._blit("FIRE! Turn the stove off (O)", station_panel.x + 10, station_panel.bottom - 30, self.palette["alert"])
        elif assembly["overflowed"]:
            self._blit("Overflowed! Trash the cup (X)", station_panel.x + 10, station_panel.bottom - 30, self.palette["alert"])

        log_panel = pygame.Rect(SCREEN_W // 2 + 5, 90, SCREEN_W // 2 - 15, 300)
        self._draw_panel(log_panel, "Log")
        for i, entry in enumerate(state["event_log"]):
            self._blit(entry, log_panel.x + 10, log_panel.y + 32 + i * 21)

        score_panel = pygame.Rect(10, 400, SCREEN_W - 20, 110)
        self._draw_panel(score_panel, "Till")
        self._blit(f"Earnings: {format_money(session['total_earnings'])}", score_panel.x + 10, score_panel.y + 32, big=True)
        if session["awaiting_continue"] and session["last_score"] is not None:
            score = session["last_score"]
            earnings = session["last_earnings"]
            paid = "Refunded" if earnings["refunded"] else f"Paid {format_money(earnings['amount'])} + tip {format_money(earnings['tip'])}"
            self._blit(
                f"Score {score}: {customer_reaction(score)}  {paid}  (SPACE to continue)",
                score_panel.x + 10,
                score_panel.y + 66,
                self.palette["good"] if score >= 75 else self.palette["alert"],
            )

        help_text = (
            "C cup | hold B brew | M milk | K/L kettle on/off stove | O stove | hold P pour | H chocolate | "
            "hold S stir | hold W cream | J marshmallows | R sprinkles | X trash | F beans | ENTER complete | SPACE serve"
        )
        self._blit(help_text, 10, SCREEN_H - 40, self.palette["muted"])
        pygame.display.flip()

    def run(self) -> None:
        while self.running:
            dt = self.clock.tick(60) / 1000.0
            self.handle_input()
            self.sim.tick(dt)
            self.draw()
        pygame.quit()


def main() -> None:
    parser = argparse.ArgumentParser(description="Café barista simulator")
    parser.add_argument("--headless", action="store_true", help="play a scripted day without graphics")
    parser.add_argument("--dt", type=float, default=0.1, help="headless timestep")
    parser.add_argument("--customers", type=Path, default=CUSTOMERS_FILE, help="customer roster JSON")
    parser.add_argument("--strict-toppings", action="store_true", help="refuse whipped cream after other toppings")
    args = parser.parse_args()

    if args.headless:
        run_headless(args.dt, args.customers, args.strict_toppings)
        return

    sim = CafeSim(
        customers_from_catalog(load_customer_catalog(args.customers)),
        strict_topping_order=args.strict_toppings,
    )
    try:
        ui = GameUI(sim)
    except RuntimeError as exc:
        print(f"Startup error: {exc}", file=sys.stderr)
        raise SystemExit(1)
    ui.run()


if __name__ == "__main__":
    main()
