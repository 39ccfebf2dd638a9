"""Topping dispensers sharing the drink's ordered extras list."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from config import (
    EXTRA_KINDS,
    MARSHMALLOWS,
    SPRINKLE_SHAKE_COOLDOWN,
    SPRINKLE_SHAKES_REQUIRED,
    SPRINKLES,
    WHIPPED_CREAM,
    WHIPPED_CREAM_HOLD_SECONDS,
    WHIPPED_CREAM_INTERVAL,
)
from cafe.entities import DrinkInProgress
from cafe.stations import CupView
from cafe.timers import EPSILON, Timer


@dataclass
class DispenserState:
    applied: bool = False
    progress: float = 0.0
    applied_at_index: int = -1


class ToppingStation:
    """Whipped cream (hold), marshmallows (single drop) and sprinkles (shakes).

    The station records the order toppings went on; it only refuses a late
    whipped cream when ``strict_order`` is set.
    """

    def __init__(self, cup: CupView, drink: DrinkInProgress, *, strict_order: bool = False) -> None:
        self.cup = cup
        self.drink = drink
        self.strict_order = strict_order
        self.dispensers: Dict[str, DispenserState] = {kind: DispenserState() for kind in EXTRA_KINDS}
        self.whipping = False
        self.whipped_cream_first: Optional[bool] = None
        self.whipped_cream_duration: Optional[float] = None
        self.shaking = False
        self.whip_timer = Timer(WHIPPED_CREAM_INTERVAL, self._on_whip_tick)
        self.shake_timer = Timer(SPRINKLE_SHAKE_COOLDOWN, self._on_shake_cooldown, repeat=False)

    @property
    def timers(self) -> List[Timer]:
        return [self.whip_timer, self.shake_timer]

    def _apply(self, kind: str) -> bool:
        index = self.drink.add_extra(kind)
        if index < 0:
            return False
        state = self.dispensers[kind]
        state.applied = True
        state.applied_at_index = index
        return True

    # ------------------------------------------------------------------
    # Whipped cream
    # ------------------------------------------------------------------

    def start_whipped_cream(self) -> bool:
        if self.whipping or not self.cup.cup_present:
            return False
        if self.dispensers[WHIPPED_CREAM].applied:
            return False
        if self.strict_order and self.drink.extras:
            return False
        self.whipping = True
        self.dispensers[WHIPPED_CREAM].progress = 0.0
        self.whip_timer.start()
        return True

    def stop_whipped_cream(self) -> bool:
        if not self.whipping:
            return False
        self.whipping = False
        self.whip_timer.cancel()
        state = self.dispensers[WHIPPED_CREAM]
        if state.applied:
            self.whipped_cream_duration = state.progress
        else:
            state.progress = 0.0
        return True

    def _on_whip_tick(self) -> None:
        state = self.dispensers[WHIPPED_CREAM]
        state.progress = round(state.progress + WHIPPED_CREAM_INTERVAL, 6)
        if not state.applied and state.progress >= WHIPPED_CREAM_HOLD_SECONDS - EPSILON:
            first = not self.drink.extras
            if self._apply(WHIPPED_CREAM):
                self.whipped_cream_first = first

    @property
    def whipped_progress(self) -> float:
        return self.dispensers[WHIPPED_CREAM].progress

    # ------------------------------------------------------------------
    # Marshmallows and sprinkles
    # ------------------------------------------------------------------

    def apply_marshmallow(self) -> bool:
        if not self.cup.cup_present or self.dispensers[MARSHMALLOWS].applied:
            return False
        return self._apply(MARSHMALLOWS)

    def shake_sprinkles(self) -> bool:
        state = self.dispensers[SPRINKLES]
        if not self.cup.cup_present or state.applied:
            return False
        state.progress += 1
        self.shaking = True
        self.shake_timer.start()
        if state.progress >= SPRINKLE_SHAKES_REQUIRED:
            self._apply(SPRINKLES)
        return True

    def _on_shake_cooldown(self) -> None:
        self.shaking = False

    def to_dict(self) -> Dict:
        return {
            "whipping": self.whipping,
            "shaking": self.shaking,
            "whipped_cream_first": self.whipped_cream_first,
            "whipped_cream_duration": self.whipped_cream_duration,
            "dispensers": {
                kind: {
                    "applied": state.applied,
                    "progress": state.progress,
                    "applied_at_index": state.applied_at_index,
                }
                for kind, state in self.dispensers.items()
            },
        }
