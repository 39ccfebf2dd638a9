"""Base ingredient stations: coffee brewer, kettle/stove and chocolate bowl.

Each station owns and mutates only its own state.  Anything it needs to know
about the rest of the cup (presence, the other base's level, overflow) comes
from the read-only cup view handed in by :class:`cafe.assembly.DrinkAssembly`.
Actions return ``True`` when applied and ``False`` when their preconditions are
unmet; they never raise.
"""
from __future__ import annotations

from typing import Dict, List, Optional, Protocol, Tuple

from config import (
    BREW_INTERVAL,
    BREW_STEP,
    COFFEE,
    COOL_INTERVAL,
    COOL_STEP,
    FIRE_DELAY,
    FULL_CUP_LEVEL,
    HEAT_INTERVAL,
    HEAT_STEP,
    HOT_CHOCOLATE,
    HOT_TEMPERATURE,
    MAX_TEMPERATURE,
    MOCHA_SPLIT_CAP,
    POUR_INTERVAL,
    POUR_STEP,
    STIR_INTERVAL,
    STIR_REQUIRED_SECONDS,
)
from cafe.timers import EPSILON, Timer


class CupView(Protocol):
    """Read-only projection of the cup shared by all stations."""

    @property
    def cup_present(self) -> bool: ...

    @property
    def overflowed(self) -> bool: ...

    @property
    def milk_level(self) -> float: ...

    def fill_cap(self, base: str) -> float: ...


def fill_cap(other_level: float) -> float:
    """Cap for one base given the other base's current level."""
    if other_level <= 0:
        return FULL_CUP_LEVEL
    return max(0.0, min(MOCHA_SPLIT_CAP, FULL_CUP_LEVEL - other_level))


def apply_fill_step(level: float, step: float, cap: float) -> Tuple[float, bool, bool]:
    """Apply one fill tick.  Returns ``(new_level, overflowed, keep_filling)``.

    Reaching the cap exactly stops there without overflowing.  The next tick,
    which would push a whole step past the cap, overflows; the level is
    clamped to the cap either way.
    """
    new_level = level + step
    if new_level >= cap + step - EPSILON:
        return cap, True, False
    if new_level > cap:
        return cap, False, True
    return new_level, False, True


class CoffeeBrewer:
    """Coffee machine with cup slot, brew timer and cold-milk step."""

    def __init__(self, cup: CupView) -> None:
        self.cup = cup
        self.cup_present = False
        self.brewing = False
        self.coffee_level = 0.0
        self.overflowed = False
        self.milk_added = False
        self.brew_timer = Timer(BREW_INTERVAL, self._on_brew_tick)

    @property
    def timers(self) -> List[Timer]:
        return [self.brew_timer]

    def place_cup(self) -> bool:
        if self.cup_present:
            return False
        self.cup_present = True
        return True

    def start_brewing(self, beans_available: bool = True) -> bool:
        if not self.cup_present or self.brewing or not beans_available or self.cup.overflowed:
            return False
        self.brewing = True
        self.brew_timer.start()
        return True

    def stop_brewing(self) -> bool:
        was_brewing = self.brewing
        self.brewing = False
        self.brew_timer.cancel()
        return was_brewing

    def add_milk(self) -> bool:
        if self.coffee_level <= 0 or self.cup.overflowed or self.milk_added:
            return False
        self.milk_added = True
        return True

    def _on_brew_tick(self) -> None:
        cap = self.cup.fill_cap(COFFEE)
        self.coffee_level, overflowed, keep_brewing = apply_fill_step(self.coffee_level, BREW_STEP, cap)
        if overflowed:
            self.overflowed = True
        if not keep_brewing:
            self.stop_brewing()

    @property
    def used(self) -> bool:
        return self.coffee_level > 0

    def can_complete(self) -> bool:
        milk_done = self.milk_added or self.cup.milk_level > 0
        return self.used and milk_done and not self.cup.overflowed

    def output(self) -> Dict[str, float | bool]:
        return {"coffee_level": self.coffee_level, "overflowed": self.overflowed}

    def to_dict(self) -> Dict[str, float | bool]:
        return {
            "cup_present": self.cup_present,
            "brewing": self.brewing,
            "coffee_level": self.coffee_level,
            "overflowed": self.overflowed,
            "milk_added": self.milk_added,
        }


class Kettle:
    """Stove, kettle temperature, fire hazard and the hot-milk pour."""

    def __init__(self, cup: CupView) -> None:
        self.cup = cup
        self.stove_on = False
        self.kettle_on_stove = False
        self.temperature = 0.0
        self.hot = False
        self.on_fire = False
        self.milk_level = 0.0
        self.pouring = False
        self.overflowed = False
        self.pour_temperature: Optional[float] = None
        self._poured_this_pour = False
        self.heat_timer = Timer(HEAT_INTERVAL, self._on_heat_tick)
        self.cool_timer = Timer(COOL_INTERVAL, self._on_cool_tick)
        self.fire_timer = Timer(FIRE_DELAY, self._on_fire_timer, repeat=False)
        self.pour_timer = Timer(POUR_INTERVAL, self._on_pour_tick)
        self._sync_thermal_timers()

    @property
    def timers(self) -> List[Timer]:
        return [self.heat_timer, self.cool_timer, self.fire_timer, self.pour_timer]

    @property
    def heating(self) -> bool:
        return self.stove_on and self.kettle_on_stove

    # ------------------------------------------------------------------
    # Stove and kettle placement
    # ------------------------------------------------------------------

    def toggle_stove(self) -> bool:
        if self.stove_on:
            self.stove_on = False
            self.on_fire = False
            self.fire_timer.cancel()
            self.temperature = 0.0
            self.hot = False
        else:
            self.stove_on = True
        self._sync_thermal_timers()
        return True

    def place_kettle_on_stove(self) -> bool:
        if self.kettle_on_stove or self.pouring:
            return False
        self.kettle_on_stove = True
        self._sync_thermal_timers()
        return True

    def remove_kettle_from_stove(self) -> bool:
        if not self.kettle_on_stove:
            return False
        self.kettle_on_stove = False
        self.fire_timer.cancel()
        self._sync_thermal_timers()
        return True

    def _sync_thermal_timers(self) -> None:
        if self.heating:
            self.cool_timer.cancel()
            if not self.heat_timer.active:
                self.heat_timer.start()
        else:
            self.heat_timer.cancel()
            if self.temperature > 0 and not self.cool_timer.active:
                self.cool_timer.start()
            elif self.temperature <= 0:
                self.cool_timer.cancel()

    def _on_heat_tick(self) -> None:
        self.temperature = min(MAX_TEMPERATURE, self.temperature + HEAT_STEP)
        if self.temperature >= HOT_TEMPERATURE:
            self.hot = True
        if self.temperature >= MAX_TEMPERATURE and not self.on_fire and not self.fire_timer.active:
            self.fire_timer.start()

    def _on_cool_tick(self) -> None:
        self.temperature = max(0.0, self.temperature - COOL_STEP)
        if self.temperature < HOT_TEMPERATURE:
            self.hot = False
        if self.temperature <= 0:
            self.cool_timer.cancel()

    def _on_fire_timer(self) -> None:
        if self.heating and self.temperature >= MAX_TEMPERATURE:
            self.on_fire = True

    # ------------------------------------------------------------------
    # Pouring
    # ------------------------------------------------------------------

    def start_pour(self) -> bool:
        if self.pouring or not self.hot or not self.cup.cup_present or self.cup.overflowed:
            return False
        if self.milk_level >= self.cup.fill_cap(HOT_CHOCOLATE):
            return False
        if self.kettle_on_stove:
            self.kettle_on_stove = False
            self.fire_timer.cancel()
            self._sync_thermal_timers()
        self.pouring = True
        self._poured_this_pour = False
        self.pour_temperature = self.temperature
        self.pour_timer.start()
        return True

    def stop_pour(self) -> bool:
        if not self.pouring:
            return False
        self._end_pour()
        return True

    def _end_pour(self) -> None:
        self.pouring = False
        self.pour_timer.cancel()
        if self._poured_this_pour:
            self.hot = False
            self.temperature = 0.0
            self.cool_timer.cancel()

    def _on_pour_tick(self) -> None:
        cap = self.cup.fill_cap(HOT_CHOCOLATE)
        self.milk_level, overflowed, keep_pouring = apply_fill_step(self.milk_level, POUR_STEP, cap)
        self._poured_this_pour = True
        if overflowed:
            self.overflowed = True
        if not keep_pouring:
            self._end_pour()

    def to_dict(self) -> Dict[str, float | bool | None]:
        return {
            "stove_on": self.stove_on,
            "kettle_on_stove": self.kettle_on_stove,
            "temperature": self.temperature,
            "hot": self.hot,
            "on_fire": self.on_fire,
            "milk_level": self.milk_level,
            "pouring": self.pouring,
            "overflowed": self.overflowed,
            "pour_temperature": self.pour_temperature,
        }


class ChocolateStation:
    """Chocolate spoon and stirring."""

    def __init__(self, cup: CupView) -> None:
        self.cup = cup
        self.chocolate_added = False
        self.stirring = False
        self.stirring_seconds = 0.0
        self.stir_timer = Timer(STIR_INTERVAL, self._on_stir_tick)

    @property
    def timers(self) -> List[Timer]:
        return [self.stir_timer]

    def add_chocolate(self) -> bool:
        if self.chocolate_added or self.cup.milk_level <= 0 or self.cup.overflowed:
            return False
        self.chocolate_added = True
        return True

    def start_stir(self) -> bool:
        if self.stirring or not self.cup.cup_present:
            return False
        self.stirring = True
        self.stir_timer.start()
        return True

    def stop_stir(self) -> bool:
        was_stirring = self.stirring
        self.stirring = False
        self.stir_timer.cancel()
        return was_stirring

    def _on_stir_tick(self) -> None:
        self.stirring_seconds += STIR_INTERVAL
        if self.stirring_seconds >= STIR_REQUIRED_SECONDS:
            self.stop_stir()

    def to_dict(self) -> Dict[str, float | bool]:
        return {
            "chocolate_added": self.chocolate_added,
            "stirring": self.stirring,
            "stirring_seconds": self.stirring_seconds,
        }
