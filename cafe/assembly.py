"""Drink assembly context: one cup, its stations and its committed metrics."""
from __future__ import annotations

from typing import Dict, List, Optional

from config import COFFEE, HOT_CHOCOLATE, STIR_REQUIRED_SECONDS
from cafe.entities import DrinkInProgress, DrinkMetrics
from cafe.stations import ChocolateStation, CoffeeBrewer, Kettle, fill_cap
from cafe.timers import Timer
from cafe.toppings import ToppingStation


class DrinkAssembly:
    """Aggregates the stations used for a single drink.

    The assembly doubles as the read-only cup view each station queries, so
    the mocha caps are always recomputed from the stations' current levels.
    Discarding the assembly discards every station timer with it.
    """

    def __init__(self, *, strict_topping_order: bool = False) -> None:
        self.drink = DrinkInProgress()
        self.metrics = DrinkMetrics()
        self.completed = False
        self.brewer = CoffeeBrewer(self)
        self.kettle = Kettle(self)
        self.chocolate = ChocolateStation(self)
        self.toppings = ToppingStation(self, self.drink, strict_order=strict_topping_order)

    # ------------------------------------------------------------------
    # Cup view
    # ------------------------------------------------------------------

    @property
    def cup_present(self) -> bool:
        return self.brewer.cup_present

    @property
    def overflowed(self) -> bool:
        return self.brewer.overflowed or self.kettle.overflowed

    @property
    def coffee_level(self) -> float:
        return self.brewer.coffee_level

    @property
    def milk_level(self) -> float:
        return self.kettle.milk_level

    @property
    def total_level(self) -> float:
        return self.coffee_level + self.milk_level

    def fill_cap(self, base: str) -> float:
        other = self.milk_level if base == COFFEE else self.coffee_level
        return fill_cap(other)

    @property
    def timers(self) -> List[Timer]:
        return self.brewer.timers + self.kettle.timers + self.chocolate.timers + self.toppings.timers

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------

    def _hot_chocolate_used(self) -> bool:
        return self.milk_level > 0 or self.chocolate.chocolate_added

    def _hot_chocolate_ready(self) -> bool:
        return (
            self.milk_level > 0
            and self.chocolate.chocolate_added
            and self.chocolate.stirring_seconds >= STIR_REQUIRED_SECONDS
            and not self.overflowed
            and not self.kettle.on_fire
        )

    def completion_blockers(self) -> List[str]:
        """Reasons the cup cannot be completed yet; empty when it can."""
        blockers: List[str] = []
        if self.completed:
            blockers.append("already complete")
        if not self.cup_present:
            blockers.append("no cup")
        if self.overflowed:
            blockers.append("cup overflowed")
        if self.kettle.on_fire:
            blockers.append("stove on fire")
        if self.total_level <= 0:
            blockers.append("cup is empty")
        if self.brewer.used and not self.brewer.can_complete():
            blockers.append("coffee needs milk")
        if self._hot_chocolate_used() and not self._hot_chocolate_ready():
            blockers.append("hot chocolate unfinished")
        return blockers

    def complete(self) -> Optional[DrinkMetrics]:
        """Commit every used station into the drink; ``None`` if blocked."""
        if self.completion_blockers():
            return None
        self.brewer.stop_brewing()
        self.chocolate.stop_stir()
        if self.brewer.used:
            self.drink.add_base(COFFEE)
            self.metrics.record(**self.brewer.output())
        if self._hot_chocolate_used():
            self.drink.add_base(HOT_CHOCOLATE)
            self.metrics.record(
                milk_level=self.milk_level,
                hot_chocolate_temp=self.kettle.pour_temperature,
                stirring_duration=self.chocolate.stirring_seconds,
                overflowed=self.kettle.overflowed,
            )
        self.completed = True
        return self.metrics

    def finish_toppings(self) -> None:
        """Release any held dispenser and commit topping metrics."""
        self.toppings.stop_whipped_cream()
        self.metrics.record(
            whipped_cream_first=self.toppings.whipped_cream_first,
            whipped_cream_duration=self.toppings.whipped_cream_duration,
        )

    def cancel_all(self) -> None:
        for timer in self.timers:
            timer.cancel()

    def to_dict(self) -> Dict:
        return {
            "completed": self.completed,
            "cup_present": self.cup_present,
            "overflowed": self.overflowed,
            "drink": {
                "bases": sorted(self.drink.bases),
                "extras": list(self.drink.extras),
                "kind": self.drink.kind,
            },
            "coffee_brewer": self.brewer.to_dict(),
            "kettle": self.kettle.to_dict(),
            "chocolate": self.chocolate.to_dict(),
            "toppings": self.toppings.to_dict(),
        }
