"""Core dataclasses for the café simulation."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Set

from config import BASE_KINDS, COFFEE, HOT_CHOCOLATE, MOCHA


@dataclass(frozen=True)
class Order:
    """What a customer asked for. Extras are compared as a set."""

    drink: str
    extras: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class Customer:
    """A customer in the queue.

    ``patience`` is carried from the roster but nothing counts it down yet.
    """

    id: int
    name: str
    order: Order
    patience: int = 100


@dataclass
class DrinkInProgress:
    """The cup being assembled.

    ``bases`` holds at most one of each base component; a drink with both is a
    mocha.  ``extras`` keeps insertion order because whipped-cream placement is
    graded.
    """

    bases: Set[str] = field(default_factory=set)
    extras: List[str] = field(default_factory=list)

    def add_base(self, base: str) -> bool:
        if base not in BASE_KINDS or base in self.bases:
            return False
        self.bases.add(base)
        return True

    def add_extra(self, extra: str) -> int:
        """Append ``extra`` and return its index, or -1 if already present."""
        if extra in self.extras:
            return -1
        self.extras.append(extra)
        return len(self.extras) - 1

    @property
    def kind(self) -> Optional[str]:
        if self.bases == {COFFEE, HOT_CHOCOLATE}:
            return MOCHA
        if len(self.bases) == 1:
            return next(iter(self.bases))
        return None


@dataclass
class DrinkMetrics:
    """Process measurements captured when station output is committed.

    Fields are write-once per drink; ``None`` means the station never
    contributed that measurement.
    """

    coffee_level: Optional[float] = None
    hot_chocolate_temp: Optional[float] = None
    milk_level: Optional[float] = None
    stirring_duration: Optional[float] = None
    overflowed: bool = False
    whipped_cream_first: Optional[bool] = None
    whipped_cream_duration: Optional[float] = None

    def record(self, **values) -> None:
        for name, value in values.items():
            if not hasattr(self, name) or value is None:
                continue
            if name == "overflowed":
                self.overflowed = self.overflowed or bool(value)
                continue
            if getattr(self, name) is None:
                setattr(self, name, value)


@dataclass(frozen=True)
class Transaction:
    """One served order in the day's ledger."""

    customer_id: int
    score: int
    amount: float
    tip: float
    refunded: bool

    @property
    def total(self) -> float:
        return round(self.amount + self.tip, 2)
