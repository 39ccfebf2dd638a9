"""Day progression: customer queue, ledger, earnings and the bean hopper."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from config import BEAN_REFILL_THRESHOLD
from cafe.economy import Earnings, calculate_earnings
from cafe.entities import Customer, DrinkInProgress, DrinkMetrics, Transaction
from cafe.scoring import calculate_score, round_half_up


@dataclass(frozen=True)
class DaySummary:
    customers_served: int
    total_earnings: float
    average_score: int
    total_tips: float
    perfect_orders: int
    refunds: int

    @property
    def stars(self) -> int:
        if self.average_score >= 90:
            return 5
        if self.average_score >= 80:
            return 4
        if self.average_score >= 70:
            return 3
        if self.average_score >= 60:
            return 2
        return 1


def summarize_day(ledger: Sequence[Transaction]) -> DaySummary:
    served = len(ledger)
    average = round_half_up(sum(t.score for t in ledger) / served) if served else 0
    return DaySummary(
        customers_served=served,
        total_earnings=round(sum(t.total for t in ledger), 2),
        average_score=average,
        total_tips=round(sum(t.tip for t in ledger), 2),
        perfect_orders=sum(1 for t in ledger if t.score == 100),
        refunds=sum(1 for t in ledger if t.refunded),
    )


class CafeSession:
    """Owns everything that outlives a single drink.

    Serving records a transaction and shows the scorecard; only
    :meth:`continue_after_score` moves the queue on.  The ledger is
    append-only and handed out as tuples, so a snapshot taken before
    :meth:`restart_day` stays intact.
    """

    def __init__(self, customers: Sequence[Customer]) -> None:
        self.customers: Tuple[Customer, ...] = tuple(customers)
        self.customer_index = 0
        self.total_earnings = 0.0
        self.transactions: List[Transaction] = []
        self.beans_used_since_refill = 0
        self.awaiting_continue = False
        self.day_complete = False
        self.last_score: Optional[int] = None
        self.last_earnings: Optional[Earnings] = None

    @property
    def current_customer(self) -> Optional[Customer]:
        if self.day_complete or not (0 <= self.customer_index < len(self.customers)):
            return None
        return self.customers[self.customer_index]

    # ------------------------------------------------------------------
    # Beans
    # ------------------------------------------------------------------

    @property
    def beans_exhausted(self) -> bool:
        return self.beans_used_since_refill >= BEAN_REFILL_THRESHOLD

    def record_coffee_used(self) -> None:
        self.beans_used_since_refill += 1

    def refill_beans(self) -> bool:
        if not self.beans_exhausted:
            return False
        self.beans_used_since_refill = 0
        return True

    # ------------------------------------------------------------------
    # Serving
    # ------------------------------------------------------------------

    def can_serve(self) -> bool:
        return self.current_customer is not None and not self.awaiting_continue

    def serve(self, drink: DrinkInProgress, metrics: DrinkMetrics) -> Optional[Transaction]:
        customer = self.current_customer
        if customer is None or self.awaiting_continue:
            return None
        score = calculate_score(drink, customer.order, metrics)
        earnings = calculate_earnings(score)
        transaction = Transaction(
            customer_id=customer.id,
            score=score,
            amount=earnings.amount,
            tip=earnings.tip,
            refunded=earnings.refunded,
        )
        self.transactions.append(transaction)
        self.total_earnings = round(self.total_earnings + earnings.total, 2)
        self.last_score = score
        self.last_earnings = earnings
        self.awaiting_continue = True
        return transaction

    def continue_after_score(self) -> bool:
        """Dismiss the scorecard.  Returns ``True`` when this ends the day."""
        if not self.awaiting_continue:
            return False
        self.awaiting_continue = False
        if self.customer_index < len(self.customers) - 1:
            self.customer_index += 1
            return False
        self.day_complete = True
        return True

    def restart_day(self) -> None:
        self.customer_index = 0
        self.total_earnings = 0.0
        self.transactions = []
        self.awaiting_continue = False
        self.day_complete = False
        self.last_score = None
        self.last_earnings = None

    def ledger(self) -> Tuple[Transaction, ...]:
        return tuple(self.transactions)

    def day_summary(self) -> DaySummary:
        return summarize_day(self.transactions)

    def to_dict(self) -> Dict:
        customer = self.current_customer
        return {
            "customer_index": self.customer_index,
            "current_customer": None
            if customer is None
            else {
                "id": customer.id,
                "name": customer.name,
                "drink": customer.order.drink,
                "extras": sorted(customer.order.extras),
                "patience": customer.patience,
            },
            "total_earnings": self.total_earnings,
            "transactions": [
                {
                    "customer_id": t.customer_id,
                    "score": t.score,
                    "amount": t.amount,
                    "tip": t.tip,
                    "refunded": t.refunded,
                }
                for t in self.transactions
            ],
            "beans_used_since_refill": self.beans_used_since_refill,
            "beans_exhausted": self.beans_exhausted,
            "awaiting_continue": self.awaiting_continue,
            "day_complete": self.day_complete,
            "last_score": self.last_score,
            "last_earnings": None
            if self.last_earnings is None
            else {
                "amount": self.last_earnings.amount,
                "tip": self.last_earnings.tip,
                "refunded": self.last_earnings.refunded,
            },
        }
