"""Pricing: turn a drink score into payment, tip or refund."""
from __future__ import annotations

from dataclasses import dataclass

from config import BASE_PRICE, REFUND_BELOW_SCORE


@dataclass(frozen=True)
class Earnings:
    amount: float
    tip: float
    refunded: bool

    @property
    def total(self) -> float:
        return round(self.amount + self.tip, 2)


def calculate_earnings(score: int, base_price: float = BASE_PRICE) -> Earnings:
    """Full price plus a tip that grows linearly from score 50 (none) to 100.

    Scores below 50 are refunded: nothing is paid and nothing is tipped.
    """
    if score < REFUND_BELOW_SCORE:
        return Earnings(amount=0.0, tip=0.0, refunded=True)
    span = 100 - REFUND_BELOW_SCORE
    tip_fraction = (min(score, 100) - REFUND_BELOW_SCORE) / span
    return Earnings(amount=base_price, tip=round(base_price * tip_fraction, 2), refunded=False)


def format_money(amount: float) -> str:
    return f"${amount:.2f}"
