"""Pure scoring of a finished drink against the customer's order."""
from __future__ import annotations

import math
from typing import Iterable, Optional, Tuple

from config import (
    COFFEE,
    COFFEE_LEVEL_BANDS,
    COFFEE_LEVEL_FALLBACK,
    COFFEE_WEIGHT,
    FULL_CUP_LEVEL,
    HOT_CHOCOLATE,
    MILK_LEVEL_BANDS,
    MILK_LEVEL_FALLBACK,
    MILK_WEIGHT,
    MOCHA,
    MOCHA_RATIO_WEIGHT,
    MOCHA_SPLIT_CAP,
    OVERFLOW_PENALTY,
    STIR_PERFECT,
    STIRRING_POINTS,
    STIRRING_WEIGHT,
    TEMPERATURE_PERFECT,
    TEMPERATURE_POINTS,
    TEMPERATURE_WARM_MIN,
    TEMPERATURE_WEIGHT,
    TOPPINGS_MATCH_POINTS,
    TOPPINGS_MISMATCH_POINTS,
    TOPPINGS_WEIGHT,
    WHIPPED_CREAM,
    WHIPPED_CREAM_BONUS,
    WHIPPED_CREAM_GOOD_HOLD,
    WHIPPED_CREAM_LATE_PENALTY,
    WHIPPED_CREAM_PARTIAL_BONUS,
    WHIPPED_CREAM_PERFECT_HOLD,
)
from cafe.entities import DrinkInProgress, DrinkMetrics, Order


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def made_drink_kind(bases: Iterable[str]) -> Optional[str]:
    bases = set(bases)
    if bases == {COFFEE, HOT_CHOCOLATE}:
        return MOCHA
    if len(bases) == 1 and bases <= {COFFEE, HOT_CHOCOLATE}:
        return next(iter(bases))
    return None


def fill_percent(level: float, is_mocha: bool) -> float:
    """Express a fill level as a percentage of the share that base may fill."""
    share = MOCHA_SPLIT_CAP if is_mocha else FULL_CUP_LEVEL
    return level * 100.0 / share


def _banded_level(percent: float, bands: Tuple[Tuple[float, int], ...], fallback: int) -> int:
    if percent > 100.0:
        return fallback
    for lower, points in bands:
        if percent >= lower:
            return points
    return fallback


def coffee_points(level: float, is_mocha: bool = False) -> int:
    return _banded_level(fill_percent(level, is_mocha), COFFEE_LEVEL_BANDS, COFFEE_LEVEL_FALLBACK)


def milk_points(level: float, is_mocha: bool = False) -> int:
    return _banded_level(fill_percent(level, is_mocha), MILK_LEVEL_BANDS, MILK_LEVEL_FALLBACK)


def temperature_points(temp: float) -> int:
    low, high = TEMPERATURE_PERFECT
    if low <= temp <= high:
        return TEMPERATURE_POINTS["perfect"]
    if TEMPERATURE_WARM_MIN <= temp < low:
        return TEMPERATURE_POINTS["warm"]
    if temp > high:
        return TEMPERATURE_POINTS["too_hot"]
    return TEMPERATURE_POINTS["too_cold"]


def stirring_points(duration: float) -> int:
    low, high = STIR_PERFECT
    if low <= duration <= high:
        return STIRRING_POINTS["perfect"]
    if duration > high:
        return STIRRING_POINTS["over"]
    return STIRRING_POINTS["under"]


def toppings_points(ordered: Iterable[str], made: Iterable[str], metrics: DrinkMetrics) -> int:
    ordered_set = set(ordered)
    if ordered_set != set(made):
        return TOPPINGS_MISMATCH_POINTS

    points = TOPPINGS_MATCH_POINTS
    if WHIPPED_CREAM not in ordered_set:
        return points + WHIPPED_CREAM_BONUS

    if metrics.whipped_cream_first is False:
        points -= WHIPPED_CREAM_LATE_PENALTY
    held = metrics.whipped_cream_duration
    if held is not None:
        low, high = WHIPPED_CREAM_PERFECT_HOLD
        if low <= held <= high:
            points += WHIPPED_CREAM_BONUS
        elif held >= WHIPPED_CREAM_GOOD_HOLD:
            points += WHIPPED_CREAM_PARTIAL_BONUS
    return points


def calculate_score(drink: DrinkInProgress, order: Order, metrics: DrinkMetrics) -> int:
    """Grade ``drink`` against ``order``; 0–100.

    The base drink is pass/fail: a coffee served to a mocha order scores 0.
    Otherwise each measured quality adds its banded points against a running
    maximum, an overflow costs a flat penalty, and toppings are compared as
    sets with extra credit for well-handled whipped cream.
    """
    if made_drink_kind(drink.bases) != order.drink:
        return 0

    is_mocha = order.drink == MOCHA
    total = 0
    maximum = 0

    if COFFEE in drink.bases and metrics.coffee_level is not None:
        maximum += COFFEE_WEIGHT
        total += coffee_points(metrics.coffee_level, is_mocha)

    if HOT_CHOCOLATE in drink.bases:
        if metrics.hot_chocolate_temp is not None:
            maximum += TEMPERATURE_WEIGHT
            total += temperature_points(metrics.hot_chocolate_temp)
        if metrics.milk_level is not None:
            maximum += MILK_WEIGHT
            total += milk_points(metrics.milk_level, is_mocha)
        if metrics.stirring_duration is not None:
            maximum += STIRRING_WEIGHT
            total += stirring_points(metrics.stirring_duration)

    if is_mocha:
        maximum += MOCHA_RATIO_WEIGHT
        total += MOCHA_RATIO_WEIGHT

    if metrics.overflowed:
        total -= OVERFLOW_PENALTY

    maximum += TOPPINGS_WEIGHT
    total += toppings_points(order.extras, drink.extras, metrics)

    percentage = 100.0 * total / maximum
    return max(0, min(100, round_half_up(percentage)))


def customer_reaction(score: int) -> str:
    if score >= 90:
        return "Thank you, this is perfect!"
    if score >= 75:
        return "Pretty good, thanks!"
    if score >= 60:
        return "You call yourself a barista?"
    if score >= 40:
        return "Yuck, I hate it."
    return "Absolutely not."
