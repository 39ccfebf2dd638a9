"""Café drink-crafting game package.

Public API:
    from cafe import CafeSim, Customer, Order, DrinkMetrics, Transaction
"""
from cafe.entities import Customer, DrinkInProgress, DrinkMetrics, Order, Transaction
from cafe.simulation import CafeSim

__all__ = ["CafeSim", "Customer", "DrinkInProgress", "DrinkMetrics", "Order", "Transaction"]
